"""
Default usage rendering for the builtin "help" command.

render(config, commands) is the default Config.usage callback. Any callable
with the same signature can replace it; it receives the resolved Config and
the sorted top-level commands, builtins included.

Layout
    <descr>

    Usage:

        <name> <command> [arguments...]

    The commands are:

        boom                <no description>
        help                shows help message
        time curr           curr time subcommand
        version             shows version of the application

    <epilog>

    Version: <version>
"""
from rich.cells import cell_len
from rich.text import Text

HELP_FLAGS = frozenset({"-h", "-help", "--help"})

# Spaces between the longest command route and the descriptions.
GUTTER = 11


def has_help_flag(args, /):
    """
    True when any of -h, -help or --help appears in args.

    Handlers doing their own flag parsing can use it to print their usage.
    """
    return any(arg in HELP_FLAGS for arg in args)


def rows(commands, /, route=()):
    """
    Yield (route, command) for every visible leaf, depth first.

    Groups are flattened into their leaves ("time curr"); hidden commands are
    skipped together with everything below them.
    """
    for command in commands:
        if command.hidden:
            continue
        path = (*route, command.name)
        if command.leaf:
            yield " ".join(path), command
        else:
            yield from rows(command.children, path)


def render(config, commands, /):
    console = config.console

    if config.descr:
        console.print(Text(config.descr))
        console.print()

    console.print(Text("Usage:"))
    console.print()
    console.print(Text("    %s <command> [arguments...]" % config.name))
    console.print()
    console.print(Text("The commands are:"))
    console.print()

    # Aligned by hand: the soft-wrapping console never wraps, crops or pads a
    # Text, whatever the terminal width.
    listing = list(rows(commands))
    width = max((cell_len(route) for route, _ in listing), default=0) + GUTTER
    for route, command in listing:
        console.print(Text.assemble(
            "    ",
            route,
            " " * (width - cell_len(route)),
            command.descr or "<no description>",
        ))
    console.print()

    if config.epilog:
        console.print(Text(config.epilog))
        console.print()

    if config.version:
        console.print(Text("Version: %s" % config.version))
        console.print()


__all__ = (
    "HELP_FLAGS",
    "has_help_flag",
    "rows",
    "render",
)
