"""
Resolve an argument vector against a validated command tree.

resolve() walks the tree iteratively, consuming one token per level, until it
reaches a leaf. It is the only place allowed to talk to the user on failure:
an unknown token gets a "did you mean" notice on the output console before
the fault is raised.

States: descending (cursor on some level) → resolved (leaf found, returned)
or failed (fault raised, notice already printed).
"""
import os.path
import sys

from loguru import logger
from rich.text import Text

from .fuzzy import suggest
from .faults import (
    MissingArgumentsError,
    MissingSubcommandError,
    UnknownCommandError,
    UnknownSubcommandError,
)
from .utils import *


def _notify(console, name, selected, route, suggestion):
    if route:
        line = "%r unknown subcommand of %r" % (selected, " ".join(route))
    else:
        line = "%r unknown command" % selected
    if suggestion is not None:
        line += ", did you mean %r?" % suggestion
    console.print(Text(line))
    console.print(Text("Run %r for usage." % ("%s help" % name)))
    console.print()


def resolve(commands, args, /, *, console=Unset, name=Unset):
    """
    Find the leaf addressed by args.

    Parameters
    - commands: Sequence[Command]
      Top-level commands of a validated tree.
    - args: Sequence[str]
      Tokens after the program path, e.g. ["test", "foo", "for", "--x"].
    - console: rich.console.Console | Unset
      Where the "unknown command" notice is printed; Unset keeps quiet.
    - name: str | Unset
      Program name used in the notice (defaults to basename of sys.argv[0]).

    Algorithm
    - cursor (children, args) starts at (commands, args).
    - the first token is matched literally against each child's name or alias
      (linear scan, first match wins; names are unique after validation).
    - a leaf ends the walk: (leaf, remaining tokens) is returned.
    - a group with tokens left moves the cursor one level down; a group with
      no tokens left raises MissingSubcommandError.
    - a miss suggests among the current level only (never the whole tree),
      prints the notice and raises UnknownCommandError (top level) or
      UnknownSubcommandError (nested).

    Returns
    - tuple[Command, list[str]]: the leaf and its residual arguments.
    """
    children, args = list(commands), list(args)
    route = []

    while True:
        if not args:
            raise MissingArgumentsError(
                "no arguments for command" if not route else "no arguments for command %r" % " ".join(route),
                route=tuple(route),
            )
        selected, rest = args[0], args[1:]

        for child in children:
            if child.matches(selected):
                found = child
                break
        else:
            suggestion = suggest(selected, (child.name for child in children))
            logger.debug("no command {!r} under {!r} (suggestion: {!r})", selected, route, suggestion)
            if console is not Unset:
                _notify(console, coalesce(name, os.path.basename(sys.argv[0])), selected, route, suggestion)
            exception = UnknownSubcommandError if route else UnknownCommandError
            raise exception(
                "no such command %r" % selected,
                input=selected,
                route=tuple(route),
                suggestion=suggestion,
            )

        route.append(found.name)

        if found.leaf:
            logger.debug("resolved {!r} with {} residual arguments", " ".join(route), len(rest))
            return found, rest

        if not rest:
            raise MissingSubcommandError(
                "no arguments for subcommand %r" % " ".join(route),
                command=found,
                route=tuple(route),
            )
        children, args = found.children, rest


__all__ = (
    "resolve",
)
