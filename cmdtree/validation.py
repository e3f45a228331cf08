"""
Structural validation of a command tree.

validate() walks the tree once, depth first, and raises the first violation it
meets. It runs when a Runner is built, before any handler can run: every
fault raised here is a programmer mistake, never a runtime condition.
"""
import re

from loguru import logger

from .commands import Command
from .faults import (
    InvalidNameError,
    InvalidAliasError,
    ReservedNameError,
    DuplicateCommandError,
    HandlerConflictError,
    MissingHandlerError,
)

PATTERN = re.compile(r"[A-Za-z0-9_:.-]+")

RESERVED = ("help", "version")


def _check(command, reserved):
    name, alias = command.name, command.alias

    if not PATTERN.fullmatch(name):
        raise InvalidNameError(
            "command %r must contain only letters, digits, '_', ':', '.' and '-'" % name,
            command=command,
            input=name,
        )
    if alias is not None and not PATTERN.fullmatch(alias):
        raise InvalidAliasError(
            "command alias %r must contain only letters, digits, '_', ':', '.' and '-'" % alias,
            command=command,
            input=alias,
        )
    if name in reserved:
        raise ReservedNameError("command %r is reserved" % name, command=command, input=name)
    if alias in reserved:
        raise ReservedNameError("command alias %r is reserved" % alias, command=command, input=alias)

    match command.leaf, bool(command.children):
        case True, True:
            raise HandlerConflictError(
                "command %r cannot have both a handler and subcommands" % name,
                command=command,
            )
        case False, False:
            raise MissingHandlerError(
                "command %r must have exactly one of a handler or subcommands" % name,
                command=command,
            )


def _walk(children, parent, reserved):
    children.sort(key=lambda command: command.name)

    # One growing set: a name colliding with a sibling's alias is a duplicate too.
    seen = set()
    count = 0
    for child in children:
        for kind, token in zip(("command", "command alias"), child.tokens):
            if token in seen:
                raise DuplicateCommandError(
                    "duplicate %s %r" % (kind, token),
                    command=child,
                    parent=parent,
                    input=token,
                )
            seen.add(token)

        _check(child, reserved)
        count += 1
        if child.children:
            count += _walk(child._children, child, reserved)  # NOQA: sorted in place
    return count


def validate(commands, /, *, reserved=RESERVED):
    """
    Check a command tree and sort every level by name.

    Parameters
    - commands: list[Command]
      The top-level commands. The list itself plays the root: it gets the
      sibling checks but no name checks.
    - reserved: Iterable[str]
      Names and aliases nobody may use (defaults to the builtin "help" and
      "version"). The Runner passes () when re-checking the tree that already
      includes its builtins.

    Each level is sorted by name and visited in order. Per command:
    1. name/alias not already used by a sibling       → DuplicateCommandError
    2. name matches [A-Za-z0-9_:.-]+                  → InvalidNameError
    3. alias (when set) matches the same pattern      → InvalidAliasError
    4. neither name nor alias is reserved             → ReservedNameError
    5. exactly one of handler or children             → HandlerConflictError / MissingHandlerError
    then its children are visited the same way.

    Fail fast: the first violation is raised, nothing is aggregated. The top
    level list and every children list are sorted in place by name; order
    does not affect detection, only later display.
    """
    if not isinstance(commands, list) or not all(isinstance(command, Command) for command in commands):
        raise TypeError("validate() argument must be a list of commands")
    count = _walk(commands, None, frozenset(reserved))
    logger.debug("validated {} commands", count)


__all__ = (
    "PATTERN",
    "RESERVED",
    "validate",
)
