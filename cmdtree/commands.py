"""
cmdtree command layer: declare the command tree.

What this module provides
- Command: one node of the tree. A node is either
  • a leaf, holding a handler that runs with (context, args), or
  • an interior group, holding ordered children and no handler.
- Executable: protocol for handler objects exposing execute(context, args).
- command(...): build a leaf from a function, directly or as a decorator.
- Command.command(...): same, attaching the new leaf under an interior node.

Quick start
    from cmdtree import Command, Runner, command

    @command(alias="s")
    def status(context, args):
        \"\"\"prints status of the system\"\"\"
        print("all good")

    time = Command("time", descr="time helpers")

    @time.command
    def now(context, args):
        \"\"\"prints current time\"\"\"
        ...

    Runner([status, time]).main()

Design notes
- Construction only checks types (TypeError); naming, reserved words,
  uniqueness and the leaf/group shape are checked by cmdtree.validation when
  a Runner is built, so a whole tree can be declared before it is judged.
- Public fields are read-only properties (see utils.mirror); children are
  handed out as copies.
- Flag parsing inside a command belongs to its handler: the handler receives
  the residual arguments untouched.
"""
import functools
import inspect
import operator
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .utils import *


@runtime_checkable
class Executable(Protocol):
    """
    Handler object protocol.

    Anything exposing execute(context, args) can be used in place of a plain
    handler function. Failures are reported by raising.
    """

    def execute(self, context, args, /): ...


class Command:
    """
    A node of the command tree.

    Fields
    - name: literal token matched against the argument vector.
    - alias: optional secondary literal token (e.g. "s" for "status").
    - descr: free text shown by the usage renderer.
    - handler: callable (context, args) or Executable; None for groups.
    - children: ordered child commands; empty for leaves.
    - hidden: kept out of help listings and completion, still dispatchable.
    """

    __introspectable__ = (
        "name",
        "alias",
        "descr",
        "handler",
        "children",
        "hidden",
    )

    name = mirror("name")
    alias = mirror("alias")
    descr = mirror("descr")
    handler = mirror("handler")
    children = mirror("children")
    hidden = mirror("hidden")

    def __init__(
            self,
            name,
            /,
            handler=Unset,
            *,
            alias=Unset,
            descr=Unset,
            children=(),
            hidden=False,
    ):
        if not isinstance(name, str):
            raise TypeError("command 'name' must be a string")
        if not isinstance(alias, str | Unset | None):
            raise TypeError(f"command {name!r} 'alias' must be a string")
        if not isinstance(descr, str | Unset | None):
            raise TypeError(f"command {name!r} 'descr' must be a string")
        if handler is not Unset and handler is not None:
            if not isinstance(handler, Executable) and not callable(handler):
                raise TypeError(f"command {name!r} 'handler' must be callable or implement execute()")
        if not isinstance(children, Iterable) or isinstance(children, str):
            raise TypeError(f"command {name!r} 'children' must be an iterable of commands")
        children = list(children)
        if not all(isinstance(child, Command) for child in children):
            raise TypeError(f"command {name!r} 'children' must be an iterable of commands")
        if not isinstance(hidden, bool):
            raise TypeError(f"command {name!r} 'hidden' must be a boolean")

        self._name = name
        self._alias = coalesce(alias) or None
        self._descr = coalesce(descr) or ""
        self._handler = coalesce(handler)
        self._children = children
        self._hidden = hidden

    @property
    def leaf(self):
        """
        True for action nodes (a handler is set), False for groups.
        """
        return self._handler is not None

    @property
    def tokens(self):
        """
        Every literal this command answers to: its name, then its alias.
        """
        return (self._name,) if not self._alias else (self._name, self._alias)

    def matches(self, token, /):
        return token == self._name or (self._alias is not None and token == self._alias)

    def execute(self, context, args, /):
        """
        Run the handler with the cancellation context and residual arguments.

        Whatever the handler raises propagates unchanged.
        """
        if self._handler is None:
            raise TypeError(f"command {self._name!r} is a group and cannot be executed")
        if isinstance(self._handler, Executable):
            return self._handler.execute(context, list(args))
        return self._handler(context, list(args))

    def command(self, source=Unset, /, *args, **kwargs):
        """
        Create a leaf from a function and attach it under this command.

        Mirrors the module-level command(...) factory: usable directly
        (group.command(func)) or as a decorator (@group.command,
        @group.command(alias="x")). Returns the created Command.
        """
        if self._handler is not None:
            raise TypeError(f"command {self._name!r} has a handler and cannot have subcommands")

        @rename("command")
        def wrapper(source, /):
            child = command(source, *args, **kwargs)
            self._children.append(child)
            return child

        return wrapper(source) if source is not Unset else wrapper

    def __rich_repr__(self):
        yield "name", self._name
        yield "alias", self._alias, None
        yield "descr", self._descr, ""
        if self._handler is not None:
            yield "handler", getattr(self._handler, "__qualname__", self._handler)
        yield "children", [child.name for child in self._children], []
        yield "hidden", self._hidden, False

    def __repr__(self):
        fields = []
        for field in self.__rich_repr__():
            if len(field) == 3 and field[1] == field[2]:
                continue
            fields.append(field[:2])
        return f"command({', '.join(map(functools.partial(operator.mod, '%s=%r'), fields))})"


def command(source=Unset, /, name=Unset, *, alias=Unset, descr=Unset, hidden=False):
    """
    Create a leaf Command from a handler, or return a decorator that will.

    Invocation modes
    - Direct: cmd = command(func, "name", alias="n")
    - Decorator: @command or @command(alias="n")

    Defaults
    - name: the handler's __name__.
    - descr: first line of the handler's docstring.

    Returns
    - Command in direct mode, otherwise a decorator producing one.
    """
    @rename("command")
    def wrapper(source, /):
        if not isinstance(source, Executable) and not callable(source):
            raise TypeError("@command() must be applied to a callable or an executable")
        doc = inspect.getdoc(source)
        return Command(
            coalesce(name, getattr(source, "__name__", type(source).__name__.lower())),
            source,
            alias=alias,
            descr=coalesce(descr, doc.splitlines()[0].strip() if doc else ""),
            hidden=hidden,
        )

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Executable",
    "Command",
    "command",
)
