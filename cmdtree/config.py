"""
Runner configuration.

Config collects the process-wide knobs of a Runner. Every field is optional;
Config.resolve() returns a copy with the defaults filled in, which is what
handlers and usage renderers receive.

Defaults
- name: basename of args[0] (the program path).
- descr / epilog / version: "" (epilog is printed after the command table).
- output: sys.stdout, wrapped by Config.console (a rich Console).
- context: Context.signalled(), cancelled on SIGINT/SIGTERM.
- args: sys.argv, program path included; the Runner strips args[0].
- usage: cmdtree.usage.render.
- completion: False; True adds the hidden "__complete" command group.
"""
import functools
import os.path
import sys
from collections.abc import Iterable

from rich.console import Console

from .context import Context
from .usage import render
from .utils import *


class Config:
    __introspectable__ = (
        "name",
        "descr",
        "epilog",
        "version",
        "output",
        "context",
        "args",
        "usage",
        "completion",
    )

    name = mirror("name")
    descr = mirror("descr")
    epilog = mirror("epilog")
    version = mirror("version")
    output = mirror("output")
    context = mirror("context")
    args = mirror("args")
    usage = mirror("usage")
    completion = mirror("completion")

    def __init__(
            self,
            *,
            name=Unset,
            descr=Unset,
            epilog=Unset,
            version=Unset,
            output=Unset,
            context=Unset,
            args=Unset,
            usage=Unset,
            completion=False,
    ):
        for field, value in (("name", name), ("descr", descr), ("epilog", epilog), ("version", version)):
            if not isinstance(value, str | Unset):
                raise TypeError(f"config {field!r} must be a string")
        if output is not Unset and not callable(getattr(output, "write", None)):
            raise TypeError("config 'output' must be a writable stream")
        if not isinstance(context, Context | Unset):
            raise TypeError("config 'context' must be a context")
        if args is not Unset:
            if not isinstance(args, Iterable) or isinstance(args, str):
                raise TypeError("config 'args' must be an iterable of strings")
            args = list(args)
            if not all(isinstance(arg, str) for arg in args):
                raise TypeError("config 'args' must be an iterable of strings")
        if usage is not Unset and not callable(usage):
            raise TypeError("config 'usage' must be callable")
        if not isinstance(completion, bool):
            raise TypeError("config 'completion' must be a boolean")

        self._name = name
        self._descr = descr
        self._epilog = epilog
        self._version = version
        self._output = output
        self._context = context
        self._args = args
        self._usage = usage
        self._completion = completion

    def resolve(self):
        """
        Return a new Config with every Unset field replaced by its default.

        Building the default context installs the SIGINT/SIGTERM handlers, so
        this is meant to run once, when the Runner is built.
        """
        args = coalesce(self._args, sys.argv)
        return type(self)(
            name=coalesce(self._name, os.path.basename(args[0] if args else sys.argv[0])),
            descr=coalesce(self._descr, ""),
            epilog=coalesce(self._epilog, ""),
            version=coalesce(self._version, ""),
            output=coalesce(self._output, sys.stdout),
            context=coalesce(self._context) or Context.signalled(),
            args=args,
            usage=coalesce(self._usage, render),
            completion=self._completion,
        )

    @functools.cached_property
    def console(self):
        """
        Rich console writing plain text to the output stream.
        """
        return Console(
            file=coalesce(self._output, sys.stdout),
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "config(%s)" % ", ".join("%s=%r" % field for field in self.__rich_repr__())


__all__ = (
    "Config",
)
