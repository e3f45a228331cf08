"""
cmdtree runner: the entry point of an application.

    from cmdtree import Config, Runner, command

    @command
    def now(context, args):
        \"\"\"prints current time\"\"\"
        ...

    if __name__ == "__main__":
        Runner([now], Config(version="1.2.0")).main()

Lifecycle
- construction: resolve the Config defaults, validate the user tree, add the
  builtins ("help", "version", and "__complete" when Config.completion is
  set), sort and validate the combined tree. Faults are kept, not raised: they
  surface on the first run() as InitError. Only an empty command list raises
  right away (ValueError), being plain API misuse.
- run(): resolve the arguments to one leaf and execute it with the context.
- exit(error): map an outcome to a process exit status.
- main(): run() then exit(); puts back the signal handlers of a context it
  built itself.

Concurrency
- the tree is read-only after construction and resolution is stateless, so
  repeated run() calls are safe; the builtin handlers write to the shared
  output without locking, so concurrent run() calls from several threads on
  one Runner are not supported.
"""
import argparse
import sys
from collections.abc import Iterable

from loguru import logger
from rich.text import Text

from . import completion
from .commands import Command
from .config import Config
from .dispatch import resolve
from .faults import *
from .utils import *
from .validation import validate


class Runner:
    """
    Validate a command tree once and dispatch argument vectors to it.

    Parameters
    - commands: Iterable[Command]
      Top-level commands (at least one).
    - config: Config | Unset
      Configuration; Unset means Config() with all defaults.
    - terminate: Callable[[int], Any]
      Called by exit() with the status code (sys.exit unless replaced, e.g.
      in tests).
    """

    config = mirror("config")
    commands = mirror("commands")
    args = mirror("args")

    def __init__(self, commands, config=Unset, /, *, terminate=sys.exit):
        if not isinstance(commands, Iterable):
            raise TypeError("runner 'commands' must be an iterable of commands")
        commands = list(commands)
        if not commands:
            raise ValueError("runner requires at least one command")
        if not all(isinstance(command, Command) for command in commands):
            raise TypeError("runner 'commands' must be an iterable of commands")
        if not isinstance(config, Config | Unset):
            raise TypeError("runner 'config' must be a config")
        if not callable(terminate):
            raise TypeError("runner 'terminate' must be callable")

        config = coalesce(config, Config())
        # An unset context is built (and its signal handlers armed) here.
        self._owned = config.context is Unset
        self._config = config.resolve()
        self._commands = commands
        self._args = self._config.args[1:]
        self._terminate = terminate
        self._error = None

        try:
            self._initialize()
        except ConfigurationError as error:
            logger.debug("runner initialization failed: {}", error)
            self._error = error

    @property
    def context(self):
        return self._config.context

    def _initialize(self):
        if not self._args:
            raise MissingArgumentsError("no args provided")

        validate(self._commands)

        commands = self._commands + self._builtins()
        commands.sort(key=lambda command: command.name)
        # Builtins may not collide with user commands either.
        validate(commands, reserved=())
        self._commands = commands
        logger.debug("runner {!r} ready with {} top-level commands", self._config.name, len(commands))

    def _builtins(self):
        config = self._config

        @rename("help")
        def help(context, args):
            config.usage(config, self.commands)

        @rename("version")
        def version(context, args):
            config.console.print(Text("%s version: %s" % (config.name, config.version)))
            config.console.print()

        builtins = [
            Command("help", help, descr="shows help message"),
            Command("version", version, descr="shows version of the application"),
        ]
        if config.completion:
            builtins.append(self._completion())
        return builtins

    def _completion(self):
        config = self._config

        @rename("script")
        def script(context, args):
            config.output.write(completion.script(args[0] if args else completion.detect(), config.name))

        @rename("install")
        def install(context, args):
            parser = argparse.ArgumentParser(prog="%s __complete install" % config.name)
            parser.add_argument("--shell", default=completion.detect(), help="shell type")
            parser.add_argument("--dir", dest="directory", default=Unset, help="directory to install into")
            parser.add_argument("--file", dest="filename", default=Unset, help="file name to install as")
            options = parser.parse_args(args)
            path = completion.install(
                options.shell,
                config.name,
                directory=options.directory,
                filename=options.filename,
            )
            config.console.print(Text("%s completion installed to %s" % (options.shell, path)))

        @rename("query")
        def query(context, args):
            entries = completion.query(self.commands, args)
            # Written raw: rich would expand the tabs fish splits on.
            config.output.write(completion.format(completion.detect(), entries))

        return Command("__complete", hidden=True, descr="shell completion", children=[
            Command("install", install, descr="installs the completion script"),
            Command("query", query, descr="lists completion candidates"),
            Command("script", script, descr="prints the completion script"),
        ])

    def run(self):
        """
        Resolve the configured arguments and execute the selected leaf.

        Raises
        - InitError: construction found a configuration fault (chained).
        - RunError: the arguments did not resolve to a leaf (chained); the
          "did you mean" notice was already printed.
        - whatever the handler raised, unchanged (ExitCode included).
        """
        if self._error is not None:
            raise InitError("cannot init runner: %s" % self._error) from self._error

        try:
            command, args = resolve(self._commands, self._args, console=self._config.console, name=self._config.name)
        except (ResolutionError, MissingArgumentsError) as error:
            raise RunError("cannot run command: %s" % error) from error

        command.execute(self._config.context, args)

    def exit(self, error=None, /):
        """
        Terminate the process according to an outcome.

        - None: terminate(0), nothing printed.
        - an error carrying ExitCode (itself or along its __cause__ chain):
          print "<name>: <error>" and terminate with that code.
        - any other error: print "<name>: <error>" and terminate(1).
        """
        if error is not None:
            self._config.console.print(Text("%s: %s" % (self._config.name, error)))
        return self._terminate(exitcode(error))

    def main(self):
        """
        run() then exit() with its outcome; the usual last line of a script.

        When the context is the default one, the SIGINT/SIGTERM handlers it
        replaced are put back on the way out, even when terminate raises.
        """
        try:
            self.run()
        except Exception as error:
            return self.exit(error)
        else:
            return self.exit()
        finally:
            if self._owned:
                self.context.restore()

    def __repr__(self):
        return "runner(name=%r, commands=%r)" % (self._config.name, [command.name for command in self._commands])


__all__ = (
    "Runner",
)
