"""
cmdtree faults (errors raised while building, resolving and running commands).

Scope
- FaultCode: canonical, stable numeric identifiers for every fault, grouped by
  domain so logs and searches stay predictable.
- CommandException: base type carrying a lowercase message, its fault code and
  an immutable options mapping (input token, offending command, suggestion...).
- Structural faults (ConfigurationError family) are programmer mistakes found
  once, when a Runner is built; resolution faults (ResolutionError family) are
  per-invocation and recoverable by the caller.
- ExitCode: the exit-status carrier understood by Runner.exit().

Propagation
- validate() and distance helpers raise plain faults with no side effects.
- resolve() is the only layer that writes user-facing text (the "did you mean"
  notice) before raising.
- Runner.run() wraps init and resolution faults (InitError, RunError, always
  chained) and lets handler exceptions through untouched.
"""
from enum import IntEnum
from types import MappingProxyType

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (111xx)
      • UNKNOWN_COMMAND, UNKNOWN_SUBCOMMAND, MISSING_SUBCOMMAND, MISSING_ARGUMENTS
    - structure (131xx)
      • INVALID_NAME, INVALID_ALIAS, RESERVED_NAME, DUPLICATE_COMMAND,
        HANDLER_CONFLICT, MISSING_HANDLER
    - runtime (141xx)
      • INIT_FAILED, RUN_FAILED, EXIT_CODE, CONTEXT_CANCELLED
    - completion (142xx)
      • UNKNOWN_SHELL

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- routing errors (111xx) ---
    UNKNOWN_COMMAND     = 11101
    UNKNOWN_SUBCOMMAND  = 11102
    MISSING_SUBCOMMAND  = 11103
    MISSING_ARGUMENTS   = 11104

    # --- structural errors (131xx) ---
    INVALID_NAME        = 13101
    INVALID_ALIAS       = 13102
    RESERVED_NAME       = 13103
    DUPLICATE_COMMAND   = 13104
    HANDLER_CONFLICT    = 13105
    MISSING_HANDLER     = 13106

    # --- runtime errors (141xx) ---
    INIT_FAILED         = 14101
    RUN_FAILED          = 14102
    EXIT_CODE           = 14103
    CONTEXT_CANCELLED   = 14104

    # --- completion errors (142xx) ---
    UNKNOWN_SHELL       = 14201


class CommandException(Exception):
    """
    base fault: message + fault code + read-only options.

    options are free-form keyword context attached where the fault is raised
    (e.g. input="fooo", suggestion="foo"); they are exposed as a mapping proxy.
    """
    fault = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""


class ConfigurationError(CommandException): ...
class ResolutionError(CommandException): ...


class InvalidNameError(ConfigurationError):
    fault = FaultCode.INVALID_NAME

class InvalidAliasError(ConfigurationError):
    fault = FaultCode.INVALID_ALIAS

class ReservedNameError(ConfigurationError):
    fault = FaultCode.RESERVED_NAME

class DuplicateCommandError(ConfigurationError):
    fault = FaultCode.DUPLICATE_COMMAND

class HandlerConflictError(ConfigurationError):
    fault = FaultCode.HANDLER_CONFLICT

class MissingHandlerError(ConfigurationError):
    fault = FaultCode.MISSING_HANDLER

class MissingArgumentsError(ConfigurationError):
    fault = FaultCode.MISSING_ARGUMENTS


class UnknownCommandError(ResolutionError):
    fault = FaultCode.UNKNOWN_COMMAND

class UnknownSubcommandError(UnknownCommandError):
    fault = FaultCode.UNKNOWN_SUBCOMMAND

class MissingSubcommandError(ResolutionError):
    fault = FaultCode.MISSING_SUBCOMMAND


class InitError(CommandException):
    fault = FaultCode.INIT_FAILED

class RunError(CommandException):
    fault = FaultCode.RUN_FAILED


class ContextCancelledError(CommandException):
    fault = FaultCode.CONTEXT_CANCELLED


class CompletionError(CommandException): ...

class UnknownShellError(CompletionError):
    fault = FaultCode.UNKNOWN_SHELL


class ExitCode(CommandException):
    """
    exit-status carrier.

    raise ExitCode(n) from a handler to make Runner.exit() terminate the
    process with status n (after printing "<name>: code <n>").
    """
    fault = FaultCode.EXIT_CODE

    def __init__(self, code, /, **options):
        if not isinstance(code, int) or isinstance(code, bool):
            raise TypeError("exit-code must be an integer")
        super().__init__("code %d" % code, **options)
        self.code = code


def exitcode(error, /):
    """
    return the exit status an error maps to.

    walks the error and its __cause__ chain looking for an ExitCode; None maps
    to 0, any other error maps to 1.
    """
    if error is None:
        return 0
    seen = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, ExitCode):
            return error.code
        seen.add(id(error))
        error = error.__cause__
    return 1


__all__ = (
    "FaultCode",
    "CommandException",
    "ConfigurationError",
    "ResolutionError",
    "InvalidNameError",
    "InvalidAliasError",
    "ReservedNameError",
    "DuplicateCommandError",
    "HandlerConflictError",
    "MissingHandlerError",
    "MissingArgumentsError",
    "UnknownCommandError",
    "UnknownSubcommandError",
    "MissingSubcommandError",
    "InitError",
    "RunError",
    "ContextCancelledError",
    "CompletionError",
    "UnknownShellError",
    "ExitCode",
    "exitcode",
)
