"""
Cancellation context handed to every command handler.

A Context is a one-way latch: once cancelled it stays cancelled. The Runner
builds one per process with Context.signalled(), which cancels it on SIGINT or
SIGTERM. The dispatcher never looks at it; handlers observe it cooperatively:

    def serve(context, args):
        while not context.cancelled:
            work()
            context.wait(1.0)

After the first signal the previous handler of that signal is restored, so a
second Ctrl-C behaves as usual (KeyboardInterrupt) when a handler ignores
cancellation.
"""
import signal
import threading

from loguru import logger

from .faults import ContextCancelledError
from .utils import *


class Context:
    """
    Thread-safe cancellation token.

    Properties
    - cancelled: bool, True once cancel() ran.
    - reason: what cancelled it (a signal.Signals, a caller-supplied object,
      or None).
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason = None
        self._previous = {}

    @classmethod
    def signalled(cls, *signals):
        """
        Build a Context cancelled by the given signals (SIGINT and SIGTERM by
        default).

        Signal handlers can only be installed from the main thread; elsewhere
        the context is returned unarmed and can still be cancelled manually.
        """
        self = cls()
        if threading.current_thread() is not threading.main_thread():
            logger.debug("not on the main thread, signal cancellation disabled")
            return self
        for signum in signals or (signal.SIGINT, signal.SIGTERM):
            previous = signal.signal(signum, self._handler)
            # None means the previous handler was not installed from Python.
            self._previous[signum] = previous if previous is not None else signal.SIG_DFL
        return self

    def _handler(self, signum, frame):
        signum = signal.Signals(signum)
        logger.debug("received {}, cancelling context", signum.name)
        if signum in self._previous:
            signal.signal(signum, self._previous.pop(signum))
        self.cancel(signum)

    @property
    def cancelled(self):
        return self._event.is_set()

    @property
    def reason(self):
        return self._reason

    def cancel(self, reason=Unset, /):
        """
        Cancel the context; later calls keep the first reason.
        """
        if self._event.is_set():
            return
        self._reason = coalesce(reason)
        self._event.set()

    def wait(self, timeout=None, /):
        """
        Block until cancelled or timeout seconds elapsed; returns cancelled.
        """
        return self._event.wait(timeout)

    def check(self):
        """
        Raise ContextCancelledError when the context was cancelled.
        """
        if self._event.is_set():
            raise ContextCancelledError("context cancelled", reason=self._reason)

    def restore(self):
        """
        Put back every signal handler this context replaced.
        """
        while self._previous:
            signum, previous = self._previous.popitem()
            signal.signal(signum, previous)

    def __repr__(self):
        return "context(cancelled=%r, reason=%r)" % (self.cancelled, self._reason)


__all__ = (
    "Context",
)
