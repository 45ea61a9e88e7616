"""Signal handling utilities for the icounter CLI.

The report is often piped into ``head`` or ``less``. The handlers installed here only
record that SIGINT or SIGPIPE arrived; output stops at the next write and the process
exits with the conventional status code for the signal. They are meant for the output
phase: the CLI installs them after the walk, so that Ctrl+C still interrupts counting.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Any, Dict, Optional

EXIT_SIGINT = 130
EXIT_SIGPIPE = 141


class SignalHandler:
    """Records SIGPIPE and SIGINT so the CLI can stop writing and exit cleanly.

    The original handlers are remembered when the handlers are installed and are put
    back as soon as the corresponding signal arrives, so a second Ctrl+C behaves as
    usual.

    Attributes:
        sigpipe_received: Event that is set when a SIGPIPE signal is received.
        sigint_received: Event that is set when a SIGINT signal is received.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self._original_handlers: Dict[int, Any] = {}

    @property
    def interrupted(self) -> bool:
        """True once either signal has been received."""
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def install(self) -> None:
        """Install the handlers, remembering the ones they replace.

        SIGPIPE only exists on Unix-like systems; elsewhere only SIGINT is handled.
        """
        self._install(signal.SIGINT, self.handle_sigint)
        sigpipe = getattr(signal, "SIGPIPE", None)
        if sigpipe is not None:
            self._install(sigpipe, self.handle_sigpipe)

    def _install(self, signum: int, handler: Any) -> None:
        self._original_handlers[signum] = signal.getsignal(signum)
        signal.signal(signum, handler)

    def _restore(self, signum: int) -> None:
        original = self._original_handlers.pop(signum, None)
        if original is not None:
            signal.signal(signum, original)

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        """Record a SIGPIPE and restore the previous handler."""
        self.sigpipe_received.set()
        self._restore(signum)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        """Record a SIGINT and restore the previous handler."""
        self.sigint_received.set()
        self._restore(signum)

    def exit_code(self) -> Optional[int]:
        """Return the exit status owed to a received signal, or None if there was none.

        SIGPIPE takes precedence, matching a shell's 128 + signal number convention.
        """
        if self.sigpipe_received.is_set():
            return EXIT_SIGPIPE
        if self.sigint_received.is_set():
            return EXIT_SIGINT
        return None


# Create a singleton instance for the application
signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Install the application's SIGPIPE and SIGINT handlers."""
    signal_handler.install()


def cleanup() -> None:
    """Cleanup function registered with atexit.

    Points stdout at the null device after an interruption so that the interpreter's
    final flush cannot fail with another broken pipe error.
    """
    if signal_handler.interrupted:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


# Register the cleanup function
atexit.register(cleanup)
