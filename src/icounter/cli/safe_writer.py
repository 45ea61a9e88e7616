"""Safe output writing utilities for the icounter CLI.

This module provides a line writer for the rendered report that stops as soon as an
interruption is recorded and turns a closed pipe into BrokenPipeError.
"""

import errno
import os
import types
from typing import Iterable, List, Optional, Type

from icounter.cli.signal_handler import signal_handler

DEFAULT_BUFFER_SIZE = 64 * 1024


class SafeWriter:
    """Writes report lines to a file descriptor with signal awareness.

    Lines are encoded as UTF-8, joined with newlines and written in batches of roughly
    ``buffer_size`` bytes, so that deep trees do not cost one system call per line.
    Names that are not valid UTF-8 reach the writer as surrogate escapes (see
    ``os.fsdecode``) and are written back as their original bytes.
    The descriptor is never closed by the writer; it belongs to the caller (usually it
    is stdout).

    Attributes:
        fd: The file descriptor being written to.
        buffer_size: Number of pending bytes that triggers a write.
    """

    def __init__(self, fd: int, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        """Initialize the writer.

        Args:
            fd: File descriptor to write to.
            buffer_size: Number of pending bytes that triggers a write. Defaults to 64 KiB.

        Raises:
            TypeError: If fd is not an integer.
        """
        if not isinstance(fd, int):
            raise TypeError(f"Expected a file descriptor, got {type(fd).__name__}")
        self.fd = fd
        self.buffer_size = buffer_size
        self._pending: List[bytes] = []
        self._pending_size = 0
        self._closed = False

    def write_line(self, line: str) -> None:
        """Queue one line of output, writing pending output once the buffer is full.

        Args:
            line: Text of the line, without trailing newline.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received or the pipe is broken.
            OSError: If an I/O error occurs during writing.
            ValueError: If the writer has been closed.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        data = (line + "\n").encode("utf-8", errors="surrogateescape")
        self._pending.append(data)
        self._pending_size += len(data)
        if self._pending_size >= self.buffer_size:
            self.flush()

    def write_lines(self, lines: Iterable[str]) -> None:
        """Queue every line from an iterable, see write_line."""
        for line in lines:
            self.write_line(line)

    def flush(self) -> None:
        """Write all pending output.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received or the pipe is broken.
            OSError: If an I/O error occurs during writing.
        """
        if signal_handler.interrupted:
            self._discard()
            raise BrokenPipeError()

        data = b"".join(self._pending)
        self._discard()

        view = memoryview(data)
        try:
            while view:
                written = os.write(self.fd, view)
                view = view[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError()
            raise

    def _discard(self) -> None:
        self._pending = []
        self._pending_size = 0

    def close(self) -> None:
        """Flush pending output and mark the writer as closed.

        Pending output is dropped without error when the pipe has already been closed
        by the reader. The writer counts as closed even if flushing fails.
        """
        if self._closed:
            return
        try:
            self.flush()
        except BrokenPipeError:
            pass
        finally:
            self._closed = True

    def __enter__(self) -> "SafeWriter":
        """Enter the context manager.

        Returns:
            self: The SafeWriter instance for use in the with block.
        """
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Exit the context manager, flushing what is still pending.

        If the with block already raised, a failure while flushing is dropped so that
        the original exception propagates.
        """
        try:
            self.close()
        except OSError:
            if exc_type is None:
                raise
