"""Unit tests for the SafeWriter class in the icounter CLI."""

import errno
import os
from unittest.mock import MagicMock, patch

import pytest

from icounter.cli.safe_writer import SafeWriter


@pytest.fixture
def mock_signals():
    """Create a mock for signal handler checks."""
    with patch("icounter.cli.safe_writer.signal_handler") as mock:
        mock.interrupted = False
        yield mock


@pytest.fixture
def pipe():
    """Create a pipe and close both ends afterwards."""
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def read_all(read_fd, write_fd):
    os.close(write_fd)
    chunks = []
    while True:
        chunk = os.read(read_fd, 65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks).decode("utf-8")


def test_safe_writer_init():
    writer = SafeWriter(3)
    assert writer.fd == 3
    assert writer.buffer_size > 0
    assert not writer._closed


def test_safe_writer_rejects_non_descriptor():
    with pytest.raises(TypeError):
        SafeWriter("/path/to/file.txt")


def test_write_lines_appends_newlines(mock_signals, pipe):
    read_fd, write_fd = pipe
    with SafeWriter(write_fd) as writer:
        writer.write_lines(["root 14", "├── a 7", "└── f 2"])
    assert read_all(read_fd, write_fd) == "root 14\n├── a 7\n└── f 2\n"


def test_output_is_buffered_until_flush(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=lambda fd, data: len(data)) as mock_write:
        writer = SafeWriter(1, buffer_size=1024)
        writer.write_line("short")
        mock_write.assert_not_called()
        writer.close()
        mock_write.assert_called_once()
        assert bytes(mock_write.call_args[0][1]) == b"short\n"


def test_full_buffer_is_written(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=lambda fd, data: len(data)) as mock_write:
        writer = SafeWriter(1, buffer_size=10)
        writer.write_line("0123456789")
        assert mock_write.call_count == 1


def test_partial_writes_are_completed(mock_signals):
    written = []

    def write_two_bytes(fd, data):
        written.append(bytes(data[:2]))
        return min(2, len(data))

    with patch("icounter.cli.safe_writer.os.write", side_effect=write_two_bytes):
        writer = SafeWriter(1)
        writer.write_line("abcde")
        writer.flush()
    assert b"".join(written) == b"abcde\n"


def test_write_after_interrupt_raises(mock_signals):
    mock_signals.interrupted = True
    with patch("icounter.cli.safe_writer.os.write") as mock_write:
        writer = SafeWriter(1)
        writer.write_line("line")
        with pytest.raises(BrokenPipeError):
            writer.flush()
        mock_write.assert_not_called()


def test_epipe_becomes_broken_pipe(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        writer = SafeWriter(1)
        writer.write_line("line")
        with pytest.raises(BrokenPipeError):
            writer.flush()


def test_other_os_errors_propagate(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=OSError(errno.EIO, "I/O error")):
        writer = SafeWriter(1)
        writer.write_line("line")
        with pytest.raises(OSError) as excinfo:
            writer.flush()
        assert excinfo.value.errno == errno.EIO


def test_close_ignores_broken_pipe(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        writer = SafeWriter(1)
        writer.write_line("line")
        writer.close()
    assert writer._closed


def test_write_after_close_raises(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=lambda fd, data: len(data)):
        writer = SafeWriter(1)
        writer.close()
        writer.close()
        with pytest.raises(ValueError):
            writer.write_line("late")


def test_exit_keeps_original_exception(mock_signals):
    with patch("icounter.cli.safe_writer.os.write", side_effect=OSError(errno.EIO, "I/O error")):
        with pytest.raises(RuntimeError):
            with SafeWriter(1) as writer:
                writer.write_line("line")
                raise RuntimeError("walk failed")


def test_exit_raises_close_errors_without_prior_exception(mock_signals):
    failing = MagicMock(side_effect=OSError(errno.EIO, "I/O error"))
    with patch("icounter.cli.safe_writer.os.write", failing):
        with pytest.raises(OSError):
            with SafeWriter(1) as writer:
                writer.write_line("line")


def test_undecodable_names_written_as_original_bytes(mock_signals, pipe):
    read_fd, write_fd = pipe
    name = os.fsdecode(b"bad\xff")
    with SafeWriter(write_fd) as writer:
        writer.write_line(f"└── {name} 1")
    os.close(write_fd)
    assert os.read(read_fd, 1024) == "└── ".encode("utf-8") + b"bad\xff 1\n"
