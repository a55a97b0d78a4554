"""
Safe file operations for Ultra Debugger.

Provides timeout-protected and size-limited reads, parent-creating writes, and
the FileSystemIO collaborator the controller reads sources through.
"""

import signal
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from .exceptions import FileAccessError

PathLike = Union[str, Path]


class TimeoutError(Exception):
    """Raised when an operation times out."""

    pass


def _timeout_handler(signum, frame):
    """Signal handler for timeout."""
    raise TimeoutError("Operation timed out")


@contextmanager
def timeout(seconds: int) -> Generator[None, None, None]:
    """
    Context manager for timeout protection.

    Uses SIGALRM, so it only arms on platforms that have it and only on the
    main thread. Elsewhere the block runs unguarded.

    Args:
        seconds: Timeout in seconds

    Raises:
        TimeoutError: If operation exceeds timeout
    """
    if not hasattr(signal, "SIGALRM") or threading.current_thread() is not threading.main_thread():
        yield
        return

    old_handler = signal.signal(signal.SIGALRM, _timeout_handler)
    signal.alarm(seconds)

    try:
        yield
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, old_handler)


def check_file_size(filepath: Path, max_bytes: int) -> None:
    """
    Raise FileAccessError if ``filepath`` is missing or larger than ``max_bytes``.
    """
    try:
        size = filepath.stat().st_size
    except FileNotFoundError:
        raise FileAccessError(filepath, "File does not exist")
    except OSError as e:
        raise FileAccessError(filepath, f"Cannot stat file: {e}")

    if size > max_bytes:
        raise FileAccessError(
            filepath, f"File size ({size} bytes) exceeds limit ({max_bytes} bytes)"
        )


def safe_read_file(
    filepath: Path,
    max_bytes: Optional[int] = None,
    timeout_seconds: int = 10,
    encoding: str = "utf-8",
    errors: str = "replace",
) -> str:
    """
    Safely read a file with a size check and timeout protection.

    Args:
        filepath: File to read
        max_bytes: Largest accepted size (if None, skips size check)
        timeout_seconds: Timeout in seconds
        encoding: Text encoding
        errors: How to handle encoding errors

    Returns:
        File contents as string

    Raises:
        FileAccessError: If file cannot be read
    """
    if max_bytes is not None:
        check_file_size(filepath, max_bytes)

    try:
        with timeout(timeout_seconds):
            with open(filepath, encoding=encoding, errors=errors) as f:
                return f.read()
    except TimeoutError:
        raise FileAccessError(filepath, f"Read operation timed out after {timeout_seconds}s")
    except UnicodeDecodeError as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
    except FileNotFoundError:
        raise FileAccessError(filepath, "File does not exist")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")


def safe_write_file(filepath: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write ``content`` to ``filepath``, creating parent directories.

    Raises:
        FileAccessError: If file cannot be written
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding=encoding) as f:
            f.write(content)
    except OSError as e:
        raise FileAccessError(filepath, f"Write failed: {e}")


class FileSystemIO:
    """Reads sources and writes outputs for the controller.

    Args:
        max_bytes: Largest source file accepted
        timeout_seconds: Read timeout
    """

    def __init__(self, max_bytes: Optional[int] = None, timeout_seconds: int = 10):
        self.max_bytes = max_bytes
        self.timeout_seconds = timeout_seconds

    def read_text(self, path: PathLike) -> str:
        return safe_read_file(
            Path(path), max_bytes=self.max_bytes, timeout_seconds=self.timeout_seconds
        )

    def write_text(self, path: PathLike, text: str) -> None:
        safe_write_file(Path(path), text)
