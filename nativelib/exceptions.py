"""Custom exceptions for nativelib."""
from typing import NamedTuple

from .config import (
    ERROR_MESSAGES,
    NATIVELIB_ERR_INTEGRITY,
    NATIVELIB_ERR_LOAD_REJECTED,
    NATIVELIB_ERR_NOT_FOUND,
    NATIVELIB_ERR_SYMBOL,
)


class Candidate(NamedTuple):
    """One location tried while resolving a library, and why it failed."""
    location: str
    reason: str

    def __str__(self):
        return f"{self.location} ({self.reason})"


class NativeLibError(Exception):
    """Base exception for nativelib errors."""

    def __init__(self, code: int, message: str = None):
        self.code = code
        if message is None:
            message = ERROR_MESSAGES.get(code, f"Unknown error code: {code}")
        super().__init__(f"nativelib error {code}: {message}")


class LibraryNotFoundError(NativeLibError):
    """No candidate location produced a loadable library.

    ``candidates`` holds every ``(location, reason)`` pair that was tried.
    """

    def __init__(self, message: str = None, candidates=None):
        self.candidates = list(candidates or [])
        super().__init__(NATIVELIB_ERR_NOT_FOUND, message)


class FileIntegrityError(NativeLibError):
    """Extracted bytes differ from the packaged resource."""

    def __init__(self, path, message: str = None):
        self.path = path
        if message is None:
            message = f"Failed to write a native library file at {path}"
        super().__init__(NATIVELIB_ERR_INTEGRITY, message)


class LoadRejectedError(NativeLibError):
    """The platform loader refused a specific file."""

    def __init__(self, path, message: str = None):
        self.path = path
        if message is None:
            message = f"Failed to load native library: {path}"
        super().__init__(NATIVELIB_ERR_LOAD_REJECTED, message)


class NativeLibSymbolError(NativeLibError):
    """Loaded library lacks symbols the bindings need."""

    def __init__(self, message: str = None):
        super().__init__(NATIVELIB_ERR_SYMBOL, message)
