from ctypes import c_int
import threading

from .exceptions import NativeLibSymbolError
from .loader import get_library

MATH_LIBRARY = "math"

REQUIRED_FUNCTIONS = ["add", "sub"]

_lib = None
_lib_lock = threading.Lock()


def _get_lib():
    """Load the math library and set up function signatures once."""
    global _lib
    with _lib_lock:
        if _lib is None:
            lib = get_library(MATH_LIBRARY)
            lib.add.argtypes = [c_int, c_int]
            lib.add.restype = c_int
            lib.sub.argtypes = [c_int, c_int]
            lib.sub.restype = c_int
            _lib = lib
        return _lib


def self_check():
    """Perform self-check of the native library."""
    lib = get_library(MATH_LIBRARY)

    missing_functions = []
    for func_name in REQUIRED_FUNCTIONS:
        if not hasattr(lib, func_name):
            missing_functions.append(func_name)

    if missing_functions:
        raise NativeLibSymbolError(
            f"Missing functions in native library: {missing_functions}"
        )


def add(a: int, b: int) -> int:
    """Add two integers in native code."""
    return _get_lib().add(a, b)


def sub(a: int, b: int) -> int:
    """Subtract ``b`` from ``a`` in native code."""
    return _get_lib().sub(a, b)
