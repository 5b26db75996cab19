"""Configuration constants for nativelib."""
from typing import Mapping, Optional

# Error codes
NATIVELIB_ERR_NOT_FOUND = -1
NATIVELIB_ERR_INTEGRITY = -2
NATIVELIB_ERR_LOAD_REJECTED = -3
NATIVELIB_ERR_SYMBOL = -4

# Error messages
ERROR_MESSAGES = {
    NATIVELIB_ERR_NOT_FOUND: "No native library found",
    NATIVELIB_ERR_INTEGRITY: "Extracted native library does not match its packaged resource",
    NATIVELIB_ERR_LOAD_REJECTED: "Platform loader rejected the native library",
    NATIVELIB_ERR_SYMBOL: "Required symbol missing from native library",
}

# Extracted artifact naming: library-{version}-{uuid}-{file name} plus a lock marker
ARTIFACT_PREFIX = "library-"
LOCK_EXT = ".lck"
UNKNOWN_VERSION = "unknown"

# Packaged resource layout: <package>/native/<OS>/<Arch>/<file name>
NAMESPACE_ROOT = "nativelib"
NATIVE_SEGMENT = "native"
VERSION_RESOURCE = "VERSION"

# Configuration key suffixes, read as "{base}.lib.path" / "{base}.lib.tmpdir"
LIB_PATH_KEY = "lib.path"
LIB_TMPDIR_KEY = "lib.tmpdir"

# Platform-specific shared library file names
LIBRARY_NAME_FORMATS = {
    "linux": "lib{name}.so",
    "darwin": "lib{name}.dylib",
    "win32": "{name}.dll",
}
DEFAULT_LIBRARY_NAME_FORMAT = "lib{name}.so"

# Dynamic-library search path variable per platform
SEARCH_PATH_VARS = {
    "linux": "LD_LIBRARY_PATH",
    "darwin": "DYLD_LIBRARY_PATH",
    "win32": "PATH",
}
DEFAULT_SEARCH_PATH_VAR = "LD_LIBRARY_PATH"

COPY_CHUNK_SIZE = 64 * 1024


def platform_key(platform: str) -> str:
    """Collapse a ``sys.platform`` value onto a key of the tables above."""
    if platform.startswith("linux"):
        return "linux"
    if platform == "darwin":
        return "darwin"
    if platform in ("win32", "cygwin"):
        return "win32"
    return platform


def property_names(base_name: str, suffix: str):
    """Return the dotted key and its environment-variable spelling.

    ``property_names("math", "lib.path")`` gives
    ``("math.lib.path", "MATH_LIB_PATH")``.
    """
    dotted = f"{base_name}.{suffix}"
    env = dotted.upper().replace(".", "_").replace("-", "_")
    return dotted, env


def get_property(properties: Mapping[str, str], base_name: str, suffix: str) -> Optional[str]:
    """Look up ``{base_name}.{suffix}``; the dotted spelling wins over the env one."""
    for key in property_names(base_name, suffix):
        value = properties.get(key)
        if value:
            return value
    return None
