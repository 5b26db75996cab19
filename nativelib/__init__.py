#!/usr/bin/env python3
"""
nativelib - resolve, extract and load packaged native libraries through ctypes

Finds the shared library matching the running OS and architecture, copies it
out of the package into a temp directory when needed, and loads it once per
process. Ships bindings for the bundled ``math`` library.
"""

import logging
import sys

from .version import __version__, get_major_version, get_minor_version
from .config import (
    NATIVELIB_ERR_NOT_FOUND,
    NATIVELIB_ERR_INTEGRITY,
    NATIVELIB_ERR_LOAD_REJECTED,
    NATIVELIB_ERR_SYMBOL,
)
from .exceptions import (
    Candidate,
    NativeLibError,
    LibraryNotFoundError,
    FileIntegrityError,
    LoadRejectedError,
    NativeLibSymbolError,
)
from .locator import ResourceLocator, library_file_name
from .extractor import ArtifactRegistry, ExtractedArtifact
from .loader import (
    LibraryResolver,
    ResolutionState,
    get_resolver,
    initialize,
    is_native_mode,
    get_library,
)
from .bindings import add, sub, self_check
from . import osinfo

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__author__ = "romantics"
__author_email__ = "romantics@users.noreply.github.com"
__description__ = "Resolve, extract and load packaged native libraries through ctypes"
__url__ = "https://github.com/romantics/nativelib"
__license__ = "Apache-2.0"


def get_version() -> str:
    """Get the version tag embedded in extracted library names."""
    return __version__


def get_version_info() -> dict:
    """
    Get detailed version and platform information.

    Returns:
        Dictionary with version details and the resolver's loaded libraries
    """
    resolver = get_resolver()
    return {
        "version": __version__,
        "description": __description__,
        "url": __url__,
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "platform": sys.platform,
        "native_folder": osinfo.get_native_lib_folder(),
        "resource_path": resolver.locator.resource_path(),
        "extracted": [str(a.path) for a in resolver.registry.artifacts],
    }


def check_installation(base_name: str = "math") -> bool:
    """
    Check if the native library for ``base_name`` can be loaded.

    Returns:
        True if the library loads (and, for ``math``, exports its functions)
    """
    try:
        initialize(base_name)
        if base_name == "math":
            self_check()
        return True
    except NativeLibError as e:
        logging.getLogger(__name__).error("Error testing installation: %s", e)
        return False


# Export public API
__all__ = [
    # Package metadata
    '__version__',
    '__author__',
    '__author_email__',
    '__description__',
    '__url__',
    '__license__',

    # Error handling
    'NATIVELIB_ERR_NOT_FOUND',
    'NATIVELIB_ERR_INTEGRITY',
    'NATIVELIB_ERR_LOAD_REJECTED',
    'NATIVELIB_ERR_SYMBOL',
    'Candidate',
    'NativeLibError',
    'LibraryNotFoundError',
    'FileIntegrityError',
    'LoadRejectedError',
    'NativeLibSymbolError',

    # Resolution
    'LibraryResolver',
    'ResolutionState',
    'ResourceLocator',
    'ArtifactRegistry',
    'ExtractedArtifact',
    'library_file_name',
    'get_resolver',
    'initialize',
    'is_native_mode',
    'get_library',

    # Math bindings
    'add',
    'sub',
    'self_check',

    # Utility functions
    'get_version',
    'get_major_version',
    'get_minor_version',
    'get_version_info',
    'check_installation',
]
