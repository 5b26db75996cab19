"""Native library loader for nativelib.

``LibraryResolver`` finds a library for a logical name and loads it through
ctypes, trying in order:

1. the ``{name}.lib.path`` override directory,
2. the binary packaged under ``nativelib/native/<OS>/<Arch>``, extracted to
   ``{name}.lib.tmpdir`` (default: the system temp directory),
3. each entry of the platform's library search path variable,
4. whatever ``ctypes.util.find_library`` turns up.

The outcome per name is cached; later calls do no work.
"""
import ctypes
import ctypes.util
import enum
import logging
import os
import sys
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from . import osinfo
from .cleanup import cleanup
from .config import (
    DEFAULT_SEARCH_PATH_VAR,
    LIB_PATH_KEY,
    LIB_TMPDIR_KEY,
    SEARCH_PATH_VARS,
    get_property,
    platform_key,
    property_names,
)
from .exceptions import Candidate, FileIntegrityError, LibraryNotFoundError, LoadRejectedError
from .extractor import ArtifactRegistry, extract_and_load
from .locator import ResourceLocator
from .version import __version__

logger = logging.getLogger(__name__)


class ResolutionState(enum.Enum):
    UNRESOLVED = "unresolved"
    LOADED = "loaded"
    FAILED = "failed"


def load_library_file(path) -> ctypes.CDLL:
    """Load a shared library file, raising LoadRejectedError on refusal."""
    try:
        return ctypes.CDLL(str(path))
    except OSError as e:
        raise LoadRejectedError(path, f"Failed to load native library {path}: {e}") from e


def search_path_var(platform: str = None) -> str:
    plat = platform_key(sys.platform if platform is None else platform)
    return SEARCH_PATH_VARS.get(plat, DEFAULT_SEARCH_PATH_VAR)


class LibraryResolver:
    """Resolves and loads native libraries, once per name.

    Args:
        properties: Mapping consulted for ``{name}.lib.path``,
            ``{name}.lib.tmpdir`` and the search path variable. Read at call
            time. Defaults to ``os.environ``.
        locator: Where packaged binaries are looked up.
        registry: Owner of extracted files until shutdown.
        load: Platform loader; takes a path, raises LoadRejectedError.
        find_library: Runtime library search; takes a name, returns a
            loadable name or None.
        version: Tag embedded in extracted file names.
    """

    def __init__(self, properties: Optional[Mapping[str, str]] = None,
                 locator: Optional[ResourceLocator] = None,
                 registry: Optional[ArtifactRegistry] = None,
                 load: Optional[Callable] = None,
                 find_library: Optional[Callable] = None,
                 version: Optional[str] = None):
        self.properties = os.environ if properties is None else properties
        self.locator = ResourceLocator() if locator is None else locator
        self.registry = ArtifactRegistry() if registry is None else registry
        self._load = load_library_file if load is None else load
        self._find_library = ctypes.util.find_library if find_library is None else find_library
        self.version = __version__ if version is None else version

        # One lock for every name: cleanup scans a directory shared between names
        self._lock = threading.RLock()
        self._state: Dict[str, ResolutionState] = {}
        self._handles: Dict[str, object] = {}
        self._cleaned = set()

    def temp_dir(self, base_name: str) -> Path:
        configured = get_property(self.properties, base_name, LIB_TMPDIR_KEY)
        return Path(configured or tempfile.gettempdir())

    def state(self, base_name: str) -> ResolutionState:
        with self._lock:
            return self._state.get(base_name, ResolutionState.UNRESOLVED)

    def resolve(self, base_name: str) -> bool:
        """Load ``base_name`` unless an earlier call already settled it.

        Returns True once loaded, False for a cached failure. The first
        failing call raises LibraryNotFoundError.
        """
        with self._lock:
            if base_name not in self._cleaned:
                self._cleaned.add(base_name)
                cleanup(self.temp_dir(base_name), self.version)

            state = self._state.get(base_name, ResolutionState.UNRESOLVED)
            if state is not ResolutionState.UNRESOLVED:
                return state is ResolutionState.LOADED

            try:
                handle = self._search(base_name)
            except LibraryNotFoundError:
                self._state[base_name] = ResolutionState.FAILED
                raise

            self._handles[base_name] = handle
            self._state[base_name] = ResolutionState.LOADED
            return True

    def reset(self, base_name: str):
        """Forget a cached outcome so the next ``resolve`` searches again."""
        with self._lock:
            self._state.pop(base_name, None)
            self._handles.pop(base_name, None)

    def get_library(self, base_name: str):
        """Return the loaded handle, resolving first if needed."""
        with self._lock:
            if not self.resolve(base_name):
                raise LibraryNotFoundError(
                    f"Native library {base_name!r} failed to load earlier; "
                    f"call reset() to search again"
                )
            return self._handles[base_name]

    def _load_from_dir(self, directory, file_name: str, tried: List[Candidate]):
        path = Path(directory) / file_name
        if not path.exists():
            tried.append(Candidate(str(path), "not found"))
            return None
        try:
            handle = self._load(path)
        except LoadRejectedError as e:
            logger.error(
                "Failed to load native library: %s. osinfo: %s: %s",
                path, osinfo.get_native_lib_folder(), e,
            )
            tried.append(Candidate(str(path), f"rejected by loader: {e}"))
            return None
        logger.debug("Loaded native library %s", path)
        return handle

    def _load_packaged(self, base_name: str, file_name: str, tried: List[Candidate]):
        location = f"{self.locator.resource_path()}/{file_name}"
        resource = self.locator.find_resource(base_name)
        if resource is None:
            tried.append(Candidate(location, "not packaged"))
            return None

        try:
            handle = extract_and_load(
                resource, file_name, self.temp_dir(base_name), self.version,
                self.registry, self._load, tried,
            )
        except FileIntegrityError as e:
            logger.error("Integrity check failed for %s: %s", location, e)
            tried.append(Candidate(location, f"integrity check failed: {e}"))
            return None
        return handle

    def _load_from_runtime(self, base_name: str, file_name: str, tried: List[Candidate]):
        name = self._find_library(base_name) or file_name
        try:
            return self._load(name)
        except LoadRejectedError as e:
            logger.error("Failed to load native library %s through the runtime search: %s", name, e)
            tried.append(Candidate(f"runtime search for {name}", f"rejected by loader: {e}"))
            return None

    def _search(self, base_name: str):
        file_name = self.locator.file_name(base_name)
        tried: List[Candidate] = []

        override = get_property(self.properties, base_name, LIB_PATH_KEY)
        if override:
            handle = self._load_from_dir(override, file_name, tried)
            if handle is not None:
                return handle
        else:
            logger.debug("No %s configured", " / ".join(property_names(base_name, LIB_PATH_KEY)))

        handle = self._load_packaged(base_name, file_name, tried)
        if handle is not None:
            return handle

        search_path = self.properties.get(search_path_var(), "")
        for entry in search_path.split(os.pathsep):
            if not entry:
                continue
            handle = self._load_from_dir(entry, file_name, tried)
            if handle is not None:
                return handle

        handle = self._load_from_runtime(base_name, file_name, tried)
        if handle is not None:
            return handle

        raise LibraryNotFoundError(
            "No native library found for os.name=%s, os.arch=%s, paths=[%s]" % (
                osinfo.get_os_name(),
                osinfo.get_arch_name(),
                os.pathsep.join(str(c) for c in tried),
            ),
            candidates=tried,
        )


_default_resolver: Optional[LibraryResolver] = None
_default_lock = threading.Lock()


def get_resolver() -> LibraryResolver:
    """Return the process-wide resolver, creating it on first use."""
    global _default_resolver
    with _default_lock:
        if _default_resolver is None:
            _default_resolver = LibraryResolver()
        return _default_resolver


def initialize(base_name: str) -> bool:
    """Load ``base_name`` before first use. Idempotent."""
    return get_resolver().resolve(base_name)


def is_native_mode(base_name: str) -> bool:
    """Whether ``base_name`` is loaded, trying to load it if needed."""
    try:
        return initialize(base_name)
    except LibraryNotFoundError:
        return False


def get_library(base_name: str):
    """Get the loaded native library."""
    return get_resolver().get_library(base_name)
