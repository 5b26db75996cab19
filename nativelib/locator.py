"""Where packaged native binaries live inside the distribution."""
import sys
from importlib import resources

from . import osinfo
from .config import (
    DEFAULT_LIBRARY_NAME_FORMAT,
    LIBRARY_NAME_FORMATS,
    NAMESPACE_ROOT,
    NATIVE_SEGMENT,
    platform_key,
)


def library_file_name(base_name: str, platform: str = None) -> str:
    """Map a logical name onto the platform's shared library file name."""
    plat = platform_key(sys.platform if platform is None else platform)
    fmt = LIBRARY_NAME_FORMATS.get(plat, DEFAULT_LIBRARY_NAME_FORMAT)
    return fmt.format(name=base_name)


class ResourceLocator:
    """Resolves ``<package>/native/<OS>/<Arch>/<file>`` resources.

    ``root`` replaces the package's own resource tree; anything satisfying
    ``importlib.resources.abc.Traversable`` works, ``pathlib.Path`` included.
    """

    def __init__(self, package: str = NAMESPACE_ROOT, root=None, platform: str = None):
        self.package = package
        self._root = root
        self._platform = platform

    def native_folder(self) -> str:
        return osinfo.get_native_lib_folder()

    def resource_path(self) -> str:
        """Return the logical resource directory, e.g. ``nativelib/native/Linux/x86_64``."""
        return f"{self.package}/{NATIVE_SEGMENT}/{self.native_folder()}"

    def file_name(self, base_name: str) -> str:
        return library_file_name(base_name, self._platform)

    def root(self):
        if self._root is not None:
            return self._root
        return resources.files(self.package)

    def find_resource(self, base_name: str):
        """Return the packaged binary for ``base_name`` or ``None`` when absent."""
        node = self.root().joinpath(NATIVE_SEGMENT)
        for part in self.native_folder().split("/"):
            node = node.joinpath(part)
        node = node.joinpath(self.file_name(base_name))
        if node.is_file():
            return node
        return None
