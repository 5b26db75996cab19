# conftest.py - pytest configuration and fixtures
import pytest
from unittest.mock import Mock, patch
from pathlib import Path
import tempfile
import shutil

from nativelib import loader, bindings, osinfo
from nativelib.extractor import ArtifactRegistry
from nativelib.exceptions import LoadRejectedError
from nativelib.locator import ResourceLocator, library_file_name

LIBRARY_BYTES = b"\x7fELF" + bytes(range(256)) * 512


class FakeLoader:
    """Stands in for ctypes.CDLL: records every path and returns a Mock handle."""

    def __init__(self, reject=(), reject_if=None):
        self.reject = set(reject)
        self.reject_if = reject_if
        self.calls = []

    def __call__(self, path):
        self.calls.append(str(path))
        rejected = str(path) in self.reject or Path(str(path)).name in self.reject
        if self.reject_if is not None and self.reject_if(Path(str(path))):
            rejected = True
        if rejected:
            raise LoadRejectedError(path, f"wrong ELF class: {path}")
        handle = Mock(name=f"CDLL({path})")
        handle.path = str(path)
        return handle


@pytest.fixture
def temp_dir():
    """Fixture providing a temporary directory."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def extract_dir(temp_dir):
    d = temp_dir / "extract"
    d.mkdir()
    return d


@pytest.fixture
def package_root(temp_dir):
    """A resource tree holding native/<OS>/<Arch>/<math library>."""
    root = temp_dir / "pkg"
    folder = root / "native" / osinfo.get_native_lib_folder()
    folder.mkdir(parents=True)
    (folder / library_file_name("math")).write_bytes(LIBRARY_BYTES)
    return root


@pytest.fixture
def empty_root(temp_dir):
    root = temp_dir / "empty"
    root.mkdir()
    return root


@pytest.fixture
def fake_loader():
    return FakeLoader()


@pytest.fixture
def registry():
    reg = ArtifactRegistry(register_atexit=False)
    yield reg
    reg.close()


@pytest.fixture
def make_resolver(package_root, extract_dir, fake_loader, registry):
    """Factory for a fresh resolver over the fake package and temp dir."""

    def _make(properties=None, root=package_root, load=fake_loader, find_library=None):
        props = {"math.lib.tmpdir": str(extract_dir)}
        props.update(properties or {})
        return loader.LibraryResolver(
            properties=props,
            locator=ResourceLocator(root=root),
            registry=registry,
            load=load,
            find_library=find_library or (lambda name: None),
            version="1.0.0",
        )

    return _make


@pytest.fixture(autouse=True)
def isolated_default_resolver():
    """Keep the process-wide resolver and math bindings from leaking between tests."""
    with patch.object(loader, "_default_resolver", None), patch.object(bindings, "_lib", None):
        yield

