"""Test platform names and packaged resource lookup."""
import pytest
from unittest.mock import patch

from nativelib import osinfo
from nativelib.locator import ResourceLocator, library_file_name


class TestOSInfo:

    @pytest.mark.parametrize("plat,name", [
        ("linux", "Linux"),
        ("darwin", "Mac"),
        ("win32", "Windows"),
        ("cygwin", "Windows"),
        ("freebsd13", "FreeBSD"),
        ("aix7", "AIX"),
    ])
    def test_os_name(self, plat, name):
        assert osinfo.get_os_name(plat) == name

    def test_unknown_os_uses_platform_system(self):
        with patch("nativelib.osinfo.platform.system", return_value="sunos"):
            assert osinfo.get_os_name("sunos5") == "Sunos"

    @pytest.mark.parametrize("machine,arch", [
        ("x86_64", "x86_64"),
        ("AMD64", "x86_64"),
        ("i686", "x86"),
        ("arm64", "aarch64"),
        ("aarch64", "aarch64"),
        ("armv7l", "armv7"),
        ("ppc64le", "ppc64le"),
        ("riscv64", "riscv64"),
    ])
    def test_arch_name(self, machine, arch):
        assert osinfo.get_arch_name(machine) == arch

    def test_unknown_arch_is_normalized(self):
        assert osinfo.get_arch_name("Loong-Arch_64") == "loongarch64"

    def test_native_lib_folder(self):
        with patch.object(osinfo, "get_os_name", return_value="Linux"), \
                patch.object(osinfo, "get_arch_name", return_value="aarch64"):
            assert osinfo.get_native_lib_folder() == "Linux/aarch64"


class TestLibraryFileName:

    @pytest.mark.parametrize("plat,expected", [
        ("linux", "libmath.so"),
        ("darwin", "libmath.dylib"),
        ("win32", "math.dll"),
        ("freebsd13", "libmath.so"),
    ])
    def test_mangling(self, plat, expected):
        assert library_file_name("math", plat) == expected

    def test_defaults_to_running_platform(self):
        with patch("nativelib.locator.sys.platform", "darwin"):
            assert library_file_name("math") == "libmath.dylib"


class TestResourceLocator:

    def test_resource_path(self):
        locator = ResourceLocator()
        with patch.object(osinfo, "get_native_lib_folder", return_value="Linux/x86_64"):
            assert locator.resource_path() == "nativelib/native/Linux/x86_64"

    def test_file_name_uses_platform(self):
        assert ResourceLocator(platform="win32").file_name("math") == "math.dll"

    def test_find_packaged_resource(self, package_root):
        resource = ResourceLocator(root=package_root).find_resource("math")
        assert resource is not None
        assert resource.name == library_file_name("math")
        assert resource.is_file()

    def test_missing_resource(self, package_root):
        assert ResourceLocator(root=package_root).find_resource("zlib") is None

    def test_other_architecture_not_matched(self, package_root):
        with patch.object(osinfo, "get_native_lib_folder", return_value="Linux/s390x"):
            assert ResourceLocator(root=package_root).find_resource("math") is None

    def test_default_root_is_package(self):
        root = ResourceLocator().root()
        assert root.joinpath("VERSION").is_file()
