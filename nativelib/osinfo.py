"""Canonical OS and architecture names used to lay out packaged binaries."""
import platform
import re
import sys

_OS_NAMES = {
    "win32": "Windows",
    "cygwin": "Windows",
    "darwin": "Mac",
    "linux": "Linux",
    "freebsd": "FreeBSD",
    "openbsd": "OpenBSD",
    "aix": "AIX",
}

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "em64t": "x86_64",
    "universal": "x86_64",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "ia32": "x86",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv5l": "arm",
    "armv6l": "armv6",
    "armv7l": "armv7",
    "armv7": "armv7",
    "arm": "arm",
    "ppc": "ppc",
    "ppc64": "ppc64",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def get_os_name(plat: str = None) -> str:
    plat = sys.platform if plat is None else plat
    for prefix, name in _OS_NAMES.items():
        if plat.startswith(prefix):
            return name
    return platform.system().capitalize() or plat


def get_arch_name(machine: str = None) -> str:
    machine = (platform.machine() if machine is None else machine).lower()
    if machine in _ARCH_NAMES:
        return _ARCH_NAMES[machine]
    return re.sub(r"[^a-z0-9]", "", machine)


def get_native_lib_folder() -> str:
    """Return ``"<OS>/<Arch>"`` for the running interpreter."""
    return f"{get_os_name()}/{get_arch_name()}"
