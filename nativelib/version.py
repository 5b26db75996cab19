"""Version information for nativelib."""
import logging
import re

from .config import NAMESPACE_ROOT, UNKNOWN_VERSION, VERSION_RESOURCE

logger = logging.getLogger(__name__)

_VERSION_JUNK = re.compile(r"[^0-9.]")


def _sanitize(raw: str) -> str:
    """Keep digits and dots only, so the tag is safe inside a file name."""
    return _VERSION_JUNK.sub("", raw.strip())


def _parse_properties(text: str) -> dict:
    """Parse ``key=value`` / ``key: value`` lines, skipping ``#`` and ``!`` comments."""
    props = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        for sep in ("=", ":"):
            if sep in line:
                key, value = line.split(sep, 1)
                props[key.strip()] = value.strip()
                break
    return props


def _read_version_resource() -> str:
    from importlib import resources

    resource = resources.files(NAMESPACE_ROOT).joinpath(VERSION_RESOURCE)
    if not resource.is_file():
        raise FileNotFoundError(VERSION_RESOURCE)
    return _parse_properties(resource.read_text(encoding="utf-8"))["version"]


# Try multiple version detection strategies
def _get_version() -> str:
    """Get package version using multiple fallback strategies."""
    # Strategy 1: installed distribution metadata
    try:
        from importlib import metadata
        version = _sanitize(metadata.version(NAMESPACE_ROOT))
        if version:
            return version
    except Exception:
        pass

    # Strategy 2: packaged VERSION properties file
    try:
        version = _sanitize(_read_version_resource())
        if version:
            return version
    except Exception as e:
        logger.error("Could not read version from %s: %s", VERSION_RESOURCE, e)

    # Strategy 3: hardcoded fallback
    return UNKNOWN_VERSION


__version__ = _get_version()


def _version_part(version, index: int, default: int) -> int:
    version = __version__ if version is None else version
    parts = version.split(".")
    if version == UNKNOWN_VERSION or len(parts) <= index or not parts[index].isdigit():
        return default
    return int(parts[index])


def get_major_version(version: str = None) -> int:
    """Major component of ``version`` (default: this package's), 1 if unknown."""
    return _version_part(version, 0, 1)


def get_minor_version(version: str = None) -> int:
    """Minor component of ``version`` (default: this package's), 0 if unknown."""
    return _version_part(version, 1, 0)
