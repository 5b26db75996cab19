"""Remove native libraries left behind by earlier runs.

Windows cannot delete a DLL while it is mapped, so a process that exits with
its library loaded leaves the extracted file in the temp directory.
"""
import logging
from pathlib import Path
from typing import List

from .config import ARTIFACT_PREFIX, LOCK_EXT

logger = logging.getLogger(__name__)


def stale_prefix(version: str) -> str:
    return f"{ARTIFACT_PREFIX}{version}-"


def cleanup(temp_dir, version: str) -> List[Path]:
    """Delete this version's extracted libraries that have no lock marker.

    Best effort: errors are logged, never raised. Returns what was removed.
    """
    prefix = stale_prefix(version)
    removed = []

    try:
        entries = list(Path(temp_dir).iterdir())
    except OSError as e:
        logger.error("Failed to open directory %s: %s", temp_dir, e)
        return removed

    for entry in entries:
        name = entry.name
        if not name.startswith(prefix) or name.endswith(LOCK_EXT):
            continue
        if entry.with_name(name + LOCK_EXT).exists():
            continue
        try:
            entry.unlink()
        except OSError as e:
            logger.error("Failed to delete old native lib %s: %s", entry, e)
            continue
        logger.debug("Deleted old native lib %s", entry)
        removed.append(entry)

    return removed
