"""Copy packaged native libraries out to a loadable location on disk.

Every extraction gets its own ``library-{version}-{uuid}-{file}`` name plus a
zero-length ``.lck`` marker. Processes sharing a temp directory never write
the same file, and the marker tells the stale artifact cleaner which files
are still in use. There is no OS-level file lock; a collision would need two
identical uuid4 values.
"""
import atexit
import logging
import os
import shutil
import threading
import uuid
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, List, Optional

from .config import ARTIFACT_PREFIX, COPY_CHUNK_SIZE, LOCK_EXT
from .exceptions import Candidate, FileIntegrityError, LoadRejectedError

logger = logging.getLogger(__name__)

# rwxr-xr-x: readable and executable for the loader, writable by the owner only
ARTIFACT_MODE = 0o755


def artifact_name(version: str, file_name: str) -> str:
    return f"{ARTIFACT_PREFIX}{version}-{uuid.uuid4()}-{file_name}"


class ExtractedArtifact:
    """An extracted library file and its paired lock marker."""

    def __init__(self, path: Path, lock_path: Path):
        self.path = Path(path)
        self.lock_path = Path(lock_path)
        self.released = False

    def release(self) -> bool:
        """Unlink the library, then its marker. Best effort, safe to repeat.

        Returns True when both files are gone. A library still mapped by the
        OS (Windows) stays behind; its marker is removed anyway so the next
        run's cleaner can reclaim it.
        """
        ok = True
        for p in (self.path, self.lock_path):
            try:
                p.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to delete %s: %s", p, e)
                ok = False
        self.released = True
        return ok

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()

    def __repr__(self):
        return f"ExtractedArtifact({str(self.path)!r})"


class ArtifactRegistry:
    """Owns extracted artifacts until shutdown.

    Artifacts are released in reverse order of registration when ``close()``
    runs, which happens at interpreter exit unless ``register_atexit`` is off.
    """

    def __init__(self, register_atexit: bool = True):
        self._register_atexit = register_atexit
        self._hooked = False
        self._lock = threading.Lock()
        self._stack = ExitStack()
        self._artifacts: List[ExtractedArtifact] = []

    def add(self, artifact: ExtractedArtifact) -> ExtractedArtifact:
        with self._lock:
            if self._register_atexit and not self._hooked:
                atexit.register(self.close)
                self._hooked = True
            self._stack.callback(artifact.release)
            self._artifacts.append(artifact)
        return artifact

    def close(self):
        with self._lock:
            self._stack.close()
            self._artifacts.clear()

    @property
    def artifacts(self) -> List[ExtractedArtifact]:
        """Registered artifacts not yet released."""
        with self._lock:
            return [a for a in self._artifacts if not a.released]

    def __len__(self):
        return len(self.artifacts)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def _read_full(stream, size: int) -> bytes:
    """Read up to ``size`` bytes, looping over short reads."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def contents_equal(stream_a, stream_b, chunk_size: int = COPY_CHUNK_SIZE) -> bool:
    """Compare two binary streams byte for byte."""
    while True:
        a = _read_full(stream_a, chunk_size)
        b = _read_full(stream_b, chunk_size)
        if a != b:
            return False
        if not a:
            return True


def extract(resource, file_name: str, target_dir, version: str,
            registry: ArtifactRegistry,
            tried: Optional[List[Candidate]] = None) -> Optional[ExtractedArtifact]:
    """Extract ``resource`` into ``target_dir`` and verify the copy.

    Returns the artifact, or None on an I/O error (logged and recorded in
    ``tried``). Raises FileIntegrityError when the copy differs from the
    resource; the partial file is removed first.
    """
    target = Path(target_dir)
    name = artifact_name(version, file_name)
    artifact = registry.add(ExtractedArtifact(target / name, target / (name + LOCK_EXT)))

    try:
        target.mkdir(parents=True, exist_ok=True)
        # Marker first: the cleaner must never see the library without it
        artifact.lock_path.touch(exist_ok=True)
        with resource.open("rb") as src, open(artifact.path, "wb") as dst:
            shutil.copyfileobj(src, dst, COPY_CHUNK_SIZE)

        os.chmod(artifact.path, ARTIFACT_MODE)

        with resource.open("rb") as src, open(artifact.path, "rb") as dst:
            same = contents_equal(src, dst)
    except OSError as e:
        logger.error("Unexpected I/O error extracting %s to %s: %s", file_name, artifact.path, e)
        artifact.release()
        if tried is not None:
            tried.append(Candidate(str(artifact.path), f"extraction failed: {e}"))
        return None

    if not same:
        artifact.release()
        raise FileIntegrityError(artifact.path)

    logger.debug("Extracted %s to %s", file_name, artifact.path)
    return artifact


def extract_and_load(resource, file_name: str, target_dir, version: str,
                     registry: ArtifactRegistry, load: Callable,
                     tried: Optional[List[Candidate]] = None):
    """Extract a packaged library and hand it to ``load``.

    Returns the loaded handle, or None when extraction failed on I/O or the
    loader rejected the file. FileIntegrityError propagates.
    """
    artifact = extract(resource, file_name, target_dir, version, registry, tried)
    if artifact is None:
        return None

    try:
        return load(artifact.path)
    except LoadRejectedError as e:
        logger.error("Failed to load extracted native library %s: %s", artifact.path, e)
        if tried is not None:
            tried.append(Candidate(str(artifact.path), f"rejected by loader: {e}"))
        return None
