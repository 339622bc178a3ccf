# services/artifact_store.py
"""
Artifact Store Service

Stages generated PKCS#12 bundles in the export directory and serves them back
until they expire.

Features:
- Time-derived, collision-free filenames (File Naming Service)
- Atomic writes: a hidden partial file is renamed into place
- Lazy TTL enforcement on every lookup, plus a sweep for the periodic reaper
- Idempotent deletes, so a concurrent reaper is never an error
"""

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional, Tuple

from config import settings
from certificates.exceptions import IOFailure, NotFound
from certificates.types import Artifact, Pkcs12Bundle
from services.file_naming_service import generate_artifact_filename, is_artifact_filename

logger = logging.getLogger(__name__)

PARTIAL_PREFIX = "."
PARTIAL_SUFFIX = ".partial"
ARTIFACT_FILE_MODE = 0o644


class ArtifactStore:
    """Filesystem store for generated bundles with a fixed time-to-live"""

    def __init__(
        self,
        export_dir: Optional[str] = None,
        export_url_path: Optional[str] = None,
        base_url: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.export_dir = Path(export_dir or settings.EXPORT_DIR)
        self.tmp_dir = self.export_dir / "tmp"
        self.export_url_path = "/" + (export_url_path or settings.EXPORT_URL_PATH).strip("/")
        self.base_url = base_url if base_url is not None else settings.EXPORT_BASE_URL
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.ARTIFACT_TTL_SECONDS
        self.clock = clock
        logger.info(f"ArtifactStore using {self.tmp_dir} (TTL {self.ttl_seconds}s)")

    # ===== URLS =====

    def build_url(self, filename: str, request_base_url: Optional[str] = None) -> str:
        """Configured base URL first, then the requesting host"""
        base = (self.base_url or request_base_url or "http://localhost").rstrip("/")
        return f"{base}{self.export_url_path}/tmp/{filename}"

    # ===== STORE / RESOLVE =====

    def ensure_directory(self):
        try:
            self.tmp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create export directory {self.tmp_dir}: {e}")
            raise IOFailure(None, "Error creating the PKCS12 export directory")

    def store(self, bundle: Pkcs12Bundle, request_base_url: Optional[str] = None) -> Artifact:
        """
        Write a bundle under a new name and return its artifact descriptor

        Raises:
            IOFailure: the bundle could not be written; no file is left behind
        """
        self.ensure_directory()
        created_at = self.clock()
        filename = generate_artifact_filename(created_at)
        target = self.tmp_dir / filename

        try:
            fd, partial = tempfile.mkstemp(dir=self.tmp_dir, prefix=PARTIAL_PREFIX, suffix=PARTIAL_SUFFIX)
        except OSError as e:
            logger.error(f"Cannot open temporary PKCS12 file in {self.tmp_dir}: {e}")
            raise IOFailure(None, "Error opening temporary PKCS12 file for writing")

        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(bundle.data)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(partial, ARTIFACT_FILE_MODE)
            os.utime(partial, (created_at, created_at))
            os.replace(partial, target)
        except OSError as e:
            logger.error(f"Writing PKCS12 artifact {filename} failed: {e}")
            self._remove(Path(partial))
            raise IOFailure(None, "Error writing data to the temporary PKCS12 file")

        artifact = Artifact(
            filename=filename,
            path=str(target),
            created_at=created_at,
            url=self.build_url(filename, request_base_url),
            size=bundle.size,
        )
        logger.info(f"Stored PKCS12 artifact {filename} ({artifact.size} bytes)")
        return artifact

    def resolve(self, filename: str) -> Artifact:
        """
        Look up a stored artifact; expired artifacts are deleted on the spot

        Raises:
            NotFound: unknown, malformed, vanished or expired name
        """
        if not is_artifact_filename(filename):
            logger.info(f"Rejected artifact lookup for invalid name {filename!r}")
            raise NotFound("filename", f"The PKCS12 file {filename} does not exist or has expired")

        path = self.tmp_dir / filename
        try:
            stat = path.stat()
        except FileNotFoundError:
            raise NotFound("filename", f"The PKCS12 file {filename} does not exist or has expired")
        except OSError as e:
            logger.error(f"Cannot stat artifact {filename}: {e}")
            raise IOFailure("filename", f"Error reading the PKCS12 file {filename}")

        if self._is_expired(stat.st_mtime):
            logger.info(f"Artifact {filename} expired, removing it")
            self._remove(path)
            raise NotFound("filename", f"The PKCS12 file {filename} does not exist or has expired")

        return Artifact(
            filename=filename,
            path=str(path),
            created_at=stat.st_mtime,
            url=self.build_url(filename),
            size=stat.st_size,
        )

    def read(self, filename: str) -> Tuple[Artifact, bytes]:
        """Resolve an artifact and return its bytes"""
        artifact = self.resolve(filename)
        try:
            data = Path(artifact.path).read_bytes()
        except FileNotFoundError:
            # reaper won the race between stat and read
            raise NotFound("filename", f"The PKCS12 file {filename} does not exist or has expired")
        except OSError as e:
            logger.error(f"Cannot read artifact {filename}: {e}")
            raise IOFailure("filename", f"Error reading the PKCS12 file {filename}")
        return artifact, data

    # ===== EXPIRY =====

    def purge_expired(self) -> int:
        """Delete every expired artifact and stale partial file, returning the count"""
        if not self.tmp_dir.is_dir():
            return 0

        removed = 0
        with os.scandir(self.tmp_dir) as entries:
            for entry in entries:
                if not (is_artifact_filename(entry.name) or self._is_partial(entry.name)):
                    continue
                try:
                    mtime = entry.stat().st_mtime
                except FileNotFoundError:
                    continue
                if self._is_expired(mtime) and self._remove(Path(entry.path)):
                    removed += 1

        if removed:
            logger.info(f"Purged {removed} expired PKCS12 artifacts from {self.tmp_dir}")
        return removed

    def count_artifacts(self) -> int:
        if not self.tmp_dir.is_dir():
            return 0
        return sum(1 for name in os.listdir(self.tmp_dir) if is_artifact_filename(name))

    def _is_expired(self, mtime: float) -> bool:
        return self.clock() - mtime > self.ttl_seconds

    @staticmethod
    def _is_partial(name: str) -> bool:
        return name.startswith(PARTIAL_PREFIX) and name.endswith(PARTIAL_SUFFIX)

    @staticmethod
    def _remove(path: Path) -> bool:
        """Delete a file; an already-absent file is not an error"""
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to remove {path}: {e}")
            return False


# Global instance
artifact_store = ArtifactStore()
