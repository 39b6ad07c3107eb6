"""Filesystem and in-memory implementations of the snapshot store blueprint."""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path

from rhelswap.base.config import LocalConfig
from rhelswap.base.exceptions import PersistenceError
from rhelswap.base.store import SnapshotStoreBlueprint
from rhelswap.models import StoreStat


class FileSnapshotStore(SnapshotStoreBlueprint):
    """One ``<project_id>.json`` file per project under ``state_dir``."""

    def __init__(self, config: LocalConfig | None = None) -> None:
        config = config or LocalConfig()
        self.state_dir = Path(config.state_dir)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise PersistenceError(f"Invalid snapshot key '{key}'", key=key)
        return self.state_dir / f"{key}.json"

    def read(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read '{path}'", key=key) from e

    def write(self, key: str, blob: bytes) -> None:
        """Write to a sibling temp file, then rename it over the snapshot.

        A failed write leaves the previous snapshot intact, and readers
        never see a partially written file.
        """
        path = self._path(key)
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            # Dot prefix: temp names can never collide with a valid key.
            fd, tmp_name = tempfile.mkstemp(
                dir=self.state_dir, prefix=f".{key}.", suffix=".tmp"
            )
            os.close(fd)
            tmp = Path(tmp_name)
            try:
                tmp.write_bytes(blob)
                os.replace(tmp, path)
            except OSError:
                tmp.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write '{path}'", key=key) from e

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to delete '{path}'", key=key) from e

    def stat(self, key: str) -> StoreStat:
        path = self._path(key)
        try:
            return StoreStat(exists=True, size=path.stat().st_size)
        except FileNotFoundError:
            return StoreStat(exists=False)
        except OSError as e:
            raise PersistenceError(f"Failed to stat '{path}'", key=key) from e


class MemorySnapshotStore(SnapshotStoreBlueprint):
    """Thread-safe dict-backed store. Contents die with the process."""

    def __init__(self, config: LocalConfig | None = None) -> None:
        self._blobs: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> bytes | None:
        with self._lock:
            return self._blobs.get(key)

    def write(self, key: str, blob: bytes) -> None:
        with self._lock:
            self._blobs[key] = bytes(blob)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._blobs.pop(key, None) is not None

    def stat(self, key: str) -> StoreStat:
        with self._lock:
            blob = self._blobs.get(key)
        if blob is None:
            return StoreStat(exists=False)
        return StoreStat(exists=True, size=len(blob))
