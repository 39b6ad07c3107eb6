"""Snapshot store blueprint."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rhelswap.models import StoreStat


class SnapshotStoreBlueprint(ABC):
    """Abstract key / blob persistence for project snapshots.

    The key is the project id and the blob is a serialized snapshot.  The
    cache never looks at how or where blobs are kept, so the same cache
    logic runs against disk, memory or a bucket.

    Implementations raise :class:`~rhelswap.base.exceptions.PersistenceError`
    for every failure other than "not found".
    """

    @abstractmethod
    def read(self, key: str) -> bytes | None:
        """Return the stored blob, or None if the key is absent."""

    @abstractmethod
    def write(self, key: str, blob: bytes) -> None:
        """Store *blob* under *key*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove *key*.

        Returns:
            True if a blob was removed, False if the key was already absent.
        """

    @abstractmethod
    def stat(self, key: str) -> StoreStat:
        """Return existence and size in bytes of the blob under *key*."""
