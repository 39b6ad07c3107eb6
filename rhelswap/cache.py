"""
Per-project snapshot cache with stale-read fallback.

Each project has at most one persisted :class:`ProjectSnapshot`.  Whether
it is fresh or expired is decided at read time from ``last_updated`` and
the process-wide TTL; nothing else is stored.

A read may return data older than the TTL only when the directory call
failed, and such a result is always flagged ``stale=True``.

Two concurrent ``get_data`` calls that both see an expired snapshot each
fetch and each persist; the last writer wins.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from pydantic import ValidationError

from rhelswap.base.async_support import AsyncMixin
from rhelswap.base.config import CacheConfig
from rhelswap.base.directory import ComputeDirectoryBlueprint
from rhelswap.base.exceptions import PersistenceError, UpstreamUnavailableError
from rhelswap.base.logger import rs_logger
from rhelswap.base.store import SnapshotStoreBlueprint
from rhelswap.models import CacheResult, CacheStats, InstanceRecord, ProjectSnapshot


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotCache(AsyncMixin):
    """Cache of per-project instance lists in front of the compute directory.

    Attributes:
        directory: Source of fresh instance lists.
        store: Key / blob persistence keyed by project id.
        config: TTL settings.
    """

    __async_methods__ = ("get_data", "sync_with_gcp", "clear_cache", "get_cache_stats")

    def __init__(
        self,
        directory: ComputeDirectoryBlueprint,
        store: SnapshotStoreBlueprint,
        config: CacheConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.directory = directory
        self.store = store
        self.config = config or CacheConfig()
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self.config.ttl_seconds

    # --- Snapshot persistence ---

    def load_snapshot(self, project_id: str) -> ProjectSnapshot | None:
        """Read and decode the persisted snapshot.

        Returns:
            The snapshot, or None if none is stored.

        Raises:
            PersistenceError: If the store fails or the blob is unreadable.
        """
        blob = self.store.read(project_id)
        if blob is None:
            rs_logger.info(
                f"No cached state found for project {project_id}",
                project_id=project_id,
                operation="load_snapshot",
            )
            return None
        try:
            return ProjectSnapshot.from_blob(blob)
        except ValidationError as e:
            raise PersistenceError(
                f"Cached state for project '{project_id}' is unreadable", key=project_id
            ) from e

    def save_snapshot(
        self,
        project_id: str,
        instances: list[InstanceRecord],
        fetched_at: datetime,
    ) -> ProjectSnapshot:
        """Persist a new snapshot, replacing the previous one wholesale."""
        snapshot = ProjectSnapshot.from_fetch(project_id, instances, fetched_at)
        self.store.write(project_id, snapshot.to_blob())
        rs_logger.info(
            f"Saved state for project {project_id} to cache",
            project_id=project_id,
            operation="save_snapshot",
        )
        return snapshot

    def is_expired(self, snapshot: ProjectSnapshot | None, now: datetime | None = None) -> bool:
        if snapshot is None:
            return True
        return self._age_seconds(snapshot, now) > self.ttl_seconds

    def _age_seconds(self, snapshot: ProjectSnapshot, now: datetime | None = None) -> float:
        now = now or self._clock()
        return (now - snapshot.last_updated).total_seconds()

    def _load_for_read(self, project_id: str) -> ProjectSnapshot | None:
        # A failed read counts as "no snapshot" and triggers a fresh fetch.
        try:
            return self.load_snapshot(project_id)
        except PersistenceError as e:
            rs_logger.warning(
                f"Ignoring unreadable cached state for project {project_id}: {e}",
                project_id=project_id,
                operation="load_snapshot",
            )
            return None

    # --- Fetching ---

    def _fetch(self, project_id: str, zone: str | None) -> tuple[list[InstanceRecord], datetime]:
        rs_logger.info(
            f"Syncing data with GCP for project {project_id}",
            project_id=project_id,
            zone=zone,
            operation="sync_with_gcp",
        )
        try:
            instances = self.directory.list_instances(project_id, zone)
        except Exception as e:
            raise UpstreamUnavailableError(project_id, e) from e
        return instances, self._clock()

    def _fetch_and_persist(
        self, project_id: str, zone: str | None
    ) -> tuple[ProjectSnapshot, PersistenceError | None]:
        instances, fetched_at = self._fetch(project_id, zone)
        try:
            snapshot = self.save_snapshot(project_id, instances, fetched_at)
        except PersistenceError as e:
            rs_logger.error(
                f"Fetched {len(instances)} instances for project {project_id} "
                f"but could not cache them: {e}",
                project_id=project_id,
                operation="save_snapshot",
            )
            return ProjectSnapshot.from_fetch(project_id, instances, fetched_at), e
        rs_logger.info(
            f"Successfully synced {len(instances)} instances for project {project_id}",
            project_id=project_id,
            zone=zone,
            operation="sync_with_gcp",
        )
        return snapshot, None

    # --- Public API ---

    def sync_with_gcp(self, project_id: str, zone: str | None = None) -> list[InstanceRecord]:
        """Fetch from the directory and persist, ignoring any cached state.

        Raises:
            UpstreamUnavailableError: If the directory call fails.
            PersistenceError: If the fetched list could not be stored; the
                fetched snapshot is attached as ``exc.snapshot``.
        """
        snapshot, write_error = self._fetch_and_persist(project_id, zone)
        if write_error is not None:
            write_error.snapshot = snapshot
            raise write_error
        return snapshot.data

    def get_data(
        self,
        project_id: str,
        zone: str | None = None,
        force_refresh: bool = False,
    ) -> CacheResult:
        """Return the project's instances, from cache when still fresh.

        Args:
            project_id: Project to read.
            zone: Zone filter used when a fetch is needed.
            force_refresh: Skip the cache and fetch unconditionally.

        Returns:
            A :class:`CacheResult`; ``cached``/``stale`` tell where the data
            came from.

        Raises:
            UpstreamUnavailableError: If the directory fails and there is no
                snapshot to fall back on.
        """
        previous: ProjectSnapshot | None = None
        if not force_refresh:
            previous = self._load_for_read(project_id)
            if previous is not None and not self.is_expired(previous):
                rs_logger.info(
                    f"Using cached data for project {project_id}",
                    project_id=project_id,
                    operation="get_data",
                )
                return CacheResult(
                    data=previous.data,
                    cached=True,
                    stale=False,
                    last_updated=previous.last_updated,
                )

        try:
            snapshot, write_error = self._fetch_and_persist(project_id, zone)
        except UpstreamUnavailableError as e:
            if previous is None:
                previous = self._load_for_read(project_id)
            if previous is None:
                rs_logger.error(
                    f"Error getting data for project {project_id}: {e.cause}",
                    project_id=project_id,
                    operation="get_data",
                )
                raise
            rs_logger.warning(
                f"Returning stale cached data for project {project_id}",
                project_id=project_id,
                operation="get_data",
            )
            return CacheResult(
                data=previous.data,
                cached=True,
                stale=True,
                last_updated=previous.last_updated,
                error=str(e.cause) or type(e.cause).__name__,
            )

        return CacheResult(
            data=snapshot.data,
            cached=False,
            stale=False,
            last_updated=snapshot.last_updated,
            persistence_error=str(write_error) if write_error is not None else None,
        )

    def clear_cache(self, project_id: str) -> bool:
        """Delete the project's snapshot. Succeeds when none exists.

        Raises:
            PersistenceError: If the store fails to delete.
        """
        if self.store.delete(project_id):
            rs_logger.info(
                f"Cleared cache for project {project_id}",
                project_id=project_id,
                operation="clear_cache",
            )
        else:
            rs_logger.info(
                f"No cache to clear for project {project_id}",
                project_id=project_id,
                operation="clear_cache",
            )
        return True

    def get_cache_stats(self, project_id: str) -> CacheStats:
        """Describe the persisted snapshot without refreshing it."""
        try:
            snapshot = self.load_snapshot(project_id)
            if snapshot is None:
                return CacheStats(exists=False)
            stat = self.store.stat(project_id)
        except PersistenceError as e:
            rs_logger.error(
                f"Error getting cache stats for project {project_id}: {e}",
                project_id=project_id,
                operation="get_cache_stats",
            )
            return CacheStats(exists=False, error=str(e))

        now = self._clock()
        return CacheStats(
            exists=True,
            last_updated=snapshot.last_updated,
            age_seconds=self._age_seconds(snapshot, now),
            expired=self.is_expired(snapshot, now),
            size=stat.size,
            instance_count=snapshot.metadata.instance_count,
        )
