"""
Produced API consumed by the routing / WebSocket layer.

:class:`Dashboard` composes the snapshot cache, the license updater and
an optional change notifier.  It adds the glue the individual pieces do
not own: clearing the project cache after a successful license update
and broadcasting change events.  Notifications are fire-and-forget; a
notifier failure is logged and never fails the operation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from rhelswap.base.async_support import AsyncMixin
from rhelswap.base.exceptions import InstanceNotFoundError, NotifierError, PersistenceError
from rhelswap.base.logger import rs_logger
from rhelswap.base.notifier import ChangeNotifierBlueprint
from rhelswap.cache import SnapshotCache
from rhelswap.licenses import license_catalog
from rhelswap.models import (
    CacheResult,
    CacheStats,
    InstanceRecord,
    LicenseUpdateResult,
    ZoneRecord,
)
from rhelswap.updater import LicenseUpdater

INSTANCES_UPDATED = "instances-updated"
CACHE_CLEARED = "cache-cleared"
LICENSE_UPDATE_PROGRESS = "license-update-progress"


class Dashboard(AsyncMixin):
    """Data retrieval, refresh and license update entry points."""

    __async_methods__ = (
        "get_data",
        "get_instance",
        "sync_with_gcp",
        "clear_cache",
        "get_cache_stats",
        "update_license",
        "list_zones",
    )

    def __init__(
        self,
        cache: SnapshotCache,
        updater: LicenseUpdater,
        notifier: ChangeNotifierBlueprint | None = None,
    ) -> None:
        self.cache = cache
        self.updater = updater
        self.notifier = notifier

    def _notify(self, project_id: str, event_kind: str, **payload: Any) -> None:
        if self.notifier is None:
            return
        payload = {
            "project_id": project_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **payload,
        }
        try:
            self.notifier.notify(project_id, event_kind, payload)
        except NotifierError as e:
            rs_logger.warning(
                f"Dropped '{event_kind}' notification: {e}",
                project_id=project_id,
                operation="notify",
            )

    def _broadcast_instances(
        self, project_id: str, zone: str | None, instances: list[InstanceRecord]
    ) -> None:
        self._notify(
            project_id,
            INSTANCES_UPDATED,
            zone=zone or "all",
            instances=[inst.model_dump(mode="json") for inst in instances],
            count=len(instances),
        )

    # --- Reads ---

    def get_data(
        self,
        project_id: str,
        zone: str | None = None,
        force_refresh: bool = False,
    ) -> CacheResult:
        """Cached-or-fresh instance list; see :meth:`SnapshotCache.get_data`."""
        result = self.cache.get_data(project_id, zone, force_refresh)
        if not result.cached:
            self._broadcast_instances(project_id, zone, result.data)
        return result

    def get_instance(self, project_id: str, zone: str, instance_name: str) -> InstanceRecord:
        """Return one instance from the (possibly cached) zone listing.

        Raises:
            InstanceNotFoundError: If no instance of that name is in the zone.
        """
        result = self.get_data(project_id, zone)
        for instance in result.data:
            if instance.name == instance_name and instance.zone == zone:
                return instance
        raise InstanceNotFoundError(
            f"Instance {instance_name} not found in zone {zone}",
            project_id=project_id,
            zone=zone,
            instance_name=instance_name,
        )

    def get_cache_stats(self, project_id: str) -> CacheStats:
        return self.cache.get_cache_stats(project_id)

    def list_zones(self, project_id: str) -> list[ZoneRecord]:
        return self.cache.directory.list_zones(project_id)

    def license_catalog(self) -> dict:
        return license_catalog()

    # --- Writes ---

    def sync_with_gcp(self, project_id: str, zone: str | None = None) -> list[InstanceRecord]:
        """Unconditional refresh; broadcasts the new list to subscribers."""
        instances = self.cache.sync_with_gcp(project_id, zone)
        self._broadcast_instances(project_id, zone, instances)
        return instances

    def clear_cache(self, project_id: str) -> bool:
        self.cache.clear_cache(project_id)
        self._notify(project_id, CACHE_CLEARED)
        return True

    def update_license(
        self,
        project_id: str,
        zone: str,
        instance_name: str,
        license_type: str,
        rhel_version: str,
    ) -> LicenseUpdateResult:
        """Swap the boot disk license, then drop the project's snapshot.

        Failures propagate unchanged after a ``failed`` progress event; the
        cache is left alone in that case.

        Raises:
            PersistenceError: The swap succeeded (``completed`` was sent) but
                the cache could not be cleared; the successful
                :class:`LicenseUpdateResult` is on ``exc.update_result``.
        """
        progress = {"instance_name": instance_name, "license_type": license_type}
        self._notify(project_id, LICENSE_UPDATE_PROGRESS, status="started", **progress)
        try:
            result = self.updater.update_license(
                project_id, zone, instance_name, license_type, rhel_version
            )
        except Exception as e:
            rs_logger.error(
                f"Error updating license for instance {instance_name}: {e}",
                project_id=project_id,
                zone=zone,
                instance=instance_name,
                operation="update_license",
            )
            self._notify(
                project_id, LICENSE_UPDATE_PROGRESS, status="failed", error=str(e), **progress
            )
            raise

        self._notify(project_id, LICENSE_UPDATE_PROGRESS, status="completed", **progress)
        try:
            self.cache.clear_cache(project_id)
        except PersistenceError as e:
            rs_logger.error(
                f"License for {instance_name} was updated but the cache could not "
                f"be cleared: {e}",
                project_id=project_id,
                zone=zone,
                instance=instance_name,
                operation="clear_cache",
            )
            e.update_result = result
            raise
        self._notify(project_id, CACHE_CLEARED)
        return result
