"""Data models shared by the cache, the updater and the backends."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

SNAPSHOT_VERSION = "1.0.0"


class LicenseClassification(BaseModel):
    """Derived license view of one instance. Never persisted on its own."""

    licenses: list[str] = Field(default_factory=list)
    types: list[str] = Field(
        default_factory=list, description="Distinct categories in canonical order"
    )
    is_payg: bool = False
    is_byos: bool = False
    is_marketplace: bool = False
    is_rhel: bool = False


class DiskRecord(BaseModel):
    device_name: str
    source: str = ""
    licenses: list[str] = Field(default_factory=list)


class NetworkInterfaceRecord(BaseModel):
    name: str = ""
    network: str = ""
    subnetwork: str = ""


class InstanceRecord(BaseModel):
    """One VM as observed from the compute directory at fetch time.

    Records are replaced wholesale on every refresh and never mutated in
    place.  ``license_info`` is recomputed from ``disks`` on every access.
    """

    id: str
    name: str
    zone: str
    machine_type: str = Field(description="Cleaned machine type (e.g., n1-standard-1)")
    status: str
    creation_timestamp: str = ""
    disks: list[DiskRecord] = Field(default_factory=list)
    network_interfaces: list[NetworkInterfaceRecord] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def license_info(self) -> LicenseClassification:
        from rhelswap.licenses import classify_disks

        return classify_disks(self.disks)

    @property
    def boot_disk(self) -> DiskRecord | None:
        return self.disks[0] if self.disks else None


class ZoneRecord(BaseModel):
    name: str
    region: str = ""
    status: str = ""
    description: str = ""


class SnapshotMetadata(BaseModel):
    version: str = SNAPSHOT_VERSION
    instance_count: int = 0


class ProjectSnapshot(BaseModel):
    """The cached unit: one project's instance list and its fetch time.

    ``last_updated`` is always the moment the directory fetch completed,
    never the time of a cache read.
    """

    project_id: str
    last_updated: datetime
    data: list[InstanceRecord] = Field(default_factory=list)
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)

    @property
    def instance_count(self) -> int:
        return len(self.data)

    @classmethod
    def from_fetch(
        cls, project_id: str, instances: list[InstanceRecord], fetched_at: datetime
    ) -> ProjectSnapshot:
        return cls(
            project_id=project_id,
            last_updated=fetched_at,
            data=list(instances),
            metadata=SnapshotMetadata(instance_count=len(instances)),
        )

    def to_blob(self) -> bytes:
        return self.model_dump_json(indent=2).encode("utf-8")

    @classmethod
    def from_blob(cls, blob: bytes) -> ProjectSnapshot:
        return cls.model_validate_json(blob)


class StoreStat(BaseModel):
    exists: bool
    size: int = 0


class CacheResult(BaseModel):
    """What :meth:`SnapshotCache.get_data` hands back to the routing layer.

    ``stale`` is True only when the data is a fallback snapshot returned
    because the directory call failed; ``error`` then carries the failure.
    ``persistence_error`` is set when fresh data could not be stored.
    """

    data: list[InstanceRecord]
    cached: bool
    stale: bool = False
    last_updated: datetime
    error: str | None = None
    persistence_error: str | None = None

    @property
    def count(self) -> int:
        return len(self.data)


class CacheStats(BaseModel):
    exists: bool
    last_updated: datetime | None = None
    age_seconds: float | None = None
    expired: bool | None = None
    size: int | None = None
    instance_count: int | None = None
    error: str | None = None


class LicenseUpdateResult(BaseModel):
    success: bool = True
    project_id: str
    zone: str
    instance_name: str
    license_type: str
    rhel_version: str
    license_url: str
    was_running: bool
