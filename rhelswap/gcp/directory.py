"""GCP Compute Engine implementation of the compute directory blueprint."""

from __future__ import annotations

from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import compute_v1

from rhelswap.base.client_cache import ClientRegistry
from rhelswap.base.config import GCPConfig
from rhelswap.base.directory import ComputeDirectoryBlueprint
from rhelswap.base.exceptions import ComputeError, InstanceNotFoundError
from rhelswap.base.logger import rs_logger
from rhelswap.models import DiskRecord, InstanceRecord, NetworkInterfaceRecord, ZoneRecord


def _last_segment(url: str | None, default: str = "") -> str:
    """Reduce a resource URL such as ``.../machineTypes/n1-standard-1`` to its name."""
    if not url:
        return default
    return url.rstrip("/").split("/")[-1]


def _to_record(instance: Any, zone: str | None = None) -> InstanceRecord:
    """Convert a ``compute_v1.Instance`` into an :class:`InstanceRecord`."""
    return InstanceRecord(
        id=str(instance.id),
        name=instance.name,
        zone=zone or _last_segment(instance.zone),
        machine_type=_last_segment(instance.machine_type, "unknown"),
        status=instance.status,
        creation_timestamp=str(instance.creation_timestamp or ""),
        disks=[
            DiskRecord(
                device_name=d.device_name or "unknown",
                source=d.source or "",
                licenses=list(d.licenses or []),
            )
            for d in (instance.disks or [])
        ],
        network_interfaces=[
            NetworkInterfaceRecord(
                name=ni.name or "",
                network=ni.network or "",
                subnetwork=ni.subnetwork or "",
            )
            for ni in (instance.network_interfaces or [])
        ],
    )


class Directory(ComputeDirectoryBlueprint):
    """Compute Engine backed compute directory.

    One directory serves every project; SDK clients are kept per project in
    the injected :class:`ClientRegistry`.

    Attributes:
        credentials: Credentials passed to every SDK client (None for ADC).
        registry: Per-project client registry.
    """

    def __init__(self, config: GCPConfig, registry: ClientRegistry | None = None) -> None:
        """Initialize the directory.

        Args:
            config: GCP configuration; only ``credentials`` is used here.
            registry: Client registry owned by the composing layer. A private
                one is created when omitted.
        """
        self.credentials = config.credentials
        self.registry = registry or ClientRegistry()

    # --- Clients ---

    def _instances(self, project_id: str) -> Any:
        return self.registry.get_or_create(
            project_id,
            "instances",
            lambda: compute_v1.InstancesClient(credentials=self.credentials),
        )

    def _disks(self, project_id: str) -> Any:
        return self.registry.get_or_create(
            project_id,
            "disks",
            lambda: compute_v1.DisksClient(credentials=self.credentials),
        )

    def _zones(self, project_id: str) -> Any:
        return self.registry.get_or_create(
            project_id,
            "zones",
            lambda: compute_v1.ZonesClient(credentials=self.credentials),
        )

    def _get_instance(self, project_id: str, zone: str, instance_name: str) -> Any:
        try:
            return self._instances(project_id).get(
                project=project_id, zone=zone, instance=instance_name
            )
        except gcp_exceptions.NotFound as e:
            raise InstanceNotFoundError(
                f"Instance '{instance_name}' not found in {project_id}/{zone}",
                project_id=project_id,
                zone=zone,
                instance_name=instance_name,
            ) from e
        except gcp_exceptions.GoogleAPICallError as e:
            raise ComputeError(f"Failed to get instance '{instance_name}'") from e

    # --- Listing ---

    def list_instances(
        self, project_id: str, zone: str | None = None
    ) -> list[InstanceRecord]:
        """List Compute Engine instances in one zone or across all zones.

        Raises:
            ComputeError: On Compute Engine API failure.
        """
        client = self._instances(project_id)
        try:
            if zone:
                return [
                    _to_record(inst, zone)
                    for inst in client.list(project=project_id, zone=zone)
                ]
            request = compute_v1.AggregatedListInstancesRequest(project=project_id)
            records = []
            for scope, scoped_list in client.aggregated_list(request=request):
                for inst in scoped_list.instances or []:
                    records.append(_to_record(inst, _last_segment(scope)))
            return records
        except gcp_exceptions.GoogleAPICallError as e:
            raise ComputeError(f"Failed to list instances for project '{project_id}'") from e

    def list_zones(self, project_id: str) -> list[ZoneRecord]:
        """List zones visible to the project.

        Raises:
            ComputeError: On Compute Engine API failure.
        """
        try:
            return [
                ZoneRecord(
                    name=z.name,
                    region=_last_segment(z.region),
                    status=z.status or "",
                    description=z.description or "",
                )
                for z in self._zones(project_id).list(project=project_id)
            ]
        except gcp_exceptions.GoogleAPICallError as e:
            raise ComputeError(f"Failed to list zones for project '{project_id}'") from e

    # --- Power state ---

    def get_status(self, project_id: str, zone: str, instance_name: str) -> str:
        """Return the instance's status string.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        return str(self._get_instance(project_id, zone, instance_name).status)

    def stop_instance(self, project_id: str, zone: str, instance_name: str) -> None:
        """Request a stop. The caller polls for ``TERMINATED``.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        try:
            self._instances(project_id).stop(
                project=project_id, zone=zone, instance=instance_name
            )
        except gcp_exceptions.NotFound as e:
            raise InstanceNotFoundError(
                f"Instance '{instance_name}' not found",
                project_id=project_id,
                zone=zone,
                instance_name=instance_name,
            ) from e
        except gcp_exceptions.GoogleAPICallError as e:
            raise ComputeError(f"Failed to stop '{instance_name}'") from e

    def start_instance(self, project_id: str, zone: str, instance_name: str) -> None:
        """Request a start. The caller polls for ``RUNNING``.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        try:
            self._instances(project_id).start(
                project=project_id, zone=zone, instance=instance_name
            )
        except gcp_exceptions.NotFound as e:
            raise InstanceNotFoundError(
                f"Instance '{instance_name}' not found",
                project_id=project_id,
                zone=zone,
                instance_name=instance_name,
            ) from e
        except gcp_exceptions.GoogleAPICallError as e:
            raise ComputeError(f"Failed to start '{instance_name}'") from e

    # --- Licenses ---

    def set_boot_disk_licenses(
        self,
        project_id: str,
        zone: str,
        instance_name: str,
        license_urls: list[str],
    ) -> None:
        """Replace the license list of the instance's first attached disk.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
            ComputeError: If the instance has no disk or the update fails.
        """
        instance = self._get_instance(project_id, zone, instance_name)
        if not instance.disks:
            raise ComputeError(f"Instance '{instance_name}' has no boot disk")
        disk_name = _last_segment(instance.disks[0].source)
        if not disk_name:
            raise ComputeError(f"Boot disk of '{instance_name}' has no source")

        disk = compute_v1.Disk()
        disk.licenses = list(license_urls)
        # The update mask is only settable on the request, not as a flattened kwarg.
        request = compute_v1.UpdateDiskRequest(
            project=project_id,
            zone=zone,
            disk=disk_name,
            disk_resource=disk,
            paths="licenses",
        )
        try:
            op = self._disks(project_id).update(request=request)
            op.result()
        except gcp_exceptions.NotFound as e:
            raise ComputeError(
                f"Boot disk '{disk_name}' of '{instance_name}' not found"
            ) from e
        except gcp_exceptions.GoogleAPICallError as e:
            raise ComputeError(
                f"Failed to update licenses on disk '{disk_name}' of '{instance_name}'"
            ) from e
        rs_logger.debug(
            f"Updated licenses on disk {disk_name}",
            project_id=project_id,
            zone=zone,
            instance=instance_name,
            operation="set_boot_disk_licenses",
        )
