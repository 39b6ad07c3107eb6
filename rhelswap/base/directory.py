"""Compute directory blueprint."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rhelswap.licenses import get_license_url
from rhelswap.models import InstanceRecord, ZoneRecord


class ComputeDirectoryBlueprint(ABC):
    """Abstract interface to the provider that owns the VM instances.

    The snapshot cache lists instances through it; the license updater
    drives the stop / mutate / start sequence through it.  Every call
    names the project explicitly, so one directory serves all projects.
    """

    @abstractmethod
    def list_instances(
        self, project_id: str, zone: str | None = None
    ) -> list[InstanceRecord]:
        """List instances in a project.

        Args:
            project_id: Project to inspect.
            zone: Restrict the listing to one zone; all zones when omitted.

        Returns:
            Fresh instance records, boot disk first in each ``disks`` list.
        """

    @abstractmethod
    def get_status(self, project_id: str, zone: str, instance_name: str) -> str:
        """Return the instance's current power status (e.g. ``RUNNING``)."""

    @abstractmethod
    def stop_instance(self, project_id: str, zone: str, instance_name: str) -> None:
        """Issue a stop request; does not wait for ``TERMINATED``."""

    @abstractmethod
    def start_instance(self, project_id: str, zone: str, instance_name: str) -> None:
        """Issue a start request; does not wait for ``RUNNING``."""

    @abstractmethod
    def set_boot_disk_licenses(
        self,
        project_id: str,
        zone: str,
        instance_name: str,
        license_urls: list[str],
    ) -> None:
        """Replace the boot disk's license list with *license_urls*.

        The write is a full replacement, never an append.
        """

    @abstractmethod
    def list_zones(self, project_id: str) -> list[ZoneRecord]:
        """List the zones available to a project."""

    def get_boot_disk_license_url(
        self, license_type: str, rhel_version: str
    ) -> str | None:
        """Return the canonical license URL for a billing model and RHEL version.

        Providers with their own license catalogue override this; the default
        is the fixed RHEL table.

        Returns:
            The license resource identifier, or None when the pair is unmapped.
        """
        return get_license_url(license_type, rhel_version)
