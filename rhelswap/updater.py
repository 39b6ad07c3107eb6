"""
License update orchestration.

Swapping a RHEL boot disk license requires the instance to be powered
off.  :class:`LicenseUpdater` drives one instance through::

    inspect -> [stop -> wait TERMINATED] -> set license -> [start -> wait RUNNING]

The bracketed steps run only when the instance was ``RUNNING`` at
inspection.  Steps are strictly sequential.  Any failure aborts the rest
and propagates unchanged: there is no retry and no rollback, so an
instance that was running may be left stopped.  Callers must surface
that to the operator.

The updater does not own the snapshot cache; after a successful update
the caller clears the project's cache entry.
"""

from __future__ import annotations

import time
from typing import Callable

from rhelswap.base.async_support import AsyncMixin
from rhelswap.base.config import UpdaterConfig
from rhelswap.base.directory import ComputeDirectoryBlueprint
from rhelswap.base.exceptions import OperationTimedOutError, UnknownLicenseCombinationError
from rhelswap.base.logger import rs_logger
from rhelswap.base.polling import poll_until
from rhelswap.licenses import SUPPORTED_LICENSE_TYPES, SUPPORTED_RHEL_VERSIONS
from rhelswap.models import LicenseUpdateResult

RUNNING = "RUNNING"
TERMINATED = "TERMINATED"


class LicenseUpdater(AsyncMixin):
    """Stop / mutate / restart state machine for one instance at a time.

    No mutual exclusion is provided between concurrent updates of the same
    instance; preventing them is the caller's job.
    """

    __async_methods__ = ("update_license",)

    def __init__(
        self,
        directory: ComputeDirectoryBlueprint,
        config: UpdaterConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.directory = directory
        self.config = config or UpdaterConfig()
        self._sleep = sleep
        self._clock = clock

    def resolve_license_url(self, license_type: str, rhel_version: str) -> str:
        """Look up the license URL for a billing model and RHEL version.

        Raises:
            UnknownLicenseCombinationError: If the pair is not supported.
        """
        if license_type not in SUPPORTED_LICENSE_TYPES or rhel_version not in SUPPORTED_RHEL_VERSIONS:
            raise UnknownLicenseCombinationError(license_type, rhel_version)
        url = self.directory.get_boot_disk_license_url(license_type, rhel_version)
        if not url:
            raise UnknownLicenseCombinationError(license_type, rhel_version)
        return url

    def wait_for_status(
        self,
        project_id: str,
        zone: str,
        instance_name: str,
        target_status: str,
    ) -> None:
        """Poll the instance until it reports *target_status*.

        Raises:
            OperationTimedOutError: If the status is not reached in time.
        """
        try:
            poll_until(
                lambda: self.directory.get_status(project_id, zone, instance_name),
                lambda status: status == target_status,
                timeout=self.config.timeout_seconds,
                interval=self.config.poll_interval_seconds,
                sleep=self._sleep,
                clock=self._clock,
                description=f"{instance_name} to reach {target_status}",
            )
        except TimeoutError as e:
            raise OperationTimedOutError(
                project_id,
                zone,
                instance_name,
                target_status,
                self.config.timeout_seconds,
            ) from e

    def update_license(
        self,
        project_id: str,
        zone: str,
        instance_name: str,
        license_type: str,
        rhel_version: str,
    ) -> LicenseUpdateResult:
        """Replace the instance's boot disk license with the requested one.

        Args:
            project_id: Project owning the instance.
            zone: Zone of the instance.
            instance_name: Instance to update.
            license_type: ``PAYG`` or ``BYOS``.
            rhel_version: ``rhel-7``, ``rhel-8`` or ``rhel-9``.

        Returns:
            A successful :class:`LicenseUpdateResult`.

        Raises:
            UnknownLicenseCombinationError: Unsupported type / version pair.
            OperationTimedOutError: The stop or start did not settle in time.
            ComputeError: Any directory call failed.
        """
        license_url = self.resolve_license_url(license_type, rhel_version)
        context = {"project_id": project_id, "zone": zone, "instance": instance_name}

        status = self.directory.get_status(project_id, zone, instance_name)
        was_running = status == RUNNING

        if was_running:
            rs_logger.info(
                f"Stopping instance {instance_name} for license update...",
                operation="stop_instance",
                **context,
            )
            self.directory.stop_instance(project_id, zone, instance_name)
            self.wait_for_status(project_id, zone, instance_name, TERMINATED)

        self.directory.set_boot_disk_licenses(project_id, zone, instance_name, [license_url])
        rs_logger.info(
            f"Set boot disk license of {instance_name} to {license_url}",
            operation="set_boot_disk_licenses",
            **context,
        )

        if was_running:
            rs_logger.info(
                f"Restarting instance {instance_name} after license update...",
                operation="start_instance",
                **context,
            )
            self.directory.start_instance(project_id, zone, instance_name)
            self.wait_for_status(project_id, zone, instance_name, RUNNING)

        rs_logger.info(
            f"License updated successfully for instance {instance_name}",
            operation="update_license",
            **context,
        )
        return LicenseUpdateResult(
            project_id=project_id,
            zone=zone,
            instance_name=instance_name,
            license_type=license_type,
            rhel_version=rhel_version,
            license_url=license_url,
            was_running=was_running,
        )
