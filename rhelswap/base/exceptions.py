"""
rhelswap exception hierarchy.

Every failure surfaced by the cache, the license updater or a backend
inherits from :class:`RhelswapError`.  Provider SDK errors are re-raised
as one of these types with the original exception chained as ``__cause__``.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class RhelswapError(Exception):
    """Root exception for all rhelswap errors."""


# ── Compute directory ────────────────────────────────────────────────
class ComputeError(RhelswapError):
    """Base exception for compute directory operations."""


class InstanceNotFoundError(ComputeError):
    """VM instance not found in the directory or in the fetched list."""

    def __init__(
        self,
        message: str,
        *,
        project_id: str | None = None,
        zone: str | None = None,
        instance_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.project_id = project_id
        self.zone = zone
        self.instance_name = instance_name


class UpstreamUnavailableError(RhelswapError):
    """Directory fetch failed and no fallback snapshot exists."""

    def __init__(self, project_id: str, cause: BaseException) -> None:
        super().__init__(
            f"Compute directory unavailable for project '{project_id}': {cause}"
        )
        self.project_id = project_id
        self.cause = cause


# ── License update ───────────────────────────────────────────────────
class OperationTimedOutError(RhelswapError):
    """Instance did not reach the awaited status before the deadline."""

    def __init__(
        self,
        project_id: str,
        zone: str,
        instance_name: str,
        target_status: str,
        timeout: float,
    ) -> None:
        super().__init__(
            f"Timed out after {timeout:g}s waiting for instance '{instance_name}' "
            f"({project_id}/{zone}) to reach status {target_status}"
        )
        self.project_id = project_id
        self.zone = zone
        self.instance_name = instance_name
        self.target_status = target_status
        self.timeout = timeout


class UnknownLicenseCombinationError(RhelswapError):
    """No license URL is mapped for the requested type / version pair."""

    def __init__(self, license_type: str, rhel_version: str) -> None:
        super().__init__(f"No license URL found for {license_type} {rhel_version}")
        self.license_type = license_type
        self.rhel_version = rhel_version


# ── Persistence ──────────────────────────────────────────────────────
class PersistenceError(RhelswapError):
    """Reading, writing or deleting a snapshot failed (other than not-found)."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
        # Set by the cache when a fetch succeeded but could not be stored.
        self.snapshot = None
        # Set by the dashboard when a license swap succeeded but the cache
        # could not be cleared afterwards.
        self.update_result = None


# ── Notification ─────────────────────────────────────────────────────
class NotifierError(RhelswapError):
    """Publishing a change notification failed."""
