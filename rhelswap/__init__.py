"""rhelswap: RHEL license inventory and PAYG/BYOS swaps for Compute Engine.

Entry point for the library. Import :func:`build_dashboard` to get the
cached instance listing and the license update workflow in one object::

    from rhelswap import build_dashboard

    dashboard = build_dashboard(cache_config={"ttl_seconds": 300})
    result = dashboard.get_data("my-project")
"""

from .base import (
    ComputeDirectoryBlueprint,
    SnapshotStoreBlueprint,
    ChangeNotifierBlueprint,
)
from .cache import SnapshotCache
from .dashboard import Dashboard
from .factory import build_dashboard, universal_factory
from .licenses import classify
from .updater import LicenseUpdater

__all__ = [
    "ComputeDirectoryBlueprint",
    "SnapshotStoreBlueprint",
    "ChangeNotifierBlueprint",
    "SnapshotCache",
    "LicenseUpdater",
    "Dashboard",
    "classify",
    "build_dashboard",
    "universal_factory",
]
