"""Abstract capability blueprints and core utilities.

The cache and the license updater depend only on the blueprints defined
here.  Import them to type-hint your own code or to plug in a custom
directory, store or notifier.
"""

from .directory import ComputeDirectoryBlueprint
from .store import SnapshotStoreBlueprint
from .notifier import ChangeNotifierBlueprint
from .supported_services import (
    existing_components,
    existing_providers,
    license_types,
    rhel_versions,
)


__all__ = [
    "ComputeDirectoryBlueprint",
    "SnapshotStoreBlueprint",
    "ChangeNotifierBlueprint",
    "existing_components",
    "existing_providers",
    "license_types",
    "rhel_versions",
]
