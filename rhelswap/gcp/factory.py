"""GCP backend factory.

Maps component names to their Google Cloud implementations.
``SERVICE_REGISTRY`` is consumed by :func:`rhelswap.factory.universal_factory`.
"""

from rhelswap.gcp.directory import Directory
from rhelswap.gcp.store import GCSSnapshotStore
from rhelswap.gcp.notifier import PubSubNotifier


# Component registry for GCP
SERVICE_REGISTRY: dict[str, type] = {
    "directory": Directory,
    "store": GCSSnapshotStore,
    "notifier": PubSubNotifier,
}
