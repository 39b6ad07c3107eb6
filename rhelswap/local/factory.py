"""Local backend factory.

Maps component names to their filesystem / in-process implementations.
``SERVICE_REGISTRY`` is consumed by :func:`rhelswap.factory.universal_factory`.
"""

from rhelswap.local.store import FileSnapshotStore
from rhelswap.local.notifier import InProcessNotifier


# Component registry for local backends (no local compute directory)
SERVICE_REGISTRY: dict[str, type] = {
    "store": FileSnapshotStore,
    "notifier": InProcessNotifier,
}
