"""Google Cloud backend implementations."""

from .directory import Directory
from .notifier import PubSubNotifier
from .store import GCSSnapshotStore

__all__ = [
    "Directory",
    "GCSSnapshotStore",
    "PubSubNotifier",
]
