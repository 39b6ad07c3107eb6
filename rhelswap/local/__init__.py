"""Filesystem and in-process backend implementations."""

from .notifier import InProcessNotifier
from .store import FileSnapshotStore, MemorySnapshotStore

__all__ = [
    "FileSnapshotStore",
    "InProcessNotifier",
    "MemorySnapshotStore",
]
