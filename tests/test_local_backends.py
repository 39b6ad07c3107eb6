"""Tests for the filesystem / in-process backends."""

from pathlib import Path
from unittest.mock import patch
import pytest

from rhelswap.base.config import LocalConfig
from rhelswap.base.exceptions import PersistenceError
from rhelswap.local.notifier import InProcessNotifier
from rhelswap.local.store import FileSnapshotStore, MemorySnapshotStore

from conftest import torn_write


@pytest.fixture
def file_store(tmp_path):
    return FileSnapshotStore(LocalConfig(state_dir=str(tmp_path / "state")))


class TestFileSnapshotStore:
    def test_missing(self, file_store):
        assert file_store.read("p1") is None
        assert file_store.stat("p1").exists is False

    def test_write_creates_directory(self, file_store, tmp_path):
        file_store.write("p1", b'{"a": 1}')
        assert (tmp_path / "state" / "p1.json").read_bytes() == b'{"a": 1}'
        assert file_store.read("p1") == b'{"a": 1}'
        assert file_store.stat("p1").size == 8

    def test_write_replaces(self, file_store):
        file_store.write("p1", b"old")
        file_store.write("p1", b"new")
        assert file_store.read("p1") == b"new"

    def test_delete(self, file_store):
        file_store.write("p1", b"x")
        assert file_store.delete("p1") is True
        assert file_store.delete("p1") is False

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden"])
    def test_rejects_unsafe_keys(self, file_store, key):
        with pytest.raises(PersistenceError):
            file_store.read(key)

    def test_unwritable(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file")
        store = FileSnapshotStore(LocalConfig(state_dir=str(blocker)))
        with pytest.raises(PersistenceError) as exc_info:
            store.write("p1", b"x")
        assert exc_info.value.key == "p1"

    def test_failed_write_keeps_previous_snapshot(self, file_store, tmp_path):
        file_store.write("p1", b'{"generation": 1}')
        with patch.object(Path, "write_bytes", torn_write):
            with pytest.raises(PersistenceError):
                file_store.write("p1", b'{"generation": 2, "padding": "xxxxxxxx"}')
        assert file_store.read("p1") == b'{"generation": 1}'
        assert sorted(p.name for p in (tmp_path / "state").iterdir()) == ["p1.json"]

    def test_failed_rename_cleans_up(self, file_store, tmp_path):
        with patch("rhelswap.local.store.os.replace", side_effect=OSError(18, "cross-device")):
            with pytest.raises(PersistenceError):
                file_store.write("p1", b"x")
        assert list((tmp_path / "state").iterdir()) == []


class TestMemorySnapshotStore:
    def test_roundtrip(self):
        store = MemorySnapshotStore()
        assert store.read("p1") is None
        store.write("p1", b"blob")
        assert store.read("p1") == b"blob"
        assert store.stat("p1").size == 4
        assert store.delete("p1") is True
        assert store.delete("p1") is False


class TestInProcessNotifier:
    def test_room_name(self):
        assert InProcessNotifier.room_name("my-proj") == "project-my-proj"

    def test_delivers_to_project_room_only(self):
        notifier = InProcessNotifier()
        got_p1, got_p2 = [], []
        notifier.subscribe("p1", lambda kind, payload: got_p1.append(kind))
        notifier.subscribe("p2", lambda kind, payload: got_p2.append(kind))
        notifier.notify("p1", "cache-cleared", {})
        assert got_p1 == ["cache-cleared"]
        assert got_p2 == []

    def test_subscribe_twice_delivers_once(self):
        notifier = InProcessNotifier()
        got = []

        def callback(kind, payload):
            got.append(kind)

        notifier.subscribe("p1", callback)
        notifier.subscribe("p1", callback)
        assert notifier.subscribers("p1") == 1
        notifier.notify("p1", "instances-updated", {})
        assert got == ["instances-updated"]

    def test_unsubscribe(self):
        notifier = InProcessNotifier()

        def callback(kind, payload):
            raise AssertionError("should not be called")

        notifier.subscribe("p1", callback)
        notifier.unsubscribe("p1", callback)
        assert notifier.subscribers("p1") == 0
        notifier.notify("p1", "cache-cleared", {})

    def test_failing_subscriber_does_not_block_others(self):
        notifier = InProcessNotifier()
        got = []

        def broken(kind, payload):
            raise RuntimeError("socket closed")

        notifier.subscribe("p1", broken)
        notifier.subscribe("p1", lambda kind, payload: got.append(payload))
        notifier.notify("p1", "cache-cleared", {"project_id": "p1"})
        assert got == [{"project_id": "p1"}]
