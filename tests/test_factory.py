from unittest.mock import patch, MagicMock
import pytest

from rhelswap.factory import build_dashboard, universal_factory
from rhelswap.base import (
    ChangeNotifierBlueprint,
    ComputeDirectoryBlueprint,
    SnapshotStoreBlueprint,
)
from rhelswap.base.client_cache import ClientRegistry
from rhelswap.dashboard import Dashboard
from rhelswap.gcp.store import GCSSnapshotStore
from rhelswap.local.notifier import InProcessNotifier
from rhelswap.local.store import FileSnapshotStore


class TestUniversalFactory:
    def test_gcp_directory(self):
        registry = ClientRegistry()
        result = universal_factory("directory", "gcp", {"project_id": "p"}, registry=registry)
        assert isinstance(result, ComputeDirectoryBlueprint)
        assert result.registry is registry

    @patch("rhelswap.gcp.store.gcs")
    def test_gcp_store(self, mock_gcs):
        mock_gcs.Client.return_value = MagicMock()
        result = universal_factory("store", "gcp", {"project_id": "p", "bucket": "b"})
        assert isinstance(result, SnapshotStoreBlueprint)

    @patch("rhelswap.gcp.notifier.pubsub_v1")
    def test_gcp_notifier(self, mock_pubsub):
        result = universal_factory("notifier", "gcp", {"project_id": "p", "topic": "t"})
        assert isinstance(result, ChangeNotifierBlueprint)

    def test_local_store(self, tmp_path):
        result = universal_factory("store", "local", {"state_dir": str(tmp_path)})
        assert isinstance(result, FileSnapshotStore)

    def test_local_notifier(self):
        assert isinstance(universal_factory("notifier", "local", {}), InProcessNotifier)

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            universal_factory("store", "azure", {})

    def test_unsupported_component(self):
        with pytest.raises(ValueError, match="Unsupported component 'directory'"):
            universal_factory("directory", "local", {})

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            universal_factory("store", "local", {"bucket": "wrong-provider"})


class TestBuildDashboard:
    def test_defaults(self, tmp_path):
        dashboard = build_dashboard(
            store_config={"state_dir": str(tmp_path)},
            cache_config={"ttl_seconds": 60},
            updater_config={"poll_interval_seconds": 1},
        )
        assert isinstance(dashboard, Dashboard)
        assert dashboard.notifier is None
        assert dashboard.cache.ttl_seconds == 60
        assert dashboard.updater.config.poll_interval_seconds == 1
        assert dashboard.cache.directory is dashboard.updater.directory

    def test_with_notifier(self, tmp_path):
        dashboard = build_dashboard(
            store_config={"state_dir": str(tmp_path)},
            notifier_provider="local",
        )
        assert isinstance(dashboard.notifier, InProcessNotifier)

    @patch("rhelswap.gcp.store.gcs")
    def test_gcs_store(self, mock_gcs):
        dashboard = build_dashboard(
            store_provider="gcp", store_config={"project_id": "host", "bucket": "state"}
        )
        assert isinstance(dashboard.cache.store, GCSSnapshotStore)
