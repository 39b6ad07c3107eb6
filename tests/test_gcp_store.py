from unittest.mock import patch, MagicMock
import pytest
from google.api_core.exceptions import NotFound
from google.cloud.exceptions import GoogleCloudError

from rhelswap.base.config import GCPConfig
from rhelswap.base.exceptions import PersistenceError
from rhelswap.gcp.store import GCSSnapshotStore


@pytest.fixture
def store():
    with patch("rhelswap.gcp.store.gcs") as mock_gcs:
        mock_client = MagicMock()
        mock_gcs.Client.return_value = mock_client
        instance = GCSSnapshotStore(GCPConfig(project_id="host", bucket="rhelswap-state"))
        yield instance, mock_client.bucket.return_value


class TestInit:
    def test_bucket_selected(self):
        with patch("rhelswap.gcp.store.gcs") as mock_gcs:
            GCSSnapshotStore(GCPConfig(project_id="host", bucket="b1", prefix="snapshots/"))
            mock_gcs.Client.return_value.bucket.assert_called_once_with("b1")

    def test_bucket_required(self, monkeypatch):
        monkeypatch.delenv("RHELSWAP_GCS_BUCKET", raising=False)
        with pytest.raises(ValueError, match="needs a bucket"):
            GCSSnapshotStore(GCPConfig(project_id="host"))


class TestRead:
    def test_success(self, store):
        instance, bucket = store
        bucket.blob.return_value.download_as_bytes.return_value = b'{"k": 1}'
        assert instance.read("p1") == b'{"k": 1}'
        bucket.blob.assert_called_once_with("state/p1.json")

    def test_missing(self, store):
        instance, bucket = store
        bucket.blob.return_value.download_as_bytes.side_effect = NotFound("gone")
        assert instance.read("p1") is None

    def test_error(self, store):
        instance, bucket = store
        bucket.blob.return_value.download_as_bytes.side_effect = GoogleCloudError("fail")
        with pytest.raises(PersistenceError) as exc_info:
            instance.read("p1")
        assert exc_info.value.key == "p1"


class TestWrite:
    def test_success(self, store):
        instance, bucket = store
        instance.write("p1", b"{}")
        bucket.blob.return_value.upload_from_string.assert_called_once_with(
            b"{}", content_type="application/json"
        )

    def test_error(self, store):
        instance, bucket = store
        bucket.blob.return_value.upload_from_string.side_effect = GoogleCloudError("fail")
        with pytest.raises(PersistenceError):
            instance.write("p1", b"{}")


class TestDelete:
    def test_success(self, store):
        instance, bucket = store
        assert instance.delete("p1") is True

    def test_missing(self, store):
        instance, bucket = store
        bucket.blob.return_value.delete.side_effect = NotFound("gone")
        assert instance.delete("p1") is False

    def test_error(self, store):
        instance, bucket = store
        bucket.blob.return_value.delete.side_effect = GoogleCloudError("fail")
        with pytest.raises(PersistenceError):
            instance.delete("p1")


class TestStat:
    def test_exists(self, store):
        instance, bucket = store
        bucket.get_blob.return_value = MagicMock(size=2048)
        stat = instance.stat("p1")
        assert stat.exists is True
        assert stat.size == 2048

    def test_missing(self, store):
        instance, bucket = store
        bucket.get_blob.return_value = None
        assert instance.stat("p1").exists is False
