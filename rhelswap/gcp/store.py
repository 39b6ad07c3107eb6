"""GCP Cloud Storage implementation of the snapshot store blueprint."""

from __future__ import annotations

from typing import NoReturn

from google.api_core.exceptions import NotFound
from google.cloud import storage as gcs
from google.cloud.exceptions import GoogleCloudError

from rhelswap.base.config import GCPConfig
from rhelswap.base.exceptions import PersistenceError
from rhelswap.base.store import SnapshotStoreBlueprint
from rhelswap.models import StoreStat


def _handle_error(e: Exception, message: str, key: str) -> NoReturn:
    """Raise a PersistenceError chained to the SDK error."""
    raise PersistenceError(message, key=key) from e


class GCSSnapshotStore(SnapshotStoreBlueprint):
    """Snapshots kept as ``<prefix><project_id>.json`` objects in one bucket."""

    def __init__(self, config: GCPConfig):
        """Initialize the GCS client.

        Args:
            config: GCP config; ``bucket`` is required, ``prefix`` optional.

        Raises:
            ValueError: If no bucket is configured.
        """
        if not config.bucket:
            raise ValueError(
                "GCS snapshot store needs a bucket. Set it explicitly or via "
                "RHELSWAP_GCS_BUCKET."
            )
        self.client = gcs.Client(project=config.project_id, credentials=config.credentials)
        self.bucket = self.client.bucket(config.bucket)
        self.prefix = config.prefix

    def _object_name(self, key: str) -> str:
        return f"{self.prefix}{key}.json"

    def read(self, key: str) -> bytes | None:
        """Download the snapshot blob, or None if the object does not exist."""
        try:
            return self.bucket.blob(self._object_name(key)).download_as_bytes()
        except NotFound:
            return None
        except GoogleCloudError as e:
            _handle_error(e, f"Failed to read snapshot '{key}'.", key)

    def write(self, key: str, blob: bytes) -> None:
        """Upload the snapshot blob."""
        try:
            self.bucket.blob(self._object_name(key)).upload_from_string(
                blob, content_type="application/json"
            )
        except GoogleCloudError as e:
            _handle_error(e, f"Failed to write snapshot '{key}'.", key)

    def delete(self, key: str) -> bool:
        """Delete the snapshot object; False if it did not exist."""
        try:
            self.bucket.blob(self._object_name(key)).delete()
            return True
        except NotFound:
            return False
        except GoogleCloudError as e:
            _handle_error(e, f"Failed to delete snapshot '{key}'.", key)

    def stat(self, key: str) -> StoreStat:
        """Report existence and size of the snapshot object."""
        try:
            blob = self.bucket.get_blob(self._object_name(key))
        except GoogleCloudError as e:
            _handle_error(e, f"Failed to stat snapshot '{key}'.", key)
        if blob is None:
            return StoreStat(exists=False)
        return StoreStat(exists=True, size=blob.size or 0)
