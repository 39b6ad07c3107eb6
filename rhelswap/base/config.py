"""
Pydantic configuration models for backends and core components.

Validates configs at initialization time instead of silently passing
bad values to SDK clients or to the cache / updater loops.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


class GCPConfig(BaseModel):
    """Configuration for Google Cloud backends.

    Values are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (GOOGLE_CLOUD_PROJECT, GOOGLE_APPLICATION_CREDENTIALS,
       RHELSWAP_GCS_BUCKET, RHELSWAP_PUBSUB_TOPIC).
    3. If neither is set, fields are left as None so the GCP SDK can fall back
       to Application Default Credentials (ADC).

    ``project_id`` is the project that hosts the bucket / topic.  The compute
    directory itself is multi-project and receives the inspected project id
    on every call.
    """

    model_config = ConfigDict(extra="forbid")

    project_id: str | None = Field(default=None, description="Hosting GCP project ID")
    credentials: Any | None = Field(default=None, description="GCP credentials object")
    credentials_path: str | None = Field(
        default=None, description="Path to service account JSON key file"
    )
    bucket: str | None = Field(default=None, description="GCS bucket holding snapshots")
    prefix: str = Field(default="state/", description="Object name prefix for snapshots")
    topic: str | None = Field(default=None, description="Pub/Sub topic for change events")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing config."""
        if not values.get("project_id"):
            values["project_id"] = os.environ.get("GOOGLE_CLOUD_PROJECT") or os.environ.get(
                "GCLOUD_PROJECT"
            )
        if not values.get("credentials_path"):
            values["credentials_path"] = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        if not values.get("bucket"):
            values["bucket"] = os.environ.get("RHELSWAP_GCS_BUCKET")
        if not values.get("topic"):
            values["topic"] = os.environ.get("RHELSWAP_PUBSUB_TOPIC")
        return values

    @model_validator(mode="after")
    def load_credentials(self) -> GCPConfig:
        """Load credentials from the key file when no object was given."""
        if self.credentials is None and self.credentials_path:
            path = Path(self.credentials_path)
            if not path.exists():
                raise ValueError(f"Credentials file not found: {self.credentials_path}")
            from google.oauth2 import service_account  # lazy import

            self.credentials = service_account.Credentials.from_service_account_file(
                str(path)
            )
        return self


class LocalConfig(BaseModel):
    """Configuration for the filesystem / in-process backends."""

    model_config = ConfigDict(extra="forbid")

    state_dir: str = Field(default="data/state", description="Directory for snapshot files")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to RHELSWAP_STATE_DIR for the state directory."""
        if not values.get("state_dir") and os.environ.get("RHELSWAP_STATE_DIR"):
            values["state_dir"] = os.environ["RHELSWAP_STATE_DIR"]
        return values


class CacheConfig(BaseModel):
    """Snapshot cache settings.

    The TTL is process-wide and shared by every project.
    """

    model_config = ConfigDict(extra="forbid")

    ttl_seconds: float = Field(default=300.0, gt=0, description="Snapshot freshness window")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to RHELSWAP_CACHE_TTL (seconds)."""
        if values.get("ttl_seconds") is None and os.environ.get("RHELSWAP_CACHE_TTL"):
            values["ttl_seconds"] = os.environ["RHELSWAP_CACHE_TTL"]
        return values


class UpdaterConfig(BaseModel):
    """Polling policy for the stop / start steps of a license update."""

    model_config = ConfigDict(extra="forbid")

    poll_interval_seconds: float = Field(default=5.0, gt=0)
    timeout_seconds: float = Field(default=300.0, gt=0)


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "gcp": GCPConfig,
    "local": LocalConfig,
}


def validate_config(provider: str, config: dict) -> BaseModel:
    """Validate and return a typed config model for the given provider.

    Args:
        provider: The backend provider name (e.g. 'gcp', 'local').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the provider is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(provider)
    if model is None:
        raise ValueError(f"No config model registered for provider: {provider}")
    return model(**config)


__all__ = [
    "GCPConfig",
    "LocalConfig",
    "CacheConfig",
    "UpdaterConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
