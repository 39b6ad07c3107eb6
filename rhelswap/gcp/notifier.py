"""GCP Pub/Sub implementation of the change notifier blueprint."""

from __future__ import annotations

import json
from typing import Any

from google.cloud import pubsub_v1  # type: ignore[attr-defined]

from rhelswap.base.config import GCPConfig
from rhelswap.base.exceptions import NotifierError
from rhelswap.base.notifier import ChangeNotifierBlueprint


class PubSubNotifier(ChangeNotifierBlueprint):
    """Publishes change events to one Pub/Sub topic.

    Each message body is the JSON payload; ``project_id`` and ``event`` are
    set as message attributes so subscribers can filter per project.

    Attributes:
        publisher: Pub/Sub publisher client.
        topic_path: Fully-qualified topic path.
    """

    def __init__(self, config: GCPConfig) -> None:
        """Initialize the Pub/Sub publisher.

        Args:
            config: GCP config; ``project_id`` and ``topic`` are required.

        Raises:
            ValueError: If the project or topic is missing.
        """
        if not config.project_id or not config.topic:
            raise ValueError(
                "Pub/Sub notifier needs project_id and topic. Set them explicitly "
                "or via GOOGLE_CLOUD_PROJECT / RHELSWAP_PUBSUB_TOPIC."
            )
        self.publisher = pubsub_v1.PublisherClient(credentials=config.credentials)
        self.topic_path: str = self.publisher.topic_path(config.project_id, config.topic)

    def notify(self, project_id: str, event_kind: str, payload: dict[str, Any]) -> None:
        """Publish one event and wait for the message id.

        Raises:
            NotifierError: If publishing fails.
        """
        body = json.dumps(payload, default=str).encode("utf-8")
        try:
            future = self.publisher.publish(
                self.topic_path, body, project_id=project_id, event=event_kind
            )
            future.result()
        except Exception as e:
            raise NotifierError(
                f"Failed to publish '{event_kind}' for project '{project_id}'"
            ) from e
