"""Change notifier blueprint."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ChangeNotifierBlueprint(ABC):
    """Abstract fan-out of "data for project X changed" events.

    Delivery guarantees belong to the implementation; callers treat
    :meth:`notify` as fire-and-forget.

    Event kinds emitted by the dashboard:
        - ``instances-updated``: a fresh instance list was fetched.
        - ``cache-cleared``: the project's snapshot was dropped.
        - ``license-update-progress``: a license update started,
          completed or failed.
    """

    @abstractmethod
    def notify(self, project_id: str, event_kind: str, payload: dict[str, Any]) -> None:
        """Publish one event for *project_id*.

        Args:
            project_id: Project whose data changed.
            event_kind: Event name (see class docstring).
            payload: JSON-serialisable event body.

        Raises:
            NotifierError: If the event could not be handed off.
        """
