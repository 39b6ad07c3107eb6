"""In-process implementation of the change notifier blueprint."""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable

from rhelswap.base.logger import rs_logger
from rhelswap.base.notifier import ChangeNotifierBlueprint

Subscriber = Callable[[str, dict[str, Any]], None]


class InProcessNotifier(ChangeNotifierBlueprint):
    """Fans events out to callbacks subscribed to a project's room.

    A WebSocket layer subscribes one callback per connected client and
    relays whatever it receives.  A failing subscriber is logged and
    skipped so the others still get the event.
    """

    def __init__(self, config: Any = None) -> None:
        self._rooms: dict[str, list[Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    @staticmethod
    def room_name(project_id: str) -> str:
        return f"project-{project_id}"

    def subscribe(self, project_id: str, callback: Subscriber) -> None:
        """Join *callback* to the project's room."""
        with self._lock:
            room = self._rooms[self.room_name(project_id)]
            if callback not in room:
                room.append(callback)

    def unsubscribe(self, project_id: str, callback: Subscriber) -> None:
        """Remove *callback* from the project's room, if present."""
        name = self.room_name(project_id)
        with self._lock:
            room = self._rooms.get(name, [])
            if callback in room:
                room.remove(callback)
            if not room:
                self._rooms.pop(name, None)

    def subscribers(self, project_id: str) -> int:
        with self._lock:
            return len(self._rooms.get(self.room_name(project_id), []))

    def notify(self, project_id: str, event_kind: str, payload: dict[str, Any]) -> None:
        with self._lock:
            room = list(self._rooms.get(self.room_name(project_id), []))
        for callback in room:
            try:
                callback(event_kind, payload)
            except Exception:
                rs_logger.error(
                    f"Subscriber failed handling '{event_kind}'",
                    project_id=project_id,
                    operation="notify",
                    exc_info=True,
                )
        rs_logger.debug(
            f"Broadcast '{event_kind}' to {len(room)} subscribers",
            project_id=project_id,
            operation="notify",
        )
