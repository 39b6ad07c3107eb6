"""
Per-project SDK client registry.

Compute Engine clients are built once per (project, client kind) and
reused across calls.  The registry is an explicit object handed to the
directory by whichever layer composes the application, so tests and
multiple dashboards in one process do not share hidden module state.
"""

from __future__ import annotations

import threading
from typing import Any, Callable


class ClientRegistry:
    """Thread-safe, in-process cache of SDK clients keyed by project id and kind."""

    def __init__(self) -> None:
        self._cache: dict[tuple[str, str], Any] = {}
        self._lock = threading.Lock()

    def get_or_create(
        self,
        project_id: str,
        kind: str,
        factory: Callable[[], Any],
    ) -> Any:
        """Return a cached client or create one via *factory*.

        Args:
            project_id: Project the client is used for.
            kind: Client kind (e.g. 'instances', 'disks').
            factory: Zero-argument callable that builds a new client.

        Returns:
            The cached (or newly-created) client.
        """
        key = (project_id, kind)
        with self._lock:
            if key not in self._cache:
                self._cache[key] = factory()
            return self._cache[key]

    def projects(self) -> list[str]:
        """Project ids that currently hold at least one client."""
        with self._lock:
            return sorted({project for project, _ in self._cache})

    def clear(self, project_id: str | None = None) -> None:
        """Drop cached clients for one project, or for every project."""
        with self._lock:
            if project_id is None:
                self._cache.clear()
                return
            for key in [k for k in self._cache if k[0] == project_id]:
                del self._cache[key]
