"""
JSON logging for cache reads and license swaps.

Every record is a single JSON line.  Besides level and message it carries
whichever of ``project_id``, ``zone``, ``instance`` and ``operation`` the
caller supplied, plus a ``request_id``, so one project's refreshes or one
instance's stop / set-license / start sequence can be pulled out of a
shared log with a simple field filter.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

_CONTEXT_KEYS = ("request_id", "project_id", "zone", "instance", "operation")


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON object; unset context keys are omitted."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in _CONTEXT_KEYS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry)


class RhelswapLogger:
    """Logger used by the cache, the updater and the backends.

    The context keywords are optional on every call; the cache passes the
    project, the updater adds the zone and instance being swapped.
    """

    def __init__(self, name: str = "rhelswap") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        project_id: str | None = None,
        zone: str | None = None,
        instance: str | None = None,
        operation: str | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Log *message* with the given project / instance context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            project_id: Inspected project.
            zone: Compute zone of the instance, if any.
            instance: Instance name, for license swap steps.
            operation: Cache or updater step (``get_data``, ``stop_instance``...).
            request_id: Correlation id; a short random one is used if omitted.
            exc_info: Attach the active exception.
        """
        context = {
            "project_id": project_id,
            "zone": zone,
            "instance": instance,
            "operation": operation,
            "request_id": request_id or uuid.uuid4().hex[:12],
        }
        self.logger.log(level, message, extra=context, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


rs_logger = RhelswapLogger()
