"""Domain event constants and publisher.

Events are logged and buffered in-memory so tests can observe them through
the test-support routes.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

ORDER_PLACED = "order.placed"
DATA_EXPORT_COMPLETED = "data_export.completed"
DATA_EXPORT_REJECTED = "data_export.rejected"


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


EVENT_BUFFER: List[Dict[str, Any]] = []


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "ORDER_PLACED",
    "DATA_EXPORT_COMPLETED",
    "DATA_EXPORT_REJECTED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
