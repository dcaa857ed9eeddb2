"""Fire-and-forget usage analytics.

The board reports a handful of named interactions (drag/resize, dialog
opens, column reorder). A sink is optional: the default discards everything,
and a failing sink never interrupts the interaction that reported to it.
"""

from __future__ import annotations

from typing import Optional, Protocol

from loguru import logger


class AnalyticsSink(Protocol):
    def track(self, event_name: str) -> None: ...


class NullAnalytics:
    """Sink that drops every event."""

    def track(self, event_name: str) -> None:
        return None


class LoggingAnalytics:
    """Sink that writes each event to the debug log."""

    def track(self, event_name: str) -> None:
        logger.debug("analytics: {}", event_name)


class RecordingAnalytics:
    """Sink that keeps the tracked event names in order."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def track(self, event_name: str) -> None:
        self.events.append(event_name)


def safe_track(sink: Optional[AnalyticsSink], event_name: str) -> None:
    """Report `event_name` to `sink` without ever raising.

    Args:
        sink: Analytics sink, or None when analytics is unavailable.
        event_name: Interaction name, e.g. ``task-drag-resize``.
    """
    if sink is None:
        return
    try:
        sink.track(event_name)
    except Exception as e:
        logger.warning("Analytics sink failed for {}: {}", event_name, e)
