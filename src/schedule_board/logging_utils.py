"""Format gesture and projection state for logs and CLI output."""

import json
import sys
from typing import Any

from loguru import logger


def configure_logging(level: str = "WARNING") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan> "
            "{message}"
        ),
    )


def summarize_gesture(recognizer: Any) -> dict[str, Any]:
    """Render a compact, JSON-friendly summary of a recognizer's state.

    Args:
        recognizer: `GestureRecognizer` instance (or None).

    Returns:
        A dictionary suitable for logging or serialization.
    """
    if recognizer is None:
        return {"gesture": None}

    state = recognizer.state
    d: dict[str, Any] = {"phase": getattr(state.phase, "value", str(state.phase))}
    outcome = getattr(recognizer, "last_outcome", None)
    d["last_outcome"] = getattr(outcome, "value", None)
    if state.task_id:
        d["task_id"] = state.task_id
    if state.origin is not None:
        d["origin"] = [state.origin.client_x, state.origin.client_y]
        d["started_at"] = state.started_at
    d["timer_pending"] = state.timer is not None
    if state.element is not None:
        d["marks"] = sorted(state.element.classes)
    return d


def summarize_touch_event(event: Any) -> dict[str, Any]:
    """Summarize a (possibly synthetic) touch event."""
    point = event.touches[0] if event.touches else (event.changed_touches[0] if event.changed_touches else None)
    d: dict[str, Any] = {"type": event.type, "synthetic": bool(getattr(event, "synthetic", False))}
    if point is not None:
        d["identifier"] = point.identifier
        d["x"] = point.client_x
        d["y"] = point.client_y
    return d


def pretty(obj: Any, *, indent: int = 2) -> str:
    """Serialize an object as JSON for readable logs.

    Args:
        obj: Object to serialize.
        indent: Indentation level for JSON output.

    Returns:
        A JSON string when possible; otherwise `str(obj)`.
    """
    try:
        return json.dumps(obj, indent=indent, default=str)
    except (TypeError, ValueError):
        return str(obj)
