"""Load optional board configuration from `.schedule_board/config.yaml`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from .conflicts import ConflictScope
from .constants import (
    CONFIG_FILE,
    DEFAULT_DAY_END_HOUR,
    DEFAULT_DAY_START_HOUR,
    DEFAULT_HAPTIC_PULSE_MS,
    DEFAULT_LONG_PRESS_DELAY_MS,
    DEFAULT_MOVE_THRESHOLD_PX,
    DEFAULT_SEGMENTS_BY_HOUR,
    DEFAULT_SYNTHETIC_MOVE_DELAY_MS,
    DEFAULT_TAP_MAX_DURATION_MS,
    STATE_DIR_NAME,
)
from .io_utils import _load_data_with_error


@dataclass(frozen=True)
class GestureConfig:
    """Thresholds that separate tap, scroll, and long-press drag."""

    long_press_delay_ms: float = DEFAULT_LONG_PRESS_DELAY_MS
    move_threshold_px: float = DEFAULT_MOVE_THRESHOLD_PX
    tap_max_duration_ms: float = DEFAULT_TAP_MAX_DURATION_MS
    synthetic_move_delay_ms: float = DEFAULT_SYNTHETIC_MOVE_DELAY_MS
    haptic_pulse_ms: int = DEFAULT_HAPTIC_PULSE_MS


@dataclass(frozen=True)
class ViewConfig:
    """Day grid of the calendar view."""

    segments_by_hour: int = DEFAULT_SEGMENTS_BY_HOUR
    day_start_hour: int = DEFAULT_DAY_START_HOUR
    day_end_hour: int = DEFAULT_DAY_END_HOUR

    @property
    def segment_minutes(self) -> float:
        return 60 / self.segments_by_hour


def load_board_config(project_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional board config file.

    Args:
        project_dir: Directory holding the `.schedule_board/` folder.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    path = project_dir.resolve() / STATE_DIR_NAME / CONFIG_FILE
    data, err = _load_data_with_error(path, {})
    if err:
        logger.warning("Ignoring board config: {}", err)
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _positive_number(raw: Any, default: float) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return default
    return raw if raw > 0 else default


def get_gesture_config(config: dict[str, Any]) -> GestureConfig:
    """Extract gesture thresholds; missing or invalid values use the defaults."""
    raw = _get_nested(config, "gestures")
    raw = raw if isinstance(raw, dict) else {}
    return GestureConfig(
        long_press_delay_ms=_positive_number(raw.get("long_press_delay_ms"), DEFAULT_LONG_PRESS_DELAY_MS),
        move_threshold_px=_positive_number(raw.get("move_threshold_px"), DEFAULT_MOVE_THRESHOLD_PX),
        tap_max_duration_ms=_positive_number(raw.get("tap_max_duration_ms"), DEFAULT_TAP_MAX_DURATION_MS),
        synthetic_move_delay_ms=_positive_number(
            raw.get("synthetic_move_delay_ms"), DEFAULT_SYNTHETIC_MOVE_DELAY_MS
        ),
        haptic_pulse_ms=int(_positive_number(raw.get("haptic_pulse_ms"), DEFAULT_HAPTIC_PULSE_MS)),
    )


def get_view_config(config: dict[str, Any]) -> ViewConfig:
    """Extract the day grid settings of the calendar view."""
    raw = _get_nested(config, "view")
    raw = raw if isinstance(raw, dict) else {}
    segments = int(_positive_number(raw.get("segments_by_hour"), DEFAULT_SEGMENTS_BY_HOUR))
    start = raw.get("day_start_hour")
    end = raw.get("day_end_hour")
    start = start if isinstance(start, int) and 0 <= start <= 23 else DEFAULT_DAY_START_HOUR
    end = end if isinstance(end, int) and 0 <= end <= 23 else DEFAULT_DAY_END_HOUR
    if end < start:
        start, end = DEFAULT_DAY_START_HOUR, DEFAULT_DAY_END_HOUR
    return ViewConfig(segments_by_hour=segments, day_start_hour=start, day_end_hour=end)


def get_conflict_scope(config: dict[str, Any]) -> ConflictScope:
    raw = _get_nested(config, "conflicts", "scope")
    try:
        return ConflictScope(str(raw))
    except ValueError:
        return ConflictScope.WORKSPACE
