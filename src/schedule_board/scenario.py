"""Load scenario files and replay touch traces against a column view.

A scenario is a YAML (or JSON) mapping::

    column: room-a
    mobile: true
    tasks:
      - {id: t1, columnId: room-a, title: Standup, start: ..., end: ..., participants: [ann]}
    touches:
      - {type: start, at_ms: 0, x: 100, y: 100, task: t1}
      - {type: end, at_ms: 200, x: 102, y: 101}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .analytics import RecordingAnalytics
from .config import GestureConfig, ViewConfig
from .conflicts import ConflictScope
from .constants import GESTURE_MARKER_CLASSES, TOUCH_MOVE, TOUCH_START
from .device import DeviceClass
from .dialogs import RecordingDialogLauncher
from .dom import Element
from .io_utils import _load_data_with_error
from .logging_utils import summarize_gesture, summarize_touch_event
from .loop import ManualLoop
from .models import Task
from .store import TaskStore
from .touch import TouchEvent, touch_cancel, touch_end, touch_move, touch_start
from .view import ScheduleView

_TOUCH_FACTORIES = {
    "start": touch_start,
    "move": touch_move,
    "end": touch_end,
    "cancel": touch_cancel,
}


@dataclass
class TouchStep:
    type: str
    at_ms: float
    x: float = 0.0
    y: float = 0.0
    task: Optional[str] = None


@dataclass
class Scenario:
    tasks: list[Task]
    column: Optional[str] = None
    mobile: bool = False
    touches: list[TouchStep] = field(default_factory=list)

    @property
    def column_id(self) -> str:
        if self.column:
            return self.column
        return self.tasks[0].column_id if self.tasks else ""


def parse_scenario(data: dict[str, Any]) -> tuple[Optional[Scenario], Optional[str]]:
    """Build a `Scenario` from raw data, returning `(scenario, error)`."""
    try:
        tasks = [Task.from_dict(t) for t in list(data.get("tasks") or []) if isinstance(t, dict)]
    except ValueError as exc:
        return None, f"invalid task: {exc}"

    steps: list[TouchStep] = []
    for idx, raw in enumerate(list(data.get("touches") or [])):
        if not isinstance(raw, dict) or raw.get("type") not in _TOUCH_FACTORIES:
            return None, f"touches[{idx}]: type must be one of {sorted(_TOUCH_FACTORIES)}"
        try:
            steps.append(
                TouchStep(
                    type=str(raw["type"]),
                    at_ms=float(raw.get("at_ms", 0)),
                    x=float(raw.get("x", 0)),
                    y=float(raw.get("y", 0)),
                    task=str(raw["task"]) if raw.get("task") is not None else None,
                )
            )
        except (TypeError, ValueError) as exc:
            return None, f"touches[{idx}]: {exc}"
    steps.sort(key=lambda s: s.at_ms)

    column = data.get("column")
    return Scenario(
        tasks=tasks,
        column=str(column) if column else None,
        mobile=bool(data.get("mobile", False)),
        touches=steps,
    ), None


def load_scenario(path: Path) -> tuple[Optional[Scenario], Optional[str]]:
    if not path.exists():
        return None, f"{path}: not found"
    data, err = _load_data_with_error(path, {})
    if err:
        return None, err
    return parse_scenario(data)


def replay(
    scenario: Scenario,
    *,
    gesture_config: Optional[GestureConfig] = None,
    view_config: Optional[ViewConfig] = None,
    scope: ConflictScope = ConflictScope.WORKSPACE,
) -> dict[str, Any]:
    """Replay the scenario's touches on a virtual clock and report what happened."""
    loop = ManualLoop()
    store = TaskStore(scenario.tasks)
    dialogs = RecordingDialogLauncher()
    analytics = RecordingAnalytics()
    view = ScheduleView(
        scenario.column_id,
        store,
        loop,
        device=DeviceClass(is_mobile=scenario.mobile),
        dialogs=dialogs,
        analytics=analytics,
        gesture_config=gesture_config,
        view_config=view_config,
        scope=scope,
    )
    view.attach()

    # stands in for the drag library: sees whatever the recognizer lets through
    reached_library: list[TouchEvent] = []
    for event_type in (TOUCH_START, TOUCH_MOVE):
        view.container.add_event_listener(event_type, reached_library.append)

    gestures: list[Optional[str]] = []
    target: Element = view.container
    for step in scenario.touches:
        loop.advance_to(step.at_ms)
        if step.type == "start":
            target = (view.element_for(step.task) if step.task else None) or view.container
        event = _TOUCH_FACTORIES[step.type](step.x, step.y)
        target.dispatch_event(event)
        if step.type in {"end", "cancel"}:
            outcome = view.recognizer.last_outcome
            gestures.append(outcome.value if outcome is not None else None)
    config = view.gesture_config
    loop.advance(config.long_press_delay_ms + config.synthetic_move_delay_ms)

    marks = {
        task_id: sorted(c for c in element.classes if c in GESTURE_MARKER_CLASSES)
        for task_id, element in view.elements.items()
    }
    return {
        "column": scenario.column_id,
        "gestures": gestures,
        "phase": view.recognizer.phase.value,
        "recognizer": summarize_gesture(view.recognizer),
        "dialogs": [
            {"kind": a.kind, "task_id": a.task.id, "title": a.title, "subtitle": a.subtitle}
            for a in dialogs.actions
        ],
        "synthetic_events": [summarize_touch_event(e) for e in view.synthesizer.history],
        "drag_library_events": [summarize_touch_event(e) for e in reached_library],
        "analytics": list(analytics.events),
        "marks": {k: v for k, v in marks.items() if v},
    }
