"""Provide the public `schedule_board` package exports."""

from __future__ import annotations

from .conflicts import ConflictScope, has_participant_conflict, task_color
from .gestures import GesturePhase, GestureRecognizer
from .models import Column, Resizable, Task, TaskColor, VisualEvent
from .projection import EventProjection, project_events
from .store import ColumnStore, TaskStore
from .synthesizer import TouchEventSynthesizer
from .view import ScheduleView

__all__ = [
    "Column",
    "ColumnStore",
    "ConflictScope",
    "EventProjection",
    "GesturePhase",
    "GestureRecognizer",
    "Resizable",
    "ScheduleView",
    "Task",
    "TaskColor",
    "TaskStore",
    "TouchEventSynthesizer",
    "VisualEvent",
    "has_participant_conflict",
    "project_events",
    "task_color",
]
