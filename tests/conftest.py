from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from schedule_board.analytics import RecordingAnalytics
from schedule_board.constants import TOUCH_MOVE, TOUCH_START
from schedule_board.device import DeviceClass
from schedule_board.dialogs import RecordingDialogLauncher
from schedule_board.loop import ManualLoop
from schedule_board.models import Task
from schedule_board.store import TaskStore
from schedule_board.touch import TouchEvent
from schedule_board.view import ScheduleView

DAY = datetime(2025, 1, 6)


def at(hour: float) -> datetime:
    return DAY + timedelta(minutes=int(hour * 60))


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Build a task from hour offsets on a fixed day."""

    def _make(
        task_id: str,
        start: float,
        end: float,
        participants: list[str] | None = None,
        column_id: str = "room-a",
        title: str | None = None,
        **extra: Any,
    ) -> Task:
        return Task(
            id=task_id,
            column_id=column_id,
            title=title or task_id.title(),
            start=at(start),
            end=at(end),
            participants=list(participants or []),
            **extra,
        )

    return _make


@pytest.fixture
def loop() -> ManualLoop:
    return ManualLoop()


@pytest.fixture
def store(make_task: Callable[..., Task]) -> TaskStore:
    return TaskStore(
        [
            make_task("standup", 9, 10, ["ann"], title="Standup"),
            make_task("review", 11, 12, ["bob"], title="Review"),
        ]
    )


class FakeHaptics:
    def __init__(self) -> None:
        self.pulses: list[int] = []

    def vibrate(self, duration_ms: int) -> None:
        self.pulses.append(duration_ms)


@pytest.fixture
def haptics() -> FakeHaptics:
    return FakeHaptics()


@pytest.fixture
def dialogs() -> RecordingDialogLauncher:
    return RecordingDialogLauncher()


@pytest.fixture
def analytics() -> RecordingAnalytics:
    return RecordingAnalytics()


@pytest.fixture
def device() -> DeviceClass:
    return DeviceClass(is_mobile=True)


@pytest.fixture
def view(
    store: TaskStore,
    loop: ManualLoop,
    device: DeviceClass,
    dialogs: RecordingDialogLauncher,
    analytics: RecordingAnalytics,
    haptics: FakeHaptics,
) -> ScheduleView:
    schedule = ScheduleView(
        "room-a",
        store,
        loop,
        device=device,
        dialogs=dialogs,
        analytics=analytics,
        haptics=haptics,
    )
    schedule.attach()
    return schedule


@pytest.fixture
def drag_library(view: ScheduleView) -> list[TouchEvent]:
    """Touch events that got past the recognizer to a bubble-phase listener."""
    seen: list[TouchEvent] = []
    for event_type in (TOUCH_START, TOUCH_MOVE):
        view.container.add_event_listener(event_type, seen.append)
    return seen
