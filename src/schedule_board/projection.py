"""Project stored tasks into the renderable events of one calendar column."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Union

from loguru import logger

from .analytics import AnalyticsSink, safe_track
from .config import ViewConfig
from .conflicts import ConflictScope, conflict_color, has_participant_conflict
from .constants import (
    ANALYTICS_OPEN_EDIT_TASK,
    ANALYTICS_OPEN_NEW_TASK,
    ANALYTICS_TASK_DRAG_RESIZE,
    NEUTRAL_COLOR,
)
from .device import DeviceClass
from .dialogs import DialogAction, DialogKind, DialogLauncher, format_list
from .models import Resizable, Task, TaskColor, VisualEvent
from .store import TaskStore


def project_events(
    all_tasks: Iterable[Task],
    column_id: str,
    *,
    is_mobile: bool,
    scope: ConflictScope = ConflictScope.WORKSPACE,
) -> list[VisualEvent]:
    """Build the visual events of `column_id` from the whole task set.

    Args:
        all_tasks: Every task in the workspace.
        column_id: Column being displayed.
        is_mobile: When True every event is made non-resizable.
        scope: Check conflicts against the whole workspace (default) or only
            against the displayed column.

    Returns:
        A fresh list in store order. Nothing is reused from earlier builds.
    """
    tasks = list(all_tasks)
    column_tasks = [t for t in tasks if t.column_id == column_id]
    candidates = tasks if scope == ConflictScope.WORKSPACE else column_tasks
    events: list[VisualEvent] = []
    for task in column_tasks:
        conflict = has_participant_conflict(task, candidates)
        events.append(
            VisualEvent(
                id=task.id,
                column_id=task.column_id,
                title=task.title,
                start=task.start,
                end=task.end,
                participants=tuple(task.participants),
                draggable=task.draggable,
                resizable=Resizable.disabled() if is_mobile else task.resizable,
                color=conflict_color(conflict),
                conflict=conflict,
            )
        )
    return events


class EventProjection:
    """Keep the visual events of one column in sync with the task store.

    Any store emission or device-class change triggers a full rebuild.
    """

    def __init__(
        self,
        column_id: str,
        store: TaskStore,
        device: DeviceClass,
        *,
        dialogs: Optional[DialogLauncher] = None,
        analytics: Optional[AnalyticsSink] = None,
        scope: ConflictScope = ConflictScope.WORKSPACE,
        view: Optional[ViewConfig] = None,
    ) -> None:
        self.column_id = column_id
        self.store = store
        self.device = device
        self.dialogs = dialogs
        self.analytics = analytics
        self.scope = scope
        self.view = view or ViewConfig()
        self.events: list[VisualEvent] = []
        self._refresh_listeners: list[Callable[[list[VisualEvent]], None]] = []
        self._unsubscribers: list[Callable[[], None]] = []

    # -- lifecycle ----------------------------------------------------------

    def attach(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers.append(self.store.subscribe(self.rebuild))
        self._unsubscribers.append(self.device.subscribe(lambda _mobile: self.rebuild()))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def on_refresh(self, callback: Callable[[list[VisualEvent]], None]) -> None:
        self._refresh_listeners.append(callback)

    # -- projection ---------------------------------------------------------

    def rebuild(self, all_tasks: Optional[list[Task]] = None) -> list[VisualEvent]:
        tasks = self.store.tasks if all_tasks is None else all_tasks
        self.events = project_events(
            tasks,
            self.column_id,
            is_mobile=self.device.is_mobile,
            scope=self.scope,
        )
        logger.debug(
            "Column {} rebuilt: {} event(s), {} in conflict",
            self.column_id,
            len(self.events),
            sum(1 for e in self.events if e.conflict),
        )
        for callback in list(self._refresh_listeners):
            callback(self.events)
        return self.events

    def find(self, task_id: Optional[str]) -> Optional[VisualEvent]:
        if not task_id:
            return None
        for event in self.events:
            if event.id == task_id:
                return event
        return None

    def find_by_text(self, text: Optional[str]) -> Optional[VisualEvent]:
        """Return the first event whose title prefixes `text`."""
        text = (text or "").strip()
        if not text:
            return None
        for event in self.events:
            if text.startswith(event.title):
                return event
        return None

    # -- write-back ---------------------------------------------------------

    def _resizable(self) -> Resizable:
        return Resizable.disabled() if self.device.is_mobile else Resizable.enabled()

    def _normalized(self, task: Task) -> Task:
        return replace(
            task,
            color=TaskColor.named(NEUTRAL_COLOR),
            draggable=True,
            resizable=self._resizable(),
        )

    def _to_task(self, event: VisualEvent, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Task:
        return Task(
            id=event.id,
            column_id=self.column_id,
            title=event.title,
            start=start or event.start,
            end=end or event.end,
            participants=list(event.participants),
            draggable=True,
            resizable=self._resizable(),
            color=TaskColor.named(NEUTRAL_COLOR),
        )

    def event_times_changed(self, event_id: str, new_start: datetime, new_end: Optional[datetime] = None) -> None:
        """Apply a drag/resize result and write every column task back.

        Every event of the column is pushed to the store, not only the moved
        one, so derived fields are normalized across the column. A missing
        `new_end` keeps the original duration; a range that does not move
        forward in time is ignored.
        """
        safe_track(self.analytics, ANALYTICS_TASK_DRAG_RESIZE)
        moved = self.find(event_id)
        if new_end is None and moved is not None:
            new_end = new_start + (moved.end - moved.start)
        if new_end is None or not new_start < new_end:
            logger.warning("Ignoring time change for {}: {} -> {}", event_id, new_start, new_end)
            return

        updated = [
            self._to_task(event, new_start, new_end) if event.id == event_id else self._to_task(event)
            for event in self.events
        ]
        for task in updated:
            self.store.update_task(task)

    def add_task(self, task: Task) -> None:
        self.store.add_task(self._normalized(task))

    def edit_task(self, task: Task) -> None:
        self.store.update_task(self._normalized(task))

    def delete_task(self, task_id: str) -> None:
        self.store.delete_task(task_id)

    # -- dialogs ------------------------------------------------------------

    def handle_event(self, kind: DialogKind, payload: Union[VisualEvent, datetime]) -> Optional[DialogAction]:
        """Raise the dialog action for a selected task or an empty segment.

        Args:
            kind: ``"task"`` with a `VisualEvent` payload, or ``"segment"``
                with the segment start as payload.

        Returns:
            The action handed to the launcher, or None for an unusable payload.
        """
        if kind == "segment" and isinstance(payload, datetime):
            safe_track(self.analytics, ANALYTICS_OPEN_NEW_TASK)
            task = Task(
                column_id=self.column_id,
                start=payload,
                end=payload + timedelta(minutes=self.view.segment_minutes),
            )
            action = DialogAction(kind="segment", task=task, save_handler=self.add_task)
        elif kind == "task" and isinstance(payload, VisualEvent):
            safe_track(self.analytics, ANALYTICS_OPEN_EDIT_TASK)
            action = DialogAction(
                kind="task",
                task=self._to_task(payload),
                title=payload.title,
                subtitle=format_list(list(payload.participants)) or None,
                save_handler=self.edit_task,
                delete_handler=self.delete_task,
            )
        else:
            return None
        if self.dialogs is not None:
            self.dialogs.open(action)
        return action
