"""In-memory, observable task and column stores.

Every mutation replaces the stored snapshot and notifies subscribers with the
full collection. There is a single writer (the UI thread), so no locking.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from loguru import logger

from .analytics import AnalyticsSink, safe_track
from .constants import ANALYTICS_COLUMN_REORDER
from .models import Column, Task

TasksCallback = Callable[[list[Task]], None]
ColumnsCallback = Callable[[list[Column]], None]


# ---------------------------------------------------------------------------
# TaskStore
# ---------------------------------------------------------------------------

class TaskStore:
    """Single shared collection of tasks across all columns."""

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self._subscribers: list[TasksCallback] = []

    # -- internal helpers ---------------------------------------------------

    def _emit(self) -> None:
        snapshot = self.tasks
        for callback in list(self._subscribers):
            callback(snapshot)

    # -- public API ---------------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        """Return a shallow copy of the current task list."""
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def subscribe(self, callback: TasksCallback) -> Callable[[], None]:
        """Register `callback`, call it with the current tasks, and return an unsubscribe function."""
        self._subscribers.append(callback)
        callback(self.tasks)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def set_tasks(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)
        self._emit()

    def add_task(self, task: Task) -> None:
        self._tasks = [*self._tasks, task]
        logger.debug("Task added: {} ({})", task.id, task.title)
        self._emit()

    def update_task(self, task: Task) -> None:
        """Replace the stored task with the same id; unknown ids are ignored."""
        if self.get(task.id) is None:
            return
        self._tasks = [task if t.id == task.id else t for t in self._tasks]
        self._emit()

    def delete_task(self, task_id: str) -> None:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            return
        self._tasks = remaining
        logger.debug("Task deleted: {}", task_id)
        self._emit()

    def remove_tasks_by_column_id(self, column_id: str) -> None:
        self._tasks = [t for t in self._tasks if t.column_id != column_id]
        self._emit()

    def wipe_tasks(self) -> None:
        self._tasks = []
        self._emit()


# ---------------------------------------------------------------------------
# ColumnStore
# ---------------------------------------------------------------------------

class ColumnStore:
    """Ordered list of calendar columns.

    Removing a column also removes its tasks from the attached `TaskStore`.
    """

    def __init__(
        self,
        tasks: TaskStore,
        columns: Optional[Iterable[Column]] = None,
        analytics: Optional[AnalyticsSink] = None,
    ) -> None:
        self._tasks = tasks
        self._columns: list[Column] = list(columns or [])
        self._analytics = analytics
        self._subscribers: list[ColumnsCallback] = []

    def _emit(self) -> None:
        snapshot = self.columns
        for callback in list(self._subscribers):
            callback(snapshot)

    @property
    def columns(self) -> list[Column]:
        return list(self._columns)

    def subscribe(self, callback: ColumnsCallback) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self.columns)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def set_columns(self, columns: Iterable[Column]) -> None:
        self._columns = list(columns)
        self._emit()

    def add_column(self, title: Optional[str] = None) -> Column:
        column = Column(title=title or f"New Column {len(self._columns) + 1}")
        self._columns = [*self._columns, column]
        self._emit()
        return column

    def remove_column(self, column_id: str) -> None:
        remaining = [c for c in self._columns if c.id != column_id]
        if len(remaining) == len(self._columns):
            return
        self._columns = remaining
        self._tasks.remove_tasks_by_column_id(column_id)
        self._emit()

    def rename_column(self, column_id: str, title: str) -> None:
        self._columns = [Column(id=c.id, title=title) if c.id == column_id else c for c in self._columns]
        self._emit()

    def move_column(self, previous_index: int, current_index: int) -> None:
        """Move a column from one position to another, clamping both indexes."""
        safe_track(self._analytics, ANALYTICS_COLUMN_REORDER)
        if not self._columns:
            return
        last = len(self._columns) - 1
        src = max(0, min(previous_index, last))
        dst = max(0, min(current_index, last))
        if src == dst:
            return
        columns = list(self._columns)
        columns.insert(dst, columns.pop(src))
        self._columns = columns
        self._emit()

    def wipe_columns(self) -> None:
        self._columns = []
        self._emit()
