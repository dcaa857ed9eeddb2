"""Detect participant double-booking between tasks and map it to a color.

Two tasks conflict when their time ranges overlap (open intervals, so
back-to-back tasks do not) and they share at least one participant. The check
for one task is linear in the task set; a full refresh is quadratic, which is
fine for hand-scheduled calendars.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Iterable

from .constants import CONFLICT_COLOR, NEUTRAL_COLOR
from .models import Task, TaskColor


class ConflictScope(str, Enum):
    """Which tasks a task is checked against."""

    WORKSPACE = "workspace"
    COLUMN = "column"


def time_ranges_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    return start1 < end2 and start2 < end1


def conflicts_with(task: Task, other: Task) -> bool:
    """Return True if two distinct tasks overlap in time and share a participant."""
    if task.id == other.id:
        return False
    if not time_ranges_overlap(task.start, task.end, other.start, other.end):
        return False
    return not task.participant_set().isdisjoint(other.participants)


def has_participant_conflict(task: Task, all_tasks: Iterable[Task]) -> bool:
    """Return True if `task` conflicts with any other task in `all_tasks`.

    Args:
        task: Task under test.
        all_tasks: Candidate set. Pass the whole workspace, not the column
            subset, to surface double-booking across columns.
    """
    return any(conflicts_with(task, other) for other in all_tasks)


def conflict_color(conflict: bool) -> TaskColor:
    return TaskColor.named(CONFLICT_COLOR if conflict else NEUTRAL_COLOR)


def task_color(task: Task, all_tasks: Iterable[Task]) -> TaskColor:
    return conflict_color(has_participant_conflict(task, all_tasks))


def conflicting_pairs(tasks: list[Task]) -> list[tuple[str, str]]:
    """List every conflicting pair of task ids once, in input order."""
    pairs: list[tuple[str, str]] = []
    for idx, task in enumerate(tasks):
        for other in tasks[idx + 1:]:
            if conflicts_with(task, other):
                pairs.append((task.id, other.id))
    return pairs
