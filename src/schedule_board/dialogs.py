"""Dialog actions raised when a task or an empty segment is selected."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional, Protocol

from .models import Task

DialogKind = Literal["task", "segment"]


@dataclass
class DialogAction:
    """Payload handed to the dialog launcher.

    ``kind == "task"`` edits an existing task (save and delete handlers set,
    participants joined into ``subtitle``);
    ``kind == "segment"`` creates a new task (save handler only).
    """

    kind: DialogKind
    task: Task
    title: Optional[str] = None
    subtitle: Optional[str] = None
    save_handler: Optional[Callable[[Task], None]] = None
    delete_handler: Optional[Callable[[str], None]] = None
    options: dict[str, Any] = field(default_factory=lambda: {
        "size": "lg",
        "backdrop": "static",
        "scrollable": True,
        "keyboard": True,
    })


class DialogLauncher(Protocol):
    def open(self, action: DialogAction) -> None: ...


class RecordingDialogLauncher:
    """Launcher that keeps every action it receives."""

    def __init__(self) -> None:
        self.actions: list[DialogAction] = []

    def open(self, action: DialogAction) -> None:
        self.actions.append(action)


def format_list(items: list[str]) -> str:
    """Join names the way an English conjunction list reads.

    >>> format_list(["Ann", "Bob", "Cy"])
    'Ann, Bob, and Cy'
    """
    items = [str(i) for i in items]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return ", ".join(items[:-1]) + f", and {items[-1]}"
