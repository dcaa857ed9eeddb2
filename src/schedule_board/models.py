"""Define the task, column, and projected calendar-event models."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from .constants import NEUTRAL_COLOR, TASK_COLORS


def _id() -> str:
    return str(uuid.uuid4())


def _parse_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    # naive instants are read as UTC so every parsed time compares with every other
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class TaskColor:
    """Primary (border) and secondary (fill) colors of a calendar event."""

    primary: str
    secondary: str

    @classmethod
    def named(cls, name: str) -> "TaskColor":
        palette = TASK_COLORS.get(name) or TASK_COLORS[NEUTRAL_COLOR]
        return cls(primary=palette["primary"], secondary=palette["secondary"])

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Resizable:
    """Which edges of an event may be dragged to resize it."""

    before_start: bool = True
    after_end: bool = True

    @classmethod
    def disabled(cls) -> "Resizable":
        return cls(before_start=False, after_end=False)

    @classmethod
    def enabled(cls) -> "Resizable":
        return cls(before_start=True, after_end=True)

    def to_dict(self) -> dict[str, bool]:
        return {"beforeStart": self.before_start, "afterEnd": self.after_end}

    @classmethod
    def from_dict(cls, data: Any) -> "Resizable":
        if not isinstance(data, dict):
            return cls()
        return cls(
            before_start=bool(data.get("beforeStart", data.get("before_start", True))),
            after_end=bool(data.get("afterEnd", data.get("after_end", True))),
        )


@dataclass
class Task:
    """A scheduled item owned by one column.

    Fields:
        id: Unique task identifier.
        column_id: Column (room, track) the task is placed in.
        title: Display title; also the visible text of its calendar element.
        start: Start instant, strictly before ``end``.
        end: End instant.
        participants: Participant identifiers; order is kept for display only.
        draggable: Whether the task may be moved.
        resizable: Per-edge resize capability as stored.
        color: Stored display color.
    """

    start: datetime
    end: datetime
    id: str = field(default_factory=_id)
    column_id: str = ""
    title: str = ""
    participants: list[str] = field(default_factory=list)
    draggable: bool = True
    resizable: Resizable = field(default_factory=Resizable)
    color: TaskColor = field(default_factory=lambda: TaskColor.named(NEUTRAL_COLOR))

    def __post_init__(self) -> None:
        try:
            ordered = self.start < self.end
        except TypeError as exc:
            raise ValueError(f"Task {self.id!r} mixes naive and offset-aware times") from exc
        if not ordered:
            raise ValueError(f"Task {self.id!r} must start before it ends")

    def participant_set(self) -> frozenset[str]:
        return frozenset(self.participants)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "columnId": self.column_id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "participants": list(self.participants),
            "draggable": self.draggable,
            "resizable": self.resizable.to_dict(),
            "color": self.color.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create a `Task` from a raw mapping.

        Accepts both ``columnId`` and ``column_id`` spellings.

        Raises:
            ValueError: If ``start``/``end`` are missing, unparseable, or out of order.
        """
        if data.get("start") is None or data.get("end") is None:
            raise ValueError(f"Task {data.get('id')!r} requires start and end")
        color_raw = data.get("color")
        if isinstance(color_raw, dict):
            color = TaskColor(
                primary=str(color_raw.get("primary") or TASK_COLORS[NEUTRAL_COLOR]["primary"]),
                secondary=str(color_raw.get("secondary") or TASK_COLORS[NEUTRAL_COLOR]["secondary"]),
            )
        else:
            color = TaskColor.named(str(color_raw or NEUTRAL_COLOR))
        return cls(
            id=str(data.get("id") or _id()),
            column_id=str(data.get("columnId") or data.get("column_id") or ""),
            title=str(data.get("title") or ""),
            start=_parse_instant(data["start"]),
            end=_parse_instant(data["end"]),
            participants=[str(p) for p in list(data.get("participants") or [])],
            draggable=bool(data.get("draggable", True)),
            resizable=Resizable.from_dict(data.get("resizable")),
            color=color,
        )


@dataclass(frozen=True)
class VisualEvent:
    """Renderable projection of a `Task` for one refresh cycle."""

    id: str
    column_id: str
    title: str
    start: datetime
    end: datetime
    participants: tuple[str, ...]
    draggable: bool
    resizable: Resizable
    color: TaskColor
    conflict: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "columnId": self.column_id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "participants": list(self.participants),
            "draggable": self.draggable,
            "resizable": self.resizable.to_dict(),
            "color": self.color.to_dict(),
            "conflict": self.conflict,
        }


@dataclass
class Column:
    """A named lane of the calendar."""

    id: str = field(default_factory=_id)
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Column":
        return cls(id=str(data.get("id") or _id()), title=str(data.get("title") or ""))
