"""Touch points and touch events in the shape a native touch driver produces."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from .constants import TOUCH_CANCEL, TOUCH_END, TOUCH_MOVE, TOUCH_START


@dataclass(frozen=True)
class TouchPoint:
    identifier: int
    client_x: float
    client_y: float
    screen_x: float = 0.0
    screen_y: float = 0.0
    page_x: float = 0.0
    page_y: float = 0.0
    radius_x: float = 1.0
    radius_y: float = 1.0
    rotation_angle: float = 0.0
    force: float = 1.0
    target: Any = None

    @classmethod
    def at(cls, x: float, y: float, *, identifier: int = 0, target: Any = None) -> "TouchPoint":
        """Point whose client, screen, and page coordinates coincide."""
        return cls(
            identifier=identifier,
            client_x=x,
            client_y=y,
            screen_x=x,
            screen_y=y,
            page_x=x,
            page_y=y,
            target=target,
        )

    def offset(self, dx: float, dy: float, *, identifier: Optional[int] = None) -> "TouchPoint":
        return replace(
            self,
            identifier=self.identifier if identifier is None else identifier,
            client_x=self.client_x + dx,
            client_y=self.client_y + dy,
            screen_x=self.screen_x + dx,
            screen_y=self.screen_y + dy,
            page_x=self.page_x + dx,
            page_y=self.page_y + dy,
        )


@dataclass
class TouchEvent:
    """A touch event travelling through the element tree.

    ``touches`` holds points still on the surface; on touchend the lifted
    point is only in ``changed_touches``.
    """

    type: str
    touches: list[TouchPoint] = field(default_factory=list)
    target_touches: list[TouchPoint] = field(default_factory=list)
    changed_touches: list[TouchPoint] = field(default_factory=list)
    cancelable: bool = True
    bubbles: bool = True
    synthetic: bool = False
    target: Any = None
    current_target: Any = None
    propagation_stopped: bool = False
    immediate_propagation_stopped: bool = False
    default_prevented: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True

    def stop_immediate_propagation(self) -> None:
        self.propagation_stopped = True
        self.immediate_propagation_stopped = True

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True

    @property
    def primary(self) -> Optional[TouchPoint]:
        """First active touch, falling back to the first changed touch."""
        if self.touches:
            return self.touches[0]
        if self.changed_touches:
            return self.changed_touches[0]
        return None


def _native(event_type: str, x: float, y: float, *, active: bool) -> TouchEvent:
    point = TouchPoint.at(x, y)
    touches = [point] if active else []
    return TouchEvent(
        type=event_type,
        touches=touches,
        target_touches=list(touches),
        changed_touches=[point],
    )


def touch_start(x: float, y: float) -> TouchEvent:
    return _native(TOUCH_START, x, y, active=True)


def touch_move(x: float, y: float) -> TouchEvent:
    return _native(TOUCH_MOVE, x, y, active=True)


def touch_end(x: float, y: float) -> TouchEvent:
    return _native(TOUCH_END, x, y, active=False)


def touch_cancel(x: float = 0.0, y: float = 0.0) -> TouchEvent:
    return _native(TOUCH_CANCEL, x, y, active=False)
