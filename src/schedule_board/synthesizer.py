"""Hand a confirmed long-press to the drag library with synthetic touches.

The drag library only reacts to native-shaped input, so the handoff is a
touchstart at the original point followed shortly by a 1px touchmove, which
is enough to cross the library's own move threshold.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable, Optional

from loguru import logger

from .constants import (
    DEFAULT_SYNTHETIC_MOVE_DELAY_MS,
    SYNTHETIC_TOUCH_FORCE,
    SYNTHETIC_TOUCH_RADIUS,
    TOUCH_MOVE,
    TOUCH_START,
)
from .dom import Element
from .loop import EventLoop, TimerHandle
from .touch import TouchEvent, TouchPoint


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


class TouchEventSynthesizer:
    def __init__(
        self,
        loop: EventLoop,
        *,
        move_delay_ms: float = DEFAULT_SYNTHETIC_MOVE_DELAY_MS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.loop = loop
        self.move_delay_ms = move_delay_ms
        self._clock = clock or _wall_clock_ms
        self._last_identifier = 0
        self.history: list[TouchEvent] = []

    def _next_identifier(self) -> int:
        # wall-clock derived, but strictly increasing even within one millisecond
        ident = max(int(self._clock()), self._last_identifier + 1)
        self._last_identifier = ident
        return ident

    def _build(self, event_type: str, element: Element, origin: TouchPoint, offset: float) -> TouchEvent:
        point = replace(
            origin.offset(offset, offset),
            identifier=self._next_identifier(),
            target=element,
            radius_x=SYNTHETIC_TOUCH_RADIUS,
            radius_y=SYNTHETIC_TOUCH_RADIUS,
            rotation_angle=0.0,
            force=SYNTHETIC_TOUCH_FORCE,
        )
        return TouchEvent(
            type=event_type,
            touches=[point],
            target_touches=[point],
            changed_touches=[point],
            cancelable=True,
            bubbles=True,
            synthetic=True,
        )

    def _dispatch(self, element: Element, event: TouchEvent) -> None:
        self.history.append(event)
        point = event.touches[0]
        logger.debug("Synthetic {} at ({}, {})", event.type, point.client_x, point.client_y)
        element.dispatch_event(event)

    def dispatch(self, element: Element, origin: TouchPoint) -> TimerHandle:
        """Dispatch the synthetic touchstart now and schedule the touchmove.

        Args:
            element: Calendar-event element the drag library listens on.
            origin: Touch point recorded when the gesture began.

        Returns:
            Handle of the pending touchmove, so a gesture that ends first can
            cancel it.
        """
        start = self._build(TOUCH_START, element, origin, 0)
        self._dispatch(element, start)

        def _move() -> None:
            self._dispatch(element, self._build(TOUCH_MOVE, element, origin, 1))

        return self.loop.call_later(self.move_delay_ms, _move)
