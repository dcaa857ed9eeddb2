"""Long-press-to-drag recognition for a single touch pointer.

A touch on a calendar event is held back from the drag library until it is
classified:

- lifted quickly without moving: a tap, which selects the task;
- moved past the tolerance before the delay: a scroll, left to the browser;
- held still for the delay: a drag, handed to the drag library by replaying
  a synthetic touchstart/touchmove pair on the element.

Only ``touches[0]`` is tracked, so there is at most one live gesture and one
pending timer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from loguru import logger

from .config import GestureConfig
from .constants import (
    CAL_EVENT_CLASS,
    DRAG_ALLOWED_ATTR,
    DRAG_ENABLED_CLASS,
    GESTURE_MARKER_CLASSES,
    LONG_PRESS_ACTIVE_CLASS,
    LONG_PRESS_WAITING_CLASS,
    TASK_ID_ATTR,
    TOUCH_CANCEL,
    TOUCH_END,
    TOUCH_MOVE,
    TOUCH_START,
)
from .dom import Element
from .loop import EventLoop, TimerHandle
from .synthesizer import TouchEventSynthesizer
from .touch import TouchEvent, TouchPoint


class GesturePhase(str, Enum):
    IDLE = "idle"
    AWAITING_LONG_PRESS = "awaiting_long_press"
    DRAGGING = "dragging"
    SCROLLING = "scrolling"
    TAP_RESOLVED = "tap_resolved"


@dataclass
class GestureState:
    """Per-gesture record, replaced wholesale on cleanup."""

    phase: GesturePhase = GesturePhase.IDLE
    origin: Optional[TouchPoint] = None
    started_at: float = 0.0
    element: Optional[Element] = None
    task_id: Optional[str] = None
    timer: Optional[TimerHandle] = None


class Haptics(Protocol):
    def vibrate(self, duration_ms: int) -> None: ...


def _task_id_attribute(element: Element) -> Optional[str]:
    return element.get_attribute(TASK_ID_ATTR) or None


class GestureRecognizer:
    """Classify touch sequences on a container of calendar-event elements.

    Args:
        container: Element hosting the calendar events; handlers are
            registered on it in the capture phase.
        loop: Timer source for the long-press delay.
        synthesizer: Performs the drag handoff.
        on_tap: Called with the task id of a tapped event.
        resolve_task_id: Maps an event element to its task id; None aborts
            the gesture silently. Defaults to the ``data-task-id`` attribute.
        config: Timing and distance thresholds.
        haptics: Optional vibration source pulsed when drag mode engages.
    """

    def __init__(
        self,
        container: Element,
        loop: EventLoop,
        synthesizer: TouchEventSynthesizer,
        *,
        on_tap: Callable[[str], None],
        resolve_task_id: Optional[Callable[[Element], Optional[str]]] = None,
        config: Optional[GestureConfig] = None,
        haptics: Optional[Haptics] = None,
    ) -> None:
        self.container = container
        self.loop = loop
        self.synthesizer = synthesizer
        self.on_tap = on_tap
        self.resolve_task_id = resolve_task_id or _task_id_attribute
        self.config = config or GestureConfig()
        self.haptics = haptics
        self.state = GestureState()
        self.last_outcome: Optional[GesturePhase] = None
        self._attached = False

    @property
    def phase(self) -> GesturePhase:
        return self.state.phase

    def _handlers(self) -> list[tuple[str, Callable[[TouchEvent], None]]]:
        return [
            (TOUCH_START, self.on_touch_start),
            (TOUCH_MOVE, self.on_touch_move),
            (TOUCH_END, self.on_touch_end),
            (TOUCH_CANCEL, self.on_touch_cancel),
        ]

    def attach(self) -> None:
        if self._attached:
            return
        for event_type, handler in self._handlers():
            self.container.add_event_listener(event_type, handler, capture=True)
        self._attached = True

    def detach(self) -> None:
        for event_type, handler in self._handlers():
            self.container.remove_event_listener(event_type, handler, capture=True)
        self._attached = False
        self.cleanup()

    # -- helpers ------------------------------------------------------------

    @staticmethod
    def _event_element(event: TouchEvent) -> Optional[Element]:
        target = event.target
        if not isinstance(target, Element):
            return None
        return target.closest(CAL_EVENT_CLASS)

    def _is_handed_off(self, element: Element) -> bool:
        return self.state.phase == GesturePhase.DRAGGING and element.get_attribute(DRAG_ALLOWED_ATTR) == "true"

    def _cancel_timer(self) -> None:
        if self.state.timer is not None:
            self.state.timer.cancel()
            self.state.timer = None

    def _displacement(self, point: TouchPoint) -> tuple[float, float]:
        origin = self.state.origin
        if origin is None:
            return 0.0, 0.0
        return abs(point.client_x - origin.client_x), abs(point.client_y - origin.client_y)

    # -- handlers -----------------------------------------------------------

    def on_touch_start(self, event: TouchEvent) -> None:
        element = self._event_element(event)
        if element is None:
            return
        if self._is_handed_off(element):
            return

        event.stop_immediate_propagation()

        if self.state.phase != GesturePhase.IDLE:
            self.cleanup()

        task_id = self.resolve_task_id(element)
        origin = event.primary
        if not task_id or origin is None:
            return

        self.state = GestureState(
            phase=GesturePhase.AWAITING_LONG_PRESS,
            origin=origin,
            started_at=self.loop.now(),
            element=element,
            task_id=task_id,
        )
        self.last_outcome = None
        element.add_class(LONG_PRESS_WAITING_CLASS)
        self.state.timer = self.loop.call_later(self.config.long_press_delay_ms, self._on_long_press)
        logger.debug("Gesture started on task {} at ({}, {})", task_id, origin.client_x, origin.client_y)

    def on_touch_move(self, event: TouchEvent) -> None:
        element = self._event_element(event)
        if element is None or self._is_handed_off(element):
            return
        if self.state.phase != GesturePhase.AWAITING_LONG_PRESS or not event.touches:
            return

        dx, dy = self._displacement(event.touches[0])
        threshold = self.config.move_threshold_px
        if dx > threshold or dy > threshold:
            self._cancel_timer()
            pending = self.state.element or element
            pending.remove_class(LONG_PRESS_WAITING_CLASS, LONG_PRESS_ACTIVE_CLASS)
            self.state.task_id = None
            self.state.phase = GesturePhase.SCROLLING
            self.last_outcome = GesturePhase.SCROLLING
            logger.debug("Gesture became a scroll (dx={}, dy={})", dx, dy)
            return

        event.stop_immediate_propagation()

    def _on_long_press(self) -> None:
        state = self.state
        if state.phase != GesturePhase.AWAITING_LONG_PRESS or state.element is None or state.origin is None:
            return
        state.timer = None
        element = state.element
        element.remove_class(LONG_PRESS_WAITING_CLASS)
        element.add_class(LONG_PRESS_ACTIVE_CLASS, DRAG_ENABLED_CLASS)
        element.set_attribute(DRAG_ALLOWED_ATTR, "true")
        state.phase = GesturePhase.DRAGGING
        self.last_outcome = GesturePhase.DRAGGING
        logger.debug("Long press on task {}; handing off to drag", state.task_id)

        if self.haptics is not None:
            self.haptics.vibrate(self.config.haptic_pulse_ms)
        # the pending synthetic move is the gesture's live timer from here on
        state.timer = self.synthesizer.dispatch(element, state.origin)

    def on_touch_end(self, event: TouchEvent) -> None:
        if self.state.phase != GesturePhase.AWAITING_LONG_PRESS:
            self.cleanup()
            return

        duration = self.loop.now() - self.state.started_at
        lifted = event.changed_touches[0] if event.changed_touches else None
        if lifted is not None and duration < self.config.tap_max_duration_ms:
            dx, dy = self._displacement(lifted)
            threshold = self.config.move_threshold_px
            if dx < threshold and dy < threshold:
                task_id = self.state.task_id
                self._cancel_timer()
                self.state.phase = GesturePhase.TAP_RESOLVED
                self.last_outcome = GesturePhase.TAP_RESOLVED
                logger.debug("Tap on task {} after {}ms", task_id, duration)
                self.cleanup()
                if task_id:
                    self.on_tap(task_id)
                return

        # too long or moved too far for a tap: drop the pending gesture quietly
        self._cancel_timer()
        for element in self.container.query_all(CAL_EVENT_CLASS):
            element.remove_class(LONG_PRESS_WAITING_CLASS)
        if self.state.element is not None:
            self.state.element.remove_class(LONG_PRESS_WAITING_CLASS)
        self.state = GestureState()

    def on_touch_cancel(self, event: TouchEvent) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Cancel any pending timer, strip every marker, and return to idle.

        Safe to call repeatedly and when nothing is marked.
        """
        self._cancel_timer()
        elements = self.container.query_all(CAL_EVENT_CLASS)
        if self.state.element is not None and self.state.element not in elements:
            elements.append(self.state.element)
        for element in elements:
            element.remove_class(*GESTURE_MARKER_CLASSES)
            element.remove_attribute(DRAG_ALLOWED_ATTR)
        self.state = GestureState()
