"""Tests for long-press, tap, and scroll recognition on calendar events."""

from __future__ import annotations

from schedule_board.config import GestureConfig
from schedule_board.constants import (
    CAL_EVENT_CLASS,
    DRAG_ALLOWED_ATTR,
    DRAG_ENABLED_CLASS,
    GESTURE_MARKER_CLASSES,
    LONG_PRESS_ACTIVE_CLASS,
    LONG_PRESS_WAITING_CLASS,
    TOUCH_MOVE,
    TOUCH_START,
)
from schedule_board.dom import Element
from schedule_board.gestures import GesturePhase, GestureRecognizer
from schedule_board.loop import ManualLoop
from schedule_board.synthesizer import TouchEventSynthesizer
from schedule_board.touch import touch_cancel, touch_end, touch_move, touch_start
from schedule_board.view import ScheduleView


def _marks(view: ScheduleView) -> dict[str, set[str]]:
    found: dict[str, set[str]] = {}
    for element in view.container.query_all(CAL_EVENT_CLASS):
        marks = {c for c in element.classes if c in GESTURE_MARKER_CLASSES}
        if marks or element.get_attribute(DRAG_ALLOWED_ATTR) is not None:
            found[element.get_attribute("data-task-id") or "?"] = marks
    return found


class TestTap:
    def test_quick_touch_selects_task(self, view, loop, dialogs, drag_library):
        """Start at (100,100), lift at (102,101) after 200ms: one selection, no handoff."""
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        assert element.has_class(LONG_PRESS_WAITING_CLASS)

        loop.advance_to(200)
        element.dispatch_event(touch_end(102, 101))

        assert len(dialogs.actions) == 1
        action = dialogs.actions[0]
        assert action.kind == "task"
        assert action.task.id == "standup"
        assert action.title == "Standup"
        assert view.synthesizer.history == []
        assert _marks(view) == {}
        assert view.recognizer.phase == GesturePhase.IDLE
        assert view.recognizer.last_outcome == GesturePhase.TAP_RESOLVED

        loop.advance_to(2000)
        assert view.synthesizer.history == []
        assert drag_library == []

    def test_tap_save_handler_edits_task(self, view, loop, dialogs, store):
        element = view.element_for("review")
        element.dispatch_event(touch_start(10, 10))
        loop.advance(50)
        element.dispatch_event(touch_end(10, 10))

        action = dialogs.actions[0]
        action.task.title = "Design review"
        action.save_handler(action.task)
        assert store.get("review").title == "Design review"

        action.delete_handler("review")
        assert store.get("review") is None

    def test_hold_past_tap_limit_without_timer_is_not_a_tap(self, store, loop, dialogs):
        """A touch held longer than the tap limit but lifted before the long-press fires."""
        config = GestureConfig(long_press_delay_ms=500, tap_max_duration_ms=200)
        view = ScheduleView("room-a", store, loop, dialogs=dialogs, gesture_config=config)
        view.attach()
        element = view.element_for("standup")

        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(300)
        element.dispatch_event(touch_end(100, 100))

        assert dialogs.actions == []
        assert not element.has_class(LONG_PRESS_WAITING_CLASS)
        assert view.recognizer.phase == GesturePhase.IDLE
        loop.advance_to(1000)
        assert view.synthesizer.history == []

    def test_lift_exactly_at_tolerance_is_not_a_tap(self, view, loop, dialogs):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(100)
        element.dispatch_event(touch_end(110, 100))

        assert dialogs.actions == []
        assert _marks(view) == {}
        loop.advance_to(1000)
        assert view.synthesizer.history == []


class TestLongPressDrag:
    def test_stationary_hold_hands_off_to_drag_library(self, view, loop, haptics, drag_library):
        element = view.element_for("standup")
        native = touch_start(100, 100)
        element.dispatch_event(native)

        assert native.propagation_stopped
        assert drag_library == []

        loop.advance_to(499)
        assert view.synthesizer.history == []

        loop.advance_to(500)
        assert [e.type for e in view.synthesizer.history] == [TOUCH_START]
        start = view.synthesizer.history[0]
        assert (start.touches[0].client_x, start.touches[0].client_y) == (100, 100)
        assert element.has_class(LONG_PRESS_ACTIVE_CLASS)
        assert element.has_class(DRAG_ENABLED_CLASS)
        assert not element.has_class(LONG_PRESS_WAITING_CLASS)
        assert element.get_attribute(DRAG_ALLOWED_ATTR) == "true"
        assert haptics.pulses == [50]
        assert view.recognizer.phase == GesturePhase.DRAGGING

        loop.advance_to(509)
        assert len(view.synthesizer.history) == 1

        loop.advance_to(510)
        assert [e.type for e in view.synthesizer.history] == [TOUCH_START, TOUCH_MOVE]
        move = view.synthesizer.history[1].touches[0]
        assert (move.client_x, move.client_y) == (101, 101)

        assert [e.type for e in drag_library] == [TOUCH_START, TOUCH_MOVE]
        assert all(e.synthetic for e in drag_library)

    def test_small_moves_are_held_back_until_drag(self, view, loop, drag_library):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(100)
        move = touch_move(105, 108)
        element.dispatch_event(move)

        assert move.propagation_stopped
        assert drag_library == []
        assert view.recognizer.phase == GesturePhase.AWAITING_LONG_PRESS

        loop.advance_to(510)
        assert len(view.synthesizer.history) == 2
        # synthetic touches originate from the touchstart point, not the moved one
        assert view.synthesizer.history[0].touches[0].client_x == 100

    def test_native_moves_pass_through_after_handoff(self, view, loop, drag_library):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(520)
        drag_library.clear()

        move = touch_move(160, 240)
        element.dispatch_event(move)

        assert not move.propagation_stopped
        assert drag_library == [move]

    def test_touch_end_after_drag_cleans_up(self, view, loop, dialogs):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(600)
        element.dispatch_event(touch_end(140, 180))

        assert dialogs.actions == []
        assert _marks(view) == {}
        assert view.recognizer.phase == GesturePhase.IDLE
        assert view.recognizer.last_outcome == GesturePhase.DRAGGING

    def test_lift_before_synthetic_move_cancels_it(self, view, loop, drag_library):
        """Lifting inside the synthetic-move delay leaves no move for the drag library."""
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(500)
        assert loop.pending == 1

        element.dispatch_event(touch_end(100, 100))
        loop.advance_to(600)

        assert [e.type for e in view.synthesizer.history] == [TOUCH_START]
        assert [e.type for e in drag_library] == [TOUCH_START]
        assert loop.pending == 0
        assert _marks(view) == {}

    def test_synthetic_identifiers_increase(self, view, loop):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(1, 1))
        loop.advance_to(510)
        ids = [e.touches[0].identifier for e in view.synthesizer.history]
        assert ids[0] < ids[1]

    def test_synthetic_touches_look_native(self, view, loop):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(510)
        for event in view.synthesizer.history:
            point = event.touches[0]
            assert event.cancelable and event.bubbles
            assert event.target_touches == [point]
            assert event.changed_touches == [point]
            assert point.target is element
            assert point.radius_x == point.radius_y == 2.5
            assert point.rotation_angle == 0
            assert point.force == 0.5


class TestScroll:
    def test_large_move_cancels_long_press(self, view, loop, dialogs):
        """Move 15px at 100ms: timer cancelled, no handoff even past 500ms."""
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(100)
        element.dispatch_event(touch_move(115, 100))

        assert view.recognizer.phase == GesturePhase.SCROLLING
        assert view.recognizer.state.timer is None
        assert view.recognizer.state.task_id is None
        assert _marks(view) == {}

        loop.advance_to(1500)
        assert view.synthesizer.history == []
        assert loop.pending == 0

        element.dispatch_event(touch_move(130, 100))
        element.dispatch_event(touch_end(130, 100))
        assert dialogs.actions == []
        assert view.recognizer.phase == GesturePhase.IDLE
        assert view.recognizer.last_outcome == GesturePhase.SCROLLING

    def test_vertical_scroll_passes_moves_through(self, view, loop, drag_library):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(50)
        move = touch_move(100, 140)
        element.dispatch_event(move)

        assert not move.propagation_stopped
        assert drag_library == [move]


class TestCancelAndCleanup:
    def test_touch_cancel_abandons_gesture(self, view, loop, dialogs):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(100)
        element.dispatch_event(touch_cancel())

        assert view.recognizer.phase == GesturePhase.IDLE
        assert _marks(view) == {}
        loop.advance_to(1000)
        assert view.synthesizer.history == []
        assert dialogs.actions == []

    def test_cleanup_is_idempotent(self, view, loop):
        element = view.element_for("standup")
        element.dispatch_event(touch_start(100, 100))
        loop.advance_to(505)

        view.recognizer.cleanup()
        first = (view.recognizer.state, _marks(view), loop.pending)
        view.recognizer.cleanup()

        assert view.recognizer.state == first[0]
        assert view.recognizer.phase == GesturePhase.IDLE
        assert _marks(view) == first[1] == {}

    def test_cleanup_when_nothing_is_marked(self, view):
        view.recognizer.cleanup()
        view.recognizer.cleanup()
        assert view.recognizer.phase == GesturePhase.IDLE

    def test_new_touch_start_replaces_pending_gesture(self, view, loop):
        first = view.element_for("standup")
        second = view.element_for("review")
        first.dispatch_event(touch_start(10, 10))
        loop.advance_to(200)
        second.dispatch_event(touch_start(50, 50))

        assert not first.has_class(LONG_PRESS_WAITING_CLASS)
        assert view.recognizer.state.task_id == "review"
        assert loop.pending == 1

        loop.advance_to(700)
        assert len(view.synthesizer.history) == 1
        assert view.synthesizer.history[0].touches[0].target is second


class TestTargetResolution:
    def test_touch_outside_events_is_ignored(self, view, loop, drag_library):
        event = touch_start(5, 5)
        view.container.dispatch_event(event)

        assert view.recognizer.phase == GesturePhase.IDLE
        assert not event.propagation_stopped
        assert drag_library == [event]
        assert loop.pending == 0

    def test_touch_on_nested_child_resolves_event(self, view, loop):
        element = view.element_for("review")
        label = Element("span", text=" 11:00", parent=element)
        label.dispatch_event(touch_start(20, 20))

        assert view.recognizer.state.task_id == "review"
        assert view.recognizer.state.element is element

    def test_title_prefix_fallback(self, view):
        orphan = Element("div", classes={CAL_EVENT_CLASS}, text="Standup 09:00 - 10:00", parent=view.container)
        orphan.dispatch_event(touch_start(0, 0))
        assert view.recognizer.state.task_id == "standup"

    def test_unresolvable_element_aborts_silently(self, view, loop, drag_library):
        orphan = Element("div", classes={CAL_EVENT_CLASS}, text="Unknown", parent=view.container)
        event = touch_start(0, 0)
        orphan.dispatch_event(event)

        assert event.propagation_stopped
        assert view.recognizer.phase == GesturePhase.IDLE
        assert loop.pending == 0
        assert not orphan.has_class(LONG_PRESS_WAITING_CLASS)


class TestRecognizerStandalone:
    def test_default_resolution_uses_task_id_attribute(self):
        loop = ManualLoop()
        container = Element("div")
        element = Element("div", classes={CAL_EVENT_CLASS}, attributes={"data-task-id": "t9"}, parent=container)
        taps: list[str] = []
        recognizer = GestureRecognizer(container, loop, TouchEventSynthesizer(loop), on_tap=taps.append)
        recognizer.attach()

        element.dispatch_event(touch_start(0, 0))
        loop.advance(100)
        element.dispatch_event(touch_end(0, 0))

        assert taps == ["t9"]

    def test_custom_thresholds(self):
        loop = ManualLoop()
        container = Element("div")
        element = Element("div", classes={CAL_EVENT_CLASS}, attributes={"data-task-id": "t1"}, parent=container)
        config = GestureConfig(long_press_delay_ms=300, move_threshold_px=30, synthetic_move_delay_ms=5)
        synthesizer = TouchEventSynthesizer(loop, move_delay_ms=config.synthetic_move_delay_ms)
        recognizer = GestureRecognizer(container, loop, synthesizer, on_tap=lambda _id: None, config=config)
        recognizer.attach()

        element.dispatch_event(touch_start(0, 0))
        element.dispatch_event(touch_move(20, 20))
        assert recognizer.phase == GesturePhase.AWAITING_LONG_PRESS

        loop.advance_to(305)
        assert [e.type for e in synthesizer.history] == [TOUCH_START, TOUCH_MOVE]

    def test_detach_stops_listening(self):
        loop = ManualLoop()
        container = Element("div")
        element = Element("div", classes={CAL_EVENT_CLASS}, attributes={"data-task-id": "t1"}, parent=container)
        recognizer = GestureRecognizer(container, loop, TouchEventSynthesizer(loop), on_tap=lambda _id: None)
        recognizer.attach()
        recognizer.detach()

        element.dispatch_event(touch_start(0, 0))
        assert recognizer.phase == GesturePhase.IDLE
        assert loop.pending == 0


class TestViewLifecycle:
    def test_reattach_registers_render_once(self, view, store, make_task):
        view.detach()
        view.attach()
        view.attach()

        assert view.projection._refresh_listeners.count(view.render) == 1
        store.add_task(make_task("retro", 15, 16, title="Retro"))
        assert sorted(view.elements) == ["retro", "review", "standup"]
        assert len(view.container.children) == 3
