"""Wire one calendar column: projection, rendering, and touch handling."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .analytics import AnalyticsSink, NullAnalytics
from .config import GestureConfig, ViewConfig
from .conflicts import ConflictScope
from .constants import CAL_EVENT_CLASS, TASK_ID_ATTR
from .device import DeviceClass
from .dialogs import DialogLauncher
from .dom import Element
from .gestures import GestureRecognizer, Haptics
from .loop import EventLoop
from .models import VisualEvent
from .projection import EventProjection
from .store import TaskStore
from .synthesizer import TouchEventSynthesizer


class ScheduleView:
    """Calendar view of a single column.

    `attach` subscribes the projection to the store and device class, renders
    one ``cal-event`` element per visual event under `container`, and
    registers the gesture recognizer on the container in the capture phase so
    it sees touches before the drag library does.
    """

    def __init__(
        self,
        column_id: str,
        store: TaskStore,
        loop: EventLoop,
        *,
        device: Optional[DeviceClass] = None,
        dialogs: Optional[DialogLauncher] = None,
        analytics: Optional[AnalyticsSink] = None,
        haptics: Optional[Haptics] = None,
        container: Optional[Element] = None,
        gesture_config: Optional[GestureConfig] = None,
        view_config: Optional[ViewConfig] = None,
        scope: ConflictScope = ConflictScope.WORKSPACE,
    ) -> None:
        self.column_id = column_id
        self.store = store
        self.loop = loop
        self.device = device or DeviceClass()
        self.analytics = analytics or NullAnalytics()
        self.container = container or Element("div", classes={"cal-day-view"})
        self.gesture_config = gesture_config or GestureConfig()
        self.projection = EventProjection(
            column_id,
            store,
            self.device,
            dialogs=dialogs,
            analytics=self.analytics,
            scope=scope,
            view=view_config,
        )
        self.synthesizer = TouchEventSynthesizer(loop, move_delay_ms=self.gesture_config.synthetic_move_delay_ms)
        self.recognizer = GestureRecognizer(
            self.container,
            loop,
            self.synthesizer,
            on_tap=self.select_task,
            resolve_task_id=self.task_id_for,
            config=self.gesture_config,
            haptics=haptics,
        )
        self._elements: dict[str, Element] = {}
        self.projection.on_refresh(self.render)

    def attach(self) -> None:
        self.projection.attach()
        self.recognizer.attach()

    def detach(self) -> None:
        self.recognizer.detach()
        self.projection.detach()

    @property
    def events(self) -> list[VisualEvent]:
        return self.projection.events

    def render(self, events: list[VisualEvent]) -> None:
        """Rebuild the event elements from scratch."""
        for element in self.container.query_all(CAL_EVENT_CLASS):
            if element.parent is not None:
                element.parent.remove(element)
        self._elements = {}
        for event in events:
            element = Element(
                "div",
                classes={CAL_EVENT_CLASS},
                attributes={TASK_ID_ATTR: event.id},
                text=event.title,
                parent=self.container,
            )
            self._elements[event.id] = element

    @property
    def elements(self) -> dict[str, Element]:
        return dict(self._elements)

    def element_for(self, task_id: str) -> Optional[Element]:
        return self._elements.get(task_id)

    def task_id_for(self, element: Element) -> Optional[str]:
        """Resolve the task behind a calendar-event element.

        The ``data-task-id`` attribute wins; otherwise the element text is
        matched against event titles by prefix, which is ambiguous when two
        titles share a prefix.
        """
        event = self.projection.find(element.get_attribute(TASK_ID_ATTR))
        if event is None:
            event = self.projection.find_by_text(element.text_content)
        if event is None:
            logger.debug("No task matches touched element {}", element)
            return None
        return event.id

    def select_task(self, task_id: str) -> None:
        event = self.projection.find(task_id)
        if event is None:
            return
        self.projection.handle_event("task", event)
