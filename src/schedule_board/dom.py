"""Minimal element tree with class markers, attributes, and event dispatch.

Dispatch follows the browser model: capture listeners from the root down to
the target, then bubble listeners from the target back up when the event
bubbles. `stop_immediate_propagation` on the event halts the walk.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional

Listener = Callable[[Any], None]


class Element:
    """A node of the rendered calendar."""

    def __init__(
        self,
        tag: str = "div",
        *,
        classes: Optional[set[str]] = None,
        attributes: Optional[dict[str, str]] = None,
        text: str = "",
        parent: Optional["Element"] = None,
    ) -> None:
        self.tag = tag
        self.classes: set[str] = set(classes or ())
        self.attributes: dict[str, str] = dict(attributes or {})
        self._text = text
        self.parent: Optional[Element] = None
        self.children: list[Element] = []
        self._listeners: list[tuple[str, Listener, bool]] = []
        if parent is not None:
            parent.append(self)

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, classes={sorted(self.classes)})"

    # -- tree ---------------------------------------------------------------

    def append(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "Element") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def clear(self) -> None:
        for child in list(self.children):
            self.remove(child)

    def ancestors(self) -> Iterator["Element"]:
        """Yield this element and then each parent up to the root."""
        node: Optional[Element] = self
        while node is not None:
            yield node
            node = node.parent

    def closest(self, class_name: str) -> Optional["Element"]:
        for node in self.ancestors():
            if class_name in node.classes:
                return node
        return None

    def iter(self) -> Iterator["Element"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def query_all(self, class_name: str) -> list["Element"]:
        return [node for node in self.iter() if class_name in node.classes]

    @property
    def text_content(self) -> str:
        return self._text + "".join(child.text_content for child in self.children)

    @text_content.setter
    def text_content(self, value: str) -> None:
        self.clear()
        self._text = value

    # -- markers ------------------------------------------------------------

    def add_class(self, *names: str) -> None:
        self.classes.update(names)

    def remove_class(self, *names: str) -> None:
        self.classes.difference_update(names)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = str(value)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    # -- events -------------------------------------------------------------

    def add_event_listener(self, event_type: str, listener: Listener, *, capture: bool = False) -> None:
        self._listeners.append((event_type, listener, capture))

    def remove_event_listener(self, event_type: str, listener: Listener, *, capture: bool = False) -> None:
        entry = (event_type, listener, capture)
        if entry in self._listeners:
            self._listeners.remove(entry)

    def _invoke(self, event: Any, *, capture: bool) -> None:
        for event_type, listener, is_capture in list(self._listeners):
            if event_type != event.type or is_capture != capture:
                continue
            event.current_target = self
            listener(event)
            if event.immediate_propagation_stopped:
                return

    def dispatch_event(self, event: Any) -> bool:
        """Dispatch `event` with this element as target.

        Returns:
            False if a listener called ``prevent_default`` on a cancelable event.
        """
        event.target = self
        path = list(self.ancestors())
        for node in reversed(path):
            node._invoke(event, capture=True)
            if event.propagation_stopped:
                return not event.default_prevented
        for node in path:
            node._invoke(event, capture=False)
            if event.propagation_stopped or not event.bubbles:
                break
        return not event.default_prevented
