"""Observable device-class signal (mobile or not)."""

from __future__ import annotations

import re
from typing import Callable, Optional

_MOBILE_UA_RE = re.compile(r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini|Mobile", re.I)


class DeviceClass:
    """Hold the "is mobile" flag and notify subscribers when it changes."""

    def __init__(self, is_mobile: bool = False) -> None:
        self._is_mobile = bool(is_mobile)
        self._subscribers: list[Callable[[bool], None]] = []

    @classmethod
    def from_user_agent(cls, user_agent: Optional[str]) -> "DeviceClass":
        return cls(is_mobile=bool(user_agent and _MOBILE_UA_RE.search(user_agent)))

    @property
    def is_mobile(self) -> bool:
        return self._is_mobile

    def set_mobile(self, value: bool) -> None:
        value = bool(value)
        if value == self._is_mobile:
            return
        self._is_mobile = value
        for callback in list(self._subscribers):
            callback(value)

    def subscribe(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        """Register `callback` for changes (not called immediately)."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe
