from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

KINDS = ("success", "error", "info")


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "info"


Listener = Callable[[Notification], None]


class Notifier:
    """Observer for user-facing notices, one instance per client session."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, message: str, kind: str = "info") -> Notification:
        if kind not in KINDS:
            raise ValueError(f"Unknown notification kind: {kind!r}")
        notification = Notification(message=message, kind=kind)
        for listener in list(self._listeners):
            listener(notification)
        return notification
