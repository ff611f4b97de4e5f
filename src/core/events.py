"""Synchronous event bus for filter and group state transitions."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)


class EventKind(Enum):
    FILTER_GROUP_ENABLE_DISABLE = "filter_group_enable_disable"
    FILTER_ENABLE_DISABLE = "filter_enable_disable"
    FILTER_ADD_REMOVE = "filter_add_remove"


Listener = Callable[[EventKind, Any], None]


class EventBus:
    """Observer list invoked in the same call as the committed transition.

    Listeners run in registration order. A failing listener is logged and the
    remaining listeners still receive the event.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify_listeners(self, kind: EventKind, payload: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(kind, payload)
            except Exception:
                LOGGER.exception("Error invoking listener for %s", kind.name)
