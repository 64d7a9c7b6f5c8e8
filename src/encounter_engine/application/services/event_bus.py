from collections import defaultdict
import logging
from typing import Callable, DefaultDict, List

from encounter_engine.domain.events import EngineEvent


EventHandler = Callable[[EngineEvent], None]


class EventBus:
    """Synchronous in-process publisher for encounter and dialogue events.

    Handlers for one event type run in ascending ``priority``, ties in
    subscription order. A handler that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[type, List[tuple[int, int, EventHandler]]] = defaultdict(list)
        self._next_order = 0
        self._last_publish_errors: List[Exception] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: type, handler: EventHandler, *, priority: int = 100) -> None:
        rows = self._handlers[event_type]
        rows.append((int(priority), self._next_order, handler))
        self._next_order += 1
        rows.sort(key=lambda row: (row[0], row[1]))

    def publish(self, event: EngineEvent) -> None:
        self._last_publish_errors = []
        event_type = type(event)
        # Handlers may subscribe while an event is in flight.
        for priority, _, handler in list(self._handlers.get(event_type, ())):
            try:
                handler(event)
            except Exception as exc:
                self._last_publish_errors.append(exc)
                handler_name = getattr(handler, "__qualname__", getattr(handler, "__name__", repr(handler)))
                self._logger.exception(
                    "Event handler failed and was isolated",
                    extra={
                        "event_type": event_type.__name__,
                        "handler": handler_name,
                        "priority": priority,
                    },
                )

    def last_publish_errors(self) -> List[Exception]:
        return list(self._last_publish_errors)
