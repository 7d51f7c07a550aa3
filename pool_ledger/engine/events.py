"""Append-only notification log with synchronous observers."""

import logging
from collections import deque
from typing import Callable

from pool_ledger.models import Event

logger = logging.getLogger(__name__)

Observer = Callable[[Event], None]


class EventLog:
    """
    Delivers each emitted event to every subscriber and keeps the most
    recent ``limit`` events for inspection.
    """

    def __init__(self, limit: int = 1000):
        self._recent: deque[Event] = deque(maxlen=limit)
        self._observers: list[Observer] = []

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer. Returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def emit(self, event: Event) -> None:
        self._recent.append(event)
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception as e:
                # The ledger change is already committed; a failing observer
                # must not turn it into a rejection.
                logger.error(f"Observer {observer!r} failed on {event.type.value}: {e}")

    def recent(self) -> list[Event]:
        return list(self._recent)
