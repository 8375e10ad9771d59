"""
Event bus for the duel engine.

The engine queues events as a duel moves through selection, countdown,
combat and verdict, and flushes the queue after every state change. The
phase manager, the log manager and snapshot observers subscribe by
EventType. A subscriber that raises is reported and skipped, and delivery
to the remaining subscribers continues.
"""

import threading
from collections import defaultdict, deque
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


EventSubscriber = Callable[["GameEvent"], None]
ErrorHandler = Callable[[str], None]


class EventManager:
    """Queued publish/subscribe bus shared by an engine and its listeners."""

    def __init__(self, error_handler: Optional[ErrorHandler] = None):
        """Initialize an empty bus.

        Args:
            error_handler: Called with a description of every subscriber failure
        """
        self._subscribers: dict["EventType", list[tuple[EventSubscriber, str]]] = defaultdict(list)
        self._pending: deque[tuple["GameEvent", str]] = deque()
        self._lock = threading.RLock()
        self._error_handler = error_handler

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        self._error_handler = handler

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Deliver every future ``event_type`` event to ``subscriber``.

        Args:
            event_type: The type of events to receive
            subscriber: Callback taking the event
            subscriber_name: Name used when reporting the subscriber's failures
        """
        name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
        with self._lock:
            self._subscribers[event_type].append((subscriber, name))

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Stop delivering ``event_type`` events to ``subscriber``.

        Returns:
            True if the subscriber was registered
        """
        with self._lock:
            entries = self._subscribers.get(event_type, [])
            for index, (registered, _) in enumerate(entries):
                if registered == subscriber:
                    del entries[index]
                    return True
        return False

    def publish(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Queue ``event`` for the next :meth:`process_events` call."""
        with self._lock:
            self._pending.append((event, source or "unknown"))

    def process_events(self) -> int:
        """Deliver the events queued so far.

        Events published while this batch is delivered wait for the next
        call, unless a subscriber flushes them itself.

        Returns:
            Number of events delivered
        """
        with self._lock:
            batch = list(self._pending)
            self._pending.clear()

        for event, source in batch:
            self._deliver(event, source)
        return len(batch)

    def _deliver(self, event: "GameEvent", source: str) -> None:
        with self._lock:
            subscribers = list(self._subscribers.get(event.event_type, []))

        for subscriber, name in subscribers:
            try:
                subscriber(event)
            except Exception as e:
                self._report_error(
                    f"Error in subscriber {name} handling {event.event_type.name} "
                    f"from {source}: {e}"
                )

    def _report_error(self, message: str) -> None:
        if self._error_handler:
            self._error_handler(f"[EVENT] {message}")

    def has_queued_events(self) -> bool:
        """Check if there are events waiting to be delivered."""
        with self._lock:
            return len(self._pending) > 0

    def shutdown(self) -> None:
        """Drop every subscriber and any undelivered events."""
        with self._lock:
            self._subscribers.clear()
            self._pending.clear()
