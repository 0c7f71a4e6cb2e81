"""
Event Bus - Asynchronous decision lifecycle events
==================================================

Lets hosts observe what happens to a decision after the coordinator has
committed it locally, without coupling to the coordinator itself:

- a user decision was recorded and is about to be submitted
- the permission service accepted the confirmation
- the confirmation failed (the local decision stands regardless)
"""

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Decision lifecycle event types"""
    DECISION_RECORDED = "decision_recorded"
    CONFIRMATION_SENT = "confirmation_sent"
    CONFIRMATION_FAILED = "confirmation_failed"


@dataclass
class Event:
    """Represents an event in the system"""
    event_type: EventType
    session_id: str
    timestamp: str
    data: dict[str, Any]
    trace_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'event_type': self.event_type.value,
            'session_id': self.session_id,
            'timestamp': self.timestamp,
            'data': self.data,
            'trace_id': self.trace_id
        }


Subscriber = Callable[[Event], Awaitable[None]]


class EventBus:
    """
    Event bus for publishing and subscribing to decision events

    Architecture:
    - Async publish/subscribe pattern
    - Multiple subscribers per event type
    - Error isolation (one subscriber failure doesn't affect others)

    History is off by default; a session can live for a long time and
    every decision would otherwise stay in memory twice.
    """

    def __init__(self, enable_history: bool = False, max_history: int = 1000) -> None:
        self._subscribers: dict[EventType, list[Subscriber]] = {}
        self._enable_history = enable_history
        self._event_history: deque[Event] = deque(maxlen=max_history)

        logger.debug("EventBus initialized (history: %s)", enable_history)

    def subscribe(self, event_type: EventType, callback: Subscriber) -> None:
        """
        Subscribe to an event type

        Args:
            event_type: Type of event to subscribe to
            callback: Async function called with the Event
        """
        self._subscribers.setdefault(event_type, []).append(callback)
        logger.debug("Subscribed to %s", event_type.value)

    def unsubscribe(self, event_type: EventType, callback: Subscriber) -> None:
        """Unsubscribe from an event type"""
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(callback)
                logger.debug("Unsubscribed from %s", event_type.value)
            except ValueError:
                logger.warning("Callback not found in %s subscribers", event_type.value)

    @property
    def history(self) -> list[Event]:
        return list(self._event_history)

    async def publish(
        self,
        event_type: EventType,
        session_id: str,
        data: dict[str, Any],
        trace_id: str | None = None
    ) -> None:
        """
        Publish an event to every subscriber of its type

        Args:
            event_type: Type of event
            session_id: Conversation session the decision belongs to
            data: Event data
            trace_id: Optional trace ID
        """
        event = Event(
            event_type=event_type,
            session_id=session_id,
            timestamp=datetime.now(tz=UTC).isoformat(),
            data=data,
            trace_id=trace_id
        )

        if self._enable_history:
            self._event_history.append(event)

        subscribers = self._subscribers.get(event_type, [])
        if not subscribers:
            logger.debug("No subscribers for %s", event_type.value)
            return

        await asyncio.gather(
            *(self._notify_subscriber(callback, event) for callback in subscribers)
        )

    async def _notify_subscriber(self, callback: Subscriber, event: Event) -> None:
        """Errors in one subscriber don't affect others"""
        try:
            await callback(event)
        except Exception as e:
            logger.error(
                "Error in event subscriber for %s: %s",
                event.event_type.value,
                e,
                exc_info=True,
            )
