"""Event system for shapecheck.

This module provides the event data structures and event emitter used to
audit validation runs. A Schema configured with an emitter emits a typed
ValidationEvent when a run starts, when it passes or fails, and whenever a
default value is written into the input.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from dateutil import parser as date_parser

from shapecheck.types import EventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationEvent:
    """A single event in a validation run.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f2a...")
        type: Event type from EventType enum
        schema_name: Name of the schema that emitted the event
        ts: UTC timestamp when the event occurred
        payload: Optional event-specific data (field path, reason, default)

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = ValidationEvent(
        ...     event_id="evt_001",
        ...     type=EventType.VALIDATION_PASSED,
        ...     schema_name="user",
        ...     ts=datetime.now(timezone.utc),
        ... )
        >>> event.type.value
        'validation.passed'
    """
    event_id: str
    type: EventType
    schema_name: Optional[str]
    ts: datetime
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Convert string event types to EventType."""
        if isinstance(self.type, str) and not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "schemaName": self.schema_name,
            "ts": self.ts.isoformat(),
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to a single-line JSON string."""
        return json.dumps(self.to_dict(), separators=(',', ':'), default=repr)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationEvent":
        """Create ValidationEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            schema_name=data.get("schemaName"),
            ts=date_parser.isoparse(data["ts"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[ValidationEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted.
"""


class EventEmitter:
    """Dispatches validation events to subscribed listeners.

    Features:
    - Type-specific subscriptions
    - Wildcard subscriptions (listen to all events)
    - Synchronous dispatch in registration order
    - Error isolation (a failing listener is logged and skipped)

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.VALIDATION_FAILED, seen.append)
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        if event_type in self._listeners:
            try:
                self._listeners[event_type].remove(listener)
            except ValueError:
                pass

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from the wildcard subscription."""
        try:
            self._any_listeners.remove(listener)
        except ValueError:
            pass

    def emit(self, event: ValidationEvent) -> None:
        """Dispatch an event to all registered listeners.

        Type-specific listeners run first, then wildcard listeners. A listener
        that raises is logged and does not affect the others or the caller.
        """
        for listener in self._listeners.get(event.type, []):
            self._dispatch(listener, event)
        for listener in self._any_listeners:
            self._dispatch(listener, event)

    def _dispatch(self, listener: EventListener, event: ValidationEvent) -> None:
        try:
            listener(event)
        except Exception:
            logger.exception("Event listener %r failed for %s", listener, event.type.value)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count registered listeners.

        Args:
            event_type: If provided, count listeners for this type only.
                        If None, count all listeners (including wildcard).
        """
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        total = len(self._any_listeners)
        for listeners in self._listeners.values():
            total += len(listeners)
        return total


__all__ = [
    "ValidationEvent",
    "EventType",
    "EventListener",
    "EventEmitter",
]
