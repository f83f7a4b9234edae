"""Audit events for transition attempts.

Every step of a transition attempt driven through ``LifecycleRuntime``
emits a typed ``LifecycleEvent``: opened, completed or overridden, failed,
closed. Events are immutable; listeners subscribe through an
``EventEmitter`` to forward them to an audit log or a notification channel.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json

from dateutil import parser as date_parser

from statusflow.logging_config import get_logger
from statusflow.types import Actor, EventType

logger = get_logger("events")


@dataclass(frozen=True)
class LifecycleEvent:
    """A single event in the life of a transition attempt.

    Attributes:
        event_id: Unique event identifier (e.g. "evt_01H8...")
        type: Event type
        object_type: Object type of the record
        record_id: Identifier of the record being transitioned
        ts: UTC timestamp when the event occurred
        actor: Actor who triggered the event
        from_status: Frozen origin status of the attempt
        to_status: Requested target, or the actual status once known
        payload: Optional event-specific data (missing fields, outcome, error)

    Examples:
        >>> from datetime import datetime, timezone
        >>> from statusflow.types import ActorKind
        >>> event = LifecycleEvent(
        ...     event_id="evt_001",
        ...     type=EventType.TRANSITION_OPENED,
        ...     object_type="invoice",
        ...     record_id="inv_1",
        ...     ts=datetime.now(timezone.utc),
        ...     actor=Actor(kind=ActorKind.HUMAN, id="user_1"),
        ...     from_status="PENDING",
        ...     to_status="VALIDATED",
        ... )
    """
    event_id: str
    type: EventType
    object_type: str
    record_id: Optional[str]
    ts: datetime
    actor: Actor
    from_status: str
    to_status: str
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Normalize string enums."""
        if isinstance(self.type, str) and not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))
        if isinstance(self.actor, dict):
            object.__setattr__(self, "actor", Actor.from_dict(self.actor))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "objectType": self.object_type,
            "recordId": self.record_id,
            "ts": self.ts.isoformat(),
            "actor": self.actor.to_dict(),
            "fromStatus": self.from_status,
            "toStatus": self.to_status,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to a single-line JSON string."""
        return json.dumps(self.to_dict(), separators=(',', ':'), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LifecycleEvent":
        """Create LifecycleEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            object_type=data["objectType"],
            record_id=data.get("recordId"),
            ts=date_parser.isoparse(data["ts"]),
            actor=Actor.from_dict(data["actor"]),
            from_status=data["fromStatus"],
            to_status=data["toStatus"],
            payload=data.get("payload"),
        )


EventListener = Callable[[LifecycleEvent], None]


class EventEmitter:
    """Dispatches lifecycle events to registered listeners.

    Type-specific listeners run first, then wildcard listeners, each in
    registration order. A listener that raises is logged and skipped; it
    never affects other listeners or the caller.

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.TRANSITION_OVERRIDDEN, seen.append)
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe a wildcard listener. Unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: LifecycleEvent) -> None:
        """Dispatch an event to all registered listeners."""
        for listener in list(self._listeners.get(event.type, [])) + list(self._any_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "event_listener_failed",
                    extra={"event_id": event.event_id, "event_type": event.type.value},
                )

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count listeners for one type, or all listeners including wildcards."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(l) for l in self._listeners.values())


__all__ = [
    "LifecycleEvent",
    "EventListener",
    "EventEmitter",
]
