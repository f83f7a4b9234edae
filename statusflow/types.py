"""Core type definitions for the StatusFlow lifecycle engine.

This module defines the fundamental types used throughout StatusFlow:
- ObjectType: Business objects that carry a status lifecycle
- TransitionVariant: UI variant of a transition action button
- OutcomeSeverity: How a post-transition outcome should be surfaced
- EventType: Audit event types for the transition event stream
- Actor: Identity of whoever confirms a transition
- Record: Immutable snapshot of a business record (status plus field values)

Records are keyed by the same field names the lifecycle definitions use
(camelCase, as returned by the REST API).
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class ObjectType(str, Enum):
    """Business object types with a status lifecycle."""
    CLAIM = "claim"
    POLICY = "policy"
    INVOICE = "invoice"


class TransitionVariant(str, Enum):
    """Visual variant of a transition button.

    Purely descriptive; the engine never branches on it.
    """
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SUCCESS = "success"
    DANGER = "danger"
    GHOST = "ghost"


class OutcomeSeverity(str, Enum):
    """Severity of the message shown after a transition is submitted."""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"


class EventType(str, Enum):
    """Audit event types for the transition event stream.

    One attempt emits ``transition.opened`` and then exactly one of
    ``transition.completed``, ``transition.overridden`` or ``transition.closed``,
    with any number of ``transition.failed`` events in between.
    """
    TRANSITION_OPENED = "transition.opened"
    TRANSITION_COMPLETED = "transition.completed"
    TRANSITION_OVERRIDDEN = "transition.overridden"
    TRANSITION_FAILED = "transition.failed"
    TRANSITION_CLOSED = "transition.closed"


class ConfigIssueCode(str, Enum):
    """Codes for problems found in a lifecycle definition document.

    The first group comes from JSON Schema validation of the document shape,
    the second from the lifecycle graph invariants.
    """
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    INVALID_VALUE = "invalid_value"
    UNEXPECTED_FIELD = "unexpected_field"
    EMPTY_LIFECYCLE = "empty_lifecycle"
    UNKNOWN_TARGET = "unknown_target"
    UNDECLARED_REQUIREMENT = "undeclared_requirement"
    DUPLICATE_TRANSITION = "duplicate_transition"
    TERMINAL_NOT_LOCKED = "terminal_not_locked"
    CUSTOM = "custom"


class ActorKind(str, Enum):
    """Actor type classification."""
    HUMAN = "human"
    SYSTEM = "system"


@dataclass(frozen=True)
class Actor:
    """Identity of an actor performing an operation.

    Attributes:
        kind: Type of actor (human or system)
        id: Unique identifier for this actor
        name: Optional display name
        role: Optional role name (e.g. "CLAIMS_EMPLOYEE")
        metadata: Optional arbitrary data

    Examples:
        >>> Actor(kind=ActorKind.HUMAN, id="user_123", role="SUPER_ADMIN").role
        'SUPER_ADMIN'
    """
    kind: ActorKind
    id: str
    name: Optional[str] = None
    role: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "kind": self.kind.value if isinstance(self.kind, ActorKind) else self.kind,
            "id": self.id,
        }
        if self.name is not None:
            result["name"] = self.name
        if self.role is not None:
            result["role"] = self.role
        if self.metadata:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Actor":
        """Create Actor from dict."""
        kind = data["kind"]
        if isinstance(kind, str):
            kind = ActorKind(kind)
        return cls(
            kind=kind,
            id=data["id"],
            name=data.get("name"),
            role=data.get("role"),
            metadata=data.get("metadata", {}),
        )


SYSTEM_ACTOR = Actor(kind=ActorKind.SYSTEM, id="statusflow")


@dataclass(frozen=True)
class Record:
    """Immutable snapshot of a business record.

    ``fields`` is a read-only view over a private copy of the values passed in,
    so later mutation of the caller's dict never leaks into an evaluation.
    A field that is missing from ``fields`` reads as ``None`` (absent).

    Attributes:
        status: Current status code
        fields: Field values keyed by field name
        id: Optional record identifier

    Examples:
        >>> record = Record.from_dict({"id": "inv_1", "status": "PENDING", "taxAmount": 0})
        >>> record.status, record.get("taxAmount"), record.get("dueDate")
        ('PENDING', 0, None)
    """
    status: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    id: Optional[str] = None

    def __post_init__(self):
        """Freeze the field mapping."""
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, name: str) -> Any:
        """Return a field value, or None when the field is not loaded."""
        return self.fields.get(name)

    def merged(self, updates: Optional[Mapping[str, Any]]) -> "Record":
        """Return the prospective record after applying ``updates``.

        A ``status`` key in ``updates`` is ignored; the prospective record keeps
        the current status.
        """
        if not updates:
            return self
        values = dict(self.fields)
        values.update((k, v) for k, v in updates.items() if k != "status")
        return Record(status=self.status, fields=values, id=self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the flat API shape."""
        result: Dict[str, Any] = dict(self.fields)
        if self.id is not None:
            result["id"] = self.id
        result["status"] = self.status
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        """Create a Record from a flat API payload with ``id`` and ``status`` keys."""
        if "status" not in data:
            raise ValueError("Record payload has no 'status' key")
        values = {k: v for k, v in data.items() if k not in ("id", "status")}
        record_id = data.get("id")
        return cls(
            status=data["status"],
            fields=values,
            id=str(record_id) if record_id is not None else None,
        )


__all__ = [
    "ObjectType",
    "TransitionVariant",
    "OutcomeSeverity",
    "EventType",
    "ConfigIssueCode",
    "ActorKind",
    "Actor",
    "SYSTEM_ACTOR",
    "Record",
]
