"""Exception types for the StatusFlow lifecycle engine.

All errors raised by the engine are programmer- or configuration-facing:
they signal that a caller offered an action the lifecycle does not declare,
or that a lifecycle definition is inconsistent. Unmet requirements are not
errors; ``LifecycleEngine.evaluate`` reports them as a normal result.

Hierarchy::

    LifecycleError
    ├── InvalidTransitionError
    ├── LifecycleConfigurationError
    │   └── UnknownStatusError
    ├── UnknownObjectTypeError
    ├── RequirementsNotMetError
    └── TransitionInFlightError

Every error exposes ``to_dict()`` so it can be attached to a structured log
line or returned over an API boundary.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from statusflow.types import ConfigIssueCode


@dataclass(frozen=True)
class ConfigIssue:
    """A single problem found in a lifecycle definition document.

    Attributes:
        path: Dot-notation path into the document (e.g. "statuses.PENDING.transitions.0")
        code: Issue code
        message: Human-readable description

    Examples:
        >>> issue = ConfigIssue(
        ...     path="statuses.ACTIVE.transitions.1.targetStatus",
        ...     code=ConfigIssueCode.UNKNOWN_TARGET,
        ...     message="Transition target 'ARCHIVED' is not a declared status",
        ... )
        >>> issue.to_dict()["code"]
        'unknown_target'
    """
    path: str
    code: ConfigIssueCode
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "path": self.path,
            "code": self.code.value if isinstance(self.code, ConfigIssueCode) else self.code,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigIssue":
        """Create ConfigIssue from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = ConfigIssueCode(code)
        return cls(path=data["path"], code=code, message=data["message"])


class LifecycleError(Exception):
    """Base class for all lifecycle engine errors."""

    code = "lifecycle_error"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"code": self.code, "message": str(self)}


class InvalidTransitionError(LifecycleError):
    """Raised when evaluating a transition the origin status does not declare.

    This signals a UI bug: an action was offered that the lifecycle does not
    allow. Callers should only ever evaluate targets drawn from
    ``transitions_for(origin)``.

    Attributes:
        origin_status: The status the transition starts from
        target_status: The requested target status
        object_type: Object type whose lifecycle was consulted
    """

    code = "invalid_transition"

    def __init__(
        self,
        origin_status: str,
        target_status: str,
        object_type: Optional[str] = None,
        valid_targets: Sequence[str] = (),
    ):
        self.origin_status = origin_status
        self.target_status = target_status
        self.object_type = object_type
        self.valid_targets = list(valid_targets)
        if self.valid_targets:
            message = (
                f"Invalid transition for {object_type or 'record'}: cannot move from "
                f"'{origin_status}' to '{target_status}'. Valid targets from "
                f"'{origin_status}' are: {', '.join(self.valid_targets)}"
            )
        else:
            message = (
                f"Invalid transition for {object_type or 'record'}: '{origin_status}' is a "
                f"terminal status, no transitions are allowed."
            )
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result = super().to_dict()
        result.update(
            {
                "originStatus": self.origin_status,
                "targetStatus": self.target_status,
                "validTargets": self.valid_targets,
            }
        )
        if self.object_type is not None:
            result["objectType"] = self.object_type
        return result


class LifecycleConfigurationError(LifecycleError):
    """Raised when a lifecycle definition is malformed or inconsistent.

    Attributes:
        issues: Every problem found, not just the first one
    """

    code = "lifecycle_configuration"

    def __init__(self, message: str, issues: Optional[List[ConfigIssue]] = None):
        self.issues = list(issues or [])
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result = super().to_dict()
        if self.issues:
            result["issues"] = [issue.to_dict() for issue in self.issues]
        return result


class UnknownStatusError(LifecycleConfigurationError):
    """Raised when a status code is not declared in the lifecycle definition.

    The definition for an object type must cover every status its records can
    hold; an unknown status is never treated permissively.
    """

    code = "unknown_status"

    def __init__(self, status: Any, object_type: Optional[str] = None):
        self.status = status
        self.object_type = object_type
        super().__init__(
            f"Status '{status}' is not declared in the "
            f"{object_type or 'record'} lifecycle"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result = super().to_dict()
        result["status"] = self.status
        if self.object_type is not None:
            result["objectType"] = self.object_type
        return result


class UnknownObjectTypeError(LifecycleError):
    """Raised when no lifecycle is registered for an object type."""

    code = "unknown_object_type"

    def __init__(self, object_type: Any):
        self.object_type = object_type
        super().__init__(f"No lifecycle registered for object type '{object_type}'")


class RequirementsNotMetError(LifecycleError):
    """Raised when confirming a transition whose requirements are not all present.

    Attributes:
        missing: Required fields that are still absent, in declared order
    """

    code = "requirements_not_met"

    def __init__(self, origin_status: str, target_status: str, missing: Sequence[str]):
        self.origin_status = origin_status
        self.target_status = target_status
        self.missing = list(missing)
        super().__init__(
            f"Cannot confirm '{origin_status}' -> '{target_status}': "
            f"missing {', '.join(self.missing)}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result = super().to_dict()
        result["missing"] = self.missing
        return result


class TransitionInFlightError(LifecycleError):
    """Raised when a transition submission is already in flight for a record."""

    code = "transition_in_flight"

    def __init__(self, record_id: Optional[str], message: Optional[str] = None):
        self.record_id = record_id
        super().__init__(
            message or f"A transition for record '{record_id}' is already being submitted"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result = super().to_dict()
        result["recordId"] = self.record_id
        return result


__all__ = [
    "ConfigIssue",
    "LifecycleError",
    "InvalidTransitionError",
    "LifecycleConfigurationError",
    "UnknownStatusError",
    "UnknownObjectTypeError",
    "RequirementsNotMetError",
    "TransitionInFlightError",
]
