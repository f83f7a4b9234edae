"""Lifecycle definitions: the declarative data behind the engine.

A ``LifecycleDefinition`` describes, for one business object type, every
status the object can hold and per status:

- the fields that may be edited (or the ``"*"`` lock-all sentinel),
- the ordered outbound transitions,
- the fields that must be present before leaving the status, either one
  set for the status or one set per specific transition.

Definitions are immutable and safe to share process-wide. They round-trip
through plain dict documents (``from_dict``/``to_dict``), which is the form
in which a definition is kept as the single source of truth and exported to
other consumers.

Graph invariants enforced at construction:

- at least one status is declared,
- every transition target is a declared status, and no target repeats,
- every per-transition requirement key is a declared outbound target,
- a terminal status (no transitions) has every field locked.

Cycles (SUBMITTED -> PENDING_INFO -> SUBMITTED) and branches
(ACTIVE -> EXPIRED | CANCELLED) are allowed.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from statusflow.errors import ConfigIssue, LifecycleConfigurationError, UnknownStatusError
from statusflow.presence import is_present
from statusflow.types import ConfigIssueCode, OutcomeSeverity, TransitionVariant
from statusflow.validation import DefinitionValidator


LOCK_ALL = "*"
"""Sentinel in ``locked_fields`` meaning every field is locked."""


@dataclass(frozen=True)
class Transition:
    """A declared, directed edge to another status plus its UI metadata.

    Attributes:
        target_status: Status this transition leads to
        label: Short action label (e.g. "Approve")
        button_label: Full button text; defaults to ``label``
        variant: Button variant
        icon: Icon or glyph shown on the button
    """
    target_status: str
    label: str
    button_label: str = ""
    variant: TransitionVariant = TransitionVariant.PRIMARY
    icon: str = ""

    def __post_init__(self):
        """Normalize variant and default the button label."""
        if isinstance(self.variant, str) and not isinstance(self.variant, TransitionVariant):
            object.__setattr__(self, "variant", TransitionVariant(self.variant))
        if not self.button_label:
            object.__setattr__(self, "button_label", self.label)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "targetStatus": self.target_status,
            "label": self.label,
            "buttonLabel": self.button_label,
            "variant": self.variant.value,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transition":
        """Create Transition from dict."""
        return cls(
            target_status=data["targetStatus"],
            label=data["label"],
            button_label=data.get("buttonLabel", ""),
            variant=TransitionVariant(data.get("variant", TransitionVariant.PRIMARY.value)),
            icon=data.get("icon", ""),
        )


@dataclass(frozen=True)
class StatusDefinition:
    """Rules for a single status.

    ``transition_requirements`` is ``None`` when the status only declares
    status-level requirements. When present, an entry for a target replaces
    the status-level set for that transition (even when the entry is empty).
    """
    code: str
    label: str
    editable_fields: Tuple[str, ...] = ()
    transitions: Tuple[Transition, ...] = ()
    requirements: Tuple[str, ...] = ()
    transition_requirements: Optional[Mapping[str, Tuple[str, ...]]] = None
    locked_fields: Tuple[str, ...] = ()
    allowed_editors: Tuple[str, ...] = ()
    color: str = ""

    def __post_init__(self):
        """Freeze field sequences and the per-transition requirement mapping."""
        for name in ("editable_fields", "transitions", "requirements", "locked_fields", "allowed_editors"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if self.transition_requirements is not None:
            object.__setattr__(
                self,
                "transition_requirements",
                MappingProxyType(
                    {target: tuple(fields) for target, fields in self.transition_requirements.items()}
                ),
            )

    @property
    def is_terminal(self) -> bool:
        """A status with no outbound transitions."""
        return not self.transitions

    @property
    def is_fully_locked(self) -> bool:
        """True if no field may be edited in this status."""
        return LOCK_ALL in self.locked_fields or not self.editable_fields

    @property
    def target_statuses(self) -> Tuple[str, ...]:
        return tuple(t.target_status for t in self.transitions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "label": self.label,
            "editableFields": list(self.editable_fields),
            "transitions": [t.to_dict() for t in self.transitions],
        }
        if self.color:
            result["color"] = self.color
        if self.locked_fields:
            result["lockedFields"] = list(self.locked_fields)
        if self.allowed_editors:
            result["allowedEditors"] = list(self.allowed_editors)
        if self.requirements:
            result["requirements"] = list(self.requirements)
        if self.transition_requirements is not None:
            result["transitionRequirements"] = {
                target: list(fields) for target, fields in self.transition_requirements.items()
            }
        return result

    @classmethod
    def from_dict(cls, code: str, data: Dict[str, Any]) -> "StatusDefinition":
        """Create StatusDefinition from dict."""
        transition_requirements = data.get("transitionRequirements")
        return cls(
            code=code,
            label=data["label"],
            editable_fields=tuple(data.get("editableFields", ())),
            transitions=tuple(Transition.from_dict(t) for t in data.get("transitions", ())),
            requirements=tuple(data.get("requirements", ())),
            transition_requirements=(
                {target: tuple(fields) for target, fields in transition_requirements.items()}
                if transition_requirements is not None
                else None
            ),
            locked_fields=tuple(data.get("lockedFields", ())),
            allowed_editors=tuple(data.get("allowedEditors", ())),
            color=data.get("color", ""),
        )


@dataclass(frozen=True)
class OutcomeMessage:
    """User-facing message for a resulting status after a transition.

    ``overridden`` of ``None`` matches both overridden and as-requested
    outcomes; ``True``/``False`` match only that case.
    """
    status: str
    severity: OutcomeSeverity
    message: str
    overridden: Optional[bool] = None

    def matches(self, status: str, overridden: bool) -> bool:
        return self.status == status and self.overridden in (None, overridden)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "status": self.status,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.overridden is not None:
            result["overridden"] = self.overridden
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OutcomeMessage":
        """Create OutcomeMessage from dict."""
        return cls(
            status=data["status"],
            severity=OutcomeSeverity(data["severity"]),
            message=data["message"],
            overridden=data.get("overridden"),
        )


@dataclass(frozen=True)
class LifecycleDefinition:
    """Complete status lifecycle for one business object type.

    Attributes:
        object_type: Object type this lifecycle governs (e.g. "invoice")
        statuses: Status rules keyed by status code, in declared order
        treat_empty_string_as_absent: Presence rule flag for requirement checks
        field_labels: Display labels for field names
        outcome_messages: Post-transition messages, first match wins

    Examples:
        >>> definition = LifecycleDefinition.from_dict({
        ...     "objectType": "ticket",
        ...     "statuses": {
        ...         "OPEN": {
        ...             "label": "Open",
        ...             "editableFields": ["title"],
        ...             "transitions": [{"targetStatus": "CLOSED", "label": "Close"}],
        ...             "requirements": ["title"],
        ...         },
        ...         "CLOSED": {"label": "Closed", "editableFields": [], "transitions": []},
        ...     },
        ... })
        >>> definition.status("OPEN").target_statuses
        ('CLOSED',)
        >>> definition.terminal_statuses()
        ['CLOSED']
    """
    object_type: str
    statuses: Mapping[str, StatusDefinition]
    treat_empty_string_as_absent: bool = False
    field_labels: Mapping[str, str] = field(default_factory=dict)
    outcome_messages: Tuple[OutcomeMessage, ...] = ()

    def __post_init__(self):
        """Freeze the mappings and check the lifecycle graph invariants."""
        object.__setattr__(self, "statuses", MappingProxyType(dict(self.statuses)))
        object.__setattr__(self, "field_labels", MappingProxyType(dict(self.field_labels)))
        object.__setattr__(self, "outcome_messages", tuple(self.outcome_messages))
        issues = self._collect_issues()
        if issues:
            raise LifecycleConfigurationError(
                f"Lifecycle definition for '{self.object_type}' is inconsistent: "
                f"{len(issues)} issue(s), first: {issues[0].message}",
                issues=issues,
            )

    def _collect_issues(self) -> List[ConfigIssue]:
        issues: List[ConfigIssue] = []
        if not self.statuses:
            issues.append(
                ConfigIssue(
                    path="statuses",
                    code=ConfigIssueCode.EMPTY_LIFECYCLE,
                    message="A lifecycle must declare at least one status",
                )
            )

        for code, status in self.statuses.items():
            base = f"statuses.{code}"
            seen: set = set()
            for index, transition in enumerate(status.transitions):
                target = transition.target_status
                if target not in self.statuses:
                    issues.append(
                        ConfigIssue(
                            path=f"{base}.transitions.{index}.targetStatus",
                            code=ConfigIssueCode.UNKNOWN_TARGET,
                            message=f"Transition target '{target}' from '{code}' is not a declared status",
                        )
                    )
                if target in seen:
                    issues.append(
                        ConfigIssue(
                            path=f"{base}.transitions.{index}.targetStatus",
                            code=ConfigIssueCode.DUPLICATE_TRANSITION,
                            message=f"Transition '{code}' -> '{target}' is declared more than once",
                        )
                    )
                seen.add(target)

            for target in status.transition_requirements or {}:
                if target not in seen:
                    issues.append(
                        ConfigIssue(
                            path=f"{base}.transitionRequirements.{target}",
                            code=ConfigIssueCode.UNDECLARED_REQUIREMENT,
                            message=(
                                f"Requirements declared for '{code}' -> '{target}', "
                                f"which is not a declared transition"
                            ),
                        )
                    )

            if status.is_terminal and not status.is_fully_locked:
                issues.append(
                    ConfigIssue(
                        path=f"{base}.editableFields",
                        code=ConfigIssueCode.TERMINAL_NOT_LOCKED,
                        message=f"Terminal status '{code}' must lock every field",
                    )
                )
        return issues

    def status(self, code: str) -> StatusDefinition:
        """Return the rules for ``code``.

        Raises:
            UnknownStatusError: If the status is not declared
        """
        try:
            return self.statuses[code]
        except (KeyError, TypeError):
            raise UnknownStatusError(code, self.object_type) from None

    def has_status(self, code: str) -> bool:
        return code in self.statuses

    def terminal_statuses(self) -> List[str]:
        return [code for code, status in self.statuses.items() if status.is_terminal]

    def label_for_field(self, name: str) -> str:
        """Display label for a field; falls back to the field name."""
        return self.field_labels.get(name, name)

    def is_present(self, value: Any) -> bool:
        """Apply this lifecycle's presence rule to ``value``."""
        return is_present(value, self.treat_empty_string_as_absent)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable definition document."""
        result: Dict[str, Any] = {
            "objectType": self.object_type,
            "treatEmptyStringAsAbsent": self.treat_empty_string_as_absent,
            "statuses": {code: status.to_dict() for code, status in self.statuses.items()},
        }
        if self.field_labels:
            result["fieldLabels"] = dict(self.field_labels)
        if self.outcome_messages:
            result["outcomeMessages"] = [m.to_dict() for m in self.outcome_messages]
        return result

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Export the definition as a JSON document."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        validator: Optional[DefinitionValidator] = None,
    ) -> "LifecycleDefinition":
        """Validate a definition document and build the definition.

        Raises:
            LifecycleConfigurationError: If the document shape or the
                lifecycle graph is invalid
        """
        (validator or _default_validator()).check(data)
        return cls(
            object_type=data["objectType"],
            statuses={
                code: StatusDefinition.from_dict(code, status)
                for code, status in data["statuses"].items()
            },
            treat_empty_string_as_absent=data.get("treatEmptyStringAsAbsent", False),
            field_labels=dict(data.get("fieldLabels", {})),
            outcome_messages=tuple(
                OutcomeMessage.from_dict(m) for m in data.get("outcomeMessages", ())
            ),
        )


_validator: Optional[DefinitionValidator] = None


def _default_validator() -> DefinitionValidator:
    global _validator
    if _validator is None:
        _validator = DefinitionValidator()
    return _validator


def load_definition(path: Union[str, Path]) -> LifecycleDefinition:
    """Load a lifecycle definition from a JSON file.

    Raises:
        LifecycleConfigurationError: If the file is not valid JSON or the
            document is not a valid lifecycle definition
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise LifecycleConfigurationError(
            f"Lifecycle definition file '{path}' is not valid JSON: {exc}"
        ) from exc
    return LifecycleDefinition.from_dict(data)


__all__ = [
    "LOCK_ALL",
    "Transition",
    "StatusDefinition",
    "OutcomeMessage",
    "LifecycleDefinition",
    "load_definition",
]
