"""Generic lifecycle engine for status transitions and field editability.

One ``LifecycleEngine`` serves one ``LifecycleDefinition``; claims, policies
and invoices each get an instance of the same class. The engine is pure and
synchronous: every answer is recomputable from its inputs, so instances can
be shared freely across threads.

Usage:
    >>> from statusflow.definitions import INVOICE_LIFECYCLE
    >>> from statusflow.types import Record
    >>> engine = LifecycleEngine(INVOICE_LIFECYCLE)
    >>> [t.target_status for t in engine.transitions_for("PENDING")]
    ['VALIDATED', 'DISCREPANCY', 'CANCELLED']
    >>> record = Record(status="PENDING", fields={"billingPeriod": "2025-01", "taxAmount": 0})
    >>> engine.evaluate(record, "PENDING", "VALIDATED").missing
    ['actualAffiliateCount', 'dueDate']
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from statusflow.definition import LOCK_ALL, LifecycleDefinition, StatusDefinition, Transition
from statusflow.errors import InvalidTransitionError
from statusflow.logging_config import get_logger
from statusflow.types import Record

logger = get_logger("engine")


@dataclass(frozen=True)
class Evaluation:
    """Verdict for one transition against one record.

    Attributes:
        allowed: True iff the transition is declared and nothing is missing
        missing: Required fields that failed presence, in declared order
    """
    allowed: bool
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"allowed": self.allowed, "missing": list(self.missing)}


@dataclass(frozen=True)
class RequirementStatus:
    """One line of a requirements checklist."""
    field: str
    label: str
    satisfied: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"field": self.field, "label": self.label, "satisfied": self.satisfied}


class LifecycleEngine:
    """Transition evaluator and editability resolver for one lifecycle.

    Every method taking a status raises ``UnknownStatusError`` if that status
    is not declared; an undeclared status is a configuration problem, never
    a permissive default.

    Attributes:
        definition: The lifecycle this engine evaluates
    """

    def __init__(self, definition: LifecycleDefinition) -> None:
        self.definition = definition

    @property
    def object_type(self) -> str:
        return self.definition.object_type

    def __repr__(self) -> str:
        return f"LifecycleEngine(object_type={self.object_type!r})"

    # ------------------------------------------------------------------
    # Transition evaluator
    # ------------------------------------------------------------------

    def transitions_for(self, status: str) -> Tuple[Transition, ...]:
        """Return the declared transitions of ``status`` in declared order."""
        return self.definition.status(status).transitions

    def can_transition(self, origin_status: str, target_status: str) -> bool:
        """Return True if ``target_status`` is a declared transition from ``origin_status``."""
        return target_status in self.definition.status(origin_status).target_statuses

    def is_terminal(self, status: str) -> bool:
        return self.definition.status(status).is_terminal

    def requirements_for(self, origin_status: str, target_status: str) -> Tuple[str, ...]:
        """Return the fields required for ``origin_status`` -> ``target_status``.

        A per-transition entry wins over the status-level set, even when it
        is empty; the two are never merged. With neither declared the
        transition is unconditional.
        """
        origin = self.definition.status(origin_status)
        # Undeclared targets fail here even when no requirements apply.
        self.definition.status(target_status)
        if origin.transition_requirements is not None and target_status in origin.transition_requirements:
            return origin.transition_requirements[target_status]
        return origin.requirements

    def evaluate(
        self,
        record: Record,
        origin_status: str,
        target_status: str,
        updates: Optional[Mapping[str, Any]] = None,
    ) -> Evaluation:
        """Decide whether ``origin_status`` -> ``target_status`` is allowed for ``record``.

        ``origin_status`` is passed explicitly rather than read from the
        record so a frozen origin can be evaluated against a refreshed
        record. ``updates``, when given, are merged over the record's fields
        first, so required fields and the status change can be submitted in
        one request.

        Raises:
            InvalidTransitionError: If the transition is not declared
            UnknownStatusError: If either status is not declared
        """
        self._require_transition(origin_status, target_status)
        prospective = record.merged(updates)
        missing = [
            name
            for name in self.requirements_for(origin_status, target_status)
            if not self.definition.is_present(prospective.get(name))
        ]
        return Evaluation(allowed=not missing, missing=missing)

    def requirement_status(
        self,
        record: Record,
        origin_status: str,
        target_status: str,
        updates: Optional[Mapping[str, Any]] = None,
    ) -> List[RequirementStatus]:
        """Build the requirements checklist for a transition.

        ``updates`` are merged over the record first, as in ``evaluate``, so
        the checklist always agrees with the confirm gate.

        Raises:
            InvalidTransitionError: If the transition is not declared
        """
        self._require_transition(origin_status, target_status)
        prospective = record.merged(updates)
        return [
            RequirementStatus(
                field=name,
                label=self.definition.label_for_field(name),
                satisfied=self.definition.is_present(prospective.get(name)),
            )
            for name in self.requirements_for(origin_status, target_status)
        ]

    def can_confirm(
        self,
        record: Record,
        origin_status: str,
        target_status: str,
        updates: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Return True if the confirm action for this transition should be enabled."""
        return self.evaluate(record, origin_status, target_status, updates=updates).allowed

    def _require_transition(self, origin_status: str, target_status: str) -> StatusDefinition:
        origin = self.definition.status(origin_status)
        self.definition.status(target_status)
        if target_status not in origin.target_statuses:
            logger.debug(
                "invalid_transition_requested",
                extra={
                    "object_type": self.object_type,
                    "origin_status": origin_status,
                    "target_status": target_status,
                },
            )
            raise InvalidTransitionError(
                origin_status,
                target_status,
                object_type=self.object_type,
                valid_targets=origin.target_statuses,
            )
        return origin

    # ------------------------------------------------------------------
    # Editability resolver
    # ------------------------------------------------------------------

    def is_editable(self, status: str, field_name: str) -> bool:
        """Return True if ``field_name`` may be edited while in ``status``."""
        rules = self.definition.status(status)
        if LOCK_ALL in rules.locked_fields or not rules.editable_fields:
            return False
        return field_name in rules.editable_fields and field_name not in rules.locked_fields

    def editable_fields(self, status: str) -> Tuple[str, ...]:
        rules = self.definition.status(status)
        if rules.is_fully_locked:
            return ()
        return tuple(f for f in rules.editable_fields if f not in rules.locked_fields)

    def forbidden_fields(self, status: str, updates: Mapping[str, Any]) -> List[str]:
        """Return the keys of ``updates`` that may not be edited in ``status``.

        ``status`` itself is skipped; status changes go through the
        transition rules. Keys are returned in input order.
        """
        return [
            name
            for name in updates
            if name != "status" and not self.is_editable(status, name)
        ]

    def can_user_edit(self, status: str, role: Optional[str]) -> bool:
        """Return True if ``role`` is listed as an editor for ``status``.

        This is advisory data for the UI. Permissions are enforced by the
        update collaborator, and transitions are never gated on it here.
        """
        if role is None:
            return False
        return role in self.definition.status(status).allowed_editors


__all__ = [
    "Evaluation",
    "RequirementStatus",
    "LifecycleEngine",
]
