"""LifecycleRuntime: the surface the UI/controller layer talks to.

The runtime ties the pieces together for one process:

- resolves the engine for an object type through a ``LifecycleRegistry``,
- answers the UI queries (transitions, checklist, confirm gate, editability),
- drives transition attempts: freeze the origin on open, re-evaluate
  against refetched records, submit through the update collaborator,
  reconcile the authoritative status, and emit audit events,
- allows at most one in-flight submission per record.

The runtime never talks to the network itself. The update collaborator is
any callable ``update(record_id, payload)`` that returns the authoritative
record, either as a ``Record`` or as the flat API mapping.

Usage:
    >>> from statusflow.runtime import LifecycleRuntime
    >>> from statusflow.types import Record
    >>> runtime = LifecycleRuntime()
    >>> record = Record(id="pol_1", status="ACTIVE", fields={})
    >>> [t.target_status for t in runtime.list_transitions("policy", "ACTIVE")]
    ['EXPIRED', 'CANCELLED']
    >>> attempt = runtime.open_transition("policy", record, "CANCELLED")
    >>> outcome = runtime.confirm(attempt, record, lambda rid, payload: {"id": rid, **payload})
    >>> outcome.actual_status, outcome.overridden
    ('CANCELLED', False)
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from typing_extensions import Protocol

from statusflow.definition import Transition
from statusflow.engine import LifecycleEngine, RequirementStatus
from statusflow.errors import RequirementsNotMetError, TransitionInFlightError
from statusflow.events import EventEmitter, LifecycleEvent
from statusflow.logging_config import get_logger
from statusflow.reconciliation import TransitionOutcome, reconcile
from statusflow.registry import LifecycleRegistry, ObjectTypeKey, default_registry
from statusflow.session import TransitionAttempt
from statusflow.types import SYSTEM_ACTOR, Actor, EventType, Record

logger = get_logger("runtime")


class UpdateCollaborator(Protocol):
    """Submits ``payload`` for ``record_id`` and returns the authoritative record."""

    def __call__(
        self, record_id: Optional[str], payload: Dict[str, Any]
    ) -> Union[Record, Mapping[str, Any]]:
        ...


class LifecycleRuntime:
    """Orchestrates lifecycle queries and transition attempts.

    Attributes:
        registry: Engines by object type
        emitter: Receives an audit event for every attempt step
    """

    def __init__(
        self,
        registry: Optional[LifecycleRegistry] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.emitter = emitter if emitter is not None else EventEmitter()
        self._in_flight: Set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    def engine(self, object_type: ObjectTypeKey) -> LifecycleEngine:
        return self.registry.engine(object_type)

    # ------------------------------------------------------------------
    # UI queries
    # ------------------------------------------------------------------

    def list_transitions(self, object_type: ObjectTypeKey, status: str) -> List[Transition]:
        """Transitions to offer as action buttons, in declared order."""
        return list(self.engine(object_type).transitions_for(status))

    def list_requirement_status(
        self,
        object_type: ObjectTypeKey,
        origin_status: str,
        target_status: str,
        record: Record,
        dirty_fields: Optional[Mapping[str, Any]] = None,
    ) -> List[RequirementStatus]:
        """Requirements checklist for a transition, counting unsaved edits."""
        return self.engine(object_type).requirement_status(
            record, origin_status, target_status, updates=dirty_fields
        )

    def can_confirm(
        self,
        object_type: ObjectTypeKey,
        origin_status: str,
        target_status: str,
        record: Record,
        dirty_fields: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Whether the confirm button for a transition is enabled."""
        return self.engine(object_type).can_confirm(
            record, origin_status, target_status, updates=dirty_fields
        )

    def is_field_editable(self, object_type: ObjectTypeKey, status: str, field_name: str) -> bool:
        """Whether a form field should be rendered editable."""
        return self.engine(object_type).is_editable(status, field_name)

    # ------------------------------------------------------------------
    # Transition attempts
    # ------------------------------------------------------------------

    def open_transition(
        self,
        object_type: ObjectTypeKey,
        record: Record,
        target_status: str,
        actor: Optional[Actor] = None,
    ) -> TransitionAttempt:
        """Open a confirmation for ``record`` -> ``target_status``.

        The record's current status is frozen as the origin of the attempt.

        Raises:
            InvalidTransitionError: If the target is not offered from the current status
            UnknownStatusError: If the record's status is not declared
        """
        engine = self.engine(object_type)
        attempt = TransitionAttempt(
            object_type=engine.object_type,
            record_id=record.id,
            target_status=target_status,
        )
        origin = attempt.session.open(record.status)
        attempt.requirement_results = engine.requirement_status(record, origin, target_status)

        self._emit(
            EventType.TRANSITION_OPENED,
            attempt,
            actor,
            to_status=target_status,
            payload={"missing": attempt.missing},
        )
        logger.info(
            "transition_opened",
            extra={
                "object_type": attempt.object_type,
                "record_id": attempt.record_id,
                "origin_status": origin,
                "target_status": target_status,
                "missing": attempt.missing,
            },
        )
        return attempt

    def refresh(self, attempt: TransitionAttempt, record: Record) -> List[RequirementStatus]:
        """Recompute the checklist from a refetched record.

        The origin stays frozen even if ``record.status`` has changed.
        """
        if not attempt.is_open:
            raise RuntimeError("Cannot refresh a closed transition attempt")
        origin = attempt.session.capture_origin(True, record.status)
        if record.status != origin:
            logger.info(
                "transition_origin_drift",
                extra={
                    "object_type": attempt.object_type,
                    "record_id": attempt.record_id,
                    "origin_status": origin,
                    "current_status": record.status,
                },
            )
        attempt.requirement_results = self.engine(attempt.object_type).requirement_status(
            record, origin, attempt.target_status
        )
        return attempt.requirement_results

    def confirm(
        self,
        attempt: TransitionAttempt,
        record: Record,
        update: UpdateCollaborator,
        actor: Optional[Actor] = None,
        dirty_fields: Optional[Mapping[str, Any]] = None,
    ) -> TransitionOutcome:
        """Submit the transition and reconcile against the returned status.

        ``dirty_fields`` are sent along with the status change and count
        toward the requirements, so a field and the transition can be saved
        in one request.

        Raises:
            RequirementsNotMetError: If required fields are still missing
            TransitionInFlightError: If a submission for the record is pending
            UnknownStatusError: If the response carries an undeclared status
            ValueError: If the response carries no status
            Exception: Whatever the update collaborator raises, unchanged
        """
        if not attempt.is_open:
            raise RuntimeError("Cannot confirm a closed transition attempt")
        engine = self.engine(attempt.object_type)
        origin = attempt.origin_status
        target = attempt.target_status

        evaluation = engine.evaluate(record, origin, target, updates=dirty_fields)
        if not evaluation.allowed:
            raise RequirementsNotMetError(origin, target, evaluation.missing)

        key = self._flight_key(attempt)
        with self._lock:
            if key in self._in_flight:
                raise TransitionInFlightError(attempt.record_id)
            self._in_flight.add(key)
        attempt.session.begin_submit()

        payload: Dict[str, Any] = dict(dirty_fields or {})
        payload["status"] = target
        try:
            response = update(attempt.record_id, payload)
            outcome = reconcile(engine.definition, target, response)
        except Exception as exc:
            logger.exception(
                "transition_failed",
                extra={
                    "object_type": attempt.object_type,
                    "record_id": attempt.record_id,
                    "origin_status": origin,
                    "target_status": target,
                },
            )
            self._emit(
                EventType.TRANSITION_FAILED,
                attempt,
                actor,
                to_status=target,
                payload={"error": type(exc).__name__, "message": str(exc)},
            )
            raise
        finally:
            attempt.session.end_submit()
            with self._lock:
                self._in_flight.discard(key)

        extra = {
            "object_type": attempt.object_type,
            "record_id": attempt.record_id,
            "origin_status": origin,
            "requested_status": target,
            "actual_status": outcome.actual_status,
        }
        if outcome.overridden:
            logger.warning("transition_overridden", extra=extra)
            event_type = EventType.TRANSITION_OVERRIDDEN
        else:
            logger.info("transition_confirmed", extra=extra)
            event_type = EventType.TRANSITION_COMPLETED

        self._emit(
            event_type,
            attempt,
            actor,
            to_status=outcome.actual_status,
            payload={
                "requestedStatus": target,
                "severity": outcome.severity.value,
                "message": outcome.message,
            },
        )
        attempt.session.release()
        return outcome

    def close(self, attempt: TransitionAttempt, actor: Optional[Actor] = None) -> None:
        """Discard an attempt without submitting. Closing twice is a no-op.

        Raises:
            TransitionInFlightError: If the attempt's submission is pending
        """
        if not attempt.is_open:
            return
        if attempt.in_flight:
            raise TransitionInFlightError(
                attempt.record_id, "Cannot close a transition while its submission is in flight"
            )
        self._emit(EventType.TRANSITION_CLOSED, attempt, actor, to_status=attempt.target_status)
        logger.info(
            "transition_closed",
            extra={
                "object_type": attempt.object_type,
                "record_id": attempt.record_id,
                "origin_status": attempt.origin_status,
                "target_status": attempt.target_status,
            },
        )
        attempt.session.release()

    def is_in_flight(self, object_type: ObjectTypeKey, record_id: str) -> bool:
        with self._lock:
            return (self.engine(object_type).object_type, record_id) in self._in_flight

    def _flight_key(self, attempt: TransitionAttempt) -> Tuple[str, str]:
        # Records without an id can only collide with themselves.
        record_key = attempt.record_id if attempt.record_id is not None else f"attempt:{id(attempt)}"
        return (attempt.object_type, record_key)

    def _emit(
        self,
        event_type: EventType,
        attempt: TransitionAttempt,
        actor: Optional[Actor],
        to_status: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        event = LifecycleEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            object_type=attempt.object_type,
            record_id=attempt.record_id,
            ts=datetime.now(timezone.utc),
            actor=actor or SYSTEM_ACTOR,
            from_status=attempt.origin_status,
            to_status=to_status,
            payload=payload,
        )
        self.emitter.emit(event)


__all__ = [
    "UpdateCollaborator",
    "LifecycleRuntime",
]
