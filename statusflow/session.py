"""Origin freezing for transition confirmations.

A confirmation dialog shows a requirements checklist computed from the
record's status *when the dialog opened*. If the record is refetched while
the dialog is open and its status has moved on, the checklist must keep
using the original status; otherwise the user sees the field set of a
transition they never started.

``OriginFreezingSession`` is a two-state machine::

    IDLE --open(status)--> FROZEN --close--> IDLE

Capture happens only on the IDLE -> FROZEN edge. Reopening while FROZEN
keeps serving the frozen status.

Usage:
    >>> session = OriginFreezingSession()
    >>> session.capture_origin(True, "PENDING")
    'PENDING'
    >>> session.capture_origin(True, "VALIDATED")
    'PENDING'
    >>> session.capture_origin(False, "VALIDATED") is None
    True
    >>> session.state
    <SessionState.IDLE: 'idle'>
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from statusflow.engine import RequirementStatus
from statusflow.errors import TransitionInFlightError


class SessionState(str, Enum):
    """States of an origin-freezing session."""
    IDLE = "idle"
    FROZEN = "frozen"


@dataclass
class OriginFreezingSession:
    """Holds the origin status of one transition interaction.

    Attributes:
        state: IDLE or FROZEN
        origin: The frozen origin status, None while IDLE
        in_flight: True while a submission for this interaction is pending
    """

    state: SessionState = SessionState.IDLE
    origin: Optional[str] = None
    in_flight: bool = False

    @property
    def is_frozen(self) -> bool:
        return self.state is SessionState.FROZEN

    def capture_origin(self, is_opening: bool, current_status: str) -> Optional[str]:
        """Drive the session from the dialog's open flag.

        Args:
            is_opening: Whether the dialog is (still) open
            current_status: The record's status as currently known

        Returns:
            The origin to evaluate against, or None once released

        Raises:
            TransitionInFlightError: If closing while a submission is pending
        """
        if is_opening:
            if self.state is SessionState.IDLE:
                self.origin = current_status
                self.state = SessionState.FROZEN
            return self.origin

        self.release()
        return None

    def open(self, current_status: str) -> Optional[str]:
        """Freeze ``current_status`` if idle and return the origin."""
        return self.capture_origin(True, current_status)

    def release(self) -> None:
        """Return to IDLE, dropping the frozen origin.

        Raises:
            TransitionInFlightError: If a submission is pending
        """
        if self.in_flight:
            raise TransitionInFlightError(
                None, "Cannot close a transition while its submission is in flight"
            )
        self.state = SessionState.IDLE
        self.origin = None

    def begin_submit(self) -> None:
        """Mark a submission as pending.

        Raises:
            TransitionInFlightError: If one is already pending
        """
        if self.in_flight:
            raise TransitionInFlightError(None, "This transition is already being submitted")
        self.in_flight = True

    def end_submit(self) -> None:
        self.in_flight = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"state": self.state.value, "origin": self.origin, "inFlight": self.in_flight}


@dataclass
class TransitionAttempt:
    """Ephemeral state of one open transition confirmation.

    Created when a confirmation opens, discarded when it is closed or the
    transition is submitted successfully. The origin status is frozen in
    ``session`` and never recomputed, even when ``requirement_results`` are
    refreshed from a refetched record.

    Attributes:
        object_type: Object type of the record
        record_id: Identifier of the record being transitioned
        target_status: Requested target status
        session: Origin-freezing session holding the origin status
        requirement_results: Current checklist against the frozen origin
    """

    object_type: str
    record_id: Optional[str]
    target_status: str
    session: OriginFreezingSession = field(default_factory=OriginFreezingSession)
    requirement_results: List[RequirementStatus] = field(default_factory=list)

    @property
    def origin_status(self) -> str:
        if self.session.origin is None:
            raise RuntimeError("Transition attempt is closed")
        return self.session.origin

    @property
    def is_open(self) -> bool:
        return self.session.is_frozen

    @property
    def in_flight(self) -> bool:
        return self.session.in_flight

    @property
    def missing(self) -> List[str]:
        return [r.field for r in self.requirement_results if not r.satisfied]

    @property
    def all_requirements_met(self) -> bool:
        return all(r.satisfied for r in self.requirement_results)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "objectType": self.object_type,
            "recordId": self.record_id,
            "originStatus": self.session.origin,
            "targetStatus": self.target_status,
            "requirementResults": [r.to_dict() for r in self.requirement_results],
            "session": self.session.to_dict(),
        }


__all__ = [
    "SessionState",
    "OriginFreezingSession",
    "TransitionAttempt",
]
