"""Post-transition status reconciliation.

The update collaborator returns the authoritative record after a transition
is submitted, and the server is free to settle on a different status than
the one requested (an invoice submitted as VALIDATED whose amounts do not
reconcile comes back as DISCREPANCY). Callers must read the resulting
status back instead of assuming the request was honored, and the
user-facing message must describe what actually happened.

Usage:
    >>> from statusflow.definitions import INVOICE_LIFECYCLE
    >>> outcome = reconcile(INVOICE_LIFECYCLE, "VALIDATED", {"id": "inv_1", "status": "DISCREPANCY"})
    >>> outcome.overridden, outcome.severity.value
    (True, 'warning')
    >>> outcome.message
    'Marked as discrepancy: amounts do not match'
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from statusflow.definition import LifecycleDefinition
from statusflow.types import OutcomeSeverity, Record


@dataclass(frozen=True)
class TransitionOutcome:
    """What a submitted transition actually produced.

    Attributes:
        requested_status: Target status the caller asked for
        actual_status: Status in the authoritative response
        overridden: True if the server settled on a different status
        severity: How the message should be surfaced
        message: User-facing message describing the actual status
        record: The authoritative record returned by the update collaborator
    """
    requested_status: str
    actual_status: str
    overridden: bool
    severity: OutcomeSeverity
    message: str
    record: Record

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "requestedStatus": self.requested_status,
            "actualStatus": self.actual_status,
            "overridden": self.overridden,
            "severity": self.severity.value,
            "message": self.message,
            "record": self.record.to_dict(),
        }


def reconcile(
    definition: LifecycleDefinition,
    requested_status: str,
    response: Union[Record, Mapping[str, Any]],
) -> TransitionOutcome:
    """Compare the requested target with the authoritative response.

    Raises:
        UnknownStatusError: If either status is not declared in ``definition``
    """
    record = response if isinstance(response, Record) else Record.from_dict(response)
    requested = definition.status(requested_status)
    actual = definition.status(record.status)
    overridden = record.status != requested_status

    for candidate in definition.outcome_messages:
        if candidate.matches(record.status, overridden):
            severity, message = candidate.severity, candidate.message
            break
    else:
        if overridden:
            severity = OutcomeSeverity.WARNING
            message = f"Requested {requested.label} but status is now {actual.label}"
        else:
            severity = OutcomeSeverity.SUCCESS
            message = f"Status changed to {actual.label}"

    return TransitionOutcome(
        requested_status=requested_status,
        actual_status=record.status,
        overridden=overridden,
        severity=severity,
        message=message,
        record=record,
    )


__all__ = [
    "TransitionOutcome",
    "reconcile",
]
