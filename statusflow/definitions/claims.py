"""Claim lifecycle.

Flow::

    SUBMITTED -> UNDER_REVIEW -> APPROVED | REJECTED   (terminal)
    SUBMITTED -> PENDING_INFO -> SUBMITTED             (reprocess loop)
    UNDER_REVIEW -> PENDING_INFO

Claims use the default presence rule: ``0``, ``False`` and ``""`` count as
provided.
"""

from statusflow.definition import LOCK_ALL, LifecycleDefinition
from statusflow.definitions.roles import SENIOR_CLAIM_MANAGERS, SUPER_ADMIN_ONLY

_INTAKE_FIELDS = ["description", "amount", "policyId", "incidentDate", "type", "submittedDate"]
_RESOLUTION_FIELDS = ["approvedAmount", "resolvedDate"]

CLAIM_LIFECYCLE_DOCUMENT = {
    "objectType": "claim",
    "treatEmptyStringAsAbsent": False,
    "fieldLabels": {
        "description": "Description",
        "amount": "Claimed Amount",
        "approvedAmount": "Approved Amount",
        "policyId": "Policy",
        "incidentDate": "Incident Date",
        "submittedDate": "Submission Date",
        "resolvedDate": "Resolution Date",
        "type": "Claim Type",
        "businessDays": "Business Days",
        "reprocessDate": "Reprocess Date",
        "reprocessDescription": "Reprocess Description",
    },
    "statuses": {
        "SUBMITTED": {
            "label": "Submitted",
            "color": "blue",
            "allowedEditors": SENIOR_CLAIM_MANAGERS,
            "editableFields": _INTAKE_FIELDS,
            "lockedFields": _RESOLUTION_FIELDS,
            "transitions": [
                {
                    "targetStatus": "UNDER_REVIEW",
                    "label": "Move to Review",
                    "buttonLabel": "Move to Review →",
                    "variant": "primary",
                    "icon": "→",
                },
                {
                    "targetStatus": "PENDING_INFO",
                    "label": "Request Info",
                    "buttonLabel": "Request Info",
                    "variant": "secondary",
                    "icon": "?",
                },
            ],
            "requirements": _INTAKE_FIELDS,
            "transitionRequirements": {
                "PENDING_INFO": [],
            },
        },
        "UNDER_REVIEW": {
            "label": "Under Review",
            "color": "yellow",
            "allowedEditors": SENIOR_CLAIM_MANAGERS,
            "editableFields": _RESOLUTION_FIELDS,
            "lockedFields": _INTAKE_FIELDS,
            "transitions": [
                {
                    "targetStatus": "APPROVED",
                    "label": "Approve",
                    "buttonLabel": "✓ Approve Claim",
                    "variant": "success",
                    "icon": "✓",
                },
                {
                    "targetStatus": "REJECTED",
                    "label": "Reject",
                    "buttonLabel": "✗ Reject Claim",
                    "variant": "danger",
                    "icon": "✗",
                },
                {
                    "targetStatus": "PENDING_INFO",
                    "label": "Request Info",
                    "buttonLabel": "Request Info",
                    "variant": "secondary",
                    "icon": "?",
                },
            ],
            "requirements": _INTAKE_FIELDS + _RESOLUTION_FIELDS,
            "transitionRequirements": {
                "PENDING_INFO": [],
            },
        },
        "PENDING_INFO": {
            "label": "Pending Info",
            "color": "orange",
            "allowedEditors": SENIOR_CLAIM_MANAGERS,
            "editableFields": _INTAKE_FIELDS + ["businessDays", "reprocessDate", "reprocessDescription"],
            "transitions": [
                {
                    "targetStatus": "SUBMITTED",
                    "label": "Resubmit",
                    "buttonLabel": "Resubmit →",
                    "variant": "primary",
                    "icon": "→",
                },
            ],
            "transitionRequirements": {
                "SUBMITTED": ["reprocessDate", "reprocessDescription"],
            },
        },
        "APPROVED": {
            "label": "Approved",
            "color": "green",
            "allowedEditors": SUPER_ADMIN_ONLY,
            "editableFields": [],
            "lockedFields": [LOCK_ALL],
            "transitions": [],
        },
        "REJECTED": {
            "label": "Rejected",
            "color": "red",
            "allowedEditors": SUPER_ADMIN_ONLY,
            "editableFields": [],
            "lockedFields": [LOCK_ALL],
            "transitions": [],
        },
    },
}

CLAIM_LIFECYCLE = LifecycleDefinition.from_dict(CLAIM_LIFECYCLE_DOCUMENT)
