"""Policy lifecycle.

Flow::

    PENDING -> ACTIVE -> EXPIRED | CANCELLED
    EXPIRED -> ACTIVE (reactivation) | CANCELLED

CANCELLED is terminal and fully locked. Every policy field must be present
to activate or reactivate.
"""

from statusflow.definition import LOCK_ALL, LifecycleDefinition
from statusflow.definitions.roles import BROKER_EMPLOYEES, SUPER_ADMIN_ONLY

POLICY_FIELDS = [
    "policyNumber",
    "clientId",
    "insurerId",
    "type",
    "ambCopay",
    "hospCopay",
    "maternity",
    "tPremium",
    "tplus1Premium",
    "tplusfPremium",
    "taxRate",
    "additionalCosts",
    "startDate",
    "endDate",
]

_CANCEL = {
    "targetStatus": "CANCELLED",
    "label": "Cancel",
    "buttonLabel": "✗ Cancel Policy",
    "variant": "danger",
    "icon": "✗",
}

POLICY_LIFECYCLE_DOCUMENT = {
    "objectType": "policy",
    "treatEmptyStringAsAbsent": False,
    "fieldLabels": {
        "policyNumber": "Policy Number",
        "clientId": "Client",
        "insurerId": "Insurer",
        "type": "Policy Type",
        "ambCopay": "Outpatient Copay",
        "hospCopay": "Hospital Copay",
        "maternity": "Maternity Coverage",
        "tPremium": "Premium T",
        "tplus1Premium": "Premium T+1",
        "tplusfPremium": "Premium T+F",
        "taxRate": "Tax Rate",
        "additionalCosts": "Additional Costs",
        "startDate": "Start Date",
        "endDate": "End Date",
    },
    "statuses": {
        "PENDING": {
            "label": "Pending",
            "color": "yellow",
            "allowedEditors": BROKER_EMPLOYEES,
            "editableFields": POLICY_FIELDS,
            "transitions": [
                {
                    "targetStatus": "ACTIVE",
                    "label": "Activate",
                    "buttonLabel": "✓ Activate Policy",
                    "variant": "success",
                    "icon": "✓",
                },
            ],
            "requirements": POLICY_FIELDS,
        },
        "ACTIVE": {
            "label": "Active",
            "color": "green",
            "allowedEditors": SUPER_ADMIN_ONLY,
            "editableFields": POLICY_FIELDS,
            "transitions": [
                {
                    "targetStatus": "EXPIRED",
                    "label": "Mark Expired",
                    "buttonLabel": "⏱ Mark as Expired",
                    "variant": "danger",
                    "icon": "⏱",
                },
                _CANCEL,
            ],
            "requirements": [],
        },
        "EXPIRED": {
            "label": "Expired",
            "color": "orange",
            "allowedEditors": SUPER_ADMIN_ONLY,
            "editableFields": POLICY_FIELDS,
            "transitions": [
                {
                    "targetStatus": "ACTIVE",
                    "label": "Reactivate",
                    "buttonLabel": "↻ Reactivate Policy",
                    "variant": "success",
                    "icon": "↻",
                },
                _CANCEL,
            ],
            "requirements": POLICY_FIELDS,
            "transitionRequirements": {
                "CANCELLED": [],
            },
        },
        "CANCELLED": {
            "label": "Cancelled",
            "color": "red",
            "allowedEditors": SUPER_ADMIN_ONLY,
            "editableFields": [],
            "lockedFields": [LOCK_ALL],
            "transitions": [],
        },
    },
}

POLICY_LIFECYCLE = LifecycleDefinition.from_dict(POLICY_LIFECYCLE_DOCUMENT)
