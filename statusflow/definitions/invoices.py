"""Invoice lifecycle.

Flow::

    PENDING -> VALIDATED | DISCREPANCY | CANCELLED
    VALIDATED -> DISCREPANCY | CANCELLED
    DISCREPANCY -> VALIDATED | CANCELLED

Invoice forms default text inputs to ``""``, so this lifecycle treats an
empty string as absent. When a transition to VALIDATED is submitted, the
server reconciles expected against invoiced amounts and may settle the
invoice in DISCREPANCY instead; the outcome messages below cover both
cases.
"""

from statusflow.definition import LOCK_ALL, LifecycleDefinition
from statusflow.definitions.roles import BROKER_EMPLOYEES, SUPER_ADMIN_ONLY

_DATA_REQUIREMENTS = ["billingPeriod", "taxAmount", "actualAffiliateCount", "dueDate"]

_VALIDATE = {
    "targetStatus": "VALIDATED",
    "label": "Validate",
    "buttonLabel": "Validate Invoice",
    "variant": "success",
    "icon": "✓",
}
_DISCREPANCY = {
    "targetStatus": "DISCREPANCY",
    "label": "Mark Discrepancy",
    "buttonLabel": "Mark Discrepancy",
    "variant": "secondary",
    "icon": "⚠",
}
_CANCEL = {
    "targetStatus": "CANCELLED",
    "label": "Cancel",
    "buttonLabel": "Cancel Invoice",
    "variant": "danger",
    "icon": "✗",
}

INVOICE_LIFECYCLE_DOCUMENT = {
    "objectType": "invoice",
    "treatEmptyStringAsAbsent": True,
    "fieldLabels": {
        "invoiceNumber": "Invoice Number",
        "insurerInvoiceNumber": "Insurer Invoice Number",
        "clientId": "Client",
        "insurerId": "Insurer",
        "billingPeriod": "Billing Period",
        "totalAmount": "Total Amount",
        "taxAmount": "Tax",
        "actualAffiliateCount": "Actual Affiliate Count",
        "expectedAmount": "Expected Amount",
        "expectedAffiliateCount": "Expected Affiliate Count",
        "issueDate": "Issue Date",
        "dueDate": "Due Date",
        "paymentDate": "Payment Date",
        "paymentStatus": "Payment Status",
        "discrepancyNotes": "Discrepancy Notes",
    },
    "outcomeMessages": [
        {"status": "VALIDATED", "severity": "success", "message": "Invoice validated"},
        {
            "status": "DISCREPANCY",
            "overridden": True,
            "severity": "warning",
            "message": "Marked as discrepancy: amounts do not match",
        },
        {
            "status": "DISCREPANCY",
            "overridden": False,
            "severity": "info",
            "message": "Invoice marked as discrepancy",
        },
        {"status": "CANCELLED", "severity": "info", "message": "Invoice cancelled"},
    ],
    "statuses": {
        "PENDING": {
            "label": "Pending",
            "color": "blue",
            "allowedEditors": BROKER_EMPLOYEES,
            "editableFields": [
                "invoiceNumber",
                "insurerInvoiceNumber",
                "clientId",
                "insurerId",
                "billingPeriod",
                "totalAmount",
                "taxAmount",
                "actualAffiliateCount",
                "expectedAmount",
                "expectedAffiliateCount",
                "issueDate",
                "dueDate",
                "discrepancyNotes",
            ],
            "transitions": [_VALIDATE, _DISCREPANCY, _CANCEL],
            "requirements": _DATA_REQUIREMENTS,
            "transitionRequirements": {
                "VALIDATED": _DATA_REQUIREMENTS,
                "DISCREPANCY": _DATA_REQUIREMENTS,
                "CANCELLED": [],
            },
        },
        "VALIDATED": {
            "label": "Validated",
            "color": "green",
            "allowedEditors": BROKER_EMPLOYEES,
            "editableFields": ["paymentStatus", "paymentDate", "discrepancyNotes"],
            "transitions": [_DISCREPANCY, _CANCEL],
            "requirements": [],
        },
        "DISCREPANCY": {
            "label": "Discrepancy",
            "color": "yellow",
            "allowedEditors": BROKER_EMPLOYEES,
            "editableFields": [
                "discrepancyNotes",
                "expectedAmount",
                "actualAffiliateCount",
                "totalAmount",
                "taxAmount",
                "billingPeriod",
                "paymentStatus",
                "paymentDate",
            ],
            "transitions": [_VALIDATE, _CANCEL],
            "requirements": ["discrepancyNotes"],
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

INVOICE_LIFECYCLE = LifecycleDefinition.from_dict(INVOICE_LIFECYCLE_DOCUMENT)
