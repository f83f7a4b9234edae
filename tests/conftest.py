"""Shared fixtures."""

import pytest

from statusflow.logging_config import reset_logging
from statusflow.types import Record


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep the statusflow logger propagating to caplog between tests."""
    reset_logging()
    yield
    reset_logging()


def make_document(**statuses):
    """Build a minimal definition document for a 'ticket' lifecycle.

    Without arguments the lifecycle is OPEN -> CLOSED, with ``title``
    required to close.
    """
    if not statuses:
        statuses = {
            "OPEN": {
                "label": "Open",
                "editableFields": ["title", "notes"],
                "transitions": [{"targetStatus": "CLOSED", "label": "Close"}],
                "requirements": ["title"],
            },
            "CLOSED": {"label": "Closed", "editableFields": [], "transitions": []},
        }
    return {"objectType": "ticket", "statuses": statuses}


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def ticket_document():
    return make_document()


@pytest.fixture
def invoice_record():
    """A PENDING invoice whose amounts reconcile."""
    return Record(
        id="inv_1",
        status="PENDING",
        fields={
            "invoiceNumber": "F-2024-031",
            "billingPeriod": "2024-03",
            "taxAmount": 0,
            "actualAffiliateCount": 12,
            "expectedAffiliateCount": 12,
            "dueDate": "2024-04-15",
            "expectedAmount": 1500.0,
            "totalAmount": 1500.5,
        },
    )
