"""Unit tests for definition document validation.

Tests cover:
- Built-in documents pass the schema
- Missing, unexpected and mistyped fields
- Enum and uniqueness constraints
- Issue paths and codes
"""

import pytest

from statusflow.definition import LifecycleDefinition
from statusflow.definitions import (
    CLAIM_LIFECYCLE_DOCUMENT,
    INVOICE_LIFECYCLE_DOCUMENT,
    POLICY_LIFECYCLE_DOCUMENT,
)
from statusflow.errors import LifecycleConfigurationError
from statusflow.types import ConfigIssueCode
from statusflow.validation import DefinitionValidator


@pytest.fixture
def validator():
    return DefinitionValidator()


def issues_by_path(result):
    return {issue.path: issue.code for issue in result.issues}


class TestValidDocuments:
    """Test documents that should pass validation."""

    @pytest.mark.parametrize(
        "document",
        [CLAIM_LIFECYCLE_DOCUMENT, POLICY_LIFECYCLE_DOCUMENT, INVOICE_LIFECYCLE_DOCUMENT],
        ids=["claim", "policy", "invoice"],
    )
    def test_builtin_documents_are_valid(self, validator, document):
        result = validator.validate(document)
        assert result.is_valid is True
        assert result.issues == []

    def test_minimal_document_is_valid(self, validator, ticket_document):
        assert validator.validate(ticket_document).is_valid

    def test_check_passes_silently(self, validator, ticket_document):
        assert validator.check(ticket_document) is None


class TestMissingFields:
    """Test required-field errors."""

    def test_missing_object_type(self, validator, ticket_document):
        del ticket_document["objectType"]
        result = validator.validate(ticket_document)
        assert result.is_valid is False
        assert issues_by_path(result) == {"objectType": ConfigIssueCode.REQUIRED}

    def test_missing_status_label(self, validator, ticket_document):
        del ticket_document["statuses"]["OPEN"]["label"]
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {"statuses.OPEN.label": ConfigIssueCode.REQUIRED}

    def test_missing_transition_target(self, validator, ticket_document):
        del ticket_document["statuses"]["OPEN"]["transitions"][0]["targetStatus"]
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {
            "statuses.OPEN.transitions.0.targetStatus": ConfigIssueCode.REQUIRED
        }

    def test_one_issue_per_missing_field(self, validator):
        result = validator.validate({})
        assert issues_by_path(result) == {
            "objectType": ConfigIssueCode.REQUIRED,
            "statuses": ConfigIssueCode.REQUIRED,
        }


class TestShapeErrors:
    """Test unexpected fields, wrong types and bad values."""

    def test_unexpected_status_field(self, validator, ticket_document):
        """Transitions carry no guards beyond requirements."""
        ticket_document["statuses"]["OPEN"]["guard"] = "amount > 0"
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {"statuses.OPEN.guard": ConfigIssueCode.UNEXPECTED_FIELD}

    def test_editable_fields_must_be_a_list(self, validator, ticket_document):
        ticket_document["statuses"]["OPEN"]["editableFields"] = "title"
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {
            "statuses.OPEN.editableFields": ConfigIssueCode.INVALID_TYPE
        }

    def test_unknown_variant(self, validator, ticket_document):
        ticket_document["statuses"]["OPEN"]["transitions"][0]["variant"] = "blinking"
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {
            "statuses.OPEN.transitions.0.variant": ConfigIssueCode.INVALID_VALUE
        }
        assert "blinking" in result.issues[0].message

    def test_duplicate_requirements(self, validator, ticket_document):
        ticket_document["statuses"]["OPEN"]["requirements"] = ["title", "title"]
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {
            "statuses.OPEN.requirements": ConfigIssueCode.INVALID_VALUE
        }

    def test_empty_statuses(self, validator):
        result = validator.validate({"objectType": "ticket", "statuses": {}})
        assert issues_by_path(result) == {"statuses": ConfigIssueCode.EMPTY_LIFECYCLE}

    def test_bad_outcome_severity(self, validator, ticket_document):
        ticket_document["outcomeMessages"] = [
            {"status": "CLOSED", "severity": "error", "message": "Closed"}
        ]
        result = validator.validate(ticket_document)
        assert issues_by_path(result) == {"outcomeMessages.0.severity": ConfigIssueCode.INVALID_VALUE}

    def test_not_an_object(self, validator):
        result = validator.validate(["objectType"])
        assert [issue.code for issue in result.issues] == [ConfigIssueCode.INVALID_TYPE]

    def test_issues_serialize(self, validator):
        result = validator.validate({"objectType": "ticket", "statuses": {}})
        assert result.to_dict() == {
            "isValid": False,
            "issues": [
                {
                    "path": "statuses",
                    "code": "empty_lifecycle",
                    "message": "A lifecycle must declare at least one status",
                }
            ],
        }


class TestCheck:
    """check() and from_dict() raise with every issue attached."""

    def test_check_raises(self, validator, ticket_document):
        ticket_document["statuses"]["OPEN"]["editableFields"] = "title"
        del ticket_document["statuses"]["CLOSED"]["label"]
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            validator.check(ticket_document)
        assert "ticket" in str(exc_info.value)
        assert len(exc_info.value.issues) == 2

    def test_from_dict_validates_shape(self, ticket_document):
        ticket_document["statuses"]["OPEN"]["transitions"][0]["variant"] = "blinking"
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition.from_dict(ticket_document)
        assert exc_info.value.issues[0].code == ConfigIssueCode.INVALID_VALUE
