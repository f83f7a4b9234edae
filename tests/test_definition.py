"""Unit tests for lifecycle definitions.

Tests cover:
- Graph invariants checked at construction
- Document round-trip (from_dict / to_dict / to_json)
- Loading definitions from JSON files
- Lookups (status, terminal statuses, field labels)
"""

import json

import pytest

from statusflow.definition import (
    LOCK_ALL,
    LifecycleDefinition,
    StatusDefinition,
    Transition,
    load_definition,
)
from statusflow.definitions import (
    BUILTIN_LIFECYCLES,
    CLAIM_LIFECYCLE,
    INVOICE_LIFECYCLE,
    POLICY_LIFECYCLE,
)
from statusflow.errors import LifecycleConfigurationError, UnknownStatusError
from statusflow.types import ConfigIssueCode, TransitionVariant


def issue_codes(exc_info):
    return [issue.code for issue in exc_info.value.issues]


class TestTransition:
    """Test transition metadata defaults."""

    def test_button_label_defaults_to_label(self):
        transition = Transition(target_status="CLOSED", label="Close")
        assert transition.button_label == "Close"
        assert transition.variant == TransitionVariant.PRIMARY

    def test_variant_string_is_normalized(self):
        transition = Transition(target_status="CLOSED", label="Close", variant="danger")
        assert transition.variant is TransitionVariant.DANGER


class TestGraphInvariants:
    """Inconsistent lifecycles are rejected at construction."""

    def test_valid_document_builds(self, ticket_document):
        definition = LifecycleDefinition.from_dict(ticket_document)
        assert list(definition.statuses) == ["OPEN", "CLOSED"]

    def test_unknown_target_rejected(self, document_factory):
        """Every transition target must be a declared status."""
        document = document_factory(
            OPEN={
                "label": "Open",
                "editableFields": ["title"],
                "transitions": [{"targetStatus": "ARCHIVED", "label": "Archive"}],
            },
        )
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition.from_dict(document)
        assert issue_codes(exc_info) == [ConfigIssueCode.UNKNOWN_TARGET]
        assert exc_info.value.issues[0].path == "statuses.OPEN.transitions.0.targetStatus"

    def test_duplicate_transition_rejected(self, document_factory):
        document = document_factory(
            OPEN={
                "label": "Open",
                "editableFields": ["title"],
                "transitions": [
                    {"targetStatus": "CLOSED", "label": "Close"},
                    {"targetStatus": "CLOSED", "label": "Close again"},
                ],
            },
            CLOSED={"label": "Closed", "editableFields": [], "transitions": []},
        )
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition.from_dict(document)
        assert issue_codes(exc_info) == [ConfigIssueCode.DUPLICATE_TRANSITION]

    def test_requirements_for_undeclared_transition_rejected(self, document_factory):
        """Per-transition requirement keys must be declared outbound targets."""
        document = document_factory(
            OPEN={
                "label": "Open",
                "editableFields": ["title"],
                "transitions": [{"targetStatus": "CLOSED", "label": "Close"}],
                "transitionRequirements": {"REOPENED": ["title"]},
            },
            CLOSED={"label": "Closed", "editableFields": [], "transitions": []},
        )
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition.from_dict(document)
        assert issue_codes(exc_info) == [ConfigIssueCode.UNDECLARED_REQUIREMENT]
        assert exc_info.value.issues[0].path == "statuses.OPEN.transitionRequirements.REOPENED"

    def test_terminal_status_must_be_locked(self, document_factory):
        """A status with no way out may not leave fields editable."""
        document = document_factory(
            OPEN={
                "label": "Open",
                "editableFields": ["title"],
                "transitions": [{"targetStatus": "CLOSED", "label": "Close"}],
            },
            CLOSED={"label": "Closed", "editableFields": ["notes"], "transitions": []},
        )
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition.from_dict(document)
        assert issue_codes(exc_info) == [ConfigIssueCode.TERMINAL_NOT_LOCKED]

    def test_terminal_status_locked_with_sentinel(self, document_factory):
        """Editable fields are allowed on a terminal status when '*' locks them all."""
        document = document_factory(
            OPEN={
                "label": "Open",
                "editableFields": ["title"],
                "transitions": [{"targetStatus": "CLOSED", "label": "Close"}],
            },
            CLOSED={
                "label": "Closed",
                "editableFields": ["notes"],
                "lockedFields": [LOCK_ALL],
                "transitions": [],
            },
        )
        definition = LifecycleDefinition.from_dict(document)
        assert definition.status("CLOSED").is_fully_locked

    def test_empty_lifecycle_rejected(self):
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition(object_type="ticket", statuses={})
        assert issue_codes(exc_info) == [ConfigIssueCode.EMPTY_LIFECYCLE]

    def test_every_issue_is_reported(self, document_factory):
        document = document_factory(
            OPEN={
                "label": "Open",
                "editableFields": ["title"],
                "transitions": [{"targetStatus": "GONE", "label": "Go"}],
                "transitionRequirements": {"CLOSED": []},
            },
            CLOSED={"label": "Closed", "editableFields": ["notes"], "transitions": []},
        )
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            LifecycleDefinition.from_dict(document)
        assert set(issue_codes(exc_info)) == {
            ConfigIssueCode.UNKNOWN_TARGET,
            ConfigIssueCode.UNDECLARED_REQUIREMENT,
            ConfigIssueCode.TERMINAL_NOT_LOCKED,
        }
        assert len(exc_info.value.to_dict()["issues"]) == 3

    def test_cycles_are_allowed(self):
        """SUBMITTED -> PENDING_INFO -> SUBMITTED is a legal loop."""
        assert "PENDING_INFO" in CLAIM_LIFECYCLE.status("SUBMITTED").target_statuses
        assert "SUBMITTED" in CLAIM_LIFECYCLE.status("PENDING_INFO").target_statuses

    @pytest.mark.parametrize("definition", BUILTIN_LIFECYCLES, ids=lambda d: d.object_type)
    def test_builtin_terminal_statuses_are_locked(self, definition):
        for code in definition.terminal_statuses():
            assert definition.status(code).is_fully_locked


class TestLookups:
    """Test status and label lookups."""

    def test_status_lookup(self):
        status = POLICY_LIFECYCLE.status("ACTIVE")
        assert isinstance(status, StatusDefinition)
        assert status.label == "Active"
        assert status.target_statuses == ("EXPIRED", "CANCELLED")

    def test_unknown_status_raises(self):
        with pytest.raises(UnknownStatusError) as exc_info:
            POLICY_LIFECYCLE.status("ARCHIVED")
        assert exc_info.value.status == "ARCHIVED"
        assert exc_info.value.object_type == "policy"

    def test_unknown_status_is_configuration_error(self):
        with pytest.raises(LifecycleConfigurationError):
            POLICY_LIFECYCLE.status("ARCHIVED")

    def test_unhashable_status_raises_unknown_status(self):
        with pytest.raises(UnknownStatusError):
            POLICY_LIFECYCLE.status(["ACTIVE"])

    def test_has_status(self):
        assert CLAIM_LIFECYCLE.has_status("UNDER_REVIEW")
        assert not CLAIM_LIFECYCLE.has_status("CLOSED")

    def test_terminal_statuses(self):
        assert CLAIM_LIFECYCLE.terminal_statuses() == ["APPROVED", "REJECTED"]
        assert POLICY_LIFECYCLE.terminal_statuses() == ["CANCELLED"]

    def test_field_label_falls_back_to_name(self):
        assert CLAIM_LIFECYCLE.label_for_field("amount") == "Claimed Amount"
        assert CLAIM_LIFECYCLE.label_for_field("internalRef") == "internalRef"

    def test_definition_is_read_only(self):
        with pytest.raises(TypeError):
            CLAIM_LIFECYCLE.statuses["ARCHIVED"] = CLAIM_LIFECYCLE.status("APPROVED")

    def test_transition_requirements_are_read_only(self):
        """Shared definitions cannot lose requirements through in-place edits."""
        requirements = INVOICE_LIFECYCLE.status("PENDING").transition_requirements
        with pytest.raises(TypeError):
            requirements["VALIDATED"] = ()
        assert INVOICE_LIFECYCLE.status("PENDING").transition_requirements["VALIDATED"] == (
            "billingPeriod",
            "taxAmount",
            "actualAffiliateCount",
            "dueDate",
        )

    def test_direct_construction_is_frozen(self):
        status = StatusDefinition(
            code="OPEN",
            label="Open",
            editable_fields=["title"],
            requirements=["title"],
            transition_requirements={"CLOSED": ["title", "notes"]},
        )
        assert status.editable_fields == ("title",)
        assert status.requirements == ("title",)
        assert status.transition_requirements["CLOSED"] == ("title", "notes")
        with pytest.raises(TypeError):
            status.transition_requirements["CLOSED"] = ()


class TestDocumentRoundTrip:
    """Definitions export to the same document they were built from."""

    @pytest.mark.parametrize("definition", BUILTIN_LIFECYCLES, ids=lambda d: d.object_type)
    def test_to_dict_from_dict(self, definition):
        rebuilt = LifecycleDefinition.from_dict(definition.to_dict())
        assert rebuilt.to_dict() == definition.to_dict()

    def test_to_json_is_loadable(self):
        document = json.loads(CLAIM_LIFECYCLE.to_json())
        assert document["objectType"] == "claim"
        assert document["statuses"]["UNDER_REVIEW"]["transitionRequirements"] == {
            "PENDING_INFO": [],
        }

    def test_status_order_is_preserved(self):
        assert list(CLAIM_LIFECYCLE.to_dict()["statuses"]) == [
            "SUBMITTED",
            "UNDER_REVIEW",
            "PENDING_INFO",
            "APPROVED",
            "REJECTED",
        ]

    def test_absent_transition_requirements_stay_absent(self):
        """Status-level only statuses keep transition_requirements as None."""
        assert POLICY_LIFECYCLE.status("PENDING").transition_requirements is None
        assert "transitionRequirements" not in POLICY_LIFECYCLE.to_dict()["statuses"]["PENDING"]


class TestLoadDefinition:
    """Test loading definitions from JSON files."""

    def test_load_from_file(self, tmp_path, ticket_document):
        path = tmp_path / "ticket.json"
        path.write_text(json.dumps(ticket_document), encoding="utf-8")
        definition = load_definition(path)
        assert definition.object_type == "ticket"
        assert definition.status("OPEN").requirements == ("title",)

    def test_load_accepts_string_path(self, tmp_path, ticket_document):
        path = tmp_path / "ticket.json"
        path.write_text(json.dumps(ticket_document), encoding="utf-8")
        assert load_definition(str(path)).object_type == "ticket"

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LifecycleConfigurationError, match="not valid JSON"):
            load_definition(path)

    def test_invalid_document_raises(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"objectType": "ticket", "statuses": {}}), encoding="utf-8")
        with pytest.raises(LifecycleConfigurationError) as exc_info:
            load_definition(path)
        assert issue_codes(exc_info) == [ConfigIssueCode.EMPTY_LIFECYCLE]
