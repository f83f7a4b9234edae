"""Unit tests for the field presence predicate."""

import pytest

from statusflow.definitions import CLAIM_LIFECYCLE, INVOICE_LIFECYCLE
from statusflow.presence import is_present


class TestDefaultRule:
    """Only None is absent under the default rule."""

    @pytest.mark.parametrize("value", [0, 0.0, False, "", [], "text", 12.5, True])
    def test_set_values_are_present(self, value):
        """Falsy primitives that were actively set count as provided."""
        assert is_present(value) is True

    def test_none_is_absent(self):
        assert is_present(None) is False


class TestEmptyStringAbsentRule:
    """The opt-in rule widens 'absent' to the empty string only."""

    def test_empty_string_is_absent(self):
        assert is_present("", treat_empty_string_as_absent=True) is False

    def test_none_is_absent(self):
        assert is_present(None, treat_empty_string_as_absent=True) is False

    @pytest.mark.parametrize("value", [0, False, " ", "0"])
    def test_other_values_stay_present(self, value):
        """Zero, False and whitespace are still provided."""
        assert is_present(value, treat_empty_string_as_absent=True) is True


class TestDefinitionFlag:
    """The rule is carried by the lifecycle definition, not the object type."""

    def test_claim_lifecycle_uses_default_rule(self):
        assert CLAIM_LIFECYCLE.treat_empty_string_as_absent is False
        assert CLAIM_LIFECYCLE.is_present("") is True

    def test_invoice_lifecycle_treats_empty_string_as_absent(self):
        assert INVOICE_LIFECYCLE.treat_empty_string_as_absent is True
        assert INVOICE_LIFECYCLE.is_present("") is False
        assert INVOICE_LIFECYCLE.is_present(0) is True
