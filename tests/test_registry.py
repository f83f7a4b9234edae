"""Unit tests for the lifecycle registry."""

import pytest

from statusflow.definition import LifecycleDefinition
from statusflow.definitions import CLAIM_LIFECYCLE
from statusflow.errors import LifecycleConfigurationError, UnknownObjectTypeError
from statusflow.registry import LifecycleRegistry, default_registry
from statusflow.types import ObjectType


class TestDefaultRegistry:
    """The default registry holds the three built-in lifecycles."""

    def test_object_types(self):
        assert default_registry().object_types() == ["claim", "policy", "invoice"]

    def test_lookup_by_enum_and_string(self):
        registry = default_registry()
        assert registry.engine(ObjectType.INVOICE) is registry.engine("invoice")

    def test_definition(self):
        assert default_registry().definition(ObjectType.CLAIM) is CLAIM_LIFECYCLE

    def test_contains(self):
        registry = default_registry()
        assert ObjectType.POLICY in registry
        assert "policy" in registry
        assert "vehicle" not in registry
        assert 42 not in registry

    def test_iteration_yields_engines(self):
        assert [e.object_type for e in default_registry()] == ["claim", "policy", "invoice"]

    def test_unknown_object_type(self):
        with pytest.raises(UnknownObjectTypeError) as exc_info:
            default_registry().engine("vehicle")
        assert exc_info.value.to_dict() == {
            "code": "unknown_object_type",
            "message": "No lifecycle registered for object type 'vehicle'",
        }


class TestRegister:
    """Test registering custom lifecycles."""

    def test_register_custom(self, ticket_document):
        registry = LifecycleRegistry()
        engine = registry.register(LifecycleDefinition.from_dict(ticket_document))
        assert registry.engine("ticket") is engine

    def test_duplicate_rejected(self):
        registry = default_registry()
        with pytest.raises(LifecycleConfigurationError, match="already registered"):
            registry.register(CLAIM_LIFECYCLE)

    def test_replace(self, ticket_document):
        registry = LifecycleRegistry()
        first = registry.register(LifecycleDefinition.from_dict(ticket_document))
        second = registry.register(LifecycleDefinition.from_dict(ticket_document), replace=True)
        assert registry.engine("ticket") is second
        assert second is not first
