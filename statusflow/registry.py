"""Registry of lifecycle engines keyed by object type."""

from typing import Dict, Iterator, List, Union

from statusflow.definition import LifecycleDefinition
from statusflow.definitions import BUILTIN_LIFECYCLES
from statusflow.engine import LifecycleEngine
from statusflow.errors import LifecycleConfigurationError, UnknownObjectTypeError
from statusflow.logging_config import get_logger
from statusflow.types import ObjectType

logger = get_logger("registry")

ObjectTypeKey = Union[ObjectType, str]


def _key(object_type: ObjectTypeKey) -> str:
    return object_type.value if isinstance(object_type, ObjectType) else str(object_type)


class LifecycleRegistry:
    """Maps object types to their lifecycle engines.

    Examples:
        >>> registry = default_registry()
        >>> registry.engine(ObjectType.POLICY).object_type
        'policy'
        >>> sorted(registry.object_types())
        ['claim', 'invoice', 'policy']
    """

    def __init__(self) -> None:
        self._engines: Dict[str, LifecycleEngine] = {}

    def register(self, definition: LifecycleDefinition, replace: bool = False) -> LifecycleEngine:
        """Register a definition and return its engine.

        Raises:
            LifecycleConfigurationError: If the object type is already
                registered and ``replace`` is False
        """
        key = definition.object_type
        if key in self._engines and not replace:
            raise LifecycleConfigurationError(
                f"A lifecycle for object type '{key}' is already registered"
            )
        engine = LifecycleEngine(definition)
        self._engines[key] = engine
        logger.debug(
            "lifecycle_registered",
            extra={"object_type": key, "statuses": list(definition.statuses)},
        )
        return engine

    def engine(self, object_type: ObjectTypeKey) -> LifecycleEngine:
        """Return the engine for ``object_type``.

        Raises:
            UnknownObjectTypeError: If nothing is registered for it
        """
        try:
            return self._engines[_key(object_type)]
        except KeyError:
            raise UnknownObjectTypeError(_key(object_type)) from None

    def definition(self, object_type: ObjectTypeKey) -> LifecycleDefinition:
        return self.engine(object_type).definition

    def object_types(self) -> List[str]:
        return list(self._engines)

    def __contains__(self, object_type: object) -> bool:
        if not isinstance(object_type, (ObjectType, str)):
            return False
        return _key(object_type) in self._engines

    def __iter__(self) -> Iterator[LifecycleEngine]:
        return iter(self._engines.values())


def default_registry() -> LifecycleRegistry:
    """Build a registry holding the claim, policy and invoice lifecycles."""
    registry = LifecycleRegistry()
    for definition in BUILTIN_LIFECYCLES:
        registry.register(definition)
    return registry


__all__ = [
    "ObjectTypeKey",
    "LifecycleRegistry",
    "default_registry",
]
