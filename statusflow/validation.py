"""JSON Schema validation for lifecycle definition documents.

Lifecycle definitions are plain, JSON-serializable documents so that a
single source of truth can be shared across process boundaries instead of
being hand-copied. This module checks the *shape* of such a document
before it is built into a ``LifecycleDefinition``; the graph invariants
(declared targets, terminal locking) are checked by the definition itself.

Schema errors are translated into ``ConfigIssue`` objects with a dot-path
into the document, an issue code, and a readable message.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft7Validator

from statusflow.errors import ConfigIssue, LifecycleConfigurationError
from statusflow.types import ConfigIssueCode, TransitionVariant


_FIELD_LIST: Dict[str, Any] = {
    "type": "array",
    "items": {"type": "string", "minLength": 1},
    "uniqueItems": True,
}

TRANSITION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "targetStatus": {"type": "string", "minLength": 1},
        "label": {"type": "string"},
        "buttonLabel": {"type": "string"},
        "variant": {"type": "string", "enum": [v.value for v in TransitionVariant]},
        "icon": {"type": "string"},
    },
    "required": ["targetStatus", "label"],
    "additionalProperties": False,
}

STATUS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "label": {"type": "string"},
        "color": {"type": "string"},
        "allowedEditors": _FIELD_LIST,
        "editableFields": _FIELD_LIST,
        "lockedFields": _FIELD_LIST,
        "transitions": {"type": "array", "items": TRANSITION_SCHEMA},
        "requirements": _FIELD_LIST,
        "transitionRequirements": {
            "type": "object",
            "additionalProperties": _FIELD_LIST,
        },
    },
    "required": ["label", "editableFields", "transitions"],
    "additionalProperties": False,
}

DEFINITION_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "LifecycleDefinition",
    "type": "object",
    "properties": {
        "objectType": {"type": "string", "minLength": 1},
        "treatEmptyStringAsAbsent": {"type": "boolean"},
        "fieldLabels": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "outcomeMessages": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "status": {"type": "string", "minLength": 1},
                    "overridden": {"type": ["boolean", "null"]},
                    "severity": {"type": "string", "enum": ["success", "info", "warning"]},
                    "message": {"type": "string", "minLength": 1},
                },
                "required": ["status", "severity", "message"],
                "additionalProperties": False,
            },
        },
        "statuses": {
            "type": "object",
            "minProperties": 1,
            "additionalProperties": STATUS_SCHEMA,
        },
    },
    "required": ["objectType", "statuses"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a definition document.

    Attributes:
        is_valid: Whether the document passed all schema checks
        issues: Every problem found, ordered by document path
    """
    is_valid: bool
    issues: List[ConfigIssue]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "issues": [issue.to_dict() for issue in self.issues],
        }


class DefinitionValidator:
    """Validates lifecycle definition documents against ``DEFINITION_SCHEMA``.

    Examples:
        >>> validator = DefinitionValidator()
        >>> validator.validate({"objectType": "claim", "statuses": {}}).is_valid
        False
        >>> validator.validate({"objectType": "claim", "statuses": {}}).issues[0].code
        <ConfigIssueCode.EMPTY_LIFECYCLE: 'empty_lifecycle'>
    """

    def __init__(self, schema: Dict[str, Any] = DEFINITION_SCHEMA) -> None:
        """Initialize the validator.

        Raises:
            jsonschema.SchemaError: If the provided schema is invalid
        """
        self.schema = schema
        Draft7Validator.check_schema(schema)
        self.validator = Draft7Validator(schema)

    def validate(self, document: Any) -> ValidationResult:
        """Validate a definition document and collect every issue."""
        errors = sorted(
            self.validator.iter_errors(document),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        if not errors:
            return ValidationResult(is_valid=True, issues=[])

        issues: List[ConfigIssue] = []
        for error in errors:
            issues.extend(self._translate_error(error))
        return ValidationResult(is_valid=False, issues=issues)

    def check(self, document: Any) -> None:
        """Validate a document, raising on the first invalid result.

        Raises:
            LifecycleConfigurationError: With all issues attached
        """
        result = self.validate(document)
        if not result.is_valid:
            object_type = document.get("objectType") if isinstance(document, dict) else None
            raise LifecycleConfigurationError(
                f"Lifecycle definition for '{object_type or '?'}' is invalid: "
                f"{len(result.issues)} issue(s), first: {result.issues[0].message}",
                issues=result.issues,
            )

    def _translate_error(self, error: jsonschema.ValidationError) -> List[ConfigIssue]:
        """Translate a jsonschema error into one or more ConfigIssues.

        Error mapping:
            - 'required' -> REQUIRED (one issue per missing property)
            - 'additionalProperties' -> UNEXPECTED_FIELD (one per extra key)
            - 'minProperties' on statuses -> EMPTY_LIFECYCLE
            - 'type' -> INVALID_TYPE
            - 'enum', 'minLength', 'uniqueItems' -> INVALID_VALUE
            - anything else -> CUSTOM
        """
        path = ".".join(str(p) for p in error.absolute_path)

        def join(child: str) -> str:
            return f"{path}.{child}" if path else child

        if error.validator == "required":
            instance = error.instance if isinstance(error.instance, dict) else {}
            return [
                ConfigIssue(
                    path=join(prop),
                    code=ConfigIssueCode.REQUIRED,
                    message=f"Field '{join(prop)}' is required but was not provided",
                )
                for prop in error.validator_value
                if prop not in instance
            ]

        if error.validator == "additionalProperties":
            declared = set(error.schema.get("properties", {}))
            instance = error.instance if isinstance(error.instance, dict) else {}
            return [
                ConfigIssue(
                    path=join(key),
                    code=ConfigIssueCode.UNEXPECTED_FIELD,
                    message=f"Field '{join(key)}' is not allowed here",
                )
                for key in instance
                if key not in declared
            ]

        if error.validator == "minProperties":
            return [
                ConfigIssue(
                    path=path,
                    code=ConfigIssueCode.EMPTY_LIFECYCLE,
                    message="A lifecycle must declare at least one status",
                )
            ]

        if error.validator == "type":
            received_type = type(error.instance).__name__
            return [
                ConfigIssue(
                    path=path,
                    code=ConfigIssueCode.INVALID_TYPE,
                    message=(
                        f"Field '{path}' has invalid type. "
                        f"Expected {error.validator_value}, got {received_type}"
                    ),
                )
            ]

        if error.validator == "enum":
            return [
                ConfigIssue(
                    path=path,
                    code=ConfigIssueCode.INVALID_VALUE,
                    message=(
                        f"Field '{path}' has invalid value {error.instance!r}. "
                        f"Must be one of: {error.validator_value}"
                    ),
                )
            ]

        if error.validator == "minLength":
            return [
                ConfigIssue(
                    path=path,
                    code=ConfigIssueCode.INVALID_VALUE,
                    message=f"Field '{path}' must not be empty",
                )
            ]

        if error.validator == "uniqueItems":
            return [
                ConfigIssue(
                    path=path,
                    code=ConfigIssueCode.INVALID_VALUE,
                    message=f"Field '{path}' contains duplicate entries",
                )
            ]

        return [
            ConfigIssue(
                path=path,
                code=ConfigIssueCode.CUSTOM,
                message=f"Field '{path}' validation failed: {error.message}",
            )
        ]


__all__ = [
    "DEFINITION_SCHEMA",
    "DefinitionValidator",
    "ValidationResult",
]
