"""Structured error types for shapecheck.

Two tiers of failure exist:

- Construction-time: a malformed schema or field spec. These are programmer
  errors and raise SchemaDefinitionError immediately.
- Validation-time: data that does not conform. These are reported as a
  Rejection record inside a ValidationResult, so callers can branch on
  ``reason`` and build their own messages. ValidationRejected wraps a
  Rejection for callers that prefer exceptions.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from shapecheck.fields import FieldKey, FieldSpec
from shapecheck.types import RejectionReason


@dataclass(frozen=True)
class Rejection:
    """Outcome of a failed validation.

    Attributes:
        validator: The named FieldSpec whose rule rejected the value
        parameter: The offending input value (after default resolution)
        reason: Which rule rejected it
        path: Keys leading from the outermost schema to the offending field

    Examples:
        >>> spec = FieldSpec(int).bind("age")
        >>> rejection = Rejection(validator=spec, parameter="x", reason=RejectionReason.TYPE)
        >>> rejection.field.name
        'age'
        >>> rejection.to_dict()["reason"]
        'type'
    """
    validator: FieldSpec
    parameter: Any
    reason: RejectionReason
    path: Tuple[FieldKey, ...] = ()

    def __post_init__(self):
        """Normalize string reasons and default the path to the field name."""
        if isinstance(self.reason, str) and not isinstance(self.reason, RejectionReason):
            object.__setattr__(self, "reason", RejectionReason(self.reason))
        if not self.path and self.validator.name is not None:
            object.__setattr__(self, "path", (self.validator.name,))

    @property
    def field(self) -> FieldSpec:
        """Alias for ``validator``."""
        return self.validator

    @property
    def value(self) -> Any:
        """Alias for ``parameter``."""
        return self.parameter

    def nested_under(self, key: FieldKey) -> "Rejection":
        """Return this rejection with ``key`` prepended to its path."""
        return Rejection(
            validator=self.validator,
            parameter=self.parameter,
            reason=self.reason,
            path=(key,) + self.path,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "field": self.validator.name,
            "path": ".".join(str(p) for p in self.path),
            "reason": self.reason.value,
            "value": repr(self.parameter),
        }


class SchemaDefinitionError(Exception):
    """Raised when a schema, a field spec or a top-level input is malformed.

    Attributes:
        key: The field key at fault, if any
        value: The offending definition or input
        reason: Always RejectionReason.SCHEMA
    """

    reason = RejectionReason.SCHEMA

    def __init__(self, message: str, key: Optional[FieldKey] = None, value: Any = None):
        self.key = key
        self.value = value
        super().__init__(message)


class ValidationRejected(Exception):
    """Raised by the opt-in raising helpers when validation rejects.

    Attributes:
        rejection: The Rejection that caused the failure
    """

    def __init__(self, rejection: Rejection):
        self.rejection = rejection
        path = ".".join(str(p) for p in rejection.path) or "<root>"
        super().__init__(f"Field '{path}' rejected: {rejection.reason.value}")

    @property
    def reason(self) -> RejectionReason:
        return self.rejection.reason


__all__ = [
    "Rejection",
    "SchemaDefinitionError",
    "ValidationRejected",
]
