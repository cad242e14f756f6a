"""Validation results for shapecheck.

A ValidationResult is the success-or-rejection union returned by
``Schema.validate``. Exactly one of ``data`` and ``rejection`` is meaningful,
as indicated by ``ok``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from shapecheck.errors import Rejection, ValidationRejected


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating data against a Schema.

    Attributes:
        ok: Whether every field passed
        data: The validated container, amended with resolved defaults
        rejection: The first rejection encountered (None if ok)

    Examples:
        >>> result = ValidationResult.success({"name": "Alice"})
        >>> result.ok
        True
        >>> result.unwrap()
        {'name': 'Alice'}
    """
    ok: bool
    data: Optional[Any] = None
    rejection: Optional[Rejection] = None

    @classmethod
    def success(cls, data: Any) -> "ValidationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, rejection: Rejection) -> "ValidationResult":
        return cls(ok=False, rejection=rejection)

    def unwrap(self) -> Any:
        """Return the validated data or raise ValidationRejected."""
        if not self.ok:
            raise ValidationRejected(self.rejection)
        return self.data

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"ok": self.ok}
        if self.rejection is not None:
            result["rejection"] = self.rejection.to_dict()
        return result


__all__ = [
    "ValidationResult",
]
