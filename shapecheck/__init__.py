"""shapecheck: recursive, declarative data validation.

shapecheck provides:
- FieldSpec: immutable per-field rules (required, type, instance, custom, defaults, children)
- Schema: ordered field validation with nested schemas and positional list schemas
- Structured Rejection records that callers can branch on
- An audit event stream for validation runs

Basic usage:
    >>> import asyncio
    >>> from shapecheck import FieldSpec, Schema
    >>> schema = Schema({"port": FieldSpec(int, defaults=8080)})
    >>> asyncio.run(schema.validate({})).data
    {'port': 8080}
"""

__version__ = "0.1.0"

# Version info
VERSION = (0, 1, 0)

from shapecheck import log  # noqa: E402  (installs the package NullHandler)
from shapecheck.errors import Rejection, SchemaDefinitionError, ValidationRejected
from shapecheck.events import EventEmitter, ValidationEvent
from shapecheck.fields import FieldSpec
from shapecheck.schema import Schema
from shapecheck.types import EventType, RejectionReason, TypeCategory
from shapecheck.validation import ValidationResult

__all__ = [
    "__version__",
    "VERSION",
    "FieldSpec",
    "Schema",
    "ValidationResult",
    "Rejection",
    "SchemaDefinitionError",
    "ValidationRejected",
    "RejectionReason",
    "TypeCategory",
    "EventType",
    "EventEmitter",
    "ValidationEvent",
    "log",
]
