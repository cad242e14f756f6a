"""Core type definitions for shapecheck.

This module defines the fundamental types used throughout shapecheck:
- RejectionReason: Reason codes carried by rejections and definition errors
- TypeCategory: Coarse runtime categories used by the primitive short-circuit
- EventType: Audit event types for the validation event stream

It also holds the primitive marker table and the helpers that classify
runtime values and type descriptors into categories.
"""

import enum
import numbers
from collections.abc import Mapping, MutableMapping
from enum import Enum
from typing import Any, Dict, List, Union

from typing_extensions import TypeGuard


class RejectionReason(str, Enum):
    """Reason codes for failed validations.

    SCHEMA is a construction-time failure (invalid schema or spec). The others
    are raised by data that does not conform.
    """
    CUSTOM = "custom"
    REQUIRED = "required"
    INSTANCE = "instance"
    TYPE = "type"
    SCHEMA = "schema"


class TypeCategory(str, Enum):
    """Runtime categories for values and type descriptors.

    The first six members double as primitive markers a schema author can pass
    as a field ``type``. CALLABLE and NULL only ever describe runtime values.
    """
    SYMBOL = "symbol"
    NUMBER = "number"
    SEQUENCE = "sequence"
    TEXT = "text"
    BOOLEAN = "boolean"
    OBJECT = "object"
    CALLABLE = "callable"
    NULL = "null"


class EventType(str, Enum):
    """Audit event types emitted while validating."""
    VALIDATION_STARTED = "validation.started"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    FIELD_DEFAULTED = "field.defaulted"


MARKER_CATEGORIES = (
    TypeCategory.SYMBOL,
    TypeCategory.NUMBER,
    TypeCategory.SEQUENCE,
    TypeCategory.TEXT,
    TypeCategory.BOOLEAN,
    TypeCategory.OBJECT,
)

# Builtin classes accepted as primitive markers
PRIMITIVE_TYPES: Dict[type, TypeCategory] = {
    enum.Enum: TypeCategory.SYMBOL,
    int: TypeCategory.NUMBER,
    float: TypeCategory.NUMBER,
    list: TypeCategory.SEQUENCE,
    tuple: TypeCategory.SEQUENCE,
    str: TypeCategory.TEXT,
    bool: TypeCategory.BOOLEAN,
    dict: TypeCategory.OBJECT,
    object: TypeCategory.OBJECT,
}

Container = Union[MutableMapping, List[Any]]


def _collapse(category: TypeCategory, coarse_containers: bool) -> TypeCategory:
    if coarse_containers and category is TypeCategory.SEQUENCE:
        return TypeCategory.OBJECT
    return category


def category_of(value: Any, coarse_containers: bool = True) -> TypeCategory:
    """Classify a runtime value.

    Args:
        value: Any runtime value
        coarse_containers: If True, lists and tuples report OBJECT, the same
            category as mappings

    Returns:
        The value's TypeCategory

    Examples:
        >>> category_of(5)
        <TypeCategory.NUMBER: 'number'>
        >>> category_of(True)
        <TypeCategory.BOOLEAN: 'boolean'>
        >>> category_of([1, 2], coarse_containers=False)
        <TypeCategory.SEQUENCE: 'sequence'>
    """
    if value is None:
        return TypeCategory.NULL
    # bool subclasses int, so it has to be checked first
    if isinstance(value, bool):
        return TypeCategory.BOOLEAN
    if isinstance(value, numbers.Number):
        return TypeCategory.NUMBER
    if isinstance(value, str):
        return TypeCategory.TEXT
    if isinstance(value, enum.Enum):
        return TypeCategory.SYMBOL
    if isinstance(value, (list, tuple)):
        return _collapse(TypeCategory.SEQUENCE, coarse_containers)
    if isinstance(value, Mapping):
        return TypeCategory.OBJECT
    if callable(value):
        return TypeCategory.CALLABLE
    return TypeCategory.OBJECT


def is_primitive_marker(descriptor: Any) -> bool:
    """Return True if ``descriptor`` is one of the primitive type markers."""
    if isinstance(descriptor, TypeCategory):
        return descriptor in MARKER_CATEGORIES
    try:
        return descriptor in PRIMITIVE_TYPES
    except TypeError:
        # unhashable descriptors are never markers
        return False


def descriptor_category(descriptor: Any, coarse_containers: bool = True) -> TypeCategory:
    """Classify a type descriptor.

    Primitive markers map to the category they stand for. Any other class or
    callable is itself a CALLABLE.
    """
    if isinstance(descriptor, TypeCategory):
        return _collapse(descriptor, coarse_containers)
    if is_primitive_marker(descriptor):
        return _collapse(PRIMITIVE_TYPES[descriptor], coarse_containers)
    return category_of(descriptor, coarse_containers)


def is_container(value: Any) -> TypeGuard[Container]:
    """Return True if ``value`` can be validated as a top-level shape."""
    return isinstance(value, (MutableMapping, list))


__all__ = [
    "RejectionReason",
    "TypeCategory",
    "EventType",
    "MARKER_CATEGORIES",
    "PRIMITIVE_TYPES",
    "Container",
    "category_of",
    "descriptor_category",
    "is_primitive_marker",
    "is_container",
]
