"""Schema orchestration and the validation algorithm.

A Schema maps field keys to FieldSpecs and validates candidate containers
against them. Keys are strings for a mapping-shaped schema and positions for
a sequence-shaped schema, which validates a list positionally.

Fields are processed in registration order and the first rejection wins. For
each field the rules run in this order:

1. resolve the value, substituting the field's default when it is absent
2. validate nested children (before any of the field's own rules)
3. custom predicate
4. required-ness, then write a resolved default back into the input
5. instance check
6. primitive category short-circuit
7. type category gate

Usage:
    >>> import asyncio
    >>> from shapecheck import FieldSpec, Schema
    >>> schema = Schema({
    ...     "name": FieldSpec(str, required=True),
    ...     "retries": FieldSpec(int, defaults=3),
    ... })
    >>> result = asyncio.run(schema.validate({"name": "worker"}))
    >>> result.data
    {'name': 'worker', 'retries': 3}
"""

import asyncio
import copy
import inspect
import logging
import uuid
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, Iterator, List, Optional, Tuple

from jsonschema import Draft7Validator

from shapecheck.errors import Rejection, SchemaDefinitionError
from shapecheck.events import EventEmitter, ValidationEvent
from shapecheck.fields import FieldKey, FieldSpec
from shapecheck.types import (
    EventType,
    RejectionReason,
    TypeCategory,
    category_of,
    descriptor_category,
    is_container,
    is_primitive_marker,
)
from shapecheck.validation import ValidationResult

logger = logging.getLogger(__name__)

JSON_SCHEMA_DRAFT7 = "http://json-schema.org/draft-07/schema#"

# JSON Schema "type" keywords for each primitive category
JSON_TYPES: Dict[TypeCategory, str] = {
    TypeCategory.NUMBER: "number",
    TypeCategory.SEQUENCE: "array",
    TypeCategory.TEXT: "string",
    TypeCategory.BOOLEAN: "boolean",
    TypeCategory.OBJECT: "object",
}


class Schema(Mapping):
    """Declarative schema validating containers field by field.

    A Schema is read-only after construction, so one instance can validate
    any number of inputs, including concurrently. ``validate`` mutates the
    input it is given to fill in defaults unless ``copy_input`` is set.

    Attributes:
        name: Optional display name, used in events and logs
        positional: True if the schema validates lists by position

    Examples:
        >>> schema = Schema([FieldSpec(int), FieldSpec(str)])
        >>> schema.positional
        True
        >>> list(schema)
        [0, 1]
    """

    def __init__(
        self,
        fields: Any,
        *,
        name: Optional[str] = None,
        coarse_containers: bool = True,
        copy_input: bool = False,
        emitter: Optional[EventEmitter] = None,
    ) -> None:
        """Build a schema from named FieldSpecs.

        Args:
            fields: A mapping of field name to FieldSpec, or a list/tuple of
                FieldSpecs matched positionally against list inputs
            name: Optional display name
            coarse_containers: Treat lists and mappings as the same category
                in type checks
            copy_input: Validate a deep copy of the input instead of amending
                the caller's object in place
            emitter: Optional EventEmitter receiving validation events

        Raises:
            SchemaDefinitionError: If ``fields`` is not a mapping or sequence,
                or if any entry is not a well-formed FieldSpec
        """
        if isinstance(fields, Mapping):
            entries: List[Tuple[FieldKey, Any]] = list(fields.items())
            self.positional = False
        elif isinstance(fields, (list, tuple)):
            entries = list(enumerate(fields))
            self.positional = True
        else:
            raise SchemaDefinitionError(f"Invalid schema: {fields!r}", value=fields)

        self.name = name
        self._coarse_containers = coarse_containers
        self._copy_input = copy_input
        self._emitter = emitter
        self._fields: Dict[FieldKey, FieldSpec] = {}
        self._children: Dict[FieldKey, "Schema"] = {}

        for key, spec in entries:
            self._register(key, spec)

    def _register(self, key: FieldKey, spec: Any) -> None:
        if not isinstance(spec, FieldSpec):
            raise SchemaDefinitionError(f"Invalid FieldSpec for '{key}': {spec!r}", key=key, value=spec)
        if spec.type is not None and not isinstance(spec.type, TypeCategory) and not callable(spec.type):
            raise SchemaDefinitionError(f"Field '{key}' has an invalid type: {spec.type!r}", key=key, value=spec)
        if spec.instance and not isinstance(spec.type, type):
            raise SchemaDefinitionError(
                f"Field '{key}' requests an instance check but its type is not a class: {spec.type!r}",
                key=key,
                value=spec,
            )
        if spec.custom is not None and not callable(spec.custom):
            raise SchemaDefinitionError(
                f"Field '{key}' has a non-callable custom predicate: {spec.custom!r}",
                key=key,
                value=spec,
            )

        bound = spec.bind(key)
        if bound.has_children:
            try:
                child = Schema(
                    bound.children,
                    name=f"{self.name}.{key}" if self.name else str(key),
                    coarse_containers=self._coarse_containers,
                    emitter=self._emitter,
                )
            except SchemaDefinitionError as exc:
                raise SchemaDefinitionError(
                    f"Invalid children for '{key}': {exc}", key=key, value=bound.children
                ) from exc
            self._children[key] = child
        self._fields[key] = bound

    # Mapping interface

    def __getitem__(self, key: FieldKey) -> FieldSpec:
        return self._fields[key]

    def __iter__(self) -> Iterator[FieldKey]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<Schema{label} fields={list(self._fields)!r}>"

    @property
    def fields(self) -> Dict[FieldKey, FieldSpec]:
        return dict(self._fields)

    def child(self, key: FieldKey) -> Optional["Schema"]:
        """Return the nested schema built for ``key``, if it declares children."""
        return self._children.get(key)

    # Validation

    def validate(self, data: Any) -> Awaitable[ValidationResult]:
        """Validate ``data`` against this schema.

        The shape of ``data`` is checked immediately; the field rules run
        when the returned awaitable is awaited.

        Args:
            data: A dict (mapping-shaped schema) or list (positional schema)

        Returns:
            Awaitable resolving to a ValidationResult. On success its ``data``
            is the input amended with resolved defaults (a copy of it if
            ``copy_input`` is set). On failure its ``rejection`` names the
            first field that failed. Defaults written for earlier fields are
            not rolled back when a later field rejects.

        Raises:
            SchemaDefinitionError: If ``data`` is not a container of the
                schema's shape. A mapping-shaped schema needs a mutable
                mapping and a positional schema needs a list, so a list
                given to a mapping-shaped schema raises too, as does a dict
                given to a positional one
        """
        if not self._accepts(data):
            raise SchemaDefinitionError(f"Invalid data: {data!r}", value=data)
        if self._copy_input:
            data = copy.deepcopy(data)
        return self._validate_root(data)

    async def validate_or_raise(self, data: Any) -> Any:
        """Validate ``data`` and return it, raising ValidationRejected on failure."""
        result = await self.validate(data)
        return result.unwrap()

    def validate_sync(self, data: Any) -> ValidationResult:
        """Run ``validate`` to completion on a fresh event loop."""
        return asyncio.run(self.validate(data))

    def _accepts(self, data: Any) -> bool:
        if not is_container(data):
            return False
        if self.positional:
            return isinstance(data, list)
        return isinstance(data, MutableMapping)

    async def _validate_root(self, data: Any) -> ValidationResult:
        self._emit(EventType.VALIDATION_STARTED, {"fields": len(self._fields)})
        result = await self._validate_fields(data)
        if result.ok:
            self._emit(EventType.VALIDATION_PASSED, None)
        else:
            self._emit(EventType.VALIDATION_FAILED, result.rejection.to_dict())
        return result

    async def _validate_fields(self, data: Any) -> ValidationResult:
        coarse = self._coarse_containers

        for key, spec in self._fields.items():
            original = _lookup(data, key)
            parameter = original
            child = self._children.get(key)
            if parameter is None and not spec.required:
                parameter = spec.defaults
                if child is not None and parameter is not None:
                    # the children pass writes into the default
                    parameter = copy.deepcopy(parameter)

            if child is not None and parameter is not None:
                if not child._accepts(parameter):
                    return self._reject(spec, parameter, RejectionReason.TYPE)
                outcome = await child._validate_fields(parameter)
                if not outcome.ok:
                    return ValidationResult.failure(outcome.rejection.nested_under(key))
                parameter = outcome.data

            if spec.custom is not None:
                verdict = spec.custom(parameter)
                if inspect.isawaitable(verdict):
                    verdict = await verdict
                if not verdict:
                    return self._reject(spec, parameter, RejectionReason.CUSTOM)

            if spec.required and parameter is None:
                return self._reject(spec, parameter, RejectionReason.REQUIRED)
            elif original is None and parameter is not None:
                _store(data, key, parameter)
                logger.debug("Field %r defaulted to %r", key, parameter)
                self._emit(EventType.FIELD_DEFAULTED, {"field": key, "value": repr(parameter)})

            if spec.instance and not isinstance(parameter, spec.type):
                return self._reject(spec, parameter, RejectionReason.INSTANCE)

            if spec.type is None:
                continue

            actual = category_of(parameter, coarse)
            expected = descriptor_category(spec.type, coarse)
            if is_primitive_marker(spec.type) and actual is expected:
                continue

            if actual is not expected:
                if not spec.required and not parameter:
                    continue
                if not spec.instance:
                    return self._reject(spec, parameter, RejectionReason.TYPE)

        return ValidationResult.success(data)

    def _reject(self, spec: FieldSpec, parameter: Any, reason: RejectionReason) -> ValidationResult:
        logger.debug("Field %r rejected (%s): %r", spec.name, reason.value, parameter)
        return ValidationResult.failure(Rejection(validator=spec, parameter=parameter, reason=reason))

    def _emit(self, event_type: EventType, payload: Optional[Dict[str, Any]]) -> None:
        if self._emitter is None:
            return
        self._emitter.emit(
            ValidationEvent(
                event_id=f"evt_{uuid.uuid4().hex[:16]}",
                type=event_type,
                schema_name=self.name,
                ts=datetime.now(timezone.utc),
                payload=payload,
            )
        )

    # Description

    def to_json_schema(self) -> Dict[str, Any]:
        """Describe this schema as a JSON Schema (Draft 7) document.

        Only what JSON Schema can express is described: presence, primitive
        types, defaults and nesting. Custom predicates and instance checks
        are left out.

        Raises:
            jsonschema.SchemaError: If the generated document is not valid
                Draft 7
        """
        document = {"$schema": JSON_SCHEMA_DRAFT7}
        document.update(self._describe())
        Draft7Validator.check_schema(document)
        return document

    def _describe(self) -> Dict[str, Any]:
        described = {key: self._describe_field(key, spec) for key, spec in self._fields.items()}
        required = [key for key, spec in self._fields.items() if spec.required]

        if self.positional:
            document: Dict[str, Any] = {"type": "array", "items": list(described.values())}
            if required:
                document["minItems"] = max(required) + 1
            return document

        document = {"type": "object", "properties": described}
        if required:
            document["required"] = required
        return document

    def _describe_field(self, key: FieldKey, spec: FieldSpec) -> Dict[str, Any]:
        child = self._children.get(key)
        if child is not None:
            described = child._describe()
        else:
            described = {}
            if spec.type is not None and is_primitive_marker(spec.type):
                category = descriptor_category(spec.type, coarse_containers=False)
                json_type = JSON_TYPES.get(category)
                if json_type is not None:
                    if self._coarse_containers and json_type in ("array", "object"):
                        described["type"] = ["array", "object"]
                    else:
                        described["type"] = json_type
            elif spec.type is not None:
                described["description"] = f"{getattr(spec.type, '__name__', spec.type)}"
        if spec.defaults is not None:
            described["default"] = spec.defaults
        return described


def _lookup(data: Any, key: FieldKey) -> Any:
    if isinstance(data, Mapping):
        return data.get(key)
    if isinstance(key, int) and 0 <= key < len(data):
        return data[key]
    return None


def _store(data: Any, key: FieldKey, value: Any) -> None:
    if isinstance(data, MutableMapping):
        data[key] = value
        return
    # positional: pad short lists up to the field's position
    while len(data) <= key:
        data.append(None)
    data[key] = value


__all__ = [
    "Schema",
]
