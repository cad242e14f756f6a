"""Field specifications for shapecheck schemas.

A FieldSpec is the immutable rule set for one field: required-ness, the
instance/type constraints, an optional custom predicate, a default value and
an optional nested schema definition. It performs no checks of its own; a
Schema reads it when validating and rejects malformed options when the spec
is registered.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

Predicate = Callable[[Any], Any]
"""A custom predicate. It may return a bool or an awaitable resolving to one."""

FieldKey = Union[str, int]


@dataclass(frozen=True)
class FieldSpec:
    """Declarative validation rules for a single field.

    Attributes:
        type: Expected type. A primitive marker (``int``, ``str``, ``list``,
            ``TypeCategory.NUMBER``, ...) or any class; None for no constraint
        required: Value must be present (not missing and not None)
        instance: Validate with ``isinstance`` against ``type``
        custom: Optional predicate, evaluated before every other rule. It is
            called for absent fields too, with the default or None, so it
            must accept None unless the field always has a value
        defaults: Value substituted as-is when the field is absent; None for
            none. Defaults of fields with children are deep-copied first
        children: Nested schema definition (mapping or sequence of FieldSpecs)
        name: Key this spec governs. Set by the owning Schema, never by callers

    Examples:
        >>> spec = FieldSpec(int, required=True)
        >>> spec.required
        True
        >>> spec.name is None
        True
    """
    type: Any = None
    required: bool = False
    instance: bool = False
    custom: Optional[Predicate] = None
    defaults: Any = None
    children: Optional[Union[Mapping[str, "FieldSpec"], Sequence["FieldSpec"], "FieldSpec"]] = None
    name: Optional[FieldKey] = field(default=None, init=False, compare=False)

    def bind(self, name: FieldKey) -> "FieldSpec":
        """Return a copy of this spec governing the field ``name``."""
        bound = replace(self)
        object.__setattr__(bound, "name", name)
        return bound

    @property
    def has_children(self) -> bool:
        """True if ``children`` is a nested definition rather than a FieldSpec."""
        return self.children is not None and not isinstance(self.children, FieldSpec)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for introspection."""
        result: Dict[str, Any] = {
            "name": self.name,
            "required": self.required,
            "instance": self.instance,
        }
        if self.type is not None:
            result["type"] = getattr(self.type, "__name__", None) or str(self.type)
        if self.custom is not None:
            result["custom"] = getattr(self.custom, "__name__", repr(self.custom))
        if self.defaults is not None:
            result["defaults"] = self.defaults
        if self.has_children:
            if isinstance(self.children, Mapping):
                result["children"] = {
                    key: child.to_dict() if isinstance(child, FieldSpec) else child
                    for key, child in self.children.items()
                }
            else:
                result["children"] = [
                    child.to_dict() if isinstance(child, FieldSpec) else child
                    for child in self.children
                ]
        return result

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "FieldSpec":
        """Create a FieldSpec from a configuration mapping.

        Recognised options are the constructor arguments; anything else
        (including ``name``) is ignored.

        Examples:
            >>> FieldSpec.from_options({"required": True, "label": "Age"}).required
            True
        """
        known = {f.name for f in fields(cls) if f.init}
        return cls(**{key: value for key, value in options.items() if key in known})


__all__ = [
    "FieldSpec",
    "FieldKey",
    "Predicate",
]
