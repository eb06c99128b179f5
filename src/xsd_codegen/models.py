"""Core data structures fed to the code emitters.

These lightweight dataclasses are produced by :mod:`xsd_codegen.model_builder`
from the parsed schema and consumed, read-only, by the enumeration and
numeric emitters. They avoid any dependency on the XML layer so they can be
built directly in tests or serialized for inspection.

Overview:
        * ``Range`` holds independent, optional lower and upper ``Bound`` values
            (``Inclusive`` or ``Exclusive``) taken from numeric restriction facets.
        * ``NumericData`` is one range-constrained numeric type to emit; ``T`` is
            ``int`` for the integer family and ``float`` for decimals.
        * ``Enumeration`` is one enumerated type. Its members keep declaration
            order. When ``other_field`` is set the enumeration is *open*: any
            unrecognized literal is representable through a wrapper type.

Typical construction (simplified)::

        from xsd_codegen.models import Enumeration, Exclusive, NumericData, Range
        from xsd_codegen.naming import Symbol
        from xsd_codegen.primitives import Numeric

        divisions = NumericData(
                name=Symbol("positive-divisions"),
                base_type=Numeric.DECIMAL,
                documentation="Divisions per quarter note",
                range=Range(min=Exclusive(0.0)),
        )

        yes_no = Enumeration(
                name=Symbol("yes-no"),
                documentation="",
                members=[Symbol("yes"), Symbol("no")],
        )

Design notes:
        * ``Range`` deliberately does not enforce ``min <= max``; callers deriving
            defaults or documentation must not assume it.
        * ``to_dict`` produces stable keys to simplify diffing of dumped models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar, Union

from .naming import Symbol
from .primitives import Numeric

T = TypeVar("T", int, float)


@dataclass(frozen=True)
class Inclusive(Generic[T]):
    value: T

    def __str__(self) -> str:
        return f"Inclusive({self.value})"


@dataclass(frozen=True)
class Exclusive(Generic[T]):
    value: T

    def __str__(self) -> str:
        return f"Exclusive({self.value})"


Bound = Union[Inclusive, Exclusive]


def _bound_dict(bound: Optional[Bound]) -> Optional[dict]:
    if bound is None:
        return None
    return {"kind": type(bound).__name__.lower(), "value": bound.value}


@dataclass(frozen=True)
class Range(Generic[T]):
    """Optional lower and upper bounds of a numeric type."""

    min: Optional[Bound] = None
    max: Optional[Bound] = None

    def to_dict(self) -> dict:
        return {"min": _bound_dict(self.min), "max": _bound_dict(self.max)}


@dataclass
class NumericData(Generic[T]):
    """A range-constrained numeric type.

    Attributes:
        name: Schema name of the type (e.g. ``tenths``).
        base_type: The builtin numeric kind the type restricts.
        documentation: Annotation text from the schema (may be empty).
        range: Bounds derived from ``min/max Inclusive/Exclusive`` facets.
    """

    name: Symbol
    base_type: Numeric
    documentation: str = ""
    range: Range = field(default_factory=Range)

    @property
    def is_integer(self) -> bool:
        return self.base_type.is_integer

    def to_dict(self) -> dict:
        return {
            "name": self.name.original(),
            "base_type": self.base_type.value,
            "documentation": self.documentation,
            "range": self.range.to_dict(),
        }


@dataclass(frozen=True)
class OtherField:
    """Makes an enumeration open.

    Attributes:
        name: The extra member standing for "any other literal" (``other``).
        wrapper_class_name: Name of the generated value type that stores the
            resolved member plus, for ``other``, the literal string.
        default_value: Member a default-constructed wrapper resolves to.
    """

    name: Symbol
    wrapper_class_name: Symbol
    default_value: Symbol

    def to_dict(self) -> dict:
        return {
            "name": self.name.original(),
            "wrapper_class_name": self.wrapper_class_name.original(),
            "default_value": self.default_value.original(),
        }


@dataclass
class Enumeration:
    """An enumerated type with members in schema declaration order.

    Example:
        >>> e = Enumeration(name=Symbol("yes-no"), members=[Symbol("yes"), Symbol("no")])
        >>> e.default_member.original()
        'yes'
        >>> e.is_open
        False
    """

    name: Symbol
    documentation: str = ""
    members: List[Symbol] = field(default_factory=list)
    other_field: Optional[OtherField] = None

    @property
    def is_open(self) -> bool:
        return self.other_field is not None

    @property
    def default_member(self) -> Symbol:
        """The first declared member: the fallback of a failed parse."""
        return self.members[0]

    def to_dict(self) -> dict:
        return {
            "name": self.name.original(),
            "documentation": self.documentation,
            "members": [m.original() for m in self.members],
            "other_field": self.other_field.to_dict() if self.other_field else None,
        }
