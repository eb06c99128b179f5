"""Derive emitter models (enumerations and numeric ranges) from a parsed schema.

This is the linking pass layered on top of parsing: named simple types whose
restriction base is another simple type are resolved through
:meth:`Xsd.find <xsd_codegen.schema.Xsd.find>`, so a derived type inherits the
numeric kind and bounds of its base with its own facets taking precedence.

Extraction rules for each top-level ``simpleType``:

* restriction with ``enumeration`` facets -> closed :class:`Enumeration`
* union of a string builtin (``xs:token``, ``xs:string``, ...) with exactly one
  enumerated simple type -> open :class:`Enumeration` named ``<name>-enum``
  whose wrapper class is ``<name>``
* restriction whose resolved base is numeric -> :class:`NumericData` (``int``
  for the integer family, ``float`` for ``decimal``)
* anything else (patterns over strings, lists, numeric unions, ...) is not a
  constrained type of interest here and is skipped

Example:
    from xsd_codegen.schema import load
    from xsd_codegen.model_builder import build_model

    model = build_model(load("musicxml.xsd"))
    print(len(model.enumerations), len(model.integers), len(model.decimals))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
import math
from typing import Callable, Dict, List, Optional, Tuple

from .errors import IdentifierCollisionError, NotFoundError, SchemaError
from .ids import EntryType, Id
from .models import Bound, Enumeration, Exclusive, Inclusive, NumericData, OtherField, Range
from .naming import Symbol
from .primitives import Character, Numeric, OtherType, split_prefixed
from .schema import Xsd
from .xsd_parser import Facets, Restriction, SimpleType, UnionType

logger = logging.getLogger(__name__)

OTHER_MEMBER = "other"
OPEN_ENUM_SUFFIX = "-enum"


@dataclass
class SchemaModel:
    """Everything the emitters need, grouped by artifact."""

    enumerations: List[Enumeration] = field(default_factory=list)
    integers: List[NumericData] = field(default_factory=list)
    decimals: List[NumericData] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "enumerations": [e.to_dict() for e in self.enumerations],
            "integers": [n.to_dict() for n in self.integers],
            "decimals": [n.to_dict() for n in self.decimals],
        }


def builtin_integers() -> List[NumericData]:
    """Wrappers for builtin integer kinds referenced by schema types."""
    return [
        NumericData(
            name=Symbol("positiveInteger"),
            base_type=Numeric.POSITIVE_INTEGER,
            documentation="The built-in primitive xs:positiveInteger",
            range=Range(min=Inclusive(1)),
        ),
        NumericData(
            name=Symbol("nonNegativeInteger"),
            base_type=Numeric.NON_NEGATIVE_INTEGER,
            documentation="The built-in primitive xs:nonNegativeInteger",
            range=Range(min=Inclusive(0)),
        ),
    ]


def _to_number(raw: str, convert: Callable[[str], object], owner: str) -> object:
    try:
        value = convert(raw)
    except ValueError:
        raise SchemaError(f"invalid numeric facet value '{raw}' in '{owner}'") from None
    if isinstance(value, float) and not math.isfinite(value):
        raise SchemaError(f"non-finite numeric facet value '{raw}' in '{owner}'")
    return value


def facet_range(facets: Facets, integer: bool, owner: str = "", inherited: Optional[Range] = None) -> Range:
    """Build a :class:`Range` from restriction facets.

    Facets present on ``facets`` replace the corresponding bound of
    ``inherited``; an inclusive and an exclusive facet for the same side are
    resolved in favour of the exclusive one.
    """
    convert: Callable[[str], object] = int if integer else float
    base = inherited or Range()

    def bound(inclusive: Optional[str], exclusive: Optional[str], fallback: Optional[Bound]) -> Optional[Bound]:
        if exclusive is not None:
            return Exclusive(_to_number(exclusive, convert, owner))
        if inclusive is not None:
            return Inclusive(_to_number(inclusive, convert, owner))
        if fallback is not None:
            return type(fallback)(convert(fallback.value))
        return None

    return Range(
        min=bound(facets.min_inclusive, facets.min_exclusive, base.min),
        max=bound(facets.max_inclusive, facets.max_exclusive, base.max),
    )


def check_type_names(model: SchemaModel) -> None:
    """Raise if two generated C++ types would share a class name."""
    names: List[Symbol] = []
    for enumeration in model.enumerations:
        names.append(enumeration.name)
        if enumeration.other_field is not None:
            names.append(enumeration.other_field.wrapper_class_name)
    names.extend(n.name for n in model.integers)
    names.extend(n.name for n in model.decimals)

    seen: Dict[str, Symbol] = {}
    for name in names:
        existing = seen.setdefault(name.pascal(), name)
        if existing is not name:
            raise IdentifierCollisionError("schema", existing.original(), name.original(), name.pascal())


class ModelBuilder:
    """Walks the top-level simple types of an :class:`Xsd`."""

    def __init__(self, xsd: Xsd, include_builtin_numerics: bool = True) -> None:
        self.xsd = xsd
        self.include_builtin_numerics = include_builtin_numerics

    def build(self) -> SchemaModel:
        model = SchemaModel()
        for simple_type in self.xsd.simple_types():
            name = simple_type.name
            if not name:
                continue
            restriction = simple_type.restriction
            union = simple_type.union
            if restriction is not None and restriction.facets.enumerations:
                model.enumerations.append(self.closed_enumeration(simple_type, restriction))
            elif restriction is not None:
                numeric = self.numeric(simple_type)
                if numeric is None:
                    logger.debug("Skipping non-numeric simple type '%s'", name)
                elif numeric.is_integer:
                    model.integers.append(numeric)
                else:
                    model.decimals.append(numeric)
            elif union is not None:
                open_enum = self.open_enumeration(simple_type, union)
                if open_enum is None:
                    logger.debug("Skipping union simple type '%s'", name)
                else:
                    model.enumerations.append(open_enum)
            else:
                logger.debug("Skipping list simple type '%s'", name)

        if self.include_builtin_numerics:
            existing = {n.name.pascal() for n in model.integers}
            for numeric in builtin_integers():
                if numeric.name.pascal() not in existing:
                    model.integers.append(numeric)
        check_type_names(model)
        logger.info(
            "Derived %d enumerations, %d integers, %d decimals",
            len(model.enumerations),
            len(model.integers),
            len(model.decimals),
        )
        return model

    # ---------------- Enumerations ---------------- #

    @staticmethod
    def _members(restriction: Restriction, owner: str) -> List[Symbol]:
        members: List[Symbol] = []
        by_identifier: Dict[str, Symbol] = {}
        for facet in restriction.facets.enumerations:
            symbol = Symbol(facet.value)
            existing = by_identifier.get(symbol.camel())
            if existing is not None:
                if existing.original() != symbol.original():
                    raise IdentifierCollisionError(owner, existing.original(), symbol.original(), symbol.camel())
                logger.warning("Enumeration '%s' repeats member '%s'; keeping the first", owner, facet.value)
                continue
            by_identifier[symbol.camel()] = symbol
            members.append(symbol)
        return members

    def closed_enumeration(self, simple_type: SimpleType, restriction: Restriction) -> Enumeration:
        name = simple_type.name or str(simple_type.id)
        return Enumeration(
            name=Symbol(name),
            documentation=simple_type.documentation(),
            members=self._members(restriction, name),
        )

    def _enumerated_restriction(self, candidate: SimpleType) -> Optional[Restriction]:
        restriction = candidate.restriction
        if restriction is not None and restriction.facets.enumerations:
            return restriction
        return None

    def open_enumeration(self, simple_type: SimpleType, union: UnionType) -> Optional[Enumeration]:
        """Recognize ``union(string-builtin, enumerated type)`` as an open enum."""
        name = simple_type.name or str(simple_type.id)
        accepts_text = False
        sources: List[Restriction] = []
        for member_type in union.member_types:
            if isinstance(member_type, Character):
                accepts_text = True
            elif isinstance(member_type, OtherType):
                referenced = self.lookup_simple_type(member_type.name)
                restriction = self._enumerated_restriction(referenced) if referenced else None
                if restriction is None:
                    return None
                sources.append(restriction)
            else:
                return None
        for inline in union.simple_types:
            restriction = inline.restriction
            if restriction is not None and isinstance(restriction.base_type, Character) and not restriction.facets.enumerations:
                accepts_text = True
                continue
            restriction = self._enumerated_restriction(inline)
            if restriction is None:
                return None
            sources.append(restriction)
        if not accepts_text or len(sources) != 1:
            return None

        members = self._members(sources[0], name)
        if not members:
            return None
        other = Symbol(OTHER_MEMBER)
        if any(m.camel() == other.camel() for m in members):
            other = Symbol(f"{OTHER_MEMBER}-value")
        clash = next((m for m in members if m.camel() == other.camel()), None)
        if clash is not None:
            raise IdentifierCollisionError(name, clash.original(), other.original(), other.camel())
        return Enumeration(
            name=Symbol(name + OPEN_ENUM_SUFFIX),
            documentation=simple_type.documentation(),
            members=members,
            other_field=OtherField(name=other, wrapper_class_name=Symbol(name), default_value=members[0]),
        )

    # ---------------- Numerics ---------------- #

    def lookup_simple_type(self, raw: str) -> Optional[SimpleType]:
        """Resolve a type reference to a top-level simple type, if any."""
        candidates = [raw]
        ns, local = split_prefixed(raw)
        if ns:
            candidates.append(local)
        for candidate in candidates:
            try:
                entry = self.xsd.find(Id(EntryType.SIMPLE_TYPE, candidate))
            except NotFoundError:
                continue
            if isinstance(entry, SimpleType):
                return entry
        return None

    def _resolve_numeric(
        self, simple_type: SimpleType, visiting: Tuple[str, ...] = ()
    ) -> Optional[Tuple[Numeric, Facets, Optional[Range]]]:
        """Return the numeric kind, own facets and inherited range, if numeric."""
        restriction = simple_type.restriction
        if restriction is None:
            return None
        key = str(simple_type.id)
        if key in visiting:
            raise SchemaError(f"circular restriction base chain through '{key}'")
        visiting = visiting + (key,)

        base_type = restriction.base_type
        if isinstance(base_type, Numeric):
            return base_type, restriction.facets, None
        parent: Optional[SimpleType] = None
        if isinstance(base_type, OtherType):
            parent = self.lookup_simple_type(base_type.name)
        elif base_type is None:
            parent = restriction.simple_type
        if parent is None:
            return None
        resolved = self._resolve_numeric(parent, visiting)
        if resolved is None:
            return None
        kind, parent_facets, grand_range = resolved
        inherited = facet_range(parent_facets, kind.is_integer, str(parent.id), grand_range)
        return kind, restriction.facets, inherited

    def numeric(self, simple_type: SimpleType) -> Optional[NumericData]:
        resolved = self._resolve_numeric(simple_type)
        if resolved is None:
            return None
        kind, facets, inherited = resolved
        name = simple_type.name or str(simple_type.id)
        return NumericData(
            name=Symbol(name),
            base_type=kind,
            documentation=simple_type.documentation(),
            range=facet_range(facets, kind.is_integer, name, inherited),
        )


def build_model(xsd: Xsd, include_builtin_numerics: bool = True) -> SchemaModel:
    """Convenience wrapper around :class:`ModelBuilder`."""
    return ModelBuilder(xsd, include_builtin_numerics=include_builtin_numerics).build()
