"""Closed registry of XML Schema builtin types.

Builtins are grouped into three families, each a fixed enumeration:

* :class:`Numeric` – ``byte``, ``decimal``, ``int``, ``integer``, ...
* :class:`Character` – ``string``, ``token``, ``NMTOKEN``, ...
* :class:`DateTime` – ``date``, ``dateTime``, ``duration``, ...

A *primitive* is a member of any of the three families. Schema text refers to
builtins with the document's namespace prefix (``xs:decimal``), so every
family supports prefix-aware parsing via ``parse_prefixed``; a mismatched
prefix is an error rather than a silent fallback.

At the coarser :data:`BaseType` level, a name that is not a builtin (or that
carries a different prefix) degrades to :class:`OtherType` so that
application-defined simple types keep flowing through the pipeline as opaque
references.

Example:
    >>> Numeric.parse_prefixed("xs:decimal", "xs")
    <Numeric.DECIMAL: 'decimal'>
    >>> parse_base_type_prefixed("xs:yes-no", "xs")
    OtherType(name='xs:yes-no')
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .errors import UnknownPrimitiveError, WrongPrefixError


def split_prefixed(raw: str) -> Tuple[str, str]:
    """Split ``raw`` on its first ``:`` into ``(prefix, value)``.

    A string without a colon is all value: ``"bloop"`` gives ``("", "bloop")``.
    """
    prefix, sep, value = raw.partition(":")
    if not sep:
        return "", raw
    return prefix, value


def _check_prefix(raw: str, prefix: str) -> str:
    ns, value = split_prefixed(raw)
    if ns != prefix:
        raise WrongPrefixError(prefix, ns)
    return value


class _Builtin(Enum):
    """Shared behaviour of the builtin families."""

    @classmethod
    def family(cls) -> str:
        return cls.__name__.lower()

    @classmethod
    def parse(cls, value: str):
        try:
            return cls(value)
        except ValueError:
            raise UnknownPrimitiveError(value, cls.family()) from None

    @classmethod
    def parse_prefixed(cls, raw: str, prefix: str):
        return cls.parse(_check_prefix(raw, prefix))

    def as_str(self, prefix: str = "") -> str:
        """Return the builtin name, qualified with ``prefix`` when non-empty."""
        return f"{prefix}:{self.value}" if prefix else self.value

    def __str__(self) -> str:
        return self.value


class Numeric(_Builtin):
    BYTE = "byte"
    DECIMAL = "decimal"
    INT = "int"
    INTEGER = "integer"
    LONG = "long"
    NEGATIVE_INTEGER = "negativeInteger"
    NON_NEGATIVE_INTEGER = "nonNegativeInteger"
    NON_POSITIVE_INTEGER = "nonPositiveInteger"
    POSITIVE_INTEGER = "positiveInteger"
    SHORT = "short"
    UNSIGNED_LONG = "unsignedLong"
    UNSIGNED_INT = "unsignedInt"
    UNSIGNED_SHORT = "unsignedShort"
    UNSIGNED_BYTE = "unsignedByte"

    @property
    def is_integer(self) -> bool:
        return self is not Numeric.DECIMAL


class Character(_Builtin):
    ANY_URI = "anyURI"
    ID = "ID"
    IDREF = "IDREF"
    LANGUAGE = "language"
    NAME = "Name"
    NCNAME = "NCName"
    NMTOKEN = "NMTOKEN"
    NMTOKENS = "NMTOKENS"
    NORMALIZED_STRING = "normalizedString"
    STRING = "string"
    TOKEN = "token"


class DateTime(_Builtin):
    DATE = "date"
    DATE_TIME = "dateTime"
    DURATION = "duration"
    G_DAY = "gDay"
    G_MONTH = "gMonth"
    G_MONTH_DAY = "gMonthDay"
    G_YEAR = "gYear"
    G_YEAR_MONTH = "gYearMonth"
    TIME = "time"


Primitive = Union[Numeric, Character, DateTime]

_FAMILIES = (Numeric, Character, DateTime)


def parse_primitive(value: str) -> Primitive:
    """Classify an unprefixed builtin name, trying numeric, string, date-time."""
    for family in _FAMILIES:
        try:
            return family.parse(value)
        except UnknownPrimitiveError:
            continue
    raise UnknownPrimitiveError(value)


def parse_primitive_prefixed(raw: str, prefix: str) -> Primitive:
    return parse_primitive(_check_prefix(raw, prefix))


@dataclass(frozen=True)
class OtherType:
    """A base type that is not a builtin; ``name`` is the raw reference."""

    name: str

    def as_str(self, prefix: str = "") -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


BaseType = Union[Numeric, Character, DateTime, OtherType]


def parse_base_type(value: str) -> BaseType:
    try:
        return parse_primitive(value)
    except UnknownPrimitiveError:
        return OtherType(value)


def parse_base_type_prefixed(raw: str, prefix: str) -> BaseType:
    """Classify a type reference, keeping non-builtins as :class:`OtherType`."""
    try:
        return parse_primitive_prefixed(raw, prefix)
    except (UnknownPrimitiveError, WrongPrefixError):
        return OtherType(raw)


def is_primitive(base_type: BaseType) -> bool:
    return isinstance(base_type, _FAMILIES)
