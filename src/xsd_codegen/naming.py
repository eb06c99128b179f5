"""Case conversion of raw schema names into code identifiers.

A :class:`Symbol` keeps the schema's literal spelling (``original()``) next
to two code-safe projections: ``pascal()`` for type names and ``camel()`` for
members. Identical raw names always produce identical identifiers.

Rules:
* any run of characters other than letters and digits separates words,
* the first letter of each word is upper-cased (pascal) and the first word
  of a camel identifier is lower-cased; the rest of each word is kept as is,
* identifiers that would start with a digit get a leading underscore,
* C++ keywords get a trailing underscore,
* a name without any letters or digits becomes ``empty``.

    >>> s = Symbol("x-small")
    >>> s.original(), s.pascal(), s.camel()
    ('x-small', 'XSmall', 'xSmall')
    >>> Symbol("16th").camel()
    '_16th'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List

_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")

CPP_KEYWORDS = frozenset(
    """
    alignas alignof and and_eq asm auto bitand bitor bool break case catch char
    char16_t char32_t class compl const constexpr const_cast continue decltype
    default delete do double dynamic_cast else enum explicit export extern false
    float for friend goto if inline int long mutable namespace new noexcept not
    not_eq nullptr operator or or_eq private protected public register
    reinterpret_cast return short signed sizeof static static_assert static_cast
    struct switch template this thread_local throw true try typedef typeid
    typename union unsigned using virtual void volatile wchar_t while xor xor_eq
    """.split()
)


def split_words(raw: str) -> List[str]:
    return [w for w in _SEPARATORS.split(raw) if w]


def _finish(identifier: str) -> str:
    if not identifier:
        return "empty"
    if identifier[0].isdigit():
        identifier = "_" + identifier
    if identifier in CPP_KEYWORDS:
        identifier += "_"
    return identifier


@lru_cache(maxsize=None)
def pascal_case(raw: str) -> str:
    return _finish("".join(w[0].upper() + w[1:] for w in split_words(raw)))


@lru_cache(maxsize=None)
def camel_case(raw: str) -> str:
    words = split_words(raw)
    if not words:
        return _finish("")
    first = words[0][0].lower() + words[0][1:]
    return _finish(first + "".join(w[0].upper() + w[1:] for w in words[1:]))


@dataclass(frozen=True)
class Symbol:
    """A schema name with its code-identifier projections."""

    raw: str

    def original(self) -> str:
        return self.raw

    def pascal(self) -> str:
        return pascal_case(self.raw)

    def camel(self) -> str:
        return camel_case(self.raw)

    def __str__(self) -> str:
        return self.raw
