"""Identity and provenance for schema constructs.

Each construct parsed from the schema carries an :class:`Id` (the kind of
construct plus its name) that decides whether two entries are "the same", and
a :class:`Lineage` recording where in the document it was found. Lineage is
for diagnostics and tie-breaking only; it never participates in identity.

Example:
    >>> str(Id(EntryType.ATTRIBUTE_GROUP, "bend-sound"))
    'bend-sound (attributeGroup)'
    >>> str(Id.other("sequence", "3"))
    'sequence:3'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class EntryType(Enum):
    ATTRIBUTE_GROUP = "attributeGroup"
    COMPLEX_TYPE = "complexType"
    ELEMENT = "element"
    GROUP = "group"
    IMPORT = "import"
    SIMPLE_TYPE = "simpleType"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OtherEntryType:
    """Open-ended entry kind (``EntryType::Other``), e.g. ``sequence``."""

    kind: str

    def __str__(self) -> str:
        return self.kind


Kind = Union[EntryType, OtherEntryType]


@dataclass(frozen=True)
class Id:
    """Comparable identity of a schema construct."""

    entry_type: Kind
    name: str

    @classmethod
    def other(cls, kind: str, name: str) -> "Id":
        return cls(OtherEntryType(kind), name)

    def __str__(self) -> str:
        if isinstance(self.entry_type, OtherEntryType):
            return f"{self.entry_type}:{self.name}"
        return f"{self.name} ({self.entry_type})"

    def to_dict(self) -> dict:
        return {"entry_type": str(self.entry_type), "name": self.name}


@dataclass(frozen=True, order=True)
class Lineage:
    """Positional path of a construct in document order.

    ``Lineage((3,))`` is the fourth top-level entry and renders as ``3``;
    ``Lineage((3, 1))`` is the second child parsed inside it (``3.1``).
    """

    path: Tuple[int, ...] = ()

    @classmethod
    def index(cls, i: int) -> "Lineage":
        return cls((i,))

    def child(self, i: int) -> "Lineage":
        return Lineage(self.path + (i,))

    @property
    def root_index(self) -> Optional[int]:
        return self.path[0] if self.path else None

    def __str__(self) -> str:
        return ".".join(str(i) for i in self.path)
