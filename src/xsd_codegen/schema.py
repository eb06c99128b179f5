"""Schema container: the ordered set of top-level entries of one document.

:func:`load` reads a schema file, checks that the root is a ``schema`` node
declaring a prefix for the XML Schema namespace, and parses every top-level
child (in document order) into an :data:`Entry` held by an :class:`Xsd`.

Lookup and removal are keyed by :class:`~xsd_codegen.ids.Id`. They are plain
linear scans: compilation is a one-shot, whole-schema operation and the
entry list is the source of the deterministic iteration order used later by
the emitters.

Example:
    from pathlib import Path
    from xsd_codegen.ids import EntryType, Id
    from xsd_codegen.schema import load

    xsd = load(Path("musicxml.xsd"))
    print(xsd.prefix)                                   # xs
    yes_no = xsd.find(Id(EntryType.SIMPLE_TYPE, "yes-no"))
    print(yes_no.documentation())
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .errors import (
    DuplicateEntryError,
    EmptyPrefixError,
    NotFoundError,
    SchemaError,
    SchemaIOError,
    UnexpectedNodeError,
)
from .ids import Id, Lineage
from .xsd_parser import (
    ANNOTATION,
    ATTRIBUTE_GROUP,
    COMPLEX_TYPE,
    DEFAULT_PREFIX,
    ELEMENT,
    GROUP,
    IMPORT,
    SCHEMA,
    SIMPLE_TYPE,
    XS_NS,
    Annotation,
    AttributeGroup,
    ComplexType,
    Element,
    GroupDefinition,
    Import,
    SimpleType,
    children,
    node_name,
)

logger = logging.getLogger(__name__)

Entry = Union[Annotation, AttributeGroup, ComplexType, Element, GroupDefinition, Import, SimpleType]

_ENTRY_PARSERS = {
    ANNOTATION: Annotation,
    ATTRIBUTE_GROUP: AttributeGroup,
    COMPLEX_TYPE: ComplexType,
    ELEMENT: Element,
    GROUP: GroupDefinition,
    IMPORT: Import,
    SIMPLE_TYPE: SimpleType,
}


def parse_entry(node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> Entry:
    """Parse one top-level schema child into its entry type."""
    t = node_name(node)
    parser = _ENTRY_PARSERS.get(t)
    if parser is None:
        raise UnexpectedNodeError("a top-level schema entry", t, lineage)
    return parser.from_xml(node, lineage, prefix)


class Xsd:
    """Ordered, identity-addressable collection of schema entries."""

    def __init__(self, prefix: str = DEFAULT_PREFIX, entries: Optional[List[Entry]] = None) -> None:
        self.prefix = prefix
        self._entries: List[Entry] = list(entries or [])

    # ---------------- Construction ---------------- #

    @classmethod
    def parse(cls, root: ET.Element, namespaces: Optional[Dict[str, str]] = None) -> "Xsd":
        """Build a container from a parsed ``schema`` root node.

        Args:
            root: The document root element.
            namespaces: Prefix to URI declarations found on the root. When
                omitted, ``xmlns:*`` attributes on ``root`` are consulted
                (they are only present for hand-built trees).

        Raises:
            UnexpectedNodeError: The root is not a ``schema`` node or a child
                is not a supported top-level construct.
            EmptyPrefixError: No prefix is bound to the XML Schema namespace.
        """
        actual = node_name(root)
        if actual != SCHEMA:
            raise UnexpectedNodeError(SCHEMA, actual)
        if namespaces is None:
            namespaces = {
                key.split(":", 1)[1]: value
                for key, value in root.attrib.items()
                if key.startswith("xmlns:")
            }
        prefix = _schema_prefix(namespaces)
        xsd = cls(prefix=prefix)
        for i, node in enumerate(children(root)):
            xsd.add_entry(parse_entry(node, Lineage.index(i), prefix))
        logger.debug("Parsed %d entries (prefix '%s')", len(xsd), prefix)
        return xsd

    @classmethod
    def from_string(cls, text: str) -> "Xsd":
        return cls._from_source(io.BytesIO(text.encode("utf-8")), "<string>")

    @classmethod
    def _from_source(cls, source, description: str) -> "Xsd":
        namespaces: Dict[str, str] = {}
        root: Optional[ET.Element] = None
        try:
            for event, item in ET.iterparse(source, events=("start-ns", "start")):
                if root is not None:
                    continue
                if event == "start-ns":
                    ns_prefix, uri = item
                    namespaces.setdefault(ns_prefix, uri)
                else:
                    root = item
        except ET.ParseError as e:
            raise SchemaError(f"unable to parse '{description}': {e}") from e
        if root is None:
            raise SchemaError(f"'{description}' contains no root element")
        return cls.parse(root, namespaces)

    # ---------------- Container operations ---------------- #

    def add_entry(self, entry: Entry) -> None:
        """Append ``entry``; duplicate identities surface later in :meth:`find`."""
        self._entries.append(entry)

    def find(self, id_: Id) -> Entry:
        """Return the unique entry with identity ``id_``.

        Raises:
            NotFoundError: No entry has this identity.
            DuplicateEntryError: More than one entry has this identity.
        """
        matches = [entry for entry in self._entries if entry.id == id_]
        if not matches:
            raise NotFoundError(id_)
        if len(matches) > 1:
            raise DuplicateEntryError(id_, len(matches))
        return matches[0]

    def get(self, id_: Id) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == id_:
                return entry
        return None

    def remove(self, id_: Id) -> Entry:
        """Extract and return the first entry with identity ``id_``."""
        for i, entry in enumerate(self._entries):
            if entry.id == id_:
                return self._entries.pop(i)
        raise NotFoundError(id_)

    def replace(self, entry: Entry) -> Entry:
        """Swap in ``entry`` for the first entry sharing its identity.

        Returns the entry that was replaced; document position is kept.
        """
        for i, existing in enumerate(self._entries):
            if existing.id == entry.id:
                self._entries[i] = entry
                return existing
        raise NotFoundError(entry.id)

    def entries(self) -> List[Entry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, id_: object) -> bool:
        return any(entry.id == id_ for entry in self._entries)

    def simple_types(self) -> List[SimpleType]:
        return [e for e in self._entries if isinstance(e, SimpleType)]

    def to_dict(self) -> dict:
        return {
            "prefix": self.prefix,
            "entries": [entry.to_dict() for entry in self._entries],
        }

    def __str__(self) -> str:
        return "".join(f"{entry.id}\n" for entry in self._entries)


def _schema_prefix(namespaces: Dict[str, str]) -> str:
    for ns_prefix, uri in namespaces.items():
        if uri == XS_NS and ns_prefix:
            return ns_prefix
    raise EmptyPrefixError()


def load(path: Union[str, Path]) -> Xsd:
    """Read and parse the schema document at ``path``."""
    path = Path(path)
    logger.info("Loading schema %s", path)
    try:
        with path.open("rb") as f:
            return Xsd._from_source(f, str(path))
    except OSError as e:
        raise SchemaIOError(f"unable to load '{path}': {e}") from e
