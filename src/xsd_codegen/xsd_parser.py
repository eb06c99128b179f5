"""Recursive-descent parsers for the XML Schema constructs we support.

Each construct is a dataclass with a ``from_xml(node, lineage, prefix)``
constructor that:

* checks the node's own tag (``UnexpectedNodeError`` on mismatch),
* rejects any child it does not recognize instead of silently skipping it,
* attaches at most one ``annotation`` child so that ``documentation()``
  always returns a string (empty when absent),
* parses occurrence constraints from the node's own attributes for every
  construct that can repeat (element, group reference, sequence, choice, any).

Reference members (``attributeGroup ref="x"``, ``group ref="y"``,
``attribute ref="z"``, ``element ref="w"``) only record the referenced name.
Looking the name up in the :class:`~xsd_codegen.schema.Xsd` container is a
separate linking pass (see :mod:`xsd_codegen.model_builder`), so parsing is a
single pass with no forward-reference ordering requirement.

Nodes are ``xml.etree.ElementTree`` elements; tags are compared by local name
so both ``{http://www.w3.org/2001/XMLSchema}element`` and a bare ``element``
are accepted. ``prefix`` is the document's XML Schema namespace prefix and is
only used to classify type references (``xs:decimal``) via
:mod:`xsd_codegen.primitives`.

Example:
    import xml.etree.ElementTree as ET
    from xsd_codegen.ids import Lineage
    from xsd_codegen.xsd_parser import AttributeGroup

    node = ET.fromstring('<attributeGroup name="position">...</attributeGroup>')
    group = AttributeGroup.from_xml(node, Lineage.index(3))
    print(group.id)              # position (attributeGroup)
    print(group.documentation())
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from .errors import InvalidOccursError, MissingAttributeError, UnexpectedNodeError
from .ids import EntryType, Id, Lineage
from .primitives import BaseType, OtherType, parse_base_type_prefixed

logger = logging.getLogger(__name__)

XS_NS = "http://www.w3.org/2001/XMLSchema"
DEFAULT_PREFIX = "xs"

# tags
ANNOTATION = "annotation"
ANY = "any"
ANY_ATTRIBUTE = "anyAttribute"
APPINFO = "appinfo"
ATTRIBUTE = "attribute"
ATTRIBUTE_GROUP = "attributeGroup"
CHOICE = "choice"
COMPLEX_CONTENT = "complexContent"
COMPLEX_TYPE = "complexType"
DOCUMENTATION = "documentation"
ELEMENT = "element"
EXTENSION = "extension"
GROUP = "group"
IMPORT = "import"
LIST = "list"
RESTRICTION = "restriction"
SCHEMA = "schema"
SEQUENCE = "sequence"
SIMPLE_CONTENT = "simpleContent"
SIMPLE_TYPE = "simpleType"
UNION = "union"

# facets
ENUMERATION = "enumeration"
FRACTION_DIGITS = "fractionDigits"
LENGTH = "length"
MAX_EXCLUSIVE = "maxExclusive"
MAX_INCLUSIVE = "maxInclusive"
MAX_LENGTH = "maxLength"
MIN_EXCLUSIVE = "minExclusive"
MIN_INCLUSIVE = "minInclusive"
MIN_LENGTH = "minLength"
PATTERN = "pattern"
TOTAL_DIGITS = "totalDigits"
WHITE_SPACE = "whiteSpace"

# attributes
BASE = "base"
DEFAULT = "default"
FIXED = "fixed"
ITEM_TYPE = "itemType"
MAX_OCCURS = "maxOccurs"
MEMBER_TYPES = "memberTypes"
MIN_OCCURS = "minOccurs"
MIXED = "mixed"
NAME = "name"
NAMESPACE = "namespace"
PROCESS_CONTENTS = "processContents"
REF = "ref"
REQUIRED = "required"
SCHEMA_LOCATION = "schemaLocation"
TYPE = "type"
UNBOUNDED = "unbounded"
USE = "use"
VALUE = "value"


# ---------------- Node helpers ---------------- #


def local_name(tag: str) -> str:
    """Strip a Clark-notation namespace (``{uri}name``) from a tag."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def node_name(node: ET.Element) -> str:
    return local_name(node.tag)


def children(node: ET.Element) -> Iterator[ET.Element]:
    """Yield element children, skipping comments and processing instructions."""
    for child in node:
        if isinstance(child.tag, str):
            yield child


def get_attribute(node: ET.Element, name: str, lineage: Optional[Lineage] = None) -> str:
    value = node.get(name)
    if value is None:
        raise MissingAttributeError(name, node_name(node), lineage)
    return value


def use_required(node: ET.Element) -> bool:
    return node.get(USE) == REQUIRED


def is_ref(node: ET.Element) -> bool:
    return node.get(REF) is not None


def expect_tag(node: ET.Element, expected: str, lineage: Optional[Lineage] = None) -> None:
    actual = node_name(node)
    if actual != expected:
        raise UnexpectedNodeError(expected, actual, lineage)


def _unexpected_child(parent: str, child: ET.Element, lineage: Lineage) -> UnexpectedNodeError:
    return UnexpectedNodeError(f"a {parent} member", node_name(child), lineage)


def _wildcard(owner: str, lineage: Lineage) -> bool:
    logger.debug("Recording anyAttribute wildcard of %s at %s; its content is not modelled", owner, lineage)
    return True


def _flag(node: ET.Element, name: str) -> bool:
    return node.get(name, "false").strip() in ("true", "1")


def _jsonable(value: Any) -> Any:
    if isinstance(value, (Id, Lineage, OtherType)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        data: Dict[str, Any] = {"kind": type(value).__name__}
        for f in fields(value):
            data[f.name] = _jsonable(getattr(value, f.name))
        return data
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


class Construct:
    """Mixin giving every parsed construct documentation and dict export."""

    annotation: Optional["Annotation"]

    def documentation(self) -> str:
        if self.annotation is not None:
            return self.annotation.documentation()
        return ""

    def to_dict(self) -> dict:
        """JSON-serializable view (ids and lineages rendered as strings)."""
        return _jsonable(self)


# ---------------- Occurrence constraints ---------------- #


def _parse_count(attribute: str, text: str, lineage: Optional[Lineage]) -> int:
    text = text.strip()
    if not text.isdigit():
        raise InvalidOccursError(
            f"{attribute} must be a non-negative integer, got '{text}'", lineage
        )
    return int(text)


@dataclass(frozen=True)
class Occurs:
    """Repetition constraint; ``max_occurs=None`` means ``unbounded``."""

    min_occurs: int = 1
    max_occurs: Optional[int] = 1

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Optional[Lineage] = None) -> "Occurs":
        return cls.from_map(node.attrib, lineage)

    @classmethod
    def from_map(cls, attributes: Dict[str, str], lineage: Optional[Lineage] = None) -> "Occurs":
        raw_min = attributes.get(MIN_OCCURS)
        min_occurs = 1 if raw_min is None else _parse_count(MIN_OCCURS, raw_min, lineage)

        raw_max = attributes.get(MAX_OCCURS)
        max_occurs: Optional[int]
        if raw_max is None:
            max_occurs = 1
        elif raw_max.strip() == UNBOUNDED:
            max_occurs = None
        else:
            max_occurs = _parse_count(MAX_OCCURS, raw_max, lineage)

        if max_occurs is not None and min_occurs > max_occurs:
            raise InvalidOccursError(
                f"{MIN_OCCURS} cannot be greater than {MAX_OCCURS}, in this case "
                f"{MIN_OCCURS} is {min_occurs} and {MAX_OCCURS} is {max_occurs}",
                lineage,
            )
        return cls(min_occurs, max_occurs)

    @property
    def is_optional(self) -> bool:
        return self.min_occurs == 0

    @property
    def is_repeatable(self) -> bool:
        return self.max_occurs is None or self.max_occurs > 1

    def __str__(self) -> str:
        upper = UNBOUNDED if self.max_occurs is None else str(self.max_occurs)
        return f"[{self.min_occurs}:{upper}]"


# ---------------- Annotation & import ---------------- #


@dataclass
class AnnotationItem:
    kind: str  # "documentation" or "appinfo"
    text: str
    source: Optional[str] = None


@dataclass
class Annotation(Construct):
    id: Id
    lineage: Lineage
    items: List[AnnotationItem] = field(default_factory=list)

    @classmethod
    def from_xml(
        cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX
    ) -> "Annotation":
        expect_tag(node, ANNOTATION, lineage)
        items: List[AnnotationItem] = []
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t not in (DOCUMENTATION, APPINFO):
                raise _unexpected_child(ANNOTATION, inner, lineage.child(i))
            text = "".join(inner.itertext()).strip()
            items.append(AnnotationItem(kind=t, text=text, source=inner.get("source")))
        return cls(id=Id.other(ANNOTATION, str(lineage)), lineage=lineage, items=items)

    def documentation(self) -> str:
        return "\n".join(
            item.text for item in self.items if item.kind == DOCUMENTATION and item.text
        )


def _take_annotation(
    current: Optional[Annotation], node: ET.Element, lineage: Lineage, prefix: str
) -> Annotation:
    if current is not None:
        raise UnexpectedNodeError("at most one annotation", ANNOTATION, lineage)
    return Annotation.from_xml(node, lineage, prefix)


@dataclass
class Import(Construct):
    id: Id
    lineage: Lineage
    namespace: str
    schema_location: Optional[str] = None
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "Import":
        expect_tag(node, IMPORT, lineage)
        annotation = None
        for i, inner in enumerate(children(node)):
            if node_name(inner) != ANNOTATION:
                raise _unexpected_child(IMPORT, inner, lineage.child(i))
            annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
        namespace = get_attribute(node, NAMESPACE, lineage)
        return cls(
            id=Id(EntryType.IMPORT, namespace),
            lineage=lineage,
            namespace=namespace,
            schema_location=node.get(SCHEMA_LOCATION),
            annotation=annotation,
        )


# ---------------- Attributes ---------------- #


@dataclass
class AttributeType(Construct):
    """An attribute declared in place with a name and a type."""

    id: Id
    lineage: Lineage
    name: str
    type_: Optional[str] = None
    base_type: Optional[BaseType] = None
    simple_type: Optional["SimpleType"] = None
    required: bool = False
    default: Optional[str] = None
    fixed: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass
class AttributeRef(Construct):
    """An attribute declared elsewhere, e.g. ``ref="xlink:href"``."""

    id: Id
    lineage: Lineage
    ref: str
    required: bool = False
    default: Optional[str] = None
    fixed: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass
class AttributeGroupRef(Construct):
    id: Id
    lineage: Lineage
    ref: str
    annotation: Optional[Annotation] = None

    def ref_id(self) -> Id:
        return Id(EntryType.ATTRIBUTE_GROUP, self.ref)


AttributeMember = Union[AttributeType, AttributeRef, AttributeGroupRef]


def parse_attribute(
    node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX
) -> Union[AttributeType, AttributeRef]:
    """Parse an ``attribute`` node into its declaring or referencing form."""
    expect_tag(node, ATTRIBUTE, lineage)
    annotation = None
    simple_type = None
    for i, inner in enumerate(children(node)):
        t = node_name(inner)
        if t == ANNOTATION:
            annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
        elif t == SIMPLE_TYPE:
            simple_type = SimpleType.from_xml(inner, lineage.child(i), prefix)
        else:
            raise _unexpected_child(ATTRIBUTE, inner, lineage.child(i))

    if is_ref(node):
        ref = get_attribute(node, REF, lineage)
        return AttributeRef(
            id=Id.other(ATTRIBUTE, ref),
            lineage=lineage,
            ref=ref,
            required=use_required(node),
            default=node.get(DEFAULT),
            fixed=node.get(FIXED),
            annotation=annotation,
        )

    name = get_attribute(node, NAME, lineage)
    type_ = node.get(TYPE)
    if type_ is None and simple_type is None:
        raise MissingAttributeError(TYPE, ATTRIBUTE, lineage)
    return AttributeType(
        id=Id.other(ATTRIBUTE, name),
        lineage=lineage,
        name=name,
        type_=type_,
        base_type=parse_base_type_prefixed(type_, prefix) if type_ else None,
        simple_type=simple_type,
        required=use_required(node),
        default=node.get(DEFAULT),
        fixed=node.get(FIXED),
        annotation=annotation,
    )


def parse_attribute_group_ref(
    node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX
) -> AttributeGroupRef:
    expect_tag(node, ATTRIBUTE_GROUP, lineage)
    annotation = None
    for i, inner in enumerate(children(node)):
        if node_name(inner) != ANNOTATION:
            raise _unexpected_child(ATTRIBUTE_GROUP, inner, lineage.child(i))
        annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
    ref = get_attribute(node, REF, lineage)
    return AttributeGroupRef(
        id=Id.other(ATTRIBUTE_GROUP, ref), lineage=lineage, ref=ref, annotation=annotation
    )


def _attribute_member(
    node: ET.Element, lineage: Lineage, prefix: str
) -> Optional[AttributeMember]:
    """Parse an attribute-ish child, or return None if ``node`` is not one."""
    t = node_name(node)
    if t == ATTRIBUTE:
        return parse_attribute(node, lineage, prefix)
    if t == ATTRIBUTE_GROUP:
        return parse_attribute_group_ref(node, lineage, prefix)
    return None


@dataclass
class AttributeGroup(Construct):
    id: Id
    lineage: Lineage
    annotation: Optional[Annotation] = None
    members: List[AttributeMember] = field(default_factory=list)
    any_attribute: bool = False

    @classmethod
    def from_xml(
        cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX
    ) -> "AttributeGroup":
        expect_tag(node, ATTRIBUTE_GROUP, lineage)
        annotation = None
        members: List[AttributeMember] = []
        any_attribute = False
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t == ANY_ATTRIBUTE:
                any_attribute = _wildcard(ATTRIBUTE_GROUP, lineage)
            else:
                member = _attribute_member(inner, lineage.child(i), prefix)
                if member is None:
                    raise _unexpected_child(ATTRIBUTE_GROUP, inner, lineage.child(i))
                members.append(member)
        return cls(
            id=Id(EntryType.ATTRIBUTE_GROUP, get_attribute(node, NAME, lineage)),
            lineage=lineage,
            annotation=annotation,
            members=members,
            any_attribute=any_attribute,
        )


# ---------------- Particles ---------------- #


@dataclass
class AnyElement(Construct):
    """An ``any`` wildcard inside a sequence or choice."""

    id: Id
    lineage: Lineage
    occurs: Occurs = field(default_factory=Occurs)
    namespace: Optional[str] = None
    process_contents: Optional[str] = None
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "AnyElement":
        expect_tag(node, ANY, lineage)
        annotation = None
        for i, inner in enumerate(children(node)):
            if node_name(inner) != ANNOTATION:
                raise _unexpected_child(ANY, inner, lineage.child(i))
            annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
        return cls(
            id=Id.other(ANY, str(lineage)),
            lineage=lineage,
            occurs=Occurs.from_xml(node, lineage),
            namespace=node.get(NAMESPACE),
            process_contents=node.get(PROCESS_CONTENTS),
            annotation=annotation,
        )


@dataclass
class GroupRef(Construct):
    """A ``group ref="..."`` member of a sequence, choice or complex type."""

    id: Id
    lineage: Lineage
    ref: str
    occurs: Occurs = field(default_factory=Occurs)
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "GroupRef":
        expect_tag(node, GROUP, lineage)
        annotation = None
        for i, inner in enumerate(children(node)):
            if node_name(inner) != ANNOTATION:
                raise _unexpected_child(GROUP, inner, lineage.child(i))
            annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
        ref = get_attribute(node, REF, lineage)
        return cls(
            id=Id.other(GROUP, ref),
            lineage=lineage,
            ref=ref,
            occurs=Occurs.from_xml(node, lineage),
            annotation=annotation,
        )

    def ref_id(self) -> Id:
        return Id(EntryType.GROUP, self.ref)


Member = Union["Element", GroupRef, "Choice", "Sequence", AnyElement]


def _particle_member(node: ET.Element, lineage: Lineage, prefix: str) -> Optional[Member]:
    t = node_name(node)
    if t == ELEMENT:
        return Element.from_xml(node, lineage, prefix)
    if t == GROUP:
        return GroupRef.from_xml(node, lineage, prefix)
    if t == CHOICE:
        return Choice.from_xml(node, lineage, prefix)
    if t == SEQUENCE:
        return Sequence.from_xml(node, lineage, prefix)
    if t == ANY:
        return AnyElement.from_xml(node, lineage, prefix)
    return None


def _parse_compositor(node: ET.Element, tag: str, lineage: Lineage, prefix: str) -> dict:
    expect_tag(node, tag, lineage)
    annotation = None
    members: List[Member] = []
    for i, inner in enumerate(children(node)):
        if node_name(inner) == ANNOTATION:
            annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            continue
        member = _particle_member(inner, lineage.child(i), prefix)
        if member is None:
            raise _unexpected_child(tag, inner, lineage.child(i))
        members.append(member)
    return {
        "id": Id.other(tag, str(lineage)),
        "lineage": lineage,
        "annotation": annotation,
        "occurs": Occurs.from_xml(node, lineage),
        "members": members,
    }


@dataclass
class Sequence(Construct):
    id: Id
    lineage: Lineage
    annotation: Optional[Annotation] = None
    occurs: Occurs = field(default_factory=Occurs)
    members: List[Member] = field(default_factory=list)

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "Sequence":
        return cls(**_parse_compositor(node, SEQUENCE, lineage, prefix))


@dataclass
class Choice(Construct):
    id: Id
    lineage: Lineage
    annotation: Optional[Annotation] = None
    occurs: Occurs = field(default_factory=Occurs)
    members: List[Member] = field(default_factory=list)

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "Choice":
        return cls(**_parse_compositor(node, CHOICE, lineage, prefix))


Particle = Union[Sequence, Choice, GroupRef]


def _particle(node: ET.Element, lineage: Lineage, prefix: str) -> Optional[Particle]:
    t = node_name(node)
    if t == SEQUENCE:
        return Sequence.from_xml(node, lineage, prefix)
    if t == CHOICE:
        return Choice.from_xml(node, lineage, prefix)
    if t == GROUP:
        return GroupRef.from_xml(node, lineage, prefix)
    return None


@dataclass
class GroupDefinition(Construct):
    """A named, top-level ``group`` holding one sequence or choice."""

    id: Id
    lineage: Lineage
    annotation: Optional[Annotation] = None
    content: Optional[Union[Sequence, Choice]] = None

    @classmethod
    def from_xml(
        cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX
    ) -> "GroupDefinition":
        expect_tag(node, GROUP, lineage)
        annotation = None
        content: Optional[Union[Sequence, Choice]] = None
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t in (SEQUENCE, CHOICE) and content is None:
                content = (Sequence if t == SEQUENCE else Choice).from_xml(
                    inner, lineage.child(i), prefix
                )
            else:
                raise _unexpected_child(GROUP, inner, lineage.child(i))
        return cls(
            id=Id(EntryType.GROUP, get_attribute(node, NAME, lineage)),
            lineage=lineage,
            annotation=annotation,
            content=content,
        )


# ---------------- Elements ---------------- #


@dataclass
class Element(Construct):
    """An element declaration (``name``) or reference (``ref``)."""

    id: Id
    lineage: Lineage
    name: Optional[str] = None
    ref: Optional[str] = None
    type_: Optional[str] = None
    base_type: Optional[BaseType] = None
    occurs: Occurs = field(default_factory=Occurs)
    simple_type: Optional["SimpleType"] = None
    complex_type: Optional["ComplexType"] = None
    default: Optional[str] = None
    fixed: Optional[str] = None
    annotation: Optional[Annotation] = None

    @property
    def is_ref(self) -> bool:
        return self.ref is not None

    def ref_id(self) -> Optional[Id]:
        return Id(EntryType.ELEMENT, self.ref) if self.ref else None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "Element":
        expect_tag(node, ELEMENT, lineage)
        annotation = None
        simple_type = None
        complex_type = None
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t == SIMPLE_TYPE:
                simple_type = SimpleType.from_xml(inner, lineage.child(i), prefix)
            elif t == COMPLEX_TYPE:
                complex_type = ComplexType.from_xml(inner, lineage.child(i), prefix)
            else:
                raise _unexpected_child(ELEMENT, inner, lineage.child(i))

        ref = node.get(REF)
        if ref is not None:
            id_ = Id.other("elementRef", ref)
            name = None
        else:
            name = get_attribute(node, NAME, lineage)
            id_ = Id(EntryType.ELEMENT, name)
        type_ = node.get(TYPE)
        return cls(
            id=id_,
            lineage=lineage,
            name=name,
            ref=ref,
            type_=type_,
            base_type=parse_base_type_prefixed(type_, prefix) if type_ else None,
            occurs=Occurs.from_xml(node, lineage),
            simple_type=simple_type,
            complex_type=complex_type,
            default=node.get(DEFAULT),
            fixed=node.get(FIXED),
            annotation=annotation,
        )


# ---------------- Simple types ---------------- #


@dataclass
class EnumerationFacet(Construct):
    value: str
    annotation: Optional[Annotation] = None


@dataclass
class Facets:
    """Restriction facets in document order (enumerations) or by kind."""

    enumerations: List[EnumerationFacet] = field(default_factory=list)
    min_inclusive: Optional[str] = None
    min_exclusive: Optional[str] = None
    max_inclusive: Optional[str] = None
    max_exclusive: Optional[str] = None
    patterns: List[str] = field(default_factory=list)
    length: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    white_space: Optional[str] = None
    total_digits: Optional[int] = None
    fraction_digits: Optional[int] = None

    @property
    def has_range(self) -> bool:
        return any(
            v is not None
            for v in (self.min_inclusive, self.min_exclusive, self.max_inclusive, self.max_exclusive)
        )


_STRING_FACETS = {
    MIN_INCLUSIVE: "min_inclusive",
    MIN_EXCLUSIVE: "min_exclusive",
    MAX_INCLUSIVE: "max_inclusive",
    MAX_EXCLUSIVE: "max_exclusive",
    WHITE_SPACE: "white_space",
}

_INT_FACETS = {
    LENGTH: "length",
    MIN_LENGTH: "min_length",
    MAX_LENGTH: "max_length",
    TOTAL_DIGITS: "total_digits",
    FRACTION_DIGITS: "fraction_digits",
}


def _parse_facet(facets: Facets, node: ET.Element, lineage: Lineage, prefix: str) -> bool:
    """Record ``node`` in ``facets``; return False if it is not a facet."""
    t = node_name(node)
    if t == ENUMERATION:
        annotation = None
        for i, inner in enumerate(children(node)):
            if node_name(inner) != ANNOTATION:
                raise _unexpected_child(ENUMERATION, inner, lineage.child(i))
            annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
        facets.enumerations.append(
            EnumerationFacet(value=get_attribute(node, VALUE, lineage), annotation=annotation)
        )
    elif t == PATTERN:
        facets.patterns.append(get_attribute(node, VALUE, lineage))
    elif t in _STRING_FACETS:
        setattr(facets, _STRING_FACETS[t], get_attribute(node, VALUE, lineage).strip())
    elif t in _INT_FACETS:
        raw = get_attribute(node, VALUE, lineage).strip()
        if not raw.isdigit():
            raise UnexpectedNodeError(f"a non-negative integer {t}", raw, lineage)
        setattr(facets, _INT_FACETS[t], int(raw))
    else:
        return False
    return True


@dataclass
class Restriction(Construct):
    """``restriction`` of a simple type: a base plus facets."""

    lineage: Lineage
    base: Optional[str] = None
    base_type: Optional[BaseType] = None
    simple_type: Optional["SimpleType"] = None
    facets: Facets = field(default_factory=Facets)
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "Restriction":
        expect_tag(node, RESTRICTION, lineage)
        annotation = None
        simple_type = None
        facets = Facets()
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t == SIMPLE_TYPE:
                simple_type = SimpleType.from_xml(inner, lineage.child(i), prefix)
            elif not _parse_facet(facets, inner, lineage.child(i), prefix):
                raise _unexpected_child(RESTRICTION, inner, lineage.child(i))
        base = node.get(BASE)
        if base is None and simple_type is None:
            raise MissingAttributeError(BASE, RESTRICTION, lineage)
        return cls(
            lineage=lineage,
            base=base,
            base_type=parse_base_type_prefixed(base, prefix) if base else None,
            simple_type=simple_type,
            facets=facets,
            annotation=annotation,
        )


@dataclass
class UnionType(Construct):
    lineage: Lineage
    member_types: List[BaseType] = field(default_factory=list)
    simple_types: List["SimpleType"] = field(default_factory=list)
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "UnionType":
        expect_tag(node, UNION, lineage)
        annotation = None
        simple_types: List[SimpleType] = []
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t == SIMPLE_TYPE:
                simple_types.append(SimpleType.from_xml(inner, lineage.child(i), prefix))
            else:
                raise _unexpected_child(UNION, inner, lineage.child(i))
        member_types = [
            parse_base_type_prefixed(raw, prefix) for raw in node.get(MEMBER_TYPES, "").split()
        ]
        return cls(
            lineage=lineage,
            member_types=member_types,
            simple_types=simple_types,
            annotation=annotation,
        )


@dataclass
class ListType(Construct):
    lineage: Lineage
    item_type: Optional[BaseType] = None
    simple_type: Optional["SimpleType"] = None
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "ListType":
        expect_tag(node, LIST, lineage)
        annotation = None
        simple_type = None
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t == SIMPLE_TYPE:
                simple_type = SimpleType.from_xml(inner, lineage.child(i), prefix)
            else:
                raise _unexpected_child(LIST, inner, lineage.child(i))
        item_type = node.get(ITEM_TYPE)
        if item_type is None and simple_type is None:
            raise MissingAttributeError(ITEM_TYPE, LIST, lineage)
        return cls(
            lineage=lineage,
            item_type=parse_base_type_prefixed(item_type, prefix) if item_type else None,
            simple_type=simple_type,
            annotation=annotation,
        )


SimpleContentModel = Union[Restriction, UnionType, ListType]

_SIMPLE_TYPE_PARSERS = {RESTRICTION: Restriction, UNION: UnionType, LIST: ListType}


@dataclass
class SimpleType(Construct):
    id: Id
    lineage: Lineage
    name: Optional[str] = None
    content: Optional[SimpleContentModel] = None
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "SimpleType":
        expect_tag(node, SIMPLE_TYPE, lineage)
        annotation = None
        content: Optional[SimpleContentModel] = None
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t in _SIMPLE_TYPE_PARSERS and content is None:
                content = _SIMPLE_TYPE_PARSERS[t].from_xml(inner, lineage.child(i), prefix)
            else:
                raise _unexpected_child(SIMPLE_TYPE, inner, lineage.child(i))
        if content is None:
            raise UnexpectedNodeError(
                f"one of {RESTRICTION}, {UNION} or {LIST}", "nothing", lineage
            )
        name = node.get(NAME)
        id_ = Id(EntryType.SIMPLE_TYPE, name) if name else Id.other(SIMPLE_TYPE, str(lineage))
        return cls(id=id_, lineage=lineage, name=name, content=content, annotation=annotation)

    @property
    def restriction(self) -> Optional[Restriction]:
        return self.content if isinstance(self.content, Restriction) else None

    @property
    def union(self) -> Optional[UnionType]:
        return self.content if isinstance(self.content, UnionType) else None


# ---------------- Complex types ---------------- #


@dataclass
class Derivation(Construct):
    """``extension`` or ``restriction`` inside simple/complex content."""

    lineage: Lineage
    kind: str
    base: str
    base_type: BaseType
    particle: Optional[Particle] = None
    attributes: List[AttributeMember] = field(default_factory=list)
    any_attribute: bool = False
    facets: Facets = field(default_factory=Facets)
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(
        cls,
        node: ET.Element,
        lineage: Lineage,
        prefix: str = DEFAULT_PREFIX,
        simple_content: bool = False,
    ) -> "Derivation":
        kind = node_name(node)
        if kind not in (EXTENSION, RESTRICTION):
            raise UnexpectedNodeError(f"{EXTENSION} or {RESTRICTION}", kind, lineage)
        annotation = None
        particle = None
        attributes: List[AttributeMember] = []
        any_attribute = False
        facets = Facets()
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            child_lineage = lineage.child(i)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, child_lineage, prefix)
                continue
            if t == ANY_ATTRIBUTE:
                any_attribute = _wildcard(kind, lineage)
                continue
            member = _attribute_member(inner, child_lineage, prefix)
            if member is not None:
                attributes.append(member)
                continue
            if simple_content:
                if kind == RESTRICTION and _parse_facet(facets, inner, child_lineage, prefix):
                    continue
            elif particle is None:
                particle = _particle(inner, child_lineage, prefix)
                if particle is not None:
                    continue
            raise _unexpected_child(kind, inner, child_lineage)
        base = get_attribute(node, BASE, lineage)
        return cls(
            lineage=lineage,
            kind=kind,
            base=base,
            base_type=parse_base_type_prefixed(base, prefix),
            particle=particle,
            attributes=attributes,
            any_attribute=any_attribute,
            facets=facets,
            annotation=annotation,
        )


@dataclass
class ContentModel(Construct):
    """``simpleContent`` or ``complexContent`` wrapper around a derivation."""

    lineage: Lineage
    kind: str
    derivation: Derivation
    mixed: bool = False
    annotation: Optional[Annotation] = None

    @property
    def is_simple(self) -> bool:
        return self.kind == SIMPLE_CONTENT

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "ContentModel":
        kind = node_name(node)
        if kind not in (SIMPLE_CONTENT, COMPLEX_CONTENT):
            raise UnexpectedNodeError(f"{SIMPLE_CONTENT} or {COMPLEX_CONTENT}", kind, lineage)
        annotation = None
        derivation = None
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, lineage.child(i), prefix)
            elif t in (EXTENSION, RESTRICTION) and derivation is None:
                derivation = Derivation.from_xml(
                    inner, lineage.child(i), prefix, simple_content=kind == SIMPLE_CONTENT
                )
            else:
                raise _unexpected_child(kind, inner, lineage.child(i))
        if derivation is None:
            raise UnexpectedNodeError(f"{EXTENSION} or {RESTRICTION}", "nothing", lineage)
        return cls(
            lineage=lineage,
            kind=kind,
            derivation=derivation,
            mixed=_flag(node, MIXED),
            annotation=annotation,
        )


@dataclass
class ComplexType(Construct):
    id: Id
    lineage: Lineage
    name: Optional[str] = None
    mixed: bool = False
    particle: Optional[Particle] = None
    content_model: Optional[ContentModel] = None
    attributes: List[AttributeMember] = field(default_factory=list)
    any_attribute: bool = False
    annotation: Optional[Annotation] = None

    @classmethod
    def from_xml(cls, node: ET.Element, lineage: Lineage, prefix: str = DEFAULT_PREFIX) -> "ComplexType":
        expect_tag(node, COMPLEX_TYPE, lineage)
        annotation = None
        particle = None
        content_model = None
        attributes: List[AttributeMember] = []
        any_attribute = False
        for i, inner in enumerate(children(node)):
            t = node_name(inner)
            child_lineage = lineage.child(i)
            if t == ANNOTATION:
                annotation = _take_annotation(annotation, inner, child_lineage, prefix)
            elif t == ANY_ATTRIBUTE:
                any_attribute = _wildcard(COMPLEX_TYPE, lineage)
            elif t in (SIMPLE_CONTENT, COMPLEX_CONTENT) and content_model is None:
                content_model = ContentModel.from_xml(inner, child_lineage, prefix)
            elif t in (SEQUENCE, CHOICE, GROUP) and particle is None:
                particle = _particle(inner, child_lineage, prefix)
            else:
                member = _attribute_member(inner, child_lineage, prefix)
                if member is None:
                    raise _unexpected_child(COMPLEX_TYPE, inner, child_lineage)
                attributes.append(member)
        name = node.get(NAME)
        id_ = Id(EntryType.COMPLEX_TYPE, name) if name else Id.other(COMPLEX_TYPE, str(lineage))
        return cls(
            id=id_,
            lineage=lineage,
            name=name,
            mixed=_flag(node, MIXED),
            particle=particle,
            content_model=content_model,
            attributes=attributes,
            any_attribute=any_attribute,
            annotation=annotation,
        )
