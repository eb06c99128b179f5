import xml.etree.ElementTree as ET

import pytest

from xsd_codegen.errors import (
    InvalidOccursError,
    MissingAttributeError,
    UnexpectedNodeError,
)
from xsd_codegen.ids import EntryType, Id, Lineage
from xsd_codegen.primitives import Character, Numeric, OtherType
from xsd_codegen.xsd_parser import (
    XS_NS,
    Annotation,
    AnyElement,
    AttributeGroup,
    AttributeGroupRef,
    AttributeRef,
    AttributeType,
    Choice,
    ComplexType,
    Element,
    GroupDefinition,
    GroupRef,
    Import,
    ListType,
    Occurs,
    Sequence,
    SimpleType,
    UnionType,
)


def _node(xml):
    """Parse a schema fragment that uses the ``xs`` prefix."""
    root = ET.fromstring(f'<xs:schema xmlns:xs="{XS_NS}">{xml}</xs:schema>')
    return root[0]


# ---------------- Occurs ---------------- #


class TestOccurs:
    def test_defaults(self):
        assert Occurs.from_map({}) == Occurs(1, 1)

    def test_unbounded(self):
        assert Occurs.from_map({"maxOccurs": "unbounded"}).max_occurs is None
        assert Occurs.from_map({"minOccurs": "0", "maxOccurs": "unbounded"}) == Occurs(0, None)

    def test_min_greater_than_max_fails(self):
        with pytest.raises(InvalidOccursError) as excinfo:
            Occurs.from_map({"minOccurs": "10", "maxOccurs": "1"})
        assert "minOccurs is 10 and maxOccurs is 1" in str(excinfo.value)

    def test_min_below_max(self):
        assert Occurs.from_map({"minOccurs": "2", "maxOccurs": "3"}) == Occurs(2, 3)

    def test_min_only_above_default_max_fails(self):
        with pytest.raises(InvalidOccursError):
            Occurs.from_map({"minOccurs": "2"})

    def test_non_numeric(self):
        with pytest.raises(InvalidOccursError):
            Occurs.from_map({"minOccurs": "many"})

    def test_flags_and_display(self):
        occurs = Occurs(0, None)
        assert occurs.is_optional
        assert occurs.is_repeatable
        assert str(occurs) == "[0:unbounded]"
        assert not Occurs().is_repeatable


# ---------------- Attribute groups ---------------- #


def test_parse_attribute_type():
    ag = AttributeGroup.from_xml(
        _node(
            """
            <xs:attributeGroup name="bend-sound">
                <xs:annotation>
                    <xs:documentation>blargh</xs:documentation>
                </xs:annotation>
                <xs:attribute name="accelerate" type="yes-no"/>
                <xs:attribute name="beats" type="trill-beats" use="required"/>
                <xs:attribute name="first-beat" type="percent"/>
                <xs:attribute name="last-beat" type="percent"/>
            </xs:attributeGroup>
            """
        ),
        Lineage.index(3),
    )
    assert ag.lineage == Lineage.index(3)
    assert str(ag.id) == "bend-sound (attributeGroup)"
    assert ag.documentation() == "blargh"
    assert len(ag.members) == 4

    first = ag.members[0]
    assert isinstance(first, AttributeType)
    assert first.name == "accelerate"
    assert first.type_ == "yes-no"
    assert first.base_type == OtherType("yes-no")
    assert not first.required

    second = ag.members[1]
    assert isinstance(second, AttributeType)
    assert second.name == "beats"
    assert second.type_ == "trill-beats"
    assert second.required


def test_parse_attribute_group_ref():
    ag = AttributeGroup.from_xml(
        _node(
            """
            <xs:attributeGroup name="image-attributes">
                <xs:annotation>
                    <xs:documentation>flerbin</xs:documentation>
                </xs:annotation>
                <xs:attribute name="source" type="xs:anyURI" use="required"/>
                <xs:attribute name="type" type="xs:token" use="required"/>
                <xs:attributeGroup ref="position"/>
                <xs:attributeGroup ref="halign"/>
                <xs:attributeGroup ref="valign-image"/>
            </xs:attributeGroup>
            """
        ),
        Lineage.index(3),
    )
    assert str(ag.id) == "image-attributes (attributeGroup)"
    assert ag.documentation() == "flerbin"
    assert len(ag.members) == 5

    source = ag.members[0]
    assert isinstance(source, AttributeType)
    assert source.type_ == "xs:anyURI"
    assert source.base_type is Character.ANY_URI
    assert source.required

    position = ag.members[2]
    assert isinstance(position, AttributeGroupRef)
    assert position.ref == "position"
    assert position.ref_id() == Id(EntryType.ATTRIBUTE_GROUP, "position")
    assert position.lineage == Lineage((3, 3))


def test_parse_attribute_ref():
    ag = AttributeGroup.from_xml(
        _node(
            """
            <xs:attributeGroup name="link-attributes">
                <xs:annotation>
                    <xs:documentation>The link-attributes group includes all the simple XLink attributes.</xs:documentation>
                </xs:annotation>
                <!--<xs:attribute ref="xmnls:xlink" fixed="http://www.w3.org/1999/xlink"/>-->
                <xs:attribute ref="xlink:href" use="required"/>
                <xs:attribute ref="xlink:type" fixed="simple"/>
                <xs:attribute ref="xlink:role"/>
                <xs:attribute ref="xlink:title"/>
                <xs:attribute ref="xlink:show" default="replace"/>
                <xs:attribute ref="xlink:actuate" default="onRequest"/>
            </xs:attributeGroup>
            """
        ),
        Lineage.index(7),
    )
    assert str(ag.id) == "link-attributes (attributeGroup)"
    assert len(ag.members) == 6
    assert all(isinstance(m, AttributeRef) for m in ag.members)

    href, type_, _, _, show, _ = ag.members
    assert href.ref == "xlink:href"
    assert href.required
    assert type_.fixed == "simple"
    assert show.default == "replace"
    assert not show.required


def test_attribute_group_rejects_unknown_child():
    with pytest.raises(UnexpectedNodeError) as excinfo:
        AttributeGroup.from_xml(
            _node('<xs:attributeGroup name="x"><xs:element name="y"/></xs:attributeGroup>'),
            Lineage.index(0),
        )
    assert excinfo.value.actual == "element"


def test_attribute_group_requires_name():
    with pytest.raises(MissingAttributeError) as excinfo:
        AttributeGroup.from_xml(_node("<xs:attributeGroup/>"), Lineage.index(4))
    assert excinfo.value.attribute == "name"
    assert "lineage 4" in str(excinfo.value)


def test_attribute_without_type_or_simple_type():
    with pytest.raises(MissingAttributeError):
        AttributeGroup.from_xml(
            _node('<xs:attributeGroup name="x"><xs:attribute name="y"/></xs:attributeGroup>'),
            Lineage.index(0),
        )


def test_attribute_with_inline_simple_type():
    ag = AttributeGroup.from_xml(
        _node(
            """
            <xs:attributeGroup name="x">
                <xs:attribute name="y">
                    <xs:simpleType>
                        <xs:restriction base="xs:token">
                            <xs:enumeration value="a"/>
                        </xs:restriction>
                    </xs:simpleType>
                </xs:attribute>
                <xs:anyAttribute/>
            </xs:attributeGroup>
            """
        ),
        Lineage.index(0),
    )
    attribute = ag.members[0]
    assert attribute.type_ is None
    assert attribute.simple_type.restriction.facets.enumerations[0].value == "a"
    assert ag.any_attribute


def test_wrong_tag():
    with pytest.raises(UnexpectedNodeError) as excinfo:
        AttributeGroup.from_xml(_node('<xs:group name="x"/>'), Lineage.index(0))
    assert excinfo.value.expected == "attributeGroup"
    assert excinfo.value.actual == "group"


# ---------------- Sequences, choices, groups ---------------- #


def test_parse_sequence():
    seq = Sequence.from_xml(
        _node(
            """
            <xs:sequence>
                <xs:element name="identification" type="identification" minOccurs="0"/>
                <xs:element name="part-name" type="part-name"/>
                <xs:element name="part-name-display" type="name-display" minOccurs="0"/>
                <xs:element name="part-abbreviation" type="part-name" minOccurs="0"/>
                <xs:element name="part-abbreviation-display" type="name-display" minOccurs="0"/>
                <xs:element name="group" type="xs:string" minOccurs="0" maxOccurs="unbounded">
                    <xs:annotation>
                        <xs:documentation>flerp floop fleep flop</xs:documentation>
                    </xs:annotation>
                </xs:element>
                <xs:element name="score-instrument" type="score-instrument" minOccurs="0" maxOccurs="unbounded"/>
                <xs:sequence minOccurs="0" maxOccurs="unbounded">
                    <xs:element name="midi-device" type="midi-device" minOccurs="0"/>
                    <xs:element name="midi-instrument" type="midi-instrument" minOccurs="0"/>
                </xs:sequence>
            </xs:sequence>
            """
        ),
        Lineage.index(3),
    )
    assert str(seq.id) == "sequence:3"
    assert seq.documentation() == ""
    assert seq.occurs == Occurs(1, 1)
    assert len(seq.members) == 8

    group = seq.members[5]
    assert isinstance(group, Element)
    assert group.name == "group"
    assert group.base_type is Character.STRING
    assert group.occurs == Occurs(0, None)
    assert group.documentation() == "flerp floop fleep flop"

    inner = seq.members[7]
    assert isinstance(inner, Sequence)
    assert inner.occurs == Occurs(0, None)
    assert str(inner.id) == "sequence:3.7"
    assert len(inner.members) == 2


def test_sequence_with_choice_group_ref_and_any():
    seq = Sequence.from_xml(
        _node(
            """
            <xs:sequence>
                <xs:choice minOccurs="0" maxOccurs="2">
                    <xs:element name="a" type="xs:string"/>
                    <xs:element ref="b"/>
                </xs:choice>
                <xs:group ref="editorial" minOccurs="0"/>
                <xs:any namespace="##other" processContents="lax" minOccurs="0"/>
            </xs:sequence>
            """
        ),
        Lineage.index(1),
    )
    choice, group_ref, wildcard = seq.members
    assert isinstance(choice, Choice)
    assert choice.occurs == Occurs(0, 2)
    ref = choice.members[1]
    assert ref.is_ref
    assert ref.ref_id() == Id(EntryType.ELEMENT, "b")
    assert isinstance(group_ref, GroupRef)
    assert group_ref.ref_id() == Id(EntryType.GROUP, "editorial")
    assert group_ref.occurs.is_optional
    assert isinstance(wildcard, AnyElement)
    assert wildcard.process_contents == "lax"


def test_sequence_rejects_attribute():
    with pytest.raises(UnexpectedNodeError):
        Sequence.from_xml(_node('<xs:sequence><xs:attribute name="x" type="xs:string"/></xs:sequence>'), Lineage.index(0))


def test_sequence_invalid_occurs():
    with pytest.raises(InvalidOccursError):
        Sequence.from_xml(_node('<xs:sequence minOccurs="3" maxOccurs="2"/>'), Lineage.index(0))


def test_group_definition():
    group = GroupDefinition.from_xml(
        _node(
            """
            <xs:group name="beat-unit">
                <xs:annotation><xs:documentation>The beat-unit group.</xs:documentation></xs:annotation>
                <xs:sequence>
                    <xs:element name="beat-unit" type="note-type-value"/>
                    <xs:element name="beat-unit-dot" type="empty" minOccurs="0" maxOccurs="unbounded"/>
                </xs:sequence>
            </xs:group>
            """
        ),
        Lineage.index(9),
    )
    assert group.id == Id(EntryType.GROUP, "beat-unit")
    assert str(group.id) == "beat-unit (group)"
    assert group.documentation() == "The beat-unit group."
    assert isinstance(group.content, Sequence)
    assert len(group.content.members) == 2


def test_group_definition_rejects_two_compositors():
    with pytest.raises(UnexpectedNodeError):
        GroupDefinition.from_xml(
            _node('<xs:group name="g"><xs:sequence/><xs:choice/></xs:group>'), Lineage.index(0)
        )


# ---------------- Simple types ---------------- #


def test_simple_type_restriction_facets():
    st = SimpleType.from_xml(
        _node(
            """
            <xs:simpleType name="tenths-range">
                <xs:restriction base="xs:decimal">
                    <xs:minExclusive value="0"/>
                    <xs:maxInclusive value=" 12.5 "/>
                    <xs:totalDigits value="4"/>
                </xs:restriction>
            </xs:simpleType>
            """
        ),
        Lineage.index(0),
    )
    assert str(st.id) == "tenths-range (simpleType)"
    restriction = st.restriction
    assert restriction.base_type is Numeric.DECIMAL
    assert restriction.facets.min_exclusive == "0"
    assert restriction.facets.max_inclusive == "12.5"
    assert restriction.facets.total_digits == 4
    assert restriction.facets.has_range
    assert st.union is None


def test_simple_type_union_and_list():
    union = SimpleType.from_xml(
        _node('<xs:simpleType name="font-size"><xs:union memberTypes="xs:decimal css-font-size"/></xs:simpleType>'),
        Lineage.index(0),
    )
    assert isinstance(union.content, UnionType)
    assert union.union.member_types == [Numeric.DECIMAL, OtherType("css-font-size")]

    items = SimpleType.from_xml(
        _node('<xs:simpleType name="tokens"><xs:list itemType="xs:token"/></xs:simpleType>'),
        Lineage.index(1),
    )
    assert isinstance(items.content, ListType)
    assert items.content.item_type is Character.TOKEN


def test_anonymous_simple_type_id_uses_lineage():
    st = SimpleType.from_xml(
        _node('<xs:simpleType><xs:restriction base="xs:string"/></xs:simpleType>'), Lineage((2, 0))
    )
    assert str(st.id) == "simpleType:2.0"
    assert st.name is None


def test_simple_type_requires_content():
    with pytest.raises(UnexpectedNodeError):
        SimpleType.from_xml(_node('<xs:simpleType name="x"/>'), Lineage.index(0))


def test_restriction_requires_base():
    with pytest.raises(MissingAttributeError) as excinfo:
        SimpleType.from_xml(
            _node('<xs:simpleType name="x"><xs:restriction/></xs:simpleType>'), Lineage.index(0)
        )
    assert excinfo.value.attribute == "base"


def test_restriction_rejects_unknown_facet():
    with pytest.raises(UnexpectedNodeError):
        SimpleType.from_xml(
            _node('<xs:simpleType name="x"><xs:restriction base="xs:string"><xs:bogus value="1"/></xs:restriction></xs:simpleType>'),
            Lineage.index(0),
        )


def test_enumeration_documentation():
    st = SimpleType.from_xml(
        _node(
            """
            <xs:simpleType name="yes-no">
                <xs:restriction base="xs:token">
                    <xs:enumeration value="yes">
                        <xs:annotation><xs:documentation>affirmative</xs:documentation></xs:annotation>
                    </xs:enumeration>
                    <xs:enumeration value="no"/>
                </xs:restriction>
            </xs:simpleType>
            """
        ),
        Lineage.index(0),
    )
    yes, no = st.restriction.facets.enumerations
    assert yes.documentation() == "affirmative"
    assert no.documentation() == ""


# ---------------- Complex types & elements ---------------- #


def test_complex_type_with_particle_and_attributes():
    ct = ComplexType.from_xml(
        _node(
            """
            <xs:complexType name="bend" mixed="true">
                <xs:sequence>
                    <xs:element name="bend-alter" type="semitones"/>
                </xs:sequence>
                <xs:attributeGroup ref="bend-sound"/>
                <xs:attribute name="shape" type="xs:token"/>
                <xs:anyAttribute/>
            </xs:complexType>
            """
        ),
        Lineage.index(5),
    )
    assert str(ct.id) == "bend (complexType)"
    assert ct.mixed
    assert isinstance(ct.particle, Sequence)
    assert [type(a) for a in ct.attributes] == [AttributeGroupRef, AttributeType]
    assert ct.any_attribute


def test_complex_type_simple_content_extension():
    ct = ComplexType.from_xml(
        _node(
            """
            <xs:complexType name="formatted-text">
                <xs:simpleContent>
                    <xs:extension base="xs:string">
                        <xs:attribute name="lang" type="xs:language"/>
                    </xs:extension>
                </xs:simpleContent>
            </xs:complexType>
            """
        ),
        Lineage.index(0),
    )
    model = ct.content_model
    assert model.is_simple
    assert model.derivation.kind == "extension"
    assert model.derivation.base_type is Character.STRING
    assert model.derivation.attributes[0].name == "lang"


def test_complex_type_complex_content_extension():
    ct = ComplexType.from_xml(
        _node(
            """
            <xs:complexType name="note-with-pitch">
                <xs:complexContent>
                    <xs:extension base="note">
                        <xs:sequence>
                            <xs:element name="pitch" type="pitch"/>
                        </xs:sequence>
                    </xs:extension>
                </xs:complexContent>
            </xs:complexType>
            """
        ),
        Lineage.index(0),
    )
    derivation = ct.content_model.derivation
    assert not ct.content_model.is_simple
    assert derivation.base_type == OtherType("note")
    assert isinstance(derivation.particle, Sequence)


def test_complex_type_rejects_unknown_child():
    with pytest.raises(UnexpectedNodeError):
        ComplexType.from_xml(_node('<xs:complexType name="x"><xs:list itemType="xs:token"/></xs:complexType>'), Lineage.index(0))


def test_element_with_inline_complex_type():
    element = Element.from_xml(
        _node(
            """
            <xs:element name="score-partwise" block="extension substitution" final="#all">
                <xs:complexType>
                    <xs:sequence>
                        <xs:element name="part" maxOccurs="unbounded"/>
                    </xs:sequence>
                    <xs:attribute name="version" type="xs:token" default="1.0"/>
                </xs:complexType>
            </xs:element>
            """
        ),
        Lineage.index(2),
    )
    assert element.id == Id(EntryType.ELEMENT, "score-partwise")
    assert element.complex_type.particle.members[0].occurs == Occurs(1, None)
    version = element.complex_type.attributes[0]
    assert version.default == "1.0"
    assert str(element.complex_type.id) == "complexType:2.0"


def test_element_requires_name_or_ref():
    with pytest.raises(MissingAttributeError):
        Element.from_xml(_node('<xs:element type="xs:string"/>'), Lineage.index(0))


# ---------------- Annotation & import ---------------- #


def test_annotation_documentation_joins_items():
    annotation = Annotation.from_xml(
        _node(
            """
            <xs:annotation>
                <xs:documentation>first</xs:documentation>
                <xs:appinfo>ignored</xs:appinfo>
                <xs:documentation source="x">second</xs:documentation>
            </xs:annotation>
            """
        ),
        Lineage.index(0),
    )
    assert annotation.documentation() == "first\nsecond"
    assert [item.kind for item in annotation.items] == ["documentation", "appinfo", "documentation"]
    assert str(annotation.id) == "annotation:0"


def test_two_annotations_are_rejected():
    with pytest.raises(UnexpectedNodeError):
        Sequence.from_xml(_node("<xs:sequence><xs:annotation/><xs:annotation/></xs:sequence>"), Lineage.index(0))


def test_import():
    imp = Import.from_xml(
        _node('<xs:import namespace="http://www.w3.org/1999/xlink" schemaLocation="xlink.xsd"/>'),
        Lineage.index(1),
    )
    assert imp.id == Id(EntryType.IMPORT, "http://www.w3.org/1999/xlink")
    assert imp.schema_location == "xlink.xsd"


def test_to_dict_is_json_friendly():
    ag = AttributeGroup.from_xml(
        _node('<xs:attributeGroup name="print-style"><xs:attribute name="color" type="color"/></xs:attributeGroup>'),
        Lineage.index(2),
    )
    data = ag.to_dict()
    assert data["kind"] == "AttributeGroup"
    assert data["id"] == "print-style (attributeGroup)"
    assert data["lineage"] == "2"
    assert data["members"][0]["base_type"] == "color"
