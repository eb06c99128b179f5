from pathlib import Path

import pytest

from xsd_codegen.errors import (
    DuplicateEntryError,
    EmptyPrefixError,
    NotFoundError,
    SchemaError,
    SchemaIOError,
    UnexpectedNodeError,
)
from xsd_codegen.ids import EntryType, Id, Lineage
from xsd_codegen.schema import Xsd, load
from xsd_codegen.xsd_parser import Annotation, AttributeGroup, Import, SimpleType

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "schema" / "sample.xsd"

XS = 'xmlns:xs="http://www.w3.org/2001/XMLSchema"'


def test_load_fixture():
    xsd = load(FIXTURE)
    assert xsd.prefix == "xs"
    assert len(xsd) == 27

    entries = xsd.entries()
    assert isinstance(entries[0], Annotation)
    assert entries[0].documentation() == "Sample score schema."
    assert isinstance(entries[1], Import)
    assert entries[1].schema_location == "xlink.xsd"
    assert [e.lineage for e in entries[:3]] == [Lineage.index(0), Lineage.index(1), Lineage.index(2)]


def test_find_simple_type():
    xsd = load(FIXTURE)
    yes_no = xsd.find(Id(EntryType.SIMPLE_TYPE, "yes-no"))
    assert isinstance(yes_no, SimpleType)
    assert yes_no.documentation() == "The yes-no type is used for boolean-like attributes."
    assert [f.value for f in yes_no.restriction.facets.enumerations] == ["yes", "no"]


def test_find_attribute_group():
    xsd = load(FIXTURE)
    bend_sound = xsd.find(Id(EntryType.ATTRIBUTE_GROUP, "bend-sound"))
    assert isinstance(bend_sound, AttributeGroup)
    assert bend_sound.lineage == Lineage.index(18)
    assert [m.name for m in bend_sound.members] == ["accelerate", "beats", "first-beat", "last-beat"]


def test_identity_includes_kind():
    xsd = load(FIXTURE)
    # "bend" is a complexType; there is no simpleType by that name
    assert Id(EntryType.COMPLEX_TYPE, "bend") in xsd
    assert Id(EntryType.SIMPLE_TYPE, "bend") not in xsd
    assert xsd.get(Id(EntryType.SIMPLE_TYPE, "bend")) is None


def test_find_missing():
    xsd = load(FIXTURE)
    with pytest.raises(NotFoundError) as excinfo:
        xsd.find(Id(EntryType.SIMPLE_TYPE, "missing"))
    assert str(excinfo.value) == "'missing (simpleType)' not found"
    # also catchable as a KeyError
    with pytest.raises(KeyError):
        xsd.find(Id(EntryType.GROUP, "missing"))


def test_remove_and_replace():
    xsd = load(FIXTURE)
    id_ = Id(EntryType.SIMPLE_TYPE, "tenths")
    removed = xsd.remove(id_)
    assert removed.id == id_
    assert len(xsd) == 26
    with pytest.raises(NotFoundError):
        xsd.remove(id_)

    with pytest.raises(NotFoundError):
        xsd.replace(removed)

    percent = xsd.find(Id(EntryType.SIMPLE_TYPE, "percent"))
    position = xsd.entries().index(percent)
    replacement = SimpleType(id=percent.id, lineage=percent.lineage, name="percent", content=percent.content)
    assert xsd.replace(replacement) is percent
    assert xsd.entries()[position] is replacement


def test_duplicate_identity():
    xsd = Xsd.from_string(
        f"""<xs:schema {XS}>
            <xs:simpleType name="a"><xs:restriction base="xs:token"/></xs:simpleType>
            <xs:simpleType name="a"><xs:restriction base="xs:string"/></xs:simpleType>
        </xs:schema>"""
    )
    with pytest.raises(DuplicateEntryError) as excinfo:
        xsd.find(Id(EntryType.SIMPLE_TYPE, "a"))
    assert excinfo.value.count == 2


def test_remove_keeps_remaining_order():
    xsd = load(FIXTURE)
    before = [e.id for e in xsd.entries()]
    id_ = Id(EntryType.SIMPLE_TYPE, "tenths")
    xsd.remove(id_)
    after = [e.id for e in xsd.entries()]
    assert after == [i for i in before if i != id_]
    assert len(after) == len(before) - 1


def test_remove_takes_first_duplicate():
    xsd = Xsd.from_string(
        f"""<xs:schema {XS}>
            <xs:simpleType name="a"><xs:restriction base="xs:token"/></xs:simpleType>
            <xs:simpleType name="b"><xs:restriction base="xs:token"/></xs:simpleType>
            <xs:simpleType name="a"><xs:restriction base="xs:string"/></xs:simpleType>
        </xs:schema>"""
    )
    id_ = Id(EntryType.SIMPLE_TYPE, "a")
    removed = xsd.remove(id_)
    assert removed.lineage == Lineage.index(0)
    assert str(removed.restriction.base_type) == "token"

    remaining = xsd.find(id_)
    assert remaining.lineage == Lineage.index(2)
    assert str(remaining.restriction.base_type) == "string"
    assert [str(e.id) for e in xsd.entries()] == ["b (simpleType)", "a (simpleType)"]


def test_str_lists_identities():
    xsd = load(FIXTURE)
    lines = str(xsd).splitlines()
    assert len(lines) == 27
    assert lines[0] == "annotation:0"
    assert lines[1] == "http://www.w3.org/1999/xlink (import)"
    assert lines[2] == "yes-no (simpleType)"
    assert lines[-1] == "score (element)"


def test_custom_prefix():
    xsd = Xsd.from_string(
        """<xsd:schema xmlns:xsd="http://www.w3.org/2001/XMLSchema">
            <xsd:simpleType name="n"><xsd:restriction base="xsd:decimal"/></xsd:simpleType>
        </xsd:schema>"""
    )
    assert xsd.prefix == "xsd"
    n = xsd.find(Id(EntryType.SIMPLE_TYPE, "n"))
    assert str(n.restriction.base_type) == "decimal"


def test_default_namespace_has_no_prefix():
    with pytest.raises(EmptyPrefixError):
        Xsd.from_string('<schema xmlns="http://www.w3.org/2001/XMLSchema"/>')


def test_root_must_be_schema():
    with pytest.raises(UnexpectedNodeError) as excinfo:
        Xsd.from_string(f"<xs:element {XS} name='x'/>")
    assert excinfo.value.expected == "schema"


def test_unsupported_top_level_entry():
    with pytest.raises(UnexpectedNodeError) as excinfo:
        Xsd.from_string(f'<xs:schema {XS}><xs:notation name="n" public="p"/></xs:schema>')
    assert excinfo.value.actual == "notation"
    assert excinfo.value.lineage == Lineage.index(0)


def test_malformed_document():
    with pytest.raises(SchemaError):
        Xsd.from_string(f"<xs:schema {XS}><xs:simpleType>")


def test_missing_file(tmp_path):
    with pytest.raises(SchemaIOError):
        load(tmp_path / "nope.xsd")


def test_to_dict():
    data = load(FIXTURE).to_dict()
    assert data["prefix"] == "xs"
    assert data["entries"][2]["id"] == "yes-no (simpleType)"
