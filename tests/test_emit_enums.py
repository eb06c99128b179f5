import pytest

from xsd_codegen.config import GeneratorSettings
from xsd_codegen.cpp_writer import sep
from xsd_codegen.emit_enums import render_enums, sort_enumerations
from xsd_codegen.errors import EmitError
from xsd_codegen.models import Enumeration, OtherField
from xsd_codegen.naming import Symbol


def _closed(name, *members, documentation=""):
    return Enumeration(name=Symbol(name), documentation=documentation, members=[Symbol(m) for m in members])


def _open(name, *members):
    enum = _closed(name + "-enum", *members)
    enum.other_field = OtherField(
        name=Symbol("other"), wrapper_class_name=Symbol(name), default_value=Symbol(members[0])
    )
    return enum


def test_closed_header_exact():
    settings = GeneratorSettings(license_lines=["// L"], namespaces=["ns"])
    header, _ = render_enums([_closed("yes-no", "yes", "no")], settings)
    expected = "\n".join(
        [
            "// L",
            "",
            "#pragma once",
            "",
            "#include <ostream>",
            "#include <string>",
            "",
            "namespace ns",
            "{",
            "    " + sep("YesNo"),
            "    ///",
            "    enum class YesNo",
            "    {",
            "        yes = 0,",
            "        no = 1",
            "    };",
            "",
            "    YesNo parseYesNo( const std::string& value );",
            "    std::string toString( const YesNo value );",
            "    std::ostream& toStream( std::ostream& os, const YesNo value );",
            "    std::ostream& operator<<( std::ostream& os, const YesNo value );",
            "}",
            "",
        ]
    )
    assert header == expected


def test_closed_definition():
    _, source = render_enums([_closed("above-below", "above", "below")], GeneratorSettings())
    assert '#include "mx/core/Enums.h"' in source
    assert 'if ( value == "above" ) { return AboveBelow::above; }' in source
    assert 'else if ( value == "below" ) { return AboveBelow::below; }' in source
    # unmatched text falls back to the first member
    assert "return AboveBelow::above;\n" in source
    assert 'case AboveBelow::below: { return "below"; }' in source
    assert "bool& success" not in source


def test_documentation_and_namespaces():
    settings = GeneratorSettings()
    header, _ = render_enums(
        [_closed("yes-no", "yes", "no", documentation="The yes-no type.")], settings
    )
    assert header.startswith("// MusicXML Class Library\n")
    assert "namespace mx\n{\n    namespace core\n    {\n" in header
    assert "        /// The yes-no type.\n        ///\n        enum class YesNo" in header
    assert header.endswith("    }\n}\n")


def test_open_enumeration_declaration():
    header, _ = render_enums([_open("distance-type", "beam", "hyphen")], GeneratorSettings())
    assert "enum class DistanceTypeEnum" in header
    assert "hyphen = 1,\n" in header
    assert "other = 2\n" in header
    assert "DistanceTypeEnum parseDistanceTypeEnum( const std::string& value, bool& success );" in header
    assert "class DistanceType\n" in header
    assert "DistanceType parseDistanceType( const std::string& value );" in header
    assert "std::string toString( const DistanceType& value );" in header


def test_open_enumeration_definition():
    _, source = render_enums([_open("distance-type", "beam", "hyphen")], GeneratorSettings())
    assert "success = false;" in source
    assert 'case DistanceTypeEnum::other: { return "other"; }' in source
    assert "DistanceType::DistanceType()\n" in source
    assert ":myEnum( DistanceTypeEnum::beam )" in source
    assert "setValue( DistanceTypeEnum::beam );" in source
    assert "myCustomValue = ( myEnum == DistanceTypeEnum::other ) ? value : std::string{};" in source
    assert "return value.getValueString();" in source


def test_sorted_by_pascal_name():
    enums = [_closed("yes-no", "yes"), _closed("above-below", "above"), _open("distance-type", "beam")]
    assert [e.name.pascal() for e in sort_enumerations(enums)] == ["AboveBelow", "DistanceTypeEnum", "YesNo"]
    header, source = render_enums(enums, GeneratorSettings())
    assert header.index("enum class AboveBelow") < header.index("enum class DistanceTypeEnum") < header.index(
        "enum class YesNo"
    )
    assert source.index("parseAboveBelow(") < source.index("parseYesNo(")


def test_render_is_deterministic():
    enums = [_closed("yes-no", "yes", "no"), _open("font-size-name", "x-small", "medium")]
    assert render_enums(enums, GeneratorSettings()) == render_enums(list(reversed(enums)), GeneratorSettings())


def test_string_literals_are_escaped():
    _, source = render_enums([_closed("quote", 'say "hi"', "back\\slash")], GeneratorSettings())
    assert '"say \\"hi\\""' in source
    assert '"back\\\\slash"' in source


def test_enumeration_without_members():
    with pytest.raises(EmitError):
        render_enums([_closed("nothing")], GeneratorSettings())


def test_custom_indent():
    settings = GeneratorSettings(namespaces=["acme"], indent="\t")
    header, _ = render_enums([_closed("yes-no", "yes", "no")], settings)
    assert "\n\tenum class YesNo\n\t{\n\t\tyes = 0,\n" in header
