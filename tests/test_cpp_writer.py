import pytest

from xsd_codegen.config import GeneratorSettings
from xsd_codegen.cpp_writer import (
    SEP_WIDTH,
    CodeBuffer,
    documentation_block,
    documentation_lines,
    reindent,
    sep,
    wrap_source,
)
from xsd_codegen.errors import EmitError
from xsd_codegen.templates import INTEGER_BUILTINS_H, INTEGER_TYPE_H, render


def test_sep_is_full_width():
    banner = sep("YesNo")
    assert banner.startswith("//////// YesNo /")
    assert len(banner) == SEP_WIDTH


def test_documentation_lines_collapse_and_wrap():
    text = """
        The divisions type is used to express
        values in terms of the musical divisions.

        Second paragraph.
    """
    assert documentation_lines(text) == [
        "/// The divisions type is used to express values in terms of the musical divisions.",
        "///",
        "/// Second paragraph.",
    ]
    long = " ".join(["word"] * 40)
    assert all(len(line) <= 100 for line in documentation_lines(long))
    assert documentation_lines("") == []


def test_documentation_block():
    assert documentation_block("X", "") == [sep("X"), "///"]
    assert documentation_block("X", "doc") == [sep("X"), "///", "/// doc", "///"]


def test_code_buffer():
    buf = CodeBuffer()
    buf.line(0, "a {")
    buf.line(1, "b;")
    buf.blank()
    buf.line(1, "")
    buf.lines(2, ["c;", "d;"])
    buf.block("e\n    f")
    assert len(buf) == 8
    assert buf.text() == "a {\n    b;\n\n\n        c;\n        d;\ne\n    f"


def test_reindent():
    assert reindent("a\n    b\n\n      c", "\t", 1) == "\ta\n\t\tb\n\n\t\t  c"
    assert reindent("a\n    b", "  ") == "a\n  b"


def test_wrap_source_without_namespaces():
    settings = GeneratorSettings(license_lines=["// L"], namespaces=[])
    text = wrap_source(settings, "int x;", project_includes=["a/B.h"], system_includes=["string"])
    assert text == '// L\n\n#include "a/B.h"\n\n#include <string>\n\n\nint x;\n\n'


def test_render_static_template():
    assert "class IntRange" in render(INTEGER_BUILTINS_H)


def test_render_substitutes():
    text = render(INTEGER_TYPE_H, {"classname": "Midi16", "documentation": "/// doc"})
    assert text.startswith("/// doc\nclass Midi16 : public IntRange\n")
    assert "$" not in text


def test_render_missing_value():
    with pytest.raises(EmitError) as excinfo:
        render(INTEGER_TYPE_H, {"classname": "Midi16"})
    assert "documentation" in str(excinfo.value)


def test_render_unknown_template():
    with pytest.raises(EmitError):
        render("nope")
