import pytest

from xsd_codegen.naming import Symbol, camel_case, pascal_case, split_words


@pytest.mark.parametrize(
    "raw, pascal, camel",
    [
        ("yes-no", "YesNo", "yesNo"),
        ("x-small", "XSmall", "xSmall"),
        ("midi-16", "Midi16", "midi16"),
        ("above_below", "AboveBelow", "aboveBelow"),
        ("positiveInteger", "PositiveInteger", "positiveInteger"),
        ("16th", "_16th", "_16th"),
        ("double", "Double", "double_"),
        ("", "empty", "empty"),
        ("--", "empty", "empty"),
    ],
)
def test_case_conversion(raw, pascal, camel):
    assert pascal_case(raw) == pascal
    assert camel_case(raw) == camel


def test_split_words():
    assert split_words("distance-type.enum") == ["distance", "type", "enum"]
    assert split_words("a  b") == ["a", "b"]


def test_symbol_projections():
    symbol = Symbol("css-font-size")
    assert symbol.original() == "css-font-size"
    assert str(symbol) == "css-font-size"
    assert symbol.pascal() == "CssFontSize"
    assert symbol.camel() == "cssFontSize"


def test_symbols_compare_by_raw_name():
    assert Symbol("yes") == Symbol("yes")
    assert Symbol("yes") != Symbol("no")
    assert len({Symbol("a"), Symbol("a")}) == 1
