"""Enumeration emitter.

Renders every :class:`~xsd_codegen.models.Enumeration` into one header and
one source file. Enumerations are emitted sorted by their pascal-case name;
members keep schema declaration order and are numbered from zero.

Two shapes are produced:

* **closed**: ``parseX`` returns the first declared member when the text
  matches nothing, silently. ``toString`` is its exact inverse for every
  declared member.
* **open** (``other_field`` set): the enum gains an ``other`` member,
  ``parseX( value, success )`` reports unrecognized text through
  ``success``, and a wrapper class keeps the unrecognized literal so
  ``toString( parseWrapper( s ) ) == s`` holds for any ``s``.

Example:
    header, source = render_enums(model.enumerations, GeneratorSettings())
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from .config import GeneratorSettings
from .cpp_writer import CodeBuffer, documentation_block, sep, wrap_header, wrap_source
from .errors import EmitError
from .models import Enumeration, OtherField

logger = logging.getLogger(__name__)

HEADER_SYSTEM_INCLUDES = ["ostream", "string"]
SOURCE_SYSTEM_INCLUDES = ["ostream", "string"]


def sort_enumerations(enumerations: Sequence[Enumeration]) -> List[Enumeration]:
    """Emission order: by pascal-case name, stable for equal names."""
    return sorted(enumerations, key=lambda e: e.name.pascal())


def _check(enumeration: Enumeration) -> None:
    if not enumeration.members:
        raise EmitError(f"enumeration '{enumeration.name}' has no members")


def _literal(text: str) -> str:
    """Quote ``text`` as a C++ string literal."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


# ---------------- Declarations ---------------- #


def write_declaration(buf: CodeBuffer, enumeration: Enumeration) -> None:
    _check(enumeration)
    n = enumeration.name.pascal()
    buf.lines(0, documentation_block(n, enumeration.documentation))
    buf.line(0, f"enum class {n}")
    buf.line(0, "{")
    values = [m.camel() for m in enumeration.members]
    if enumeration.other_field is not None:
        values.append(enumeration.other_field.name.camel())
    for i, value in enumerate(values):
        comma = "," if i < len(values) - 1 else ""
        buf.line(1, f"{value} = {i}{comma}")
    buf.line(0, "};")
    buf.blank()

    if enumeration.other_field is not None:
        buf.line(0, f"{n} parse{n}( const std::string& value, bool& success );")
    buf.line(0, f"{n} parse{n}( const std::string& value );")
    buf.line(0, f"std::string toString( const {n} value );")
    buf.line(0, f"std::ostream& toStream( std::ostream& os, const {n} value );")
    buf.line(0, f"std::ostream& operator<<( std::ostream& os, const {n} value );")

    if enumeration.other_field is not None:
        _write_wrapper_declaration(buf, n, enumeration.other_field)


def _write_wrapper_declaration(buf: CodeBuffer, en: str, other: OtherField) -> None:
    cn = other.wrapper_class_name.pascal()
    buf.blank()
    buf.line(0, f"class {cn}")
    buf.line(0, "{")
    buf.line(0, "public:")
    buf.line(1, f"explicit {cn}( const {en} value );")
    buf.line(1, f"explicit {cn}( const std::string& value );")
    buf.line(1, f"{cn}();")
    buf.line(1, f"{en} getValue() const;")
    buf.line(1, "std::string getValueString() const;")
    buf.line(1, f"void setValue( const {en} value );")
    buf.line(1, "void setValue( const std::string& value );")
    buf.line(0, "private:")
    buf.line(1, f"{en} myEnum;")
    buf.line(1, "std::string myCustomValue;")
    buf.line(0, "};")
    buf.blank()
    buf.line(0, f"{cn} parse{cn}( const std::string& value );")
    buf.line(0, f"std::string toString( const {cn}& value );")
    buf.line(0, f"std::ostream& toStream( std::ostream& os, const {cn}& value );")
    buf.line(0, f"std::ostream& operator<<( std::ostream& os, const {cn}& value );")


# ---------------- Definitions ---------------- #


def _write_member_matches(buf: CodeBuffer, pc: str, enumeration: Enumeration) -> None:
    for i, member in enumerate(enumeration.members):
        keyword = "if" if i == 0 else "else if"
        buf.line(1, f"{keyword} ( value == {_literal(member.original())} ) {{ return {pc}::{member.camel()}; }}")


def _write_stream_functions(buf: CodeBuffer, param: str) -> None:
    buf.line(0, f"std::ostream& toStream( std::ostream& os, const {param} )")
    buf.line(0, "{")
    buf.line(1, "return os << toString( value );")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"std::ostream& operator<<( std::ostream& os, const {param} )")
    buf.line(0, "{")
    buf.line(1, "return toStream( os, value );")
    buf.line(0, "}")


def write_definition(buf: CodeBuffer, enumeration: Enumeration) -> None:
    _check(enumeration)
    if enumeration.other_field is None:
        _write_closed_definition(buf, enumeration)
    else:
        _write_open_definition(buf, enumeration, enumeration.other_field)


def _write_closed_definition(buf: CodeBuffer, enumeration: Enumeration) -> None:
    pc = enumeration.name.pascal()
    first = enumeration.default_member
    buf.line(0, sep(pc))
    buf.blank()
    buf.line(0, f"{pc} parse{pc}( const std::string& value )")
    buf.line(0, "{")
    _write_member_matches(buf, pc, enumeration)
    buf.line(1, f"return {pc}::{first.camel()};")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"std::string toString( const {pc} value )")
    buf.line(0, "{")
    buf.line(1, "switch ( value )")
    buf.line(1, "{")
    for member in enumeration.members:
        buf.line(2, f"case {pc}::{member.camel()}: {{ return {_literal(member.original())}; }}")
    buf.line(2, "default: break;")
    buf.line(1, "}")
    buf.line(1, f"return {_literal(first.original())};")
    buf.line(0, "}")
    buf.blank()
    _write_stream_functions(buf, f"{pc} value")


def _write_open_definition(buf: CodeBuffer, enumeration: Enumeration, other: OtherField) -> None:
    pc = enumeration.name.pascal()
    cn = other.wrapper_class_name.pascal()
    of_orig = _literal(other.name.original())
    of_camel = other.name.camel()
    default = other.default_value.camel()

    buf.line(0, sep(pc))
    buf.blank()
    buf.line(0, f"{pc} parse{pc}( const std::string& value, bool& success )")
    buf.line(0, "{")
    buf.line(1, "success = true;")
    _write_member_matches(buf, pc, enumeration)
    buf.line(1, f"else if ( value == {of_orig} ) {{ return {pc}::{of_camel}; }}")
    buf.line(1, "success = false;")
    buf.line(1, f"return {pc}::{of_camel};")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"{pc} parse{pc}( const std::string& value )")
    buf.line(0, "{")
    buf.line(1, "bool success = true;")
    buf.line(1, f"return parse{pc}( value, success );")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"std::string toString( const {pc} value )")
    buf.line(0, "{")
    buf.line(1, "switch ( value )")
    buf.line(1, "{")
    for member in enumeration.members:
        buf.line(2, f"case {pc}::{member.camel()}: {{ return {_literal(member.original())}; }}")
    buf.line(2, f"case {pc}::{of_camel}: {{ return {of_orig}; }}")
    buf.line(2, "default: break;")
    buf.line(1, "}")
    buf.line(1, f"return {of_orig};")
    buf.line(0, "}")
    buf.blank()
    _write_stream_functions(buf, f"{pc} value")
    buf.blank()

    buf.line(0, f"{cn}::{cn}( const {pc} value )")
    buf.line(0, ":myEnum( value )")
    buf.line(0, ",myCustomValue( \"\" )")
    buf.line(0, "{")
    buf.line(1, "setValue( value );")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"{cn}::{cn}( const std::string& value )")
    buf.line(0, f":myEnum( {pc}::{of_camel} )")
    buf.line(0, ",myCustomValue( value )")
    buf.line(0, "{")
    buf.line(1, "setValue( value );")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"{cn}::{cn}()")
    buf.line(0, f":myEnum( {pc}::{default} )")
    buf.line(0, ",myCustomValue( \"\" )")
    buf.line(0, "{")
    buf.line(1, f"setValue( {pc}::{default} );")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"{pc} {cn}::getValue() const")
    buf.line(0, "{")
    buf.line(1, "return myEnum;")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"std::string {cn}::getValueString() const")
    buf.line(0, "{")
    buf.line(1, f"if ( myEnum != {pc}::{of_camel} )")
    buf.line(1, "{")
    buf.line(2, "return toString( myEnum );")
    buf.line(1, "}")
    buf.line(1, "return myCustomValue;")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"void {cn}::setValue( const {pc} value )")
    buf.line(0, "{")
    buf.line(1, "myEnum = value;")
    buf.line(1, f"if ( value == {pc}::{of_camel} && myCustomValue.empty() )")
    buf.line(1, "{")
    buf.line(2, f"myCustomValue = {of_orig};")
    buf.line(1, "}")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"void {cn}::setValue( const std::string& value )")
    buf.line(0, "{")
    buf.line(1, "bool found = false;")
    buf.line(1, f"myEnum = parse{pc}( value, found );")
    buf.line(1, f"myCustomValue = ( myEnum == {pc}::{of_camel} ) ? value : std::string{{}};")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"{cn} parse{cn}( const std::string& value )")
    buf.line(0, "{")
    buf.line(1, f"return {cn}( value );")
    buf.line(0, "}")
    buf.blank()
    buf.line(0, f"std::string toString( const {cn}& value )")
    buf.line(0, "{")
    buf.line(1, "return value.getValueString();")
    buf.line(0, "}")
    buf.blank()
    _write_stream_functions(buf, f"{cn}& value")


# ---------------- Files ---------------- #


def render_enums(enumerations: Sequence[Enumeration], settings: GeneratorSettings) -> Tuple[str, str]:
    """Render the complete enumeration header and source text.

    Output depends only on the input model and settings, so rendering the same
    model twice produces identical text.

    Returns:
        ``(header_text, source_text)``

    Raises:
        EmitError: An enumeration has no members.
    """
    ordered = sort_enumerations(enumerations)
    header = CodeBuffer()
    source = CodeBuffer()
    for i, enumeration in enumerate(ordered):
        if i:
            header.blank()
            source.blank()
        write_declaration(header, enumeration)
        write_definition(source, enumeration)
    logger.debug("Rendered %d enumerations", len(ordered))

    header_text = wrap_header(settings, header.text(), system_includes=HEADER_SYSTEM_INCLUDES)
    source_text = wrap_source(
        settings,
        source.text(),
        project_includes=[settings.header_path_for(settings.enums_basename)],
        system_includes=SOURCE_SYSTEM_INCLUDES,
    )
    return header_text, source_text
