"""Numeric emitter: range-constrained integer and decimal wrapper types.

Integer bounds are collapsed to literals when emitted (``Exclusive(0)`` as a
minimum becomes ``1``). Decimal bounds are emitted as clamp expressions
(``MXMINEX( 0.0 )``) so the comparison happens in generated code at the
decimal type's own precision.

Both families are sorted by pascal-case name before rendering. Every type's
documentation ends with a ``Range: min=..., max=...`` line.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .config import GeneratorSettings
from .cpp_writer import CodeBuffer, documentation_block, wrap_header, wrap_source
from .models import Exclusive, Inclusive, NumericData
from .templates import (
    DECIMAL_BUILTINS_CPP,
    DECIMAL_BUILTINS_H,
    DECIMAL_TYPE_CPP,
    DECIMAL_TYPE_H,
    INTEGER_BUILTINS_CPP,
    INTEGER_BUILTINS_H,
    INTEGER_TYPE_CPP,
    INTEGER_TYPE_H,
    render,
)

logger = logging.getLogger(__name__)

INT_MIN = "IntMin"
INT_MAX = "IntMax"
NOOP = "MX_NOOP"


def sort_numerics(numerics: Sequence[NumericData]) -> List[NumericData]:
    return sorted(numerics, key=lambda n: n.name.pascal())


def format_decimal(value: float) -> str:
    """Shortest round-tripping literal; always carries a decimal point or exponent.

    >>> format_decimal(1), format_decimal(0.5)
    ('1.0', '0.5')
    """
    return repr(float(value))


def _with_range(documentation: str, range_line: str) -> str:
    if not documentation:
        return range_line
    return f"{documentation}\n\n{range_line}"


# ---------------- Integers ---------------- #


def maybe_min_max_ints(numeric: NumericData) -> Tuple[Optional[str], Optional[str]]:
    """Literal lower and upper bounds, or ``None`` for an absent bound."""
    lo = numeric.range.min
    hi = numeric.range.max
    min_val = None
    max_val = None
    if isinstance(lo, Inclusive):
        min_val = str(int(lo.value))
    elif isinstance(lo, Exclusive):
        min_val = str(int(lo.value) + 1)
    if isinstance(hi, Inclusive):
        max_val = str(int(hi.value))
    elif isinstance(hi, Exclusive):
        max_val = str(int(hi.value) - 1)
    return min_val, max_val


def min_max_ints(numeric: NumericData) -> Tuple[str, str]:
    """Bounds as emitted; absent bounds use the ``IntMin``/``IntMax`` sentinels."""
    min_val, max_val = maybe_min_max_ints(numeric)
    return min_val if min_val is not None else INT_MIN, max_val if max_val is not None else INT_MAX


def describe_range_int(numeric: NumericData) -> str:
    min_val, max_val = maybe_min_max_ints(numeric)
    return f"Range: min={min_val or 'None'}, max={max_val or 'None'}"


def document_int(numeric: NumericData) -> str:
    return _with_range(numeric.documentation, describe_range_int(numeric))


def render_integers(numerics: Sequence[NumericData], settings: GeneratorSettings) -> Tuple[str, str]:
    """Render ``(header_text, source_text)`` for the integer wrappers."""
    ordered = sort_numerics(numerics)
    header = CodeBuffer()
    source = CodeBuffer()
    header.block(render(INTEGER_BUILTINS_H))
    source.block(render(INTEGER_BUILTINS_CPP))
    for numeric in ordered:
        classname = numeric.name.pascal()
        min_val, max_val = min_max_ints(numeric)
        header.blank()
        header.blank()
        header.block(
            render(
                INTEGER_TYPE_H,
                {
                    "classname": classname,
                    "documentation": "\n".join(documentation_block(classname, document_int(numeric))),
                },
            )
        )
        source.blank()
        source.blank()
        source.block(
            render(INTEGER_TYPE_CPP, {"classname": classname, "min_val": min_val, "max_val": max_val})
        )
    logger.debug("Rendered %d integer types", len(ordered))

    header_text = wrap_header(settings, header.text(), system_includes=["iostream", "string", "limits"])
    source_text = wrap_source(
        settings,
        source.text(),
        project_includes=[settings.header_path_for(settings.integers_basename)],
        system_includes=["sstream"],
    )
    return header_text, source_text


# ---------------- Decimals ---------------- #


def minmax_expr_decimal(numeric: NumericData) -> Tuple[str, str]:
    """Clamp-expression tokens for the lower and upper bound."""
    lo = numeric.range.min
    hi = numeric.range.max
    min_expr = NOOP
    max_expr = NOOP
    if isinstance(lo, Inclusive):
        min_expr = f"MXMININ( {format_decimal(lo.value)} )"
    elif isinstance(lo, Exclusive):
        min_expr = f"MXMINEX( {format_decimal(lo.value)} )"
    if isinstance(hi, Inclusive):
        max_expr = f"MXMAXIN( {format_decimal(hi.value)} )"
    elif isinstance(hi, Exclusive):
        max_expr = f"MXMAXEX( {format_decimal(hi.value)} )"
    return min_expr, max_expr


def decimal_default(numeric: NumericData) -> str:
    """Value of a default-constructed decimal.

    A positive inclusive minimum is used as is, a non-negative exclusive
    minimum is stepped up by one, anything else yields ``0.0``.
    """
    lo = numeric.range.min
    if isinstance(lo, Inclusive) and lo.value > 0:
        return format_decimal(lo.value)
    if isinstance(lo, Exclusive) and lo.value >= 0:
        return format_decimal(lo.value + 1.0)
    return "0.0"


def decimal_range_doc_strings(numeric: NumericData) -> Tuple[str, str]:
    def describe(bound) -> str:
        if bound is None:
            return "None"
        return f"{type(bound).__name__}({format_decimal(bound.value)})"

    return describe(numeric.range.min), describe(numeric.range.max)


def describe_range_decimal(numeric: NumericData) -> str:
    min_doc, max_doc = decimal_range_doc_strings(numeric)
    return f"Range: min={min_doc}, max={max_doc}"


def document_decimal(numeric: NumericData) -> str:
    return _with_range(numeric.documentation, describe_range_decimal(numeric))


def render_decimals(numerics: Sequence[NumericData], settings: GeneratorSettings) -> Tuple[str, str]:
    """Render ``(header_text, source_text)`` for the decimal wrappers."""
    ordered = sort_numerics(numerics)
    header = CodeBuffer()
    source = CodeBuffer()
    header.block(render(DECIMAL_BUILTINS_H))
    source.block(render(DECIMAL_BUILTINS_CPP))
    for numeric in ordered:
        classname = numeric.name.pascal()
        min_expr, max_expr = minmax_expr_decimal(numeric)
        header.blank()
        header.blank()
        header.block(
            render(
                DECIMAL_TYPE_H,
                {
                    "classname": classname,
                    "documentation": "\n".join(documentation_block(classname, document_decimal(numeric))),
                },
            )
        )
        source.blank()
        source.blank()
        source.block(
            render(
                DECIMAL_TYPE_CPP,
                {
                    "classname": classname,
                    "minexpr": min_expr,
                    "maxexpr": max_expr,
                    "defaultval": decimal_default(numeric),
                },
            )
        )
    logger.debug("Rendered %d decimal types", len(ordered))

    header_text = wrap_header(settings, header.text(), system_includes=["iostream", "string", "functional"])
    source_text = wrap_source(
        settings,
        source.text(),
        project_includes=[settings.header_path_for(settings.decimals_basename)],
        system_includes=["sstream", "cmath", "limits"],
    )
    return header_text, source_text
