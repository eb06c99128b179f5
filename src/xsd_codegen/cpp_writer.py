"""Shared helpers for writing C++ text.

The emitters build a namespace *body* as plain lines at depth zero. The
functions here add everything around it: license lines, ``#pragma once``,
include directives and the nested namespace blocks configured in
:class:`~xsd_codegen.config.GeneratorSettings`.

Example:
    settings = GeneratorSettings()
    body = CodeBuffer()
    body.line(0, "enum class YesNo { yes = 0, no = 1 };")
    text = wrap_header(settings, body.text(), system_includes=["string"])
"""

from __future__ import annotations

import re
import textwrap
from typing import List, Optional, Sequence

from .config import GeneratorSettings
from .templates import CORE_CPP, CORE_H, render

SEP_WIDTH = 100
DOC_WIDTH = 96
TEMPLATE_INDENT = "    "

_LEADING_SPACES = re.compile(r"^( *)")


class CodeBuffer:
    """Accumulates lines of generated code at explicit indentation depths.

    Lines are kept in the four-space template convention; the configured
    indent is applied once, when the body is wrapped into a file.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []

    def line(self, depth: int = 0, text: str = "") -> None:
        self._lines.append(TEMPLATE_INDENT * depth + text if text else "")

    def blank(self) -> None:
        self._lines.append("")

    def lines(self, depth: int, texts: Sequence[str]) -> None:
        for text in texts:
            self.line(depth, text)

    def block(self, text: str) -> None:
        """Append pre-rendered template text."""
        self._lines.extend(text.split("\n"))

    def __len__(self) -> int:
        return len(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)


def reindent(text: str, indent: str, depth: int = 0) -> str:
    """Convert four-space template indentation to ``indent`` and shift by ``depth``.

    Blank lines stay empty.
    """
    out = []
    for line in text.split("\n"):
        if not line.strip():
            out.append("")
            continue
        spaces = len(_LEADING_SPACES.match(line).group(1))
        levels, rest = divmod(spaces, len(TEMPLATE_INDENT))
        out.append(indent * (depth + levels) + " " * rest + line[spaces:])
    return "\n".join(out)


def sep(name: str, width: int = SEP_WIDTH) -> str:
    """A full-width banner comment naming the type that follows."""
    head = f"//////// {name} "
    return head + "/" * max(3, width - len(head))


def documentation_lines(text: str, width: int = DOC_WIDTH) -> List[str]:
    """Format schema documentation as ``///`` comment lines.

    Whitespace inside a paragraph is collapsed (schema annotations are usually
    indented with the surrounding XML) and paragraphs are wrapped at ``width``.
    A blank ``///`` line separates paragraphs.
    """
    paragraphs: List[List[str]] = []
    current: List[str] = []
    for raw in text.splitlines():
        if raw.strip():
            current.append(raw.strip())
        elif current:
            paragraphs.append(current)
            current = []
    if current:
        paragraphs.append(current)

    lines: List[str] = []
    for i, paragraph in enumerate(paragraphs):
        if i:
            lines.append("///")
        wrapped = textwrap.wrap(" ".join(paragraph), width=width, break_long_words=False) or [""]
        lines.extend(f"/// {w}" for w in wrapped)
    return lines


def documentation_block(name: str, text: str) -> List[str]:
    """Banner plus documentation comment, as placed above a generated type."""
    lines = [sep(name), "///"]
    doc = documentation_lines(text)
    if doc:
        lines.extend(doc)
        lines.append("///")
    return lines


def _license(settings: GeneratorSettings) -> str:
    return "\n".join(settings.license_lines)


def _includes(project_includes: Sequence[str], system_includes: Sequence[str]) -> str:
    groups = []
    if project_includes:
        groups.append("\n".join(f'#include "{inc}"' for inc in project_includes))
    if system_includes:
        groups.append("\n".join(f"#include <{inc}>" for inc in system_includes))
    return "".join(group + "\n\n" for group in groups)


def _namespace_open(settings: GeneratorSettings) -> str:
    lines = []
    for depth, namespace in enumerate(settings.namespaces):
        lines.append(settings.indent * depth + f"namespace {namespace}")
        lines.append(settings.indent * depth + "{")
    return "\n".join(lines)


def _namespace_close(settings: GeneratorSettings) -> str:
    depth = len(settings.namespaces)
    return "\n".join(settings.indent * d + "}" for d in reversed(range(depth)))


def _wrap(
    template_id: str,
    settings: GeneratorSettings,
    body: str,
    project_includes: Optional[Sequence[str]],
    system_includes: Optional[Sequence[str]],
) -> str:
    mapping = {
        "license": _license(settings),
        "includes": _includes(project_includes or [], system_includes or []),
        "namespace_open": _namespace_open(settings),
        "body": reindent(body, settings.indent, len(settings.namespaces)),
        "namespace_close": _namespace_close(settings),
    }
    return render(template_id, mapping)


def wrap_header(
    settings: GeneratorSettings,
    body: str,
    project_includes: Optional[Sequence[str]] = None,
    system_includes: Optional[Sequence[str]] = None,
) -> str:
    """Complete header file text around ``body``."""
    return _wrap(CORE_H, settings, body, project_includes, system_includes)


def wrap_source(
    settings: GeneratorSettings,
    body: str,
    project_includes: Optional[Sequence[str]] = None,
    system_includes: Optional[Sequence[str]] = None,
) -> str:
    """Complete source file text around ``body``."""
    return _wrap(CORE_CPP, settings, body, project_includes, system_includes)
