"""Exception hierarchy for schema compilation.

Every failure raised by the compiler derives from :class:`XsdCodegenError` so
callers (the CLI in particular) can report any compilation problem with a
single ``except`` clause. Parse-phase problems additionally derive from
``ValueError`` and identity misses from ``KeyError``, which keeps them usable
with generic handling code.

Taxonomy:
* :class:`UnexpectedNodeError` – wrong or unrecognized tag
* :class:`MissingAttributeError` – required attribute absent
* :class:`UnknownPrimitiveError` / :class:`WrongPrefixError` – type-name
  classification failures
* :class:`InvalidOccursError` – ``minOccurs`` greater than ``maxOccurs`` (or
  occurrence text that is not a number)
* :class:`EmptyPrefixError` – the schema root declares no XML Schema prefix
* :class:`DuplicateEntryError` – two top-level entries share an identity
* :class:`SchemaIOError` – the schema document could not be read
* :class:`NotFoundError` – identity lookup/removal miss
* :class:`EmitError` – template render or output write failure
* :class:`ExternalProcessFailedError` – build/test step exited non-zero
"""

from __future__ import annotations

from typing import Optional, Sequence


class XsdCodegenError(Exception):
    """Base class for all compiler errors."""


class SchemaError(XsdCodegenError, ValueError):
    """Raised when the schema document cannot be turned into a model."""


def _where(lineage: Optional[object]) -> str:
    return f" (lineage {lineage})" if lineage is not None else ""


class UnexpectedNodeError(SchemaError):
    """A node's tag is not the one (or one of the ones) the parser accepts."""

    def __init__(self, expected: str, actual: str, lineage: Optional[object] = None):
        self.expected = expected
        self.actual = actual
        self.lineage = lineage
        super().__init__(
            f"unexpected node: expected '{expected}', got '{actual}'{_where(lineage)}"
        )


class MissingAttributeError(SchemaError):
    """A required attribute is absent from a node."""

    def __init__(self, attribute: str, node: str, lineage: Optional[object] = None):
        self.attribute = attribute
        self.node = node
        self.lineage = lineage
        super().__init__(
            f"'{attribute}' attribute not found in '{node}' node{_where(lineage)}"
        )


class UnknownPrimitiveError(SchemaError):
    def __init__(self, value: str, family: str = "primitive"):
        self.value = value
        self.family = family
        super().__init__(f"'{value}' could not be parsed as a {family} type")


class WrongPrefixError(SchemaError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"wrong namespace prefix. expected '{expected}', got '{actual}'"
        )


class InvalidOccursError(SchemaError):
    def __init__(self, message: str, lineage: Optional[object] = None):
        self.lineage = lineage
        super().__init__(f"{message}{_where(lineage)}")


class EmptyPrefixError(SchemaError):
    def __init__(self) -> None:
        super().__init__(
            "the schema root does not declare a prefix for the XML Schema namespace"
        )


class DuplicateEntryError(SchemaError):
    def __init__(self, what: object, count: int):
        self.what = what
        self.count = count
        super().__init__(f"'{what}' is defined {count} times; identities must be unique")


class IdentifierCollisionError(SchemaError):
    """Two distinct schema names map to the same generated identifier."""

    def __init__(self, owner: str, first: str, second: str, identifier: str):
        self.owner = owner
        self.first = first
        self.second = second
        self.identifier = identifier
        super().__init__(f"'{first}' and '{second}' in '{owner}' both become identifier '{identifier}'")


class SchemaIOError(XsdCodegenError, OSError):
    """The schema document could not be read."""


class NotFoundError(XsdCodegenError, KeyError):
    """No entry with the requested identity exists."""

    def __init__(self, what: object):
        self.what = what
        super().__init__(f"'{what}' not found")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class EmitError(XsdCodegenError):
    """Rendering or writing a generated artifact failed."""


class ExternalProcessFailedError(XsdCodegenError):
    """An external build or test command exited with a failure status."""

    def __init__(self, command: Sequence[str], output: str, returncode: int):
        self.command = list(command)
        self.output = output
        self.returncode = returncode
        super().__init__(
            f"Command failed ({returncode}) '{' '.join(self.command)}':\n{output}"
        )
