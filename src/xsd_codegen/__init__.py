"""XSD Codegen
===========

Compiler from an XML Schema document to a typed schema model, plus an emitter
turning the schema's constrained simple types into C++ sources.

Key capabilities
----------------
- Parse the supported XSD constructs (attribute groups, groups, sequences,
  choices, simple and complex types, elements, imports, annotations) into
  typed entries with stable identities, held by :class:`~xsd_codegen.schema.Xsd`.
- Classify builtin type names with namespace-prefix checking
  (:mod:`xsd_codegen.primitives`).
- Derive enumerations (closed and open) and range-constrained integers and
  decimals from restriction facets (:mod:`xsd_codegen.model_builder`).
- Emit deterministic ``Enums``, ``Integers`` and ``Decimals`` header/source
  pairs, optionally building and testing the result.

Design principles
-----------------
1. **All-or-nothing** – any parse error aborts the whole compilation; all
   artifacts are rendered before any file is written.
2. **Two-phase linking** – parsing records references by name only; the
   model builder resolves them against the container afterwards.
3. **Boilerplate as data** – fixed C++ text lives in
   :mod:`xsd_codegen.templates`, never inside the emission logic.

Minimal quick start
-------------------
>>> from xsd_codegen import compile_schema
>>> result = compile_schema('/path/to/musicxml.xsd', 'out/mx/core')
>>> [p.name for p in result.written]

Public surface
--------------
Only a curated subset is exported at the package level; the other modules
can be imported explicitly.
"""

__version__ = "0.1.0"

from .compiler import compile_schema
from .config import GeneratorSettings, load_settings
from .errors import XsdCodegenError
from .model_builder import build_model
from .schema import Xsd, load

__all__ = [
    "Xsd",
    "load",
    "build_model",
    "compile_schema",
    "GeneratorSettings",
    "load_settings",
    "XsdCodegenError",
]
