"""Compilation driver.

Sequence: load the schema, derive the emitter model, render all six
artifacts in memory, then write them. Every destination file is recreated
from scratch. Because rendering completes before the first write, a model
or template problem never leaves a half-written pair behind; a write failure
part way through still fails the whole operation.

Example:
    from xsd_codegen.compiler import compile_schema

    result = compile_schema("musicxml.xsd", "out/mx/core")
    for path in result.written:
        print(path)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from .build import build_and_test
from .config import GeneratorSettings
from .emit_enums import render_enums
from .emit_numerics import render_decimals, render_integers
from .errors import EmitError
from .model_builder import SchemaModel, build_model
from .schema import Xsd, load

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Paths:
    """Destination files of one compilation."""

    enums_h: Path
    enums_cpp: Path
    integers_h: Path
    integers_cpp: Path
    decimals_h: Path
    decimals_cpp: Path

    @classmethod
    def in_directory(cls, output_dir: Union[str, Path], settings: GeneratorSettings) -> "Paths":
        out = Path(output_dir)
        return cls(
            enums_h=out / settings.header_name(settings.enums_basename),
            enums_cpp=out / settings.source_name(settings.enums_basename),
            integers_h=out / settings.header_name(settings.integers_basename),
            integers_cpp=out / settings.source_name(settings.integers_basename),
            decimals_h=out / settings.header_name(settings.decimals_basename),
            decimals_cpp=out / settings.source_name(settings.decimals_basename),
        )

    def all(self) -> List[Path]:
        return [
            self.enums_h,
            self.enums_cpp,
            self.integers_h,
            self.integers_cpp,
            self.decimals_h,
            self.decimals_cpp,
        ]


@dataclass
class CompileResult:
    model: SchemaModel
    written: List[Path] = field(default_factory=list)
    build_output: Optional[str] = None


def render_all(model: SchemaModel, paths: Paths, settings: GeneratorSettings) -> Dict[Path, str]:
    """Render every artifact, keyed by destination, without touching disk."""
    enums_h, enums_cpp = render_enums(model.enumerations, settings)
    integers_h, integers_cpp = render_integers(model.integers, settings)
    decimals_h, decimals_cpp = render_decimals(model.decimals, settings)
    return {
        paths.enums_h: enums_h,
        paths.enums_cpp: enums_cpp,
        paths.integers_h: integers_h,
        paths.integers_cpp: integers_cpp,
        paths.decimals_h: decimals_h,
        paths.decimals_cpp: decimals_cpp,
    }


def write_artifacts(artifacts: Dict[Path, str]) -> List[Path]:
    """Recreate each file with its rendered text.

    Raises:
        EmitError: A file could not be removed or written.
    """
    written = []
    for path, text in artifacts.items():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.unlink(missing_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise EmitError(f"unable to write '{path}': {e}") from e
        logger.info("Wrote %s", path)
        written.append(path)
    return written


def compile_xsd(xsd: Xsd, output_dir: Union[str, Path], settings: Optional[GeneratorSettings] = None) -> CompileResult:
    """Emit the C++ sources for an already parsed schema."""
    settings = settings or GeneratorSettings()
    model = build_model(xsd, include_builtin_numerics=settings.include_builtin_numerics)
    paths = Paths.in_directory(output_dir, settings)
    artifacts = render_all(model, paths, settings)
    return CompileResult(model=model, written=write_artifacts(artifacts))


def compile_schema(
    xsd_path: Union[str, Path],
    output_dir: Union[str, Path],
    settings: Optional[GeneratorSettings] = None,
    source_root: Optional[Union[str, Path]] = None,
) -> CompileResult:
    """Load ``xsd_path`` and write the generated sources into ``output_dir``.

    Args:
        xsd_path: Schema document to compile.
        output_dir: Directory receiving the six generated files.
        settings: Generator settings; defaults when omitted.
        source_root: When given, the project at this root is built and its
            tests run after generation.

    Raises:
        SchemaError: The schema could not be parsed or modelled.
        EmitError: Rendering or writing failed.
        ExternalProcessFailedError: The optional build or test step failed.
    """
    settings = settings or GeneratorSettings()
    xsd = load(xsd_path)
    logger.info("Parsed %d schema entries", len(xsd))
    result = compile_xsd(xsd, output_dir, settings)
    if source_root is not None:
        result.build_output = build_and_test(source_root, settings)
    return result
