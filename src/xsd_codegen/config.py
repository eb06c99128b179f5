"""Generator settings.

Settings come from three layers, later ones winning:

1. the defaults declared on :class:`GeneratorSettings`,
2. an optional JSON settings file,
3. the ``XSD_CODEGEN_SETTINGS`` environment variable, a comma separated list
   of ``key=value`` pairs. List-valued settings separate their items with
   ``;`` (e.g. ``namespaces=acme;music,make_jobs=4``).

Example:
    settings = load_settings("codegen.json")
    print(settings.header_path_for("Enums"))     # mx/core/Enums.h
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union, get_origin

from pydantic import BaseModel, Field

from .errors import SchemaIOError

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "XSD_CODEGEN_SETTINGS"

DEFAULT_LICENSE_LINES = [
    "// MusicXML Class Library",
    "// Copyright (c) by Matthew James Briggs",
    "// Distributed under the MIT License",
]


class GeneratorSettings(BaseModel):
    """Output layout and build options for generated C++ sources."""

    license_lines: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LICENSE_LINES),
        description="Comment lines written at the top of every generated file",
    )
    namespaces: List[str] = Field(
        default_factory=lambda: ["mx", "core"],
        description="Nested namespaces wrapping all generated declarations",
    )
    include_prefix: str = Field("mx/core", description="Directory prefix used in #include paths")
    header_extension: str = Field(".h", description="Extension of generated header files")
    source_extension: str = Field(".cpp", description="Extension of generated source files")
    enums_basename: str = Field("Enums", description="Base file name of the enumeration pair")
    integers_basename: str = Field("Integers", description="Base file name of the integer pair")
    decimals_basename: str = Field("Decimals", description="Base file name of the decimal pair")
    indent: str = Field("    ", description="One level of indentation in generated code")
    include_builtin_numerics: bool = Field(
        True, description="Emit positiveInteger/nonNegativeInteger wrappers when absent"
    )
    cmake_args: List[str] = Field(
        default_factory=lambda: [
            "-DMX_BUILD_TESTS=on",
            "-DMX_BUILD_EXAMPLES=on",
            "-DMX_BUILD_CORE_TESTS=off",
        ],
        description="Extra arguments for the cmake configure step",
    )
    make_jobs: int = Field(9, ge=1, description="Parallel jobs passed to make")
    test_binary: str = Field("mxtest", description="Test executable run after a successful build")

    def header_name(self, basename: str) -> str:
        return f"{basename}{self.header_extension}"

    def source_name(self, basename: str) -> str:
        return f"{basename}{self.source_extension}"

    def header_path_for(self, basename: str) -> str:
        """Path of a generated header as written in ``#include`` directives."""
        name = self.header_name(basename)
        return f"{self.include_prefix}/{name}" if self.include_prefix else name


def _env_overrides(config_str: str) -> Dict[str, Union[str, List[str]]]:
    overrides: Dict[str, Union[str, List[str]]] = {}
    fields = GeneratorSettings.model_fields
    for pair in config_str.split(","):
        if "=" not in pair:
            continue
        key, value = pair.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key not in fields:
            logger.warning("Ignoring unknown setting '%s' in %s", key, SETTINGS_ENV_VAR)
            continue
        if get_origin(fields[key].annotation) is list:
            overrides[key] = [item.strip() for item in value.split(";") if item.strip()]
        else:
            overrides[key] = value
    return overrides


def load_settings(path: Optional[Union[str, Path]] = None) -> GeneratorSettings:
    """Load settings from ``path`` (JSON) and the environment.

    Raises:
        SchemaIOError: The settings file could not be read.
        pydantic.ValidationError: A value does not validate.
    """
    if path is not None:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaIOError(f"unable to read settings '{path}': {e}") from e
        settings = GeneratorSettings.model_validate_json(text)
        logger.debug("Loaded settings from %s", path)
    else:
        settings = GeneratorSettings()

    config_str = os.getenv(SETTINGS_ENV_VAR, "")
    if config_str:
        overrides = _env_overrides(config_str)
        if overrides:
            settings = GeneratorSettings.model_validate({**settings.model_dump(), **overrides})
    return settings
