"""Build and test the generated library.

Configures the C++ project at a source root with cmake, builds it with make
and runs the test binary, all inside a throw-away build directory. Each
command's stdout and stderr are captured together so a failure report shows
them in the order they were produced.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import List, Sequence, Union

from .config import GeneratorSettings
from .errors import ExternalProcessFailedError

logger = logging.getLogger(__name__)


def run_command(command: Sequence[str], cwd: Union[str, Path]) -> str:
    """Run ``command`` in ``cwd`` and return its combined output.

    Raises:
        ExternalProcessFailedError: The command exited non-zero or could not
            be started.
    """
    logger.info("Running %s", " ".join(command))
    try:
        result = subprocess.run(
            list(command),
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise ExternalProcessFailedError(command, str(e), -1) from e
    if result.returncode != 0:
        raise ExternalProcessFailedError(command, result.stdout or "", result.returncode)
    return result.stdout or ""


def build_commands(source_root: Union[str, Path], settings: GeneratorSettings) -> List[List[str]]:
    return [
        ["cmake", str(Path(source_root).resolve()), *settings.cmake_args],
        ["make", f"-j{settings.make_jobs}"],
        [f"./{settings.test_binary}"],
    ]


def build_and_test(source_root: Union[str, Path], settings: GeneratorSettings) -> str:
    """Configure, build and test the project at ``source_root``.

    Returns:
        The concatenated output of all three steps.

    Raises:
        ExternalProcessFailedError: Any step failed; carries that step's output.
    """
    outputs = []
    with tempfile.TemporaryDirectory(prefix="xsd-codegen-build-") as build_dir:
        logger.info("Building %s in %s", source_root, build_dir)
        for command in build_commands(source_root, settings):
            outputs.append(run_command(command, build_dir))
    logger.info("Build and test succeeded")
    return "".join(outputs)
