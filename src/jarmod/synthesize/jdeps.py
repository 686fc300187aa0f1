"""Descriptor synthesis through ``jdeps --generate-module-info``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from jarmod.utils.process import ToolRunner, resolve_tool, run_tool

LOGGER = logging.getLogger(__name__)

JDEPS_FLAGS: tuple[str, ...] = (
    "--ignore-missing-deps",
    "--api-only",
    "--no-recursive",
    "--add-modules=ALL-MODULE-PATH",
)


@dataclass(slots=True)
class SynthesisResult:
    """Work-area subdirectories that appeared while analysing each jar."""

    descriptor_dirs: dict[Path, list[Path]] = field(default_factory=dict)

    def recorded_dir(self, jar: Path) -> Path | None:
        """Return the single directory recorded for ``jar``, if unambiguous."""

        dirs = self.descriptor_dirs.get(jar, [])
        return dirs[0] if len(dirs) == 1 else None


def build_jdeps_arguments(jar: Path, *, search_path: str, work_dir: Path) -> list[str]:
    """Return the jdeps argument list for one target jar."""

    return [
        *JDEPS_FLAGS,
        "--module-path",
        search_path,
        "--generate-module-info",
        str(work_dir.absolute()),
        str(jar.absolute()),
    ]


def _child_dirs(directory: Path) -> set[Path]:
    if not directory.is_dir():
        return set()
    return {child for child in directory.iterdir() if child.is_dir()}


def generate_module_info(
    jar: Path,
    *,
    search_path: str,
    work_dir: Path,
    java_home: Path | None = None,
    runner: ToolRunner | None = None,
    debug: bool = False,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Run jdeps for one jar and return the work-area subdirectories it created."""

    effective_logger = logger or LOGGER
    arguments = build_jdeps_arguments(jar, search_path=search_path, work_dir=work_dir)
    if debug:
        for argument in arguments:
            effective_logger.info(argument)

    before = _child_dirs(work_dir)
    run_tool(
        [resolve_tool("jdeps", java_home), *arguments],
        runner=runner,
        logger=effective_logger,
        echo_output=debug,
    )
    return sorted(_child_dirs(work_dir) - before)


def synthesize_descriptors(
    worklist: Sequence[Path],
    *,
    search_path: str,
    work_dir: Path,
    java_home: Path | None = None,
    runner: ToolRunner | None = None,
    debug: bool = False,
    logger: logging.Logger | None = None,
) -> SynthesisResult:
    """Generate a module-info.java for every worklist jar, stopping at the first failure."""

    effective_logger = logger or LOGGER
    result = SynthesisResult()
    for jar in worklist:
        if debug:
            effective_logger.info("Generating info for %s", jar.name)
        result.descriptor_dirs[jar] = generate_module_info(
            jar,
            search_path=search_path,
            work_dir=work_dir,
            java_home=java_home,
            runner=runner,
            debug=debug,
            logger=effective_logger,
        )
    effective_logger.info("synthesize.summary jars=%s work_dir=%s", len(worklist), work_dir)
    return result
