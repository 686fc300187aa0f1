"""Compile a synthesized descriptor and add it to its jar."""

from __future__ import annotations

import logging
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from jarmod.errors import CopyError, InvalidDescriptorError
from jarmod.inject.matcher import DESCRIPTOR_SOURCE_FILE
from jarmod.utils.paths import copy_file_to_directory
from jarmod.utils.process import ToolRunner, resolve_tool, run_tool

LOGGER = logging.getLogger(__name__)

COMPILED_DESCRIPTOR_FILE = "module-info.class"

_MODULE_DECLARATION = re.compile(r"^(\s*)(open\s+)?module\s+([A-Za-z_$][\w$.]*)\s*\{", re.MULTILINE)


def descriptor_module_name(descriptor_text: str) -> str:
    """Return the module name declared by a module-info.java text."""

    match = _MODULE_DECLARATION.search(descriptor_text)
    if match is None:
        raise InvalidDescriptorError("Descriptor has no module declaration")
    return match.group(3)


def as_open_module(descriptor_text: str) -> str:
    """Rewrite ``module x {`` as ``open module x {``; open modules are left alone."""

    match = _MODULE_DECLARATION.search(descriptor_text)
    if match is None:
        raise InvalidDescriptorError("Descriptor has no module declaration")
    if match.group(2):
        return descriptor_text
    indent, name = match.group(1), match.group(3)
    return f"{descriptor_text[:match.start()]}{indent}open module {name} {{{descriptor_text[match.end():]}"


@dataclass(slots=True)
class ModuleInfoInjector:
    """Add a module descriptor to a plain jar with javac and jar.

    The jar is copied into the output directory unless it already lives
    there, then updated in place with the compiled ``module-info.class``.
    """

    search_path: str
    java_home: Path | None = None
    module_version: str = "1"
    open_module: bool = True
    overwrite: bool = True
    target_release: int | None = None
    runner: ToolRunner | None = None
    debug: bool = False
    logger: logging.Logger | None = None

    def _run(self, command: list[str]) -> None:
        run_tool(command, runner=self.runner, logger=self.logger or LOGGER, echo_output=self.debug)

    def _stage_target(self, jar: Path, output_dir: Path) -> Path:
        target = output_dir / jar.name
        if target.exists() and target.resolve() == jar.resolve():
            return target
        if target.exists() and not self.overwrite:
            raise CopyError(f"{target} already exists and overwrite is disabled")
        return copy_file_to_directory(jar, output_dir)

    def _compile(self, descriptor_text: str, module_name: str, jar: Path, classes_dir: Path) -> None:
        source_dir = classes_dir.parent / "src"
        source_dir.mkdir(parents=True, exist_ok=True)
        source_file = source_dir / DESCRIPTOR_SOURCE_FILE
        source_file.write_text(descriptor_text, encoding="utf-8")

        command = [
            resolve_tool("javac", self.java_home),
            "-nowarn",
            "--module-path",
            self.search_path,
            "--patch-module",
            f"{module_name}={jar.absolute()}",
            "--module-version",
            self.module_version,
        ]
        if self.target_release is not None:
            command += ["--release", str(self.target_release)]
        command += ["-d", str(classes_dir), str(source_file)]
        self._run(command)

    def add_module_info(self, descriptor_text: str, jar: Path, output_dir: Path) -> Path:
        """Write ``jar`` patched with ``descriptor_text`` into ``output_dir``."""

        effective_logger = self.logger or LOGGER
        module_name = descriptor_module_name(descriptor_text)
        if self.open_module:
            descriptor_text = as_open_module(descriptor_text)

        with tempfile.TemporaryDirectory(prefix="jarmod-") as temp_root:
            classes_dir = Path(temp_root) / "classes"
            classes_dir.mkdir()
            self._compile(descriptor_text, module_name, jar, classes_dir)
            target = self._stage_target(jar, output_dir)
            self._run(
                [
                    resolve_tool("jar", self.java_home),
                    "--update",
                    "--file",
                    str(target),
                    "--module-version",
                    self.module_version,
                    "-C",
                    str(classes_dir),
                    COMPILED_DESCRIPTOR_FILE,
                ]
            )

        effective_logger.info("inject.added module=%s jar=%s", module_name, target)
        return target
