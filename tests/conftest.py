from __future__ import annotations

import re
import subprocess
import zipfile
from pathlib import Path
from typing import Callable

import pytest

from jarmod.config import (
    AppSettings,
    ModularizeConfig,
    ParquetConfig,
    PathsConfig,
    ToolsConfig,
)

JarFactory = Callable[..., Path]


def write_jar(path: Path, entries: list[str] | tuple[str, ...] = ()) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        for name in entries:
            archive.writestr(name, b"" if name.endswith("/") else b"\xca\xfe\xba\xbe")
    return path


@pytest.fixture
def make_jar(tmp_path: Path) -> JarFactory:
    def _make(name: str, *entries: str, directory: str = "repo") -> Path:
        return write_jar(tmp_path / directory / name, entries)

    return _make


def automatic_module_name(jar_name: str) -> str:
    stem = jar_name[:-4] if jar_name.endswith(".jar") else jar_name
    stem = re.sub(r"-\d.*$", "", stem)
    return stem.replace("-", ".")


class FakeToolRunner:
    """Records tool invocations and emulates jdeps, javac, jar and java on disk."""

    def __init__(self, *, fail_jdeps_for: set[str] | None = None, java_banner: str = 'openjdk version "17.0.2"') -> None:
        self.calls: list[list[str]] = []
        self.compiled_sources: list[str] = []
        self.fail_jdeps_for = fail_jdeps_for or set()
        self.java_banner = java_banner

    def tools(self) -> list[str]:
        return [Path(call[0]).name for call in self.calls]

    def calls_for(self, tool: str) -> list[list[str]]:
        return [call for call in self.calls if Path(call[0]).name == tool]

    def __call__(self, command: list[str]) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(command))
        tool = Path(command[0]).name
        if tool == "java":
            return subprocess.CompletedProcess(command, 0, "", self.java_banner)
        if tool == "jdeps":
            return self._jdeps(command)
        if tool == "javac":
            return self._javac(command)
        if tool == "jar":
            return self._jar(command)
        return subprocess.CompletedProcess(command, 127, "", f"unknown tool {tool}")

    def _jdeps(self, command: list[str]) -> subprocess.CompletedProcess[str]:
        jar = Path(command[-1])
        if jar.name in self.fail_jdeps_for:
            return subprocess.CompletedProcess(command, 1, "", f"Error: cannot analyze {jar.name}")
        work_dir = Path(command[command.index("--generate-module-info") + 1])
        module = automatic_module_name(jar.name)
        module_dir = work_dir / module
        module_dir.mkdir(parents=True, exist_ok=True)
        (module_dir / "module-info.java").write_text(
            f"module {module} {{\n    exports {module};\n}}\n", encoding="ascii"
        )
        return subprocess.CompletedProcess(command, 0, f"writing to {module_dir}/module-info.java\n", "")

    def _javac(self, command: list[str]) -> subprocess.CompletedProcess[str]:
        classes_dir = Path(command[command.index("-d") + 1])
        self.compiled_sources.append(Path(command[-1]).read_text(encoding="utf-8"))
        (classes_dir / "module-info.class").write_bytes(b"\xca\xfe\xba\xbe")
        return subprocess.CompletedProcess(command, 0, "", "")

    def _jar(self, command: list[str]) -> subprocess.CompletedProcess[str]:
        target = Path(command[command.index("--file") + 1])
        source_dir = Path(command[command.index("-C") + 1])
        entry = command[-1]
        with zipfile.ZipFile(target, "a") as archive:
            archive.write(source_dir / entry, entry)
        return subprocess.CompletedProcess(command, 0, "", "")


@pytest.fixture
def fake_runner() -> FakeToolRunner:
    return FakeToolRunner()


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., AppSettings]:
    def _make(**modularize_overrides: object) -> AppSettings:
        modularize = {"java_version": 17, "ignore_jars": []}
        modularize.update(modularize_overrides)
        return AppSettings(
            paths=PathsConfig(
                module_info_work_dir=tmp_path / "work",
                found_modules_dir=tmp_path / "modules",
                not_modules_dir=tmp_path / "patched",
                provided_module_dirs=[],
                reports_root=tmp_path / "reports",
                logs_root=tmp_path / "logs",
            ),
            modularize=ModularizeConfig(**modularize),
            tools=ToolsConfig(),
            parquet=ParquetConfig(),
        )

    return _make
