"""Synchronous execution of external JDK tools."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from jarmod.errors import ToolInvocationError

LOGGER = logging.getLogger(__name__)

ToolRunner = Callable[[list[str]], "subprocess.CompletedProcess[str]"]

_STDERR_TAIL_LINES = 20
_JAVA_VERSION_PATTERN = re.compile(r'version "(\d+)(?:\.(\d+))?')


def subprocess_runner(command: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a command to completion and capture its text output."""

    return subprocess.run(command, check=False, capture_output=True, text=True)


def resolve_tool(name: str, java_home: Path | None = None) -> str:
    """Return the executable for a JDK tool, preferring ``java_home/bin``."""

    if java_home is None:
        return name
    return str(java_home / "bin" / name)


def _tail(text: str | None) -> str:
    lines = (text or "").strip().splitlines()
    return "\n".join(lines[-_STDERR_TAIL_LINES:])


def run_tool(
    command: Sequence[str],
    *,
    runner: ToolRunner | None = None,
    logger: logging.Logger | None = None,
    echo_output: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run one external tool invocation and fail loudly on any error."""

    effective_logger = logger or LOGGER
    effective_runner = runner or subprocess_runner
    argv = [str(part) for part in command]
    tool_name = Path(argv[0]).name

    try:
        result = effective_runner(argv)
    except FileNotFoundError as exc:
        raise ToolInvocationError(f"{tool_name} executable not found: {argv[0]}", command=argv) from exc
    except OSError as exc:
        raise ToolInvocationError(f"{tool_name} could not be started: {exc}", command=argv) from exc

    if echo_output:
        for line in (result.stdout or "").splitlines():
            effective_logger.info("%s.stdout %s", tool_name, line)
        for line in (result.stderr or "").splitlines():
            effective_logger.info("%s.stderr %s", tool_name, line)

    if result.returncode != 0:
        detail = _tail(result.stderr) or _tail(result.stdout)
        message = f"{tool_name} exited with status {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise ToolInvocationError(message, command=argv, returncode=result.returncode)
    return result


def parse_java_feature_version(version_output: str) -> int | None:
    """Extract the feature version from ``java -version`` output.

    Legacy ``1.x`` version strings map to ``x``.
    """

    match = _JAVA_VERSION_PATTERN.search(version_output)
    if match is None:
        return None
    major = int(match.group(1))
    if major == 1 and match.group(2) is not None:
        return int(match.group(2))
    return major


def detect_java_feature_version(
    java_home: Path | None = None,
    *,
    runner: ToolRunner | None = None,
    logger: logging.Logger | None = None,
) -> int:
    """Ask the configured ``java`` launcher for its feature version."""

    result = run_tool([resolve_tool("java", java_home), "-version"], runner=runner, logger=logger)
    # java prints its version banner on stderr
    output = f"{result.stderr or ''}\n{result.stdout or ''}"
    version = parse_java_feature_version(output)
    if version is None:
        raise ToolInvocationError(f"Unable to parse java version from output: {output.strip()!r}")
    return version
