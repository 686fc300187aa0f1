"""Path and filesystem helper functions."""

from __future__ import annotations

import json
import os
import shutil
from pathlib import Path
from typing import Any, Iterable
from uuid import uuid4

from jarmod.errors import CopyError


def ensure_directories(paths: Iterable[Path]) -> list[Path]:
    """Create all directories in the iterable if they do not exist."""

    created_or_existing: list[Path] = []
    for directory in paths:
        directory.mkdir(parents=True, exist_ok=True)
        created_or_existing.append(directory)
    return created_or_existing


def copy_file_to_directory(source: Path, directory: Path) -> Path:
    """Copy ``source`` byte-for-byte into ``directory``, creating it if absent.

    An existing file with the same name is overwritten. Returns the copied path.
    """

    target = directory / source.name
    try:
        directory.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as exc:
        raise CopyError(f"Unable to copy {source} to {directory}: {exc}") from exc
    return target


def atomic_temp_path(target_path: Path) -> Path:
    """Create a unique temp path next to the target for atomic replacement."""

    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def write_json_atomically(payload: dict[str, Any], output_path: Path) -> Path:
    """Write JSON payload atomically to output path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = atomic_temp_path(output_path)
    try:
        temp_path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str) + "\n", encoding="utf-8")
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path
