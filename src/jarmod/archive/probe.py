"""Detect whether a jar already declares a module boundary."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Literal

from jarmod.config import LOWEST_SHARD_VERSION
from jarmod.errors import ArchiveOpenError

LOGGER = logging.getLogger(__name__)

ModuleStatus = Literal["MODULAR", "NON_MODULAR"]
MODULE_STATUS_VALUES: tuple[ModuleStatus, ...] = ("MODULAR", "NON_MODULAR")

MODULE_DESCRIPTOR_ENTRY = "module-info.class"
VERSIONS_DIR_ENTRY = "META-INF/versions"


def open_archive(path: Path) -> zipfile.ZipFile:
    """Open ``path`` as a zip archive, wrapping any read failure."""

    try:
        return zipfile.ZipFile(path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveOpenError(f"Unable to open {path} as a jar: {exc}") from exc


def archive_has_entry(archive: zipfile.ZipFile, name: str) -> bool:
    """Return True when the archive holds ``name`` or its directory form ``name/``."""

    for candidate in (name, f"{name}/"):
        try:
            archive.getinfo(candidate)
        except KeyError:
            continue
        return True
    return False


def is_modular_archive(
    archive: zipfile.ZipFile,
    java_version: int,
    *,
    min_shard_version: int = LOWEST_SHARD_VERSION,
) -> bool:
    """Return True when the archive carries a module descriptor.

    Shards are checked over ``range(min_shard_version, java_version)``, so a
    ``java_version`` equal to the floor never inspects any shard.
    """

    if archive_has_entry(archive, MODULE_DESCRIPTOR_ENTRY):
        return True

    if not archive_has_entry(archive, VERSIONS_DIR_ENTRY):
        return False

    for shard in range(min_shard_version, java_version):
        if archive_has_entry(archive, f"{VERSIONS_DIR_ENTRY}/{shard}/{MODULE_DESCRIPTOR_ENTRY}"):
            return True
    return False


def probe_artifact(
    path: Path,
    java_version: int,
    *,
    min_shard_version: int = LOWEST_SHARD_VERSION,
) -> ModuleStatus:
    """Open one jar and classify it as MODULAR or NON_MODULAR."""

    with open_archive(path) as archive:
        modular = is_modular_archive(archive, java_version, min_shard_version=min_shard_version)
    return "MODULAR" if modular else "NON_MODULAR"
