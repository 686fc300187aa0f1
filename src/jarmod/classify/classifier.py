"""Partition input jars into modular and non-modular output areas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Sequence

from jarmod.archive.probe import is_modular_archive, open_archive
from jarmod.config import LOWEST_SHARD_VERSION
from jarmod.utils.paths import copy_file_to_directory

LOGGER = logging.getLogger(__name__)

ArtifactStatus = Literal["MODULAR", "NON_MODULAR", "IGNORED"]
ARTIFACT_STATUS_VALUES: tuple[ArtifactStatus, ...] = ("MODULAR", "NON_MODULAR", "IGNORED")


@dataclass(frozen=True, slots=True)
class ArtifactRecord:
    """Classification outcome for one input jar."""

    source_path: Path
    status: ArtifactStatus
    output_path: Path | None
    size_bytes: int


@dataclass(slots=True)
class ClassificationResult:
    """Output of the classification phase.

    ``worklist`` holds the copies placed in the non-modular area, in input order.
    """

    records: list[ArtifactRecord] = field(default_factory=list)
    worklist: list[Path] = field(default_factory=list)
    skipped_directories: list[Path] = field(default_factory=list)

    def _count(self, status: ArtifactStatus) -> int:
        return sum(1 for record in self.records if record.status == status)

    @property
    def modular_count(self) -> int:
        return self._count("MODULAR")

    @property
    def non_modular_count(self) -> int:
        return self._count("NON_MODULAR")

    @property
    def ignored_count(self) -> int:
        return self._count("IGNORED")

    def summary_line(self) -> str:
        return f"Found {self.modular_count} modular jars and {self.non_modular_count} ordinary jars."


def should_ignore(artifact_path: str, ignore_jars: Sequence[str] | None) -> bool:
    """Return True when any ignore substring occurs in the artifact path."""

    if not ignore_jars:
        return False
    return any(pattern in artifact_path for pattern in ignore_jars)


def classify_artifacts(
    artifacts: Sequence[str | Path],
    *,
    found_modules_dir: Path,
    not_modules_dir: Path,
    java_version: int,
    ignore_jars: Sequence[str] | None = None,
    min_shard_version: int = LOWEST_SHARD_VERSION,
    debug: bool = False,
    logger: logging.Logger | None = None,
) -> ClassificationResult:
    """Probe every jar, copy it into its output area and collect the worklist.

    Directories are skipped. Open or copy failures abort the whole run.
    """

    effective_logger = logger or LOGGER
    result = ClassificationResult()
    if ignore_jars is None:
        effective_logger.warning("classify.no_ignore_jars No skip jars defined")

    for raw_path in artifacts:
        entry = Path(raw_path)
        if entry.is_dir():
            result.skipped_directories.append(entry)
            continue

        # the archive is opened before the ignore test so unreadable jars fail even when ignored
        with open_archive(entry) as archive:
            if should_ignore(str(raw_path), ignore_jars):
                if debug:
                    effective_logger.info("%s is ignored", raw_path)
                result.records.append(ArtifactRecord(entry, "IGNORED", None, entry.stat().st_size))
                continue
            modular = is_modular_archive(archive, java_version, min_shard_version=min_shard_version)

        if modular:
            if debug:
                effective_logger.info("%s IS a module", raw_path)
            copied = copy_file_to_directory(entry, found_modules_dir)
            result.records.append(ArtifactRecord(entry, "MODULAR", copied, copied.stat().st_size))
        else:
            if debug:
                effective_logger.info("%s is NOT a module, generating module info", raw_path)
            copied = copy_file_to_directory(entry, not_modules_dir)
            result.records.append(ArtifactRecord(entry, "NON_MODULAR", copied, copied.stat().st_size))
            result.worklist.append(copied)

    effective_logger.info(
        "classify.summary modular=%s non_modular=%s ignored=%s directories_skipped=%s",
        result.modular_count,
        result.non_modular_count,
        result.ignored_count,
        len(result.skipped_directories),
    )
    return result
