"""Three-phase modularize run: classify all, synthesize all, inject all."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Sequence
from uuid import uuid4

from jarmod.classify.classifier import ClassificationResult, classify_artifacts
from jarmod.classify.inventory import (
    INVENTORY_FILE,
    build_inventory_frame,
    inventory_status_counts,
    write_inventory_parquet,
)
from jarmod.config import AppSettings
from jarmod.errors import ConfigurationError, ModularizeError, ReportWriteError
from jarmod.inject.injector import ModuleInfoInjector
from jarmod.inject.matcher import load_descriptor
from jarmod.synthesize.jdeps import SynthesisResult, synthesize_descriptors
from jarmod.synthesize.search_path import build_module_search_path
from jarmod.utils.paths import ensure_directories, write_json_atomically
from jarmod.utils.process import ToolRunner, detect_java_feature_version
from jarmod.utils.time_utils import now_utc

LOGGER = logging.getLogger(__name__)

SUMMARY_FILE = "run_summary.json"


class PipelinePhase(str, Enum):
    """Ordered phases of one run."""

    CLASSIFY = "CLASSIFY"
    SYNTHESIZE = "SYNTHESIZE"
    INJECT = "INJECT"
    DONE = "DONE"


_PHASE_ORDER: tuple[PipelinePhase, ...] = tuple(PipelinePhase)


def advance_phase(current: PipelinePhase, target: PipelinePhase) -> PipelinePhase:
    """Move to ``target``, which must be the phase right after ``current``."""

    current_idx = _PHASE_ORDER.index(current)
    if current_idx + 1 >= len(_PHASE_ORDER) or _PHASE_ORDER[current_idx + 1] is not target:
        raise ValueError(f"Cannot move from phase {current.value} to {target.value}")
    return target


@dataclass(frozen=True, slots=True)
class RunDirectories:
    """Validated directories for one run."""

    module_info_work_dir: Path
    found_modules_dir: Path
    not_modules_dir: Path
    provided_module_dirs: tuple[Path, ...] = ()


@dataclass(slots=True)
class ModularizeRunResult:
    """Return object for modularize run outcomes."""

    run_id: str
    java_version: int
    classification: ClassificationResult
    synthesis: SynthesisResult
    patched: list[Path] = field(default_factory=list)
    phase: PipelinePhase = PipelinePhase.CLASSIFY
    summary: dict[str, Any] = field(default_factory=dict)
    summary_path: Path | None = None
    inventory_path: Path | None = None

    @property
    def summary_line(self) -> str:
        return self.classification.summary_line()


def resolve_run_directories(settings: AppSettings) -> RunDirectories:
    """Return the required run directories, creating the output areas and report root.

    Fails on any unset directory or one that cannot be created.
    """

    paths = settings.paths
    missing = [
        name
        for name in ("module_info_work_dir", "found_modules_dir", "not_modules_dir")
        if getattr(paths, name) is None
    ]
    if missing:
        raise ConfigurationError(f"Required directories not set: {', '.join(missing)}")
    try:
        ensure_directories([paths.found_modules_dir, paths.not_modules_dir, paths.reports_root])
    except OSError as exc:
        raise ConfigurationError(f"Unable to create output directories: {exc}") from exc
    return RunDirectories(
        module_info_work_dir=paths.module_info_work_dir,
        found_modules_dir=paths.found_modules_dir,
        not_modules_dir=paths.not_modules_dir,
        provided_module_dirs=tuple(paths.provided_module_dirs),
    )


def resolve_java_version(
    settings: AppSettings,
    *,
    runner: ToolRunner | None = None,
    logger: logging.Logger | None = None,
) -> int:
    """Return the configured shard-scan ceiling, detecting it from java when unset."""

    if settings.modularize.java_version is not None:
        return settings.modularize.java_version
    return detect_java_feature_version(settings.tools.java_home, runner=runner, logger=logger)


def _write_reports(
    settings: AppSettings,
    result: ModularizeRunResult,
    *,
    started_ts: datetime,
    started_mono: float,
    directories: RunDirectories,
    total_inputs: int,
) -> None:
    inventory = build_inventory_frame(result.classification.records)
    inventory_path = settings.paths.reports_root / INVENTORY_FILE
    try:
        result.inventory_path = write_inventory_parquet(
            inventory,
            inventory_path,
            compression=settings.parquet.compression,
            compression_level=settings.parquet.compression_level,
            statistics=settings.parquet.statistics,
        )
    except OSError as exc:
        raise ReportWriteError(f"Unable to write {inventory_path}: {exc}") from exc
    result.summary = {
        "run_id": result.run_id,
        "started_ts": started_ts,
        "finished_ts": now_utc(),
        "duration_sec": round(time.monotonic() - started_mono, 3),
        "java_version": result.java_version,
        "artifacts_total": total_inputs,
        "directories_skipped": len(result.classification.skipped_directories),
        "status_counts": inventory_status_counts(inventory),
        "patched_total": len(result.patched),
        "directories": {
            "module_info_work_dir": directories.module_info_work_dir,
            "found_modules_dir": directories.found_modules_dir,
            "not_modules_dir": directories.not_modules_dir,
            "provided_module_dirs": list(directories.provided_module_dirs),
        },
        "outputs": {"inventory_path": result.inventory_path},
    }
    summary_path = settings.paths.reports_root / SUMMARY_FILE
    try:
        result.summary_path = write_json_atomically(result.summary, summary_path)
    except OSError as exc:
        raise ReportWriteError(f"Unable to write {summary_path}: {exc}") from exc


def run_modularize_pipeline(
    settings: AppSettings,
    artifacts: Sequence[str | Path],
    *,
    runner: ToolRunner | None = None,
    logger: logging.Logger | None = None,
) -> ModularizeRunResult:
    """Classify every jar, synthesize descriptors for plain jars and patch them in place.

    Any failure stops the run; nothing from later phases executes.
    """

    effective_logger = logger or LOGGER
    options = settings.modularize
    debug = options.debug
    run_id = f"modularize-run-{uuid4().hex[:12]}"
    started_ts = now_utc()
    started_mono = time.monotonic()
    phase = PipelinePhase.CLASSIFY

    try:
        directories = resolve_run_directories(settings)
        java_version = resolve_java_version(settings, runner=runner, logger=effective_logger)
        effective_logger.info(
            "modularize_run.start run_id=%s artifacts=%s java_version=%s min_shard_version=%s",
            run_id,
            len(artifacts),
            java_version,
            options.min_shard_version,
        )
        if java_version <= options.min_shard_version:
            effective_logger.warning(
                "modularize_run.no_shard_scan java_version=%s min_shard_version=%s; "
                "multi-release descriptors will not be detected",
                java_version,
                options.min_shard_version,
            )

        classification = classify_artifacts(
            artifacts,
            found_modules_dir=directories.found_modules_dir,
            not_modules_dir=directories.not_modules_dir,
            java_version=java_version,
            ignore_jars=options.ignore_jars,
            min_shard_version=options.min_shard_version,
            debug=debug,
            logger=effective_logger,
        )
        result = ModularizeRunResult(
            run_id=run_id,
            java_version=java_version,
            classification=classification,
            synthesis=SynthesisResult(),
        )

        phase = result.phase = advance_phase(phase, PipelinePhase.SYNTHESIZE)
        search_path = build_module_search_path(
            directories.found_modules_dir,
            directories.not_modules_dir,
            directories.provided_module_dirs,
        )
        result.synthesis = synthesize_descriptors(
            classification.worklist,
            search_path=search_path,
            work_dir=directories.module_info_work_dir,
            java_home=settings.tools.java_home,
            runner=runner,
            debug=debug,
            logger=effective_logger,
        )

        phase = result.phase = advance_phase(phase, PipelinePhase.INJECT)
        injector = ModuleInfoInjector(
            search_path=search_path,
            java_home=settings.tools.java_home,
            module_version=settings.tools.module_version,
            open_module=settings.tools.open_module,
            overwrite=settings.tools.overwrite,
            target_release=settings.tools.target_release,
            runner=runner,
            debug=debug,
            logger=effective_logger,
        )
        for jar in classification.worklist:
            if debug:
                effective_logger.info("Adding info for %s", jar.name)
            recorded_dir = None
            if options.match_strategy == "recorded":
                recorded_dir = result.synthesis.recorded_dir(jar)
            descriptor_text = load_descriptor(
                jar,
                directories.module_info_work_dir,
                recorded_dir=recorded_dir,
                logger=effective_logger,
            )
            result.patched.append(
                injector.add_module_info(descriptor_text, jar, directories.not_modules_dir)
            )

        phase = result.phase = advance_phase(phase, PipelinePhase.DONE)
        _write_reports(
            settings,
            result,
            started_ts=started_ts,
            started_mono=started_mono,
            directories=directories,
            total_inputs=len(artifacts),
        )
    except ModularizeError as exc:
        effective_logger.error("modularize_run.failed run_id=%s phase=%s error=%s", run_id, phase.value, exc)
        raise
    except OSError as exc:
        effective_logger.error("modularize_run.failed run_id=%s phase=%s error=%s", run_id, phase.value, exc)
        raise ModularizeError(f"Filesystem failure during {phase.value.lower()}: {exc}") from exc

    effective_logger.info(result.summary_line)
    effective_logger.info(
        "modularize_run.complete run_id=%s patched=%s summary_path=%s",
        run_id,
        len(result.patched),
        result.summary_path,
    )
    return result
