"""Tabular run inventory of classified jars."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

import polars as pl

from jarmod.classify.classifier import ARTIFACT_STATUS_VALUES, ArtifactRecord
from jarmod.utils.paths import atomic_temp_path

INVENTORY_FILE = "jar_inventory.parquet"


def _inventory_schema() -> dict[str, pl.DataType]:
    """Stable schema for jar inventories."""

    return {
        "source_path": pl.String,
        "file_name": pl.String,
        "status": pl.String,
        "output_path": pl.String,
        "size_bytes": pl.Int64,
    }


def build_inventory_frame(records: Sequence[ArtifactRecord]) -> pl.DataFrame:
    """Create a Polars inventory DataFrame from classification records."""

    rows = [
        {
            "source_path": str(record.source_path),
            "file_name": record.source_path.name,
            "status": record.status,
            "output_path": str(record.output_path) if record.output_path is not None else None,
            "size_bytes": record.size_bytes,
        }
        for record in records
    ]
    if not rows:
        return pl.DataFrame(schema=_inventory_schema())
    return pl.DataFrame(rows, schema_overrides=_inventory_schema())


def inventory_status_counts(inventory: pl.DataFrame) -> dict[str, int]:
    """Return MODULAR/NON_MODULAR/IGNORED counts from an inventory."""

    counts = {status: 0 for status in ARTIFACT_STATUS_VALUES}
    if inventory.height == 0:
        return counts
    for row in inventory.group_by("status").len(name="count").to_dicts():
        status = str(row["status"])
        if status in counts:
            counts[status] = int(row["count"])
    return counts


def write_inventory_parquet(
    inventory: pl.DataFrame,
    output_path: Path,
    compression: str = "zstd",
    compression_level: int | None = 3,
    statistics: bool = True,
) -> Path:
    """Write inventory DataFrame to parquet atomically and return output path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = atomic_temp_path(output_path)
    try:
        inventory.write_parquet(
            temp_path,
            compression=compression,
            compression_level=compression_level,
            statistics=statistics,
        )
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path
