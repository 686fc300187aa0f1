"""Classification stage helpers."""

from jarmod.classify.classifier import (
    ARTIFACT_STATUS_VALUES,
    ArtifactRecord,
    ArtifactStatus,
    ClassificationResult,
    classify_artifacts,
    should_ignore,
)
from jarmod.classify.inventory import (
    INVENTORY_FILE,
    build_inventory_frame,
    inventory_status_counts,
    write_inventory_parquet,
)

__all__ = [
    "ARTIFACT_STATUS_VALUES",
    "ArtifactRecord",
    "ArtifactStatus",
    "ClassificationResult",
    "classify_artifacts",
    "should_ignore",
    "INVENTORY_FILE",
    "build_inventory_frame",
    "inventory_status_counts",
    "write_inventory_parquet",
]
