"""Jar inspection helpers."""

from jarmod.archive.probe import (
    MODULE_DESCRIPTOR_ENTRY,
    MODULE_STATUS_VALUES,
    VERSIONS_DIR_ENTRY,
    ModuleStatus,
    archive_has_entry,
    is_modular_archive,
    open_archive,
    probe_artifact,
)

__all__ = [
    "MODULE_DESCRIPTOR_ENTRY",
    "MODULE_STATUS_VALUES",
    "VERSIONS_DIR_ENTRY",
    "ModuleStatus",
    "archive_has_entry",
    "is_modular_archive",
    "open_archive",
    "probe_artifact",
]
