"""Descriptor matching and injection stage helpers."""

from jarmod.inject.injector import (
    COMPILED_DESCRIPTOR_FILE,
    ModuleInfoInjector,
    as_open_module,
    descriptor_module_name,
)
from jarmod.inject.matcher import (
    DESCRIPTOR_SOURCE_FILE,
    descriptor_match_key,
    ensure_work_dir,
    find_descriptor_dir,
    load_descriptor,
    read_descriptor,
)

__all__ = [
    "COMPILED_DESCRIPTOR_FILE",
    "ModuleInfoInjector",
    "as_open_module",
    "descriptor_module_name",
    "DESCRIPTOR_SOURCE_FILE",
    "descriptor_match_key",
    "ensure_work_dir",
    "find_descriptor_dir",
    "load_descriptor",
    "read_descriptor",
]
