"""Shared utility helpers."""

from jarmod.utils.paths import (
    atomic_temp_path,
    copy_file_to_directory,
    ensure_directories,
    write_json_atomically,
)
from jarmod.utils.process import (
    ToolRunner,
    detect_java_feature_version,
    parse_java_feature_version,
    run_tool,
    subprocess_runner,
)
from jarmod.utils.time_utils import now_utc

__all__ = [
    "atomic_temp_path",
    "copy_file_to_directory",
    "ensure_directories",
    "write_json_atomically",
    "ToolRunner",
    "detect_java_feature_version",
    "parse_java_feature_version",
    "run_tool",
    "subprocess_runner",
    "now_utc",
]
