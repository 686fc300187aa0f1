"""Configuration models and loading logic."""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "JARMOD_SETTINGS_FILE"

# Lowest META-INF/versions/<n> shard level a multi-release jar can carry.
LOWEST_SHARD_VERSION = 8


def _resolve(path: Path | None, project_root: Path) -> Path | None:
    if path is None:
        return None
    return path if path.is_absolute() else (project_root / path).resolve()


class PathsConfig(BaseModel):
    """Output, work and report locations for one run.

    The three module directories are required and have no defaults.
    """

    module_info_work_dir: Path | None = None
    found_modules_dir: Path | None = None
    not_modules_dir: Path | None = None
    provided_module_dirs: list[Path] = Field(default_factory=list)
    reports_root: Path = Path("./build/jarmod/reports")
    logs_root: Path = Path("./build/jarmod/logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        return self.model_copy(
            update={
                "module_info_work_dir": _resolve(self.module_info_work_dir, project_root),
                "found_modules_dir": _resolve(self.found_modules_dir, project_root),
                "not_modules_dir": _resolve(self.not_modules_dir, project_root),
                "provided_module_dirs": [_resolve(path, project_root) for path in self.provided_module_dirs],
                "reports_root": _resolve(self.reports_root, project_root),
                "logs_root": _resolve(self.logs_root, project_root),
            }
        )


class ModularizeConfig(BaseModel):
    """Classification and matching behavior."""

    ignore_jars: list[str] | None = None
    java_version: int | None = Field(default=None, ge=1)
    min_shard_version: int = Field(default=LOWEST_SHARD_VERSION, ge=1)
    debug: bool = False
    match_strategy: Literal["prefix", "recorded"] = "prefix"


class ToolsConfig(BaseModel):
    """External JDK tool settings."""

    java_home: Path | None = None
    module_version: str = "1"
    open_module: bool = True
    overwrite: bool = True
    target_release: int | None = Field(default=None, ge=9)


class ParquetConfig(BaseModel):
    """Parquet write settings."""

    compression: Literal["zstd", "snappy", "gzip", "brotli", "lz4", "uncompressed"] = "zstd"
    compression_level: int | None = 3
    statistics: bool = True


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    paths: PathsConfig = Field(default_factory=PathsConfig)
    modularize: ModularizeConfig = Field(default_factory=ModularizeConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    parquet: ParquetConfig = Field(default_factory=ParquetConfig)

    model_config = SettingsConfigDict(
        env_prefix="JARMOD_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "configs/settings.yaml").exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides."""

    settings_file = resolve_settings_file(config_file)
    project_root = settings_file.parent.parent.resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_file_override = None
    resolved_paths = settings.paths.resolved(project_root=project_root)
    return settings.model_copy(update={"paths": resolved_paths})
