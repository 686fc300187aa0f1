"""Typer CLI entrypoint for jarmod."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
import yaml

from jarmod.archive.probe import probe_artifact
from jarmod.config import AppSettings, load_settings
from jarmod.errors import ModularizeError
from jarmod.logging_utils import PACKAGE_LOGGER, configure_logging
from jarmod.pipeline import resolve_java_version, run_modularize_pipeline

app = typer.Typer(
    add_completion=False,
    help="jarmod command line interface.",
    no_args_is_help=True,
)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
    debug: bool = False,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if debug:
        settings = settings.model_copy(
            update={"modularize": settings.modularize.model_copy(update={"debug": True})}
        )
    if not configure:
        return settings, logging.getLogger(PACKAGE_LOGGER)
    log_file = settings.paths.logs_root / "jarmod.log"
    try:
        logger = configure_logging(log_file, debug=settings.modularize.debug)
    except OSError as exc:
        typer.echo(f"error: Unable to open log file {log_file}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return settings, logger


def _collect_artifacts(
    jars: list[Path] | None,
    classpath: str | None,
    classpath_file: Path | None,
) -> list[str]:
    collected: list[str] = [str(jar) for jar in jars or []]
    if classpath:
        collected.extend(part.strip() for part in classpath.split(os.pathsep) if part.strip())
    if classpath_file is not None:
        try:
            lines = classpath_file.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise typer.BadParameter(f"Unable to read classpath-file {classpath_file}: {exc}") from exc
        collected.extend(line.strip() for line in lines if line.strip())
    if not collected:
        raise typer.BadParameter("Provide jars as arguments, --classpath, or --classpath-file.")
    return collected


@app.command("show-config")
def show_config(config_file: Path | None = CONFIG_FILE_OPTION) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("probe")
def probe(
    jars: list[Path] = typer.Argument(..., help="Jar files to inspect."),
    java_version: int | None = typer.Option(
        None,
        "--java-version",
        min=1,
        help="Shard-scan ceiling; defaults to settings or the java launcher.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Report whether each jar already declares a module, without copying."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=False)
    try:
        ceiling = java_version or resolve_java_version(settings, logger=logger)
        for jar in jars:
            status = probe_artifact(jar, ceiling, min_shard_version=settings.modularize.min_shard_version)
            typer.echo(f"{status}\t{jar}")
    except ModularizeError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("run")
def run(
    jars: list[Path] | None = typer.Argument(None, help="Resolved jar paths, in classpath order."),
    classpath: str | None = typer.Option(
        None,
        "--classpath",
        help="Path-separator joined list of resolved artifacts.",
    ),
    classpath_file: Path | None = typer.Option(
        None,
        "--classpath-file",
        help="File with one artifact path per line.",
        dir_okay=False,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Trace every artifact and tool invocation.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Classify jars and add synthesized module descriptors to the plain ones."""

    artifacts = _collect_artifacts(jars, classpath, classpath_file)
    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True, debug=debug)

    try:
        result = run_modularize_pipeline(settings, artifacts, logger=logger)
    except ModularizeError as exc:
        logger.exception("run.failed error=%s", exc)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(result.summary_line)
    typer.echo(f"patched_total: {len(result.patched)}")
    typer.echo(f"summary_path: {result.summary_path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
