"""Locate the synthesized module-info.java that belongs to a jar.

jdeps names each output subdirectory after the module name it derives, not
after the jar file, so the lookup is heuristic: a jar's file name with ``-``
replaced by ``.`` is compared against every work-area subdirectory and the
first subdirectory name (in sorted order) that is a prefix of it wins. Two
modules whose names share a prefix can therefore resolve to the wrong
descriptor; ``foo.b`` shadows ``foo.bar`` for ``foo-bar-1.0.jar``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from jarmod.errors import ConfigurationError, DescriptorNotFoundError, InvalidDescriptorError

LOGGER = logging.getLogger(__name__)

DESCRIPTOR_SOURCE_FILE = "module-info.java"


def descriptor_match_key(jar: Path) -> str:
    """Return the normalized name used to match work-area entries."""

    return jar.name.replace("-", ".")


def ensure_work_dir(work_dir: Path | None) -> Path:
    """Validate the work area, creating it when it does not exist yet."""

    if work_dir is None:
        raise ConfigurationError("No module info output directory set")
    if not work_dir.exists():
        try:
            work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"Unable to create module info output directory {work_dir}: {exc}") from exc
    if not work_dir.is_dir():
        raise ConfigurationError(f"module info output directory is not a directory: {work_dir}")
    return work_dir


def find_descriptor_dir(jar: Path, work_dir: Path | None) -> Path:
    """Return the first work-area subdirectory whose name prefixes the match key."""

    directory = ensure_work_dir(work_dir)
    match_key = descriptor_match_key(jar)
    try:
        children = sorted(directory.iterdir())
    except OSError as exc:
        raise ConfigurationError(f"Unable to list module info output directory {directory}: {exc}") from exc
    for child in children:
        if child.is_dir() and match_key.startswith(child.name):
            return child
    raise DescriptorNotFoundError(f"Unable to find a module info for {jar.name} in {directory}")


def read_descriptor(descriptor_dir: Path) -> str:
    """Read the module-info.java text inside a work-area subdirectory."""

    source = descriptor_dir / DESCRIPTOR_SOURCE_FILE
    try:
        return source.read_text(encoding="ascii")
    except UnicodeDecodeError as exc:
        raise InvalidDescriptorError(f"{source} is not ASCII text: {exc}") from exc
    except OSError as exc:
        raise DescriptorNotFoundError(f"Unable to read {source}: {exc}") from exc


def load_descriptor(
    jar: Path,
    work_dir: Path | None,
    *,
    recorded_dir: Path | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Load the descriptor text for ``jar``.

    ``recorded_dir`` is the directory jdeps was observed to create for this
    jar; when given it is used instead of the prefix lookup.
    """

    effective_logger = logger or LOGGER
    if recorded_dir is not None:
        ensure_work_dir(work_dir)
        descriptor_dir = recorded_dir
    else:
        descriptor_dir = find_descriptor_dir(jar, work_dir)
    effective_logger.debug("match.descriptor jar=%s dir=%s", jar.name, descriptor_dir)
    return read_descriptor(descriptor_dir)
