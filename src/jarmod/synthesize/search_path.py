"""Module path construction for descriptor synthesis."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence


def build_module_search_path(
    found_modules_dir: Path,
    not_modules_dir: Path,
    provided_module_dirs: Sequence[Path] = (),
) -> str:
    """Join the two output areas and any provided module dirs with ``os.pathsep``.

    Must be called after classification has populated both output areas.
    """

    entries = [found_modules_dir, not_modules_dir, *provided_module_dirs]
    return os.pathsep.join(str(Path(entry).absolute()) for entry in entries)
