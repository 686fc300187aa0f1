from __future__ import annotations

from pathlib import Path

import pytest

from jarmod.archive import probe as probe_module
from jarmod.archive.probe import is_modular_archive, open_archive, probe_artifact
from jarmod.errors import ArchiveOpenError


def test_root_descriptor_is_modular(make_jar) -> None:
    jar = make_jar("api-2.0.jar", "module-info.class", "com/acme/Api.class")
    assert probe_artifact(jar, 17) == "MODULAR"


def test_plain_jar_is_not_modular_without_shard_scan(make_jar, monkeypatch: pytest.MonkeyPatch) -> None:
    jar = make_jar("plain-1.0.jar", "com/acme/Plain.class")
    queried: list[str] = []
    original = probe_module.archive_has_entry

    def spy(archive, name: str) -> bool:
        queried.append(name)
        return original(archive, name)

    monkeypatch.setattr(probe_module, "archive_has_entry", spy)

    assert probe_artifact(jar, 21) == "NON_MODULAR"
    assert queried == ["module-info.class", "META-INF/versions"]


@pytest.mark.parametrize(
    ("shard", "ceiling", "expected"),
    [
        (8, 17, "MODULAR"),
        (11, 17, "MODULAR"),
        (16, 17, "MODULAR"),
        (17, 17, "NON_MODULAR"),
        (21, 17, "NON_MODULAR"),
        (7, 17, "NON_MODULAR"),
    ],
)
def test_multi_release_shard_range(make_jar, shard: int, ceiling: int, expected: str) -> None:
    jar = make_jar(
        "mr-1.0.jar",
        "META-INF/versions/",
        f"META-INF/versions/{shard}/module-info.class",
    )
    assert probe_artifact(jar, ceiling) == expected


def test_ceiling_equal_to_floor_never_checks_shards(make_jar) -> None:
    jar = make_jar(
        "mr-1.0.jar",
        "META-INF/versions/",
        "META-INF/versions/8/module-info.class",
    )
    assert probe_artifact(jar, 8, min_shard_version=8) == "NON_MODULAR"


def test_custom_floor(make_jar) -> None:
    jar = make_jar("mr-1.0.jar", "META-INF/versions/", "META-INF/versions/9/module-info.class")
    assert probe_artifact(jar, 17, min_shard_version=10) == "NON_MODULAR"
    assert probe_artifact(jar, 17, min_shard_version=9) == "MODULAR"


def test_versions_dir_without_explicit_entry_is_not_scanned(make_jar) -> None:
    jar = make_jar("mr-1.0.jar", "META-INF/versions/11/module-info.class")
    with open_archive(jar) as archive:
        assert is_modular_archive(archive, 17) is False


def test_open_archive_rejects_non_zip(tmp_path: Path) -> None:
    bogus = tmp_path / "broken.jar"
    bogus.write_bytes(b"not a zip")
    with pytest.raises(ArchiveOpenError, match="broken.jar"):
        open_archive(bogus)


def test_open_archive_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ArchiveOpenError):
        open_archive(tmp_path / "missing.jar")
