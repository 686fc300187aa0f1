from __future__ import annotations

import logging
from pathlib import Path

import pytest

from jarmod.classify.classifier import classify_artifacts, should_ignore
from jarmod.errors import ArchiveOpenError


def _classify(tmp_path: Path, artifacts, **kwargs):
    return classify_artifacts(
        artifacts,
        found_modules_dir=tmp_path / "modules",
        not_modules_dir=tmp_path / "plain",
        java_version=17,
        **kwargs,
    )


def test_partitions_and_copies_byte_identical(tmp_path: Path, make_jar) -> None:
    modular = make_jar("api-2.0.jar", "module-info.class")
    plain = make_jar("util-1.0.jar", "com/acme/Util.class")

    result = _classify(tmp_path, [str(modular), str(plain)], ignore_jars=[])

    assert result.modular_count == 1
    assert result.non_modular_count == 1
    assert (tmp_path / "modules" / "api-2.0.jar").read_bytes() == modular.read_bytes()
    assert (tmp_path / "plain" / "util-1.0.jar").read_bytes() == plain.read_bytes()
    assert not (tmp_path / "plain" / "api-2.0.jar").exists()
    assert not (tmp_path / "modules" / "util-1.0.jar").exists()
    assert result.worklist == [tmp_path / "plain" / "util-1.0.jar"]
    assert result.summary_line() == "Found 1 modular jars and 1 ordinary jars."


def test_ignored_artifact_is_not_copied_or_counted(tmp_path: Path, make_jar) -> None:
    kept = make_jar("util-1.0.jar", "com/acme/Util.class")
    ignored = make_jar("javafx-base-17.jar", "javafx/Base.class")

    result = _classify(tmp_path, [kept, ignored], ignore_jars=["javafx"])

    assert result.modular_count == 0
    assert result.non_modular_count == 1
    assert result.ignored_count == 1
    assert not (tmp_path / "plain" / "javafx-base-17.jar").exists()
    assert not (tmp_path / "modules").exists()
    assert all(path.name != "javafx-base-17.jar" for path in result.worklist)


def test_counts_cover_every_input(tmp_path: Path, make_jar) -> None:
    artifacts = [
        make_jar("a-1.0.jar", "module-info.class"),
        make_jar("b-1.0.jar"),
        make_jar("c-1.0.jar", "META-INF/versions/", "META-INF/versions/11/module-info.class"),
        make_jar("skip-me-1.0.jar"),
        make_jar("d-1.0.jar"),
    ]

    result = _classify(tmp_path, artifacts, ignore_jars=["skip-me"])

    total = result.modular_count + result.non_modular_count + result.ignored_count
    assert total == len(artifacts)
    assert (result.modular_count, result.non_modular_count, result.ignored_count) == (2, 2, 1)
    assert len(result.records) == len(artifacts)


def test_directories_are_skipped(tmp_path: Path, make_jar) -> None:
    classes_dir = tmp_path / "target" / "classes"
    classes_dir.mkdir(parents=True)
    jar = make_jar("b-1.0.jar")

    result = _classify(tmp_path, [classes_dir, jar], ignore_jars=[])

    assert result.skipped_directories == [classes_dir]
    assert len(result.records) == 1


def test_open_failure_aborts_remaining_artifacts(tmp_path: Path, make_jar) -> None:
    first = make_jar("a-1.0.jar")
    broken = tmp_path / "repo" / "broken-1.0.jar"
    broken.write_bytes(b"garbage")
    last = make_jar("c-1.0.jar")

    with pytest.raises(ArchiveOpenError):
        _classify(tmp_path, [first, broken, last], ignore_jars=[])

    assert (tmp_path / "plain" / "a-1.0.jar").exists()
    assert not (tmp_path / "plain" / "c-1.0.jar").exists()


def test_unreadable_ignored_artifact_still_fails(tmp_path: Path) -> None:
    broken = tmp_path / "javafx-broken.jar"
    broken.write_bytes(b"garbage")
    with pytest.raises(ArchiveOpenError):
        _classify(tmp_path, [broken], ignore_jars=["javafx"])


def test_missing_ignore_list_warns(tmp_path: Path, make_jar, caplog: pytest.LogCaptureFixture) -> None:
    jar = make_jar("b-1.0.jar")
    with caplog.at_level(logging.WARNING):
        result = _classify(tmp_path, [jar], ignore_jars=None)
    assert result.non_modular_count == 1
    assert "No skip jars defined" in caplog.text


def test_debug_traces_each_artifact(tmp_path: Path, make_jar, caplog: pytest.LogCaptureFixture) -> None:
    modular = make_jar("api-2.0.jar", "module-info.class")
    plain = make_jar("util-1.0.jar")
    with caplog.at_level(logging.INFO):
        _classify(tmp_path, [modular, plain], ignore_jars=[], debug=True)
    assert f"{modular} IS a module" in caplog.text
    assert f"{plain} is NOT a module, generating module info" in caplog.text


@pytest.mark.parametrize(
    ("path", "patterns", "expected"),
    [
        ("/repo/org/openjfx/javafx-base-17.jar", ["javafx"], True),
        ("/repo/org/slf4j/slf4j-api-2.0.jar", ["javafx"], False),
        ("/repo/a.jar", [], False),
        ("/repo/a.jar", None, False),
    ],
)
def test_should_ignore(path: str, patterns, expected: bool) -> None:
    assert should_ignore(path, patterns) is expected
