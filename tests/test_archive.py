# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for module archive assembly."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from vertmod.archive import (
    FIXED_TIMESTAMP,
    ClasspathEntry,
    build_archive,
    collect_classpath_entries,
    entry_points,
    write_archive,
)
from vertmod.config import ProjectConfig
from vertmod.descriptor import write_descriptor
from vertmod.errors import DependencyNameCollision, StageIOError
from vertmod.stage import build_stage


def _stage(config: ProjectConfig, libraries: list[Path]) -> None:
    build_stage(
        config,
        libraries=libraries,
        compile_classpath=[],
        compiler=lambda cfg, dest, cp: [],
        use_emoji=False,
    )
    write_descriptor(config)


def _contents(path: Path) -> dict[str, bytes]:
    with zipfile.ZipFile(path) as archive:
        return {info.filename: archive.read(info) for info in archive.infolist()}


def test_entry_points_exclude_root_and_use_posix_names(tmp_path: Path) -> None:
    (tmp_path / "com" / "acme").mkdir(parents=True)
    (tmp_path / "com" / "acme" / "Main.class").write_bytes(b"x")

    names = sorted(entry.name for entry in entry_points(tmp_path))

    assert names == ["com", "com/acme", "com/acme/Main.class"]


def test_entry_points_of_missing_root_are_empty(tmp_path: Path) -> None:
    assert entry_points(tmp_path / "absent") == []


def test_archive_has_one_lib_entry_per_dependency_plus_directory(
    config: ProjectConfig, cache_jars: list[Path]
) -> None:
    _stage(config, cache_jars)

    archive = build_archive(config, libraries=cache_jars)

    assert archive.name == "worker-1.0.0.zip"
    names = list(_contents(archive))
    lib_entries = [name for name in names if name.startswith("lib/")]
    assert sorted(lib_entries) == ["lib/", "lib/bar-2.0.jar", "lib/foo-1.0.jar"]
    assert len(lib_entries) == len(cache_jars) + 1


def test_archive_contains_staged_tree_once(config: ProjectConfig, cache_jars: list[Path]) -> None:
    _stage(config, cache_jars)

    contents = _contents(build_archive(config, libraries=cache_jars))

    assert contents["a.class"] == b"\xca\xfe\xba\xbe"
    assert contents["config.json"] == b'{"port": 8080}'
    assert b'"main": "com.acme.Worker"' in contents["mod.json"]
    assert contents["lib/foo-1.0.jar"] == b"foo-bytes"
    names = [name for name in contents]
    assert len(names) == len(set(names))


def test_staging_lib_subtree_is_not_walked(config: ProjectConfig, cache_jars: list[Path]) -> None:
    _stage(config, cache_jars)
    names = {entry.name for entry in collect_classpath_entries(config)}

    assert "lib" not in names
    assert not any(name.startswith("lib/") for name in names)


def test_compile_output_directory_is_an_archive_root(config: ProjectConfig, cache_jars: list[Path]) -> None:
    config.project.compile_path = Path("classes")
    precompiled = config.root / "classes" / "pkg" / "B.class"
    precompiled.parent.mkdir(parents=True)
    precompiled.write_bytes(b"precompiled")
    _stage(config, cache_jars)

    contents = _contents(build_archive(config, libraries=cache_jars))

    assert contents["pkg/"] == b""
    assert contents["pkg/B.class"] == b"precompiled"
    assert contents["a.class"] == b"\xca\xfe\xba\xbe"


def test_archive_output_directory_is_not_walked(config: ProjectConfig, cache_jars: list[Path]) -> None:
    config.project.compile_path = Path("target")
    _stage(config, cache_jars)
    build_archive(config, libraries=cache_jars)

    names = {entry.name for entry in collect_classpath_entries(config)}

    assert "mods" not in names
    assert not any(name.endswith(".zip") for name in names)


def test_rebuilding_unchanged_tree_is_content_equal(config: ProjectConfig, cache_jars: list[Path]) -> None:
    _stage(config, cache_jars)

    first = _contents(build_archive(config, libraries=cache_jars))
    second = _contents(build_archive(config, libraries=cache_jars))

    assert first == second


def test_reproducible_archive_is_byte_identical_and_sorted(
    config: ProjectConfig, cache_jars: list[Path]
) -> None:
    _stage(config, cache_jars)

    first = build_archive(config, libraries=cache_jars).read_bytes()
    second = build_archive(config, libraries=cache_jars).read_bytes()

    assert first == second
    with zipfile.ZipFile(build_archive(config, libraries=cache_jars)) as archive:
        infos = archive.infolist()
    module_names = [info.filename for info in infos if not info.filename.startswith("lib/")]
    assert module_names == sorted(module_names)
    assert all(info.date_time == FIXED_TIMESTAMP for info in infos)


def test_directories_are_written_as_empty_entries(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    (root / "pkg").mkdir(parents=True)
    outfile = tmp_path / "out.zip"

    write_archive(outfile, [ClasspathEntry(name="pkg", content=root / "pkg")], [])

    with zipfile.ZipFile(outfile) as archive:
        info = archive.getinfo("pkg/")
        assert info.is_dir()
        assert info.file_size == 0
        assert archive.namelist() == ["pkg/", "lib/"]


def test_non_reproducible_archive_keeps_given_order(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("b", encoding="utf-8")
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    entries = [
        ClasspathEntry(name="b.txt", content=tmp_path / "b.txt"),
        ClasspathEntry(name="a.txt", content=tmp_path / "a.txt"),
    ]
    outfile = tmp_path / "out.zip"

    write_archive(outfile, entries, [], reproducible=False)

    with zipfile.ZipFile(outfile) as archive:
        assert archive.namelist() == ["b.txt", "a.txt", "lib/"]


def test_library_collisions_follow_policy(tmp_path: Path) -> None:
    first = tmp_path / "one" / "util.jar"
    second = tmp_path / "two" / "util.jar"
    for path, payload in ((first, b"1"), (second, b"2")):
        path.parent.mkdir(parents=True)
        path.write_bytes(payload)

    with pytest.raises(DependencyNameCollision):
        write_archive(tmp_path / "a.zip", [], [first, second])

    write_archive(tmp_path / "b.zip", [], [first, second], on_collision="disambiguate")
    with zipfile.ZipFile(tmp_path / "b.zip") as archive:
        libs = [name for name in archive.namelist() if name.startswith("lib/") and name != "lib/"]
    assert len(libs) == 2


def test_failed_write_removes_partial_archive(tmp_path: Path) -> None:
    outfile = tmp_path / "out.zip"
    missing = tmp_path / "gone.txt"

    with pytest.raises(StageIOError) as excinfo:
        write_archive(outfile, [ClasspathEntry(name="gone.txt", content=missing)], [])

    assert excinfo.value.path == missing
    assert not outfile.exists()
