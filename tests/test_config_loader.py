# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for TOML project configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from vertmod.config import ConfigError, load_project_config


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    config = load_project_config(tmp_path)

    assert config.root == tmp_path.resolve()
    assert config.project.source_paths == [Path("src")]
    assert config.project.resource_paths == [Path("resources")]
    assert config.build.root == Path("build")
    assert config.build.exclude_profiles == ["provided"]
    assert config.build.on_name_collision == "error"
    assert config.archive.reproducible is True
    assert list(config.project.repositories) == ["central"]


def test_full_document_is_parsed(tmp_path: Path) -> None:
    _write(
        tmp_path / "vertmod.toml",
        """
[project]
name = "worker"
version = "1.0.0"
license = { name = "MIT" }
dependencies = [
  "com.example:foo:1.0",
  { coordinate = "javax.servlet:servlet-api:2.5", profile = "provided" },
  { coordinate = "com.example:bar:2.0", exclusions = ["org.slf4j:*"] },
]

[project.repositories]
internal = "https://repo.example.com/maven"
snapshots = { url = "https://repo.example.com/snapshots/", snapshots = true }

[module]
owner = "acme"
name = "worker"
version = "1.0.0"
main = "com.acme.Worker"

[module.descriptor]
worker = true
instances = 2

[build]
on_name_collision = "disambiguate"

[launcher]
timeout = 30
""",
    )

    config = load_project_config(tmp_path)

    assert config.project.license is not None and config.project.license.name == "MIT"
    assert [dep.coordinate for dep in config.project.dependencies] == [
        "com.example:foo:1.0",
        "javax.servlet:servlet-api:2.5",
        "com.example:bar:2.0",
    ]
    assert config.project.dependencies[2].exclusions == ["org.slf4j:*"]
    assert config.project.repositories["internal"].url == "https://repo.example.com/maven/"
    assert config.module.descriptor == {"worker": True, "instances": 2}
    assert config.build.on_name_collision == "disambiguate"
    assert config.launcher.timeout == 30
    kept = config.dependencies_excluding(config.build.exclude_profiles)
    assert [dep.coordinate for dep in kept] == ["com.example:foo:1.0", "com.example:bar:2.0"]


def test_includes_are_merged_beneath_document(tmp_path: Path) -> None:
    _write(
        tmp_path / "shared" / "base.toml",
        '[project]\nname = "base"\nversion = "0.1"\n[module]\nowner = "acme"\n',
    )
    _write(tmp_path / "vertmod.toml", 'include = "shared/base.toml"\n[project]\nname = "worker"\n')

    config = load_project_config(tmp_path)

    assert config.project.name == "worker"
    assert config.project.version == "0.1"
    assert config.module.owner == "acme"


def test_circular_include_is_reported(tmp_path: Path) -> None:
    _write(tmp_path / "vertmod.toml", 'include = "other.toml"\n')
    _write(tmp_path / "other.toml", 'include = "vertmod.toml"\n')

    with pytest.raises(ConfigError, match="Circular include"):
        load_project_config(tmp_path)


def test_environment_variables_are_expanded(tmp_path: Path) -> None:
    _write(tmp_path / "vertmod.toml", '[module]\nowner = "${TEAM}"\nname = "$MODULE"\nversion = "${UNSET}"\n')

    config = load_project_config(tmp_path, env={"TEAM": "acme", "MODULE": "worker"})

    assert config.module.owner == "acme"
    assert config.module.name == "worker"
    assert config.module.version == "${UNSET}"


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    _write(tmp_path / "vertmod.toml", '[project]\ndependencies = ["not-a-coordinate"]\n')

    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_project_config(tmp_path)


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    _write(tmp_path / "vertmod.toml", "[project\n")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_project_config(tmp_path)


def test_explicit_config_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_project_config(tmp_path, config_file=Path("missing.toml"))


def test_explicit_config_file_is_used(tmp_path: Path) -> None:
    custom = _write(tmp_path / "conf" / "release.toml", '[project]\nname = "release"\n')

    config = load_project_config(tmp_path, config_file=custom)

    assert config.project.name == "release"
    assert config.root == tmp_path.resolve()
