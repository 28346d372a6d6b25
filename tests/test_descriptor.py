# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for module descriptor generation."""

from __future__ import annotations

import json

import pytest

from vertmod.config import LicenseConfig, ProjectConfig
from vertmod.descriptor import build_descriptor, descriptor_main, read_descriptor, write_descriptor
from vertmod.errors import InvalidConfig, SerializationError
from vertmod.paths import descriptor_path


def test_descriptor_carries_main_and_metadata(config: ProjectConfig) -> None:
    config.project.license = LicenseConfig(name="Apache-2.0")
    config.module.descriptor = {"worker": True, "instances": 2}

    path = write_descriptor(config)

    assert path == descriptor_path(config)
    assert read_descriptor(path) == {
        "worker": True,
        "instances": 2,
        "main": "com.acme.Worker",
        "description": "Background worker",
        "homepage": "https://example.com/worker",
        "licenses": ["Apache-2.0"],
    }
    assert descriptor_main(path) == "com.acme.Worker"


def test_forward_slashes_are_not_escaped(config: ProjectConfig) -> None:
    config.module.descriptor = {"docs": "https://example.com/a/b"}

    raw = write_descriptor(config).read_text(encoding="utf-8")

    assert "https://example.com/a/b" in raw
    assert "\\/" not in raw


def test_reserved_keys_cannot_be_overridden(config: ProjectConfig) -> None:
    config.module.descriptor = {"main": "evil.Main", "extra": "yes"}

    payload = build_descriptor(config).to_payload()

    assert payload["main"] == "com.acme.Worker"
    assert payload["extra"] == "yes"


def test_optional_keys_are_omitted_when_unset(config: ProjectConfig) -> None:
    config.project.description = None
    config.project.url = None

    payload = json.loads(write_descriptor(config).read_text(encoding="utf-8"))

    assert payload == {"main": "com.acme.Worker"}


def test_existing_descriptor_is_overwritten(config: ProjectConfig) -> None:
    target = descriptor_path(config)
    target.parent.mkdir(parents=True)
    target.write_text('{"main": "old.Main", "stale": 1}', encoding="utf-8")

    write_descriptor(config)

    assert "stale" not in read_descriptor(target)


def test_missing_main_is_invalid(config: ProjectConfig) -> None:
    config.module.main = None

    with pytest.raises(InvalidConfig):
        write_descriptor(config)


@pytest.mark.parametrize("value", [object(), float("nan")])
def test_unserialisable_metadata_raises(config: ProjectConfig, value: object) -> None:
    config.module.descriptor = {"bad": value}

    with pytest.raises(SerializationError):
        write_descriptor(config)
    assert not descriptor_path(config).exists()
