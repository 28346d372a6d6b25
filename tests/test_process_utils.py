# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the shared subprocess wrapper."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from vertmod.process_utils import (
    TIMEOUT_RETURNCODE,
    CommandOptions,
    SubprocessExecutionError,
    normalize_args,
    run_command,
)


def test_normalize_args_resolves_executable(monkeypatch) -> None:
    monkeypatch.setattr("vertmod.process_utils.shutil.which", lambda name: f"/usr/bin/{name}")

    assert normalize_args(["javac", "-version"]) == ["/usr/bin/javac", "-version"]


def test_normalize_args_rejects_unknown_executable(monkeypatch) -> None:
    monkeypatch.setattr("vertmod.process_utils.shutil.which", lambda name: None)

    with pytest.raises(FileNotFoundError):
        normalize_args(["javac"])
    with pytest.raises(ValueError):
        normalize_args([])


def test_options_reject_unknown_overrides() -> None:
    with pytest.raises(TypeError):
        CommandOptions().with_overrides({"shell": True})
    with pytest.raises(ValueError):
        CommandOptions().with_overrides({"timeout": -1})
    assert CommandOptions().with_overrides({"check": False}).check is False


def test_run_command_raises_on_failure(monkeypatch, tmp_path: Path) -> None:
    def fake_run(args, **kwargs):
        return subprocess.CompletedProcess(args, 2, "out", "boom")

    monkeypatch.setattr("vertmod.process_utils.subprocess.run", fake_run)

    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command(["/bin/javac"], options=CommandOptions(cwd=tmp_path, capture_output=True))

    assert excinfo.value.returncode == 2
    assert excinfo.value.stderr == "boom"


def test_run_command_maps_timeouts(monkeypatch) -> None:
    def fake_run(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs["timeout"])

    monkeypatch.setattr("vertmod.process_utils.subprocess.run", fake_run)

    completed = run_command(["/bin/javac"], overrides={"timeout": 1.0, "check": False})

    assert completed.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in completed.stderr
