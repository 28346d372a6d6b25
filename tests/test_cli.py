# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the vertmod command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from vertmod.cli.app import app
from vertmod.cli.run import split_module_arguments
from vertmod.errors import Cancelled
from vertmod.paths import staging_dir
from vertmod.pipeline import BuildContext

MODULE_TOML = """
[project]
name = "worker"
version = "1.0.0"

[module]
owner = "acme"
name = "worker"
version = "1.0.0"
main = "com.acme.Worker"
"""


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def patched_context(monkeypatch: pytest.MonkeyPatch, context: BuildContext) -> BuildContext:
    monkeypatch.setattr("vertmod.cli.shared.create_context", lambda config, home, **_: context)
    return context


def _common(context: BuildContext, tmp_path: Path) -> list[str]:
    return ["--root", str(context.config.root), "--home", str(tmp_path / "cli-home"), "--no-emoji"]


def test_build_command_stages_module(runner: CliRunner, patched_context: BuildContext, tmp_path: Path) -> None:
    result = runner.invoke(app, ["build", *_common(patched_context, tmp_path)])

    assert result.exit_code == 0, result.output
    assert "Module staged at" in result.output
    assert (staging_dir(patched_context.config) / "a.class").is_file()
    assert (tmp_path / "cli-home" / "conf").is_dir()


def test_package_command_prints_archive(runner: CliRunner, patched_context: BuildContext, tmp_path: Path) -> None:
    result = runner.invoke(app, ["package", *_common(patched_context, tmp_path)])

    archive = patched_context.config.root / "target" / "mods" / "worker-1.0.0.zip"
    assert result.exit_code == 0, result.output
    assert archive.is_file()
    assert str(archive) in result.output


def test_package_command_requires_main(runner: CliRunner, patched_context: BuildContext, tmp_path: Path) -> None:
    patched_context.config.module.main = None

    result = runner.invoke(app, ["package", *_common(patched_context, tmp_path)])

    assert result.exit_code == 1
    assert "main" in result.output


def test_run_command_passes_arguments(
    runner: CliRunner,
    patched_context: BuildContext,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    spy_factory,
) -> None:
    monkeypatch.setattr("vertmod.launcher.subprocess.Popen", spy_factory)

    result = runner.invoke(app, ["run", *_common(patched_context, tmp_path), "-conf", "app.json"])

    assert result.exit_code == 0, result.output
    (command,) = spy_factory.commands
    assert command[-4:] == ["runmod", "acme~worker~1.0.0", "-conf", "app.json"]


def test_run_command_explicit_module(
    runner: CliRunner,
    patched_context: BuildContext,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    spy_factory,
) -> None:
    monkeypatch.setattr("vertmod.launcher.subprocess.Popen", spy_factory)

    result = runner.invoke(app, ["runmod", *_common(patched_context, tmp_path), "other", "svc", "2.0"])

    assert result.exit_code == 0, result.output
    assert spy_factory.commands[0][-2:] == ["runmod", "other~svc~2.0"]


@pytest.mark.parametrize(
    ("words", "expected"),
    [
        (
            ["acme", "worker", "1.0.0", "-cluster", "-cluster-host", "h"],
            ["acme~worker~1.0.0", "-cluster", "-cluster-host", "h"],
        ),
        (
            ["-cluster", "-cluster-port", "5701", "--root", "elsewhere"],
            ["acme~worker~1.0.0", "-cluster", "-cluster-port", "5701", "--root", "elsewhere"],
        ),
    ],
)
def test_run_command_passes_platform_flags_unchanged(
    runner: CliRunner,
    patched_context: BuildContext,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    spy_factory,
    words: list[str],
    expected: list[str],
) -> None:
    monkeypatch.setattr("vertmod.launcher.subprocess.Popen", spy_factory)

    result = runner.invoke(app, ["run", *_common(patched_context, tmp_path), *words])

    assert result.exit_code == 0, result.output
    (command,) = spy_factory.commands
    assert command[command.index("runmod") + 1 :] == expected


def test_run_command_propagates_exit_code(
    runner: CliRunner,
    patched_context: BuildContext,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    make_spy_factory,
) -> None:
    monkeypatch.setattr("vertmod.launcher.subprocess.Popen", make_spy_factory(returncode=3))

    result = runner.invoke(app, ["run", *_common(patched_context, tmp_path)])

    assert result.exit_code == 3
    assert "status 3" in result.output


def test_run_command_cancelled_exit_code(
    runner: CliRunner,
    patched_context: BuildContext,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _cancelled(*_args, **_kwargs):
        raise Cancelled("timeout", ["java"])

    monkeypatch.setattr("vertmod.cli.run.run_module", _cancelled)

    result = runner.invoke(app, ["run", *_common(patched_context, tmp_path), "--timeout", "1"])

    assert result.exit_code == 130
    assert "timeout" in result.output


def test_run_command_incomplete_identity(
    runner: CliRunner,
    patched_context: BuildContext,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    spy_factory,
) -> None:
    monkeypatch.setattr("vertmod.launcher.subprocess.Popen", spy_factory)

    result = runner.invoke(app, ["run", *_common(patched_context, tmp_path), "acme", "worker"])

    assert result.exit_code == 1
    assert "version=<missing>" in result.output
    assert spy_factory.commands == []
    assert patched_context.platform.calls == []


@pytest.mark.parametrize(
    ("words", "explicit", "rest"),
    [
        ([], (), []),
        (["-conf", "a.json"], (), ["-conf", "a.json"]),
        (["acme", "worker", "1.0"], ("acme", "worker", "1.0"), []),
        (["acme", "worker", "1.0", "extra", "-ha"], ("acme", "worker", "1.0"), ["extra", "-ha"]),
        (["acme", "worker", "-ha"], ("acme", "worker"), ["-ha"]),
    ],
)
def test_split_module_arguments(words: list[str], explicit: tuple[str, ...], rest: list[str]) -> None:
    assert split_module_arguments(words) == (explicit, rest)


def test_pull_deps_command(runner: CliRunner, patched_context: BuildContext, tmp_path: Path) -> None:
    result = runner.invoke(app, ["pull-deps", *_common(patched_context, tmp_path)])

    deps = patched_context.config.root / "build" / "mods" / "deps"
    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in deps.iterdir()) == ["bar-2.0.jar", "foo-1.0.jar"]


def test_clean_command_dry_run(runner: CliRunner, tmp_path: Path) -> None:
    root = tmp_path / "cleanable"
    stage = root / "build" / "mods" / "acme~worker~1.0.0"
    stage.mkdir(parents=True)
    (root / "vertmod.toml").write_text(MODULE_TOML, encoding="utf-8")

    result = runner.invoke(app, ["clean", "--root", str(root), "--dry-run", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "DRY RUN: would remove" in result.output
    assert stage.exists()

    result = runner.invoke(app, ["clean", "--root", str(root), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert not stage.exists()


def test_clean_command_reports_missing_identity(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["clean", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 1
    assert "owner=<missing>" in result.output


def test_invalid_config_exits_with_error(runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "vertmod.toml").write_text("[project\n", encoding="utf-8")

    result = runner.invoke(app, ["build", "--root", str(tmp_path), "--home", str(tmp_path / "h"), "--no-emoji"])

    assert result.exit_code == 1


def test_home_command_prints_location(runner: CliRunner, tmp_path: Path) -> None:
    target = tmp_path / "vertmod-home"

    result = runner.invoke(app, ["home", "--home", str(target), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert str(target) in result.output
    assert (target / "conf").is_dir()


def test_command_help_lists_options_alphabetically(runner: CliRunner) -> None:
    result = runner.invoke(app, ["build", "--help"])

    assert result.exit_code == 0
    output = result.output
    positions = [output.index(flag) for flag in ("--clean", "--config", "--debug", "--home", "--root")]
    assert positions == sorted(positions)
