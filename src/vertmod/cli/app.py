# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the vertmod commands."""

from __future__ import annotations

from .build import build_command
from .clean import clean_command
from .deps import pull_deps_command
from .home import home_command
from .package import package_command
from .run import PASSTHROUGH_CONTEXT, runmod_command
from .typer_ext import create_typer

app = create_typer(
    name="vertmod",
    help="Stage, package and run platform modules.",
    no_args_is_help=True,
)

app.command("build")(build_command)
app.command("package")(package_command)
app.command("run", context_settings=PASSTHROUGH_CONTEXT)(runmod_command)
app.command("runmod", context_settings=PASSTHROUGH_CONTEXT, hidden=True)(runmod_command)
app.command("pull-deps")(pull_deps_command)
app.command("clean")(clean_command)
app.command("home")(home_command)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
