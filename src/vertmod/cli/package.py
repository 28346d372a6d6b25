# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``vertmod package`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError
from ..errors import VertmodError
from ..pipeline import package_module
from .options import CONFIG_OPTION, DEBUG_OPTION, EMOJI_OPTION, HOME_OPTION, ROOT_OPTION, build_common_options
from .shared import build_cli_logger, exit_with, load_context


def package_command(
    root: ROOT_OPTION = Path("."),
    config_file: CONFIG_OPTION = None,
    home: HOME_OPTION = None,
    stage: Annotated[
        bool,
        typer.Option("--stage/--no-stage", help="Stage the module before archiving, or reuse the existing tree."),
    ] = True,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Write mod.json and build <target>/mods/<name>-<version>.zip."""

    options = build_common_options(root, config_file, home, emoji, debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        ctx = load_context(options, logger=logger)
        result = package_module(ctx, stage=stage)
    except (VertmodError, ConfigError) as exc:
        raise exit_with(exc, logger=logger) from exc

    logger.echo(str(result.archive))
    raise typer.Exit(code=0)


__all__ = ["package_command"]
