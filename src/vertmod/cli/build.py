# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``vertmod build`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError
from ..errors import VertmodError
from ..pipeline import stage_module
from .options import CONFIG_OPTION, DEBUG_OPTION, EMOJI_OPTION, HOME_OPTION, ROOT_OPTION, build_common_options
from .shared import build_cli_logger, exit_with, load_context


def build_command(
    root: ROOT_OPTION = Path("."),
    config_file: CONFIG_OPTION = None,
    home: HOME_OPTION = None,
    clean_first: Annotated[
        bool,
        typer.Option("--clean", help="Remove the staging directory before staging."),
    ] = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Stage the module into build/mods/<owner>~<name>~<version>."""

    options = build_common_options(root, config_file, home, emoji, debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        ctx = load_context(options, logger=logger)
        result = stage_module(ctx, clean_first=True if clean_first else None)
    except (VertmodError, ConfigError) as exc:
        raise exit_with(exc, logger=logger) from exc

    logger.debug(f"compiled={len(result.compiled)} copied={len(result.copied)} libraries={len(result.libraries)}")
    logger.ok(f"Module staged at {result.staging_dir}")
    raise typer.Exit(code=0)


__all__ = ["build_command"]
