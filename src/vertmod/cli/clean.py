# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``vertmod clean`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..clean import clean
from ..config import ConfigError, load_project_config
from ..errors import VertmodError
from .options import CONFIG_OPTION, DEBUG_OPTION, EMOJI_OPTION, ROOT_OPTION, build_common_options
from .shared import build_cli_logger, exit_with


def clean_command(
    root: ROOT_OPTION = Path("."),
    config_file: CONFIG_OPTION = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Only display what would be removed.")] = False,
    archives: Annotated[bool, typer.Option("--archives", help="Also remove the module archive.")] = False,
    deps: Annotated[bool, typer.Option("--deps", help="Also remove the shared build/mods/deps directory.")] = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Remove the staged module and, optionally, its archive."""

    options = build_common_options(root, config_file, None, emoji, debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        config = load_project_config(options.root, config_file=options.config_file)
        result = clean(
            config,
            dry_run=dry_run,
            include_archive=archives,
            include_deps=deps,
            use_emoji=options.emoji,
        )
    except (VertmodError, ConfigError) as exc:
        raise exit_with(exc, logger=logger) from exc

    if dry_run:
        for path in sorted(result.skipped):
            logger.warn(f"DRY RUN: would remove {path}")
    raise typer.Exit(code=0)


__all__ = ["clean_command"]
