# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``vertmod pull-deps`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from ..config import ConfigError
from ..errors import VertmodError
from ..pipeline import pull_dependencies
from .options import CONFIG_OPTION, DEBUG_OPTION, EMOJI_OPTION, HOME_OPTION, ROOT_OPTION, build_common_options
from .shared import build_cli_logger, exit_with, load_context


def pull_deps_command(
    root: ROOT_OPTION = Path("."),
    config_file: CONFIG_OPTION = None,
    home: HOME_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Copy resolved dependencies into build/mods/deps."""

    options = build_common_options(root, config_file, home, emoji, debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    try:
        ctx = load_context(options, logger=logger)
        written = pull_dependencies(ctx)
    except (VertmodError, ConfigError) as exc:
        raise exit_with(exc, logger=logger) from exc

    for path in written:
        logger.debug(f"pulled={path}")
    raise typer.Exit(code=0)


__all__ = ["pull_deps_command"]
