# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``vertmod home`` command."""

from __future__ import annotations

import typer

from ..errors import VertmodError
from ..home import initialize_home
from .options import DEBUG_OPTION, EMOJI_OPTION, HOME_OPTION
from .shared import build_cli_logger, exit_with


def home_command(
    home: HOME_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Initialise the tool home and print its location."""

    logger = build_cli_logger(emoji=emoji, debug=debug)
    try:
        layout = initialize_home(home.expanduser() if home is not None else None, use_emoji=emoji)
    except VertmodError as exc:
        raise exit_with(exc, logger=logger) from exc

    logger.debug(f"conf={layout.conf_dir} mods={layout.mods_dir} repository={layout.repository_dir}")
    logger.echo(str(layout.root))
    raise typer.Exit(code=0)


__all__ = ["home_command"]
