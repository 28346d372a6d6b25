# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``vertmod run`` and ``vertmod runmod`` commands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any, Final

import typer

from ..config import ConfigError
from ..errors import VertmodError
from ..pipeline import run_module
from .options import (
    CONFIG_OPTION,
    DEBUG_OPTION,
    EMOJI_OPTION,
    HOME_OPTION,
    PASSTHROUGH_ROOT_OPTION,
    build_common_options,
)
from .shared import build_cli_logger, exit_with, load_context

IDENTITY_PARTS: Final[int] = 3
PASSTHROUGH_CONTEXT: Final[dict[str, Any]] = {
    "allow_extra_args": True,
    "allow_interspersed_args": False,
    "ignore_unknown_options": True,
}


def split_module_arguments(arguments: Sequence[str]) -> tuple[tuple[str, ...], list[str]]:
    """Split command-line words into an explicit module identity and platform arguments.

    Leading words up to the first option-like word name the module as
    ``OWNER NAME VERSION``; when the first word is an option, or there are no
    words, the configured module is run and every word is passed through.

    Args:
        arguments: Positional words following the command.

    Returns:
        tuple[tuple[str, ...], list[str]]: Explicit identity parts (possibly
        empty or incomplete) and the remaining platform arguments.
    """

    words = list(arguments)
    if not words or words[0].startswith("-"):
        return (), words
    identity: list[str] = []
    while words and len(identity) < IDENTITY_PARTS and not words[0].startswith("-"):
        identity.append(words.pop(0))
    return tuple(identity), words


def runmod_command(
    arguments: Annotated[
        list[str] | None,
        typer.Argument(metavar="[OWNER NAME VERSION] [ARGS]...", help="Module to run and platform arguments."),
    ] = None,
    root: PASSTHROUGH_ROOT_OPTION = Path("."),
    config_file: CONFIG_OPTION = None,
    home: HOME_OPTION = None,
    build: Annotated[
        bool,
        typer.Option("--build", help="Stage the configured module before launching."),
    ] = False,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0, help="Stop the platform after this many seconds."),
    ] = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Run a module on the platform, defaulting to the configured module.

    vertmod options must come before the module words. Unknown options and
    every word from the first module word onward reach the platform unchanged.
    """

    options = build_common_options(root, config_file, home, emoji, debug)
    logger = build_cli_logger(emoji=options.emoji, debug=options.debug)
    explicit, passthrough = split_module_arguments(arguments or [])
    try:
        ctx = load_context(options, logger=logger)
        run_module(ctx, explicit, passthrough, build=build, timeout=timeout)
    except (VertmodError, ConfigError) as exc:
        raise exit_with(exc, logger=logger) from exc
    raise typer.Exit(code=0)


__all__ = ["PASSTHROUGH_CONTEXT", "runmod_command", "split_module_arguments"]
