# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Typer option declarations and their normalised form."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root containing vertmod.toml."),
]
# Commands that pass unknown options through declare no short aliases, since
# click would split a platform flag such as ``-cluster`` into known letters.
PASSTHROUGH_ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", help="Project root containing vertmod.toml."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", help="Configuration file to load instead of <root>/vertmod.toml."),
]
HOME_OPTION = Annotated[
    Path | None,
    typer.Option("--home", help="Tool home directory (defaults to $VERTMOD_HOME or ~/.vertmod)."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Emit debug diagnostics on stderr."),
]


@dataclass(slots=True)
class CommonOptions:
    """Normalised options accepted by every project command."""

    root: Path
    config_file: Path | None
    home: Path | None
    emoji: bool
    debug: bool


def build_common_options(
    root: Path,
    config_file: Path | None,
    home: Path | None,
    emoji: bool,
    debug: bool,
) -> CommonOptions:
    """Resolve user-supplied paths and bundle the shared options."""

    resolved_root = root.expanduser().resolve()
    resolved_config = None
    if config_file is not None:
        expanded = config_file.expanduser()
        resolved_config = expanded if expanded.is_absolute() else (Path.cwd() / expanded).resolve()
    return CommonOptions(
        root=resolved_root,
        config_file=resolved_config,
        home=home.expanduser().resolve() if home is not None else None,
        emoji=emoji,
        debug=debug,
    )


__all__ = [
    "CONFIG_OPTION",
    "CommonOptions",
    "DEBUG_OPTION",
    "EMOJI_OPTION",
    "HOME_OPTION",
    "PASSTHROUGH_ROOT_OPTION",
    "ROOT_OPTION",
    "build_common_options",
]
