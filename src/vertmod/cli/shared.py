# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared utilities for CLI commands (logging, errors, context loading)."""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from typing import Final

import typer
from rich.console import Console
from rich.text import Text

from ..config import ConfigError, load_project_config
from ..errors import Cancelled, RuntimeExecutionError, VertmodError
from ..home import initialize_home
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn
from ..pipeline import BuildContext, create_context
from .options import CommonOptions

CANCELLED_EXIT_CODE: Final[int] = 130
_PACKAGE_LOGGER: Final[str] = "vertmod"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout without decoration."""

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit ``message`` with ``key=value`` highlighting when debug output is enabled."""

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to a dedicated Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug output should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger for user-facing command output.
    """

    if debug:
        _enable_debug_logging()
    console = Console(no_color=no_color, highlight=False, stderr=True)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


def _enable_debug_logging() -> None:
    logger = logging.getLogger(_PACKAGE_LOGGER)
    if getattr(logger, "_vertmod_debug_configured", False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    setattr(logger, "_vertmod_debug_configured", True)


def as_cli_error(exc: VertmodError | ConfigError) -> CLIError:
    """Map a pipeline failure to the CLI error and exit status reported for it."""

    if isinstance(exc, RuntimeExecutionError):
        return CLIError(str(exc), exit_code=exc.exit_code)
    if isinstance(exc, Cancelled):
        return CLIError(str(exc), exit_code=CANCELLED_EXIT_CODE)
    return CLIError(str(exc))


def exit_with(exc: VertmodError | ConfigError, *, logger: CLILogger) -> typer.Exit:
    """Report ``exc`` through ``logger`` and return the matching :class:`typer.Exit`."""

    error = as_cli_error(exc)
    logger.fail(str(error))
    return typer.Exit(code=error.exit_code)


def load_context(options: CommonOptions, *, logger: CLILogger) -> BuildContext:
    """Initialise the tool home and load project configuration for ``options``.

    Raises:
        ConfigError: If the configuration cannot be read or validated.
        StageIOError: If the tool home cannot be initialised.
    """

    config = load_project_config(options.root, config_file=options.config_file)
    home = initialize_home(options.home, use_emoji=options.emoji)
    logger.debug(f"root={config.root} home={home.root}")
    return create_context(config, home, use_emoji=options.emoji)


__all__ = [
    "CANCELLED_EXIT_CODE",
    "CLIError",
    "CLILogger",
    "as_cli_error",
    "build_cli_logger",
    "exit_with",
    "load_context",
]
