# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Java compilation into a module staging directory."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from .config import ProjectConfig
from .errors import CompileError
from .process_utils import CommandOptions, SubprocessExecutionError, run_command

JAVAC_ENV: Final[str] = "VERTMOD_JAVAC_CMD"
JAVA_HOME_ENV: Final[str] = "JAVA_HOME"

CommandRunner = Callable[..., CompletedProcess[str]]


def javac_executable(env: Mapping[str, str] | None = None) -> str:
    """Return the ``javac`` executable from the environment or ``PATH``."""

    environ = os.environ if env is None else env
    override = environ.get(JAVAC_ENV)
    if override:
        return override
    java_home = environ.get(JAVA_HOME_ENV)
    if java_home:
        return str(Path(java_home) / "bin" / "javac")
    return "javac"


def java_sources(config: ProjectConfig) -> list[Path]:
    """Return every ``*.java`` file under the configured Java source roots."""

    sources: list[Path] = []
    for root in config.project.java_source_paths:
        base = config.resolve(root)
        if base.is_dir():
            sources.extend(sorted(path for path in base.rglob("*.java") if path.is_file()))
    return sources


def compile_java(
    config: ProjectConfig,
    destination: Path,
    classpath: Sequence[Path],
    *,
    runner: CommandRunner = run_command,
    env: Mapping[str, str] | None = None,
) -> list[Path]:
    """Compile the project's Java sources into ``destination``.

    Args:
        config: Project configuration naming the Java source roots.
        destination: Directory receiving compiled classes.
        classpath: Library paths visible to the compiler.
        runner: Command runner; defaults to :func:`run_command`.
        env: Environment consulted for the ``javac`` location.

    Returns:
        list[Path]: Source files handed to the compiler; empty when there were none.

    Raises:
        CompileError: If ``javac`` is missing or exits unsuccessfully.
    """

    sources = java_sources(config)
    if not sources:
        return []
    command = [javac_executable(env), "-d", str(destination)]
    if classpath:
        command.extend(["-cp", os.pathsep.join(str(path) for path in classpath)])
    command.extend(str(path) for path in sources)
    try:
        runner(command, options=CommandOptions(cwd=config.root, capture_output=True))
    except SubprocessExecutionError as exc:
        raise CompileError(exc.returncode, exc.stderr) from exc
    except FileNotFoundError as exc:
        raise CompileError(127, str(exc)) from exc
    return sources


__all__ = ["CommandRunner", "JAVAC_ENV", "compile_java", "java_sources", "javac_executable"]
