# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool home directory holding platform configuration and the artifact cache."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import StageIOError
from .logging import info

HOME_ENV: Final[str] = "VERTMOD_HOME"
DEFAULT_HOME: Final[Path] = Path.home() / ".vertmod"
CONF_SUBDIR: Final[str] = "conf"
MODS_SUBDIR: Final[str] = "mods"
REPOSITORY_SUBDIR: Final[str] = "repository"
LOGGING_PROPERTIES: Final[str] = "logging.properties"

DEFAULT_TEMPLATES: Final[dict[str, str]] = {
    "langs.properties": (
        "# Language implementations available to the platform\n"
        "rhino=io.vertx~lang-rhino~2.1.0-final:org.vertx.java.platform.impl.RhinoVerticleFactory\n"
        "groovy=io.vertx~lang-groovy~2.1.0-final:org.vertx.groovy.platform.impl.GroovyVerticleFactory\n"
        "clojure=io.vertx~lang-clojure~1.0.2:io.vertx.lang.clojure.ClojureVerticleFactory\n"
        ".js=rhino\n"
        ".groovy=groovy\n"
        ".clj=clojure\n"
    ),
    "repos.txt": (
        "# Repositories searched when the platform installs modules\n"
        "maven:https://repo1.maven.org/maven2/\n"
        "maven:https://oss.sonatype.org/content/repositories/snapshots/\n"
        "bintray:https://dl.bintray.com/\n"
    ),
    LOGGING_PROPERTIES: (
        "handlers=java.util.logging.ConsoleHandler,java.util.logging.FileHandler\n"
        "java.util.logging.SimpleFormatter.format=%5$s %6$s\\n\n"
        "java.util.logging.ConsoleHandler.formatter=java.util.logging.SimpleFormatter\n"
        "java.util.logging.ConsoleHandler.level=INFO\n"
        "java.util.logging.FileHandler.level=INFO\n"
        "java.util.logging.FileHandler.formatter=java.util.logging.SimpleFormatter\n"
        "java.util.logging.FileHandler.pattern=%t/vertx.log\n"
        ".level=INFO\n"
        "org.vertx.level=INFO\n"
        "com.hazelcast.level=SEVERE\n"
        "io.netty.util.internal.PlatformDependent.level=SEVERE\n"
    ),
}


@dataclass(frozen=True, slots=True)
class HomeLayout:
    """Filesystem layout of an initialised tool home."""

    root: Path

    @property
    def conf_dir(self) -> Path:
        return self.root / CONF_SUBDIR

    @property
    def mods_dir(self) -> Path:
        return self.root / MODS_SUBDIR

    @property
    def repository_dir(self) -> Path:
        return self.root / REPOSITORY_SUBDIR

    def conf_file(self, name: str) -> Path:
        """Return the absolute path of configuration file ``name``."""

        return (self.conf_dir / name).absolute()


def default_home(env: Mapping[str, str] | None = None) -> Path:
    """Return the home directory selected by ``VERTMOD_HOME`` or the default."""

    environ = os.environ if env is None else env
    override = environ.get(HOME_ENV)
    return Path(override).expanduser() if override else DEFAULT_HOME


def initialize_home(path: Path | None = None, *, use_emoji: bool = True) -> HomeLayout:
    """Create the tool home at ``path`` and seed missing configuration templates.

    Existing template files are left untouched so local edits survive.

    Args:
        path: Home directory to initialise. Defaults to :func:`default_home`.
        use_emoji: Whether the creation notice may include emoji.

    Returns:
        HomeLayout: Layout describing the initialised home.

    Raises:
        StageIOError: If the directories or templates cannot be written.
    """

    layout = HomeLayout(root=(path or default_home()).absolute())
    if not layout.root.exists():
        info(f"Creating vertmod home at {layout.root}", use_emoji=use_emoji)
    for directory in (layout.conf_dir, layout.mods_dir, layout.repository_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StageIOError(f"Unable to create directory ({exc.strerror})", path=directory) from exc
    for name, content in DEFAULT_TEMPLATES.items():
        target = layout.conf_dir / name
        if target.exists():
            continue
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StageIOError(f"Unable to write template ({exc.strerror})", path=target) from exc
    return layout


__all__ = [
    "DEFAULT_TEMPLATES",
    "HOME_ENV",
    "HomeLayout",
    "LOGGING_PROPERTIES",
    "default_home",
    "initialize_home",
]
