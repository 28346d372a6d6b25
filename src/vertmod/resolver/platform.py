# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pinned platform runtime coordinates and launch constants."""

from __future__ import annotations

from typing import Final

from ..config import DependencySpec, RepositoryConfig

PLATFORM_VERSION: Final[str] = "2.1.1"
BOOTSTRAP_MAIN_CLASS: Final[str] = "org.vertx.java.platform.impl.cli.Starter"
MODS_PROPERTY: Final[str] = "vertx.mods"
LOGGING_CONFIG_PROPERTY: Final[str] = "java.util.logging.config.file"

PLATFORM_DEPENDENCIES: Final[tuple[DependencySpec, ...]] = (
    DependencySpec(coordinate=f"io.vertx:vertx-core:{PLATFORM_VERSION}"),
    DependencySpec(coordinate=f"io.vertx:vertx-platform:{PLATFORM_VERSION}"),
    DependencySpec(coordinate=f"io.vertx:vertx-hazelcast:{PLATFORM_VERSION}"),
)

PLATFORM_REPOSITORIES: Final[dict[str, RepositoryConfig]] = {
    "central": RepositoryConfig(url="https://repo1.maven.org/maven2/", snapshots=False),
    "sonatype": RepositoryConfig(url="https://oss.sonatype.org/content/repositories/snapshots/", snapshots=True),
    "bintray": RepositoryConfig(url="https://dl.bintray.com/"),
}

__all__ = [
    "BOOTSTRAP_MAIN_CLASS",
    "LOGGING_CONFIG_PROPERTY",
    "MODS_PROPERTY",
    "PLATFORM_DEPENDENCIES",
    "PLATFORM_REPOSITORIES",
    "PLATFORM_VERSION",
]
