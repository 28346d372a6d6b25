# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dependency resolution for project libraries and the platform runtime."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..config import DependencySpec, ProjectConfig
from ..home import HomeLayout
from .coordinates import Coordinate, parse_exclusion
from .maven import Fetcher, MavenResolver, download
from .platform import PLATFORM_DEPENDENCIES, PLATFORM_REPOSITORIES


@runtime_checkable
class DependencyResolver(Protocol):
    """Turn dependency declarations into an ordered list of artifact files."""

    def resolve(self, dependencies: Sequence[DependencySpec]) -> list[Path]:
        """Return absolute artifact paths for ``dependencies``."""
        ...


def project_resolver(config: ProjectConfig, home: HomeLayout, *, fetch: Fetcher | None = None) -> MavenResolver:
    """Return a resolver over the project's repositories and the home artifact cache."""

    return MavenResolver(config.project.repositories, home.repository_dir, fetch=fetch)


def platform_resolver(home: HomeLayout, *, fetch: Fetcher | None = None) -> MavenResolver:
    """Return a resolver over the pinned platform repositories."""

    return MavenResolver(PLATFORM_REPOSITORIES, home.repository_dir, fetch=fetch)


def resolve_libraries(config: ProjectConfig, resolver: DependencyResolver) -> list[Path]:
    """Resolve the project's dependencies, skipping excluded profiles."""

    return _ordered_unique(resolver.resolve(config.dependencies_excluding(config.build.exclude_profiles)))


def resolve_compile_classpath(config: ProjectConfig, resolver: DependencyResolver) -> list[Path]:
    """Resolve every declared dependency, excluded profiles included."""

    return _ordered_unique(resolver.resolve(config.project.dependencies))


def resolve_platform(resolver: DependencyResolver) -> list[Path]:
    """Resolve the pinned platform runtime dependency set."""

    return _ordered_unique(resolver.resolve(PLATFORM_DEPENDENCIES))


def _ordered_unique(paths: Sequence[Path]) -> list[Path]:
    return list(dict.fromkeys(paths))


__all__ = [
    "Coordinate",
    "DependencyResolver",
    "Fetcher",
    "MavenResolver",
    "download",
    "parse_exclusion",
    "platform_resolver",
    "project_resolver",
    "resolve_compile_classpath",
    "resolve_libraries",
    "resolve_platform",
]
