# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end workflows composing staging, packaging and launching."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .archive import build_archive
from .clean import clean
from .compiler import compile_java
from .config import ProjectConfig
from .descriptor import write_descriptor
from .home import HomeLayout
from .launcher import DEFAULT_SUBCOMMAND, ProcessFactory, invoke, resolve_module_identity
from .logging import info, ok, warn
from .paths import ModuleIdentity, deps_cache_dir
from .resolver import (
    DependencyResolver,
    platform_resolver,
    project_resolver,
    resolve_compile_classpath,
    resolve_libraries,
    resolve_platform,
)
from .resolver.maven import Fetcher
from .stage import Compiler, StageResult, build_stage, copy_dependencies

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildContext:
    """Collaborators shared by every workflow for one project."""

    config: ProjectConfig
    home: HomeLayout
    resolver: DependencyResolver
    platform: DependencyResolver
    compiler: Compiler = compile_java
    use_emoji: bool = True


@dataclass(slots=True)
class PackageResult:
    """Outputs of :func:`package_module`."""

    archive: Path
    descriptor: Path
    stage: StageResult | None = None
    libraries: list[Path] = field(default_factory=list)


def create_context(
    config: ProjectConfig,
    home: HomeLayout,
    *,
    fetch: Fetcher | None = None,
    use_emoji: bool = True,
) -> BuildContext:
    """Return a context wired to the Maven resolvers for ``config``."""

    return BuildContext(
        config=config,
        home=home,
        resolver=project_resolver(config, home, fetch=fetch),
        platform=platform_resolver(home, fetch=fetch),
        use_emoji=use_emoji,
    )


def stage_module(ctx: BuildContext, *, clean_first: bool | None = None) -> StageResult:
    """Stage the configured module and write its descriptor.

    The descriptor is written only when an entry point is configured; packaging
    requires one.

    Args:
        ctx: Build context.
        clean_first: Remove the staging directory beforehand. Defaults to
            ``build.clean_before_stage``.

    Returns:
        StageResult: Paths produced while staging.

    Raises:
        MissingModuleIdentity: If owner, name or version is missing.
    """

    config = ctx.config
    identity = ModuleIdentity.from_config(config)
    if config.build.clean_before_stage if clean_first is None else clean_first:
        clean(config, use_emoji=ctx.use_emoji)

    info(f"Staging module {identity}", use_emoji=ctx.use_emoji)
    libraries = resolve_libraries(config, ctx.resolver)
    compile_classpath = resolve_compile_classpath(config, ctx.resolver)
    result = build_stage(
        config,
        libraries=libraries,
        compile_classpath=compile_classpath,
        compiler=ctx.compiler,
        use_emoji=ctx.use_emoji,
    )
    if (config.module.main or "").strip():
        write_descriptor(config)
    else:
        warn("No module main configured; mod.json was not written", use_emoji=ctx.use_emoji)
    return result


def package_module(ctx: BuildContext, *, stage: bool = True) -> PackageResult:
    """Write the descriptor and build the module archive.

    Args:
        ctx: Build context.
        stage: Stage the module first; when ``False`` the existing staging tree is reused.

    Returns:
        PackageResult: Archive and descriptor locations.

    Raises:
        InvalidConfig: If the identity, entry point, name or version is missing.
    """

    config = ctx.config
    ModuleIdentity.from_config(config)
    stage_result = stage_module(ctx) if stage else None
    descriptor = write_descriptor(config)
    if stage_result is not None:
        libraries = stage_result.resolved
    else:
        libraries = resolve_libraries(config, ctx.resolver)
    archive = build_archive(config, libraries=libraries)
    ok(f"Module archive written to {archive}", use_emoji=ctx.use_emoji)
    return PackageResult(archive=archive, descriptor=descriptor, stage=stage_result, libraries=libraries)


def run_module(
    ctx: BuildContext,
    explicit: Sequence[str] = (),
    args: Sequence[str] = (),
    *,
    subcommand: str = DEFAULT_SUBCOMMAND,
    build: bool = False,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
    process_factory: ProcessFactory | None = None,
) -> int:
    """Launch the platform for a module.

    Args:
        ctx: Build context.
        explicit: Either empty, to use the configured identity, or
            ``(owner, name, version)``.
        args: Arguments passed verbatim after the module id.
        subcommand: Platform subcommand.
        build: Stage the configured module before launching.
        timeout: Seconds before the platform is stopped. Defaults to ``launcher.timeout``.
        cancel: Event that stops the platform once set.
        process_factory: Creates the platform process.

    Returns:
        int: ``0`` once the platform exits successfully.

    Raises:
        MissingModuleIdentity: If the identity is incomplete; raised before any
            resolution or process creation.
        RuntimeExecutionError: If the platform exits with a non-zero status.
        Cancelled: If the run times out or is cancelled.
    """

    owner, name, version = (tuple(explicit) + (None, None, None))[:3]
    identity = resolve_module_identity(ctx.config, owner, name, version)
    if build:
        stage_module(ctx)
    platform_jars = resolve_platform(ctx.platform)
    LOGGER.debug("Resolved %d platform jars", len(platform_jars))
    info(f"Running module {identity}", use_emoji=ctx.use_emoji)
    return invoke(
        ctx.config,
        subcommand,
        [str(identity), *args],
        identity=identity,
        platform_jars=platform_jars,
        home=ctx.home,
        timeout=timeout,
        cancel=cancel,
        process_factory=process_factory,
    )


def pull_dependencies(ctx: BuildContext) -> list[Path]:
    """Copy the resolved dependency set into the shared ``build/mods/deps`` directory.

    Returns:
        list[Path]: Files written to the dependency cache.
    """

    config = ctx.config
    destination = deps_cache_dir(config)
    libraries = resolve_libraries(config, ctx.resolver)
    written = copy_dependencies(libraries, destination, on_collision=config.build.on_name_collision)
    ok(f"Pulled {len(written)} dependencies into {destination}", use_emoji=ctx.use_emoji)
    return written


__all__ = [
    "BuildContext",
    "PackageResult",
    "create_context",
    "package_module",
    "pull_dependencies",
    "run_module",
    "stage_module",
]
