# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble a module staging directory from compiled code, trees and libraries."""

from __future__ import annotations

import hashlib
import logging
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Literal

from .compiler import compile_java
from .config import ProjectConfig
from .errors import DependencyNameCollision, StageIOError
from .logging import info, ok
from .paths import lib_dir, staging_dir

LOGGER = logging.getLogger(__name__)

CollisionPolicy = Literal["error", "disambiguate"]
Compiler = Callable[[ProjectConfig, Path, Sequence[Path]], list[Path]]

_HASH_CHUNK: Final[int] = 1 << 16
_HASH_PREFIX: Final[int] = 8


@dataclass(slots=True)
class StageResult:
    """Summary of a staging run."""

    staging_dir: Path
    lib_dir: Path
    compiled: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    libraries: list[Path] = field(default_factory=list)
    resolved: list[Path] = field(default_factory=list)


def ensure_staging_tree(config: ProjectConfig) -> tuple[Path, Path]:
    """Create the staging and library directories when missing.

    Returns:
        tuple[Path, Path]: The staging directory and its library subdirectory.

    Raises:
        StageIOError: If a directory cannot be created.
    """

    stage = staging_dir(config)
    libs = lib_dir(config)
    for directory in (stage, libs):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StageIOError(f"Unable to create directory ({exc.strerror})", path=directory) from exc
    return stage, libs


def copy_tree(source_root: Path, dest_root: Path) -> list[Path]:
    """Copy every regular file under ``source_root`` to the same relative path in ``dest_root``.

    Missing source roots are skipped. Existing destination files are overwritten;
    nothing at the destination is deleted.

    Args:
        source_root: Directory whose files are copied.
        dest_root: Directory receiving the copies.

    Returns:
        list[Path]: Destination paths written, in sorted source order.

    Raises:
        StageIOError: If a file cannot be copied.
    """

    if not source_root.is_dir():
        LOGGER.debug("Skipping missing tree %s", source_root)
        return []
    written: list[Path] = []
    for source in sorted(source_root.rglob("*")):
        if not source.is_file():
            continue
        target = dest_root / source.relative_to(source_root)
        _copy_file(source, target)
        written.append(target)
    return written


def plan_library_names(
    dependencies: Sequence[Path],
    *,
    on_collision: CollisionPolicy = "error",
) -> list[tuple[str, Path]]:
    """Assign each dependency the file name it is staged and archived under.

    Artifacts sharing a file name but not content are either rejected or, with
    ``on_collision="disambiguate"``, renamed with a short content hash. Repeated
    paths and byte-identical artifacts collapse to a single entry.

    Args:
        dependencies: Resolved dependency paths in resolver order.
        on_collision: Policy for distinct artifacts sharing a file name.

    Returns:
        list[tuple[str, Path]]: ``(file name, source path)`` pairs in resolver order.

    Raises:
        DependencyNameCollision: If names collide and the policy is ``"error"``.
    """

    by_name: dict[str, list[Path]] = {}
    for path in dict.fromkeys(dependencies):
        by_name.setdefault(path.name, []).append(path)

    names: dict[Path, str] = {}
    for name, paths in by_name.items():
        if len(paths) == 1:
            names[paths[0]] = name
            continue
        digests: dict[str, Path] = {}
        for path in paths:
            digests.setdefault(_digest(path), path)
        if len(digests) == 1:
            names[paths[0]] = name
            continue
        if on_collision == "error":
            raise DependencyNameCollision(name, paths)
        first = paths[0]
        names[first] = name
        for digest, path in digests.items():
            if path is first:
                continue
            names[path] = f"{Path(name).stem}-{digest[:_HASH_PREFIX]}{Path(name).suffix}"

    return [(names[path], path) for path in dict.fromkeys(dependencies) if path in names]


def copy_dependencies(
    dependencies: Sequence[Path],
    dest_dir: Path,
    *,
    on_collision: CollisionPolicy = "error",
) -> list[Path]:
    """Copy resolved dependencies into ``dest_dir`` under their planned names.

    Raises:
        DependencyNameCollision: If names collide and the policy is ``"error"``.
        StageIOError: If a file cannot be copied.
    """

    written: list[Path] = []
    for name, source in plan_library_names(dependencies, on_collision=on_collision):
        target = dest_dir / name
        LOGGER.debug("Copying %s to %s", source, target)
        _copy_file(source, target)
        written.append(target)
    return written


def build_stage(
    config: ProjectConfig,
    *,
    libraries: Sequence[Path],
    compile_classpath: Sequence[Path],
    compiler: Compiler = compile_java,
    use_emoji: bool = True,
) -> StageResult:
    """Populate the staging directory for the configured module.

    Steps run strictly in order: ensure tree, compile, copy sources, copy
    resources, copy dependencies.

    Args:
        config: Project configuration.
        libraries: Resolved runtime dependencies copied into ``lib/``.
        compile_classpath: Libraries visible while compiling.
        compiler: Compilation step; defaults to :func:`compile_java`.
        use_emoji: Whether progress output may include emoji.

    Returns:
        StageResult: Paths produced by each step.
    """

    stage, libs = ensure_staging_tree(config)
    result = StageResult(staging_dir=stage, lib_dir=libs, resolved=list(libraries))

    info("Java files will be compiled and placed in module folder", use_emoji=use_emoji)
    result.compiled = compiler(config, stage, compile_classpath)

    for root in config.project.source_paths:
        result.copied.extend(copy_tree(config.resolve(root), stage))
    info("Resources will be copied from resource paths", use_emoji=use_emoji)
    for root in config.project.resource_paths:
        result.copied.extend(copy_tree(config.resolve(root), stage))

    info("Dependencies will be copied from dependencies", use_emoji=use_emoji)
    result.libraries = copy_dependencies(libraries, libs, on_collision=config.build.on_name_collision)

    ok(
        f"Staged {len(result.copied)} files and {len(result.libraries)} libraries into {stage}",
        use_emoji=use_emoji,
    )
    return result


def _copy_file(source: Path, target: Path) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as exc:
        failing = Path(exc.filename) if exc.filename else source
        raise StageIOError(f"Unable to copy {source} ({exc.strerror})", path=failing) from exc


def _digest(path: Path) -> str:
    sha = hashlib.sha256()
    try:
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(_HASH_CHUNK), b""):
                sha.update(chunk)
    except OSError as exc:
        raise StageIOError(f"Unable to read dependency ({exc.strerror})", path=path) from exc
    return sha.hexdigest()


__all__ = [
    "CollisionPolicy",
    "StageResult",
    "build_stage",
    "copy_dependencies",
    "copy_tree",
    "ensure_staging_tree",
    "plan_library_names",
]
