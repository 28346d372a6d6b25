# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Planning helpers for removing staged module output."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from ..config import ProjectConfig
from ..errors import StageIOError
from ..paths import MODS_SUBDIR, deps_cache_dir, staging_dir


@dataclass(slots=True)
class CleanPlanItem:
    """Describe a single filesystem path scheduled for removal."""

    path: Path
    reason: str


@dataclass(slots=True)
class CleanPlan:
    """Paths that a clean run removes, in removal order."""

    items: list[CleanPlanItem] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        """Return the filesystem paths slated for removal.

        Returns:
            list[Path]: Paths that will be removed when the plan executes.
        """

        return [item.path for item in self.items]


class CleanPlanner:
    """Build a clean plan for the configured module."""

    def __init__(self, *, include_archive: bool = False, include_deps: bool = False) -> None:
        """Initialise the planner.

        Args:
            include_archive: Also remove the module archive under ``<target>/mods``.
            include_deps: Also remove the shared ``build/mods/deps`` directory.
        """

        self._include_archive = include_archive
        self._include_deps = include_deps

    def plan(self, config: ProjectConfig) -> CleanPlan:
        """Return the existing paths to remove for ``config``.

        Raises:
            MissingModuleIdentity: If the module identity is incomplete.
        """

        candidates = [CleanPlanItem(path=staging_dir(config), reason="staging directory")]
        if self._include_deps:
            candidates.append(CleanPlanItem(path=deps_cache_dir(config), reason="dependency cache"))
        if self._include_archive:
            archive = _archive_candidate(config)
            if archive is not None:
                candidates.append(CleanPlanItem(path=archive, reason="module archive"))
        return CleanPlan(items=[item for item in candidates if item.path.exists() or item.path.is_symlink()])


def plan_clean(config: ProjectConfig, *, include_archive: bool = False, include_deps: bool = False) -> CleanPlan:
    """Return the clean plan for ``config``."""

    return CleanPlanner(include_archive=include_archive, include_deps=include_deps).plan(config)


def _archive_candidate(config: ProjectConfig) -> Path | None:
    name = config.project.name.strip()
    version = config.project.version.strip()
    if not name or not version:
        return None
    return config.resolve(config.project.target_path) / MODS_SUBDIR / f"{name}-{version}.zip"


def remove_path(path: Path) -> None:
    """Remove ``path`` from the filesystem.

    Args:
        path: File, symlink or directory scheduled for deletion.

    Raises:
        StageIOError: If the path cannot be removed.
    """

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as exc:
        failing = Path(exc.filename) if exc.filename else path
        raise StageIOError(f"Unable to remove ({exc.strerror})", path=failing) from exc


__all__ = ["CleanPlan", "CleanPlanItem", "CleanPlanner", "plan_clean", "remove_path"]
