# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execution helpers for removing staged module output."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..config import ProjectConfig
from ..logging import info, ok
from .plan import CleanPlan, plan_clean, remove_path


@dataclass(slots=True)
class CleanResult:
    """Capture the outcome of a clean run."""

    removed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    def register_removed(self, path: Path) -> None:
        self.removed.append(path)

    def register_skipped(self, path: Path) -> None:
        self.skipped.append(path)

    def __bool__(self) -> bool:
        """Return ``True`` when the clean run removed or would remove anything."""

        return bool(self.removed or self.skipped)


def clean(
    config: ProjectConfig,
    *,
    dry_run: bool = False,
    include_archive: bool = False,
    include_deps: bool = False,
    use_emoji: bool = True,
) -> CleanResult:
    """Remove the module staging directory and, optionally, the archive and dependency cache.

    Args:
        config: Project configuration.
        dry_run: When ``True`` report the plan without removing anything.
        include_archive: Also remove ``<target>/mods/<name>-<version>.zip``.
        include_deps: Also remove the shared ``build/mods/deps`` directory.
        use_emoji: Whether progress output may include emoji.

    Returns:
        CleanResult: Removed paths, or the paths a dry run would remove.

    Raises:
        MissingModuleIdentity: If the module identity is incomplete.
        StageIOError: If a path cannot be removed.
    """

    plan: CleanPlan = plan_clean(config, include_archive=include_archive, include_deps=include_deps)
    result = CleanResult()
    for item in plan.items:
        if dry_run:
            result.register_skipped(item.path)
            continue
        info(f"Removing {item.reason} {item.path}", use_emoji=use_emoji)
        remove_path(item.path)
        result.register_removed(item.path)

    if dry_run:
        ok(f"Dry run complete; {len(result.skipped)} paths would be removed", use_emoji=use_emoji)
    else:
        ok(f"Removed {len(result.removed)} paths", use_emoji=use_emoji)
    return result


__all__ = ["CleanResult", "clean"]
