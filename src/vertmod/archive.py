# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble the distributable module archive."""

from __future__ import annotations

import logging
import os
import shutil
import zipfile
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import ProjectConfig
from .errors import StageIOError
from .paths import LIB_SUBDIR, MODS_SUBDIR, archive_path, lib_dir, staging_dir
from .stage import CollisionPolicy, plan_library_names

LOGGER = logging.getLogger(__name__)

FIXED_TIMESTAMP: Final[tuple[int, int, int, int, int, int]] = (1980, 1, 1, 0, 0, 0)
_UNIX_SYSTEM: Final[int] = 3
_FILE_MODE: Final[int] = 0o100644
_DIR_MODE: Final[int] = 0o040755
_MSDOS_DIRECTORY_FLAG: Final[int] = 0x10
_COPY_BUFFER: Final[int] = 1 << 20


@dataclass(frozen=True, slots=True)
class ClasspathEntry:
    """A file or directory destined for the archive under ``name``."""

    name: str
    content: Path

    @property
    def is_directory(self) -> bool:
        return self.content.is_dir()


def entry_points(root: Path, *, skip: Collection[Path] = ()) -> list[ClasspathEntry]:
    """Enumerate every directory and file under ``root`` as classpath entries.

    Names are POSIX paths relative to ``root``; the root itself is never an
    entry. Enumeration follows the filesystem's directory order.

    Args:
        root: Directory to walk. Missing roots produce no entries.
        skip: Directories whose subtrees (themselves included) are not walked.

    Returns:
        list[ClasspathEntry]: Entries in walk order.
    """

    if not root.is_dir():
        return []
    skipped = {path.absolute() for path in skip}
    entries: list[ClasspathEntry] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = [name for name in dirnames if (current / name).absolute() not in skipped]
        for name in (*dirnames, *filenames):
            content = current / name
            relative = content.relative_to(root).as_posix().lstrip("/")
            if relative:
                entries.append(ClasspathEntry(name=relative, content=content))
    return entries


def entry_point_roots(config: ProjectConfig) -> list[Path]:
    """Return the staging directory, the compile output directory, then each source root."""

    return [
        staging_dir(config),
        config.resolve(config.project.compile_path),
        *(config.resolve(root) for root in config.project.source_paths),
    ]


def collect_classpath_entries(config: ProjectConfig) -> list[ClasspathEntry]:
    """Concatenate entries from every entry-point root, keeping the first of each name.

    The staging ``lib/`` subtree is left out; libraries are written from the
    resolved dependency set. The archive output directory is never walked.
    """

    skip = (lib_dir(config), config.resolve(config.project.target_path) / MODS_SUBDIR)
    seen: set[str] = set()
    entries: list[ClasspathEntry] = []
    for root in entry_point_roots(config):
        for entry in entry_points(root, skip=skip):
            if entry.name in seen:
                continue
            seen.add(entry.name)
            entries.append(entry)
    return entries


def write_archive(
    outfile: Path,
    entries: Sequence[ClasspathEntry],
    libraries: Sequence[Path],
    *,
    reproducible: bool = True,
    on_collision: CollisionPolicy = "error",
) -> Path:
    """Write ``entries`` and a ``lib/`` directory of ``libraries`` into ``outfile``.

    With ``reproducible`` set, entries are sorted by name and written with fixed
    timestamps and permissions so the archive depends only on content.
    Otherwise entries keep their given order and filesystem metadata. A
    partially written archive is removed when writing fails.

    Args:
        outfile: Archive path, overwritten when present.
        entries: Classpath entries to write.
        libraries: Resolved dependency files written under ``lib/``.
        reproducible: Whether to normalise order and metadata.
        on_collision: Policy for distinct libraries sharing a file name.

    Returns:
        Path: ``outfile``.

    Raises:
        DependencyNameCollision: If library names collide under the ``"error"`` policy.
        StageIOError: If reading an input or writing the archive fails.
    """

    library_names = plan_library_names(libraries, on_collision=on_collision)
    ordered_entries = sorted(entries, key=lambda entry: entry.name) if reproducible else list(entries)
    if reproducible:
        library_names = sorted(library_names, key=lambda item: item[0])

    current: Path = outfile
    try:
        with zipfile.ZipFile(outfile, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for entry in ordered_entries:
                current = entry.content
                if entry.is_directory:
                    _write_directory(archive, f"{entry.name}/", entry.content, reproducible)
                else:
                    _write_file(archive, entry.name, entry.content, reproducible)
            current = outfile
            _write_directory(archive, f"{LIB_SUBDIR}/", None, reproducible)
            for name, source in library_names:
                current = source
                _write_file(archive, f"{LIB_SUBDIR}/{name}", source, reproducible)
    except (OSError, zipfile.BadZipFile) as exc:
        outfile.unlink(missing_ok=True)
        failing = Path(exc.filename) if isinstance(exc, OSError) and exc.filename else current
        raise StageIOError(f"Unable to write archive {outfile} ({exc})", path=failing) from exc
    LOGGER.debug("Wrote %d entries and %d libraries to %s", len(ordered_entries), len(library_names), outfile)
    return outfile


def build_archive(config: ProjectConfig, *, libraries: Sequence[Path]) -> Path:
    """Build ``<target>/mods/<name>-<version>.zip`` from the staged module.

    Args:
        config: Project configuration.
        libraries: Resolved dependency set written under ``lib/``.

    Returns:
        Path: The archive location.
    """

    return write_archive(
        archive_path(config),
        collect_classpath_entries(config),
        libraries,
        reproducible=config.archive.reproducible,
        on_collision=config.build.on_name_collision,
    )


def _entry_info(name: str, source: Path | None, reproducible: bool, *, directory: bool) -> zipfile.ZipInfo:
    if not reproducible and source is not None:
        info = zipfile.ZipInfo.from_file(source, name)
    else:
        info = zipfile.ZipInfo(name, date_time=FIXED_TIMESTAMP)
        info.create_system = _UNIX_SYSTEM
        info.external_attr = (_DIR_MODE << 16) | _MSDOS_DIRECTORY_FLAG if directory else _FILE_MODE << 16
    info.compress_type = zipfile.ZIP_STORED if directory else zipfile.ZIP_DEFLATED
    return info


def _write_directory(archive: zipfile.ZipFile, name: str, source: Path | None, reproducible: bool) -> None:
    archive.writestr(_entry_info(name, source, reproducible, directory=True), b"")


def _write_file(archive: zipfile.ZipFile, name: str, source: Path, reproducible: bool) -> None:
    info = _entry_info(name, source, reproducible, directory=False)
    with source.open("rb") as handle, archive.open(info, "w") as target:
        shutil.copyfileobj(handle, target, _COPY_BUFFER)


__all__ = [
    "ClasspathEntry",
    "FIXED_TIMESTAMP",
    "build_archive",
    "collect_classpath_entries",
    "entry_point_roots",
    "entry_points",
    "write_archive",
]
