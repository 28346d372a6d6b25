# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Canonical build locations derived from project configuration.

Every helper here is pure: nothing touches the filesystem except
:func:`archive_path`, which creates the archive's parent directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .config import ProjectConfig
from .errors import InvalidConfig, MissingModuleIdentity, StageIOError

IDENTITY_SEPARATOR: Final[str] = "~"
MODS_SUBDIR: Final[str] = "mods"
LIB_SUBDIR: Final[str] = "lib"
DEPS_SUBDIR: Final[str] = "deps"
DESCRIPTOR_FILENAME: Final[str] = "mod.json"


@dataclass(frozen=True, slots=True)
class ModuleIdentity:
    """Owner, name and version naming a module."""

    owner: str
    name: str
    version: str

    def __post_init__(self) -> None:
        for part in (self.owner, self.name, self.version):
            if not part or not part.strip():
                raise MissingModuleIdentity(self.owner, self.name, self.version)
            if IDENTITY_SEPARATOR in part or "/" in part or "\\" in part:
                raise InvalidConfig(f"module identity part '{part}' must not contain '~' or path separators")

    def __str__(self) -> str:
        return IDENTITY_SEPARATOR.join((self.owner, self.name, self.version))

    @classmethod
    def from_config(cls, config: ProjectConfig) -> ModuleIdentity:
        """Return the identity declared in the ``[module]`` section.

        Raises:
            MissingModuleIdentity: If owner, name or version is missing.
        """

        module = config.module
        return cls(owner=module.owner or "", name=module.name or "", version=module.version or "")


def module_identity(config: ProjectConfig) -> str:
    """Return ``owner~name~version`` for the configured module."""

    return str(ModuleIdentity.from_config(config))


def build_root(config: ProjectConfig) -> Path:
    return config.resolve(config.build.root)


def mods_root(config: ProjectConfig) -> Path:
    """Return the directory holding every staged module (``build/mods``)."""

    return build_root(config) / MODS_SUBDIR


def staging_dir(config: ProjectConfig, identity: ModuleIdentity | None = None) -> Path:
    """Return ``build/mods/<identity>`` for ``identity`` or the configured module."""

    ident = identity or ModuleIdentity.from_config(config)
    return mods_root(config) / str(ident)


def lib_dir(config: ProjectConfig, identity: ModuleIdentity | None = None) -> Path:
    return staging_dir(config, identity) / LIB_SUBDIR


def deps_cache_dir(config: ProjectConfig) -> Path:
    """Return the shared ``build/mods/deps`` directory used by dependency pulls."""

    return mods_root(config) / DEPS_SUBDIR


def descriptor_path(config: ProjectConfig) -> Path:
    return staging_dir(config) / DESCRIPTOR_FILENAME


def archive_path(config: ProjectConfig) -> Path:
    """Return ``<target>/mods/<name>-<version>.zip``, creating its directory.

    Raises:
        InvalidConfig: If the project name or version is empty.
        StageIOError: If the archive directory cannot be created.
    """

    name = config.project.name.strip()
    version = config.project.version.strip()
    if not name or not version:
        raise InvalidConfig("project name and version are required to name the archive")
    target = config.resolve(config.project.target_path) / MODS_SUBDIR
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        failing = Path(exc.filename) if exc.filename else target
        raise StageIOError(f"Unable to create archive directory ({exc.strerror})", path=failing) from exc
    return target / f"{name}-{version}.zip"


__all__ = [
    "DESCRIPTOR_FILENAME",
    "LIB_SUBDIR",
    "MODS_SUBDIR",
    "ModuleIdentity",
    "archive_path",
    "build_root",
    "deps_cache_dir",
    "descriptor_path",
    "lib_dir",
    "module_identity",
    "mods_root",
    "staging_dir",
]
