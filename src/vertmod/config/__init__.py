# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project configuration models and loaders."""

from __future__ import annotations

from .models import (
    ArchiveSection,
    BuildSection,
    ConfigError,
    DependencySpec,
    LauncherSection,
    LicenseConfig,
    ModuleSection,
    ProjectConfig,
    ProjectSection,
    RepositoryConfig,
)
from .sources import CONFIG_FILENAME, TomlConfigSource, load_project_config

__all__ = [
    "ArchiveSection",
    "BuildSection",
    "CONFIG_FILENAME",
    "ConfigError",
    "DependencySpec",
    "LauncherSection",
    "LicenseConfig",
    "ModuleSection",
    "ProjectConfig",
    "ProjectSection",
    "RepositoryConfig",
    "TomlConfigSource",
    "load_project_config",
]
