# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models describing a module project."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAVEN_CENTRAL_URL: Final[str] = "https://repo1.maven.org/maven2/"
DEFAULT_EXCLUDED_PROFILES: Final[tuple[str, ...]] = ("provided",)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class LicenseConfig(BaseModel):
    """License metadata copied into the module descriptor."""

    model_config = ConfigDict(validate_assignment=True)

    name: str | None = None
    url: str | None = None


class DependencySpec(BaseModel):
    """A declared library dependency in ``group:artifact[:ext[:classifier]]:version`` form."""

    model_config = ConfigDict(validate_assignment=True)

    coordinate: str
    profile: str | None = None
    exclusions: list[str] = Field(default_factory=list)
    optional: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_coordinate(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"coordinate": value}
        return value

    @field_validator("coordinate")
    @classmethod
    def _validate_coordinate(cls, value: str) -> str:
        parts = value.strip().split(":")
        if len(parts) < 3 or not all(parts):
            raise ValueError(f"dependency coordinate '{value}' must look like group:artifact:version")
        return value.strip()


class RepositoryConfig(BaseModel):
    """Remote Maven-layout repository used during dependency resolution."""

    model_config = ConfigDict(validate_assignment=True)

    url: str
    snapshots: bool = True

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_url(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"url": value}
        return value

    @field_validator("url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"


def _default_repositories() -> dict[str, RepositoryConfig]:
    return {"central": RepositoryConfig(url=MAVEN_CENTRAL_URL, snapshots=False)}


class ProjectSection(BaseModel):
    """Project identity, layout and dependency declarations."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    version: str = ""
    description: str | None = None
    url: str | None = None
    license: LicenseConfig | None = None
    source_paths: list[Path] = Field(default_factory=lambda: [Path("src")])
    java_source_paths: list[Path] = Field(default_factory=lambda: [Path("src/java")])
    resource_paths: list[Path] = Field(default_factory=lambda: [Path("resources")])
    compile_path: Path = Path("target/classes")
    target_path: Path = Path("target")
    dependencies: list[DependencySpec] = Field(default_factory=list)
    repositories: dict[str, RepositoryConfig] = Field(default_factory=_default_repositories)


class ModuleSection(BaseModel):
    """Module identity, entry point and pass-through descriptor keys."""

    model_config = ConfigDict(validate_assignment=True)

    owner: str | None = None
    name: str | None = None
    version: str | None = None
    main: str | None = None
    descriptor: dict[str, Any] = Field(default_factory=dict)


class BuildSection(BaseModel):
    """Staging behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    root: Path = Path("build")
    exclude_profiles: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_PROFILES))
    clean_before_stage: bool = False
    on_name_collision: Literal["error", "disambiguate"] = "error"


class ArchiveSection(BaseModel):
    """Archive assembly behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    reproducible: bool = True


class LauncherSection(BaseModel):
    """Platform launch behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    java_cmd: str | None = None
    recursive_libs: bool = False
    timeout: float | None = Field(default=None, ge=0)
    conf_on_classpath: bool = True


class ProjectConfig(BaseModel):
    """Top-level configuration for a module project rooted at ``root``."""

    model_config = ConfigDict(validate_assignment=True)

    root: Path = Field(default_factory=Path.cwd)
    project: ProjectSection = Field(default_factory=ProjectSection)
    module: ModuleSection = Field(default_factory=ModuleSection)
    build: BuildSection = Field(default_factory=BuildSection)
    archive: ArchiveSection = Field(default_factory=ArchiveSection)
    launcher: LauncherSection = Field(default_factory=LauncherSection)

    def resolve(self, path: Path) -> Path:
        """Return ``path`` anchored at the project root when it is relative.

        Args:
            path: Configured path, absolute or relative to the project root.

        Returns:
            Path: Absolute path for ``path``.
        """

        return path if path.is_absolute() else self.root / path

    def dependencies_excluding(self, profiles: list[str] | tuple[str, ...]) -> list[DependencySpec]:
        """Return declared dependencies whose profile is not in ``profiles``."""

        excluded = set(profiles)
        return [dep for dep in self.project.dependencies if dep.profile is None or dep.profile not in excluded]


__all__ = [
    "ArchiveSection",
    "BuildSection",
    "ConfigError",
    "DEFAULT_EXCLUDED_PROFILES",
    "DependencySpec",
    "LauncherSection",
    "LicenseConfig",
    "MAVEN_CENTRAL_URL",
    "ModuleSection",
    "ProjectConfig",
    "ProjectSection",
    "RepositoryConfig",
]
