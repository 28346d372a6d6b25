# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Maven coordinate parsing and repository layout helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

SNAPSHOT_SUFFIX: Final[str] = "-SNAPSHOT"
DEFAULT_EXTENSION: Final[str] = "jar"
# POM <type> values whose artifact file is not named after the type.
PACKAGING_TYPES: Final[dict[str, tuple[str, str | None]]] = {
    "bundle": ("jar", None),
    "ejb": ("jar", None),
    "ejb-client": ("jar", "client"),
    "java-source": ("jar", "sources"),
    "javadoc": ("jar", "javadoc"),
    "maven-plugin": ("jar", None),
    "test-jar": ("jar", "tests"),
}


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Identify a single artifact within a Maven-layout repository."""

    group: str
    artifact: str
    version: str
    extension: str = DEFAULT_EXTENSION
    classifier: str | None = None

    @classmethod
    def parse(cls, text: str) -> Coordinate:
        """Parse ``group:artifact[:extension[:classifier]]:version``.

        Raises:
            ValueError: If ``text`` has fewer than three or more than five parts.
        """

        parts = [part.strip() for part in text.strip().split(":")]
        if len(parts) < 3 or len(parts) > 5 or not all(parts):
            raise ValueError(f"Malformed coordinate '{text}'")
        if len(parts) == 3:
            group, artifact, version = parts
            return cls(group, artifact, version)
        if len(parts) == 4:
            group, artifact, extension, version = parts
            return cls(group, artifact, version, extension=extension)
        group, artifact, extension, classifier, version = parts
        return cls(group, artifact, version, extension=extension, classifier=classifier)

    @property
    def key(self) -> tuple[str, str]:
        """Return the version-less ``(group, artifact)`` pair used for conflict resolution."""

        return self.group, self.artifact

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(SNAPSHOT_SUFFIX)

    @property
    def directory(self) -> str:
        """Return the repository-relative directory holding this version."""

        return f"{self.group.replace('.', '/')}/{self.artifact}/{self.version}"

    def filename(self, version_label: str | None = None) -> str:
        """Return the artifact file name, optionally with a timestamped snapshot label."""

        label = version_label or self.version
        classifier = f"-{self.classifier}" if self.classifier else ""
        return f"{self.artifact}-{label}{classifier}.{self.extension}"

    def relative_path(self) -> str:
        return f"{self.directory}/{self.filename()}"

    def pom(self) -> Coordinate:
        """Return the coordinate of this artifact's POM."""

        return replace(self, extension="pom", classifier=None)

    def __str__(self) -> str:
        parts = [self.group, self.artifact]
        if self.extension != DEFAULT_EXTENSION or self.classifier:
            parts.append(self.extension)
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)


def type_extension(dependency_type: str) -> tuple[str, str | None]:
    """Return the file extension and implied classifier for a POM ``<type>``."""

    return PACKAGING_TYPES.get(dependency_type, (dependency_type, None))


def parse_exclusion(text: str) -> tuple[str, str]:
    """Parse ``group:artifact`` (``*`` allowed for artifact) into a key.

    Raises:
        ValueError: If ``text`` is not ``group:artifact``.
    """

    parts = [part.strip() for part in text.split(":")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Malformed exclusion '{text}'; expected group:artifact")
    return parts[0], parts[1]


__all__ = [
    "Coordinate",
    "DEFAULT_EXTENSION",
    "PACKAGING_TYPES",
    "SNAPSHOT_SUFFIX",
    "parse_exclusion",
    "type_extension",
]
