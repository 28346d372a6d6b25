# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal Maven POM model covering what dependency resolution needs."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET  # nosec B405 - POMs come from configured repositories
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .coordinates import DEFAULT_EXTENSION, Coordinate

_PROPERTY_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([^}]+)\}")
_MAX_INTERPOLATION_PASSES: Final[int] = 10


@dataclass(frozen=True, slots=True)
class PomDependency:
    """A ``<dependency>`` element, uninterpolated."""

    group: str
    artifact: str
    version: str | None = None
    scope: str = "compile"
    type: str = DEFAULT_EXTENSION
    classifier: str | None = None
    optional: bool = False
    exclusions: frozenset[tuple[str, str]] = frozenset()

    @property
    def key(self) -> tuple[str, str]:
        return self.group, self.artifact


@dataclass(slots=True)
class Pom:
    """Parsed POM contents prior to parent inheritance."""

    group: str | None
    artifact: str
    version: str | None
    parent: Coordinate | None = None
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: list[PomDependency] = field(default_factory=list)
    managed: list[PomDependency] = field(default_factory=list)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    if element is None:
        return None
    for candidate in element:
        if _local(candidate.tag) == name:
            return candidate
    return None


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [candidate for candidate in element if _local(candidate.tag) == name]


def _text(element: ET.Element | None, name: str) -> str | None:
    node = _child(element, name)
    if node is None or node.text is None:
        return None
    value = node.text.strip()
    return value or None


def _parse_dependency(element: ET.Element) -> PomDependency | None:
    group = _text(element, "groupId")
    artifact = _text(element, "artifactId")
    if group is None or artifact is None:
        return None
    exclusions = frozenset(
        (_text(node, "groupId") or "*", _text(node, "artifactId") or "*")
        for node in _children(_child(element, "exclusions"), "exclusion")
    )
    return PomDependency(
        group=group,
        artifact=artifact,
        version=_text(element, "version"),
        scope=_text(element, "scope") or "compile",
        type=_text(element, "type") or DEFAULT_EXTENSION,
        classifier=_text(element, "classifier"),
        optional=(_text(element, "optional") or "false").lower() == "true",
        exclusions=exclusions,
    )


def parse_pom(path: Path) -> Pom:
    """Parse the POM at ``path``.

    Raises:
        ValueError: If the document is not well-formed or lacks an ``artifactId``.
    """

    try:
        root = ET.parse(path).getroot()  # nosec B314
    except ET.ParseError as exc:
        raise ValueError(f"Malformed POM {path}: {exc}") from exc

    artifact = _text(root, "artifactId")
    if artifact is None:
        raise ValueError(f"POM {path} has no artifactId")

    parent_node = _child(root, "parent")
    parent: Coordinate | None = None
    if parent_node is not None:
        p_group = _text(parent_node, "groupId")
        p_artifact = _text(parent_node, "artifactId")
        p_version = _text(parent_node, "version")
        if p_group and p_artifact and p_version:
            parent = Coordinate(p_group, p_artifact, p_version, extension="pom")

    properties_node = _child(root, "properties")
    properties = {
        _local(node.tag): (node.text or "").strip()
        for node in (list(properties_node) if properties_node is not None else [])
    }
    dependencies = [
        dep for node in _children(_child(root, "dependencies"), "dependency") if (dep := _parse_dependency(node))
    ]
    management = _child(_child(root, "dependencyManagement"), "dependencies")
    managed = [dep for node in _children(management, "dependency") if (dep := _parse_dependency(node))]

    return Pom(
        group=_text(root, "groupId"),
        artifact=artifact,
        version=_text(root, "version"),
        parent=parent,
        properties=properties,
        dependencies=dependencies,
        managed=managed,
    )


def interpolate(value: str | None, properties: dict[str, str]) -> str | None:
    """Replace ``${name}`` references in ``value`` using ``properties``.

    Unknown references are left in place.
    """

    if value is None:
        return None
    current = value
    for _ in range(_MAX_INTERPOLATION_PASSES):
        updated = _PROPERTY_PATTERN.sub(lambda match: properties.get(match.group(1), match.group(0)), current)
        if updated == current:
            break
        current = updated
    return current


__all__ = ["Pom", "PomDependency", "interpolate", "parse_pom"]
