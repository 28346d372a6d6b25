# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve Maven coordinates into artifact files cached in a local repository.

Resolution follows Maven's rules closely enough for platform modules: the
dependency graph is walked breadth-first, the nearest declaration of a
``group:artifact`` wins, ``compile`` and ``runtime`` scopes are followed
transitively, optional dependencies and exclusions are honoured, and versions
missing from a ``<dependency>`` are taken from ``<dependencyManagement>``
(including imported BOMs) across the parent chain.
"""

from __future__ import annotations

import logging
import ssl
import tempfile
import urllib.error
import urllib.request
import xml.etree.ElementTree as ET  # nosec B405 - metadata comes from configured repositories
from collections import deque
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final
from urllib.parse import urlparse

from ..config import DependencySpec, RepositoryConfig
from ..errors import DependencyResolutionError
from .coordinates import Coordinate, parse_exclusion, type_extension
from .pom import Pom, PomDependency, interpolate, parse_pom

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[str, Path], None]

_SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"https", "http", "file"})
_TRANSITIVE_SCOPES: Final[frozenset[str]] = frozenset({"compile", "runtime"})
_USER_AGENT: Final[str] = "vertmod-resolver/1.0"
_METADATA_FILENAME: Final[str] = "maven-metadata.xml"


def download(url: str, destination: Path) -> None:
    """Download ``url`` into ``destination``.

    Args:
        url: Artifact URL using an ``https``, ``http`` or ``file`` scheme.
        destination: File path where the payload will be stored.

    Raises:
        FileNotFoundError: If the repository reports the artifact as absent.
        OSError: For any other transport failure.
    """

    parsed = urlparse(url)
    if parsed.scheme.lower() not in _SUPPORTED_SCHEMES:
        raise ValueError(f"Unsupported download scheme '{parsed.scheme}' for {url}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    request = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    opener = urllib.request.build_opener(urllib.request.HTTPSHandler(context=ssl.create_default_context()))
    try:
        with opener.open(request) as response, destination.open("wb") as handle:  # nosec B310 - scheme checked above
            handle.write(response.read())
    except urllib.error.HTTPError as exc:
        destination.unlink(missing_ok=True)
        if exc.code == 404:
            raise FileNotFoundError(url) from exc
        raise OSError(f"HTTP {exc.code} fetching {url}") from exc
    except urllib.error.URLError as exc:
        destination.unlink(missing_ok=True)
        if isinstance(exc.reason, FileNotFoundError):
            raise FileNotFoundError(url) from exc
        raise OSError(f"{exc.reason} fetching {url}") from exc


@dataclass(frozen=True, slots=True)
class _EffectivePom:
    """POM with parent inheritance and interpolation applied."""

    coordinate: Coordinate
    properties: Mapping[str, str]
    dependencies: tuple[PomDependency, ...]
    managed: Mapping[tuple[str, str], PomDependency]


@dataclass(frozen=True, slots=True)
class _Pending:
    coordinate: Coordinate
    exclusions: frozenset[tuple[str, str]]
    via: str


class MavenResolver:
    """Resolve dependency declarations against Maven-layout repositories."""

    def __init__(
        self,
        repositories: Mapping[str, RepositoryConfig],
        local_repository: Path,
        *,
        fetch: Fetcher | None = None,
    ) -> None:
        """Initialise the resolver.

        Args:
            repositories: Remote repositories searched in declaration order.
            local_repository: Directory caching downloaded artifacts and POMs.
            fetch: Transport used to download files; defaults to :func:`download`.
        """

        self._repositories = dict(repositories)
        self._local = local_repository
        self._fetch = fetch or download
        self._poms: dict[Coordinate, _EffectivePom] = {}

    @property
    def local_repository(self) -> Path:
        return self._local

    def resolve(self, dependencies: Sequence[DependencySpec]) -> list[Path]:
        """Return artifact files for ``dependencies`` and their transitive closure.

        Args:
            dependencies: Declared dependencies in priority order.

        Returns:
            list[Path]: Absolute artifact paths in first-seen order, without duplicates.

        Raises:
            DependencyResolutionError: If any artifact or POM cannot be found,
                or a declaration is malformed.
        """

        queue: deque[_Pending] = deque()
        for spec in dependencies:
            try:
                coordinate = Coordinate.parse(spec.coordinate)
                exclusions = frozenset(parse_exclusion(entry) for entry in spec.exclusions)
            except ValueError as exc:
                raise DependencyResolutionError(spec.coordinate, str(exc)) from exc
            queue.append(_Pending(coordinate, exclusions, via="<project>"))

        selected: dict[tuple[str, str], Coordinate] = {}
        order: list[Coordinate] = []
        while queue:
            pending = queue.popleft()
            coordinate = pending.coordinate
            if coordinate.key in selected:
                continue
            selected[coordinate.key] = coordinate
            LOGGER.debug("Selected %s (via %s)", coordinate, pending.via)
            order.append(coordinate)
            for child in self._transitive(coordinate, pending.exclusions):
                if child.coordinate.key not in selected:
                    queue.append(child)

        paths: list[Path] = []
        seen: set[Path] = set()
        for coordinate in order:
            if coordinate.extension == "pom":
                continue
            path = self._artifact(coordinate)
            if path not in seen:
                seen.add(path)
                paths.append(path)
        return paths

    def _transitive(self, coordinate: Coordinate, exclusions: frozenset[tuple[str, str]]) -> list[_Pending]:
        effective = self._effective_pom(coordinate.pom())
        children: list[_Pending] = []
        for dep in effective.dependencies:
            if dep.scope not in _TRANSITIVE_SCOPES or dep.optional:
                continue
            if _is_excluded(dep.key, exclusions):
                continue
            version = dep.version or _managed_version(effective, dep)
            if not version:
                raise DependencyResolutionError(
                    f"{dep.group}:{dep.artifact}",
                    f"no version declared or managed (required by {coordinate})",
                )
            extension, implied_classifier = type_extension(dep.type)
            child = Coordinate(
                dep.group,
                dep.artifact,
                version,
                extension=extension,
                classifier=dep.classifier or implied_classifier,
            )
            children.append(_Pending(child, exclusions | dep.exclusions, via=str(coordinate)))
        return children

    def _effective_pom(self, coordinate: Coordinate, stack: tuple[Coordinate, ...] = ()) -> _EffectivePom:
        cached = self._poms.get(coordinate)
        if cached is not None:
            return cached
        if coordinate in stack:
            raise DependencyResolutionError(str(coordinate), "circular parent or import chain")

        pom_path = self._artifact(coordinate)
        try:
            pom = parse_pom(pom_path)
        except ValueError as exc:
            raise DependencyResolutionError(str(coordinate), str(exc)) from exc

        parent = self._effective_pom(pom.parent, stack + (coordinate,)) if pom.parent else None
        properties = _pom_properties(pom, coordinate, parent)

        managed: dict[tuple[str, str], PomDependency] = dict(parent.managed) if parent else {}
        for dep in pom.managed:
            resolved = _interpolate_dependency(dep, properties)
            if resolved.scope == "import" and resolved.type == "pom" and resolved.version:
                bom = self._effective_pom(
                    Coordinate(resolved.group, resolved.artifact, resolved.version, extension="pom"),
                    stack + (coordinate,),
                )
                for key, imported in bom.managed.items():
                    managed.setdefault(key, imported)
                continue
            managed[resolved.key] = resolved

        inherited = list(parent.dependencies) if parent else []
        own = [_interpolate_dependency(dep, properties) for dep in pom.dependencies]
        own_keys = {dep.key for dep in own}
        dependencies = tuple([dep for dep in inherited if dep.key not in own_keys] + own)

        effective = _EffectivePom(
            coordinate=coordinate,
            properties=properties,
            dependencies=dependencies,
            managed=managed,
        )
        self._poms[coordinate] = effective
        return effective

    def _artifact(self, coordinate: Coordinate) -> Path:
        """Return the cached file for ``coordinate``, downloading it when absent."""

        local = self._local / coordinate.relative_path()
        if local.is_file():
            return local.absolute()

        failures: list[str] = []
        for name, repository in self._repositories.items():
            if coordinate.is_snapshot and not repository.snapshots:
                continue
            remote_name = self._remote_filename(coordinate, repository)
            url = f"{repository.url}{coordinate.directory}/{remote_name}"
            LOGGER.debug("Fetching %s from %s", coordinate, url)
            try:
                self._download_atomically(url, local)
            except FileNotFoundError:
                failures.append(f"{name}: not found")
                continue
            except OSError as exc:
                failures.append(f"{name}: {exc}")
                continue
            return local.absolute()

        reason = "; ".join(failures) if failures else "no repository accepts this version"
        raise DependencyResolutionError(str(coordinate), reason)

    def _remote_filename(self, coordinate: Coordinate, repository: RepositoryConfig) -> str:
        if not coordinate.is_snapshot:
            return coordinate.filename()
        metadata_url = f"{repository.url}{coordinate.directory}/{_METADATA_FILENAME}"
        with tempfile.TemporaryDirectory() as scratch:
            metadata_path = Path(scratch) / _METADATA_FILENAME
            try:
                self._fetch(metadata_url, metadata_path)
            except OSError:
                return coordinate.filename()
            label = _snapshot_label(metadata_path, coordinate)
        return coordinate.filename(label)

    def _download_atomically(self, url: str, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(f"{destination.name}.part")
        try:
            self._fetch(url, partial)
            partial.replace(destination)
        finally:
            partial.unlink(missing_ok=True)


def _is_excluded(key: tuple[str, str], exclusions: frozenset[tuple[str, str]]) -> bool:
    group, artifact = key
    return any(
        (ex_group in (group, "*")) and (ex_artifact in (artifact, "*")) for ex_group, ex_artifact in exclusions
    )


def _managed_version(effective: _EffectivePom, dep: PomDependency) -> str | None:
    managed = effective.managed.get(dep.key)
    return managed.version if managed else None


def _pom_properties(
    pom: Pom,
    coordinate: Coordinate,
    parent: _EffectivePom | None,
) -> dict[str, str]:
    properties: dict[str, str] = dict(parent.properties) if parent else {}
    properties.update(pom.properties)
    group = pom.group or (pom.parent.group if pom.parent else coordinate.group)
    version = pom.version or (pom.parent.version if pom.parent else coordinate.version)
    builtins = {
        "project.groupId": group,
        "project.artifactId": pom.artifact,
        "project.version": version,
        "pom.groupId": group,
        "pom.artifactId": pom.artifact,
        "pom.version": version,
        "version": version,
        "groupId": group,
    }
    if pom.parent is not None:
        builtins["project.parent.groupId"] = pom.parent.group
        builtins["project.parent.version"] = pom.parent.version
        builtins["parent.version"] = pom.parent.version
    properties.update(builtins)
    return properties


def _interpolate_dependency(dep: PomDependency, properties: dict[str, str]) -> PomDependency:
    return PomDependency(
        group=interpolate(dep.group, properties) or dep.group,
        artifact=interpolate(dep.artifact, properties) or dep.artifact,
        version=interpolate(dep.version, properties),
        scope=dep.scope,
        type=dep.type,
        classifier=interpolate(dep.classifier, properties),
        optional=dep.optional,
        exclusions=dep.exclusions,
    )


def _snapshot_label(metadata_path: Path, coordinate: Coordinate) -> str | None:
    """Return the timestamped version label advertised by snapshot metadata."""

    try:
        root = ET.parse(metadata_path).getroot()  # nosec B314
    except ET.ParseError:
        return None
    timestamp = root.findtext("versioning/snapshot/timestamp")
    build_number = root.findtext("versioning/snapshot/buildNumber")
    if not timestamp or not build_number:
        return None
    base = coordinate.version.removesuffix("-SNAPSHOT")
    return f"{base}-{timestamp.strip()}-{build_number.strip()}"


__all__ = ["Fetcher", "MavenResolver", "download"]
