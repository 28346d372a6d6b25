# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from vertmod.config import DependencySpec, ModuleSection, ProjectConfig, ProjectSection
from vertmod.home import HomeLayout, initialize_home
from vertmod.pipeline import BuildContext


class FakeResolver:
    """Resolver returning pre-registered files keyed by coordinate string."""

    def __init__(self, artifacts: dict[str, Path] | None = None) -> None:
        self.artifacts = dict(artifacts or {})
        self.calls: list[list[str]] = []

    def resolve(self, dependencies: Sequence[DependencySpec]) -> list[Path]:
        coordinates = [spec.coordinate for spec in dependencies]
        self.calls.append(coordinates)
        return [self.artifacts[coordinate] for coordinate in coordinates if coordinate in self.artifacts]


class SpyProcess:
    """Stand-in for :class:`subprocess.Popen` that finishes after a number of waits."""

    def __init__(self, returncode: int = 0, *, waits_before_exit: int = 0) -> None:
        self.returncode = returncode
        self.waits_before_exit = waits_before_exit
        self.terminated = False
        self.killed = False
        self.wait_calls = 0

    def wait(self, timeout: float | None = None) -> int:
        self.wait_calls += 1
        if self.terminated or self.killed:
            return -15
        if self.waits_before_exit > 0:
            self.waits_before_exit -= 1
            raise subprocess.TimeoutExpired(cmd="java", timeout=timeout or 0)
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True

    def kill(self) -> None:
        self.killed = True


class SpyProcessFactory:
    """Record launched commands and hand out :class:`SpyProcess` instances."""

    def __init__(self, returncode: int = 0, *, waits_before_exit: int = 0) -> None:
        self.returncode = returncode
        self.waits_before_exit = waits_before_exit
        self.commands: list[list[str]] = []
        self.processes: list[SpyProcess] = []

    def __call__(self, command: list[str]) -> SpyProcess:
        self.commands.append(list(command))
        process = SpyProcess(self.returncode, waits_before_exit=self.waits_before_exit)
        self.processes.append(process)
        return process


def no_compile(config: ProjectConfig, destination: Path, classpath: Sequence[Path]) -> list[Path]:
    return []


def write_file(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Project tree with one compiled class and one resource file."""

    root = tmp_path / "project"
    write_file(root / "src" / "a.class", b"\xca\xfe\xba\xbe")
    write_file(root / "resources" / "config.json", '{"port": 8080}')
    return root


@pytest.fixture
def config(project_root: Path) -> ProjectConfig:
    return ProjectConfig(
        root=project_root,
        project=ProjectSection(
            name="worker",
            version="1.0.0",
            description="Background worker",
            url="https://example.com/worker",
        ),
        module=ModuleSection(owner="acme", name="worker", version="1.0.0", main="com.acme.Worker"),
    )


@pytest.fixture
def cache_jars(tmp_path: Path) -> list[Path]:
    """Two distinct dependency jars living outside the project."""

    cache = tmp_path / "cache"
    return [
        write_file(cache / "foo-1.0.jar", b"foo-bytes"),
        write_file(cache / "bar-2.0.jar", b"bar-bytes"),
    ]


@pytest.fixture
def home(tmp_path: Path) -> HomeLayout:
    return initialize_home(tmp_path / "home", use_emoji=False)


@pytest.fixture
def context(config: ProjectConfig, home: HomeLayout, cache_jars: list[Path], tmp_path: Path) -> BuildContext:
    config.project.dependencies = [
        DependencySpec(coordinate="com.example:foo:1.0"),
        DependencySpec(coordinate="com.example:bar:2.0"),
        DependencySpec(coordinate="javax.servlet:servlet-api:2.5", profile="provided"),
    ]
    servlet = write_file(tmp_path / "cache" / "provided" / "servlet-api-2.5.jar", b"servlet")
    platform_jar = write_file(tmp_path / "platform" / "vertx-core-2.1.1.jar", b"core")
    resolver = FakeResolver(
        {
            "com.example:foo:1.0": cache_jars[0],
            "com.example:bar:2.0": cache_jars[1],
            "javax.servlet:servlet-api:2.5": servlet,
        }
    )
    platform = FakeResolver({"io.vertx:vertx-core:2.1.1": platform_jar})
    return BuildContext(
        config=config,
        home=home,
        resolver=resolver,
        platform=platform,
        compiler=no_compile,
        use_emoji=False,
    )


@pytest.fixture
def make_spy_factory() -> type[SpyProcessFactory]:
    return SpyProcessFactory


@pytest.fixture
def spy_factory() -> SpyProcessFactory:
    return SpyProcessFactory()


@pytest.fixture
def make_resolver() -> type[FakeResolver]:
    return FakeResolver
