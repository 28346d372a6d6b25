# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launch the platform runtime against staged modules."""

from __future__ import annotations

import logging
import os

# Bandit: the platform is started from an argument list; ``shell=True`` is never used.
import subprocess  # nosec B404
import threading
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Final, Protocol

from .config import ProjectConfig
from .errors import Cancelled, MissingModuleIdentity, RuntimeExecutionError
from .home import LOGGING_PROPERTIES, HomeLayout
from .paths import LIB_SUBDIR, ModuleIdentity, mods_root, staging_dir
from .resolver.platform import BOOTSTRAP_MAIN_CLASS, LOGGING_CONFIG_PROPERTY, MODS_PROPERTY

LOGGER = logging.getLogger(__name__)

JAVA_ENV: Final[str] = "VERTMOD_JAVA_CMD"
JAVA_HOME_ENV: Final[str] = "JAVA_HOME"
CLASSPATH_FLAG: Final[str] = "-classpath"
DEFAULT_SUBCOMMAND: Final[str] = "runmod"
_POLL_INTERVAL: Final[float] = 0.1
_TERMINATE_GRACE: Final[float] = 5.0


class ProcessHandle(Protocol):
    """Subset of :class:`subprocess.Popen` used by :func:`run_process`."""

    def wait(self, timeout: float | None = None) -> int: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...


ProcessFactory = Callable[[list[str]], ProcessHandle]


def java_executable(config: ProjectConfig, env: Mapping[str, str] | None = None) -> str:
    """Return the Java executable: configuration, ``VERTMOD_JAVA_CMD``, ``JAVA_HOME``, then ``java``."""

    if config.launcher.java_cmd:
        return config.launcher.java_cmd
    environ = os.environ if env is None else env
    override = environ.get(JAVA_ENV)
    if override:
        return override
    java_home = environ.get(JAVA_HOME_ENV)
    if java_home:
        return str(Path(java_home) / "bin" / "java")
    return "java"


def resolve_module_identity(
    config: ProjectConfig,
    owner: str | None = None,
    name: str | None = None,
    version: str | None = None,
) -> ModuleIdentity:
    """Return the module to run.

    An explicitly supplied triple is used as-is; when none of the three is
    supplied the configured identity is used instead.

    Raises:
        MissingModuleIdentity: If the chosen source lacks owner, name or version.
    """

    if owner or name or version:
        if not (owner and name and version):
            raise MissingModuleIdentity(owner, name, version)
        return ModuleIdentity(owner=owner, name=name, version=version)
    module = config.module
    if not (module.owner and module.name and module.version):
        raise MissingModuleIdentity(module.owner, module.name, module.version)
    return ModuleIdentity(owner=module.owner, name=module.name, version=module.version)


def library_jars(directory: Path, *, recursive: bool = False) -> list[Path]:
    """Return ``*.jar`` regular files under ``directory`` sorted by path."""

    if not directory.is_dir():
        return []
    candidates = directory.rglob("*.jar") if recursive else directory.glob("*.jar")
    return sorted(path for path in candidates if path.is_file())


def classpath_entries(
    config: ProjectConfig,
    identity: ModuleIdentity,
    *,
    platform_jars: Sequence[Path],
    home: HomeLayout | None = None,
) -> list[Path]:
    """Return the runtime classpath in order.

    The module staging directory comes first, then its library jars, then the
    home configuration directory (when enabled and available), then the
    platform runtime jars.
    """

    stage = staging_dir(config, identity)
    entries = [stage, *library_jars(stage / LIB_SUBDIR, recursive=config.launcher.recursive_libs)]
    if home is not None and config.launcher.conf_on_classpath:
        entries.append(home.conf_dir.absolute())
    entries.extend(platform_jars)
    return entries


def classpath_string(
    config: ProjectConfig,
    identity: ModuleIdentity,
    *,
    platform_jars: Sequence[Path],
    home: HomeLayout | None = None,
) -> str:
    """Join :func:`classpath_entries` with the platform path separator."""

    return os.pathsep.join(
        str(path) for path in classpath_entries(config, identity, platform_jars=platform_jars, home=home)
    )


def launch_command(
    config: ProjectConfig,
    subcommand: str,
    args: Sequence[str],
    *,
    identity: ModuleIdentity,
    platform_jars: Sequence[Path],
    home: HomeLayout | None = None,
    env: Mapping[str, str] | None = None,
) -> list[str]:
    """Return the argument vector that starts the platform.

    Layout: java, system properties, ``-classpath <cp>``, bootstrap class,
    ``subcommand``, then ``args`` unchanged.
    """

    command = [java_executable(config, env)]
    if home is not None:
        command.append(f"-D{LOGGING_CONFIG_PROPERTY}={home.conf_file(LOGGING_PROPERTIES)}")
    command.append(f"-D{MODS_PROPERTY}={mods_root(config).absolute()}")
    command.extend(
        [
            CLASSPATH_FLAG,
            classpath_string(config, identity, platform_jars=platform_jars, home=home),
            BOOTSTRAP_MAIN_CLASS,
            subcommand,
            *args,
        ]
    )
    return command


def _default_process_factory(command: list[str]) -> ProcessHandle:
    return subprocess.Popen(command)  # nosec B603 - argument list, inherits stdio


def run_process(
    command: Sequence[str],
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
    process_factory: ProcessFactory | None = None,
    poll_interval: float = _POLL_INTERVAL,
) -> int:
    """Run ``command`` with inherited standard streams and wait for it.

    Args:
        command: Argument vector to execute.
        timeout: Seconds after which the process is terminated.
        cancel: Event that terminates the process once set.
        process_factory: Creates the process; defaults to :class:`subprocess.Popen`.
        poll_interval: Seconds between cancellation checks.

    Returns:
        int: ``0`` when the process succeeds.

    Raises:
        RuntimeExecutionError: If the process exits with a non-zero status.
        Cancelled: If the timeout elapses, ``cancel`` is set, or the wait is interrupted.
    """

    argv = list(command)
    LOGGER.debug("Launching %s", argv)
    process = (process_factory or _default_process_factory)(argv)
    deadline = None if timeout is None else time.monotonic() + timeout
    try:
        while True:
            if cancel is not None and cancel.is_set():
                _stop(process)
                raise Cancelled("cancelled", argv)
            if deadline is not None and time.monotonic() >= deadline:
                _stop(process)
                raise Cancelled("timeout", argv)
            wait_for = poll_interval
            if deadline is not None:
                wait_for = max(0.0, min(poll_interval, deadline - time.monotonic()))
            try:
                returncode = process.wait(timeout=wait_for)
            except subprocess.TimeoutExpired:
                continue
            break
    except KeyboardInterrupt as exc:
        _stop(process)
        raise Cancelled("cancelled", argv) from exc

    if returncode != 0:
        raise RuntimeExecutionError(returncode, argv)
    return returncode


def _stop(process: ProcessHandle) -> None:
    process.terminate()
    try:
        process.wait(timeout=_TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def invoke(
    config: ProjectConfig,
    subcommand: str,
    args: Sequence[str],
    *,
    identity: ModuleIdentity,
    platform_jars: Sequence[Path],
    home: HomeLayout | None = None,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
    process_factory: ProcessFactory | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Start the platform with ``subcommand`` and ``args`` and wait for it to finish.

    Raises:
        RuntimeExecutionError: If the platform exits with a non-zero status.
        Cancelled: If the run is cancelled or times out.
    """

    command = launch_command(
        config,
        subcommand,
        args,
        identity=identity,
        platform_jars=platform_jars,
        home=home,
        env=env,
    )
    effective_timeout = timeout if timeout is not None else config.launcher.timeout
    return run_process(command, timeout=effective_timeout, cancel=cancel, process_factory=process_factory)


__all__ = [
    "CLASSPATH_FLAG",
    "DEFAULT_SUBCOMMAND",
    "JAVA_ENV",
    "ProcessFactory",
    "ProcessHandle",
    "classpath_entries",
    "classpath_string",
    "invoke",
    "java_executable",
    "launch_command",
    "library_jars",
    "resolve_module_identity",
    "run_process",
]
