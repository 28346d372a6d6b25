# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the module build pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class VertmodError(RuntimeError):
    """Base class for failures raised by the build pipeline."""


class InvalidConfig(VertmodError):
    """Raised when project configuration lacks required values."""


class MissingModuleIdentity(InvalidConfig):
    """Raised when owner, name or version cannot be determined for a module."""

    def __init__(self, owner: str | None, name: str | None, version: str | None) -> None:
        """Initialise the error with the values that were available.

        Args:
            owner: Module owner supplied by the caller or configuration.
            name: Module name supplied by the caller or configuration.
            version: Module version supplied by the caller or configuration.
        """

        super().__init__(
            "module owner, name and version must be provided; provided values are: "
            f"owner={owner or '<missing>'} name={name or '<missing>'} version={version or '<missing>'}"
        )
        self.owner = owner
        self.name = name
        self.version = version


class StageIOError(VertmodError):
    """Raised when a filesystem operation fails while staging or packaging."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class CompileError(VertmodError):
    """Raised when the Java compiler exits unsuccessfully."""

    def __init__(self, returncode: int, stderr: str | None = None) -> None:
        detail = f"\n{stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"javac exited with status {returncode}{detail}")
        self.returncode = returncode
        self.stderr = stderr


class SerializationError(VertmodError):
    """Raised when descriptor metadata cannot be encoded as JSON."""


class DependencyResolutionError(VertmodError):
    """Raised when a dependency cannot be located in any repository."""

    def __init__(self, coordinate: str, reason: str) -> None:
        super().__init__(f"Could not resolve {coordinate}: {reason}")
        self.coordinate = coordinate
        self.reason = reason


class DependencyNameCollision(VertmodError):
    """Raised when distinct dependency artifacts share a file name."""

    def __init__(self, name: str, paths: Sequence[Path]) -> None:
        listed = ", ".join(str(path) for path in paths)
        super().__init__(f"Dependencies collide on file name '{name}': {listed}")
        self.name = name
        self.paths = tuple(paths)


class RuntimeExecutionError(VertmodError):
    """Raised when the platform subprocess exits with a non-zero status."""

    def __init__(self, exit_code: int, command: Sequence[str]) -> None:
        super().__init__(f"Platform process exited with status {exit_code}")
        self.exit_code = exit_code
        self.command = tuple(command)


class Cancelled(VertmodError):
    """Raised when a platform subprocess is stopped before it completes."""

    def __init__(self, reason: str, command: Sequence[str]) -> None:
        super().__init__(f"Platform process {reason}")
        self.reason = reason
        self.command = tuple(command)


__all__ = [
    "Cancelled",
    "CompileError",
    "DependencyNameCollision",
    "DependencyResolutionError",
    "InvalidConfig",
    "MissingModuleIdentity",
    "RuntimeExecutionError",
    "SerializationError",
    "StageIOError",
    "VertmodError",
]
