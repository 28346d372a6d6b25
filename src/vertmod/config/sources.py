# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""TOML configuration sources with include and environment expansion support."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Iterable, Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .models import ConfigError, ProjectConfig

CONFIG_FILENAME: Final[str] = "vertmod.toml"
DEFAULT_INCLUDE_KEY: Final[str] = "include"

_ENV_VAR_PATTERN = re.compile(r"\$(\w+)|\$\{([^}]+)\}")


class TomlConfigSource:
    """Load configuration data from a TOML document with include support."""

    def __init__(
        self,
        path: Path,
        *,
        include_key: str = DEFAULT_INCLUDE_KEY,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._root_path = path
        self._include_key = include_key
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        return self._load(self._root_path, ())

    def _load(self, path: Path, stack: tuple[Path, ...]) -> Mapping[str, Any]:
        if not path.exists():
            return {}
        resolved = path.resolve()
        if resolved in stack:
            include_chain = " -> ".join(str(entry) for entry in (*stack, resolved))
            raise ConfigError(f"Circular include detected: {include_chain}")
        try:
            with resolved.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigError(f"Configuration at {path} must be a table")
        document: dict[str, Any] = dict(data)
        includes = document.pop(self._include_key, None)
        merged: dict[str, Any] = {}
        for include_path in self._coerce_includes(includes, resolved.parent):
            fragment = self._load(include_path, stack + (resolved,))
            merged = _deep_merge(merged, fragment)
        merged = _deep_merge(merged, document)
        return _expand_env(merged, self._env)

    def _coerce_includes(self, raw: Any, base_dir: Path) -> Iterable[Path]:
        if raw is None:
            return []
        if isinstance(raw, str):
            return [self._resolve_path(Path(raw), base_dir)]
        if isinstance(raw, MutableMapping):
            return [self._resolve_path(Path(value), base_dir) for value in raw.values()]
        if isinstance(raw, list):
            return [self._resolve_path(Path(item), base_dir) for item in raw]
        raise ConfigError(f"Unsupported include declaration: {raw!r}")

    @staticmethod
    def _resolve_path(path: Path, base_dir: Path) -> Path:
        return path if path.is_absolute() else (base_dir / path)


def load_project_config(
    root: Path,
    *,
    config_file: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ProjectConfig:
    """Load and validate the project configuration rooted at ``root``.

    Args:
        root: Project root directory. Relative configured paths resolve here.
        config_file: Explicit configuration file. Defaults to ``vertmod.toml``
            inside ``root``; an explicit file must exist.
        env: Environment used for ``$VAR`` expansion. Defaults to ``os.environ``.

    Returns:
        ProjectConfig: Validated configuration carrying the resolved root.

    Raises:
        ConfigError: If the file is missing, malformed or fails validation.
    """

    root = root.resolve()
    if config_file is not None:
        path = config_file if config_file.is_absolute() else root / config_file
        if not path.is_file():
            raise ConfigError(f"Configuration file not found: {path}")
    else:
        path = root / CONFIG_FILENAME
    payload = dict(TomlConfigSource(path, env=env).load())
    payload.pop("root", None)
    try:
        return ProjectConfig(root=root, **payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) for key, value in data.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


__all__ = ["CONFIG_FILENAME", "DEFAULT_INCLUDE_KEY", "TomlConfigSource", "load_project_config"]
