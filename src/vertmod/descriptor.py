# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Module descriptor (``mod.json``) generation and reading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from .config import ProjectConfig
from .errors import InvalidConfig, SerializationError, StageIOError
from .paths import descriptor_path

LOGGER = logging.getLogger(__name__)

RESERVED_KEYS: Final[frozenset[str]] = frozenset({"main", "description", "homepage", "licenses"})


class ModuleDescriptor(BaseModel):
    """Descriptor schema: enumerated keys plus open pass-through extensions."""

    model_config = ConfigDict(validate_assignment=True)

    main: str
    description: str | None = None
    homepage: str | None = None
    licenses: list[str] = Field(default_factory=list)
    extensions: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON object written to ``mod.json``.

        Enumerated keys take precedence over extension keys of the same name.
        """

        payload: dict[str, Any] = {key: value for key, value in self.extensions.items() if key not in RESERVED_KEYS}
        payload["main"] = self.main
        if self.description is not None:
            payload["description"] = self.description
        if self.homepage is not None:
            payload["homepage"] = self.homepage
        if self.licenses:
            payload["licenses"] = list(self.licenses)
        return payload


def build_descriptor(config: ProjectConfig) -> ModuleDescriptor:
    """Return the descriptor for the configured module.

    Raises:
        InvalidConfig: If no entry point is configured.
    """

    main = (config.module.main or "").strip()
    if not main:
        raise InvalidConfig("module main (entry point) is required to write mod.json")
    ignored = sorted(RESERVED_KEYS & set(config.module.descriptor))
    if ignored:
        LOGGER.warning("Ignoring descriptor keys managed from project metadata: %s", ", ".join(ignored))
    license_name = config.project.license.name if config.project.license else None
    return ModuleDescriptor(
        main=main,
        description=config.project.description,
        homepage=config.project.url,
        licenses=[license_name] if license_name else [],
        extensions=dict(config.module.descriptor),
    )


def write_descriptor(config: ProjectConfig) -> Path:
    """Serialise the module descriptor to ``<staging>/mod.json``, overwriting it.

    Forward slashes are written unescaped.

    Returns:
        Path: Location of the written descriptor.

    Raises:
        InvalidConfig: If the entry point or module identity is missing.
        SerializationError: If descriptor metadata is not JSON-serialisable.
        StageIOError: If the file cannot be written.
    """

    descriptor = build_descriptor(config)
    try:
        document = json.dumps(descriptor.to_payload(), indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Descriptor metadata is not JSON-serialisable: {exc}") from exc

    target = descriptor_path(config)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"{document}\n", encoding="utf-8")
    except OSError as exc:
        raise StageIOError(f"Unable to write descriptor ({exc.strerror})", path=target) from exc
    return target


def read_descriptor(path: Path) -> dict[str, Any]:
    """Return the JSON object stored in the descriptor at ``path``.

    Raises:
        StageIOError: If the file cannot be read.
        SerializationError: If the file is not a JSON object.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StageIOError(f"Unable to read descriptor ({exc.strerror})", path=path) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Descriptor {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SerializationError(f"Descriptor {path} must contain a JSON object")
    return data


def descriptor_main(path: Path) -> str | None:
    """Return the entry point recorded in the descriptor at ``path``."""

    main = read_descriptor(path).get("main")
    return main if isinstance(main, str) else None


__all__ = [
    "ModuleDescriptor",
    "RESERVED_KEYS",
    "build_descriptor",
    "descriptor_main",
    "read_descriptor",
    "write_descriptor",
]
