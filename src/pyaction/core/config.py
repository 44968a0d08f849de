# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Configuration — layered YAML/TOML settings with env overrides and binding.

Values are looked up with dotted keys (``pyaction.controller.default_action``).
Layers, lowest to highest priority:

1. framework defaults (``pyaction/resources/pyaction-defaults.yaml``)
2. the application file, then one overlay per active profile
3. environment variables: ``pyaction.controller.flash_key`` is overridden by
   ``PYACTION_CONTROLLER_FLASH_KEY``; keys outside ``pyaction.`` map the same
   way with a ``PYACTION_`` prefix added.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

PREFIX_ATTR = "__pyaction_config_prefix__"

_DEFAULTS_SOURCE = "pyaction-defaults.yaml (framework defaults)"
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10
_TRUTHY = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Bind a dataclass or pydantic model to the config section at *prefix*.

    ::

        @config_properties(prefix="pyaction.controller")
        @dataclass(frozen=True)
        class ControllerProperties:
            default_action: str = "process"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """Environment variable overriding the dotted *key*."""
    name = key.removeprefix("pyaction.")
    return "PYACTION_" + re.sub(r"[.\-]", "_", name).upper()


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh)
    with path.open() as fh:
        return yaml.safe_load(fh) or {}


def _read_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("pyaction.resources") / "pyaction-defaults.yaml"
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        merged[key] = _merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def _walk(data: Any, key: str) -> Any:
    node = data
    for part in key.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def _from_string(value: str, hint: Any) -> Any:
    if hint is bool:
        return value.strip().lower() in _TRUTHY
    if hint in (int, float):
        return hint(value)
    return value


class Config:
    """Read-only view over merged configuration data."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = []

    @classmethod
    def defaults(cls) -> Config:
        """Only the framework defaults."""
        config = cls(_read_defaults())
        config._sources.append(_DEFAULTS_SOURCE)
        return config

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load *path* over the framework defaults.

        Each active profile adds ``{stem}-{profile}{suffix}`` from the same
        directory when it exists. A missing *path* leaves just the defaults.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = _read_defaults()
            sources.append(_DEFAULTS_SOURCE)

        if path.exists():
            overlays = [(path, str(path))]
            for profile in active_profiles or []:
                profile_path = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if profile_path.exists():
                    overlays.append((profile_path, f"{profile_path} (profile: {profile})"))

            for overlay_path, label in overlays:
                data = _merge(data, _read_file(overlay_path))
                sources.append(label)

        config = cls(data)
        config._sources = sources
        return config

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this config, lowest priority first."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Value at the dotted *key*; environment overrides win.

        ``${NAME}``, ``${other.key}`` and ``${name:fallback}`` placeholders in
        string values are expanded.
        """
        override = os.environ.get(env_key(key))
        if override is not None:
            return override

        value = _walk(self._data, key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._expand(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """The mapping under *prefix*, or an empty dict."""
        section = _walk(self._data, prefix)
        return section if isinstance(section, dict) else {}

    def _expand(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholders in '{value}' nest too deeply; check for circular references")

        def substitute(match: re.Match[str]) -> str:
            expression = match.group(1)
            name, has_fallback, fallback = expression.partition(":")

            found = os.environ.get(name)
            if found is None:
                referenced = _walk(self._data, name)
                if referenced is not None:
                    found = str(referenced)
                    if "${" in found:
                        found = self._expand(found, depth + 1)
            if found is not None:
                return found
            if has_fallback:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{expression}}}' from environment or config")

        return _PLACEHOLDER.sub(substitute, value)

    def bind(self, properties_cls: type[T]) -> T:
        """Build *properties_cls* from the section named by its ``@config_properties`` prefix.

        Raises:
            ValueError: If the class is not decorated, or a pydantic model
                rejects the section.
        """
        prefix = getattr(properties_cls, PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{properties_cls.__name__} is not decorated with @config_properties")

        if issubclass(properties_cls, BaseModel):
            try:
                return properties_cls.model_validate(self.get_section(prefix))
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{properties_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        hints = get_type_hints(properties_cls)
        values: dict[str, Any] = {}
        for field in dataclasses.fields(properties_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            values[field.name] = _from_string(value, hints.get(field.name)) if isinstance(value, str) else value
        return properties_cls(**values)
