# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the EntDef project configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from entdef.model.types import Color
from entdef.parser.parser import DEFAULT_ENTITY_COLOR

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".entdef.yaml"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class EntdefConfig:
    """The parsed configuration for a directory of definition files.

    Attributes:
        default_color: Color for brush classes that declare none.
        definition_files: Definition files to check, relative to the config file.
        strict: Whether warnings make ``entdef check`` fail.
    """

    default_color: Color = DEFAULT_ENTITY_COLOR
    definition_files: list[str] = field(default_factory=list)
    strict: bool = False

    def resolve_definition_files(self, root: Path) -> list[Path]:
        """Return the definition file paths resolved against *root*."""
        return [(root / name).resolve() for name in self.definition_files]


def load_config(path: Path) -> EntdefConfig:
    """Load and parse an EntDef configuration file.

    Args:
        path: Path to the `.entdef.yaml` file.

    Returns:
        An EntdefConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_config(text, source_label=str(path))


# ################
# Implementation
# ################


def _parse_config(text: str, source_label: str = "<string>") -> EntdefConfig:
    """Parse config YAML text into an EntdefConfig.

    An empty document yields the defaults.

    Raises:
        ConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return EntdefConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    config = EntdefConfig()
    if "default-color" in data:
        config.default_color = _parse_color(data["default-color"], source_label)
    if "definition-files" in data:
        config.definition_files = _parse_string_list(data, "definition-files", source_label)
    if "strict" in data:
        strict = data["strict"]
        if not isinstance(strict, bool):
            raise ConfigError(f"{source_label}: 'strict' must be a boolean")
        config.strict = strict
    return config


def _parse_color(value: object, source_label: str) -> Color:
    """Parse a list of 3 or 4 channel values; values above 1 are 8-bit channels."""
    if not isinstance(value, list) or len(value) not in (3, 4):
        raise ConfigError(f"{source_label}: 'default-color' must be a list of 3 or 4 numbers")
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, (int, float)):
            raise ConfigError(f"{source_label}: 'default-color' must be a list of 3 or 4 numbers")
        if channel < 0:
            raise ConfigError(f"{source_label}: 'default-color' channels must not be negative")

    color = Color.from_channels([float(channel) for channel in value[:3]])
    if len(value) == 4:
        alpha = float(value[3])
        color = color.model_copy(update={"a": alpha / 255.0 if alpha > 1.0 else alpha})
    return color


def _parse_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)
