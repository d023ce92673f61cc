# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the cidl2rs generator configuration file."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".cidl2rs.yaml"


class GeneratorConfigError(Exception):
    """Raised when a generator configuration file is invalid or cannot be loaded."""


@dataclass
class GeneratorConfig:
    """Generator settings read from the configuration file.

    Unset values fall back to command-line options or built-in defaults.

    Attributes:
        cobia_module: Module under which the binding runtime is referenced.
        example_module: Module name used in documentation examples.
        native_module: Module holding the raw ABI declarations.
        native_namespace: Prefix of raw ABI declarations of local types.
        output: Output file path; standard output when unset.
    """

    cobia_module: str | None = None
    example_module: str | None = None
    native_module: str | None = None
    native_namespace: str | None = None
    output: str | None = None


def load_generator_config(path: Path) -> GeneratorConfig:
    """Load and parse a generator configuration file.

    Args:
        path: Path to the ``.cidl2rs.yaml`` file.

    Returns:
        A GeneratorConfig instance populated from the file.

    Raises:
        GeneratorConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise GeneratorConfigError(f"Generator config file not found: {path}") from None
    except OSError as exc:
        raise GeneratorConfigError(f"Cannot read generator config file: {exc}") from exc

    return _parse_generator_config(text, source_label=str(path))


# ################
# Implementation
# ################

# YAML keys and the GeneratorConfig field each one sets.
_KEYS: dict[str, str] = {f.name.replace("_", "-"): f.name for f in fields(GeneratorConfig)}


def _parse_generator_config(text: str, source_label: str = "<string>") -> GeneratorConfig:
    """Parse generator config YAML text into a GeneratorConfig.

    An empty document yields the default configuration.

    Raises:
        GeneratorConfigError: If the YAML is invalid, not a mapping, contains
            unknown keys, or a value is not a string.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GeneratorConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise GeneratorConfigError(f"{source_label}: generator config must be a YAML mapping")

    values: dict[str, str] = {}
    for key, value in data.items():
        if key not in _KEYS:
            raise GeneratorConfigError(f"{source_label}: unknown key '{key}'")
        if not isinstance(value, str) or not value:
            raise GeneratorConfigError(f"{source_label}: '{key}' must be a non-empty string")
        values[_KEYS[key]] = value
    return GeneratorConfig(**values)
