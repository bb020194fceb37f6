# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the generator configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".ecoreavro.yaml"
DEFAULT_OUTPUT_DIRECTORY = "build/generated-resources/avro"


class WorkspaceConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed generator configuration.

    Attributes:
        output_directory: Root for generated protocol files, relative to the
            directory holding the configuration file.
        models: Model files to translate, relative to the same directory.
    """

    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    models: list[str] = field(default_factory=list)


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a generator configuration file.

    Args:
        path: Path to the `.ecoreavro.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_workspace_config(text, source_label=str(path))


# ################
# Implementation
# ################


def _parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse configuration YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        WorkspaceConfigError: If the YAML is invalid or fields have the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - {"output-directory", "models"})
    if unknown:
        raise WorkspaceConfigError(f"{source_label}: unknown field(s): {', '.join(map(str, unknown))}")

    output_directory = DEFAULT_OUTPUT_DIRECTORY
    if "output-directory" in data:
        output_directory = _require_string(data, "output-directory", source_label)

    models: list[str] = []
    if "models" in data:
        raw_models = data["models"]
        if not isinstance(raw_models, list):
            raise WorkspaceConfigError(f"{source_label}: 'models' must be a list")
        for index, entry in enumerate(raw_models):
            models.append(_parse_model_entry(entry, index, source_label))

    return WorkspaceConfig(output_directory=output_directory, models=models)


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising WorkspaceConfigError if missing."""
    if key not in mapping:
        raise WorkspaceConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str) or not value:
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a non-empty string")
    return value


def _parse_model_entry(entry: object, index: int, source_label: str) -> str:
    """Parse one ``models`` entry: a plain path or a mapping with a ``path`` key."""
    location = f"{source_label}: models[{index}]"
    if isinstance(entry, str) and entry:
        return entry
    if isinstance(entry, dict):
        unknown = sorted(str(key) for key in entry if key != "path")
        if unknown:
            raise WorkspaceConfigError(f"{location}: unknown field(s): {', '.join(unknown)}")
        return _require_string(entry, "path", location)
    raise WorkspaceConfigError(f"{location} must be a path or a mapping with 'path'")
