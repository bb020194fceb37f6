# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator configuration for ecore-avro."""

from ecoreavro.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_OUTPUT_DIRECTORY,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_OUTPUT_DIRECTORY",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "load_workspace_config",
]
