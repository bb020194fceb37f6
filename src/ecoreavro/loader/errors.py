# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised by the meta-model loaders."""


class ModelLoadError(Exception):
    """Raised when a model file cannot be read or does not describe a valid meta-model."""
