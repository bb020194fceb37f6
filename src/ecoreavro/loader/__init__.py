# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loaders that materialize a meta-model graph from model files."""

from pathlib import Path

from ecoreavro.loader.document import load_document, parse_document
from ecoreavro.loader.ecore import load_ecore
from ecoreavro.loader.errors import ModelLoadError
from ecoreavro.loader.genmodel import load_genmodel
from ecoreavro.model.metamodel import MetaModel

MODEL_SUFFIXES = (".ecore", ".genmodel", ".yaml", ".yml", ".json")


def load_model(path: Path) -> MetaModel:
    """Load a meta-model, choosing the loader from the file suffix.

    Raises:
        ModelLoadError: If the suffix is not supported or loading fails.
    """
    suffix = path.suffix.lower()
    if suffix == ".ecore":
        return load_ecore(path)
    if suffix == ".genmodel":
        return load_genmodel(path)
    if suffix in (".yaml", ".yml", ".json"):
        return load_document(path)
    raise ModelLoadError(f"Unsupported model file '{path}': expected one of {', '.join(MODEL_SUFFIXES)}")


__all__ = [
    "MODEL_SUFFIXES",
    "ModelLoadError",
    "load_document",
    "load_ecore",
    "load_genmodel",
    "load_model",
    "parse_document",
]
