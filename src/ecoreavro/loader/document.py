# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loader for meta-models written as YAML or JSON documents.

The document mirrors :class:`~ecoreavro.model.metamodel.MetaModel` field by
field; classifiers and type references carry a ``kind`` discriminator::

    name: Shop
    packages:
      - name: shop
        classifiers:
          - kind: class
            name: Item
            features:
              - name: name
                type: {kind: primitive, primitive: EString}
                lower_bound: 1
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from ecoreavro.loader.errors import ModelLoadError
from ecoreavro.model.metamodel import MetaModel

# ###############
# Public Interface
# ###############


def load_document(path: Path) -> MetaModel:
    """Load and validate a ``.yaml``, ``.yml`` or ``.json`` model document.

    Raises:
        ModelLoadError: If the file cannot be read, is not valid YAML/JSON,
            or does not describe a meta-model.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ModelLoadError(f"Model file not found: {path}") from None
    except OSError as exc:
        raise ModelLoadError(f"Cannot read model file '{path}': {exc}") from exc

    return parse_document(text, as_json=path.suffix.lower() == ".json", source_label=str(path))


def parse_document(text: str, *, as_json: bool = False, source_label: str = "<string>") -> MetaModel:
    """Parse model document text into a validated :class:`MetaModel`."""
    try:
        data = json.loads(text) if as_json else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ModelLoadError(f"Invalid model document {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ModelLoadError(f"{source_label}: model document must be a mapping")

    try:
        return MetaModel.model_validate(data)
    except ValidationError as exc:
        raise ModelLoadError(f"Invalid model document {source_label}: {exc}") from exc
