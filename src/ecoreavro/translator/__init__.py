# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Meta-model to Avro protocol translation."""

from ecoreavro.translator.errors import (
    CyclicInheritance,
    NameCollision,
    TranslationError,
    UnresolvedTypeReference,
    UnsupportedFeatureShape,
)
from ecoreavro.translator.translate import translate

__all__ = [
    "translate",
    "TranslationError",
    "UnresolvedTypeReference",
    "NameCollision",
    "UnsupportedFeatureShape",
    "CyclicInheritance",
]
