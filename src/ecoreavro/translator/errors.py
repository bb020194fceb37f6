# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised when a meta-model cannot be translated."""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class TranslationError(Exception):
    """Raised when a meta-model graph cannot be translated into a protocol.

    Attributes:
        package: Dotted path of the package holding the offending declaration.
        classifier: Name of the offending class, enum or data type.
        feature: Name of the offending feature.
    """

    def __init__(
        self,
        message: str,
        *,
        package: str | None = None,
        classifier: str | None = None,
        feature: str | None = None,
    ) -> None:
        self.package = package
        self.classifier = classifier
        self.feature = feature
        location = _format_location(package, classifier, feature)
        super().__init__(f"{location}: {message}" if location else message)


class UnresolvedTypeReference(TranslationError):
    """A feature or supertype names a classifier that is not in the graph."""


class NameCollision(TranslationError):
    """Two declarations would produce the same Avro name."""


class UnsupportedFeatureShape(TranslationError):
    """A multiplicity or type combination has no mapping to Avro."""


class CyclicInheritance(TranslationError):
    """A class is (transitively) its own supertype."""


# ################
# Implementation
# ################


def _format_location(package: str | None, classifier: str | None, feature: str | None) -> str:
    parts = [p for p in (package, classifier, feature) if p]
    return ".".join(parts)
