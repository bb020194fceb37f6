# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generation workflow: load each model, translate it, and write its protocol.

Each model file is translated independently into one ``.avpr`` file below
the output root, at the path derived from the protocol's namespace and
name. The output root is reported as a generated-resource directory so the
surrounding build can pick up the files. Translation is deterministic, so a
failure is reported at once and never retried.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ecoreavro.emission.protocol_file import protocol_path, write_protocol
from ecoreavro.loader import ModelLoadError, load_model
from ecoreavro.model.schema import Protocol
from ecoreavro.translator import TranslationError, translate

# ###############
# Public Interface
# ###############


class GenerationError(Exception):
    """Raised when a model cannot be loaded, translated, or written.

    Attributes:
        model: The model file being processed when the error occurred.
    """

    def __init__(self, message: str, model: Path | None = None) -> None:
        super().__init__(message)
        self.model = model


@dataclass(frozen=True)
class GeneratedProtocol:
    """One protocol produced from one model file.

    Attributes:
        model: The model file the protocol was generated from.
        protocol: The translated protocol.
        path: Where the protocol file lives.
        written: False if the file already had identical content.
    """

    model: Path
    protocol: Protocol
    path: Path
    written: bool


@dataclass
class GenerationResult:
    """Outcome of a generation run.

    Attributes:
        protocols: Generated protocols, in input order.
        resource_directories: Directories holding generated resources.
    """

    protocols: list[GeneratedProtocol] = field(default_factory=list)
    resource_directories: list[Path] = field(default_factory=list)

    @property
    def written(self) -> list[GeneratedProtocol]:
        """Return the protocols whose files were (re)written."""
        return [p for p in self.protocols if p.written]


def generate(models: list[Path], output_root: Path) -> GenerationResult:
    """Generate one Avro protocol file per model file.

    Args:
        models: Model files (``.ecore``, ``.genmodel``, ``.yaml``, ``.yml``
            or ``.json``).
        output_root: Root directory for the generated ``.avpr`` files.

    Returns:
        A :class:`GenerationResult` listing the protocols and the output
        root as generated-resource directory.

    Raises:
        GenerationError: On the first model that fails to load, translate,
            or write. Two models producing the same protocol file are also
            an error. Nothing is written unless every model translates and
            every protocol file path is distinct.
    """
    planned: list[tuple[Path, Protocol]] = []
    seen: dict[Path, Path] = {}
    for model_path in models:
        protocol = _translate_model(model_path)
        path = protocol_path(protocol, output_root)
        previous = seen.get(path)
        if previous is not None:
            raise GenerationError(
                f"'{model_path}' and '{previous}' both generate '{path}'",
                model=model_path,
            )
        seen[path] = model_path
        planned.append((model_path, protocol))

    result = GenerationResult()
    for model_path, protocol in planned:
        result.protocols.append(_write_one(model_path, protocol, output_root))
    result.resource_directories.append(output_root)
    return result


def check(models: list[Path]) -> list[Protocol]:
    """Load and translate every model without writing anything.

    Raises:
        GenerationError: On the first model that fails to load or translate.
    """
    return [_translate_model(model_path) for model_path in models]


# ################
# Implementation
# ################


def _translate_model(model_path: Path) -> Protocol:
    try:
        model = load_model(model_path)
    except ModelLoadError as exc:
        raise GenerationError(f"Cannot load model '{model_path}': {exc}", model=model_path) from exc

    try:
        return translate(model)
    except TranslationError as exc:
        raise GenerationError(f"Cannot translate '{model_path}': {exc}", model=model_path) from exc


def _write_one(model_path: Path, protocol: Protocol, output_root: Path) -> GeneratedProtocol:
    try:
        path, written = write_protocol(protocol, output_root)
    except OSError as exc:
        raise GenerationError(
            f"Error writing the Avro protocol file for '{model_path}': {exc}", model=model_path
        ) from exc
    return GeneratedProtocol(model=model_path, protocol=protocol, path=path, written=written)
