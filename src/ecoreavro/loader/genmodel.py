# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loader for EMF generator models (``.genmodel``).

A generator model names the ``.ecore`` files that make up a model and adds
generation settings on top of them. Two of those settings matter here: the
``modelName`` (used as the protocol name) and each root package's
``basePackage`` (prefixed to the package's Avro namespace).
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from ecoreavro.loader.ecore import load_ecore_packages
from ecoreavro.loader.errors import ModelLoadError
from ecoreavro.model.metamodel import MetaModel, Package

# ###############
# Public Interface
# ###############


def load_genmodel(path: Path) -> MetaModel:
    """Load a ``.genmodel`` file together with the ``.ecore`` files it references.

    Ecore files are taken from the ``ecorePackage`` references of the
    top-level ``genPackages`` (in order), falling back to the
    ``foreignModel`` entries. Paths are relative to the generator model.

    Raises:
        ModelLoadError: If the generator model or a referenced file cannot be
            loaded.
    """
    try:
        root = ET.parse(path).getroot()
    except FileNotFoundError:
        raise ModelLoadError(f"Model file not found: {path}") from None
    except (OSError, ET.ParseError) as exc:
        raise ModelLoadError(f"Cannot parse generator model '{path}': {exc}") from exc

    if _local(root.tag) != "GenModel":
        raise ModelLoadError(f"{path}: root element is not a GenModel")

    # (ecore file, index of the root package within that file) -> basePackage
    base_packages: dict[tuple[str, int], str | None] = {}
    ecore_files: list[str] = []
    for gen_package in root:
        if _local(gen_package.tag) != "genPackages":
            continue
        ref = gen_package.get("ecorePackage")
        if ref is None:
            ref = next((c.get("href") for c in gen_package if _local(c.tag) == "ecorePackage"), None)
        if not ref or "#" not in ref:
            raise ModelLoadError(f"{path}: genPackages entry without an ecorePackage reference")
        file_name, fragment = ref.split("#", 1)
        if file_name not in ecore_files:
            ecore_files.append(file_name)
        base_packages[(file_name, _root_index(fragment, path))] = gen_package.get("basePackage")

    if not ecore_files:
        ecore_files = [(c.text or "").strip() for c in root if _local(c.tag) == "foreignModel"]
        ecore_files = [f for f in ecore_files if f]
    if not ecore_files:
        raise ModelLoadError(f"{path}: generator model references no .ecore files")

    packages: list[Package] = []
    for file_name in ecore_files:
        for index, package in enumerate(load_ecore_packages(path.parent / file_name)):
            base = base_packages.get((file_name, index))
            if base:
                package = package.model_copy(update={"base_package": base})
            packages.append(package)

    return MetaModel(name=root.get("modelName") or None, packages=tuple(packages))


# ################
# Implementation
# ################


def _local(tag: str) -> str:
    return tag.split("}", 1)[1] if "}" in tag else tag


def _root_index(fragment: str, path: Path) -> int:
    """Return which root package a fragment like ``/`` or ``/1`` designates."""
    index = fragment.lstrip("/")
    if not index:
        return 0
    if not index.isdigit():
        raise ModelLoadError(f"{path}: unsupported ecorePackage fragment '#{fragment}'")
    return int(index)
