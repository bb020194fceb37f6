# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loader for Ecore XMI (``.ecore``) files.

Type references in Ecore are URIs:

* ``ecore:EDataType http://www.eclipse.org/emf/2002/Ecore#//EString`` names
  a built-in data type.
* ``#//catalog/Item`` names a classifier of the same file, as a path below
  the file's root package.
* ``common.ecore#//Money`` names a classifier of another file next to this one.

Classes whose instance class is ``java.util.Map$Entry`` describe map entries;
they are not classifiers of their own, and features typed by them become
:class:`~ecoreavro.model.metamodel.MapTypeRef`.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from ecoreavro.loader.errors import ModelLoadError
from ecoreavro.model.metamodel import (
    ClassDef,
    ClassifierRef,
    DataTypeDef,
    EnumDef,
    Feature,
    FeatureKind,
    MapTypeRef,
    MetaModel,
    Package,
    PrimitiveType,
    PrimitiveTypeRef,
    TypeRef,
)

# ###############
# Public Interface
# ###############

ECORE_NS = "http://www.eclipse.org/emf/2002/Ecore"
XMI_NS = "http://www.omg.org/XMI"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

GENMODEL_ANNOTATION = "http://www.eclipse.org/emf/2002/GenModel"
EXTENDED_METADATA_ANNOTATION = "http:///org/eclipse/emf/ecore/util/ExtendedMetaData"

MAP_ENTRY_INSTANCE_CLASSES = frozenset({"java.util.Map$Entry", "java.util.Map.Entry"})


def load_ecore(path: Path) -> MetaModel:
    """Load the packages of an ``.ecore`` file.

    Args:
        path: Path to the ``.ecore`` file.

    Returns:
        A :class:`MetaModel` with one root package per ``EPackage`` in the file.

    Raises:
        ModelLoadError: If the file cannot be read or parsed.
    """
    return MetaModel(packages=tuple(load_ecore_packages(path)))


def load_ecore_packages(path: Path) -> list[Package]:
    """Load the root packages of an ``.ecore`` file, in document order."""
    return _EcoreReader(path).read()


# ################
# Implementation
# ################

_XSI_TYPE = f"{{{XSI_NS}}}type"
_BUILTIN_PRIMITIVES = {p.value: p for p in PrimitiveType}
_BUILTIN_MAP_ENTRY = "EStringToStringMapEntry"


class _EcoreReader:
    """Reads one ``.ecore`` file into meta-model packages."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._root_names: list[str] = []
        # Map-entry classes keyed by their classifier path, e.g. "shop.Labels".
        self._map_entries: dict[str, ET.Element] = {}
        self._root_name_cache: dict[Path, str] = {}

    def read(self) -> list[Package]:
        roots = _parse_root_packages(self._path)
        self._root_names = [_require_name(r, self._path) for r in roots]
        for root, name in zip(roots, self._root_names):
            self._collect_map_entries(root, name)
        return [self._read_package(root, name, name) for root, name in zip(roots, self._root_names)]

    def _collect_map_entries(self, elem: ET.Element, path: str) -> None:
        for child in elem:
            tag = _local(child.tag)
            if tag == "eClassifiers" and child.get("instanceClassName") in MAP_ENTRY_INSTANCE_CLASSES:
                self._map_entries[f"{path}.{child.get('name', '')}"] = child
            elif tag == "eSubpackages":
                self._collect_map_entries(child, f"{path}.{child.get('name', '')}")

    def _read_package(self, elem: ET.Element, name: str, path: str) -> Package:
        classifiers: list[ClassDef | EnumDef | DataTypeDef] = []
        packages: list[Package] = []
        for child in elem:
            tag = _local(child.tag)
            if tag == "eClassifiers":
                classifier = self._read_classifier(child, path)
                if classifier is not None:
                    classifiers.append(classifier)
            elif tag == "eSubpackages":
                sub_name = _require_name(child, self._path)
                packages.append(self._read_package(child, sub_name, f"{path}.{sub_name}"))
        return Package(
            name=name,
            classifiers=tuple(classifiers),
            packages=tuple(packages),
            documentation=_documentation(elem),
        )

    def _read_classifier(self, elem: ET.Element, path: str) -> ClassDef | EnumDef | DataTypeDef | None:
        xsi_type = elem.get(_XSI_TYPE, "")
        name = _require_name(elem, self._path)
        if xsi_type == "ecore:EEnum":
            literals = tuple(lit.get("name", "") for lit in elem if _local(lit.tag) == "eLiterals")
            return EnumDef(name=name, literals=literals, documentation=_documentation(elem))
        if xsi_type == "ecore:EDataType":
            length = _annotation_detail(elem, EXTENDED_METADATA_ANNOTATION, "length")
            if length is not None and not length.isdigit():
                raise ModelLoadError(f"{self._path}: data type '{name}' has a non-numeric length '{length}'")
            return DataTypeDef(
                name=name,
                instance_class_name=elem.get("instanceClassName") or elem.get("instanceTypeName"),
                fixed_size=int(length) if length is not None else None,
                documentation=_documentation(elem),
            )
        if xsi_type in ("ecore:EClass", ""):
            if f"{path}.{name}" in self._map_entries:
                return None
            return self._read_class(elem, name, path)
        raise ModelLoadError(f"{self._path}: unknown classifier type '{xsi_type}' for '{name}'")

    def _read_class(self, elem: ET.Element, name: str, path: str) -> ClassDef:
        supertypes = tuple(
            ClassifierRef(name=self._href_to_key(href, path)) for href in elem.get("eSuperTypes", "").split()
        )
        features = tuple(
            self._read_feature(child, path) for child in elem if _local(child.tag) == "eStructuralFeatures"
        )
        return ClassDef(
            name=name,
            features=features,
            supertypes=supertypes,
            is_abstract=_bool_attr(elem, "abstract"),
            is_interface=_bool_attr(elem, "interface"),
            documentation=_documentation(elem),
        )

    def _read_feature(self, elem: ET.Element, path: str) -> Feature:
        xsi_type = elem.get(_XSI_TYPE, "")
        kind = FeatureKind.REFERENCE if xsi_type == "ecore:EReference" else FeatureKind.ATTRIBUTE
        name = _require_name(elem, self._path)
        try:
            lower = int(elem.get("lowerBound", "0"))
            upper = int(elem.get("upperBound", "1"))
        except ValueError as exc:
            raise ModelLoadError(f"{self._path}: invalid bounds on feature '{name}': {exc}") from exc
        return Feature(
            name=name,
            kind=kind,
            type=self._read_type(elem, path),
            lower_bound=lower,
            upper_bound=upper,
            containment=_bool_attr(elem, "containment"),
            documentation=_documentation(elem),
        )

    def _read_type(self, elem: ET.Element, path: str) -> TypeRef:
        uri = elem.get("eType")
        if uri is None:
            for child in elem:
                if _local(child.tag) in ("eType", "eGenericType"):
                    uri = child.get("href") or child.get("eClassifier")
                    break
        if not uri:
            raise ModelLoadError(f"{self._path}: feature '{elem.get('name')}' has no type")
        return self._uri_to_type(uri, path)

    def _uri_to_type(self, uri: str, path: str) -> TypeRef:
        # "ecore:EDataType http://...#//EString" -> "http://...#//EString"
        uri = uri.split()[-1]
        if uri.startswith(ECORE_NS):
            builtin = uri.rsplit("#//", 1)[-1]
            if builtin in _BUILTIN_PRIMITIVES:
                return PrimitiveTypeRef(primitive=_BUILTIN_PRIMITIVES[builtin])
            if builtin == _BUILTIN_MAP_ENTRY:
                string = PrimitiveTypeRef(primitive=PrimitiveType.STRING)
                return MapTypeRef(key_type=string, value_type=string)
            # Other Ecore classifiers (EObject, EClass, ...) stay unresolved.
            return ClassifierRef(name=f"ecore.{builtin}")
        key = self._href_to_key(uri, path)
        entry = self._map_entries.get(key)
        if entry is not None:
            return self._map_entry_type(entry, key)
        return ClassifierRef(name=key)

    def _map_entry_type(self, entry: ET.Element, key: str) -> MapTypeRef:
        parts: dict[str, TypeRef] = {}
        entry_path = key.rsplit(".", 1)[0]
        for child in entry:
            if _local(child.tag) == "eStructuralFeatures" and child.get("name") in ("key", "value"):
                parts[child.get("name", "")] = self._read_type(child, entry_path)
        if set(parts) != {"key", "value"}:
            raise ModelLoadError(f"{self._path}: map entry '{key}' must declare 'key' and 'value'")
        return MapTypeRef(key_type=parts["key"], value_type=parts["value"])

    def _href_to_key(self, href: str, path: str) -> str:
        """Turn ``[file.ecore]#//a/B`` into the dotted classifier key ``root.a.B``."""
        if "#//" not in href:
            raise ModelLoadError(f"{self._path}: unsupported type reference '{href}' in '{path}'")
        location, fragment = href.rsplit("#//", 1)
        if location:
            root = self._foreign_root_name(self._path.parent / location)
        else:
            root = self._root_names[0]
        return ".".join([root, *fragment.split("/")])

    def _foreign_root_name(self, path: Path) -> str:
        cached = self._root_name_cache.get(path)
        if cached is None:
            roots = _parse_root_packages(path)
            cached = _require_name(roots[0], path)
            self._root_name_cache[path] = cached
        return cached


def _parse_root_packages(path: Path) -> list[ET.Element]:
    try:
        root = ET.parse(path).getroot()
    except FileNotFoundError:
        raise ModelLoadError(f"Model file not found: {path}") from None
    except (OSError, ET.ParseError) as exc:
        raise ModelLoadError(f"Cannot parse Ecore file '{path}': {exc}") from exc

    tag = _local(root.tag)
    if tag == "EPackage":
        return [root]
    if tag == "XMI":
        packages = [child for child in root if _local(child.tag) == "EPackage"]
        if packages:
            return packages
    raise ModelLoadError(f"{path}: no EPackage found")


def _local(tag: str) -> str:
    return tag.split("}", 1)[1] if "}" in tag else tag


def _require_name(elem: ET.Element, path: Path) -> str:
    name = elem.get("name")
    if not name:
        raise ModelLoadError(f"{path}: <{_local(elem.tag)}> without a name")
    return name


def _bool_attr(elem: ET.Element, key: str) -> bool:
    return elem.get(key, "false").lower() == "true"


def _annotation_detail(elem: ET.Element, source: str, key: str) -> str | None:
    for annotation in elem:
        if _local(annotation.tag) != "eAnnotations" or annotation.get("source") != source:
            continue
        for detail in annotation:
            if _local(detail.tag) == "details" and detail.get("key") == key:
                return detail.get("value")
    return None


def _documentation(elem: ET.Element) -> str | None:
    return _annotation_detail(elem, GENMODEL_ANNOTATION, "documentation")
