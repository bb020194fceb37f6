# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Name index over a meta-model graph and classifier reference resolution.

Every classifier is keyed by its package path plus its simple name
(``shop.catalog.Item``). References may use that key or a name relative
to the referring package (``Item``, ``catalog.Item`` from ``shop``).
"""

from __future__ import annotations

from dataclasses import dataclass

from ecoreavro.model.metamodel import ClassDef, ClassifierRef, DataTypeDef, EnumDef, MetaModel, Package
from ecoreavro.translator.errors import NameCollision, UnresolvedTypeReference

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ClassifierEntry:
    """A classifier together with its position in the package tree.

    Attributes:
        classifier: The class, enum or data type declaration.
        path: Dotted package path from the root (``shop.catalog``).
        namespace: Avro namespace of the package (base package + path).
    """

    classifier: ClassDef | EnumDef | DataTypeDef
    path: str
    namespace: str

    @property
    def name(self) -> str:
        return self.classifier.name

    @property
    def key(self) -> str:
        return f"{self.path}.{self.classifier.name}"

    @property
    def fullname(self) -> str:
        return f"{self.namespace}.{self.classifier.name}"


class ClassifierIndex:
    """Pre-order index of every classifier in a meta-model graph.

    Raises:
        NameCollision: If two classifiers share a package path and name, or
            would end up with the same Avro full name.
    """

    def __init__(self, model: MetaModel) -> None:
        self.entries: list[ClassifierEntry] = []
        self._by_key: dict[str, ClassifierEntry] = {}
        self._by_fullname: dict[str, ClassifierEntry] = {}
        for root in model.packages:
            prefix = root.base_package or ""
            self._add_package(root, path="", namespace_prefix=prefix)

    def get(self, key: str) -> ClassifierEntry:
        """Return the entry for a fully keyed classifier (``path.Name``)."""
        return self._by_key[key]

    def resolve(
        self,
        ref: ClassifierRef,
        from_path: str,
        *,
        classifier: str | None = None,
        feature: str | None = None,
    ) -> ClassifierEntry:
        """Resolve *ref* as seen from the package at *from_path*.

        The reference is tried as a full key first, then relative to the
        referring package.

        Raises:
            UnresolvedTypeReference: If neither lookup finds a classifier.
        """
        entry = self._by_key.get(ref.name)
        if entry is None:
            entry = self._by_key.get(f"{from_path}.{ref.name}")
        if entry is None:
            raise UnresolvedTypeReference(
                f"unknown type '{ref.name}'",
                package=from_path,
                classifier=classifier,
                feature=feature,
            )
        return entry

    def _add_package(self, package: Package, path: str, namespace_prefix: str) -> None:
        path = f"{path}.{package.name}" if path else package.name
        namespace = f"{namespace_prefix}.{path}" if namespace_prefix else path
        for classifier in package.classifiers:
            entry = ClassifierEntry(classifier=classifier, path=path, namespace=namespace)
            if entry.key in self._by_key:
                raise NameCollision(
                    f"'{classifier.name}' is declared more than once",
                    package=path,
                    classifier=classifier.name,
                )
            if entry.fullname in self._by_fullname:
                other = self._by_fullname[entry.fullname]
                raise NameCollision(
                    f"Avro name '{entry.fullname}' is also produced by '{other.key}'",
                    package=path,
                    classifier=classifier.name,
                )
            self._by_key[entry.key] = entry
            self._by_fullname[entry.fullname] = entry
            self.entries.append(entry)
        for sub in package.packages:
            self._add_package(sub, path, namespace_prefix)


def package_namespace(package: Package) -> str:
    """Return the Avro namespace of a root package."""
    if package.base_package:
        return f"{package.base_package}.{package.name}"
    return package.name
