# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Meta-model graph: packages, classes, enums, data types and their features."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

UNBOUNDED = -1


class PrimitiveType(Enum):
    """Built-in Ecore data types understood by the translator."""

    STRING = "EString"
    INT = "EInt"
    SHORT = "EShort"
    BYTE = "EByte"
    LONG = "ELong"
    FLOAT = "EFloat"
    DOUBLE = "EDouble"
    BOOLEAN = "EBoolean"
    CHAR = "EChar"
    BYTE_ARRAY = "EByteArray"
    DATE = "EDate"
    BIG_INTEGER = "EBigInteger"
    BIG_DECIMAL = "EBigDecimal"
    JAVA_OBJECT = "EJavaObject"
    FEATURE_MAP_ENTRY = "EFeatureMapEntry"


class FeatureKind(Enum):
    """Whether a feature holds plain values or points at other objects."""

    ATTRIBUTE = "attribute"
    REFERENCE = "reference"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class PrimitiveTypeRef(_Frozen):
    """Reference to a built-in Ecore data type."""

    kind: Literal["primitive"] = "primitive"
    primitive: PrimitiveType


class ClassifierRef(_Frozen):
    """Reference to a class, enum or data type by qualified or simple name."""

    kind: Literal["classifier"] = "classifier"
    name: str


class MapTypeRef(_Frozen):
    """Reference to a map-entry type (Ecore ``EMap``)."""

    kind: Literal["map"] = "map"
    key_type: TypeRef
    value_type: TypeRef


# The `kind` discriminator lets model documents pick the variant unambiguously.
TypeRef = Annotated[
    PrimitiveTypeRef | ClassifierRef | MapTypeRef,
    _Field(discriminator="kind"),
]


class Feature(_Frozen):
    """A structural feature (attribute or reference) declared on a class.

    An ``upper_bound`` of :data:`UNBOUNDED` means the feature may hold any
    number of values.
    """

    name: str
    type: TypeRef
    kind: FeatureKind = FeatureKind.ATTRIBUTE
    lower_bound: int = 0
    upper_bound: int = 1
    containment: bool = False
    documentation: str | None = None

    @property
    def is_many(self) -> bool:
        """Return True if the feature may hold more than one value."""
        return self.upper_bound == UNBOUNDED or self.upper_bound > 1


class ClassDef(_Frozen):
    """A class with ordered features and zero or more supertypes."""

    kind: Literal["class"] = "class"
    name: str
    features: tuple[Feature, ...] = ()
    supertypes: tuple[ClassifierRef, ...] = ()
    is_abstract: bool = False
    is_interface: bool = False
    documentation: str | None = None


class EnumDef(_Frozen):
    """An enumeration with ordered literal names."""

    kind: Literal["enum"] = "enum"
    name: str
    literals: tuple[str, ...] = ()
    documentation: str | None = None


class DataTypeDef(_Frozen):
    """A user-declared data type backed by a Java class or a fixed byte size."""

    kind: Literal["datatype"] = "datatype"
    name: str
    instance_class_name: str | None = None
    fixed_size: int | None = None
    documentation: str | None = None


Classifier = Annotated[
    ClassDef | EnumDef | DataTypeDef,
    _Field(discriminator="kind"),
]


class Package(_Frozen):
    """A namespace node owning classifiers and nested sub-packages."""

    name: str
    base_package: str | None = None
    classifiers: tuple[Classifier, ...] = ()
    packages: tuple[Package, ...] = ()
    documentation: str | None = None


class MetaModel(_Frozen):
    """The root of a meta-model graph: an ordered list of root packages."""

    name: str | None = None
    packages: tuple[Package, ...] = ()


# Resolve forward references for self-referential models.
MapTypeRef.model_rebuild()
Feature.model_rebuild()
Package.model_rebuild()
MetaModel.model_rebuild()
