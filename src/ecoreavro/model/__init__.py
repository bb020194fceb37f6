# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Input meta-model graph and output Avro protocol models."""

from ecoreavro.model.metamodel import (
    UNBOUNDED,
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
from ecoreavro.model.schema import (
    ArraySchema,
    AvroPrimitive,
    EnumSchema,
    FieldDefault,
    FieldSchema,
    FixedSchema,
    NamedSchemaRef,
    PrimitiveSchema,
    Protocol,
    RecordSchema,
    UnionSchema,
)

__all__ = [
    # Meta-model
    "UNBOUNDED",
    "PrimitiveType",
    "PrimitiveTypeRef",
    "ClassifierRef",
    "MapTypeRef",
    "TypeRef",
    "FeatureKind",
    "Feature",
    "ClassDef",
    "EnumDef",
    "DataTypeDef",
    "Package",
    "MetaModel",
    # Avro protocol
    "AvroPrimitive",
    "FieldDefault",
    "PrimitiveSchema",
    "NamedSchemaRef",
    "ArraySchema",
    "UnionSchema",
    "FieldSchema",
    "RecordSchema",
    "EnumSchema",
    "FixedSchema",
    "Protocol",
]
