# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Avro protocol document produced by the translator."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class AvroPrimitive(Enum):
    """Avro primitive type names."""

    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"


class FieldDefault(Enum):
    """Default-value policy of a record field."""

    NONE = "none"
    NULL = "null"
    EMPTY_ARRAY = "empty_array"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class PrimitiveSchema(_Frozen):
    """A primitive field type, optionally annotated with a logical type."""

    kind: Literal["primitive"] = "primitive"
    type: AvroPrimitive
    logical_type: str | None = None


class NamedSchemaRef(_Frozen):
    """A reference by full name to a named type of the protocol."""

    kind: Literal["named"] = "named"
    fullname: str


class ArraySchema(_Frozen):
    """An array of items of one schema."""

    kind: Literal["array"] = "array"
    items: Schema


class UnionSchema(_Frozen):
    """A union of alternatives; used for nullable fields."""

    kind: Literal["union"] = "union"
    branches: tuple[Schema, ...]


Schema = Annotated[
    PrimitiveSchema | NamedSchemaRef | ArraySchema | UnionSchema,
    _Field(discriminator="kind"),
]


class FieldSchema(_Frozen):
    """A named, typed field of a record."""

    name: str
    type: Schema
    default: FieldDefault = FieldDefault.NONE
    doc: str | None = None


class _NamedType(_Frozen):
    name: str
    namespace: str
    doc: str | None = None

    @property
    def fullname(self) -> str:
        """Return ``namespace.name``, or just the name in the null namespace."""
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


class RecordSchema(_NamedType):
    """A record type with ordered fields."""

    kind: Literal["record"] = "record"
    fields: tuple[FieldSchema, ...] = ()


class EnumSchema(_NamedType):
    """An enum type with ordered symbols."""

    kind: Literal["enum"] = "enum"
    symbols: tuple[str, ...] = ()


class FixedSchema(_NamedType):
    """A fixed-size byte sequence type."""

    kind: Literal["fixed"] = "fixed"
    size: int


NamedType = Annotated[
    RecordSchema | EnumSchema | FixedSchema,
    _Field(discriminator="kind"),
]


class Protocol(_Frozen):
    """An Avro protocol: a namespace, a name and ordered type declarations.

    ``messages`` is always empty; the translator only declares types.
    """

    name: str
    namespace: str
    doc: str | None = None
    types: tuple[NamedType, ...] = ()
    messages: dict[str, object] = _Field(default_factory=dict)

    def find_type(self, fullname: str) -> RecordSchema | EnumSchema | FixedSchema | None:
        """Return the declared type with *fullname*, or None."""
        for named in self.types:
            if named.fullname == fullname:
                return named
        return None


# Resolve forward references for self-referential models.
ArraySchema.model_rebuild()
UnionSchema.model_rebuild()
FieldSchema.model_rebuild()
Protocol.model_rebuild()
