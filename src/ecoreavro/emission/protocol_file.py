# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical ``.avpr`` text of a protocol and its location on disk.

The text is JSON with a fixed key order and indentation, so equal protocols
always serialize to identical bytes. Named type references always use full
names.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ecoreavro.model.schema import (
    ArraySchema,
    EnumSchema,
    FieldDefault,
    FieldSchema,
    FixedSchema,
    NamedSchemaRef,
    PrimitiveSchema,
    Protocol,
    RecordSchema,
    Schema,
    UnionSchema,
)

# ###############
# Public Interface
# ###############

PROTOCOL_SUFFIX = ".avpr"


def serialize(protocol: Protocol) -> str:
    """Serialize a protocol to its canonical JSON text (with a trailing newline)."""
    return json.dumps(_protocol_to_dict(protocol), indent=2, ensure_ascii=False) + "\n"


def protocol_path(protocol: Protocol, output_root: Path) -> Path:
    """Return where *protocol* is written below *output_root*.

    Each namespace segment becomes one directory level, e.g. namespace
    ``com.example.shop`` and name ``Shop`` give
    ``output_root/com/example/shop/Shop.avpr``.
    """
    path = output_root
    for segment in protocol.namespace.split("."):
        if segment:
            path = path / segment
    return path / (protocol.name + PROTOCOL_SUFFIX)


def write_protocol(protocol: Protocol, output_root: Path) -> tuple[Path, bool]:
    """Write *protocol* below *output_root*, creating parent directories as needed.

    A file that already holds the exact text is left untouched so that its
    modification time only changes when the schema does.

    Returns:
        The path of the protocol file and whether it was (re)written.
    """
    path = protocol_path(protocol, output_root)
    text = serialize(protocol)
    if path.is_file() and path.read_text(encoding="utf-8") == text:
        return path, False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path, True


# ################
# Implementation
# ################


def _protocol_to_dict(protocol: Protocol) -> dict[str, Any]:
    d: dict[str, Any] = {"protocol": protocol.name, "namespace": protocol.namespace}
    if protocol.doc is not None:
        d["doc"] = protocol.doc
    d["types"] = [_named_type_to_dict(t) for t in protocol.types]
    d["messages"] = dict(protocol.messages)
    return d


def _named_type_to_dict(named: RecordSchema | EnumSchema | FixedSchema) -> dict[str, Any]:
    d: dict[str, Any] = {"type": named.kind, "name": named.name, "namespace": named.namespace}
    if named.doc is not None:
        d["doc"] = named.doc
    if isinstance(named, RecordSchema):
        d["fields"] = [_field_to_dict(f) for f in named.fields]
    elif isinstance(named, EnumSchema):
        d["symbols"] = list(named.symbols)
    else:
        d["size"] = named.size
    return d


def _field_to_dict(f: FieldSchema) -> dict[str, Any]:
    d: dict[str, Any] = {"name": f.name, "type": _schema_to_json(f.type)}
    if f.default == FieldDefault.NULL:
        d["default"] = None
    elif f.default == FieldDefault.EMPTY_ARRAY:
        d["default"] = []
    if f.doc is not None:
        d["doc"] = f.doc
    return d


def _schema_to_json(schema: Schema) -> Any:
    """Encode a field schema in Avro's JSON notation."""
    if isinstance(schema, PrimitiveSchema):
        if schema.logical_type is None:
            return schema.type.value
        return {"type": schema.type.value, "logicalType": schema.logical_type}
    if isinstance(schema, NamedSchemaRef):
        return schema.fullname
    if isinstance(schema, ArraySchema):
        return {"type": "array", "items": _schema_to_json(schema.items)}
    # UnionSchema is the only remaining variant.
    assert isinstance(schema, UnionSchema)
    return [_schema_to_json(branch) for branch in schema.branches]
