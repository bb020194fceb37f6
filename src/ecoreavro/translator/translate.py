# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Translation of a meta-model graph into an Avro protocol.

Avro records have no inheritance, so every class is flattened: the features
of all its ancestors are copied into its record, most distant ancestor
first. Optional single-valued features become ``["null", T]`` unions and
multi-valued features become arrays. Named types are declared in a
deterministic dependency order so that equal graphs always produce equal
protocols.
"""

from __future__ import annotations

from collections import deque

from ecoreavro.model.metamodel import (
    UNBOUNDED,
    ClassDef,
    ClassifierRef,
    DataTypeDef,
    EnumDef,
    Feature,
    MapTypeRef,
    MetaModel,
    PrimitiveType,
    PrimitiveTypeRef,
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
    Schema,
    UnionSchema,
)
from ecoreavro.translator.errors import (
    CyclicInheritance,
    NameCollision,
    UnresolvedTypeReference,
    UnsupportedFeatureShape,
)
from ecoreavro.translator.resolution import ClassifierEntry, ClassifierIndex, package_namespace

# ###############
# Public Interface
# ###############

NULL_SCHEMA = PrimitiveSchema(type=AvroPrimitive.NULL)

PRIMITIVE_SCHEMAS: dict[PrimitiveType, PrimitiveSchema] = {
    PrimitiveType.STRING: PrimitiveSchema(type=AvroPrimitive.STRING),
    PrimitiveType.CHAR: PrimitiveSchema(type=AvroPrimitive.STRING),
    PrimitiveType.INT: PrimitiveSchema(type=AvroPrimitive.INT),
    PrimitiveType.SHORT: PrimitiveSchema(type=AvroPrimitive.INT),
    PrimitiveType.BYTE: PrimitiveSchema(type=AvroPrimitive.INT),
    PrimitiveType.LONG: PrimitiveSchema(type=AvroPrimitive.LONG),
    PrimitiveType.FLOAT: PrimitiveSchema(type=AvroPrimitive.FLOAT),
    PrimitiveType.DOUBLE: PrimitiveSchema(type=AvroPrimitive.DOUBLE),
    PrimitiveType.BOOLEAN: PrimitiveSchema(type=AvroPrimitive.BOOLEAN),
    PrimitiveType.BYTE_ARRAY: PrimitiveSchema(type=AvroPrimitive.BYTES),
    PrimitiveType.DATE: PrimitiveSchema(type=AvroPrimitive.LONG, logical_type="timestamp-millis"),
    PrimitiveType.BIG_INTEGER: PrimitiveSchema(type=AvroPrimitive.STRING),
    PrimitiveType.BIG_DECIMAL: PrimitiveSchema(type=AvroPrimitive.STRING),
}

# Java classes a user-declared data type may wrap.
JAVA_INSTANCE_TYPES: dict[str, PrimitiveType] = {
    "java.lang.String": PrimitiveType.STRING,
    "java.lang.Character": PrimitiveType.CHAR,
    "char": PrimitiveType.CHAR,
    "java.lang.Integer": PrimitiveType.INT,
    "int": PrimitiveType.INT,
    "java.lang.Short": PrimitiveType.SHORT,
    "short": PrimitiveType.SHORT,
    "java.lang.Byte": PrimitiveType.BYTE,
    "byte": PrimitiveType.BYTE,
    "java.lang.Long": PrimitiveType.LONG,
    "long": PrimitiveType.LONG,
    "java.lang.Float": PrimitiveType.FLOAT,
    "float": PrimitiveType.FLOAT,
    "java.lang.Double": PrimitiveType.DOUBLE,
    "double": PrimitiveType.DOUBLE,
    "java.lang.Boolean": PrimitiveType.BOOLEAN,
    "boolean": PrimitiveType.BOOLEAN,
    "byte[]": PrimitiveType.BYTE_ARRAY,
    "java.util.Date": PrimitiveType.DATE,
    "java.math.BigInteger": PrimitiveType.BIG_INTEGER,
    "java.math.BigDecimal": PrimitiveType.BIG_DECIMAL,
}


def translate(model: MetaModel) -> Protocol:
    """Translate a meta-model graph into an Avro protocol.

    Mapping rules:
    - Each class becomes one record named after it, in the namespace of its
      package. Marker interfaces (interfaces without any features) are left
      out unless a feature uses them as its type.
    - Record fields are the class's flattened features: ancestors ranked by
      their longest distance from the class (most distant first, ties in
      breadth-first discovery order), then the class's own features. A
      redeclared feature name replaces the inherited one in place.
    - Each enum becomes an enum with the same ordered symbols.
    - Data types with a fixed size become fixed types; data types wrapping a
      known Java class become the corresponding primitive.
    - A multi-valued feature becomes ``array<T>`` with an empty default; a
      required single-valued feature becomes ``T``; an optional one becomes
      ``["null", T]`` with a null default.

    Named types are declared in pre-order over the package tree, each after
    the types its fields reference. References inside a cycle stay forward
    references by name.

    Args:
        model: The meta-model graph to translate. It is not modified.

    Returns:
        The complete :class:`Protocol`.

    Raises:
        UnresolvedTypeReference: A feature or supertype names an unknown type.
        NameCollision: Two declarations map to the same Avro name, an enum
            repeats a literal, or a class repeats a feature name.
        UnsupportedFeatureShape: A feature has no defined Avro mapping (map
            types, opaque Java types, upper bound 0, inconsistent bounds).
        CyclicInheritance: A class inherits from itself.
    """
    return _Translator(model).translate()


# ################
# Implementation
# ################


class _Translator:
    """Translates a single meta-model graph."""

    def __init__(self, model: MetaModel) -> None:
        self._model = model
        self._index = ClassifierIndex(model)
        self._supertype_cache: dict[str, list[ClassifierEntry]] = {}

    def translate(self) -> Protocol:
        if not self._model.packages:
            raise UnsupportedFeatureShape("meta-model has no packages")

        declared: dict[str, RecordSchema | EnumSchema | FixedSchema] = {}
        dependencies: dict[str, list[str]] = {}
        markers: set[str] = set()

        for entry in self._index.entries:
            classifier = entry.classifier
            if isinstance(classifier, ClassDef):
                record, deps = self._build_record(entry)
                declared[entry.key] = record
                dependencies[entry.key] = deps
                if classifier.is_interface and not record.fields:
                    markers.add(entry.key)
            elif isinstance(classifier, EnumDef):
                declared[entry.key] = _build_enum(entry)
            elif classifier.fixed_size is not None:
                declared[entry.key] = _build_fixed(entry)

        referenced = {dep for deps in dependencies.values() for dep in deps}
        for key in markers - referenced:
            del declared[key]

        keys = [entry.key for entry in self._index.entries if entry.key in declared]
        types = [declared[key] for key in _declaration_order(keys, dependencies)]

        root = self._model.packages[0]
        name = self._model.name or root.name[:1].upper() + root.name[1:]
        return Protocol(
            name=name,
            namespace=package_namespace(root),
            doc=root.documentation,
            types=tuple(types),
        )

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _build_record(self, entry: ClassifierEntry) -> tuple[RecordSchema, list[str]]:
        """Build the record for a class and the keys of the types it references."""
        fields: list[FieldSchema] = []
        deps: list[str] = []
        for feature, owner in self._flatten(entry):
            field_schema, dep = self._build_field(feature, owner)
            fields.append(field_schema)
            if dep is not None and dep not in deps:
                deps.append(dep)
        record = RecordSchema(
            name=entry.name,
            namespace=entry.namespace,
            doc=entry.classifier.documentation,
            fields=tuple(fields),
        )
        return record, deps

    def _flatten(self, entry: ClassifierEntry) -> list[tuple[Feature, ClassifierEntry]]:
        """Return the class's features after inheritance, with their declaring class."""
        merged: dict[str, tuple[Feature, ClassifierEntry]] = {}
        for owner in [*self._ancestors(entry), entry]:
            assert isinstance(owner.classifier, ClassDef)
            own: set[str] = set()
            for feature in owner.classifier.features:
                if feature.name in own:
                    raise NameCollision(
                        f"feature '{feature.name}' is declared more than once",
                        package=owner.path,
                        classifier=owner.name,
                        feature=feature.name,
                    )
                own.add(feature.name)
                # Reassigning an existing key keeps its original position.
                merged[feature.name] = (feature, owner)
        return list(merged.values())

    def _ancestors(self, entry: ClassifierEntry) -> list[ClassifierEntry]:
        """Return all transitive supertypes, most distant first."""
        depths: dict[str, int] = {}
        discovered: list[ClassifierEntry] = []
        queue = deque((sup, 1) for sup in self._supertypes(entry))
        limit = len(self._index.entries)
        while queue:
            ancestor, depth = queue.popleft()
            if ancestor.key == entry.key or depth > limit:
                raise CyclicInheritance(
                    f"inheritance cycle through '{ancestor.key}'",
                    package=entry.path,
                    classifier=entry.name,
                )
            known = depths.get(ancestor.key)
            if known is None:
                discovered.append(ancestor)
            elif known >= depth:
                continue
            depths[ancestor.key] = depth
            queue.extend((sup, depth + 1) for sup in self._supertypes(ancestor))
        # sorted() is stable, so equal depths keep discovery order.
        return sorted(discovered, key=lambda a: -depths[a.key])

    def _supertypes(self, entry: ClassifierEntry) -> list[ClassifierEntry]:
        cached = self._supertype_cache.get(entry.key)
        if cached is not None:
            return cached
        assert isinstance(entry.classifier, ClassDef)
        supertypes: list[ClassifierEntry] = []
        for ref in entry.classifier.supertypes:
            sup = self._index.resolve(ref, entry.path, classifier=entry.name)
            if not isinstance(sup.classifier, ClassDef):
                raise UnresolvedTypeReference(
                    f"supertype '{ref.name}' is not a class",
                    package=entry.path,
                    classifier=entry.name,
                )
            supertypes.append(sup)
        self._supertype_cache[entry.key] = supertypes
        return supertypes

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def _build_field(self, feature: Feature, owner: ClassifierEntry) -> tuple[FieldSchema, str | None]:
        """Map one feature to a field, resolved in the package that declares it."""
        _check_bounds(feature, owner)
        item, dep = self._map_type(feature, owner)
        if feature.is_many:
            return FieldSchema(
                name=feature.name,
                type=ArraySchema(items=item),
                default=FieldDefault.EMPTY_ARRAY,
                doc=feature.documentation,
            ), dep
        if feature.lower_bound >= 1:
            return FieldSchema(name=feature.name, type=item, doc=feature.documentation), dep
        return FieldSchema(
            name=feature.name,
            type=UnionSchema(branches=(NULL_SCHEMA, item)),
            default=FieldDefault.NULL,
            doc=feature.documentation,
        ), dep

    def _map_type(self, feature: Feature, owner: ClassifierEntry) -> tuple[Schema, str | None]:
        """Return the element schema of a feature and the key of the named type it uses."""
        type_ref = feature.type
        if isinstance(type_ref, PrimitiveTypeRef):
            return _primitive_schema(type_ref.primitive, feature, owner), None
        if isinstance(type_ref, MapTypeRef):
            raise _unsupported("map-typed features have no Avro mapping", feature, owner)

        assert isinstance(type_ref, ClassifierRef)
        target = self._index.resolve(type_ref, owner.path, classifier=owner.name, feature=feature.name)
        classifier = target.classifier
        if isinstance(classifier, DataTypeDef) and classifier.fixed_size is None:
            primitive = JAVA_INSTANCE_TYPES.get(classifier.instance_class_name or "")
            if primitive is None:
                raise _unsupported(
                    f"data type '{target.key}' wraps '{classifier.instance_class_name}',"
                    " which has no Avro mapping",
                    feature,
                    owner,
                )
            return _primitive_schema(primitive, feature, owner), None
        return NamedSchemaRef(fullname=target.fullname), target.key


# ------------------------------------------------------------------
# Module-level helper functions
# ------------------------------------------------------------------


def _declaration_order(keys: list[str], dependencies: dict[str, list[str]]) -> list[str]:
    """Return *keys* in depth-first post-order over their dependencies.

    Each key comes after the keys it depends on, except where a cycle makes
    that impossible. The walk keeps an explicit stack of pending dependency
    iterators instead of recursing.
    """
    order: list[str] = []
    visited: set[str] = set()
    for root in keys:
        if root in visited:
            continue
        visited.add(root)
        stack = [(root, iter(dependencies.get(root, ())))]
        while stack:
            key, pending = stack[-1]
            for dep in pending:
                if dep not in visited:
                    visited.add(dep)
                    stack.append((dep, iter(dependencies.get(dep, ()))))
                    break
            else:
                stack.pop()
                order.append(key)
    return order


def _build_enum(entry: ClassifierEntry) -> EnumSchema:
    enum_def = entry.classifier
    assert isinstance(enum_def, EnumDef)
    seen: set[str] = set()
    for literal in enum_def.literals:
        if literal in seen:
            raise NameCollision(
                f"duplicate literal '{literal}'",
                package=entry.path,
                classifier=entry.name,
            )
        seen.add(literal)
    return EnumSchema(
        name=entry.name,
        namespace=entry.namespace,
        doc=enum_def.documentation,
        symbols=enum_def.literals,
    )


def _build_fixed(entry: ClassifierEntry) -> FixedSchema:
    data_type = entry.classifier
    assert isinstance(data_type, DataTypeDef) and data_type.fixed_size is not None
    if data_type.fixed_size <= 0:
        raise UnsupportedFeatureShape(
            f"fixed size must be positive, got {data_type.fixed_size}",
            package=entry.path,
            classifier=entry.name,
        )
    return FixedSchema(
        name=entry.name,
        namespace=entry.namespace,
        doc=data_type.documentation,
        size=data_type.fixed_size,
    )


def _primitive_schema(primitive: PrimitiveType, feature: Feature, owner: ClassifierEntry) -> PrimitiveSchema:
    schema = PRIMITIVE_SCHEMAS.get(primitive)
    if schema is None:
        raise _unsupported(f"type '{primitive.value}' has no Avro mapping", feature, owner)
    return schema


def _check_bounds(feature: Feature, owner: ClassifierEntry) -> None:
    lower, upper = feature.lower_bound, feature.upper_bound
    if lower < 0:
        raise _unsupported(f"lower bound {lower} is negative", feature, owner)
    if upper == 0:
        raise _unsupported("upper bound 0 can never hold a value", feature, owner)
    if upper < UNBOUNDED:
        raise _unsupported(f"upper bound {upper} is not a valid multiplicity", feature, owner)
    if upper != UNBOUNDED and lower > upper:
        raise _unsupported(f"lower bound {lower} exceeds upper bound {upper}", feature, owner)


def _unsupported(message: str, feature: Feature, owner: ClassifierEntry) -> UnsupportedFeatureShape:
    return UnsupportedFeatureShape(message, package=owner.path, classifier=owner.name, feature=feature.name)
