# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the meta-model to Avro protocol translator."""

import pytest

from ecoreavro.model import (
    UNBOUNDED,
    ArraySchema,
    AvroPrimitive,
    ClassDef,
    ClassifierRef,
    DataTypeDef,
    EnumDef,
    EnumSchema,
    Feature,
    FeatureKind,
    FieldDefault,
    FixedSchema,
    MetaModel,
    NamedSchemaRef,
    Package,
    PrimitiveSchema,
    PrimitiveType,
    PrimitiveTypeRef,
    Protocol,
    RecordSchema,
    UnionSchema,
)
from ecoreavro.translator import translate

# ###############
# Test Helpers
# ###############

STRING = PrimitiveSchema(type=AvroPrimitive.STRING)
INT = PrimitiveSchema(type=AvroPrimitive.INT)
NULL = PrimitiveSchema(type=AvroPrimitive.NULL)


def _prim(primitive: PrimitiveType = PrimitiveType.STRING) -> PrimitiveTypeRef:
    return PrimitiveTypeRef(primitive=primitive)


def _attr(
    name: str,
    primitive: PrimitiveType = PrimitiveType.STRING,
    lower: int = 0,
    upper: int = 1,
) -> Feature:
    return Feature(name=name, type=_prim(primitive), lower_bound=lower, upper_bound=upper)


def _ref(name: str, target: str, lower: int = 0, upper: int = 1, containment: bool = False) -> Feature:
    return Feature(
        name=name,
        kind=FeatureKind.REFERENCE,
        type=ClassifierRef(name=target),
        lower_bound=lower,
        upper_bound=upper,
        containment=containment,
    )


def _cls(name: str, *features: Feature, supertypes: tuple[str, ...] = (), **kwargs: bool) -> ClassDef:
    return ClassDef(
        name=name,
        features=features,
        supertypes=tuple(ClassifierRef(name=s) for s in supertypes),
        **kwargs,
    )


def _model(*classifiers: ClassDef | EnumDef | DataTypeDef, packages: tuple[Package, ...] = ()) -> MetaModel:
    return MetaModel(packages=(Package(name="shop", classifiers=classifiers, packages=packages),))


def _record(protocol: Protocol, fullname: str) -> RecordSchema:
    named = protocol.find_type(fullname)
    assert isinstance(named, RecordSchema), f"{fullname} is not a record: {named!r}"
    return named


def _field_names(record: RecordSchema) -> list[str]:
    return [f.name for f in record.fields]


def _type_names(protocol: Protocol) -> list[str]:
    return [t.fullname for t in protocol.types]


def _shop_model() -> MetaModel:
    return _model(
        _cls("Entity", _attr("id", lower=1), is_abstract=True),
        _cls("Item", _attr("name", lower=1), _attr("tags", upper=UNBOUNDED), supertypes=("Entity",)),
    )


# ###############
# Worked example
# ###############


class TestShopExample:
    def test_item_record_has_inherited_and_own_fields_in_order(self) -> None:
        item = _record(translate(_shop_model()), "shop.Item")
        assert _field_names(item) == ["id", "name", "tags"]

    def test_required_string_fields_are_plain_strings(self) -> None:
        item = _record(translate(_shop_model()), "shop.Item")
        for field_schema in item.fields[:2]:
            assert field_schema.type == STRING
            assert field_schema.default == FieldDefault.NONE

    def test_multi_valued_field_is_string_array(self) -> None:
        item = _record(translate(_shop_model()), "shop.Item")
        tags = item.fields[2]
        assert tags.type == ArraySchema(items=STRING)
        assert tags.default == FieldDefault.EMPTY_ARRAY

    def test_abstract_class_still_gets_a_record(self) -> None:
        entity = _record(translate(_shop_model()), "shop.Entity")
        assert _field_names(entity) == ["id"]

    def test_protocol_name_and_namespace_come_from_root_package(self) -> None:
        protocol = translate(_shop_model())
        assert protocol.namespace == "shop"
        assert protocol.name == "Shop"
        assert protocol.messages == {}


# ###############
# Namespaces
# ###############


class TestNamespaces:
    def test_nested_package_types_use_dotted_namespace(self) -> None:
        catalog = Package(name="catalog", classifiers=(_cls("Category", _attr("title", lower=1)),))
        protocol = translate(_model(packages=(catalog,)))
        category = _record(protocol, "shop.catalog.Category")
        assert category.namespace == "shop.catalog"
        assert category.name == "Category"

    def test_same_simple_name_in_sibling_packages_does_not_collide(self) -> None:
        a = Package(name="a", classifiers=(_cls("Node", _attr("x")),))
        b = Package(name="b", classifiers=(_cls("Node", _attr("y")),))
        protocol = translate(_model(packages=(a, b)))
        assert _type_names(protocol) == ["shop.a.Node", "shop.b.Node"]

    def test_base_package_prefixes_every_namespace(self) -> None:
        catalog = Package(name="catalog", classifiers=(_cls("Category"),))
        model = MetaModel(
            packages=(Package(name="shop", base_package="com.example", classifiers=(_cls("Item"),), packages=(catalog,)),)
        )
        protocol = translate(model)
        assert protocol.namespace == "com.example.shop"
        assert _type_names(protocol) == ["com.example.shop.Item", "com.example.shop.catalog.Category"]

    def test_model_name_overrides_protocol_name(self) -> None:
        model = MetaModel(name="ShopModel", packages=_shop_model().packages)
        assert translate(model).name == "ShopModel"

    def test_protocol_doc_comes_from_root_package(self) -> None:
        model = MetaModel(packages=(Package(name="shop", documentation="Shop domain."),))
        assert translate(model).doc == "Shop domain."

    def test_package_without_classifiers_gives_empty_protocol(self) -> None:
        protocol = translate(MetaModel(packages=(Package(name="empty"),)))
        assert protocol.name == "Empty"
        assert protocol.types == ()


# ###############
# Feature mapping
# ###############


class TestOptionality:
    def test_optional_primitive_is_nullable_with_null_default(self) -> None:
        record = _record(translate(_model(_cls("Item", _attr("note")))), "shop.Item")
        note = record.fields[0]
        assert note.type == UnionSchema(branches=(NULL, STRING))
        assert note.default == FieldDefault.NULL

    def test_required_primitive_is_not_nullable(self) -> None:
        record = _record(translate(_model(_cls("Item", _attr("count", PrimitiveType.INT, lower=1)))), "shop.Item")
        assert record.fields[0].type == INT
        assert record.fields[0].default == FieldDefault.NONE

    def test_optional_enum_is_nullable_named_reference(self) -> None:
        model = _model(
            _cls("Item", Feature(name="status", type=ClassifierRef(name="Status"))),
            EnumDef(name="Status", literals=("DRAFT", "ACTIVE")),
        )
        status = _record(translate(model), "shop.Item").fields[0]
        assert status.type == UnionSchema(branches=(NULL, NamedSchemaRef(fullname="shop.Status")))
        assert status.default == FieldDefault.NULL

    def test_required_enum_is_plain_named_reference(self) -> None:
        model = _model(
            _cls("Item", Feature(name="status", type=ClassifierRef(name="Status"), lower_bound=1)),
            EnumDef(name="Status", literals=("DRAFT",)),
        )
        status = _record(translate(model), "shop.Item").fields[0]
        assert status.type == NamedSchemaRef(fullname="shop.Status")
        assert status.default == FieldDefault.NONE

    def test_optional_class_reference_is_nullable(self) -> None:
        model = _model(_cls("Order", _ref("customer", "Customer")), _cls("Customer", _attr("name")))
        customer = _record(translate(model), "shop.Order").fields[0]
        assert customer.type == UnionSchema(branches=(NULL, NamedSchemaRef(fullname="shop.Customer")))


class TestMultiplicity:
    @pytest.mark.parametrize(
        ("lower", "upper"),
        [(0, UNBOUNDED), (1, UNBOUNDED), (0, 5), (2, 2), (3, UNBOUNDED)],
    )
    def test_many_valued_feature_is_array(self, lower: int, upper: int) -> None:
        record = _record(translate(_model(_cls("Item", _attr("values", lower=lower, upper=upper)))), "shop.Item")
        assert record.fields[0].type == ArraySchema(items=STRING)
        assert record.fields[0].default == FieldDefault.EMPTY_ARRAY

    def test_many_valued_reference_is_array_of_records(self) -> None:
        model = _model(_cls("Order", _ref("lines", "Line", upper=UNBOUNDED)), _cls("Line"))
        lines = _record(translate(model), "shop.Order").fields[0]
        assert lines.type == ArraySchema(items=NamedSchemaRef(fullname="shop.Line"))

    def test_containment_does_not_change_field_shape(self) -> None:
        model = _model(
            _cls(
                "Order",
                _ref("owned", "Line", upper=UNBOUNDED, containment=True),
                _ref("linked", "Line", upper=UNBOUNDED, containment=False),
            ),
            _cls("Line"),
        )
        owned, linked = _record(translate(model), "shop.Order").fields
        assert owned.type == linked.type
        assert owned.default == linked.default


class TestPrimitiveMapping:
    @pytest.mark.parametrize(
        ("primitive", "expected"),
        [
            (PrimitiveType.STRING, PrimitiveSchema(type=AvroPrimitive.STRING)),
            (PrimitiveType.CHAR, PrimitiveSchema(type=AvroPrimitive.STRING)),
            (PrimitiveType.INT, PrimitiveSchema(type=AvroPrimitive.INT)),
            (PrimitiveType.SHORT, PrimitiveSchema(type=AvroPrimitive.INT)),
            (PrimitiveType.BYTE, PrimitiveSchema(type=AvroPrimitive.INT)),
            (PrimitiveType.LONG, PrimitiveSchema(type=AvroPrimitive.LONG)),
            (PrimitiveType.FLOAT, PrimitiveSchema(type=AvroPrimitive.FLOAT)),
            (PrimitiveType.DOUBLE, PrimitiveSchema(type=AvroPrimitive.DOUBLE)),
            (PrimitiveType.BOOLEAN, PrimitiveSchema(type=AvroPrimitive.BOOLEAN)),
            (PrimitiveType.BYTE_ARRAY, PrimitiveSchema(type=AvroPrimitive.BYTES)),
            (PrimitiveType.DATE, PrimitiveSchema(type=AvroPrimitive.LONG, logical_type="timestamp-millis")),
            (PrimitiveType.BIG_DECIMAL, PrimitiveSchema(type=AvroPrimitive.STRING)),
            (PrimitiveType.BIG_INTEGER, PrimitiveSchema(type=AvroPrimitive.STRING)),
        ],
    )
    def test_ecore_primitive_maps_to_avro(self, primitive: PrimitiveType, expected: PrimitiveSchema) -> None:
        record = _record(translate(_model(_cls("Item", _attr("v", primitive, lower=1)))), "shop.Item")
        assert record.fields[0].type == expected


class TestDataTypes:
    def test_data_type_wrapping_java_class_maps_to_primitive(self) -> None:
        model = _model(
            _cls("Item", Feature(name="price", type=ClassifierRef(name="Money"), lower_bound=1)),
            DataTypeDef(name="Money", instance_class_name="java.math.BigDecimal"),
        )
        protocol = translate(model)
        assert _record(protocol, "shop.Item").fields[0].type == STRING
        assert _type_names(protocol) == ["shop.Item"]

    def test_fixed_size_data_type_becomes_fixed(self) -> None:
        model = _model(
            _cls("Item", Feature(name="uuid", type=ClassifierRef(name="Uuid"), lower_bound=1)),
            DataTypeDef(name="Uuid", instance_class_name="byte[]", fixed_size=16),
        )
        protocol = translate(model)
        uuid = protocol.find_type("shop.Uuid")
        assert isinstance(uuid, FixedSchema)
        assert uuid.size == 16
        assert _record(protocol, "shop.Item").fields[0].type == NamedSchemaRef(fullname="shop.Uuid")
        assert _type_names(protocol) == ["shop.Uuid", "shop.Item"]


# ###############
# Inheritance
# ###############


class TestInheritance:
    def test_redeclared_feature_shadows_inherited_one_in_place(self) -> None:
        model = _model(
            _cls("Entity", _attr("id"), _attr("created")),
            _cls("Item", _attr("id", PrimitiveType.INT, lower=1), _attr("name"), supertypes=("Entity",)),
        )
        item = _record(translate(model), "shop.Item")
        assert _field_names(item) == ["id", "created", "name"]
        assert item.fields[0].type == INT
        assert item.fields[0].default == FieldDefault.NONE

    def test_most_distant_ancestor_comes_first(self) -> None:
        model = _model(
            _cls("D", _attr("d"), supertypes=("B", "C")),
            _cls("B", _attr("b"), supertypes=("X",)),
            _cls("C", _attr("c"), supertypes=("Y",)),
            _cls("X", _attr("x")),
            _cls("Y", _attr("y"), supertypes=("Z",)),
            _cls("Z", _attr("z")),
        )
        assert _field_names(_record(translate(model), "shop.D")) == ["z", "x", "y", "b", "c", "d"]

    def test_diamond_ancestor_is_flattened_once(self) -> None:
        model = _model(
            _cls("A", _attr("a")),
            _cls("B", _attr("b"), supertypes=("A",)),
            _cls("C", _attr("c"), supertypes=("A",)),
            _cls("D", _attr("d"), supertypes=("B", "C")),
        )
        assert _field_names(_record(translate(model), "shop.D")) == ["a", "b", "c", "d"]

    def test_ancestor_reachable_at_two_depths_uses_the_deeper_one(self) -> None:
        model = _model(
            _cls("A", _attr("a")),
            _cls("B", _attr("b"), supertypes=("A",)),
            _cls("D", _attr("d"), supertypes=("B", "A")),
        )
        assert _field_names(_record(translate(model), "shop.D")) == ["a", "b", "d"]

    def test_inherited_feature_resolves_in_declaring_package(self) -> None:
        base = Package(
            name="base",
            classifiers=(
                _cls("Entity", Feature(name="kind", type=ClassifierRef(name="Kind"), lower_bound=1)),
                EnumDef(name="Kind", literals=("A", "B")),
            ),
        )
        orders = Package(name="orders", classifiers=(_cls("Order", supertypes=("shop.base.Entity",)),))
        protocol = translate(_model(packages=(base, orders)))
        order = _record(protocol, "shop.orders.Order")
        assert order.fields[0].type == NamedSchemaRef(fullname="shop.base.Kind")

    def test_marker_interface_is_not_emitted(self) -> None:
        model = _model(
            _cls("Named", is_interface=True),
            _cls("Item", _attr("name"), supertypes=("Named",)),
        )
        assert _type_names(translate(model)) == ["shop.Item"]

    def test_interface_with_features_is_emitted(self) -> None:
        model = _model(
            _cls("Named", _attr("name"), is_interface=True),
            _cls("Item", supertypes=("Named",)),
        )
        protocol = translate(model)
        assert _type_names(protocol) == ["shop.Named", "shop.Item"]
        assert _field_names(_record(protocol, "shop.Item")) == ["name"]

    def test_marker_interface_used_as_field_type_is_emitted_empty(self) -> None:
        model = _model(
            _cls("Marker", is_interface=True),
            _cls("Holder", _ref("target", "Marker")),
        )
        protocol = translate(model)
        assert _record(protocol, "shop.Marker").fields == ()
        assert _type_names(protocol) == ["shop.Marker", "shop.Holder"]


# ###############
# Enums
# ###############


class TestEnums:
    def test_literal_order_is_preserved(self) -> None:
        literals = ("ZULU", "ALPHA", "MIKE")
        protocol = translate(_model(EnumDef(name="Code", literals=literals, documentation="Codes.")))
        code = protocol.find_type("shop.Code")
        assert isinstance(code, EnumSchema)
        assert code.symbols == literals
        assert code.doc == "Codes."


# ###############
# Declaration order and determinism
# ###############


class TestDeclarationOrder:
    def test_referenced_types_are_declared_before_their_referrers(self) -> None:
        model = _model(
            _cls("Order", _ref("customer", "Customer"), Feature(name="state", type=ClassifierRef(name="State"))),
            _cls("Customer", _attr("name")),
            EnumDef(name="State", literals=("OPEN",)),
        )
        assert _type_names(translate(model)) == ["shop.Customer", "shop.State", "shop.Order"]

    def test_independent_types_keep_declaration_order(self) -> None:
        model = _model(_cls("C"), _cls("A"), EnumDef(name="B", literals=("X",)))
        assert _type_names(translate(model)) == ["shop.C", "shop.A", "shop.B"]

    def test_package_tree_is_walked_in_pre_order(self) -> None:
        inner = Package(name="inner", classifiers=(_cls("Deep"),))
        first = Package(name="first", classifiers=(_cls("One"),), packages=(inner,))
        second = Package(name="second", classifiers=(_cls("Two"),))
        model = MetaModel(packages=(Package(name="shop", classifiers=(_cls("Top"),), packages=(first, second)),))
        assert _type_names(translate(model)) == [
            "shop.Top",
            "shop.first.One",
            "shop.first.inner.Deep",
            "shop.second.Two",
        ]

    def test_cyclic_references_are_named_forward_references(self) -> None:
        model = _model(
            _cls("Order", _ref("customer", "Customer")),
            _cls("Customer", _ref("orders", "Order", upper=UNBOUNDED)),
        )
        protocol = translate(model)
        assert _type_names(protocol) == ["shop.Customer", "shop.Order"]
        customer = _record(protocol, "shop.Customer")
        assert customer.fields[0].type == ArraySchema(items=NamedSchemaRef(fullname="shop.Order"))

    def test_self_reference(self) -> None:
        model = _model(_cls("Node", _ref("children", "Node", upper=UNBOUNDED)))
        node = _record(translate(model), "shop.Node")
        assert node.fields[0].type == ArraySchema(items=NamedSchemaRef(fullname="shop.Node"))

    def test_translation_is_deterministic(self) -> None:
        assert translate(_shop_model()) == translate(_shop_model())


class TestCompleteness:
    def test_every_class_has_one_record_with_all_flattened_fields(self) -> None:
        model = _model(
            _cls("A", _attr("a1"), _attr("a2")),
            _cls("B", _attr("b"), supertypes=("A",)),
            _cls("C", _attr("a1", lower=1), _attr("c"), supertypes=("B",)),
        )
        protocol = translate(model)
        records = [t for t in protocol.types if isinstance(t, RecordSchema)]
        assert sorted(r.name for r in records) == ["A", "B", "C"]
        assert _field_names(_record(protocol, "shop.A")) == ["a1", "a2"]
        assert _field_names(_record(protocol, "shop.B")) == ["a1", "a2", "b"]
        assert _field_names(_record(protocol, "shop.C")) == ["a1", "a2", "b", "c"]

    def test_documentation_becomes_doc(self) -> None:
        feature = Feature(name="name", type=_prim(), documentation="Display name.")
        model = _model(ClassDef(name="Item", features=(feature,), documentation="An item."))
        item = _record(translate(model), "shop.Item")
        assert item.doc == "An item."
        assert item.fields[0].doc == "Display name."


# ###############
# Reference resolution
# ###############


class TestResolution:
    def test_qualified_reference_across_packages(self) -> None:
        common = Package(name="common", classifiers=(_cls("Address", _attr("street")),))
        orders = Package(name="orders", classifiers=(_cls("Order", _ref("ship_to", "shop.common.Address")),))
        order = _record(translate(_model(packages=(common, orders))), "shop.orders.Order")
        assert order.fields[0].type == UnionSchema(
            branches=(NULL, NamedSchemaRef(fullname="shop.common.Address"))
        )

    def test_reference_relative_to_referring_package(self) -> None:
        common = Package(name="common", classifiers=(_cls("Address"),))
        model = _model(_cls("Order", _ref("ship_to", "common.Address", lower=1)), packages=(common,))
        order = _record(translate(model), "shop.Order")
        assert order.fields[0].type == NamedSchemaRef(fullname="shop.common.Address")


class TestLongReferenceChains:
    def test_chain_of_two_thousand_classes(self) -> None:
        count = 2000
        classes = [_cls(f"C{i}", _ref("next", f"C{i + 1}")) for i in range(count - 1)]
        classes.append(_cls(f"C{count - 1}", _attr("value")))
        protocol = translate(MetaModel(packages=(Package(name="p", classifiers=tuple(classes)),)))
        assert _type_names(protocol) == [f"p.C{i}" for i in reversed(range(count))]

    def test_long_cycle_keeps_forward_reference(self) -> None:
        count = 1500
        classes = tuple(_cls(f"C{i}", _ref("next", f"C{(i + 1) % count}")) for i in range(count))
        protocol = translate(MetaModel(packages=(Package(name="p", classifiers=classes),)))
        names = _type_names(protocol)
        assert names[0] == "p.C1499"
        assert names[-1] == "p.C0"
        assert len(names) == count
