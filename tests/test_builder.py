"""Unit tests for SchemaBuilder over hand-built descriptors."""

import pytest

from aischema.builder import SchemaBuilder, build_schema, json_type
from aischema.descriptors import (
    CollectionType,
    EnumType,
    MemberAnnotations,
    MemberDescriptor,
    ObjectType,
    PrimitiveType,
    ScalarKind,
)
from aischema.errors import CyclicTypeError, SchemaError
from aischema.models import ArrayNode, EnumNode, ObjectNode, ScalarNode


EMPTY_OBJECT = {
    "type": "object",
    "properties": {},
    "required": [],
    "additionalProperties": False,
}


class TestScalars:
    """Tests for primitive and enum types at the top level."""

    @pytest.mark.parametrize(
        "scalar,expected",
        [
            (ScalarKind.TEXT, "string"),
            (ScalarKind.INTEGER, "integer"),
            (ScalarKind.NUMBER, "number"),
            (ScalarKind.BOOLEAN, "boolean"),
            (ScalarKind.UNKNOWN, "string"),
        ],
    )
    def test_scalar_type_mapping(self, builder, scalar, expected):
        node = builder.build(PrimitiveType(name="t", scalar=scalar))

        assert isinstance(node, ScalarNode)
        assert node.to_dict() == {"type": expected, "description": ""}

    def test_scalar_uses_type_description(self, builder):
        node = builder.build(
            PrimitiveType(name="str", scalar=ScalarKind.TEXT, description="A name")
        )
        assert node.description == "A name"

    def test_enum_lists_names_in_declared_order(self, builder):
        node = builder.build(EnumType(name="Letter", names=("C", "A", "B")))

        assert isinstance(node, EnumNode)
        assert node.to_dict() == {
            "type": "string",
            "description": "",
            "enum": ["C", "A", "B"],
        }

    def test_enum_uses_type_description(self, builder):
        node = builder.build(
            EnumType(name="Size", names=("S", "L"), description="Shirt size")
        )
        assert node.description == "Shirt size"


class TestObjects:
    """Tests for object types and their members."""

    def test_object_schema(self, builder, widget_type, widget_schema):
        assert builder.build(widget_type).to_dict() == widget_schema

    def test_skipped_member_is_absent(self, builder, int_type, str_type):
        descriptor = ObjectType(
            name="Thing",
            members=[
                MemberDescriptor("x", int_type, MemberAnnotations(description="foo")),
                MemberDescriptor("y", str_type, MemberAnnotations(skip=True)),
            ],
        )

        node = builder.build(descriptor)

        assert node.to_dict() == {
            "type": "object",
            "properties": {"x": {"type": "integer", "description": "foo"}},
            "required": ["x"],
            "additionalProperties": False,
        }

    def test_required_follows_declaration_order(self, builder, int_type):
        names = ["zeta", "alpha", "mid", "beta"]
        descriptor = ObjectType(
            name="Ordered",
            members=[MemberDescriptor(name, int_type) for name in names],
        )

        node = builder.build(descriptor)

        assert node.required == names
        assert list(node.properties) == names

    def test_member_description_not_type_description(self, builder):
        size = EnumType(name="Size", names=("S",), description="Type level")
        label = PrimitiveType(
            name="Label", scalar=ScalarKind.TEXT, description="Type level"
        )
        descriptor = ObjectType(
            name="Shirt",
            members=[
                MemberDescriptor("size", size),
                MemberDescriptor(
                    "label", label, MemberAnnotations(description="Member level")
                ),
            ],
        )

        node = builder.build(descriptor)

        assert node.properties["size"].description == ""
        assert node.properties["label"].description == "Member level"

    def test_nested_object_is_inlined(self, builder, widget_type, widget_schema):
        descriptor = ObjectType(
            name="Order",
            members=[
                MemberDescriptor(
                    "widget", widget_type, MemberAnnotations(description="ignored")
                )
            ],
        )

        node = builder.build(descriptor)

        assert node.to_dict()["properties"]["widget"] == widget_schema

    def test_empty_object(self, builder):
        assert builder.build(ObjectType(name="Empty")).to_dict() == EMPTY_OBJECT

    def test_all_members_skipped(self, builder, int_type):
        descriptor = ObjectType(
            name="Hidden",
            members=[MemberDescriptor("x", int_type, MemberAnnotations(skip=True))],
        )
        assert builder.build(descriptor).to_dict() == EMPTY_OBJECT


class TestCollections:
    """Tests for collection members and top-level collections."""

    def test_collection_member_is_plain_array(self, builder, int_type):
        descriptor = ObjectType(
            name="Bag",
            members=[MemberDescriptor("values", CollectionType("list[int]", int_type))],
        )

        node = builder.build(descriptor)

        assert isinstance(node.properties["values"], ArrayNode)
        assert node.properties["values"].to_dict() == {
            "type": "array",
            "items": {"type": "integer", "description": ""},
        }

    def test_top_level_collection_is_wrapped(self, builder, widget_type, widget_schema):
        node = builder.build(CollectionType("list[Widget]", widget_type))

        assert isinstance(node, ObjectNode)
        assert node.to_dict() == {
            "type": "object",
            "properties": {"items": {"type": "array", "items": widget_schema}},
            "required": ["items"],
            "additionalProperties": False,
        }

    def test_collection_member_of_objects(self, builder, widget_type, widget_schema):
        descriptor = ObjectType(
            name="Catalog",
            members=[MemberDescriptor("widgets", CollectionType("list", widget_type))],
        )

        node = builder.build(descriptor)

        assert node.to_dict()["properties"]["widgets"] == {
            "type": "array",
            "items": widget_schema,
        }

    def test_unresolved_element_becomes_open_object(self, builder):
        descriptor = ObjectType(
            name="Loose",
            members=[MemberDescriptor("things", CollectionType("list"))],
        )

        node = builder.build(descriptor)

        assert node.to_dict()["properties"]["things"] == {
            "type": "array",
            "items": EMPTY_OBJECT,
        }

    def test_top_level_unresolved_collection(self, builder):
        node = builder.build(CollectionType("list"))
        assert node.to_dict()["properties"]["items"]["items"] == EMPTY_OBJECT

    def test_nested_collections(self, builder, int_type):
        grid = CollectionType("list[list[int]]", CollectionType("list[int]", int_type))

        node = builder.build(grid)

        assert node.to_dict()["properties"]["items"] == {
            "type": "array",
            "items": {
                "type": "array",
                "items": {"type": "integer", "description": ""},
            },
        }

    def test_collection_of_enums(self, builder):
        descriptor = ObjectType(
            name="Palette",
            members=[
                MemberDescriptor(
                    "colors",
                    CollectionType("list[Color]", EnumType("Color", ("RED", "BLUE"))),
                    MemberAnnotations(description="not used for arrays"),
                )
            ],
        )

        node = builder.build(descriptor)

        assert node.to_dict()["properties"]["colors"] == {
            "type": "array",
            "items": {"type": "string", "description": "", "enum": ["RED", "BLUE"]},
        }


class TestCycles:
    """Tests for cyclic type graphs."""

    def test_mutual_reference_raises(self, builder):
        a = ObjectType(name="A")
        b = ObjectType(name="B")
        a.members.append(MemberDescriptor("b", b))
        b.members.append(MemberDescriptor("a", a))

        with pytest.raises(CyclicTypeError) as exc_info:
            builder.build(a)

        assert exc_info.value.path == ["A", "B", "A"]
        assert "A -> B -> A" in str(exc_info.value)

    def test_self_reference_through_collection_raises(self, builder):
        node = ObjectType(name="TreeNode")
        node.members.append(MemberDescriptor("children", CollectionType("list", node)))

        with pytest.raises(CyclicTypeError) as exc_info:
            builder.build(node)

        assert exc_info.value.path == ["TreeNode", "TreeNode"]

    def test_cycle_below_root_reports_cycle_only(self, builder):
        b = ObjectType(name="B")
        c = ObjectType(name="C")
        b.members.append(MemberDescriptor("c", c))
        c.members.append(MemberDescriptor("b", b))
        root = ObjectType(name="Root", members=[MemberDescriptor("b", b)])

        with pytest.raises(CyclicTypeError) as exc_info:
            builder.build(root)

        assert exc_info.value.path == ["B", "C", "B"]

    def test_cycle_error_is_schema_error(self, builder):
        a = ObjectType(name="A")
        a.members.append(MemberDescriptor("me", a))

        with pytest.raises(SchemaError):
            builder.build(a)

    def test_skipped_back_reference_is_not_a_cycle(self, builder, str_type):
        parent = ObjectType(name="Parent")
        child = ObjectType(
            name="Child",
            members=[
                MemberDescriptor("name", str_type),
                MemberDescriptor("parent", parent, MemberAnnotations(skip=True)),
            ],
        )
        parent.members.append(MemberDescriptor("child", child))

        node = builder.build(parent)

        assert node.to_dict()["properties"]["child"]["required"] == ["name"]

    def test_shared_type_on_separate_branches_is_not_a_cycle(self, builder, int_type):
        point = ObjectType(name="Point", members=[MemberDescriptor("x", int_type)])
        line = ObjectType(
            name="Line",
            members=[MemberDescriptor("start", point), MemberDescriptor("end", point)],
        )

        node = builder.build(line)

        assert node.properties["start"] == node.properties["end"]
        assert node.required == ["start", "end"]


class TestBuilderBehaviour:
    """Tests for idempotence and helpers."""

    def test_build_is_idempotent(self, builder, widget_type):
        assert builder.build(widget_type) == builder.build(widget_type)

    def test_builder_is_reusable_after_error(self, builder, widget_type, widget_schema):
        a = ObjectType(name="A")
        a.members.append(MemberDescriptor("me", a))
        with pytest.raises(CyclicTypeError):
            builder.build(a)

        assert builder.build(widget_type).to_dict() == widget_schema

    def test_build_does_not_mutate_descriptor(self, builder, widget_type):
        before = [m.name for m in widget_type.members]
        builder.build(widget_type)
        assert [m.name for m in widget_type.members] == before

    def test_build_schema_helper(self, widget_type, widget_schema):
        assert build_schema(widget_type).to_dict() == widget_schema

    @pytest.mark.parametrize(
        "descriptor,expected",
        [
            (EnumType("E", ("A",)), "string"),
            (CollectionType("list"), "array"),
            (ObjectType("O"), "object"),
            (PrimitiveType("bool", ScalarKind.BOOLEAN), "boolean"),
        ],
    )
    def test_json_type(self, descriptor, expected):
        assert json_type(descriptor) == expected

    def test_separate_builders_agree(self, widget_type):
        assert SchemaBuilder().build(widget_type) == SchemaBuilder().build(widget_type)
