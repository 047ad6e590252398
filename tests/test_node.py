import pytest
from graphql import (
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from schematree.node import (
    MAX_UNWRAP_STEPS,
    ArgumentDescriptor,
    TypeKind,
    create_schema_node,
    get_type_kind,
    resolve_type,
)

USER = GraphQLObjectType("User", {"name": GraphQLField(GraphQLString)})


@pytest.mark.parametrize(
    "type_ref,is_list,is_non_null,is_non_null_item",
    [
        (USER, False, False, False),
        (GraphQLNonNull(USER), False, True, False),
        (GraphQLList(USER), True, False, False),
        (GraphQLList(GraphQLNonNull(USER)), True, True, True),
        (GraphQLNonNull(GraphQLList(USER)), True, True, False),
        (GraphQLNonNull(GraphQLList(GraphQLNonNull(USER))), True, True, True),
        (GraphQLList(GraphQLList(USER)), True, False, False),
    ],
)
def test_resolve_type_accumulates_wrapper_flags(
    type_ref: GraphQLObjectType, is_list: bool, is_non_null: bool, is_non_null_item: bool
) -> None:
    type_info = resolve_type(type_ref)
    assert type_info.base_type is USER
    assert type_info.is_list is is_list
    assert type_info.is_non_null is is_non_null
    assert type_info.is_non_null_item is is_non_null_item
    assert type_info.is_appeared is False


def test_resolve_type_is_idempotent_on_named_types() -> None:
    for named_type in (USER, GraphQLInt, GraphQLString):
        type_info = resolve_type(named_type)
        assert type_info.base_type is named_type
        assert not type_info.is_list
        assert not type_info.is_non_null
        again = resolve_type(type_info.base_type)
        assert again == type_info


def test_resolve_type_stops_at_step_bound() -> None:
    type_ref: GraphQLList | GraphQLObjectType = USER
    for _ in range(MAX_UNWRAP_STEPS + 2):
        type_ref = GraphQLList(type_ref)

    type_info = resolve_type(type_ref)
    assert type_info.is_list
    assert isinstance(type_info.base_type, GraphQLList)
    assert str(type_info.base_type) == "[[User]]"


def test_get_type_kind() -> None:
    sort_input = GraphQLInputObjectType("SortInput", {})
    assert get_type_kind(USER) is TypeKind.OBJECT
    assert get_type_kind(GraphQLInt) is TypeKind.SCALAR
    assert get_type_kind(sort_input) is TypeKind.INPUT_OBJECT
    assert get_type_kind(GraphQLList(USER)) is TypeKind.LIST
    assert get_type_kind(GraphQLNonNull(USER)) is TypeKind.NON_NULL
    assert resolve_type(GraphQLNonNull(sort_input)).is_input_object
    assert resolve_type(GraphQLList(USER)).is_object


def test_create_schema_node() -> None:
    field = GraphQLField(
        GraphQLList(USER),
        args={
            "first": GraphQLArgument(GraphQLNonNull(GraphQLInt), default_value=10),
            "after": GraphQLArgument(GraphQLString),
        },
    )
    node = create_schema_node("nodes", "query.user.followers", field, 3)

    info = node.info
    assert info.name == "nodes"
    assert info.parent_name == "followers"
    assert info.parent_path == "query.user.followers"
    assert info.path == "query.user.followers.nodes"
    assert info.depth == 3
    assert info.children == []
    assert info.is_max_depth is False
    assert info.type.base_type is USER
    assert info.type.is_list

    assert [arg.name for arg in info.args] == ["first", "after"]
    first, after = info.args
    assert first.type.base_type is GraphQLInt
    assert first.type.is_non_null
    assert str(first.type_ref) == "Int!"
    assert first.default_value == 10
    assert after.default_value is None


def test_create_schema_node_without_parent() -> None:
    node = create_schema_node("user", "", GraphQLField(USER), 0)
    assert node.info.parent_name == ""
    assert node.info.path == "user"


def test_deep_copy_shares_graphql_types_but_not_descriptors() -> None:
    schema = GraphQLSchema(query=GraphQLObjectType("Query", {"user": GraphQLField(USER)}))
    field = schema.query_type.fields["user"]  # type: ignore[union-attr]
    node = create_schema_node("user", "query", field, 1)
    node.add_field(create_schema_node("name", "query.user", USER.fields["name"], 2))

    copied = node.deep_copy()
    copied.info.type.is_appeared = True
    copied["name"].info.path = "changed"
    copied.info.children.append("extra")

    assert copied.info.type.base_type is node.info.type.base_type
    assert node.info.type.is_appeared is False
    assert node["name"].info.path == "query.user.name"
    assert node.info.children == ["name"]


def test_schema_node_field_access() -> None:
    node = create_schema_node("user", "query", GraphQLField(USER), 1)
    child = create_schema_node("name", "query.user", USER.fields["name"], 2)
    node.add_field(child)

    assert node["name"] is child
    assert "name" in node
    assert node.get("missing") is None
    with pytest.raises(KeyError):
        node["missing"]


def test_argument_descriptor_from_input_field() -> None:
    sort_input = GraphQLInputObjectType("SortInput", {"desc": GraphQLInputField(GraphQLBoolean, default_value=False)})
    descriptor = ArgumentDescriptor.from_graphql("desc", sort_input.fields["desc"])
    assert descriptor.name == "desc"
    assert descriptor.type.name == "Boolean"
    assert descriptor.default_value is False
