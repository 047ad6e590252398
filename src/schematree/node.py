"""
Node model of the schema tree.

A node is a tagged container: its own ``NodeInfo`` plus an ordered mapping of
field name to child node. Type references coming from graphql-core are reduced
to a ``TypeDescriptor`` holding the named base type and the wrapper flags.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, cast

from graphql import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLType,
    GraphQLUnionType,
    GraphQLWrappingType,
    Undefined,
    is_list_type,
    is_non_null_type,
    is_wrapping_type,
)

from schematree import log

# Guard against malformed wrapper chains, e.g. [[[[User!]!]!]!] is 8 steps deep.
MAX_UNWRAP_STEPS = 8


class TypeKind(str, Enum):
    SCALAR = "SCALAR"
    ENUM = "ENUM"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"


def get_type_kind(type_ref: GraphQLType) -> TypeKind:
    """Classify a graphql-core type into one of the closed set of kinds."""
    if is_list_type(type_ref):
        return TypeKind.LIST
    if is_non_null_type(type_ref):
        return TypeKind.NON_NULL
    if isinstance(type_ref, GraphQLScalarType):
        return TypeKind.SCALAR
    if isinstance(type_ref, GraphQLEnumType):
        return TypeKind.ENUM
    if isinstance(type_ref, GraphQLObjectType):
        return TypeKind.OBJECT
    if isinstance(type_ref, GraphQLInterfaceType):
        return TypeKind.INTERFACE
    if isinstance(type_ref, GraphQLUnionType):
        return TypeKind.UNION
    if isinstance(type_ref, GraphQLInputObjectType):
        return TypeKind.INPUT_OBJECT
    raise TypeError(f"Unsupported GraphQL type: {type_ref!r}")


@dataclass
class TypeDescriptor:
    base_type: GraphQLNamedType
    is_list: bool = False
    is_non_null: bool = False
    is_non_null_item: bool = False
    is_appeared: bool = False

    @property
    def name(self) -> str:
        return self.base_type.name

    @property
    def kind(self) -> TypeKind:
        return get_type_kind(self.base_type)

    @property
    def is_object(self) -> bool:
        return self.kind is TypeKind.OBJECT

    @property
    def is_input_object(self) -> bool:
        return self.kind is TypeKind.INPUT_OBJECT

    def copy(self) -> "TypeDescriptor":
        # The graphql-core type is shared: identity comparisons must survive copying.
        return replace(self)


def resolve_type(type_ref: GraphQLType) -> TypeDescriptor:
    """
    Unwrap a (possibly wrapped) type reference into a TypeDescriptor.

    The flags are accumulated over the whole wrapper chain, from the outermost
    layer inward. For example ``[[User]!]!`` unwraps as
    ``[[User]!]! -> [[User]!] -> [User]! -> [User] -> User`` and yields
    ``is_list=True, is_non_null=True``. ``is_non_null_item`` is set when a
    non-null layer is found inside a list layer (``[Int!]``).

    Args:
        type_ref: A named type or a list/non-null wrapper around one

    Returns:
        TypeDescriptor: Descriptor of the innermost type reached
    """
    is_list = False
    is_non_null = False
    is_non_null_item = False

    for _ in range(MAX_UNWRAP_STEPS):
        kind = get_type_kind(type_ref)
        if kind is TypeKind.LIST:
            is_list = True
        elif kind is TypeKind.NON_NULL:
            is_non_null = True
            is_non_null_item = is_non_null_item or is_list
        else:
            break
        type_ref = cast(GraphQLWrappingType[Any], type_ref).of_type

    if is_wrapping_type(type_ref):
        log.debug(f"Stopped unwrapping after {MAX_UNWRAP_STEPS} steps at {type_ref}")

    return TypeDescriptor(
        base_type=cast(GraphQLNamedType, type_ref),
        is_list=is_list,
        is_non_null=is_non_null,
        is_non_null_item=is_non_null_item,
    )


@dataclass
class ArgumentDescriptor:
    """A field argument or an input object sub-field."""

    name: str
    type: TypeDescriptor
    type_ref: GraphQLInputType
    default_value: Any = None
    description: str | None = None

    @classmethod
    def from_graphql(cls, name: str, value: GraphQLArgument | GraphQLInputField) -> "ArgumentDescriptor":
        return cls(
            name=name,
            type=resolve_type(value.type),
            type_ref=value.type,
            default_value=None if value.default_value is Undefined else value.default_value,
            description=value.description,
        )

    def copy(self) -> "ArgumentDescriptor":
        return replace(self, type=self.type.copy())


@dataclass
class NodeInfo:
    name: str
    parent_name: str
    parent_path: str
    path: str
    type: TypeDescriptor
    args: list[ArgumentDescriptor] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    depth: int = 0
    is_max_depth: bool = False

    def copy(self) -> "NodeInfo":
        return replace(
            self,
            type=self.type.copy(),
            args=[arg.copy() for arg in self.args],
            children=list(self.children),
        )


@dataclass
class SchemaNode:
    """
    One node of the schema tree.

    ``fields`` maps field names to child nodes in schema declaration order;
    ``info.children`` lists the same names. Nodes are shared by reference:
    use ``deep_copy`` to get a node whose mutations do not leak into the tree.
    """

    info: NodeInfo
    fields: dict[str, "SchemaNode"] = field(default_factory=dict)

    def __getitem__(self, name: str) -> "SchemaNode":
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def get(self, name: str) -> "SchemaNode | None":
        return self.fields.get(name)

    def add_field(self, node: "SchemaNode") -> None:
        self.fields[node.info.name] = node
        self.info.children.append(node.info.name)

    def deep_copy(self) -> "SchemaNode":
        return SchemaNode(
            info=self.info.copy(),
            fields={name: child.deep_copy() for name, child in self.fields.items()},
        )


def create_schema_node(name: str, parent_path: str, graphql_field: GraphQLField, depth: int) -> SchemaNode:
    """
    Create a node for a single object field.

    ``children`` stays empty and ``is_max_depth`` False; the tree builder fills
    them in when it expands the node.

    Args:
        name: Field name
        parent_path: Dot path of the parent node
        graphql_field: Field definition from the schema
        depth: Depth of the new node

    Returns:
        SchemaNode: The new, unexpanded node
    """
    return SchemaNode(
        info=NodeInfo(
            name=name,
            parent_name=parent_path.split(".")[-1],
            parent_path=parent_path,
            path=f"{parent_path}.{name}" if parent_path else name,
            type=resolve_type(graphql_field.type),
            args=[ArgumentDescriptor.from_graphql(arg_name, arg) for arg_name, arg in graphql_field.args.items()],
            depth=depth,
        )
    )
