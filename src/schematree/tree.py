"""
Schema tree construction and path addressing.

The tree maps the lower-cased root type name to its root node. Paths are dot
separated field names starting with that root name, e.g.
``query.user.followers.nodes``.
"""

from typing import Any, cast

from graphql import GraphQLNamedType, GraphQLObjectType, GraphQLSchema
from pydantic import BaseModel, ConfigDict, Field

from schematree import log
from schematree.graphql_type import is_internal_field
from schematree.node import NodeInfo, SchemaNode, create_schema_node, resolve_type

SchemaTree = dict[str, SchemaNode]


class SchemaTreeOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    type_name: str = "Query"
    max_depth: int = Field(default=5, ge=0)


def _expand(node: SchemaNode, max_depth: int) -> int:
    """Add the fields of an object-typed node, recursing into object-typed fields.

    Returns the number of nodes created below ``node``.
    """
    object_type = cast(GraphQLObjectType, node.info.type.base_type)

    created = 0
    for name, graphql_field in object_type.fields.items():
        if is_internal_field(name):
            continue

        child = create_schema_node(name, node.info.path, graphql_field, node.info.depth + 1)
        node.add_field(child)
        created += 1

        if not child.info.type.is_object:
            continue
        if child.info.depth < max_depth:
            created += _expand(child, max_depth)
        else:
            child.info.is_max_depth = True

    return created


def build_schema_tree(schema: GraphQLSchema, options: SchemaTreeOptions | None = None) -> SchemaTree:
    """
    Build a depth-bounded tree from a root type of the schema.

    The depth bound also terminates self-referencing types: object-typed nodes
    at ``max_depth`` are flagged ``is_max_depth`` and left unexpanded.

    Args:
        schema: The GraphQL schema
        options: Root type name and maximum depth

    Returns:
        SchemaTree: Mapping of the lower-cased root type name to its node, or an
        empty mapping if the root type does not exist
    """
    options = options or SchemaTreeOptions()
    root_type = schema.get_type(options.type_name)
    if root_type is None:
        log.warning(f"Root type '{options.type_name}' not found in schema")
        return {}

    root_name = options.type_name.lower()
    root = SchemaNode(
        info=NodeInfo(
            name=root_name,
            parent_name="",
            parent_path="",
            path=root_name,
            type=resolve_type(root_type),
        )
    )

    created = 0
    if root.info.type.is_object:
        if options.max_depth > 0:
            created = _expand(root, options.max_depth)
        else:
            root.info.is_max_depth = True

    log.debug(f"Built schema tree '{root_name}' with {created} nodes (max depth {options.max_depth})")
    return {root_name: root}


def get_node(tree: SchemaTree, path: str, copy: bool = False) -> SchemaNode | None:
    """
    Resolve a dot path against a tree.

    Args:
        tree: The tree (or a single-entry mapping around a subtree)
        path: Dot separated path whose first segment is a key of ``tree``
        copy: Return an independent deep copy instead of the live node

    Returns:
        SchemaNode | None: The node, or None if any segment is missing
    """
    root, *segments = path.split(".")
    node = tree.get(root)
    for segment in segments:
        if node is None:
            break
        node = node.get(segment)

    if node is None:
        return None
    return node.deep_copy() if copy else node


def _strip_prefix(path: str, prefix: str) -> str:
    if not prefix:
        return path
    if path == prefix:
        return ""
    return path.removeprefix(f"{prefix}.")


def _reroot(node: SchemaNode, prefix: str) -> None:
    for child in node.fields.values():
        child.info.path = _strip_prefix(child.info.path, prefix)
        child.info.parent_path = _strip_prefix(child.info.parent_path, prefix)
        _reroot(child, prefix)


def get_node_as_root(tree: SchemaTree, path: str) -> SchemaNode | None:
    """
    Copy a subtree and rewrite its paths relative to its own top node.

    The copy's top node gets an empty parent and ``path == name``; descendants
    lose the ancestor prefix. Depths keep their absolute values from the source
    tree.

    Args:
        tree: The source tree, left untouched
        path: Dot path of the subtree to extract

    Returns:
        SchemaNode | None: The re-rooted copy, or None if the path is missing
    """
    node = get_node(tree, path, copy=True)
    if node is None:
        return None

    prefix = node.info.parent_path
    node.info.parent_name = ""
    node.info.parent_path = ""
    node.info.path = node.info.name
    _reroot(node, prefix)
    return node


def get_parent(tree: SchemaTree, node: SchemaNode, prefix: str = "") -> SchemaNode | None:
    """Look up ``prefix + node.info.parent_path`` in ``tree``.

    A re-rooted node has a relative parent path; passing the stripped ancestor
    prefix (e.g. ``"query.user."``) resolves it against the source tree. For
    the re-rooted top node itself the prefix alone names the parent.
    """
    return get_node(tree, f"{prefix}{node.info.parent_path}".rstrip("."))


def has_same_type_in_hierarchy(node: SchemaNode, type_: GraphQLNamedType, parent_path: str) -> bool:
    """
    Check whether an ancestor of a path has the given base type.

    Parent paths are resolved against ``node`` alone, so this only works on
    nodes returned by ``get_node_as_root``.

    Args:
        node: The re-rooted top node
        type_: The base type to look for
        parent_path: Path of the first ancestor to test

    Returns:
        bool: True on the first ancestor whose base type is ``type_``
    """
    while parent_path:
        root = parent_path.split(".", 1)[0]
        parent = get_node({root: node}, parent_path)
        if parent is None:
            return False
        if parent.info.type.base_type is type_:
            return True
        parent_path = parent.info.parent_path
    return False


class GraphQLSchemaTree:
    """A schema together with the tree built from one of its root types."""

    def __init__(self, schema: GraphQLSchema, options: SchemaTreeOptions | dict[str, Any] | None = None):
        self.schema = schema
        self.options = options if isinstance(options, SchemaTreeOptions) else SchemaTreeOptions(**(options or {}))
        self.tree: SchemaTree = build_schema_tree(schema, self.options)

    @property
    def root_name(self) -> str:
        return self.options.type_name.lower()

    @property
    def is_empty(self) -> bool:
        return not self.tree

    def get_node(self, path: str, copy: bool = False) -> SchemaNode | None:
        return get_node(self.tree, path, copy)

    def get_node_as_root(self, path: str) -> SchemaNode | None:
        return get_node_as_root(self.tree, path)

    def get_parent(self, node: SchemaNode, prefix: str = "") -> SchemaNode | None:
        return get_parent(self.tree, node, prefix)

    def get_field_names(self) -> list[str]:
        root = self.tree.get(self.root_name)
        return list(root.info.children) if root else []
