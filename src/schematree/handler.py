from collections.abc import Callable
from typing import Any

from graphql import GraphQLInputType, GraphQLNamedType

from schematree import arguments, traversal
from schematree.arguments import ArgumentValueInfo, ConvertArgumentValueOptions
from schematree.node import ArgumentDescriptor, SchemaNode
from schematree.traversal import TraverseOptions, Traversing
from schematree.tree import get_node, has_same_type_in_hierarchy


class SchemaNodeHandler:
    """
    Operations bound to a single schema tree node.

    The handler works on the node it is given, without copying it. Pass a node
    from ``get_node_as_root`` (or ``get_node(..., copy=True)``) when the
    operations must not affect the source tree.
    """

    def __init__(self, node: SchemaNode):
        self.node = node

    def get_node(self, path: str) -> SchemaNode | None:
        """Resolve ``path`` below the handler's node; its first segment names the node itself."""
        root = path.split(".", 1)[0]
        if not root:
            return None
        return get_node({root: self.node}, path)

    def has_same_type_in_hierarchy(self, type_: GraphQLNamedType, parent_path: str) -> bool:
        return has_same_type_in_hierarchy(self.node, type_, parent_path)

    def get_argument_names(self) -> list[str]:
        return arguments.get_argument_names(self.node)

    def get_arguments(self) -> list[ArgumentDescriptor]:
        return self.node.info.args

    def get_argument(self, name: str) -> ArgumentDescriptor | None:
        return arguments.get_argument(self.node, name)

    def get_argument_input_fields(self, arg: str | ArgumentDescriptor) -> dict[str, ArgumentDescriptor] | None:
        return arguments.get_argument_input_fields(self.node, arg)

    def get_argument_input_field(self, name: str) -> ArgumentDescriptor | None:
        return arguments.resolve_input_path(self.node, name)

    def get_argument_input_field_map(self) -> dict[str, ArgumentDescriptor]:
        return arguments.flatten_input_fields(self.node)

    def validate_input_value(self, value: Any, type_ref: GraphQLInputType) -> str | None:
        return arguments.validate_input_value(value, type_ref)

    def validate_argument(self, name: str, value: Any) -> str | None:
        return arguments.validate_argument(self.node, name, value)

    def convert_value(self, value: str, type_: GraphQLNamedType) -> Any:
        return arguments.convert_scalar(value, type_)

    def convert_argument_value(
        self, name: str, value: str, options: ConvertArgumentValueOptions | None = None
    ) -> ArgumentValueInfo | None:
        return arguments.convert_argument_value(self.node, name, value, options)

    def get_field_names(self) -> list[str]:
        return self.node.info.children

    def get_fields(self) -> list[SchemaNode]:
        return [self.node[name] for name in self.node.info.children]

    def is_hidden_node(self, node: SchemaNode, options: TraverseOptions) -> bool:
        return traversal.is_hidden_node(node, options)

    def traverse_node(self, callback: Callable[[SchemaNode], None], options: TraverseOptions | None = None) -> None:
        traversal.traverse_node(self.node, callback, options)

    def set_is_appeared(self, traversing: Traversing | str) -> None:
        """Mark repeated object types below the node in place (see ``mark_repeated_types``)."""
        traversal.mark_repeated_types(self.node, traversing)

    def get_first_seen_paths(self, traversing: Traversing | str) -> dict[str, str]:
        return traversal.collect_first_seen_paths(self.node, traversing)
