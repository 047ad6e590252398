"""
Traversal over schema tree nodes.

Two orders are supported. ``depthFirst`` visits a child and then its whole
subtree before the next sibling. ``breadthFirst`` visits all children of a
node before descending into each of them in turn.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum

from schematree import log
from schematree.node import NodeInfo, SchemaNode


class Traversing(str, Enum):
    DEPTH_FIRST = "depthFirst"
    BREADTH_FIRST = "breadthFirst"


HiddenPath = str | re.Pattern[str]


@dataclass
class TraverseOptions:
    traversing: Traversing = Traversing.DEPTH_FIRST
    hidden_paths: list[HiddenPath] = field(default_factory=list)
    exclude_root: bool = False


def traverse(
    node: SchemaNode,
    traversing: Traversing | str,
    callback: Callable[[NodeInfo, SchemaNode], None],
) -> None:
    """
    Walk the descendants of ``node``, calling ``callback(parent_info, child)``.

    Args:
        node: Node whose descendants are visited (the node itself is not)
        traversing: Traversal order
        callback: Called once per descendant with its parent's info

    Raises:
        ValueError: If the traversal order is not supported
    """
    try:
        order = Traversing(traversing)
    except ValueError:
        raise ValueError(f"Unsupported traversing: {traversing}") from None

    children = list(node.fields.values())
    if order is Traversing.DEPTH_FIRST:
        for child in children:
            callback(node.info, child)
            traverse(child, order, callback)
    else:
        for child in children:
            callback(node.info, child)
        for child in children:
            traverse(child, order, callback)


def is_hidden_node(node: SchemaNode, options: TraverseOptions) -> bool:
    """A node is hidden if any rule matches: strings by equality, patterns by search."""
    path = node.info.path
    for hidden_path in options.hidden_paths:
        if isinstance(hidden_path, str):
            if path == hidden_path:
                return True
        elif hidden_path.search(path) is not None:
            return True
    return False


def _strip_root(path: str, root: str) -> str:
    if path == root:
        return ""
    return path.removeprefix(f"{root}.")


def _relative_to_root(node: SchemaNode, root: str) -> SchemaNode:
    """Present ``node`` as if the root's children were roots themselves.

    The returned node shares fields and type descriptor with ``node``.
    """
    info = replace(
        node.info,
        path=_strip_root(node.info.path, root),
        parent_path=_strip_root(node.info.parent_path, root),
        depth=node.info.depth - 1,
    )
    return SchemaNode(info=info, fields=node.fields)


def traverse_node(
    root: SchemaNode,
    callback: Callable[[SchemaNode], None],
    options: TraverseOptions | None = None,
) -> None:
    """
    Visit ``root`` and its descendants, skipping hidden nodes.

    Hidden nodes are not passed to ``callback`` but their descendants are still
    traversed and filtered on their own paths. With ``exclude_root`` the root
    is not visited and every visited node is presented with the root's path
    stripped from its paths and its depth decreased by one.

    Args:
        root: Node to start from
        callback: Called with each visible node
        options: Order, hidden path rules and root exclusion
    """
    options = options or TraverseOptions()
    if not (options.exclude_root or is_hidden_node(root, options)):
        callback(root)

    root_path = root.info.path

    def visit(_: NodeInfo, node: SchemaNode) -> None:
        if options.exclude_root:
            node = _relative_to_root(node, root_path)
        if not is_hidden_node(node, options):
            callback(node)

    traverse(root, options.traversing, visit)


def mark_repeated_types(node: SchemaNode, traversing: Traversing | str) -> None:
    """
    Flag object-typed descendants whose base type was already visited.

    The first occurrence of a type in traversal order keeps
    ``is_appeared=False``; later occurrences get ``is_appeared=True``. The
    flags are set in place, so every alias of the traversed nodes sees them.
    Deep-copy the node first to keep the source tree untouched.

    Args:
        node: Node whose descendants are marked
        traversing: Traversal order, which decides the first occurrence
    """
    seen: set[str] = set()
    marked = 0

    def visit(_: NodeInfo, child: SchemaNode) -> None:
        nonlocal marked
        type_info = child.info.type
        if not type_info.is_object:
            return
        if type_info.name in seen:
            type_info.is_appeared = True
            marked += 1
        else:
            seen.add(type_info.name)

    traverse(node, traversing, visit)
    log.debug(f"Marked {marked} repeated type occurrences under '{node.info.path}'")


def collect_first_seen_paths(node: SchemaNode, traversing: Traversing | str) -> dict[str, str]:
    """
    Map each object type name under ``node`` to the path where it is first visited.

    Unlike ``mark_repeated_types`` this leaves the nodes untouched; a node is a
    repeat when its path differs from the first-seen path of its type.
    """
    first_seen: dict[str, str] = {}

    def visit(_: NodeInfo, child: SchemaNode) -> None:
        if child.info.type.is_object:
            first_seen.setdefault(child.info.type.name, child.info.path)

    traverse(node, traversing, visit)
    return first_seen
