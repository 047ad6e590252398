import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click
from pydantic import ValidationError
from rich.markup import escape
from rich.traceback import install

from schematree import __version__, log
from schematree.arguments import flatten_input_fields
from schematree.config import TreeConfig, load_tree_config
from schematree.handler import SchemaNodeHandler
from schematree.node import SchemaNode
from schematree.schema_loader import get_object_type_names, load_schema, resolve_graphql_files
from schematree.traversal import Traversing
from schematree.tree import GraphQLSchemaTree


class PathResolverOption(click.Option):
    def process_value(self, ctx: click.Context, value: Any) -> list[Path] | None:
        value = super().process_value(ctx, value)
        if not value:
            return None
        return resolve_graphql_files(list(set(value)))


schema_option = click.option(
    "--schema",
    "-s",
    "schemas",
    type=click.Path(exists=True, path_type=Path),
    cls=PathResolverOption,
    required=True,
    multiple=True,
    help="The GraphQL schema file or directory containing schema files. Can be specified multiple times.",
)


def tree_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that builds a tree."""
    func = click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML file with tree and traversal settings",
    )(func)
    func = click.option(
        "--max-depth",
        "-d",
        type=click.IntRange(min=0),
        help="Maximum depth of the tree [default: 5]",
    )(func)
    func = click.option(
        "--type-name",
        "-t",
        type=str,
        help="Root type of the tree [default: Query]",
    )(func)
    return schema_option(func)


def load_config(config_path: Path | None, **overrides: Any) -> TreeConfig:
    try:
        return load_tree_config(config_path, **overrides)
    except (ValidationError, ValueError) as e:
        log.error(f"Invalid tree configuration: {e}")
        sys.exit(1)


def build_tree(schemas: list[Path], config: TreeConfig) -> GraphQLSchemaTree:
    schema = load_schema(schemas)
    tree = GraphQLSchemaTree(schema, config.tree_options())
    if tree.is_empty:
        log.error(f"Root type '{config.type_name}' not found in schema")
        log.hint(f"Available object types: {escape(', '.join(get_object_type_names(schema)))}")
        sys.exit(1)
    return tree


def require_node(tree: GraphQLSchemaTree, path: str, as_root: bool = False) -> SchemaNode:
    node = tree.get_node_as_root(path) if as_root else tree.get_node(path, copy=True)
    if node is None:
        log.error(f"No node found at path '{path}'")
        sys.exit(1)
    return node


def node_info_dict(node: SchemaNode) -> dict[str, Any]:
    info = node.info
    return {
        "name": info.name,
        "parentName": info.parent_name,
        "parentPath": info.parent_path,
        "path": info.path,
        "type": str(info.type.base_type),
        "isList": info.type.is_list,
        "isNonNull": info.type.is_non_null,
        "args": {arg.name: str(arg.type_ref) for arg in info.args},
        "children": info.children,
        "depth": info.depth,
        "isMaxDepth": info.is_max_depth,
    }


@click.group(context_settings={"auto_envvar_prefix": "SCHEMATREE"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    """Explore GraphQL schemas as a tree of fields and arguments."""
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@cli.command()
@tree_options
def fields(schemas: list[Path], type_name: str | None, max_depth: int | None, config_path: Path | None) -> None:
    """List the fields of the root type."""
    config = load_config(config_path, type_name=type_name, max_depth=max_depth)
    tree = build_tree(schemas, config)
    for name in tree.get_field_names():
        log.print(escape(name))


@cli.command()
@tree_options
@click.argument("path")
@click.option("--as-root", is_flag=True, default=False, help="Show paths relative to the node")
def show(
    schemas: list[Path],
    type_name: str | None,
    max_depth: int | None,
    config_path: Path | None,
    path: str,
    as_root: bool,
) -> None:
    """Show the info of the node at PATH, e.g. query.user.followers."""
    config = load_config(config_path, type_name=type_name, max_depth=max_depth)
    tree = build_tree(schemas, config)
    log.print_dict(node_info_dict(require_node(tree, path, as_root)))


@cli.command(name="traverse")
@tree_options
@click.argument("path")
@click.option(
    "--order",
    type=click.Choice([t.value for t in Traversing]),
    help="Traversal order [default: depthFirst]",
)
@click.option("--hide", "hidden_paths", multiple=True, help="Exact path to hide. Can be specified multiple times.")
@click.option(
    "--hide-regex",
    "hidden_patterns",
    multiple=True,
    help="Regular expression searched in paths to hide. Can be specified multiple times.",
)
@click.option("--exclude-root/--include-root", default=None, help="Present the node's children as roots")
@click.option("--as-root", is_flag=True, default=False, help="Re-root the node before traversing")
def traverse_command(
    schemas: list[Path],
    type_name: str | None,
    max_depth: int | None,
    config_path: Path | None,
    path: str,
    order: str | None,
    hidden_paths: tuple[str, ...],
    hidden_patterns: tuple[str, ...],
    exclude_root: bool | None,
    as_root: bool,
) -> None:
    """Print the paths below PATH in traversal order."""
    config = load_config(
        config_path,
        type_name=type_name,
        max_depth=max_depth,
        traversing=order,
        hidden_paths=list(hidden_paths) or None,
        hidden_patterns=list(hidden_patterns) or None,
        exclude_root=exclude_root,
    )
    tree = build_tree(schemas, config)
    handler = SchemaNodeHandler(require_node(tree, path, as_root))

    visited: list[str] = []
    handler.traverse_node(lambda node: visited.append(node.info.path), config.traverse_options())
    for visited_path in visited:
        log.print(escape(visited_path))
    log.debug(f"Visited {len(visited)} nodes")


@cli.command(name="args")
@tree_options
@click.argument("path")
def args_command(
    schemas: list[Path], type_name: str | None, max_depth: int | None, config_path: Path | None, path: str
) -> None:
    """List the arguments of PATH, with input object fields flattened to dot paths."""
    config = load_config(config_path, type_name=type_name, max_depth=max_depth)
    tree = build_tree(schemas, config)
    field_map = flatten_input_fields(require_node(tree, path))
    if not field_map:
        log.hint(f"'{escape(path)}' takes no arguments")
    for name, descriptor in field_map.items():
        log.key_value(name, descriptor.type_ref)


@cli.command()
@tree_options
@click.argument("path")
@click.argument("name")
@click.argument("value")
def convert(
    schemas: list[Path],
    type_name: str | None,
    max_depth: int | None,
    config_path: Path | None,
    path: str,
    name: str,
    value: str,
) -> None:
    """Convert the raw VALUE for argument NAME of PATH, e.g. `convert query.search filter.nums "1, 2"`."""
    config = load_config(config_path, type_name=type_name, max_depth=max_depth)
    tree = build_tree(schemas, config)
    handler = SchemaNodeHandler(require_node(tree, path))

    result = handler.convert_argument_value(name, value)
    if result is None:
        log.error(f"Unknown argument '{name}' on '{path}'")
        sys.exit(1)

    log.print_dict(
        {
            "value": result.value,
            "type": result.type.name,
            "isList": result.type.is_list,
            "isNonNull": result.type.is_non_null,
            "isNonNullItem": result.type.is_non_null_item,
            "parentType": result.parent_type.name if result.parent_type else None,
        }
    )


@cli.command()
@tree_options
@click.argument("path")
@click.argument("name")
@click.argument("value")
def validate(
    schemas: list[Path],
    type_name: str | None,
    max_depth: int | None,
    config_path: Path | None,
    path: str,
    name: str,
    value: str,
) -> None:
    """Validate the JSON VALUE for argument NAME of PATH, e.g. `validate query.search limit 10`."""
    config = load_config(config_path, type_name=type_name, max_depth=max_depth)
    tree = build_tree(schemas, config)
    handler = SchemaNodeHandler(require_node(tree, path))

    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        # Bare words such as enum values are taken as strings
        parsed = value

    message = handler.validate_argument(name, parsed)
    if message is not None:
        log.error(message)
        sys.exit(1)
    log.success(f"{escape(value)} is a valid value for '{escape(name)}'")


if __name__ == "__main__":
    cli()
