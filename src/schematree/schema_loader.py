from pathlib import Path

from ariadne import load_schema_from_path
from graphql import GraphQLObjectType, GraphQLSchema, build_schema, print_schema

from schematree import log
from schematree.graphql_type import is_introspection_type


def resolve_graphql_files(paths: list[Path]) -> list[Path]:
    """Resolve a list of paths (files and directories) into a flat list of unique GraphQL files.

    Args:
        paths: List of file or directory paths

    Returns:
        Flat list of unique GraphQL file paths, sorted
    """
    resolved_files: set[Path] = set()

    for path in paths:
        if path.is_file():
            resolved_files.add(path)
        elif path.is_dir():
            for file in path.rglob("*.graphql"):
                resolved_files.add(file)

    return sorted(resolved_files)


def build_schema_str(graphql_schema_paths: list[Path]) -> str:
    """Concatenate the SDL of the given files or folders."""
    schema_str = ""
    for graphql_file in graphql_schema_paths:
        schema_str += load_schema_from_path(graphql_file) + "\n"
    return schema_str


def load_schema(graphql_schema_paths: Path | list[Path]) -> GraphQLSchema:
    """Load and build a GraphQL schema from files or folders."""
    if isinstance(graphql_schema_paths, Path):
        graphql_schema_paths = [graphql_schema_paths]

    schema = build_schema(build_schema_str(resolve_graphql_files(graphql_schema_paths)))
    log.info("Successfully built the given GraphQL schema.")
    log.debug(f"Read schema: \n{print_schema(schema)}")
    return schema


def get_object_type_names(schema: GraphQLSchema) -> list[str]:
    """Names of the object types a tree can be rooted at."""
    return [
        name
        for name, type_ in schema.type_map.items()
        if isinstance(type_, GraphQLObjectType) and not is_introspection_type(name)
    ]
