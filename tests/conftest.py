from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from graphql import GraphQLSchema, build_schema
from hypothesis import strategies as st
from hypothesis.strategies import composite

from schematree.schema_loader import load_schema
from schematree.tree import GraphQLSchemaTree, SchemaTreeOptions

SCALAR_TYPES = ["String", "Int", "Float", "Boolean", "ID"]


class TestSchemaData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    SCHEMA1: Path = TESTS_DATA_DIR / "schema1.graphql"
    SOCIAL: Path = TESTS_DATA_DIR / "social.graphql"


@pytest.fixture(scope="module")
def schema1() -> GraphQLSchema:
    assert TestSchemaData.SCHEMA1.exists(), f"Missing test file: {TestSchemaData.SCHEMA1}"
    return load_schema(TestSchemaData.SCHEMA1)


@pytest.fixture(scope="module")
def tree1(schema1: GraphQLSchema) -> GraphQLSchemaTree:
    return GraphQLSchemaTree(schema1, SchemaTreeOptions(type_name="Query", max_depth=5))


@pytest.fixture(scope="module")
def social_schema() -> GraphQLSchema:
    assert TestSchemaData.SOCIAL.exists(), f"Missing test file: {TestSchemaData.SOCIAL}"
    return load_schema(TestSchemaData.SOCIAL)


@pytest.fixture
def social_tree(social_schema: GraphQLSchema) -> GraphQLSchemaTree:
    """A fresh tree per test: some tests mark nodes in place."""
    return GraphQLSchemaTree(social_schema, SchemaTreeOptions(type_name="Query", max_depth=4))


@composite
def graphql_schema_strategy(draw: Callable[[st.SearchStrategy[Any]], Any]) -> GraphQLSchema:
    """Generate a schema of object types T0..Tn whose fields reference scalars or
    any object type, including themselves, wrapped in random list/non-null layers.
    """
    num_types = draw(st.integers(min_value=1, max_value=4))
    type_names = [f"T{i}" for i in range(num_types)]

    definitions = []
    for type_name in type_names:
        num_fields = draw(st.integers(min_value=1, max_value=4))
        field_defs = []
        for index in range(num_fields):
            base = draw(st.sampled_from(SCALAR_TYPES + type_names))
            if draw(st.booleans()):
                base = f"{base}!"
            if draw(st.booleans()):
                base = f"[{base}]"
                if draw(st.booleans()):
                    base = f"{base}!"
            field_defs.append(f"f{index}: {base}")
        definitions.append(f"type {type_name} {{ {' '.join(field_defs)} }}")

    definitions.append("type Query { root: T0 }")
    return build_schema("\n".join(definitions))
