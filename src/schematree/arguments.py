"""
Argument resolution, validation and value conversion for schema tree nodes.

Arguments are addressed by name, and nested input object fields by dot path
from the argument, e.g. ``filter.user.username``. Validation is delegated to
graphql-core's input coercion; conversion turns raw strings (from a form or a
command line) into Python values for the argument's scalar type.
"""

import math
import re
from dataclasses import dataclass
from typing import Any

from graphql import (
    GraphQLError,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLNamedType,
    GraphQLScalarType,
    GraphQLString,
    coerce_input_value,
    is_named_type,
)

from schematree.graphql_type import is_id_type
from schematree.node import ArgumentDescriptor, SchemaNode, TypeDescriptor

# Prefix parsing: "3.14" is the Int 3, "12px" is the Float 12.0.
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass
class ConvertArgumentValueOptions:
    use_type_for_id: GraphQLScalarType = GraphQLString


@dataclass
class ArgumentValueInfo:
    value: Any
    type: TypeDescriptor
    parent_type: TypeDescriptor | None


def get_argument_names(node: SchemaNode) -> list[str]:
    return [arg.name for arg in node.info.args]


def get_argument(node: SchemaNode, name: str) -> ArgumentDescriptor | None:
    args = [arg for arg in node.info.args if arg.name == name]
    return args[0] if len(args) == 1 else None


def get_argument_input_fields(
    node: SchemaNode, arg: str | ArgumentDescriptor
) -> dict[str, ArgumentDescriptor] | None:
    """Return the sub-fields of an input object argument, or None for any other argument."""
    descriptor = get_argument(node, arg) if isinstance(arg, str) else arg
    if descriptor is None:
        return None
    return _input_fields(descriptor.type.base_type)


def _input_fields(type_: GraphQLNamedType) -> dict[str, ArgumentDescriptor] | None:
    if not isinstance(type_, GraphQLInputObjectType):
        return None
    return {name: ArgumentDescriptor.from_graphql(name, value) for name, value in type_.fields.items()}


def resolve_input_path(node: SchemaNode, name: str) -> ArgumentDescriptor | None:
    """
    Resolve an argument name or a dot path into nested input object fields.

    Args:
        node: Node owning the arguments
        name: Argument name (``limit``) or dot path (``filter.user.username``)

    Returns:
        ArgumentDescriptor | None: The argument or input field, or None if a
        segment is missing or an intermediate segment is not an input object
    """
    arg_name, *sub_fields = name.split(".")
    descriptor = get_argument(node, arg_name)

    for sub_field in sub_fields:
        if descriptor is None:
            return None
        fields = _input_fields(descriptor.type.base_type)
        if fields is None:
            return None
        descriptor = fields.get(sub_field)

    return descriptor


def flatten_input_fields(node: SchemaNode) -> dict[str, ArgumentDescriptor]:
    """
    Flatten all arguments of a node into a map of dot path to leaf field.

    Input object arguments are replaced by their sub-fields, recursively, so
    that only non-input-object leaves remain, e.g. ``sort.by`` and ``sort.desc``
    instead of ``sort``.
    """
    result: dict[str, ArgumentDescriptor] = {}

    def search(path: str, descriptor: ArgumentDescriptor) -> None:
        fields = _input_fields(descriptor.type.base_type)
        if fields is None:
            result[path] = descriptor
            return
        for sub_name, sub_field in fields.items():
            search(f"{path}.{sub_name}", sub_field)

    for arg in node.info.args:
        search(arg.name, arg)
    return result


def validate_input_value(value: Any, type_ref: GraphQLInputType) -> str | None:
    """
    Validate a value against an input type using graphql-core coercion.

    Args:
        value: Python value, e.g. ``10``, ``"id"`` or ``{"by": "name"}``
        type_ref: The (possibly wrapped) input type

    Returns:
        str | None: None if the value is valid, otherwise the first error message
    """
    messages: list[str] = []

    def on_error(path: list[str | int], invalid_value: Any, error: GraphQLError) -> None:
        messages.append(error.message)

    coerce_input_value(value, type_ref, on_error)
    return messages[0] if messages else None


def validate_argument(node: SchemaNode, name: str, value: Any) -> str | None:
    """Validate a value for an argument or nested input field of ``node``."""
    descriptor = resolve_input_path(node, name)
    if descriptor is None:
        return f"Unknown argument path: '{name}'"
    return validate_input_value(value, descriptor.type_ref)


def _parse_int(value: str) -> int | float:
    match = _INT_PREFIX_RE.match(value)
    return int(match.group(1)) if match else math.nan


def _parse_float(value: str) -> float:
    match = _FLOAT_PREFIX_RE.match(value)
    return float(match.group(1)) if match else math.nan


def _parse_boolean(value: str) -> bool | None:
    if value in ("true", "false"):
        return value == "true"
    return None


def convert_scalar(value: str, type_: GraphQLNamedType) -> Any:
    """
    Convert a raw string to a Python value for a scalar type.

    Int and Float parse the longest numeric prefix and give ``math.nan`` when
    there is none. Boolean only accepts ``"true"`` and ``"false"``, anything
    else gives None. String, ID, enums and custom scalars keep the string.
    """
    if type_.name == "Int":
        return _parse_int(value)
    if type_.name == "Float":
        return _parse_float(value)
    if type_.name == "Boolean":
        return _parse_boolean(value)
    return value


def convert_argument_value(
    node: SchemaNode,
    name: str,
    value: str,
    options: ConvertArgumentValueOptions | None = None,
) -> ArgumentValueInfo | None:
    """
    Convert a raw string for an argument or nested input field.

    List types split the string on commas and convert each trimmed item, so the
    result is always a list (``"3, 11, -5"`` gives ``[3, 11, -5]``).

    Args:
        node: Node owning the arguments
        name: Argument name or dot path into input object fields
        value: Raw string value
        options: Scalar type used in place of ``ID``

    Returns:
        ArgumentValueInfo | None: Converted value with the field's type and, for
        nested paths, the type of the enclosing input object; None if the path
        does not resolve or its type is still wrapped after the unwrap bound
    """
    options = options or ConvertArgumentValueOptions()
    descriptor = resolve_input_path(node, name)
    if descriptor is None:
        return None

    parent_type = None
    if "." in name:
        parent = resolve_input_path(node, name.rsplit(".", 1)[0])
        parent_type = parent.type if parent else None

    type_info = descriptor.type
    if not is_named_type(type_info.base_type):
        return None

    scalar_type = options.use_type_for_id if is_id_type(type_info.name) else type_info.base_type

    if type_info.is_list:
        converted: Any = [convert_scalar(item.strip(), scalar_type) for item in value.split(",")]
    else:
        converted = convert_scalar(value, scalar_type)

    return ArgumentValueInfo(value=converted, type=type_info, parent_type=parent_type)
