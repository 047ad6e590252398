# GraphQL reserves names starting with two underscores (e.g. __typename, __Type)
# for introspection. Tree construction treats such fields as schema-internal.
RESERVED_NAME_PREFIX = "__"


def is_introspection_type(type_name: str) -> bool:
    return type_name.startswith(RESERVED_NAME_PREFIX)


def is_internal_field(field_name: str) -> bool:
    return field_name.startswith(RESERVED_NAME_PREFIX)


def is_id_type(type_name: str) -> bool:
    return type_name == "ID"
