"""
aischema - JSON Schema generation from Python type definitions.

Usage:
    from aischema import Description, SKIP, generate_json_schema

    class Invoice(BaseModel):
        id: Annotated[str, SKIP]
        total: Annotated[float, Description("Grand total including tax")]
        lines: list[InvoiceLine]

    print(generate_json_schema(Invoice))

    # Top-level collections are wrapped in an object with an "items" array
    print(generate_json_schema(list[Invoice]))
"""

from typing import Any

from .annotations import (
    SKIP,
    AnnotationTable,
    Description,
    SkipSchema,
    default_table,
    describe_type,
)
from .builder import SchemaBuilder, build_schema, json_type
from .config import SchemaConfig, get_config
from .descriptors import (
    CollectionType,
    EnumType,
    MemberAnnotations,
    MemberDescriptor,
    ObjectType,
    PrimitiveType,
    ScalarKind,
    TypeDescriptor,
)
from .errors import AnnotationFileError, CyclicTypeError, SchemaError, UnknownTypeError
from .introspect import describe
from .models import ArrayNode, EnumNode, ObjectNode, ScalarNode, SchemaNode
from .registry import get_all_types, get_type, register_type

__all__ = [
    "generate_schema",
    "generate_json_schema",
    "resolve_table",
    # Annotations
    "AnnotationTable",
    "Description",
    "SkipSchema",
    "SKIP",
    "default_table",
    "describe_type",
    # Registry
    "register_type",
    "get_type",
    "get_all_types",
    # Descriptors
    "TypeDescriptor",
    "PrimitiveType",
    "EnumType",
    "CollectionType",
    "ObjectType",
    "MemberDescriptor",
    "MemberAnnotations",
    "ScalarKind",
    "describe",
    # Schema
    "SchemaBuilder",
    "SchemaNode",
    "ScalarNode",
    "EnumNode",
    "ObjectNode",
    "ArrayNode",
    "build_schema",
    "json_type",
    # Config and errors
    "SchemaConfig",
    "get_config",
    "SchemaError",
    "CyclicTypeError",
    "UnknownTypeError",
    "AnnotationFileError",
]

_DESCRIPTOR_TYPES = (PrimitiveType, EnumType, CollectionType, ObjectType)


def resolve_table(
    table: AnnotationTable | None = None,
    config: SchemaConfig | None = None,
) -> AnnotationTable:
    """Return the annotation table a generation call should use.

    The caller's table (or the default table) is layered over the
    configured annotation file, if any.
    """
    config = config or get_config()
    table = table if table is not None else default_table()
    if config.annotations_file:
        table = AnnotationTable.load_yaml(config.annotations_file).merge(table)
    return table


def generate_schema(
    tp: Any,
    *,
    table: AnnotationTable | None = None,
    config: SchemaConfig | None = None,
) -> SchemaNode:
    """
    Generate the schema tree for a type.

    Args:
        tp: A Python type, a TypeDescriptor, or the name of a registered type
        table: Optional annotation side-table
        config: Optional schema configuration

    Returns:
        The root SchemaNode

    Raises:
        UnknownTypeError: If ``tp`` is a name that is not registered
        CyclicTypeError: If the type refers back to itself
    """
    if isinstance(tp, str):
        registered = get_type(tp)
        if registered is None:
            raise UnknownTypeError(tp)
        tp = registered

    if isinstance(tp, _DESCRIPTOR_TYPES):
        descriptor = tp
    else:
        descriptor = describe(tp, resolve_table(table, config))

    return SchemaBuilder().build(descriptor)


def generate_json_schema(
    tp: Any,
    *,
    table: AnnotationTable | None = None,
    config: SchemaConfig | None = None,
) -> str:
    """
    Generate the schema for a type as indented JSON text.

    Example:
        >>> class Point(BaseModel):
        ...     x: int
        ...     y: int
        >>> print(generate_json_schema(Point))  # doctest: +SKIP
        {
          "type": "object",
          "properties": {
            "x": {
              "type": "integer",
              "description": ""
            },
        ...
    """
    config = config or get_config()
    return generate_schema(tp, table=table, config=config).to_json(indent=config.indent)
