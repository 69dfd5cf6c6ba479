"""Shared pytest fixtures for schema generation tests."""

import pytest

from aischema.annotations import AnnotationTable
from aischema.builder import SchemaBuilder
from aischema.config import SchemaConfig
from aischema.descriptors import (
    CollectionType,
    EnumType,
    MemberAnnotations,
    MemberDescriptor,
    ObjectType,
    PrimitiveType,
    ScalarKind,
)


@pytest.fixture
def builder():
    """Return a fresh SchemaBuilder."""
    return SchemaBuilder()


@pytest.fixture
def empty_table():
    """Return an annotation table with no entries."""
    return AnnotationTable()


@pytest.fixture
def plain_config():
    """Return a SchemaConfig that does not depend on the environment."""
    return SchemaConfig(indent=2, annotations_file=None)


@pytest.fixture
def int_type():
    return PrimitiveType(name="int", scalar=ScalarKind.INTEGER)


@pytest.fixture
def str_type():
    return PrimitiveType(name="str", scalar=ScalarKind.TEXT)


@pytest.fixture
def widget_type(int_type, str_type):
    """Return a hand-built descriptor for a small object type.

    Widget:
        id: str (skipped)
        name: str ("Display name")
        size: Size enum
        counts: list[int]
    """
    size = EnumType(name="Size", names=("SMALL", "MEDIUM", "LARGE"))
    return ObjectType(
        name="Widget",
        members=[
            MemberDescriptor("id", str_type, MemberAnnotations(skip=True)),
            MemberDescriptor(
                "name", str_type, MemberAnnotations(description="Display name")
            ),
            MemberDescriptor("size", size),
            MemberDescriptor("counts", CollectionType("list[int]", int_type)),
        ],
    )


@pytest.fixture
def widget_schema():
    """Expected schema dict for ``widget_type``."""
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Display name"},
            "size": {
                "type": "string",
                "description": "",
                "enum": ["SMALL", "MEDIUM", "LARGE"],
            },
            "counts": {
                "type": "array",
                "items": {"type": "integer", "description": ""},
            },
        },
        "required": ["name", "size", "counts"],
        "additionalProperties": False,
    }
