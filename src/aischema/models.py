"""Pydantic models for generated schema nodes."""

from __future__ import annotations

import json
from typing import Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field


class YAMLMixin:
    """Mixin class providing JSON and YAML rendering for schema nodes."""

    def to_dict(self) -> dict:
        """Return the node as plain JSON-compatible data."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize node to indented JSON text."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_yaml(self) -> str:
        """Serialize node to YAML string."""
        return yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


class _Node(YAMLMixin, BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class ScalarNode(_Node):
    """Schema for a primitive property."""

    type: str = Field(description="JSON type name, e.g. 'string' or 'integer'")
    description: str = Field(default="", description="Human-readable description")


class EnumNode(_Node):
    """Schema for an enumeration, listing member names in declared order."""

    type: str = Field(default="string", description="JSON type name")
    description: str = Field(default="", description="Human-readable description")
    enum: list[str] = Field(default_factory=list, description="Allowed member names")


class ObjectNode(_Node):
    """Schema for a closed object."""

    type: Literal["object"] = "object"
    properties: dict[str, SchemaNode] = Field(
        default_factory=dict,
        description="Property schemas keyed by member name",
    )
    required: list[str] = Field(
        default_factory=list,
        description="Names of included members, in declaration order",
    )
    additional_properties: Literal[False] = Field(
        default=False,
        alias="additionalProperties",
        description="Objects are always closed",
    )


class ArrayNode(_Node):
    """Schema for a collection."""

    type: Literal["array"] = "array"
    items: SchemaNode = Field(description="Schema of each element")


SchemaNode = Union[ScalarNode, EnumNode, ObjectNode, ArrayNode]

ObjectNode.model_rebuild()
ArrayNode.model_rebuild()


def wrap_array(items: SchemaNode) -> ObjectNode:
    """Wrap a top-level array in an object with a single ``items`` property.

    A bare collection at the schema root is exposed as ``{"items": [...]}``.
    """
    return ObjectNode(
        properties={"items": ArrayNode(items=items)},
        required=["items"],
    )
