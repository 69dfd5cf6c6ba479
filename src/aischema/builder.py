"""Recursive type-descriptor to JSON Schema builder."""

from __future__ import annotations

import logging

from .descriptors import (
    CollectionType,
    EnumType,
    MemberDescriptor,
    ObjectType,
    PrimitiveType,
    ScalarKind,
    TypeDescriptor,
    open_object,
)
from .errors import CyclicTypeError
from .models import ArrayNode, EnumNode, ObjectNode, ScalarNode, SchemaNode, wrap_array

logger = logging.getLogger(__name__)

_SCALAR_JSON_TYPES: dict[ScalarKind, str] = {
    ScalarKind.TEXT: "string",
    ScalarKind.INTEGER: "integer",
    ScalarKind.NUMBER: "number",
    ScalarKind.BOOLEAN: "boolean",
    ScalarKind.UNKNOWN: "string",
}


def json_type(descriptor: TypeDescriptor) -> str:
    """Map a descriptor to its JSON Schema ``type`` name."""
    if isinstance(descriptor, PrimitiveType):
        return _SCALAR_JSON_TYPES.get(descriptor.scalar, "string")
    if isinstance(descriptor, EnumType):
        return "string"
    if isinstance(descriptor, CollectionType):
        return "array"
    if isinstance(descriptor, ObjectType):
        return "object"
    return "string"


class SchemaBuilder:
    """Builds a schema tree from a type descriptor.

    Classification, applied at the top level and to every member:

    1. Primitive or enum: a scalar node, or an enum node listing member names.
    2. Object: a closed object node with one property per non-skipped member.
       Collection members become arrays over their element schema, object
       members are inlined, and scalar members carry the member's own
       description.
    3. Collection at the top level: an object wrapping a single required
       ``items`` array.

    Every non-skipped member is required, whether or not it is optional in
    the host type. A type that contains itself, directly or through other
    types, raises ``CyclicTypeError``.

    Builders keep no state between calls; one instance may be reused and
    shared.
    """

    def build(self, descriptor: TypeDescriptor) -> SchemaNode:
        """Build the schema for a top-level type.

        Args:
            descriptor: The type to describe

        Returns:
            The root schema node

        Raises:
            CyclicTypeError: If the type graph contains a cycle
        """
        if isinstance(descriptor, CollectionType):
            node = wrap_array(self._build(self._element(descriptor), []))
        else:
            node = self._build(descriptor, [])
        logger.debug(f"Built schema for {descriptor.name}")
        return node

    def _build(self, descriptor: TypeDescriptor, path: list[ObjectType]) -> SchemaNode:
        if isinstance(descriptor, CollectionType):
            # Only reachable for collections of collections
            return ArrayNode(items=self._build(self._element(descriptor), path))
        if isinstance(descriptor, ObjectType):
            return self._build_object(descriptor, path)
        return self._build_scalar(descriptor, descriptor.description)

    def _build_scalar(
        self, descriptor: PrimitiveType | EnumType, description: str | None
    ) -> SchemaNode:
        if isinstance(descriptor, EnumType):
            return EnumNode(
                type=json_type(descriptor),
                description=description or "",
                enum=list(descriptor.names),
            )
        return ScalarNode(type=json_type(descriptor), description=description or "")

    def _build_object(self, descriptor: ObjectType, path: list[ObjectType]) -> ObjectNode:
        if any(seen is descriptor for seen in path):
            names = [seen.name for seen in path[_index(path, descriptor):]]
            raise CyclicTypeError(names + [descriptor.name])

        path = path + [descriptor]
        properties: dict[str, SchemaNode] = {}
        required: list[str] = []

        for member in descriptor.members:
            if member.annotations.skip:
                continue
            properties[member.name] = self._build_member(member, path)
            required.append(member.name)

        return ObjectNode(properties=properties, required=required)

    def _build_member(self, member: MemberDescriptor, path: list[ObjectType]) -> SchemaNode:
        member_type = member.type
        if isinstance(member_type, CollectionType):
            return ArrayNode(items=self._build(self._element(member_type), path))
        if isinstance(member_type, ObjectType):
            return self._build_object(member_type, path)
        return self._build_scalar(member_type, member.annotations.description)

    def _element(self, descriptor: CollectionType) -> TypeDescriptor:
        if descriptor.element is None:
            logger.debug(
                f"Element type of {descriptor.name} is unresolved; using open object"
            )
            return open_object()
        return descriptor.element


def _index(path: list[ObjectType], descriptor: ObjectType) -> int:
    return next(i for i, seen in enumerate(path) if seen is descriptor)


def build_schema(descriptor: TypeDescriptor) -> SchemaNode:
    """Build the schema for ``descriptor`` with a fresh builder."""
    return SchemaBuilder().build(descriptor)
