"""Type descriptors consumed by the schema builder.

A descriptor is an explicit, host-independent picture of a type's shape.
``introspect.describe`` produces them from live Python classes, but they can
also be constructed by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ScalarKind(str, Enum):
    """Primitive scalar categories."""

    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"  # floats and decimals
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"  # unclassifiable, encoded as a string


@dataclass(frozen=True)
class MemberAnnotations:
    """Schema metadata attached to a single member."""

    description: str | None = None
    skip: bool = False


@dataclass(frozen=True)
class PrimitiveType:
    """A scalar type such as ``str`` or ``int``."""

    name: str
    scalar: ScalarKind = ScalarKind.UNKNOWN
    description: str | None = None


@dataclass(frozen=True)
class EnumType:
    """An enumeration; values are exposed by symbolic name."""

    name: str
    names: tuple[str, ...] = ()  # declared order
    description: str | None = None


@dataclass(frozen=True)
class CollectionType:
    """A list-like type. ``element`` is None when it cannot be resolved."""

    name: str
    element: TypeDescriptor | None = None


@dataclass(eq=False)
class ObjectType:
    """A complex type with named members.

    Compared by identity: descriptor graphs for self-referential classes
    contain cycles, so structural equality is not well defined.
    """

    name: str
    members: list[MemberDescriptor] = field(default_factory=list)
    description: str | None = None


@dataclass(frozen=True)
class MemberDescriptor:
    """One public member of an ``ObjectType``."""

    name: str
    type: TypeDescriptor
    annotations: MemberAnnotations = MemberAnnotations()


TypeDescriptor = PrimitiveType | EnumType | CollectionType | ObjectType


def open_object() -> ObjectType:
    """Return the untyped placeholder used when an element type is unknown."""
    return ObjectType(name="object")
