"""Build type descriptors from live Python types."""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import logging
import pathlib
import types
import uuid
from typing import (
    Annotated,
    Any,
    ClassVar,
    Literal,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from .annotations import AnnotationTable, Description, SkipSchema, default_table
from .descriptors import (
    CollectionType,
    EnumType,
    MemberAnnotations,
    MemberDescriptor,
    ObjectType,
    PrimitiveType,
    ScalarKind,
    TypeDescriptor,
    open_object,
)

logger = logging.getLogger(__name__)

# Checked in order: bool must win over int, and str subclasses stay text
_SCALARS: list[tuple[type, ScalarKind]] = [
    (str, ScalarKind.TEXT),
    (bool, ScalarKind.BOOLEAN),
    (int, ScalarKind.INTEGER),
    (float, ScalarKind.NUMBER),
    (decimal.Decimal, ScalarKind.NUMBER),
]

# Value types with no JSON counterpart; they degrade to strings
_OPAQUE_SCALARS: tuple[type, ...] = (
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    pathlib.PurePath,
)

_BYTE_STRINGS: tuple[type, ...] = (bytes, bytearray)


def _type_name(tp: Any) -> str:
    return tp.__name__ if isinstance(tp, type) else repr(tp)


def _split_annotated(hint: Any) -> tuple[Any, list[Any]]:
    """Separate ``Annotated[T, *meta]`` into ``T`` and its metadata."""
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, metadata
    return hint, []


class TypeIntrospector:
    """Describes Python types, memoising object types so cycles terminate.

    One introspector is used per top-level ``describe`` call; the memo table
    is what lets ``class Node: children: list["Node"]`` produce a finite,
    cyclic descriptor graph.
    """

    def __init__(self, table: AnnotationTable | None = None):
        self.table = table if table is not None else default_table()
        self._objects: dict[Any, ObjectType] = {}

    def describe(self, tp: Any) -> TypeDescriptor:
        origin = get_origin(tp)

        if origin is Annotated:
            return self.describe(get_args(tp)[0])

        if origin is Union or origin is types.UnionType:
            args = [arg for arg in get_args(tp) if arg is not type(None)]
            if len(args) == 1:
                # Optional[T] is described as T
                return self.describe(args[0])
            logger.debug(f"Union {tp!r} has no single JSON type; using string")
            return PrimitiveType(name=_type_name(tp), scalar=ScalarKind.UNKNOWN)

        if origin is Literal:
            return EnumType(
                name="Literal",
                names=tuple(
                    value.name if isinstance(value, enum.Enum) else str(value)
                    for value in get_args(tp)
                ),
            )

        if tp is Any or tp is object:
            return open_object()

        if origin is not None:
            return self._describe_generic(tp, origin)

        if hasattr(tp, "__supertype__"):
            # typing.NewType
            return self.describe(tp.__supertype__)

        if not isinstance(tp, type):
            logger.debug(f"Cannot classify {tp!r}; using string")
            return PrimitiveType(name=_type_name(tp), scalar=ScalarKind.UNKNOWN)

        return self._describe_class(tp)

    def _describe_generic(self, tp: Any, origin: Any) -> TypeDescriptor:
        if isinstance(origin, type):
            if issubclass(origin, collections.abc.Iterable) and not issubclass(
                origin, str
            ):
                # Mappings iterate their keys, so dict[K, V] is a collection of K
                args = get_args(tp)
                element = self.describe(args[0]) if args else None
                return CollectionType(name=_type_name(tp), element=element)
        # Parameterised user generics are described by their origin class
        return self.describe(origin)

    def _describe_class(self, tp: type) -> TypeDescriptor:
        if issubclass(tp, enum.Enum):
            return EnumType(
                name=tp.__name__,
                names=tuple(member.name for member in tp),
                description=self.table.type_description(tp),
            )

        for scalar_type, kind in _SCALARS:
            if issubclass(tp, scalar_type):
                return PrimitiveType(
                    name=tp.__name__,
                    scalar=kind,
                    description=self.table.type_description(tp),
                )

        if issubclass(tp, _OPAQUE_SCALARS):
            return PrimitiveType(
                name=tp.__name__,
                scalar=ScalarKind.UNKNOWN,
                description=self.table.type_description(tp),
            )

        # BaseModel defines __iter__, so models are matched before iterables
        if issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp):
            return self._describe_object(tp)

        if issubclass(tp, _BYTE_STRINGS):
            return CollectionType(
                name=tp.__name__,
                element=PrimitiveType(name="int", scalar=ScalarKind.INTEGER),
            )

        if issubclass(tp, collections.abc.Iterable):
            return CollectionType(name=tp.__name__)

        return self._describe_object(tp)

    def _describe_object(self, tp: type) -> ObjectType:
        if tp in self._objects:
            return self._objects[tp]

        descriptor = ObjectType(
            name=tp.__name__,
            description=self.table.type_description(tp),
        )
        # Registered before members are walked so self references resolve
        self._objects[tp] = descriptor

        for name, hint, metadata, field_description in self._members(tp):
            descriptor.members.append(
                MemberDescriptor(
                    name=name,
                    type=self.describe(hint),
                    annotations=self._member_annotations(
                        tp, name, metadata, field_description
                    ),
                )
            )
        return descriptor

    def _members(self, tp: type):
        """Yield ``(name, hint, metadata, field_description)`` in declaration order."""
        if issubclass(tp, BaseModel):
            for name, info in tp.model_fields.items():
                hint, metadata = _split_annotated(info.annotation)
                yield name, hint, list(info.metadata) + metadata, info.description
            return

        hints = _type_hints(tp)

        if dataclasses.is_dataclass(tp):
            for f in dataclasses.fields(tp):
                if f.name.startswith("_"):
                    continue
                hint, metadata = _split_annotated(hints.get(f.name, f.type))
                yield f.name, hint, metadata, None
            return

        for name, raw_hint in hints.items():
            if name.startswith("_"):
                continue
            hint, metadata = _split_annotated(raw_hint)
            if hint is ClassVar or get_origin(hint) is ClassVar:
                continue
            yield name, hint, metadata, None

    def _member_annotations(
        self,
        owner: type,
        name: str,
        metadata: list[Any],
        field_description: str | None,
    ) -> MemberAnnotations:
        """Resolve member metadata: side-table, then markers, then field description."""
        description: str | None = None
        skip = False
        for cls in owner.__mro__:
            recorded = self.table.member(cls, name)
            if description is None:
                description = recorded.description
            skip = skip or recorded.skip

        if description is None:
            description = next(
                (m.text for m in metadata if isinstance(m, Description)), None
            )
        if description is None:
            description = field_description

        skip = skip or any(isinstance(m, SkipSchema) for m in metadata)
        return MemberAnnotations(description=description, skip=skip)


def _type_hints(tp: type) -> dict[str, Any]:
    try:
        return get_type_hints(tp, include_extras=True)
    except (NameError, TypeError) as e:
        logger.warning(f"Could not resolve type hints for {tp.__qualname__}: {e}")

    # Resolve member by member; only the hints that fail stay as strings
    hints: dict[str, Any] = {}
    for base in reversed(tp.__mro__):
        try:
            annotations = inspect.get_annotations(base)
        except NameError:
            continue
        for name, raw_hint in annotations.items():
            hints[name] = _resolve_hint(base, name, raw_hint)
    return hints


def _resolve_hint(owner: type, name: str, raw_hint: Any) -> Any:
    """Evaluate one annotation in the namespace of the class declaring it."""
    if not isinstance(raw_hint, str):
        return raw_hint
    holder = type(
        owner.__name__,
        (),
        {"__module__": owner.__module__, "__annotations__": {name: raw_hint}},
    )
    try:
        return get_type_hints(holder, localns=dict(vars(owner)), include_extras=True)[name]
    except (NameError, TypeError, AttributeError, SyntaxError) as e:
        logger.warning(f"Could not resolve {owner.__qualname__}.{name}: {e}")
        return raw_hint


def describe(tp: Any, table: AnnotationTable | None = None) -> TypeDescriptor:
    """Describe a Python type for schema generation.

    Args:
        tp: A class, enum, or typing construct such as ``list[Widget]``
        table: Annotation side-table (defaults to the process-wide table)

    Returns:
        The descriptor graph rooted at ``tp``
    """
    return TypeIntrospector(table).describe(tp)
