"""Type registry for lookup by name."""

from collections.abc import Iterable
from typing import Type

from .annotations import default_table


# Global registry of schema types
_type_registry: dict[str, Type] = {}


def register_type(
    cls: Type | None = None,
    *,
    name: str | None = None,
    description: str | None = None,
    skip: Iterable[str] = (),
):
    """Register a type for schema generation.

    Can be used as a bare decorator, a decorator with arguments, or called
    directly. Descriptions and skipped members are recorded in the default
    annotation table.

    Args:
        cls: The class to register
        name: Registry name (defaults to the class name)
        description: Type-level description
        skip: Member names to exclude from the schema

    Returns:
        The same class (for decorator use)

    Example:
        >>> @register_type(description="A customer invoice", skip=["id"])
        ... class Invoice(BaseModel):
        ...     id: str
        ...     total: float
    """

    def decorator(target: Type) -> Type:
        _type_registry[name or target.__name__] = target
        table = default_table()
        if description is not None:
            table.set_type_description(target, description)
        for member_name in skip:
            table.skip_member(target, member_name)
        return target

    if cls is not None:
        return decorator(cls)
    return decorator


def get_type(name: str) -> Type | None:
    """Get a registered type by name.

    Args:
        name: The registry name (e.g., "Invoice")

    Returns:
        The registered type, or None if not found
    """
    return _type_registry.get(name)


def get_all_types() -> dict[str, Type]:
    """Get all registered types.

    Returns:
        Dictionary mapping registry names to types
    """
    return _type_registry.copy()
