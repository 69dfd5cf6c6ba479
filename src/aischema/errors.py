"""Exceptions raised during schema generation."""


class SchemaError(Exception):
    """Base class for schema generation errors."""


class CyclicTypeError(SchemaError):
    """A type refers back to itself through its members."""

    def __init__(self, path: list[str]):
        self.path = path
        super().__init__(f"Cyclic type reference: {' -> '.join(path)}")


class UnknownTypeError(SchemaError):
    """A type name was not found in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown schema type: {name}")


class AnnotationFileError(SchemaError):
    """An annotation side-table document could not be loaded."""
