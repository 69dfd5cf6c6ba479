"""Schema annotations: inline markers and the annotation side-table.

Members can be annotated inline with ``typing.Annotated``::

    class Invoice(BaseModel):
        id: Annotated[str, SKIP]
        total: Annotated[float, Description("Grand total including tax")]

or out of line through an ``AnnotationTable``, which can also be loaded from
YAML::

    billing.models.Invoice:
      description: A customer invoice
      members:
        id:
          skip: true
        total:
          description: Grand total including tax
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from .descriptors import MemberAnnotations
from .errors import AnnotationFileError


@dataclass(frozen=True)
class Description:
    """Human-readable description surfaced in the schema."""

    text: str


@dataclass(frozen=True)
class SkipSchema:
    """Excludes a member from the generated schema entirely."""


SKIP = SkipSchema()


def qualified_name(tp: type) -> str:
    """Return the dotted ``module.QualName`` key used by annotation tables."""
    return f"{tp.__module__}.{tp.__qualname__}"


class MemberRecord(BaseModel):
    """Annotation record for one member in an annotation file."""

    description: str | None = Field(default=None, description="Member description")
    skip: bool = Field(default=False, description="Exclude member from the schema")


class TypeRecord(BaseModel):
    """Annotation record for one type in an annotation file."""

    description: str | None = Field(default=None, description="Type description")
    members: dict[str, MemberRecord] = Field(
        default_factory=dict,
        description="Per-member annotations keyed by member name",
    )


class AnnotationTable:
    """Side-table of descriptions and skip markers keyed by qualified type name."""

    def __init__(self, records: dict[str, TypeRecord] | None = None):
        self._records: dict[str, TypeRecord] = dict(records or {})

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, tp: type | str) -> bool:
        return self._key(tp) in self._records

    @staticmethod
    def _key(tp: type | str) -> str:
        return tp if isinstance(tp, str) else qualified_name(tp)

    def _record(self, tp: type | str) -> TypeRecord:
        key = self._key(tp)
        if key not in self._records:
            self._records[key] = TypeRecord()
        return self._records[key]

    def _member_record(self, tp: type | str, name: str) -> MemberRecord:
        record = self._record(tp)
        if name not in record.members:
            record.members[name] = MemberRecord()
        return record.members[name]

    def set_type_description(self, tp: type | str, text: str) -> None:
        self._record(tp).description = text

    def set_member_description(self, tp: type | str, name: str, text: str) -> None:
        self._member_record(tp, name).description = text

    def skip_member(self, tp: type | str, name: str) -> None:
        self._member_record(tp, name).skip = True

    def type_description(self, tp: type | str) -> str | None:
        record = self._records.get(self._key(tp))
        return record.description if record else None

    def member(self, tp: type | str, name: str) -> MemberAnnotations:
        """Return the annotations recorded for a member, or empty ones."""
        record = self._records.get(self._key(tp))
        if record is None or name not in record.members:
            return MemberAnnotations()
        member = record.members[name]
        return MemberAnnotations(description=member.description, skip=member.skip)

    def merge(self, other: AnnotationTable) -> AnnotationTable:
        """Return a new table with ``other``'s entries layered over this one."""
        merged = AnnotationTable(
            {key: record.model_copy(deep=True) for key, record in self._records.items()}
        )
        for key, record in other._records.items():
            if record.description is not None:
                merged.set_type_description(key, record.description)
            for name, member in record.members.items():
                if member.description is not None:
                    merged.set_member_description(key, name, member.description)
                if member.skip:
                    merged.skip_member(key, name)
        return merged

    @classmethod
    def from_yaml(cls, yaml_str: str) -> AnnotationTable:
        """Load a table from a YAML document."""
        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise AnnotationFileError(f"Invalid annotation YAML: {e}") from e
        if not isinstance(data, dict):
            raise AnnotationFileError(
                "Annotation document must be a mapping of type names to records"
            )
        try:
            records = {
                str(key): TypeRecord.model_validate(value or {})
                for key, value in data.items()
            }
        except ValidationError as e:
            raise AnnotationFileError(f"Invalid annotation record: {e}") from e
        return cls(records)

    @classmethod
    def load_yaml(cls, path: str | Path) -> AnnotationTable:
        """Load a table from a YAML file."""
        path = Path(path)
        try:
            with path.open() as f:
                return cls.from_yaml(f.read())
        except OSError as e:
            raise AnnotationFileError(f"Cannot read annotation file {path}: {e}") from e


# Process-wide table populated by ``register_type`` and ``describe_type``
_default_table = AnnotationTable()


def default_table() -> AnnotationTable:
    """Return the process-wide annotation table."""
    return _default_table


def describe_type(text: str):
    """Class decorator recording a type-level description in the default table."""

    def decorator(cls: type) -> type:
        _default_table.set_type_description(cls, text)
        return cls

    return decorator
