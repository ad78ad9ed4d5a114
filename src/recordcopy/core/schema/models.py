"""Schema models: field metadata, relationship state, and the copy protocol.

CopyableValue is an optional interface for attribute values (embedded
fragments, value objects) that know how to copy themselves. When present the
copy engine defers to it instead of running the generic transform.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from recordcopy.core.schema.record import Record


class RelationshipKind(Enum):
    """Cardinality of a relationship."""

    TO_ONE = auto()  # belongs_to
    TO_MANY = auto()  # has_many


@runtime_checkable
class CopyableValue(Protocol):
    """Value that produces its own independent copy."""

    def __copy_value__(self, deep: bool) -> Self: ...


@dataclass(slots=True, frozen=True)
class AttributeMeta:
    """Declared attribute of a model.

    `type` names the transform used to clone the value; None means untyped,
    in which case the value is copied as-is.
    """

    name: str
    type: str | None = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class RelationshipMeta:
    """Declared relationship of a model."""

    name: str
    kind: RelationshipKind
    type: str  # related model name


@dataclass(slots=True, frozen=True)
class ModelMeta:
    """Metadata for registered model types."""

    model_type_id: int
    model_name: str
    attributes: tuple[AttributeMeta, ...]
    relationships: tuple[RelationshipMeta, ...]
    copyable: bool = True

    def relationship(self, name: str) -> RelationshipMeta | None:
        for meta in self.relationships:
            if meta.name == name:
                return meta
        return None


@dataclass(slots=True)
class RelationshipState:
    """Low-level membership of one relationship on one record.

    Mutating the state never loads anything; stores use it to link existing
    records into a relationship.
    """

    kind: RelationshipKind
    members: list[Record] = field(default_factory=list)

    def add_members(self, records: Iterable[Record]) -> None:
        """Add records, replacing the member of a to-one relationship."""
        for record in records:
            if self.kind is RelationshipKind.TO_ONE:
                self.members = [record]
            elif not any(member is record for member in self.members):
                self.members.append(record)

    def replace(self, records: Iterable[Record]) -> None:
        self.members = []
        self.add_members(records)
