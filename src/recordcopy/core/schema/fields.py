"""Field declarations for record models.

Usage:
    @model
    class Post(Record):
        title = attr("string")
        published_on = attr("date")
        author = belongs_to("user")
        comments = has_many("comment")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from recordcopy.core.schema.models import AttributeMeta, RelationshipKind, RelationshipMeta

if TYPE_CHECKING:
    from recordcopy.core.schema.record import Record


class Attribute:
    """Descriptor for a typed record attribute.

    Values live in the record's attribute dict. A callable default is invoked
    on first read and the result is kept, so mutable defaults are not shared.
    """

    def __init__(self, type: str | None = None, *, default: Any = None, **options: Any) -> None:
        self.name = ""
        self.type = type
        self.default = default
        self.options = options

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @property
    def meta(self) -> AttributeMeta:
        return AttributeMeta(name=self.name, type=self.type, options=dict(self.options))

    def __get__(self, record: Record | None, owner: type | None = None) -> Any:
        if record is None:
            return self
        if self.name in record._attributes:
            return record._attributes[self.name]
        if callable(self.default):
            value = self.default()
            record._attributes[self.name] = value
            return value
        return self.default

    def __set__(self, record: Record, value: Any) -> None:
        record._attributes[self.name] = value

    def peek(self, record: Record) -> Any:
        """Read the value like __get__, but never store a computed default."""
        if self.name in record._attributes:
            return record._attributes[self.name]
        return self.default() if callable(self.default) else self.default


class Relationship:
    """Descriptor for a to-one or to-many relationship.

    Reading returns the currently linked members without loading anything:
    the related record (or None) for to-one, a new list for to-many.
    """

    def __init__(self, kind: RelationshipKind, type: str) -> None:
        self.name = ""
        self.kind = kind
        self.type = type

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @property
    def meta(self) -> RelationshipMeta:
        return RelationshipMeta(name=self.name, kind=self.kind, type=self.type)

    def __get__(self, record: Record | None, owner: type | None = None) -> Any:
        if record is None:
            return self
        members = record.relationship_state(self.name).members
        if self.kind is RelationshipKind.TO_ONE:
            return members[0] if members else None
        return list(members)

    def __set__(self, record: Record, value: Any) -> None:
        if self.kind is RelationshipKind.TO_ONE:
            records = [] if value is None else [value]
        else:
            records = list(value or ())
        self._check_members(records)
        record.relationship_state(self.name).replace(records)

    def _check_members(self, records: Iterable[Any]) -> None:
        from recordcopy.core.schema.record import Record

        for value in records:
            if not isinstance(value, Record):
                raise TypeError(
                    f"Relationship '{self.name}' expects Record members, got {type(value).__name__}"
                )


def attr(type: str | None = None, *, default: Any = None, **options: Any) -> Any:
    """Declare an attribute. `type` selects the transform used when copying."""
    return Attribute(type, default=default, **options)


def belongs_to(type: str) -> Any:
    """Declare a to-one relationship to records of model `type`."""
    return Relationship(RelationshipKind.TO_ONE, type)


def has_many(type: str) -> Any:
    """Declare a to-many relationship to records of model `type`."""
    return Relationship(RelationshipKind.TO_MANY, type)
