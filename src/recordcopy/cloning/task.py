"""Copy task: clones one record, recursing through its relationships.

copy_record has no concurrency policy of its own. Siblings of a to-many
relationship are copied concurrently and cycles re-enter it for records that
are still being copied; the session identity map keeps both cases correct.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from recordcopy.cloning.options import CopyOptions, CopyTrace, OptionsLike, resolve_options
from recordcopy.cloning.relationships import copy_relationships
from recordcopy.cloning.session import CopySession
from recordcopy.core.schema import (
    AttributeMeta,
    CopyableValue,
    Record,
    RelationshipMeta,
    each_attribute,
    each_relationship,
)
from recordcopy.core.transform import PRIMITIVE_TYPES, get_transform
from recordcopy.core.types import Clone


def clone_value(
    record: Record, meta: AttributeMeta, value: Any, deep: bool, session: CopySession
) -> Any:
    """Clone a typed attribute value.

    Values implementing CopyableValue copy themselves; everything else runs
    through the transform round trip for the attribute type.
    """
    if isinstance(value, CopyableValue):
        return value.__copy_value__(deep)

    transform = get_transform(record, meta.type, session)  # type: ignore[arg-type]
    wire = transform.serialize(value, meta.options)
    return transform.deserialize(wire, meta.options)


def copy_attributes(
    record: Record, deep: bool, options: CopyOptions, session: CopySession
) -> dict[str, Any]:
    """Attribute pass: values for every attribute that is not ignored."""
    values: dict[str, Any] = {}

    def copy_attribute(name: str, meta: AttributeMeta) -> None:
        if name in options.ignore_attributes:
            return
        if name in options.overwrite:
            values[name] = options.overwrite[name]
        elif (
            meta.type
            and name not in options.copy_by_reference
            and meta.type not in PRIMITIVE_TYPES
        ):
            values[name] = clone_value(record, meta, record.read_attribute(name), deep, session)
        else:
            values[name] = record.read_attribute(name)

    each_attribute(record, copy_attribute)
    return values


def allocate_target(record: Record, options: CopyOptions) -> Any:
    """Create the empty clone: a store record or a plain object."""
    if options.create_as_model:
        return record.store.create_record(record.model_name)
    if options.object_definition is not None:
        return options.object_definition()
    return {}


def assign_properties(target: Any, values: dict[str, Any]) -> None:
    """Bulk-assign values onto a record, a mapping, or a plain object."""
    if isinstance(target, Record):
        target.set_properties(values)
    elif isinstance(target, MutableMapping):
        target.update(values)
    else:
        for name, value in values.items():
            setattr(target, name, value)


async def copy_record(
    record: Record, deep: bool, options: OptionsLike, session: CopySession
) -> Clone[Any]:
    """Copy `record` within `session`.

    Args:
        record: Source record.
        deep: Clone related records (True) or link them by reference (False).
        options: Call-site options, merged over the model's copyable_options.
            When a CopyOptions instance is given, its `trace` is updated.
        session: Session of the running top-level copy.

    Returns:
        The clone. If the record was already visited in this session, the
        clone registered for it.
    """
    # Check-then-insert must stay free of awaits: it is what breaks cycles
    if record in session.copies:
        return session.copies[record]

    resolved = resolve_options(type(record).copyable_options, options)
    target = allocate_target(record, resolved)
    session.copies[record] = target

    attributes = copy_attributes(record, deep, resolved, session)

    relationships: list[RelationshipMeta] = []

    def collect(name: str, meta: RelationshipMeta) -> None:
        if name not in resolved.ignore_attributes:
            relationships.append(meta)

    each_relationship(record, collect)
    related = await copy_relationships(record, target, relationships, deep, resolved, session)

    merged = {
        **record.get_properties(resolved.other_attributes),
        **attributes,
        **related,
        **resolved.overwrite,
    }
    if isinstance(options, CopyOptions):
        options._trace = CopyTrace(attributes=attributes, relationships=related, merged=merged)

    assign_properties(target, merged)
    return target
