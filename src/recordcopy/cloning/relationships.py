"""Relationship copier: reference links and deep copies of related records.

Usage:
    values = await copy_relationships(post, clone, metas, deep, options, session)
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from recordcopy.cloning.options import CopyOptions
from recordcopy.cloning.session import CopySession
from recordcopy.core.exceptions import LinkUnsupportedError
from recordcopy.core.logging_config import get_logger
from recordcopy.core.schema import (
    Record,
    RelationshipKind,
    RelationshipMeta,
    is_copyable_record,
)

logger = get_logger("cloning")


async def link_relationship(
    record: Record, target: Any, meta: RelationshipMeta
) -> dict[str, Any]:
    """Reference-link mode: give `target` the same related records as `record`.

    Linking goes through the store's relationship state so nothing is loaded.
    When the store cannot link (plain-object target, kind mismatch) the
    relationship is read and returned for plain assignment instead.

    Returns:
        {} if linked, else {name: value} to be assigned onto the clone.
    """
    members = list(record.relationship_state(meta.name).members)
    try:
        record.store.link_existing_members(target, meta, members)
    except LinkUnsupportedError as e:
        logger.debug("Assigning '%s' of %r by value: %s", meta.name, record, e)
        return {meta.name: await record.fetch(meta.name)}
    return {}


async def copy_relationships(
    record: Record,
    target: Any,
    relationships: list[RelationshipMeta],
    deep: bool,
    options: CopyOptions,
    session: CopySession,
) -> dict[str, Any]:
    """Relationship pass: values for the clone's relationships.

    Args:
        record: Source record.
        target: Clone being populated (already registered in the session).
        relationships: Relationships to process, in declaration order.
        deep: Ambient depth of this copy.
        options: Resolved options of `record`.
        session: Session of the running copy.

    Returns:
        Relationship name -> value to assign. Relationships linked by
        reference are set on `target` directly and left out.
    """
    values: dict[str, Any] = {}

    for meta in relationships:
        name = meta.name

        if name in options.overwrite:
            values[name] = options.overwrite[name]
            continue

        # No need to fetch anything for reference copies or shallow copies
        if not deep or name in options.copy_by_reference:
            values.update(await link_relationship(record, target, meta))
            continue

        sub_options = options.relationships.get(name)
        child_deep = deep if sub_options is None or sub_options.deep is None else sub_options.deep
        related = await record.fetch(name)

        if meta.kind is RelationshipKind.TO_ONE:
            values[name] = await _copy_to_one(related, child_deep, sub_options, session)
        else:
            values[name] = await _copy_to_many(related, child_deep, sub_options, session)

    return values


async def _copy_to_one(
    related: Any, deep: bool, options: CopyOptions | None, session: CopySession
) -> Any:
    if related is None or not is_copyable_record(related):
        return related

    # Late import to avoid circular dependency
    from recordcopy.cloning.task import copy_record

    return await copy_record(related, deep, options, session)


async def _copy_to_many(
    related: Any, deep: bool, options: CopyOptions | None, session: CopySession
) -> Any:
    members = list(related or ())
    if not members or not all(is_copyable_record(member) for member in members):
        return related

    # Late import to avoid circular dependency
    from recordcopy.cloning.task import copy_record

    limit = session.max_concurrent

    if limit is None:
        coros = [copy_record(member, deep, options, session) for member in members]
    else:
        semaphore = asyncio.Semaphore(limit)

        async def limited_copy(member: Record) -> Any:
            async with semaphore:
                return await copy_record(member, deep, options, session)

        coros = [limited_copy(member) for member in members]

    return await _gather_in_order(coros)


async def _gather_in_order(coros: list[Coroutine[Any, Any, Any]]) -> list[Any]:
    """Run copies concurrently; results keep input order.

    Copies are never cancelled. If any fail, the error of the first failing
    member (in input order) is raised once all of them have settled, so every
    clone they created is in the session when rollback runs.
    """
    results = await asyncio.gather(*coros, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)
