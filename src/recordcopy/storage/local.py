"""Local in-memory record store.

Simple dict-based store suitable for single-process use and testing.

Usage:
    store = LocalStore()
    user = store.create_record("user", name="ada")
    post = store.create_record("post", title="x", author=user)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from recordcopy.core.exceptions import LinkUnsupportedError, StaleRecordError
from recordcopy.core.identity import RecordId
from recordcopy.core.schema import (
    ModelRegistry,
    Record,
    RelationshipKind,
    RelationshipMeta,
    get_registry,
)
from recordcopy.core.transform import TransformRegistry, get_transform_registry
from recordcopy.storage.allocator import RecordAllocator


class LocalStore:
    """In-memory store of records keyed by RecordId.

    Args:
        registry: Model registry used to resolve model names (default: global).
        transforms: Transform registry for attribute cloning (default: global).
    """

    def __init__(
        self,
        registry: ModelRegistry | None = None,
        transforms: TransformRegistry | None = None,
    ) -> None:
        self._registry = registry or get_registry()
        self._transforms = transforms or get_transform_registry()
        self._allocator = RecordAllocator()
        self._records: dict[RecordId, Record] = {}

    @property
    def transforms(self) -> TransformRegistry:
        return self._transforms

    def create_record(self, model_name: str, **properties: Any) -> Record:
        """Create a new record of `model_name` and return it.

        Args:
            model_name: Registered model name.
            **properties: Initial attribute and relationship values.

        Returns:
            The new record.

        Raises:
            UnknownModelError: If the model name is not registered.
        """
        cls = self._registry.model_for(model_name)
        record = cls(self, self._allocator.allocate())
        self._records[record.id] = record
        if properties:
            record.set_properties(properties)
        return record

    def unload_record(self, record: Record) -> None:
        """Remove a record from the store and release its id.

        Args:
            record: Record to unload.
        """
        if self._records.get(record.id) is record:
            del self._records[record.id]
            self._allocator.deallocate(record.id)
            record._unloaded = True

    def record_exists(self, record_id: RecordId) -> bool:
        """Check if a record is loaded and its id is alive.

        Args:
            record_id: Id to check.

        Returns:
            True if a live record has this id, False otherwise.
        """
        return record_id in self._records and self._allocator.is_alive(record_id)

    def peek_record(self, record_id: RecordId) -> Record | None:
        """Get a loaded record by id without side effects."""
        return self._records.get(record_id)

    def all_records(self, model_name: str | None = None) -> Iterator[Record]:
        """Iterate over loaded records.

        Args:
            model_name: If given, only records of this model.

        Yields:
            Loaded records in creation order.
        """
        for record in list(self._records.values()):
            if model_name is None or record.model_name == model_name:
                yield record

    def __len__(self) -> int:
        return len(self._records)

    async def fetch_related_async(self, record: Record, name: str) -> Any:
        """Read relationship `name` of `record`.

        Local records are always resolved, so this never suspends on I/O.

        Raises:
            StaleRecordError: If the record was unloaded.
            KeyError: If the model has no such relationship.
        """
        if record.is_unloaded:
            raise StaleRecordError(f"Cannot read '{name}' of unloaded record {record!r}")
        state = record.relationship_state(name)
        if state.kind is RelationshipKind.TO_ONE:
            return state.members[0] if state.members else None
        return list(state.members)

    def link_existing_members(
        self, target: Any, relationship: RelationshipMeta, members: Iterable[Record]
    ) -> None:
        """Add existing records to `target`'s relationship state.

        Args:
            target: Record receiving the members.
            relationship: Source relationship being linked.
            members: Records to add; not loaded or copied.

        Raises:
            LinkUnsupportedError: If `target` is not a record of this store, or
                declares no relationship of that name and kind.
        """
        if not isinstance(target, Record) or target.store is not self:
            raise LinkUnsupportedError(f"{type(target).__name__} is not a record of this store")
        target_meta = target.__model_meta__.relationship(relationship.name)
        if target_meta is None or target_meta.kind is not relationship.kind:
            raise LinkUnsupportedError(
                f"{target!r} has no {relationship.kind.name} relationship '{relationship.name}'"
            )
        target.relationship_state(relationship.name).add_members(members)
