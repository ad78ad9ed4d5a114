"""Store protocol for swappable record stores.

The copy engine needs very little from a store: allocate an empty record of
a model, unload a record, read a relationship, and link existing records into
a relationship without loading them. LocalStore is the in-memory default.

Usage:
    store = LocalStore()
    post = store.create_record("post", title="x")
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Protocol

from recordcopy.core.identity import RecordId

if TYPE_CHECKING:
    from recordcopy.core.schema import Record, RelationshipMeta
    from recordcopy.core.transform import TransformRegistry


class Store(Protocol):
    """Abstract record store interface."""

    @property
    def transforms(self) -> TransformRegistry:
        """Transforms used to clone attribute values of this store's records."""
        ...

    def create_record(self, model_name: str, **properties: Any) -> Record:
        """Allocate a new record of `model_name`, optionally populated."""
        ...

    def unload_record(self, record: Record) -> None:
        """Remove a record from the store. No-op if already unloaded."""
        ...

    def record_exists(self, record_id: RecordId) -> bool:
        """Check if a record is loaded."""
        ...

    def all_records(self, model_name: str | None = None) -> Iterator[Record]:
        """Iterate loaded records, optionally of one model."""
        ...

    async def fetch_related_async(self, record: Record, name: str) -> Any:
        """Read relationship `name`: a record or None for to-one, a list for to-many."""
        ...

    def link_existing_members(
        self, target: Any, relationship: RelationshipMeta, members: Iterable[Record]
    ) -> None:
        """Add existing records to `target`'s relationship without loading them.

        Raises:
            LinkUnsupportedError: If `target` cannot hold the link, e.g. it is
                not a record of this store or declares a different kind.
        """
        ...
