"""Record base class.

A Record is a node in the graph: an identity, attribute values, and the
low-level membership of each relationship. Records are created by a store;
subclasses are declared with @model and field declarations.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from recordcopy.core.exceptions import SchemaError
from recordcopy.core.identity import RecordId
from recordcopy.core.schema.models import ModelMeta, RelationshipState

if TYPE_CHECKING:
    from recordcopy.cloning.options import CopyOptions
    from recordcopy.storage.protocol import Store


class Record:
    """Base class for all models.

    Class Attributes:
        copyable_options: Per-model copy options, merged over the built-in
            defaults and under call-site options.
    """

    __model_meta__: ClassVar[ModelMeta]
    copyable_options: ClassVar[CopyOptions | Mapping[str, Any] | None] = None

    def __init__(self, store: Store, record_id: RecordId) -> None:
        meta = type(self).__dict__.get("__model_meta__")
        if meta is None:
            raise SchemaError(f"{type(self).__name__} is not a registered model. Missing @model?")
        self._store = store
        self._id = record_id
        self._attributes: dict[str, Any] = {}
        self._relationships = {rel.name: RelationshipState(rel.kind) for rel in meta.relationships}
        self._unloaded = False

    @property
    def id(self) -> RecordId:
        return self._id

    @property
    def store(self) -> Store:
        return self._store

    @property
    def model_name(self) -> str:
        return self.__model_meta__.model_name

    @property
    def is_unloaded(self) -> bool:
        return self._unloaded

    def get(self, name: str) -> Any:
        """Read an attribute, relationship, or any other property by name."""
        return getattr(self, name)

    def read_attribute(self, name: str) -> Any:
        """Read declared attribute `name` without side effects on this record.

        Unlike plain attribute access, a callable default is evaluated but not
        kept, so reading a record for a copy leaves it unchanged.
        """
        return getattr(type(self), name).peek(self)

    def get_properties(self, names: Iterable[str]) -> dict[str, Any]:
        return {name: getattr(self, name) for name in names}

    def set_properties(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            setattr(self, name, value)

    def relationship_state(self, name: str) -> RelationshipState:
        """Low-level membership of relationship `name`.

        Raises:
            KeyError: If the model declares no such relationship.
        """
        return self._relationships[name]

    async def fetch(self, name: str) -> Any:
        """Load relationship `name` through the store."""
        return await self._store.fetch_related_async(self, name)

    async def copy(
        self, deep: bool = False, options: CopyOptions | Mapping[str, Any] | None = None
    ) -> Any:
        """Copy this record through the shared copier.

        Returns:
            The clone, or None if a copy of this record was already in flight.
        """
        # Late import to avoid circular dependency
        from recordcopy.cloning.copier import get_copier

        return await get_copier().copy(self, deep, options)

    def __repr__(self) -> str:
        return f"<{self.model_name}:{self._id}>"
