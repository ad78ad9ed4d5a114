"""Attribute transforms: serialize/deserialize pairs used to clone values.

Running a value through serialize() and then deserialize() yields a new
instance that shares no mutable state with the original. That round trip is
how the copy engine clones typed attributes.

Usage:
    registry = TransformRegistry()
    registry.register("money", MoneyTransform())
    registry.register("address", ModelTransform(Address))  # pydantic model

    store = LocalStore(transforms=registry)
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

from recordcopy.core.exceptions import TransformNotFoundError

if TYPE_CHECKING:
    from recordcopy.cloning.session import CopySession
    from recordcopy.core.schema.record import Record

PRIMITIVE_TYPES = frozenset({"string", "number", "boolean"})
"""Attribute types whose values are immutable and copied as-is."""


@runtime_checkable
class Transform(Protocol):
    """Converts attribute values to a wire form and back."""

    def serialize(self, value: Any, options: Mapping[str, Any]) -> Any: ...

    def deserialize(self, wire: Any, options: Mapping[str, Any]) -> Any: ...


class DateTransform:
    """datetime.date <-> ISO-8601 date string."""

    def serialize(self, value: date | None, options: Mapping[str, Any]) -> str | None:
        return None if value is None else value.isoformat()

    def deserialize(self, wire: str | None, options: Mapping[str, Any]) -> date | None:
        return None if wire is None else date.fromisoformat(wire)


class DateTimeTransform:
    """datetime.datetime <-> ISO-8601 timestamp string."""

    def serialize(self, value: datetime | None, options: Mapping[str, Any]) -> str | None:
        return None if value is None else value.isoformat()

    def deserialize(self, wire: str | None, options: Mapping[str, Any]) -> datetime | None:
        return None if wire is None else datetime.fromisoformat(wire)


class DecimalTransform:
    """decimal.Decimal <-> string, preserving precision."""

    def serialize(self, value: Decimal | None, options: Mapping[str, Any]) -> str | None:
        return None if value is None else str(value)

    def deserialize(self, wire: str | None, options: Mapping[str, Any]) -> Decimal | None:
        return None if wire is None else Decimal(wire)


def _check_json_exact(value: Any) -> None:
    """Reject containers that JSON would silently change on a round trip.

    Raises:
        TypeError: For mapping keys that are not str, and for tuples.
    """
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"JSON object keys must be str, got {type(key).__name__}: {key!r}"
                )
            _check_json_exact(item)
    elif isinstance(value, tuple):
        raise TypeError("tuple would come back as a list; use a list or a custom transform")
    elif isinstance(value, list):
        for item in value:
            _check_json_exact(item)


class JsonTransform:
    """JSON-compatible containers <-> JSON text.

    The round trip must reproduce the value exactly, so non-str keys and
    tuples raise TypeError, as do values json cannot encode. Either fails
    the copy.
    """

    def serialize(self, value: Any, options: Mapping[str, Any]) -> str | None:
        if value is None:
            return None
        _check_json_exact(value)
        return json.dumps(value)

    def deserialize(self, wire: str | None, options: Mapping[str, Any]) -> Any:
        return None if wire is None else json.loads(wire)


M = TypeVar("M", bound=BaseModel)


class ModelTransform(Generic[M]):
    """Pydantic model <-> JSON-mode dict via model_dump / model_validate."""

    def __init__(self, model_type: type[M]) -> None:
        self._model_type = model_type

    def serialize(self, value: M | None, options: Mapping[str, Any]) -> dict[str, Any] | None:
        return None if value is None else value.model_dump(mode="json")

    def deserialize(self, wire: dict[str, Any] | None, options: Mapping[str, Any]) -> M | None:
        return None if wire is None else self._model_type.model_validate(wire)


class TransformRegistry:
    """Maps attribute type names to transforms.

    A transform may be registered as an instance, shared by every lookup, or
    as a class, instantiated on every lookup. The copy engine looks a type up
    once per session, so class registration gives each copy its own instance.
    """

    def __init__(
        self, transforms: Mapping[str, Transform | type[Transform]] | None = None
    ) -> None:
        self._transforms: dict[str, Transform | type[Transform]] = {}
        for type_name, transform in (transforms or {}).items():
            self.register(type_name, transform)

    def register(self, type_name: str, transform: Transform | type[Transform]) -> None:
        """Register (or replace) the transform for `type_name`.

        Raises:
            TypeError: If `transform` lacks serialize/deserialize.
        """
        if not isinstance(transform, Transform):
            raise TypeError(f"{transform!r} does not implement Transform protocol")
        self._transforms[type_name] = transform

    def lookup(self, type_name: str) -> Transform:
        """Find the transform for `type_name`.

        Raises:
            TransformNotFoundError: If none is registered.
        """
        try:
            transform = self._transforms[type_name]
        except KeyError:
            raise TransformNotFoundError(
                f"Unable to find transform for attribute type '{type_name}'"
            ) from None
        if isinstance(transform, type):
            return transform()
        return transform

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._transforms

    def copy(self) -> TransformRegistry:
        return TransformRegistry(self._transforms)


def default_transforms() -> TransformRegistry:
    """Registry pre-populated with the built-in transforms."""
    return TransformRegistry(
        {
            "date": DateTransform,
            "datetime": DateTimeTransform,
            "decimal": DecimalTransform,
            "object": JsonTransform,
            "array": JsonTransform,
        }
    )


# Module-level registry instance
_transforms = default_transforms()


def get_transform_registry() -> TransformRegistry:
    """Access the global transform registry.

    Returns:
        The process-local TransformRegistry, used by stores created without one.
    """
    return _transforms


def get_transform(record: Record, type_name: str, session: CopySession) -> Transform:
    """Resolve the transform for `type_name`, once per session.

    Resolution goes through the transform registry of the record's store and
    is cached on the session, so one copy always uses one transform instance
    per type and unrelated copies never share transform state.

    Args:
        record: Record whose attribute is being copied.
        type_name: Declared attribute type.
        session: Session of the running copy.

    Returns:
        The transform for `type_name`.

    Raises:
        TransformNotFoundError: If the store knows no such transform.
    """
    transform = session.transforms.get(type_name)
    if transform is None:
        transform = record.store.transforms.lookup(type_name)
        session.transforms[type_name] = transform
    return transform
