"""Tests for attribute transforms and the transform registry.

Critical Invariants:
- A serialize/deserialize round trip yields an equal value sharing no mutable state
- Class registrations give a fresh transform per lookup
- A copy resolves each attribute type once
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import BaseModel

from recordcopy import CopySession, LocalStore, ModelTransform, TransformRegistry
from recordcopy.core.exceptions import TransformNotFoundError
from recordcopy.core.transform import (
    DateTimeTransform,
    DateTransform,
    DecimalTransform,
    JsonTransform,
    default_transforms,
    get_transform,
)


class Location(BaseModel):
    city: str
    coords: list[float]


def round_trip(transform, value):
    return transform.deserialize(transform.serialize(value, {}), {})


json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(),
    lambda children: st.lists(children) | st.dictionaries(st.text(), children),
    max_leaves=20,
)


@given(json_values)
def test_json_round_trip_is_equal(value):
    assert round_trip(JsonTransform(), value) == value


def test_json_round_trip_shares_no_state():
    value = {"outer": {"inner": [1, 2]}}

    clone = round_trip(JsonTransform(), value)
    clone["outer"]["inner"].append(3)

    assert value == {"outer": {"inner": [1, 2]}}


def test_json_rejects_unencodable_values():
    with pytest.raises(TypeError):
        JsonTransform().serialize({"bad": object()}, {})


@pytest.mark.parametrize(
    "value",
    [
        {1: "a"},
        {"outer": {2: "b"}},
        [{"point": (1, 2)}],
        (1, 2),
    ],
)
def test_json_rejects_values_it_cannot_reproduce(value):
    """CRITICAL: A round trip that would change the value fails instead.

    Why: int keys come back as str and tuples as lists; a clone must equal
    its source.
    """
    with pytest.raises(TypeError):
        JsonTransform().serialize(value, {})


@pytest.mark.asyncio
async def test_copy_fails_on_lossy_object_attribute(store, copier):
    post = store.create_record("post", metadata={"scores": {1: "a"}})

    with pytest.raises(TypeError, match="keys must be str"):
        await copier.copy(post)

    post.metadata = None
    post.tags = ["a", ("b", "c")]
    with pytest.raises(TypeError, match="tuple"):
        await copier.copy(post)

    assert list(store.all_records("post")) == [post]


def test_scalar_transforms_round_trip():
    moment = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)

    assert round_trip(DateTransform(), date(2024, 1, 2)) == date(2024, 1, 2)
    assert round_trip(DateTimeTransform(), moment) == moment
    assert str(round_trip(DecimalTransform(), Decimal("1.10"))) == "1.10"


@pytest.mark.parametrize(
    "transform",
    [DateTransform(), DateTimeTransform(), DecimalTransform(), JsonTransform()],
)
def test_transforms_pass_none_through(transform):
    assert transform.serialize(None, {}) is None
    assert transform.deserialize(None, {}) is None


def test_model_transform_clones_pydantic_models():
    transform = ModelTransform(Location)
    value = Location(city="Oslo", coords=[59.9, 10.7])

    clone = round_trip(transform, value)

    assert clone == value
    assert clone is not value
    assert clone.coords is not value.coords
    assert round_trip(transform, None) is None


def test_registry_instance_registration_is_shared():
    registry = TransformRegistry()
    transform = JsonTransform()
    registry.register("json", transform)

    assert registry.lookup("json") is transform
    assert registry.lookup("json") is transform


def test_registry_class_registration_instantiates_per_lookup():
    registry = TransformRegistry({"json": JsonTransform})

    first = registry.lookup("json")
    second = registry.lookup("json")

    assert isinstance(first, JsonTransform)
    assert first is not second


def test_registry_rejects_non_transforms():
    with pytest.raises(TypeError, match="Transform protocol"):
        TransformRegistry().register("bad", object())


def test_registry_lookup_unknown_type():
    with pytest.raises(TransformNotFoundError, match="mystery"):
        TransformRegistry().lookup("mystery")


def test_registry_copy_is_independent():
    registry = TransformRegistry({"json": JsonTransform})
    copy = registry.copy()
    copy.register("date", DateTransform)

    assert "date" in copy
    assert "date" not in registry
    assert "json" in copy


def test_default_transforms():
    registry = default_transforms()

    for type_name in ("date", "datetime", "decimal", "object", "array"):
        assert type_name in registry
    for type_name in ("string", "number", "boolean"):
        assert type_name not in registry


class CountingTransform(JsonTransform):
    created = 0

    def __init__(self):
        CountingTransform.created += 1


def test_get_transform_resolves_once_per_session():
    """CRITICAL: One copy uses one transform instance per attribute type.

    Why: Class-registered transforms may carry per-copy state; unrelated
    copies must never share it.
    """
    CountingTransform.created = 0
    store = LocalStore(transforms=TransformRegistry({"counted": CountingTransform}))
    record = store.create_record("tag", name="x")
    first_session, second_session = CopySession(), CopySession()

    a = get_transform(record, "counted", first_session)
    b = get_transform(record, "counted", first_session)
    c = get_transform(record, "counted", second_session)

    assert a is b
    assert a is not c
    assert CountingTransform.created == 2
    assert first_session.transforms == {"counted": a}


def test_get_transform_uses_record_store_registry():
    store = LocalStore(transforms=TransformRegistry())
    record = store.create_record("tag", name="x")

    with pytest.raises(TransformNotFoundError):
        get_transform(record, "object", CopySession())
