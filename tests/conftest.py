"""Shared test fixtures.

Models are registered once per test session under the names used by the
tests ("user", "comment", "post", ...). Tests create records by model name.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from recordcopy import Copier, CopySettings, LocalStore, Record, attr, belongs_to, has_many, model
from recordcopy.core.transform import get_transform_registry


@dataclass
class Address:
    """Embedded value that copies itself; records the deep flag it was given."""

    street: str
    lines: list[str] = field(default_factory=list)
    copied_with: list[bool] = field(default_factory=list)

    def __copy_value__(self, deep: bool) -> Address:
        self.copied_with.append(deep)
        return Address(street=self.street, lines=list(self.lines))


class AddressTransform:
    """Fallback for addresses that are not Address instances (e.g. None)."""

    def serialize(self, value, options):
        return None if value is None else {"street": value.street, "lines": list(value.lines)}

    def deserialize(self, wire, options):
        return None if wire is None else Address(**wire)


get_transform_registry().register("address", AddressTransform)


@model
class User(Record):
    name = attr("string")
    profile = attr("object")
    address = attr("address")
    best_friend = belongs_to("user")


@model
class Comment(Record):
    body = attr("string")
    posted_on = attr("date")
    meta = attr("object")
    author = belongs_to("user")
    post = belongs_to("post")


@model
class Tag(Record):
    name = attr("string")


@model(copyable=False)
class Category(Record):
    name = attr("string")


@model
class Post(Record):
    title = attr("string")
    views = attr("number")
    draft = attr("boolean")
    summary = attr()
    tags = attr("array")
    metadata = attr("object")
    published_at = attr("datetime")
    price = attr("decimal")
    author = belongs_to("user")
    category = belongs_to("category")
    comments = has_many("comment")
    labels = has_many("tag")

    @property
    def headline(self) -> str:
        return f"{self.title}!"


@model(name="node")
class GraphNode(Record):
    label = attr("string")
    next = belongs_to("node")
    children = has_many("node")


@model
class Invoice(Record):
    number = attr("string")
    notes = attr("array")
    customer = belongs_to("user")

    copyable_options = {"ignore_attributes": ["number"], "copy_by_reference": ["notes"]}


@pytest.fixture
def store() -> LocalStore:
    """Fresh in-memory store."""
    return LocalStore()


@pytest.fixture
def copier() -> Copier:
    """Copier with default settings, independent of the environment."""
    return Copier(CopySettings(_env_file=None))


@pytest.fixture
def blog(store: LocalStore) -> dict[str, Record]:
    """Post A with comments C1, C2 both written by the same user U."""
    user = store.create_record("user", name="ada", profile={"langs": ["py"]})
    c1 = store.create_record("comment", body="first", author=user)
    c2 = store.create_record("comment", body="second", author=user)
    post = store.create_record("post", title="x", author=user, comments=[c1, c2])
    c1.post = post
    c2.post = post
    return {"post": post, "c1": c1, "c2": c2, "user": user}
