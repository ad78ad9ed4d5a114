"""Tests for rollback of failed copies.

Critical Invariants:
- A failed copy leaves no clone behind in the store
- The original error propagates, annotated with the cleanup performed
- A clone that cannot be unloaded does not stop the cleanup
"""

import asyncio
import logging

import pytest

from recordcopy import Copier, CopySettings, LocalStore


class FlakyStore(LocalStore):
    """Store whose first unload of each record fails."""

    def __init__(self):
        super().__init__()
        self.failed_once = set()
        self.unload_calls = 0

    def unload_record(self, record):
        self.unload_calls += 1
        if record.id not in self.failed_once:
            self.failed_once.add(record.id)
            raise RuntimeError("store busy")
        super().unload_record(record)


class StubbornStore(LocalStore):
    """Store that refuses to unload anything."""

    def unload_record(self, record):
        raise RuntimeError("read only")


class SlowStore(LocalStore):
    """Store whose relationship reads yield to the event loop."""

    async def fetch_related_async(self, record, name):
        await asyncio.sleep(0)
        return await super().fetch_related_async(record, name)


def add_broken_comment(blog, store):
    """Append a third comment whose meta cannot be cloned."""
    broken = store.create_record(
        "comment", body="third", author=blog["user"], meta={"bad": object()}
    )
    broken.post = blog["post"]
    blog["post"].comments = [*blog["post"].comments, broken]
    return broken


@pytest.mark.asyncio
async def test_failed_copy_leaves_nothing_behind(store, copier, blog):
    """CRITICAL: Clones created before the failure are all unloaded.

    Why: Callers retry failed copies; partial graphs would accumulate.
    """
    add_broken_comment(blog, store)
    before = list(store.all_records())

    with pytest.raises(TypeError):
        await copier.copy(blog["post"], deep=True)

    assert list(store.all_records()) == before
    assert len(list(store.all_records("comment"))) == 3


@pytest.mark.asyncio
async def test_error_is_annotated_and_logged(store, copier, blog, caplog):
    add_broken_comment(blog, store)

    with pytest.raises(TypeError) as excinfo:
        await copier.copy(blog["post"], deep=True)

    # post, user and the three comments were allocated before the failure
    assert excinfo.value.__notes__ == [
        f"Failed to copy {blog['post']!r}. Cleaning up 5 created copies..."
    ]
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].name == "recordcopy.cloning"
    assert "TypeError" in errors[0].getMessage()


@pytest.mark.asyncio
async def test_rolled_back_clones_are_unloaded_records(store, copier, blog):
    add_broken_comment(blog, store)
    created = []
    original_create = store.create_record

    def tracking_create(model_name, **properties):
        record = original_create(model_name, **properties)
        created.append(record)
        return record

    store.create_record = tracking_create

    with pytest.raises(TypeError):
        await copier.copy(blog["post"], deep=True)

    assert created
    assert all(record.is_unloaded for record in created)


@pytest.mark.asyncio
async def test_siblings_settle_before_rollback(copier):
    store = SlowStore()
    user = store.create_record("user", name="ada")
    comments = [store.create_record("comment", body=f"c{i}", author=user) for i in range(3)]
    comments[1].meta = {"bad": object()}
    post = store.create_record("post", title="x", comments=comments)
    before = len(store)

    with pytest.raises(TypeError):
        await copier.copy(post, deep=True)
    for _ in range(5):
        await asyncio.sleep(0)

    assert len(store) == before


@pytest.mark.asyncio
async def test_rollback_retries_unload():
    store = FlakyStore()
    user = store.create_record("user", name="ada", profile={"bad": object()})
    copier = Copier(CopySettings(_env_file=None, rollback_attempts=2))

    with pytest.raises(TypeError):
        await copier.copy(user)

    assert list(store.all_records()) == [user]
    assert store.unload_calls == 2


@pytest.mark.asyncio
async def test_unload_failure_does_not_mask_original_error(caplog):
    store = StubbornStore()
    user = store.create_record("user", name="ada")
    post = store.create_record("post", title="x", author=user, metadata={"bad": object()})
    copier = Copier(CopySettings(_env_file=None, rollback_attempts=2))

    with pytest.raises(TypeError):
        await copier.copy(post, deep=True)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "Could not unload" in warnings[0].getMessage()
    assert "read only" in warnings[0].getMessage()


@pytest.mark.asyncio
async def test_cleanup_continues_past_stubborn_clone():
    class PartlyStubbornStore(LocalStore):
        def unload_record(self, record):
            if record.model_name == "user":
                raise RuntimeError("pinned")
            super().unload_record(record)

    store = PartlyStubbornStore()
    user = store.create_record("user", name="ada")
    comment = store.create_record("comment", body="c", author=user, meta={"bad": object()})
    post = store.create_record("post", title="x", author=user, comments=[comment])
    copier = Copier(CopySettings(_env_file=None))

    with pytest.raises(TypeError):
        await copier.copy(post, deep=True)

    remaining = list(store.all_records())
    assert len(list(store.all_records("post"))) == 1
    assert len(list(store.all_records("comment"))) == 1
    # Only the pinned user clone survives
    assert len(remaining) == 4
