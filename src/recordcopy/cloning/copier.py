"""Copy entry point with single-flight guard and rollback.

Usage:
    copier = Copier(CopySettings(rollback_attempts=3, rollback_backoff="linear"))
    clone = await copier.copy(post, deep=True, options={"ignore_attributes": ["slug"]})

    # Or through the record, using the shared copier
    clone = await post.copy(deep=True)
"""

from __future__ import annotations

from typing import Any

import tenacity

from recordcopy.cloning.options import OptionsLike
from recordcopy.cloning.session import CopySession
from recordcopy.cloning.task import copy_record
from recordcopy.config.settings import CopySettings
from recordcopy.core.logging_config import get_logger
from recordcopy.core.schema import Record
from recordcopy.core.types import Clone

logger = get_logger("cloning")


class Copier:
    """Runs top-level copies.

    At most one top-level copy per record instance is in flight: a copy()
    call for a record that is already being copied is dropped and returns
    None without starting. If a copy fails, every store record it created is
    unloaded before the error propagates, so a failed copy leaves nothing
    behind.

    Args:
        settings: Engine settings (default: loaded from RECORDCOPY_* env vars).
    """

    def __init__(self, settings: CopySettings | None = None) -> None:
        self._settings = settings or CopySettings()
        self._in_flight: set[Record] = set()

    @property
    def settings(self) -> CopySettings:
        return self._settings

    def is_copying(self, record: Record) -> bool:
        """Check if a top-level copy of `record` is in flight."""
        return record in self._in_flight

    async def copy(
        self, record: Record, deep: bool = False, options: OptionsLike = None
    ) -> Clone[Any] | None:
        """Copy `record` and, if `deep`, the records reachable from it.

        Args:
            record: Root record.
            deep: Clone related records (True) or link them by reference (False).
            options: Call-site CopyOptions or an equivalent mapping.

        Returns:
            The root clone, or None if the call was dropped because a copy of
            `record` was already in flight.

        Raises:
            Exception: Whatever failed during the copy, after rollback. The
                exception carries a note with the number of clones removed.
        """
        if record in self._in_flight:
            logger.debug("Dropped copy of %r: a copy is already in flight", record)
            return None

        self._in_flight.add(record)
        try:
            return await self._run(record, deep, options)
        finally:
            self._in_flight.discard(record)

    async def _run(self, record: Record, deep: bool, options: OptionsLike) -> Clone[Any]:
        session = CopySession(max_concurrent=self._settings.max_concurrent)
        try:
            return await copy_record(record, deep, options, session)
        except BaseException as e:
            message = (
                f"Failed to copy {record!r}. Cleaning up {len(session.copies)} created copies..."
            )
            logger.error("%s Cause: %r", message, e)
            e.add_note(message)
            await self._rollback(session)
            raise

    async def _rollback(self, session: CopySession) -> None:
        """Unload every store record created in the session, best effort."""
        for clone in session.created_records():
            retryer = self._build_retryer()
            try:
                async for attempt in retryer:
                    with attempt:
                        clone.store.unload_record(clone)
            except tenacity.RetryError as e:
                logger.warning(
                    "Could not unload %r during rollback: %r",
                    clone,
                    e.last_attempt.exception(),
                )

    def _build_retryer(self) -> tenacity.AsyncRetrying:
        """Build a tenacity retryer from the rollback settings."""
        settings = self._settings
        stop = tenacity.stop_after_attempt(settings.rollback_attempts)

        wait: tenacity.wait.wait_base
        if settings.rollback_backoff == "exponential":
            wait = tenacity.wait_exponential(
                multiplier=settings.rollback_base_delay, min=settings.rollback_base_delay
            )
        elif settings.rollback_backoff == "linear":
            wait = tenacity.wait_incrementing(
                start=settings.rollback_base_delay, increment=settings.rollback_base_delay
            )
        else:
            wait = tenacity.wait_none()

        return tenacity.AsyncRetrying(
            stop=stop,
            wait=wait,
            reraise=False,
        )


# Module-level copier instance, created on first use
_copier: Copier | None = None


def get_copier() -> Copier:
    """Access the shared copier used by Record.copy().

    Returns:
        The process-local Copier instance.
    """
    global _copier
    if _copier is None:
        _copier = Copier()
    return _copier


def set_copier(copier: Copier) -> None:
    """Replace the shared copier, e.g. to apply custom settings."""
    global _copier
    _copier = copier
