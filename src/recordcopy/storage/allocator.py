"""Record id allocation service.

RecordAllocator is a stateful service that manages record id lifecycle.
"""

from __future__ import annotations

from recordcopy.core.identity import RecordId


class RecordAllocator:
    """Allocates record ids with generation tracking for recycling.

    Maintains a free list of released indices with incremented generations
    so that ids of unloaded records can be reused safely.
    """

    def __init__(self) -> None:
        self._next_index = 0
        self._free_list: list[tuple[int, int]] = []  # (index, generation)
        self._generations: dict[int, int] = {}

    def allocate(self) -> RecordId:
        """Allocate a new record id, reusing recycled slots when available.

        Returns:
            Newly allocated RecordId.
        """
        if self._free_list:
            index, gen = self._free_list.pop()
            return RecordId(index=index, generation=gen)

        index = self._next_index
        self._next_index += 1
        self._generations[index] = 0
        return RecordId(index=index, generation=0)

    def deallocate(self, record_id: RecordId) -> None:
        """Return a record id for reuse with incremented generation.

        Args:
            record_id: Record id to release.

        Raises:
            ValueError: If the id is already stale.
        """
        if not self.is_alive(record_id):
            raise ValueError(f"Record id {record_id} is not alive")

        new_gen = record_id.generation + 1
        self._generations[record_id.index] = new_gen
        self._free_list.append((record_id.index, new_gen))

    def is_alive(self, record_id: RecordId) -> bool:
        """Check if a record id is still valid (not recycled).

        Args:
            record_id: Record id to check.

        Returns:
            True if the id is alive, False if it was released or never allocated.
        """
        current_gen = self._generations.get(record_id.index, -1)
        if current_gen != record_id.generation:
            return False
        return (record_id.index, current_gen) not in self._free_list
