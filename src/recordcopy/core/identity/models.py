"""Record identity models.

Usage:
    record_id = RecordId(index=42, generation=1)
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RecordId:
    """Lightweight record identifier with generation for safe handle reuse.

    A store recycles the index of an unloaded record; the generation is bumped
    so that a stale id never matches the record that later reuses the slot.
    """

    index: int = 0
    generation: int = 0

    def __hash__(self) -> int:
        return hash((self.index, self.generation))

    def __str__(self) -> str:
        return f"{self.index}v{self.generation}"
