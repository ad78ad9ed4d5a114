"""Copy session: state shared by every step of one top-level copy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from recordcopy.core.schema import Record
from recordcopy.core.transform import Transform


@dataclass(slots=True)
class CopySession:
    """Identity map and transform cache for one top-level copy.

    `copies` maps each visited source record to its clone. A clone is
    registered before its fields are copied, so a cycle back to the record
    resolves to the (still incomplete) clone instead of recursing. Reused
    entries also keep shared sub-objects shared in the output graph.

    Attributes:
        max_concurrent: Max member copies in flight per to-many relationship.
        copies: Source record (by instance identity) -> clone.
        transforms: Attribute type -> transform resolved during this copy.
    """

    max_concurrent: int | None = None
    copies: dict[Record, Any] = field(default_factory=dict)
    transforms: dict[str, Transform] = field(default_factory=dict)

    def created_records(self) -> list[Record]:
        """Clones that live in a store (plain-object clones excluded)."""
        return [clone for clone in self.copies.values() if isinstance(clone, Record)]
