"""Record identity: lightweight, generation-tracked ids."""

from recordcopy.core.identity.models import RecordId

__all__ = [
    "RecordId",
]
