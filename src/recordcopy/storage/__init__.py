"""Record stores."""

from recordcopy.storage.allocator import RecordAllocator
from recordcopy.storage.local import LocalStore
from recordcopy.storage.protocol import Store

__all__ = [
    "Store",
    "LocalStore",
    "RecordAllocator",
]
