"""
Hash index from equipment names to equipment identifiers.

The index holds identifiers only and resolves them through a lookup
callable supplied by the owner (the inventory store), so it stays valid
however the store keeps its records.

Lookups hash the *query*, so only a query that lands in the same bucket
as a stored name can hit. Callers must fall back to a full scan on a miss.
"""

from typing import Callable, Iterable, List, Optional

HASH_SIZE = 1009
HASH_SEED = 5381


def name_hash(name: str, size: int = HASH_SIZE) -> int:
    """djb2 over the UTF-8 bytes of name, 32-bit wrap, reduced to a bucket."""
    h = HASH_SEED
    for byte in name.encode("utf-8"):
        h = ((h << 5) + h + byte) & 0xFFFFFFFF
    return h % size


class NameIndex:
    def __init__(self, resolve: Callable[[int], Optional[object]], size: int = HASH_SIZE):
        """
        Args:
            resolve: maps an equipment id to its current record (or None)
            size: number of buckets
        """
        self._resolve = resolve
        self._size = size
        self._buckets: List[List[int]] = [[] for _ in range(size)]
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def insert(self, item) -> None:
        """Register item.id under the hash of its current name (newest first)."""
        self._buckets[name_hash(item.name, self._size)].insert(0, item.id)
        self._count += 1

    def find(self, query: str):
        """
        First record in query's bucket whose name contains query
        (case-insensitive), or None.
        """
        needle = query.lower()
        for item_id in self._buckets[name_hash(query, self._size)]:
            item = self._resolve(item_id)
            if item is not None and needle in item.name.lower():
                return item
        return None

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._count = 0

    def rebuild(self, items: Iterable) -> None:
        self.clear()
        for item in items:
            self.insert(item)
