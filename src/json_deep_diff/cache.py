"""MemoizationCache: LRU-backed store of array comparison results.

Results are keyed by the pair of pointers ``(left, right)`` they were
computed for, stored as tuples of pointer segments.  A segment trie indexed
by the left path lets each write purge stale descendants in time
proportional to the affected subtree instead of scanning every key.

Invariant: every ``set`` of a key ``(L, R)`` removes every entry whose left
path lies strictly below ``L`` and whose right path lies strictly below
``R``.  This includes overwriting an existing key, so an entry stored
below a parent is gone once the parent is written again.

Capacity is bounded by a ``cachetools.LRUCache``; evicted keys leave the
trie as well.  A cache belongs to one pair of documents, since pointers are
only meaningful within them.

Example::

    cache = MemoizationCache(max_size=1024)
    cache.set("/items/0/parts", "/items/2/parts", result)
    cache.get("/items/0/parts", "/items/2/parts")  # result
    cache.set("/items", "/items", outer)            # purges the inner entry
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from cachetools import LRUCache

from json_deep_diff.tree.pointers import split_pointer

__all__ = ["MemoizationCache"]

logger = logging.getLogger(__name__)

PathKey = tuple[str, ...]
CacheKey = tuple[PathKey, PathKey]


class _TrieNode:
    __slots__ = ("children", "keys")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        # Keys whose left path ends at this node.
        self.keys: set[CacheKey] = set()

    def descendants(self) -> Iterator[_TrieNode]:
        """Yield every node strictly below this one."""
        stack = list(self.children.values())
        while stack:
            node = stack.pop()
            yield node
            stack.extend(node.children.values())


class _EvictionAwareLRUCache(LRUCache):  # type: ignore[type-arg]
    """LRUCache that reports the keys it evicts to overflow."""

    def __init__(self, maxsize: int, on_evict: Callable[[Any], None]) -> None:
        super().__init__(maxsize=maxsize)
        self._on_evict = on_evict

    def popitem(self) -> tuple[Any, Any]:
        key, value = super().popitem()
        self._on_evict(key)
        return key, value


def _is_strictly_below(path: PathKey, ancestor: PathKey) -> bool:
    return len(path) > len(ancestor) and path[: len(ancestor)] == ancestor


class MemoizationCache:
    """Pointer-pair keyed cache with descendant invalidation.

    Args:
        max_size: Maximum number of entries.  Defaults to 4096.  When
            exceeded the least-recently-used entry is dropped silently.
    """

    def __init__(self, max_size: int = 4096) -> None:
        self._storage = _EvictionAwareLRUCache(max_size, self._unindex)
        self._root = _TrieNode()
        self._hits = 0
        self._misses = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._storage.maxsize)

    @property
    def hits(self) -> int:
        """Number of ``get`` calls answered from the cache."""
        return self._hits

    @property
    def misses(self) -> int:
        """Number of ``get`` calls that found nothing."""
        return self._misses

    # ------------------------------------------------------------------
    # Mapping surface
    # ------------------------------------------------------------------

    def get(self, left_pointer: str, right_pointer: str) -> Any | None:
        """Return the value stored for the pointer pair, or None."""
        key = (split_pointer(left_pointer), split_pointer(right_pointer))
        value = self._storage.get(key)
        if value is None:
            self._misses += 1
            return None
        self._hits += 1
        logger.debug("Cache hit for %r / %r", left_pointer, right_pointer)
        return value

    def set(self, left_pointer: str, right_pointer: str, value: Any) -> None:
        """Store *value* for the pointer pair.

        Every entry nested strictly below the pair on both sides is purged
        first, whether or not the pair was already stored.
        """
        key = (split_pointer(left_pointer), split_pointer(right_pointer))
        self._invalidate_descendants(key)
        if key not in self._storage:
            self._node_for(key[0], create=True).keys.add(key)  # type: ignore[union-attr]
        self._storage[key] = value

    def clear(self) -> None:
        """Drop every entry."""
        self._storage.clear()
        self._root = _TrieNode()

    def __len__(self) -> int:
        return len(self._storage)

    def __contains__(self, pointers: object) -> bool:
        if not isinstance(pointers, tuple) or len(pointers) != 2:
            return False
        left_pointer, right_pointer = pointers
        key = (split_pointer(left_pointer), split_pointer(right_pointer))
        return key in self._storage

    # ------------------------------------------------------------------
    # Trie maintenance
    # ------------------------------------------------------------------

    def _node_for(self, path: PathKey, create: bool = False) -> _TrieNode | None:
        node = self._root
        for segment in path:
            child = node.children.get(segment)
            if child is None:
                if not create:
                    return None
                child = node.children[segment] = _TrieNode()
            node = child
        return node

    def _invalidate_descendants(self, key: CacheKey) -> None:
        left_path, right_path = key
        node = self._node_for(left_path)
        if node is None:
            return

        stale = [
            candidate
            for descendant in node.descendants()
            for candidate in descendant.keys
            if _is_strictly_below(candidate[1], right_path)
        ]
        for candidate in stale:
            del self._storage[candidate]
            self._unindex(candidate)
        if stale:
            logger.debug("Invalidated %d nested cache entries", len(stale))

    def _unindex(self, key: CacheKey) -> None:
        """Remove *key* from the trie, pruning nodes left empty."""
        left_path = key[0]
        trail = [self._root]
        for segment in left_path:
            child = trail[-1].children.get(segment)
            if child is None:
                return
            trail.append(child)
        trail[-1].keys.discard(key)

        for depth in range(len(left_path), 0, -1):
            node = trail[depth]
            if node.keys or node.children:
                break
            del trail[depth - 1].children[left_path[depth - 1]]
