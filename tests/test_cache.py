"""Unit tests for MemoizationCache.

Tests cover:
- Round trips keyed by pointer pairs
- Descendant invalidation whenever an ancestor key is written
- Overwrites purging descendants stored since the first write
- LRU eviction (silent, and evicted keys leave the trie)
- Instance isolation
"""

from __future__ import annotations

from json_deep_diff.cache import MemoizationCache


class TestGetSet:
    """Basic storage behaviour."""

    def test_miss_returns_none(self) -> None:
        cache = MemoizationCache()
        assert cache.get("/a", "/a") is None
        assert cache.misses == 1

    def test_round_trip(self) -> None:
        cache = MemoizationCache()
        cache.set("/a/0", "/a/1", ("result", 3))
        assert cache.get("/a/0", "/a/1") == ("result", 3)
        assert cache.hits == 1

    def test_keys_are_ordered_pairs(self) -> None:
        cache = MemoizationCache()
        cache.set("/a/0", "/a/1", "x")
        assert cache.get("/a/1", "/a/0") is None

    def test_contains_and_len(self) -> None:
        cache = MemoizationCache()
        cache.set("/a", "/b", 1)
        assert ("/a", "/b") in cache
        assert ("/b", "/a") not in cache
        assert "nonsense" not in cache
        assert len(cache) == 1

    def test_root_pointers(self) -> None:
        cache = MemoizationCache()
        cache.set("", "", "root")
        assert cache.get("", "") == "root"

    def test_clear(self) -> None:
        cache = MemoizationCache()
        cache.set("/a", "/a", 1)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("/a", "/a") is None


class TestDescendantInvalidation:
    """Writing a key purges entries nested below it on both sides."""

    def test_new_ancestor_purges_descendants(self) -> None:
        cache = MemoizationCache()
        cache.set("/items/0/parts", "/items/2/parts", "inner")
        cache.set("/items", "/items", "outer")
        assert cache.get("/items/0/parts", "/items/2/parts") is None
        assert cache.get("/items", "/items") == "outer"

    def test_root_purges_everything_nested(self) -> None:
        cache = MemoizationCache()
        cache.set("/a", "/a", 1)
        cache.set("/b/c", "/b/c", 2)
        cache.set("", "", 3)
        assert len(cache) == 1

    def test_left_descendant_only_is_kept(self) -> None:
        cache = MemoizationCache()
        cache.set("/a/0", "/z", "kept")
        cache.set("/a", "/b", "new")
        assert cache.get("/a/0", "/z") == "kept"

    def test_right_descendant_only_is_kept(self) -> None:
        cache = MemoizationCache()
        cache.set("/z", "/b/0", "kept")
        cache.set("/a", "/b", "new")
        assert cache.get("/z", "/b/0") == "kept"

    def test_same_depth_is_not_a_descendant(self) -> None:
        cache = MemoizationCache()
        cache.set("/a", "/a", "sibling")
        cache.set("/b", "/b", "new")
        assert cache.get("/a", "/a") == "sibling"

    def test_segment_prefix_is_not_a_descendant(self) -> None:
        cache = MemoizationCache()
        cache.set("/ab/0", "/ab/0", "kept")
        cache.set("/a", "/a", "new")
        assert cache.get("/ab/0", "/ab/0") == "kept"

    def test_overwrite_purges_descendants_stored_since(self) -> None:
        cache = MemoizationCache()
        cache.set("/p", "/q", 1)
        cache.set("/p/0", "/q/0", 2)
        cache.set("/p", "/q", 3)
        assert cache.get("/p", "/q") == 3
        assert cache.get("/p/0", "/q/0") is None
        assert len(cache) == 1

    def test_deeply_nested_descendants(self) -> None:
        cache = MemoizationCache()
        cache.set("/a/0/b/1/c", "/a/3/b/0/c", 1)
        cache.set("/a/0/b", "/a/3/b", 2)
        cache.set("/a", "/a", 3)
        assert len(cache) == 1
        assert cache.get("/a", "/a") == 3

    def test_purged_keys_can_be_reinserted(self) -> None:
        cache = MemoizationCache()
        cache.set("/a/0", "/a/0", "old")
        cache.set("/a", "/a", "outer")
        cache.set("/a/0", "/a/0", "new")
        assert cache.get("/a/0", "/a/0") == "new"
        assert len(cache) == 2


class TestEviction:
    """LRU eviction at max_size."""

    def test_max_size_default(self) -> None:
        assert MemoizationCache().max_size == 4096

    def test_least_recently_used_is_evicted(self) -> None:
        cache = MemoizationCache(max_size=2)
        cache.set("/a", "/a", 1)
        cache.set("/b", "/b", 2)
        cache.get("/a", "/a")
        cache.set("/c", "/c", 3)
        assert len(cache) == 2
        assert cache.get("/b", "/b") is None
        assert cache.get("/a", "/a") == 1
        assert cache.get("/c", "/c") == 3

    def test_evicted_keys_leave_the_trie(self) -> None:
        cache = MemoizationCache(max_size=1)
        cache.set("/a/0", "/a/0", "inner")
        cache.set("/z", "/z", "other")  # evicts the inner entry
        cache.set("/a", "/a", "outer")  # evicts /z; nothing nested left to purge
        assert cache.get("/a", "/a") == "outer"
        assert len(cache) == 1


class TestInstanceIsolation:
    """Separate instances never share entries."""

    def test_independent_instances(self) -> None:
        first = MemoizationCache()
        second = MemoizationCache()
        first.set("/a", "/a", 1)
        assert second.get("/a", "/a") is None
