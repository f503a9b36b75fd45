# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for KeyedCache."""

import threading
import time

import pytest

from genro_tags import KeyedCache, KeyNotFoundError


class TestKeyedCacheBasic:
    """Test creation, set and get."""

    def test_create_empty(self):
        """Create an empty cache."""
        cache = KeyedCache()
        assert len(cache) == 0
        assert cache.count == 0
        assert cache.first is None

    def test_create_from_dict(self):
        """Create a cache from a dict."""
        cache = KeyedCache({"a": 1, "b": 2})
        assert cache["a"] == 1
        assert cache.get("b") == 2

    def test_set_upserts(self):
        """set() inserts, then replaces."""
        cache = KeyedCache()
        cache.set("a", 1)
        cache["a"] = 2
        assert cache["a"] == 2
        assert cache.count == 1

    def test_fill_does_not_replace(self):
        """fill() only stores absent keys."""
        cache = KeyedCache({"a": 1})
        cache.fill("a", 99)
        cache.fill("b", 2)
        assert cache["a"] == 1
        assert cache["b"] == 2


class TestMissHandler:
    """Test the populate-on-miss behavior."""

    def test_default_handler_raises(self):
        """Default miss handler raises KeyNotFoundError naming the key."""
        cache = KeyedCache()
        with pytest.raises(KeyNotFoundError, match="Key 'missing' could not be found"):
            cache.get("missing")

    def test_not_found_is_a_key_error(self):
        """KeyNotFoundError can be caught as KeyError."""
        cache = KeyedCache()
        with pytest.raises(KeyError):
            cache["missing"]

    def test_failed_miss_stores_nothing(self):
        """A failing handler leaves the cache unchanged."""
        cache = KeyedCache()
        with pytest.raises(KeyNotFoundError):
            cache.get("missing")
        assert not cache.has("missing")

    def test_custom_handler_memoizes(self):
        """The handler result is stored and reused."""
        calls = []

        def on_missing(key):
            calls.append(key)
            return key.upper()

        cache = KeyedCache(on_missing=on_missing)
        assert cache["abc"] == "ABC"
        assert cache["abc"] == "ABC"
        assert calls == ["abc"]
        assert cache.has("abc")

    def test_handler_can_be_replaced(self):
        """on_missing can be set after construction."""
        cache = KeyedCache()
        cache.on_missing = lambda key: len(key)
        assert cache["four"] == 4

    def test_probes_never_populate(self):
        """has() and try_get() never call the handler."""
        calls = []
        cache = KeyedCache(on_missing=lambda key: calls.append(key))

        assert cache.has("x") is False
        assert "x" not in cache
        assert cache.try_get("x") == (False, None)
        assert calls == []

    def test_try_get_found(self):
        """try_get() returns (True, value) for a stored key."""
        cache = KeyedCache({"x": None})
        assert cache.try_get("x") == (True, None)


class TestConcurrentMiss:
    """Test that racing first reads run the handler once."""

    def test_handler_runs_once_for_racing_readers(self):
        """Many threads reading the same missing key see one value."""
        calls = []
        calls_lock = threading.Lock()

        def on_missing(key):
            with calls_lock:
                calls.append(key)
            time.sleep(0.01)
            return object()

        cache = KeyedCache(on_missing=on_missing)
        barrier = threading.Barrier(16)
        results = []

        def reader():
            barrier.wait()
            results.append(cache.get("shared"))

        threads = [threading.Thread(target=reader) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert calls == ["shared"]
        assert len(results) == 16
        assert all(result is results[0] for result in results)

    def test_handler_can_read_other_missing_keys(self):
        """A handler that recurses into get() for another key completes."""
        cache = KeyedCache()
        cache.on_missing = lambda key: 0 if key == 0 else cache.get(key - 1) + 1
        results = []

        worker = threading.Thread(target=lambda: results.append(cache.get(3)), daemon=True)
        worker.start()
        worker.join(timeout=2)

        assert not worker.is_alive()
        assert results == [3]
        assert cache.keys() == [0, 1, 2, 3]


class TestRemoveAndClear:
    """Test removal."""

    def test_remove_existing(self):
        cache = KeyedCache({"a": 1, "b": 2})
        cache.remove("a")
        assert cache.keys() == ["b"]

    def test_remove_missing_is_noop(self):
        cache = KeyedCache({"a": 1})
        cache.remove("zzz")
        del cache["zzz"]
        assert cache.keys() == ["a"]

    def test_clear(self):
        cache = KeyedCache({"a": 1, "b": 2})
        cache.clear()
        assert len(cache) == 0


class TestEnumeration:
    """Test insertion-ordered enumeration."""

    def test_keys_values_items_in_insertion_order(self):
        cache = KeyedCache()
        cache["z"] = 1
        cache["a"] = 2
        cache["m"] = 3
        assert cache.keys() == ["z", "a", "m"]
        assert cache.values() == [1, 2, 3]
        assert cache.items() == [("z", 1), ("a", 2), ("m", 3)]
        assert list(cache) == [1, 2, 3]
        assert cache.first == 1

    def test_each_and_each_pair(self):
        cache = KeyedCache({"a": 1, "b": 2})
        seen_values = []
        seen_pairs = []
        cache.each(seen_values.append)
        cache.each_pair(lambda key, value: seen_pairs.append((key, value)))
        assert seen_values == [1, 2]
        assert seen_pairs == [("a", 1), ("b", 2)]

    def test_find_and_exists(self):
        cache = KeyedCache({"a": 1, "b": 2, "c": 3})
        assert cache.find(lambda value: value > 1) == 2
        assert cache.find(lambda value: value > 10) is None
        assert cache.exists(lambda value: value == 3)
        assert not cache.exists(lambda value: value == 4)
