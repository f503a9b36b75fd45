# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""KeyedCache: lazily populated key/value store with a pluggable miss handler.

A KeyedCache maps keys to values like a dict, but a read of a missing key
does not fail directly: it calls the cache's miss handler, stores what the
handler returns and hands it back. The default miss handler raises
KeyNotFoundError, so an unconfigured cache behaves like a strict mapping.

Concurrency:
    Only the populate-on-miss path of get() is synchronized. It holds a
    re-entrant per-instance lock, re-checks the key after acquiring it,
    and only then invokes the miss handler, so for a given key the handler
    runs at most once even when many threads race on the first read. A
    miss handler may read other keys of the same cache. All other
    operations are unsynchronized.

Example:
    >>> cache = KeyedCache(on_missing=lambda key: key.upper())
    >>> cache['a']
    'A'
    >>> cache.has('b')
    False
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

from .exceptions import KeyNotFoundError

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


def _raise_missing(key: Any) -> Any:
    raise KeyNotFoundError(key)


class KeyedCache(Generic[K, V]):
    """Insertion-ordered key/value store with memoizing miss handler.

    Internal structure:
        _values: dict holding the entries (insertion order is the
            enumeration order used by each(), keys() and values())
        _lock: RLock guarding the check-populate-store sequence of get()
        _on_missing: callable(key) -> value invoked on a read miss
    """

    __slots__ = ("_values", "_lock", "_on_missing")

    def __init__(
        self,
        data: dict[K, V] | None = None,
        on_missing: Callable[[K], V] | None = None,
    ) -> None:
        """Create a KeyedCache.

        Args:
            data: Optional dict of initial entries.
            on_missing: Miss handler. Defaults to raising KeyNotFoundError.
        """
        self._values: dict[K, V] = dict(data) if data else {}
        self._lock = threading.RLock()
        self._on_missing: Callable[[K], V] = on_missing or _raise_missing

    def __repr__(self) -> str:
        return f"KeyedCache({list(self._values.keys())})"

    # -------------------------------------------------------------------------
    # Miss handler
    # -------------------------------------------------------------------------

    @property
    def on_missing(self) -> Callable[[K], V]:
        """The callable invoked when get() misses."""
        return self._on_missing

    @on_missing.setter
    def on_missing(self, handler: Callable[[K], V]) -> None:
        self._on_missing = handler

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def get(self, key: K) -> V:
        """Return the value for key, populating it through the miss handler.

        Raises:
            Whatever the miss handler raises (KeyNotFoundError by default).
            Nothing is stored when the handler raises.
        """
        if key not in self._values:
            with self._lock:
                if key not in self._values:
                    logger.debug("KeyedCache miss, populating key %r", key)
                    self._values[key] = self._on_missing(key)
        return self._values[key]

    def set(self, key: K, value: V) -> None:
        """Insert or replace the value stored under key."""
        self._values[key] = value

    def fill(self, key: K, value: V) -> None:
        """Store value under key only if the key is not present yet."""
        if key not in self._values:
            self._values[key] = value

    def has(self, key: K) -> bool:
        """True if key is stored. Never calls the miss handler."""
        return key in self._values

    def try_get(self, key: K) -> tuple[bool, V | None]:
        """Probe for key without populating.

        Returns:
            (True, value) if present, (False, None) otherwise.
        """
        if key in self._values:
            return True, self._values[key]
        return False, None

    def remove(self, key: K) -> None:
        """Remove key. No-op if absent."""
        self._values.pop(key, None)

    def clear(self) -> None:
        """Remove all entries."""
        self._values.clear()

    __getitem__ = get
    __setitem__ = set
    __contains__ = has
    __delitem__ = remove

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[V]:
        """Iterate over values in insertion order."""
        return iter(self._values.values())

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def first(self) -> V | None:
        """First stored value, or None if empty."""
        return next(iter(self._values.values()), None)

    @property
    def inner(self) -> dict[K, V]:
        """The backing dict."""
        return self._values

    def keys(self) -> list[K]:
        return list(self._values.keys())

    def values(self) -> list[V]:
        return list(self._values.values())

    def items(self) -> list[tuple[K, V]]:
        return list(self._values.items())

    def each(self, action: Callable[[V], Any]) -> None:
        """Call action(value) for every entry in insertion order."""
        for value in list(self._values.values()):
            action(value)

    def each_pair(self, action: Callable[[K, V], Any]) -> None:
        """Call action(key, value) for every entry in insertion order."""
        for key, value in list(self._values.items()):
            action(key, value)

    def find(self, predicate: Callable[[V], bool]) -> V | None:
        """Return the first value matching predicate, or None."""
        return next((value for value in self._values.values() if predicate(value)), None)

    def exists(self, predicate: Callable[[V], bool]) -> bool:
        """True if any value matches predicate."""
        return any(predicate(value) for value in self._values.values())
