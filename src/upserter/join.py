"""Key-based full outer join over two in-memory collections.

Both inputs are grouped into buckets by key. Every key seen on either side
yields rows: the cross-product of both buckets when the key is shared, or one
row per item with :data:`MISSING` on the absent side otherwise.

Row order follows key discovery (left keys first, then right-only keys) but
callers must not rely on it.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable


class Missing(Enum):
    """Marker for the absent side of a joined row."""

    MISSING = "missing"

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = Missing.MISSING

type Maybe[T] = T | Literal[Missing.MISSING]


def is_missing(value: object) -> bool:
    return value is MISSING


class _Buckets[T, K: Hashable]:
    """Insertion-ordered multimap from normalized key to items."""

    __slots__ = ("_items", "_keys")

    def __init__(self) -> None:
        self._items: dict[Hashable, list[T]] = {}
        self._keys: dict[Hashable, K] = {}

    @classmethod
    def build(
        cls,
        items: Iterable[T],
        key_of: Callable[[T], K],
        normalize_key: Callable[[K], Hashable],
    ) -> _Buckets[T, K]:
        buckets = cls()
        for item in items:
            key = key_of(item)
            normalized = normalize_key(key)
            bucket = buckets._items.get(normalized)
            if bucket is None:
                buckets._items[normalized] = [item]
                buckets._keys[normalized] = key
            else:
                bucket.append(item)
        return buckets

    def __contains__(self, normalized: Hashable) -> bool:
        return normalized in self._items

    def normalized_keys(self) -> Iterable[Hashable]:
        return self._items.keys()

    def bucket(self, normalized: Hashable) -> tuple[T, ...]:
        return tuple(self._items.get(normalized, ()))

    def key(self, normalized: Hashable) -> K:
        return self._keys[normalized]


def _identity[K](key: K) -> K:
    return key


def _key_union[A, B, K: Hashable](
    left: _Buckets[A, K], right: _Buckets[B, K]
) -> list[tuple[Hashable, K]]:
    union: list[tuple[Hashable, K]] = [
        (normalized, left.key(normalized)) for normalized in left.normalized_keys()
    ]
    union.extend(
        (normalized, right.key(normalized))
        for normalized in right.normalized_keys()
        if normalized not in left
    )
    return union


def full_outer_join[A, B, K: Hashable, R](
    left_items: Iterable[A],
    right_items: Iterable[B],
    key_of_left: Callable[[A], K],
    key_of_right: Callable[[B], K],
    combine: Callable[[Maybe[A], Maybe[B], K], R],
    *,
    normalize_key: Callable[[K], Hashable] | None = None,
) -> list[R]:
    """Join ``left_items`` and ``right_items`` on their keys.

    ``combine`` receives ``(left, right, key)`` for each row; the absent side of
    a one-sided row is :data:`MISSING`. Keys shared by several items on both
    sides produce the full cross-product of those items.

    ``normalize_key`` replaces plain key equality: two keys match when their
    normalized values are equal. The key handed to ``combine`` is the first raw
    key seen for that match, left side first.

    Each input is iterated exactly once and key selector errors propagate.
    """

    normalize = normalize_key or _identity
    left = _Buckets.build(left_items, key_of_left, normalize)
    right = _Buckets.build(right_items, key_of_right, normalize)

    rows: list[R] = []
    for normalized, key in _key_union(left, right):
        left_bucket: tuple[Maybe[A], ...] = left.bucket(normalized) or (MISSING,)
        right_bucket: tuple[Maybe[B], ...] = right.bucket(normalized) or (MISSING,)
        rows.extend(
            combine(left_item, right_item, key)
            for left_item in left_bucket
            for right_item in right_bucket
        )
    return rows


def full_outer_group_join[A, B, K: Hashable, R](
    left_items: Iterable[A],
    right_items: Iterable[B],
    key_of_left: Callable[[A], K],
    key_of_right: Callable[[B], K],
    projection: Callable[[tuple[A, ...], tuple[B, ...], K], R],
    *,
    normalize_key: Callable[[K], Hashable] | None = None,
) -> list[R]:
    """Join on keys, calling ``projection`` once per key with whole buckets.

    A bucket is empty when its side has no item for the key.
    """

    normalize = normalize_key or _identity
    left = _Buckets.build(left_items, key_of_left, normalize)
    right = _Buckets.build(right_items, key_of_right, normalize)
    return [
        projection(left.bucket(normalized), right.bucket(normalized), key)
        for normalized, key in _key_union(left, right)
    ]
