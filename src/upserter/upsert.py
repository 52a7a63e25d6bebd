"""Upsert orchestration on top of the full outer join.

Every calling convention goes through :func:`classify`, which validates the
arguments, snapshots both inputs once and splits the joined rows into three
partitions. Callbacks then run in a fixed order: insert, update, delete.

Keys shared by several existing and several supplied items are matched as a
cross-product: two existing and three supplied items under one key yield six
matched pairs. Callers that need 1:1 pairing must keep keys unique per side.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, cast

from .errors import InvalidArgumentError, MissingArgumentError
from .join import MISSING, full_outer_join
from .results import (
    Classification,
    MatchedItemsWithResult,
    MatchedPair,
    UnmatchedExistingItemWithResult,
    UnmatchedSuppliedItemWithResult,
    UpsertResult,
    UpsertResultWithResults,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Sequence

    from .join import Maybe

log = getLogger(__name__)

_ITEM_ARGUMENTS = ("existing_items", "supplied_items")
_CALLABLE_ARGUMENTS = (
    "key_of_existing",
    "key_of_supplied",
    "on_insert",
    "on_update",
    "on_delete",
)


class RowSide(StrEnum):
    """Which inputs contributed to a joined row."""

    EXISTING_ONLY = "existing_only"
    SUPPLIED_ONLY = "supplied_only"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class JoinedRow[TExisting, TSupplied, TKey]:
    """One row of the existing/supplied join."""

    existing: Maybe[TExisting]
    supplied: Maybe[TSupplied]
    key: TKey

    @property
    def side(self) -> RowSide:
        if self.supplied is MISSING:
            return RowSide.EXISTING_ONLY
        if self.existing is MISSING:
            return RowSide.SUPPLIED_ONLY
        return RowSide.BOTH


def validate_arguments(**arguments: object) -> None:
    """Reject absent or unusable arguments, in the order they were given.

    ``None`` raises :class:`MissingArgumentError`. Item collections must be
    iterable and selectors/callbacks callable, otherwise
    :class:`InvalidArgumentError` is raised. All arguments are checked for
    presence before any of them is checked for usability.
    """

    for name, value in arguments.items():
        if value is None:
            raise MissingArgumentError(name)

    for name, value in arguments.items():
        if name in _ITEM_ARGUMENTS and not isinstance(value, Iterable):
            raise InvalidArgumentError(name, f"{name} must be iterable")
        if name in _CALLABLE_ARGUMENTS and not callable(value):
            raise InvalidArgumentError(name, f"{name} must be callable")


def classify[TExisting, TSupplied, TKey: Hashable](
    existing_items: Iterable[TExisting],
    supplied_items: Iterable[TSupplied],
    key_of_existing: Callable[[TExisting], TKey],
    key_of_supplied: Callable[[TSupplied], TKey],
    *,
    normalize_key: Callable[[TKey], Hashable] | None = None,
) -> Classification[TExisting, TSupplied]:
    """Split existing and supplied items into unmatched and matched partitions."""

    validate_arguments(
        existing_items=existing_items,
        supplied_items=supplied_items,
        key_of_existing=key_of_existing,
        key_of_supplied=key_of_supplied,
    )
    return _classify(
        existing_items,
        supplied_items,
        key_of_existing,
        key_of_supplied,
        normalize_key=normalize_key,
    )


def _classify[TExisting, TSupplied, TKey: Hashable](
    existing_items: Iterable[TExisting],
    supplied_items: Iterable[TSupplied],
    key_of_existing: Callable[[TExisting], TKey],
    key_of_supplied: Callable[[TSupplied], TKey],
    *,
    normalize_key: Callable[[TKey], Hashable] | None,
) -> Classification[TExisting, TSupplied]:
    # inputs may be one-shot iterators, read each of them exactly once
    existing_snapshot = tuple(existing_items)
    supplied_snapshot = tuple(supplied_items)

    rows: list[JoinedRow[TExisting, TSupplied, TKey]] = full_outer_join(
        existing_snapshot,
        supplied_snapshot,
        key_of_existing,
        key_of_supplied,
        JoinedRow,
        normalize_key=normalize_key,
    )

    unmatched_existing: list[TExisting] = []
    unmatched_supplied: list[TSupplied] = []
    matched: list[MatchedPair[TExisting, TSupplied]] = []
    for row in rows:
        side = row.side
        if side is RowSide.EXISTING_ONLY:
            unmatched_existing.append(cast("TExisting", row.existing))
        elif side is RowSide.SUPPLIED_ONLY:
            unmatched_supplied.append(cast("TSupplied", row.supplied))
        else:
            matched.append(
                MatchedPair(
                    existing_item=cast("TExisting", row.existing),
                    supplied_item=cast("TSupplied", row.supplied),
                )
            )

    log.debug(
        "Classified %s existing and %s supplied items: insert=%s, update=%s, delete=%s",
        len(existing_snapshot),
        len(supplied_snapshot),
        len(unmatched_supplied),
        len(matched),
        len(unmatched_existing),
    )
    return Classification(
        unmatched_existing=tuple(unmatched_existing),
        unmatched_supplied=tuple(unmatched_supplied),
        matched=tuple(matched),
    )


def upsert_batch[TExisting, TSupplied, TKey: Hashable](
    existing_items: Iterable[TExisting],
    supplied_items: Iterable[TSupplied],
    key_of_existing: Callable[[TExisting], TKey],
    key_of_supplied: Callable[[TSupplied], TKey],
    on_insert: Callable[[Sequence[TSupplied]], object],
    on_update: Callable[[Sequence[MatchedPair[TExisting, TSupplied]]], object],
    on_delete: Callable[[Sequence[TExisting]], object],
    *,
    normalize_key: Callable[[TKey], Hashable] | None = None,
) -> UpsertResult[TExisting, TSupplied]:
    """Call each callback once with its whole partition.

    ``on_insert`` gets the unmatched supplied items, ``on_update`` the matched
    pairs and ``on_delete`` the unmatched existing items. Every callback is
    called, with an empty tuple when its partition is empty.
    """

    validate_arguments(
        existing_items=existing_items,
        supplied_items=supplied_items,
        key_of_existing=key_of_existing,
        key_of_supplied=key_of_supplied,
        on_insert=on_insert,
        on_update=on_update,
        on_delete=on_delete,
    )
    classification = _classify(
        existing_items,
        supplied_items,
        key_of_existing,
        key_of_supplied,
        normalize_key=normalize_key,
    )

    on_insert(classification.unmatched_supplied)
    on_update(classification.matched)
    on_delete(classification.unmatched_existing)

    return UpsertResult.from_classification(classification)


def upsert[TExisting, TSupplied, TKey: Hashable](
    existing_items: Iterable[TExisting],
    supplied_items: Iterable[TSupplied],
    key_of_existing: Callable[[TExisting], TKey],
    key_of_supplied: Callable[[TSupplied], TKey],
    on_insert: Callable[[TSupplied], object],
    on_update: Callable[[TExisting, TSupplied], object],
    on_delete: Callable[[TExisting], object],
    *,
    normalize_key: Callable[[TKey], Hashable] | None = None,
) -> UpsertResult[TExisting, TSupplied]:
    """Call the callbacks once per item; their return values are discarded."""

    validate_arguments(
        existing_items=existing_items,
        supplied_items=supplied_items,
        key_of_existing=key_of_existing,
        key_of_supplied=key_of_supplied,
        on_insert=on_insert,
        on_update=on_update,
        on_delete=on_delete,
    )

    def insert_each(items: Sequence[TSupplied]) -> None:
        for item in items:
            on_insert(item)

    def update_each(pairs: Sequence[MatchedPair[TExisting, TSupplied]]) -> None:
        for pair in pairs:
            on_update(pair.existing_item, pair.supplied_item)

    def delete_each(items: Sequence[TExisting]) -> None:
        for item in items:
            on_delete(item)

    return upsert_batch(
        existing_items,
        supplied_items,
        key_of_existing,
        key_of_supplied,
        insert_each,
        update_each,
        delete_each,
        normalize_key=normalize_key,
    )


def upsert_with_results[TExisting, TSupplied, TKey: Hashable, TInsert, TUpdate, TDelete](
    existing_items: Iterable[TExisting],
    supplied_items: Iterable[TSupplied],
    key_of_existing: Callable[[TExisting], TKey],
    key_of_supplied: Callable[[TSupplied], TKey],
    on_insert: Callable[[TSupplied], TInsert],
    on_update: Callable[[TExisting, TSupplied], TUpdate],
    on_delete: Callable[[TExisting], TDelete],
    *,
    normalize_key: Callable[[TKey], Hashable] | None = None,
) -> UpsertResultWithResults[TExisting, TSupplied, TInsert, TUpdate, TDelete]:
    """Call the callbacks once per item and keep what each call returned."""

    validate_arguments(
        existing_items=existing_items,
        supplied_items=supplied_items,
        key_of_existing=key_of_existing,
        key_of_supplied=key_of_supplied,
        on_insert=on_insert,
        on_update=on_update,
        on_delete=on_delete,
    )
    inserted: list[UnmatchedSuppliedItemWithResult[TSupplied, TInsert]] = []
    updated: list[MatchedItemsWithResult[TExisting, TSupplied, TUpdate]] = []
    deleted: list[UnmatchedExistingItemWithResult[TExisting, TDelete]] = []

    def insert_each(items: Sequence[TSupplied]) -> None:
        inserted.extend(
            UnmatchedSuppliedItemWithResult(supplied_item=item, insert_result=on_insert(item))
            for item in items
        )

    def update_each(pairs: Sequence[MatchedPair[TExisting, TSupplied]]) -> None:
        updated.extend(
            MatchedItemsWithResult(
                existing_item=pair.existing_item,
                supplied_item=pair.supplied_item,
                update_result=on_update(pair.existing_item, pair.supplied_item),
            )
            for pair in pairs
        )

    def delete_each(items: Sequence[TExisting]) -> None:
        deleted.extend(
            UnmatchedExistingItemWithResult(existing_item=item, delete_result=on_delete(item))
            for item in items
        )

    upsert_batch(
        existing_items,
        supplied_items,
        key_of_existing,
        key_of_supplied,
        insert_each,
        update_each,
        delete_each,
        normalize_key=normalize_key,
    )
    return UpsertResultWithResults(
        unmatched_supplied=tuple(inserted),
        matched=tuple(updated),
        unmatched_existing=tuple(deleted),
    )
