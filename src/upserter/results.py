"""Result types produced by an upsert run.

All result objects are frozen; partitions are stored as tuples so a result
cannot change after it has been returned.
"""

from __future__ import annotations

from dataclasses import dataclass

from .join import is_missing


def _require_present(value: object, name: str) -> None:
    if is_missing(value):
        raise ValueError(f"{name} must be present, got MISSING")


@dataclass(frozen=True, slots=True)
class MatchedPair[TExisting, TSupplied]:
    """An existing item and a supplied item sharing one key."""

    existing_item: TExisting
    supplied_item: TSupplied

    def __post_init__(self) -> None:
        _require_present(self.existing_item, "existing_item")
        _require_present(self.supplied_item, "supplied_item")


@dataclass(frozen=True, slots=True)
class Classification[TExisting, TSupplied]:
    """Disjoint partitions of the existing and supplied items."""

    unmatched_existing: tuple[TExisting, ...] = ()
    unmatched_supplied: tuple[TSupplied, ...] = ()
    matched: tuple[MatchedPair[TExisting, TSupplied], ...] = ()


@dataclass(frozen=True, slots=True)
class UpsertResult[TExisting, TSupplied]:
    """Items handed to the insert, update and delete callbacks.

    ``unmatched_supplied`` went to insert, ``matched`` to update and
    ``unmatched_existing`` to delete.
    """

    unmatched_existing: tuple[TExisting, ...] = ()
    unmatched_supplied: tuple[TSupplied, ...] = ()
    matched: tuple[MatchedPair[TExisting, TSupplied], ...] = ()

    @classmethod
    def from_classification(
        cls, classification: Classification[TExisting, TSupplied]
    ) -> UpsertResult[TExisting, TSupplied]:
        return cls(
            unmatched_existing=classification.unmatched_existing,
            unmatched_supplied=classification.unmatched_supplied,
            matched=classification.matched,
        )

    @property
    def inserted(self) -> int:
        return len(self.unmatched_supplied)

    @property
    def updated(self) -> int:
        return len(self.matched)

    @property
    def deleted(self) -> int:
        return len(self.unmatched_existing)

    @property
    def is_empty(self) -> bool:
        return not (self.unmatched_existing or self.unmatched_supplied or self.matched)


@dataclass(frozen=True, slots=True)
class UnmatchedSuppliedItemWithResult[TSupplied, TInsertResult]:
    """Supplied item together with what the insert callback returned."""

    supplied_item: TSupplied
    insert_result: TInsertResult | None

    def __post_init__(self) -> None:
        _require_present(self.supplied_item, "supplied_item")


@dataclass(frozen=True, slots=True)
class MatchedItemsWithResult[TExisting, TSupplied, TUpdateResult]:
    """Matched pair together with what the update callback returned."""

    existing_item: TExisting
    supplied_item: TSupplied
    update_result: TUpdateResult | None

    def __post_init__(self) -> None:
        _require_present(self.existing_item, "existing_item")
        _require_present(self.supplied_item, "supplied_item")


@dataclass(frozen=True, slots=True)
class UnmatchedExistingItemWithResult[TExisting, TDeleteResult]:
    """Existing item together with what the delete callback returned."""

    existing_item: TExisting
    delete_result: TDeleteResult | None

    def __post_init__(self) -> None:
        _require_present(self.existing_item, "existing_item")


@dataclass(frozen=True, slots=True)
class UpsertResultWithResults[TExisting, TSupplied, TInsertResult, TUpdateResult, TDeleteResult]:
    """Upsert result carrying the value returned for every processed item."""

    unmatched_supplied: tuple[UnmatchedSuppliedItemWithResult[TSupplied, TInsertResult], ...] = ()
    matched: tuple[MatchedItemsWithResult[TExisting, TSupplied, TUpdateResult], ...] = ()
    unmatched_existing: tuple[UnmatchedExistingItemWithResult[TExisting, TDeleteResult], ...] = ()

    @property
    def inserted(self) -> int:
        return len(self.unmatched_supplied)

    @property
    def updated(self) -> int:
        return len(self.matched)

    @property
    def deleted(self) -> int:
        return len(self.unmatched_existing)

    @property
    def insert_results(self) -> tuple[TInsertResult | None, ...]:
        return tuple(item.insert_result for item in self.unmatched_supplied)

    @property
    def update_results(self) -> tuple[TUpdateResult | None, ...]:
        return tuple(item.update_result for item in self.matched)

    @property
    def delete_results(self) -> tuple[TDeleteResult | None, ...]:
        return tuple(item.delete_result for item in self.unmatched_existing)
