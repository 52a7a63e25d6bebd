"""Service base classes for callers that prefer methods over callbacks.

Subclasses implement ``insert``, ``update`` and ``delete``; ``upsert`` binds
those methods as callbacks and hands them to the orchestrator functions in
:mod:`upserter.upsert`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .upsert import upsert, upsert_with_results, validate_arguments

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from .results import UpsertResult, UpsertResultWithResults


class UpserterService[TExisting, TSupplied](ABC):
    """Synchronise existing items with supplied items via overridable methods."""

    def upsert[TKey: Hashable](
        self,
        existing_items: Iterable[TExisting],
        supplied_items: Iterable[TSupplied],
        key_of_existing: Callable[[TExisting], TKey],
        key_of_supplied: Callable[[TSupplied], TKey],
        *,
        normalize_key: Callable[[TKey], Hashable] | None = None,
    ) -> UpsertResult[TExisting, TSupplied]:
        """Insert, update and delete as needed so existing matches supplied."""

        validate_arguments(
            existing_items=existing_items,
            supplied_items=supplied_items,
            key_of_existing=key_of_existing,
            key_of_supplied=key_of_supplied,
        )
        return upsert(
            existing_items,
            supplied_items,
            key_of_existing,
            key_of_supplied,
            on_insert=self.insert,
            on_update=self.update,
            on_delete=self.delete,
            normalize_key=normalize_key,
        )

    @abstractmethod
    def insert(self, supplied_item: TSupplied) -> None:
        """Create a new item from ``supplied_item``."""
        ...

    @abstractmethod
    def update(self, existing_item: TExisting, supplied_item: TSupplied) -> None:
        """Bring ``existing_item`` in line with ``supplied_item``."""
        ...

    @abstractmethod
    def delete(self, existing_item: TExisting) -> None:
        """Remove ``existing_item``."""
        ...


class ContextUpserterService[TExisting, TSupplied, TContext](ABC):
    """Like :class:`UpserterService`, with a context value passed to every operation.

    The context is typically the parent a child collection belongs to, e.g. the
    blog whose posts are being synchronised.
    """

    def upsert[TKey: Hashable](
        self,
        existing_items: Iterable[TExisting],
        supplied_items: Iterable[TSupplied],
        key_of_existing: Callable[[TExisting], TKey],
        key_of_supplied: Callable[[TSupplied], TKey],
        context: TContext,
        *,
        normalize_key: Callable[[TKey], Hashable] | None = None,
    ) -> UpsertResult[TExisting, TSupplied]:
        validate_arguments(
            existing_items=existing_items,
            supplied_items=supplied_items,
            key_of_existing=key_of_existing,
            key_of_supplied=key_of_supplied,
        )
        return upsert(
            existing_items,
            supplied_items,
            key_of_existing,
            key_of_supplied,
            on_insert=lambda supplied: self.insert(supplied, context),
            on_update=lambda existing, supplied: self.update(existing, supplied, context),
            on_delete=lambda existing: self.delete(existing, context),
            normalize_key=normalize_key,
        )

    @abstractmethod
    def insert(self, supplied_item: TSupplied, context: TContext) -> None: ...

    @abstractmethod
    def update(
        self, existing_item: TExisting, supplied_item: TSupplied, context: TContext
    ) -> None: ...

    @abstractmethod
    def delete(self, existing_item: TExisting, context: TContext) -> None: ...


class UpserterServiceWithResults[TExisting, TSupplied, TContext, TInsert, TUpdate, TDelete](ABC):
    """Context-aware service whose operations return a value per item.

    Useful when each write produces something the caller needs afterwards,
    such as generated ids or a list of mentions found in a comment body.
    """

    def upsert[TKey: Hashable](
        self,
        existing_items: Iterable[TExisting],
        supplied_items: Iterable[TSupplied],
        key_of_existing: Callable[[TExisting], TKey],
        key_of_supplied: Callable[[TSupplied], TKey],
        context: TContext,
        *,
        normalize_key: Callable[[TKey], Hashable] | None = None,
    ) -> UpsertResultWithResults[TExisting, TSupplied, TInsert, TUpdate, TDelete]:
        validate_arguments(
            existing_items=existing_items,
            supplied_items=supplied_items,
            key_of_existing=key_of_existing,
            key_of_supplied=key_of_supplied,
        )
        return upsert_with_results(
            existing_items,
            supplied_items,
            key_of_existing,
            key_of_supplied,
            on_insert=lambda supplied: self.insert(supplied, context),
            on_update=lambda existing, supplied: self.update(existing, supplied, context),
            on_delete=lambda existing: self.delete(existing, context),
            normalize_key=normalize_key,
        )

    @abstractmethod
    def insert(self, supplied_item: TSupplied, context: TContext) -> TInsert: ...

    @abstractmethod
    def update(
        self, existing_item: TExisting, supplied_item: TSupplied, context: TContext
    ) -> TUpdate: ...

    @abstractmethod
    def delete(self, existing_item: TExisting, context: TContext) -> TDelete: ...


class UniformUpserterServiceWithResults[TExisting, TSupplied, TContext, TResult](
    UpserterServiceWithResults[TExisting, TSupplied, TContext, TResult, TResult, TResult]
):
    """Shorthand for services whose three operations return the same type."""
