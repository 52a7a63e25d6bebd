"""Three-way reconciliation of existing items against supplied items.

Items are matched by caller-supplied keys and split into inserts (supplied
only), updates (present on both sides) and deletes (existing only); callbacks
then run for each partition in that order.
"""

from __future__ import annotations

from importlib import metadata

from .errors import InvalidArgumentError, MissingArgumentError, UpsertError
from .join import MISSING, Maybe, Missing, full_outer_group_join, full_outer_join, is_missing
from .results import (
    Classification,
    MatchedItemsWithResult,
    MatchedPair,
    UnmatchedExistingItemWithResult,
    UnmatchedSuppliedItemWithResult,
    UpsertResult,
    UpsertResultWithResults,
)
from .service import (
    ContextUpserterService,
    UniformUpserterServiceWithResults,
    UpserterService,
    UpserterServiceWithResults,
)
from .upsert import classify, upsert, upsert_batch, upsert_with_results

try:
    __version__ = metadata.version("upserter")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    "MISSING",
    "Classification",
    "ContextUpserterService",
    "InvalidArgumentError",
    "MatchedItemsWithResult",
    "MatchedPair",
    "Maybe",
    "Missing",
    "MissingArgumentError",
    "UniformUpserterServiceWithResults",
    "UnmatchedExistingItemWithResult",
    "UnmatchedSuppliedItemWithResult",
    "UpsertError",
    "UpsertResult",
    "UpsertResultWithResults",
    "UpserterService",
    "UpserterServiceWithResults",
    "__version__",
    "classify",
    "full_outer_group_join",
    "full_outer_join",
    "is_missing",
    "upsert",
    "upsert_batch",
    "upsert_with_results",
]
