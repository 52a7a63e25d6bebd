from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.items import (
    CallLog,
    CountingIterable,
    Existing,
    Supplied,
    existing,
    existing_key,
    supplied,
    supplied_key,
)
from upserter.errors import InvalidArgumentError, MissingArgumentError, UpsertError
from upserter.results import MatchedPair
from upserter.upsert import classify, upsert, upsert_batch, upsert_with_results

if TYPE_CHECKING:
    from collections.abc import Callable

ARGUMENT_NAMES = (
    "existing_items",
    "supplied_items",
    "key_of_existing",
    "key_of_supplied",
    "on_insert",
    "on_update",
    "on_delete",
)


def _noop(*_: object) -> None:
    return None


def _arguments(**overrides: object) -> dict[str, object]:
    arguments: dict[str, object] = {
        "existing_items": existing(1),
        "supplied_items": supplied(1),
        "key_of_existing": existing_key,
        "key_of_supplied": supplied_key,
        "on_insert": _noop,
        "on_update": _noop,
        "on_delete": _noop,
    }
    arguments.update(overrides)
    return arguments


def test_classify_splits_items_into_three_partitions() -> None:
    e1, e2 = existing(1, 2)
    s2, s3 = supplied(2, 3)

    classification = classify([e1, e2], [s2, s3], existing_key, supplied_key)

    assert classification.unmatched_existing == (e1,)
    assert classification.unmatched_supplied == (s3,)
    assert classification.matched == (MatchedPair(existing_item=e2, supplied_item=s2),)


def test_every_item_lands_in_exactly_one_partition() -> None:
    existing_items = existing(1, 2, 2, 4, 5)
    supplied_items = supplied(2, 3, 5, 5, 6)

    classification = classify(existing_items, supplied_items, existing_key, supplied_key)

    matched_existing = {id(pair.existing_item) for pair in classification.matched}
    matched_supplied = {id(pair.supplied_item) for pair in classification.matched}
    unmatched_existing = {id(item) for item in classification.unmatched_existing}
    unmatched_supplied = {id(item) for item in classification.unmatched_supplied}

    assert matched_existing | unmatched_existing == {id(item) for item in existing_items}
    assert matched_supplied | unmatched_supplied == {id(item) for item in supplied_items}
    assert not matched_existing & unmatched_existing
    assert not matched_supplied & unmatched_supplied


def test_duplicate_keys_match_as_cross_product() -> None:
    e1 = Existing(id=1, label="e1")
    e2 = Existing(id=1, label="e2")
    s1 = Supplied(id=1, label="s1")

    result = upsert([e1, e2], [s1], existing_key, supplied_key, _noop, _noop, _noop)

    assert len(result.matched) == 2
    assert set(result.matched) == {
        MatchedPair(existing_item=e1, supplied_item=s1),
        MatchedPair(existing_item=e2, supplied_item=s1),
    }
    assert result.unmatched_existing == ()
    assert result.unmatched_supplied == ()


def test_duplicate_keys_on_both_sides_multiply() -> None:
    result = classify(existing(7, 7), supplied(7, 7, 7), existing_key, supplied_key)

    assert len(result.matched) == 6


def test_empty_existing_inserts_everything() -> None:
    a, b = supplied(1, 2)

    result = upsert([], [a, b], existing_key, supplied_key, _noop, _noop, _noop)

    assert result.unmatched_existing == ()
    assert set(result.unmatched_supplied) == {a, b}
    assert result.matched == ()


def test_empty_supplied_deletes_everything() -> None:
    a, b = existing(1, 2)

    result = upsert([a, b], [], existing_key, supplied_key, _noop, _noop, _noop)

    assert set(result.unmatched_existing) == {a, b}
    assert result.unmatched_supplied == ()
    assert result.matched == ()


def test_disjoint_keys_produce_no_matches() -> None:
    result = upsert(
        existing(1, 2), supplied(3, 4), existing_key, supplied_key, _noop, _noop, _noop
    )

    assert result.matched == ()
    assert len(result.unmatched_existing) == 2
    assert len(result.unmatched_supplied) == 2


@pytest.mark.parametrize(
    "run",
    [upsert, upsert_batch, upsert_with_results],
    ids=["per-item", "batch", "with-results"],
)
def test_inputs_are_enumerated_exactly_once(run: Callable[..., object]) -> None:
    existing_items = CountingIterable(existing(1, 2, 3))
    supplied_items = CountingIterable(supplied(2, 3, 4))

    run(existing_items, supplied_items, existing_key, supplied_key, _noop, _noop, _noop)

    assert existing_items.passes == 1
    assert supplied_items.passes == 1


def test_one_shot_generators_are_supported() -> None:
    result = upsert(
        (item for item in existing(1, 2)),
        (item for item in supplied(2, 3)),
        existing_key,
        supplied_key,
        _noop,
        _noop,
        _noop,
    )

    assert (result.inserted, result.updated, result.deleted) == (1, 1, 1)


def _recording_callbacks(
    run: Callable[..., object],
    log: CallLog,
    update: Callable[[Existing, Supplied], object] | None = None,
) -> dict[str, Callable[..., object]]:
    """Callbacks that log one entry per item whatever the calling convention."""

    def record_update(existing_item: Existing, supplied_item: Supplied) -> None:
        if update is not None:
            update(existing_item, supplied_item)
        log.record("update", (existing_item, supplied_item))

    if run is upsert_batch:

        def insert_all(items: tuple[Supplied, ...]) -> None:
            for item in items:
                log.record("insert", item)

        def update_all(pairs: tuple[MatchedPair[Existing, Supplied], ...]) -> None:
            for pair in pairs:
                record_update(pair.existing_item, pair.supplied_item)

        def delete_all(items: tuple[Existing, ...]) -> None:
            for item in items:
                log.record("delete", item)

        return {"on_insert": insert_all, "on_update": update_all, "on_delete": delete_all}

    return {
        "on_insert": lambda item: log.record("insert", item),
        "on_update": record_update,
        "on_delete": lambda item: log.record("delete", item),
    }


@pytest.mark.parametrize(
    "run",
    [upsert, upsert_batch, upsert_with_results],
    ids=["per-item", "batch", "with-results"],
)
def test_callbacks_run_insert_then_update_then_delete(run: Callable[..., object]) -> None:
    log = CallLog()

    run(
        existing(1, 2, 3),
        supplied(2, 3, 4, 5),
        existing_key,
        supplied_key,
        **_recording_callbacks(run, log),
    )

    assert log.tags == ["insert", "insert", "update", "update", "delete"]
    assert {item.id for item in log.values("insert")} == {4, 5}  # type: ignore[attr-defined]
    assert {item.id for item in log.values("delete")} == {1}  # type: ignore[attr-defined]


def test_per_item_callbacks_keep_order_when_a_partition_is_empty() -> None:
    log = CallLog()

    upsert(
        existing(1),
        supplied(1, 2),
        existing_key,
        supplied_key,
        on_insert=lambda item: log.record("insert", item),
        on_update=lambda e, s: log.record("update", (e, s)),
        on_delete=lambda item: log.record("delete", item),
    )

    assert log.tags == ["insert", "update"]


def test_batch_callbacks_run_once_each_even_when_empty() -> None:
    log = CallLog()

    result = upsert_batch(
        existing(1),
        supplied(1),
        existing_key,
        supplied_key,
        on_insert=lambda items: log.record("insert", items),
        on_update=lambda pairs: log.record("update", pairs),
        on_delete=lambda items: log.record("delete", items),
    )

    assert log.tags == ["insert", "update", "delete"]
    assert log.values("insert") == [()]
    assert log.values("update") == [result.matched]
    assert log.values("delete") == [()]


def test_batch_callbacks_receive_whole_partitions() -> None:
    received: dict[str, object] = {}

    result = upsert_batch(
        existing(1, 2),
        supplied(2, 3),
        existing_key,
        supplied_key,
        on_insert=lambda items: received.setdefault("insert", items),
        on_update=lambda pairs: received.setdefault("update", pairs),
        on_delete=lambda items: received.setdefault("delete", items),
    )

    assert received["insert"] == result.unmatched_supplied
    assert received["update"] == result.matched
    assert received["delete"] == result.unmatched_existing


def test_with_results_pairs_each_item_with_its_callback_value() -> None:
    result = upsert_with_results(
        existing(1, 2),
        supplied(2, 3, 4),
        existing_key,
        supplied_key,
        on_insert=lambda item: item.id * 2,
        on_update=lambda e, s: f"{e.label}->{s.label}",
        on_delete=lambda item: -item.id,
    )

    assert {(entry.supplied_item.id, entry.insert_result) for entry in result.unmatched_supplied} == {
        (3, 6),
        (4, 8),
    }
    assert [entry.update_result for entry in result.matched] == ["e2->s2"]
    assert [(entry.existing_item.id, entry.delete_result) for entry in result.unmatched_existing] == [
        (1, -1)
    ]


def test_with_results_calls_each_callback_once_per_item() -> None:
    calls: list[int] = []

    def on_insert(item: Supplied) -> int:
        calls.append(item.id)
        return item.id

    result = upsert_with_results(
        [], supplied(1, 2, 3), existing_key, supplied_key, on_insert, _noop, _noop
    )

    assert sorted(calls) == [1, 2, 3]
    assert sorted(result.insert_results) == [1, 2, 3]  # type: ignore[type-var]


@pytest.mark.parametrize("missing", ARGUMENT_NAMES)
@pytest.mark.parametrize(
    "run",
    [upsert, upsert_batch, upsert_with_results],
    ids=["per-item", "batch", "with-results"],
)
def test_missing_arguments_are_rejected_before_any_work(
    run: Callable[..., object], missing: str
) -> None:
    log = CallLog()
    existing_items = CountingIterable(existing(1, 2))
    supplied_items = CountingIterable(supplied(2, 3))
    arguments = _arguments(
        existing_items=existing_items,
        supplied_items=supplied_items,
        on_insert=lambda *args: log.record("insert", args),
        on_update=lambda *args: log.record("update", args),
        on_delete=lambda *args: log.record("delete", args),
    )
    arguments[missing] = None

    with pytest.raises(MissingArgumentError) as excinfo:
        run(**arguments)

    assert excinfo.value.argument == missing
    assert missing in str(excinfo.value)
    assert log.calls == []
    assert existing_items.passes == 0
    assert supplied_items.passes == 0


def test_missing_argument_error_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="existing_items"):
        upsert(None, [], existing_key, supplied_key, _noop, _noop, _noop)  # type: ignore[arg-type]

    assert issubclass(MissingArgumentError, UpsertError)


def test_first_missing_argument_is_reported() -> None:
    with pytest.raises(MissingArgumentError) as excinfo:
        upsert([], None, existing_key, None, _noop, _noop, _noop)  # type: ignore[arg-type]

    assert excinfo.value.argument == "supplied_items"


def test_non_callable_callback_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        upsert_batch(**_arguments(on_update="not callable"))  # type: ignore[arg-type]

    assert excinfo.value.argument == "on_update"
    assert not isinstance(excinfo.value, MissingArgumentError)


def test_non_iterable_items_are_rejected() -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        classify(42, [], existing_key, supplied_key)  # type: ignore[arg-type]

    assert excinfo.value.argument == "existing_items"


@pytest.mark.parametrize(
    "run",
    [upsert, upsert_batch, upsert_with_results],
    ids=["per-item", "batch", "with-results"],
)
def test_callback_error_stops_remaining_callbacks(run: Callable[..., object]) -> None:
    log = CallLog()

    def failing_update(existing_item: Existing, supplied_item: Supplied) -> None:
        raise RuntimeError("update failed")

    with pytest.raises(RuntimeError, match="update failed"):
        run(
            existing(1, 2),
            supplied(2, 3),
            existing_key,
            supplied_key,
            **_recording_callbacks(run, log, update=failing_update),
        )

    assert log.tags == ["insert"]


def test_key_selector_error_propagates_without_callbacks() -> None:
    log = CallLog()

    def broken_key(item: Supplied) -> int:
        raise LookupError(item.id)

    with pytest.raises(LookupError):
        upsert(
            existing(1),
            supplied(1),
            existing_key,
            broken_key,
            on_insert=lambda item: log.record("insert", item),
            on_update=lambda e, s: log.record("update", (e, s)),
            on_delete=lambda item: log.record("delete", item),
        )

    assert log.calls == []


def test_inputs_are_not_mutated() -> None:
    existing_items = existing(1, 2)
    supplied_items = supplied(2, 3)
    existing_before = list(existing_items)
    supplied_before = list(supplied_items)

    upsert(existing_items, supplied_items, existing_key, supplied_key, _noop, _noop, _noop)

    assert existing_items == existing_before
    assert supplied_items == supplied_before


def test_normalize_key_is_forwarded() -> None:
    result = classify(
        ["Alpha", "beta"],
        ["ALPHA", "gamma"],
        lambda name: name,
        lambda name: name,
        normalize_key=str.lower,
    )

    assert result.matched == (MatchedPair(existing_item="Alpha", supplied_item="ALPHA"),)
    assert result.unmatched_existing == ("beta",)
    assert result.unmatched_supplied == ("gamma",)


def test_classification_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("DEBUG", logger="upserter.upsert"):
        classify(existing(1, 2), supplied(2), existing_key, supplied_key)

    assert "insert=0, update=1, delete=1" in caplog.text
