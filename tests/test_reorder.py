import itertools
import json
import logging

import pytest

from stockmgr.inventory.derive import filter_by_category
from stockmgr.inventory.reorder import ReorderMismatchError, reconcile_order
from stockmgr.inventory.store import STORAGE_KEY


def _ids(store):
    return [r.id for r in store.records]


@pytest.mark.parametrize("order", list(itertools.permutations(["1", "2", "3"])))
def test_accepts_every_full_permutation(kv, store, order):
    store.replace_order(list(order))

    assert _ids(store) == list(order)
    assert [d["id"] for d in json.loads(kv.get(STORAGE_KEY))] == list(order)


def test_unknown_ids_are_dropped(store):
    store.replace_order(["3", "ghost", "1", "2"])
    assert _ids(store) == ["3", "1", "2"]


@pytest.mark.parametrize("order", [
    [],
    ["1", "2"],
    ["3", "ghost"],
    ["1", "1", "2"],
    ["1", "2", "3", "3"],
])
def test_rejects_incomplete_or_duplicated_order(kv, store, order):
    before = kv.get(STORAGE_KEY)
    writes = kv.writes

    with pytest.raises(ReorderMismatchError) as exc_info:
        store.replace_order(order)

    assert exc_info.value.expected == 3
    assert _ids(store) == ["1", "2", "3"]
    assert kv.get(STORAGE_KEY) == before
    assert kv.writes == writes


def test_filtered_view_order_is_rejected(store):
    visible = [r.id for r in filter_by_category(store.records, "food")]

    with pytest.raises(ReorderMismatchError):
        store.replace_order(list(reversed(visible)))
    assert _ids(store) == ["1", "2", "3"]


def test_mismatch_is_logged(store, caplog):
    caplog.set_level(logging.WARNING, logger="stockmgr.inventory.reorder")
    with pytest.raises(ReorderMismatchError):
        reconcile_order(store.records, ["1"])
    assert "Reorder mismatch" in caplog.text


def test_reconcile_does_not_mutate_input(store):
    records = store.records
    result = reconcile_order(records, ["2", "3", "1"])
    assert [r.id for r in result] == ["2", "3", "1"]
    assert [r.id for r in records] == ["1", "2", "3"]
