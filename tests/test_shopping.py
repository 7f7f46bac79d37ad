from stockmgr.inventory.derive import shopping_list
from stockmgr.inventory.models import Preferences
from stockmgr.inventory.shopping import purchase_checked
from stockmgr.inventory.state import CheckedState, PreferencesStore


def test_checked_state_round_trip(kv):
    checked = CheckedState(kv)
    assert not checked.is_checked("1")

    checked.set("1")
    checked.set("2", True)
    assert checked.is_checked("1")
    assert kv.get("checked:1") == "true"
    assert checked.checked_ids() == ["1", "2"]

    checked.set("1", False)
    assert not checked.is_checked("1")
    assert kv.get("checked:1") is None


def test_checked_state_is_independent_of_records(kv, store):
    checked = CheckedState(kv)
    checked.set("1")
    store.update("1", {"name": "低脂肪乳"})
    assert checked.is_checked("1")
    assert "checked" not in store.get("1").to_dict()


def test_prune_removes_deleted_items(kv, store):
    checked = CheckedState(kv)
    checked.set("1")
    checked.set("2")
    store.delete("2")

    assert checked.prune(r.id for r in store.records) == 1
    assert checked.checked_ids() == ["1"]


def test_purchase_restocks_checked_items(kv, scenario_store):
    checked = CheckedState(kv)
    checked.set("1")

    assert purchase_checked(scenario_store, checked) == 1
    assert scenario_store.get("1").quantity == 2
    assert scenario_store.get("2").quantity == 0
    assert not checked.is_checked("1")
    assert [r.id for r in shopping_list(scenario_store.records)] == ["2"]


def test_purchase_declined_changes_nothing(kv, scenario_store):
    checked = CheckedState(kv)
    checked.set("1")
    checked.set("2")
    writes = kv.writes

    assert purchase_checked(scenario_store, checked, confirm=lambda: False) == 0
    assert scenario_store.get("1").quantity == 1
    assert scenario_store.get("2").quantity == 0
    assert checked.checked_ids() == ["1", "2"]
    assert kv.writes == writes


def test_purchase_without_checks_does_not_ask(scenario_store, kv):
    asked = []
    assert purchase_checked(scenario_store, CheckedState(kv), confirm=lambda: asked.append(1) or True) == 0
    assert asked == []


def test_purchase_clears_check_on_already_stocked_item(kv, scenario_store):
    checked = CheckedState(kv)
    checked.set("1")
    scenario_store.adjust_quantity("1", 5)

    assert purchase_checked(scenario_store, checked) == 0
    assert scenario_store.get("1").quantity == 6
    assert not checked.is_checked("1")


def test_preferences_default_and_toggle(kv):
    prefs = PreferencesStore(kv)
    assert prefs.load() == Preferences(compact_view=False)

    assert prefs.toggle_compact().compact_view is True
    assert kv.get("stock_manager_prefs") == '{"compactView": true}'
    assert prefs.load().compact_view is True

    assert prefs.toggle_compact().compact_view is False


def test_preferences_do_not_touch_inventory(kv, store):
    before = kv.get("stock_manager_data")
    PreferencesStore(kv).toggle_compact()
    assert kv.get("stock_manager_data") == before


def test_purchase_declined_keeps_stale_checks(kv, scenario_store):
    checked = CheckedState(kv)
    checked.set("1")
    checked.set("ghost")
    writes = kv.writes

    assert purchase_checked(scenario_store, checked, confirm=lambda: False) == 0
    assert kv.writes == writes
    assert kv.get("checked:ghost") == "true"


def test_purchase_accepted_prunes_stale_checks(kv, scenario_store):
    checked = CheckedState(kv)
    checked.set("1")
    checked.set("ghost")

    assert purchase_checked(scenario_store, checked, confirm=lambda: True) == 1
    assert checked.checked_ids() == []
