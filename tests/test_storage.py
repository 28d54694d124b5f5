"""Tests for the SalesRepStorage persistence adapter."""

from __future__ import annotations

import json
from datetime import timedelta

from utils.sales_tracker.constants import STORAGE_KEY, MSG_SAVE_FAILED
from utils.sales_tracker.storage import SalesRepStorage, migrate_record

from tests.conftest import FIXED_NOW, make_rep


class TestLoad:
    def test_absent_key_loads_empty_list(self, storage) -> None:
        assert storage.load() == []

    def test_legacy_record_is_migrated(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, json.dumps([{"id": 1, "name": "Bob", "deals": 3}]))

        reps = storage.load()

        assert len(reps) == 1
        bob = reps[0]
        assert bob.id == 1
        assert bob.name == "Bob"
        assert bob.deals == 3  # stale counter kept as stored
        assert bob.revenue == 0.0
        assert bob.deal_history == []

    def test_corrupt_json_loads_empty_list(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, "{not json")
        assert storage.load() == []

    def test_non_list_payload_loads_empty_list(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, json.dumps({"id": 1}))
        assert storage.load() == []

    def test_malformed_entry_loads_empty_list(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, json.dumps([{"name": "No id"}]))
        assert storage.load() == []

    def test_overflowing_id_loads_empty_list(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, '[{"id": 1e999, "name": "X", "deals": 0, "revenue": 0, "dealHistory": []}]')
        assert storage.load() == []

    def test_infinite_counter_loads_empty_list(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, '[{"id": 1, "name": "X", "deals": Infinity, "revenue": 0, "dealHistory": []}]')
        assert storage.load() == []

    def test_deeply_nested_blob_loads_empty_list(self, kv_store, storage) -> None:
        kv_store.set_item(STORAGE_KEY, "[" * 100_000 + "]" * 100_000)
        assert storage.load() == []

    def test_backend_failure_loads_empty_list(self, broken_storage) -> None:
        assert broken_storage.load() == []


class TestMigrateRecord:
    def test_current_shape_untouched(self) -> None:
        entry = {"id": 1, "name": "A", "deals": 0, "revenue": 0, "dealHistory": []}
        assert migrate_record(entry) is entry

    def test_null_history_is_migrated(self) -> None:
        migrated = migrate_record({"id": 1, "name": "A", "deals": 2, "revenue": 50, "dealHistory": None})
        assert migrated["dealHistory"] == []
        assert migrated["revenue"] == 0
        assert migrated["deals"] == 2


class TestSave:
    def test_round_trip(self, storage) -> None:
        reps = [
            make_rep(1, "Alice", [(FIXED_NOW - timedelta(days=1), 120.5), (FIXED_NOW, 80.0)]),
            make_rep(2, "Bob"),
        ]

        ok, error = storage.save(reps)

        assert ok is True
        assert error is None
        assert storage.load() == reps

    def test_save_replaces_prior_value(self, storage) -> None:
        storage.save([make_rep(1, "Alice"), make_rep(2, "Bob")])
        storage.save([make_rep(2, "Bob")])

        assert [rep.name for rep in storage.load()] == ["Bob"]

    def test_blob_layout(self, kv_store, storage) -> None:
        storage.save([make_rep(1, "Alice", [(FIXED_NOW, 10.0)])])

        payload = json.loads(kv_store.get_item(STORAGE_KEY))

        assert payload == [{
            "id": 1,
            "name": "Alice",
            "deals": 1,
            "revenue": 10.0,
            "dealHistory": [{"date": "2025-06-18T15:30:00.000Z", "amount": 10.0}],
        }]

    def test_backend_failure_is_reported_not_raised(self, broken_storage) -> None:
        ok, error = broken_storage.save([make_rep(1, "Alice")])

        assert ok is False
        assert error == MSG_SAVE_FAILED


class TestCheckConnection:
    def test_working_store(self, kv_store, storage) -> None:
        assert storage.check_connection() == (True, None)
        assert kv_store.get_item("test") is None

    def test_broken_store(self, broken_storage) -> None:
        ok, error = broken_storage.check_connection()
        assert ok is False
        assert "not available" in error

    def test_custom_key(self, kv_store) -> None:
        storage = SalesRepStorage(kv_store, key="otherReps")
        storage.save([make_rep(1, "Alice")])

        assert kv_store.get_item(STORAGE_KEY) is None
        assert kv_store.get_item("otherReps") is not None
