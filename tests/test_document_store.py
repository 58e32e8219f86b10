import json
import os

import pytest

from field_ops.exceptions import NotFoundError, StorageError
from field_ops.services.document_store import (
    COLLECTIONS,
    COUNTERS_KEY,
    SETTINGS_KEY,
    DocumentStore,
    JsonFileBackend,
    MemoryBackend,
)


class TestDocumentStore:
    """Unit tests for the document store and its id allocator"""

    @pytest.fixture
    def backend(self):
        return MemoryBackend()

    @pytest.fixture
    def store(self, backend):
        return DocumentStore(backend, default_settings={"tax_rate": "7.75", "invoice_prefix": "INV-"})

    def test_new_document_has_every_collection(self, store):
        document = store.export()

        for name in COLLECTIONS:
            assert document[name] == []
        assert document[SETTINGS_KEY]["tax_rate"] == "7.75"
        assert document[COUNTERS_KEY] == {}

    def test_ids_are_monotonic_and_never_reused(self, store):
        first = store.next_id("customers")
        second = store.next_id("customers")
        store.customers.insert({"id": first, "name": "A"})
        store.customers.insert({"id": second, "name": "B"})

        store.customers.delete(second)
        third = store.next_id("customers")

        assert (first, second, third) == (1, 2, 3)

    def test_counters_are_per_collection(self, store):
        assert store.next_id("customers") == 1
        assert store.next_id("jobs") == 1
        assert store.next_id("customers") == 2
        assert store.counter("jobs") == 1
        assert store.counter("invoices") == 0

    def test_require_missing_raises(self, store):
        with pytest.raises(NotFoundError) as excinfo:
            store.jobs.require(99)

        assert excinfo.value.status_code == 404
        assert excinfo.value.message == "Job not found"

    def test_delete_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            store.customers.delete(1)

    def test_find_filters(self, store):
        store.jobs.insert({"id": 1, "customer_id": 1, "status": "scheduled"})
        store.jobs.insert({"id": 2, "customer_id": 2, "status": "scheduled"})
        store.jobs.insert({"id": 3, "customer_id": 1, "status": "completed"})

        assert [r["id"] for r in store.jobs.find(customer_id=1)] == [1, 3]
        assert [r["id"] for r in store.jobs.find(customer_id=1, status="completed")] == [3]
        assert len(store.jobs) == 3

    def test_each_mutation_is_persisted(self, store, backend):
        store.customers.insert({"id": store.next_id("customers"), "name": "A"})

        assert backend.document["customers"] == [{"id": 1, "name": "A"}]
        assert backend.document[COUNTERS_KEY] == {"customers": 1}

    def test_transaction_saves_once(self, store, backend):
        saves = backend.save_count
        with store.transaction():
            for name in ("A", "B", "C"):
                store.customers.insert({"id": store.next_id("customers"), "name": name})

        assert backend.save_count == saves + 1

    def test_transaction_rolls_back_on_error(self, store, backend):
        store.customers.insert({"id": store.next_id("customers"), "name": "A"})
        saved = backend.document

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.customers.insert({"id": store.next_id("customers"), "name": "B"})
                raise RuntimeError("boom")

        assert [r["name"] for r in store.customers.all()] == ["A"]
        assert store.counter("customers") == 1
        assert backend.document == saved

    def test_saved_settings_win_over_defaults(self):
        backend = MemoryBackend({SETTINGS_KEY: {"tax_rate": "5"}})
        store = DocumentStore(backend, default_settings={"tax_rate": "7.75", "quote_prefix": "Q-"})

        assert store.settings["tax_rate"] == "5"
        assert store.settings["quote_prefix"] == "Q-"

    def test_settings_property_is_a_copy(self, store):
        store.settings["tax_rate"] = "99"

        assert store.settings["tax_rate"] == "7.75"

    def test_unknown_collection(self, store):
        with pytest.raises(KeyError):
            store.collection("widgets")
        assert store.collection("payments") is store.payments


class TestJsonFileBackend:
    """Unit tests for the JSON file backend"""

    @pytest.fixture
    def path(self, tmp_path):
        return str(tmp_path / "data" / "db.json")

    def test_missing_file_loads_none(self, path):
        assert JsonFileBackend(path).load() is None

    def test_round_trip_through_store(self, path):
        store = DocumentStore(JsonFileBackend(path))
        store.customers.insert({"id": store.next_id("customers"), "name": "A"})

        reopened = DocumentStore(JsonFileBackend(path))

        assert reopened.customers.all() == [{"id": 1, "name": "A"}]
        assert reopened.next_id("customers") == 2

    def test_save_leaves_no_temp_files(self, path):
        backend = JsonFileBackend(path)
        backend.save({"customers": []})
        backend.save({"customers": [{"id": 1}]})

        assert os.listdir(os.path.dirname(path)) == ["db.json"]
        with open(path, encoding="utf-8") as f:
            assert json.load(f) == {"customers": [{"id": 1}]}

    def test_corrupt_file_raises(self, path):
        os.makedirs(os.path.dirname(path))
        with open(path, "w", encoding="utf-8") as f:
            f.write("{not json")

        with pytest.raises(StorageError):
            JsonFileBackend(path).load()

    def test_non_object_file_raises(self, path):
        os.makedirs(os.path.dirname(path))
        with open(path, "w", encoding="utf-8") as f:
            json.dump([1, 2, 3], f)

        with pytest.raises(StorageError):
            JsonFileBackend(path).load()

    def test_failed_save_keeps_previous_document(self, path, monkeypatch):
        backend = JsonFileBackend(path)
        backend.save({"customers": [{"id": 1}]})

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(StorageError):
            backend.save({"customers": []})
        monkeypatch.undo()

        assert backend.load() == {"customers": [{"id": 1}]}
        assert os.listdir(os.path.dirname(path)) == ["db.json"]
