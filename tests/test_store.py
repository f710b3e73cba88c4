"""Tests for the saved-scenario store and its backends."""

import json
import logging

import pytest

from mortgage.calculations import compute_breakdown
from mortgage.models import LoanType
from scenarios.storage import InMemoryStore, JsonFileStore
from scenarios.store import (
    ScenarioNameError,
    ScenarioNotFoundError,
    ScenarioStore,
    ScenarioStoreError,
)


class TestScenarioRoundTrip:
    def test_insert_then_list(self, store, params):
        saved = store.insert(params, "  Starter home  ")
        listed = store.list()
        assert len(listed) == 1
        assert listed[0] == saved
        assert listed[0].name == "Starter home"
        assert listed[0].parameters == params.sanitized()
        assert saved.id.isdigit()
        assert saved.saved_at

    def test_delete_removes_only_that_id(self, store, params):
        first = store.insert(params, "First")
        second = store.insert(params.update("interest_rate", 5.5), "Second")
        assert first.id != second.id

        store.delete(first.id)
        ids = [s.id for s in store.list()]
        assert ids == [second.id]

    def test_delete_unknown_id_is_noop(self, store, params, memory_backend):
        store.insert(params, "Keep")
        before = memory_backend.get("savedMortgages")
        store.delete("does-not-exist")
        assert memory_backend.get("savedMortgages") == before

    def test_insertion_order_preserved(self, store, params):
        for name in ("a", "b", "c"):
            store.insert(params, name)
        assert [s.name for s in store.list()] == ["a", "b", "c"]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, store, params, name):
        with pytest.raises(ScenarioNameError):
            store.insert(params, name)
        assert store.list() == []

    def test_name_error_is_value_error(self):
        assert issubclass(ScenarioNameError, ValueError)
        assert issubclass(ScenarioNameError, ScenarioStoreError)


class TestLoad:
    def test_load_returns_fresh_copy(self, store, params):
        saved = store.insert(params.update("loan_amount", 250_000), "Override")
        loaded = store.load(saved.id)
        assert loaded == saved.parameters
        assert loaded is not saved.parameters
        assert loaded.loan_amount == 250_000

    def test_editing_loaded_parameters_leaves_store_untouched(self, store, params):
        saved = store.insert(params, "Original")
        store.load(saved.id).update("interest_rate", 9.0)
        assert store.get(saved.id).parameters.interest_rate == 6.48

    def test_load_missing(self, store):
        with pytest.raises(ScenarioNotFoundError):
            store.load("missing")

    def test_get_missing(self, store):
        assert store.get("missing") is None


class TestCorruptBlob:
    @pytest.mark.parametrize("blob", ["not json", "{\"a\": 1}", "42", "null"])
    def test_bad_blob_reads_as_empty(self, blob, caplog):
        store = ScenarioStore(InMemoryStore({"savedMortgages": blob}))
        with caplog.at_level(logging.WARNING, logger="scenarios.store"):
            assert store.list() == []
        assert caplog.records

    def test_bad_records_are_skipped(self, params):
        good = dict(params.to_dict(), id="1", name="Good", savedAt="2026-01-01T00:00:00+00:00")
        blob = json.dumps([good, "junk", {"name": "no id"}])
        store = ScenarioStore(InMemoryStore({"savedMortgages": blob}))
        assert [s.name for s in store.list()] == ["Good"]

    def test_insert_over_corrupt_blob_recovers(self, params):
        backend = InMemoryStore({"savedMortgages": "{broken"})
        store = ScenarioStore(backend)
        store.insert(params, "Fresh")
        assert [s.name for s in store.list()] == ["Fresh"]

    def test_reads_browser_blob(self):
        blob = json.dumps([{
            "homeValue": 500000,
            "downPayment": 50000,
            "loanAmount": 450000,
            "interestRate": 6.125,
            "loanTerm": 15,
            "propertyTax": 4200,
            "pmi": 0.6,
            "homeInsurance": 1800,
            "monthlyHOA": 75,
            "loanType": "refi",
            "id": "1760000000000",
            "name": "Refi quote",
            "savedAt": "2026-10-01T12:00:00.000Z",
        }])
        scenario = ScenarioStore(InMemoryStore({"savedMortgages": blob})).list()[0]
        assert scenario.parameters.loan_term_years == 15
        assert scenario.parameters.loan_type is LoanType.REFINANCE
        assert scenario.parameters.monthly_hoa == 75


def test_summaries_price_each_scenario_on_its_own_terms(store, params):
    store.insert(params, "Current")
    cheaper = params.update("interest_rate", 5.0)
    store.insert(cheaper, "Cheaper")

    rows = store.summaries()
    assert [r["name"] for r in rows] == ["Current", "Cheaper"]
    assert rows[0]["monthly_payment"] == pytest.approx(compute_breakdown(params).total)
    assert rows[1]["monthly_payment"] == pytest.approx(compute_breakdown(cheaper).total)
    assert rows[1]["rate"] == 5.0
    assert rows[0]["loan_type"] == "purchase"


class TestJsonFileStore:
    def test_round_trip_on_disk(self, tmp_path, params):
        store = ScenarioStore(JsonFileStore(tmp_path))
        saved = store.insert(params, "Disk")

        path = tmp_path / "savedMortgages.json"
        assert path.exists()
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["id"] == saved.id
        assert data[0]["homeValue"] == 400_000

        reopened = ScenarioStore(JsonFileStore(tmp_path))
        assert reopened.list() == [saved]

    def test_no_temp_files_left_behind(self, tmp_path, params):
        store = ScenarioStore(JsonFileStore(tmp_path))
        store.insert(params, "One")
        store.insert(params, "Two")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["savedMortgages.json"]

    def test_missing_directory_reads_empty(self, tmp_path):
        backend = JsonFileStore(tmp_path / "nowhere")
        assert backend.get("savedMortgages") is None
        assert backend.keys() == []
        assert ScenarioStore(backend).list() == []

    def test_keys_and_delete(self, tmp_path):
        backend = JsonFileStore(tmp_path)
        backend.set("alpha", "[]")
        backend.set("beta", "[]")
        assert backend.keys() == ["alpha", "beta"]
        backend.delete("alpha")
        backend.delete("alpha")
        assert backend.keys() == ["beta"]

    def test_rejects_path_like_keys(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileStore(tmp_path).get("../escape")


def test_in_memory_store_basics():
    backend = InMemoryStore()
    assert backend.get("k") is None
    backend.set("k", "v")
    assert backend.get("k") == "v"
    assert backend.keys() == ["k"]
    backend.delete("k")
    backend.delete("k")
    assert backend.keys() == []
