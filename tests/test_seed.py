import json
from datetime import datetime
from decimal import Decimal

import pytest

from tracker.exceptions import SeedDataError
from tracker.seed import load_seed, new_store, populate_sample_data

JANUARY = datetime(2024, 1, 31, 12, 0)


def test_load_default_seed():
    seed = load_seed()

    assert len(seed.categories) == 9
    assert len(seed.payment_methods) == 6
    assert len(seed.transactions) == 10
    assert len(seed.budgets) == 4
    assert {c.kind for c in seed.categories} == {"income", "expense"}


def test_new_store_has_defaults_but_no_transactions():
    store = new_store()

    assert len(store.categories) == 9
    assert store.transactions == ()
    assert store.budgets == ()


def test_populate_sample_data_replays_through_store():
    store = new_store(clock=lambda: JANUARY)

    populate_sample_data(store)

    assert len(store.transactions) == 10
    assert len({t.id for t in store.transactions}) == 10
    assert len(store.budgets) == 4

    summary = store.summary
    assert summary.monthly_income == Decimal("7000")
    assert summary.monthly_expenses == Decimal("2695")
    assert summary.monthly_savings == Decimal("4305")
    assert summary.progress_for("1").spent == Decimal("165")
    assert summary.progress_for("1").percentage == 33.0
    assert summary.progress_for("4").status == "over"
    assert [n.title for n in store.notifications] == ["Budget exceeded"]


def test_sample_data_outside_current_month_leaves_summary_empty():
    store = new_store(clock=lambda: datetime(2025, 3, 15))
    populate_sample_data(store)

    assert store.summary.monthly_income == 0
    assert all(p.spent == 0 for p in store.summary.budget_progress)


def test_missing_seed_file(tmp_path):
    with pytest.raises(SeedDataError):
        load_seed(tmp_path / "missing.json")


def test_invalid_sample_record_is_rejected(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({
        "categories": [],
        "payment_methods": [],
        "transactions": [{"kind": "expense", "amount": 10, "payment_method": "Cash", "date": "2024-01-01"}],
    }), encoding="utf-8")
    seed = load_seed(path)
    store = new_store(seed)

    with pytest.raises(SeedDataError):
        populate_sample_data(store, seed)
    assert store.transactions == ()


def write_seed(tmp_path, transactions, budgets=()):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({
        "categories": [{"id": "1", "name": "Food", "color": "#ef4444", "icon": "🍽️", "kind": "expense"}],
        "payment_methods": [{"id": "1", "name": "Cash", "type": "cash", "icon": "💵"}],
        "transactions": list(transactions),
        "budgets": list(budgets),
    }), encoding="utf-8")
    return load_seed(path)


def make_record(**overrides):
    record = {"kind": "expense", "amount": 10, "category": "Food", "payment_method": "Cash", "date": "2024-01-05"}
    record.update(overrides)
    return record


def test_bad_record_after_good_ones_leaves_store_empty(tmp_path):
    seed = write_seed(tmp_path, [make_record(), make_record(amount=20), make_record(amount="NaN")])
    store = new_store(seed)

    with pytest.raises(SeedDataError):
        populate_sample_data(store, seed)
    assert store.transactions == ()
    assert store.notifications == ()


def test_bad_budget_blocks_sample_transactions(tmp_path):
    seed = write_seed(tmp_path, [make_record()], budgets=[{"category_id": "1", "limit": 0}])
    store = new_store(seed)

    with pytest.raises(SeedDataError):
        populate_sample_data(store, seed)
    assert store.transactions == ()
    assert store.budgets == ()
