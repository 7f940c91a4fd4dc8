from datetime import date, datetime
from decimal import Decimal

import pytest

from tracker.domain import Budget, Category, Transaction
from tracker.summary import compute_summary, in_month, percentage_of, status_for

NOW = datetime(2025, 3, 15, 10, 0)
FOOD = Category("1", "Food", "#ef4444", "🍽️", "expense")
SALARY = Category("7", "Salary", "#22c55e", "💰", "income")


def make_tx(id, kind, amount, category, day=date(2025, 3, 5)):
    return Transaction(id, kind, Decimal(amount), category, "Cash", day)


def make_budget(limit, category_id="1"):
    return Budget("b" + category_id, category_id, Decimal(limit), "monthly", date(2025, 1, 1))


def scenario(expense_amount):
    trans = (
        make_tx("t1", "income", "5000", "Salary"),
        make_tx("t2", "expense", expense_amount, "Food"),
    )
    return compute_summary(trans, (FOOD, SALARY), (make_budget("500"),), NOW)


def test_food_budget_under():
    summary = scenario("120")

    assert summary.monthly_income == 5000
    assert summary.monthly_expenses == 120
    assert summary.monthly_savings == 4880
    assert summary.current_balance == 4880
    food = summary.progress_for("1")
    assert food.category_name == "Food"
    assert food.spent == 120
    assert food.remaining == 380
    assert food.percentage == 24.0
    assert food.status == "under"


def test_food_budget_warning():
    food = scenario("420").progress_for("1")
    assert food.percentage == 84.0
    assert food.status == "warning"


def test_food_budget_over():
    food = scenario("520").progress_for("1")
    assert food.remaining == -20
    assert food.percentage == 104.0
    assert food.status == "over"


@pytest.mark.parametrize("spent, expected", [
    ("0", "under"),
    ("399.99", "under"),
    ("400", "warning"),
    ("499.99", "warning"),
    ("500", "over"),
])
def test_status_tier_boundaries(spent, expected):
    assert scenario(spent).progress_for("1").status == expected


def test_status_for_thresholds():
    assert status_for(Decimal("79.99")) == "under"
    assert status_for(Decimal("80")) == "warning"
    assert status_for(Decimal("100")) == "over"
    assert status_for(250.0) == "over"


def test_only_current_month_counts():
    trans = (
        make_tx("t1", "income", "1000", "Salary", date(2025, 3, 1)),
        make_tx("t2", "income", "700", "Salary", date(2025, 2, 28)),
        make_tx("t3", "expense", "300", "Food", date(2024, 3, 10)),
        make_tx("t4", "expense", "50", "Food", date(2025, 3, 31)),
    )
    summary = compute_summary(trans, (FOOD,), (make_budget("100"),), NOW)

    assert summary.monthly_income == 1000
    assert summary.monthly_expenses == 50
    assert summary.progress_for("1").spent == 50
    assert len(in_month(trans, 2025, 3)) == 2


def test_income_in_budget_category_is_not_spent():
    trans = (
        make_tx("t1", "income", "900", "Food"),
        make_tx("t2", "expense", "100", "Food"),
    )
    food = compute_summary(trans, (FOOD,), (make_budget("500"),), NOW).progress_for("1")
    assert food.spent == 100


def test_orphaned_budget_is_excluded():
    budgets = (make_budget("500"), make_budget("200", category_id="42"))
    summary = compute_summary((), (FOOD,), budgets, NOW)
    assert [p.category_id for p in summary.budget_progress] == ["1"]


def test_zero_limit_reads_as_zero_percent():
    assert percentage_of(Decimal("10"), Decimal("0")) == 0
    trans = (make_tx("t1", "expense", "10", "Food"),)
    food = compute_summary(trans, (FOOD,), (make_budget("0"),), NOW).progress_for("1")
    assert food.percentage == 0.0
    assert food.remaining == -10
    assert food.status == "under"


def test_savings_identity_on_empty_store():
    summary = compute_summary((), (), (), NOW)
    assert summary.monthly_income - summary.monthly_expenses == summary.monthly_savings
    assert summary.current_balance == summary.monthly_savings == 0
    assert summary.budget_progress == ()
