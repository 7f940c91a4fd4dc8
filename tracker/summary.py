from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from tracker.domain import (
    EXPENSE,
    INCOME,
    OVER,
    UNDER,
    WARNING,
    Budget,
    BudgetProgress,
    Category,
    FinancialSummary,
    Transaction,
)
from tracker.validation import safe_category

WARNING_THRESHOLD = Decimal(80)
OVER_THRESHOLD = Decimal(100)
ZERO = Decimal("0.00")


def in_month(trans: Iterable[Transaction], year: int, month: int) -> tuple[Transaction, ...]:
    return tuple(t for t in trans if t.date.year == year and t.date.month == month)


def total_of(trans: Iterable[Transaction], kind: str) -> Decimal:
    return sum((t.amount for t in trans if t.kind == kind), ZERO)


def spent_in_category(month_trans: Iterable[Transaction], category_name: str) -> Decimal:
    return sum(
        (t.amount for t in month_trans if t.kind == EXPENSE and t.category == category_name),
        ZERO,
    )


def percentage_of(spent: Decimal, limit: Decimal) -> Decimal:
    # limits <= 0 are rejected on input; anything that slips through reads as 0%
    if limit <= 0:
        return Decimal(0)
    return spent / limit * 100


def status_for(percentage) -> str:
    if percentage >= OVER_THRESHOLD:
        return OVER
    if percentage >= WARNING_THRESHOLD:
        return WARNING
    return UNDER


def budget_progress(
    b: Budget, category: Category, month_trans: Iterable[Transaction]
) -> BudgetProgress:
    spent = spent_in_category(month_trans, category.name)
    percentage = percentage_of(spent, b.limit)
    return BudgetProgress(
        category_id=b.category_id,
        category_name=category.name,
        budget=b.limit,
        spent=spent,
        remaining=b.limit - spent,
        percentage=float(percentage),
        status=status_for(percentage),
    )


def compute_summary(
    trans: Iterable[Transaction],
    cats: Iterable[Category],
    budgets: Iterable[Budget],
    now: Optional[datetime] = None,
) -> FinancialSummary:
    """Aggregate the calendar month containing ``now`` (host clock by default).

    Budgets whose category no longer exists are left out of the progress list.
    """
    now = now or datetime.now()
    cats = tuple(cats)
    month_trans = in_month(trans, now.year, now.month)

    income = total_of(month_trans, INCOME)
    expenses = total_of(month_trans, EXPENSE)
    savings = income - expenses

    progress = []
    for b in budgets:
        category = safe_category(cats, b.category_id)
        if category.is_none():
            continue
        progress.append(budget_progress(b, category.get_or_else(None), month_trans))

    return FinancialSummary(
        current_balance=savings,
        monthly_income=income,
        monthly_expenses=expenses,
        monthly_savings=savings,
        budget_progress=tuple(progress),
    )
