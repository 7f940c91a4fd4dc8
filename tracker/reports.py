from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from tracker.domain import Transaction
from tracker.queries import (
    REPORT_RECENT,
    REPORT_TOP_CATEGORIES,
    MonthlyTotal,
    filter_by_period,
    monthly_totals,
    recent_transactions,
    top_categories,
    totals,
)


@dataclass(frozen=True)
class PeriodReport:
    period: Union[int, str]
    transactions: tuple[Transaction, ...]
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    average_expense: Decimal
    top_categories: tuple[tuple[str, Decimal], ...]
    monthly: tuple[MonthlyTotal, ...]
    recent: tuple[Transaction, ...]


def period_report(
    trans: Iterable[Transaction], period: Union[int, str] = "1m", now: Optional[datetime] = None
) -> PeriodReport:
    """Everything the reports view shows for one relative period.

    ``average_expense`` divides total expenses by the number of transactions
    in the period (income included), never by less than one.
    """
    now = now or datetime.now()
    selected = filter_by_period(trans, period, now)
    t = totals(selected)

    return PeriodReport(
        period=period,
        transactions=selected,
        total_income=t.income,
        total_expenses=t.expenses,
        balance=t.balance,
        average_expense=t.expenses / max(1, len(selected)),
        top_categories=tuple(top_categories(selected, REPORT_TOP_CATEGORIES)),
        monthly=tuple(monthly_totals(selected, now)),
        recent=tuple(recent_transactions(selected, REPORT_RECENT)),
    )
