"""pandas projections of core results, shaped for plotly charts and tables."""

from typing import Iterable

import pandas as pd

from tracker.domain import BudgetProgress, Transaction
from tracker.queries import DailyTotal, MonthlyTotal

TRANSACTION_COLUMNS = ["date", "kind", "category", "amount", "payment_method", "description", "created_at"]


def transactions_frame(trans: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "date": pd.Timestamp(t.date),
            "kind": t.kind,
            "category": t.category,
            "amount": float(t.amount),
            "payment_method": t.payment_method,
            "description": t.description,
            "created_at": pd.Timestamp(t.created_at) if t.created_at else pd.NaT,
        }
        for t in trans
    ]
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


def daily_frame(days: Iterable[DailyTotal]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"day": d.day.strftime("%d/%m"), "income": float(d.income), "expenses": float(d.expenses)} for d in days],
        columns=["day", "income", "expenses"],
    )


def monthly_frame(months: Iterable[MonthlyTotal]) -> pd.DataFrame:
    rows = [
        {
            "month": pd.Timestamp(year=m.year, month=m.month, day=1).strftime("%b %y"),
            "income": float(m.income),
            "expenses": float(m.expenses),
            "balance": float(m.balance),
        }
        for m in months
    ]
    return pd.DataFrame(rows, columns=["month", "income", "expenses", "balance"])


def categories_frame(pairs: Iterable[tuple]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"category": name, "total": float(total)} for name, total in pairs],
        columns=["category", "total"],
    )


def progress_frame(progress: Iterable[BudgetProgress]) -> pd.DataFrame:
    rows = [
        {
            "category": p.category_name,
            "budget": float(p.budget),
            "spent": float(p.spent),
            "remaining": float(p.remaining),
            "percentage": p.percentage,
            "status": p.status,
        }
        for p in progress
    ]
    return pd.DataFrame(rows, columns=["category", "budget", "spent", "remaining", "percentage", "status"])
