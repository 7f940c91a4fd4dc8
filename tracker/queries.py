"""Read-only views over transactions for listing, reports and charts.

Nothing here is cached: every call recomputes from the tuple it is given.
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, Union

from tracker.domain import EXPENSE, INCOME, Budget, Category, Transaction

Predicate = Callable[[Transaction], bool]

PERIODS = {"1m": 30, "3m": 90, "6m": 180, "1y": 365}
DASHBOARD_TOP_CATEGORIES = 6
REPORT_TOP_CATEGORIES = 8
DASHBOARD_RECENT = 5
REPORT_RECENT = 10

ZERO = Decimal("0.00")


class Totals(NamedTuple):
    income: Decimal
    expenses: Decimal
    balance: Decimal


class DailyTotal(NamedTuple):
    day: date
    income: Decimal
    expenses: Decimal


class MonthlyTotal(NamedTuple):
    year: int
    month: int
    income: Decimal
    expenses: Decimal
    balance: Decimal


def by_kind(kind: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.kind == kind

    return _filter


def by_category(name: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category == name

    return _filter


def by_date(day: date) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.date == day

    return _filter


def by_search(term: str) -> Predicate:
    needle = term.lower()

    def _filter(t: Transaction) -> bool:
        return needle in t.category.lower() or needle in (t.description or "").lower()

    return _filter


def since(cutoff: datetime) -> Predicate:
    # occurrence dates count from midnight
    def _filter(t: Transaction) -> bool:
        return datetime.combine(t.date, time.min) >= cutoff

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def iter_transactions(trans: Iterable[Transaction], pred: Predicate) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def newest_first(trans: Iterable[Transaction]) -> list[Transaction]:
    return sorted(trans, key=lambda t: t.date, reverse=True)


def filter_by_period(
    trans: Iterable[Transaction], window: Union[int, str], now: Optional[datetime] = None
) -> tuple[Transaction, ...]:
    """Keep transactions dated within the last ``window`` days.

    ``window`` is a day count or one of the ``PERIODS`` keys ("1m", "3m", ...).
    """
    days = PERIODS[window] if isinstance(window, str) else window
    cutoff = (now or datetime.now()) - timedelta(days=days)
    return tuple(iter_transactions(trans, since(cutoff)))


def filter_transactions(
    trans: Iterable[Transaction],
    search: Optional[str] = None,
    kind: Optional[str] = None,
    category: Optional[str] = None,
    on_date: Optional[date] = None,
) -> list[Transaction]:
    """Transaction list view: every given predicate must match, newest first.

    ``kind="all"`` and empty strings count as "not set".
    """
    preds = []
    if search:
        preds.append(by_search(search))
    if kind and kind != "all":
        preds.append(by_kind(kind))
    if category:
        preds.append(by_category(category))
    if on_date:
        preds.append(by_date(on_date))
    return newest_first(iter_transactions(trans, all_of(*preds)))


def totals(trans: Iterable[Transaction]) -> Totals:
    income = expenses = ZERO
    for t in trans:
        if t.kind == INCOME:
            income += t.amount
        elif t.kind == EXPENSE:
            expenses += t.amount
    return Totals(income, expenses, income - expenses)


def top_categories(trans: Iterable[Transaction], k: int) -> Iterator[tuple[str, Decimal]]:
    """Expense totals per category name, largest first, at most ``k`` entries."""
    totals_by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for t in trans:
        if t.kind == EXPENSE:
            totals_by_category[t.category] += t.amount

    ordered = sorted(totals_by_category.items(), key=lambda item: item[1], reverse=True)

    for name, total in ordered[: max(0, k)]:
        yield name, total


def daily_totals(
    trans: Iterable[Transaction], now: Optional[datetime] = None, days: int = 7
) -> list[DailyTotal]:
    """One bucket per calendar day ending today, oldest first, zero-filled."""
    today = (now or datetime.now()).date()
    buckets = [today - timedelta(days=i) for i in range(days - 1, -1, -1)]
    income: dict[date, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[date, Decimal] = defaultdict(lambda: ZERO)

    for t in trans:
        if t.kind == INCOME:
            income[t.date] += t.amount
        elif t.kind == EXPENSE:
            expenses[t.date] += t.amount

    return [DailyTotal(d, income[d], expenses[d]) for d in buckets]


def months_back(now: datetime, count: int) -> list[tuple[int, int]]:
    """(year, month) pairs for the ``count`` months ending with ``now``'s, oldest first."""
    index = now.year * 12 + now.month - 1
    return [(i // 12, i % 12 + 1) for i in range(index - count + 1, index + 1)]


def monthly_totals(
    trans: Iterable[Transaction], now: Optional[datetime] = None, months: int = 12
) -> list[MonthlyTotal]:
    buckets = months_back(now or datetime.now(), months)
    income: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)

    for t in trans:
        key = (t.date.year, t.date.month)
        if t.kind == INCOME:
            income[key] += t.amount
        elif t.kind == EXPENSE:
            expenses[key] += t.amount

    return [
        MonthlyTotal(y, m, income[(y, m)], expenses[(y, m)], income[(y, m)] - expenses[(y, m)])
        for y, m in buckets
    ]


def recent_transactions(trans: Iterable[Transaction], limit: int = DASHBOARD_RECENT) -> list[Transaction]:
    return newest_first(trans)[:limit]


def category_suggestions(trans: Iterable[Transaction], kind: str, window: int = 5) -> list[str]:
    """Distinct category names among the last ``window`` transactions of ``kind``."""
    latest = [t for t in trans if t.kind == kind][-window:]
    return list(dict.fromkeys(t.category for t in latest))


def transaction_categories(trans: Iterable[Transaction]) -> list[str]:
    return list(dict.fromkeys(t.category for t in trans))


def split_categories(
    cats: Iterable[Category], budgets: Iterable[Budget]
) -> tuple[list[Category], list[Category]]:
    """Expense categories with a budget, and those still without one."""
    budgeted = {b.category_id for b in budgets}
    expense_cats = [c for c in cats if c.kind == EXPENSE]
    return (
        [c for c in expense_cats if c.id in budgeted],
        [c for c in expense_cats if c.id not in budgeted],
    )
