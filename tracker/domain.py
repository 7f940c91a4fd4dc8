from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
KINDS = (INCOME, EXPENSE)

MONTHLY = "monthly"
YEARLY = "yearly"
PERIODS = (MONTHLY, YEARLY)

UNDER = "under"
WARNING = "warning"
OVER = "over"

CENT = Decimal("0.01")


def as_amount(value) -> Decimal:
    """Coerce a number or numeric string into a cent-quantized Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Transaction:
    id: str
    kind: str             # "income" or "expense"
    amount: Decimal       # always positive, kind gives the sign
    category: str         # category name, not id
    payment_method: str   # payment method name
    date: date
    description: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
    icon: str
    kind: str


@dataclass(frozen=True)
class Budget:
    id: str
    category_id: str
    limit: Decimal
    period: str  # "monthly" or "yearly"
    start_date: date
    end_date: Optional[date] = None


@dataclass(frozen=True)
class PaymentMethod:
    id: str
    name: str
    type: str  # cash, card, pix, transfer, boleto, other
    icon: str


@dataclass(frozen=True)
class BudgetProgress:
    category_id: str
    category_name: str
    budget: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: str


@dataclass(frozen=True)
class FinancialSummary:
    current_balance: Decimal = Decimal("0.00")
    monthly_income: Decimal = Decimal("0.00")
    monthly_expenses: Decimal = Decimal("0.00")
    monthly_savings: Decimal = Decimal("0.00")
    budget_progress: tuple[BudgetProgress, ...] = ()

    def progress_for(self, category_id: str) -> Optional[BudgetProgress]:
        return next(
            (p for p in self.budget_progress if p.category_id == category_id), None
        )


@dataclass(frozen=True)
class Notification:
    id: str
    kind: str
    title: str
    message: str
    created_at: datetime
    is_read: bool = False


def _plain(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class ExportSnapshot:
    transactions: tuple[Transaction, ...]
    categories: tuple[Category, ...]
    budgets: tuple[Budget, ...]
    payment_methods: tuple[PaymentMethod, ...]
    exported_at: str
    version: str = field(default="1.0.0")

    def as_dict(self) -> dict:
        """Return the bundle as JSON-ready primitives (dates as ISO strings)."""
        return _plain(asdict(self))
