from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Generic, Iterable, Mapping, Optional, TypeVar

from tracker.domain import KINDS, PERIODS, Category, as_amount
from tracker.exceptions import ValidationError

T = TypeVar('T')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def ensure(result: Either[dict, T]) -> T:
    """Unwrap a Right, or raise ValidationError carrying the Left's error."""
    if result.is_left():
        raise ValidationError(result.get_error())
    return result.get_or_else(None)


def _missing(field: str) -> Left:
    return Left({
        "error": "missing_field",
        "message": f"Field '{field}' is required",
        "field": field,
    })


def _positive_amount(value, field: str) -> Either[dict, Decimal]:
    try:
        amount = as_amount(value)
    except (InvalidOperation, ValueError, TypeError):
        return Left({
            "error": "invalid_amount",
            "message": f"{field} must be a number, got {value!r}",
            "field": field,
        })
    if not amount.is_finite():
        return Left({
            "error": "invalid_amount",
            "message": f"{field} must be a finite number, got {value!r}",
            "field": field,
        })
    if amount <= 0:
        return Left({
            "error": "invalid_amount",
            "message": f"{field} must be greater than zero",
            "field": field,
            "amount": amount,
        })
    return Right(amount)


def _as_date(value, field: str) -> Either[dict, date]:
    if isinstance(value, datetime):
        return Right(value.date())
    if isinstance(value, date):
        return Right(value)
    try:
        return Right(date.fromisoformat(str(value)))
    except ValueError:
        return Left({
            "error": "invalid_date",
            "message": f"{field} must be an ISO date (YYYY-MM-DD), got {value!r}",
            "field": field,
        })


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def validate_transaction_input(data: Mapping) -> Either[dict, dict]:
    """Check a transaction form before it is handed to the store.

    Returns Right with normalized fields (Decimal amount, date) ready for
    ``FinanceStore.add_transaction(**fields)``.
    """
    for name in ("amount", "category", "payment_method", "date"):
        if data.get(name) in (None, ""):
            return _missing(name)

    kind = data.get("kind")
    if kind not in KINDS:
        return Left({
            "error": "invalid_kind",
            "message": f"kind must be one of {', '.join(KINDS)}, got {kind!r}",
            "field": "kind",
        })

    amount = _positive_amount(data["amount"], "amount")
    if amount.is_left():
        return amount
    occurred = _as_date(data["date"], "date")
    if occurred.is_left():
        return occurred

    return Right({
        "kind": kind,
        "amount": amount.get_or_else(None),
        "category": str(data["category"]).strip(),
        "payment_method": str(data["payment_method"]).strip(),
        "date": occurred.get_or_else(None),
        "description": (data.get("description") or "").strip(),
    })


def validate_category_input(data: Mapping) -> Either[dict, dict]:
    name = (data.get("name") or "").strip()
    if not name:
        return _missing("name")
    kind = data.get("kind")
    if kind not in KINDS:
        return Left({
            "error": "invalid_kind",
            "message": f"kind must be one of {', '.join(KINDS)}, got {kind!r}",
            "field": "kind",
        })
    return Right({
        "name": name,
        "color": data.get("color") or "#6b7280",
        "icon": data.get("icon") or "📁",
        "kind": kind,
    })


def validate_budget_input(
    data: Mapping, categories: Optional[Iterable[Category]] = None
) -> Either[dict, dict]:
    """Zero or negative limits are rejected here, so percentages stay finite."""
    category_id = data.get("category_id")
    if not category_id:
        return _missing("category_id")
    if categories is not None and safe_category(categories, category_id).is_none():
        return Left({
            "error": "category_not_found",
            "message": f"Category with ID {category_id} does not exist",
            "field": "category_id",
            "category_id": category_id,
        })

    if data.get("limit") in (None, ""):
        return _missing("limit")
    limit = _positive_amount(data["limit"], "limit")
    if limit.is_left():
        return limit

    period = data.get("period") or "monthly"
    if period not in PERIODS:
        return Left({
            "error": "invalid_period",
            "message": f"period must be one of {', '.join(PERIODS)}, got {period!r}",
            "field": "period",
        })

    fields = {
        "category_id": category_id,
        "limit": limit.get_or_else(None),
        "period": period,
    }
    for name in ("start_date", "end_date"):
        if data.get(name):
            parsed = _as_date(data[name], name)
            if parsed.is_left():
                return parsed
            fields[name] = parsed.get_or_else(None)
    return Right(fields)
