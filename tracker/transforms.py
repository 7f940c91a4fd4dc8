from typing import Tuple, TypeVar

from tracker.domain import Budget

T = TypeVar("T")


def append(items: Tuple[T, ...], item: T) -> Tuple[T, ...]:
    return items + (item,)


def replace_by_id(items: Tuple[T, ...], item: T) -> Tuple[T, ...]:
    """Swap the element sharing ``item.id``; unchanged when there is none."""
    return tuple(item if existing.id == item.id else existing for existing in items)


def remove_by_id(items: Tuple[T, ...], item_id: str) -> Tuple[T, ...]:
    return tuple(filter(lambda existing: existing.id != item_id, items))


def contains_id(items: Tuple[T, ...], item_id: str) -> bool:
    return any(existing.id == item_id for existing in items)


def upsert_budget(budgets: Tuple[Budget, ...], budget: Budget) -> Tuple[Budget, ...]:
    """Keyed by category: any budget for the same category is dropped first."""
    return remove_budget(budgets, budget.category_id) + (budget,)


def remove_budget(budgets: Tuple[Budget, ...], category_id: str) -> Tuple[Budget, ...]:
    return tuple(b for b in budgets if b.category_id != category_id)
