import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from tracker.config import settings
from tracker.domain import Category, PaymentMethod
from tracker.exceptions import SeedDataError, ValidationError
from tracker.store import FinanceStore
from tracker.validation import ensure, validate_budget_input, validate_transaction_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedData:
    categories: tuple[Category, ...]
    payment_methods: tuple[PaymentMethod, ...]
    transactions: tuple[dict, ...]
    budgets: tuple[dict, ...]


def load_seed(path: Union[str, Path, None] = None) -> SeedData:
    """Read default categories, payment methods and sample records from JSON.

    Sample transactions and budgets stay raw dicts; they are validated when
    replayed into a store.
    """
    path = Path(path or settings.sample_data_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return SeedData(
            categories=tuple(Category(**c) for c in data["categories"]),
            payment_methods=tuple(PaymentMethod(**p) for p in data["payment_methods"]),
            transactions=tuple(data.get("transactions", ())),
            budgets=tuple(data.get("budgets", ())),
        )
    except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
        raise SeedDataError(f"cannot load seed data from {path}: {e}") from e


def new_store(seed: Optional[SeedData] = None, **kwargs) -> FinanceStore:
    """A store holding the default categories and payment methods, no transactions."""
    seed = seed or load_seed()
    return FinanceStore(categories=seed.categories, payment_methods=seed.payment_methods, **kwargs)


def populate_sample_data(store: FinanceStore, seed: Optional[SeedData] = None) -> None:
    """Replay sample transactions and budgets through the regular store operations.

    Every record is validated before the first one is added, so a bad record
    leaves the store untouched.
    """
    seed = seed or load_seed()
    try:
        transactions = [ensure(validate_transaction_input(raw)) for raw in seed.transactions]
        budgets = [ensure(validate_budget_input(raw, store.categories)) for raw in seed.budgets]
    except ValidationError as e:
        raise SeedDataError(f"invalid sample record: {e}") from e

    for fields in transactions:
        store.add_transaction(**fields)
    for fields in budgets:
        store.set_budget(**fields)
    logger.info(
        "Loaded %d sample transactions and %d budgets",
        len(seed.transactions), len(seed.budgets),
    )
