from datetime import datetime

import pytest

from tracker.domain import Category, PaymentMethod
from tracker.store import FinanceStore

NOW = datetime(2025, 3, 15, 10, 0)


def make_categories():
    return (
        Category("1", "Food", "#ef4444", "🍽️", "expense"),
        Category("2", "Transport", "#3b82f6", "🚗", "expense"),
        Category("3", "Leisure", "#8b5cf6", "🎮", "expense"),
        Category("7", "Salary", "#22c55e", "💰", "income"),
    )


def make_payment_methods():
    return (
        PaymentMethod("1", "Cash", "cash", "💵"),
        PaymentMethod("2", "Credit Card", "card", "💳"),
    )


@pytest.fixture
def store():
    return FinanceStore(
        categories=make_categories(),
        payment_methods=make_payment_methods(),
        clock=lambda: NOW,
    )


@pytest.fixture
def now():
    return NOW
