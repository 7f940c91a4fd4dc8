from decimal import Decimal

from tracker.domain import BudgetProgress
from tracker.events import (
    BUDGET_ALERT,
    TRANSACTION_ADDED,
    Event,
    EventBus,
    check_budget_handler,
)


def make_progress(spent, status, percentage):
    return BudgetProgress("1", "Food", Decimal("500"), Decimal(spent), Decimal("500") - Decimal(spent), percentage, status)


def test_event_bus_subscribe_and_publish():
    bus = EventBus()
    collected = []

    def handler(event: Event, payload: dict) -> dict:
        collected.append((event.name, payload))
        return {"processed": True}

    bus.subscribe(TRANSACTION_ADDED, handler)
    results = bus.publish(TRANSACTION_ADDED, {"id": "t1"})

    assert results == [{"processed": True}]
    assert collected == [(TRANSACTION_ADDED, {"id": "t1"})]


def test_publish_without_subscribers_returns_empty():
    assert EventBus().publish(BUDGET_ALERT, {}) == []


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    bus.subscribe(TRANSACTION_ADDED, lambda e, p: {"handler": 1})
    bus.subscribe(TRANSACTION_ADDED, lambda e, p: {"handler": 2})

    assert bus.publish(TRANSACTION_ADDED, {}) == [{"handler": 1}, {"handler": 2}]


def test_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(event, payload):
        calls.append(payload)
        return {}

    bus.subscribe(TRANSACTION_ADDED, handler)
    bus.publish(TRANSACTION_ADDED, {"n": 1})
    bus.unsubscribe(TRANSACTION_ADDED, handler)
    bus.unsubscribe(TRANSACTION_ADDED, handler)
    bus.publish(TRANSACTION_ADDED, {"n": 2})

    assert calls == [{"n": 1}]


def test_check_budget_handler_tiers():
    event = Event(BUDGET_ALERT, "2025-03-15T10:00:00", {})

    assert check_budget_handler(event, {"progress": make_progress("100", "under", 20.0)}) == {}

    warning = check_budget_handler(event, {"progress": make_progress("420", "warning", 84.0)})
    assert warning["title"] == "Budget almost reached"
    assert "84.0%" in warning["alert"]

    over = check_budget_handler(event, {"progress": make_progress("520", "over", 104.0)})
    assert over["title"] == "Budget exceeded"
    assert over["spent"] == Decimal("520")
    assert over["limit"] == Decimal("500")
