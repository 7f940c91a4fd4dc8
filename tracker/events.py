import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from tracker.domain import OVER, WARNING, BudgetProgress

__all__ = [
    'Event', 'EventBus',
    'TRANSACTION_ADDED', 'TRANSACTION_UPDATED', 'TRANSACTION_DELETED',
    'CATEGORY_ADDED', 'CATEGORY_UPDATED', 'CATEGORY_DELETED',
    'BUDGET_SET', 'BUDGET_DELETED', 'SUMMARY_UPDATED', 'BUDGET_ALERT',
    'STORE_MUTATIONS', 'check_budget_handler',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    """Synchronous publish/subscribe; handlers run inline, in subscription order."""

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Event, dict], dict]]] = {}

    def subscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        handlers = self._subscribers.setdefault(name, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )
        return [handler(event, payload) for handler in list(self._subscribers[name])]

    def unsubscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if name in self._subscribers and handler in self._subscribers[name]:
            self._subscribers[name].remove(handler)


TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_UPDATED = "TRANSACTION_UPDATED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
CATEGORY_ADDED = "CATEGORY_ADDED"
CATEGORY_UPDATED = "CATEGORY_UPDATED"
CATEGORY_DELETED = "CATEGORY_DELETED"
BUDGET_SET = "BUDGET_SET"
BUDGET_DELETED = "BUDGET_DELETED"
SUMMARY_UPDATED = "SUMMARY_UPDATED"
BUDGET_ALERT = "BUDGET_ALERT"

# every event after which the summary must be recomputed
STORE_MUTATIONS = (
    TRANSACTION_ADDED, TRANSACTION_UPDATED, TRANSACTION_DELETED,
    CATEGORY_ADDED, CATEGORY_UPDATED, CATEGORY_DELETED,
    BUDGET_SET, BUDGET_DELETED,
)


def check_budget_handler(event: Event, payload: dict) -> dict:
    progress: BudgetProgress = payload["progress"]

    if progress.status == OVER:
        logger.info("Budget exceeded for %s", progress.category_name)
        return {
            "alert": f"Budget exceeded for {progress.category_name}: "
                     f"{progress.spent} / {progress.budget} ({progress.percentage:.1f}%)",
            "title": "Budget exceeded",
            "category_id": progress.category_id,
            "spent": progress.spent,
            "limit": progress.budget,
        }
    if progress.status == WARNING:
        logger.info("Budget warning for %s", progress.category_name)
        return {
            "alert": f"{progress.category_name} has used {progress.percentage:.1f}% "
                     f"of its budget ({progress.spent} / {progress.budget})",
            "title": "Budget almost reached",
            "category_id": progress.category_id,
            "spent": progress.spent,
            "limit": progress.budget,
        }
    return {}
