import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional
from uuid import uuid4

from tracker import transforms
from tracker.config import settings
from tracker.domain import (
    MONTHLY,
    Budget,
    Category,
    ExportSnapshot,
    FinancialSummary,
    Notification,
    PaymentMethod,
    Transaction,
    as_amount,
)
from tracker.events import (
    BUDGET_ALERT,
    BUDGET_DELETED,
    BUDGET_SET,
    CATEGORY_ADDED,
    CATEGORY_DELETED,
    CATEGORY_UPDATED,
    STORE_MUTATIONS,
    SUMMARY_UPDATED,
    TRANSACTION_ADDED,
    TRANSACTION_DELETED,
    TRANSACTION_UPDATED,
    Event,
    EventBus,
    check_budget_handler,
)
from tracker.summary import compute_summary

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid4().hex


class FinanceStore:
    """In-memory owner of transactions, categories, budgets and payment methods.

    Every mutation publishes an event on ``bus``; the store's own handler
    recomputes ``summary`` before the mutating call returns, so a read right
    after a write never sees a stale summary. Update and delete calls with an
    unknown id leave the collections untouched.

    A bus belongs to one store: a second store on the same bus would
    recompute on the first one's mutations. Only the newest
    ``settings.max_notifications`` alerts are kept.
    """

    def __init__(
        self,
        categories: Iterable[Category] = (),
        payment_methods: Iterable[PaymentMethod] = (),
        bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.transactions: tuple[Transaction, ...] = ()
        self.categories: tuple[Category, ...] = tuple(categories)
        self.budgets: tuple[Budget, ...] = ()
        self.payment_methods: tuple[PaymentMethod, ...] = tuple(payment_methods)
        self.notifications: tuple[Notification, ...] = ()
        self.clock = clock
        self.bus = bus or EventBus()
        self._summary = FinancialSummary()

        for name in STORE_MUTATIONS:
            self.bus.subscribe(name, self._on_mutation)
        self.bus.subscribe(BUDGET_ALERT, check_budget_handler)
        self.recalculate()

    @property
    def summary(self) -> FinancialSummary:
        return self._summary

    def recalculate(self) -> FinancialSummary:
        previous = self._summary
        self._summary = compute_summary(
            self.transactions, self.categories, self.budgets, self.clock()
        )
        self.bus.publish(SUMMARY_UPDATED, {"summary": self._summary})
        self._raise_budget_alerts(previous)
        return self._summary

    def _on_mutation(self, event: Event, payload: dict) -> dict:
        logger.debug("%s %s", event.name, payload.get("id", ""))
        return {"summary": self.recalculate()}

    def _raise_budget_alerts(self, previous: FinancialSummary) -> None:
        # only alert when a budget moves into a new warning/over tier
        for progress in self._summary.budget_progress:
            before = previous.progress_for(progress.category_id)
            if before is not None and before.status == progress.status:
                continue
            for result in self.bus.publish(BUDGET_ALERT, {"progress": progress}):
                if "alert" not in result:
                    continue
                self.notifications = transforms.append(
                    self.notifications,
                    Notification(
                        id=new_id(),
                        kind="budget_warning",
                        title=result["title"],
                        message=result["alert"],
                        created_at=self.clock(),
                    ),
                )
                self.notifications = self.notifications[-settings.max_notifications:]

    # transactions

    def add_transaction(
        self,
        kind: str,
        amount,
        category: str,
        payment_method: str,
        date: date,
        description: str = "",
    ) -> Transaction:
        t = Transaction(
            id=new_id(),
            kind=kind,
            amount=as_amount(amount),
            category=category,
            payment_method=payment_method,
            date=date,
            description=description or "",
            created_at=self.clock(),
        )
        self.transactions = transforms.append(self.transactions, t)
        self.bus.publish(TRANSACTION_ADDED, {"id": t.id, "transaction": t})
        return t

    def update_transaction(self, transaction: Transaction) -> None:
        if not transforms.contains_id(self.transactions, transaction.id):
            logger.debug("update_transaction: no transaction with id %s", transaction.id)
            return
        self.transactions = transforms.replace_by_id(self.transactions, transaction)
        self.bus.publish(TRANSACTION_UPDATED, {"id": transaction.id, "transaction": transaction})

    def delete_transaction(self, transaction_id: str) -> None:
        if not transforms.contains_id(self.transactions, transaction_id):
            logger.debug("delete_transaction: no transaction with id %s", transaction_id)
            return
        self.transactions = transforms.remove_by_id(self.transactions, transaction_id)
        self.bus.publish(TRANSACTION_DELETED, {"id": transaction_id})

    # categories

    def add_category(self, name: str, color: str, icon: str, kind: str) -> Category:
        c = Category(id=new_id(), name=name, color=color, icon=icon, kind=kind)
        self.categories = transforms.append(self.categories, c)
        self.bus.publish(CATEGORY_ADDED, {"id": c.id, "category": c})
        return c

    def update_category(self, category: Category) -> None:
        if not transforms.contains_id(self.categories, category.id):
            logger.debug("update_category: no category with id %s", category.id)
            return
        self.categories = transforms.replace_by_id(self.categories, category)
        self.bus.publish(CATEGORY_UPDATED, {"id": category.id, "category": category})

    def delete_category(self, category_id: str) -> None:
        """Transactions keep the deleted name as free text; its budget drops out of progress."""
        if not transforms.contains_id(self.categories, category_id):
            logger.debug("delete_category: no category with id %s", category_id)
            return
        self.categories = transforms.remove_by_id(self.categories, category_id)
        self.bus.publish(CATEGORY_DELETED, {"id": category_id})

    # budgets

    def set_budget(
        self,
        category_id: str,
        limit,
        period: str = MONTHLY,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Budget:
        b = Budget(
            id=new_id(),
            category_id=category_id,
            limit=as_amount(limit),
            period=period,
            start_date=start_date or self.clock().date(),
            end_date=end_date,
        )
        self.budgets = transforms.upsert_budget(self.budgets, b)
        self.bus.publish(BUDGET_SET, {"id": b.id, "budget": b})
        return b

    def delete_budget(self, category_id: str) -> None:
        if self.get_budget(category_id) is None:
            logger.debug("delete_budget: no budget for category %s", category_id)
            return
        self.budgets = transforms.remove_budget(self.budgets, category_id)
        self.bus.publish(BUDGET_DELETED, {"id": category_id})

    # lookups

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def get_category_by_name(self, name: str, kind: Optional[str] = None) -> Optional[Category]:
        return next(
            (c for c in self.categories if c.name == name and (kind is None or c.kind == kind)),
            None,
        )

    def get_payment_method(self, method_id: str) -> Optional[PaymentMethod]:
        return next((p for p in self.payment_methods if p.id == method_id), None)

    def get_budget(self, category_id: str) -> Optional[Budget]:
        return next((b for b in self.budgets if b.category_id == category_id), None)

    def mark_notifications_read(self) -> None:
        self.notifications = tuple(
            replace(n, is_read=True)
            for n in self.notifications
        )

    def export_snapshot(self, transactions: Optional[Iterable[Transaction]] = None) -> ExportSnapshot:
        """Bundle the current state; ``transactions`` narrows the export to a filtered view."""
        return ExportSnapshot(
            transactions=self.transactions if transactions is None else tuple(transactions),
            categories=self.categories,
            budgets=self.budgets,
            payment_methods=self.payment_methods,
            exported_at=self.clock().isoformat(),
            version=settings.export_version,
        )
