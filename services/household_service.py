from datetime import date, datetime

from models.category import CategoryKind
from models.errors import ValidationError
from models.transaction import Transaction, TransactionType
from services.entity_store import EntityStore
from services.metrics_service import sum_amounts
from services.recurring_service import RecurringService
from utils.currency import to_decimal
from utils.date_helpers import add_months, same_month, to_local_datetime


class HouseholdService:
    """Household bills by month. Reads always materialize recurring bills first."""

    def __init__(self, store: EntityStore, recurring_service: RecurringService):
        self._store = store
        self._recurring = recurring_service

    def get_month(self, month=None) -> list[Transaction]:
        target = month if month is not None else self._store.selected_month
        self._recurring.ensure_recurring_for_month(target)
        return [
            t for t in self._store.transactions
            if t.is_home_expense and same_month(t.date, target)
        ]

    def month_summary(self, month=None) -> dict:
        bills = self.get_month(month)
        paid = [t for t in bills if t.is_paid]
        unpaid = [t for t in bills if not t.is_paid]
        return {
            "total": sum_amounts(bills),
            "paid": sum_amounts(paid),
            "unpaid": sum_amounts(unpaid),
            "count": len(bills),
            "pending_reminders": sum(1 for t in bills if t.is_reminder),
        }

    def change_month(self, delta: int) -> date:
        """Move the selected month and materialize its recurring bills."""
        target = add_months(self._store.selected_month, delta)
        self._store.set_selected_month(target)
        self._recurring.ensure_recurring_for_month(target)
        return target

    def add_home_expense(
        self,
        amount,
        category: str,
        is_paid: bool = False,
        month=None,
    ) -> Transaction:
        value = to_decimal(amount)
        if value <= 0:
            raise ValidationError("Amount must be positive.")
        category = (category or "").strip()
        if not category:
            raise ValidationError("Choose a category.")
        self._store.add_category(CategoryKind.HOME, category)
        when = to_local_datetime(month) if month is not None else datetime.combine(
            self._store.selected_month, datetime.min.time()
        )
        return self._store.create_transaction(
            TransactionType.EXPENSE,
            value,
            when,
            category=category,
            is_home_expense=True,
            is_paid=bool(is_paid),
        )

    def toggle_paid(self, tx_id: str) -> Transaction | None:
        tx = self._store.get_transaction(tx_id)
        if tx is None:
            return None
        return self._store.update_transaction(tx_id, is_paid=not tx.is_paid)
