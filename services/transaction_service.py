from datetime import date, timedelta
from decimal import Decimal

from models.category import CategoryKind
from models.errors import ValidationError
from models.transaction import Transaction, TransactionType
from services.entity_store import EntityStore
from services.metrics_service import MetricsService, sum_amounts
from utils.constants import DEFAULT_INCOME_DESCRIPTION, FALLBACK_CATEGORY
from utils.currency import to_decimal
from utils.date_helpers import same_day


class TransactionService:
    """Business (work) ledger: day-by-day income and expenses per account."""

    def __init__(self, store: EntityStore, metrics: MetricsService):
        self._store = store
        self._metrics = metrics

    def get_daily(self, day=None) -> list[Transaction]:
        ref = day if day is not None else self._store.selected_date
        return [
            t for t in self._store.transactions
            if not t.is_home_expense and same_day(t.date, ref)
        ]

    def daily_summary(self, day=None) -> dict:
        daily = self.get_daily(day)
        income = sum_amounts(daily, TransactionType.INCOME)
        expense = sum_amounts(daily, TransactionType.EXPENSE)
        return {"income": income, "expense": expense, "balance": income - expense}

    def change_date(self, delta_days: int) -> date:
        self._store.set_selected_date(self._store.selected_date + timedelta(days=delta_days))
        return self._store.selected_date.date()

    def monthly_alert(self, account_id: str, amount) -> Decimal | None:
        """Projected monthly-limit percent if this income would cross the alert line."""
        return self._metrics.monthly_alert(account_id, to_decimal(amount))

    def add_income(
        self,
        amount,
        account_id: str,
        description: str = "",
        date=None,
    ) -> Transaction:
        value = self._validate(amount, account_id)
        return self._store.create_transaction(
            TransactionType.INCOME,
            value,
            date if date is not None else self._store.selected_date,
            description=(description or "").strip() or DEFAULT_INCOME_DESCRIPTION,
            account_id=account_id,
            is_home_expense=False,
        )

    def add_expense(
        self,
        amount,
        account_id: str,
        category: str = "",
        new_category: str | None = None,
        date=None,
    ) -> Transaction:
        value = self._validate(amount, account_id)
        new_category = (new_category or "").strip()
        if new_category:
            self._store.add_category(CategoryKind.BUSINESS, new_category)
            category = new_category
        return self._store.create_transaction(
            TransactionType.EXPENSE,
            value,
            date if date is not None else self._store.selected_date,
            category=(category or "").strip() or FALLBACK_CATEGORY,
            account_id=account_id,
            is_home_expense=False,
        )

    def delete(self, tx_id: str):
        self._store.delete_transaction(tx_id)

    def _validate(self, amount, account_id: str) -> Decimal:
        value = to_decimal(amount)
        if value <= 0:
            raise ValidationError("Amount must be positive.")
        if not account_id:
            raise ValidationError("Choose an account.")
        if self._store.get_account(account_id) is None:
            raise ValidationError(f"Unknown account: {account_id}")
        return value
