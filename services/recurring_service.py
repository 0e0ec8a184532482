import logging
from datetime import date, datetime
from decimal import Decimal, ROUND_DOWN
from enum import Enum

from models.errors import ValidationError
from models.recurring_rule import RecurringRule, RecurringType
from models.transaction import Transaction, TransactionType
from services.entity_store import EntityStore, new_id
from utils.constants import FALLBACK_CATEGORY, INSTALLMENT_MAX_DAY
from utils.currency import CENTS, to_decimal
from utils.date_helpers import (
    add_months,
    clamp_day_to_month,
    format_month,
    month_start,
    to_local_datetime,
)

logger = logging.getLogger(__name__)


class InstallmentMode(str, Enum):
    TOTAL = "total"                     # amount is split across installments
    PER_INSTALLMENT = "per_installment" # amount is charged every month


class RecurringService:
    def __init__(self, store: EntityStore):
        self._store = store

    def get_all(self) -> list[RecurringRule]:
        return self._store.recurring_rules

    def get_active(self) -> list[RecurringRule]:
        return [r for r in self._store.recurring_rules if r.active]

    def get_by_id(self, rule_id: str) -> RecurringRule | None:
        return self._store.get_recurring_rule(rule_id)

    def create(
        self,
        title: str,
        amount,
        day: int,
        type_=RecurringType.FIXED,
        category: str = "",
    ) -> RecurringRule:
        title = self._validate_title(title)
        rule = self._store.create_recurring_rule(
            title=title,
            amount=amount,
            day=day,
            type_=type_,
            category=(category or "").strip(),
        )
        logger.info("Created recurring rule '%s' on day %d", rule.title, rule.day)
        return rule

    def update(self, rule_id: str, **changes) -> RecurringRule | None:
        if "title" in changes:
            changes["title"] = self._validate_title(changes["title"])
        return self._store.update_recurring_rule(rule_id, **changes)

    def set_active(self, rule_id: str, active: bool) -> RecurringRule | None:
        return self._store.update_recurring_rule(rule_id, active=active)

    def delete(self, rule_id: str) -> RecurringRule | None:
        """Stop future months from generating; existing rows stay."""
        return self._store.delete_recurring_rule(rule_id)

    # ── Materialization ──────────────────────────────────────────────────────

    def ensure_recurring_for_month(self, target_month) -> list[Transaction]:
        """
        Make sure every active rule has exactly one transaction in target_month.
        Returns the newly created transactions (empty when nothing was missing).
        """
        target = month_start(to_local_datetime(target_month).date())
        existing = self._store.transactions
        new_transactions: list[Transaction] = []

        for rule in self.get_active():
            if self._is_materialized(rule, target, existing):
                continue
            new_transactions.append(self._materialize(rule, target))

        if new_transactions:
            self._store.add_transactions(new_transactions)
            logger.info(
                "Materialized %d recurring bill(s) for %s",
                len(new_transactions), format_month(target),
            )
        return new_transactions

    def due_date_for(self, rule: RecurringRule, target_month: date) -> date:
        """rule.day inside target_month, rolled back to month end when it doesn't exist."""
        day = clamp_day_to_month(target_month.year, target_month.month, rule.day)
        return date(target_month.year, target_month.month, day)

    def _is_materialized(self, rule: RecurringRule, target: date, existing: list[Transaction]) -> bool:
        return any(
            t.recurring_id == rule.id
            and (t.date.year, t.date.month) == (target.year, target.month)
            for t in existing
        )

    def _materialize(self, rule: RecurringRule, target: date) -> Transaction:
        is_reminder = rule.type is RecurringType.REMINDER
        due = self.due_date_for(rule, target)
        return self._store.new_transaction(
            TransactionType.EXPENSE,
            Decimal("0") if is_reminder else rule.amount,
            datetime.combine(due, datetime.min.time()),
            description=rule.title,
            category=rule.category or rule.title,
            is_home_expense=True,
            is_paid=False,
            recurring_id=rule.id,
            is_reminder=is_reminder,
        )

    def resolve_reminder(self, tx_id: str, amount) -> Transaction | None:
        """Give a reminder placeholder its real amount; it becomes a normal unpaid bill."""
        tx = self._store.get_transaction(tx_id)
        if tx is None:
            return None
        value = to_decimal(amount)
        if value <= 0:
            raise ValidationError("Amount must be positive.")
        return self._store.update_transaction(
            tx_id, amount=value, is_reminder=False, is_paid=False,
        )

    def pending_reminders(self, month=None) -> list[Transaction]:
        """Reminder placeholders still waiting for an amount, optionally for one month."""
        result = [t for t in self._store.transactions if t.is_reminder]
        if month is not None:
            target = to_local_datetime(month)
            result = [t for t in result if (t.date.year, t.date.month) == (target.year, target.month)]
        return result

    # ── Installments ─────────────────────────────────────────────────────────

    def create_installments(
        self,
        amount,
        count: int,
        start,
        category: str,
        mode: InstallmentMode = InstallmentMode.TOTAL,
        is_paid: bool = False,
        is_home_expense: bool = True,
        account_id: str | None = None,
        description: str = "",
    ) -> list[Transaction]:
        """
        One-shot expansion of a purchase into `count` monthly expenses that
        share an installment_id. Only the first installment inherits is_paid.
        """
        try:
            count = int(count)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid installment count: {count!r}") from None
        if count < 1:
            raise ValidationError("Installment count must be at least 1.")
        value = to_decimal(amount)
        if value <= 0:
            raise ValidationError("Amount must be positive.")
        try:
            mode = InstallmentMode(mode)
        except ValueError:
            raise ValidationError(f"Invalid installment mode: {mode!r}") from None

        base = to_local_datetime(start)
        base_day = base.replace(day=min(base.day, INSTALLMENT_MAX_DAY))
        label = (category or "").strip() or FALLBACK_CATEGORY
        amounts = self._split_amounts(value, count, mode)
        group_id = new_id()

        transactions = []
        for k in range(count):
            due = add_months(base_day.date(), k)
            transactions.append(self._store.new_transaction(
                TransactionType.EXPENSE,
                amounts[k],
                datetime.combine(due, base_day.time()),
                description=description,
                category=f"{label} ({k + 1}/{count})",
                account_id=account_id,
                is_home_expense=is_home_expense,
                is_paid=is_paid if k == 0 else False,
                installment_id=group_id,
            ))
        self._store.add_transactions(transactions)
        logger.info("Created %d installments of '%s'", count, label)
        return transactions

    @staticmethod
    def _split_amounts(value: Decimal, count: int, mode: InstallmentMode) -> list[Decimal]:
        if mode is InstallmentMode.PER_INSTALLMENT:
            return [value] * count
        share = (value / count).quantize(CENTS, rounding=ROUND_DOWN)
        # Rounding leftovers go on the last installment so the parts add up.
        last = value - share * (count - 1)
        return [share] * (count - 1) + [last]

    @staticmethod
    def _validate_title(title: str) -> str:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title cannot be empty.")
        return title
