"""In-memory owner of every ledger collection, persisted to the KV store.

All mutators validate, swap in a new LedgerState and persist before
returning. Readers get fresh lists of frozen models, never the store's own
containers.
"""
import dataclasses
import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

from database.account_dao import AccountDAO
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.account import Account, AccountType
from models.category import CategoryKind
from models.errors import ValidationError
from models.ledger_state import LedgerState
from models.recurring_rule import RecurringRule, RecurringType
from models.report_window import ReportFilter, ReportWindow
from models.transaction import Transaction, TransactionType
from utils.constants import (
    DEFAULT_ACCOUNT_ID,
    DEFAULT_ACCOUNT_NAME,
    DEFAULT_CUSTOM_CATEGORIES,
    DEFAULT_HOME_CATEGORIES,
    STORAGE_KEYS,
)
from utils.currency import to_decimal
from utils.date_helpers import month_start, now, to_local_datetime

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = ("id", "created_at")


def default_accounts() -> list[Account]:
    return [Account(id=DEFAULT_ACCOUNT_ID, name=DEFAULT_ACCOUNT_NAME, type=AccountType.CASH)]


def new_id() -> str:
    return str(uuid.uuid4())


class EntityStore:
    def __init__(self, db: DatabaseManager, clock: Callable[[], datetime] = now):
        self._db = db
        self._clock = clock
        self._tx_dao = TransactionDAO(db)
        self._account_dao = AccountDAO(db)
        self._recurring_dao = RecurringDAO(db)
        self._category_dao = CategoryDAO(db)
        self._state = self.default_state()

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def default_state(self) -> LedgerState:
        current = self._clock()
        return LedgerState(
            transactions=[],
            accounts=default_accounts(),
            recurring_rules=[],
            custom_categories=list(DEFAULT_CUSTOM_CATEGORIES),
            home_categories=list(DEFAULT_HOME_CATEGORIES),
            selected_date=current,
            selected_month=month_start(current.date()),
            report_window=ReportWindow.for_filter(ReportFilter.MONTHLY, current.date()),
        )

    def load(self):
        """Read every collection from the KV store, seeding defaults for missing keys."""
        defaults = self.default_state()
        missing = [key for key in STORAGE_KEYS if not self._db.has_key(key)]
        transactions = self._tx_dao.get_all()
        accounts = self._account_dao.get_all()
        rules = self._recurring_dao.get_all()
        custom = self._category_dao.get_names(CategoryDAO.BUSINESS)
        home = self._category_dao.get_names(CategoryDAO.HOME)

        self._state = dataclasses.replace(
            defaults,
            transactions=transactions if transactions is not None else [],
            accounts=accounts if accounts is not None else defaults.accounts,
            recurring_rules=rules if rules is not None else [],
            custom_categories=custom if custom is not None else defaults.custom_categories,
            home_categories=home if home is not None else defaults.home_categories,
        )
        if missing:
            logger.info("Seeding default ledger data for %s", ", ".join(missing))
            self.persist()
        logger.debug(
            "Loaded %d transactions, %d accounts, %d recurring rules",
            len(self._state.transactions), len(self._state.accounts),
            len(self._state.recurring_rules),
        )

    def persist(self):
        """Write every collection as one sqlite transaction."""
        state = self._state
        try:
            self._tx_dao.save_all(state.transactions)
            self._account_dao.save_all(state.accounts)
            self._recurring_dao.save_all(state.recurring_rules)
            self._category_dao.save_names(CategoryDAO.BUSINESS, state.custom_categories)
            self._category_dao.save_names(CategoryDAO.HOME, state.home_categories)
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

    def _apply(self, **changes):
        """Swap in a new state and persist it; the old state survives a failed write."""
        previous = self._state
        self._state = dataclasses.replace(previous, **changes)
        try:
            self.persist()
        except Exception:
            self._state = previous
            raise

    def export_state(self) -> LedgerState:
        return self._state.copy()

    def replace_state(self, state: LedgerState):
        """Replace everything at once (backup restore)."""
        fresh = state.copy()
        self._apply(**{f.name: getattr(fresh, f.name) for f in dataclasses.fields(fresh)})
        logger.info("Ledger state replaced (%d transactions)", len(fresh.transactions))

    def reset(self):
        """Wipe all data back to the defaults."""
        self.replace_state(self.default_state())
        logger.info("Ledger reset to defaults")

    # ── Readers ──────────────────────────────────────────────────────────────

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._state.transactions)

    @property
    def accounts(self) -> list[Account]:
        return list(self._state.accounts)

    @property
    def recurring_rules(self) -> list[RecurringRule]:
        return list(self._state.recurring_rules)

    @property
    def business_categories(self) -> list[str]:
        return list(self._state.custom_categories)

    @property
    def home_categories(self) -> list[str]:
        return list(self._state.home_categories)

    def categories(self, kind: CategoryKind) -> list[str]:
        if kind is CategoryKind.HOME:
            return self.home_categories
        return self.business_categories

    def get_transaction(self, tx_id: str) -> Optional[Transaction]:
        return next((t for t in self._state.transactions if t.id == tx_id), None)

    def get_account(self, account_id: str | None) -> Optional[Account]:
        if account_id is None:
            return None
        return next((a for a in self._state.accounts if a.id == account_id), None)

    def get_recurring_rule(self, rule_id: str) -> Optional[RecurringRule]:
        return next((r for r in self._state.recurring_rules if r.id == rule_id), None)

    # ── UI-adjacent state (in memory, travels with backups) ─────────────────

    @property
    def selected_date(self) -> datetime:
        return self._state.selected_date

    @property
    def selected_month(self) -> date:
        return self._state.selected_month

    @property
    def report_window(self) -> ReportWindow:
        return self._state.report_window

    def set_selected_date(self, value):
        self._state.selected_date = self._coerce_date(value)

    def set_selected_month(self, value):
        self._state.selected_month = month_start(self._coerce_date(value).date())

    def set_report_window(self, window: ReportWindow):
        self._state.report_window = window

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    # ── Transactions ─────────────────────────────────────────────────────────

    def new_transaction(
        self,
        type_,
        amount,
        date=None,
        *,
        description: str = "",
        category: str = "",
        account_id: str | None = None,
        is_home_expense: bool = False,
        is_paid: bool | None = None,
        recurring_id: str | None = None,
        installment_id: str | None = None,
        is_reminder: bool = False,
    ) -> Transaction:
        """Validate and build a transaction without storing it."""
        tx = Transaction(
            id=new_id(),
            created_at=self._clock(),
            type=self._coerce_type(type_),
            amount=self._coerce_amount(amount),
            date=self._coerce_date(date) if date is not None else self._clock(),
            description=description or "",
            category=category or "",
            account_id=account_id or None,
            is_home_expense=bool(is_home_expense),
            is_paid=is_paid,
            recurring_id=recurring_id,
            installment_id=installment_id,
            is_reminder=bool(is_reminder),
        )
        self._check_reminder(tx)
        return tx

    def create_transaction(self, type_, amount, date=None, **fields) -> Transaction:
        tx = self.new_transaction(type_, amount, date, **fields)
        self.add_transactions([tx])
        return tx

    def add_transactions(self, transactions: list[Transaction]):
        """Append already-built transactions with a single persist."""
        if not transactions:
            return
        self._apply(transactions=self._state.transactions + list(transactions))
        logger.debug("Stored %d transaction(s)", len(transactions))

    def update_transaction(self, tx_id: str, **changes) -> Optional[Transaction]:
        """Shallow-merge changes into a transaction. Unknown id is a no-op."""
        idx = self._index_of(self._state.transactions, tx_id)
        if idx is None:
            return None
        self._reject_immutable(changes)
        if "type" in changes:
            changes["type"] = self._coerce_type(changes["type"])
        if "amount" in changes:
            changes["amount"] = self._coerce_amount(changes["amount"])
        if "date" in changes:
            changes["date"] = self._coerce_date(changes["date"])
        updated = self._replace(self._state.transactions[idx], changes)
        self._check_reminder(updated)

        transactions = list(self._state.transactions)
        transactions[idx] = updated
        self._apply(transactions=transactions)
        return updated

    def delete_transaction(self, tx_id: str):
        remaining = [t for t in self._state.transactions if t.id != tx_id]
        if len(remaining) != len(self._state.transactions):
            self._apply(transactions=remaining)

    # ── Accounts ─────────────────────────────────────────────────────────────

    def create_account(
        self,
        name: str,
        type_=AccountType.CASH,
        initial_balance=Decimal("0"),
        cnpj: str = "",
        description: str = "",
    ) -> Account:
        account = Account(
            id=new_id(),
            name=name,
            type=self._coerce_account_type(type_),
            initial_balance=self._coerce_amount(initial_balance, allow_negative=True),
            cnpj=cnpj or "",
            description=description or "",
        )
        self._apply(accounts=self._state.accounts + [account])
        return account

    def update_account(self, account_id: str, **changes) -> Optional[Account]:
        idx = self._index_of(self._state.accounts, account_id)
        if idx is None:
            return None
        self._reject_immutable(changes)
        if "type" in changes:
            changes["type"] = self._coerce_account_type(changes["type"])
        if "initial_balance" in changes:
            changes["initial_balance"] = self._coerce_amount(
                changes["initial_balance"], allow_negative=True
            )
        updated = self._replace(self._state.accounts[idx], changes)
        accounts = list(self._state.accounts)
        accounts[idx] = updated
        self._apply(accounts=accounts)
        return updated

    def delete_account(self, account_id: str):
        """Remove the account only; transactions keep their now-dangling account_id."""
        remaining = [a for a in self._state.accounts if a.id != account_id]
        if len(remaining) != len(self._state.accounts):
            self._apply(accounts=remaining)

    # ── Recurring rules ──────────────────────────────────────────────────────

    def create_recurring_rule(
        self,
        title: str,
        amount,
        day: int,
        type_=RecurringType.FIXED,
        category: str = "",
        active: bool = True,
    ) -> RecurringRule:
        rule = RecurringRule(
            id=new_id(),
            title=title,
            category=category or "",
            amount=self._coerce_amount(amount),
            day=self._coerce_day(day),
            type=self._coerce_rule_type(type_),
            active=bool(active),
        )
        self._apply(recurring_rules=self._state.recurring_rules + [rule])
        return rule

    def update_recurring_rule(self, rule_id: str, **changes) -> Optional[RecurringRule]:
        idx = self._index_of(self._state.recurring_rules, rule_id)
        if idx is None:
            return None
        self._reject_immutable(changes)
        if "amount" in changes:
            changes["amount"] = self._coerce_amount(changes["amount"])
        if "day" in changes:
            changes["day"] = self._coerce_day(changes["day"])
        if "type" in changes:
            changes["type"] = self._coerce_rule_type(changes["type"])
        updated = self._replace(self._state.recurring_rules[idx], changes)
        rules = list(self._state.recurring_rules)
        rules[idx] = updated
        self._apply(recurring_rules=rules)
        return updated

    def delete_recurring_rule(self, rule_id: str) -> Optional[RecurringRule]:
        """Deactivate; materialized transactions are left alone."""
        return self.update_recurring_rule(rule_id, active=False)

    # ── Categories ───────────────────────────────────────────────────────────

    def add_category(self, kind: CategoryKind, name: str) -> bool:
        """Append name to the vocabulary unless already present. Returns True if added."""
        if kind is CategoryKind.HOME:
            if name in self._state.home_categories:
                return False
            self._apply(home_categories=self._state.home_categories + [name])
        else:
            if name in self._state.custom_categories:
                return False
            self._apply(custom_categories=self._state.custom_categories + [name])
        return True

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _index_of(items: list, item_id: str) -> Optional[int]:
        return next((i for i, item in enumerate(items) if item.id == item_id), None)

    @staticmethod
    def _reject_immutable(changes: dict):
        for name in _IMMUTABLE_FIELDS:
            if name in changes:
                raise ValidationError(f"Field '{name}' cannot be changed.")

    @staticmethod
    def _replace(item, changes: dict):
        try:
            return dataclasses.replace(item, **changes)
        except TypeError as exc:
            raise ValidationError(f"Unknown field in update: {exc}") from None

    @staticmethod
    def _coerce_type(value) -> TransactionType:
        if value is None or value == "":
            raise ValidationError("Transaction type is required.")
        try:
            return TransactionType(value)
        except ValueError:
            raise ValidationError(f"Invalid transaction type: {value!r}") from None

    @staticmethod
    def _coerce_account_type(value) -> AccountType:
        try:
            return AccountType(value)
        except ValueError:
            raise ValidationError(f"Invalid account type: {value!r}") from None

    @staticmethod
    def _coerce_rule_type(value) -> RecurringType:
        try:
            return RecurringType(value)
        except ValueError:
            raise ValidationError(f"Invalid recurring rule type: {value!r}") from None

    @staticmethod
    def _coerce_amount(value, allow_negative: bool = False) -> Decimal:
        amount = to_decimal(value)
        if amount < 0 and not allow_negative:
            raise ValidationError("Amount cannot be negative.")
        return amount

    @staticmethod
    def _coerce_day(value) -> int:
        try:
            day = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid day of month: {value!r}") from None
        if not 1 <= day <= 31:
            raise ValidationError("Day of month must be between 1 and 31.")
        return day

    @staticmethod
    def _coerce_date(value) -> datetime:
        try:
            return to_local_datetime(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid date: {value!r}") from None

    @staticmethod
    def _check_reminder(tx: Transaction):
        if tx.is_reminder and tx.amount != 0:
            raise ValidationError("A reminder must keep amount 0 until resolved.")
