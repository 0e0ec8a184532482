"""
Wire schemas for the KV store and backup files.

Every collection is stored as JSON with camelCase keys, the same layout backup
files use, including older ones with float amounts and UTC timestamps.
Records validate on the way in and convert to the frozen domain dataclasses
with ``to_model()``; nothing partially-typed ever reaches the store.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from models.account import Account, AccountType
from models.ledger_state import LedgerState
from models.recurring_rule import RecurringRule, RecurringType
from models.report_window import ReportFilter, ReportWindow
from models.transaction import Transaction, TransactionType
from utils.constants import (
    DEFAULT_CUSTOM_CATEGORIES,
    DEFAULT_HOME_CATEGORIES,
    EXPORT_VERSION,
)
from utils.currency import to_decimal
from utils.date_helpers import month_start, to_local_datetime


def _coerce_datetime(value):
    if value is None or value == "":
        return None
    try:
        return to_local_datetime(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from None


def _coerce_amount(value):
    if value is None or value == "":
        return Decimal("0")
    return to_decimal(value)


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_row(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ENTITY RECORDS
# =============================================================================

class TransactionRecord(_Record):
    id: str = Field(..., min_length=1)
    created_at: Optional[datetime] = None
    type: TransactionType
    amount: Decimal = Field(..., ge=0)
    description: Optional[str] = ""
    category: Optional[str] = ""
    date: datetime
    account_id: Optional[str] = None
    is_home_expense: bool = False
    is_paid: Optional[bool] = None
    recurring_id: Optional[str] = None
    installment_id: Optional[str] = None
    is_reminder: bool = False

    @field_validator("created_at", "date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return _coerce_datetime(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return _coerce_amount(value)

    @field_validator("account_id", mode="before")
    @classmethod
    def _blank_account(cls, value):
        return value or None

    @model_validator(mode="after")
    def _reminder_has_no_amount(self):
        if self.is_reminder and self.amount != 0:
            raise ValueError("reminder transactions must have amount 0")
        return self

    def to_model(self) -> Transaction:
        return Transaction(
            id=self.id,
            created_at=self.created_at or self.date,
            type=self.type,
            amount=self.amount,
            date=self.date,
            description=self.description or "",
            category=self.category or "",
            account_id=self.account_id,
            is_home_expense=self.is_home_expense,
            is_paid=self.is_paid,
            recurring_id=self.recurring_id,
            installment_id=self.installment_id,
            is_reminder=self.is_reminder,
        )

    @classmethod
    def from_model(cls, tx: Transaction) -> "TransactionRecord":
        return cls(
            id=tx.id,
            created_at=tx.created_at,
            type=tx.type,
            amount=tx.amount,
            description=tx.description,
            category=tx.category,
            date=tx.date,
            account_id=tx.account_id,
            is_home_expense=tx.is_home_expense,
            is_paid=tx.is_paid,
            recurring_id=tx.recurring_id,
            installment_id=tx.installment_id,
            is_reminder=tx.is_reminder,
        )


class AccountRecord(_Record):
    id: str = Field(..., min_length=1)
    name: str
    type: AccountType = AccountType.CASH
    initial_balance: Decimal = Decimal("0")
    cnpj: Optional[str] = ""
    description: Optional[str] = ""

    @field_validator("initial_balance", mode="before")
    @classmethod
    def _parse_initial(cls, value):
        return _coerce_amount(value)

    def to_model(self) -> Account:
        return Account(
            id=self.id,
            name=self.name,
            type=self.type,
            initial_balance=self.initial_balance,
            cnpj=self.cnpj or "",
            description=self.description or "",
        )

    @classmethod
    def from_model(cls, account: Account) -> "AccountRecord":
        return cls(
            id=account.id,
            name=account.name,
            type=account.type,
            initial_balance=account.initial_balance,
            cnpj=account.cnpj,
            description=account.description,
        )


class RecurringRuleRecord(_Record):
    id: str = Field(..., min_length=1)
    title: str
    category: Optional[str] = ""
    amount: Decimal = Field(Decimal("0"), ge=0)
    day: int = Field(..., ge=1, le=31)
    type: RecurringType = RecurringType.FIXED
    active: bool = True

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return _coerce_amount(value)

    def to_model(self) -> RecurringRule:
        return RecurringRule(
            id=self.id,
            title=self.title,
            category=self.category or "",
            amount=self.amount,
            day=self.day,
            type=self.type,
            active=self.active,
        )

    @classmethod
    def from_model(cls, rule: RecurringRule) -> "RecurringRuleRecord":
        return cls(
            id=rule.id,
            title=rule.title,
            category=rule.category,
            amount=rule.amount,
            day=rule.day,
            type=rule.type,
            active=rule.active,
        )


# =============================================================================
# FULL SNAPSHOT
# =============================================================================

class SnapshotRecord(_Record):
    """A whole-ledger backup. Only transactions and accounts are mandatory."""

    export_version: Optional[int] = None
    transactions: list[TransactionRecord]
    accounts: list[AccountRecord]
    recurring_rules: list[RecurringRuleRecord] = Field(default_factory=list)
    custom_categories: Optional[list[str]] = None
    home_categories: Optional[list[str]] = None
    selected_date: Optional[datetime] = None
    selected_month: Optional[datetime] = None
    report_filter: Optional[ReportFilter] = None
    report_start_date: Optional[date] = None
    report_end_date: Optional[date] = None

    @field_validator("selected_date", "selected_month", mode="before")
    @classmethod
    def _parse_ui_dates(cls, value):
        return _coerce_datetime(value)

    @field_validator("report_start_date", "report_end_date", mode="before")
    @classmethod
    def _plain_date(cls, value):
        dt = _coerce_datetime(value)
        return dt.date() if dt is not None else None

    def to_state(self, now: datetime) -> LedgerState:
        selected_date = self.selected_date or now
        selected_month = month_start((self.selected_month or now).date())
        filter_ = self.report_filter or ReportFilter.MONTHLY
        if self.report_start_date and self.report_end_date:
            window = ReportWindow(filter_, self.report_start_date, self.report_end_date)
        else:
            window = ReportWindow.for_filter(filter_, now.date())
        return LedgerState(
            transactions=[t.to_model() for t in self.transactions],
            accounts=[a.to_model() for a in self.accounts],
            recurring_rules=[r.to_model() for r in self.recurring_rules],
            custom_categories=list(
                DEFAULT_CUSTOM_CATEGORIES if self.custom_categories is None else self.custom_categories
            ),
            home_categories=list(
                DEFAULT_HOME_CATEGORIES if self.home_categories is None else self.home_categories
            ),
            selected_date=selected_date,
            selected_month=selected_month,
            report_window=window,
        )

    @classmethod
    def from_state(cls, state: LedgerState) -> "SnapshotRecord":
        return cls(
            export_version=EXPORT_VERSION,
            transactions=[TransactionRecord.from_model(t) for t in state.transactions],
            accounts=[AccountRecord.from_model(a) for a in state.accounts],
            recurring_rules=[RecurringRuleRecord.from_model(r) for r in state.recurring_rules],
            custom_categories=list(state.custom_categories),
            home_categories=list(state.home_categories),
            selected_date=state.selected_date,
            selected_month=datetime.combine(state.selected_month, datetime.min.time()),
            report_filter=state.report_window.filter,
            report_start_date=state.report_window.start_date,
            report_end_date=state.report_window.end_date,
        )
