"""Read-only projections of the ledger: balances, MEI limit status and
category breakdowns. Module-level functions are pure; ``MetricsService``
feeds them the store's current collections."""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from models.account import Account
from models.metrics import CategoryTotal, LimitLevel, LimitStatus
from models.transaction import Transaction, TransactionType
from services.entity_store import EntityStore
from utils.constants import (
    ANNUAL_MAX_LIMIT,
    ANNUAL_SAFE_LIMIT,
    FALLBACK_CATEGORY,
    MONTHLY_ALERT_PERCENT,
    MONTHLY_MAX_LIMIT,
    MONTHLY_SAFE_LIMIT,
)
from utils.date_helpers import day_bounds

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def find_account(accounts: Iterable[Account], account_id: str | None) -> Optional[Account]:
    return next((a for a in accounts if a.id == account_id), None)


def sum_amounts(transactions: Iterable[Transaction], type_: TransactionType | None = None) -> Decimal:
    return sum(
        (t.amount for t in transactions if type_ is None or t.type is type_),
        ZERO,
    )


def account_balance(
    accounts: Iterable[Account], transactions: Iterable[Transaction], account_id: str
) -> Decimal:
    """initial_balance + income - expense over the account's business transactions."""
    account = find_account(accounts, account_id)
    if account is None:
        return ZERO
    balance = account.initial_balance
    for t in transactions:
        if t.account_id != account_id or t.is_home_expense:
            continue
        balance += t.signed_amount
    return balance


def limit_status(total: Decimal, safe_limit: Decimal, max_limit: Decimal) -> LimitStatus:
    if total > max_limit:
        level = LimitLevel.CRITICAL
    elif total > safe_limit:
        level = LimitLevel.WARNING
    else:
        level = LimitLevel.SAFE
    return LimitStatus(
        total=total,
        safe_limit=safe_limit,
        max_limit=max_limit,
        percent=total / safe_limit * HUNDRED,
        status=level,
    )


def _income_for(transactions: Iterable[Transaction], account_id: str, match) -> Decimal:
    return sum(
        (
            t.amount for t in transactions
            if t.account_id == account_id
            and t.type is TransactionType.INCOME
            and match(t.date.date())
        ),
        ZERO,
    )


def annual_limit_status(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    account_id: str,
    ref_date: date,
) -> Optional[LimitStatus]:
    """Opening balance plus this year's income against the 81k/97.2k limits. MEI only."""
    account = find_account(accounts, account_id)
    if account is None or not account.is_regulated:
        return None
    income = _income_for(transactions, account_id, lambda d: d.year == ref_date.year)
    return limit_status(account.initial_balance + income, ANNUAL_SAFE_LIMIT, ANNUAL_MAX_LIMIT)


def monthly_limit_status(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    account_id: str,
    ref_date: date,
) -> Optional[LimitStatus]:
    """This month's income against one twelfth of the annual limits. MEI only."""
    account = find_account(accounts, account_id)
    if account is None or not account.is_regulated:
        return None
    income = _income_for(
        transactions, account_id,
        lambda d: (d.year, d.month) == (ref_date.year, ref_date.month),
    )
    return limit_status(income, MONTHLY_SAFE_LIMIT, MONTHLY_MAX_LIMIT)


def category_aggregate(
    transactions: Iterable[Transaction], fallback: str = FALLBACK_CATEGORY
) -> list[CategoryTotal]:
    """Group by category, largest total first; ties keep first-seen order."""
    totals: dict[str, Decimal] = {}
    for t in transactions:
        name = t.category or fallback
        totals[name] = totals.get(name, ZERO) + t.amount
    grand_total = sum(totals.values(), ZERO)
    groups = [
        CategoryTotal(
            name=name,
            total=total,
            percent=(total / grand_total * HUNDRED) if grand_total else ZERO,
        )
        for name, total in totals.items()
    ]
    groups.sort(key=lambda g: g.total, reverse=True)
    return groups


def range_filter(transactions: Iterable[Transaction], start, end) -> list[Transaction]:
    """Transactions dated from the start of start's day through the end of end's day."""
    first, last = day_bounds(start, end)
    return [t for t in transactions if first <= t.date <= last]


class MetricsService:
    def __init__(self, store: EntityStore):
        self._store = store

    def account_balance(self, account_id: str) -> Decimal:
        return account_balance(self._store.accounts, self._store.transactions, account_id)

    def annual_limit_status(self, account_id: str, ref_date: date | None = None) -> Optional[LimitStatus]:
        ref = ref_date or self._store.today()
        return annual_limit_status(self._store.accounts, self._store.transactions, account_id, ref)

    def monthly_limit_status(self, account_id: str, ref_date: date | None = None) -> Optional[LimitStatus]:
        ref = ref_date or self._store.today()
        return monthly_limit_status(self._store.accounts, self._store.transactions, account_id, ref)

    def projected_monthly_percent(
        self, account_id: str, amount: Decimal, ref_date: date | None = None
    ) -> Optional[Decimal]:
        """Monthly-limit percent the account would reach after an extra income."""
        status = self.monthly_limit_status(account_id, ref_date)
        if status is None:
            return None
        return (status.total + amount) / status.safe_limit * HUNDRED

    def monthly_alert(
        self, account_id: str, amount: Decimal, ref_date: date | None = None
    ) -> Optional[Decimal]:
        """Projected percent when it reaches the alert threshold, else None."""
        projected = self.projected_monthly_percent(account_id, amount, ref_date)
        if projected is not None and projected >= MONTHLY_ALERT_PERCENT:
            return projected
        return None

    def category_aggregate(self, transactions: Iterable[Transaction]) -> list[CategoryTotal]:
        return category_aggregate(transactions)

    def range_filter(self, start, end, transactions: Iterable[Transaction] | None = None) -> list[Transaction]:
        source = self._store.transactions if transactions is None else transactions
        return range_filter(source, start, end)
