"""Tests for balances, MEI limit status and category breakdowns."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from models.account import Account, AccountType
from models.metrics import LimitLevel
from models.transaction import Transaction, TransactionType
from services.metrics_service import (
    account_balance,
    annual_limit_status,
    category_aggregate,
    limit_status,
    monthly_limit_status,
    range_filter,
)
from utils.constants import (
    ANNUAL_MAX_LIMIT,
    ANNUAL_SAFE_LIMIT,
    MONTHLY_MAX_LIMIT,
    MONTHLY_SAFE_LIMIT,
)

MEI = Account(id="mei", name="MEI", type=AccountType.MEI)
CASH = Account(id="cash", name="Caixa", type=AccountType.CASH, initial_balance=Decimal("50"))

_counter = 0


def tx(type_, amount, when=datetime(2026, 3, 10), **fields) -> Transaction:
    global _counter
    _counter += 1
    return Transaction(
        id=f"t{_counter}",
        created_at=when,
        type=TransactionType(type_),
        amount=Decimal(amount),
        date=when,
        **fields,
    )


class TestAccountBalance:
    """Tests for per-account running balances."""

    def test_initial_plus_income_minus_expense(self):
        txs = [
            tx("income", "200", account_id="cash"),
            tx("expense", "30", account_id="cash"),
            tx("income", "999", account_id="mei"),
        ]
        assert account_balance([CASH, MEI], txs, "cash") == Decimal("220")

    def test_household_rows_do_not_touch_balance(self):
        txs = [
            tx("income", "100", account_id="cash"),
            tx("expense", "40", account_id="cash", is_home_expense=True),
        ]
        assert account_balance([CASH], txs, "cash") == Decimal("150")

    def test_balance_is_additive(self):
        a = [tx("income", "10", account_id="cash")]
        b = [tx("expense", "4", account_id="cash")]
        combined = account_balance([CASH], a + b, "cash")
        assert combined == CASH.initial_balance + Decimal("10") - Decimal("4")

    def test_unknown_account_is_zero(self):
        assert account_balance([CASH], [tx("income", "10", account_id="gone")], "gone") == 0


class TestLimitStatus:
    """Tests for the safe/warning/critical thresholds."""

    @pytest.mark.parametrize("total, expected", [
        ("0", LimitLevel.SAFE),
        ("81000", LimitLevel.SAFE),
        ("81000.01", LimitLevel.WARNING),
        ("97200", LimitLevel.WARNING),
        ("97200.01", LimitLevel.CRITICAL),
    ])
    def test_annual_thresholds(self, total, expected):
        status = limit_status(Decimal(total), ANNUAL_SAFE_LIMIT, ANNUAL_MAX_LIMIT)
        assert status.status is expected

    def test_percent_of_safe_limit(self):
        status = limit_status(Decimal("40500"), ANNUAL_SAFE_LIMIT, ANNUAL_MAX_LIMIT)
        assert status.percent == Decimal("50")
        assert status.remaining == Decimal("40500")

    def test_monthly_limits_are_one_twelfth(self):
        assert MONTHLY_SAFE_LIMIT == Decimal("6750")
        assert MONTHLY_MAX_LIMIT == Decimal("8100")

    def test_annual_counts_opening_balance_and_this_years_income(self):
        account = Account(id="mei", name="MEI", type=AccountType.MEI, initial_balance=Decimal("80000"))
        txs = [
            tx("income", "2000", datetime(2026, 2, 1), account_id="mei"),
            tx("income", "5000", datetime(2025, 12, 31), account_id="mei"),
            tx("expense", "9000", datetime(2026, 2, 1), account_id="mei"),
        ]
        status = annual_limit_status([account], txs, "mei", date(2026, 3, 15))
        assert status.total == Decimal("82000")
        assert status.status is LimitLevel.WARNING

    def test_monthly_counts_only_this_months_income(self):
        txs = [
            tx("income", "7000", datetime(2026, 3, 1), account_id="mei"),
            tx("income", "1000", datetime(2026, 3, 31, 23, 59), account_id="mei"),
            tx("income", "5000", datetime(2026, 2, 28), account_id="mei"),
        ]
        status = monthly_limit_status([MEI], txs, "mei", date(2026, 3, 15))
        assert status.total == Decimal("8000")
        assert status.status is LimitLevel.WARNING

    def test_cash_accounts_have_no_limits(self):
        assert annual_limit_status([CASH], [], "cash", date(2026, 3, 1)) is None
        assert monthly_limit_status([CASH], [], "cash", date(2026, 3, 1)) is None


class TestCategoryAggregate:
    """Tests for grouping transactions by category."""

    def test_sorted_descending_with_fallback(self):
        txs = [
            tx("expense", "10", category="Luz"),
            tx("expense", "50", category=""),
            tx("expense", "20", category="Água"),
            tx("expense", "15", category="Luz"),
        ]
        groups = category_aggregate(txs)
        assert [(g.name, g.total) for g in groups] == [
            ("Outros", Decimal("50")),
            ("Luz", Decimal("25")),
            ("Água", Decimal("20")),
        ]

    def test_ties_keep_first_seen_order(self):
        txs = [tx("expense", "5", category="B"), tx("expense", "5", category="A")]
        assert [g.name for g in category_aggregate(txs)] == ["B", "A"]

    def test_totals_add_up(self):
        txs = [tx("expense", str(n), category=f"c{n % 3}") for n in range(1, 10)]
        groups = category_aggregate(txs)
        assert sum(g.total for g in groups) == sum(t.amount for t in txs)
        assert float(sum(g.percent for g in groups)) == pytest.approx(100)

    def test_empty(self):
        assert category_aggregate([]) == []


class TestRangeFilter:
    def test_includes_whole_end_day(self):
        inside = [
            tx("income", "1", datetime(2026, 3, 1, 0, 0)),
            tx("income", "1", datetime(2026, 3, 31, 23, 59, 59)),
        ]
        outside = [
            tx("income", "1", datetime(2026, 2, 28, 23, 59)),
            tx("income", "1", datetime(2026, 4, 1, 0, 0)),
        ]
        assert range_filter(inside + outside, date(2026, 3, 1), date(2026, 3, 31)) == inside

    def test_ignores_time_of_bounds(self):
        t = tx("income", "1", datetime(2026, 3, 10, 8, 0))
        assert range_filter([t], datetime(2026, 3, 10, 12, 0), datetime(2026, 3, 10, 1, 0)) == [t]


class TestMetricsService:
    """Tests for the store-backed wrapper."""

    def test_monthly_alert_at_75_percent(self, ledger, mei_account):
        ledger.transactions.add_income("5000", mei_account.id)
        metrics = ledger.metrics
        # 5000 + 62.50 = 5062.50, exactly 75% of 6750
        assert metrics.monthly_alert(mei_account.id, Decimal("62.50")) == Decimal("75")
        assert metrics.monthly_alert(mei_account.id, Decimal("62.49")) is None

    def test_no_alert_for_cash(self, ledger):
        assert ledger.metrics.monthly_alert("cash-1", Decimal("100000")) is None
