"""Tests for account management and the account overview."""

from decimal import Decimal

import pytest

from models.account import AccountType
from models.errors import ValidationError
from models.metrics import LimitLevel


class TestAccountService:
    """Tests for AccountService."""

    def test_create_mei_by_default(self, ledger):
        assert ledger.accounts.has_mei_account() is False
        account = ledger.accounts.create("  Loja  ", cnpj=" 12 ", initial_balance="100")
        assert account.name == "Loja"
        assert account.cnpj == "12"
        assert account.type is AccountType.MEI
        assert account.initial_balance == Decimal("100.00")
        assert ledger.accounts.has_mei_account() is True

    def test_create_without_optional_text(self, ledger):
        account = ledger.accounts.create("Loja", cnpj=None, description=None)
        assert (account.cnpj, account.description) == ("", "")

    @pytest.mark.parametrize("name", ["", "   ", "dinheiro (não fiscal)"])
    def test_name_must_be_unique_and_present(self, ledger, name):
        with pytest.raises(ValidationError):
            ledger.accounts.create(name)

    def test_rename_to_own_name_is_allowed(self, ledger, mei_account):
        updated = ledger.accounts.update(mei_account.id, name="mei principal")
        assert updated.name == "mei principal"

    def test_cash_account_cannot_be_deleted(self, ledger):
        with pytest.raises(ValidationError):
            ledger.accounts.delete("cash-1")
        assert ledger.accounts.get_by_id("cash-1") is not None

    def test_delete_keeps_transactions(self, ledger, mei_account):
        tx = ledger.transactions.add_income("10", mei_account.id)
        ledger.accounts.delete(mei_account.id)
        ledger.accounts.delete(mei_account.id)
        assert ledger.accounts.get_by_id(mei_account.id) is None
        assert ledger.store.get_transaction(tx.id) is not None

    def test_overview(self, ledger, mei_account):
        ledger.transactions.add_income("7000", mei_account.id)
        ledger.transactions.add_expense("50", "cash-1")

        overview = {o.account.id: o for o in ledger.accounts.get_overview()}
        cash = overview["cash-1"]
        assert cash.balance == Decimal("-50")
        assert cash.annual is None and cash.monthly is None

        mei = overview[mei_account.id]
        assert mei.balance == Decimal("7000")
        assert mei.annual.status is LimitLevel.SAFE
        assert mei.monthly.status is LimitLevel.WARNING
