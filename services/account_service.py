import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from models.account import Account, AccountType
from models.errors import ValidationError
from models.metrics import LimitStatus
from services.entity_store import EntityStore
from services.metrics_service import MetricsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountOverview:
    account: Account
    balance: Decimal
    annual: Optional[LimitStatus]
    monthly: Optional[LimitStatus]


class AccountService:
    def __init__(self, store: EntityStore, metrics: MetricsService):
        self._store = store
        self._metrics = metrics

    def get_all(self) -> list[Account]:
        return self._store.accounts

    def get_by_id(self, account_id: str) -> Account | None:
        return self._store.get_account(account_id)

    def has_mei_account(self) -> bool:
        return any(a.is_regulated for a in self._store.accounts)

    def create(
        self,
        name: str,
        cnpj: str = "",
        description: str = "",
        initial_balance=Decimal("0"),
        account_type: AccountType = AccountType.MEI,
    ) -> Account:
        name = self._validate_name(name)
        account = self._store.create_account(
            name=name,
            type_=account_type,
            initial_balance=initial_balance or Decimal("0"),
            cnpj=(cnpj or "").strip(),
            description=(description or "").strip(),
        )
        logger.info("Created %s account '%s'", account.type.value, account.name)
        return account

    def update(self, account_id: str, **changes) -> Account | None:
        if "name" in changes:
            changes["name"] = self._validate_name(changes["name"], exclude_id=account_id)
        return self._store.update_account(account_id, **changes)

    def delete(self, account_id: str):
        """Remove an account; its transactions are kept with a dangling reference."""
        account = self._store.get_account(account_id)
        if account is None:
            return
        if account.type is AccountType.CASH:
            raise ValidationError("The cash account cannot be deleted.")
        self._store.delete_account(account_id)
        logger.info("Deleted account '%s'", account.name)

    def get_overview(self) -> list[AccountOverview]:
        return [
            AccountOverview(
                account=a,
                balance=self._metrics.account_balance(a.id),
                annual=self._metrics.annual_limit_status(a.id),
                monthly=self._metrics.monthly_limit_status(a.id),
            )
            for a in self._store.accounts
        ]

    def _validate_name(self, name: str, exclude_id: str | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty.")
        for existing in self._store.accounts:
            if existing.id != exclude_id and existing.name.lower() == name.lower():
                raise ValidationError(f"An account named '{name}' already exists.")
        return name
