from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class AccountType(str, Enum):
    MEI = "mei"     # regulated entity, subject to revenue limits
    CASH = "cash"   # informal cash, no limit tracking


ACCOUNT_TYPE_LABELS = {
    AccountType.MEI: "MEI",
    AccountType.CASH: "CX",
}


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    type: AccountType = AccountType.CASH
    initial_balance: Decimal = Decimal("0")
    cnpj: str = ""
    description: str = ""

    @property
    def is_regulated(self) -> bool:
        return self.type is AccountType.MEI
