from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Transaction:
    id: str
    created_at: datetime
    type: TransactionType
    amount: Decimal
    date: datetime              # effective date, distinct from created_at
    description: str = ""       # client/source label, mostly for income
    category: str = ""          # mostly for expenses
    account_id: Optional[str] = None
    is_home_expense: bool = False
    is_paid: Optional[bool] = None
    recurring_id: Optional[str] = None
    installment_id: Optional[str] = None
    is_reminder: bool = False

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type is TransactionType.INCOME else -self.amount
