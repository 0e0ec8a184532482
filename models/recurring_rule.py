from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class RecurringType(str, Enum):
    FIXED = "fixed"         # known amount every month
    REMINDER = "reminder"   # variable bill, amount entered by hand


@dataclass(frozen=True)
class RecurringRule:
    id: str
    title: str
    category: str
    amount: Decimal
    day: int                # 1-31, clamped to month length when applied
    type: RecurringType = RecurringType.FIXED
    active: bool = True
