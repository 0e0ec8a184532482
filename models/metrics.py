from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class LimitLevel(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class LimitStatus:
    total: Decimal
    safe_limit: Decimal
    max_limit: Decimal
    percent: Decimal        # total / safe_limit * 100
    status: LimitLevel

    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0"), self.safe_limit - self.total)


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    total: Decimal
    percent: Decimal
