from dataclasses import dataclass
from datetime import date, datetime

from models.account import Account
from models.recurring_rule import RecurringRule
from models.report_window import ReportWindow
from models.transaction import Transaction


@dataclass
class LedgerState:
    """Everything the store owns: the persisted collections plus the
    UI-adjacent scalars that only travel inside backups."""
    transactions: list[Transaction]
    accounts: list[Account]
    recurring_rules: list[RecurringRule]
    custom_categories: list[str]
    home_categories: list[str]
    selected_date: datetime
    selected_month: date
    report_window: ReportWindow

    def copy(self) -> "LedgerState":
        return LedgerState(
            transactions=list(self.transactions),
            accounts=list(self.accounts),
            recurring_rules=list(self.recurring_rules),
            custom_categories=list(self.custom_categories),
            home_categories=list(self.home_categories),
            selected_date=self.selected_date,
            selected_month=self.selected_month,
            report_window=self.report_window,
        )
