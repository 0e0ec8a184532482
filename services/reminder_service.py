from dataclasses import dataclass
from datetime import date

from models.metrics import LimitLevel, LimitStatus
from services.account_service import AccountService
from services.household_service import HouseholdService
from utils.constants import SEVERITY_ORDER
from utils.currency import format_currency
from utils.date_helpers import format_display_date, friendly_month


@dataclass
class Reminder:
    type: str       # 'annual_limit' | 'monthly_limit' | 'pending_reminder' | 'unpaid_bill'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    key: str = ""   # e.g. "annual:<account id>" or "tx:<transaction id>"


class ReminderService:
    """Startup/overview alerts: MEI limits and household bills that need attention."""

    def __init__(self, account_service: AccountService, household_service: HouseholdService):
        self._accounts = account_service
        self._household = household_service

    def get_reminders(self, month: date | None = None) -> list[Reminder]:
        reminders: list[Reminder] = []
        reminders += self._check_limits()
        reminders += self._check_household(month)
        return sorted(reminders, key=lambda r: SEVERITY_ORDER[r.severity])

    def _check_limits(self) -> list[Reminder]:
        reminders = []
        for overview in self._accounts.get_overview():
            name = overview.account.name
            for kind, label, status in (
                ("annual", "anual", overview.annual),
                ("monthly", "mensal", overview.monthly),
            ):
                reminder = self._limit_reminder(kind, label, name, status)
                if reminder is not None:
                    reminder.key = f"{kind}:{overview.account.id}"
                    reminders.append(reminder)
        return reminders

    @staticmethod
    def _limit_reminder(kind: str, label: str, name: str, status: LimitStatus | None) -> Reminder | None:
        if status is None or status.status is LimitLevel.SAFE:
            return None
        detail = (
            f"{format_currency(status.total)} de {format_currency(status.safe_limit)} "
            f"({status.percent:.1f}%) · teto {format_currency(status.max_limit)}"
        )
        if status.status is LimitLevel.CRITICAL:
            return Reminder(
                type=f"{kind}_limit",
                severity="error",
                title=f"{name} ultrapassou o teto {label}",
                detail=detail,
            )
        return Reminder(
            type=f"{kind}_limit",
            severity="warning",
            title=f"{name} passou do limite {label}",
            detail=detail,
        )

    def _check_household(self, month: date | None) -> list[Reminder]:
        reminders = []
        for tx in self._household.get_month(month):
            label = tx.description or tx.category
            if tx.is_reminder:
                reminders.append(Reminder(
                    type="pending_reminder",
                    severity="warning",
                    title=f"{label}: informe o valor",
                    detail=f"Conta variável de {friendly_month(tx.date)}",
                    key=f"tx:{tx.id}",
                ))
            elif not tx.is_paid:
                reminders.append(Reminder(
                    type="unpaid_bill",
                    severity="info",
                    title=f"{label} em aberto",
                    detail=f"{format_currency(tx.amount)} · vence {format_display_date(tx.date)}",
                    key=f"tx:{tx.id}",
                ))
        return reminders
