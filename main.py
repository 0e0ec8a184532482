import argparse
import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from models.account import ACCOUNT_TYPE_LABELS

from services.entity_store import EntityStore
from services.metrics_service import MetricsService
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService
from services.household_service import HouseholdService
from services.account_service import AccountService
from services.category_service import CategoryService
from services.report_service import ReportService
from services.reminder_service import ReminderService
from services.data_service import DataService

from utils.app_config import get_data_folder, get_log_level
from utils.constants import APP_NAME
from utils.currency import format_currency
from utils.date_helpers import format_display_date, friendly_month, now


class Ledger:
    """Wires the store and every service around one database."""

    def __init__(self, db: DatabaseManager, clock=now):
        self.db = db
        self.store = EntityStore(db, clock)
        self.metrics = MetricsService(self.store)
        self.recurring = RecurringService(self.store)
        self.transactions = TransactionService(self.store, self.metrics)
        self.household = HouseholdService(self.store, self.recurring)
        self.accounts = AccountService(self.store, self.metrics)
        self.categories = CategoryService(self.store)
        self.reports = ReportService(self.store, self.metrics)
        self.reminders = ReminderService(self.accounts, self.household)
        self.data = DataService(self.store)

    def open(self):
        self.store.load()
        # Recurring bills must exist before anything reads the month
        self.recurring.ensure_recurring_for_month(self.store.selected_month)


def print_summary(ledger: Ledger):
    day = ledger.transactions.daily_summary()
    print(f"{APP_NAME} · {format_display_date(ledger.store.selected_date)}")
    print(
        f"  Hoje: entradas {format_currency(day['income'])}, "
        f"saídas {format_currency(day['expense'])}, saldo {format_currency(day['balance'])}"
    )

    month = ledger.household.month_summary()
    print(
        f"  Casa {friendly_month(ledger.store.selected_month)}: total {format_currency(month['total'])}, "
        f"pago {format_currency(month['paid'])}, em aberto {format_currency(month['unpaid'])}"
    )

    for overview in ledger.accounts.get_overview():
        account = overview.account
        line = f"  {account.name} [{ACCOUNT_TYPE_LABELS[account.type]}]: saldo {format_currency(overview.balance)}"
        if overview.annual is not None:
            line += f" · anual {overview.annual.percent:.1f}% ({overview.annual.status.value})"
        if overview.monthly is not None:
            line += f" · mensal {overview.monthly.percent:.1f}% ({overview.monthly.status.value})"
        print(line)

    for reminder in ledger.reminders.get_reminders():
        print(f"  [{reminder.severity}] {reminder.title}: {reminder.detail}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="safe-ledger", description=APP_NAME)
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("summary", help="today, this month, account limits and alerts")
    export = sub.add_parser("export", help="write a JSON backup")
    export.add_argument("folder", nargs="?", default=".")
    restore = sub.add_parser("import", help="restore a JSON backup (replaces everything)")
    restore.add_argument("path")
    chart = sub.add_parser("chart", help="render the expense breakdown of the report window")
    chart.add_argument("path")
    csv_cmd = sub.add_parser("csv", help="export the report window as CSV")
    csv_cmd.add_argument("path")
    sub.add_parser("reset", help="erase all data")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # ── Bootstrap: config and logging ─────────────────────────────────────────
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    db = DatabaseManager.open_in_folder(get_data_folder())
    ledger = Ledger(db)
    try:
        ledger.open()
        command = args.command or "summary"
        if command == "summary":
            print_summary(ledger)
        elif command == "export":
            print(ledger.data.write_backup(args.folder))
        elif command == "import":
            if not ledger.data.read_backup(args.path):
                print("Arquivo de backup inválido.", file=sys.stderr)
                return 1
            ledger.recurring.ensure_recurring_for_month(ledger.store.selected_month)
            print("Backup restaurado com sucesso.")
        elif command == "chart":
            print(ledger.reports.render_category_chart(args.path))
        elif command == "csv":
            print(ledger.reports.write_csv(args.path))
        elif command == "reset":
            ledger.store.reset()
            print("Dados apagados e resetados para o padrão.")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
