import csv
from datetime import date
from pathlib import Path

from matplotlib.figure import Figure

from models.metrics import CategoryTotal
from models.report_window import ReportFilter, ReportWindow
from models.transaction import Transaction, TransactionType
from services.entity_store import EntityStore
from services.metrics_service import MetricsService, sum_amounts
from utils.date_helpers import format_date, to_local_datetime

PIE_COLORS = [
    "#3B82F6", "#EF4444", "#F59E0B", "#10B981", "#8B5CF6",
    "#EC4899", "#14B8A6", "#F97316", "#6366F1", "#888888",
]


class ReportService:
    def __init__(self, store: EntityStore, metrics: MetricsService):
        self._store = store
        self._metrics = metrics

    # ── Report window ────────────────────────────────────────────────────────

    def get_window(self) -> ReportWindow:
        return self._store.report_window

    def set_filter(self, filter_: ReportFilter, ref_date: date | None = None) -> ReportWindow:
        """Recompute the window for a preset filter; custom keeps the current range."""
        window = ReportWindow.for_filter(
            ReportFilter(filter_), ref_date or self._store.today(), self._store.report_window,
        )
        self._store.set_report_window(window)
        return window

    def set_custom_range(self, start=None, end=None) -> ReportWindow:
        current = self._store.report_window
        window = ReportWindow(
            filter=ReportFilter.CUSTOM,
            start_date=to_local_datetime(start).date() if start is not None else current.start_date,
            end_date=to_local_datetime(end).date() if end is not None else current.end_date,
        )
        self._store.set_report_window(window)
        return window

    def get_transactions(self, window: ReportWindow | None = None) -> list[Transaction]:
        w = window or self._store.report_window
        return self._metrics.range_filter(w.start_date, w.end_date)

    # ── Aggregates ───────────────────────────────────────────────────────────

    def get_summary(self, window: ReportWindow | None = None) -> dict:
        """Work income/expense, household cost and what is left over the window."""
        filtered = self.get_transactions(window)
        work = [t for t in filtered if not t.is_home_expense]
        home = [t for t in filtered if t.is_home_expense]
        work_income = sum_amounts(work, TransactionType.INCOME)
        work_expense = sum_amounts(work, TransactionType.EXPENSE)
        home_cost = sum_amounts(home)
        work_profit = work_income - work_expense
        return {
            "work_income": work_income,
            "work_expense": work_expense,
            "home_cost": home_cost,
            "work_profit": work_profit,
            "total_balance": work_profit - home_cost,
        }

    def get_expense_breakdown(self, window: ReportWindow | None = None) -> list[CategoryTotal]:
        """Business expenses by category over the window."""
        return self._metrics.category_aggregate(
            t for t in self.get_transactions(window)
            if not t.is_home_expense and t.type is TransactionType.EXPENSE
        )

    def get_home_breakdown(self, window: ReportWindow | None = None) -> list[CategoryTotal]:
        return self._metrics.category_aggregate(
            t for t in self.get_transactions(window) if t.is_home_expense
        )

    # ── Exports ──────────────────────────────────────────────────────────────

    def export_csv(self, window: ReportWindow | None = None) -> list[list[str]]:
        """Return rows suitable for CSV export."""
        account_map = {a.id: a.name for a in self._store.accounts}
        transactions = sorted(self.get_transactions(window), key=lambda t: (t.date, t.created_at))

        header = ["Date", "Type", "Ledger", "Category", "Description", "Amount", "Paid", "Account"]
        rows = [header]
        for tx in transactions:
            rows.append([
                format_date(tx.date),
                tx.type.value,
                "home" if tx.is_home_expense else "work",
                tx.category,
                tx.description,
                f"{tx.amount:.2f}",
                "" if tx.is_paid is None else ("Yes" if tx.is_paid else "No"),
                account_map.get(tx.account_id, ""),
            ])
        return rows

    def write_csv(self, path: str | Path, window: ReportWindow | None = None) -> Path:
        path = Path(path)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerows(self.export_csv(window))
        return path

    def render_category_chart(
        self,
        path: str | Path,
        breakdown: list[CategoryTotal] | None = None,
        title: str = "Despesas por categoria",
    ) -> Path:
        """Draw a pie chart of the breakdown (default: business expenses) to an image file."""
        if breakdown is None:
            breakdown = self.get_expense_breakdown()
        fig = Figure(figsize=(5, 4), dpi=100, tight_layout=True)
        ax = fig.add_subplot(111)
        ax.set_title(title, fontsize=11)

        total = sum(g.total for g in breakdown) if breakdown else 0
        if not breakdown or total == 0:
            ax.text(0.5, 0.5, "Sem dados", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            ax.set_axis_off()
        else:
            ax.pie(
                [float(g.total) for g in breakdown],
                labels=[f"{g.name} ({g.percent:.0f}%)" for g in breakdown],
                colors=[PIE_COLORS[i % len(PIE_COLORS)] for i in range(len(breakdown))],
                startangle=90,
                textprops={"fontsize": 8},
            )
            ax.set_aspect("equal")

        path = Path(path)
        fig.savefig(path)
        return path
