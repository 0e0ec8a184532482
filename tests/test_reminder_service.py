"""Tests for overview alerts."""

from models.recurring_rule import RecurringType


class TestReminderService:
    """Tests for ReminderService.get_reminders."""

    def test_nothing_to_report(self, ledger):
        assert ledger.reminders.get_reminders() == []

    def test_alerts_sorted_by_severity(self, ledger, mei_account):
        ledger.transactions.add_income("9000", mei_account.id)
        ledger.recurring.create("Água", "0", 15, RecurringType.REMINDER)
        ledger.household.add_home_expense("120", "Internet")

        reminders = ledger.reminders.get_reminders()
        assert [(r.type, r.severity) for r in reminders] == [
            ("monthly_limit", "error"),
            ("pending_reminder", "warning"),
            ("unpaid_bill", "info"),
        ]
        assert reminders[0].key == f"monthly:{mei_account.id}"
        assert reminders[1].key.startswith("tx:")

    def test_paid_bills_are_quiet(self, ledger):
        tx = ledger.household.add_home_expense("120", "Internet", is_paid=True)
        assert ledger.reminders.get_reminders() == []
        ledger.household.toggle_paid(tx.id)
        assert [r.type for r in ledger.reminders.get_reminders()] == ["unpaid_bill"]

    def test_annual_warning(self, ledger):
        account = ledger.accounts.create("Loja", initial_balance="82000")
        keys = [r.key for r in ledger.reminders.get_reminders()]
        assert keys == [f"annual:{account.id}"]
