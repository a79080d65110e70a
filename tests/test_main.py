"""
Tests for the interactive shell, driven by scripted input
"""

import io
import logging
from datetime import date
from decimal import Decimal

import pytest
import structlog

import main
from main import ExpenseShell
from services.expense_service import ExpenseService
from services.report_service import ReportService
from tests.conftest import make_expense
from utils.config import AppConfig


class ScriptedInput:
    """Returns prepared lines, then raises EOFError like input() does."""

    def __init__(self, lines):
        self.lines = list(lines)

    def __call__(self):
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


@pytest.fixture
def run_shell(expense_service, tmp_path):
    def _run(*lines):
        output = io.StringIO()
        shell = ExpenseShell(
            expense_service,
            ReportService(),
            AppConfig(db_path=":memory:", export_dir=str(tmp_path / "export"), log_file=None),
            input_func=ScriptedInput(lines),
            output=output,
            today=lambda: date(2024, 2, 5)
        )
        shell.run()
        return output.getvalue()
    return _run


@pytest.fixture
def seeded(expense_service, sample_expenses):
    return [expense_service.add_expense(e).expense for e in sample_expenses]


class TestMenu:
    """Tests for the menu loop."""

    def test_exit(self, run_shell):
        """Test that 0 leaves the loop."""
        assert "Goodbye!" in run_shell("0")

    def test_end_of_input_exits(self, run_shell):
        """Test that EOF ends the session cleanly."""
        assert "End of input. Goodbye!" in run_shell()

    def test_invalid_choice(self, run_shell):
        """Test the invalid choice message."""
        assert "Invalid choice. Please try again." in run_shell("42", "0")

    def test_help_and_settings(self, run_shell):
        """Test the static screens."""
        out = run_shell("9", "", "8", "", "0")
        assert "CLI EXPENSE TRACKER HELP" in out
        assert "Database Path: :memory:" in out

    def test_unexpected_error_keeps_loop_running(self, run_shell, expense_service, monkeypatch):
        """Test that a failing action is reported and the menu continues."""
        def boom():
            raise RuntimeError("disk on fire")
        monkeypatch.setattr(expense_service, "get_all_expenses", boom)
        out = run_shell("2", "", "0")
        assert "An unexpected error occurred: disk on fire" in out
        assert "Goodbye!" in out


class TestAdd:
    """Tests for adding expenses."""

    def test_add(self, run_shell, expense_service):
        """Test a complete add flow."""
        out = run_shell("1", "2024-01-10", "Food", "Lunch", "10.50", "", "0")
        assert "Expense added successfully!" in out
        [stored] = expense_service.get_all_expenses()
        assert stored.amount == Decimal("10.50")
        assert stored.description == "Lunch"

    def test_blank_date_uses_today(self, run_shell, expense_service):
        """Test the default date."""
        run_shell("1", "", "Food", "", "3", "", "0")
        assert expense_service.get_all_expenses()[0].date == date(2024, 2, 5)

    def test_invalid_inputs_reprompt(self, run_shell, expense_service):
        """Test that bad date and amount entries are asked again."""
        out = run_shell("1", "10/01/2024", "2024-01-10", "Food", "", "abc", "2", "", "0")
        assert "Invalid date format" in out
        assert "Invalid amount" in out
        assert len(expense_service.get_all_expenses()) == 1

    def test_negative_amount_rejected(self, run_shell, expense_service):
        """Test that -5 is refused and nothing is stored."""
        out = run_shell("1", "2024-01-10", "Food", "", "-5", "", "0")
        assert "Expense amount must be positive." in out
        assert expense_service.get_all_expenses() == []


class TestViewAndSearch:
    """Tests for listing and searching."""

    def test_view_empty(self, run_shell):
        """Test the empty list message."""
        assert "No expenses found." in run_shell("2", "", "0")

    def test_view(self, run_shell, seeded):
        """Test the table output."""
        out = run_shell("2", "", "0")
        assert "Total expenses displayed: 35.50" in out

    def test_search_by_category(self, run_shell, seeded):
        """Test a case-insensitive category search."""
        out = run_shell("3", "", "", "food", "", "", "", "0")
        assert "Filtered Expenses" in out
        assert "Total expenses displayed: 15.50" in out

    def test_search_single_date_bound_notice(self, run_shell, seeded):
        """Test that a lone date bound is reported and not applied."""
        out = run_shell("3", "2024-02-01", "", "", "", "", "", "0")
        assert "it was not applied" in out
        assert "Total expenses displayed: 35.50" in out

    def test_search_without_matches(self, run_shell, seeded):
        """Test the no-match message."""
        out = run_shell("3", "", "", "", "1000", "", "", "0")
        assert "No expenses found matching your criteria." in out

    def test_negative_filter_amount_reprompts(self, run_shell, seeded):
        """Test that a negative filter amount is asked again."""
        out = run_shell("3", "", "", "", "-1", "", "", "", "0")
        assert "Amount cannot be negative." in out


class TestUpdateAndDelete:
    """Tests for update and delete flows."""

    def test_update_keeps_blank_fields(self, run_shell, expense_service, seeded):
        """Test that blank answers keep the current values."""
        target = seeded[0]
        out = run_shell("4", str(target.id), "", "", "", "12.00", "", "0")
        assert "Expense updated successfully!" in out
        updated = expense_service.get_expense_by_id(target.id)
        assert updated.amount == Decimal("12.00")
        assert updated.category == "Food"
        assert updated.description == "Lunch"

    def test_update_unknown(self, run_shell):
        """Test updating a missing id."""
        assert "Expense with ID 99 not found." in run_shell("4", "99", "", "0")

    def test_update_zero_amount_rejected(self, run_shell, expense_service, seeded):
        """Test that a zero amount is refused on update."""
        target = seeded[0]
        out = run_shell("4", str(target.id), "", "", "", "0", "", "0")
        assert "Error: Expense amount must be positive." in out
        assert expense_service.get_expense_by_id(target.id).amount == Decimal("10.00")

    def test_delete_confirmed(self, run_shell, expense_service, seeded):
        """Test delete after typing yes."""
        out = run_shell("5", str(seeded[0].id), "yes", "", "0")
        assert "Expense deleted successfully!" in out
        assert expense_service.get_expense_by_id(seeded[0].id) is None

    def test_delete_cancelled(self, run_shell, expense_service, seeded):
        """Test that anything other than yes cancels."""
        out = run_shell("5", str(seeded[0].id), "no", "", "0")
        assert "Expense deletion cancelled." in out
        assert expense_service.get_expense_by_id(seeded[0].id) is not None


class TestSummaryAndExport:
    """Tests for the report and export flows."""

    def test_summary_empty(self, run_shell):
        """Test the empty report message."""
        assert "No expenses found for reporting." in run_shell("6", "", "0")

    def test_summary(self, run_shell, seeded):
        """Test the summary text."""
        out = run_shell("6", "", "0")
        assert "Total Expenses: $35.50" in out
        assert "Monthly Summary:" in out

    def test_export_all(self, run_shell, seeded, tmp_path):
        """Test exporting every expense."""
        out = run_shell("7", "all", "", "0")
        assert "Expenses exported successfully to:" in out
        [csv_file] = (tmp_path / "export").glob("expenses_*.csv")
        assert len(csv_file.read_text(encoding="utf-8").splitlines()) == 4

    def test_export_filtered_without_matches(self, run_shell, seeded):
        """Test that nothing is written when the filter matches nothing."""
        out = run_shell("7", "filtered", "", "", "Rent", "", "", "", "0")
        assert "No expenses to export." in out


class TestMainEntryPoint:
    """Tests for main()."""

    def test_main_opens_and_closes_store(self, monkeypatch, tmp_path):
        """Test the full start-up and shutdown path."""
        config = AppConfig(db_path=str(tmp_path / "app.db"), export_dir=str(tmp_path / "export"),
                           log_file=str(tmp_path / "logs" / "app.log"))
        monkeypatch.setattr(main, "load_config", lambda: config)
        monkeypatch.setattr("builtins.input", lambda: "0")
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            assert main.main() == 0
        finally:
            for handler in root.handlers[len(handlers):]:
                handler.close()
            root.handlers[:] = handlers
            root.setLevel(level)
            structlog.reset_defaults()
        assert (tmp_path / "app.db").exists()
        assert (tmp_path / "logs" / "app.log").exists()
