"""
Interactive command-line shell for the expense tracker
Reads menu choices line by line and dispatches to the service layer
"""

import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, TextIO

from database.db_manager import DatabaseManager
from database.models import Expense
from services.expense_service import ExpenseService
from services.report_service import ReportService
from utils.analysis_utils import FilterCriteria
from utils.config import APP_VERSION, AppConfig, load_config
from utils.date_utils import parse_date
from utils.export_utils import export_expenses_to_csv, format_expense_table
from utils.logging_utils import configure_logging, get_logger

logger = get_logger(__name__)

MENU = """
Main Menu:
1. Add New Expense
2. View All Expenses
3. Search/Filter Expenses
4. Update Expense
5. Delete Expense
6. View Summary Reports
7. Export to CSV
8. Settings
9. Help
0. Exit"""

HELP_TEXT = """
=== CLI EXPENSE TRACKER HELP ===

Getting Started:
  1. Add expenses with option 1
  2. View all expenses with option 2
  3. Search/filter with option 3
  4. Update expenses with option 4
  5. Delete expenses with option 5

Advanced Features:
  6. View detailed reports and analytics
  7. Export data to CSV files
  8. Check application settings
  9. Get help and usage tips

Usage Tips:
  - Leave an optional prompt blank to skip that filter or keep the current value
  - A date filter needs both a start and an end date
  - Category search ignores upper/lower case
  - Export data regularly for backup

Data Management:
  - Expenses are stored in a local SQLite database
  - Configuration is read from the .env file and the environment
  - Logs are written to the configured log file"""


class ExpenseShell:
    """Menu-driven console front end"""

    def __init__(
        self,
        expense_service: ExpenseService,
        report_service: ReportService,
        config: AppConfig,
        input_func: Optional[Callable[[], str]] = None,
        output: Optional[TextIO] = None,
        today: Callable[[], date] = date.today
    ):
        """
        Initialise

        Args:
            expense_service: ExpenseService instance
            report_service: ReportService instance
            config: application settings
            input_func: returns the next input line, raising EOFError at end of input (default input)
            output: stream for console output (default sys.stdout)
            today: returns the reference date for trend reports
        """
        self.expense_service = expense_service
        self.report_service = report_service
        self.config = config
        self.input_func = input_func or input
        self.output = output or sys.stdout
        self.today = today
        self.actions = {
            '1': self.add_expense,
            '2': self.view_all_expenses,
            '3': self.search_expenses,
            '4': self.update_expense,
            '5': self.delete_expense,
            '6': self.view_summary,
            '7': self.export_expenses,
            '8': self.show_settings,
            '9': self.show_help,
        }

    # -- console helpers --------------------------------------------------

    def say(self, message: str = "") -> None:
        print(message, file=self.output)

    def ask(self, message: str) -> str:
        print(message, end="", file=self.output)
        self.output.flush()
        return self.input_func()

    def prompt_date(self, message: str) -> Optional[date]:
        """Blank input returns None; invalid input asks again"""
        while True:
            raw = self.ask(message).strip()
            if not raw:
                return None
            try:
                return parse_date(raw)
            except ValueError:
                self.say("Invalid date format. Please use YYYY-MM-DD.")

    def prompt_amount(self, message: str, optional: bool = False) -> Optional[Decimal]:
        """
        Read a decimal amount.

        Args:
            message: prompt text
            optional: when True, blank input returns None and negatives are refused here

        Returns:
            Decimal amount or None
        """
        while True:
            raw = self.ask(message).strip()
            if not raw and optional:
                return None
            try:
                amount = Decimal(raw)
            except InvalidOperation:
                self.say("Invalid amount. Please enter a numeric value.")
                continue
            if not amount.is_finite():
                self.say("Invalid amount. Please enter a numeric value.")
            elif optional and amount < 0:
                self.say("Amount cannot be negative.")
            else:
                return amount

    def prompt_int(self, message: str) -> int:
        while True:
            raw = self.ask(message).strip()
            try:
                return int(raw)
            except ValueError:
                self.say("Invalid input. Please enter a whole number.")

    def prompt_criteria(self) -> FilterCriteria:
        start_date = self.prompt_date("Enter start date for filter (YYYY-MM-DD, leave blank for no filter): ")
        end_date = self.prompt_date("Enter end date for filter (YYYY-MM-DD, leave blank for no filter): ")
        category = self.ask("Enter category for filter (leave blank for no filter): ").strip()
        min_amount = self.prompt_amount("Enter minimum amount for filter (leave blank for no filter): ", optional=True)
        max_amount = self.prompt_amount("Enter maximum amount for filter (leave blank for no filter): ", optional=True)
        if (start_date is None) != (end_date is None):
            self.say("Note: a date filter needs both a start and an end date; it was not applied.")
        return FilterCriteria(
            start_date=start_date,
            end_date=end_date,
            category=category or None,
            min_amount=min_amount,
            max_amount=max_amount
        )

    # -- main loop ----------------------------------------------------------

    def run(self) -> None:
        """Show the menu until the user exits or input ends"""
        logger.info("app_started", version=APP_VERSION)
        self.say("==================================================")
        self.say(f"          CLI Expense Tracker v{APP_VERSION}")
        self.say("              Personal Finance Manager")
        self.say("==================================================")
        try:
            while True:
                self.say(MENU)
                choice = self.ask("\nEnter your choice (0-9): ").strip()
                if choice == '0':
                    self.say("Exiting application. Goodbye!")
                    break

                action = self.actions.get(choice)
                if action is None:
                    self.say("Invalid choice. Please try again.")
                    continue

                try:
                    action()
                except EOFError:
                    raise
                except Exception as e:
                    logger.exception("command_failed", choice=choice)
                    self.say(f"An unexpected error occurred: {e}")

                self.ask("\nPress Enter to continue...")
        except EOFError:
            self.say("\nEnd of input. Goodbye!")
        logger.info("app_stopped")

    # -- actions ------------------------------------------------------------

    def add_expense(self) -> None:
        self.say("\n--- Add New Expense ---")
        categories = self.expense_service.get_categories()
        if categories:
            self.say(f"Known categories: {', '.join(categories)}")

        expense_date = self.prompt_date("Enter date (YYYY-MM-DD, leave blank for today): ") or self.today()
        category = self.ask("Enter category: ").strip()
        description = self.ask("Enter description (optional): ").strip()
        amount = self.prompt_amount("Enter amount: ")

        result = self.expense_service.add_expense(Expense(
            date=expense_date,
            category=category,
            description=description or None,
            amount=amount
        ))
        if result.success:
            self.say(result.message)
        else:
            self.say(f"Error: {result.message} Expense not added.")

    def view_all_expenses(self) -> None:
        self.say("\n--- View All Expenses ---")
        expenses = self.expense_service.get_all_expenses()
        if not expenses:
            self.say("No expenses found.")
            return
        self.say(format_expense_table(expenses))

    def search_expenses(self) -> None:
        self.say("\n--- Search/Filter Expenses ---")
        expenses = self.expense_service.filter_expenses(self.prompt_criteria())
        if not expenses:
            self.say("No expenses found matching your criteria.")
            return
        self.say("\n--- Filtered Expenses ---")
        self.say(format_expense_table(expenses))

    def update_expense(self) -> None:
        self.say("\n--- Update Expense ---")
        expense_id = self.prompt_int("Enter ID of expense to update: ")
        existing = self.expense_service.get_expense_by_id(expense_id)
        if existing is None:
            self.say(f"Expense with ID {expense_id} not found.")
            return

        self.say(f"Current Expense Details: {existing}")

        new_date = self.prompt_date(
            f"Enter new date (YYYY-MM-DD, leave blank to keep current: {existing.date}): ")
        new_category = self.ask(
            f"Enter new category (leave blank to keep current: {existing.category}): ").strip()
        new_description = self.ask(
            f"Enter new description (leave blank to keep current: {existing.description or ''}): ").strip()
        new_amount = self.prompt_amount(
            f"Enter new amount (leave blank to keep current: {existing.amount}): ", optional=True)

        result = self.expense_service.update_expense(Expense(
            id=existing.id,
            date=new_date or existing.date,
            category=new_category or existing.category,
            description=new_description or existing.description,
            amount=existing.amount if new_amount is None else new_amount
        ))
        if result.success:
            self.say(result.message)
        else:
            self.say(f"Error: {result.message}")

    def delete_expense(self) -> None:
        self.say("\n--- Delete Expense ---")
        expense_id = self.prompt_int("Enter ID of expense to delete: ")
        existing = self.expense_service.get_expense_by_id(expense_id)
        if existing is None:
            self.say(f"Expense with ID {expense_id} not found.")
            return

        confirmation = self.ask(
            f"Are you sure you want to delete this expense? (yes/no): {existing}\n").strip().lower()
        if confirmation != "yes":
            self.say("Expense deletion cancelled.")
            return

        result = self.expense_service.delete_expense(expense_id)
        self.say(result.message)

    def view_summary(self) -> None:
        self.say("\n=== EXPENSE SUMMARY REPORTS ===")
        report = self.report_service.build_summary(
            self.expense_service.get_all_expenses(), self.today())
        if report is None:
            self.say("No expenses found for reporting.")
            return
        self.say(self.report_service.format_summary(report))

    def export_expenses(self) -> None:
        self.say("\n--- Export Expenses to CSV ---")
        choice = self.ask("Do you want to export all expenses or filtered expenses? (all/filtered): ").strip().lower()
        if choice == "filtered":
            expenses = self.expense_service.filter_expenses(self.prompt_criteria())
        else:
            expenses = self.expense_service.get_all_expenses()

        if not expenses:
            self.say("No expenses to export.")
            return

        try:
            path = export_expenses_to_csv(expenses, self.config.export_dir)
        except OSError as e:
            logger.error("export_failed", export_dir=self.config.export_dir, error=str(e))
            self.say(f"Error: Failed to export expenses to CSV. {e}")
            return
        self.say(f"Expenses exported successfully to: {path}")

    def show_settings(self) -> None:
        self.say("\n=== APPLICATION SETTINGS ===")
        self.say("\nCurrent Configuration:")
        self.say("----------------------------------------")
        for name, value in self.config.as_display_dict().items():
            self.say(f"  {name}: {value}")
        self.say("\nTips:")
        self.say("  - Set EXPENSE_DB_PATH, EXPORT_DIR, LOG_LEVEL and LOG_FILE in .env")
        self.say("  - Use the 'Help' option for usage guidance")

    def show_help(self) -> None:
        self.say(HELP_TEXT)


def main() -> int:
    """Entry point"""
    config = load_config()
    configure_logging(config.log_level, config.log_file)

    db_manager = DatabaseManager(config.db_path)
    try:
        db_manager.open()
        shell = ExpenseShell(
            ExpenseService(db_manager),
            ReportService(config.trend_window_days),
            config
        )
        shell.run()
    finally:
        db_manager.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
