"""
Expense service: validation and CRUD on top of DatabaseManager
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from database.db_manager import DatabaseManager
from database.models import Expense
from utils.analysis_utils import (
    FilterCriteria,
    calculate_category_totals,
    calculate_monthly_totals,
    calculate_total,
    filter_expenses
)
from utils.exceptions import ValidationError
from utils.logging_utils import get_logger

logger = get_logger(__name__)


class ErrorKind(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


@dataclass
class OperationResult:
    """Outcome of a write operation"""
    success: bool
    message: str
    expense: Optional[Expense] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, message: str, expense: Optional[Expense] = None) -> 'OperationResult':
        return cls(True, message, expense=expense)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> 'OperationResult':
        return cls(False, message, error=error)


def validate_expense(expense: Expense) -> None:
    """
    Check create/update rules.

    Raises:
        ValidationError: missing date, blank category, or a non-positive amount
    """
    if expense.date is None:
        raise ValidationError("Expense date is required.")
    if expense.category is None or not expense.category.strip():
        raise ValidationError("Expense category is required.")
    if expense.amount is None:
        raise ValidationError("Expense amount is required.")
    if isinstance(expense.amount, float):
        raise ValidationError("Expense amount must be an exact decimal, not a float.")
    if expense.amount <= 0:
        raise ValidationError("Expense amount must be positive.")


class ExpenseService:
    """Expense operations"""

    def __init__(self, db_manager: DatabaseManager):
        """
        Initialise

        Args:
            db_manager: DatabaseManager instance (already opened by the caller)
        """
        self.db_manager = db_manager

    def add_expense(self, expense: Expense) -> OperationResult:
        """
        Validate and store a new expense.

        Returns:
            OperationResult carrying the saved expense on success
        """
        try:
            validate_expense(expense)
        except ValidationError as e:
            logger.warning("expense_add_rejected", reason=str(e), amount=str(expense.amount))
            return OperationResult.fail(ErrorKind.VALIDATION, str(e))

        expense_id = self.db_manager.add_expense(expense)
        saved = Expense(
            id=expense_id,
            date=expense.date,
            category=expense.category,
            description=expense.description,
            amount=expense.amount
        )
        logger.info("expense_added", expense_id=expense_id, category=saved.category,
                    amount=str(saved.amount))
        return OperationResult.ok(f"Expense added successfully! ID: {expense_id}", saved)

    def update_expense(self, expense: Expense) -> OperationResult:
        """
        Validate and overwrite an existing expense.

        Returns:
            OperationResult (NOT_FOUND when the id does not exist)
        """
        try:
            validate_expense(expense)
        except ValidationError as e:
            logger.warning("expense_update_rejected", expense_id=expense.id, reason=str(e))
            return OperationResult.fail(ErrorKind.VALIDATION, str(e))

        if not expense.is_saved or not self.db_manager.update_expense(expense):
            return OperationResult.fail(
                ErrorKind.NOT_FOUND, f"Expense with ID {expense.id} not found."
            )

        logger.info("expense_updated", expense_id=expense.id)
        return OperationResult.ok("Expense updated successfully!", expense)

    def delete_expense(self, expense_id: int) -> OperationResult:
        if not self.db_manager.delete_expense(expense_id):
            return OperationResult.fail(
                ErrorKind.NOT_FOUND, f"Expense with ID {expense_id} not found."
            )
        logger.info("expense_deleted", expense_id=expense_id)
        return OperationResult.ok("Expense deleted successfully!")

    def get_expense_by_id(self, expense_id: int) -> Optional[Expense]:
        return self.db_manager.get_expense_by_id(expense_id)

    def get_all_expenses(self) -> List[Expense]:
        return self.db_manager.get_all_expenses()

    def get_categories(self) -> List[str]:
        return self.db_manager.get_categories()

    def filter_expenses(self, criteria: Optional[FilterCriteria] = None) -> List[Expense]:
        """
        Load every expense and apply the criteria in memory.

        Args:
            criteria: filter criteria (None for all expenses)

        Returns:
            matching expenses in store order
        """
        expenses = filter_expenses(self.get_all_expenses(), criteria)
        logger.debug("expenses_filtered", count=len(expenses))
        return expenses

    def get_total(self, expenses: List[Expense]) -> Decimal:
        return calculate_total(expenses)

    def get_category_totals(self, expenses: List[Expense]) -> Dict[str, Decimal]:
        return calculate_category_totals(expenses)

    def get_monthly_totals(self, expenses: List[Expense]) -> Dict[str, Decimal]:
        return calculate_monthly_totals(expenses)
