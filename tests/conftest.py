"""
Shared fixtures
"""

from datetime import date
from decimal import Decimal

import pytest

from database.db_manager import DatabaseManager
from database.models import Expense
from services.expense_service import ExpenseService


def make_expense(expense_id, day, category, amount, description=None):
    return Expense(
        id=expense_id,
        date=day,
        category=category,
        description=description,
        amount=Decimal(amount)
    )


@pytest.fixture
def sample_expenses():
    """Three expenses over two months."""
    return [
        make_expense(1, date(2024, 1, 10), "Food", "10.00", "Lunch"),
        make_expense(2, date(2024, 1, 20), "Food", "5.50", "Coffee"),
        make_expense(3, date(2024, 2, 1), "Transport", "20.00", "Train ticket"),
    ]


@pytest.fixture
def db_manager(tmp_path):
    """Opened DatabaseManager on a temporary file."""
    manager = DatabaseManager(str(tmp_path / "test_expenses.db"))
    manager.open()
    yield manager
    manager.close()


@pytest.fixture
def expense_service(db_manager):
    return ExpenseService(db_manager)
