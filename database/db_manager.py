"""
SQLite database management class
"""

import sqlite3
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from .models import Expense, CREATE_EXPENSES_TABLE
from utils.date_utils import parse_date
from utils.logging_utils import get_logger

logger = get_logger(__name__)

SELECT_COLUMNS = "SELECT id, date, category, description, amount, created_at FROM expenses"


class DatabaseManager:
    """Record store backed by a single SQLite connection"""

    def __init__(self, db_path: str = "expenses.db"):
        """
        Initialise. The connection is not opened until open() is called.

        Args:
            db_path: database file path (':memory:' for an in-memory database)
        """
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> 'DatabaseManager':
        """Open the connection and make sure the table exists"""
        if self._conn is None:
            logger.info("database_connecting", db_path=self.db_path)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self.init_db()
            logger.info("database_connected", db_path=self.db_path)
        return self

    def close(self) -> None:
        """Close the connection (no-op when already closed)"""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("database_closed", db_path=self.db_path)

    def __enter__(self) -> 'DatabaseManager':
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_connection(self) -> sqlite3.Connection:
        """Return the open connection"""
        if self._conn is None:
            raise RuntimeError("Database connection is not open; call open() first")
        return self._conn

    def init_db(self):
        """Create the expenses table"""
        conn = self.get_connection()
        conn.execute(CREATE_EXPENSES_TABLE)
        conn.commit()

    @staticmethod
    def _row_to_expense(row: sqlite3.Row) -> Expense:
        created_at = row['created_at']
        return Expense(
            id=row['id'],
            date=parse_date(row['date']),
            category=row['category'],
            description=row['description'],
            amount=Decimal(str(row['amount'])),
            created_at=datetime.fromisoformat(created_at) if created_at else None
        )

    def _query(self, sql: str, params: tuple = ()) -> List[Expense]:
        cursor = self.get_connection().execute(sql, params)
        expenses = [self._row_to_expense(row) for row in cursor.fetchall()]
        logger.debug("expenses_fetched", count=len(expenses))
        return expenses

    def add_expense(self, expense: Expense) -> int:
        """
        Insert an expense.

        Args:
            expense: expense to store (its id is ignored)

        Returns:
            id of the new row
        """
        conn = self.get_connection()
        cursor = conn.execute(
            """
            INSERT INTO expenses (date, category, description, amount)
            VALUES (?, ?, ?, ?)
            """,
            (expense.date.isoformat(), expense.category, expense.description, str(expense.amount))
        )
        conn.commit()
        logger.info("expense_inserted", expense_id=cursor.lastrowid)
        return cursor.lastrowid

    def get_expense_by_id(self, expense_id: int) -> Optional[Expense]:
        """
        Look up an expense by id.

        Args:
            expense_id: expense id

        Returns:
            Expense or None
        """
        row = self.get_connection().execute(
            f"{SELECT_COLUMNS} WHERE id = ?", (expense_id,)
        ).fetchone()

        if row is None:
            logger.info("expense_not_found", expense_id=expense_id)
            return None
        return self._row_to_expense(row)

    def get_all_expenses(self) -> List[Expense]:
        """All expenses, newest first"""
        return self._query(f"{SELECT_COLUMNS} ORDER BY date DESC, id DESC")

    def get_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Expense]:
        """
        Expenses within a period.

        Args:
            start_date: first day (None for no lower bound)
            end_date: last day (None for no upper bound)

        Returns:
            expense list, newest first
        """
        if start_date and end_date:
            return self._query(
                f"{SELECT_COLUMNS} WHERE date BETWEEN ? AND ? ORDER BY date DESC, id DESC",
                (start_date.isoformat(), end_date.isoformat())
            )
        elif start_date:
            return self._query(
                f"{SELECT_COLUMNS} WHERE date >= ? ORDER BY date DESC, id DESC",
                (start_date.isoformat(),)
            )
        elif end_date:
            return self._query(
                f"{SELECT_COLUMNS} WHERE date <= ? ORDER BY date DESC, id DESC",
                (end_date.isoformat(),)
            )
        return self.get_all_expenses()

    def get_category_expenses(self, category: str) -> List[Expense]:
        """Expenses with exactly this category"""
        return self._query(
            f"{SELECT_COLUMNS} WHERE category = ? ORDER BY date DESC, id DESC",
            (category,)
        )

    def get_expenses_by_amount_range(
        self,
        min_amount: Decimal,
        max_amount: Decimal
    ) -> List[Expense]:
        """Expenses with min_amount <= amount <= max_amount, largest first"""
        # Amounts are stored as text, so the comparison happens in Python.
        expenses = [
            e for e in self.get_all_expenses()
            if min_amount <= e.amount <= max_amount
        ]
        return sorted(expenses, key=lambda e: e.amount, reverse=True)

    def get_categories(self) -> List[str]:
        """
        Distinct categories in use.

        Returns:
            sorted category list
        """
        cursor = self.get_connection().execute(
            "SELECT DISTINCT category FROM expenses ORDER BY category"
        )
        return [row['category'] for row in cursor.fetchall()]

    def update_expense(self, expense: Expense) -> bool:
        """
        Overwrite every field of an existing expense.

        Args:
            expense: expense carrying the id to update

        Returns:
            True when a row was updated
        """
        conn = self.get_connection()
        cursor = conn.execute(
            """
            UPDATE expenses SET date = ?, category = ?, description = ?, amount = ?
            WHERE id = ?
            """,
            (expense.date.isoformat(), expense.category, expense.description,
             str(expense.amount), expense.id)
        )
        conn.commit()
        if cursor.rowcount > 0:
            logger.info("expense_updated", expense_id=expense.id)
            return True
        logger.warning("expense_update_no_rows", expense_id=expense.id)
        return False

    def delete_expense(self, expense_id: int) -> bool:
        """
        Delete an expense.

        Args:
            expense_id: expense id

        Returns:
            True when a row was deleted
        """
        conn = self.get_connection()
        cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
        conn.commit()
        if cursor.rowcount > 0:
            logger.info("expense_deleted", expense_id=expense_id)
            return True
        logger.warning("expense_delete_no_rows", expense_id=expense_id)
        return False
