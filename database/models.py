"""
Database model definitions
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Expense:
    """Expense data model"""
    id: Optional[int] = None
    date: Optional[date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    @property
    def is_saved(self) -> bool:
        return bool(self.id)

    def to_dict(self) -> dict:
        """Convert to a dictionary"""
        return {
            'id': self.id,
            'date': self.date.isoformat() if self.date else None,
            'category': self.category,
            'description': self.description,
            'amount': str(self.amount) if self.amount is not None else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Expense':
        """Build an Expense from a dictionary"""
        from utils.date_utils import parse_date

        amount = data.get('amount')
        return cls(
            id=data.get('id'),
            date=parse_date(data['date']) if data.get('date') else None,
            category=data.get('category'),
            description=data.get('description'),
            amount=Decimal(str(amount)) if amount is not None else None,
            created_at=datetime.fromisoformat(data['created_at']) if data.get('created_at') else None
        )

    def __str__(self) -> str:
        return (
            f"Expense(id={self.id}, date={self.date}, category='{self.category}', "
            f"description='{self.description or ''}', amount={self.amount})"
        )


# SQLite table definition. The amount is kept as exact decimal text.
CREATE_EXPENSES_TABLE = """
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date DATE NOT NULL,
    category TEXT NOT NULL,
    description TEXT,
    amount TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""
