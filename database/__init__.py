"""
Database management module
"""

from .db_manager import DatabaseManager
from .models import Expense

__all__ = ['DatabaseManager', 'Expense']
