"""
Service layer over the record store
"""

from .expense_service import ErrorKind, ExpenseService, OperationResult
from .report_service import ReportService, SummaryReport

__all__ = ['ErrorKind', 'ExpenseService', 'OperationResult', 'ReportService', 'SummaryReport']
