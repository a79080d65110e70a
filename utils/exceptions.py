"""
Domain exceptions for the expense tracker
"""


class ValidationError(ValueError):
    """Raised when an expense does not satisfy create/update rules."""


class InvalidRecordError(ValueError):
    """Raised when a malformed expense record reaches an aggregation."""

    def __init__(self, message: str, expense=None):
        super().__init__(message)
        self.expense = expense
