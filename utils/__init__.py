"""
Utility modules
"""

from .date_utils import parse_date, month_key
from .exceptions import InvalidRecordError, ValidationError
from .analysis_utils import (
    FilterCriteria,
    TrendComparison,
    filter_expenses,
    calculate_total,
    calculate_category_totals,
    calculate_monthly_totals,
    calculate_average,
    calculate_category_stats,
    compare_trend
)

__all__ = [
    'parse_date',
    'month_key',
    'InvalidRecordError',
    'ValidationError',
    'FilterCriteria',
    'TrendComparison',
    'filter_expenses',
    'calculate_total',
    'calculate_category_totals',
    'calculate_monthly_totals',
    'calculate_average',
    'calculate_category_stats',
    'compare_trend'
]
