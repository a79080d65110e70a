"""
Expense filtering and aggregation utilities

Every function here is pure: records are only read, never modified, and
all money arithmetic stays in Decimal.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from database.models import Expense
from utils.date_utils import month_key
from utils.exceptions import InvalidRecordError
from utils.logging_utils import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class FilterCriteria:
    """Search criteria. None on any field means unconstrained."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: Optional[str] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None

    @property
    def has_date_range(self) -> bool:
        # A single date bound is deliberately not applied.
        return self.start_date is not None and self.end_date is not None

    @property
    def has_category(self) -> bool:
        return self.category is not None and bool(self.category.strip())

    def is_empty(self) -> bool:
        return not (
            self.has_date_range
            or self.has_category
            or self.min_amount is not None
            or self.max_amount is not None
        )


@dataclass(frozen=True)
class TrendComparison:
    """Totals of two adjacent trailing windows"""
    reference_date: date
    window_days: int
    recent_total: Decimal
    prior_total: Decimal
    delta: Decimal
    percent_change: Optional[Decimal] = None

    @property
    def is_increase(self) -> bool:
        return self.delta >= ZERO


def format_money(value: Decimal) -> str:
    """Amount for display: 2 decimal places, rounded half-up"""
    return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):.2f}"


def format_percent(value: Decimal) -> str:
    """Signed percentage for display: 1 decimal place, rounded half-up"""
    return f"{value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP):+.1f}"


def _require_category(expense: Expense) -> str:
    if expense.category is None:
        raise InvalidRecordError(
            f"Expense {expense.id} has no category", expense=expense
        )
    return expense.category


def filter_expenses(
    expenses: Iterable[Expense],
    criteria: Optional[FilterCriteria] = None
) -> List[Expense]:
    """
    Filter expenses by date range, category and amount.

    Args:
        expenses: expense records (order is preserved)
        criteria: filter criteria (None returns every record)

    Returns:
        matching expenses
    """
    filtered = list(expenses)
    if criteria is None:
        return filtered

    if criteria.has_date_range:
        start, end = criteria.start_date, criteria.end_date
        filtered = [e for e in filtered if start <= e.date <= end]
        logger.debug("filtered_by_date_range", start=start.isoformat(),
                     end=end.isoformat(), count=len(filtered))

    if criteria.has_category:
        wanted = criteria.category.strip().casefold()
        filtered = [e for e in filtered if _require_category(e).casefold() == wanted]
        logger.debug("filtered_by_category", category=criteria.category, count=len(filtered))

    low, high = criteria.min_amount, criteria.max_amount
    if low is not None and high is not None:
        filtered = [e for e in filtered if low <= e.amount <= high]
        logger.debug("filtered_by_amount_range", min=str(low), max=str(high), count=len(filtered))
    elif low is not None:
        filtered = [e for e in filtered if e.amount >= low]
        logger.debug("filtered_by_min_amount", min=str(low), count=len(filtered))
    elif high is not None:
        filtered = [e for e in filtered if e.amount <= high]
        logger.debug("filtered_by_max_amount", max=str(high), count=len(filtered))

    return filtered


def calculate_total(expenses: Iterable[Expense]) -> Decimal:
    """Exact sum of amounts (0 for no expenses)"""
    return sum((e.amount for e in expenses), ZERO)


def calculate_category_totals(expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    """
    Sum amounts per category.

    Category keys are case-sensitive: 'Food' and 'food' are separate groups.

    Args:
        expenses: expense list

    Returns:
        category -> total
    """
    totals = defaultdict(lambda: ZERO)
    for expense in expenses:
        totals[_require_category(expense)] += expense.amount
    return dict(totals)


def calculate_monthly_totals(expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    """
    Sum amounts per calendar month.

    Args:
        expenses: expense list

    Returns:
        'YYYY-MM' -> total
    """
    totals = defaultdict(lambda: ZERO)
    for expense in expenses:
        totals[month_key(expense.date)] += expense.amount
    return dict(totals)


def sort_category_totals(totals: Dict[str, Decimal]) -> List[Tuple[str, Decimal]]:
    """Category totals ordered by descending amount, then name"""
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def sort_monthly_totals(totals: Dict[str, Decimal]) -> List[Tuple[str, Decimal]]:
    """Monthly totals ordered by ascending month"""
    return sorted(totals.items())


def calculate_average(expenses: Iterable[Expense]) -> Decimal:
    """
    Mean amount rounded half-up to 2 decimal places.

    Raises:
        ZeroDivisionError: when there are no expenses
    """
    expenses = list(expenses)
    if not expenses:
        raise ZeroDivisionError("Cannot average an empty expense list")
    mean = calculate_total(expenses) / Decimal(len(expenses))
    return mean.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_category_shares(
    category_totals: Dict[str, Decimal],
    total: Decimal
) -> Dict[str, Decimal]:
    """Percentage of the overall total per category (1 decimal place)"""
    if total <= ZERO:
        return {}
    return {
        category: (amount / total * HUNDRED).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        for category, amount in category_totals.items()
    }


def calculate_category_stats(expenses: Iterable[Expense]) -> Dict[str, Dict]:
    """
    Per-category statistics.

    Args:
        expenses: expense list

    Returns:
        category -> {'total', 'count', 'mean', 'min', 'max'}
    """
    category_data = defaultdict(list)
    for expense in expenses:
        category_data[_require_category(expense)].append(expense.amount)

    stats = {}
    for category, amounts in category_data.items():
        total = sum(amounts, ZERO)
        stats[category] = {
            'total': total,
            'count': len(amounts),
            'mean': (total / Decimal(len(amounts))).quantize(CENT, rounding=ROUND_HALF_UP),
            'min': min(amounts),
            'max': max(amounts)
        }
    return stats


def compare_trend(
    expenses: Iterable[Expense],
    reference_date: date,
    window_days: int = 7
) -> TrendComparison:
    """
    Compare spending of the last window against the window before it.

    The recent window is [reference - window, reference] and the prior window
    is [reference - 2*window, reference - window]; both bounds inclusive, so
    the boundary day counts toward both.

    Args:
        expenses: expense list
        reference_date: last day of the recent window
        window_days: window length in days

    Returns:
        TrendComparison (percent_change is None when the prior total is not positive)
    """
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")

    expenses = list(expenses)
    window = timedelta(days=window_days)
    recent_start = reference_date - window
    prior_start = reference_date - 2 * window

    recent = filter_expenses(expenses, FilterCriteria(start_date=recent_start, end_date=reference_date))
    prior = filter_expenses(expenses, FilterCriteria(start_date=prior_start, end_date=recent_start))

    recent_total = calculate_total(recent)
    prior_total = calculate_total(prior)
    delta = recent_total - prior_total

    percent_change = None
    if prior_total > ZERO:
        percent_change = delta / prior_total * HUNDRED

    return TrendComparison(
        reference_date=reference_date,
        window_days=window_days,
        recent_total=recent_total,
        prior_total=prior_total,
        delta=delta,
        percent_change=percent_change
    )
