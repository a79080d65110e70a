"""
Summary report generation
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from database.models import Expense
from utils.analysis_utils import (
    TrendComparison,
    calculate_average,
    calculate_category_shares,
    calculate_category_stats,
    calculate_category_totals,
    calculate_monthly_totals,
    calculate_total,
    compare_trend,
    format_money,
    format_percent,
    sort_category_totals,
    sort_monthly_totals
)
from utils.logging_utils import get_logger

logger = get_logger(__name__)

RULE = "-" * 40


@dataclass
class SummaryReport:
    """Aggregates behind the summary screen"""
    count: int
    total: Decimal
    average: Decimal
    category_breakdown: List[Tuple[str, Decimal]]
    category_shares: Dict[str, Decimal]
    monthly_totals: List[Tuple[str, Decimal]]
    trend: TrendComparison
    category_stats: Dict[str, Dict] = field(default_factory=dict)


class ReportService:
    """Report generation"""

    def __init__(self, trend_window_days: int = 7):
        """
        Initialise

        Args:
            trend_window_days: length of each trend window in days
        """
        self.trend_window_days = trend_window_days

    def build_summary(self, expenses: List[Expense], today: date) -> Optional[SummaryReport]:
        """
        Compute every aggregate of the summary screen.

        Args:
            expenses: expenses to summarise
            today: reference date for the trend windows

        Returns:
            SummaryReport, or None when there are no expenses
        """
        if not expenses:
            return None

        total = calculate_total(expenses)
        category_totals = calculate_category_totals(expenses)

        report = SummaryReport(
            count=len(expenses),
            total=total,
            average=calculate_average(expenses),
            category_breakdown=sort_category_totals(category_totals),
            category_shares=calculate_category_shares(category_totals, total),
            monthly_totals=sort_monthly_totals(calculate_monthly_totals(expenses)),
            trend=compare_trend(expenses, today, self.trend_window_days),
            category_stats=calculate_category_stats(expenses)
        )
        logger.info("summary_built", count=report.count, total=str(report.total))
        return report

    def format_summary(self, report: SummaryReport) -> str:
        """Render a SummaryReport as console text"""
        lines = [
            "=== EXPENSE SUMMARY REPORTS ===",
            "",
            f"Total Expenses: ${format_money(report.total)}",
            f"Average Expense: ${format_money(report.average)}",
            f"Number of Expenses: {report.count}",
            "",
            "Category Breakdown:",
            RULE
        ]
        for category, amount in report.category_breakdown:
            share = report.category_shares.get(category, Decimal("0"))
            count = report.category_stats.get(category, {}).get('count', 0)
            lines.append(f"  {category:<15}: ${format_money(amount):>8} ({share:>5.1f}%) x{count}")

        lines += ["", "Monthly Summary:", RULE]
        for month, amount in report.monthly_totals:
            lines.append(f"  {month:<10}: ${format_money(amount):>8}")

        trend = report.trend
        lines += [
            "",
            "Recent Trends:",
            RULE,
            f"  Last {trend.window_days} days:     ${format_money(trend.recent_total):>8}",
            f"  Previous {trend.window_days} days: ${format_money(trend.prior_total):>8}"
        ]
        if trend.percent_change is not None:
            arrow = "up" if trend.is_increase else "down"
            lines.append(
                f"  Change:          {arrow} ${format_money(abs(trend.delta)):>8} ({format_percent(trend.percent_change)}%)"
            )
        return "\n".join(lines)
