"""
Table rendering and CSV export
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from database.models import Expense
from utils.analysis_utils import calculate_category_totals, calculate_total, format_money
from utils.logging_utils import get_logger

logger = get_logger(__name__)

EXPORT_COLUMNS = ['ID', 'Date', 'Category', 'Description', 'Amount']
TABLE_RULE = "-" * 74
DESCRIPTION_WIDTH = 28


def truncate(text: Optional[str], max_length: int) -> str:
    """Cut text to max_length, ending with '...' when shortened"""
    if text is None:
        return ""
    if len(text) > max_length:
        return text[:max_length - 3] + "..."
    return text


def format_expense_table(expenses: List[Expense]) -> str:
    """
    Render expenses as a fixed-width table followed by the total and
    per-category totals.

    Args:
        expenses: expenses to show

    Returns:
        table text
    """
    lines = [
        f"{'ID':<5} {'Date':<12} {'Category':<15} {'Description':<30} {'Amount':<10}",
        TABLE_RULE
    ]
    for expense in expenses:
        lines.append(
            f"{expense.id:<5} {expense.date.isoformat():<12} {expense.category:<15} "
            f"{truncate(expense.description, DESCRIPTION_WIDTH):<30} {format_money(expense.amount):<10}"
        )
    lines.append(TABLE_RULE)
    lines.append(f"Total expenses displayed: {format_money(calculate_total(expenses))}")

    category_totals = calculate_category_totals(expenses)
    if category_totals:
        lines.append("")
        lines.append("Category Totals:")
        for category, amount in category_totals.items():
            lines.append(f"  {category:<15}: {format_money(amount)}")
    return "\n".join(lines)


def expenses_to_dataframe(expenses: List[Expense]) -> pd.DataFrame:
    """
    Build the export table.

    Dates are YYYY-MM-DD and amounts keep their full precision.

    Args:
        expenses: expenses to export

    Returns:
        DataFrame with the ID, Date, Category, Description, Amount columns
    """
    data: List[Dict] = [
        {
            'ID': expense.id,
            'Date': expense.date.strftime('%Y-%m-%d'),
            'Category': expense.category,
            'Description': expense.description or '',
            'Amount': format(expense.amount, 'f')
        }
        for expense in expenses
    ]
    return pd.DataFrame(data, columns=EXPORT_COLUMNS)


def build_export_filename(now: Optional[datetime] = None) -> str:
    """expenses_YYYYMMDD_HHMMSS.csv"""
    now = now or datetime.now()
    return f"expenses_{now.strftime('%Y%m%d_%H%M%S')}.csv"


def export_expenses_to_csv(
    expenses: List[Expense],
    export_dir: str,
    filename: Optional[str] = None
) -> Path:
    """
    Write expenses to a CSV file.

    Args:
        expenses: expenses to export
        export_dir: target directory (created when missing)
        filename: file name (default expenses_<timestamp>.csv)

    Returns:
        path of the written file
    """
    directory = Path(export_dir)
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        logger.info("export_directory_created", path=str(directory))

    file_path = directory / (filename or build_export_filename())
    expenses_to_dataframe(expenses).to_csv(file_path, index=False, encoding='utf-8')
    logger.info("expenses_exported", path=str(file_path), count=len(expenses))
    return file_path
