"""
Date parsing helpers
"""

from datetime import date, datetime


def parse_date(date_str: str) -> date:
    """
    Convert a date string into a date object.
    Also accepts '2025-11-29T00:00:00' and '2025-11-29 00:00:00' forms.

    Args:
        date_str: date string (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)

    Returns:
        date object
    """
    if isinstance(date_str, datetime):
        return date_str.date()

    if isinstance(date_str, date):
        return date_str

    if date_str is None:
        raise ValueError("Date is None")

    date_str = str(date_str).strip()

    if not date_str:
        raise ValueError("Empty date string")

    # datetime form (with time of day)
    if 'T' in date_str:
        date_part = date_str.split('T')[0]
        try:
            return date.fromisoformat(date_part)
        except ValueError:
            dt = datetime.fromisoformat(date_str.replace('Z', '+00:00'))
            return dt.date()

    # e.g. '2025-11-29 00:00:00'
    if ' ' in date_str:
        date_part = date_str.split(' ')[0]
        try:
            return date.fromisoformat(date_part)
        except ValueError:
            return datetime.fromisoformat(date_str).date()

    try:
        return date.fromisoformat(date_str)
    except ValueError as e:
        raise ValueError(f"Could not parse date: '{date_str}' - {str(e)}")


def month_key(value: date) -> str:
    """Year-month key in YYYY-MM form"""
    return f"{value.year:04d}-{value.month:02d}"
