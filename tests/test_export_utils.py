"""
Tests for table rendering and CSV export
"""

from datetime import datetime

import pandas as pd

from tests.conftest import make_expense
from utils.export_utils import (
    EXPORT_COLUMNS,
    build_export_filename,
    expenses_to_dataframe,
    export_expenses_to_csv,
    format_expense_table,
    truncate
)


class TestTable:
    """Tests for the fixed-width console table."""

    def test_truncate(self):
        """Test truncation with an ellipsis."""
        assert truncate(None, 10) == ""
        assert truncate("short", 10) == "short"
        assert truncate("a" * 30, 10) == "aaaaaaa..."

    def test_table_rows_and_totals(self, sample_expenses):
        """Test header, row formatting and the totals footer."""
        text = format_expense_table(sample_expenses)
        lines = text.splitlines()
        assert lines[0].split() == EXPORT_COLUMNS
        assert lines[2].startswith("1     2024-01-10   Food")
        assert "10.00" in lines[2]
        assert "Total expenses displayed: 35.50" in text
        assert "Transport      : 20.00" in text


class TestCsvExport:
    """Tests for the CSV export."""

    def test_filename(self):
        """Test the timestamped file name."""
        assert build_export_filename(datetime(2024, 2, 10, 8, 5, 3)) == "expenses_20240210_080503.csv"

    def test_dataframe_keeps_full_precision(self, sample_expenses):
        """Test export columns and exact amount text."""
        df = expenses_to_dataframe(sample_expenses)
        assert list(df.columns) == EXPORT_COLUMNS
        assert df.loc[1, 'Amount'] == "5.50"
        assert df.loc[2, 'Date'] == "2024-02-01"

    def test_export_creates_directory(self, tmp_path, sample_expenses):
        """Test that the export directory is created and the CSV written."""
        target = tmp_path / "nested" / "export"
        path = export_expenses_to_csv(sample_expenses, str(target), "out.csv")
        assert path == target / "out.csv"

        with open(path, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
        assert lines[0] == "ID,Date,Category,Description,Amount"
        assert lines[1] == "1,2024-01-10,Food,Lunch,10.00"

        df = pd.read_csv(path, dtype=str)
        assert list(df['Amount']) == ["10.00", "5.50", "20.00"]

    def test_export_empty_description(self, tmp_path):
        """Test that a missing description is written as an empty field."""
        expense = make_expense(9, datetime(2024, 3, 1).date(), "Misc", "1.234")
        path = export_expenses_to_csv([expense], str(tmp_path), "one.csv")
        with open(path, encoding="utf-8") as handle:
            assert handle.read().splitlines()[1] == "9,2024-03-01,Misc,,1.234"


class TestAmountText:
    """Tests for displayed and exported amount text."""

    def test_table_rounds_half_cent_up(self):
        """Test that 2.345 is shown as 2.35."""
        expense = make_expense(1, datetime(2024, 3, 1).date(), "Misc", "2.345")
        text = format_expense_table([expense])
        row = text.splitlines()[2]
        assert row.split()[-1] == "2.35"
        assert "Total expenses displayed: 2.35" in text
        assert "Misc           : 2.35" in text

    def test_csv_amount_has_no_exponent(self):
        """Test that exponent-form amounts are written as plain digits."""
        expenses = [
            make_expense(1, datetime(2024, 3, 1).date(), "Misc", "1E+2"),
            make_expense(2, datetime(2024, 3, 1).date(), "Misc", "0.00000001"),
        ]
        df = expenses_to_dataframe(expenses)
        assert list(df['Amount']) == ["100", "0.00000001"]
