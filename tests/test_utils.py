"""
Tests for the date helpers and temporary export files.
"""

import csv
from datetime import date, datetime, timedelta, timezone

import pytest

from library_api.exceptions import InternalError
from library_api.utils.dates import end_of_day, format_date, previous_month_range
from library_api.utils.export import remove_file, write_csv_file


class TestDates:

    def test_previous_month_range(self):
        start, end = previous_month_range(date(2026, 10, 19))

        assert start == datetime(2026, 9, 1, tzinfo=timezone.utc)
        assert end == datetime(2026, 9, 30, 23, 59, 59, 999999, tzinfo=timezone.utc)

    def test_previous_month_range_in_january(self):
        start, end = previous_month_range(date(2026, 1, 5))

        assert start.date() == date(2025, 12, 1)
        assert end.date() == date(2025, 12, 31)

    def test_previous_month_range_leap_february(self):
        _, end = previous_month_range(date(2028, 3, 1))

        assert end.date() == date(2028, 2, 29)

    def test_end_of_day_is_inclusive(self):
        assert end_of_day(date(2026, 3, 20)) + timedelta(microseconds=1) == datetime(
            2026, 3, 21, tzinfo=timezone.utc
        )

    def test_format_date_naive(self):
        assert format_date(datetime(2026, 3, 5, 23, 59)) == "2026-03-05"

    def test_format_date_converts_to_utc(self):
        value = datetime(2026, 3, 6, 1, 0, tzinfo=timezone(timedelta(hours=5)))

        assert format_date(value) == "2026-03-05"

    def test_format_date_none(self):
        assert format_date(None) is None


class TestExportFiles:

    def test_write_csv_file(self, tmp_path):
        path = write_csv_file(
            rows=[{"Title": "Dune", "Author": "Frank Herbert, Jr."}],
            headings=["Title", "Author"],
            directory=str(tmp_path),
            prefix="books-",
        )

        with open(path, newline="", encoding="utf-8") as file:
            rows = list(csv.DictReader(file))
        assert rows == [{"Title": "Dune", "Author": "Frank Herbert, Jr."}]
        assert path.endswith(".csv")

        remove_file(path)
        assert list(tmp_path.iterdir()) == []

    def test_write_csv_file_header_only(self, tmp_path):
        path = write_csv_file(rows=[], headings=["A", "B"], directory=str(tmp_path))

        with open(path, encoding="utf-8") as file:
            assert file.read().strip() == "A,B"

    def test_write_csv_file_missing_directory(self, tmp_path):
        with pytest.raises(InternalError):
            write_csv_file(
                rows=[],
                headings=["A"],
                directory=str(tmp_path / "does-not-exist"),
            )

    def test_remove_missing_file(self, tmp_path):
        remove_file(str(tmp_path / "already-gone.csv"))
