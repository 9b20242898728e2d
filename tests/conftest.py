from datetime import datetime, timezone

import pytest

from session import Session
from sheet_log import HEADERS, SheetLog
from sheets_client import Sheet

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45, tzinfo=timezone.utc)


class FakeWorksheet:
    """In-memory stand-in for the gspread.Worksheet calls we make."""

    def __init__(self, title="Log", rows=None):
        self.title = title
        self.rows = [list(r) for r in rows or []]
        self.deleted_ranges = []

    def append_row(self, values, value_input_option="RAW"):
        self.rows.append(["" if v is None else str(v) for v in values])

    def row_values(self, row):
        return list(self.rows[row - 1]) if row <= len(self.rows) else []

    def get_all_values(self):
        return [list(r) for r in self.rows]

    def delete_rows(self, start_index, end_index=None):
        end_index = end_index or start_index
        self.deleted_ranges.append((start_index, end_index))
        del self.rows[start_index - 1:end_index]


@pytest.fixture()
def worksheet():
    return FakeWorksheet(rows=[HEADERS])


@pytest.fixture()
def sheet(worksheet):
    return Sheet(worksheet, HEADERS)


@pytest.fixture()
def session():
    return Session(time_zone="UTC", user_email="owner@example.com", clock=lambda: FIXED_NOW)


@pytest.fixture()
def sheet_log(sheet, session):
    return SheetLog(sheet, session)
