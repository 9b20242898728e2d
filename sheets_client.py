"""Google Sheets client wrapper using gspread.

``SheetsClient`` opens a spreadsheet with service-account credentials and
hands out ``Sheet`` objects: thin row sinks over a single worksheet that can
append a row, delete rows matching a predicate and read rows back.
"""

import logging
import os
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

import gspread
from google.oauth2.service_account import Credentials

import config

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

GET_VALUES_OPTIONS = {"as_objects", "offset", "limit", "reverse"}

RowPredicate = Callable[[list, int], bool]


@runtime_checkable
class RowSink(Protocol):
    """Anything a log can be written to: append, delete by predicate, read back."""

    def append_row(self, values: Sequence[Any]) -> Any: ...

    def delete_rows(self, predicate: RowPredicate) -> Any: ...

    def get_values(self, options: dict | None = None) -> Any: ...


class Sheet:
    """Row sink over one worksheet. Row 1 holds *headers* when given."""

    def __init__(self, worksheet: gspread.Worksheet, headers: Sequence[str] | None = None):
        self.worksheet = worksheet
        self.headers = list(headers) if headers else None

    @property
    def name(self) -> str:
        return self.worksheet.title

    @property
    def _header_rows(self) -> int:
        return 1 if self.headers else 0

    @staticmethod
    def is_sheet(value: Any) -> bool:
        return isinstance(value, Sheet)

    def append_row(self, values: Sequence[Any]) -> "Sheet":
        """Append one row; ``None`` cells are written empty."""
        row = ["" if v is None else v for v in values]
        logger.debug("append_row | tab=%s cells=%d", self.name, len(row))
        self.worksheet.append_row(row, value_input_option="RAW")
        return self

    def _data_rows(self) -> list[list]:
        rows = self.worksheet.get_all_values()[self._header_rows:]
        if self.headers:
            width = len(self.headers)
            rows = [row + [""] * (width - len(row)) for row in rows]
        return rows

    def delete_rows(self, predicate: RowPredicate) -> int:
        """Delete every data row for which ``predicate(row, index)`` is true.

        Returns the number of rows deleted. The header row is left alone.
        """
        matches = [i for i, row in enumerate(self._data_rows()) if predicate(row, i)]
        if not matches:
            return 0

        # Group into contiguous blocks and delete bottom-up so that the
        # indexes of the blocks still to delete do not shift.
        blocks = []
        start = prev = matches[0]
        for i in matches[1:]:
            if i != prev + 1:
                blocks.append((start, prev))
                start = i
            prev = i
        blocks.append((start, prev))

        offset = self._header_rows + 1
        for first, last in reversed(blocks):
            self.worksheet.delete_rows(first + offset, last + offset)

        logger.debug("delete_rows | tab=%s deleted=%d blocks=%d", self.name, len(matches), len(blocks))
        return len(matches)

    def get_values(self, options: dict | None = None) -> list:
        """Read data rows back.

        Options: ``as_objects`` (dicts keyed by header instead of lists),
        ``offset`` / ``limit`` (slice of data rows) and ``reverse`` (newest
        first, applied before slicing).
        """
        options = dict(options or {})
        unknown = set(options) - GET_VALUES_OPTIONS
        if unknown:
            raise TypeError(f"Unknown get_values option(s): {', '.join(sorted(unknown))}")

        as_objects = bool(options.get("as_objects", False))
        if as_objects and not self.headers:
            raise ValueError(f"Sheet {self.name!r} has no header row to key objects by")
        offset = int(options.get("offset") or 0)
        limit = options.get("limit")
        if offset < 0 or (limit is not None and int(limit) < 0):
            raise ValueError("offset and limit must not be negative")

        rows = self._data_rows()
        if options.get("reverse"):
            rows.reverse()
        rows = rows[offset:] if limit is None else rows[offset:offset + int(limit)]
        logger.debug("get_values | tab=%s rows=%d", self.name, len(rows))

        if as_objects:
            return [dict(zip(self.headers, row)) for row in rows]
        return rows


class SheetsClient:
    """Thin wrapper around gspread for opening named tabs as row sinks."""

    def __init__(self, spreadsheet_name: str, credentials_path: str | None = None):
        creds_path = credentials_path or config.CREDENTIALS_PATH
        if not os.path.exists(creds_path):
            raise FileNotFoundError(f"Google credentials file not found: {creds_path}")
        self.credentials = Credentials.from_service_account_file(creds_path, scopes=SCOPES)
        self.gc = gspread.authorize(self.credentials)
        self.spreadsheet = self.gc.open(spreadsheet_name)
        logger.info("Opened spreadsheet %r", spreadsheet_name)

    @property
    def service_account_email(self) -> str | None:
        return getattr(self.credentials, "service_account_email", None)

    @property
    def time_zone(self) -> str | None:
        return getattr(self.spreadsheet, "timezone", None)

    def get_or_create_sheet(self, tab_name: str, headers: list[str]) -> gspread.Worksheet:
        """Return the worksheet named *tab_name*, creating it if needed."""
        try:
            ws = self.spreadsheet.worksheet(tab_name)
        except gspread.exceptions.WorksheetNotFound:
            logger.info("Creating worksheet %r", tab_name)
            ws = self.spreadsheet.add_worksheet(title=tab_name, rows=1000, cols=len(headers))
            ws.append_row(headers, value_input_option="RAW")
            return ws

        # An existing but empty tab still needs its header row.
        if not any(ws.row_values(1)):
            logger.info("Writing header row to worksheet %r", tab_name)
            ws.append_row(headers, value_input_option="RAW")
        return ws

    def sheet(self, tab_name: str, headers: list[str]) -> Sheet:
        """Return *tab_name* wrapped as a ``Sheet``, creating it if needed."""
        return Sheet(self.get_or_create_sheet(tab_name, headers), headers)
