"""SheetLog: writes log entries as rows of a Google Sheets tab.

Columns: Timestamp | Level | User | Message

Example::

    logger = SheetLog.open(tab_name="Log")

    logger.log("Hello")
    logger.log("Hello", "Maksym")
    logger.log("Hello", 1, {"key": "Maksym"})
    logger.log("Hello %s !", "Maksym")
    logger.log("stoianov.maksym@gmail.com", "Hello %s !", "Maksym")
"""

import logging
import re
from typing import Any, Sequence

import config
from formatting import LogValue, format_message
from session import Session
from sheets_client import RowSink, SheetsClient

logger = logging.getLogger(__name__)

HEADERS = ["Timestamp", "Level", "User", "Message"]
LEVELS = ("log", "info", "warn", "error")

EMAIL_RE = re.compile(r"[a-z0-9][a-z0-9._%+-]*@[a-z0-9.-]+\.[a-z]{2,}", re.IGNORECASE)

_MISSING = object()


class SheetLog:
    """Appends one row per log call to a row sink (usually a ``Sheet``)."""

    def __init__(self, sheet: RowSink, session: Session | None = None):
        if not isinstance(sheet, RowSink):
            raise TypeError(f"SheetLog needs a row sink, got {type(sheet).__name__}")
        self.sheet = sheet
        self.session = session or Session()

    @classmethod
    def open(
        cls,
        spreadsheet_name: str | None = None,
        tab_name: str | None = None,
        credentials_path: str | None = None,
        session: Session | None = None,
    ) -> "SheetLog":
        """Open (or create) the log tab of a spreadsheet."""
        client = SheetsClient(spreadsheet_name or config.SPREADSHEET_NAME, credentials_path)
        sheet = client.sheet(tab_name or config.LOG_TAB, HEADERS)
        if session is None:
            session = Session.from_env(
                default_time_zone=client.time_zone,
                default_user_email=client.service_account_email,
            )
        return cls(sheet, session)

    @classmethod
    def is_sheet_log(cls, value: Any = _MISSING) -> bool:
        if value is _MISSING:
            raise TypeError(f"The parameters () don't match any method signature for {cls.__name__}.is_sheet_log.")
        return isinstance(value, cls)

    @classmethod
    def is_email(cls, value: Any = _MISSING) -> bool:
        """True if *value* looks like an email address."""
        if value is _MISSING:
            raise TypeError(f"The parameters () don't match any method signature for {cls.__name__}.is_email.")
        return isinstance(value, str) and EMAIL_RE.fullmatch(value) is not None

    def _append_row(self, values: Sequence[LogValue], level: str = "log") -> "SheetLog":
        if not (isinstance(values, (list, tuple)) and values):
            raise TypeError("At least one event message must be provided")
        if level not in LEVELS:
            raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LEVELS)}")

        timestamp = self.session.timestamp()

        values = list(values)
        # A leading email names the user the entry is logged for.
        if isinstance(values[0], str) and self.is_email(values[0]):
            user = values.pop(0)
        else:
            user = self.session.active_user_email()

        if not values:
            raise TypeError("At least one event message must be provided")

        message = format_message(values)
        self.sheet.append_row([timestamp, level, user, message])
        sink_name = getattr(self.sheet, "name", type(self.sheet).__name__)
        logger.debug("appended %s entry | tab=%s user=%s", level, sink_name, user)
        return self

    def log(self, *values: LogValue) -> "SheetLog":
        return self._append_row(values, "log")

    def info(self, *values: LogValue) -> "SheetLog":
        return self._append_row(values, "info")

    def warn(self, *values: LogValue) -> "SheetLog":
        return self._append_row(values, "warn")

    warning = warn

    def error(self, *values: LogValue) -> "SheetLog":
        return self._append_row(values, "error")

    def clear(self) -> int:
        """Delete every entry, keeping the header row."""
        return self.sheet.delete_rows(lambda row, index: True)

    def get_log(self, options: dict | None = None) -> list:
        """Return the entries as ``Sheet.get_values`` reads them."""
        return self.sheet.get_values(options)
