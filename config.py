"""Environment-driven settings for the sheet logger.

Scripts that want the diagnostic output on stdout call ``configure_logging``
before opening the log::

    import config
    from sheet_log import SheetLog

    config.configure_logging()
    SheetLog.open().info("job started")
"""

import logging
import os
import sys

SPREADSHEET_NAME = os.environ.get("SPREADSHEET_NAME", "Sheet Log")
CREDENTIALS_PATH = os.environ.get(
    "GOOGLE_CREDENTIALS_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "credentials.json"),
)
LOG_TAB = os.environ.get("SHEET_LOG_TAB", "Log")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Send diagnostic logging to stdout at *level* (defaults to LOG_LEVEL)."""
    level = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
        stream=sys.stdout,
    )
