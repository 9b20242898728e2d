"""Ambient context for log entries: clock, time zone and acting user.

A ``Session`` is handed to the logger explicitly instead of being looked up
globally, so tests can pin the clock and the user.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Session:
    """Clock, time zone and active-user lookup for one logger."""

    def __init__(
        self,
        time_zone: str | None = None,
        user_email: str | Callable[[], str | None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.time_zone = time_zone
        self._zone = None
        if time_zone:
            try:
                self._zone = ZoneInfo(time_zone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown time zone: {time_zone!r}") from e
        self._user_email = user_email
        self._clock = clock or _utcnow

    @classmethod
    def from_env(
        cls,
        default_time_zone: str | None = None,
        default_user_email: str | Callable[[], str | None] | None = None,
    ) -> "Session":
        """Build a session from SHEET_LOG_TIME_ZONE / SHEET_LOG_USER_EMAIL."""
        time_zone = os.environ.get("SHEET_LOG_TIME_ZONE") or default_time_zone
        user_email = os.environ.get("SHEET_LOG_USER_EMAIL") or default_user_email
        return cls(time_zone=time_zone, user_email=user_email)

    def now(self) -> datetime:
        current = self._clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        if self._zone is None:
            return current.astimezone()
        return current.astimezone(self._zone)

    def timestamp(self) -> str:
        return self.now().strftime(TIMESTAMP_FORMAT)

    def active_user_email(self) -> str | None:
        """Return the acting user's email, or None when nobody is known."""
        source = self._user_email
        if callable(source):
            try:
                source = source()
            except Exception:
                logger.warning("Active user lookup failed", exc_info=True)
                return None
        return source or None
