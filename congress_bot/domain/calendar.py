from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Colombo"
DEFAULT_CONGRESS_DAYS = 9


class FixedStartCalendar:
    """
    Календарь конгресса: день 1 начинается в дату старта по местному времени.
    До старта день <= 0, после окончания день > days.
    """

    def __init__(
        self,
        start: date,
        *,
        days: int = DEFAULT_CONGRESS_DAYS,
        timezone: str | tzinfo = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[tzinfo], datetime]] = None,
    ):
        self._start = start
        self._days = days
        self._tz = ZoneInfo(timezone) if isinstance(timezone, str) else timezone
        self._clock = clock or (lambda tz: datetime.now(tz))

    @property
    def days(self) -> int:
        return self._days

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return self._clock(self._tz)

    def current_day(self) -> int:
        return (self.now().date() - self._start).days + 1

    def is_accepting(self) -> bool:
        return 1 <= self.current_day() <= self._days
