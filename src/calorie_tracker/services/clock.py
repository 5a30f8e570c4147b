"""Clock abstraction supplying the current instant and local date."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current time in the user's time zone."""

    @property
    def tz(self) -> ZoneInfo:
        """Return the user's time zone."""

    def now(self) -> datetime:
        """Return the current instant as an aware datetime."""

    def today(self) -> date:
        """Return the current calendar date in the user's time zone."""


@dataclass
class SystemClock(Clock):
    """Clock backed by the system time and a configured time zone."""

    timezone_name: str = "UTC"
    _tz: ZoneInfo = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._tz = ZoneInfo(self.timezone_name)

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(tz=UTC)

    def today(self) -> date:
        return self.now().astimezone(self._tz).date()
