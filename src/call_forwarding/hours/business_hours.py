"""
Business Hours Evaluator

Decides whether an instant falls inside a recurring weekly business-hours
window, e.g. "Monday through Friday, 8 through 18".

The window is checked as two independent gates:
- a week gate, from the most recent start day at the start hour to the
  following end day at the end hour
- a day gate, from today's start hour to today's end hour

Boundary instants count as inside.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum
import pytz

from ..errors import ConfigurationError
from .clock import Clock, SystemClock


class Weekday(Enum):
    """Days of the week, numbered like datetime.weekday()."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()


def parse_weekday(name: str) -> Weekday:
    """Resolve a full or three-letter day name, case-insensitively."""
    normalized = (name or "").strip().upper()
    for day in Weekday:
        if normalized in (day.name, day.name[:3]):
            return day
    raise ConfigurationError(f"Unknown weekday: {name!r}")


def parse_hour(value: Union[str, int]) -> int:
    """Resolve an hour of the day (0-23)."""
    try:
        hour = int(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"Hour must be an integer, got {value!r}") from None
    if not 0 <= hour <= 23:
        raise ConfigurationError(f"Hour must be between 0 and 23, got {hour}")
    return hour


def resolve_timezone(name: str) -> pytz.BaseTzInfo:
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ConfigurationError(f"Unknown timezone: {name!r}") from None


@dataclass(frozen=True)
class WeeklyWindow:
    """A recurring weekly business-hours window."""
    start_day: Weekday
    end_day: Weekday
    start_hour: int
    end_hour: int
    timezone: str = "UTC"

    def __post_init__(self):
        for day in (self.start_day, self.end_day):
            if not isinstance(day, Weekday):
                raise ConfigurationError(f"Expected a Weekday, got {day!r}")
        for hour in (self.start_hour, self.end_hour):
            if not isinstance(hour, int) or isinstance(hour, bool):
                raise ConfigurationError(f"Expected an integer hour, got {hour!r}")
            parse_hour(hour)
        resolve_timezone(self.timezone)

    @classmethod
    def from_strings(
        cls,
        start_day: str,
        end_day: str,
        start_hour: Union[str, int],
        end_hour: Union[str, int],
        timezone: str = "UTC",
    ) -> "WeeklyWindow":
        """Build a window from raw configuration values, validating all of them."""
        return cls(
            start_day=parse_weekday(start_day),
            end_day=parse_weekday(end_day),
            start_hour=parse_hour(start_hour),
            end_hour=parse_hour(end_hour),
            timezone=timezone,
        )

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    @property
    def overnight(self) -> bool:
        """True when the daily hours wrap past midnight (e.g. 22-6)."""
        return self.end_hour < self.start_hour

    def describe(self) -> str:
        return (
            f"{self.start_day.label}-{self.end_day.label} "
            f"{self.start_hour:02d}:00-{self.end_hour:02d}:00 {self.timezone}"
        )


def _at_hour(tz: pytz.BaseTzInfo, day: date, hour: int) -> datetime:
    return tz.localize(datetime.combine(day, time(hour)))


def _localize(now: datetime, tz: pytz.BaseTzInfo) -> datetime:
    # Naive instants are read as wall-clock time in the window's timezone
    if now.tzinfo is None:
        return tz.localize(now)
    return now.astimezone(tz)


def week_bounds(now: datetime, window: WeeklyWindow, weeks_back: int = 0) -> tuple[datetime, datetime]:
    """
    Return (week_start, week_end) for the window occurrence anchored before now.

    weeks_back selects an earlier occurrence (1 = the one before that).
    """
    tz = window.tz
    today = _localize(now, tz).date()

    days_since_start = (today.weekday() - window.start_day.value) % 7
    start_date = today - timedelta(days=days_since_start + 7 * weeks_back)

    span = (window.end_day.value - window.start_day.value) % 7
    if window.overnight:
        # The last shift ends the morning after the end day
        span += 1
    end_date = start_date + timedelta(days=span)

    return _at_hour(tz, start_date, window.start_hour), _at_hour(tz, end_date, window.end_hour)


def day_bounds(now: datetime, window: WeeklyWindow) -> tuple[datetime, datetime]:
    """Return (day_start, day_end) for the day containing now."""
    tz = window.tz
    today = _localize(now, tz).date()
    return _at_hour(tz, today, window.start_hour), _at_hour(tz, today, window.end_hour)


def is_within_business_hours(now: datetime, window: WeeklyWindow) -> bool:
    """Check whether now falls inside the window. Boundaries are inclusive."""
    now = _localize(now, window.tz)

    # An overnight shift from the previous occurrence can spill into this
    # occurrence's start-day morning
    occurrences = (0, 1) if window.overnight else (0,)
    week_spans = [week_bounds(now, window, weeks_back) for weeks_back in occurrences]
    if not any(start <= now <= end for start, end in week_spans):
        return False

    day_start, day_end = day_bounds(now, window)
    if window.overnight:
        return now >= day_start or now <= day_end
    return day_start <= now <= day_end


class BusinessHoursEvaluator:
    """
    Evaluates a configured window against a clock.

    The window is validated when it is built, so evaluation never fails.
    """

    def __init__(self, window: WeeklyWindow, clock: Optional[Clock] = None):
        self.window = window
        self.clock = clock or SystemClock()

    def is_open(self) -> bool:
        """Check the window against the clock's current instant."""
        return self.is_open_at(self.clock.now())

    def is_open_at(self, instant: datetime) -> bool:
        return is_within_business_hours(instant, self.window)

    def next_open_time(self, after: Optional[datetime] = None) -> Optional[datetime]:
        """
        Get the next instant the window opens.

        Returns `after` itself when the window is already open, or None when
        the window never opens (e.g. its week gate ends before its first
        day gate starts).
        """
        tz = self.window.tz
        after = _localize(after if after is not None else self.clock.now(), tz)

        if self.is_open_at(after):
            return after

        # Check up to a week ahead, plus today
        for days_ahead in range(8):
            candidate = _at_hour(tz, after.date() + timedelta(days=days_ahead), self.window.start_hour)
            if candidate >= after and self.is_open_at(candidate):
                return candidate

        return None

    def describe(self) -> str:
        return self.window.describe()
