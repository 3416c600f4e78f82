"""Time sources used by the business-hours evaluator."""

from abc import ABC, abstractmethod
from datetime import datetime

import pytz


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(Clock):
    """Wall-clock time, always timezone-aware (UTC)."""

    def now(self) -> datetime:
        return datetime.now(pytz.utc)


class FixedClock(Clock):
    """Clock frozen at a single instant."""

    def __init__(self, fixed_time: datetime):
        self.fixed_time = fixed_time

    def now(self) -> datetime:
        return self.fixed_time
