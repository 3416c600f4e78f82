"""
Business Hours Package

Weekly business-hours window and the clock it is evaluated against.
"""

from .business_hours import (
    BusinessHoursEvaluator,
    Weekday,
    WeeklyWindow,
    is_within_business_hours,
    parse_hour,
    parse_weekday,
)
from .clock import Clock, FixedClock, SystemClock

__all__ = [
    "BusinessHoursEvaluator",
    "Weekday",
    "WeeklyWindow",
    "is_within_business_hours",
    "parse_hour",
    "parse_weekday",
    "Clock",
    "FixedClock",
    "SystemClock",
]
