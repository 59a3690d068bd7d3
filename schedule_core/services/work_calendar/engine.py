# schedule_core/services/work_calendar/engine.py
from __future__ import annotations

from datetime import date, timedelta
from typing import FrozenSet

from schedule_core.exceptions import InvalidCalendarConfig

# weekday() numbers: Monday=0 .. Sunday=6
_WORKING_WEEKDAYS: dict[int, FrozenSet[int]] = {
    5: frozenset({0, 1, 2, 3, 4}),
    6: frozenset({0, 1, 2, 3, 4, 5}),
    7: frozenset({0, 1, 2, 3, 4, 5, 6}),
}


def validate_working_days_per_week(working_days_per_week: object) -> int:
    if isinstance(working_days_per_week, bool) or working_days_per_week not in _WORKING_WEEKDAYS:
        raise InvalidCalendarConfig(working_days_per_week)
    return int(working_days_per_week)


class WorkCalendarEngine:
    """
    Working-day arithmetic under a fixed working-week policy.

    5 days/week skips Saturday and Sunday, 6 skips Sunday only, 7 skips nothing.
    There is no holiday calendar.
    """

    def __init__(self, working_days_per_week: int = 6):
        self._working_days_per_week: int = validate_working_days_per_week(working_days_per_week)
        self._working_weekdays: FrozenSet[int] = _WORKING_WEEKDAYS[self._working_days_per_week]

    @property
    def working_days_per_week(self) -> int:
        return self._working_days_per_week

    def is_working_day(self, d: date) -> bool:
        return d.weekday() in self._working_weekdays

    def next_working_day(self, d: date, include_today: bool = True) -> date:
        current = d
        if not include_today:
            current += timedelta(days=1)
        while not self.is_working_day(current):
            current += timedelta(days=1)
        return current

    def previous_working_day(self, d: date, include_today: bool = True) -> date:
        current = d
        if not include_today:
            current -= timedelta(days=1)
        while not self.is_working_day(current):
            current -= timedelta(days=1)
        return current

    def add_working_days(self, start: date, working_days: int) -> date:
        """
        Advance `working_days` working days from `start` (backwards when negative).

        Zero returns `start` unchanged. Otherwise the result is always a working day.
        """
        if working_days == 0:
            return start

        step = timedelta(days=1 if working_days > 0 else -1)
        days_remaining = abs(working_days)
        current = start
        while days_remaining > 0:
            current += step
            if self.is_working_day(current):
                days_remaining -= 1
        return current

    def count_working_days(self, start: date, end: date) -> int:
        """Inclusive count of working days in [start, end]; negated when end < start."""
        if end < start:
            return -self.count_working_days(end, start)

        full_weeks, remainder = divmod((end - start).days + 1, 7)
        count = full_weeks * self._working_days_per_week
        current = start + timedelta(days=full_weeks * 7)
        for _ in range(remainder):
            if self.is_working_day(current):
                count += 1
            current += timedelta(days=1)
        return count

    def working_days_offset(self, start: date, end: date) -> int:
        """
        Signed number of working days strictly after `start` up to and including `end`.

        For a working-day `start` this equals count_working_days(start, end) - 1,
        i.e. the `n` for which add_working_days(start, n) == end.
        """
        if end == start:
            return 0
        if end > start:
            return self.count_working_days(start + timedelta(days=1), end)
        return -self.count_working_days(end + timedelta(days=1), start)


def add_working_days(d: date, n: int, working_days_per_week: int) -> date:
    return WorkCalendarEngine(working_days_per_week).add_working_days(d, n)


def count_working_days(start: date, end: date, working_days_per_week: int) -> int:
    return WorkCalendarEngine(working_days_per_week).count_working_days(start, end)


__all__ = [
    "WorkCalendarEngine",
    "add_working_days",
    "count_working_days",
    "validate_working_days_per_week",
]
