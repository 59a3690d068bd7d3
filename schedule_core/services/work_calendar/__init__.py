from schedule_core.services.work_calendar.engine import (
    WorkCalendarEngine,
    add_working_days,
    count_working_days,
    validate_working_days_per_week,
)

__all__ = [
    "WorkCalendarEngine",
    "add_working_days",
    "count_working_days",
    "validate_working_days_per_week",
]
