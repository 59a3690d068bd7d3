from __future__ import annotations

import os

from schedule_core.exceptions import ValidationError
from schedule_core.services.work_calendar.engine import validate_working_days_per_week


DEFAULT_WORKING_DAYS_PER_WEEK = 6
DEFAULT_LEAF_DURATION_DAYS = 1


def default_working_days_per_week() -> int:
    raw = (os.getenv("SCHED_WORKING_DAYS_PER_WEEK") or "").strip()
    if not raw:
        return DEFAULT_WORKING_DAYS_PER_WEEK
    try:
        value: object = int(raw)
    except ValueError:
        value = raw
    return validate_working_days_per_week(value)


def default_leaf_duration() -> int:
    raw = (os.getenv("SCHED_LEAF_DEFAULT_DURATION") or "").strip()
    if not raw:
        return DEFAULT_LEAF_DURATION_DAYS
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(
            f"SCHED_LEAF_DEFAULT_DURATION must be an integer (got {raw!r}).",
            code="LEAF_DURATION_INVALID",
        ) from None
    if value < 1:
        raise ValidationError(
            "SCHED_LEAF_DEFAULT_DURATION must be at least 1 working day.",
            code="LEAF_DURATION_INVALID",
        )
    return value


__all__ = [
    "DEFAULT_WORKING_DAYS_PER_WEEK",
    "DEFAULT_LEAF_DURATION_DAYS",
    "default_working_days_per_week",
    "default_leaf_duration",
]
