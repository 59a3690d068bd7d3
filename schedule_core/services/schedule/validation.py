from __future__ import annotations

from datetime import date
from typing import Optional

from schedule_core.exceptions import BusinessRuleError, ValidationError
from schedule_core.interfaces import ScheduleRepository
from schedule_core.models import Schedule, ScheduleTask, TaskType


class ScheduleValidationMixin:
    _schedule_repo: ScheduleRepository

    def _require_editable(self, schedule: Schedule) -> None:
        if not schedule.is_editable:
            raise BusinessRuleError(
                f"Schedule '{schedule.name}' is {schedule.status.value}; only DRAFT schedules can be edited.",
                code="SCHEDULE_NOT_EDITABLE",
            )

    def _validate_schedule_name(self, project_id: str, name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Schedule name cannot be empty.", code="SCHEDULE_NAME_EMPTY")
        if self._schedule_repo.get_by_name(project_id, cleaned) is not None:
            raise ValidationError(
                "A schedule with that name already exists in this project.",
                code="SCHEDULE_NAME_DUPLICATE",
            )
        return cleaned

    def _validate_hours_per_day(self, hours_per_day: float) -> None:
        if hours_per_day <= 0 or hours_per_day > 24:
            raise ValidationError("hours_per_day must be within (0, 24].", code="SCHEDULE_HOURS_INVALID")

    def _validate_leaf_editable(self, task: ScheduleTask) -> None:
        if task.task_type == TaskType.SUMMARY:
            raise BusinessRuleError(
                "SUMMARY task dates are derived from their subtasks and cannot be edited directly.",
                code="SUMMARY_TASK_READ_ONLY",
            )

    def _validate_dates(self, start: Optional[date], end: Optional[date], duration: Optional[int]) -> None:
        if start and end and end < start:
            raise ValidationError("Task end date cannot be before its start date.", code="TASK_INVALID_DATE")
        if duration is not None and duration < 0:
            raise ValidationError("Task duration cannot be negative.", code="TASK_INVALID_DURATION")

    def _validate_progress(
        self,
        progress_percent: float,
        actual_start: Optional[date],
        actual_end: Optional[date],
    ) -> None:
        if progress_percent < 0 or progress_percent > 100:
            raise ValidationError("Progress must be between 0 and 100.", code="TASK_PROGRESS_INVALID")
        if actual_start and actual_end and actual_end < actual_start:
            raise ValidationError(
                "Actual end date cannot be before actual start date.",
                code="TASK_INVALID_DATE",
            )
