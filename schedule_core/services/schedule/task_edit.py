from __future__ import annotations

import logging
import math
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy.orm import Session

from schedule_core.events.domain_events import domain_events
from schedule_core.exceptions import NotFoundError, ValidationError
from schedule_core.interfaces import ScheduleTaskRepository
from schedule_core.models import ScheduleTask, TaskType
from schedule_core.services.scheduling.passes import finish_from_start
from schedule_core.services.schedule.recompute import schedule_lock
from schedule_core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)

UNSET = object()


def elapsed_calendar_days(start: date, end: date) -> int:
    """Calendar days between two dates, rounded up."""
    seconds = (datetime.combine(end, time.min) - datetime.combine(start, time.min)).total_seconds()
    return math.ceil(seconds / 86400)


class ScheduleTaskEditMixin:
    _session: Session
    _task_repo: ScheduleTaskRepository

    def _get_task(self, task_id: str) -> ScheduleTask:
        task = self._task_repo.get(task_id)
        if task is None:
            raise NotFoundError("Schedule task not found.", code="TASK_NOT_FOUND")
        return task

    def update_task_dates(
        self,
        task_id: str,
        planned_start: Optional[date] = None,
        planned_end: Optional[date] = None,
        planned_duration: Optional[int] = None,
        notes=UNSET,
    ) -> ScheduleTask:
        schedule_id = self._get_task(task_id).schedule_id
        with schedule_lock(schedule_id):
            schedule = self._load_schedule(schedule_id)
            self._require_editable(schedule)
            task = schedule.tasks_by_id().get(task_id)
            if task is None:
                raise NotFoundError("Schedule task not found.", code="TASK_NOT_FOUND")
            self._validate_leaf_editable(task)
            self._validate_dates(planned_start, planned_end, planned_duration)

            calendar = WorkCalendarEngine(schedule.working_days_per_week)
            start = planned_start or task.planned_start or schedule.project_start_date

            if task.task_type == TaskType.MILESTONE:
                if planned_duration not in (None, 0) or (planned_end is not None and planned_end != start):
                    raise ValidationError(
                        "A milestone has zero duration; its end must equal its start.",
                        code="MILESTONE_DURATION_INVALID",
                    )
                end, duration = start, 0
            elif planned_duration is not None and planned_end is None:
                duration = int(planned_duration)
                end = finish_from_start(start, duration, calendar)
            elif planned_end is not None:
                end = planned_end
                duration = calendar.count_working_days(start, end)
                if planned_duration is not None and int(planned_duration) != duration:
                    raise ValidationError(
                        f"Duration {planned_duration} does not match the {duration} working day(s) "
                        f"between {start} and {end}.",
                        code="TASK_DURATION_MISMATCH",
                    )
            else:
                # moving the start keeps the working-day duration
                duration = int(task.planned_duration or 0)
                end = finish_from_start(start, duration, calendar)

            self._validate_dates(start, end, duration)
            task.planned_start = start
            task.planned_end = end
            task.planned_duration = duration
            if notes is not UNSET:
                task.notes = notes

            try:
                self._recompute(schedule)
                self._persist_recompute(schedule)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

        logger.info("Task %s dates set to %s -> %s (%d day(s))", task.id, start, end, duration)
        self._emit_schedule_changed(schedule_id)
        return task

    def update_task_progress(
        self,
        task_id: str,
        progress_percent: float,
        actual_start: Optional[date] = None,
        actual_end: Optional[date] = None,
    ) -> ScheduleTask:
        task = self._get_task(task_id)
        self._validate_progress(progress_percent, actual_start, actual_end)

        task.progress_percent = float(progress_percent)
        if actual_start is not None:
            task.actual_start = actual_start
        if actual_end is not None:
            task.actual_end = actual_end
        if task.actual_start and task.actual_end:
            if task.actual_end < task.actual_start:
                raise ValidationError(
                    "Actual end date cannot be before actual start date.",
                    code="TASK_INVALID_DATE",
                )
            task.actual_duration = elapsed_calendar_days(task.actual_start, task.actual_end)

        try:
            self._task_repo.update(task)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        domain_events.tasks_changed.emit(task.schedule_id)
        return task
