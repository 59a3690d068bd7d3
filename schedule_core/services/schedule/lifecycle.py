from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from schedule_core.events.domain_events import domain_events
from schedule_core.exceptions import BusinessRuleError
from schedule_core.interfaces import ScheduleRepository, ScheduleTaskRepository
from schedule_core.models import Schedule, ScheduleStatus, WbsNode
from schedule_core.services.scheduling.generator import ScheduleGenerator
from schedule_core.services.scheduling.policy import default_working_days_per_week
from schedule_core.services.schedule.recompute import schedule_lock
from schedule_core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)


class ScheduleLifecycleMixin:
    _session: Session
    _schedule_repo: ScheduleRepository
    _task_repo: ScheduleTaskRepository
    _leaf_duration: Optional[int]

    def create_schedule_from_wbs(
        self,
        project_id: str,
        name: str,
        wbs_nodes: Sequence[WbsNode],
        project_start_date: date,
        working_days_per_week: Optional[int] = None,
        hours_per_day: float = 8.0,
        description: str = "",
    ) -> Schedule:
        if working_days_per_week is None:
            working_days_per_week = default_working_days_per_week()
        calendar = WorkCalendarEngine(working_days_per_week)
        cleaned_name = self._validate_schedule_name(project_id, name)
        self._validate_hours_per_day(hours_per_day)

        schedule = Schedule.create(
            project_id=project_id,
            name=cleaned_name,
            project_start_date=project_start_date,
            working_days_per_week=calendar.working_days_per_week,
            hours_per_day=hours_per_day,
            description=description,
        )
        generated = ScheduleGenerator(calendar, self._leaf_duration).generate(
            schedule.id, wbs_nodes, project_start_date
        )
        schedule.tasks = generated.tasks
        schedule.project_end_date = generated.project_end_date

        try:
            self._schedule_repo.add(schedule)
            for task in schedule.tasks:
                self._task_repo.add(task)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(f"Created schedule {schedule.id} - {schedule.name} for project {project_id}")
        domain_events.schedule_changed.emit(schedule.id)
        return schedule

    def set_schedule_as_baseline(self, schedule_id: str) -> Schedule:
        """
        Freeze a DRAFT schedule as the project's baseline.

        The schedule is recomputed first so the frozen CPM fields and
        project end date are current. Any previous baseline of the same
        project loses its flag; only one schedule per project is the baseline.
        """
        with schedule_lock(schedule_id):
            schedule = self._load_schedule(schedule_id)
            if schedule.status == ScheduleStatus.BASELINE:
                raise BusinessRuleError(
                    "Schedule is already a baseline.",
                    code="SCHEDULE_ALREADY_BASELINE",
                )
            try:
                self._recompute(schedule)
                self._persist_recompute(schedule)

                for other in self._schedule_repo.list_by_project(schedule.project_id):
                    if other.id != schedule.id and other.is_baseline:
                        other.is_baseline = False
                        self._schedule_repo.update(other)

                schedule.status = ScheduleStatus.BASELINE
                schedule.is_baseline = True
                schedule.baseline_date = datetime.now()
                self._schedule_repo.update(schedule)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

        logger.info("Schedule %s set as baseline for project %s", schedule.id, schedule.project_id)
        domain_events.baseline_changed.emit(schedule.project_id)
        domain_events.schedule_changed.emit(schedule.id)
        return schedule
