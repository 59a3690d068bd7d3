from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from schedule_core.interfaces import ScheduleRepository
from schedule_core.models import Schedule, ScheduleTask, TaskDependency
from schedule_core.services.scheduling.models import CriticalPathSummary
from schedule_core.services.work_calendar.engine import WorkCalendarEngine


@dataclass
class ScheduleView:
    schedule: Schedule
    tasks: List[ScheduleTask]
    dependencies: List[TaskDependency]
    critical_path: CriticalPathSummary


def wbs_sort_key(task: ScheduleTask) -> tuple:
    """Natural order for dotted WBS codes: 1.2 < 1.10."""
    parts = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in re.split(r"[.\-]", task.wbs_code or "")
        if part
    )
    return parts, task.name, task.id


class ScheduleQueryMixin:
    _schedule_repo: ScheduleRepository

    def get_schedule(self, schedule_id: str) -> Schedule:
        return self._load_schedule(schedule_id)

    def list_schedules(self, project_id: str) -> List[Schedule]:
        return self._schedule_repo.list_by_project(project_id)

    def get_schedule_view(self, schedule_id: str) -> ScheduleView:
        schedule = self._load_schedule(schedule_id)
        tasks = sorted(schedule.tasks, key=wbs_sort_key)

        critical = sorted(
            (t for t in tasks if t.is_critical),
            key=lambda t: (t.early_start or schedule.project_start_date, wbs_sort_key(t)),
        )
        end = schedule.project_end_date or schedule.project_start_date
        calendar = WorkCalendarEngine(schedule.working_days_per_week)
        summary = CriticalPathSummary(
            critical_task_ids=[t.id for t in critical],
            project_duration=(
                calendar.count_working_days(schedule.project_start_date, end)
                if schedule.project_end_date
                else 0
            ),
            project_start_date=schedule.project_start_date,
            project_end_date=end,
        )
        return ScheduleView(
            schedule=schedule,
            tasks=tasks,
            dependencies=list(schedule.dependencies),
            critical_path=summary,
        )
