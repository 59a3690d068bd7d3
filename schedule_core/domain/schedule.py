from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from schedule_core.domain.enums import ScheduleStatus
from schedule_core.domain.identifiers import generate_id
from schedule_core.domain.task import ScheduleTask, TaskDependency


@dataclass
class WbsNode:
    """A node of the external cost breakdown the initial schedule is generated from."""

    id: str
    parent_id: Optional[str] = None
    code: str = ""
    name: str = ""


@dataclass
class Schedule:
    id: str
    project_id: str
    name: str
    project_start_date: date
    working_days_per_week: int = 6
    hours_per_day: float = 8.0
    description: str = ""
    status: ScheduleStatus = ScheduleStatus.DRAFT
    project_end_date: Optional[date] = None
    is_baseline: bool = False
    baseline_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    tasks: List[ScheduleTask] = field(default_factory=list)
    dependencies: List[TaskDependency] = field(default_factory=list)

    @property
    def is_editable(self) -> bool:
        return self.status == ScheduleStatus.DRAFT

    def tasks_by_id(self) -> Dict[str, ScheduleTask]:
        return {t.id: t for t in self.tasks}

    @staticmethod
    def create(
        project_id: str,
        name: str,
        project_start_date: date,
        **extra,
    ) -> "Schedule":
        return Schedule(
            id=generate_id(),
            project_id=project_id,
            name=name,
            project_start_date=project_start_date,
            created_at=datetime.now(),
            **extra,
        )


__all__ = ["WbsNode", "Schedule"]
