from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from schedule_core.domain.enums import DependencyType, TaskKind, TaskType
from schedule_core.domain.identifiers import generate_id


@dataclass
class ScheduleTask:
    id: str
    schedule_id: str
    name: str = ""
    task_type: TaskType = TaskType.TASK
    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    planned_duration: int = 0
    parent_id: Optional[str] = None
    wbs_node_id: Optional[str] = None
    wbs_code: str = ""
    notes: Optional[str] = None

    progress_percent: float = 0.0
    actual_start: Optional[date] = None
    actual_end: Optional[date] = None
    actual_duration: Optional[int] = None

    # CPM fields; None until an engine run populates them
    early_start: Optional[date] = None
    early_finish: Optional[date] = None
    late_start: Optional[date] = None
    late_finish: Optional[date] = None
    total_float: Optional[int] = None
    free_float: Optional[int] = None
    is_critical: bool = False

    @property
    def kind(self) -> TaskKind:
        return self.task_type.kind

    @property
    def is_aggregate(self) -> bool:
        return self.kind == TaskKind.AGGREGATE

    @staticmethod
    def create(schedule_id: str, name: str = "", **extra) -> "ScheduleTask":
        return ScheduleTask(
            id=generate_id(),
            schedule_id=schedule_id,
            name=name,
            **extra,
        )


@dataclass
class TaskDependency:
    id: str
    predecessor_task_id: str
    successor_task_id: str
    dependency_type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: int = 0
    schedule_id: Optional[str] = None

    @staticmethod
    def create(
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
        schedule_id: Optional[str] = None,
    ) -> "TaskDependency":
        return TaskDependency(
            id=generate_id(),
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
            dependency_type=dependency_type,
            lag_days=lag_days,
            schedule_id=schedule_id,
        )


__all__ = ["ScheduleTask", "TaskDependency"]
