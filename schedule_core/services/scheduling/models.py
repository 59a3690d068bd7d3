from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from schedule_core.models import DependencyType, ScheduleTask


@dataclass
class CPMTaskInfo:
    task: ScheduleTask
    earliest_start: Optional[date]
    earliest_finish: Optional[date]
    latest_start: Optional[date]
    latest_finish: Optional[date]
    total_float_days: Optional[int]
    free_float_days: Optional[int]
    is_critical: bool


@dataclass
class CriticalPathSummary:
    critical_task_ids: List[str]
    project_duration: int
    project_start_date: date
    project_end_date: date


@dataclass
class RecomputeResult:
    tasks: Dict[str, CPMTaskInfo]
    project_start_date: date
    project_end_date: date
    critical_path: CriticalPathSummary
    rolled_up_task_ids: List[str] = field(default_factory=list)

    def __getitem__(self, task_id: str) -> CPMTaskInfo:
        return self.tasks[task_id]

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.tasks


@dataclass
class GeneratedSchedule:
    tasks: List[ScheduleTask]
    project_end_date: date
    task_id_by_wbs_node: Dict[str, str]


@dataclass
class DependencyDiagnostic:
    is_valid: bool
    code: str
    summary: str
    detail: str
    predecessor_task_id: str
    successor_task_id: str
    dependency_type: DependencyType
    lag_days: int
    cycle_path: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


__all__ = [
    "CPMTaskInfo",
    "CriticalPathSummary",
    "RecomputeResult",
    "GeneratedSchedule",
    "DependencyDiagnostic",
]
