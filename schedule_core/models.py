# schedule_core/models.py
from schedule_core.domain import (
    DependencyType,
    Schedule,
    ScheduleStatus,
    ScheduleTask,
    TaskDependency,
    TaskKind,
    TaskType,
    WbsNode,
    generate_id,
)

__all__ = [
    "generate_id",
    "DependencyType",
    "ScheduleStatus",
    "TaskKind",
    "TaskType",
    "Schedule",
    "WbsNode",
    "ScheduleTask",
    "TaskDependency",
]
