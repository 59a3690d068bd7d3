from schedule_core.domain.enums import DependencyType, ScheduleStatus, TaskKind, TaskType
from schedule_core.domain.identifiers import generate_id
from schedule_core.domain.schedule import Schedule, WbsNode
from schedule_core.domain.task import ScheduleTask, TaskDependency

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
