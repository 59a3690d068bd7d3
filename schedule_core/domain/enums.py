from __future__ import annotations

from enum import Enum


class ScheduleStatus(str, Enum):
    DRAFT = "DRAFT"
    BASELINE = "BASELINE"


class TaskKind(str, Enum):
    LEAF = "LEAF"
    AGGREGATE = "AGGREGATE"


class TaskType(str, Enum):
    TASK = "TASK"
    MILESTONE = "MILESTONE"
    SUMMARY = "SUMMARY"

    @property
    def kind(self) -> TaskKind:
        if self is TaskType.SUMMARY:
            return TaskKind.AGGREGATE
        return TaskKind.LEAF


class DependencyType(str, Enum):
    FINISH_TO_START = "FS"
    FINISH_TO_FINISH = "FF"
    START_TO_START = "SS"
    START_TO_FINISH = "SF"


__all__ = ["ScheduleStatus", "TaskKind", "TaskType", "DependencyType"]
