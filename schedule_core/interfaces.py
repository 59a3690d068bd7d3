# schedule_core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, List, Mapping, Optional

from schedule_core.models import Schedule, ScheduleTask, TaskDependency


class ScheduleRepository(ABC):
    @abstractmethod
    def add(self, schedule: Schedule) -> None: ...

    @abstractmethod
    def update(self, schedule: Schedule) -> None: ...

    @abstractmethod
    def get(self, schedule_id: str) -> Optional[Schedule]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Schedule]: ...

    @abstractmethod
    def get_by_name(self, project_id: str, name: str) -> Optional[Schedule]: ...


class ScheduleTaskRepository(ABC):
    @abstractmethod
    def add(self, task: ScheduleTask) -> None: ...

    @abstractmethod
    def update(self, task: ScheduleTask) -> None: ...

    @abstractmethod
    def get(self, task_id: str) -> Optional[ScheduleTask]: ...

    @abstractmethod
    def list_by_schedule(self, schedule_id: str) -> List[ScheduleTask]: ...


class DependencyRepository(ABC):
    @abstractmethod
    def add(self, dependency: TaskDependency) -> None: ...

    @abstractmethod
    def get(self, dependency_id: str) -> Optional[TaskDependency]: ...

    @abstractmethod
    def delete(self, dependency_id: str) -> None: ...

    @abstractmethod
    def list_by_schedule(self, schedule_id: str) -> List[TaskDependency]: ...


class IncidentRecorder(ABC):
    """Structured incident sink (e.g. a JSONL support log) injected by the host."""

    @abstractmethod
    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        trace_id: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> str: ...

    @abstractmethod
    def bind_trace(self, trace_id: str | None = None) -> ContextManager[str]: ...


__all__ = [
    "ScheduleRepository",
    "ScheduleTaskRepository",
    "DependencyRepository",
    "IncidentRecorder",
]
