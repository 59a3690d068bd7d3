from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from schedule_core.interfaces import (
    DependencyRepository,
    IncidentRecorder,
    ScheduleRepository,
    ScheduleTaskRepository,
)
from schedule_core.services.schedule.dependency import ScheduleDependencyMixin
from schedule_core.services.schedule.lifecycle import ScheduleLifecycleMixin
from schedule_core.services.schedule.query import ScheduleQueryMixin
from schedule_core.services.schedule.recompute import ScheduleRecomputeMixin
from schedule_core.services.schedule.task_edit import ScheduleTaskEditMixin
from schedule_core.services.schedule.validation import ScheduleValidationMixin
from schedule_core.services.scheduling.engine import SchedulingEngine


class ScheduleService(
    ScheduleLifecycleMixin,
    ScheduleTaskEditMixin,
    ScheduleDependencyMixin,
    ScheduleQueryMixin,
    ScheduleRecomputeMixin,
    ScheduleValidationMixin,
):
    def __init__(
        self,
        session: Session,
        schedule_repo: ScheduleRepository,
        task_repo: ScheduleTaskRepository,
        dependency_repo: DependencyRepository,
        engine: SchedulingEngine | None = None,
        support: IncidentRecorder | None = None,
        leaf_duration: Optional[int] = None,
    ):
        self._session: Session = session
        self._schedule_repo: ScheduleRepository = schedule_repo
        self._task_repo: ScheduleTaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._engine: SchedulingEngine = engine or SchedulingEngine()
        self._support: IncidentRecorder | None = support
        self._leaf_duration: Optional[int] = leaf_duration
