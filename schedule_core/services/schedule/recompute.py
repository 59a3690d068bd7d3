from __future__ import annotations

import logging
from contextlib import nullcontext
from threading import Lock, RLock
from typing import ContextManager, Optional
from weakref import WeakValueDictionary

from sqlalchemy.orm import Session

from schedule_core.events.domain_events import domain_events
from schedule_core.exceptions import CyclicGraph, NotFoundError
from schedule_core.interfaces import (
    DependencyRepository,
    IncidentRecorder,
    ScheduleRepository,
    ScheduleTaskRepository,
)
from schedule_core.models import Schedule
from schedule_core.services.scheduling.engine import SchedulingEngine
from schedule_core.services.scheduling.models import RecomputeResult

logger = logging.getLogger(__name__)

_LOCKS_GUARD = Lock()
# Entries drop out once no caller holds the lock.
_SCHEDULE_LOCKS: "WeakValueDictionary[str, RLock]" = WeakValueDictionary()


def schedule_lock(schedule_id: str) -> RLock:
    """One recompute in flight per schedule id; different schedules never block each other."""
    with _LOCKS_GUARD:
        lock = _SCHEDULE_LOCKS.get(schedule_id)
        if lock is None:
            lock = RLock()
            _SCHEDULE_LOCKS[schedule_id] = lock
        return lock


class ScheduleRecomputeMixin:
    _session: Session
    _schedule_repo: ScheduleRepository
    _task_repo: ScheduleTaskRepository
    _dependency_repo: DependencyRepository
    _engine: SchedulingEngine
    _support: Optional[IncidentRecorder]

    def _load_schedule(self, schedule_id: str) -> Schedule:
        schedule = self._schedule_repo.get(schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule not found.", code="SCHEDULE_NOT_FOUND")
        schedule.tasks = self._task_repo.list_by_schedule(schedule_id)
        schedule.dependencies = self._dependency_repo.list_by_schedule(schedule_id)
        return schedule

    def _trace(self, schedule_id: str) -> ContextManager:
        if self._support is None:
            return nullcontext(schedule_id)
        return self._support.bind_trace(None)

    def _recompute(self, schedule: Schedule) -> RecomputeResult:
        with self._trace(schedule.id):
            try:
                return self._engine.recompute(schedule)
            except CyclicGraph as exc:
                logger.exception("Recompute aborted for schedule %s: dependency graph is cyclic", schedule.id)
                if self._support is not None:
                    self._support.emit_event(
                        event_type="schedule.recompute.failed",
                        level="ERROR",
                        message=f"Cyclic dependency graph in schedule {schedule.id}",
                        data={
                            "schedule_id": schedule.id,
                            "code": exc.code,
                            "task_count": len(schedule.tasks),
                            "dependency_count": len(schedule.dependencies),
                        },
                    )
                raise

    def _persist_recompute(self, schedule: Schedule) -> None:
        for task in schedule.tasks:
            self._task_repo.update(task)
        self._schedule_repo.update(schedule)

    def recalculate(self, schedule_id: str) -> RecomputeResult:
        with schedule_lock(schedule_id):
            schedule = self._load_schedule(schedule_id)
            try:
                result = self._recompute(schedule)
                self._persist_recompute(schedule)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise
        self._emit_schedule_changed(schedule_id)
        return result

    def _emit_schedule_changed(self, schedule_id: str) -> None:
        domain_events.schedule_changed.emit(schedule_id)
