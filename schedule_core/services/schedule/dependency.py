from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from schedule_core.exceptions import CycleDetected, NotFoundError, ValidationError
from schedule_core.interfaces import DependencyRepository
from schedule_core.models import DependencyType, Schedule, TaskDependency
from schedule_core.services.scheduling.graph import DependencyGraph
from schedule_core.services.scheduling.models import DependencyDiagnostic
from schedule_core.services.schedule.recompute import schedule_lock

logger = logging.getLogger(__name__)


def _graph_for(schedule: Schedule) -> DependencyGraph:
    return DependencyGraph(
        (t.id for t in schedule.tasks),
        schedule.dependencies,
        schedule_id=schedule.id,
    )


class ScheduleDependencyMixin:
    _session: Session
    _dependency_repo: DependencyRepository

    def get_dependency_diagnostics(
        self,
        schedule_id: str,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> DependencyDiagnostic:
        schedule = self._load_schedule(schedule_id)
        if predecessor_id == successor_id:
            return DependencyDiagnostic(
                is_valid=False,
                code="DEPENDENCY_SELF_LINK",
                summary="A task cannot depend on itself.",
                detail=f"Task id '{predecessor_id}' is both predecessor and successor.",
                predecessor_task_id=predecessor_id,
                successor_task_id=successor_id,
                dependency_type=dependency_type,
                lag_days=lag_days,
                suggestions=["Pick a different predecessor or successor."],
            )
        return _graph_for(schedule).diagnose(predecessor_id, successor_id, dependency_type, lag_days)

    def add_dependency(
        self,
        schedule_id: str,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> TaskDependency:
        if predecessor_id == successor_id:
            raise ValidationError("A task cannot depend on itself.", code="DEPENDENCY_SELF_LINK")

        with schedule_lock(schedule_id):
            schedule = self._load_schedule(schedule_id)
            self._require_editable(schedule)
            graph = _graph_for(schedule)
            try:
                dep = graph.add_dependency(predecessor_id, successor_id, dependency_type, lag_days)
            except CycleDetected as exc:
                logger.info("Rejected dependency %s -> %s: %s", predecessor_id, successor_id, exc.cycle_path)
                raise
            schedule.dependencies.append(dep)

            try:
                self._recompute(schedule)
                self._dependency_repo.add(dep)
                self._persist_recompute(schedule)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

        logger.info(
            "Added dependency %s: %s -%s(%+d)-> %s",
            dep.id, predecessor_id, dep.dependency_type.value, dep.lag_days, successor_id,
        )
        self._emit_schedule_changed(schedule_id)
        return dep

    def remove_dependency(self, dependency_id: str) -> None:
        existing = self._dependency_repo.get(dependency_id)
        if existing is None:
            raise NotFoundError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
        schedule_id = existing.schedule_id

        with schedule_lock(schedule_id):
            schedule = self._load_schedule(schedule_id)
            self._require_editable(schedule)
            graph = _graph_for(schedule)
            graph.remove_dependency(dependency_id)
            schedule.dependencies = graph.dependencies

            try:
                self._dependency_repo.delete(dependency_id)
                self._recompute(schedule)
                self._persist_recompute(schedule)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

        logger.info("Removed dependency %s from schedule %s", dependency_id, schedule_id)
        self._emit_schedule_changed(schedule_id)
