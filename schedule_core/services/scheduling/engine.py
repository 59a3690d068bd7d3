# schedule_core/services/scheduling/engine.py
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Sequence

from schedule_core.models import Schedule, ScheduleTask, TaskDependency
from schedule_core.services.scheduling.graph import (
    build_project_dependency_graph,
    check_dependency_references,
)
from schedule_core.services.scheduling.models import RecomputeResult
from schedule_core.services.scheduling.passes import run_backward_pass, run_forward_pass
from schedule_core.services.scheduling.results import build_schedule_result
from schedule_core.services.scheduling.rollup import HierarchyRollup
from schedule_core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """
    CPM-style scheduling engine:
    - Forward pass: ES/EF
    - Backward pass: LS/LF
    - FS, FF, SS, SF with signed lag_days
    - Total float, free float and the critical flag
    - Uses WorkCalendarEngine for working-day arithmetic

    Stateless: every call is a function of the tasks, dependencies and calendar it is given.
    """

    def calculate_critical_path(
        self,
        tasks: Sequence[ScheduleTask],
        dependencies: Sequence[TaskDependency],
        project_start_date: date,
        working_days_per_week: int,
    ) -> RecomputeResult:
        """
        Full CPM calculation:
        - computes ES/EF (forward) and LS/LF (backward)
        - writes CPM fields onto each task; planned dates are left alone
        - returns CPMTaskInfo per task plus the project end date
        """
        calendar = WorkCalendarEngine(working_days_per_week)
        tasks_by_id: Dict[str, ScheduleTask] = {t.id: t for t in tasks}
        deps: List[TaskDependency] = list(dependencies)

        topo_order, deps_by_successor, deps_by_predecessor = build_project_dependency_graph(
            tasks_by_id=tasks_by_id,
            deps=deps,
        )

        es, ef, project_early_finish = run_forward_pass(
            tasks_by_id=tasks_by_id,
            topo_order=topo_order,
            deps_by_successor=deps_by_successor,
            project_start=project_start_date,
            calendar=calendar,
        )
        ls, lf = run_backward_pass(
            tasks_by_id=tasks_by_id,
            topo_order=topo_order,
            deps_by_predecessor=deps_by_predecessor,
            project_early_finish=project_early_finish,
            calendar=calendar,
            es=es,
            ef=ef,
        )

        result = build_schedule_result(
            tasks_by_id=tasks_by_id,
            deps_by_predecessor=deps_by_predecessor,
            es=es,
            ef=ef,
            ls=ls,
            lf=lf,
            project_start=project_start_date,
            project_finish=project_early_finish,
            calendar=calendar,
        )
        logger.debug(
            "CPM over %d task(s), %d dependency(ies): end=%s, critical=%d",
            len(tasks_by_id), len(deps), result.project_end_date,
            len(result.critical_path.critical_task_ids),
        )
        return result

    def recompute(self, schedule: Schedule) -> RecomputeResult:
        """
        Roll-up then CPM as one unit; the only way derived fields get refreshed.

        Validation (calendar, references, hierarchy, acyclicity) happens before any
        task is touched, so a failure leaves the schedule exactly as it was.
        """
        calendar = WorkCalendarEngine(schedule.working_days_per_week)
        tasks_by_id = schedule.tasks_by_id()
        check_dependency_references(tasks_by_id, schedule.dependencies)
        rollup = HierarchyRollup(schedule.tasks, calendar)
        build_project_dependency_graph(tasks_by_id, list(schedule.dependencies))

        rolled_up = rollup.roll_up_all()
        result = self.calculate_critical_path(
            tasks=schedule.tasks,
            dependencies=schedule.dependencies,
            project_start_date=schedule.project_start_date,
            working_days_per_week=calendar.working_days_per_week,
        )
        result.rolled_up_task_ids = rolled_up
        schedule.project_end_date = result.project_end_date
        logger.info(
            "Schedule %s recomputed: %d task(s), end=%s",
            schedule.id, len(schedule.tasks), schedule.project_end_date,
        )
        return result


def recompute(schedule: Schedule) -> RecomputeResult:
    return SchedulingEngine().recompute(schedule)


__all__ = ["SchedulingEngine", "recompute"]
