from __future__ import annotations

from datetime import date
from typing import Dict, List

from schedule_core.models import DependencyType, ScheduleTask, TaskDependency
from schedule_core.services.scheduling.models import (
    CPMTaskInfo,
    CriticalPathSummary,
    RecomputeResult,
)
from schedule_core.services.work_calendar.engine import WorkCalendarEngine


def _edge_free_float(
    dep: TaskDependency,
    task_es: date,
    task_ef: date,
    succ_es: date,
    succ_ef: date,
    calendar: WorkCalendarEngine,
) -> int:
    lag = dep.lag_days
    if dep.dependency_type == DependencyType.FINISH_TO_START:
        return calendar.working_days_offset(task_ef, calendar.add_working_days(succ_es, -(1 + lag)))
    if dep.dependency_type == DependencyType.START_TO_START:
        return calendar.working_days_offset(task_es, calendar.add_working_days(succ_es, -lag))
    if dep.dependency_type == DependencyType.FINISH_TO_FINISH:
        return calendar.working_days_offset(task_ef, calendar.add_working_days(succ_ef, -lag))
    return calendar.working_days_offset(task_es, calendar.add_working_days(succ_ef, 1 - lag))


def build_schedule_result(
    tasks_by_id: Dict[str, ScheduleTask],
    deps_by_predecessor: Dict[str, List[TaskDependency]],
    es: Dict[str, date],
    ef: Dict[str, date],
    ls: Dict[str, date],
    lf: Dict[str, date],
    project_start: date,
    project_finish: date,
    calendar: WorkCalendarEngine,
) -> RecomputeResult:
    """
    Derive float and criticality, then write the CPM fields back onto the tasks.

    Nothing is written until every value has been computed.
    """
    infos: Dict[str, CPMTaskInfo] = {}

    for task_id, task in tasks_by_id.items():
        est, eft, lst, lft = es[task_id], ef[task_id], ls[task_id], lf[task_id]

        total_float = max(0, calendar.working_days_offset(est, lst))

        outgoing = deps_by_predecessor.get(task_id, [])
        if outgoing:
            free_float = min(
                _edge_free_float(
                    dep, est, eft,
                    es[dep.successor_task_id], ef[dep.successor_task_id],
                    calendar,
                )
                for dep in outgoing
            )
        else:
            free_float = calendar.working_days_offset(eft, project_finish)
        free_float = min(max(0, free_float), total_float)

        infos[task_id] = CPMTaskInfo(
            task=task,
            earliest_start=est,
            earliest_finish=eft,
            latest_start=lst,
            latest_finish=lft,
            total_float_days=total_float,
            free_float_days=free_float,
            is_critical=total_float == 0,
        )

    for info in infos.values():
        task = info.task
        task.early_start = info.earliest_start
        task.early_finish = info.earliest_finish
        task.late_start = info.latest_start
        task.late_finish = info.latest_finish
        task.total_float = info.total_float_days
        task.free_float = info.free_float_days
        task.is_critical = info.is_critical

    critical_ids = [
        info.task.id
        for info in sorted(
            infos.values(),
            key=lambda i: (i.earliest_start, i.task.wbs_code or "", i.task.id),
        )
        if info.is_critical
    ]
    summary = CriticalPathSummary(
        critical_task_ids=critical_ids,
        project_duration=calendar.count_working_days(project_start, project_finish),
        project_start_date=project_start,
        project_end_date=project_finish,
    )
    return RecomputeResult(
        tasks=infos,
        project_start_date=project_start,
        project_end_date=project_finish,
        critical_path=summary,
    )


__all__ = ["build_schedule_result"]
