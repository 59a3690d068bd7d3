from __future__ import annotations

from datetime import date
from typing import Dict, List

from schedule_core.models import DependencyType, ScheduleTask, TaskDependency
from schedule_core.services.work_calendar.engine import WorkCalendarEngine


def task_duration(task: ScheduleTask) -> int:
    return max(0, int(task.planned_duration or 0))


def finish_from_start(start: date, duration: int, calendar: WorkCalendarEngine) -> date:
    if duration <= 0:
        return start
    return calendar.add_working_days(start, duration - 1)


def start_from_finish(finish: date, duration: int, calendar: WorkCalendarEngine) -> date:
    if duration <= 0:
        return finish
    return calendar.add_working_days(finish, -(duration - 1))


def forward_candidate_start(
    dep: TaskDependency,
    pred_es: date,
    pred_ef: date,
    duration: int,
    calendar: WorkCalendarEngine,
) -> date:
    """Earliest successor start allowed by one incoming edge."""
    lag = dep.lag_days
    if dep.dependency_type == DependencyType.FINISH_TO_START:
        return calendar.add_working_days(pred_ef, 1 + lag)
    if dep.dependency_type == DependencyType.START_TO_START:
        return calendar.add_working_days(pred_es, lag)
    if dep.dependency_type == DependencyType.FINISH_TO_FINISH:
        # EF_s >= EF_p + lag
        ef_s = calendar.add_working_days(pred_ef, lag)
        return start_from_finish(ef_s, duration, calendar)
    # START_TO_FINISH: successor finishes no later than the day before ES_p + lag
    ef_s = calendar.add_working_days(pred_es, lag - 1)
    return start_from_finish(ef_s, duration, calendar)


def backward_candidate_finish(
    dep: TaskDependency,
    succ_ls: date,
    succ_lf: date,
    duration: int,
    calendar: WorkCalendarEngine,
) -> date:
    """Latest predecessor finish allowed by one outgoing edge; mirrors forward_candidate_start."""
    lag = dep.lag_days
    if dep.dependency_type == DependencyType.FINISH_TO_START:
        return calendar.add_working_days(succ_ls, -(1 + lag))
    if dep.dependency_type == DependencyType.FINISH_TO_FINISH:
        return calendar.add_working_days(succ_lf, -lag)
    if dep.dependency_type == DependencyType.START_TO_START:
        ls_p = calendar.add_working_days(succ_ls, -lag)
        return finish_from_start(ls_p, duration, calendar)
    ls_p = calendar.add_working_days(succ_lf, 1 - lag)
    return finish_from_start(ls_p, duration, calendar)


def run_forward_pass(
    tasks_by_id: Dict[str, ScheduleTask],
    topo_order: List[str],
    deps_by_successor: Dict[str, List[TaskDependency]],
    project_start: date,
    calendar: WorkCalendarEngine,
) -> tuple[Dict[str, date], Dict[str, date], date]:
    es: Dict[str, date] = {}
    ef: Dict[str, date] = {}

    for task_id in topo_order:
        duration = task_duration(tasks_by_id[task_id])
        est = project_start
        for dep in deps_by_successor.get(task_id, []):
            pred_id = dep.predecessor_task_id
            candidate = forward_candidate_start(dep, es[pred_id], ef[pred_id], duration, calendar)
            if candidate > est:
                est = candidate
        if duration > 0:
            est = calendar.next_working_day(est)
        es[task_id] = est
        ef[task_id] = finish_from_start(est, duration, calendar)

    project_early_finish = max(ef.values()) if ef else project_start
    return es, ef, project_early_finish


def run_backward_pass(
    tasks_by_id: Dict[str, ScheduleTask],
    topo_order: List[str],
    deps_by_predecessor: Dict[str, List[TaskDependency]],
    project_early_finish: date,
    calendar: WorkCalendarEngine,
    es: Dict[str, date],
    ef: Dict[str, date],
) -> tuple[Dict[str, date], Dict[str, date]]:
    """
    LS/LF per task, never earlier than its ES/EF.

    A milestone may sit on a non-working day, where stepping back over working
    days overshoots its early date; its late dates are held at the early ones.
    """
    ls: Dict[str, date] = {}
    lf: Dict[str, date] = {}

    for task_id in reversed(topo_order):
        duration = task_duration(tasks_by_id[task_id])
        lft = project_early_finish
        for dep in deps_by_predecessor.get(task_id, []):
            succ_id = dep.successor_task_id
            candidate = backward_candidate_finish(dep, ls[succ_id], lf[succ_id], duration, calendar)
            if candidate < lft:
                lft = candidate
        if duration > 0:
            lft = calendar.previous_working_day(lft)
        lst = start_from_finish(lft, duration, calendar)
        if lst < es[task_id]:
            lst, lft = es[task_id], ef[task_id]
        lf[task_id] = lft
        ls[task_id] = lst

    return ls, lf


__all__ = [
    "task_duration",
    "finish_from_start",
    "start_from_finish",
    "forward_candidate_start",
    "backward_candidate_finish",
    "run_forward_pass",
    "run_backward_pass",
]
