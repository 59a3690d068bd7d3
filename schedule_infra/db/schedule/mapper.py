from __future__ import annotations

from schedule_core.models import Schedule, ScheduleTask, TaskDependency
from schedule_infra.db.models import ScheduleDependencyORM, ScheduleORM, ScheduleTaskORM


def schedule_to_orm(schedule: Schedule) -> ScheduleORM:
    return ScheduleORM(
        id=schedule.id,
        project_id=schedule.project_id,
        name=schedule.name,
        description=schedule.description,
        status=schedule.status,
        project_start_date=schedule.project_start_date,
        project_end_date=schedule.project_end_date,
        working_days_per_week=schedule.working_days_per_week,
        hours_per_day=schedule.hours_per_day,
        is_baseline=schedule.is_baseline,
        baseline_date=schedule.baseline_date,
        created_at=schedule.created_at,
    )


def schedule_from_orm(obj: ScheduleORM) -> Schedule:
    return Schedule(
        id=obj.id,
        project_id=obj.project_id,
        name=obj.name,
        description=obj.description or "",
        status=obj.status,
        project_start_date=obj.project_start_date,
        project_end_date=obj.project_end_date,
        working_days_per_week=obj.working_days_per_week,
        hours_per_day=obj.hours_per_day,
        is_baseline=bool(obj.is_baseline),
        baseline_date=obj.baseline_date,
        created_at=obj.created_at,
    )


def task_to_orm(task: ScheduleTask) -> ScheduleTaskORM:
    return ScheduleTaskORM(
        id=task.id,
        schedule_id=task.schedule_id,
        parent_id=task.parent_id,
        wbs_node_id=task.wbs_node_id,
        wbs_code=task.wbs_code,
        name=task.name,
        task_type=task.task_type,
        notes=task.notes,
        planned_start=task.planned_start,
        planned_end=task.planned_end,
        planned_duration=task.planned_duration,
        progress_percent=task.progress_percent,
        actual_start=task.actual_start,
        actual_end=task.actual_end,
        actual_duration=task.actual_duration,
        early_start=task.early_start,
        early_finish=task.early_finish,
        late_start=task.late_start,
        late_finish=task.late_finish,
        total_float=task.total_float,
        free_float=task.free_float,
        is_critical=task.is_critical,
    )


def task_from_orm(obj: ScheduleTaskORM) -> ScheduleTask:
    return ScheduleTask(
        id=obj.id,
        schedule_id=obj.schedule_id,
        parent_id=obj.parent_id,
        wbs_node_id=obj.wbs_node_id,
        wbs_code=obj.wbs_code or "",
        name=obj.name or "",
        task_type=obj.task_type,
        notes=obj.notes,
        planned_start=obj.planned_start,
        planned_end=obj.planned_end,
        planned_duration=obj.planned_duration or 0,
        progress_percent=obj.progress_percent or 0.0,
        actual_start=obj.actual_start,
        actual_end=obj.actual_end,
        actual_duration=obj.actual_duration,
        early_start=obj.early_start,
        early_finish=obj.early_finish,
        late_start=obj.late_start,
        late_finish=obj.late_finish,
        total_float=obj.total_float,
        free_float=obj.free_float,
        is_critical=bool(obj.is_critical),
    )


def dependency_to_orm(dependency: TaskDependency) -> ScheduleDependencyORM:
    return ScheduleDependencyORM(
        id=dependency.id,
        schedule_id=dependency.schedule_id,
        predecessor_task_id=dependency.predecessor_task_id,
        successor_task_id=dependency.successor_task_id,
        dependency_type=dependency.dependency_type,
        lag_days=dependency.lag_days,
    )


def dependency_from_orm(obj: ScheduleDependencyORM) -> TaskDependency:
    return TaskDependency(
        id=obj.id,
        schedule_id=obj.schedule_id,
        predecessor_task_id=obj.predecessor_task_id,
        successor_task_id=obj.successor_task_id,
        dependency_type=obj.dependency_type,
        lag_days=obj.lag_days,
    )
