from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from schedule_core.interfaces import DependencyRepository, ScheduleRepository, ScheduleTaskRepository
from schedule_core.models import Schedule, ScheduleTask, TaskDependency
from schedule_infra.db.models import ScheduleDependencyORM, ScheduleORM, ScheduleTaskORM
from schedule_infra.db.schedule.mapper import (
    dependency_from_orm,
    dependency_to_orm,
    schedule_from_orm,
    schedule_to_orm,
    task_from_orm,
    task_to_orm,
)


class SqlAlchemyScheduleRepository(ScheduleRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, schedule: Schedule) -> None:
        self.session.add(schedule_to_orm(schedule))

    def update(self, schedule: Schedule) -> None:
        self.session.merge(schedule_to_orm(schedule))

    def get(self, schedule_id: str) -> Optional[Schedule]:
        obj = self.session.get(ScheduleORM, schedule_id)
        return schedule_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[Schedule]:
        stmt = (
            select(ScheduleORM)
            .where(ScheduleORM.project_id == project_id)
            .order_by(ScheduleORM.created_at, ScheduleORM.name)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [schedule_from_orm(row) for row in rows]

    def get_by_name(self, project_id: str, name: str) -> Optional[Schedule]:
        stmt = select(ScheduleORM).where(
            ScheduleORM.project_id == project_id,
            ScheduleORM.name == name,
        )
        obj = self.session.execute(stmt).scalars().first()
        return schedule_from_orm(obj) if obj else None


class SqlAlchemyScheduleTaskRepository(ScheduleTaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: ScheduleTask) -> None:
        self.session.add(task_to_orm(task))

    def update(self, task: ScheduleTask) -> None:
        self.session.merge(task_to_orm(task))

    def get(self, task_id: str) -> Optional[ScheduleTask]:
        obj = self.session.get(ScheduleTaskORM, task_id)
        return task_from_orm(obj) if obj else None

    def list_by_schedule(self, schedule_id: str) -> List[ScheduleTask]:
        stmt = select(ScheduleTaskORM).where(ScheduleTaskORM.schedule_id == schedule_id)
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]


class SqlAlchemyDependencyRepository(DependencyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, dependency: TaskDependency) -> None:
        self.session.add(dependency_to_orm(dependency))

    def get(self, dependency_id: str) -> Optional[TaskDependency]:
        obj = self.session.get(ScheduleDependencyORM, dependency_id)
        return dependency_from_orm(obj) if obj else None

    def delete(self, dependency_id: str) -> None:
        self.session.query(ScheduleDependencyORM).filter_by(id=dependency_id).delete()

    def list_by_schedule(self, schedule_id: str) -> List[TaskDependency]:
        stmt = select(ScheduleDependencyORM).where(ScheduleDependencyORM.schedule_id == schedule_id)
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]
