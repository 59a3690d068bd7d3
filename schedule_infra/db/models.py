# schedule_infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from schedule_infra.db.base import Base
from schedule_core.models import DependencyType, ScheduleStatus, TaskType


class ScheduleORM(Base):
    __tablename__ = "schedules"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    status: Mapped[ScheduleStatus] = mapped_column(
        SAEnum(ScheduleStatus), default=ScheduleStatus.DRAFT, nullable=False
    )
    project_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    project_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    working_days_per_week: Mapped[int] = mapped_column(Integer, default=6, nullable=False)
    hours_per_day: Mapped[float] = mapped_column(Float, default=8.0, nullable=False)
    is_baseline: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    baseline_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

Index("idx_schedules_project_id", ScheduleORM.project_id)
Index("uq_schedules_project_name", ScheduleORM.project_id, ScheduleORM.name, unique=True)


class ScheduleTaskORM(Base):
    __tablename__ = "schedule_tasks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    schedule_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("schedules.id", ondelete="CASCADE"),
        nullable=False,
    )
    # parent lookup only; rows are written in any order
    parent_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    wbs_node_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    wbs_code: Mapped[str] = mapped_column(String, default="")
    name: Mapped[str] = mapped_column(String, default="")
    task_type: Mapped[TaskType] = mapped_column(SAEnum(TaskType), default=TaskType.TASK, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    planned_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    planned_end: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    planned_duration: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    progress_percent: Mapped[float] = mapped_column(Float, default=0.0)
    actual_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    actual_end: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    actual_duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    early_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    early_finish: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    late_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    late_finish: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    total_float: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    free_float: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_critical: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

Index("idx_schedule_tasks_schedule_id", ScheduleTaskORM.schedule_id)
Index("idx_schedule_tasks_parent_id", ScheduleTaskORM.parent_id)


class ScheduleDependencyORM(Base):
    __tablename__ = "schedule_dependencies"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    schedule_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("schedules.id", ondelete="CASCADE"),
        nullable=False,
    )
    predecessor_task_id: Mapped[str] = mapped_column(
        String, ForeignKey("schedule_tasks.id", ondelete="CASCADE"), nullable=False
    )
    successor_task_id: Mapped[str] = mapped_column(
        String, ForeignKey("schedule_tasks.id", ondelete="CASCADE"), nullable=False
    )
    dependency_type: Mapped[DependencyType] = mapped_column(
        SAEnum(DependencyType), default=DependencyType.FINISH_TO_START, nullable=False
    )
    lag_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

Index("idx_schedule_dependencies_schedule_id", ScheduleDependencyORM.schedule_id)
Index(
    "uq_schedule_dependencies_pair",
    ScheduleDependencyORM.predecessor_task_id,
    ScheduleDependencyORM.successor_task_id,
    unique=True,
)
