from schedule_infra.db.schedule.repository import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyScheduleRepository,
    SqlAlchemyScheduleTaskRepository,
)

__all__ = [
    "SqlAlchemyScheduleRepository",
    "SqlAlchemyScheduleTaskRepository",
    "SqlAlchemyDependencyRepository",
]
