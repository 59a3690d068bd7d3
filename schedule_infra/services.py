from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from schedule_core.services.schedule import ScheduleService
from schedule_core.services.scheduling import SchedulingEngine
from schedule_infra.db.repositories import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyScheduleRepository,
    SqlAlchemyScheduleTaskRepository,
)
from schedule_infra.operational_support import OperationalSupport, get_operational_support


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    scheduling_engine: SchedulingEngine
    schedule_service: ScheduleService
    operational_support: OperationalSupport

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "scheduling_engine": self.scheduling_engine,
            "schedule_service": self.schedule_service,
            "operational_support": self.operational_support,
        }


def build_service_graph(
    session: Session,
    support: OperationalSupport | None = None,
) -> ServiceGraph:
    support = support or get_operational_support()
    scheduling_engine = SchedulingEngine()
    schedule_service = ScheduleService(
        session,
        SqlAlchemyScheduleRepository(session),
        SqlAlchemyScheduleTaskRepository(session),
        SqlAlchemyDependencyRepository(session),
        engine=scheduling_engine,
        support=support,
    )
    return ServiceGraph(
        session=session,
        scheduling_engine=scheduling_engine,
        schedule_service=schedule_service,
        operational_support=support,
    )


def build_service_dict(session: Session, support: OperationalSupport | None = None) -> dict[str, Any]:
    return build_service_graph(session, support).as_dict()
