# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from schedule_core.models import WbsNode
from schedule_core.services.work_calendar import WorkCalendarEngine
from schedule_infra.db.base import Base
import schedule_infra.db.models  # noqa
from schedule_infra.operational_support import OperationalSupport
from schedule_infra.services import build_service_dict


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def support(tmp_path):
    return OperationalSupport(events_path=tmp_path / "support-events.jsonl")


@pytest.fixture
def services(session, support):
    return build_service_dict(session, support=support)


@pytest.fixture
def calendar5():
    return WorkCalendarEngine(5)


@pytest.fixture
def wbs():
    return [
        WbsNode(id="n1", parent_id=None, code="1", name="Substructure"),
        WbsNode(id="n11", parent_id="n1", code="1.1", name="Excavation"),
        WbsNode(id="n12", parent_id="n1", code="1.2", name="Foundations"),
        WbsNode(id="n2", parent_id=None, code="2", name="Handover"),
    ]

