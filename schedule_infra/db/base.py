# schedule_infra/db/base.py
from __future__ import annotations
import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from schedule_infra.path import default_db_path

logger = logging.getLogger(__name__)

Base = declarative_base()


def default_db_url() -> str:
    db_path: Path = default_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path.as_posix()}"


def build_engine(db_url: str | None = None) -> Engine:
    url = db_url or default_db_url()
    logger.info("Using database at: %s", url)
    return create_engine(url, echo=False, future=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
