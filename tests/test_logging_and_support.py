from __future__ import annotations

import json
import logging

import pytest

from schedule_infra.logging_config import setup_logging
from schedule_infra.operational_support import (
    OperationalSupport,
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
)
from schedule_infra.path import default_db_path, user_data_dir


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_bind_trace_id_scopes_the_trace():
    assert current_trace_id() is None
    with bind_trace_id("inc-abc") as trace_id:
        assert trace_id == "inc-abc"
        assert current_trace_id() == "inc-abc"
    assert current_trace_id() is None

    with bind_trace_id(None) as generated:
        assert generated.startswith("inc-")


def test_trace_filter_tags_records():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    TraceIdLogFilter().filter(record)
    assert record.trace_id == "-"

    with bind_trace_id("inc-xyz"):
        TraceIdLogFilter().filter(record)
    assert record.trace_id == "inc-xyz"


def test_support_event_uses_bound_trace(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)

    with support.bind_trace("inc-test-123"):
        trace_id = support.emit_event(
            event_type="schedule.test",
            message="hello",
            data={"schedule_id": "s1", "path": ["a", "b"]},
        )
    support.emit_event(event_type="other", message="unrelated", trace_id="inc-other")

    assert trace_id == "inc-test-123"
    rows = events_path.read_text(encoding="utf-8").splitlines()
    assert len(rows) == 2
    payload = json.loads(rows[0])
    assert payload["event_type"] == "schedule.test"
    assert payload["level"] == "INFO"
    assert payload["data"] == {"schedule_id": "s1", "path": ["a", "b"]}
    assert [e["message"] for e in support.read_events(trace_id="inc-test-123")] == ["hello"]


def test_setup_logging_writes_rotating_file(tmp_path, restore_root_logger):
    support = OperationalSupport(events_path=tmp_path / "events.jsonl")
    log_file = setup_logging(log_dir=tmp_path / "logs", support=support)

    with bind_trace_id("inc-log-1"):
        logging.getLogger("schedule_core.test").info("recompute done")
    for handler in restore_root_logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "trace=inc-log-1" in text
    assert "recompute done" in text
    assert support.read_events()[0]["event_type"] == "app.logging.initialized"

    # calling twice must not duplicate handlers
    setup_logging(log_dir=tmp_path / "logs", support=support)
    assert len(restore_root_logger.handlers) == 2


def test_paths_honor_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("SCHED_DB_PATH", str(tmp_path / "db" / "custom.db"))

    assert default_db_path() == tmp_path / "db" / "custom.db"
    assert (tmp_path / "db").is_dir()

    monkeypatch.delenv("SCHED_DB_PATH")
    assert default_db_path() == user_data_dir() / "schedule.db"
