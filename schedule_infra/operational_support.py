from __future__ import annotations

import json
import logging
import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Iterator, Mapping

from schedule_core.interfaces import IncidentRecorder
from schedule_infra.path import user_data_dir
from schedule_infra.version import get_app_version

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("sched_trace_id", default=None)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_incident_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"inc-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    value = _TRACE_ID_CTX.get()
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


@contextmanager
def bind_trace_id(trace_id: str | None) -> Iterator[str]:
    normalized = (trace_id or "").strip() or create_incident_id()
    token = _TRACE_ID_CTX.set(normalized)
    try:
        yield normalized
    finally:
        _TRACE_ID_CTX.reset(token)


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return str(value)


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


class OperationalSupport(IncidentRecorder):
    """Append-only JSONL incident log, one event per line, keyed by trace id."""

    def __init__(self, events_path: str | Path | None = None) -> None:
        if events_path is None:
            events_path = user_data_dir() / "logs" / "support-events.jsonl"
        self._events_path = Path(events_path)
        self._events_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def events_path(self) -> Path:
        return self._events_path

    def bind_trace(self, trace_id: str | None = None):
        return bind_trace_id(trace_id or current_trace_id())

    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        trace_id: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> str:
        normalized_type = (event_type or "").strip() or "support.event"
        normalized_level = (level or "INFO").strip().upper()
        resolved_trace = (trace_id or current_trace_id() or create_incident_id()).strip()

        payload: dict[str, Any] = {
            "timestamp_utc": _utc_now_iso(),
            "event_type": normalized_type,
            "level": normalized_level,
            "trace_id": resolved_trace,
            "message": message or "",
            "app_version": get_app_version(),
            "pid": os.getpid(),
        }
        if data:
            payload["data"] = _jsonable(dict(data))

        line = json.dumps(payload, ensure_ascii=True, sort_keys=True)
        with self._lock:
            with self._events_path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")
        return resolved_trace

    def read_events(self, *, trace_id: str | None = None) -> list[dict[str, Any]]:
        if not self._events_path.exists():
            return []
        expected = (trace_id or "").strip()
        events: list[dict[str, Any]] = []
        for line in self._events_path.read_text(encoding="utf-8", errors="ignore").splitlines():
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(payload, dict):
                continue
            if expected and str(payload.get("trace_id") or "").strip() != expected:
                continue
            events.append(payload)
        return events


_GLOBAL_SUPPORT: OperationalSupport | None = None


def get_operational_support() -> OperationalSupport:
    global _GLOBAL_SUPPORT
    if _GLOBAL_SUPPORT is None:
        _GLOBAL_SUPPORT = OperationalSupport()
    return _GLOBAL_SUPPORT


__all__ = [
    "OperationalSupport",
    "TraceIdLogFilter",
    "bind_trace_id",
    "create_incident_id",
    "current_trace_id",
    "get_operational_support",
]
