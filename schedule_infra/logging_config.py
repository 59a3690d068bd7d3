# schedule_infra/logging_config.py
from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from schedule_infra.path import user_data_dir
from schedule_infra.operational_support import (
    OperationalSupport,
    TraceIdLogFilter,
    get_operational_support,
)


def setup_logging(
    log_dir: Path | None = None,
    level: int = logging.INFO,
    support: OperationalSupport | None = None,
) -> Path:
    """
    Configure root logging: a rotating file under the per-user data dir
    plus a console handler, both tagging records with the current trace id.

    Returns the log file path.
    """
    if log_dir is None:
        log_dir = user_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "schedule.log"

    logger = logging.getLogger()
    logger.setLevel(level)

    # Re-running setup must not stack handlers
    logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,  # 1 MB per file
        backupCount=5,
        encoding="utf-8",
    )
    trace_filter = TraceIdLogFilter()
    file_handler.addFilter(trace_filter)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] trace=%(trace_id)s %(name)s - %(message)s")
    )
    logger.addHandler(file_handler)

    console = logging.StreamHandler()
    console.addFilter(trace_filter)
    console.setFormatter(logging.Formatter("%(levelname)s [trace=%(trace_id)s]: %(message)s"))
    logger.addHandler(console)

    logger.info("Logging initialized. Log file at %s", log_file)
    (support or get_operational_support()).emit_event(
        event_type="app.logging.initialized",
        message=f"Logging initialized at {log_file}",
        data={"log_file": str(log_file)},
    )
    return log_file
