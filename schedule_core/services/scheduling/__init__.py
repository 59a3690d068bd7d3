from schedule_core.services.scheduling.engine import SchedulingEngine, recompute
from schedule_core.services.scheduling.generator import ScheduleGenerator
from schedule_core.services.scheduling.graph import DependencyGraph
from schedule_core.services.scheduling.models import (
    CPMTaskInfo,
    CriticalPathSummary,
    DependencyDiagnostic,
    GeneratedSchedule,
    RecomputeResult,
)
from schedule_core.services.scheduling.rollup import HierarchyRollup

__all__ = [
    "SchedulingEngine",
    "recompute",
    "ScheduleGenerator",
    "DependencyGraph",
    "HierarchyRollup",
    "CPMTaskInfo",
    "CriticalPathSummary",
    "DependencyDiagnostic",
    "GeneratedSchedule",
    "RecomputeResult",
]
