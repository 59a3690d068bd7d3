from schedule_core.services.schedule.query import ScheduleView
from schedule_core.services.schedule.service import ScheduleService
from schedule_core.services.schedule.task_edit import UNSET

__all__ = ["ScheduleService", "ScheduleView", "UNSET"]
