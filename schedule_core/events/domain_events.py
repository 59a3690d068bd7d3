"""Change notifications hosts use to invalidate cached schedule views."""
from schedule_core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.schedule_changed: Signal[str] = Signal()  # schedule_id
        self.tasks_changed: Signal[str] = Signal()     # schedule_id
        self.baseline_changed: Signal[str] = Signal()  # project_id


# SINGLE global instance
domain_events = DomainEvents()
