from schedule_core.events.domain_events import DomainEvents, domain_events
from schedule_core.events.signal import Signal

__all__ = ["DomainEvents", "Signal", "domain_events"]
