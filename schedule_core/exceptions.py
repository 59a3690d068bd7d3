# schedule_core/exceptions.py
from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., editing a baselined schedule)."""


class InvalidCalendarConfig(ValidationError):
    """Raised when working_days_per_week is outside {5, 6, 7}."""

    def __init__(self, working_days_per_week: object):
        super().__init__(
            f"working_days_per_week must be 5, 6 or 7 (got {working_days_per_week!r}).",
            code="CALENDAR_INVALID_WORKING_DAYS",
        )
        self.working_days_per_week = working_days_per_week


class CycleDetected(BusinessRuleError):
    """Raised when inserting a dependency would close a loop."""

    def __init__(self, message: str, *, cycle_path: Sequence[str] = ()):
        super().__init__(message, code="DEPENDENCY_CYCLE")
        self.cycle_path = list(cycle_path)


class CyclicGraph(DomainError):
    """
    Topological ordering could not place every task.
    Means a cycle got past insertion-time validation; treat as an internal error.
    """

    def __init__(self, message: str = "Cannot schedule: circular dependency detected."):
        super().__init__(message, code="SCHEDULE_CYCLE")


class OrphanReference(NotFoundError):
    """Raised when a dependency or task points at a task id not in the supplied set."""

    def __init__(self, message: str, *, reference_id: str):
        super().__init__(message, code="ORPHAN_REFERENCE")
        self.reference_id = reference_id


class InvalidHierarchy(ValidationError):
    """Raised when the parent/child tree is not a tree or a LEAF is used as a parent."""

    def __init__(self, message: str):
        super().__init__(message, code="HIERARCHY_INVALID")


__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "BusinessRuleError",
    "InvalidCalendarConfig",
    "CycleDetected",
    "CyclicGraph",
    "OrphanReference",
    "InvalidHierarchy",
]
