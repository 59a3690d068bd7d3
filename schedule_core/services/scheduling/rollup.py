from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from schedule_core.exceptions import InvalidHierarchy, OrphanReference
from schedule_core.models import ScheduleTask
from schedule_core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)


class HierarchyRollup:
    """
    Keeps SUMMARY task spans equal to the tightest interval covering their children.

    The task store is keyed by id; parent_id is a lookup key, not an owning reference.
    """

    def __init__(self, tasks: Iterable[ScheduleTask], calendar: WorkCalendarEngine):
        self._calendar = calendar
        self._tasks_by_id: Dict[str, ScheduleTask] = {t.id: t for t in tasks}
        self._children: Dict[str, List[ScheduleTask]] = {}
        for task in self._tasks_by_id.values():
            if task.parent_id is None:
                continue
            parent = self._tasks_by_id.get(task.parent_id)
            if parent is None:
                raise OrphanReference(
                    f"Task {task.id} references unknown parent '{task.parent_id}'.",
                    reference_id=task.parent_id,
                )
            if not parent.is_aggregate:
                raise InvalidHierarchy(
                    f"Task {task.id} has parent {parent.id}, which is not a SUMMARY task."
                )
            self._children.setdefault(parent.id, []).append(task)
        self._depths: Dict[str, int] = {}
        for task_id in self._tasks_by_id:
            self.depth(task_id)

    def children_of(self, task_id: str) -> List[ScheduleTask]:
        return list(self._children.get(task_id, []))

    def depth(self, task_id: str) -> int:
        """Number of ancestors of a task."""
        cached = self._depths.get(task_id)
        if cached is not None:
            return cached

        chain: List[str] = []
        seen: set[str] = set()
        current = self._tasks_by_id[task_id]
        while current.parent_id is not None and current.id not in self._depths:
            if current.id in seen:
                raise InvalidHierarchy(f"Task hierarchy contains a cycle through task {current.id}.")
            seen.add(current.id)
            chain.append(current.id)
            current = self._tasks_by_id[current.parent_id]

        base = self._depths.get(current.id, 0)
        self._depths[current.id] = base
        for offset, chained_id in enumerate(reversed(chain), start=1):
            self._depths[chained_id] = base + offset
        return self._depths[task_id]

    def roll_up(self, parent_id: str) -> List[str]:
        """
        Recompute `parent_id` from its direct children, then each ancestor in turn.

        Returns the ids of the SUMMARY tasks whose span was recomputed.
        """
        if parent_id not in self._tasks_by_id:
            raise OrphanReference(f"Task '{parent_id}' not found.", reference_id=parent_id)

        updated: List[str] = []
        current_id: str | None = parent_id
        while current_id is not None:
            parent = self._tasks_by_id[current_id]
            if not parent.is_aggregate:
                break
            if self._roll_up_node(parent):
                updated.append(parent.id)
            current_id = parent.parent_id
        return updated

    def roll_up_ancestors(self, task_id: str) -> List[str]:
        task = self._tasks_by_id.get(task_id)
        if task is None:
            raise OrphanReference(f"Task '{task_id}' not found.", reference_id=task_id)
        if task.parent_id is None:
            return []
        return self.roll_up(task.parent_id)

    def roll_up_all(self) -> List[str]:
        """Roll up every SUMMARY task, deepest first."""
        aggregates = [t for t in self._tasks_by_id.values() if t.is_aggregate]
        aggregates.sort(key=lambda t: (-self.depth(t.id), t.wbs_code or "", t.id))
        updated = [t.id for t in aggregates if self._roll_up_node(t)]
        logger.debug("Rolled up %d of %d summary task(s)", len(updated), len(aggregates))
        return updated

    def _roll_up_node(self, parent: ScheduleTask) -> bool:
        dated = [
            child
            for child in self._children.get(parent.id, [])
            if child.planned_start is not None and child.planned_end is not None
        ]
        if not dated:
            return False

        start = min(child.planned_start for child in dated)
        end = max(child.planned_end for child in dated)
        parent.planned_start = start
        parent.planned_end = end
        parent.planned_duration = self._calendar.count_working_days(start, end)
        return True


__all__ = ["HierarchyRollup"]
