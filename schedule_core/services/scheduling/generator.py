from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from schedule_core.exceptions import InvalidHierarchy, OrphanReference, ValidationError
from schedule_core.models import ScheduleTask, TaskType, WbsNode
from schedule_core.services.scheduling.models import GeneratedSchedule
from schedule_core.services.scheduling.policy import default_leaf_duration
from schedule_core.services.scheduling.rollup import HierarchyRollup
from schedule_core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)


class ScheduleGenerator:
    """
    Builds the naive sequential baseline for a new schedule from a WBS tree.

    One TASK per WBS leaf, placed back to back from the project start in
    breakdown (pre-order) traversal order; one SUMMARY per branch, resolved by
    roll-up afterwards. No dependencies are created and CPM is not run here.
    """

    def __init__(self, calendar: WorkCalendarEngine, leaf_duration: Optional[int] = None):
        self._calendar = calendar
        self._leaf_duration = leaf_duration if leaf_duration is not None else default_leaf_duration()
        if self._leaf_duration < 1:
            raise ValidationError(
                "Generated tasks need a duration of at least 1 working day.",
                code="LEAF_DURATION_INVALID",
            )

    def generate(
        self,
        schedule_id: str,
        wbs_nodes: Sequence[WbsNode],
        project_start_date: date,
    ) -> GeneratedSchedule:
        ordered = self._traversal_order(wbs_nodes)
        parents = {node.parent_id for node in wbs_nodes if node.parent_id is not None}

        tasks: List[ScheduleTask] = []
        task_id_by_node: Dict[str, str] = {}
        current = self._calendar.next_working_day(project_start_date)

        for node in ordered:
            parent_task_id = task_id_by_node.get(node.parent_id) if node.parent_id else None
            if node.id in parents:
                task = ScheduleTask.create(
                    schedule_id,
                    name=node.name,
                    task_type=TaskType.SUMMARY,
                    planned_start=current,
                    planned_end=current,
                    planned_duration=0,
                    parent_id=parent_task_id,
                    wbs_node_id=node.id,
                    wbs_code=node.code,
                )
            else:
                end = self._calendar.add_working_days(current, self._leaf_duration - 1)
                task = ScheduleTask.create(
                    schedule_id,
                    name=node.name,
                    task_type=TaskType.TASK,
                    planned_start=current,
                    planned_end=end,
                    planned_duration=self._leaf_duration,
                    parent_id=parent_task_id,
                    wbs_node_id=node.id,
                    wbs_code=node.code,
                )
                current = self._calendar.add_working_days(end, 1)
            tasks.append(task)
            task_id_by_node[node.id] = task.id

        HierarchyRollup(tasks, self._calendar).roll_up_all()

        project_end = max(t.planned_end for t in tasks)
        logger.info(
            "Generated %d task(s) for schedule %s: %s -> %s",
            len(tasks), schedule_id, project_start_date, project_end,
        )
        return GeneratedSchedule(
            tasks=tasks,
            project_end_date=project_end,
            task_id_by_wbs_node=task_id_by_node,
        )

    @staticmethod
    def _traversal_order(wbs_nodes: Sequence[WbsNode]) -> List[WbsNode]:
        if not wbs_nodes:
            raise ValidationError(
                "The project has no work breakdown structure to schedule.",
                code="WBS_EMPTY",
            )

        by_id: Dict[str, WbsNode] = {}
        for node in wbs_nodes:
            if node.id in by_id:
                raise InvalidHierarchy(f"Duplicate WBS node id '{node.id}'.")
            by_id[node.id] = node

        children: Dict[Optional[str], List[WbsNode]] = {}
        for node in wbs_nodes:
            if node.parent_id is not None and node.parent_id not in by_id:
                raise OrphanReference(
                    f"WBS node {node.id} references unknown parent '{node.parent_id}'.",
                    reference_id=node.parent_id,
                )
            children.setdefault(node.parent_id, []).append(node)

        ordered: List[WbsNode] = []
        stack = list(reversed(children.get(None, [])))
        while stack:
            node = stack.pop()
            ordered.append(node)
            stack.extend(reversed(children.get(node.id, [])))

        if len(ordered) != len(wbs_nodes):
            raise InvalidHierarchy("WBS tree contains a cycle; some nodes are unreachable from a root.")
        return ordered


__all__ = ["ScheduleGenerator"]
