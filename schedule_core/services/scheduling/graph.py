from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Callable, Dict, Iterable, List, Optional

from schedule_core.exceptions import (
    CycleDetected,
    CyclicGraph,
    NotFoundError,
    OrphanReference,
    ValidationError,
)
from schedule_core.models import DependencyType, ScheduleTask, TaskDependency
from schedule_core.services.scheduling.models import DependencyDiagnostic

logger = logging.getLogger(__name__)


def _default_sort_key(task: ScheduleTask) -> tuple[str, str]:
    return (task.wbs_code or task.name or "", task.id)


def check_dependency_references(
    tasks_by_id: Dict[str, ScheduleTask],
    deps: Iterable[TaskDependency],
) -> None:
    for dep in deps:
        for task_id in (dep.predecessor_task_id, dep.successor_task_id):
            if task_id not in tasks_by_id:
                raise OrphanReference(
                    f"Dependency {dep.id} references unknown task '{task_id}'.",
                    reference_id=task_id,
                )


def build_project_dependency_graph(
    tasks_by_id: Dict[str, ScheduleTask],
    deps: List[TaskDependency],
    sort_key: Callable[[ScheduleTask], tuple] = _default_sort_key,
) -> tuple[list[str], dict[str, list[TaskDependency]], dict[str, list[TaskDependency]]]:
    """
    Kahn's algorithm with a deterministic heap ordering.

    Returns (topo_order, deps_by_successor, deps_by_predecessor).
    Raises OrphanReference for edges touching unknown tasks and CyclicGraph when
    the ordering cannot place every task.
    """
    check_dependency_references(tasks_by_id, deps)

    graph_succ: Dict[str, List[TaskDependency]] = {}
    indegree: Dict[str, int] = {task_id: 0 for task_id in tasks_by_id}

    for dep in deps:
        graph_succ.setdefault(dep.predecessor_task_id, []).append(dep)
        indegree[dep.successor_task_id] += 1

    heap: list[tuple[tuple, str]] = []
    for task_id, degree in indegree.items():
        if degree == 0:
            heapq.heappush(heap, (sort_key(tasks_by_id[task_id]), task_id))

    topo_order: list[str] = []
    while heap:
        _key, task_id = heapq.heappop(heap)
        topo_order.append(task_id)
        for dep in graph_succ.get(task_id, []):
            succ_id = dep.successor_task_id
            indegree[succ_id] -= 1
            if indegree[succ_id] == 0:
                heapq.heappush(heap, (sort_key(tasks_by_id[succ_id]), succ_id))

    if len(topo_order) != len(tasks_by_id):
        unresolved = sorted(task_id for task_id, degree in indegree.items() if degree > 0)
        logger.error("Topological sort left %d task(s) unordered: %s", len(unresolved), unresolved)
        raise CyclicGraph()

    deps_by_successor: Dict[str, List[TaskDependency]] = {}
    deps_by_predecessor: Dict[str, List[TaskDependency]] = {}
    for dep in deps:
        deps_by_successor.setdefault(dep.successor_task_id, []).append(dep)
        deps_by_predecessor.setdefault(dep.predecessor_task_id, []).append(dep)

    return topo_order, deps_by_successor, deps_by_predecessor


class DependencyGraph:
    """
    Owns a schedule's edge set and refuses any edge that would close a loop.

    Tasks are plain ids; the graph never holds task objects.
    """

    def __init__(
        self,
        task_ids: Iterable[str],
        dependencies: Iterable[TaskDependency] = (),
        schedule_id: Optional[str] = None,
    ):
        self._schedule_id = schedule_id
        self._task_ids: set[str] = set(task_ids)
        self._edges: Dict[str, TaskDependency] = {}
        for dep in dependencies:
            self._require_task(dep.predecessor_task_id)
            self._require_task(dep.successor_task_id)
            self._edges[dep.id] = dep

    @property
    def task_ids(self) -> frozenset[str]:
        return frozenset(self._task_ids)

    @property
    def dependencies(self) -> list[TaskDependency]:
        return list(self._edges.values())

    def add_task(self, task_id: str) -> None:
        self._task_ids.add(task_id)

    def get(self, dependency_id: str) -> Optional[TaskDependency]:
        return self._edges.get(dependency_id)

    def predecessors_of(self, task_id: str) -> list[TaskDependency]:
        return [d for d in self._edges.values() if d.successor_task_id == task_id]

    def successors_of(self, task_id: str) -> list[TaskDependency]:
        return [d for d in self._edges.values() if d.predecessor_task_id == task_id]

    def would_create_cycle(self, predecessor_id: str, successor_id: str) -> bool:
        return self.find_cycle_path(predecessor_id, successor_id) is not None

    def find_cycle_path(self, predecessor_id: str, successor_id: str) -> list[str] | None:
        """
        Path predecessor -> successor -> ... -> predecessor the candidate edge would close,
        or None when the edge is safe.
        """
        if predecessor_id == successor_id:
            return [predecessor_id, successor_id]

        graph: dict[str, list[str]] = {}
        for dep in self._edges.values():
            graph.setdefault(dep.predecessor_task_id, []).append(dep.successor_task_id)
        graph.setdefault(predecessor_id, []).append(successor_id)

        path = self._find_path(graph, successor_id, predecessor_id)
        if not path:
            return None
        return [predecessor_id, *path]

    @staticmethod
    def _find_path(graph: dict[str, list[str]], start: str, target: str) -> list[str] | None:
        queue = deque([(start, [start])])
        visited: set[str] = set()
        while queue:
            node, path = queue.popleft()
            if node == target:
                return path
            if node in visited:
                continue
            visited.add(node)
            for nxt in graph.get(node, []):
                if nxt not in visited:
                    queue.append((nxt, [*path, nxt]))
        return None

    def diagnose(
        self,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> DependencyDiagnostic:
        """Non-raising pre-flight check for a candidate edge."""

        def _invalid(code: str, summary: str, detail: str, **extra) -> DependencyDiagnostic:
            return DependencyDiagnostic(
                is_valid=False,
                code=code,
                summary=summary,
                detail=detail,
                predecessor_task_id=predecessor_id,
                successor_task_id=successor_id,
                dependency_type=dependency_type,
                lag_days=lag_days,
                **extra,
            )

        for label, task_id in (("Predecessor", predecessor_id), ("Successor", successor_id)):
            if task_id not in self._task_ids:
                return _invalid(
                    "ORPHAN_REFERENCE",
                    f"{label} task not found.",
                    f"Task id '{task_id}' is not part of this schedule.",
                )

        if any(
            dep.predecessor_task_id == predecessor_id and dep.successor_task_id == successor_id
            for dep in self._edges.values()
        ):
            return _invalid(
                "DEPENDENCY_DUPLICATE",
                "Dependency already exists.",
                "The selected predecessor->successor relationship already exists.",
            )

        cycle_path = self.find_cycle_path(predecessor_id, successor_id)
        if cycle_path:
            return _invalid(
                "DEPENDENCY_CYCLE",
                "This link would create a circular dependency.",
                f"Cycle path: {' -> '.join(cycle_path)}",
                cycle_path=cycle_path,
                suggestions=[
                    "Reverse the dependency direction if the work sequence allows it.",
                    "Insert an intermediate task or milestone to break the loop.",
                ],
            )

        return DependencyDiagnostic(
            is_valid=True,
            code="DEPENDENCY_VALID",
            summary="Dependency is valid.",
            detail="Validation passed: both tasks exist, no duplicate and no cycle.",
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
            dependency_type=dependency_type,
            lag_days=lag_days,
        )

    def add_dependency(
        self,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> TaskDependency:
        diagnostic = self.diagnose(predecessor_id, successor_id, dependency_type, lag_days)
        if not diagnostic.is_valid:
            message = f"{diagnostic.summary}\n{diagnostic.detail}"
            if diagnostic.code == "ORPHAN_REFERENCE":
                missing = predecessor_id if predecessor_id not in self._task_ids else successor_id
                raise OrphanReference(message, reference_id=missing)
            if diagnostic.code == "DEPENDENCY_CYCLE":
                raise CycleDetected(message, cycle_path=diagnostic.cycle_path)
            raise ValidationError(message, code=diagnostic.code)

        dep = TaskDependency.create(
            predecessor_id,
            successor_id,
            dependency_type,
            int(lag_days),
            schedule_id=self._schedule_id,
        )
        self._edges[dep.id] = dep
        logger.debug(
            "Dependency %s added: %s -%s(%+d)-> %s",
            dep.id, predecessor_id, dependency_type.value, dep.lag_days, successor_id,
        )
        return dep

    def remove_dependency(self, dependency_id: str) -> TaskDependency:
        dep = self._edges.pop(dependency_id, None)
        if dep is None:
            raise NotFoundError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
        return dep

    def has_cycle(self) -> bool:
        try:
            self.topological_order()
        except CyclicGraph:
            return True
        return False

    def topological_order(self) -> list[str]:
        indegree: Dict[str, int] = {task_id: 0 for task_id in self._task_ids}
        successors: Dict[str, List[str]] = {}
        for dep in self._edges.values():
            successors.setdefault(dep.predecessor_task_id, []).append(dep.successor_task_id)
            indegree[dep.successor_task_id] += 1

        heap = [task_id for task_id, degree in indegree.items() if degree == 0]
        heapq.heapify(heap)
        order: list[str] = []
        while heap:
            task_id = heapq.heappop(heap)
            order.append(task_id)
            for succ_id in successors.get(task_id, []):
                indegree[succ_id] -= 1
                if indegree[succ_id] == 0:
                    heapq.heappush(heap, succ_id)

        if len(order) != len(self._task_ids):
            raise CyclicGraph()
        return order

    def _require_task(self, task_id: str) -> None:
        if task_id not in self._task_ids:
            raise OrphanReference(
                f"Dependency references unknown task '{task_id}'.",
                reference_id=task_id,
            )


__all__ = [
    "DependencyGraph",
    "build_project_dependency_graph",
    "check_dependency_references",
]
