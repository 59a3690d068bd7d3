from datetime import date

import pytest

from builders import make_task
from schedule_core.exceptions import InvalidHierarchy, OrphanReference
from schedule_core.models import TaskType
from schedule_core.services.scheduling import HierarchyRollup
from schedule_core.services.work_calendar import WorkCalendarEngine


def _leaf(task_id, parent_id, start, end):
    return make_task(task_id, 0, parent_id=parent_id, planned_start=start, planned_end=end)


def test_summary_covers_children_span(calendar5):
    summary = make_task("S", 0, TaskType.SUMMARY)
    a = _leaf("A", "S", date(2024, 1, 1), date(2024, 1, 3))
    b = _leaf("B", "S", date(2024, 1, 8), date(2024, 1, 10))

    updated = HierarchyRollup([summary, a, b], calendar5).roll_up("S")

    assert updated == ["S"]
    assert summary.planned_start == date(2024, 1, 1)
    assert summary.planned_end == date(2024, 1, 10)
    assert summary.planned_duration == 8


def test_rollup_propagates_to_ancestors(calendar5):
    root = make_task("R", 0, TaskType.SUMMARY)
    mid = make_task("M", 0, TaskType.SUMMARY, parent_id="R")
    other = _leaf("O", "R", date(2024, 1, 2), date(2024, 1, 2))
    leaf = _leaf("L", "M", date(2024, 1, 4), date(2024, 1, 9))
    rollup = HierarchyRollup([root, mid, other, leaf], calendar5)

    assert rollup.roll_up_ancestors("L") == ["M", "R"]
    assert (mid.planned_start, mid.planned_end) == (date(2024, 1, 4), date(2024, 1, 9))
    assert (root.planned_start, root.planned_end) == (date(2024, 1, 2), date(2024, 1, 9))
    assert rollup.depth("L") == 2


def test_roll_up_all_goes_deepest_first(calendar5):
    root = make_task("R", 0, TaskType.SUMMARY)
    mid = make_task("M", 0, TaskType.SUMMARY, parent_id="R")
    leaf = _leaf("L", "M", date(2024, 1, 3), date(2024, 1, 5))

    updated = HierarchyRollup([root, mid, leaf], calendar5).roll_up_all()

    assert updated == ["M", "R"]
    assert root.planned_start == date(2024, 1, 3)
    assert root.planned_duration == 3


def test_summary_without_children_is_left_alone(calendar5):
    empty = make_task("E", 0, TaskType.SUMMARY, planned_start=date(2024, 2, 1), planned_end=date(2024, 2, 1))

    assert HierarchyRollup([empty], calendar5).roll_up("E") == []
    assert empty.planned_start == date(2024, 2, 1)


def test_containment_after_rollup():
    cal = WorkCalendarEngine(6)
    tasks = [make_task("S", 0, TaskType.SUMMARY)]
    for i, (s, e) in enumerate([(3, 5), (1, 2), (9, 12)]):
        tasks.append(_leaf(f"C{i}", "S", date(2024, 1, s), date(2024, 1, e)))

    HierarchyRollup(tasks, cal).roll_up_all()

    summary = tasks[0]
    for child in tasks[1:]:
        assert summary.planned_start <= child.planned_start
        assert summary.planned_end >= child.planned_end
    assert summary.planned_start == min(c.planned_start for c in tasks[1:])
    assert summary.planned_end == max(c.planned_end for c in tasks[1:])


def test_leaf_parent_is_invalid(calendar5):
    parent = make_task("P", 1)
    child = make_task("C", 1, parent_id="P")
    with pytest.raises(InvalidHierarchy) as exc:
        HierarchyRollup([parent, child], calendar5)
    assert exc.value.code == "HIERARCHY_INVALID"


def test_missing_parent_is_orphan(calendar5):
    with pytest.raises(OrphanReference):
        HierarchyRollup([make_task("C", 1, parent_id="nope")], calendar5)


def test_parent_cycle_is_invalid(calendar5):
    a = make_task("A", 0, TaskType.SUMMARY, parent_id="B")
    b = make_task("B", 0, TaskType.SUMMARY, parent_id="A")
    with pytest.raises(InvalidHierarchy):
        HierarchyRollup([a, b], calendar5)
