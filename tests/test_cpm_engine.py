from datetime import date

import pytest

from builders import MONDAY, make_dep, make_task
from schedule_core.exceptions import CyclicGraph, OrphanReference
from schedule_core.models import DependencyType, Schedule, TaskType
from schedule_core.services.scheduling import SchedulingEngine, recompute
from schedule_core.services.work_calendar import WorkCalendarEngine


def _cpm(tasks, deps, start=MONDAY, w=5):
    return SchedulingEngine().calculate_critical_path(tasks, deps, start, w)


def _chain(lag_days=0):
    t1, t2, t3 = make_task("T1", 2), make_task("T2", 3), make_task("T3", 1)
    deps = [make_dep("T1", "T2", lag_days=lag_days), make_dep("T2", "T3")]
    return [t1, t2, t3], deps


def test_fs_chain_dates_and_all_critical():
    tasks, deps = _chain()
    result = _cpm(tasks, deps)

    assert (result["T1"].earliest_start, result["T1"].earliest_finish) == (date(2024, 1, 1), date(2024, 1, 2))
    assert (result["T2"].earliest_start, result["T2"].earliest_finish) == (date(2024, 1, 3), date(2024, 1, 5))
    assert (result["T3"].earliest_start, result["T3"].earliest_finish) == (date(2024, 1, 8), date(2024, 1, 8))
    assert result.project_end_date == date(2024, 1, 8)
    assert all(result[t].total_float_days == 0 for t in ("T1", "T2", "T3"))
    assert result.critical_path.critical_task_ids == ["T1", "T2", "T3"]
    assert result.critical_path.project_duration == 6


def test_fs_chain_with_lag_pushes_successors():
    tasks, deps = _chain(lag_days=2)
    result = _cpm(tasks, deps)

    assert result["T2"].earliest_start == date(2024, 1, 5)
    assert result["T2"].earliest_finish == date(2024, 1, 9)
    assert result["T3"].earliest_start == date(2024, 1, 10)
    assert all(result[t].is_critical for t in ("T1", "T2", "T3"))


def test_pure_fs_chain_duration_is_sum_of_durations_and_lags():
    tasks, deps = _chain(lag_days=2)
    result = _cpm(tasks, deps)

    cal = WorkCalendarEngine(5)
    assert cal.count_working_days(MONDAY, result.project_end_date) == (2 + 3 + 1) + 2


def test_cpm_fields_are_written_onto_tasks():
    tasks, deps = _chain()
    _cpm(tasks, deps)

    t2 = tasks[1]
    assert t2.early_start == date(2024, 1, 3)
    assert t2.late_finish == date(2024, 1, 5)
    assert t2.total_float == 0
    assert t2.is_critical is True
    # planned dates are not touched by CPM
    assert t2.planned_start is None


def test_parallel_branch_gets_float():
    tasks = [make_task("A", 2), make_task("B", 1), make_task("C", 1)]
    deps = [make_dep("A", "C"), make_dep("B", "C")]
    result = _cpm(tasks, deps)

    assert result["C"].earliest_start == date(2024, 1, 3)
    assert result["B"].latest_start == date(2024, 1, 2)
    assert result["B"].total_float_days == 1
    assert result["B"].free_float_days == 1
    assert not result["B"].is_critical
    assert result.critical_path.critical_task_ids == ["A", "C"]


def test_start_to_start_with_lag():
    tasks = [make_task("A", 3), make_task("B", 2)]
    deps = [make_dep("A", "B", DependencyType.START_TO_START, lag_days=1)]
    result = _cpm(tasks, deps)

    assert result["B"].earliest_start == date(2024, 1, 2)
    assert result["B"].earliest_finish == date(2024, 1, 3)
    assert result["A"].total_float_days == 0
    assert result["B"].total_float_days == 0


def test_finish_to_finish_aligns_finishes():
    tasks = [make_task("A", 3), make_task("B", 1)]
    deps = [make_dep("A", "B", DependencyType.FINISH_TO_FINISH)]
    result = _cpm(tasks, deps)

    assert result["B"].earliest_finish == result["A"].earliest_finish == date(2024, 1, 3)
    assert result["B"].earliest_start == date(2024, 1, 3)


def test_finish_to_finish_never_starts_before_project_start():
    tasks = [make_task("A", 1), make_task("B", 3)]
    deps = [make_dep("A", "B", DependencyType.FINISH_TO_FINISH)]
    result = _cpm(tasks, deps)

    assert result["B"].earliest_start == MONDAY
    assert result["B"].earliest_finish == date(2024, 1, 3)


def test_start_to_finish_constrains_successor_finish():
    tasks = [make_task("A", 2), make_task("B", 1)]
    deps = [make_dep("A", "B", DependencyType.START_TO_FINISH, lag_days=3)]
    result = _cpm(tasks, deps)

    cal = WorkCalendarEngine(5)
    assert result["B"].earliest_finish == cal.add_working_days(result["A"].earliest_start, 3 - 1)
    assert result["B"].earliest_finish == date(2024, 1, 3)
    assert result["A"].latest_finish == date(2024, 1, 2)
    assert result["A"].is_critical and result["B"].is_critical


def test_milestone_has_zero_span_and_sits_on_the_chain():
    tasks = [make_task("A", 2), make_task("M", 0, TaskType.MILESTONE), make_task("B", 1)]
    deps = [make_dep("A", "M"), make_dep("M", "B")]
    result = _cpm(tasks, deps)

    assert result["M"].earliest_start == result["M"].earliest_finish == date(2024, 1, 3)
    assert result["B"].earliest_start == date(2024, 1, 4)
    assert result["M"].is_critical


def test_weekend_project_start_rolls_first_task_to_monday():
    saturday = date(2024, 1, 6)
    tasks = [make_task("A", 1), make_task("M", 0, TaskType.MILESTONE)]
    result = _cpm(tasks, [], start=saturday)

    assert result["A"].earliest_start == date(2024, 1, 8)
    assert result["M"].earliest_start == saturday
    assert result["M"].latest_start == date(2024, 1, 8)
    assert result["M"].total_float_days == 1
    assert not result["M"].is_critical


def test_weekend_start_milestone_keeps_late_dates_at_or_after_early_dates():
    sunday = date(2024, 1, 7)
    tasks = [make_task("M", 0, TaskType.MILESTONE), make_task("A", 1)]
    result = _cpm(tasks, [make_dep("M", "A")], start=sunday)

    assert result["M"].earliest_start == result["M"].earliest_finish == sunday
    assert result["M"].latest_start == result["M"].latest_finish == sunday
    assert result["M"].latest_start >= result["M"].earliest_start
    assert result["M"].total_float_days == 0
    assert result["A"].earliest_start == result["A"].latest_start == date(2024, 1, 8)
    assert result.project_end_date == date(2024, 1, 8)
    assert result.critical_path.critical_task_ids == ["M", "A"]


def test_disconnected_chains_are_independent():
    tasks = [make_task("A", 3), make_task("B", 2), make_task("C", 1), make_task("D", 1)]
    deps = [make_dep("A", "B"), make_dep("C", "D")]
    result = _cpm(tasks, deps)

    assert result.project_end_date == date(2024, 1, 5)
    assert result["C"].total_float_days == 3
    assert result["D"].total_float_days == 3
    assert result["C"].free_float_days == 0
    assert result["D"].free_float_days == 3
    assert result.critical_path.critical_task_ids == ["A", "B"]


def test_lone_task_driving_duration_is_critical():
    tasks = [make_task("solo", 4), make_task("short", 1)]
    result = _cpm(tasks, [])

    assert result["solo"].is_critical
    assert not result["short"].is_critical


def test_float_properties_hold_on_mixed_network():
    tasks = [
        make_task("A", 2),
        make_task("B", 4),
        make_task("C", 1),
        make_task("D", 3),
        make_task("E", 2),
        make_task("M", 0, TaskType.MILESTONE),
    ]
    deps = [
        make_dep("A", "B"),
        make_dep("A", "C", lag_days=1),
        make_dep("B", "D", DependencyType.START_TO_START, lag_days=2),
        make_dep("C", "D"),
        make_dep("D", "E", DependencyType.FINISH_TO_FINISH),
        make_dep("E", "M"),
    ]
    result = _cpm(tasks, deps, w=6)

    for info in result.tasks.values():
        assert info.earliest_start <= info.latest_start
        assert info.earliest_finish <= info.latest_finish
        assert info.total_float_days >= 0
        assert 0 <= info.free_float_days <= info.total_float_days
        assert info.is_critical == (info.total_float_days == 0)
        assert info.earliest_start >= MONDAY
        assert info.latest_finish <= result.project_end_date

    critical = result.critical_path.critical_task_ids
    assert critical
    assert result.project_end_date == max(i.earliest_finish for i in result.tasks.values())


def test_critical_tasks_form_connected_chain_from_start_to_finish():
    tasks = [make_task("A", 2), make_task("B", 1), make_task("C", 3), make_task("D", 1)]
    deps = [make_dep("A", "B"), make_dep("A", "C"), make_dep("B", "D"), make_dep("C", "D")]
    result = _cpm(tasks, deps)

    critical = set(result.critical_path.critical_task_ids)
    assert critical == {"A", "C", "D"}
    assert result["A"].earliest_start == MONDAY
    assert result["D"].earliest_finish == result.project_end_date


def test_cycle_in_input_raises_cyclic_graph():
    tasks = [make_task("A", 1), make_task("B", 1)]
    deps = [make_dep("A", "B"), make_dep("B", "A")]
    with pytest.raises(CyclicGraph) as exc:
        _cpm(tasks, deps)
    assert exc.value.code == "SCHEDULE_CYCLE"


def test_unknown_task_in_dependency_raises_orphan_reference():
    tasks = [make_task("A", 1)]
    with pytest.raises(OrphanReference) as exc:
        _cpm(tasks, [make_dep("A", "ghost")])
    assert exc.value.reference_id == "ghost"


def _schedule(tasks, deps, w=5):
    schedule = Schedule.create("p1", "Main", MONDAY, working_days_per_week=w)
    schedule.tasks = tasks
    schedule.dependencies = deps
    return schedule


def test_recompute_rolls_up_then_runs_cpm():
    summary = make_task("S", 0, TaskType.SUMMARY)
    a = make_task("A", 2, parent_id="S", planned_start=MONDAY, planned_end=date(2024, 1, 2))
    b = make_task("B", 3, parent_id="S", planned_start=date(2024, 1, 3), planned_end=date(2024, 1, 5))
    schedule = _schedule([summary, a, b], [make_dep("A", "B")])

    result = recompute(schedule)

    assert summary.planned_start == MONDAY
    assert summary.planned_end == date(2024, 1, 5)
    assert summary.planned_duration == 5
    assert "S" in result.rolled_up_task_ids
    assert schedule.project_end_date == result.project_end_date == date(2024, 1, 5)


def test_recompute_failure_leaves_tasks_untouched():
    summary = make_task("S", 0, TaskType.SUMMARY)
    a = make_task("A", 2, parent_id="S", planned_start=MONDAY, planned_end=date(2024, 1, 2))
    b = make_task("B", 1, parent_id="S", planned_start=date(2024, 1, 3), planned_end=date(2024, 1, 3))
    schedule = _schedule([summary, a, b], [make_dep("A", "B"), make_dep("B", "A")])

    with pytest.raises(CyclicGraph):
        recompute(schedule)

    assert summary.planned_start is None
    assert a.early_start is None
    assert schedule.project_end_date is None


def test_recompute_rejects_orphan_dependency_before_touching_tasks():
    a = make_task("A", 1, planned_start=MONDAY, planned_end=MONDAY)
    schedule = _schedule([a], [make_dep("A", "ghost")])

    with pytest.raises(OrphanReference) as exc:
        recompute(schedule)

    assert exc.value.reference_id == "ghost"
    assert a.early_start is None
    assert schedule.project_end_date is None


def test_recompute_is_deterministic():
    tasks, deps = _chain(lag_days=1)
    first = _cpm(tasks, deps)
    snapshot = {k: (v.earliest_start, v.latest_finish, v.total_float_days) for k, v in first.tasks.items()}
    second = _cpm(tasks, deps)
    assert snapshot == {k: (v.earliest_start, v.latest_finish, v.total_float_days) for k, v in second.tasks.items()}
