import pytest

from schedule_core.exceptions import InvalidCalendarConfig, ValidationError
from schedule_core.services.scheduling.policy import (
    DEFAULT_LEAF_DURATION_DAYS,
    DEFAULT_WORKING_DAYS_PER_WEEK,
    default_leaf_duration,
    default_working_days_per_week,
)


def test_defaults_without_environment(monkeypatch):
    monkeypatch.delenv("SCHED_WORKING_DAYS_PER_WEEK", raising=False)
    monkeypatch.delenv("SCHED_LEAF_DEFAULT_DURATION", raising=False)
    assert default_working_days_per_week() == DEFAULT_WORKING_DAYS_PER_WEEK == 6
    assert default_leaf_duration() == DEFAULT_LEAF_DURATION_DAYS == 1


def test_working_week_override(monkeypatch):
    monkeypatch.setenv("SCHED_WORKING_DAYS_PER_WEEK", " 5 ")
    assert default_working_days_per_week() == 5


@pytest.mark.parametrize("raw", ["4", "eight", "0"])
def test_bad_working_week_override(monkeypatch, raw):
    monkeypatch.setenv("SCHED_WORKING_DAYS_PER_WEEK", raw)
    with pytest.raises(InvalidCalendarConfig):
        default_working_days_per_week()


@pytest.mark.parametrize("raw", ["0", "-2", "two"])
def test_bad_leaf_duration_override(monkeypatch, raw):
    monkeypatch.setenv("SCHED_LEAF_DEFAULT_DURATION", raw)
    with pytest.raises(ValidationError) as exc:
        default_leaf_duration()
    assert exc.value.code == "LEAF_DURATION_INVALID"
