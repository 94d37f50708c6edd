import pytest
from datetime import date

from bins.models import WeekParity
from bins.policy import SchedulePolicy, default_schedule_policy
from jobs.policy import EtaPolicy, ScheduleAnchor, StatusPolicy, default_eta_policy, default_status_policy

ENV_VARS = [
    "BIN_PARITY_EPOCH",
    "BIN_BASE_PARITY",
    "BIN_SUNDAY_JOINS_NEXT_WEEK",
    "JOB_SCHEDULED_HOUR",
    "JOB_ON_SITE_AFTER_MINUTES",
    "JOB_SCHEDULE_ANCHOR",
    "JOB_ADDRESS_FALLBACK",
    "ETA_DEFAULT_MINUTES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment():
    schedule = default_schedule_policy()
    status = default_status_policy()
    eta = default_eta_policy()

    assert schedule == SchedulePolicy()
    assert schedule.parity_epoch is None
    assert schedule.base_parity is WeekParity.ODD
    assert status == StatusPolicy()
    assert status.anchor is ScheduleAnchor.SERVICE_WEEK
    assert status.address_fallback is True
    assert eta.default_eta_minutes == 20


def test_schedule_policy_from_environment(monkeypatch):
    monkeypatch.setenv("BIN_PARITY_EPOCH", "2024-08-04")
    monkeypatch.setenv("BIN_BASE_PARITY", "Even")
    monkeypatch.setenv("BIN_SUNDAY_JOINS_NEXT_WEEK", "yes")

    policy = default_schedule_policy()

    assert policy.parity_epoch == date(2024, 8, 4)
    assert policy.base_parity is WeekParity.EVEN
    assert policy.sunday_joins_next_week is True


@pytest.mark.parametrize(
    "name, value",
    [("BIN_PARITY_EPOCH", "last tuesday"), ("BIN_BASE_PARITY", "sometimes")],
)
def test_bad_schedule_environment_raises(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        default_schedule_policy()


def test_status_and_eta_policy_from_environment(monkeypatch):
    monkeypatch.setenv("JOB_SCHEDULED_HOUR", "7")
    monkeypatch.setenv("JOB_ON_SITE_AFTER_MINUTES", "30")
    monkeypatch.setenv("JOB_SCHEDULE_ANCHOR", "next_occurrence")
    monkeypatch.setenv("JOB_ADDRESS_FALLBACK", "off")
    monkeypatch.setenv("ETA_DEFAULT_MINUTES", "25")

    status = default_status_policy()

    assert status.scheduled_hour == 7
    assert status.on_site_after_minutes == 30
    assert status.anchor is ScheduleAnchor.NEXT_OCCURRENCE
    assert status.address_fallback is False
    assert default_eta_policy().default_eta_minutes == 25


@pytest.mark.parametrize(
    "name, value",
    [
        ("JOB_SCHEDULED_HOUR", "nine"),
        ("JOB_SCHEDULED_HOUR", "25"),
        ("JOB_ON_SITE_AFTER_MINUTES", "-1"),
        ("JOB_SCHEDULE_ANCHOR", "whenever"),
        ("JOB_ADDRESS_FALLBACK", "maybe"),
    ],
)
def test_bad_status_environment_raises(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        default_status_policy()


def test_bad_eta_environment_raises(monkeypatch):
    monkeypatch.setenv("ETA_DEFAULT_MINUTES", "-3")

    with pytest.raises(ValueError):
        default_eta_policy()


@pytest.mark.parametrize(
    "policy",
    [
        SchedulePolicy(base_parity="odd"),
        SchedulePolicy(parity_epoch="2024-08-04"),
        StatusPolicy(scheduled_minute=60),
        StatusPolicy(unscheduled_offset_minutes=-5),
        StatusPolicy(anchor="service_week"),
        EtaPolicy(min_future_minutes=-1),
        EtaPolicy(hours_threshold_minutes=3),
        EtaPolicy(fallback_window_minutes=-20),
    ],
)
def test_validate_rejects_bad_values(policy):
    with pytest.raises(ValueError):
        policy.validate()
