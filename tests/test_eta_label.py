import re

import pytest
from datetime import datetime, timedelta, timezone

from jobs.eta import EtaInput, compute_eta_label
from jobs.models import JobStatus
from jobs.policy import EtaPolicy

NOW = datetime(2025, 3, 5, 10, 0)


@pytest.fixture
def policy():
    return EtaPolicy()


def _label(policy, **fields):
    fields.setdefault("status", JobStatus.SCHEDULED)
    return compute_eta_label(EtaInput(**fields), NOW, policy=policy)


def test_terminal_statuses(policy):
    assert _label(policy, status=JobStatus.COMPLETED, eta_minutes=5, started_at=NOW) == "Completed"
    assert _label(policy, status=JobStatus.SKIPPED, scheduled_at=NOW + timedelta(hours=5)) == "Skipped"


def test_arriving_now_when_eta_is_zero(policy):
    assert _label(policy, eta_minutes=0) == "Arriving now"
    assert _label(policy, eta_minutes=1) == "Arriving now"
    assert _label(policy, eta_minutes=-10) == "Arriving now"


def test_started_job_counts_down_from_its_eta(policy):
    started = NOW - timedelta(minutes=5)

    assert _label(policy, started_at=started, eta_minutes=20) == "~15 min"
    # No explicit ETA -> policy default of 20
    assert _label(policy, started_at=started) == "~15 min"
    # Caller specific baseline
    assert compute_eta_label(EtaInput(JobStatus.EN_ROUTE, started_at=started), NOW, policy=policy, default_eta_minutes=30) == "~25 min"


def test_started_long_ago_clamps_to_arriving_now(policy):
    assert _label(policy, started_at=NOW - timedelta(hours=2), eta_minutes=20) == "Arriving now"


def test_started_in_the_future_does_not_add_time(policy):
    assert _label(policy, started_at=NOW + timedelta(minutes=30), eta_minutes=20) == "~20 min"


def test_explicit_eta_without_start(policy):
    assert _label(policy, eta_minutes=12) == "~12 min"
    assert _label(policy, eta_minutes="12") == "~12 min"


def test_future_schedule_in_minutes_and_hours(policy):
    assert _label(policy, scheduled_at=NOW + timedelta(minutes=2)) == "~5 min"
    assert _label(policy, scheduled_at=NOW + timedelta(minutes=45, seconds=30)) == "~45 min"
    assert _label(policy, scheduled_at=NOW + timedelta(minutes=120)) == "~120 min"
    assert _label(policy, scheduled_at=NOW + timedelta(minutes=121)) == "~2 h out"
    assert _label(policy, scheduled_at=NOW + timedelta(minutes=150)) == "~3 h out"
    assert _label(policy, scheduled_at=NOW + timedelta(days=2)) == "~48 h out"


@pytest.mark.parametrize("status", [JobStatus.SCHEDULED, JobStatus.EN_ROUTE, JobStatus.ON_SITE])
def test_fallback_window(policy, status):
    assert _label(policy, status=status, scheduled_at=NOW - timedelta(hours=3)) == "~20 min"
    assert _label(policy, status=status) == "~20 min"


def test_accepts_loose_inputs(policy):
    job = {
        "status": "in progress",
        "scheduled_at": "2025-03-05T09:00:00Z",
        "eta_minutes": None,
        "started_at": "garbage",
    }

    assert compute_eta_label(job, NOW.replace(tzinfo=timezone.utc), policy=policy) == "~20 min"
    assert compute_eta_label({"status": "done"}, NOW, policy=policy) == "Completed"
    assert compute_eta_label(object(), NOW, policy=policy) == "~20 min"


def test_mixed_naive_and_aware_datetimes(policy):
    aware_now = datetime(2025, 3, 5, 10, 0, tzinfo=timezone.utc)
    naive_future = datetime(2025, 3, 5, 10, 30)

    assert compute_eta_label(EtaInput(JobStatus.SCHEDULED, scheduled_at=naive_future), aware_now, policy=policy) == "~30 min"


def test_never_negative(policy):
    pattern = re.compile(r"^~(-?\d+) (min|h out)$")
    cases = [
        EtaInput(JobStatus.EN_ROUTE, started_at=NOW - timedelta(minutes=minutes), eta_minutes=eta)
        for minutes in (0, 3, 19, 21, 500)
        for eta in (None, -5, 0, 4, 30)
    ] + [EtaInput(JobStatus.SCHEDULED, scheduled_at=NOW + timedelta(minutes=m)) for m in (-90, -1, 0, 1, 300)]

    for case in cases:
        label = compute_eta_label(case, NOW, policy=policy)
        match = pattern.match(label)
        if match:
            assert int(match.group(1)) >= 0
        else:
            assert label == "Arriving now"


def test_naive_now_with_an_offset_value_reads_as_utc(policy):
    """
    A naive `now` is UTC; the host's local zone must not shift the label.
    """
    sydney = timezone(timedelta(hours=11))
    # 20:30 in +11:00 is 09:30 UTC, 30 minutes before NOW
    started = datetime(2025, 3, 5, 20, 30, tzinfo=sydney)
    # 21:45 in +11:00 is 10:45 UTC
    scheduled = datetime(2025, 3, 5, 21, 45, tzinfo=sydney)

    assert compute_eta_label(EtaInput(JobStatus.EN_ROUTE, started_at=started, eta_minutes=45), NOW, policy=policy) == "~15 min"
    assert compute_eta_label(EtaInput(JobStatus.SCHEDULED, scheduled_at=scheduled), NOW, policy=policy) == "~45 min"


def test_aware_now_with_a_naive_value_reads_as_utc(policy):
    sydney_now = datetime(2025, 3, 5, 21, 0, tzinfo=timezone(timedelta(hours=11)))
    # Naive 10:30 is 10:30 UTC, 30 minutes after 10:00 UTC
    naive_scheduled = datetime(2025, 3, 5, 10, 30)

    assert compute_eta_label(EtaInput(JobStatus.SCHEDULED, scheduled_at=naive_scheduled), sydney_now, policy=policy) == "~30 min"
