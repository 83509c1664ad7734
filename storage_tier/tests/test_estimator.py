import math

from storage_tier.placement import TierLedger, cluster_wait, hps_wait
from storage_tier.types import UNSATISFIABLE, Finite, JobSnapshot, JobState, QueueSnapshot, StorageRequest

NOW = 10_000.0


def _job(job_id, state, end=None, limit=600.0, cap=None, io=0):
    req = None if cap is None else StorageRequest(capacity=cap, io=io)
    return JobSnapshot(job_id=job_id, state=state, end_time=end, time_limit=limit, storage_request=req)


def _snap(*jobs) -> QueueSnapshot:
    return QueueSnapshot(jobs=tuple(jobs), captured_at=NOW)


def test_empty_queue_has_no_wait() -> None:
    snap = _snap()
    assert cluster_wait(snap) == 0.0
    assert hps_wait(snap, 100, 5120) == Finite(0.0)


def test_cluster_wait_adds_unestimated_limits_to_latest_end() -> None:
    snap = _snap(
        _job("1", JobState.RUNNING, end=NOW + 500),
        _job("2", JobState.RUNNING, end=NOW + 200),
        _job("3", JobState.PENDING, limit=300.0),
        _job("4", JobState.SUSPENDED, limit=100.0),
    )
    assert cluster_wait(snap) == 900.0


def test_cluster_wait_without_known_ends_starts_from_now() -> None:
    snap = _snap(_job("1", JobState.PENDING, limit=120.0), _job("2", JobState.PENDING, limit=60.0))
    assert cluster_wait(snap) == 180.0


def test_cluster_wait_never_negative() -> None:
    snap = _snap(_job("1", JobState.RUNNING, end=NOW - 50))
    assert cluster_wait(snap) == 0.0


def test_ledger_floors_remaining_capacity_and_tracks_residency() -> None:
    snap = _snap(
        _job("1", JobState.RUNNING, end=NOW + 100, cap=3000),
        _job("2", JobState.PENDING, limit=600.0, cap=3000),
        _job("3", JobState.RUNNING, end=NOW - 10, cap=10),
        _job("4", JobState.PENDING, limit=999.0),
    )
    ledger = TierLedger.from_snapshot(snap, 5120)
    assert ledger.committed_capacity == 6010
    assert ledger.remaining_capacity == 0
    assert ledger.residency == {"1": 100.0, "2": 600.0, "3": 0.0}
    assert ledger.occupancy_time == 700.0


def test_hps_wait_is_zero_while_capacity_remains() -> None:
    snap = _snap(_job("1", JobState.PENDING, limit=600.0, cap=5020))
    assert hps_wait(snap, 100, 5120) == Finite(0.0)


def test_hps_wait_accumulates_fast_tier_jobs_when_full() -> None:
    snap = _snap(
        _job("1", JobState.RUNNING, end=NOW + 100, cap=5000),
        _job("2", JobState.PENDING, limit=600.0, cap=100),
        _job("3", JobState.PENDING, limit=10_000.0),
    )
    assert hps_wait(snap, 100, 5120) == Finite(700.0)


def test_request_beyond_total_capacity_is_unsatisfiable() -> None:
    assert hps_wait(_snap(), 6000, 5120) is UNSATISFIABLE
    assert hps_wait(_snap(), 5120, 5120) == Finite(0.0)


def test_hps_wait_monotone_in_requested_capacity() -> None:
    snap = _snap(
        _job("1", JobState.RUNNING, end=NOW + 400, cap=2000),
        _job("2", JobState.PENDING, limit=1200.0, cap=1500),
        _job("3", JobState.SUSPENDED, limit=300.0, cap=500),
    )
    prev = -1.0
    for requested in range(0, 6001, 50):
        w = hps_wait(snap, requested, 5120)
        value = w.seconds if isinstance(w, Finite) else math.inf
        assert value >= prev
        prev = value
