from __future__ import annotations

from typing import Optional

from storage_tier.placement.ledger import TierLedger
from storage_tier.types import UNSATISFIABLE, Finite, QueueSnapshot, Wait


def cluster_wait(snapshot: QueueSnapshot) -> float:
    """Expected seconds until the queue drains enough to start a new job.

    Jobs are assumed to run one after another: the latest known end time,
    plus the time limits of every job with no end time yet. Parallelism
    across nodes is ignored.
    """
    if snapshot.is_empty:
        return 0.0

    now = snapshot.captured_at
    latest: Optional[float] = None
    for job in snapshot.jobs:
        if job.end_time is not None:
            latest = job.end_time if latest is None else max(latest, job.end_time)
    if latest is None:
        latest = now

    for job in snapshot.jobs:
        if job.end_time is None:
            latest += job.time_limit

    return max(0.0, latest - now)


def hps_wait(snapshot: QueueSnapshot, requested_capacity: int, hps_capacity: int) -> Wait:
    if requested_capacity > hps_capacity:
        return UNSATISFIABLE
    ledger = TierLedger.from_snapshot(snapshot, hps_capacity)
    if ledger.remaining_capacity >= requested_capacity:
        return Finite(0.0)
    return Finite(ledger.occupancy_time)
