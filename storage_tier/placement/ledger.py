from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from storage_tier.types import JobSnapshot, JobState, QueueSnapshot


def residency_time(job: JobSnapshot, now: float) -> float:
    """Seconds a fast-tier job is still expected to hold its reservation."""
    if job.state is JobState.RUNNING and job.end_time is not None:
        return max(0.0, job.end_time - now)
    return job.time_limit


@dataclass(frozen=True)
class TierLedger:
    total_capacity: int
    committed_capacity: int
    residency: Dict[str, float]

    @property
    def remaining_capacity(self) -> int:
        return max(0, self.total_capacity - self.committed_capacity)

    @property
    def occupancy_time(self) -> float:
        return float(sum(self.residency.values()))

    @classmethod
    def from_snapshot(cls, snapshot: QueueSnapshot, hps_capacity: int) -> "TierLedger":
        committed = 0
        residency: Dict[str, float] = {}
        for job in snapshot.jobs:
            if job.storage_request is None:
                continue
            committed += job.storage_request.capacity
            residency[job.job_id] = residency.get(job.job_id, 0.0) + residency_time(job, snapshot.captured_at)
        return cls(total_capacity=hps_capacity, committed_capacity=committed, residency=residency)
