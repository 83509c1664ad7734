from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from storage_tier.types import ACTIVE_STATES, JobSnapshot, JobState, QueueSnapshot


class QueueSnapshotProvider(Protocol):
    def snapshot(self, now: float) -> QueueSnapshot:
        ...


def active_state(raw: object) -> Optional[JobState]:
    """Map a host job state onto the states a placement cares about.

    Terminal and transitional states (COMPLETED, CANCELLED, COMPLETING, ...)
    map to ``None``. Newer Slurm releases report a list of state flags; the
    first entry is the base state.
    """
    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else ""
    s = str(raw).strip().upper()
    if s in ACTIVE_STATES:
        return JobState(s)
    return None


@dataclass
class StaticQueue:
    """In-memory queue; tests use it to play the host scheduler."""

    jobs: List[JobSnapshot] = field(default_factory=list)
    query_failed: bool = False

    def add(self, job: JobSnapshot) -> None:
        self.jobs.append(job)

    def clear(self) -> None:
        self.jobs.clear()

    def snapshot(self, now: float) -> QueueSnapshot:
        if self.query_failed:
            return QueueSnapshot(jobs=(), captured_at=now, query_failed=True)
        return QueueSnapshot(jobs=tuple(self.jobs), captured_at=now)
