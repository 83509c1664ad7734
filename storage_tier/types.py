from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class JobState(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUSPENDED = "SUSPENDED"


ACTIVE_STATES = frozenset(s.value for s in JobState)


class Tier(str, Enum):
    LPS = "LPS"
    HPS = "HPS"


@dataclass(frozen=True)
class StorageRequest:
    capacity: int
    io: int


@dataclass(frozen=True)
class JobSnapshot:
    job_id: str
    state: JobState
    end_time: Optional[float]
    time_limit: float
    storage_request: Optional[StorageRequest] = None
    partition: Optional[str] = None


@dataclass(frozen=True)
class QueueSnapshot:
    jobs: Tuple[JobSnapshot, ...]
    captured_at: float
    query_failed: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.jobs


@dataclass(frozen=True)
class Finite:
    seconds: float


@dataclass(frozen=True)
class Unsatisfiable:
    pass


Wait = Union[Finite, Unsatisfiable]
UNSATISFIABLE = Unsatisfiable()


@dataclass(frozen=True)
class Decision:
    tier: Tier
    adjusted_time_limit: float
    expected_wait: float
    hps_wait: Optional[Wait] = None
    lps_time: Optional[int] = None
    hps_time: Optional[int] = None


@dataclass
class JobRecord:
    """Mutable job descriptor handed over by the host scheduler.

    ``time_limit`` is in minutes, the host's unit; everything else in the
    package works in seconds.
    """

    time_limit: int
    environment: Dict[str, str] = field(default_factory=dict)
    burst_buffer: Optional[str] = None
    partition: Optional[str] = None
    job_id: Optional[str] = None
    work_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, obj: Dict[str, object]) -> "JobRecord":
        if "time_limit" not in obj:
            raise ValueError("job descriptor is missing 'time_limit'")
        env = obj.get("environment") or {}
        if not isinstance(env, dict):
            raise ValueError("job descriptor 'environment' must be a mapping")
        return cls(
            time_limit=int(obj["time_limit"]),
            environment={str(k): str(v) for k, v in env.items()},
            burst_buffer=obj.get("burst_buffer"),
            partition=obj.get("partition"),
            job_id=None if obj.get("job_id") is None else str(obj["job_id"]),
            work_dir=obj.get("work_dir"),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "job_id": self.job_id,
            "time_limit": self.time_limit,
            "environment": dict(self.environment),
            "burst_buffer": self.burst_buffer,
            "partition": self.partition,
            "work_dir": self.work_dir,
        }
