from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from storage_tier.bb_spec import storage_request_or_none
from storage_tier.queue.snapshot import active_state
from storage_tier.types import JobSnapshot, QueueSnapshot

logger = logging.getLogger(__name__)


class QueueQueryError(RuntimeError):
    pass


def _number(value: Any) -> Optional[float]:
    # Slurm >= 23.02 wraps numbers as {"set": bool, "infinite": bool, "number": n}.
    if isinstance(value, Mapping):
        if not value.get("set", True) or value.get("infinite", False):
            return None
        value = value.get("number")
    if value is None or value == "":
        return None
    return float(value)


def parse_squeue_job(obj: Mapping[str, Any]) -> Optional[JobSnapshot]:
    state = active_state(obj.get("job_state"))
    if state is None:
        return None

    job_id = str(obj.get("job_id", ""))
    end = _number(obj.get("end_time"))
    # minutes on the wire; an unlimited job has no usable limit
    limit_min = _number(obj.get("time_limit"))
    bb = obj.get("burst_buffer") or None

    return JobSnapshot(
        job_id=job_id,
        state=state,
        end_time=end if end and end > 0 else None,
        time_limit=(limit_min or 0.0) * 60.0,
        storage_request=storage_request_or_none(bb, job_id=job_id),
        partition=obj.get("partition") or None,
    )


def parse_squeue_json(text: str) -> List[JobSnapshot]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise QueueQueryError(f"squeue returned invalid JSON: {e}") from e
    if not isinstance(payload, Mapping):
        raise QueueQueryError("squeue JSON payload is not an object")
    out: List[JobSnapshot] = []
    for obj in payload.get("jobs", []) or []:
        try:
            job = parse_squeue_job(obj)
        except (ValueError, TypeError, AttributeError) as e:
            raise QueueQueryError(f"squeue returned an unreadable job entry: {e}") from e
        if job is not None:
            out.append(job)
    return out


@dataclass
class SqueueQueue:
    squeue_bin: str = "squeue"
    timeout_sec: float = 10.0

    def _query(self) -> str:
        cmd = [self.squeue_bin, "--all", "--json"]
        try:
            completed = subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=self.timeout_sec)
        except FileNotFoundError as e:
            raise QueueQueryError(f"squeue binary not found: {self.squeue_bin}") from e
        except subprocess.TimeoutExpired as e:
            raise QueueQueryError(f"squeue timed out after {self.timeout_sec}s") from e
        except subprocess.CalledProcessError as e:
            raise QueueQueryError(f"squeue exited with {e.returncode}: {(e.stderr or '').strip()}") from e
        return completed.stdout

    def snapshot(self, now: float) -> QueueSnapshot:
        try:
            jobs = parse_squeue_json(self._query())
        except QueueQueryError as e:
            # an unreachable queue is read as an empty one
            logger.warning("Queue query failed, assuming empty queue: %s", e)
            return QueueSnapshot(jobs=(), captured_at=now, query_failed=True)
        return QueueSnapshot(jobs=tuple(jobs), captured_at=now)
