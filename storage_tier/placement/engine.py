from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Optional

from storage_tier.bb_spec import storage_request_or_none
from storage_tier.config import TierConfig
from storage_tier.placement.allocator import allocate, rescale_time_limit
from storage_tier.placement.estimator import cluster_wait, hps_wait
from storage_tier.placement.threshold import ThresholdPolicy
from storage_tier.queue.snapshot import QueueSnapshotProvider
from storage_tier.types import Decision, Finite, JobRecord, StorageRequest, Tier, Wait

logger = logging.getLogger(__name__)


def _lps_default(time_limit: float, expected_wait: float = 0.0) -> Decision:
    return Decision(tier=Tier.LPS, adjusted_time_limit=time_limit, expected_wait=expected_wait)


def decide(
    time_limit: float,
    request: Optional[StorageRequest],
    expected_wait: float,
    hps_wait_est: Optional[Wait],
    config: TierConfig,
) -> Decision:
    """Pick the tier with the smaller projected completion time.

    ``time_limit``, ``expected_wait`` and the finite wait are seconds.
    Projections are truncated to whole seconds; a tie goes to the slow tier.
    """
    if request is None:
        return _lps_default(time_limit)

    lps_time = math.floor(expected_wait + time_limit + request.io / config.lps.bandwidth)
    hps_time: Optional[int] = None
    if isinstance(hps_wait_est, Finite):
        hps_time = math.floor(
            expected_wait + hps_wait_est.seconds + time_limit + request.io / config.hps.bandwidth
        )

    if hps_time is not None and hps_time < lps_time:
        adjusted = rescale_time_limit(time_limit, hps_wait_est.seconds, config.speedup)
        tier = Tier.HPS
    else:
        adjusted = time_limit
        tier = Tier.LPS

    return Decision(
        tier=tier,
        adjusted_time_limit=adjusted,
        expected_wait=expected_wait,
        hps_wait=hps_wait_est,
        lps_time=lps_time,
        hps_time=hps_time,
    )


class PlacementEngine:
    """Serialized submit-time placement of jobs onto LPS or HPS.

    ``submit`` is the only entry point. It holds one lock from the queue
    snapshot through allocation, so two concurrent submissions can never both
    see the same free fast-tier capacity. It never raises and never rejects a
    job; anything unexpected routes the job to the slow tier.
    """

    def __init__(
        self,
        config: TierConfig,
        queue: QueueSnapshotProvider,
        clock: Callable[[], float] = time.time,
        threshold_policy: Optional[ThresholdPolicy] = None,
    ):
        self.config = config
        self.queue = queue
        self.clock = clock
        self._lock = threading.Lock()
        if threshold_policy is None and config.mode == "threshold":
            threshold_policy = ThresholdPolicy(config)
        self.threshold_policy = threshold_policy

    def submit(self, job: JobRecord) -> Decision:
        with self._lock:
            try:
                if self.threshold_policy is not None:
                    return self._submit_threshold(job)
                return self._submit_projection(job)
            except Exception:
                logger.exception("Placement failed for job %s, falling back to LPS", job.job_id)
                decision = _lps_default(job.time_limit * 60.0)
                allocate(job, decision, self.config)
                return decision

    def _submit_projection(self, job: JobRecord) -> Decision:
        time_limit = job.time_limit * 60.0
        request = storage_request_or_none(job.burst_buffer, job_id=job.job_id)
        if request is None:
            logger.info("No storage request for job %s, submitting to LPS", job.job_id)
            decision = _lps_default(time_limit)
            allocate(job, decision, self.config)
            return decision

        snapshot = self.queue.snapshot(self.clock())
        if snapshot.query_failed:
            logger.warning("Placing job %s against an empty queue after a failed query", job.job_id)

        expected = cluster_wait(snapshot)
        hps_est = hps_wait(snapshot, request.capacity, self.config.hps.capacity)
        logger.info("Expected wait (overall): %.0f seconds", expected)
        if isinstance(hps_est, Finite):
            logger.info("Expected HPS wait: %.0f seconds", hps_est.seconds)
        else:
            logger.info("Expected HPS wait: unsatisfiable (%d > %d)", request.capacity, self.config.hps.capacity)

        decision = decide(time_limit, request, expected, hps_est, self.config)
        logger.info("Estimated job time: LPS=%s HPS=%s", decision.lps_time, decision.hps_time)
        allocate(job, decision, self.config)
        return decision

    def _submit_threshold(self, job: JobRecord) -> Decision:
        snapshot = self.queue.snapshot(self.clock())
        decision = self.threshold_policy.decide(job.time_limit * 60.0, snapshot)
        partition = self.threshold_policy.partition_for(decision.tier)
        allocate(job, decision, self.config, partition=partition)
        return decision
