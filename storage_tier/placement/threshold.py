from __future__ import annotations

import logging
import shutil
from typing import Callable, Optional

import numpy as np

from storage_tier.config import TierConfig
from storage_tier.types import Decision, Finite, JobState, QueueSnapshot, Tier

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


def free_space_mib(path: str) -> int:
    try:
        usage = shutil.disk_usage(path)
    except OSError as e:
        logger.warning("Cannot stat %s, assuming no free space: %s", path, e)
        return 0
    return int(usage.free // MIB)


class ThresholdPolicy:
    """Reduced-feature placement: a fixed per-job budget against free HPS space.

    Every job is assumed to need ``job_space`` on the fast tier. The fast-tier
    wait is either configured or drawn at random, and the queue only matters
    through whether it is empty and which running jobs hold the HPS partition.
    """

    def __init__(self, config: TierConfig, free_space: Callable[[str], int] = free_space_mib):
        self.config = config
        self.free_space = free_space
        self._rng = np.random.default_rng(config.threshold.seed)

    def wait_time(self) -> float:
        thr = self.config.threshold
        if thr.wait_time is not None:
            return thr.wait_time
        return float(self._rng.integers(thr.wait_min, thr.wait_max + 1))

    def partition_for(self, tier: Tier) -> Optional[str]:
        thr = self.config.threshold
        return thr.hps_partition if tier is Tier.HPS else thr.lps_partition

    def decide(self, time_limit: float, snapshot: QueueSnapshot) -> Decision:
        thr = self.config.threshold
        wait = self.wait_time()
        lps_time = thr.job_space / self.config.lps.bandwidth
        hps_time = thr.job_space / self.config.hps.bandwidth + wait
        hps_free = self.free_space(self.config.hps.path)
        logger.info("Estimated job time: LPS=%.1f HPS=%.1f (free HPS space %d)", lps_time, hps_time, hps_free)

        if snapshot.is_empty:
            use_hps = thr.job_space < hps_free
        else:
            for job in snapshot.jobs:
                if job.state is JobState.RUNNING and job.partition == thr.hps_partition:
                    used = job.storage_request.capacity if job.storage_request else thr.job_space
                    hps_free -= used
            use_hps = thr.job_space < hps_free and lps_time > hps_time

        return Decision(
            tier=Tier.HPS if use_hps else Tier.LPS,
            adjusted_time_limit=time_limit,
            expected_wait=0.0,
            hps_wait=Finite(wait),
            lps_time=int(lps_time),
            hps_time=int(hps_time),
        )
