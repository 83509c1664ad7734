from __future__ import annotations

import logging
import math
from typing import Optional

from storage_tier.config import TierConfig
from storage_tier.types import Decision, JobRecord, Tier

logger = logging.getLogger(__name__)


def rescale_time_limit(time_limit: float, hps_wait: float, speedup: float) -> float:
    """Shrink a wall-time budget for the fast tier and add back its queueing delay.

    The host counts limits in whole minutes, so the result is a whole number
    of minutes (in seconds), never less than one.
    """
    minutes = math.ceil((time_limit / 60.0) / speedup) + hps_wait / 60.0
    return 60.0 * max(1, math.floor(minutes))


def allocate(job: JobRecord, decision: Decision, config: TierConfig, partition: Optional[str] = None) -> JobRecord:
    if decision.tier is Tier.HPS:
        job.environment[config.env_key] = config.hps.path
        job.time_limit = int(decision.adjusted_time_limit // 60)
    else:
        job.environment[config.env_key] = config.lps.path
        # a fast-tier reservation is not honoured on the slow tier
        job.burst_buffer = None
    if partition:
        job.partition = partition
    logger.info(
        "Job %s -> %s (%s=%s, time_limit=%d min)",
        job.job_id,
        decision.tier.value,
        config.env_key,
        job.environment[config.env_key],
        job.time_limit,
    )
    return job
