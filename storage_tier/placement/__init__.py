from storage_tier.placement.allocator import allocate, rescale_time_limit
from storage_tier.placement.engine import PlacementEngine, decide
from storage_tier.placement.estimator import cluster_wait, hps_wait
from storage_tier.placement.ledger import TierLedger, residency_time
from storage_tier.placement.threshold import ThresholdPolicy, free_space_mib

__all__ = [
    "PlacementEngine",
    "ThresholdPolicy",
    "TierLedger",
    "allocate",
    "cluster_wait",
    "decide",
    "free_space_mib",
    "hps_wait",
    "rescale_time_limit",
    "residency_time",
]
