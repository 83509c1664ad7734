from storage_tier.bb_spec import MalformedRequestError, parse_storage_request
from storage_tier.config import TierConfig, load_config, parse_tier_config
from storage_tier.placement import PlacementEngine
from storage_tier.types import Decision, JobRecord, StorageRequest, Tier

__all__ = [
    "Decision",
    "JobRecord",
    "MalformedRequestError",
    "PlacementEngine",
    "StorageRequest",
    "Tier",
    "TierConfig",
    "load_config",
    "parse_storage_request",
    "parse_tier_config",
]
