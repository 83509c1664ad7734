from storage_tier.queue.snapshot import QueueSnapshotProvider, StaticQueue, active_state
from storage_tier.queue.squeue import QueueQueryError, SqueueQueue, parse_squeue_job, parse_squeue_json

__all__ = [
    "QueueQueryError",
    "QueueSnapshotProvider",
    "SqueueQueue",
    "StaticQueue",
    "active_state",
    "parse_squeue_job",
    "parse_squeue_json",
]
