"""Submit filter: job JSON on stdin, placed job and decision JSON on stdout.

Run as ``storage-tier-place`` or ``python -m storage_tier.run_placement``; running
this file by path puts the package directory on sys.path, where ``types.py``
and ``queue/`` shadow the standard library modules of the same name.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Mapping

from storage_tier.config import configure_logging, load_config, parse_tier_config
from storage_tier.placement import PlacementEngine
from storage_tier.queue import SqueueQueue, StaticQueue
from storage_tier.queue.squeue import parse_squeue_json
from storage_tier.types import Decision, Finite, JobRecord


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Submit-time storage tier placement filter (job JSON on stdin)")
    p.add_argument(
        "--config",
        type=str,
        default=str(Path(__file__).with_name("config.yaml")),
        help="Path to YAML config",
    )
    p.add_argument("--queue", choices=["squeue", "static"], default=None, help="Override queue.source")
    p.add_argument("--queue-json", type=str, default=None, help="squeue --json dump used by the static queue")
    p.add_argument("--log-file", type=str, default=None, help="Optional path for a processing log file")
    return p.parse_args(argv)


def build_queue(cfg: Mapping, source: str | None, queue_json: str | None):
    queue_cfg = cfg.get("queue", {}) or {}
    source = (source or str(queue_cfg.get("source", "squeue"))).lower()
    if source == "static":
        if queue_json is None:
            return StaticQueue()
        jobs = parse_squeue_json(Path(queue_json).read_text(encoding="utf-8"))
        return StaticQueue(jobs=jobs)
    if source != "squeue":
        raise ValueError(f"Invalid queue.source '{source}'. Expected one of: squeue, static")
    return SqueueQueue(
        squeue_bin=str(queue_cfg.get("squeue_bin", "squeue")),
        timeout_sec=float(queue_cfg.get("timeout_sec", 10.0)),
    )


def decision_to_dict(decision: Decision) -> dict:
    if decision.hps_wait is None:
        hps_wait = None
    elif isinstance(decision.hps_wait, Finite):
        hps_wait = decision.hps_wait.seconds
    else:
        hps_wait = "unsatisfiable"
    return {
        "tier": decision.tier.value,
        "adjusted_time_limit_sec": decision.adjusted_time_limit,
        "expected_wait_sec": decision.expected_wait,
        "hps_wait_sec": hps_wait,
        "lps_time": decision.lps_time,
        "hps_time": decision.hps_time,
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = load_config(args.config)
    log_cfg = cfg.get("logging", {}) or {}
    configure_logging(log_cfg.get("level", "INFO"), args.log_file or log_cfg.get("file"))

    tier_cfg = parse_tier_config(cfg)
    engine = PlacementEngine(tier_cfg, build_queue(cfg, args.queue, args.queue_json))

    job = JobRecord.from_dict(json.loads(sys.stdin.read()))
    decision = engine.submit(job)
    json.dump({"job": job.to_dict(), "decision": decision_to_dict(decision)}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
