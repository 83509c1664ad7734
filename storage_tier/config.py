from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

DEFAULT_ENV_KEY = "SLURM_STORAGE_TIER"
MODES = {"projection", "threshold"}


@dataclass(frozen=True)
class LpsConfig:
    path: str = "/home/vagrant/lps"
    bandwidth: float = 12.0


@dataclass(frozen=True)
class HpsConfig:
    path: str = "/home/vagrant/hps"
    bandwidth: float = 192.0
    capacity: int = 5120


@dataclass(frozen=True)
class ThresholdConfig:
    job_space: int = 2000
    wait_time: Optional[float] = None
    wait_min: int = 0
    wait_max: int = 120
    seed: Optional[int] = None
    lps_partition: Optional[str] = "lps"
    hps_partition: Optional[str] = "hps"


@dataclass(frozen=True)
class TierConfig:
    lps: LpsConfig = field(default_factory=LpsConfig)
    hps: HpsConfig = field(default_factory=HpsConfig)
    env_key: str = DEFAULT_ENV_KEY
    mode: str = "projection"
    threshold: ThresholdConfig = field(default_factory=ThresholdConfig)

    @property
    def speedup(self) -> float:
        return self.hps.bandwidth / self.lps.bandwidth


def load_config(path: str | Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _positive(name: str, v: object) -> float:
    val = float(v)
    if val <= 0:
        raise ValueError(f"{name} must be > 0, got {v}")
    return val


def _non_negative(name: str, v: object) -> float:
    val = float(v)
    if val < 0:
        raise ValueError(f"{name} must be >= 0, got {v}")
    return val


def _partition(name: str, v: object) -> Optional[str]:
    if v is None:
        return None
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"{name} must be a non-empty string or null, got {v!r}")
    return v.strip()


def _non_negative_int(name: str, v: object) -> int:
    val = int(v)
    if val < 0:
        raise ValueError(f"{name} must be >= 0, got {v}")
    return val


def parse_tier_config(cfg: Mapping | None) -> TierConfig:
    cfg = cfg or {}
    lps_raw = cfg.get("lps") or {}
    hps_raw = cfg.get("hps") or {}
    thr_raw = cfg.get("threshold") or {}

    mode = str(cfg.get("mode", "projection")).strip().lower()
    if mode not in MODES:
        raise ValueError(f"Invalid mode '{mode}'. Expected one of: {', '.join(sorted(MODES))}")

    lps = LpsConfig(
        path=str(lps_raw.get("path", LpsConfig.path)),
        bandwidth=_positive("lps.bandwidth", lps_raw.get("bandwidth", LpsConfig.bandwidth)),
    )
    hps = HpsConfig(
        path=str(hps_raw.get("path", HpsConfig.path)),
        bandwidth=_positive("hps.bandwidth", hps_raw.get("bandwidth", HpsConfig.bandwidth)),
        capacity=_non_negative_int("hps.capacity", hps_raw.get("capacity", HpsConfig.capacity)),
    )

    wait_time = thr_raw.get("wait_time")
    wait_min = _non_negative_int("threshold.wait_min", thr_raw.get("wait_min", ThresholdConfig.wait_min))
    wait_max = _non_negative_int("threshold.wait_max", thr_raw.get("wait_max", ThresholdConfig.wait_max))
    if wait_max < wait_min:
        raise ValueError("threshold.wait_max must be >= threshold.wait_min")
    threshold = ThresholdConfig(
        job_space=_non_negative_int("threshold.job_space", thr_raw.get("job_space", ThresholdConfig.job_space)),
        wait_time=None if wait_time is None else _non_negative("threshold.wait_time", wait_time),
        wait_min=wait_min,
        wait_max=wait_max,
        seed=None if thr_raw.get("seed") is None else int(thr_raw["seed"]),
        lps_partition=_partition("threshold.lps_partition", thr_raw.get("lps_partition", ThresholdConfig.lps_partition)),
        hps_partition=_partition("threshold.hps_partition", thr_raw.get("hps_partition", ThresholdConfig.hps_partition)),
    )

    env_key = str(cfg.get("env_key", DEFAULT_ENV_KEY)).strip()
    if not env_key:
        raise ValueError("env_key cannot be empty")

    return TierConfig(lps=lps, hps=hps, env_key=env_key, mode=mode, threshold=threshold)


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    fmt = logging.Formatter(fmt="%(asctime)s %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger
