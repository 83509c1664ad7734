from pathlib import Path

import pytest

from storage_tier.config import TierConfig, load_config, parse_tier_config

BUNDLED = Path(__file__).resolve().parents[1] / "config.yaml"


def test_bundled_config_matches_defaults() -> None:
    cfg = parse_tier_config(load_config(BUNDLED))
    assert cfg == TierConfig()
    assert cfg.speedup == 16.0


def test_empty_config_uses_defaults() -> None:
    assert parse_tier_config(None) == TierConfig()
    assert parse_tier_config({"lps": None, "hps": None}) == TierConfig()


def test_yaml_overrides(tmp_path: Path) -> None:
    path = tmp_path / "tiers.yaml"
    path.write_text(
        "mode: threshold\n"
        "env_key: STORAGE_TIER\n"
        "lps: {path: /scratch/lps, bandwidth: 80}\n"
        "hps: {path: /scratch/hps, bandwidth: 500, capacity: 100}\n"
        "threshold: {job_space: 50, wait_time: 30, seed: 4}\n",
        encoding="utf-8",
    )
    cfg = parse_tier_config(load_config(path))
    assert cfg.mode == "threshold"
    assert cfg.env_key == "STORAGE_TIER"
    assert cfg.lps.path == "/scratch/lps"
    assert cfg.hps.capacity == 100
    assert cfg.speedup == 6.25
    assert cfg.threshold.job_space == 50
    assert cfg.threshold.wait_time == 30.0
    assert cfg.threshold.seed == 4


@pytest.mark.parametrize(
    "raw",
    [
        {"mode": "fastest"},
        {"lps": {"bandwidth": 0}},
        {"hps": {"bandwidth": -1}},
        {"hps": {"capacity": -5}},
        {"threshold": {"wait_min": 10, "wait_max": 5}},
        {"env_key": "  "},
        {"threshold": {"wait_time": -1}},
        {"threshold": {"hps_partition": 7}},
        {"threshold": {"lps_partition": ""}},
    ],
)
def test_invalid_values_raise(raw: dict) -> None:
    with pytest.raises(ValueError):
        parse_tier_config(raw)


def test_partitions_can_be_disabled() -> None:
    cfg = parse_tier_config({"threshold": {"lps_partition": None, "hps_partition": " fast "}})
    assert cfg.threshold.lps_partition is None
    assert cfg.threshold.hps_partition == "fast"
