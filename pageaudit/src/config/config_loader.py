"""
Centralized configuration loader for page audits.

Scoring calibration is injected configuration: the curve control points
live in configs/scoring.yaml and every audit entry point takes them as
options rather than reading globals.

Dependencies:
    - yaml
    - pathlib
"""

import copy
import logging
from pathlib import Path
from typing import Optional

import yaml

from ..deterministic.io import compute_file_hash
from ..metrics.constants import DEFAULT_SCORING_OPTIONS, DISPLAY_GRANULARITY_MS

logger = logging.getLogger(__name__)

REQUIRED_METRIC_KEYS = ("score_podr", "score_median")


def get_package_root() -> Path:
    """
    Get the pageaudit package root.

    Works from any execution context by finding the directory
    containing this file and going up to pageaudit/.
    """
    # This file is in pageaudit/src/config/
    return Path(__file__).resolve().parents[2]


def get_configs_dir() -> Path:
    """Get the configs directory path."""
    return get_package_root() / "configs"


def load_scoring_config(configs_dir: Optional[Path] = None, include_hashes: bool = False) -> dict:
    """
    Load scoring configuration from scoring.yaml.

    Metrics or keys missing from the file fall back to the built-in
    calibration in metrics/constants.py.

    Args:
        configs_dir: Configs directory (default: package configs/)
        include_hashes: Include the config file hash for provenance

    Returns:
        {"metrics": {name: {"score_podr", "score_median"}},
         "display": {"granularity_ms"}}
    """
    if configs_dir is None:
        configs_dir = get_configs_dir()

    config_path = Path(configs_dir) / "scoring.yaml"
    if not config_path.exists():
        raise FileNotFoundError(
            f"Scoring config not found: {config_path}. "
            "Specify --configs with a directory containing scoring.yaml."
        )

    with open(config_path, "r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}

    metrics = copy.deepcopy(DEFAULT_SCORING_OPTIONS)
    for name, options in (loaded.get("metrics") or {}).items():
        merged = dict(metrics.get(name, {}))
        merged.update(options or {})
        missing = [key for key in REQUIRED_METRIC_KEYS if key not in merged]
        if missing:
            raise ValueError(f"Scoring config for {name} is missing {', '.join(missing)}")
        metrics[name] = merged

    display = {"granularity_ms": DISPLAY_GRANULARITY_MS}
    display.update(loaded.get("display") or {})

    config = {"metrics": metrics, "display": display}
    if include_hashes:
        config["_provenance"] = {
            "config_path": str(config_path),
            "config_hash": compute_file_hash(config_path),
        }
    logger.debug("Loaded scoring config from %s", config_path)
    return config


def get_metric_options(metric_name: str, config: Optional[dict] = None) -> dict:
    """
    Scoring options for one metric.

    Args:
        metric_name: e.g. "FirstMeaningfulPaint"
        config: Loaded scoring config (default: built-in calibration)
    """
    metrics = (config or {}).get("metrics") or DEFAULT_SCORING_OPTIONS
    if metric_name not in metrics:
        raise KeyError(f"No scoring options for metric {metric_name!r}")
    options = dict(metrics[metric_name])
    display = (config or {}).get("display") or {}
    options.setdefault("granularity_ms", display.get("granularity_ms", DISPLAY_GRANULARITY_MS))
    return options
