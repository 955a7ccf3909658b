"""Configuration loaders and helpers for page audits."""

from .config_loader import (
    get_configs_dir,
    get_metric_options,
    get_package_root,
    load_scoring_config,
)

__all__ = [
    "get_configs_dir",
    "get_metric_options",
    "get_package_root",
    "load_scoring_config",
]
