"""
Metric timings and scoring.

Audit entry points live in metrics.audits, which also depends on the
computed artifact graph.
"""

from .computations import (
    MetricTiming,
    compute_first_contentful_paint,
    compute_first_meaningful_paint,
)
from .constants import (
    DEFAULT_SCORING_OPTIONS,
    FIRST_CONTENTFUL_PAINT,
    FIRST_MEANINGFUL_PAINT,
    METRICS_SCHEMA_VERSION,
)
from .scoring import (
    LogNormalDistribution,
    compute_log_normal_score,
    format_milliseconds,
    log_normal_distribution,
    score_many,
)
from .types import MetricResult

__all__ = [
    "DEFAULT_SCORING_OPTIONS",
    "FIRST_CONTENTFUL_PAINT",
    "FIRST_MEANINGFUL_PAINT",
    "LogNormalDistribution",
    "METRICS_SCHEMA_VERSION",
    "MetricResult",
    "MetricTiming",
    "compute_first_contentful_paint",
    "compute_first_meaningful_paint",
    "compute_log_normal_score",
    "format_milliseconds",
    "log_normal_distribution",
    "score_many",
]
