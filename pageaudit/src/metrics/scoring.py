"""
Log-normal scoring curve shared by every time-based metric.

Only the two control points differ between metrics: the median (scores
0.5) and the point of diminishing returns (PODR, scores ~0.96), below
which further improvement barely moves the score.
"""

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .constants import DISPLAY_GRANULARITY_MS


@dataclass(frozen=True)
class LogNormalDistribution:
    location: float
    shape: float

    def complementary_percentile(self, x: float) -> float:
        """P(X > x): 1.0 at x <= 0 and decreasing towards 0."""
        if x <= 0:
            return 1.0
        standardized_x = (math.log(x) - self.location) / (math.sqrt(2) * self.shape)
        return (1 - math.erf(standardized_x)) / 2


def log_normal_distribution(median: float, falloff: float) -> LogNormalDistribution:
    """
    Build the curve from its median and point of diminishing returns.

    Raises:
        ValueError: the control points cannot describe a decreasing curve
    """
    if median <= 0 or falloff <= 0:
        raise ValueError("median and falloff must be positive")

    log_ratio = math.log(falloff / median)
    discriminant = (log_ratio - 3) ** 2 - 8
    if discriminant < 0 or falloff >= median:
        raise ValueError(f"falloff ({falloff}) must be below the median ({median})")

    shape = math.sqrt(1 - 3 * log_ratio - math.sqrt(discriminant)) / 2
    return LogNormalDistribution(location=math.log(median), shape=shape)


def compute_log_normal_score(measured_value: float, podr: float, median: float) -> float:
    """Score a measured value in [0, 1], rounded to two decimals."""
    return float(score_many([measured_value], podr, median)[0])


def score_many(values: Sequence[float], podr: float, median: float) -> np.ndarray:
    """Scores for many measurements on one curve, clamped and rounded to two decimals."""
    distribution = log_normal_distribution(median, podr)
    percentile = np.vectorize(distribution.complementary_percentile, otypes=[float])

    scores = np.clip(percentile(np.asarray(values, dtype=float)), 0.0, 1.0)
    return np.floor(scores * 100 + 0.5) / 100


def format_milliseconds(ms: float, granularity: float = DISPLAY_GRANULARITY_MS) -> str:
    """
    Render a duration for display, e.g. 1099.523 -> "1,100\xa0ms".

    The value is rounded to the given granularity and grouped by thousands;
    the unit is separated by a non-breaking space.
    """
    coarse = math.floor(ms / granularity + 0.5) * granularity
    if granularity >= 1:
        text = f"{int(coarse):,}"
    else:
        decimals = max(0, -math.floor(math.log10(granularity)))
        text = f"{coarse:,.{decimals}f}"
    return f"{text}\xa0ms"
