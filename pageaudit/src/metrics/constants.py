"""Calibration defaults for time-based metrics."""

METRICS_SCHEMA_VERSION = "1.0.0"

FIRST_MEANINGFUL_PAINT = "FirstMeaningfulPaint"
FIRST_CONTENTFUL_PAINT = "FirstContentfulPaint"

# Log-normal curve control points (ms): PODR is the point of diminishing
# returns, median is the observed median across real sites.
DEFAULT_SCORING_OPTIONS = {
    FIRST_MEANINGFUL_PAINT: {"score_podr": 1600, "score_median": 4000},
    FIRST_CONTENTFUL_PAINT: {"score_podr": 2900, "score_median": 4000},
}

DISPLAY_GRANULARITY_MS = 10
