"""
Timing metric audits.

Each audit requests its metric from the run's computed artifact graph and
scores it on the shared log-normal curve. Trace-analysis failures degrade
to a MetricResult without a value; configuration errors (unknown
artifacts, dependency cycles) propagate.
"""

import logging
from typing import Optional

from ..artifacts.models import DEFAULT_PASS, AuditArtifacts
from ..config.config_loader import get_metric_options
from ..errors import MalformedTrace, MetricUnavailable, NavigationStartUnresolvable
from .constants import FIRST_CONTENTFUL_PAINT, FIRST_MEANINGFUL_PAINT
from .scoring import compute_log_normal_score, format_milliseconds
from .types import MetricResult

logger = logging.getLogger(__name__)

DEGRADED_METRIC_ERRORS = (MetricUnavailable, NavigationStartUnresolvable, MalformedTrace)

_FAILURE_STAGES = {
    MalformedTrace: "reading the trace timeline",
    NavigationStartUnresolvable: "resolving navigation start",
    MetricUnavailable: "selecting a paint milestone",
}


def _describe_failure(metric_name: str, error: Exception) -> str:
    stage = _FAILURE_STAGES.get(type(error), "computing the metric")
    return f"{metric_name} unavailable: failed while {stage}. {error}"


async def audit_metric(
    metric_name: str,
    artifacts: AuditArtifacts,
    options: Optional[dict] = None,
    pass_name: str = DEFAULT_PASS,
) -> MetricResult:
    """
    Compute and score one timing metric.

    Args:
        metric_name: Computed artifact producing a MetricTiming
        artifacts: Raw artifacts per pass plus the run's graph
        options: score_podr/score_median (default: built-in calibration)
        pass_name: Capture pass to read

    Returns:
        MetricResult; raw_value and score are None when degraded
    """
    if options is None:
        options = get_metric_options(metric_name)
    raw = artifacts.for_pass(pass_name)

    try:
        timing = await artifacts.computed.request(metric_name, raw)
    except DEGRADED_METRIC_ERRORS as e:
        logger.warning("%s degraded: %s", metric_name, e)
        return MetricResult(debug_string=_describe_failure(metric_name, e))

    score = compute_log_normal_score(timing.timing, options["score_podr"], options["score_median"])
    granularity = options.get("granularity_ms")
    display_value = (
        format_milliseconds(timing.timing, granularity)
        if granularity
        else format_milliseconds(timing.timing)
    )
    logger.debug("%s = %.3f ms (score %.2f, via %s)", metric_name, timing.timing, score, timing.stage)
    return MetricResult(
        raw_value=timing.timing,
        score=score,
        display_value=display_value,
        debug_string=timing.debug_string,
    )


async def audit_first_meaningful_paint(
    artifacts: AuditArtifacts,
    options: Optional[dict] = None,
    pass_name: str = DEFAULT_PASS,
) -> MetricResult:
    return await audit_metric(FIRST_MEANINGFUL_PAINT, artifacts, options, pass_name)


async def audit_first_contentful_paint(
    artifacts: AuditArtifacts,
    options: Optional[dict] = None,
    pass_name: str = DEFAULT_PASS,
) -> MetricResult:
    return await audit_metric(FIRST_CONTENTFUL_PAINT, artifacts, options, pass_name)
