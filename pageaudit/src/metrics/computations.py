"""Metric timings derived from a TraceOfTab."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import MetricUnavailable
from ..traces.models import TraceEvent, TraceOfTab
from ..traces.paints import select_first_contentful_paint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricTiming:
    """Raw timing for one milestone, in ms since navigation start."""

    timing: float
    timestamp: float
    stage: str
    debug_string: Optional[str] = None


def _timing_for(event: TraceEvent, trace_of_tab: TraceOfTab) -> float:
    delta = event.ts - trace_of_tab.navigation_start.ts
    if delta < 0:
        raise MetricUnavailable(f"{event.name} is stamped before navigation start")
    return delta / 1000


def compute_first_meaningful_paint(trace_of_tab: TraceOfTab) -> MetricTiming:
    """
    First Meaningful Paint timing.

    Raises:
        MetricUnavailable: the paint fallback chain found nothing usable
    """
    selection = trace_of_tab.first_meaningful_paint
    if selection is None:
        raise MetricUnavailable(
            trace_of_tab.fmp_failure or "No usable firstMeaningfulPaint events found in trace"
        )
    return MetricTiming(
        timing=_timing_for(selection.event, trace_of_tab),
        timestamp=selection.event.ts,
        stage=selection.stage,
        debug_string=selection.debug_string,
    )


def compute_first_contentful_paint(trace_of_tab: TraceOfTab) -> MetricTiming:
    selection = select_first_contentful_paint(
        trace_of_tab.frame_events, trace_of_tab.navigation_start.ts
    )
    return MetricTiming(
        timing=_timing_for(selection.event, trace_of_tab),
        timestamp=selection.event.ts,
        stage=selection.stage,
    )
