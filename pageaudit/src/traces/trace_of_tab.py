"""Per-tab trace view: main frame, navigation start and paint milestones."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..errors import MetricUnavailable
from .index import TraceEventIndex
from .models import TraceEvent, TraceOfTab
from .navigation import resolve_navigation_start
from .paints import (
    FIRST_CONTENTFUL_PAINT,
    FIRST_PAINT,
    Ranker,
    default_rank,
    first_after,
    select_first_meaningful_paint,
)

logger = logging.getLogger(__name__)


def _ts(event: Optional[TraceEvent]) -> Optional[float]:
    return event.ts if event is not None else None


def compute_trace_of_tab(events: Iterable[TraceEvent], ranker: Ranker = default_rank) -> TraceOfTab:
    """
    Build the TraceOfTab view of a trace.

    A missing meaningful paint does not fail the view; it is recorded in
    ``fmp_failure`` and raised by the metric that needs it.

    Raises:
        MalformedTrace: the trace has no orderable events
        NavigationStartUnresolvable: no navigation start could be anchored
    """
    index = TraceEventIndex.from_events(events)
    resolution = resolve_navigation_start(index)
    frame_ids = resolution.main_frame_ids
    nav_ts = resolution.candidate.ts

    frame_events = index.frame_events(frame_ids.frame_id)
    first_paint = first_after(frame_events, FIRST_PAINT, nav_ts)
    first_contentful_paint = first_after(frame_events, FIRST_CONTENTFUL_PAINT, nav_ts)

    fmp = None
    fmp_failure = None
    try:
        fmp = select_first_meaningful_paint(frame_events, nav_ts, index.trace_end, ranker)
    except MetricUnavailable as e:
        logger.debug("First meaningful paint unavailable: %s", e)
        fmp_failure = str(e)

    load = first_after(frame_events, "loadEventEnd", nav_ts)
    dom_content_loaded = first_after(frame_events, "domContentLoadedEventEnd", nav_ts)

    timestamps = {
        "navigationStart": nav_ts,
        "firstPaint": _ts(first_paint),
        "firstContentfulPaint": _ts(first_contentful_paint),
        "firstMeaningfulPaint": _ts(fmp.event if fmp else None),
        "traceEnd": index.trace_end,
        "load": _ts(load),
        "domContentLoaded": _ts(dom_content_loaded),
    }
    timings = {
        key: (ts - nav_ts) / 1000 if ts is not None else None
        for key, ts in timestamps.items()
    }

    process_events = index.process_events(frame_ids.pid)
    return TraceOfTab(
        main_frame_ids=frame_ids,
        navigation_start=resolution.candidate,
        navigation_start_evt=resolution.event,
        trace_end=index.trace_end,
        timestamps=timestamps,
        timings=timings,
        frame_events=frame_events,
        process_events=process_events,
        main_thread_events=tuple(e for e in process_events if e.tid == frame_ids.tid),
        first_paint_evt=first_paint,
        first_contentful_paint_evt=first_contentful_paint,
        first_meaningful_paint=fmp,
        fmp_failure=fmp_failure,
    )
