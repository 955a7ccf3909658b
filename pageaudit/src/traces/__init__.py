"""Trace parsing, indexing and paint milestone extraction."""

from .index import TraceEventIndex, find_main_frame_ids
from .models import (
    MainFrameIds,
    NavigationStartCandidate,
    PaintCandidate,
    PaintSelection,
    TraceEvent,
    TraceOfTab,
)
from .navigation import NavigationResolution, resolve_navigation_start
from .paints import (
    default_rank,
    rank_candidates,
    select_first_contentful_paint,
    select_first_meaningful_paint,
)
from .parser import load_devtools_log, load_trace, parse_trace, parse_trace_event
from .trace_of_tab import compute_trace_of_tab

__all__ = [
    "MainFrameIds",
    "NavigationResolution",
    "NavigationStartCandidate",
    "PaintCandidate",
    "PaintSelection",
    "TraceEvent",
    "TraceEventIndex",
    "TraceOfTab",
    "compute_trace_of_tab",
    "default_rank",
    "find_main_frame_ids",
    "load_devtools_log",
    "load_trace",
    "parse_trace",
    "parse_trace_event",
    "rank_candidates",
    "resolve_navigation_start",
    "select_first_contentful_paint",
    "select_first_meaningful_paint",
]
