"""
Ordered timelines over a raw, time-unordered trace.

Chrome flushes trace buffers per thread, so events arrive grouped by
thread rather than by time. Everything downstream works on the stable
timestamp sort built here; the sort must be stable to keep nested
begin/end events in their recorded order.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from ..errors import MalformedTrace
from .models import MainFrameIds, TraceEvent

logger = logging.getLogger(__name__)

KEY_EVENT_CATEGORIES = ("blink.user_timing", "loading", "devtools.timeline")
METADATA_CATEGORY = "__metadata"

TRACING_STARTED_IN_BROWSER = "TracingStartedInBrowser"
TRACING_STARTED_IN_PAGE = "TracingStartedInPage"
TRACING_STARTED_MARKERS = (TRACING_STARTED_IN_BROWSER, TRACING_STARTED_IN_PAGE)
RENDERER_MAIN_THREAD = "CrRendererMain"


def is_key_event(event: TraceEvent) -> bool:
    return event.cat == METADATA_CATEGORY or any(cat in event.cat for cat in KEY_EVENT_CATEGORIES)


def _sort_by_ts(events: Iterable[TraceEvent]) -> Tuple[TraceEvent, ...]:
    return tuple(sorted(events, key=lambda e: e.ts))


@dataclass(frozen=True)
class TraceEventIndex:
    """Key events plus per-process and per-thread timelines, all ts-ordered."""

    events: Tuple[TraceEvent, ...]
    key_events: Tuple[TraceEvent, ...]
    trace_end: float
    timelines: Dict[tuple, Tuple[TraceEvent, ...]] = field(default_factory=dict)

    @classmethod
    def from_events(cls, events: Iterable[TraceEvent]) -> "TraceEventIndex":
        events = tuple(events)
        if not events:
            raise MalformedTrace("Trace contains no events")

        key_events = _sort_by_ts(e for e in events if is_key_event(e))

        grouped = defaultdict(list)
        for event in events:
            grouped[(event.pid, event.tid)].append(event)
        timelines = {key: _sort_by_ts(thread_events) for key, thread_events in grouped.items()}

        trace_end = max(e.end for e in events)
        logger.debug(
            "Indexed %d events (%d key events, %d threads)",
            len(events), len(key_events), len(timelines),
        )
        return cls(events=events, key_events=key_events, trace_end=trace_end, timelines=timelines)

    def frame_events(self, frame_id: Optional[str]) -> Tuple[TraceEvent, ...]:
        return tuple(e for e in self.key_events if e.frame == frame_id)

    def process_events(self, pid) -> Tuple[TraceEvent, ...]:
        return _sort_by_ts(e for e in self.events if e.pid == pid)

    def thread_events(self, pid, tid) -> Tuple[TraceEvent, ...]:
        return self.timelines.get((pid, tid), ())

    def first_named(self, names) -> Optional[TraceEvent]:
        if isinstance(names, str):
            names = (names,)
        return next((e for e in self.key_events if e.name in names), None)


def find_main_frame_ids(index: TraceEventIndex) -> Optional[MainFrameIds]:
    """
    Identify the inspected page's process, renderer thread and frame.

    Checked in order:
        1. TracingStartedInBrowser frame list (newer Chrome)
        2. first TracingStartedInPage (legacy Chrome); it can appear
           slightly after the frame's navigationStart
        3. first main-frame navigationStart that agrees with the first
           ResourceSendRequest on pid/tid

    Returns:
        MainFrameIds, or None when the trace carries none of these markers
    """
    events = index.key_events

    started_in_browser = index.first_named(TRACING_STARTED_IN_BROWSER)
    frames = started_in_browser.data.get("frames") if started_in_browser else None
    if frames:
        main_frame = next((f for f in frames if not f.get("parent")), None)
        pid = main_frame.get("processId") if main_frame else None
        thread_name_evt = next(
            (
                e for e in events
                if e.pid == pid and e.ph == "M" and e.cat == METADATA_CATEGORY
                and e.name == "thread_name" and e.args.get("name") == RENDERER_MAIN_THREAD
            ),
            None,
        )
        tid = thread_name_evt.tid if thread_name_evt else None
        frame_id = main_frame.get("frame") if main_frame else None
        if pid is not None and tid is not None and frame_id:
            return MainFrameIds(pid=pid, tid=tid, frame_id=frame_id)

    started_in_page = index.first_named(TRACING_STARTED_IN_PAGE)
    if started_in_page and started_in_page.data.get("page"):
        return MainFrameIds(
            pid=started_in_page.pid,
            tid=started_in_page.tid,
            frame_id=started_in_page.data["page"],
        )

    nav_start = next(
        (
            e for e in events
            if e.name == "navigationStart"
            and e.data.get("isLoadingMainFrame") and e.data.get("documentLoaderURL")
        ),
        None,
    )
    first_request = next((e for e in index.events if e.name == "ResourceSendRequest"), None)
    if (
        nav_start is not None and nav_start.frame and first_request is not None
        and first_request.pid == nav_start.pid and first_request.tid == nav_start.tid
    ):
        return MainFrameIds(pid=nav_start.pid, tid=nav_start.tid, frame_id=nav_start.frame)

    return None
