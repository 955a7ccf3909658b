"""
Paint milestone selection.

First Meaningful Paint fallback chain, first success wins:
    1. explicit firstMeaningfulPaint at or after navigation start
    2. highest-ranked firstMeaningfulPaintCandidate between navigation
       start and trace end (ties go to the latest candidate)
    3. no meaningful-paint marks at all: firstContentfulPaint, then
       firstPaint
    4. MetricUnavailable

The rank of a candidate is decided by the browser; it is read here, never
computed.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..errors import MetricUnavailable
from .models import PaintCandidate, PaintSelection, TraceEvent

logger = logging.getLogger(__name__)

FIRST_PAINT = "firstPaint"
FIRST_CONTENTFUL_PAINT = "firstContentfulPaint"
FIRST_MEANINGFUL_PAINT = "firstMeaningfulPaint"
FMP_CANDIDATE = "firstMeaningfulPaintCandidate"

CONTENT_PAINT_FALLBACKS = (FIRST_CONTENTFUL_PAINT, FIRST_PAINT)

Ranker = Callable[[TraceEvent], float]


def default_rank(event: TraceEvent) -> float:
    """Rank attached by the instrumentation, 0 when the event carries none."""
    rank = event.data.get("rank", 0)
    try:
        return float(rank)
    except (TypeError, ValueError):
        return 0.0


def first_after(
    events: Sequence[TraceEvent],
    name: str,
    navigation_start: float,
    inclusive: bool = False,
) -> Optional[TraceEvent]:
    """First event called ``name`` stamped after navigation start."""
    for event in events:
        if event.name != name:
            continue
        if event.ts > navigation_start or (inclusive and event.ts == navigation_start):
            return event
    return None


def rank_candidates(
    events: Sequence[TraceEvent],
    navigation_start: float,
    trace_end: float,
    ranker: Ranker = default_rank,
) -> list:
    """
    Usable FMP candidates, best first.

    Candidates outside (navigation start, trace end] are dropped. Order is
    by rank descending, then timestamp descending.
    """
    usable = [
        (PaintCandidate(ts=e.ts, rank=ranker(e), name=e.name), e)
        for e in events
        if e.name == FMP_CANDIDATE and navigation_start < e.ts <= trace_end
    ]
    usable.sort(key=lambda pair: (pair[0].rank, pair[0].ts), reverse=True)
    return usable


def select_first_meaningful_paint(
    frame_events: Sequence[TraceEvent],
    navigation_start: float,
    trace_end: float,
    ranker: Ranker = default_rank,
) -> PaintSelection:
    """
    Run the FMP fallback chain over one frame's ts-ordered key events.

    Args:
        frame_events: Key events of the main frame, ts-ordered
        navigation_start: Zero time of the load, in trace microseconds
        trace_end: Close of the analysed window. compute_trace_of_tab uses
            the end of the whole trace; a tighter value drops candidates
            recorded after it
        ranker: Reads the rank of a candidate event

    Raises:
        MetricUnavailable: no stage produced a usable paint
    """
    explicit = first_after(frame_events, FIRST_MEANINGFUL_PAINT, navigation_start, inclusive=True)
    if explicit is not None:
        return PaintSelection(event=explicit, stage=FIRST_MEANINGFUL_PAINT)

    # Marks left over from an earlier navigation do not count
    has_meaningful_marks = any(
        e.name in (FIRST_MEANINGFUL_PAINT, FMP_CANDIDATE) and e.ts >= navigation_start
        for e in frame_events
    )

    logger.debug("No firstMeaningfulPaint found, falling back to ranked %s", FMP_CANDIDATE)
    ranked = rank_candidates(frame_events, navigation_start, trace_end, ranker)
    if ranked:
        best, event = ranked[0]
        logger.debug("Selected %s with rank %s out of %d", FMP_CANDIDATE, best.rank, len(ranked))
        return PaintSelection(
            event=event,
            stage=FMP_CANDIDATE,
            fell_back=True,
            debug_string="No firstMeaningfulPaint event found; used the best-ranked candidate paint",
        )

    if has_meaningful_marks:
        raise MetricUnavailable(
            "Meaningful paint marks exist but none falls between navigation start and the end of the trace"
        )

    for name in CONTENT_PAINT_FALLBACKS:
        event = first_after(frame_events, name, navigation_start)
        if event is not None:
            logger.debug("No meaningful paint marks in trace, using %s", name)
            return PaintSelection(event=event, stage=name)

    raise MetricUnavailable(
        "No usable firstMeaningfulPaint, candidate, firstContentfulPaint or firstPaint event found in trace"
    )


def select_first_contentful_paint(
    frame_events: Sequence[TraceEvent],
    navigation_start: float,
) -> PaintSelection:
    event = first_after(frame_events, FIRST_CONTENTFUL_PAINT, navigation_start)
    if event is None:
        raise MetricUnavailable("No firstContentfulPaint event found after navigation start")
    return PaintSelection(event=event, stage=FIRST_CONTENTFUL_PAINT)
