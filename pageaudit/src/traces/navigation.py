"""
Navigation start resolution.

Finds the reference zero-time of a page load and repairs the two event
ordering anomalies seen in real traces:

    - the tracing-session marker (TracingStartedInPage/InBrowser) is
      recorded after the main frame's navigationStart. Zero stays anchored
      on the navigationStart itself, never on the marker.
    - the chosen navigationStart is stamped after every paint of its
      frame. It cannot be the cause of those paints, so the anchor is
      rebuilt from the earliest paint marker in the trace.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import NavigationStartUnresolvable
from .index import TRACING_STARTED_MARKERS, TraceEventIndex, find_main_frame_ids
from .models import MainFrameIds, NavigationStartCandidate, TraceEvent

logger = logging.getLogger(__name__)

ACCEPTABLE_NAVIGATION_URL_REGEX = re.compile(r"^(chrome|https?):")

PAINT_MARKERS = frozenset({
    "firstPaint",
    "firstContentfulPaint",
    "firstMeaningfulPaint",
    "firstMeaningfulPaintCandidate",
})


@dataclass(frozen=True)
class NavigationResolution:
    main_frame_ids: MainFrameIds
    candidate: NavigationStartCandidate
    event: TraceEvent
    rejected: Optional[NavigationStartCandidate] = None


def is_navigation_start_of_interest(event: TraceEvent) -> bool:
    """navigationStart events, ignoring about:blank and other non-web loads."""
    if event.name != "navigationStart":
        return False
    url = event.data.get("documentLoaderURL")
    return not url or bool(ACCEPTABLE_NAVIGATION_URL_REGEX.match(url))


def _paints(events: Sequence[TraceEvent]) -> list:
    return [e for e in events if e.name in PAINT_MARKERS]


def _is_causally_ordered(nav_start: TraceEvent, frame_events: Sequence[TraceEvent]) -> bool:
    paints = _paints(frame_events)
    return not paints or any(p.ts >= nav_start.ts for p in paints)


def _reconstruct_from_paint(
    index: TraceEventIndex,
    rejected: Optional[NavigationStartCandidate] = None,
) -> NavigationResolution:
    anchors = [e for e in _paints(index.key_events) if e.frame]
    if not anchors:
        raise NavigationStartUnresolvable(
            "No valid navigationStart found and no paint markers to anchor one"
        )

    anchor = anchors[0]
    nav_starts = [
        e for e in index.frame_events(anchor.frame)
        if is_navigation_start_of_interest(e) and e.ts <= anchor.ts
    ]
    if not nav_starts:
        raise NavigationStartUnresolvable(
            "No navigationStart precedes the earliest paint of its frame"
        )

    nav_start = nav_starts[-1]
    logger.debug("Reconstructed navigationStart from earliest %s", anchor.name)
    return NavigationResolution(
        main_frame_ids=MainFrameIds(pid=anchor.pid, tid=anchor.tid, frame_id=anchor.frame),
        candidate=NavigationStartCandidate(
            ts=nav_start.ts,
            valid=True,
            frame_id=anchor.frame,
            reason="reconstructed-from-paint",
        ),
        event=nav_start,
        rejected=rejected,
    )


def resolve_navigation_start(
    index: TraceEventIndex,
    main_frame_ids: Optional[MainFrameIds] = None,
) -> NavigationResolution:
    """
    Resolve the corrected navigation start for the inspected page.

    Args:
        index: Indexed trace
        main_frame_ids: Pre-computed main frame (default: detected)

    Returns:
        NavigationResolution with the (possibly re-detected) main frame

    Raises:
        NavigationStartUnresolvable: no anchor could be constructed
    """
    if main_frame_ids is None:
        main_frame_ids = find_main_frame_ids(index)

    if main_frame_ids is not None:
        frame_events = index.frame_events(main_frame_ids.frame_id)
        nav_starts = [e for e in frame_events if is_navigation_start_of_interest(e)]

        if nav_starts:
            nav_start = nav_starts[-1]
            reason = "last-navigation-start"
            tracing_started = index.first_named(TRACING_STARTED_MARKERS)
            if tracing_started is not None and tracing_started.ts > nav_starts[0].ts:
                logger.debug("%s recorded after navigationStart; anchoring on navigationStart", tracing_started.name)
                reason = "tracing-started-late"

            if _is_causally_ordered(nav_start, frame_events):
                return NavigationResolution(
                    main_frame_ids=main_frame_ids,
                    candidate=NavigationStartCandidate(
                        ts=nav_start.ts,
                        valid=True,
                        frame_id=main_frame_ids.frame_id,
                        reason=reason,
                    ),
                    event=nav_start,
                )
            logger.debug("Every paint of the main frame precedes its navigationStart")
            rejected = NavigationStartCandidate(
                ts=nav_start.ts,
                valid=False,
                frame_id=main_frame_ids.frame_id,
                reason="paints-precede-navigation-start",
            )
        else:
            logger.debug("Main frame has no navigationStart")
            rejected = NavigationStartCandidate(
                ts=None, valid=False, frame_id=main_frame_ids.frame_id, reason="missing"
            )
    else:
        logger.debug("No tracing-started marker identifies the main frame")
        rejected = NavigationStartCandidate(ts=None, valid=False, reason="no-main-frame")

    return _reconstruct_from_paint(index, rejected)
