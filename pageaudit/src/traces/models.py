"""Shared data models for trace analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class TraceEvent:
    """
    Single Chrome trace event.

    Timestamps are monotonic microseconds. Ordering is only meaningful
    within one (pid, tid) pair.
    """

    ts: float
    name: str
    ph: str = ""
    cat: str = ""
    pid: Optional[int] = None
    tid: Optional[int] = None
    dur: Optional[float] = None
    args: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    @property
    def frame(self) -> Optional[str]:
        return self.args.get("frame")

    @property
    def data(self) -> Mapping[str, Any]:
        data = self.args.get("data")
        return data if isinstance(data, Mapping) else _EMPTY

    @property
    def end(self) -> float:
        return self.ts + (self.dur or 0)


@dataclass(frozen=True)
class MainFrameIds:
    """Process, renderer main thread and frame of the inspected page."""

    pid: Any
    tid: Any
    frame_id: str


@dataclass(frozen=True)
class NavigationStartCandidate:
    """
    Reference zero-time for a page load.

    valid is False when the raw navigation start failed the causal checks
    and no reconstruction was possible.
    """

    ts: Optional[float]
    valid: bool
    frame_id: Optional[str] = None
    reason: str = "last-navigation-start"


@dataclass(frozen=True)
class PaintCandidate:
    """A paint milestone mark with its externally supplied rank."""

    ts: float
    rank: float
    name: str


@dataclass(frozen=True)
class PaintSelection:
    """Outcome of the paint fallback chain."""

    event: TraceEvent
    stage: str
    fell_back: bool = False
    debug_string: Optional[str] = None


@dataclass
class TraceOfTab:
    """
    Per-tab view of a trace: main frame, corrected navigation start and
    the key paint milestones with timings relative to navigation start.
    """

    main_frame_ids: MainFrameIds
    navigation_start: NavigationStartCandidate
    navigation_start_evt: TraceEvent
    trace_end: float
    timestamps: dict
    timings: dict
    frame_events: Tuple[TraceEvent, ...] = ()
    process_events: Tuple[TraceEvent, ...] = ()
    main_thread_events: Tuple[TraceEvent, ...] = ()
    first_paint_evt: Optional[TraceEvent] = None
    first_contentful_paint_evt: Optional[TraceEvent] = None
    first_meaningful_paint: Optional[PaintSelection] = None
    fmp_failure: Optional[str] = None

    @property
    def fmp_fell_back(self) -> bool:
        return bool(self.first_meaningful_paint and self.first_meaningful_paint.fell_back)
