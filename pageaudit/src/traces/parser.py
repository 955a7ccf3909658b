"""Trace and DevTools log parsing helpers."""

from __future__ import annotations

import gzip
import json
import logging
from numbers import Real
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Union

from ..errors import MalformedTrace
from .models import TraceEvent

logger = logging.getLogger(__name__)


def _open_json(path: Path) -> Any:
    open_fn = gzip.open if str(path).endswith(".gz") else open
    with open_fn(path, "rt", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedTrace(f"Invalid JSON in {path}: {e}") from e


def trace_event_dicts(trace: Any) -> list:
    """
    Unwrap a trace payload into its list of event dicts.

    Accepts either a bare array of events or an object with a
    ``traceEvents`` array, which are the two shapes Chrome writes.
    """
    if isinstance(trace, dict):
        trace = trace.get("traceEvents")
    if not isinstance(trace, (list, tuple)):
        raise MalformedTrace("Trace must be a list of events or an object with traceEvents")
    return list(trace)


def parse_trace_event(raw: dict, index: int = 0) -> TraceEvent:
    """Convert one raw event dict into a TraceEvent, validating its timestamp."""
    if not isinstance(raw, dict):
        raise MalformedTrace(f"Trace event #{index} is not an object")

    ts = raw.get("ts")
    if isinstance(ts, bool) or not isinstance(ts, Real):
        raise MalformedTrace(f"Trace event #{index} ({raw.get('name')!r}) has no numeric timestamp")
    if ts < 0:
        raise MalformedTrace(f"Trace event #{index} ({raw.get('name')!r}) has a negative timestamp")

    dur = raw.get("dur")
    if isinstance(dur, bool) or not isinstance(dur, Real):
        dur = None

    args = raw.get("args")
    return TraceEvent(
        ts=float(ts),
        name=str(raw.get("name", "")),
        ph=str(raw.get("ph", "")),
        cat=str(raw.get("cat", "")),
        pid=raw.get("pid"),
        tid=raw.get("tid"),
        dur=float(dur) if dur is not None else None,
        args=MappingProxyType(dict(args)) if isinstance(args, dict) else MappingProxyType({}),
    )


def iter_trace_events(trace: Any) -> Iterator[TraceEvent]:
    """Iterate over parsed events from an in-memory trace payload."""
    for index, raw in enumerate(trace_event_dicts(trace)):
        yield parse_trace_event(raw, index)


def parse_trace(trace: Any) -> tuple:
    """Parse an in-memory trace payload into an immutable tuple of events."""
    if trace and all(isinstance(e, TraceEvent) for e in trace):
        return tuple(trace)
    events = tuple(iter_trace_events(trace))
    logger.debug("Parsed %d trace events", len(events))
    return events


def load_trace(trace_path: Path) -> tuple:
    """
    Load a trace file.

    Handles both .json and .json.gz files.
    """
    return parse_trace(_open_json(Path(trace_path)))


def load_devtools_log(log_path: Path) -> tuple:
    """Load a DevTools protocol log (a JSON array of protocol messages)."""
    entries = _open_json(Path(log_path))
    if not isinstance(entries, list):
        raise MalformedTrace(f"DevTools log {log_path} must be a JSON array")
    return tuple(entries)


def coerce_devtools_log(entries: Union[Iterable[dict], None]) -> Union[tuple, None]:
    if entries is None:
        return None
    return tuple(entries)
