"""
Network records extracted from a DevTools protocol log.

One record per request id. Later protocol messages for the same id update
the existing record, they never create a second one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushTiming:
    """Server push timing; only attached when the resource was pushed."""

    push_start: float
    push_end: float = 0.0


@dataclass(frozen=True)
class NetworkRecord:
    request_id: str
    url: str
    start_time: float
    end_time: Optional[float] = None
    resource_type: Optional[str] = None
    status_code: Optional[int] = None
    mime_type: Optional[str] = None
    failed: bool = False
    from_cache: bool = False
    push_timing: Optional[PushTiming] = None

    @property
    def is_pushed(self) -> bool:
        return self.push_timing is not None


def _parse_push_timing(timing) -> Optional[PushTiming]:
    if not isinstance(timing, dict):
        return None
    push_start = timing.get("pushStart") or 0
    if not push_start:
        return None
    return PushTiming(push_start=float(push_start), push_end=float(timing.get("pushEnd") or 0))


def _on_request_will_be_sent(records: Dict[str, NetworkRecord], params: dict) -> None:
    request_id = params["requestId"]
    url = (params.get("request") or {}).get("url", "")
    existing = records.get(request_id)
    if existing is not None:
        # Redirect hop: follow the new URL, keep the original start
        records[request_id] = replace(existing, url=url or existing.url)
        return
    records[request_id] = NetworkRecord(
        request_id=request_id,
        url=url,
        start_time=float(params.get("timestamp") or 0),
        resource_type=params.get("type"),
    )


def _on_response_received(records: Dict[str, NetworkRecord], params: dict) -> None:
    record = records.get(params["requestId"])
    if record is None:
        return
    response = params.get("response") or {}
    push_timing = _parse_push_timing(response.get("timing"))
    records[record.request_id] = replace(
        record,
        resource_type=params.get("type") or record.resource_type,
        status_code=response.get("status", record.status_code),
        mime_type=response.get("mimeType", record.mime_type),
        from_cache=bool(response.get("fromDiskCache")) or record.from_cache,
        push_timing=push_timing or record.push_timing,
    )


def _on_loading_finished(records: Dict[str, NetworkRecord], params: dict) -> None:
    record = records.get(params["requestId"])
    if record is not None:
        records[record.request_id] = replace(record, end_time=float(params.get("timestamp") or 0))


def _on_loading_failed(records: Dict[str, NetworkRecord], params: dict) -> None:
    record = records.get(params["requestId"])
    if record is not None:
        records[record.request_id] = replace(
            record, end_time=float(params.get("timestamp") or 0), failed=True
        )


def _on_served_from_cache(records: Dict[str, NetworkRecord], params: dict) -> None:
    record = records.get(params["requestId"])
    if record is not None:
        records[record.request_id] = replace(record, from_cache=True)


HANDLERS = {
    "Network.requestWillBeSent": _on_request_will_be_sent,
    "Network.responseReceived": _on_response_received,
    "Network.loadingFinished": _on_loading_finished,
    "Network.loadingFailed": _on_loading_failed,
    "Network.requestServedFromCache": _on_served_from_cache,
}


def extract_network_records(devtools_log: Iterable[dict]) -> List[NetworkRecord]:
    """
    Normalize a DevTools protocol log into network records.

    Args:
        devtools_log: Ordered protocol messages ({"method": ..., "params": ...})

    Returns:
        Records sorted by start time ascending
    """
    records: Dict[str, NetworkRecord] = {}
    skipped = 0

    for entry in devtools_log:
        handler = HANDLERS.get(entry.get("method")) if isinstance(entry, dict) else None
        params = entry.get("params") if handler else None
        if handler is None or not isinstance(params, dict) or "requestId" not in params:
            skipped += 1
            continue
        handler(records, params)

    if skipped:
        logger.debug("Skipped %d non-network protocol messages", skipped)
    return sorted(records.values(), key=lambda r: r.start_time)


def pushed_requests(records: Iterable[NetworkRecord]) -> List[NetworkRecord]:
    """Return the records that were server-pushed."""
    return [r for r in records if r.push_timing is not None]
