"""Network record extraction from DevTools protocol logs."""

from .records import NetworkRecord, PushTiming, extract_network_records, pushed_requests

__all__ = [
    "NetworkRecord",
    "PushTiming",
    "extract_network_records",
    "pushed_requests",
]
