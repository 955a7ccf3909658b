"""Default computed artifacts available to every audit run."""

from ..metrics.computations import compute_first_contentful_paint, compute_first_meaningful_paint
from ..metrics.constants import FIRST_CONTENTFUL_PAINT, FIRST_MEANINGFUL_PAINT
from ..network.records import extract_network_records, pushed_requests
from ..traces.trace_of_tab import compute_trace_of_tab
from .graph import ComputedArtifacts
from .models import RawArtifacts

TRACE_OF_TAB = "TraceOfTab"
NETWORK_RECORDS = "NetworkRecords"
PUSHED_REQUESTS = "PushedRequests"


def _trace_of_tab(raw: RawArtifacts, deps: dict):
    return compute_trace_of_tab(raw.require_trace())


def _network_records(raw: RawArtifacts, deps: dict):
    return extract_network_records(raw.require_devtools_log())


def _pushed_requests(raw: RawArtifacts, deps: dict):
    return pushed_requests(deps[NETWORK_RECORDS])


def _first_meaningful_paint(raw: RawArtifacts, deps: dict):
    return compute_first_meaningful_paint(deps[TRACE_OF_TAB])


def _first_contentful_paint(raw: RawArtifacts, deps: dict):
    return compute_first_contentful_paint(deps[TRACE_OF_TAB])


def build_default_registry() -> ComputedArtifacts:
    """Create a fresh graph with the standard computed artifacts registered."""
    computed = ComputedArtifacts()
    computed.register(TRACE_OF_TAB, _trace_of_tab)
    computed.register(NETWORK_RECORDS, _network_records)
    computed.register(PUSHED_REQUESTS, _pushed_requests, [NETWORK_RECORDS])
    computed.register(FIRST_MEANINGFUL_PAINT, _first_meaningful_paint, [TRACE_OF_TAB])
    computed.register(FIRST_CONTENTFUL_PAINT, _first_contentful_paint, [TRACE_OF_TAB])
    return computed
