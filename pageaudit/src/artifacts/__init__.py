"""Computed artifact graph and raw artifact bundles."""

from .graph import ComputedArtifacts, find_cycle
from .models import (
    DEFAULT_PASS,
    ArtifactSpec,
    AuditArtifacts,
    CacheEntry,
    EntryState,
    RawArtifacts,
)
from .registry import (
    FIRST_CONTENTFUL_PAINT,
    FIRST_MEANINGFUL_PAINT,
    NETWORK_RECORDS,
    PUSHED_REQUESTS,
    TRACE_OF_TAB,
    build_default_registry,
)

__all__ = [
    "ArtifactSpec",
    "AuditArtifacts",
    "CacheEntry",
    "ComputedArtifacts",
    "DEFAULT_PASS",
    "EntryState",
    "FIRST_CONTENTFUL_PAINT",
    "FIRST_MEANINGFUL_PAINT",
    "NETWORK_RECORDS",
    "PUSHED_REQUESTS",
    "RawArtifacts",
    "TRACE_OF_TAB",
    "build_default_registry",
    "find_cycle",
]
