"""Raw artifact bundles and computed artifact cache entries."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple

from ..errors import MissingArtifact
from ..traces.parser import coerce_devtools_log, parse_trace

DEFAULT_PASS = "defaultPass"


@dataclass(frozen=True, eq=False)
class RawArtifacts:
    """
    Captured data for one pass of one page load.

    Compared and cached by identity: two bundles with equal content are
    still two distinct inputs.
    """

    pass_name: str = DEFAULT_PASS
    trace: Optional[Tuple[Any, ...]] = None
    devtools_log: Optional[Tuple[dict, ...]] = None

    @classmethod
    def from_json(cls, trace=None, devtools_log=None, pass_name: str = DEFAULT_PASS) -> "RawArtifacts":
        """
        Build a bundle from JSON-like payloads.

        Args:
            trace: Event list or {"traceEvents": [...]} object
            devtools_log: Protocol message list
            pass_name: Capture pass name
        """
        return cls(
            pass_name=pass_name,
            trace=parse_trace(trace) if trace is not None else None,
            devtools_log=coerce_devtools_log(devtools_log),
        )

    def require_trace(self) -> Tuple[Any, ...]:
        if self.trace is None:
            raise MissingArtifact(f"Pass {self.pass_name!r} has no trace")
        return self.trace

    def require_devtools_log(self) -> Tuple[dict, ...]:
        if self.devtools_log is None:
            raise MissingArtifact(f"Pass {self.pass_name!r} has no devtools log")
        return self.devtools_log


class EntryState(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class ArtifactSpec:
    """A registered derivation: compute(raw_artifacts, deps) -> value."""

    name: str
    compute: Callable[..., Any]
    dependencies: Tuple[str, ...] = ()


@dataclass(eq=False)
class CacheEntry:
    """
    Memoized computation for one (name, RawArtifacts identity) pair.

    Holds a reference to the raw artifacts so their identity cannot be
    recycled while the entry is alive.
    """

    name: str
    raw_artifacts: Any
    task: "asyncio.Future"
    state: EntryState = EntryState.PENDING
    error: Optional[BaseException] = None

    @property
    def value(self) -> Any:
        if self.state is not EntryState.RESOLVED:
            raise RuntimeError(f"Computed artifact {self.name!r} is {self.state.value}")
        return self.task.result()


@dataclass
class AuditArtifacts:
    """Everything an audit reads: raw artifacts per pass plus the run's graph."""

    passes: Mapping[str, RawArtifacts]
    computed: Any

    def for_pass(self, pass_name: str = DEFAULT_PASS) -> RawArtifacts:
        raw = self.passes.get(pass_name)
        if raw is None:
            raise MissingArtifact(f"No raw artifacts captured for pass {pass_name!r}")
        return raw
