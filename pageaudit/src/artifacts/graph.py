"""
Computed artifact graph.

A registry of named, pure derivations over RawArtifacts with declared
dependencies. One instance lives for one audit run.

Guarantees:
    - at most one execution per (name, RawArtifacts identity); concurrent
      requests share the in-flight task
    - dependency cycles are rejected at registration and again before any
      computation starts
    - a failure rejects the request and every dependent awaiting it, and
      nothing else
    - cancelling one request only abandons that caller's wait
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import CyclicDependency, MissingArtifact
from .models import ArtifactSpec, CacheEntry, EntryState

logger = logging.getLogger(__name__)


def find_cycle(start: str, edges: Mapping[str, Iterable[str]]) -> Optional[List[str]]:
    """
    Depth-first search for a dependency cycle reachable from ``start``.

    Returns:
        The cycle as a list of names (first name repeated at the end),
        or None
    """
    path: List[str] = []
    on_path = set()
    done = set()

    def visit(name: str) -> Optional[List[str]]:
        if name in on_path:
            return path[path.index(name):] + [name]
        if name in done:
            return None
        path.append(name)
        on_path.add(name)
        for dep in edges.get(name, ()):
            cycle = visit(dep)
            if cycle:
                return cycle
        path.pop()
        on_path.discard(name)
        done.add(name)
        return None

    return visit(start)


class ComputedArtifacts:
    """Per-run registry and cache of computed artifacts."""

    def __init__(self):
        self._specs: Dict[str, ArtifactSpec] = {}
        self._cache: Dict[Tuple[str, int], CacheEntry] = {}
        self.execution_counts: Counter = Counter()

    def __contains__(self, name: str) -> bool:
        return name in self._specs

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._specs)

    def _edges(self) -> Dict[str, Tuple[str, ...]]:
        return {name: spec.dependencies for name, spec in self._specs.items()}

    def register(
        self,
        name: str,
        compute_fn: Callable[..., Any],
        dependencies: Iterable[str] = (),
    ) -> "ComputedArtifacts":
        """
        Register a derivation.

        Args:
            name: Artifact name used by request()
            compute_fn: Called as compute_fn(raw_artifacts, deps) where deps
                maps each dependency name to its value; may be async
            dependencies: Names of artifacts this one consumes

        Raises:
            ValueError: name already registered
            CyclicDependency: the new edges close a cycle
        """
        if name in self._specs:
            raise ValueError(f"Computed artifact {name!r} is already registered")

        dependencies = tuple(dependencies)
        edges = self._edges()
        edges[name] = dependencies
        cycle = find_cycle(name, edges)
        if cycle:
            raise CyclicDependency(cycle)

        self._specs[name] = ArtifactSpec(name=name, compute=compute_fn, dependencies=dependencies)
        logger.debug("Registered computed artifact %s (deps: %s)", name, ", ".join(dependencies) or "-")
        return self

    def _check_resolvable(self, name: str) -> None:
        """Verify the dependency closure of ``name`` is complete and acyclic."""
        edges = self._edges()
        cycle = find_cycle(name, edges)
        if cycle:
            raise CyclicDependency(cycle)

        pending = [name]
        seen = set()
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            if current not in self._specs:
                raise MissingArtifact(f"No computed artifact registered as {current!r}")
            pending.extend(self._specs[current].dependencies)

    def request(self, name: str, raw_artifacts: Any) -> "asyncio.Future":
        """
        Request a computed artifact; must be called from a running loop.

        The cache entry is created before this method returns, so any
        number of concurrent callers end up awaiting the same task. Each
        caller gets its own shield over it: cancelling one request never
        cancels the shared computation.

        Raises:
            MissingArtifact: name or one of its dependencies is unknown
            CyclicDependency: the dependency closure contains a cycle
        """
        key = (name, id(raw_artifacts))
        entry = self._cache.get(key)
        if entry is not None and entry.raw_artifacts is raw_artifacts:
            logger.debug("Computed artifact cache hit: %s", name)
            return asyncio.shield(entry.task)

        self._check_resolvable(name)
        spec = self._specs[name]
        logger.debug("Computed artifact cache miss: %s", name)

        task = asyncio.ensure_future(self._compute(spec, raw_artifacts))
        entry = CacheEntry(name=name, raw_artifacts=raw_artifacts, task=task)
        self._cache[key] = entry
        task.add_done_callback(partial(self._on_done, entry))
        return asyncio.shield(task)

    async def resolve(self, name: str, raw_artifacts: Any) -> Any:
        return await self.request(name, raw_artifacts)

    async def _compute(self, spec: ArtifactSpec, raw_artifacts: Any) -> Any:
        deps = {}
        if spec.dependencies:
            values = await asyncio.gather(
                *(self.request(dep, raw_artifacts) for dep in spec.dependencies)
            )
            deps = dict(zip(spec.dependencies, values))

        self.execution_counts[spec.name] += 1
        result = spec.compute(raw_artifacts, deps)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _on_done(self, entry: CacheEntry, task: "asyncio.Future") -> None:
        if task.cancelled():
            entry.state = EntryState.FAILED
            entry.error = asyncio.CancelledError()
            return

        error = task.exception()
        if error is None:
            entry.state = EntryState.RESOLVED
            return

        entry.state = EntryState.FAILED
        entry.error = error
        logger.warning("Computed artifact %s failed: %s: %s", entry.name, type(error).__name__, error)

    def entry(self, name: str, raw_artifacts: Any) -> Optional[CacheEntry]:
        entry = self._cache.get((name, id(raw_artifacts)))
        if entry is not None and entry.raw_artifacts is raw_artifacts:
            return entry
        return None

    def cache_entries(self) -> List[CacheEntry]:
        return list(self._cache.values())
