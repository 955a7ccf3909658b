"""Exception taxonomy shared by the artifact graph and the metric pipeline."""


class PageAuditError(Exception):
    """Base exception for page audit errors."""


class MissingArtifact(PageAuditError):
    """Raised when a computed artifact or its raw input does not exist."""


class CyclicDependency(PageAuditError):
    """Raised when computed artifact dependencies form a cycle."""

    def __init__(self, cycle):
        self.cycle = tuple(cycle)
        super().__init__("Cyclic computed artifact dependency: " + " -> ".join(self.cycle))


class MalformedTrace(PageAuditError):
    """Raised when trace events cannot be ordered into a usable timeline."""


class NavigationStartUnresolvable(PageAuditError):
    """Raised when no navigation start can be anchored for the page load."""


class MetricUnavailable(PageAuditError):
    """Raised when every stage of a metric's fallback chain is exhausted."""
