"""
errors.py - Exception types for the conformance checker.

Divergences between the two codecs are NOT exceptions: they are collected as
records (see models.py). Exceptions here cover structural failures only.
"""

from __future__ import annotations


class ConformanceToolError(Exception):
    """Base class for checker failures that abort a run."""


class DiscoveryError(ConformanceToolError):
    """The registry could not enumerate the model namespace.

    Raised instead of returning an empty set so the checker can never pass
    vacuously.
    """

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Cannot discover models in namespace '{namespace}': {reason}")


class ConformanceError(AssertionError):
    """Raised by the gate when a run recorded at least one divergence."""

    def __init__(self, summaries: list[str] | tuple[str, ...]) -> None:
        self.summaries = tuple(summaries)
        lines = [f"{len(self.summaries)} serialization divergence(s) found between codecs:"]
        lines.extend(f"  - {summary}" for summary in self.summaries)
        super().__init__("\n".join(lines))
