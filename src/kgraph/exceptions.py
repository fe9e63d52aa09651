"""Graph Analytics Exceptions.

Defines the exception hierarchy used by the loading and configuration layers:
- GraphAnalyticsError: Base exception
- GraphLoadError: Graph file could not be read or is malformed
- SettingsError: Settings file could not be read or failed validation

The algorithm core (community detection and path finding) never raises for
expected conditions such as missing endpoints, unreachable targets or
timeouts; those are reported through result models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class GraphAnalyticsError(Exception):
    """Base exception for graph analytics operations.

    Attributes:
        message: Error description
        cause: Underlying exception that caused this error (optional)
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        """Return string representation with context."""
        parts = [self.message]
        if self.cause is not None:
            parts.append(f"(caused by {type(self.cause).__name__}: {self.cause})")
        return " ".join(parts)


class GraphLoadError(GraphAnalyticsError):
    """Graph file could not be loaded.

    Attributes:
        path: Path of the graph file (or "<payload>" for in-memory documents)
        reason: Short description of the problem
    """

    def __init__(
        self,
        path: Union[str, Path],
        reason: str,
        cause: Optional[Exception] = None,
    ):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load graph from {self.path}: {reason}", cause=cause)


class SettingsError(GraphAnalyticsError):
    """Settings file is missing required structure or failed validation."""

    pass
