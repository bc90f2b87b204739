"""Centralised exception hierarchy for skyreport."""

from __future__ import annotations


class SkyreportError(Exception):
    """Base class for all custom skyreport exceptions."""


class WorkspaceError(SkyreportError):
    """Cloning, checking out or building the engine failed."""


class ProcessError(SkyreportError):
    """The server or benchmark process exited badly or wrote to stderr."""


class ParseError(SkyreportError):
    """Benchmark output could not be turned into a report."""


class StorageError(SkyreportError):
    """A local file could not be read or written."""


class BaselineNotFoundError(StorageError):
    """A baseline slot was read before it was ever seeded."""

    def __init__(self, slot: str) -> None:
        super().__init__(f"no baseline recorded for slot {slot!r}; run `skyreport update {slot}` first")
        self.slot = slot


class NetworkError(SkyreportError):
    """Pushing results or notifying the review system failed."""


class CleanupError(SkyreportError):
    """Tearing down a process or workspace failed."""


class ConfigError(SkyreportError):
    """Configuration is invalid or incomplete."""


class OrchestratorStateError(SkyreportError):
    """An orchestrator step was called out of order."""


__all__ = [
    "BaselineNotFoundError",
    "CleanupError",
    "ConfigError",
    "NetworkError",
    "OrchestratorStateError",
    "ParseError",
    "ProcessError",
    "SkyreportError",
    "StorageError",
    "WorkspaceError",
]
