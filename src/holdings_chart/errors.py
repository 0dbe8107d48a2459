# This file defines the failure taxonomy for snapshot loading, engine construction, and query execution.
# Every class derives from RuntimeError so callers can absorb pipeline failures at one boundary.

from __future__ import annotations


class HoldingsPipelineError(RuntimeError):
    """Base class for failures inside the snapshot-to-chart pipeline."""


class SnapshotUnavailableError(HoldingsPipelineError):
    """Raised when the snapshot file is missing or holds no bytes."""


class EngineInitError(HoldingsPipelineError):
    """Raised when snapshot bytes cannot be opened as a relational database."""


class QueryExecError(HoldingsPipelineError):
    """Raised when a query fails against a loaded snapshot, usually on schema mismatch."""
