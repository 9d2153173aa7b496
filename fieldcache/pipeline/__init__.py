"""
Pipeline Module

Records, per-worker contexts, the cache orchestrator and the threaded runner.

The orchestrator and runner are imported from their modules (or from the
top-level package) since they depend on fieldcache.mapping, which in turn
depends on Record.
"""

from .record import Record, parse_field_reference
from .worker_context import WorkerContext, WorkerStats

__all__ = [
    "Record",
    "WorkerContext",
    "WorkerStats",
    "parse_field_reference",
]
