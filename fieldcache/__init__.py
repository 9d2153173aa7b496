"""
fieldcache

Enriches structured records from a shared memcached (or redis) cluster and
writes record fields back into it, from many worker threads at once.

Usage:
    from fieldcache import CacheFilterConfig, CacheOrchestrator, PipelineRunner, Record

    config = CacheFilterConfig.from_dict({
        "hosts": ["localhost:11211"],
        "get": {"user:%{id}": "[profile]"},
    })
    with CacheOrchestrator(config) as orchestrator:
        records = PipelineRunner(orchestrator, workers=4).run(Record(e) for e in events)
"""

from fieldcache.core.config.filter_config import CacheFilterConfig
from fieldcache.pipeline.orchestrator import CacheOrchestrator, build_orchestrator
from fieldcache.pipeline.record import Record
from fieldcache.pipeline.runner import PipelineRunner
from fieldcache.pipeline.worker_context import WorkerContext

__version__ = "1.0.0"

__all__ = [
    "CacheFilterConfig",
    "CacheOrchestrator",
    "PipelineRunner",
    "Record",
    "WorkerContext",
    "build_orchestrator",
]
