"""
Pipeline Runner

Drains records through one shared CacheOrchestrator with N worker threads.

Architecture:
    PipelineRunner (Public API)
        ├── queue.Queue (records in, one sentinel per worker)
        └── WorkerLoop × N (own thread, own WorkerContext, own worker id)

Each worker binds its id into the logging context once, then processes
records sequentially until it receives its sentinel. Records are processed
exactly once; the order of the returned list is the input order. Once all
workers have joined, their contexts are released back to the orchestrator.
"""

import queue
import threading
from collections.abc import Iterable

from fieldcache.core.config.constants import Stage
from fieldcache.core.logging.logger import clear_worker_id, get_logger, log_stage, set_worker_id
from fieldcache.pipeline.orchestrator import CacheOrchestrator
from fieldcache.pipeline.record import Record
from fieldcache.pipeline.worker_context import WorkerContext

logger = get_logger(__name__)

_STOP = object()


class WorkerLoop:
    """One worker thread's consume loop; exits on its sentinel."""

    def __init__(
        self,
        work_queue: "queue.Queue[object]",
        orchestrator: CacheOrchestrator,
        context: WorkerContext,
    ):
        self._queue = work_queue
        self._orchestrator = orchestrator
        self._context = context

    @property
    def context(self) -> WorkerContext:
        return self._context

    def run(self) -> None:
        set_worker_id(self._context.name)
        log_stage(logger, Stage.WORKER, "worker started", level="debug")
        try:
            while True:
                item = self._queue.get()
                try:
                    if item is _STOP:
                        break
                    self._orchestrator.process(item, self._context)
                finally:
                    self._queue.task_done()
        finally:
            log_stage(logger, Stage.WORKER, "worker stopped", level="debug", **self._context.stats.to_dict())
            clear_worker_id()


class PipelineRunner:
    """
    Fixed-size pool of worker threads sharing one orchestrator.

    Usage:
        with CacheOrchestrator(config) as orchestrator:
            runner = PipelineRunner(orchestrator, workers=4)
            records = runner.run(Record(event) for event in events)
    """

    def __init__(self, orchestrator: CacheOrchestrator, workers: int = 1, name: str = "worker"):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._orchestrator = orchestrator
        self._workers = workers
        self._name = name
        self._loops: list[WorkerLoop] = []

    @property
    def workers(self) -> int:
        return self._workers

    @property
    def contexts(self) -> list[WorkerContext]:
        """Contexts of the most recent run()."""
        return [loop.context for loop in self._loops]

    def run(self, records: Iterable[Record]) -> list[Record]:
        """
        Process every record and return them once all workers have finished.

        Each call starts a fresh set of workers with fresh contexts.
        """
        records = list(records)
        work_queue: "queue.Queue[object]" = queue.Queue()

        self._loops = [
            WorkerLoop(
                work_queue,
                self._orchestrator,
                self._orchestrator.new_worker_context(f"{self._name}-{index}"),
            )
            for index in range(self._workers)
        ]
        threads = [
            threading.Thread(target=loop.run, name=loop.context.name, daemon=True) for loop in self._loops
        ]

        log_stage(logger, Stage.WORKER, "pipeline run started", records=len(records), workers=self._workers)

        for thread in threads:
            thread.start()
        for record in records:
            work_queue.put(record)
        for _ in threads:
            work_queue.put(_STOP)
        for thread in threads:
            thread.join()
        for loop in self._loops:
            self._orchestrator.release_worker_context(loop.context)

        log_stage(
            logger,
            Stage.WORKER,
            "pipeline run finished",
            records=len(records),
            matched=sum(loop.context.stats.matched for loop in self._loops),
            failures=sum(loop.context.stats.failures for loop in self._loops),
        )
        return records
