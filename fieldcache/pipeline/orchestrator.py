"""
Cache Orchestrator

Runs one record's cache pass: writes configured fields into the remote store
("set"), then populates configured fields from it ("get").

Architecture:
    CacheOrchestrator (Public API)
        ├── FieldKeyMapper (templates → keys, field read/write)
        ├── WorkerContext (caller-owned; holds the worker's LocalCache)
        └── ConnectionManager (shared RemoteCache handle)

Per record:
    1. ensure_available()          DOWN and reconnect failed → tag, return
    2. process_set()               one multi() batch for all present fields
    3. process_get()               LocalCache → one get_multi for the rest
    4. mark matched                if either step touched anything

Failure contract (nothing escapes process()):
    CacheConnectionError   tag, mark connection down, close stale handle
    any other Exception    tag, log with detail, connection left as is
"""

import threading
from typing import Any

from fieldcache.core.config.constants import Stage
from fieldcache.core.config.filter_config import CacheFilterConfig
from fieldcache.core.exceptions import CacheConnectionError, ConfigurationError
from fieldcache.core.interfaces.remote_cache import RemoteCache, RemoteCacheConnector
from fieldcache.core.logging.logger import get_logger, is_debug_enabled, log_stage
from fieldcache.infrastructure.cache.connection_manager import ConnectionManager
from fieldcache.infrastructure.cache.factory import connect_remote_cache
from fieldcache.infrastructure.cache.local_cache import LocalCache
from fieldcache.mapping.field_key_mapper import FieldKeyMapper
from fieldcache.pipeline.record import Record
from fieldcache.pipeline.worker_context import WorkerContext

logger = get_logger(__name__)


class CacheOrchestrator:
    """
    Per-record get/set coordinator shared by all workers.

    Usage:
        config = CacheFilterConfig.from_dict({
            "hosts": ["localhost:11211"],
            "get": {"user:%{id}": "[profile]"},
        })
        with CacheOrchestrator(config) as orchestrator:
            context = orchestrator.new_worker_context("worker-0")
            for record in records:
                orchestrator.process(record, context)
    """

    def __init__(
        self,
        config: CacheFilterConfig,
        connector: RemoteCacheConnector = connect_remote_cache,
        connection_manager: ConnectionManager | None = None,
    ):
        """
        Args:
            config: Validated filter configuration
            connector: Builds verified RemoteCache handles (injectable for tests)
            connection_manager: Pre-built manager; one is built from config otherwise

        Raises:
            ConfigurationError: If a mapped field reference is unusable
        """
        self._config = config
        try:
            self._mapper = FieldKeyMapper.from_config(config)
        except ValueError as e:
            raise ConfigurationError(str(e), details={"option": "get/set"}) from e

        self._connection = connection_manager or ConnectionManager(
            config.hosts, config.connection_options(), connector=connector
        )
        self._contexts: list[WorkerContext] = []
        self._released_totals: dict[str, int] = {}
        self._contexts_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def config(self) -> CacheFilterConfig:
        return self._config

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    @property
    def mapper(self) -> FieldKeyMapper:
        return self._mapper

    def start(self) -> None:
        """
        Connect to the remote store.

        Raises:
            CacheConnectionError: If the initial connect fails
        """
        log_stage(
            logger,
            Stage.INITIALIZATION,
            "starting cache orchestrator",
            get_mappings=len(self._mapper.get_mappings),
            set_mappings=len(self._mapper.set_mappings),
            local_cache_ttl_seconds=self._config.local_cache_ttl_seconds,
            local_cache_max_entries=self._config.local_cache_max_entries,
        )
        self._connection.connect()

    def shutdown(self) -> None:
        """Best-effort close; never raises."""
        self._connection.close()
        log_stage(logger, Stage.SHUTDOWN, "cache orchestrator shut down", stats=self.stats())

    def __enter__(self) -> "CacheOrchestrator":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def new_worker_context(self, name: str) -> WorkerContext:
        """Create the context one worker passes to every process() call."""
        context = WorkerContext(name=name, local_cache_factory=self._new_local_cache)
        with self._contexts_lock:
            self._contexts.append(context)
        return context

    def release_worker_context(self, context: WorkerContext) -> None:
        """
        Drop a finished worker's context.

        Its counters are folded into the running totals reported by stats();
        its LocalCache goes away with it. Releasing twice is a no-op.
        """
        with self._contexts_lock:
            if not any(live is context for live in self._contexts):
                return
            self._contexts = [live for live in self._contexts if live is not context]
            for name, count in context.stats.to_dict().items():
                self._released_totals[name] = self._released_totals.get(name, 0) + count

    def _new_local_cache(self) -> LocalCache:
        return LocalCache(
            max_entries=self._config.local_cache_max_entries,
            ttl_seconds=self._config.local_cache_ttl_seconds,
        )

    def _log_context(self, **extra: Any) -> dict[str, Any]:
        if self._config.namespace:
            return {"namespace": self._config.namespace, **extra}
        return extra

    # -------------------------------------------------------------------------
    # Per-record entry point
    # -------------------------------------------------------------------------

    def process(self, record: Record, context: WorkerContext) -> None:
        """
        Run set then get for one record. Never raises.

        The record is tagged with tag_on_failure when the connection is down
        or either step fails, and marked matched when either step succeeded.
        """
        context.stats.records += 1

        if not self._connection.ensure_available():
            log_stage(
                logger, Stage.CONNECTION_CHECK, "remote cache unavailable, record skipped", level="debug"
            )
            self._fail(record, context)
            return

        try:
            set_success = self.process_set(record, context)
            get_success = self.process_get(record, context)
        except CacheConnectionError as e:
            self._fail(record, context)
            log_stage(
                logger,
                Stage.FAILURE_HANDLING,
                "remote cache communication error",
                level="error",
                error=e.message,
                hosts=self._connection.hosts,
                **self._log_context(),
            )
            self._connection.mark_down()
            self._connection.close()
            return
        except Exception as e:
            self._fail(record, context)
            log_stage(
                logger,
                Stage.FAILURE_HANDLING,
                "unexpected error",
                level="error",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=is_debug_enabled(),
                **self._log_context(),
            )
            return

        if set_success or get_success:
            self._matched(record, context)

    def _fail(self, record: Record, context: WorkerContext) -> None:
        record.tag(self._config.tag_on_failure)
        context.stats.failures += 1

    def _matched(self, record: Record, context: WorkerContext) -> None:
        record.mark_matched()
        for tag in self._config.add_tag:
            record.tag(record.sprintf(tag))
        context.stats.matched += 1

    def _remote(self) -> RemoteCache:
        remote = self._connection.remote
        if remote is None:
            raise CacheConnectionError(
                "remote cache is not connected", details={"hosts": self._connection.hosts}
            )
        return remote

    # -------------------------------------------------------------------------
    # Get / Set
    # -------------------------------------------------------------------------

    def process_get(self, record: Record, context: WorkerContext) -> bool:
        """
        Populate mapped fields from the cache.

        Returns:
            True if at least one field was written
        """
        if not self._mapper.get_mappings:
            return False

        fields_by_key = self._mapper.keys_for_get(record)
        local_cache = context.local_cache
        values: dict[str, Any] = {}
        remote_keys: list[str] = []

        for key in fields_by_key:
            value = local_cache.get(key)
            if value is None:
                remote_keys.append(key)
            else:
                values[key] = value
                context.stats.local_hits += 1

        if local_cache.enabled:
            log_stage(
                logger,
                Stage.LOCAL_CACHE_LOOKUP,
                "local cache lookup",
                level="debug",
                hits=len(values),
                remaining=len(remote_keys),
            )

        if remote_keys:
            log_stage(
                logger, Stage.REMOTE_CACHE_LOOKUP, "remote cache lookup", level="debug", keys=len(remote_keys)
            )
            found = self._remote().get_multi(remote_keys)
            for key in remote_keys:
                value = found.get(key)
                if value is None:
                    continue
                values[key] = value
                local_cache.put(key, value)
                context.stats.remote_hits += 1

        cache_hits = 0
        for key, field_path in fields_by_key.items():
            value = values.get(key)
            if value is None:
                context.stats.misses += 1
                log_stage(logger, Stage.CACHE_GET, "cache:get miss", level="debug", **self._log_context(key=key))
                continue
            log_stage(
                logger, Stage.RECORD_UPDATE, "cache:get hit", level="debug", **self._log_context(key=key, value=value)
            )
            self._mapper.write_field(record, field_path, value)
            cache_hits += 1

        return cache_hits > 0

    def process_set(self, record: Record, context: WorkerContext) -> bool:
        """
        Write mapped fields into the cache in one batch.

        Returns:
            True if at least one key was written
        """
        if not self._mapper.set_mappings:
            return False

        values_by_key = self._mapper.values_for_set(record)
        if not values_by_key:
            return False

        remote = self._remote()
        with remote.multi():
            for key, value in values_by_key.items():
                log_stage(logger, Stage.CACHE_SET, "cache:set", level="debug", **self._log_context(key=key, value=value))
                remote.set(key, value)

        context.stats.keys_set += len(values_by_key)
        return True

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        """Counters summed over live and released workers; "workers" counts live ones."""
        with self._contexts_lock:
            contexts = list(self._contexts)
            totals = dict(self._released_totals)

        for context in contexts:
            for name, count in context.stats.to_dict().items():
                totals[name] = totals.get(name, 0) + count

        return {
            **totals,
            "workers": len(contexts),
            "connection": self._connection.health_check(),
        }


def build_orchestrator(
    raw_config: dict[str, Any] | None = None,
    connector: RemoteCacheConnector = connect_remote_cache,
) -> CacheOrchestrator:
    """
    Validate raw configuration, build the orchestrator and connect it.

    Raises:
        ConfigurationError: If the configuration is invalid
        CacheConnectionError: If the initial connect fails
    """
    orchestrator = CacheOrchestrator(CacheFilterConfig.from_dict(raw_config), connector=connector)
    orchestrator.start()
    return orchestrator


__all__ = ["CacheOrchestrator", "build_orchestrator"]
