"""
Remote Cache Connection Manager

Owns the lifecycle of the one RemoteCache handle shared by every worker:
initial connect, liveness flag, reconnect-on-demand and best-effort close.

State machine:
    DISCONNECTED --connect()--> CONNECTED      (connect failure is fatal)
    CONNECTED --mark_down()/close()--> DOWN
    DOWN --ensure_available()/reconnect()--> CONNECTED | DOWN

Concurrency:
    connected  threading.Event, read without locking on the hot path
    _lock      threading.Lock, held for every mutation of the handle or flag

ensure_available() is double-checked: the lock-free read lets an already
connected caller through without contention; a caller that sees DOWN takes
the lock and re-reads the flag so that only one of several concurrent callers
actually reconnects. A stale "connected" read is tolerated: the next call
against the dead handle fails and drives the correction path.
"""

import threading
from collections.abc import Sequence
from typing import Any

from fieldcache.core.config.constants import ConnectionStatus, Stage
from fieldcache.core.exceptions import CacheConnectionError
from fieldcache.core.interfaces.remote_cache import (
    ConnectionOptions,
    RemoteCache,
    RemoteCacheConnector,
)
from fieldcache.core.logging.logger import get_logger, log_stage
from fieldcache.infrastructure.cache.factory import connect_remote_cache

logger = get_logger(__name__)


class ConnectionManager:
    """
    Manages the shared RemoteCache handle.

    Usage:
        manager = ConnectionManager(["localhost:11211"], ConnectionOptions(ttl=60))
        manager.connect()                 # raises CacheConnectionError on failure

        if manager.ensure_available():    # per record
            manager.remote.get_multi(keys)
        ...
        manager.mark_down()               # after a connection-class error
        manager.close()                   # shutdown, never raises
    """

    def __init__(
        self,
        hosts: Sequence[str],
        options: ConnectionOptions,
        connector: RemoteCacheConnector = connect_remote_cache,
    ):
        """
        Args:
            hosts: Ordered endpoint strings
            options: ttl / namespace / backend
            connector: Builds and verifies a handle (injectable for tests)
        """
        self._hosts = list(hosts)
        self._options = options
        self._connector = connector

        self._remote: RemoteCache | None = None
        self._connected = threading.Event()
        self._lock = threading.Lock()
        self._ever_connected = False

        self.reconnect_attempts = 0
        self.last_error: Exception | None = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def hosts(self) -> list[str]:
        return list(self._hosts)

    @property
    def options(self) -> ConnectionOptions:
        return self._options

    @property
    def remote(self) -> RemoteCache | None:
        return self._remote

    def is_connected(self) -> bool:
        return self._connected.is_set()

    @property
    def state(self) -> ConnectionStatus:
        if self._connected.is_set():
            return ConnectionStatus.CONNECTED
        if self._ever_connected:
            return ConnectionStatus.DOWN
        return ConnectionStatus.DISCONNECTED

    def _context(self, **extra: Any) -> dict[str, Any]:
        return {"hosts": self._hosts, **self._options.to_log_context(), **extra}

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def connect(self) -> None:
        """
        Initial connect.

        Raises:
            CacheConnectionError: If the remote store cannot be reached
        """
        with self._lock:
            try:
                remote = self._connector(self._hosts, self._options)
            except Exception as e:
                self.last_error = e
                log_stage(
                    logger,
                    Stage.INITIALIZATION,
                    "failed to connect to remote cache",
                    level="error",
                    error=str(e),
                    **self._context(),
                )
                if isinstance(e, CacheConnectionError):
                    raise
                raise CacheConnectionError.from_exception(
                    e, message="failed to connect to remote cache", hosts=self._hosts
                ) from e

            self._remote = remote
            self._ever_connected = True
            self._connected.set()

        log_stage(logger, Stage.INITIALIZATION, "remote cache connected", **self._context())

    def ensure_available(self) -> bool:
        """
        Return whether the connection is usable, reconnecting if it is down.

        Fast path: lock-free flag read. Slow path: lock, re-check, reconnect.
        """
        if self._connected.is_set():
            return True

        with self._lock:
            # Another worker may have reconnected while this one waited
            if self._connected.is_set():
                return True
            available = self.reconnect()

        if available:
            log_stage(
                logger,
                Stage.CONNECTION_MANAGER,
                "reconnected to remote cache",
                level="info",
                **self._context(attempt=self.reconnect_attempts),
            )
        else:
            log_stage(
                logger,
                Stage.CONNECTION_MANAGER,
                "failed to reconnect to remote cache",
                level="error",
                error=str(self.last_error),
                **self._context(attempt=self.reconnect_attempts),
            )
        return available

    def reconnect(
        self, hosts: Sequence[str] | None = None, options: ConnectionOptions | None = None
    ) -> bool:
        """
        Replace the handle with a freshly verified one.

        Must be called with the connection lock held. Never raises: failure
        detail is kept in last_error for the caller to log.
        """
        hosts = list(hosts) if hosts is not None else self._hosts
        options = options or self._options
        self.reconnect_attempts += 1

        try:
            remote = self._connector(hosts, options)
        except Exception as e:
            self.last_error = e
            self._connected.clear()
            return False

        self._remote = remote
        self._ever_connected = True
        self.last_error = None
        self._connected.set()
        return True

    def mark_down(self) -> None:
        """Flag the connection as unusable; reconnect is left to the next ensure_available()."""
        self._connected.clear()

    def close(self) -> None:
        """Clear the flag and release the handle. Errors are discarded."""
        try:
            with self._lock:
                self._connected.clear()
                if self._remote is not None:
                    self._remote.close()
        except Exception as e:
            # The handle may already be broken, or we are shutting down
            logger.debug("error closing remote cache connection", error=str(e), **self._context())

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    def health_check(self) -> dict[str, Any]:
        return {
            "status": "healthy" if self.is_connected() else "unhealthy",
            "state": self.state.value,
            "hosts": self._hosts,
            "backend": self._options.backend.value,
            "reconnect_attempts": self.reconnect_attempts,
            "last_error": str(self.last_error) if self.last_error else None,
        }
