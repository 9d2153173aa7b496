"""
Filter Configuration

Validated, immutable configuration for one cache filter instance: which
servers to talk to, which keys to read into which fields, which fields to
write under which keys.

Example:
    config = CacheFilterConfig.from_dict({
        "hosts": ["localhost:11211"],
        "namespace": "threats",
        "get": {"hostname:%{[hostname]}": "[threats][host]"},
    })

Validation happens once at construction. Any failure (negative ttl, empty
hosts, ...) is raised as ConfigurationError before a single record is
processed.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from fieldcache.core.config.constants import (
    DEFAULT_HOSTS,
    DEFAULT_TAG_ON_FAILURE,
    LOCAL_CACHE_DEFAULT_MAX_ENTRIES,
    LOCAL_CACHE_DEFAULT_TTL_SECONDS,
    REMOTE_DEFAULT_TTL,
    CacheBackendType,
)
from fieldcache.core.exceptions import ConfigurationError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions


class CacheFilterConfig(BaseModel):
    """
    Configuration surface of a cache filter.

    Attributes:
        hosts: Server endpoints, e.g. "127.0.0.1", "cache:11211", "[::1]:11211"
        namespace: If non-empty, every key is prefixed with "<namespace>:"
        get_map: key-template → destination field path (config key "get")
        set_map: source field path → key-template (config key "set")
        ttl: Expiry in seconds for stored entries; 0 means never expire
        tag_on_failure: Tag appended to a record whose cache pass failed
        local_cache_ttl_seconds: Per-worker cache entry lifetime; 0 disables it
        local_cache_max_entries: Per-worker cache capacity; 0 disables it
        backend: "memcached" (default) or "redis"
        add_tag: Tags appended to a record on a positive match
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    hosts: list[str] = Field(default_factory=lambda: list(DEFAULT_HOSTS), min_length=1)
    namespace: str | None = None
    get_map: dict[str, str] = Field(default_factory=dict, alias="get")
    set_map: dict[str, str] = Field(default_factory=dict, alias="set")
    ttl: int = Field(default=REMOTE_DEFAULT_TTL)
    tag_on_failure: str = DEFAULT_TAG_ON_FAILURE
    local_cache_ttl_seconds: float = Field(default=LOCAL_CACHE_DEFAULT_TTL_SECONDS, ge=0)
    local_cache_max_entries: int = Field(default=LOCAL_CACHE_DEFAULT_MAX_ENTRIES, ge=0)
    backend: CacheBackendType = CacheBackendType.MEMCACHED
    add_tag: list[str] = Field(default_factory=list)

    @field_validator("hosts", mode="before")
    @classmethod
    def stringify_hosts(cls, v):
        if isinstance(v, (list, tuple)):
            return [str(host).strip() for host in v]
        return v

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, v: list[str]) -> list[str]:
        if any(not host for host in v):
            raise ValueError("'hosts' entries cannot be blank")
        return v

    @field_validator("namespace")
    @classmethod
    def blank_namespace_is_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("'ttl' option cannot be negative")
        return v

    @model_validator(mode="after")
    def validate_backend_hosts(self):
        if self.backend == CacheBackendType.REDIS and len(self.hosts) != 1:
            raise ValueError("the redis backend supports exactly one entry in 'hosts'")
        return self

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None = None) -> "CacheFilterConfig":
        """
        Build a validated configuration from a plain mapping.

        Raises:
            ConfigurationError: If any option is invalid
        """
        raw = raw or {}
        if "hosts" in raw and not raw["hosts"]:
            raise ConfigurationError("'hosts' cannot be empty", details={"option": "hosts"})
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            errors = [
                {"option": ".".join(str(part) for part in err["loc"]), "error": err["msg"]}
                for err in e.errors()
            ]
            raise ConfigurationError(
                f"invalid cache filter configuration: {errors[0]['error']}",
                details={"errors": errors},
            ) from e

    def connection_options(self) -> ConnectionOptions:
        """Options handed to every (re)connect."""
        return ConnectionOptions(ttl=self.ttl, namespace=self.namespace, backend=self.backend)
