"""
Endpoint parsing and key namespacing shared by the remote backends.

Accepted endpoint forms:
    ipv4:  127.0.0.1          127.0.0.1:11211
    ipv6:  ::1                [::1]:11211
    fqdn:  cache.example.com  cache.example.com:11211
"""

from fieldcache.core.config.constants import NAMESPACE_SEPARATOR
from fieldcache.core.exceptions import ConfigurationError


def parse_endpoint(spec: str, default_port: int) -> tuple[str, int]:
    """
    Split an endpoint string into (host, port).

    Raises:
        ConfigurationError: If the port is not a valid integer
    """
    spec = spec.strip()
    host, port = spec, None

    if spec.startswith("["):
        # [ipv6]:port or [ipv6]
        closing = spec.find("]")
        if closing == -1:
            raise ConfigurationError(f"malformed ipv6 endpoint '{spec}'", details={"host": spec})
        host = spec[1:closing]
        rest = spec[closing + 1:]
        if rest.startswith(":"):
            port = rest[1:]
    elif spec.count(":") == 1:
        host, port = spec.split(":")
    # More than one colon without brackets is a bare ipv6 address

    if port is None or port == "":
        return host, default_port
    try:
        return host, int(port)
    except ValueError as e:
        raise ConfigurationError(
            f"invalid port in endpoint '{spec}'", details={"host": spec}
        ) from e


class KeyNamespace:
    """Prefixes keys with "<namespace>:"."""

    def __init__(self, namespace: str | None):
        self._prefix = f"{namespace}{NAMESPACE_SEPARATOR}" if namespace else ""

    def apply(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def apply_all(self, keys) -> dict[str, str]:
        """Map namespaced key → caller key, preserving order."""
        return {self.apply(key): key for key in keys}
