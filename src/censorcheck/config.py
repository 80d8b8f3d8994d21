# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for censorcheck."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field, replace
from enum import Enum

from .errors import ConfigError

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:129.0) Gecko/20100101 Firefox/129.0"
REACHABILITY_PORT = 443


class ProbeProtocol(str, Enum):
    HTTP = "http"
    HTTPS = "https"

    @property
    def follows_redirects(self) -> bool:
        # HTTP redirects (e.g. to a block page) are reported as-is; HTTPS resolves to the final hop.
        return self is ProbeProtocol.HTTPS

    @property
    def label(self) -> str:
        return self.value.upper()


class IpVersion(int, Enum):
    V4 = 4
    V6 = 6

    @property
    def label(self) -> str:
        return f"ipv{self.value}"

    @property
    def family(self) -> int:
        return socket.AF_INET if self is IpVersion.V4 else socket.AF_INET6

    @property
    def local_address(self) -> str:
        return "0.0.0.0" if self is IpVersion.V4 else "::"


class Mode(str, Enum):
    DPI = "dpi"
    GEOBLOCK = "geoblock"
    BOTH = "both"


ALL_PROTOCOLS = frozenset(ProbeProtocol)
ALL_IP_VERSIONS = frozenset(IpVersion)


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _optional_str_env(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def _mode_env(name: str, default: Mode) -> Mode:
    try:
        return Mode((os.getenv(name) or default.value).strip().lower())
    except ValueError:
        return default


def parse_proxy(value: str) -> tuple[str, int]:
    """Split a ``host:port`` proxy address; IPv6 hosts must be bracketed."""
    raw = (value or "").strip()
    host, sep, port_text = raw.rpartition(":")
    if not sep or not host or not port_text:
        raise ConfigError(f"Invalid proxy address: {value!r}. Expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ConfigError(f"Invalid proxy address: {value!r}. IPv6 proxy hosts must be in brackets")
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ConfigError(f"Invalid proxy port: {port_text!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"Invalid proxy port: {port}. Port must be between 1 and 65535")
    return host, port


def protocols_for(value: str) -> frozenset[ProbeProtocol]:
    choice = (value or "").strip().lower()
    if choice == "both":
        return ALL_PROTOCOLS
    try:
        return frozenset({ProbeProtocol(choice)})
    except ValueError as exc:
        raise ConfigError(f"Invalid protocol: {value}. Valid protocols are: http, https, both") from exc


@dataclass(frozen=True)
class ProbeConfig:
    """Immutable run configuration shared read-only by every component."""

    timeout: int = 5
    retries: int = 2
    user_agent: str = DEFAULT_USER_AGENT
    proxy: str | None = None
    ip_versions: frozenset[IpVersion] = field(default_factory=lambda: ALL_IP_VERSIONS)
    protocols: frozenset[ProbeProtocol] = field(default_factory=lambda: ALL_PROTOCOLS)
    mode: Mode = Mode.BOTH
    domains_file: str | None = None
    single_domain: str | None = None
    json_output: bool = False
    max_workers: int = 8
    retry_delay: float = 1.0
    backoff_factor: float = 2.0
    max_body_bytes: int = 1024 * 1024

    @classmethod
    def from_env(cls) -> ProbeConfig:
        """Create a config from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("CENSORCHECK_MAX_BODY_BYTES", 1024 * 1024)
        if max_body_bytes <= 0:
            max_body_bytes = 1024 * 1024
        return cls(
            timeout=_int_env("CENSORCHECK_TIMEOUT", 5),
            retries=_int_env("CENSORCHECK_RETRIES", 2),
            user_agent=os.getenv("CENSORCHECK_USER_AGENT", DEFAULT_USER_AGENT),
            proxy=_optional_str_env("CENSORCHECK_PROXY"),
            mode=_mode_env("CENSORCHECK_MODE", Mode.BOTH),
            json_output=_bool_env("CENSORCHECK_JSON", False),
            max_workers=_int_env("CENSORCHECK_WORKERS", 8),
            retry_delay=_float_env("CENSORCHECK_RETRY_DELAY", 1.0),
            backoff_factor=_float_env("CENSORCHECK_BACKOFF", 2.0),
            max_body_bytes=max_body_bytes,
        )

    @property
    def proxy_url(self) -> str | None:
        if not self.proxy:
            return None
        return f"socks5://{self.proxy.strip()}"

    def with_overrides(self, **changes) -> ProbeConfig:  # noqa: ANN003
        return replace(self, **changes)

    def validate(self) -> ProbeConfig:
        """Raise ConfigError for any value the run cannot start with."""
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, int) or self.timeout <= 0:
            raise ConfigError(f"Invalid timeout value: {self.timeout}. Timeout must be a positive integer")
        if isinstance(self.retries, bool) or not isinstance(self.retries, int) or self.retries < 0:
            raise ConfigError(f"Invalid retries value: {self.retries}. Retry count must be a non-negative integer")
        if not self.user_agent or not self.user_agent.strip():
            raise ConfigError("User-Agent cannot be empty")
        if not isinstance(self.mode, Mode):
            raise ConfigError(f"Invalid mode: {self.mode}. Valid modes are: dpi, geoblock, both")
        if not self.protocols or not self.protocols <= ALL_PROTOCOLS:
            raise ConfigError("At least one of http, https must be selected")
        if not self.ip_versions or not self.ip_versions <= ALL_IP_VERSIONS:
            raise ConfigError("At least one of IPv4, IPv6 must be selected")
        if self.max_workers <= 0:
            raise ConfigError(f"Invalid worker count: {self.max_workers}. Must be a positive integer")
        if self.retry_delay < 0 or self.backoff_factor < 1:
            raise ConfigError("Retry delay must be non-negative and backoff factor at least 1")
        if self.proxy is not None:
            parse_proxy(self.proxy)
        if self.single_domain is not None and not self.single_domain.strip():
            raise ConfigError("Domain cannot be empty")
        if self.domains_file is not None:
            if not self.domains_file.strip():
                raise ConfigError("File path cannot be empty")
            if not os.path.isfile(self.domains_file):
                raise ConfigError(f"File '{self.domains_file}' does not exist")
        return self


def load_probe_config() -> ProbeConfig:
    """Load the probe config from environment with sensible defaults."""
    return ProbeConfig.from_env()


__all__ = [
    "ALL_IP_VERSIONS",
    "ALL_PROTOCOLS",
    "DEFAULT_USER_AGENT",
    "REACHABILITY_PORT",
    "IpVersion",
    "Mode",
    "ProbeConfig",
    "ProbeProtocol",
    "load_probe_config",
    "parse_proxy",
    "protocols_for",
]
