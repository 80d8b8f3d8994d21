# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
censorcheck package entrypoint.

This package probes domains over HTTP and HTTPS (IPv4/IPv6, optionally through a
SOCKS5 proxy) and classifies each result as available, redirected, denied, other
status or blocked, to spot DPI and geographic blocking. HTTP behavior is abstracted
behind an injectable client interface, and results are modeled with typed dataclasses.
"""

from .config import IpVersion, Mode, ProbeConfig, ProbeProtocol, load_probe_config
from .domains import read_domains_file, select_domains
from .errors import BlockReason, ConfigError, DomainError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryConfig,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import (
    Available,
    Blocked,
    Denied,
    DomainResult,
    OtherStatus,
    OutcomeKind,
    ProbeOutcome,
    ProbeSlot,
    Redirected,
    Report,
)
from .runtime import CensorCheck
from .scan import DomainChecker, ProbeExecutor, ScanEngine, classify
from .version import __version__

__all__ = [
    "Available",
    "BlockReason",
    "Blocked",
    "CensorCheck",
    "ConfigError",
    "Denied",
    "DomainChecker",
    "DomainError",
    "DomainResult",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "IpVersion",
    "Mode",
    "OtherStatus",
    "OutcomeKind",
    "ProbeConfig",
    "ProbeExecutor",
    "ProbeOutcome",
    "ProbeProtocol",
    "ProbeSlot",
    "Redirected",
    "Report",
    "RetryConfig",
    "ScanEngine",
    "StubHttpClient",
    "classify",
    "create_default_http_client",
    "load_probe_config",
    "read_domains_file",
    "select_domains",
    "setup_logging",
    "__version__",
]
