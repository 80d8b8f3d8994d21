# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across censorcheck."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import IpVersion, ProbeConfig

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    timeout: float | None = None
    allow_redirects: bool = False
    ip_version: IpVersion = IpVersion.V4


@dataclass
class HttpResponse:
    """Normalized HTTP response carrying only what classification needs."""

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    url: str | None = None
    redirect_url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass
class RetryConfig:
    """Retry policy for transport failures derived from ProbeConfig."""

    max_attempts: int = 3
    backoff_factor: float = 2.0
    initial_delay: float = 1.0

    @classmethod
    def from_config(cls, config: ProbeConfig) -> RetryConfig:
        """One initial attempt plus ``config.retries`` retries."""
        return cls(
            max_attempts=1 + max(0, config.retries),
            backoff_factor=config.backoff_factor,
            initial_delay=config.retry_delay,
        )
