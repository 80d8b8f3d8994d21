# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single HTTP/HTTPS probe against a domain."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import IpVersion, ProbeConfig, ProbeProtocol
from ..errors import BlockReason, block_reason_from_name
from ..http.client import HttpClient
from ..http.headers import build_probe_headers
from ..http.models import HttpRequest, RetryConfig
from ..http.retry import send_with_retries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResponse:
    """What one probe observed. ``status`` 0 means no usable response."""

    status: int
    redirect_url: str | None = None
    block_reason: BlockReason | None = None
    attempts: int = 1


def build_probe_url(domain: str, protocol: ProbeProtocol) -> str:
    return f"{protocol.value}://{domain}"


class ProbeExecutor:
    """Issues probes with the configured headers, timeout and retry policy."""

    def __init__(self, http_client: HttpClient, config: ProbeConfig):
        self.http_client = http_client
        self.config = config
        self.retry_config = RetryConfig.from_config(config)

    def probe(
        self,
        domain: str,
        protocol: ProbeProtocol,
        follow_redirects: bool,
        ip_version: IpVersion,
    ) -> ProbeResponse:
        request = HttpRequest(
            url=build_probe_url(domain, protocol),
            headers=build_probe_headers(self.config.user_agent),
            timeout=float(self.config.timeout),
            allow_redirects=follow_redirects,
            ip_version=ip_version,
        )
        response = send_with_retries(self.http_client, request, retry_config=self.retry_config)
        attempts = int(response.meta.get("attempts", 1) or 1)
        if not response.status_code:
            reason = block_reason_from_name(response.error_type)
            logger.debug(
                "%s over IPv%d gave no response after %d attempt(s): %s",
                request.url,
                ip_version.value,
                attempts,
                response.error_message,
            )
            return ProbeResponse(status=0, block_reason=reason, attempts=attempts)
        return ProbeResponse(
            status=response.status_code,
            redirect_url=response.redirect_url or None,
            attempts=attempts,
        )


__all__ = ["ProbeExecutor", "ProbeResponse", "build_probe_url"]
