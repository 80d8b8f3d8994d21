# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper for HttpClient implementations."""

from __future__ import annotations

import logging
import time

from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
) -> HttpResponse:
    """Execute a request, retrying transport failures with backoff."""
    cfg = retry_config or RetryConfig()
    max_attempts = max(1, cfg.max_attempts)

    attempt = 0
    delay = cfg.initial_delay
    last_response: HttpResponse | None = None

    while attempt < max_attempts:
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                error_message=str(exc),
                error_type=exc.__class__.__name__,
            )
        last_response = response

        # Any HTTP status is a final answer; only transport failures (no status) are retried.
        if response.ok or response.status_code is not None:
            response.meta.setdefault("attempts", attempt + 1)
            if attempt:
                response.meta.setdefault("retry_count", attempt)
            return response

        attempt += 1
        logger.debug(
            "Attempt %d/%d for %s (IPv%d) failed: %s (%s)",
            attempt,
            max_attempts,
            request.url,
            request.ip_version.value,
            response.error_message,
            response.error_type,
        )
        if attempt >= max_attempts:
            break
        if delay > 0:
            time.sleep(delay)
        delay *= cfg.backoff_factor

    if last_response is None:  # pragma: no cover - max_attempts is at least 1
        last_response = HttpResponse(ok=False, error_message="No attempt made")
    last_response.meta.setdefault("attempts", attempt)
    last_response.meta.setdefault("retry_count", max(0, attempt - 1))
    last_response.meta.setdefault("retry_exhausted", True)
    return last_response


__all__ = ["send_with_retries"]
