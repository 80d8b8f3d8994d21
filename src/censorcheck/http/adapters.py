# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Alternative HttpClient implementations."""

from __future__ import annotations

from ..config import IpVersion
from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests and offline runs.

    Responses are looked up by ``(url, ip_version)`` first, then by ``url`` alone.
    """

    def __init__(self, responses: dict[str | tuple[str, IpVersion], HttpResponse] | None = None):
        self._responses = dict(responses or {})
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse, ip_version: IpVersion | None = None) -> None:
        key: str | tuple[str, IpVersion] = url if ip_version is None else (url, ip_version)
        self._responses[key] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        for key in ((request.url, request.ip_version), request.url):
            if key in self._responses:
                return self._responses[key]
        return HttpResponse(ok=False, status_code=None, error_message="No stubbed response configured", error_type="ConnectError")

    def close(self) -> None:
        self.closed = True
