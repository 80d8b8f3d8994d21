# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager
from urllib.parse import urljoin

import anyio
import httpx
from anyio.from_thread import BlockingPortal, start_blocking_portal

from ..config import IpVersion, ProbeConfig, load_probe_config
from .client import HttpClient
from .headers import header_value
from .models import HttpRequest, HttpResponse


class HttpxClient(HttpClient):
    """
    Synchronous facade over pooled httpx async clients, one per IP version.

    Requests run on a single background event loop (an anyio blocking portal), so every
    attempt is bounded by one wall-clock deadline covering connect, headers, redirect hops
    and the body drain. httpx's own timeout only limits each socket operation.

    The IP version is forced by binding the local address of the transport, so the
    connection can only be made over the matching address family. A configured SOCKS5
    proxy is attached to every transport and resolves target hostnames itself.
    """

    def __init__(self, config: ProbeConfig | None = None, clients: dict[IpVersion, httpx.AsyncClient] | None = None):
        self.config = config or load_probe_config()
        self._clients: dict[IpVersion, httpx.AsyncClient] = dict(clients or {})
        self._lock = threading.Lock()
        self._portal_cm: AbstractContextManager[BlockingPortal] | None = None
        self._portal: BlockingPortal | None = None

    def _get_portal(self) -> BlockingPortal:
        with self._lock:
            if self._portal is None:
                self._portal_cm = start_blocking_portal()
                self._portal = self._portal_cm.__enter__()
            return self._portal

    def _build_client(self, ip_version: IpVersion) -> httpx.AsyncClient:
        transport = httpx.AsyncHTTPTransport(
            local_address=ip_version.local_address,
            proxy=self.config.proxy_url,
        )
        return httpx.AsyncClient(transport=transport, timeout=float(self.config.timeout), trust_env=False)

    def _client_for(self, ip_version: IpVersion) -> httpx.AsyncClient:
        # Only called on the portal's event loop.
        client = self._clients.get(ip_version)
        if client is None:
            client = self._build_client(ip_version)
            self._clients[ip_version] = client
        return client

    def request(self, request: HttpRequest) -> HttpResponse:
        try:
            return self._get_portal().call(self._request, request)
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(ok=False, error_message=str(exc), error_type=type(exc).__name__)

    async def _request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.config.user_agent)
        timeout = request.timeout if request.timeout is not None else float(self.config.timeout)
        max_body_bytes = self.config.max_body_bytes

        try:
            client = self._client_for(request.ip_version)
            with anyio.fail_after(timeout):
                async with client.stream(
                    request.method,
                    request.url,
                    headers=headers,
                    timeout=timeout,
                    follow_redirects=request.allow_redirects,
                ) as resp:
                    # Raw bytes: the body is only drained, never decoded.
                    bytes_read = 0
                    async for chunk in resp.aiter_raw():
                        bytes_read += len(chunk)
                        if bytes_read >= max_body_bytes:
                            break
        except TimeoutError:
            return HttpResponse(
                ok=False,
                error_message=f"Request exceeded {timeout:g}s total time",
                error_type="TimeoutError",
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                ok=False,
                error_message=str(exc),
                error_type=type(exc).__name__,
            )

        redirect_url = None
        if 300 <= resp.status_code < 400:
            location = header_value(resp.headers, "location")
            redirect_url = urljoin(str(resp.url), location) if location else None

        return HttpResponse(
            ok=True,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            url=str(resp.url),
            redirect_url=redirect_url,
            meta={
                "body_bytes_read": bytes_read,
                "redirect_hops": len(resp.history),
            },
        )

    def close(self) -> None:
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        if clients:
            portal = self._get_portal()
            for client in clients:
                portal.call(client.aclose)
        with self._lock:
            portal_cm = self._portal_cm
            self._portal_cm = None
            self._portal = None
        if portal_cm is not None:
            portal_cm.__exit__(None, None, None)
