# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level censorcheck facade."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import suppress

from .config import ProbeConfig, load_probe_config
from .domains import select_domains
from .http.client import HttpClient, create_default_http_client
from .models import Report
from .scan.engine import ScanEngine


class CensorCheck:
    """
    Convenience wrapper that wires one HTTP client into the scan engine.

    The client is built from the config and reused across runs until ``close()``.
    """

    def __init__(self, config: ProbeConfig | None = None, http_client: HttpClient | None = None):
        self.config = config or load_probe_config()
        self.http_client = http_client or create_default_http_client(self.config)
        self.engine = ScanEngine(self.http_client)

    def check(self, domains: Sequence[str]) -> Report:
        return self.engine.run(domains, self.config)

    def check_domain(self, domain: str) -> Report:
        return self.check([domain])

    def run(self) -> Report:
        """Check the domains selected by the config (single domain, file or built-in list)."""
        return self.check(select_domains(self.config))

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> CensorCheck:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
