# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scan engine: run the domain checks and assemble the report."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait

from ..config import IpVersion, ProbeConfig, load_probe_config, parse_proxy
from ..errors import ConfigError
from ..http.client import HttpClient, create_default_http_client
from ..models.report import Report, order_results
from ..models.result import DomainResult
from ..net.dns import resolve
from ..net.tcp import host_supports_ipv6, is_reachable
from .executor import ProbeExecutor
from .orchestrator import DomainChecker, Prober, Resolver

logger = logging.getLogger(__name__)


class ScanEngine:
    """
    Checks a sequence of domains and returns a Report in input order.

    Domains run on a bounded worker pool; the probes of each domain run on a
    second pool so a domain task never waits on its own pool.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        resolver: Resolver = resolve,
        prober: Prober = is_reachable,
        ipv6_check: Callable[[], bool] = host_supports_ipv6,
        proxy_check: Prober = is_reachable,
    ):
        self.http_client = http_client
        self.resolver = resolver
        self.prober = prober
        self.ipv6_check = ipv6_check
        self.proxy_check = proxy_check

    def preflight(self, config: ProbeConfig) -> tuple[frozenset[IpVersion], bool]:
        """
        Validate the run before any probing and return (effective IP versions, IPv6 available).

        Raises ConfigError for invalid values, an IPv6-only run on a host without IPv6,
        or an unreachable proxy.
        """
        config.validate()
        ipv6_available = bool(self.ipv6_check()) if IpVersion.V6 in config.ip_versions else False
        effective = set(config.ip_versions)
        if not ipv6_available:
            effective.discard(IpVersion.V6)
        if not effective:
            raise ConfigError("IPv6 was requested but is not available on this host")
        if config.proxy:
            host, port = parse_proxy(config.proxy)
            if not self.proxy_check(host, port, float(config.timeout)):
                raise ConfigError(f"Proxy {config.proxy} is not reachable")
        return frozenset(effective), ipv6_available

    def run(self, domains: Sequence[str], config: ProbeConfig | None = None) -> Report:
        config = config or load_probe_config()
        effective, ipv6_available = self.preflight(config)
        domains = list(domains)

        owns_client = self.http_client is None
        http_client = self.http_client or create_default_http_client(config)
        logger.info(
            "Checking %d domain(s): timeout=%ss retries=%d ip_versions=%s",
            len(domains),
            config.timeout,
            config.retries,
            ",".join(str(v.value) for v in sorted(effective)),
        )
        try:
            results = self._check_all(domains, config, http_client, effective)
        finally:
            if owns_client:
                http_client.close()

        report = Report.build(
            order_results(domains, results),
            config,
            effective_ip_versions=effective,
            ipv6_available=ipv6_available,
        )
        logger.info("Finished: %s", report.summary())
        return report

    def _check_all(
        self,
        domains: list[str],
        config: ProbeConfig,
        http_client: HttpClient,
        ip_versions: frozenset[IpVersion],
    ) -> list[DomainResult | None]:
        results: list[DomainResult | None] = [None] * len(domains)
        if not domains:
            return results

        domain_workers = min(config.max_workers, len(domains))
        probe_workers = max(1, domain_workers * len(config.protocols) * len(ip_versions))
        with ThreadPoolExecutor(max_workers=probe_workers, thread_name_prefix="censorcheck-probe") as probe_pool, ThreadPoolExecutor(
            max_workers=domain_workers, thread_name_prefix="censorcheck-domain"
        ) as domain_pool:
            checker = DomainChecker(
                config,
                ProbeExecutor(http_client, config),
                ip_versions=ip_versions,
                resolver=self.resolver,
                prober=self.prober,
                pool=probe_pool,
            )
            futures: dict[Future[DomainResult], int] = {}
            try:
                for index, domain in enumerate(domains):
                    futures[domain_pool.submit(checker.check, domain)] = index
                wait(futures)
            except KeyboardInterrupt:
                logger.warning("Interrupted; waiting for in-flight checks to finish")
                domain_pool.shutdown(wait=True, cancel_futures=True)
                raise
            for future, index in futures.items():
                results[index] = future.result()
        return results


__all__ = ["ScanEngine"]
