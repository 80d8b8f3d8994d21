# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-domain check: resolve, test IP reachability, then run the protocol probes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable
from concurrent.futures import Executor
from enum import Enum
from itertools import product

from ..config import REACHABILITY_PORT, IpVersion, ProbeConfig, ProbeProtocol
from ..errors import DomainError, block_reason_for
from ..models.result import DomainResult, ProbeSlot, SlotKey
from ..net.dns import resolve
from ..net.tcp import is_reachable
from .classifier import classify
from .executor import ProbeExecutor, ProbeResponse

logger = logging.getLogger(__name__)

Resolver = Callable[[str, Collection[IpVersion]], "str | None"]
Prober = Callable[[str, int, float], bool]


class CheckState(str, Enum):
    START = "start"
    RESOLVING = "resolving"
    NXDOMAIN = "nxdomain"
    REACHABILITY = "reachability"
    BLOCKED_BY_IP = "blocked_by_ip"
    PROBING = "probing"
    DONE = "done"


TERMINAL_STATES = frozenset({CheckState.NXDOMAIN, CheckState.BLOCKED_BY_IP, CheckState.DONE})


def probe_pairs(protocols: Iterable[ProbeProtocol], ip_versions: Iterable[IpVersion]) -> list[SlotKey]:
    """Enabled (protocol, IP version) pairs in a stable order."""
    return list(product(sorted(protocols, key=lambda p: p.value), sorted(ip_versions)))


class DomainChecker:
    """
    Runs the check state machine for one domain at a time.

    ``ip_versions`` are the versions actually usable on this host (configured
    versions intersected with host support). When ``pool`` is given, the probe
    pairs of a domain run concurrently on it.
    """

    def __init__(
        self,
        config: ProbeConfig,
        executor: ProbeExecutor,
        *,
        ip_versions: Collection[IpVersion] | None = None,
        resolver: Resolver = resolve,
        prober: Prober = is_reachable,
        pool: Executor | None = None,
    ):
        self.config = config
        self.executor = executor
        self.ip_versions = frozenset(ip_versions if ip_versions is not None else config.ip_versions)
        self.resolver = resolver
        self.prober = prober
        self.pool = pool
        self.pairs = probe_pairs(config.protocols, self.ip_versions)

    def check(self, domain: str) -> DomainResult:
        trace: list[str] = []

        def enter(state: CheckState) -> None:
            trace.append(state.value)
            logger.debug("%s -> %s", domain, state.value)

        enter(CheckState.START)
        enter(CheckState.RESOLVING)
        ip = self._resolve(domain)
        if ip is None:
            enter(CheckState.NXDOMAIN)
            return DomainResult.failed(domain, DomainError.NXDOMAIN, trace=trace)

        enter(CheckState.REACHABILITY)
        if not self._reachable(ip):
            enter(CheckState.BLOCKED_BY_IP)
            return DomainResult.failed(domain, DomainError.BLOCKED_BY_IP, ip=ip, trace=trace)

        enter(CheckState.PROBING)
        slots = self._run_probes(domain)
        enter(CheckState.DONE)
        return DomainResult.probed(
            domain,
            ip,
            slots,
            protocols=self.config.protocols,
            ip_versions=self.ip_versions,
            trace=trace,
        )

    def _resolve(self, domain: str) -> str | None:
        try:
            return self.resolver(domain, self.ip_versions)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Resolver failed for %s: %s", domain, exc)
            return None

    def _reachable(self, ip: str) -> bool:
        try:
            return bool(self.prober(ip, REACHABILITY_PORT, float(self.config.timeout)))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Reachability check failed for %s: %s", ip, exc)
            return False

    def _run_probes(self, domain: str) -> dict[SlotKey, ProbeSlot]:
        if self.pool is None or len(self.pairs) < 2:
            return {pair: self._probe_slot(domain, *pair) for pair in self.pairs}
        futures = {pair: self.pool.submit(self._probe_slot, domain, *pair) for pair in self.pairs}
        return {pair: future.result() for pair, future in futures.items()}

    def _probe_slot(self, domain: str, protocol: ProbeProtocol, ip_version: IpVersion) -> ProbeSlot:
        try:
            response = self.executor.probe(domain, protocol, protocol.follows_redirects, ip_version)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Probe %s://%s over IPv%d failed: %s", protocol.value, domain, ip_version.value, exc)
            response = ProbeResponse(status=0, block_reason=block_reason_for(exc))
        outcome = classify(response.status, response.redirect_url, self.config.timeout, response.block_reason)
        return ProbeSlot(status=response.status, redirect_url=response.redirect_url, outcome=outcome)


__all__ = ["CheckState", "DomainChecker", "TERMINAL_STATES", "probe_pairs"]
