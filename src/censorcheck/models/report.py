# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Run report: ordered domain results plus the configuration that produced them."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..config import ALL_IP_VERSIONS, ALL_PROTOCOLS, IpVersion, ProbeConfig
from ..version import __version__
from .result import DomainResult


def _set_label(values: frozenset, full: frozenset, render) -> str:  # noqa: ANN001
    if values == full:
        return "both"
    return ",".join(render(v) for v in sorted(values, key=render))


@dataclass(frozen=True)
class Report:
    """Immutable result of one run; ``results`` follows the input domain order."""

    results: tuple[DomainResult, ...]
    config: ProbeConfig
    effective_ip_versions: frozenset[IpVersion]
    ipv6_available: bool
    version: str = __version__

    @classmethod
    def build(
        cls,
        results: Iterable[DomainResult],
        config: ProbeConfig,
        *,
        effective_ip_versions: Iterable[IpVersion],
        ipv6_available: bool,
    ) -> Report:
        return cls(
            results=tuple(results),
            config=config,
            effective_ip_versions=frozenset(effective_ip_versions),
            ipv6_available=ipv6_available,
        )

    @property
    def domains(self) -> list[str]:
        return [result.domain for result in self.results]

    def params(self) -> list[tuple[str, Any]]:
        """Run parameters, in display order."""
        config = self.config
        if config.single_domain:
            source = "single domain"
        elif config.domains_file:
            source = f"user domains from {config.domains_file}"
        else:
            source = "predefined domains"
        return [
            ("timeout", config.timeout),
            ("retries", config.retries),
            ("mode", config.mode.value),
            ("user_agent", config.user_agent),
            ("domain_source", source),
            ("protocol", _set_label(config.protocols, ALL_PROTOCOLS, lambda p: p.value)),
            ("ip_version", _set_label(self.effective_ip_versions, ALL_IP_VERSIONS, lambda v: str(v.value))),
            ("ipv6_available", self.ipv6_available),
            ("proxy", config.proxy),
        ]

    def summary(self) -> dict[str, int]:
        """Count slot outcomes by kind and error records by code."""
        counts: Counter[str] = Counter()
        for result in self.results:
            if result.error is not None:
                counts[result.error.value] += 1
                continue
            for slot in result.slots.values():
                counts[slot.outcome.kind.value] += 1
        return dict(counts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "params": [{"key": key, "value": value} for key, value in self.params()],
            "results": [result.to_dict() for result in self.results],
        }


def order_results(domains: Sequence[str], results: Sequence[DomainResult | None]) -> list[DomainResult]:
    """Check that every input position was filled and return the results in input order."""
    if len(domains) != len(results):
        raise ValueError("Result count does not match domain count")
    ordered: list[DomainResult] = []
    for domain, result in zip(domains, results):
        if result is None or result.domain != domain:
            raise ValueError(f"Missing result for {domain}")
        ordered.append(result)
    return ordered


__all__ = ["Report", "order_results"]
