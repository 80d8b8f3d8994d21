# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

from concurrent.futures import ThreadPoolExecutor

from censorcheck.config import IpVersion, ProbeConfig, ProbeProtocol
from censorcheck.errors import BlockReason, DomainError
from censorcheck.models.outcome import Available, Blocked, Redirected
from censorcheck.scan.executor import ProbeResponse
from censorcheck.scan.orchestrator import TERMINAL_STATES, CheckState, DomainChecker, probe_pairs


class FakeExecutor:
    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def probe(self, domain, protocol, follow_redirects, ip_version):
        self.calls.append((domain, protocol, follow_redirects, ip_version))
        if self.error is not None and (protocol, ip_version) in self.error:
            raise RuntimeError("probe crashed")
        return self.responses.get((protocol, ip_version), ProbeResponse(status=200))


def _resolver(address="203.0.113.10"):
    calls = []

    def resolve(domain, ip_versions):
        calls.append((domain, frozenset(ip_versions)))
        return address

    resolve.calls = calls
    return resolve


def _prober(result=True):
    calls = []

    def probe(ip, port, timeout):
        calls.append((ip, port, timeout))
        return result

    probe.calls = calls
    return probe


def test_nxdomain_short_circuits_without_probes():
    executor = FakeExecutor()
    prober = _prober()
    checker = DomainChecker(ProbeConfig(), executor, ip_versions={IpVersion.V4}, resolver=_resolver(None), prober=prober)

    result = checker.check("nope.invalid")

    assert result.error is DomainError.NXDOMAIN
    assert result.to_dict() == {"service": "nope.invalid", "error": "Domain doesn't exist", "error_code": "nxdomain"}
    assert not result.slots
    assert executor.calls == []
    assert prober.calls == []
    assert result.trace == ("start", "resolving", "nxdomain")


def test_blocked_by_ip_short_circuits_without_probes():
    executor = FakeExecutor()
    prober = _prober(False)
    checker = DomainChecker(ProbeConfig(timeout=4), executor, ip_versions={IpVersion.V4}, resolver=_resolver(), prober=prober)

    result = checker.check("blocked.example")

    assert result.error is DomainError.BLOCKED_BY_IP
    assert result.ip == "203.0.113.10"
    assert result.ip_reachable is False
    assert result.to_dict()["error_code"] == "blocked_by_ip"
    assert executor.calls == []
    assert prober.calls == [("203.0.113.10", 443, 4.0)]
    assert CheckState(result.trace[-1]) in TERMINAL_STATES


def test_reachability_uses_port_443_even_for_http_only():
    prober = _prober()
    config = ProbeConfig(protocols=frozenset({ProbeProtocol.HTTP}))
    DomainChecker(config, FakeExecutor(), ip_versions={IpVersion.V4}, resolver=_resolver(), prober=prober).check("x")
    assert prober.calls[0][1] == 443


def test_probes_every_enabled_pair_with_redirect_policy():
    executor = FakeExecutor(
        {
            (ProbeProtocol.HTTP, IpVersion.V4): ProbeResponse(status=301, redirect_url="https://x"),
            (ProbeProtocol.HTTPS, IpVersion.V4): ProbeResponse(status=200),
            (ProbeProtocol.HTTP, IpVersion.V6): ProbeResponse(status=0, block_reason=BlockReason.TIMEOUT),
        }
    )
    checker = DomainChecker(ProbeConfig(), executor, ip_versions={IpVersion.V4, IpVersion.V6}, resolver=_resolver(), prober=_prober())

    result = checker.check("x")

    assert result.error is None
    assert len(result.slots) == 4
    assert result.outcome(ProbeProtocol.HTTP, IpVersion.V4) == Redirected(301, "https://x")
    assert result.outcome(ProbeProtocol.HTTPS, IpVersion.V4) == Available(200)
    assert result.outcome(ProbeProtocol.HTTP, IpVersion.V6) == Blocked(BlockReason.TIMEOUT, 5)
    follow = {(protocol, ip_version): flag for _, protocol, flag, ip_version in executor.calls}
    assert follow[(ProbeProtocol.HTTP, IpVersion.V4)] is False
    assert follow[(ProbeProtocol.HTTPS, IpVersion.V6)] is True
    assert result.trace == ("start", "resolving", "reachability", "probing", "done")


def test_excluded_protocol_is_absent_not_blocked():
    config = ProbeConfig(protocols=frozenset({ProbeProtocol.HTTP}))
    executor = FakeExecutor()
    result = DomainChecker(config, executor, ip_versions={IpVersion.V4}, resolver=_resolver(), prober=_prober()).check("x")

    payload = result.to_dict()
    assert "https" not in payload
    assert payload["http"] == {"ipv4": {"status": 200, "redirect_url": None}, "ipv6": None}
    assert all(protocol is ProbeProtocol.HTTP for _, protocol, _, _ in executor.calls)


def test_unsupported_ipv6_never_populates_slots():
    config = ProbeConfig()  # dual-stack requested
    executor = FakeExecutor()
    result = DomainChecker(config, executor, ip_versions={IpVersion.V4}, resolver=_resolver(), prober=_prober()).check("x")

    assert all(ip_version is IpVersion.V4 for _, ip_version in result.slots)
    assert result.to_dict()["http"]["ipv6"] is None
    assert result.to_dict()["https"]["ipv6"] is None
    assert all(ip_version is IpVersion.V4 for *_, ip_version in executor.calls)


def test_resolver_receives_effective_versions():
    resolver = _resolver()
    DomainChecker(ProbeConfig(), FakeExecutor(), ip_versions={IpVersion.V6}, resolver=resolver, prober=_prober()).check("x")
    assert resolver.calls == [("x", frozenset({IpVersion.V6}))]


def test_crashing_probe_only_affects_its_slot():
    executor = FakeExecutor(error={(ProbeProtocol.HTTPS, IpVersion.V4)})
    result = DomainChecker(ProbeConfig(), executor, ip_versions={IpVersion.V4}, resolver=_resolver(), prober=_prober()).check("x")

    assert result.outcome(ProbeProtocol.HTTPS, IpVersion.V4) == Blocked(BlockReason.TRANSPORT_ERROR, 5)
    assert result.outcome(ProbeProtocol.HTTP, IpVersion.V4) == Available(200)


def test_crashing_resolver_and_prober_are_data():
    def broken(*_args):
        raise RuntimeError("resolver exploded")

    nx = DomainChecker(ProbeConfig(), FakeExecutor(), ip_versions={IpVersion.V4}, resolver=broken, prober=_prober()).check("x")
    assert nx.error is DomainError.NXDOMAIN

    blocked = DomainChecker(ProbeConfig(), FakeExecutor(), ip_versions={IpVersion.V4}, resolver=_resolver(), prober=broken).check("x")
    assert blocked.error is DomainError.BLOCKED_BY_IP


def test_pool_and_sequential_runs_agree():
    responses = {
        (ProbeProtocol.HTTP, IpVersion.V4): ProbeResponse(status=302, redirect_url=""),
        (ProbeProtocol.HTTPS, IpVersion.V6): ProbeResponse(status=403),
    }
    config = ProbeConfig()
    versions = {IpVersion.V4, IpVersion.V6}
    sequential = DomainChecker(config, FakeExecutor(responses), ip_versions=versions, resolver=_resolver(), prober=_prober()).check("x")
    with ThreadPoolExecutor(max_workers=4) as pool:
        pooled = DomainChecker(config, FakeExecutor(responses), ip_versions=versions, resolver=_resolver(), prober=_prober(), pool=pool).check("x")
    assert pooled.to_dict() == sequential.to_dict()
    assert pooled.outcome(ProbeProtocol.HTTP, IpVersion.V4) == Redirected(302, "<empty>")


def test_probe_pairs_order():
    pairs = probe_pairs([ProbeProtocol.HTTPS, ProbeProtocol.HTTP], [IpVersion.V6, IpVersion.V4])
    assert pairs == [
        (ProbeProtocol.HTTP, IpVersion.V4),
        (ProbeProtocol.HTTP, IpVersion.V6),
        (ProbeProtocol.HTTPS, IpVersion.V4),
        (ProbeProtocol.HTTPS, IpVersion.V6),
    ]
