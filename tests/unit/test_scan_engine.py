# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import time

import pytest

from censorcheck.config import IpVersion, Mode, ProbeConfig, ProbeProtocol
from censorcheck.errors import ConfigError, DomainError
from censorcheck.http.adapters import StubHttpClient
from censorcheck.http.models import HttpResponse
from censorcheck.models.outcome import Available, Redirected
from censorcheck.scan.engine import ScanEngine


def _resolver(known):
    def resolve(domain, ip_versions):  # noqa: ARG001
        return known.get(domain)

    return resolve


def _engine(stub, *, known=None, reachable=None, ipv6=False, proxy_ok=True):
    known = known if known is not None else {}
    reachable = reachable if reachable is not None else set(known.values())
    return ScanEngine(
        stub,
        resolver=_resolver(known),
        prober=lambda ip, port, timeout: ip in reachable,
        ipv6_check=lambda: ipv6,
        proxy_check=lambda host, port, timeout: proxy_ok,
    )


def test_end_to_end_redirect_then_available():
    stub = StubHttpClient(
        {
            "http://x": HttpResponse(ok=True, status_code=301, redirect_url="https://x"),
            "https://x": HttpResponse(ok=True, status_code=200),
        }
    )
    config = ProbeConfig(timeout=5, retries=2, mode=Mode.DPI)
    report = _engine(stub, known={"x": "203.0.113.1"}).run(["x"], config)

    (result,) = report.results
    assert result.to_dict() == {
        "service": "x",
        "http": {"ipv4": {"status": 301, "redirect_url": "https://x"}, "ipv6": None},
        "https": {"ipv4": {"status": 200, "redirect_url": None}, "ipv6": None},
    }
    assert result.outcome(ProbeProtocol.HTTP, IpVersion.V4) == Redirected(301, "https://x")
    assert result.outcome(ProbeProtocol.HTTPS, IpVersion.V4) == Available(200)
    follow = {r.url: r.allow_redirects for r in stub.requests}
    assert follow == {"http://x": False, "https://x": True}


def test_every_domain_yields_one_result_in_input_order(monkeypatch):
    monkeypatch.setattr("censorcheck.http.retry.time.sleep", lambda _: None)
    delays = {"a.example": 0.15, "b.example": 0.05, "c.example": 0.0, "d.example": 0.1}

    def slow_resolver(domain, ip_versions):  # noqa: ARG001
        time.sleep(delays[domain])
        return None if domain == "c.example" else f"198.51.100.{len(domain)}"

    stub = StubHttpClient()
    stub.add("https://a.example", HttpResponse(ok=True, status_code=200))
    engine = ScanEngine(
        stub,
        resolver=slow_resolver,
        prober=lambda ip, port, timeout: True,
        ipv6_check=lambda: False,
    )
    domains = ["a.example", "b.example", "c.example", "d.example"]
    report = engine.run(domains, ProbeConfig(max_workers=4, retries=0))

    assert report.domains == domains
    assert [r.error for r in report.results] == [None, None, DomainError.NXDOMAIN, None]
    assert report.results[0].outcome(ProbeProtocol.HTTPS, IpVersion.V4) == Available(200)
    assert report.results[1].slot(ProbeProtocol.HTTPS, IpVersion.V4).status == 0


def test_total_network_failure_still_reports_every_domain(monkeypatch):
    monkeypatch.setattr("censorcheck.http.retry.time.sleep", lambda _: None)
    stub = StubHttpClient()
    known = {"one.example": "203.0.113.1", "two.example": "203.0.113.2"}
    report = _engine(stub, known=known).run(list(known), ProbeConfig(retries=1))

    assert len(report.results) == 2
    for result in report.results:
        assert {slot.status for slot in result.slots.values()} == {0}
    assert report.summary() == {"blocked": 4}
    assert len(stub.requests) == 2 * 2 * 2


def test_blocked_by_ip_domain_gets_no_http_requests():
    stub = StubHttpClient()
    report = _engine(stub, known={"x": "203.0.113.1"}, reachable=set()).run(["x"], ProbeConfig())
    assert report.results[0].to_dict() == {"service": "x", "error": "Blocked by IP", "error_code": "blocked_by_ip"}
    assert stub.requests == []


def test_dual_stack_when_host_supports_ipv6():
    stub = StubHttpClient({"https://x": HttpResponse(ok=True, status_code=200)})
    config = ProbeConfig(protocols=frozenset({ProbeProtocol.HTTPS}))
    report = _engine(stub, known={"x": "203.0.113.1"}, ipv6=True).run(["x"], config)

    assert report.ipv6_available is True
    assert report.effective_ip_versions == frozenset({IpVersion.V4, IpVersion.V6})
    assert report.results[0].to_dict() == {
        "service": "x",
        "https": {"ipv4": {"status": 200, "redirect_url": None}, "ipv6": {"status": 200, "redirect_url": None}},
    }
    assert sorted(r.ip_version for r in stub.requests) == [IpVersion.V4, IpVersion.V6]


def test_dual_stack_degrades_to_ipv4_without_host_support():
    stub = StubHttpClient({"https://x": HttpResponse(ok=True, status_code=200)})
    report = _engine(stub, known={"x": "203.0.113.1"}, ipv6=False).run(["x"], ProbeConfig())
    assert report.effective_ip_versions == frozenset({IpVersion.V4})
    assert all(r.ip_version is IpVersion.V4 for r in stub.requests)


def test_ipv6_only_without_host_support_is_config_error():
    stub = StubHttpClient()
    with pytest.raises(ConfigError):
        _engine(stub, known={"x": "2001:db8::1"}).run(["x"], ProbeConfig(ip_versions=frozenset({IpVersion.V6})))
    assert stub.requests == []


def test_unreachable_proxy_is_config_error():
    with pytest.raises(ConfigError, match="not reachable"):
        _engine(StubHttpClient(), proxy_ok=False).run(["x"], ProbeConfig(proxy="127.0.0.1:1080"))


def test_invalid_config_fails_before_probing():
    stub = StubHttpClient()
    with pytest.raises(ConfigError):
        _engine(stub, known={"x": "203.0.113.1"}).run(["x"], ProbeConfig(timeout=0))
    assert stub.requests == []


def test_empty_domain_list_gives_empty_report():
    report = _engine(StubHttpClient()).run([], ProbeConfig())
    assert report.results == ()
    assert report.to_dict()["results"] == []


def test_engine_closes_only_clients_it_created(monkeypatch):
    created = []

    class ClosingStub(StubHttpClient):
        def __init__(self):
            super().__init__()
            created.append(self)

    monkeypatch.setattr("censorcheck.scan.engine.create_default_http_client", lambda config: ClosingStub())
    engine = ScanEngine(resolver=_resolver({}), prober=lambda *a: True, ipv6_check=lambda: False)
    engine.run(["x"], ProbeConfig())
    assert created and created[0].closed is True

    injected = StubHttpClient()
    _engine(injected).run(["x"], ProbeConfig())
    assert injected.closed is False
