# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket

from censorcheck.config import IpVersion
from censorcheck.net import dns, tcp


def _info(address):
    family = socket.AF_INET6 if ":" in address else socket.AF_INET
    sockaddr = (address, 0, 0, 0) if family == socket.AF_INET6 else (address, 0)
    return (family, socket.SOCK_STREAM, 6, "", sockaddr)


def test_resolve_returns_first_address(monkeypatch):
    monkeypatch.setattr(dns.socket, "getaddrinfo", lambda *a, **k: [_info("203.0.113.5"), _info("203.0.113.6")])
    assert dns.resolve("example.com") == "203.0.113.5"


def test_resolve_prefers_configured_family(monkeypatch):
    infos = [_info("2001:db8::1"), _info("203.0.113.5")]
    monkeypatch.setattr(dns.socket, "getaddrinfo", lambda *a, **k: infos)
    assert dns.resolve("example.com", {IpVersion.V4, IpVersion.V6}) == "203.0.113.5"
    assert dns.resolve("example.com", {IpVersion.V6}) == "2001:db8::1"


def test_resolve_falls_back_to_other_family(monkeypatch):
    monkeypatch.setattr(dns.socket, "getaddrinfo", lambda *a, **k: [_info("203.0.113.5")])
    assert dns.resolve("example.com", {IpVersion.V6}) == "203.0.113.5"


def test_resolve_failure_is_none(monkeypatch):
    def fail(*_args, **_kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(dns.socket, "getaddrinfo", fail)
    assert dns.resolve("does-not-exist.invalid") is None


def test_resolve_invalid_label_is_none(monkeypatch):
    def fail(*_args, **_kwargs):
        raise UnicodeError("label too long")

    monkeypatch.setattr(dns.socket, "getaddrinfo", fail)
    assert dns.resolve("a" * 300 + ".com") is None


class _Conn:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


def test_is_reachable_success_uses_port_and_timeout(monkeypatch):
    calls = []

    def connect(address, timeout=None):
        calls.append((address, timeout))
        return _Conn()

    monkeypatch.setattr(tcp.socket, "create_connection", connect)
    assert tcp.is_reachable("203.0.113.5", timeout=3) is True
    assert calls == [(("203.0.113.5", 443), 3)]


def test_is_reachable_failure_is_false_without_retry(monkeypatch):
    calls = []

    def connect(address, timeout=None):
        calls.append(address)
        raise socket.timeout("timed out")

    monkeypatch.setattr(tcp.socket, "create_connection", connect)
    assert tcp.is_reachable("203.0.113.5", 443, 1) is False
    assert len(calls) == 1

    monkeypatch.setattr(tcp.socket, "create_connection", lambda *a, **k: (_ for _ in ()).throw(ConnectionRefusedError()))
    assert tcp.is_reachable("203.0.113.5") is False


def test_host_supports_ipv6_without_stack(monkeypatch):
    monkeypatch.setattr(tcp.socket, "has_ipv6", False)
    assert tcp.host_supports_ipv6() is False


def test_host_supports_ipv6_without_route(monkeypatch):
    class NoRouteSocket:
        def __init__(self, *_args):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return None

        def connect(self, _address):
            raise OSError(101, "Network is unreachable")

    monkeypatch.setattr(tcp.socket, "has_ipv6", True)
    monkeypatch.setattr(tcp.socket, "socket", NoRouteSocket)
    assert tcp.host_supports_ipv6() is False
