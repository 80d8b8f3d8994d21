# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TCP-level reachability checks."""

from __future__ import annotations

import logging
import socket

from ..config import REACHABILITY_PORT

logger = logging.getLogger(__name__)

# Any global unicast address works; connect() on a UDP socket only consults the routing table.
_IPV6_PROBE_ADDRESS = ("2001:4860:4860::8888", 53)


def is_reachable(ip: str, port: int = REACHABILITY_PORT, timeout: float = 5.0) -> bool:
    """
    Open and immediately close a TCP connection to ``ip:port``.

    A single attempt with no retries; any connection failure or timeout yields False.
    """
    try:
        with socket.create_connection((ip, port), timeout=timeout):
            pass
    except OSError as exc:
        logger.debug("TCP connect to %s:%s failed: %s", ip, port, exc)
        return False
    logger.debug("TCP connect to %s:%s succeeded", ip, port)
    return True


def host_supports_ipv6() -> bool:
    """Return True when the host has an IPv6 stack and a route to the IPv6 internet."""
    if not socket.has_ipv6:
        return False
    try:
        with socket.socket(socket.AF_INET6, socket.SOCK_DGRAM) as sock:
            sock.connect(_IPV6_PROBE_ADDRESS)
    except OSError as exc:
        logger.debug("IPv6 unavailable on this host: %s", exc)
        return False
    return True


__all__ = ["host_supports_ipv6", "is_reachable"]
