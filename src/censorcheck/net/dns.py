# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Domain resolution through the OS resolver."""

from __future__ import annotations

import ipaddress
import logging
import socket
from collections.abc import Collection

from ..config import IpVersion

logger = logging.getLogger(__name__)


def _address_version(address: str) -> IpVersion | None:
    try:
        return IpVersion(ipaddress.ip_address(address).version)
    except ValueError:
        return None


def resolve(domain: str, ip_versions: Collection[IpVersion] | None = None) -> str | None:
    """
    Resolve ``domain`` and return the first address found, or None.

    Addresses whose family is in ``ip_versions`` are preferred (IPv4 first); any other
    address is used only when none match. Lookup failures are a normal result.
    """
    try:
        infos = socket.getaddrinfo(domain, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except (OSError, UnicodeError) as exc:
        logger.debug("Resolution failed for %s: %s", domain, exc)
        return None

    addresses: list[str] = []
    for info in infos:
        address = str(info[4][0])
        if address not in addresses:
            addresses.append(address)
    if not addresses:
        return None

    if ip_versions:
        for version in sorted(ip_versions):
            for address in addresses:
                if _address_version(address) == version:
                    return address
    return addresses[0]


__all__ = ["resolve"]
