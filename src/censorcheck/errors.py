# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
from enum import Enum

import httpx


class ConfigError(ValueError):
    """Raised for invalid run configuration, before any probing starts."""


class BlockReason(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"


class DomainError(str, Enum):
    NXDOMAIN = "nxdomain"
    BLOCKED_BY_IP = "blocked_by_ip"

    @property
    def message(self) -> str:
        return _DOMAIN_ERROR_MESSAGES[self]


_DOMAIN_ERROR_MESSAGES = {
    DomainError.NXDOMAIN: "Domain doesn't exist",
    DomainError.BLOCKED_BY_IP: "Blocked by IP",
}


def block_reason_for(exc: BaseException | None) -> BlockReason:
    """
    Map Python/httpx exceptions to BlockReason.
    """
    if exc is None:
        return BlockReason.TIMEOUT
    if isinstance(exc, (httpx.TimeoutException, socket.timeout, TimeoutError)):
        return BlockReason.TIMEOUT
    return BlockReason.TRANSPORT_ERROR


def block_reason_from_name(error_type: str | None) -> BlockReason:
    """Recover a BlockReason from a recorded exception class name."""
    if not error_type:
        return BlockReason.TIMEOUT
    if "Timeout" in error_type or error_type == "timeout":
        return BlockReason.TIMEOUT
    return BlockReason.TRANSPORT_ERROR


__all__ = [
    "BlockReason",
    "ConfigError",
    "DomainError",
    "block_reason_for",
    "block_reason_from_name",
]
