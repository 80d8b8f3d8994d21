# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-domain result records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..config import IpVersion, ProbeProtocol
from ..errors import DomainError
from .outcome import ProbeOutcome

SlotKey = tuple[ProbeProtocol, IpVersion]


@dataclass(frozen=True)
class ProbeSlot:
    """Raw observation and classified outcome for one (protocol, IP version) pair."""

    status: int
    redirect_url: str | None
    outcome: ProbeOutcome

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "redirect_url": self.redirect_url}


@dataclass(frozen=True)
class DomainResult:
    """
    Outcome of checking one domain.

    Holds either an error record (``nxdomain`` / ``blocked_by_ip``) or at least one
    probe slot, never both. ``protocols`` and ``ip_versions`` record what was
    attempted, so a missing slot can be told apart from a protocol never tried.
    """

    domain: str
    ip: str | None = None
    ip_reachable: bool | None = None
    error: DomainError | None = None
    slots: Mapping[SlotKey, ProbeSlot] = field(default_factory=dict)
    protocols: tuple[ProbeProtocol, ...] = ()
    ip_versions: tuple[IpVersion, ...] = ()
    trace: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        has_error = self.error is not None
        has_slots = bool(self.slots)
        if has_error == has_slots:
            raise ValueError(f"{self.domain}: a result needs exactly one of an error record or probe slots")
        for protocol, ip_version in self.slots:
            if protocol not in self.protocols or ip_version not in self.ip_versions:
                raise ValueError(f"{self.domain}: slot {protocol.value}/{ip_version.label} was not attempted")
        object.__setattr__(self, "slots", MappingProxyType(dict(self.slots)))

    @classmethod
    def failed(
        cls,
        domain: str,
        error: DomainError,
        *,
        ip: str | None = None,
        trace: Iterable[str] = (),
    ) -> DomainResult:
        return cls(
            domain=domain,
            ip=ip,
            ip_reachable=False if error is DomainError.BLOCKED_BY_IP else None,
            error=error,
            trace=tuple(trace),
        )

    @classmethod
    def probed(
        cls,
        domain: str,
        ip: str,
        slots: Mapping[SlotKey, ProbeSlot],
        *,
        protocols: Iterable[ProbeProtocol],
        ip_versions: Iterable[IpVersion],
        trace: Iterable[str] = (),
    ) -> DomainResult:
        return cls(
            domain=domain,
            ip=ip,
            ip_reachable=True,
            slots=slots,
            protocols=tuple(sorted(protocols, key=lambda p: p.value)),
            ip_versions=tuple(sorted(ip_versions)),
            trace=tuple(trace),
        )

    @property
    def error_code(self) -> str | None:
        return self.error.value if self.error else None

    def slot(self, protocol: ProbeProtocol, ip_version: IpVersion) -> ProbeSlot | None:
        return self.slots.get((protocol, ip_version))

    def outcome(self, protocol: ProbeProtocol, ip_version: IpVersion) -> ProbeOutcome | None:
        slot = self.slot(protocol, ip_version)
        return slot.outcome if slot else None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"service": self.domain}
        if self.error is not None:
            payload["error"] = self.error.message
            payload["error_code"] = self.error.value
            return payload
        for protocol in ProbeProtocol:
            if protocol not in self.protocols:
                continue
            leaves: dict[str, Any] = {}
            for ip_version in IpVersion:
                slot = self.slot(protocol, ip_version)
                leaves[ip_version.label] = slot.to_dict() if slot else None
            payload[protocol.value] = leaves
        return payload


__all__ = ["DomainResult", "ProbeSlot", "SlotKey"]
