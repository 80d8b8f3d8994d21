# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe outcome variants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from ..errors import BlockReason

EMPTY_REDIRECT_PLACEHOLDER = "<empty>"


class OutcomeKind(str, Enum):
    AVAILABLE = "available"
    REDIRECTED = "redirected"
    DENIED = "denied"
    OTHER_STATUS = "other_status"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Available:
    status: int = 200
    kind: ClassVar[OutcomeKind] = OutcomeKind.AVAILABLE

    @property
    def message(self) -> str:
        return f"Available ({self.status})"


@dataclass(frozen=True)
class Redirected:
    status: int
    target_url: str = EMPTY_REDIRECT_PLACEHOLDER
    kind: ClassVar[OutcomeKind] = OutcomeKind.REDIRECTED

    @property
    def message(self) -> str:
        return f"Redirected ({self.status}) to {self.target_url}"


@dataclass(frozen=True)
class Denied:
    status: int = 403
    kind: ClassVar[OutcomeKind] = OutcomeKind.DENIED

    @property
    def message(self) -> str:
        return f"Denied ({self.status})"


@dataclass(frozen=True)
class OtherStatus:
    status: int
    kind: ClassVar[OutcomeKind] = OutcomeKind.OTHER_STATUS

    @property
    def message(self) -> str:
        return f"Responded with status code {self.status}"


@dataclass(frozen=True)
class Blocked:
    """No usable response: never connected, or every retry failed."""

    reason: BlockReason = BlockReason.TIMEOUT
    timeout: int = 0
    kind: ClassVar[OutcomeKind] = OutcomeKind.BLOCKED

    @property
    def status(self) -> int:
        return 0

    @property
    def message(self) -> str:
        message = f"Blocked or site didn't respond after {self.timeout}s timeout"
        if self.reason is BlockReason.TRANSPORT_ERROR:
            message = f"{message} (connection error)"
        return message


ProbeOutcome = Union[Available, Redirected, Denied, OtherStatus, Blocked]


__all__ = [
    "EMPTY_REDIRECT_PLACEHOLDER",
    "Available",
    "Blocked",
    "Denied",
    "OtherStatus",
    "OutcomeKind",
    "ProbeOutcome",
    "Redirected",
]
