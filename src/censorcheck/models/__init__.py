# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for censorcheck."""

from ..http.models import Headers, HttpRequest, HttpResponse, RetryConfig
from .outcome import (
    EMPTY_REDIRECT_PLACEHOLDER,
    Available,
    Blocked,
    Denied,
    OtherStatus,
    OutcomeKind,
    ProbeOutcome,
    Redirected,
)
from .report import Report
from .result import DomainResult, ProbeSlot, SlotKey

__all__ = [
    "EMPTY_REDIRECT_PLACEHOLDER",
    "Available",
    "Blocked",
    "Denied",
    "DomainResult",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "OtherStatus",
    "OutcomeKind",
    "ProbeOutcome",
    "ProbeSlot",
    "Redirected",
    "Report",
    "RetryConfig",
    "SlotKey",
]
