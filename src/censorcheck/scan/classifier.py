# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Map a probe observation to a ProbeOutcome."""

from __future__ import annotations

from ..errors import BlockReason
from ..models.outcome import (
    EMPTY_REDIRECT_PLACEHOLDER,
    Available,
    Blocked,
    Denied,
    OtherStatus,
    ProbeOutcome,
    Redirected,
)


def classify(
    status: int | None,
    redirect_target: str | None,
    timeout_seconds: int,
    reason: BlockReason | None = None,
) -> ProbeOutcome:
    """
    Classify a probe result. Pure and total over all status codes.

    Precedence: no status, then the 3xx range, then 200 and 403, then everything else.
    """
    if not status:
        return Blocked(reason=reason or BlockReason.TIMEOUT, timeout=timeout_seconds)
    if 300 <= status < 400:
        return Redirected(status=status, target_url=redirect_target or EMPTY_REDIRECT_PLACEHOLDER)
    if status == 200:
        return Available(status)
    if status == 403:
        return Denied(status)
    return OtherStatus(status)


__all__ = ["classify"]
