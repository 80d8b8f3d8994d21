# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Network-level primitives: DNS resolution and TCP reachability."""

from .dns import resolve
from .tcp import host_supports_ipv6, is_reachable

__all__ = ["host_supports_ipv6", "is_reachable", "resolve"]
