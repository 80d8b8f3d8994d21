# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request headers (a browser-like navigation set) and header lookup helpers."""

from __future__ import annotations

from collections.abc import Mapping

BROWSER_HEADERS: dict[str, str] = {
    "Sec-Fetch-Site": "none",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br, zstd",
}


def build_probe_headers(user_agent: str) -> dict[str, str]:
    headers = {"User-Agent": user_agent}
    headers.update(BROWSER_HEADERS)
    return headers


def header_value(headers: Mapping[object, object] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths common key casings before falling back to a full scan.
    """
    if not headers or not name:
        return default

    lower = str(name).lower()
    for key in (name, lower, lower.title()):
        if key in headers:
            value = headers.get(key)
            return default if value is None else str(value).strip()

    for key, value in headers.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


__all__ = ["BROWSER_HEADERS", "build_probe_headers", "header_value"]
