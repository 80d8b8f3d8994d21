# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Domain list sources: built-in lists, domain files and single targets."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .config import Mode, ProbeConfig
from .errors import ConfigError

DPI_BLOCKED_SITES: tuple[str, ...] = (
    "youtube.com",
    "discord.com",
    "instagram.com",
    "facebook.com",
    "x.com",
    "patreon.com",
    "linkedin.com",
    "rutracker.org",
    "nnmclub.to",
    "digitalocean.com",
    "medium.com",
    "ntc.party",
    "amnezia.org",
    "getoutline.org",
    "mailfence.com",
    "flibusta.is",
    "rezka.ag",
)

GEO_BLOCKED_SITES: tuple[str, ...] = (
    "spotify.com",
    "netflix.com",
    "swagger.io",
    "snyk.io",
    "mongodb.com",
    "autodesk.com",
    "graylog.org",
    "redis.io",
)


def parse_domain_lines(lines: Iterable[str]) -> list[str]:
    """Strip whitespace and drop blank and ``#`` comment lines."""
    domains: list[str] = []
    for line in lines:
        candidate = line.strip()
        if not candidate or candidate.startswith("#"):
            continue
        domains.append(candidate)
    return domains


def read_domains_file(path: str | Path) -> list[str]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"File '{path}' does not exist") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read domain file '{path}': {exc}") from exc
    return parse_domain_lines(text.splitlines())


def builtin_domains(mode: Mode) -> list[str]:
    if mode is Mode.DPI:
        return list(DPI_BLOCKED_SITES)
    if mode is Mode.GEOBLOCK:
        return list(GEO_BLOCKED_SITES)
    return [*DPI_BLOCKED_SITES, *GEO_BLOCKED_SITES]


def select_domains(config: ProbeConfig) -> list[str]:
    """
    Pick the domains for a run.

    A single explicit domain wins over a domain file, which wins over the built-in
    list for the configured mode.
    """
    if config.single_domain:
        domains = [config.single_domain.strip()]
    elif config.domains_file:
        domains = read_domains_file(config.domains_file)
    else:
        domains = builtin_domains(config.mode)
    if not domains:
        raise ConfigError("No domains to check")
    return domains


__all__ = [
    "DPI_BLOCKED_SITES",
    "GEO_BLOCKED_SITES",
    "builtin_domains",
    "parse_domain_lines",
    "read_domains_file",
    "select_domains",
]
