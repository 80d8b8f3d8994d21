# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""censorcheck CLI."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, TextIO

from ..config import IpVersion, Mode, ProbeConfig, ProbeProtocol, load_probe_config, protocols_for
from ..domains import select_domains
from ..errors import ConfigError
from ..log import setup_logging
from ..models import DomainResult, OutcomeKind, ProbeOutcome, Report
from ..runtime import CensorCheck

COLOR_WHITE = "\033[97m"
COLOR_RED = "\033[31m"
COLOR_GREEN = "\033[32m"
COLOR_BLUE = "\033[36m"
COLOR_ORANGE = "\033[33m"
COLOR_RESET = "\033[0m"

_KIND_COLORS: dict[OutcomeKind, str] = {
    OutcomeKind.AVAILABLE: COLOR_GREEN,
    OutcomeKind.REDIRECTED: COLOR_BLUE,
    OutcomeKind.DENIED: COLOR_RED,
    OutcomeKind.BLOCKED: COLOR_RED,
    OutcomeKind.OTHER_STATUS: COLOR_ORANGE,
}

SEPARATOR = "--------------------------------"

EXAMPLES = """\
examples:
  censorcheck                              check all predefined domains with default settings
  censorcheck --mode dpi                   check only DPI-blocked sites
  censorcheck --timeout 10 --retries 3     use longer timeout and more retries
  censorcheck --user-agent "MyAgent/1.0"   use custom User-Agent
  censorcheck --file my-domains.txt        check domains from custom file
  censorcheck --domain example.com -4      check one domain over IPv4 only
  censorcheck --proxy 127.0.0.1:1080       route probes through a SOCKS5 proxy

The domain file should contain one domain per line. Lines starting with # are ignored.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="censorcheck",
        description="Checks accessibility of websites that might be blocked by DPI or geolocation restrictions",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-m", "--mode", choices=[m.value for m in Mode], help="Checking mode (default: both)")
    parser.add_argument("-t", "--timeout", type=int, help="Connection timeout in seconds (default: 5)")
    parser.add_argument("-r", "--retries", type=int, help="Number of connection retries (default: 2)")
    parser.add_argument("-u", "--user-agent", help="Custom User-Agent string")
    parser.add_argument("-f", "--file", dest="domains_file", help="Read domains from file instead of built-in lists")
    parser.add_argument("-d", "--domain", dest="single_domain", help="Check a single domain")
    parser.add_argument("-p", "--proxy", help="SOCKS5 proxy as host:port")
    ip_group = parser.add_mutually_exclusive_group()
    ip_group.add_argument("-4", "--ipv4", dest="ip_version", action="store_const", const=4, help="Use IPv4 only")
    ip_group.add_argument("-6", "--ipv6", dest="ip_version", action="store_const", const=6, help="Use IPv6 only")
    parser.add_argument("--protocol", choices=["http", "https", "both"], help="Protocols to check (default: both)")
    parser.add_argument("-w", "--workers", type=int, help="Domains checked in parallel (default: 8)")
    parser.add_argument("-j", "--json", action="store_true", help="Output JSON instead of human-friendly summary")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")
    return parser


def config_from_args(args: argparse.Namespace, base: ProbeConfig | None = None) -> ProbeConfig:
    """Overlay parsed CLI arguments on the environment-backed defaults."""
    config = base or load_probe_config()
    overrides: dict[str, Any] = {}
    if args.mode is not None:
        overrides["mode"] = Mode(args.mode)
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.retries is not None:
        overrides["retries"] = args.retries
    if args.user_agent is not None:
        overrides["user_agent"] = args.user_agent
    if args.domains_file is not None:
        overrides["domains_file"] = args.domains_file
    if args.single_domain is not None:
        overrides["single_domain"] = args.single_domain
    if args.proxy is not None:
        overrides["proxy"] = args.proxy
    if args.ip_version is not None:
        overrides["ip_versions"] = frozenset({IpVersion(args.ip_version)})
    if args.protocol is not None:
        overrides["protocols"] = protocols_for(args.protocol)
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.json:
        overrides["json_output"] = True
    return config.with_overrides(**overrides).validate()


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{COLOR_RESET}" if enabled else text


def format_outcome(outcome: ProbeOutcome, *, color: bool = True) -> str:
    """Render an outcome message with its leading word colored by kind."""
    first, _, rest = outcome.message.partition(" ")
    painted = _paint(first, _KIND_COLORS[outcome.kind], color)
    return f"{painted} {rest}" if rest else painted


def format_domain(result: DomainResult, *, color: bool = True) -> list[str]:
    lines = [f"Testing {_paint(result.domain, COLOR_WHITE, color)}:"]
    if result.error is not None:
        lines.append(f"  {_paint(result.error.message, COLOR_ORANGE, color)}")
        return lines
    show_version = len(result.ip_versions) > 1
    for protocol in ProbeProtocol:
        for ip_version in IpVersion:
            outcome = result.outcome(protocol, ip_version)
            if outcome is None:
                continue
            label = protocol.label + (f" ({ip_version.label.replace('ipv', 'IPv')})" if show_version else "")
            lines.append(f"  {_paint(label, COLOR_WHITE, color)}: {format_outcome(outcome, color=color)}")
    return lines


def _print_header(config: ProbeConfig, *, color: bool, out: TextIO) -> None:
    def value(text: Any) -> str:
        return _paint(str(text), COLOR_WHITE, color)

    print(f"Timeout set to: {value(f'{config.timeout}s')}", file=out)
    print(f"Retries set to: {value(config.retries)}", file=out)
    if config.single_domain:
        print(f"Domain mode set to: {value('single domain ' + config.single_domain)}", file=out)
    elif config.domains_file:
        print(f"Domain mode set to: {value('user domains from ' + config.domains_file)}", file=out)
    else:
        mode_names = {Mode.DPI: "DPI", Mode.GEOBLOCK: "Geoblock", Mode.BOTH: "DPI and Geoblock"}
        print(f"Mode set to: {value(mode_names[config.mode])}", file=out)
        print(f"Domain mode set to: {value('predefined domains')}", file=out)
    print(f"User-Agent set to: {value(config.user_agent)}", file=out)
    if config.proxy:
        print(f"Proxy set to: {value(config.proxy)}", file=out)


def _pretty_print(report: Report, *, color: bool = True, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    versions = ", ".join(f"IPv{v.value}" for v in sorted(report.effective_ip_versions))
    print(f"IP versions: {_paint(versions, COLOR_WHITE, color)}", file=out)
    for result in report.results:
        print(f"\n{SEPARATOR}\n", file=out)
        for line in format_domain(result, color=color):
            print(line, file=out)
    summary = report.summary()
    if summary:
        print(f"\n{SEPARATOR}\n", file=out)
        print("Summary: " + ", ".join(f"{key}={count}" for key, count in sorted(summary.items())), file=out)


def _print_json(report: Report, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    json.dump(report.to_dict(), out, indent=2)
    out.write("\n")


def _error(message: str, *, color: bool) -> None:
    print(f"[{_paint('ERROR', COLOR_RED, color)}] {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    color = not args.no_color and "NO_COLOR" not in os.environ and sys.stdout.isatty()

    try:
        config = config_from_args(args)
        domains = select_domains(config)
        if not config.json_output:
            _print_header(config, color=color, out=sys.stdout)
        with CensorCheck(config) as checker:
            report = checker.check(domains)
    except ConfigError as exc:
        _error(str(exc), color=color)
        return 1
    except KeyboardInterrupt:
        _error("Interrupted", color=color)
        return 130

    if config.json_output:
        _print_json(report)
    else:
        _pretty_print(report, color=color)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
