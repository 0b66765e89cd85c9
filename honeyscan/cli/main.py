"""honeyscan CLI — honeypot risk checker for Base ERC20 tokens.

Usage:
    honeyscan scan <address>        Analyse a token contract
    honeyscan config                Show current configuration
    honeyscan --version             Print version

Examples:
    honeyscan scan 0x4200000000000000000000000000000000000006
    honeyscan scan 833589fcd6edb6e08f4c7c32d4f71b54bda02913 --format json -o usdc.json
    honeyscan scan 0x... --rpc-url https://mainnet.base.org
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
from decimal import Decimal
from pathlib import Path

from honeyscan.core.config import APP_VERSION, get_settings
from honeyscan.core.errors import AnalysisError
from honeyscan.core.logging import setup_logging
from honeyscan.core.types import AnalysisResult, RiskLevel, Severity, TokenInfo

EXIT_OK = 0
EXIT_HIGH_RISK = 1
EXIT_INVALID_INPUT = 2

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


# ── ANSI styling ─────────────────────────────────────────────────────────────

_RESET = "\033[0m"
_BOLD = "\033[1m"
_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"

_SEV_COLOR = {
    Severity.OK: _GREEN,
    Severity.WARNING: _YELLOW,
    Severity.DANGER: _RED,
}

_SEV_ICON = {
    Severity.OK: "✓",
    Severity.WARNING: "!",
    Severity.DANGER: "✗",
}

_LEVEL_COLOR = {
    RiskLevel.LOW: _GREEN,
    RiskLevel.MEDIUM: _YELLOW,
    RiskLevel.HIGH: _RED,
}


def _c(text: str, code: str) -> str:
    return f"{code}{text}{_RESET}"


BANNER = rf"""
{_BOLD}{_CYAN} _
| |__   ___  _ __   ___ _   _ ___  ___ __ _ _ __
| '_ \ / _ \| '_ \ / _ \ | | / __|/ __/ _` | '_ \
| | | | (_) | | | |  __/ |_| \__ \ (_| (_| | | | |
|_| |_|\___/|_| |_|\___|\__, |___/\___\__,_|_| |_|
                        |___/{_RESET}
  {_DIM}Base token honeypot checker — v{APP_VERSION}{_RESET}
"""


# ── Number formatting ────────────────────────────────────────────────────────


def format_number(value: Decimal | float | int) -> str:
    """Two decimals with a K / M / B suffix for large values."""
    n = Decimal(value)
    for threshold, suffix in ((Decimal(10) ** 9, "B"), (Decimal(10) ** 6, "M"), (Decimal(10) ** 3, "K")):
        if n >= threshold:
            return f"{n / threshold:.2f}{suffix}"
    return f"{n:.2f}"


def format_supply(info: TokenInfo) -> str:
    """Total supply scaled by the token's decimals."""
    return format_number(Decimal(info.total_supply) / (Decimal(10) ** info.decimals))


def risk_meter(score: int, width: int = 20) -> str:
    filled = round(score * width / 100)
    return "█" * filled + "░" * (width - filled)


def normalize_cli_address(value: str) -> str | None:
    """Prefix ``0x`` when missing; None when the result is not an address."""
    candidate = value.strip()
    if not candidate.lower().startswith("0x"):
        candidate = "0x" + candidate
    return candidate if _ADDRESS_RE.match(candidate) else None


# ── Arguments ────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="honeyscan",
        description="honeyscan — heuristic honeypot risk checker for Base ERC20 tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Show the honeyscan version")
    parser.add_argument("--no-banner", action="store_true", help="Do not print the ASCII banner")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only print the verdict and findings")

    sub = parser.add_subparsers(dest="command")

    # scan <address>
    scan_p = sub.add_parser("scan", help="Analyse a token contract address")
    scan_p.add_argument("address", help="Token contract address (0x prefix optional)")
    scan_p.add_argument(
        "--format",
        "-f",
        default="table",
        choices=["table", "json"],
        help="Report format (default: table)",
    )
    scan_p.add_argument(
        "--rpc-url",
        action="append",
        dest="rpc_urls",
        metavar="URL",
        help="RPC endpoint to use instead of the defaults (repeatable)",
    )
    scan_p.add_argument("--output", "-o", help="Save the JSON report to this path")

    # config
    sub.add_parser("config", help="Print effective settings with RPC URLs hidden")

    return parser


# ── Commands ─────────────────────────────────────────────────────────────────


def _print_table(result: AnalysisResult, explorer_url: str, quiet: bool = False) -> None:
    """Pretty-print an analysis as a coloured report."""
    level = result.risk_level
    colour = _LEVEL_COLOR[level]
    badge = _c(f" {level.label.upper()} ", colour + _BOLD)

    print(f"\n{_BOLD}Analysis complete{_RESET} — {result.address}")
    print(
        f"  {badge}  Score: {_c(f'{result.display_score}/100', colour)}"
        f"  {_c(risk_meter(result.display_score), colour)}\n"
    )

    if not quiet:
        info = result.token_info
        rows = (
            ("Name", info.name if info else "Unknown"),
            ("Symbol", info.symbol if info else "Unknown"),
            ("Decimals", str(info.decimals) if info else "-"),
            ("Total supply", format_supply(info) if info else "-"),
        )
        for label, value in rows:
            print(f"  {_DIM}{label + ':':<14}{_RESET}{value}")
        print()

    for i, f in enumerate(result.findings, 1):
        sev_col = _SEV_COLOR[f.severity]
        icon = _c(_SEV_ICON[f.severity], sev_col + _BOLD)
        print(f"  {_DIM}{i:>3}.{_RESET} {icon} {_c(f.title, _BOLD)}")
        if f.description and not quiet:
            print(f"       {_DIM}{f.description}{_RESET}")

    counts = result.findings_by_severity()
    print("\n  " + "   ".join(
        _c(f"{_SEV_ICON[sev]} {counts.get(sev.value, 0)} {sev.value}", _SEV_COLOR[sev]) for sev in Severity
    ))
    print(f"\n  Explorer: {_c(explorer_url, _CYAN)}\n")


def _to_json(result: AnalysisResult, explorer_url: str) -> str:
    payload = result.model_dump(mode="json")
    payload["risk_label"] = result.risk_level.label
    payload["display_score"] = result.display_score
    payload["explorer_url"] = explorer_url
    return json.dumps(payload, indent=2)


async def _run_scan(args: argparse.Namespace) -> int:
    """Execute an analysis and print results."""
    from honeyscan.pipeline.orchestrator import analyze

    address = normalize_cli_address(args.address)
    if address is None:
        print(_c(f"Error: '{args.address}' is not a valid contract address.", _RED), file=sys.stderr)
        return EXIT_INVALID_INPUT

    settings = get_settings()
    if args.rpc_urls:
        settings = settings.model_copy(update={"rpc_urls": ",".join(args.rpc_urls)})

    if not args.quiet:
        print(f"  Analysing {_c(address, _CYAN)} on {settings.chain_config.name}…", file=sys.stderr)

    try:
        result = await analyze(address, settings=settings)
    except AnalysisError as exc:
        print(_c(f"\nAnalysis failed: {exc}", _RED), file=sys.stderr)
        return EXIT_HIGH_RISK

    explorer_url = settings.chain_config.explorer_address_url(result.address)

    if args.format == "json":
        output = _to_json(result, explorer_url)
        if args.output:
            Path(args.output).write_text(output)
            if not args.quiet:
                print(f"  Written to {_c(args.output, _CYAN)}", file=sys.stderr)
        else:
            print(output)
    else:
        if args.output:
            Path(args.output).write_text(_to_json(result, explorer_url))
        _print_table(result, explorer_url, quiet=args.quiet)

    return EXIT_HIGH_RISK if result.risk_level is RiskLevel.HIGH else EXIT_OK


REDACTED_SETTINGS = ("rpc_urls",)


def _run_config() -> int:
    settings = get_settings()
    print(f"\n{_BOLD}honeyscan settings{_RESET} ({settings.chain_config.name}, "
          f"{len(settings.rpc_url_list)} RPC endpoint(s))\n")
    for name, value in sorted(settings.model_dump().items()):
        # RPC URLs can carry provider API keys
        if name in REDACTED_SETTINGS:
            value = "****" if value else "(defaults)"
        print(f"  {_DIM}{name}:{_RESET}  {value}")
    print()
    return EXIT_OK


# ── main ─────────────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"honeyscan {APP_VERSION}")
        return 0

    settings = get_settings()
    setup_logging(
        env=settings.app_env,
        log_level="WARNING" if args.quiet else settings.effective_log_level,
    )

    if not args.no_banner and not args.quiet:
        print(BANNER, file=sys.stderr)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "config":
        return _run_config()

    if args.command == "scan":
        return asyncio.run(_run_scan(args))

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
