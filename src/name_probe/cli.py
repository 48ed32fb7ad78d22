"""
Command-line interface for the name probe system.

This module provides the main CLI entry point with commands for:
- check: Check a name across platforms
- suggest: Generate and rank name variations
- cache: Cache management
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from . import __version__
from .audit_logger import AuditLogger
from .config import (
    CacheConfig,
    DnsConfig,
    GitHubConfig,
    HttpConfig,
    LoggingConfig,
    SystemConfig,
    default_cache_dir,
)
from .enums import Platform, ProbeStatus
from .exceptions import ValidationError
from .models import ProbeResult, SuggestionResult
from .orchestrator import NameProbe
from .registry import ProbeRegistry
from .result_cache import ResultCache


DOMAIN_NOTICE = (
    "Note: domain results only reflect DNS records; "
    "a domain without records may still be registered."
)


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(environ.get(name, str(default)))
    except (TypeError, ValueError):
        return default


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(environ.get(name, str(default)))
    except (TypeError, ValueError):
        return default


def load_config_from_env(
    environ: Optional[Mapping[str, str]] = None,
    load_dotenv_file: bool = True,
) -> SystemConfig:
    """
    Build the system configuration from environment variables.

    Recognized variables: GITHUB_TOKEN, CACHE_TTL_AVAILABLE, CACHE_TTL_TAKEN,
    NAME_PROBE_CACHE_DIR, HTTP_TIMEOUT, DNS_TIMEOUT, LOG_LEVEL.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        load_dotenv_file: Load a .env file into os.environ first

    Returns:
        SystemConfig with defaults for missing or malformed values
    """
    if load_dotenv_file:
        load_dotenv()
    if environ is None:
        environ = os.environ

    cache_dir = environ.get("NAME_PROBE_CACHE_DIR", "").strip()

    return SystemConfig(
        cache=CacheConfig(
            cache_dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(),
            ttl_available_seconds=_int_env(environ, "CACHE_TTL_AVAILABLE", 3600),
            ttl_taken_seconds=_int_env(environ, "CACHE_TTL_TAKEN", 86400),
        ),
        github=GitHubConfig(token=(environ.get("GITHUB_TOKEN") or "").strip() or None),
        http=HttpConfig(timeout_seconds=_float_env(environ, "HTTP_TIMEOUT", 10.0)),
        dns=DnsConfig(timeout_seconds=_float_env(environ, "DNS_TIMEOUT", 5.0)),
        logging=LoggingConfig(level=(environ.get("LOG_LEVEL") or "info").strip().lower()),
    )


def parse_platforms(value: str) -> list[str]:
    """Split a comma-separated platform list."""
    return [p.strip().lower() for p in value.split(",") if p.strip()]


def parse_domains(value: str) -> list[str]:
    """Split a comma-separated TLD list, dropping leading dots."""
    return [d.strip().lstrip(".") for d in value.split(",") if d.strip()]


def format_result_line(result: ProbeResult) -> str:
    label = result.name if result.platform == Platform.DOMAIN else result.platform.value
    line = f"  {label:<24} {result.status.value}"
    if result.error:
        line += f" ({result.error})"
    if result.cached:
        line += " [cached]"
    return line


def render_check(name: str, results: list[ProbeResult]) -> str:
    lines = [f"Availability for {name!r}:"]
    lines.extend(format_result_line(r) for r in results)
    available = sum(1 for r in results if r.status == ProbeStatus.AVAILABLE)
    checked = sum(1 for r in results if r.status != ProbeStatus.ERROR)
    lines.append(f"Summary: {available}/{checked} available")
    if any(r.platform == Platform.DOMAIN for r in results):
        lines.append(DOMAIN_NOTICE)
    return "\n".join(lines)


def render_suggestions(suggestions: list[SuggestionResult]) -> str:
    if not suggestions:
        return "No suggestions."
    lines = []
    for suggestion in suggestions:
        summary = ", ".join(
            f"{r.name if r.platform == Platform.DOMAIN else r.platform.value}={r.status.value}"
            for r in suggestion.results
        )
        lines.append(f"  {suggestion.score:>3}%  {suggestion.name:<24} {summary}")
    if any(r.platform == Platform.DOMAIN for s in suggestions for r in s.results):
        lines.append(DOMAIN_NOTICE)
    return "\n".join(lines)


def create_logger(config: SystemConfig, verbose: bool) -> Optional[AuditLogger]:
    if not verbose:
        return None
    return AuditLogger.from_level_name(config.logging.level, output_format=config.logging.output_format)


async def run_check(args: argparse.Namespace, config: SystemConfig) -> int:
    logger = create_logger(config, args.verbose)
    async with NameProbe(config, logger=logger) as prober:
        if not prober.registry.resolve(args.platforms, args.domains):
            print("Error: No probes available for the specified platforms", file=sys.stderr)
            return 1
        results = await prober.check_name(
            args.name,
            platforms=args.platforms,
            tlds=args.domains,
            no_cache=args.no_cache,
        )

    if args.json:
        print(json.dumps(
            {"name": args.name.strip(), "results": [r.to_dict() for r in results]},
            indent=2,
            ensure_ascii=False,
        ))
    else:
        print(render_check(args.name.strip(), results))
    return 0


async def run_suggest(args: argparse.Namespace, config: SystemConfig) -> int:
    logger = create_logger(config, args.verbose)
    async with NameProbe(config, logger=logger) as prober:
        if not prober.registry.resolve(args.platforms, args.domains):
            print("Error: No probes available for the specified platforms", file=sys.stderr)
            return 1
        suggestions = await prober.suggest(
            args.name,
            platforms=args.platforms,
            tlds=args.domains,
            no_cache=args.no_cache,
            max_results=args.count,
        )

    if args.json:
        print(json.dumps([s.to_dict() for s in suggestions], indent=2, ensure_ascii=False))
    else:
        print(render_suggestions(suggestions))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    config = load_config_from_env()
    try:
        return asyncio.run(run_check(args, config))
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


def cmd_suggest(args: argparse.Namespace) -> int:
    """Handle the 'suggest' command."""
    config = load_config_from_env()
    try:
        return asyncio.run(run_suggest(args, config))
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


def cmd_cache(args: argparse.Namespace) -> int:
    """Handle the 'cache' command."""
    config = load_config_from_env()

    if args.action == "clear":
        removed = ResultCache(config.cache).clear()
        print(f"Removed {removed} cache entries from {config.cache.cache_dir}")
        return 0

    if args.action == "path":
        print(config.cache.cache_dir)
        return 0

    return 1


def _add_probe_arguments(parser: argparse.ArgumentParser) -> None:
    platform_names = ",".join(p.value for p in ProbeRegistry.available_platforms())
    default_names = ",".join(p.value for p in ProbeRegistry.default_platforms())
    parser.add_argument(
        "--platforms", "-p",
        type=parse_platforms,
        default=None,
        help=f"Comma-separated platforms ({platform_names}; default: {default_names})",
    )
    parser.add_argument(
        "--domains", "-d",
        type=parse_domains,
        default=None,
        help="Comma-separated TLDs for the domain platform (default: com)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Bypass the result cache",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable log output on stderr",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="name-probe",
        description="Check name availability across code hosts, package registries, social handles and domains",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser(
        "check",
        help="Check a name for availability",
    )
    check_parser.add_argument("name", help="The name to check")
    _add_probe_arguments(check_parser)
    check_parser.set_defaults(func=cmd_check)

    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Generate and check name variations",
    )
    suggest_parser.add_argument("name", help="The base name to generate suggestions from")
    suggest_parser.add_argument(
        "--count", "-c",
        type=int,
        default=10,
        help="Number of suggestions to show (default: 10)",
    )
    _add_probe_arguments(suggest_parser)
    suggest_parser.set_defaults(func=cmd_suggest)

    cache_parser = subparsers.add_parser(
        "cache",
        help="Result cache management",
    )
    cache_parser.add_argument(
        "action",
        choices=["clear", "path"],
        help="Cache action",
    )
    cache_parser.set_defaults(func=cmd_cache)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
