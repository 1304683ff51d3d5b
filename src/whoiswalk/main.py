from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .config.config_parser import (
    build_loader,
    build_servers,
    get_max_referral_hops,
    parse_config_file,
)
from .config.logging_config import init_logging
from .domain import to_ascii
from .exceptions import ServerMismatchError, WhoisConnectionError
from .tld import TldModule
from .tld_server import TldServer

logger = logging.getLogger("whoiswalk.main")

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_MISMATCH = 2
EXIT_CONNECTION = 3
EXIT_NOT_FOUND = 4


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="whoiswalk",
        description="Look up domain registration data, following registry referrals",
    )
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument(
        "-v",
        "--var",
        action="append",
        default=[],
        metavar="KEY=YAML",
        help="Set a config variable (may be repeated)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override logging.level (debug, info, warn, error, crit)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log every query, strict retry and referral hop (sets logging.trace)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Query this WHOIS host instead of the configured server for the zone",
    )
    parser.add_argument(
        "command",
        choices=("lookup", "info", "available"),
        help="lookup: raw response; info: parsed JSON; available: availability",
    )
    parser.add_argument("domain", help="Domain name (Unicode or ASCII)")
    return parser


def _explicit_server(domain: str, host: str) -> TldServer:
    labels = to_ascii(domain).split(".")
    return TldServer(zone=labels[-1] if len(labels) > 1 else domain, host=host)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        An exit code: 0 success, 1 configuration error, 2 no server for the
        zone, 3 connection failure, 4 no registration data found (lookup/info).

    Example use:
        CLI:
            whoiswalk info example.com
            whoiswalk --config whoiswalk.yaml -v TIMEOUT=2000 available example.org
    """
    args = build_arg_parser().parse_args(argv)

    cfg: Dict[str, Any] = {}
    if args.config:
        try:
            cfg = parse_config_file(args.config, cli_vars=args.var)
        except (OSError, ValueError) as exc:
            print(str(exc), file=sys.stderr)
            return EXIT_CONFIG

    log_cfg = dict(cfg.get("logging") or {})
    if args.log_level:
        log_cfg["level"] = args.log_level
    if args.trace:
        log_cfg["trace"] = True
    init_logging(log_cfg)
    if args.config:
        logger.info("Loaded config from %s", args.config)

    try:
        module = TldModule(
            build_loader(cfg),
            build_servers(cfg),
            max_referral_hops=get_max_referral_hops(cfg),
        )
        server = _explicit_server(args.domain, args.host) if args.host else None
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG

    try:
        if args.command == "lookup":
            response = module.lookup_domain(args.domain, server)
            if response is None:
                return EXIT_NOT_FOUND
            sys.stdout.write(response.text)
            return EXIT_OK
        if args.command == "info":
            info = module.load_domain_info(args.domain, server)
            if info is None:
                print(json.dumps(None))
                return EXIT_NOT_FOUND
            print(json.dumps(info.to_dict(), indent=2))
            return EXIT_OK
        info = module.load_domain_info(args.domain, server)
        print("available" if info is None else "registered")
        return EXIT_OK
    except ServerMismatchError as exc:
        logger.error("%s", exc)
        return EXIT_MISMATCH
    except WhoisConnectionError as exc:
        logger.error("Connection failed: %s", exc)
        return EXIT_CONNECTION


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
