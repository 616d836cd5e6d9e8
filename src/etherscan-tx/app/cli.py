import argparse
import json
import logging
import os
import sys
from typing import Optional

from .config import load_config
from .context import CallContext
from .render import render_transaction
from .service import TransactionService

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Look up an Ethereum transaction through the Etherscan V2 proxy.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log retries and degraded lookups to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup_parser = subparsers.add_parser("lookup", help="Resolve a transaction hash")
    lookup_parser.add_argument(
        "--hash",
        required=True,
        dest="tx_hash",
        help="Transaction hash (0x-prefixed).",
    )
    lookup_parser.add_argument(
        "--network",
        required=False,
        help="Optional network override (mainnet, sepolia or numeric chain id). Defaults to NETWORK env or mainnet.",
    )
    lookup_parser.add_argument(
        "--timeout",
        required=False,
        type=float,
        help="Overall deadline in seconds for the whole lookup, retries included.",
    )
    lookup_parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="json",
        help="Output format.",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_config()
        service = TransactionService(config)

        if args.command == "lookup":
            ctx = CallContext.with_timeout(args.timeout) if args.timeout else CallContext.background()
            record = service.resolve_transaction(ctx, args.tx_hash, args.network)
            if args.format == "text":
                print(render_transaction(record))
            else:
                print(json.dumps(record.to_dict(), indent=2))
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
