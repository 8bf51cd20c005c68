"""Entry point for the token risk analyzer (CLI + API server).

Usage:
    token-risk analyze 0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48
    token-risk analyze 0x... --json
    token-risk serve
"""

import argparse
import asyncio
import json
import sys

from loguru import logger

from config.settings import settings
from token_risk.analyzer.engine import analyze_token_async
from token_risk.formatters import format_report
from token_risk.utils.address import InvalidAddressError, normalize_address
from token_risk.utils.logger import setup_logger

EXIT_INVALID_ADDRESS = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="token-risk", description="ERC-20 token risk analyzer")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze one contract address")
    analyze.add_argument("address", help="0x-prefixed contract address")
    analyze.add_argument("--json", action="store_true", help="Print the raw JSON result")

    sub.add_parser("serve", help="Run the HTTP API")
    return parser


async def _analyze(address: str, as_json: bool) -> int:
    try:
        address = normalize_address(address)
    except InvalidAddressError as e:
        logger.error(str(e))
        return EXIT_INVALID_ADDRESS

    result = await analyze_token_async(address, settings)
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_report(result))
    return 0


async def _serve() -> int:
    from token_risk.api.server import run_api_server

    await run_api_server()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logger(
        json_logs=settings.json_logs,
        level=settings.log_level,
        log_file=settings.log_file,
        server=args.command == "serve",
    )

    if args.command == "analyze":
        return asyncio.run(_analyze(args.address, args.json))
    return asyncio.run(_serve())


if __name__ == "__main__":
    sys.exit(main())
