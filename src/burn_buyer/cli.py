#!/usr/bin/env python3
"""
Command-line interface for burn-buyer.
"""

import argparse
import asyncio
import json
import sys

from burn_buyer.api import (
    burn_tokens,
    buy_token,
    fetch_bonding_curve,
    fetch_global_state,
    quote_buy,
)
from burn_buyer.config import BurnBuyerConfig, load_config_from_env
from burn_buyer.config_loader import load_config_file
from burn_buyer.core.exceptions import BurnBuyerError
from burn_buyer.utils.logger import get_logger, setup_file_logging

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Buy tokens from pump.fun bonding curves and burn tokens."
    )
    parser.add_argument("--config", type=str, help="YAML configuration file")
    parser.add_argument("--env-file", type=str, help=".env file to load")
    parser.add_argument("--rpc-url", type=str, help="Override the RPC endpoint")
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    buy = subparsers.add_parser("buy", help="Buy a token with SOL")
    buy.add_argument("mint", help="Token mint address")
    buy.add_argument("sol", type=float, help="Amount of SOL to spend")
    buy.add_argument(
        "--slippage", type=float, default=1.0, help="Slippage tolerance in percent (default: 1)"
    )

    burn = subparsers.add_parser("burn", help="Burn tokens from your token account")
    burn.add_argument("mint", help="Token mint address")
    burn.add_argument("amount", type=int, help="Raw amount (decimals already applied)")

    curve = subparsers.add_parser("curve", help="Show a token's bonding curve")
    curve.add_argument("mint", help="Token mint address")

    subparsers.add_parser("global", help="Show the market's global state")

    quote = subparsers.add_parser("quote", help="Quote tokens out for a SOL amount")
    quote.add_argument("mint", help="Token mint address")
    quote.add_argument("sol", type=float, help="Amount of SOL to spend")

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> BurnBuyerConfig:
    if args.config:
        config = load_config_file(args.config)
    else:
        config = load_config_from_env(args.env_file)
    return config.with_overrides(rpc_endpoint=args.rpc_url)


async def run(args: argparse.Namespace) -> dict:
    """Dispatch a parsed command and return a printable result."""
    config = load_config(args)

    if args.command == "buy":
        result = await buy_token(args.mint, args.sol, args.slippage, config=config)
        return result.to_dict()

    if args.command == "burn":
        result = await burn_tokens(args.mint, args.amount, config=config)
        return result.to_dict()

    if args.command == "curve":
        curve = await fetch_bonding_curve(args.mint, config=config)
        return {
            "virtual_token_reserves": str(curve.virtual_token_reserves),
            "virtual_sol_reserves": str(curve.virtual_sol_reserves),
            "real_token_reserves": str(curve.real_token_reserves),
            "real_sol_reserves": str(curve.real_sol_reserves),
            "token_total_supply": str(curve.token_total_supply),
            "complete": curve.complete,
            "creator": str(curve.creator),
            "price_sol": curve.calculate_price(),
        }

    if args.command == "global":
        state = await fetch_global_state(config=config)
        return {
            "initialized": state.initialized,
            "authority": str(state.authority),
            "fee_recipient": str(state.fee_recipient),
            "fee_basis_points": state.fee_basis_points,
            "token_total_supply": str(state.token_total_supply),
        }

    tokens = await quote_buy(args.mint, args.sol, config=config)
    return {"sol": args.sol, "tokens_out": str(tokens)}


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    if args.log_file:
        setup_file_logging(args.log_file)

    try:
        result = asyncio.run(run(args))
    except (BurnBuyerError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
