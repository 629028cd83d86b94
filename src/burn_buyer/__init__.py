"""
Buy tokens from a pump.fun bonding curve and burn SPL tokens on Solana.
"""

from burn_buyer.api import (
    burn_tokens,
    buy_token,
    fetch_bonding_curve,
    fetch_global_state,
    quote_buy,
)
from burn_buyer.config import BurnBuyerConfig, load_config_from_env
from burn_buyer.pumpfun.accounts import BondingCurveState, GlobalState
from burn_buyer.pumpfun.curve_manager import calculate_max_sol_cost, calculate_tokens_out
from burn_buyer.trading.base import BurnResult, BuyResult

__version__ = "0.1.0"

__all__ = [
    "BondingCurveState",
    "BurnBuyerConfig",
    "BurnResult",
    "BuyResult",
    "GlobalState",
    "burn_tokens",
    "buy_token",
    "calculate_max_sol_cost",
    "calculate_tokens_out",
    "fetch_bonding_curve",
    "fetch_global_state",
    "load_config_from_env",
    "quote_buy",
]
