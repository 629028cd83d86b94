"""
Top-level entry points: buy from a pump.fun bonding curve and burn tokens.

Each call opens its own RPC connection, reads fresh chain state, submits at
most one transaction and closes the connection. Calls share nothing but the
read-only configuration.
"""

from solders.pubkey import Pubkey

from burn_buyer.config import BurnBuyerConfig, load_config_from_env
from burn_buyer.core.client import SolanaClient
from burn_buyer.core.exceptions import FormatError
from burn_buyer.core.priority_fee.manager import PriorityFeeManager
from burn_buyer.core.wallet import Wallet
from burn_buyer.pumpfun.accounts import BondingCurveState, GlobalState
from burn_buyer.pumpfun.address_provider import PumpFunAddressProvider
from burn_buyer.pumpfun.curve_manager import PumpFunCurveManager, sol_to_lamports
from burn_buyer.pumpfun.instruction_builder import PumpFunInstructionBuilder
from burn_buyer.trading.base import BurnResult, BuyResult
from burn_buyer.trading.burner import TokenBurner
from burn_buyer.trading.buyer import TokenBuyer


def to_pubkey(address: str | Pubkey) -> Pubkey:
    """Accept a base58 string or a Pubkey."""
    if isinstance(address, Pubkey):
        return address
    try:
        return Pubkey.from_string(address.strip())
    except Exception as e:
        raise FormatError(f"Invalid address '{address}': {e}") from e


def resolve_config(
    config: BurnBuyerConfig | None = None,
    private_key: str | None = None,
    rpc_url: str | None = None,
) -> BurnBuyerConfig:
    """Merge explicit arguments over the given or environment configuration."""
    base = config if config is not None else load_config_from_env()
    return base.with_overrides(private_key=private_key, rpc_endpoint=rpc_url)


def create_curve_manager(client: SolanaClient, config: BurnBuyerConfig) -> PumpFunCurveManager:
    return PumpFunCurveManager(
        client,
        PumpFunAddressProvider(config.program_id),
        curve_commitments=config.curve_commitments,
    )


def create_priority_fee_manager(config: BurnBuyerConfig) -> PriorityFeeManager:
    return PriorityFeeManager(config.priority_fee, config.priority_fee_hard_cap)


async def buy_token(
    mint_address: str | Pubkey,
    sol_amount: float,
    slippage_percent: float = 1,
    private_key: str | None = None,
    rpc_url: str | None = None,
    config: BurnBuyerConfig | None = None,
) -> BuyResult:
    """Buy a token from its bonding curve.

    Args:
        mint_address: Token mint
        sol_amount: SOL to spend, in whole SOL
        slippage_percent: Tolerance on the SOL cost in percent
        private_key: Base58 secret key, overrides the configuration
        rpc_url: RPC endpoint, overrides the configuration
        config: Explicit configuration; read from the environment when omitted

    Returns:
        BuyResult with signature, token amount and SOL spent
    """
    cfg = resolve_config(config, private_key, rpc_url)
    wallet = Wallet(cfg.require_private_key())
    mint = to_pubkey(mint_address)

    async with SolanaClient(cfg.rpc_endpoint) as client:
        curve_manager = create_curve_manager(client, cfg)
        buyer = TokenBuyer(
            client,
            wallet,
            curve_manager,
            PumpFunInstructionBuilder(curve_manager.address_provider),
            create_priority_fee_manager(cfg),
            min_balance_buffer=cfg.min_balance_buffer,
            confirm_commitment=cfg.confirm_commitment,
        )
        return await buyer.execute(mint, sol_amount, slippage_percent)


async def burn_tokens(
    mint_address: str | Pubkey,
    token_amount: int,
    private_key: str | None = None,
    rpc_url: str | None = None,
    config: BurnBuyerConfig | None = None,
) -> BurnResult:
    """Burn tokens from the wallet's associated token account.

    Args:
        mint_address: Token mint
        token_amount: Raw amount with decimals already applied
        private_key: Base58 secret key, overrides the configuration
        rpc_url: RPC endpoint, overrides the configuration
        config: Explicit configuration; read from the environment when omitted

    Returns:
        BurnResult with signature and amount burned
    """
    cfg = resolve_config(config, private_key, rpc_url)
    wallet = Wallet(cfg.require_private_key())
    mint = to_pubkey(mint_address)

    async with SolanaClient(cfg.rpc_endpoint) as client:
        burner = TokenBurner(
            client,
            wallet,
            create_priority_fee_manager(cfg),
            confirm_commitment=cfg.confirm_commitment,
        )
        return await burner.execute(mint, token_amount)


async def fetch_global_state(
    rpc_url: str | None = None, config: BurnBuyerConfig | None = None
) -> GlobalState:
    """Read the market's global configuration account."""
    cfg = resolve_config(config, rpc_url=rpc_url)
    async with SolanaClient(cfg.rpc_endpoint) as client:
        return await create_curve_manager(client, cfg).get_global_state()


async def fetch_bonding_curve(
    mint_address: str | Pubkey,
    rpc_url: str | None = None,
    config: BurnBuyerConfig | None = None,
) -> BondingCurveState:
    """Read the bonding curve of a token."""
    cfg = resolve_config(config, rpc_url=rpc_url)
    mint = to_pubkey(mint_address)
    async with SolanaClient(cfg.rpc_endpoint) as client:
        return await create_curve_manager(client, cfg).get_curve_state(mint)


async def quote_buy(
    mint_address: str | Pubkey,
    sol_amount: float,
    rpc_url: str | None = None,
    config: BurnBuyerConfig | None = None,
) -> int:
    """Tokens (raw units) the current curve would give for ``sol_amount`` SOL."""
    cfg = resolve_config(config, rpc_url=rpc_url)
    mint = to_pubkey(mint_address)
    async with SolanaClient(cfg.rpc_endpoint) as client:
        return await create_curve_manager(client, cfg).calculate_buy_amount_out(
            mint, sol_to_lamports(sol_amount)
        )
