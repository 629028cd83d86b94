"""
Pump.fun bonding curve manager: account fetching and buy-side pricing.

Pricing uses the constant-product invariant ``x * y = k`` over the curve's
virtual reserves with the protocol fee taken from the SOL input before the
swap. All curve math is integer-only.
"""

from decimal import ROUND_FLOOR, Decimal

from solana.rpc.commitment import Commitment, Confirmed, Finalized
from solders.pubkey import Pubkey

from burn_buyer.core.client import SolanaClient
from burn_buyer.core.exceptions import AccountNotFoundError, CurveMathError
from burn_buyer.core.pubkeys import LAMPORTS_PER_SOL
from burn_buyer.pumpfun.accounts import (
    BASIS_POINTS_DENOMINATOR,
    BondingCurveState,
    GlobalState,
    decode_bonding_curve,
    decode_global_state,
)
from burn_buyer.pumpfun.address_provider import PumpFunAddressProvider
from burn_buyer.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CURVE_COMMITMENTS: tuple[Commitment, Commitment] = (Finalized, Confirmed)


def calculate_tokens_out(
    curve: BondingCurveState, sol_in: int, fee_basis_points: int
) -> int:
    """Calculate the tokens received for a SOL input.

    Args:
        curve: Bonding curve snapshot
        sol_in: SOL to spend, in lamports
        fee_basis_points: Protocol fee rate from the global account

    Returns:
        Tokens out in raw units, always in ``[0, virtual_token_reserves)``

    Raises:
        CurveMathError: If inputs violate the curve invariants
    """
    if sol_in < 0:
        raise CurveMathError(f"SOL input must be non-negative, got {sol_in}")
    if not 0 <= fee_basis_points <= BASIS_POINTS_DENOMINATOR:
        raise CurveMathError(f"Fee rate out of range: {fee_basis_points} bps")
    if curve.virtual_sol_reserves <= 0 or curve.virtual_token_reserves <= 0:
        raise CurveMathError("Bonding curve virtual reserves must be positive")

    fee = sol_in * fee_basis_points // BASIS_POINTS_DENOMINATOR
    if fee > sol_in:
        raise CurveMathError(f"Fee {fee} exceeds SOL input {sol_in}")
    net_sol_in = sol_in - fee

    new_virtual_sol_reserves = curve.virtual_sol_reserves + net_sol_in
    new_virtual_token_reserves = (
        curve.virtual_sol_reserves * curve.virtual_token_reserves
    ) // new_virtual_sol_reserves
    if new_virtual_token_reserves == 0:
        raise CurveMathError(
            f"SOL input {sol_in} would drain all {curve.virtual_token_reserves} virtual tokens"
        )

    return curve.virtual_token_reserves - new_virtual_token_reserves


def calculate_max_sol_cost(sol_in: int, slippage_percent: float) -> int:
    """Upper bound on the SOL the program may charge for a purchase.

    Args:
        sol_in: Intended SOL spend in lamports
        slippage_percent: Tolerance in percent (1 = 1%)

    Returns:
        ``floor(sol_in * (1 + slippage_percent / 100))`` in lamports
    """
    if slippage_percent < 0:
        raise ValueError(f"Slippage must be non-negative, got {slippage_percent}")

    factor = 1 + Decimal(str(slippage_percent)) / 100
    return int((Decimal(sol_in) * factor).to_integral_value(rounding=ROUND_FLOOR))


def sol_to_lamports(sol_amount: float | str | Decimal) -> int:
    """Convert a decimal SOL amount to lamports, rounding down."""
    lamports = Decimal(str(sol_amount)) * LAMPORTS_PER_SOL
    if not lamports.is_finite():
        raise ValueError(f"SOL amount must be finite, got {sol_amount}")
    return int(lamports.to_integral_value(rounding=ROUND_FLOOR))


class PumpFunCurveManager:
    """Fetches pump.fun global and bonding curve accounts.

    Every call reads the chain; snapshots are never cached between calls.
    """

    def __init__(
        self,
        client: SolanaClient,
        address_provider: PumpFunAddressProvider,
        curve_commitments: tuple[Commitment, Commitment] = DEFAULT_CURVE_COMMITMENTS,
    ):
        """Initialize pump.fun curve manager.

        Args:
            client: Solana RPC client
            address_provider: PDA derivations for the market program
            curve_commitments: (preferred, fallback) commitment levels used
                when reading bonding curves
        """
        self.client = client
        self.address_provider = address_provider
        self.curve_commitments = curve_commitments

    async def get_global_state(self) -> GlobalState:
        """Fetch and decode the global config account.

        Raises:
            AccountNotFoundError: If the account does not exist
            AccountDecodeError: If the account data is malformed
        """
        global_address = self.address_provider.derive_global()
        account = await self.client.get_account_info(global_address)
        if account is None:
            raise AccountNotFoundError("Global state not found", address=global_address)

        return decode_global_state(account.data)

    async def get_curve_state(self, mint: Pubkey) -> BondingCurveState:
        """Fetch and decode the bonding curve for a mint.

        The preferred commitment is tried first; a freshly created curve may
        not have reached it yet, so one more read is made at the fallback
        commitment before giving up.

        Args:
            mint: Token mint address

        Raises:
            AccountNotFoundError: If no curve exists at either commitment
            AccountDecodeError: If the account data is malformed
        """
        curve_address = self.address_provider.derive_bonding_curve(mint)
        preferred, fallback = self.curve_commitments

        account = await self.client.get_account_info(curve_address, commitment=preferred)
        if account is None:
            logger.info(
                f"Bonding curve {curve_address} not visible at '{preferred}', retrying at '{fallback}'"
            )
            account = await self.client.get_account_info(curve_address, commitment=fallback)

        if account is None:
            raise AccountNotFoundError(
                f"Bonding curve not found for mint {mint}", address=curve_address
            )

        return decode_bonding_curve(account.data)

    async def calculate_buy_amount_out(self, mint: Pubkey, sol_in: int) -> int:
        """Quote the tokens received for ``sol_in`` lamports at current state.

        Args:
            mint: Token mint address
            sol_in: SOL to spend, in lamports

        Returns:
            Expected tokens out in raw units
        """
        global_state = await self.get_global_state()
        curve_state = await self.get_curve_state(mint)
        return calculate_tokens_out(curve_state, sol_in, global_state.fee_basis_points)
