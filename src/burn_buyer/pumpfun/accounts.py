"""
Pump.fun account layouts and decoders.

Both accounts are Anchor accounts: an 8-byte discriminator followed by
little-endian fields in declaration order (bool = 1 byte, pubkey = 32 bytes,
u64 = 8 bytes). The discriminator is not checked.
"""

from dataclasses import dataclass
from typing import Final

from construct import Bytes, ConstructError, Flag, Int64ul, Struct
from solders.pubkey import Pubkey

from burn_buyer.core.exceptions import AccountDecodeError
from burn_buyer.core.pubkeys import LAMPORTS_PER_SOL, TOKEN_DECIMALS

BASIS_POINTS_DENOMINATOR: Final[int] = 10_000

GLOBAL_LAYOUT = Struct(
    "discriminator" / Bytes(8),
    "initialized" / Flag,
    "authority" / Bytes(32),
    "fee_recipient" / Bytes(32),
    "initial_virtual_token_reserves" / Int64ul,
    "initial_virtual_sol_reserves" / Int64ul,
    "initial_real_token_reserves" / Int64ul,
    "token_total_supply" / Int64ul,
    "fee_basis_points" / Int64ul,
)

BONDING_CURVE_LAYOUT = Struct(
    "discriminator" / Bytes(8),
    "virtual_token_reserves" / Int64ul,
    "virtual_sol_reserves" / Int64ul,
    "real_token_reserves" / Int64ul,
    "real_sol_reserves" / Int64ul,
    "token_total_supply" / Int64ul,
    "complete" / Flag,
    "creator" / Bytes(32),
)

GLOBAL_STATE_SIZE: Final[int] = GLOBAL_LAYOUT.sizeof()
BONDING_CURVE_SIZE: Final[int] = BONDING_CURVE_LAYOUT.sizeof()


@dataclass
class GlobalState:
    """Pump.fun global configuration account."""

    initialized: bool
    authority: Pubkey
    fee_recipient: Pubkey
    initial_virtual_token_reserves: int
    initial_virtual_sol_reserves: int
    initial_real_token_reserves: int
    token_total_supply: int
    fee_basis_points: int


@dataclass
class BondingCurveState:
    """Represents the state of a pump.fun bonding curve."""

    virtual_token_reserves: int
    virtual_sol_reserves: int
    real_token_reserves: int
    real_sol_reserves: int
    token_total_supply: int
    complete: bool
    creator: Pubkey

    @property
    def token_reserves(self) -> float:
        """Token reserves in decimal form."""
        return self.virtual_token_reserves / 10**TOKEN_DECIMALS

    @property
    def sol_reserves(self) -> float:
        """SOL reserves in decimal form."""
        return self.virtual_sol_reserves / LAMPORTS_PER_SOL

    def calculate_price(self) -> float:
        """Calculate current spot price in SOL per whole token."""
        if self.virtual_token_reserves <= 0:
            return 0.0

        price_lamports = self.virtual_sol_reserves / self.virtual_token_reserves
        return price_lamports * (10**TOKEN_DECIMALS) / LAMPORTS_PER_SOL


def decode_global_state(data: bytes) -> GlobalState:
    """Decode the global account payload.

    Args:
        data: Raw account data

    Returns:
        Decoded GlobalState

    Raises:
        AccountDecodeError: If the payload is too short or the fee rate is
            outside [0, 10000] basis points
    """
    parsed = _parse(GLOBAL_LAYOUT, data, GLOBAL_STATE_SIZE, "global")

    if parsed.fee_basis_points > BASIS_POINTS_DENOMINATOR:
        raise AccountDecodeError(
            f"Global account fee rate out of range: {parsed.fee_basis_points} bps"
        )

    return GlobalState(
        initialized=parsed.initialized,
        authority=Pubkey.from_bytes(parsed.authority),
        fee_recipient=Pubkey.from_bytes(parsed.fee_recipient),
        initial_virtual_token_reserves=parsed.initial_virtual_token_reserves,
        initial_virtual_sol_reserves=parsed.initial_virtual_sol_reserves,
        initial_real_token_reserves=parsed.initial_real_token_reserves,
        token_total_supply=parsed.token_total_supply,
        fee_basis_points=parsed.fee_basis_points,
    )


def decode_bonding_curve(data: bytes) -> BondingCurveState:
    """Decode a bonding curve account payload.

    Args:
        data: Raw account data

    Returns:
        Decoded BondingCurveState

    Raises:
        AccountDecodeError: If the payload is too short
    """
    parsed = _parse(BONDING_CURVE_LAYOUT, data, BONDING_CURVE_SIZE, "bonding curve")

    return BondingCurveState(
        virtual_token_reserves=parsed.virtual_token_reserves,
        virtual_sol_reserves=parsed.virtual_sol_reserves,
        real_token_reserves=parsed.real_token_reserves,
        real_sol_reserves=parsed.real_sol_reserves,
        token_total_supply=parsed.token_total_supply,
        complete=parsed.complete,
        creator=Pubkey.from_bytes(parsed.creator),
    )


def _parse(layout: Struct, data: bytes, size: int, name: str):
    if data is None or len(data) < size:
        length = 0 if data is None else len(data)
        raise AccountDecodeError(
            f"{name.capitalize()} account data too short: {length} bytes, expected {size}"
        )
    try:
        return layout.parse(bytes(data[:size]))
    except ConstructError as e:
        raise AccountDecodeError(f"Failed to decode {name} account: {e}") from e
