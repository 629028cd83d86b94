"""
Configuration for burn-buyer.

Values come from function arguments, then environment variables (optionally
loaded from a .env file), then the defaults below. The resulting
BurnBuyerConfig is immutable and passed explicitly to whatever needs it.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Final

from dotenv import find_dotenv, load_dotenv
from solders.pubkey import Pubkey

from burn_buyer.core.exceptions import ConfigurationError
from burn_buyer.pumpfun.address_provider import PumpFunAddresses

DEFAULT_RPC_ENDPOINT: Final[str] = "https://api.mainnet-beta.solana.com"
DEFAULT_PRIORITY_FEE_MICROLAMPORTS: Final[int] = 50_000
DEFAULT_PRIORITY_FEE_HARD_CAP: Final[int] = 1_000_000
MIN_BALANCE_BUFFER: Final[int] = 5_000
DEFAULT_CURVE_COMMITMENTS: Final[tuple[str, str]] = ("finalized", "confirmed")
DEFAULT_CONFIRM_COMMITMENT: Final[str] = "confirmed"

VALID_COMMITMENTS: Final[tuple[str, ...]] = ("processed", "confirmed", "finalized")

# Environment variable names
ENV_RPC_ENDPOINT: Final[str] = "SOLANA_RPC_ENDPOINT"
ENV_PRIVATE_KEY: Final[str] = "SOLANA_PRIVATE_KEY"
ENV_PROGRAM_ID: Final[str] = "PUMPFUN_PROGRAM_ID"
ENV_PRIORITY_FEE: Final[str] = "PRIORITY_FEE_MICROLAMPORTS"


@dataclass(frozen=True)
class BurnBuyerConfig:
    """Read-only settings shared by buy and burn calls."""

    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT
    private_key: str | None = field(default=None, repr=False)
    program_id: Pubkey = PumpFunAddresses.PROGRAM
    priority_fee: int = DEFAULT_PRIORITY_FEE_MICROLAMPORTS
    priority_fee_hard_cap: int = DEFAULT_PRIORITY_FEE_HARD_CAP
    min_balance_buffer: int = MIN_BALANCE_BUFFER
    curve_commitments: tuple[str, str] = DEFAULT_CURVE_COMMITMENTS
    confirm_commitment: str = DEFAULT_CONFIRM_COMMITMENT

    def __post_init__(self):
        if not self.rpc_endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid RPC endpoint '{self.rpc_endpoint}'. Must start with http:// or https://"
            )
        if self.priority_fee < 0:
            raise ConfigurationError("priority_fee must be a non-negative integer")
        if self.priority_fee_hard_cap < 0:
            raise ConfigurationError("priority_fee_hard_cap must be a non-negative integer")
        if self.min_balance_buffer < 0:
            raise ConfigurationError("min_balance_buffer must be a non-negative integer")
        if len(self.curve_commitments) != 2:
            raise ConfigurationError("curve_commitments must hold exactly two levels")
        for commitment in (*self.curve_commitments, self.confirm_commitment):
            if commitment not in VALID_COMMITMENTS:
                raise ConfigurationError(
                    f"Invalid commitment '{commitment}'. Must be one of {VALID_COMMITMENTS}"
                )

    def with_overrides(self, **overrides) -> "BurnBuyerConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def require_private_key(self) -> str:
        """Return the private key or fail when none is configured.

        Raises:
            ConfigurationError: If no key material is available
        """
        if not self.private_key:
            raise ConfigurationError(
                f"Private key is required. Provide it as parameter or set {ENV_PRIVATE_KEY} env variable"
            )
        return self.private_key


def parse_program_id(value: str) -> Pubkey:
    """Parse a base58 program id, raising ConfigurationError on bad input."""
    try:
        return Pubkey.from_string(value.strip())
    except Exception as e:
        raise ConfigurationError(f"Invalid program id '{value}': {e}") from e


def load_config_from_env(env_file: str | None = None, **overrides) -> BurnBuyerConfig:
    """Build a configuration from the environment.

    Args:
        env_file: Optional .env file; when omitted a .env in the working
            directory or its parents is used if present
        **overrides: Field values that take precedence over the environment

    Returns:
        BurnBuyerConfig
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    values: dict = {}
    rpc_endpoint = os.getenv(ENV_RPC_ENDPOINT)
    if rpc_endpoint:
        values["rpc_endpoint"] = rpc_endpoint
    private_key = os.getenv(ENV_PRIVATE_KEY)
    if private_key:
        values["private_key"] = private_key
    program_id = os.getenv(ENV_PROGRAM_ID)
    if program_id:
        values["program_id"] = parse_program_id(program_id)
    priority_fee = os.getenv(ENV_PRIORITY_FEE)
    if priority_fee:
        try:
            values["priority_fee"] = int(priority_fee)
        except ValueError as e:
            raise ConfigurationError(
                f"{ENV_PRIORITY_FEE} must be an integer, got '{priority_fee}'"
            ) from e

    values.update({k: v for k, v in overrides.items() if v is not None})
    return BurnBuyerConfig(**values)
