"""
Base interfaces and result types for trading operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from solders.pubkey import Pubkey

from burn_buyer.core.client import SolanaClient
from burn_buyer.core.exceptions import AccountNotFoundError, FormatError
from burn_buyer.core.pubkeys import TOKEN_2022_PROGRAM, TOKEN_PROGRAM


@dataclass
class BuyResult:
    """Result of a confirmed purchase."""

    signature: str
    token_amount: int
    sol_spent: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization.

        The token amount is rendered as a base-10 string so that raw u64
        values survive JSON consumers that parse numbers as doubles.
        """
        return {
            "signature": self.signature,
            "token_amount": str(self.token_amount),
            "sol_spent": self.sol_spent,
        }


@dataclass
class BurnResult:
    """Result of a confirmed burn."""

    signature: str
    amount_burned: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization. Amounts are strings, as in BuyResult."""
        return {
            "signature": self.signature,
            "amount_burned": str(self.amount_burned),
        }


class Trader(ABC):
    """Base interface for operations that end in a single submitted transaction."""

    client: SolanaClient

    @abstractmethod
    async def execute(self, *args, **kwargs) -> Any:
        """Run the operation: read state, build instructions, submit.

        Returns:
            Operation-specific result
        """
        pass

    async def _get_token_program(self, mint: Pubkey) -> Pubkey:
        """Read the program that owns the mint account.

        Mints can live under either the classic token program or Token-2022,
        so the owner is read from chain rather than assumed.

        Args:
            mint: Token mint address

        Returns:
            Owning token program id

        Raises:
            AccountNotFoundError: If the mint account does not exist
            FormatError: If the account is not owned by a token program
        """
        mint_account = await self.client.get_account_info(mint)
        if mint_account is None:
            raise AccountNotFoundError(f"Mint account {mint} does not exist", address=mint)
        if mint_account.owner not in (TOKEN_PROGRAM, TOKEN_2022_PROGRAM):
            raise FormatError(
                f"Account {mint} is not a token mint (owner {mint_account.owner})"
            )
        return mint_account.owner
