"""
Burn operations for SPL tokens held by the wallet.
"""

from solana.rpc.commitment import Commitment, Confirmed
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.instructions import BurnParams, burn, get_associated_token_address

from burn_buyer.core.client import SolanaClient
from burn_buyer.core.exceptions import NothingToBurnError
from burn_buyer.core.priority_fee.manager import PriorityFeeManager
from burn_buyer.core.wallet import Wallet
from burn_buyer.trading.base import BurnResult, Trader
from burn_buyer.utils.logger import get_logger

logger = get_logger(__name__)


class TokenBurner(Trader):
    """Burns tokens from the wallet's associated token account."""

    def __init__(
        self,
        client: SolanaClient,
        wallet: Wallet,
        priority_fee_manager: PriorityFeeManager,
        confirm_commitment: Commitment = Confirmed,
    ):
        """
        Args:
            client: Solana RPC client
            wallet: Wallet for signing transactions
            priority_fee_manager: Supplies the compute unit price instruction
            confirm_commitment: Commitment level to wait for after sending
        """
        self.client = client
        self.wallet = wallet
        self.priority_fee_manager = priority_fee_manager
        self.confirm_commitment = confirm_commitment

    async def execute(self, mint: Pubkey, amount: int) -> BurnResult:
        """Burn ``amount`` raw token units of ``mint``.

        Args:
            mint: Token mint address
            amount: Amount in the token's smallest unit (decimals already applied)

        Returns:
            BurnResult with the signature and amount burned
        """
        logger.info(f"Wallet: {self.wallet.pubkey}")

        instructions = await self.build_burn(mint, self.wallet.pubkey, amount)

        logger.info("Sending transaction...")
        signature = await self.client.send_and_confirm_transaction(
            instructions, self.wallet.keypair, commitment=self.confirm_commitment
        )
        logger.info(f"Burned {amount} tokens. TX: {signature}")

        return BurnResult(signature=signature, amount_burned=amount)

    async def build_burn(self, mint: Pubkey, owner: Pubkey, amount: int) -> list[Instruction]:
        """Assemble the ordered instruction list for a burn.

        Args:
            mint: Token mint address
            owner: Owner of the token account, sole signer
            amount: Amount in raw units

        Returns:
            ``[priority fee, burn]``

        Raises:
            ValueError: If amount is not positive
            AccountNotFoundError: If the mint does not exist
            FormatError: If the mint is not owned by a token program
            NothingToBurnError: If the owner has no token account for the mint
        """
        if amount <= 0:
            raise ValueError(f"Burn amount must be positive, got {amount}")

        token_program = await self._get_token_program(mint)
        token_account = get_associated_token_address(owner, mint, token_program)

        if not await self.client.account_exists(token_account):
            raise NothingToBurnError(
                "Token account does not exist. You don't have any tokens to burn.",
                address=token_account,
            )

        logger.info(f"Burning {amount} tokens from {token_account}...")

        burn_ix = burn(
            BurnParams(
                program_id=token_program,
                account=token_account,
                mint=mint,
                owner=owner,
                amount=amount,
            )
        )
        return [await self.priority_fee_manager.build_instruction(), burn_ix]
