"""
Solana client abstraction for blockchain operations.
"""

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.types import TxOpts
from solders.account import Account
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from burn_buyer.core.exceptions import TransactionSubmissionError
from burn_buyer.utils.logger import get_logger

logger = get_logger(__name__)


class SolanaClient:
    """Abstraction for Solana RPC client operations.

    Nothing fetched through this class is cached: account data and
    blockhashes are read from the node on every call.
    """

    def __init__(self, rpc_endpoint: str, commitment: Commitment = Confirmed):
        """Initialize Solana client with RPC endpoint.

        Args:
            rpc_endpoint: URL of the Solana RPC endpoint
            commitment: Default commitment for reads
        """
        self.rpc_endpoint = rpc_endpoint
        self.commitment = commitment
        self._client: AsyncClient | None = None

    async def __aenter__(self) -> "SolanaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get_client(self) -> AsyncClient:
        """Get or create the AsyncClient instance.

        Returns:
            AsyncClient instance
        """
        if self._client is None:
            self._client = AsyncClient(self.rpc_endpoint, commitment=self.commitment)
        return self._client

    async def close(self) -> None:
        """Close the underlying client connection."""
        if self._client:
            await self._client.close()
            self._client = None

    async def get_account_info(
        self, pubkey: Pubkey, commitment: Commitment | None = None
    ) -> Account | None:
        """Get account info from the blockchain.

        Args:
            pubkey: Public key of the account
            commitment: Commitment level, defaults to the client's

        Returns:
            The account, or None if it does not exist
        """
        client = await self.get_client()
        response = await client.get_account_info(
            pubkey, commitment=commitment or self.commitment, encoding="base64"
        )
        return response.value

    async def account_exists(self, pubkey: Pubkey) -> bool:
        """Check whether an account exists at the default commitment."""
        return await self.get_account_info(pubkey) is not None

    async def get_balance(self, pubkey: Pubkey) -> int:
        """Get the SOL balance of an account.

        Args:
            pubkey: Account address

        Returns:
            Balance in lamports
        """
        client = await self.get_client()
        response = await client.get_balance(pubkey, commitment=self.commitment)
        return response.value

    async def get_latest_blockhash(self) -> tuple[Hash, int]:
        """Get the latest blockhash.

        Returns:
            Tuple of (blockhash, last valid block height)
        """
        client = await self.get_client()
        response = await client.get_latest_blockhash(commitment=self.commitment)
        return response.value.blockhash, response.value.last_valid_block_height

    async def send_and_confirm_transaction(
        self,
        instructions: list[Instruction],
        signer_keypair: Keypair,
        commitment: Commitment = Confirmed,
        skip_preflight: bool = False,
    ) -> str:
        """Sign, send and wait for a transaction to reach the given commitment.

        Instructions are sent exactly in the order given. Nothing is retried:
        a rejected or unconfirmed transaction raises and the caller decides
        what to do next.

        Args:
            instructions: Ordered instructions for the transaction
            signer_keypair: Fee payer and sole signer
            commitment: Commitment level to wait for
            skip_preflight: Whether to skip preflight simulation

        Returns:
            Transaction signature as a base58 string

        Raises:
            TransactionSubmissionError: If sending fails or the transaction
                is not confirmed
        """
        client = await self.get_client()

        try:
            recent_blockhash, last_valid_block_height = await self.get_latest_blockhash()
            message = Message(instructions, signer_keypair.pubkey())
            transaction = Transaction([signer_keypair], message, recent_blockhash)

            tx_opts = TxOpts(skip_preflight=skip_preflight, preflight_commitment=commitment)
            response = await client.send_transaction(transaction, tx_opts)
        except Exception as e:
            logger.error(f"Failed to send transaction: {e!s}")
            raise TransactionSubmissionError(f"Transaction rejected: {e!s}") from e

        signature = response.value
        logger.info(f"Transaction sent: {signature}")

        if not await self.confirm_transaction(
            signature, commitment, last_valid_block_height
        ):
            raise TransactionSubmissionError(
                f"Transaction {signature} failed to confirm", signature=str(signature)
            )
        return str(signature)

    async def confirm_transaction(
        self,
        signature: Signature,
        commitment: Commitment = Confirmed,
        last_valid_block_height: int | None = None,
    ) -> bool:
        """Wait for transaction confirmation.

        Args:
            signature: Transaction signature
            commitment: Confirmation commitment level
            last_valid_block_height: Stop waiting once the blockhash expires

        Returns:
            Whether the transaction was confirmed without an error
        """
        client = await self.get_client()
        try:
            response = await client.confirm_transaction(
                signature,
                commitment=commitment,
                sleep_seconds=1,
                last_valid_block_height=last_valid_block_height,
            )
        except Exception as e:
            logger.error(f"Failed to confirm transaction {signature}: {e!s}")
            return False

        status = response.value[0] if response.value else None
        if status is None:
            logger.error(f"No status returned for transaction {signature}")
            return False
        if status.err is not None:
            logger.error(f"Transaction {signature} failed: {status.err}")
            return False
        return True
