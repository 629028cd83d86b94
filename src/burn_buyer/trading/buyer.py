"""
Buy operations for pump.fun tokens.
"""

from solana.rpc.commitment import Commitment, Confirmed
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from burn_buyer.core.client import SolanaClient
from burn_buyer.core.exceptions import (
    AccountNotFoundError,
    CurveCompleteError,
    InsufficientFundsError,
)
from burn_buyer.core.priority_fee.manager import PriorityFeeManager
from burn_buyer.core.pubkeys import LAMPORTS_PER_SOL
from burn_buyer.core.wallet import Wallet
from burn_buyer.pumpfun.accounts import BondingCurveState, GlobalState
from burn_buyer.pumpfun.curve_manager import (
    PumpFunCurveManager,
    calculate_max_sol_cost,
    calculate_tokens_out,
    sol_to_lamports,
)
from burn_buyer.pumpfun.instruction_builder import PumpFunInstructionBuilder
from burn_buyer.trading.base import BuyResult, Trader
from burn_buyer.utils.logger import get_logger

logger = get_logger(__name__)

# Lamports left in the wallet to keep paying network fees after the buy
MIN_BALANCE_BUFFER = 5_000


class TokenBuyer(Trader):
    """Buys tokens from a pump.fun bonding curve."""

    def __init__(
        self,
        client: SolanaClient,
        wallet: Wallet,
        curve_manager: PumpFunCurveManager,
        instruction_builder: PumpFunInstructionBuilder,
        priority_fee_manager: PriorityFeeManager,
        min_balance_buffer: int = MIN_BALANCE_BUFFER,
        confirm_commitment: Commitment = Confirmed,
    ):
        """Initialize token buyer.

        Args:
            client: Solana client for RPC calls
            wallet: Wallet for signing transactions
            curve_manager: Reads global and bonding curve accounts
            instruction_builder: Builds pump.fun instructions
            priority_fee_manager: Supplies the compute unit price instruction
            min_balance_buffer: Lamports that must remain after the max cost
            confirm_commitment: Commitment level to wait for after sending
        """
        self.client = client
        self.wallet = wallet
        self.curve_manager = curve_manager
        self.instruction_builder = instruction_builder
        self.priority_fee_manager = priority_fee_manager
        self.min_balance_buffer = min_balance_buffer
        self.confirm_commitment = confirm_commitment

    async def execute(
        self, mint: Pubkey, sol_amount: float, slippage_percent: float = 1
    ) -> BuyResult:
        """Execute buy operation.

        Args:
            mint: Token mint address
            sol_amount: SOL to spend, in whole SOL
            slippage_percent: Tolerance on the SOL cost in percent

        Returns:
            BuyResult with the signature and the token amount requested
        """
        sol_in = sol_to_lamports(sol_amount)
        if sol_in <= 0:
            raise ValueError(f"SOL amount must be positive, got {sol_amount}")

        logger.info(f"Wallet: {self.wallet.pubkey}")
        logger.info("Fetching bonding curve...")
        global_state = await self.curve_manager.get_global_state()
        curve_state = await self.curve_manager.get_curve_state(mint)
        self._check_curve_active(curve_state)

        max_sol_cost = calculate_max_sol_cost(sol_in, slippage_percent)
        token_amount = calculate_tokens_out(
            curve_state, sol_in, global_state.fee_basis_points
        )
        if token_amount <= 0:
            raise ValueError(f"{sol_amount} SOL is too small to buy any tokens")

        logger.info(
            f"Buying {token_amount} tokens for {sol_amount} SOL ({slippage_percent}% slippage)"
        )

        instructions = await self.build_purchase(
            mint,
            self.wallet.pubkey,
            token_amount,
            max_sol_cost,
            global_state,
            curve_state,
        )

        logger.info("Sending transaction...")
        signature = await self.client.send_and_confirm_transaction(
            instructions, self.wallet.keypair, commitment=self.confirm_commitment
        )
        logger.info(f"Buy transaction confirmed: {signature}")

        return BuyResult(
            signature=signature, token_amount=token_amount, sol_spent=sol_amount
        )

    async def build_purchase(
        self,
        mint: Pubkey,
        buyer: Pubkey,
        token_amount: int,
        max_sol_cost: int,
        global_state: GlobalState | None,
        curve_state: BondingCurveState | None,
    ) -> list[Instruction]:
        """Assemble the ordered instruction list for a purchase.

        The order is fixed: priority fee, token account creation (only when
        the buyer has none for this mint), buy.

        Args:
            mint: Token mint address
            buyer: Buyer's wallet address
            token_amount: Tokens to buy, in raw units
            max_sol_cost: Maximum lamports the program may charge
            global_state: Decoded global account
            curve_state: Decoded bonding curve

        Returns:
            Ordered list of instructions

        Raises:
            AccountNotFoundError: Missing global state, curve or mint
            FormatError: The mint is not owned by a token program
            CurveCompleteError: The curve has migrated
            InsufficientFundsError: Balance below max cost plus buffer
        """
        if global_state is None:
            raise AccountNotFoundError("Global state not found")
        if curve_state is None:
            raise AccountNotFoundError(f"Bonding curve not found for mint {mint}")
        self._check_curve_active(curve_state)

        balance = await self.client.get_balance(buyer)
        required = max_sol_cost + self.min_balance_buffer
        if balance < required:
            raise InsufficientFundsError(
                f"Insufficient balance. Need at least {required / LAMPORTS_PER_SOL} SOL, "
                f"have {balance / LAMPORTS_PER_SOL} SOL",
                required=required,
                available=balance,
            )

        token_program = await self._get_token_program(mint)

        logger.info("Building transaction...")
        instructions = [await self.priority_fee_manager.build_instruction()]

        user_token_account = self.instruction_builder.address_provider.derive_associated_token_account(
            buyer, mint, token_program
        )
        if not await self.client.account_exists(user_token_account):
            logger.info(f"Creating associated token account {user_token_account}")
            instructions.append(
                self.instruction_builder.build_create_ata_instruction(buyer, mint, token_program)
            )

        instructions.append(
            self.instruction_builder.build_buy_instruction(
                mint,
                buyer,
                token_amount,
                max_sol_cost,
                global_state,
                curve_state,
                token_program,
            )
        )
        return instructions

    @staticmethod
    def _check_curve_active(curve_state: BondingCurveState) -> None:
        if curve_state.complete:
            raise CurveCompleteError(
                "Bonding curve is complete - token has migrated and can no longer be bought here"
            )
