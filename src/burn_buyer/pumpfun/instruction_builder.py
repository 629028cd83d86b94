"""
Pump.fun instruction builder.

Builds the market's buy instruction and the associated-token-account
creation that may precede it. Account order and mutability follow the
program's IDL exactly; any deviation makes the program reject the
transaction.
"""

import hashlib
import struct

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from spl.token.instructions import create_associated_token_account

from burn_buyer.core.pubkeys import SystemAddresses
from burn_buyer.pumpfun.accounts import BondingCurveState, GlobalState
from burn_buyer.pumpfun.address_provider import PumpFunAddressProvider


def get_instruction_discriminator(name: str) -> bytes:
    """Anchor instruction discriminator: first 8 bytes of sha256("global:<name>")."""
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


BUY_DISCRIMINATOR = get_instruction_discriminator("buy")


class PumpFunInstructionBuilder:
    """Builds pump.fun buy instructions."""

    def __init__(self, address_provider: PumpFunAddressProvider):
        """Initialize the builder.

        Args:
            address_provider: PDA derivations for the market program
        """
        self.address_provider = address_provider

    def build_buy_instruction(
        self,
        mint: Pubkey,
        user: Pubkey,
        amount: int,
        max_sol_cost: int,
        global_state: GlobalState,
        curve_state: BondingCurveState,
        token_program: Pubkey,
    ) -> Instruction:
        """Build the buy instruction.

        Args:
            mint: Token mint address
            user: Buyer's wallet address (signer and payer)
            amount: Tokens to buy, in raw units
            max_sol_cost: Maximum lamports the program may charge
            global_state: Decoded global account, supplies the fee recipient
            curve_state: Decoded bonding curve, supplies the creator
            token_program: Token program that owns the mint

        Returns:
            Buy instruction
        """
        provider = self.address_provider
        bonding_curve = provider.derive_bonding_curve(mint)

        accounts = [
            AccountMeta(pubkey=provider.derive_global(), is_signer=False, is_writable=False),
            AccountMeta(pubkey=global_state.fee_recipient, is_signer=False, is_writable=True),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(
                pubkey=provider.derive_associated_token_account(bonding_curve, mint, token_program),
                is_signer=False,
                is_writable=True,
            ),
            AccountMeta(
                pubkey=provider.derive_associated_token_account(user, mint, token_program),
                is_signer=False,
                is_writable=True,
            ),
            AccountMeta(pubkey=user, is_signer=True, is_writable=True),
            AccountMeta(pubkey=SystemAddresses.SYSTEM_PROGRAM, is_signer=False, is_writable=False),
            AccountMeta(pubkey=token_program, is_signer=False, is_writable=False),
            AccountMeta(
                pubkey=provider.derive_creator_vault(curve_state.creator),
                is_signer=False,
                is_writable=True,
            ),
            AccountMeta(pubkey=provider.derive_event_authority(), is_signer=False, is_writable=False),
            AccountMeta(pubkey=provider.program_id, is_signer=False, is_writable=False),
            AccountMeta(
                pubkey=provider.derive_global_volume_accumulator(),
                is_signer=False,
                is_writable=True,
            ),
            AccountMeta(
                pubkey=provider.derive_user_volume_accumulator(user),
                is_signer=False,
                is_writable=True,
            ),
            AccountMeta(pubkey=provider.derive_fee_config(), is_signer=False, is_writable=False),
            AccountMeta(pubkey=provider.fee_program_id, is_signer=False, is_writable=False),
        ]

        data = BUY_DISCRIMINATOR + struct.pack("<Q", amount) + struct.pack("<Q", max_sol_cost)

        return Instruction(provider.program_id, data, accounts)

    def build_create_ata_instruction(
        self, payer: Pubkey, mint: Pubkey, token_program: Pubkey
    ) -> Instruction:
        """Build the instruction creating the payer's token account for a mint.

        Args:
            payer: Wallet that pays for and owns the new account
            mint: Token mint address
            token_program: Token program that owns the mint

        Returns:
            Create associated token account instruction
        """
        return create_associated_token_account(payer, payer, mint, token_program)
