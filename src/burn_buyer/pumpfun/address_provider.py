"""
Pump.Fun program addresses and PDA derivations.

Every derived address is a pure function of the program id and its seeds,
so nothing here touches the network and nothing is stored between calls.
"""

from dataclasses import dataclass
from typing import Final

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from burn_buyer.core.pubkeys import SystemAddresses

GLOBAL_SEED: Final[bytes] = b"global"
BONDING_CURVE_SEED: Final[bytes] = b"bonding-curve"
CREATOR_VAULT_SEED: Final[bytes] = b"creator-vault"
GLOBAL_VOLUME_ACCUMULATOR_SEED: Final[bytes] = b"global_volume_accumulator"
USER_VOLUME_ACCUMULATOR_SEED: Final[bytes] = b"user_volume_accumulator"
FEE_CONFIG_SEED: Final[bytes] = b"fee_config"
EVENT_AUTHORITY_SEED: Final[bytes] = b"__event_authority"


@dataclass
class PumpFunAddresses:
    """Pump.fun program addresses."""

    PROGRAM: Final[Pubkey] = Pubkey.from_string(
        "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
    )
    FEE_PROGRAM: Final[Pubkey] = Pubkey.from_string(
        "pfeeUxB6jkeY1Hxd7CsFCAjcbHA9rWtchMGdZ6VojVZ"
    )
    # Precomputed PDAs of the mainnet program
    GLOBAL: Final[Pubkey] = Pubkey.from_string(
        "4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf"
    )
    EVENT_AUTHORITY: Final[Pubkey] = Pubkey.from_string(
        "Ce6TQqeHC9p8KetsN6JsjHK7UTZk7nasjjnr7XxXp9F1"
    )


class PumpFunAddressProvider:
    """Derives pump.fun sub-account addresses for a given program id.

    ``find_*`` methods return ``(address, bump)``; ``derive_*`` methods return
    the address only.
    """

    def __init__(
        self,
        program_id: Pubkey = PumpFunAddresses.PROGRAM,
        fee_program_id: Pubkey = PumpFunAddresses.FEE_PROGRAM,
    ):
        """Initialize the provider.

        Args:
            program_id: Bonding-curve market program
            fee_program_id: Fee-management program that owns the fee config
        """
        self._program_id = program_id
        self._fee_program_id = fee_program_id

    @property
    def program_id(self) -> Pubkey:
        """Get the market program id."""
        return self._program_id

    @property
    def fee_program_id(self) -> Pubkey:
        """Get the fee-management program id."""
        return self._fee_program_id

    def find_global(self) -> tuple[Pubkey, int]:
        return Pubkey.find_program_address([GLOBAL_SEED], self._program_id)

    def find_bonding_curve(self, mint: Pubkey) -> tuple[Pubkey, int]:
        return Pubkey.find_program_address(
            [BONDING_CURVE_SEED, bytes(mint)], self._program_id
        )

    def find_global_volume_accumulator(self) -> tuple[Pubkey, int]:
        return Pubkey.find_program_address(
            [GLOBAL_VOLUME_ACCUMULATOR_SEED], self._program_id
        )

    def find_user_volume_accumulator(self, user: Pubkey) -> tuple[Pubkey, int]:
        return Pubkey.find_program_address(
            [USER_VOLUME_ACCUMULATOR_SEED, bytes(user)], self._program_id
        )

    def find_creator_vault(self, creator: Pubkey) -> tuple[Pubkey, int]:
        return Pubkey.find_program_address(
            [CREATOR_VAULT_SEED, bytes(creator)], self._program_id
        )

    def find_fee_config(self) -> tuple[Pubkey, int]:
        # Owned by the fee program, seeded with the market program id
        return Pubkey.find_program_address(
            [FEE_CONFIG_SEED, bytes(self._program_id)], self._fee_program_id
        )

    def find_event_authority(self) -> tuple[Pubkey, int]:
        return Pubkey.find_program_address([EVENT_AUTHORITY_SEED], self._program_id)

    def derive_global(self) -> Pubkey:
        """Derive the global config address.

        Returns:
            Global config address
        """
        return self.find_global()[0]

    def derive_bonding_curve(self, mint: Pubkey) -> Pubkey:
        """Derive the bonding curve address for a token.

        Args:
            mint: Token mint address

        Returns:
            Bonding curve address
        """
        return self.find_bonding_curve(mint)[0]

    def derive_global_volume_accumulator(self) -> Pubkey:
        """Derive the global volume accumulator PDA.

        Returns:
            Global volume accumulator address
        """
        return self.find_global_volume_accumulator()[0]

    def derive_user_volume_accumulator(self, user: Pubkey) -> Pubkey:
        """Derive the user volume accumulator PDA.

        Args:
            user: User address

        Returns:
            User volume accumulator address
        """
        return self.find_user_volume_accumulator(user)[0]

    def derive_creator_vault(self, creator: Pubkey) -> Pubkey:
        """Derive the creator vault address.

        Args:
            creator: Creator address taken from the bonding curve

        Returns:
            Creator vault address
        """
        return self.find_creator_vault(creator)[0]

    def derive_fee_config(self) -> Pubkey:
        """Derive the fee config address under the fee program.

        Returns:
            Fee config address
        """
        return self.find_fee_config()[0]

    def derive_event_authority(self) -> Pubkey:
        """Derive the event authority address.

        Returns:
            Event authority address
        """
        return self.find_event_authority()[0]

    def derive_associated_token_account(
        self,
        owner: Pubkey,
        mint: Pubkey,
        token_program: Pubkey = SystemAddresses.TOKEN_PROGRAM,
    ) -> Pubkey:
        """Derive an associated token account address.

        Used both for the buyer's account and for the bonding curve's own
        token account (where the owner is the bonding curve PDA).

        Args:
            owner: Wallet or PDA that owns the token account
            mint: Token mint address
            token_program: Token program that owns the mint

        Returns:
            Associated token account address
        """
        return get_associated_token_address(owner, mint, token_program)
