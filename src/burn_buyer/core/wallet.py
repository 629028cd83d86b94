"""
Wallet management for Solana transactions.
"""

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from burn_buyer.core.exceptions import InvalidPrivateKeyError


class Wallet:
    """Signing wallet loaded from a base58 secret key."""

    def __init__(self, private_key: str):
        """Initialize wallet from private key.

        Args:
            private_key: Base58 encoded 64-byte secret key

        Raises:
            InvalidPrivateKeyError: If the key cannot be decoded
        """
        self._keypair = self._load_keypair(private_key)

    @property
    def pubkey(self) -> Pubkey:
        """Get the public key of the wallet."""
        return self._keypair.pubkey()

    @property
    def keypair(self) -> Keypair:
        """Get the keypair for signing transactions."""
        return self._keypair

    @staticmethod
    def _load_keypair(private_key: str) -> Keypair:
        if not private_key:
            raise InvalidPrivateKeyError("Invalid private key format: empty key")
        try:
            private_key_bytes = base58.b58decode(private_key.strip())
            return Keypair.from_bytes(private_key_bytes)
        except Exception as e:
            raise InvalidPrivateKeyError(f"Invalid private key format: {e}") from e
