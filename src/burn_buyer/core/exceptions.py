"""
Exception hierarchy for burn-buyer.

Every precondition failure raised before a transaction is sent has its own
class so callers can tell "token does not exist" apart from "market migrated"
or "not enough SOL" without parsing messages.
"""


class BurnBuyerError(Exception):
    """Base class for all burn-buyer errors."""


class ConfigurationError(BurnBuyerError):
    """Missing or invalid configuration, e.g. no private key available."""


class AccountNotFoundError(BurnBuyerError):
    """An on-chain account the operation depends on does not exist."""

    def __init__(self, message: str, address=None):
        super().__init__(message)
        self.address = address


class NothingToBurnError(AccountNotFoundError):
    """The owner has no token account for the mint being burned."""


class CurveCompleteError(BurnBuyerError):
    """The bonding curve is complete and the token has migrated."""


class InsufficientFundsError(BurnBuyerError):
    """Wallet balance does not cover the maximum cost plus the reserve buffer."""

    def __init__(self, message: str, required: int = 0, available: int = 0):
        super().__init__(message)
        self.required = required
        self.available = available


class FormatError(BurnBuyerError):
    """Malformed input data."""


class InvalidPrivateKeyError(FormatError):
    """Private key is not a valid base58-encoded keypair."""


class AccountDecodeError(FormatError):
    """Account payload does not match the expected binary layout."""


class TransactionSubmissionError(BurnBuyerError):
    """Transaction was rejected, failed on-chain or was not confirmed."""

    def __init__(self, message: str, signature: str | None = None):
        super().__init__(message)
        self.signature = signature


class CurveMathError(BurnBuyerError, ArithmeticError):
    """Bonding-curve arithmetic received inputs that violate its invariants."""
