"""Shared test fixtures: an in-memory RPC client and account payload builders."""

import struct
from types import SimpleNamespace

import base58
import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from burn_buyer.core.priority_fee.manager import PriorityFeeManager
from burn_buyer.core.pubkeys import SystemAddresses
from burn_buyer.core.wallet import Wallet
from burn_buyer.pumpfun.accounts import BondingCurveState, GlobalState
from burn_buyer.pumpfun.address_provider import PumpFunAddressProvider
from burn_buyer.pumpfun.curve_manager import PumpFunCurveManager
from burn_buyer.pumpfun.instruction_builder import PumpFunInstructionBuilder

DISCRIMINATOR = bytes(8)
FAKE_SIGNATURE = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"


def encode_global(
    *,
    fee_recipient: Pubkey,
    authority: Pubkey | None = None,
    initialized: bool = True,
    initial_virtual_token_reserves: int = 1_073_000_000_000_000,
    initial_virtual_sol_reserves: int = 30_000_000_000,
    initial_real_token_reserves: int = 793_100_000_000_000,
    token_total_supply: int = 1_000_000_000_000_000,
    fee_basis_points: int = 100,
) -> bytes:
    """Raw global account payload in on-chain layout."""
    return (
        DISCRIMINATOR
        + bytes([1 if initialized else 0])
        + bytes(authority or Pubkey.new_unique())
        + bytes(fee_recipient)
        + struct.pack(
            "<5Q",
            initial_virtual_token_reserves,
            initial_virtual_sol_reserves,
            initial_real_token_reserves,
            token_total_supply,
            fee_basis_points,
        )
    )


def encode_curve(
    *,
    creator: Pubkey,
    virtual_token_reserves: int = 1_073_000_000_000_000,
    virtual_sol_reserves: int = 30_000_000_000,
    real_token_reserves: int = 793_100_000_000_000,
    real_sol_reserves: int = 0,
    token_total_supply: int = 1_000_000_000_000_000,
    complete: bool = False,
) -> bytes:
    """Raw bonding curve payload in on-chain layout."""
    return (
        DISCRIMINATOR
        + struct.pack(
            "<5Q",
            virtual_token_reserves,
            virtual_sol_reserves,
            real_token_reserves,
            real_sol_reserves,
            token_total_supply,
        )
        + bytes([1 if complete else 0])
        + bytes(creator)
    )


def token_account(
    owner: Pubkey, mint: Pubkey, token_program: Pubkey = SystemAddresses.TOKEN_PROGRAM
) -> Pubkey:
    return get_associated_token_address(owner, mint, token_program)


def make_account(data: bytes = b"", owner: Pubkey = SystemAddresses.SYSTEM_PROGRAM):
    return SimpleNamespace(data=data, owner=owner, lamports=1_461_600)


class FakeSolanaClient:
    """Stands in for SolanaClient; accounts can be hidden per commitment."""

    def __init__(self):
        self.accounts: dict[Pubkey, SimpleNamespace] = {}
        self.hidden: dict[str, set[Pubkey]] = {}
        self.balances: dict[Pubkey, int] = {}
        self.account_calls: list[tuple[Pubkey, str | None]] = []
        self.sent: list[list] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def get_account_info(self, pubkey, commitment=None):
        self.account_calls.append((pubkey, commitment))
        if pubkey in self.hidden.get(commitment, set()):
            return None
        return self.accounts.get(pubkey)

    async def account_exists(self, pubkey):
        return await self.get_account_info(pubkey) is not None

    async def get_balance(self, pubkey):
        return self.balances.get(pubkey, 0)

    async def send_and_confirm_transaction(
        self, instructions, signer_keypair, commitment="confirmed", skip_preflight=False
    ):
        self.sent.append(list(instructions))
        return FAKE_SIGNATURE


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def wallet(keypair) -> Wallet:
    return Wallet(base58.b58encode(bytes(keypair)).decode())


@pytest.fixture
def mint() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture
def creator() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture
def fee_recipient() -> Pubkey:
    return Pubkey.new_unique()


@pytest.fixture
def address_provider() -> PumpFunAddressProvider:
    return PumpFunAddressProvider()


@pytest.fixture
def fake_client() -> FakeSolanaClient:
    return FakeSolanaClient()


@pytest.fixture
def curve_manager(fake_client, address_provider) -> PumpFunCurveManager:
    return PumpFunCurveManager(fake_client, address_provider)


@pytest.fixture
def instruction_builder(address_provider) -> PumpFunInstructionBuilder:
    return PumpFunInstructionBuilder(address_provider)


@pytest.fixture
def priority_fee_manager() -> PriorityFeeManager:
    return PriorityFeeManager(fixed_fee=50_000, hard_cap=1_000_000)


@pytest.fixture
def global_state(fee_recipient) -> GlobalState:
    return GlobalState(
        initialized=True,
        authority=Pubkey.new_unique(),
        fee_recipient=fee_recipient,
        initial_virtual_token_reserves=1_073_000_000_000_000,
        initial_virtual_sol_reserves=30_000_000_000,
        initial_real_token_reserves=793_100_000_000_000,
        token_total_supply=1_000_000_000_000_000,
        fee_basis_points=100,
    )


@pytest.fixture
def curve_state(creator) -> BondingCurveState:
    return BondingCurveState(
        virtual_token_reserves=1_073_000_000_000_000,
        virtual_sol_reserves=30_000_000_000,
        real_token_reserves=793_100_000_000_000,
        real_sol_reserves=0,
        token_total_supply=1_000_000_000_000_000,
        complete=False,
        creator=creator,
    )


@pytest.fixture
def market(fake_client, address_provider, mint, creator, fee_recipient):
    """Populate the fake chain with a live market for ``mint``."""
    fake_client.accounts[address_provider.derive_global()] = make_account(
        encode_global(fee_recipient=fee_recipient), owner=address_provider.program_id
    )
    fake_client.accounts[address_provider.derive_bonding_curve(mint)] = make_account(
        encode_curve(creator=creator), owner=address_provider.program_id
    )
    fake_client.accounts[mint] = make_account(owner=SystemAddresses.TOKEN_PROGRAM)
    return fake_client
