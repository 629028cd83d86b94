"""Tests for wallet loading and priority fee instructions."""

import base58
import pytest
from solders.compute_budget import set_compute_unit_price

from burn_buyer.core.exceptions import FormatError, InvalidPrivateKeyError
from burn_buyer.core.priority_fee.manager import PriorityFeeManager
from burn_buyer.core.wallet import Wallet


def test_wallet_from_base58(keypair, wallet):
    assert wallet.pubkey == keypair.pubkey()
    assert wallet.keypair == keypair


def test_wallet_strips_whitespace(keypair):
    encoded = base58.b58encode(bytes(keypair)).decode()
    assert Wallet(f"  {encoded}\n").pubkey == keypair.pubkey()


@pytest.mark.parametrize(
    "private_key",
    ["", "not base58 0OIl", base58.b58encode(b"\x01" * 12).decode()],
)
def test_invalid_private_key(private_key):
    with pytest.raises(InvalidPrivateKeyError):
        Wallet(private_key)


def test_invalid_private_key_is_format_error():
    with pytest.raises(FormatError, match="Invalid private key format"):
        Wallet("abc")


@pytest.mark.asyncio
async def test_priority_fee_instruction():
    manager = PriorityFeeManager(fixed_fee=75_000, hard_cap=1_000_000)
    assert await manager.build_instruction() == set_compute_unit_price(75_000)


@pytest.mark.asyncio
async def test_priority_fee_hard_cap():
    manager = PriorityFeeManager(fixed_fee=5_000_000, hard_cap=1_000_000)
    assert await manager.calculate_priority_fee() == 1_000_000


@pytest.mark.asyncio
async def test_zero_priority_fee():
    manager = PriorityFeeManager(fixed_fee=0, hard_cap=0)
    assert await manager.build_instruction() == set_compute_unit_price(0)


@pytest.mark.parametrize("fixed_fee, hard_cap", [(-1, 1_000_000), (50_000, -1), (2**64, 2**64)])
def test_priority_fee_out_of_range(fixed_fee, hard_cap):
    with pytest.raises(ValueError):
        PriorityFeeManager(fixed_fee=fixed_fee, hard_cap=hard_cap)
