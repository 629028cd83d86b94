"""Tests for account decoding and fetching."""

import struct

import pytest
from solana.rpc.commitment import Confirmed, Finalized
from solders.pubkey import Pubkey

from burn_buyer.core.exceptions import AccountDecodeError, AccountNotFoundError
from burn_buyer.pumpfun.accounts import (
    BONDING_CURVE_SIZE,
    GLOBAL_STATE_SIZE,
    decode_bonding_curve,
    decode_global_state,
)
from tests.conftest import encode_curve, encode_global, make_account


def test_layout_sizes():
    assert GLOBAL_STATE_SIZE == 113
    assert BONDING_CURVE_SIZE == 81


def test_decode_global_state(fee_recipient):
    authority = Pubkey.new_unique()
    state = decode_global_state(
        encode_global(fee_recipient=fee_recipient, authority=authority, fee_basis_points=95)
    )

    assert state.initialized is True
    assert state.authority == authority
    assert state.fee_recipient == fee_recipient
    assert state.initial_virtual_token_reserves == 1_073_000_000_000_000
    assert state.initial_virtual_sol_reserves == 30_000_000_000
    assert state.initial_real_token_reserves == 793_100_000_000_000
    assert state.token_total_supply == 1_000_000_000_000_000
    assert state.fee_basis_points == 95


def test_decode_bonding_curve(creator):
    curve = decode_bonding_curve(
        encode_curve(creator=creator, real_sol_reserves=12_345, complete=True)
    )

    assert curve.virtual_token_reserves == 1_073_000_000_000_000
    assert curve.virtual_sol_reserves == 30_000_000_000
    assert curve.real_sol_reserves == 12_345
    assert curve.complete is True
    assert curve.creator == creator


def test_decode_ignores_trailing_bytes(creator):
    curve = decode_bonding_curve(encode_curve(creator=creator) + bytes(70))
    assert curve.creator == creator


def test_decode_max_u64(creator):
    curve = decode_bonding_curve(encode_curve(creator=creator, token_total_supply=2**64 - 1))
    assert curve.token_total_supply == 2**64 - 1


def test_truncated_curve_is_rejected(creator):
    data = encode_curve(creator=creator)[:-1]
    with pytest.raises(AccountDecodeError, match="too short"):
        decode_bonding_curve(data)


def test_truncated_global_is_rejected(fee_recipient):
    with pytest.raises(AccountDecodeError):
        decode_global_state(encode_global(fee_recipient=fee_recipient)[:50])


def test_global_fee_out_of_range(fee_recipient):
    data = encode_global(fee_recipient=fee_recipient, fee_basis_points=10_001)
    with pytest.raises(AccountDecodeError, match="fee rate"):
        decode_global_state(data)


def test_global_fee_field_offset(fee_recipient):
    data = bytearray(encode_global(fee_recipient=fee_recipient))
    data[105:113] = struct.pack("<Q", 250)
    assert decode_global_state(bytes(data)).fee_basis_points == 250


@pytest.mark.asyncio
async def test_get_global_state(curve_manager, market, fee_recipient):
    state = await curve_manager.get_global_state()
    assert state.fee_recipient == fee_recipient
    assert state.fee_basis_points == 100


@pytest.mark.asyncio
async def test_missing_global_state(curve_manager):
    with pytest.raises(AccountNotFoundError):
        await curve_manager.get_global_state()


@pytest.mark.asyncio
async def test_malformed_curve_is_not_reported_as_absent(
    curve_manager, fake_client, address_provider, mint
):
    fake_client.accounts[address_provider.derive_bonding_curve(mint)] = make_account(bytes(20))
    with pytest.raises(AccountDecodeError):
        await curve_manager.get_curve_state(mint)


@pytest.mark.asyncio
async def test_curve_read_at_preferred_commitment(
    curve_manager, market, address_provider, mint, creator
):
    curve = await curve_manager.get_curve_state(mint)

    assert curve.creator == creator
    curve_address = address_provider.derive_bonding_curve(mint)
    assert [c for a, c in market.account_calls if a == curve_address] == [Finalized]


@pytest.mark.asyncio
async def test_curve_falls_back_to_confirmed(
    curve_manager, market, address_provider, mint, creator
):
    curve_address = address_provider.derive_bonding_curve(mint)
    market.hidden[Finalized] = {curve_address}

    curve = await curve_manager.get_curve_state(mint)

    assert curve.creator == creator
    assert [c for a, c in market.account_calls if a == curve_address] == [Finalized, Confirmed]


@pytest.mark.asyncio
async def test_curve_absent_at_both_commitments(curve_manager, market, address_provider):
    other_mint = Pubkey.new_unique()
    with pytest.raises(AccountNotFoundError, match="Bonding curve not found") as exc_info:
        await curve_manager.get_curve_state(other_mint)
    assert exc_info.value.address == address_provider.derive_bonding_curve(other_mint)


@pytest.mark.asyncio
async def test_calculate_buy_amount_out(curve_manager, market, mint):
    assert await curve_manager.calculate_buy_amount_out(mint, 50_000_000) == 1_767_533_569_611


@pytest.mark.asyncio
async def test_empty_global_account_is_malformed(curve_manager, fake_client, address_provider):
    fake_client.accounts[address_provider.derive_global()] = make_account(b"")
    with pytest.raises(AccountDecodeError, match="too short: 0 bytes"):
        await curve_manager.get_global_state()


@pytest.mark.asyncio
async def test_empty_curve_account_is_malformed(
    curve_manager, fake_client, address_provider, mint
):
    fake_client.accounts[address_provider.derive_bonding_curve(mint)] = make_account(b"")
    with pytest.raises(AccountDecodeError, match="too short: 0 bytes"):
        await curve_manager.get_curve_state(mint)
