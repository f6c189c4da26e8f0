from __future__ import annotations

import pytest

from faucet.constants import (MAINNET_CHAIN_IDS, MAX_CLAIM_THRESHOLD,
                              MIN_COOLDOWN_THRESHOLD, ZERO_ADDRESS)
from faucet.errors import (InvalidContractInteraction, InvalidCooldown,
                           MainnetIdDenied, NotOwner, OutOfCapacity,
                           SystemPaused, Unchanged, ValidationError,
                           ZeroAmount)

from .conftest import CHAIN_ID, COOLDOWN, PAYOUT


def _names(faucet):
    return [r.name for r in faucet.sink.records()]


# ---------------------------- payout amount -----------------------------------


def test_payout_amount_at_threshold_is_accepted(faucet, owner):
    faucet.update_payout_amount(owner, MAX_CLAIM_THRESHOLD)
    assert faucet.payout_amount == MAX_CLAIM_THRESHOLD
    ev = faucet.sink.last().event
    assert ev.NAME == "PayoutAmountUpdated"
    assert ev.args() == {"old": PAYOUT, "new": MAX_CLAIM_THRESHOLD}


def test_payout_amount_above_threshold_is_rejected(faucet, owner):
    with pytest.raises(OutOfCapacity) as ei:
        faucet.update_payout_amount(owner, MAX_CLAIM_THRESHOLD + 1)
    assert ei.value.value == MAX_CLAIM_THRESHOLD + 1
    assert faucet.payout_amount == PAYOUT
    assert _names(faucet) == []


def test_zero_payout_amount_is_rejected(faucet, owner):
    with pytest.raises(ZeroAmount):
        faucet.update_payout_amount(owner, 0)
    assert faucet.payout_amount == PAYOUT


def test_payout_amount_must_be_an_integer(faucet, owner):
    with pytest.raises(ValidationError) as ei:
        faucet.update_payout_amount(owner, True)
    assert ei.value.code == "INVALID_TYPE"


# ---------------------------- cooldown ----------------------------------------


def test_cooldown_at_minimum_is_accepted(faucet, owner):
    faucet.update_cooldown_period(owner, MIN_COOLDOWN_THRESHOLD)
    assert faucet.cooldown_period == MIN_COOLDOWN_THRESHOLD
    assert faucet.sink.last().event.args() == {"old": COOLDOWN, "new": MIN_COOLDOWN_THRESHOLD}


def test_cooldown_below_minimum_is_rejected(faucet, owner):
    with pytest.raises(InvalidCooldown) as ei:
        faucet.update_cooldown_period(owner, MIN_COOLDOWN_THRESHOLD - 1)
    assert ei.value.value == 59
    assert faucet.cooldown_period == COOLDOWN


def test_shorter_cooldown_applies_to_existing_claims(ready_faucet, owner, host, alice):
    ready_faucet.claim(alice)
    ready_faucet.update_cooldown_period(owner, 60)
    host.chain.advance(60)
    ready_faucet.claim(alice)
    assert ready_faucet.total_distributed == 2 * PAYOUT


# ---------------------------- chain id ----------------------------------------


def test_testnet_chain_id_is_accepted(faucet, owner):
    faucet.update_chain_id(owner, 99999)
    assert faucet.allowed_chain_id == 99999
    assert faucet.sink.last().event.args() == {"old": 0, "new": 99999}


@pytest.mark.parametrize("chain_id", sorted(MAINNET_CHAIN_IDS.values()))
def test_mainnet_chain_ids_are_denied(faucet, owner, chain_id):
    with pytest.raises(MainnetIdDenied) as ei:
        faucet.update_chain_id(owner, chain_id)
    assert ei.value.chain_id == chain_id
    assert faucet.allowed_chain_id == 0


def test_negative_chain_id_is_denied(faucet, owner):
    with pytest.raises(MainnetIdDenied):
        faucet.update_chain_id(owner, -5)


def test_resetting_unconfigured_chain_id_is_unchanged(faucet, owner):
    with pytest.raises(Unchanged):
        faucet.update_chain_id(owner, 0)


# ---------------------------- unchanged values --------------------------------


@pytest.mark.parametrize(
    "op,value,field",
    [
        ("update_payout_amount", PAYOUT, "payout_amount"),
        ("update_cooldown_period", COOLDOWN, "cooldown_period"),
    ],
)
def test_setting_current_value_is_rejected(faucet, owner, op, value, field):
    with pytest.raises(Unchanged) as ei:
        getattr(faucet, op)(owner, value)
    assert ei.value.field == field
    assert ei.value.value == value
    assert _names(faucet) == []


def test_chain_id_unchanged(faucet, owner):
    faucet.update_chain_id(owner, CHAIN_ID)
    with pytest.raises(Unchanged):
        faucet.update_chain_id(owner, CHAIN_ID)
    assert _names(faucet) == ["ChainIdUpdated"]


# ---------------------------- ownership & pause -------------------------------


@pytest.mark.parametrize(
    "op,arg",
    [
        ("update_payout_amount", 1),
        ("update_cooldown_period", 120),
        ("update_chain_id", 99999),
        ("update_vesting_claim_contract", "0x" + "11" * 20),
    ],
)
def test_setters_are_owner_only(faucet, mallory, op, arg):
    with pytest.raises(NotOwner):
        getattr(faucet, op)(mallory, arg)
    assert _names(faucet) == []


def test_parameter_setters_work_while_paused(faucet, owner):
    faucet.pause(owner)
    faucet.update_payout_amount(owner, 1)
    faucet.update_cooldown_period(owner, 120)
    faucet.update_chain_id(owner, CHAIN_ID)
    assert (faucet.payout_amount, faucet.cooldown_period, faucet.allowed_chain_id) == (1, 120, CHAIN_ID)


def test_vesting_update_is_blocked_while_paused(faucet, vesting, owner):
    faucet.pause(owner)
    with pytest.raises(SystemPaused):
        faucet.update_vesting_claim_contract(owner, vesting.address)
    assert faucet.vesting_contract == ZERO_ADDRESS


# ---------------------------- vesting contract --------------------------------


def test_vesting_contract_update(faucet, vesting, owner):
    faucet.update_vesting_claim_contract(owner, vesting.address)
    assert faucet.vesting_contract == vesting.address
    assert faucet.sink.last().event.args() == {"old": ZERO_ADDRESS, "new": vesting.address}

    with pytest.raises(Unchanged):
        faucet.update_vesting_claim_contract(owner, vesting.address.upper().replace("0X", "0x"))


def test_vesting_contract_must_have_code(faucet, owner):
    with pytest.raises(InvalidContractInteraction):
        faucet.update_vesting_claim_contract(owner, "0x" + "42" * 20)


def test_vesting_contract_cannot_be_zero(faucet, vesting, owner):
    faucet.update_vesting_claim_contract(owner, vesting.address)
    with pytest.raises(InvalidContractInteraction):
        faucet.update_vesting_claim_contract(owner, ZERO_ADDRESS)
    assert faucet.vesting_contract == vesting.address


def test_vesting_contract_unchanged_is_checked_before_code(faucet, owner):
    with pytest.raises(Unchanged):
        faucet.update_vesting_claim_contract(owner, ZERO_ADDRESS)
