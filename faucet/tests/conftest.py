# -*- coding: utf-8 -*-
"""
faucet.tests.conftest
=====================

Pytest fixtures for the faucet runtime.

- Deterministic account addresses (sha3 of a tag, like everything else here).
- A fully wired in-memory host: token, owner gate, pause switch, manual chain,
  registry and native balances.
- `faucet`: freshly deployed (payout 200 tokens, cooldown 3600s), unfunded,
  chain id and vesting contract unset.
- `ready_faucet`: the same faucet funded with 1000 tokens, chain id set to the
  host chain and a vesting contract configured.

Usage:
    def test_claim(ready_faucet, alice, host):
        host.chain.advance(3600)
        assert ready_faucet.claim(alice) == 200 * ONE_TOKEN
"""
from __future__ import annotations

import os

import pytest

from faucet import logging as flog
from faucet.address import derive_address
from faucet.adapters.memory import InMemoryToken, MemoryHost, ScriptedVestingDelegate
from faucet.config import FaucetConfig, get_config
from faucet.constants import ONE_TOKEN
from faucet.runtime.faucet import Faucet

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

NOW = 1_700_000_000
CHAIN_ID = 1337
PAYOUT = 200 * ONE_TOKEN
COOLDOWN = 3600
FUNDING = 1_000 * ONE_TOKEN


@pytest.fixture(autouse=True)
def _isolate_process_state():
    get_config.cache_clear()
    flog.clear_context()
    yield
    get_config.cache_clear()
    flog.clear_context()


# --- accounts ------------------------------------------------------------------


@pytest.fixture
def owner() -> str:
    return derive_address("test:owner")


@pytest.fixture
def alice() -> str:
    return derive_address("test:alice")


@pytest.fixture
def bob() -> str:
    return derive_address("test:bob")


@pytest.fixture
def mallory() -> str:
    return derive_address("test:mallory")


# --- host & faucet -------------------------------------------------------------


@pytest.fixture
def host(owner: str) -> MemoryHost:
    return MemoryHost.create(owner, chain_id=CHAIN_ID, now=NOW)


@pytest.fixture
def token(host: MemoryHost) -> InMemoryToken:
    return host.deploy_token("FCT")


@pytest.fixture
def faucet(host: MemoryHost, token: InMemoryToken) -> Faucet:
    return Faucet.deploy(
        host,
        base_asset=token.address,
        payout_amount=PAYOUT,
        cooldown_period=COOLDOWN,
        config=FaucetConfig(),
    )


@pytest.fixture
def vesting(host: MemoryHost, token: InMemoryToken, faucet: Faucet) -> ScriptedVestingDelegate:
    return host.deploy_vesting(
        token,
        faucet.address,
        locked=5_000 * ONE_TOKEN,
        releases={"q1": 1_000 * ONE_TOKEN, "q2": 500 * ONE_TOKEN},
    )


@pytest.fixture
def ready_faucet(faucet: Faucet, token: InMemoryToken, vesting: ScriptedVestingDelegate, owner: str) -> Faucet:
    token.mint(faucet.address, FUNDING)
    faucet.update_chain_id(owner, CHAIN_ID)
    faucet.update_vesting_claim_contract(owner, vesting.address)
    return faucet
