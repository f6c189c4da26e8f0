"""
faucet.constants - thresholds, defaults and the mainnet chain-id deny-list.
"""

from __future__ import annotations

from typing import Dict, Final, FrozenSet

TOKEN_DECIMALS: Final[int] = 18
ONE_TOKEN: Final[int] = 10**TOKEN_DECIMALS

# Upper bound for a single payout.
MAX_CLAIM_THRESHOLD: Final[int] = 10_000 * ONE_TOKEN
# Lower bound for the cooldown between two claims of one address, in seconds.
MIN_COOLDOWN_THRESHOLD: Final[int] = 60

DEFAULT_PAYOUT_AMOUNT: Final[int] = 200 * ONE_TOKEN
DEFAULT_COOLDOWN_PERIOD: Final[int] = 3600

# 0 means "no chain configured"; claims are rejected until it is set.
UNSET_CHAIN_ID: Final[int] = 0

ZERO_ADDRESS: Final[str] = "0x" + "00" * 20
ADDRESS_BYTES: Final[int] = 20

# Production networks a faucet must never be pointed at.
MAINNET_CHAIN_IDS: Final[Dict[str, int]] = {
    "ethereum": 1,
    "optimism": 10,
    "cronos": 25,
    "bsc": 56,
    "heco": 128,
    "polygon": 137,
    "fantom": 250,
    "moonbeam": 1284,
    "klaytn": 8217,
    "celo": 42220,
    "arbitrum": 42161,
    "avalanche": 43114,
    "harmony": 1666600000,
}

DENIED_CHAIN_IDS: Final[FrozenSet[int]] = frozenset(MAINNET_CHAIN_IDS.values())


__all__ = [
    "TOKEN_DECIMALS",
    "ONE_TOKEN",
    "MAX_CLAIM_THRESHOLD",
    "MIN_COOLDOWN_THRESHOLD",
    "DEFAULT_PAYOUT_AMOUNT",
    "DEFAULT_COOLDOWN_PERIOD",
    "UNSET_CHAIN_ID",
    "ZERO_ADDRESS",
    "ADDRESS_BYTES",
    "MAINNET_CHAIN_IDS",
    "DENIED_CHAIN_IDS",
]
