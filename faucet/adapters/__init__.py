"""
faucet.adapters - the faucet's boundary.

- ports:  Protocols for every external collaborator
- memory: deterministic in-memory implementations (tests, simulator)
"""

from .ports import (AccessControlGate, ChainContext, ContractRegistry,
                    NativeCurrencyPort, PauseGate, TokenTransferPort,
                    VestingDelegate)

__all__ = [
    "AccessControlGate",
    "ChainContext",
    "ContractRegistry",
    "NativeCurrencyPort",
    "PauseGate",
    "TokenTransferPort",
    "VestingDelegate",
]
