"""
faucet.runtime - the operations layer.

- guards:    owner/pause/address checks and the reentrancy latch
- claim:     ClaimGate (eligibility + payout)
- admin:     AdminConfig (bounded owner setters)
- vesting:   VestingBridge (pull vested tokens into the faucet)
- utilities: pause switch, rescue, withdraw, ownership hand-over
- faucet:    Faucet, which composes the above behind one transaction boundary
"""

from .admin import AdminConfig
from .claim import ClaimGate
from .faucet import Faucet, Receipt
from .guards import ReentrancyGuard
from .utilities import Utilities
from .vesting import VestingBridge

__all__ = [
    "AdminConfig",
    "ClaimGate",
    "Faucet",
    "Receipt",
    "ReentrancyGuard",
    "Utilities",
    "VestingBridge",
]
