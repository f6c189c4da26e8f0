"""
faucet.runtime.admin - AdminConfig: owner-only parameter updates.

Every setter follows the same shape:

    require_owner → (pause check, vesting only) → reject unchanged → bounds → write → event

| setter                         | bound                                     | event                        |
|--------------------------------|-------------------------------------------|------------------------------|
| update_payout_amount           | 0 < v <= MAX_CLAIM_THRESHOLD              | PayoutAmountUpdated          |
| update_cooldown_period         | v >= MIN_COOLDOWN_THRESHOLD               | CoolDownPeriodUpdated        |
| update_chain_id                | v > 0 and v not a denied mainnet id       | ChainIdUpdated               |
| update_vesting_claim_contract  | non-zero address with deployed code       | VestingClaimContractUpdated  |

Payout, cooldown and chain-id updates stay available while the faucet is
paused; the vesting contract update does not.
"""

from __future__ import annotations

from typing import Any

from ..adapters.ports import AccessControlGate, ContractRegistry, PauseGate
from ..address import normalize_address
from ..constants import (DENIED_CHAIN_IDS, MAX_CLAIM_THRESHOLD,
                         MIN_COOLDOWN_THRESHOLD)
from ..errors import (InvalidCooldown, MainnetIdDenied, OutOfCapacity,
                      ValidationError, ZeroAmount)
from ..state.events import (ChainIdUpdated, CoolDownPeriodUpdated,
                            PayoutAmountUpdated, VestingClaimContractUpdated)
from ..state.ledger import PayoutLedger
from .guards import (reject_unchanged, require_not_paused, require_owner,
                     valid_contract)

# ---- bounds (also used to validate a faucet's initial parameters) -----------


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(message=f"{what} must be an integer", code="INVALID_TYPE", data={"field": what, "value": repr(value)})
    return value


def validate_payout_amount(value: Any) -> int:
    value = _as_int(value, "payout_amount")
    if value <= 0:
        raise ZeroAmount("payout_amount")
    if value > MAX_CLAIM_THRESHOLD:
        raise OutOfCapacity(value, MAX_CLAIM_THRESHOLD)
    return value


def validate_cooldown_period(value: Any) -> int:
    value = _as_int(value, "cooldown_period")
    if value < MIN_COOLDOWN_THRESHOLD:
        raise InvalidCooldown(value, MIN_COOLDOWN_THRESHOLD)
    return value


def validate_chain_id(value: Any) -> int:
    value = _as_int(value, "allowed_chain_id")
    if value <= 0 or value in DENIED_CHAIN_IDS:
        raise MainnetIdDenied(value)
    return value


# ---- setters ----------------------------------------------------------------


class AdminConfig:
    def __init__(
        self,
        ledger: PayoutLedger,
        access: AccessControlGate,
        pause: PauseGate,
        registry: ContractRegistry,
    ) -> None:
        self._ledger = ledger
        self._access = access
        self._pause = pause
        self._registry = registry

    def update_payout_amount(self, caller: str, new: int) -> None:
        require_owner(self._access, caller)
        old = self._ledger.payout_amount
        reject_unchanged("payout_amount", old, new)
        self._ledger.payout_amount = validate_payout_amount(new)
        self._ledger.emit(PayoutAmountUpdated(old=old, new=new))

    def update_cooldown_period(self, caller: str, new: int) -> None:
        require_owner(self._access, caller)
        old = self._ledger.cooldown_period
        reject_unchanged("cooldown_period", old, new)
        self._ledger.cooldown_period = validate_cooldown_period(new)
        self._ledger.emit(CoolDownPeriodUpdated(old=old, new=new))

    def update_chain_id(self, caller: str, new: int) -> None:
        require_owner(self._access, caller)
        old = self._ledger.allowed_chain_id
        reject_unchanged("allowed_chain_id", old, new)
        self._ledger.allowed_chain_id = validate_chain_id(new)
        self._ledger.emit(ChainIdUpdated(old=old, new=new))

    def update_vesting_claim_contract(self, caller: str, new: str) -> None:
        require_owner(self._access, caller)
        require_not_paused(self._pause, "update_vesting_claim_contract")
        new = normalize_address(new)
        old = self._ledger.vesting_contract
        reject_unchanged("vesting_contract", old, new)
        self._ledger.vesting_contract = valid_contract(self._registry, new)
        self._ledger.emit(VestingClaimContractUpdated(old=old, new=new))


__all__ = [
    "AdminConfig",
    "validate_payout_amount",
    "validate_cooldown_period",
    "validate_chain_id",
]
