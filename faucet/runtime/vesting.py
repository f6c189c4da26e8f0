"""
faucet.runtime.vesting - VestingBridge: pull vested tokens into the faucet.

The bridge does not know how vesting works. It asks the configured vesting
contract to release tokens for a template and then checks, by comparing the
faucet's token balance before and after, that something actually arrived.
"""

from __future__ import annotations

from typing import Tuple

from ..adapters.ports import (AccessControlGate, ContractRegistry, PauseGate,
                              TokenTransferPort)
from ..constants import ZERO_ADDRESS
from ..errors import (InvalidContractInteraction, NoVestingTokensClaimed,
                      VestingContractUnset)
from ..logging import get_logger
from ..state.events import VestingTokensClaimed
from ..state.ledger import PayoutLedger
from .guards import require_not_paused, require_owner

log = get_logger("faucet.runtime.vesting")


class VestingBridge:
    def __init__(
        self,
        ledger: PayoutLedger,
        token: TokenTransferPort,
        access: AccessControlGate,
        pause: PauseGate,
        registry: ContractRegistry,
        faucet_address: str,
    ) -> None:
        self._ledger = ledger
        self._token = token
        self._access = access
        self._pause = pause
        self._registry = registry
        self._faucet = faucet_address

    def claim_vested_tokens(self, caller: str, template_name: str) -> Tuple[int, int]:
        """Returns (old_balance, new_balance)."""
        require_owner(self._access, caller)
        require_not_paused(self._pause, "claim_vested_tokens")
        vesting = self._ledger.vesting_contract
        if vesting == ZERO_ADDRESS:
            raise VestingContractUnset()
        delegate = self._registry.resolve(vesting)
        if delegate is None or not callable(getattr(delegate, "claim_tokens_for_beneficiary", None)):
            raise InvalidContractInteraction(vesting)

        old_balance = self._token.balance_of(self._faucet)
        delegate.claim_tokens_for_beneficiary(template_name)
        new_balance = self._token.balance_of(self._faucet)

        if new_balance <= old_balance:
            raise NoVestingTokensClaimed(old_balance, new_balance)
        self._ledger.emit(VestingTokensClaimed(old_balance=old_balance, new_balance=new_balance))
        log.debug(
            "vested tokens received",
            extra={"template": template_name, "received": new_balance - old_balance},
        )
        return old_balance, new_balance


__all__ = ["VestingBridge"]
