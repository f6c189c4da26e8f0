"""
faucet.runtime.claim - ClaimGate: who may claim now, and the claim itself.

Eligibility, in order:
  1. a vesting claim contract is configured      -> VestingContractUnset
  2. the caller's cooldown has elapsed           -> CooldownNotElapsed
  3. the faucet holds at least one payout        -> InsufficientCapacity
  4. the allowed chain id matches the chain      -> ChainNotAllowed

The chain check runs again immediately before the token transfer. The ledger
is written only after the transfer returns, and the surrounding transaction
commits those writes only when the whole operation succeeds.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.ports import ChainContext, PauseGate, TokenTransferPort
from ..constants import UNSET_CHAIN_ID, ZERO_ADDRESS
from ..errors import (ChainNotAllowed, CooldownNotElapsed, EligibilityError,
                      InsufficientCapacity, TransferFailed,
                      VestingContractUnset)
from ..logging import get_logger
from ..state.events import TokensClaimed
from ..state.ledger import PayoutLedger
from .guards import require_not_paused

log = get_logger("faucet.runtime.claim")


class ClaimGate:
    def __init__(
        self,
        ledger: PayoutLedger,
        token: TokenTransferPort,
        chain: ChainContext,
        pause: PauseGate,
        faucet_address: str,
    ) -> None:
        self._ledger = ledger
        self._token = token
        self._chain = chain
        self._pause = pause
        self._faucet = faucet_address

    def contract_balance(self) -> int:
        return self._token.balance_of(self._faucet)

    def check_eligibility(self, requester: str, now: int, balance: int) -> None:
        """Raise the first eligibility failure for `requester` at `now`, if any."""
        ledger = self._ledger
        if ledger.vesting_contract == ZERO_ADDRESS:
            raise VestingContractUnset()
        if not ledger.cooldown_elapsed(requester, now):
            raise CooldownNotElapsed(requester, now, ledger.last_claim_time(requester), ledger.cooldown_period)
        if balance < ledger.payout_amount:
            raise InsufficientCapacity(balance, ledger.payout_amount)
        self._require_chain()

    def can_claim(self, requester: str, now: int) -> bool:
        if self._pause.is_paused():
            return False
        try:
            self.check_eligibility(requester, now, self.contract_balance())
        except EligibilityError:
            return False
        return True

    def execute(self, requester: str, now: Optional[int] = None) -> int:
        """Pay one payout to `requester`. Returns the amount paid."""
        require_not_paused(self._pause, "claim")
        now = self._chain.timestamp() if now is None else int(now)
        self.check_eligibility(requester, now, self.contract_balance())

        amount = self._ledger.payout_amount
        self._transfer(requester, amount)

        self._ledger.record_claim(requester, now, amount)
        self._ledger.emit(TokensClaimed(wallet=requester, amount=amount))
        log.debug("payout transferred", extra={"wallet": requester, "amount": amount, "at": now})
        return amount

    def _require_chain(self) -> None:
        allowed = self._ledger.allowed_chain_id
        current = self._chain.chain_id()
        if allowed == UNSET_CHAIN_ID or allowed != current:
            raise ChainNotAllowed(allowed, current)

    def _transfer(self, to: str, amount: int) -> None:
        self._require_chain()
        if not self._token.transfer(to, amount):
            raise TransferFailed(to, amount)


__all__ = ["ClaimGate"]
