"""
faucet.state.ledger - the faucet's owned state and its typed accessor.

`FaucetState` is the single record a faucet owns for its whole life. Nothing
outside the faucet writes it; the runtime reaches it only through a
`PayoutLedger`, which reads and writes via the journal so every mutation is
staged until the surrounding operation commits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict

from ..constants import UNSET_CHAIN_ID, ZERO_ADDRESS

if TYPE_CHECKING:
    from .events import Event
    from .journal import Journal


@dataclass
class FaucetState:
    base_asset: str
    payout_amount: int
    cooldown_period: int
    vesting_contract: str = ZERO_ADDRESS
    allowed_chain_id: int = UNSET_CHAIN_ID
    total_distributed: int = 0
    last_claim_time: Dict[str, int] = field(default_factory=dict)


class PayoutLedger:
    """
    Typed view over a journaled FaucetState.

    Reads see staged writes; writes are staged in the journal's top layer.
    The ledger enforces only its own arithmetic invariants (the distributed
    total never decreases); parameter bounds belong to the admin layer.
    """

    def __init__(self, journal: "Journal") -> None:
        self._j = journal

    # --- parameters --------------------------------------------------------

    @property
    def base_asset(self) -> str:
        return self._j.get_field("base_asset")

    @property
    def payout_amount(self) -> int:
        return self._j.get_field("payout_amount")

    @payout_amount.setter
    def payout_amount(self, value: int) -> None:
        self._j.set_field("payout_amount", int(value))

    @property
    def cooldown_period(self) -> int:
        return self._j.get_field("cooldown_period")

    @cooldown_period.setter
    def cooldown_period(self, value: int) -> None:
        self._j.set_field("cooldown_period", int(value))

    @property
    def allowed_chain_id(self) -> int:
        return self._j.get_field("allowed_chain_id")

    @allowed_chain_id.setter
    def allowed_chain_id(self, value: int) -> None:
        self._j.set_field("allowed_chain_id", int(value))

    @property
    def vesting_contract(self) -> str:
        return self._j.get_field("vesting_contract")

    @vesting_contract.setter
    def vesting_contract(self, value: str) -> None:
        self._j.set_field("vesting_contract", value)

    @property
    def total_distributed(self) -> int:
        return self._j.get_field("total_distributed")

    # --- claims ------------------------------------------------------------

    def last_claim_time(self, address: str) -> int:
        return self._j.get_claim_time(address)

    def next_claim_time(self, address: str) -> int:
        """Earliest timestamp at which `address` passes the cooldown check."""
        last = self.last_claim_time(address)
        return last + self.cooldown_period if last else 0

    def cooldown_elapsed(self, address: str, now: int) -> bool:
        last = self.last_claim_time(address)
        # A clock behind the recorded claim never counts as elapsed.
        return now >= last and now - last >= self.cooldown_period

    def record_claim(self, address: str, now: int, amount: int) -> None:
        if amount <= 0:
            raise ValueError("claimed amount must be positive")
        self._j.set_claim_time(address, now)
        self._j.set_field("total_distributed", self.total_distributed + amount)

    # --- events ------------------------------------------------------------

    def emit(self, event: "Event") -> None:
        """Stage `event`; it is published only if the operation commits."""
        self._j.stage_event(event)


__all__ = ["FaucetState", "PayoutLedger"]
