"""
faucet.runtime.utilities - owner tools around the core: pause switch,
token rescue, native-currency withdrawal, ownership hand-over, and the
unconditional rejection of incoming native currency.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.ports import (AccessControlGate, ContractRegistry,
                              NativeCurrencyPort, PauseGate, TokenTransferPort)
from ..address import normalize_address
from ..errors import (InvalidContractInteraction, NativeCurrencyNotAccepted,
                      TransferFailed, ZeroAmount)
from ..state.events import (OwnershipTransferred, Paused, TokensRescued,
                            Unpaused, Withdrawal)
from ..state.ledger import PayoutLedger
from .guards import require_owner, valid_address


class Utilities:
    def __init__(
        self,
        ledger: PayoutLedger,
        token: TokenTransferPort,
        access: AccessControlGate,
        pause: PauseGate,
        registry: ContractRegistry,
        native: NativeCurrencyPort,
        faucet_address: str,
    ) -> None:
        self._ledger = ledger
        self._token = token
        self._access = access
        self._pause = pause
        self._registry = registry
        self._native = native
        self._faucet = faucet_address

    # --- pause ---------------------------------------------------------------

    def pause(self, caller: str) -> bool:
        """Returns True if the flag changed; pausing twice is a no-op."""
        require_owner(self._access, caller)
        changed = self._pause.set_paused(True)
        if changed:
            self._ledger.emit(Paused(account=caller))
        return changed

    def unpause(self, caller: str) -> bool:
        require_owner(self._access, caller)
        changed = self._pause.set_paused(False)
        if changed:
            self._ledger.emit(Unpaused(account=caller))
        return changed

    # --- asset recovery ------------------------------------------------------

    def rescue_tokens(self, caller: str, token: str, to: str, amount: int) -> None:
        require_owner(self._access, caller)
        token = normalize_address(token)
        to = valid_address(to)
        if amount <= 0:
            raise ZeroAmount("amount")

        port = self._token_port(token)
        if port is None:
            raise InvalidContractInteraction(token)
        if not port.transfer(to, amount):
            raise TransferFailed(to, amount)
        self._ledger.emit(TokensRescued(token=token, to=to, amount=amount))

    def withdraw(self, caller: str, destination: str) -> int:
        """Send the faucet's whole native balance to `destination`."""
        require_owner(self._access, caller)
        destination = valid_address(destination)
        amount = self._native.balance_of(self._faucet)
        if amount == 0:
            raise ZeroAmount("native balance")
        self._native.send(self._faucet, destination, amount)
        self._ledger.emit(Withdrawal(owner=caller, destination=destination, amount=amount))
        return amount

    def receive(self, sender: str, value: int) -> None:
        raise NativeCurrencyNotAccepted(sender, value)

    # --- ownership -----------------------------------------------------------

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        require_owner(self._access, caller)
        new_owner = valid_address(new_owner)
        previous = self._access.transfer_ownership(caller, new_owner)
        self._ledger.emit(OwnershipTransferred(previous=previous, new=new_owner))
        return previous

    def renounce_ownership(self, caller: str) -> str:
        require_owner(self._access, caller)
        previous = self._access.renounce_ownership(caller)
        self._ledger.emit(OwnershipTransferred(previous=previous, new=self._access.owner()))
        return previous

    def _token_port(self, token: str) -> Optional[TokenTransferPort]:
        if token == self._ledger.base_asset:
            return self._token
        return self._registry.token_port(token, self._faucet)


__all__ = ["Utilities"]
