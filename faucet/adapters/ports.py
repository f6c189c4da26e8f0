"""
faucet.adapters.ports - interfaces the faucet consumes from its host.

The faucet never reaches into token ledgers, ownership records or chain
state directly. It is constructed with one object per concern below and
talks to them only through these methods. Every port must be synchronous and
must raise (not return a sentinel) when it cannot do what was asked, except
`TokenTransferPort.transfer`, which may also report failure by returning
False.

Host API
--------
- TokenTransferPort   transfer(to, amount) -> bool ; balance_of(address) -> int
- AccessControlGate   owner() ; is_owner(caller) ; transfer_ownership ; renounce_ownership
- PauseGate           is_paused() ; set_paused(flag) -> changed
- VestingDelegate     claim_tokens_for_beneficiary(template_name)
- ChainContext        chain_id() ; timestamp()
- ContractRegistry    has_code(address) ; resolve(address) ; token_port(address, holder)
- NativeCurrencyPort  balance_of(address) ; send(source, to, amount)

`faucet.adapters.memory` ships deterministic implementations of each.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class TokenTransferPort(Protocol):
    """A fungible token as seen from one holder (the faucet)."""

    def transfer(self, to: str, amount: int) -> bool: ...
    def balance_of(self, address: str) -> int: ...


@runtime_checkable
class AccessControlGate(Protocol):
    def owner(self) -> str: ...
    def is_owner(self, caller: str) -> bool: ...
    def transfer_ownership(self, caller: str, new_owner: str) -> str: ...
    def renounce_ownership(self, caller: str) -> str: ...


@runtime_checkable
class PauseGate(Protocol):
    def is_paused(self) -> bool: ...
    def set_paused(self, flag: bool) -> bool: ...


@runtime_checkable
class VestingDelegate(Protocol):
    def claim_tokens_for_beneficiary(self, template_name: str) -> None: ...


@runtime_checkable
class ChainContext(Protocol):
    def chain_id(self) -> int: ...
    def timestamp(self) -> int: ...


@runtime_checkable
class ContractRegistry(Protocol):
    def has_code(self, address: str) -> bool: ...
    def resolve(self, address: str) -> Optional[Any]: ...
    def token_port(self, address: str, holder: str) -> Optional[TokenTransferPort]: ...


@runtime_checkable
class NativeCurrencyPort(Protocol):
    def balance_of(self, address: str) -> int: ...
    def send(self, source: str, to: str, amount: int) -> None: ...


__all__ = [
    "TokenTransferPort",
    "AccessControlGate",
    "PauseGate",
    "VestingDelegate",
    "ChainContext",
    "ContractRegistry",
    "NativeCurrencyPort",
]
