"""
faucet.runtime.guards - precondition checks shared by every operation.

Each guard is a plain function that either returns (possibly a normalized
value) or raises one specific FaucetError. Operations call them first, in
the order their rules are listed, so the error a caller sees is predictable.

- require_owner(access, caller)          -> NotOwner
- require_not_paused(pause, op)          -> SystemPaused
- valid_address(addr)                    -> InvalidAddress (malformed or zero)
- valid_contract(registry, addr)         -> InvalidContractInteraction (zero or no code)
- reject_unchanged(field, current, new)  -> Unchanged

ReentrancyGuard is the single latch spanning a whole operation; see
`Faucet.transaction`.
"""

from __future__ import annotations

from typing import Any, Optional

from ..adapters.ports import AccessControlGate, ContractRegistry, PauseGate
from ..address import is_zero_address, normalize_address
from ..errors import (InvalidAddress, InvalidContractInteraction, NotOwner,
                      ReentrantCall, SystemPaused, Unchanged)


def require_owner(access: AccessControlGate, caller: str) -> None:
    if not access.is_owner(caller):
        raise NotOwner(caller)


def require_not_paused(pause: PauseGate, op: Optional[str] = None) -> None:
    if pause.is_paused():
        raise SystemPaused(op)


def valid_address(addr: Any) -> str:
    """Normalize `addr`; reject the zero address."""
    norm = normalize_address(addr)
    if is_zero_address(norm):
        raise InvalidAddress(norm, "zero address not allowed")
    return norm


def valid_contract(registry: ContractRegistry, addr: Any) -> str:
    """Normalize `addr`; it must be non-zero and have deployed code."""
    norm = normalize_address(addr)
    if is_zero_address(norm) or not registry.has_code(norm):
        raise InvalidContractInteraction(norm)
    return norm


def reject_unchanged(field_name: str, current: Any, new: Any) -> None:
    if current == new:
        raise Unchanged(field_name, new)


class ReentrancyGuard:
    """
    Non-reentrancy latch. One scope per faucet: while any mutating operation
    is in flight, entering another one fails with ReentrantCall.

        guard.enter("claim")
        try:
            ...
        finally:
            guard.exit()
    """

    def __init__(self) -> None:
        self._active: Optional[str] = None

    @property
    def active(self) -> Optional[str]:
        """Name of the operation holding the latch, if any."""
        return self._active

    def enter(self, op: str) -> None:
        if self._active is not None:
            raise ReentrantCall(op, self._active)
        self._active = op

    def exit(self) -> None:
        self._active = None


__all__ = [
    "require_owner",
    "require_not_paused",
    "valid_address",
    "valid_contract",
    "reject_unchanged",
    "ReentrancyGuard",
]
