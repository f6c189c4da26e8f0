"""
faucet.errors - typed failures for the faucet execution core.

Every operation communicates failure through a *distinct* exception class so
callers (tests, the CLI, receipt builders) can tell exactly what went wrong.
Exceptions carry a stable machine `code` and a JSON-safe `data` payload with
the offending values.

Hierarchy
---------
FaucetError (base)
 ├─ EligibilityError
 │   ├─ CooldownNotElapsed
 │   ├─ InsufficientCapacity
 │   ├─ ChainNotAllowed
 │   └─ VestingContractUnset
 ├─ ValidationError
 │   ├─ OutOfCapacity
 │   ├─ InvalidCooldown
 │   ├─ MainnetIdDenied
 │   ├─ Unchanged
 │   ├─ InvalidContractInteraction
 │   ├─ ZeroAmount
 │   └─ InvalidAddress
 ├─ AuthorizationError
 │   ├─ NotOwner
 │   ├─ SystemPaused
 │   └─ ReentrantCall
 ├─ DelegateError
 │   ├─ NoVestingTokensClaimed
 │   ├─ TransferFailed
 │   └─ InsufficientFunds
 ├─ ProtocolError
 │   ├─ NativeCurrencyNotAccepted
 │   └─ OperationNotPermitted
 └─ ConfigError

Any of these aborts the current operation; the journal checkpoint opened by
`Faucet.transaction` is reverted before the exception leaves the faucet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class FaucetError(Exception):
    """
    Base faucet error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'COOLDOWN_NOT_ELAPSED').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "faucet error"
    code: str = "FAUCET_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts and logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


# -------- categories ---------------------------------------------------------


class EligibilityError(FaucetError):
    """The caller may not claim right now."""


class ValidationError(FaucetError):
    """An argument is out of bounds, malformed, or a no-op."""


class AuthorizationError(FaucetError):
    """The caller or the current system state forbids the operation."""


class DelegateError(FaucetError):
    """An external collaborator did not do what the operation required."""


class ProtocolError(FaucetError):
    """The request itself is not something the faucet accepts."""


class ConfigError(FaucetError):
    """Environment or constructor configuration is invalid."""

    def __init__(self, message: str = "invalid configuration", *, key: Optional[str] = None, value: Any = None):
        data: Dict[str, Any] = {}
        if key is not None:
            data["key"] = key
            data["value"] = value
        super().__init__(message=message, code="CONFIG", data=data or None)


# -------- eligibility --------------------------------------------------------


class CooldownNotElapsed(EligibilityError):
    def __init__(self, address: str, now: int, last_claim: int, cooldown: int):
        self.address = address
        self.next_eligible = last_claim + cooldown
        super().__init__(
            message="cooldown period has not elapsed",
            code="COOLDOWN_NOT_ELAPSED",
            data={
                "address": address,
                "now": now,
                "last_claim": last_claim,
                "cooldown": cooldown,
                "next_eligible": self.next_eligible,
            },
        )


class InsufficientCapacity(EligibilityError):
    def __init__(self, balance: int, required: int):
        self.balance = balance
        self.required = required
        super().__init__(
            message="faucet balance below payout amount",
            code="INSUFFICIENT_CAPACITY",
            data={"balance": balance, "required": required},
        )


class ChainNotAllowed(EligibilityError):
    def __init__(self, allowed: int, current: int):
        self.allowed = allowed
        self.current = current
        super().__init__(
            message="claims are not allowed on this chain",
            code="CHAIN_NOT_ALLOWED",
            data={"allowed": allowed, "current": current},
        )


class VestingContractUnset(EligibilityError):
    def __init__(self) -> None:
        super().__init__(message="vesting claim contract is not configured", code="VESTING_CONTRACT_UNSET")


# -------- validation ---------------------------------------------------------


class OutOfCapacity(ValidationError):
    def __init__(self, value: int, maximum: int):
        self.value = value
        super().__init__(
            message="payout amount exceeds the claim threshold",
            code="OUT_OF_CAPACITY",
            data={"value": value, "maximum": maximum},
        )


class InvalidCooldown(ValidationError):
    def __init__(self, value: int, minimum: int):
        self.value = value
        super().__init__(
            message="cooldown period below the minimum threshold",
            code="INVALID_COOLDOWN",
            data={"value": value, "minimum": minimum},
        )


class MainnetIdDenied(ValidationError):
    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(
            message="chain id is zero or a denied mainnet id",
            code="MAINNET_ID_DENIED",
            data={"chain_id": chain_id},
        )


class Unchanged(ValidationError):
    def __init__(self, field_name: str, value: Any):
        self.field = field_name
        self.value = value
        super().__init__(
            message=f"{field_name} already has this value",
            code="UNCHANGED",
            data={"field": field_name, "value": value},
        )


class InvalidContractInteraction(ValidationError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(
            message="address is not a deployed contract",
            code="INVALID_CONTRACT_INTERACTION",
            data={"address": address},
        )


class ZeroAmount(ValidationError):
    def __init__(self, what: str = "amount"):
        super().__init__(message=f"{what} must be greater than zero", code="ZERO_AMOUNT", data={"what": what})


class InvalidAddress(ValidationError):
    def __init__(self, address: Any, reason: str = "malformed address"):
        self.address = address
        super().__init__(
            message=reason,
            code="INVALID_ADDRESS",
            data={"address": str(address), "reason": reason},
        )


# -------- authorization ------------------------------------------------------


class NotOwner(AuthorizationError):
    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(message="caller is not the owner", code="NOT_OWNER", data={"caller": caller})


class SystemPaused(AuthorizationError):
    def __init__(self, op: Optional[str] = None):
        super().__init__(
            message="operation disabled while paused",
            code="SYSTEM_PAUSED",
            data={"op": op} if op else None,
        )


class ReentrantCall(AuthorizationError):
    def __init__(self, op: str, active: Optional[str]):
        self.op = op
        self.active = active
        super().__init__(
            message="reentrant call rejected",
            code="REENTRANT_CALL",
            data={"op": op, "active": active},
        )


# -------- delegates ----------------------------------------------------------


class NoVestingTokensClaimed(DelegateError):
    def __init__(self, old_balance: int, new_balance: int):
        super().__init__(
            message="vesting claim did not increase the faucet balance",
            code="NO_VESTING_TOKENS_CLAIMED",
            data={"old_balance": old_balance, "new_balance": new_balance},
        )


class TransferFailed(DelegateError):
    def __init__(self, to: str, amount: int):
        super().__init__(
            message="token transfer reported failure",
            code="TRANSFER_FAILED",
            data={"to": to, "amount": amount},
        )


class InsufficientFunds(DelegateError):
    """Raised by token and native-currency adapters; never silently truncated."""

    def __init__(self, holder: str, balance: int, amount: int, asset: str = "token"):
        super().__init__(
            message=f"insufficient {asset} balance",
            code="INSUFFICIENT_FUNDS",
            data={"holder": holder, "balance": balance, "amount": amount, "asset": asset},
        )


# -------- protocol -----------------------------------------------------------


class NativeCurrencyNotAccepted(ProtocolError):
    def __init__(self, sender: str, value: int):
        super().__init__(
            message="native currency transfers are not accepted",
            code="NATIVE_CURRENCY_NOT_ACCEPTED",
            data={"sender": sender, "value": value},
        )


class OperationNotPermitted(ProtocolError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            message="unknown or non-callable operation",
            code="OPERATION_NOT_PERMITTED",
            data={"operation": operation},
        )


# -------- helper utilities ---------------------------------------------------


def error_to_receipt_fields(err: FaucetError) -> Dict[str, Any]:
    """
    Map a FaucetError to canonical receipt fields.

    Returns:
        {
          "status": "REJECTED" | "REVERTED" | "ERROR",
          "error":  {code, message, data?}
        }

    Eligibility, validation, authorization and protocol failures are caller
    mistakes (REJECTED); delegate failures mean an external call misbehaved
    (REVERTED).
    """
    if isinstance(err, DelegateError):
        status = "REVERTED"
    elif isinstance(err, (EligibilityError, ValidationError, AuthorizationError, ProtocolError)):
        status = "REJECTED"
    else:
        status = "ERROR"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "FaucetError",
    "EligibilityError",
    "ValidationError",
    "AuthorizationError",
    "DelegateError",
    "ProtocolError",
    "ConfigError",
    "CooldownNotElapsed",
    "InsufficientCapacity",
    "ChainNotAllowed",
    "VestingContractUnset",
    "OutOfCapacity",
    "InvalidCooldown",
    "MainnetIdDenied",
    "Unchanged",
    "InvalidContractInteraction",
    "ZeroAmount",
    "InvalidAddress",
    "NotOwner",
    "SystemPaused",
    "ReentrantCall",
    "NoVestingTokensClaimed",
    "TransferFailed",
    "InsufficientFunds",
    "NativeCurrencyNotAccepted",
    "OperationNotPermitted",
    "error_to_receipt_fields",
]
