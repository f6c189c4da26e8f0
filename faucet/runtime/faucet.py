"""
faucet.runtime.faucet - the Faucet: one owned state, its components, and the
transaction boundary every mutating operation runs inside.

Transaction boundary
--------------------
`Faucet.transaction(op, caller, pausable=False)` wraps every state-changing
operation:

  1. pausable operations fail with SystemPaused while the faucet is paused
  2. enter the reentrancy latch (ReentrantCall if another operation is live)
  3. open a journal checkpoint; ledger writes and events are staged in it
  4. success  → commit to the root, apply, publish staged events, log at INFO
     failure  → revert to the marker, drop staged events, log at WARNING, re-raise
  5. release the latch

External calls (token transfers, vesting delegates) happen inside step 3, so
a collaborator that calls back into the faucet hits the latch instead of
observing half-applied state. `receive` is rejected before step 1.

Named dispatch
--------------
`call(op, caller, ...)` routes a named operation (used by the CLI simulator).
Unknown names fail with OperationNotPermitted. `execute(...)` does the same
but returns a `Receipt` instead of raising on FaucetError.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..adapters.ports import (AccessControlGate, ChainContext,
                              ContractRegistry, NativeCurrencyPort, PauseGate,
                              TokenTransferPort)
from ..address import derive_address, normalize_address
from ..config import FaucetConfig, get_config
from ..errors import (FaucetError, InvalidContractInteraction,
                      OperationNotPermitted, error_to_receipt_fields)
from .. import logging as flog
from ..state.events import EventRecord, EventSink, InMemoryEventSink
from ..state.journal import Journal
from ..state.ledger import FaucetState, PayoutLedger
from .admin import (AdminConfig, validate_cooldown_period,
                    validate_payout_amount)
from .claim import ClaimGate
from .guards import ReentrancyGuard, require_not_paused, valid_address
from .utilities import Utilities
from .vesting import VestingBridge

log = flog.get_logger("faucet.runtime")


@dataclass
class TxScope:
    """Handle yielded by `Faucet.transaction`; `records` is filled on commit."""

    op: str
    caller: Optional[str]
    op_id: int
    records: List[EventRecord] = field(default_factory=list)


@dataclass
class Receipt:
    op: str
    caller: Optional[str]
    status: str
    result: Any = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == "OK"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"op": self.op, "caller": self.caller, "status": self.status}
        if self.result is not None:
            out["result"] = self.result
        out["events"] = self.events
        if self.error is not None:
            out["error"] = self.error
        return out


class Faucet:
    """
    A cooldown-gated token faucet.

    Parameters
    ----------
    address : str
        The faucet's own address (holder of its tokens and native balance).
    base_asset : str
        Address of the distributed token. Fixed for the faucet's lifetime.
    token : TokenTransferPort
        The base asset as seen from `address`.
    access, pause, chain, registry, native :
        Remaining ports, see `faucet.adapters.ports`.
    payout_amount, cooldown_period : int, optional
        Initial parameters; default to `config` (or `get_config()`).
    sink : EventSink, optional
        Receives committed events; defaults to an InMemoryEventSink.
    """

    def __init__(
        self,
        *,
        address: str,
        base_asset: str,
        token: TokenTransferPort,
        access: AccessControlGate,
        pause: PauseGate,
        chain: ChainContext,
        registry: ContractRegistry,
        native: NativeCurrencyPort,
        payout_amount: Optional[int] = None,
        cooldown_period: Optional[int] = None,
        sink: Optional[EventSink] = None,
        config: Optional[FaucetConfig] = None,
    ) -> None:
        cfg = config or get_config()
        self.address = valid_address(address)
        self._access = access
        self._pause = pause
        self._chain = chain
        self.sink: EventSink = sink if sink is not None else InMemoryEventSink()

        state = FaucetState(
            base_asset=valid_address(base_asset),
            payout_amount=validate_payout_amount(cfg.payout_amount if payout_amount is None else payout_amount),
            cooldown_period=validate_cooldown_period(cfg.cooldown_period if cooldown_period is None else cooldown_period),
        )
        self._state = state
        self._journal = Journal(state)
        self._ledger = PayoutLedger(self._journal)
        self._guard = ReentrancyGuard()
        self._committed_ops = 0
        self._last_records: List[EventRecord] = []

        self._claims = ClaimGate(self._ledger, token, chain, pause, self.address)
        self._admin = AdminConfig(self._ledger, access, pause, registry)
        self._vesting = VestingBridge(self._ledger, token, access, pause, registry, self.address)
        self._utils = Utilities(self._ledger, token, access, pause, registry, native, self.address)

        self._dispatch: Dict[str, Tuple[Callable[..., Any], bool]] = {
            # name: (handler, takes caller)
            "claim": (self.claim, True),
            "update_payout_amount": (self.update_payout_amount, True),
            "update_cooldown_period": (self.update_cooldown_period, True),
            "update_chain_id": (self.update_chain_id, True),
            "update_vesting_claim_contract": (self.update_vesting_claim_contract, True),
            "claim_vested_tokens": (self.claim_vested_tokens, True),
            "pause": (self.pause, True),
            "unpause": (self.unpause, True),
            "rescue_tokens": (self.rescue_tokens, True),
            "withdraw": (self.withdraw, True),
            "transfer_ownership": (self.transfer_ownership, True),
            "renounce_ownership": (self.renounce_ownership, True),
            "receive": (self.receive, True),
            "can_claim": (self.can_claim, False),
            "last_claim_time": (self.last_claim_time, False),
            "next_claim_time": (self.next_claim_time, False),
            "payout_amount": (lambda: self.payout_amount, False),
            "cooldown_period": (lambda: self.cooldown_period, False),
            "allowed_chain_id": (lambda: self.allowed_chain_id, False),
            "vesting_contract": (lambda: self.vesting_contract, False),
            "total_distributed": (lambda: self.total_distributed, False),
            "base_asset": (lambda: self.base_asset, False),
            "token_balance": (self.token_balance, False),
            "owner": (self.owner, False),
            "is_paused": (self.is_paused, False),
        }

        log.info(
            "faucet deployed",
            extra={
                "faucet": self.address,
                "base_asset": state.base_asset,
                "payout_amount": state.payout_amount,
                "cooldown_period": state.cooldown_period,
            },
        )

    # ------------------------------------------------------------------ #
    # Construction helper for in-memory hosts
    # ------------------------------------------------------------------ #

    @classmethod
    def deploy(
        cls,
        host: Any,
        *,
        base_asset: str,
        address: Optional[str] = None,
        **kwargs: Any,
    ) -> "Faucet":
        """
        Build a faucet from a host bundle exposing `access`, `pause`, `chain`,
        `registry` and `native` (e.g. `faucet.adapters.memory.MemoryHost`) and
        register it in the host's registry.
        """
        address = normalize_address(address or derive_address(f"faucet:{base_asset}"))
        token = host.registry.token_port(base_asset, address)
        if token is None:
            raise InvalidContractInteraction(normalize_address(base_asset))
        faucet = cls(
            address=address,
            base_asset=base_asset,
            token=token,
            access=host.access,
            pause=host.pause,
            chain=host.chain,
            registry=host.registry,
            native=host.native,
            **kwargs,
        )
        host.registry.deploy(faucet.address, faucet)
        return faucet

    # ------------------------------------------------------------------ #
    # Transaction boundary
    # ------------------------------------------------------------------ #

    @contextmanager
    def _rejections(self) -> Iterator[None]:
        try:
            yield
        except FaucetError as err:
            log.warning("operation rejected", extra={"code": err.code, "data": err.data})
            raise

    @contextmanager
    def transaction(
        self,
        op: str,
        caller: Optional[str] = None,
        *,
        pausable: bool = False,
    ) -> Iterator[TxScope]:
        with flog.scoped(faucet=self.address, op=op, caller=caller):
            with self._rejections():
                if pausable:
                    require_not_paused(self._pause, op)
                self._guard.enter(op)
            try:
                scope = TxScope(op=op, caller=caller, op_id=self._committed_ops)
                marker = self._journal.depth()
                self._journal.begin()
                try:
                    with self._rejections():
                        yield scope
                except BaseException as err:
                    self._journal.revert_to(marker)
                    if not isinstance(err, FaucetError):
                        log.exception("operation failed")
                    raise
                self._journal.commit_to(marker)
                events = self._journal.commit()
                scope.records = self.sink.publish(scope.op_id, op, events)
                self._last_records = scope.records
                self._committed_ops += 1
                log.info("operation committed", extra={"events": [e.NAME for e in events]})
            finally:
                self._guard.exit()

    # ------------------------------------------------------------------ #
    # Claims
    # ------------------------------------------------------------------ #

    def claim(self, caller: str, now: Optional[int] = None) -> int:
        caller = normalize_address(caller)
        with self.transaction("claim", caller, pausable=True):
            return self._claims.execute(caller, now)

    def can_claim(self, address: str, now: Optional[int] = None) -> bool:
        now = self._chain.timestamp() if now is None else int(now)
        return self._claims.can_claim(normalize_address(address), now)

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #

    def update_payout_amount(self, caller: str, new: int) -> None:
        caller = normalize_address(caller)
        with self.transaction("update_payout_amount", caller):
            self._admin.update_payout_amount(caller, new)

    def update_cooldown_period(self, caller: str, new: int) -> None:
        caller = normalize_address(caller)
        with self.transaction("update_cooldown_period", caller):
            self._admin.update_cooldown_period(caller, new)

    def update_chain_id(self, caller: str, new: int) -> None:
        caller = normalize_address(caller)
        with self.transaction("update_chain_id", caller):
            self._admin.update_chain_id(caller, new)

    def update_vesting_claim_contract(self, caller: str, new: str) -> None:
        caller = normalize_address(caller)
        with self.transaction("update_vesting_claim_contract", caller):
            self._admin.update_vesting_claim_contract(caller, new)

    # ------------------------------------------------------------------ #
    # Vesting
    # ------------------------------------------------------------------ #

    def claim_vested_tokens(self, caller: str, template_name: str) -> Tuple[int, int]:
        caller = normalize_address(caller)
        with self.transaction("claim_vested_tokens", caller):
            return self._vesting.claim_vested_tokens(caller, template_name)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def pause(self, caller: str) -> bool:
        caller = normalize_address(caller)
        with self.transaction("pause", caller):
            return self._utils.pause(caller)

    def unpause(self, caller: str) -> bool:
        caller = normalize_address(caller)
        with self.transaction("unpause", caller):
            return self._utils.unpause(caller)

    def rescue_tokens(self, caller: str, token: str, to: str, amount: int) -> None:
        caller = normalize_address(caller)
        with self.transaction("rescue_tokens", caller):
            self._utils.rescue_tokens(caller, token, to, amount)

    def withdraw(self, caller: str, destination: str) -> int:
        caller = normalize_address(caller)
        with self.transaction("withdraw", caller):
            return self._utils.withdraw(caller, destination)

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        caller = normalize_address(caller)
        with self.transaction("transfer_ownership", caller):
            return self._utils.transfer_ownership(caller, new_owner)

    def renounce_ownership(self, caller: str) -> str:
        caller = normalize_address(caller)
        with self.transaction("renounce_ownership", caller):
            return self._utils.renounce_ownership(caller)

    def receive(self, sender: str, value: int) -> None:
        # Rejected before the latch is taken.
        sender = normalize_address(sender)
        with flog.scoped(faucet=self.address, op="receive", caller=sender), self._rejections():
            self._utils.receive(sender, value)

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    @property
    def base_asset(self) -> str:
        return self._ledger.base_asset

    @property
    def payout_amount(self) -> int:
        return self._ledger.payout_amount

    @property
    def cooldown_period(self) -> int:
        return self._ledger.cooldown_period

    @property
    def allowed_chain_id(self) -> int:
        return self._ledger.allowed_chain_id

    @property
    def vesting_contract(self) -> str:
        return self._ledger.vesting_contract

    @property
    def total_distributed(self) -> int:
        return self._ledger.total_distributed

    def last_claim_time(self, address: str) -> int:
        return self._ledger.last_claim_time(normalize_address(address))

    def next_claim_time(self, address: str) -> int:
        return self._ledger.next_claim_time(normalize_address(address))

    def token_balance(self) -> int:
        return self._claims.contract_balance()

    def owner(self) -> str:
        return self._access.owner()

    def is_paused(self) -> bool:
        return self._pause.is_paused()

    def in_flight(self) -> Optional[str]:
        """Name of the operation currently holding the reentrancy latch."""
        return self._guard.active

    def snapshot(self) -> Dict[str, Any]:
        out = self._journal.snapshot()
        out["paused"] = self.is_paused()
        out["owner"] = self.owner()
        return out

    # ------------------------------------------------------------------ #
    # Named dispatch
    # ------------------------------------------------------------------ #

    def call(self, op: str, caller: Optional[str] = None, *args: Any, **kwargs: Any) -> Any:
        entry = self._dispatch.get(op)
        if entry is None:
            raise OperationNotPermitted(op)
        handler, takes_caller = entry
        if takes_caller:
            return handler(caller, *args, **kwargs)
        return handler(*args, **kwargs)

    def execute(self, op: str, caller: Optional[str] = None, *args: Any, **kwargs: Any) -> Receipt:
        """Like `call`, but every FaucetError becomes a failed Receipt."""
        before = self._committed_ops
        try:
            result = self.call(op, caller, *args, **kwargs)
        except FaucetError as err:
            fields = error_to_receipt_fields(err)
            return Receipt(op=op, caller=caller, status=fields["status"], error=fields["error"])
        events: List[Dict[str, Any]] = []
        if self._committed_ops > before:
            events = [r.event.to_dict() for r in self._last_records]
        if isinstance(result, tuple):
            result = list(result)
        return Receipt(op=op, caller=caller, status="OK", result=result, events=events)


__all__ = ["Faucet", "Receipt", "TxScope"]
