"""
faucet.state.events - typed faucet events and the sinks that record them.

Events are immutable records with a fixed name and a fixed payload shape.
The runtime stages them in the journal next to the writes that caused them;
they reach a sink only when the surrounding operation commits, so a rejected
operation never leaves an event behind.

Backends
--------
- InMemoryEventSink: keeps every committed record in RAM (tests, CLI).

The in-memory sink also exposes a deterministic SHA3-256 digest over its
records so two runs of the same scenario can be compared cheaply.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Protocol, runtime_checkable

# =============================================================================
# Event types
# =============================================================================


@dataclass(frozen=True)
class Event:
    """Base class; subclasses set NAME and declare payload fields in order."""

    NAME: ClassVar[str] = "Event"
    # Payload key overrides for fields whose wire name differs from the attribute.
    KEYS: ClassVar[Dict[str, str]] = {}

    @property
    def name(self) -> str:
        return self.NAME

    def args(self) -> Dict[str, Any]:
        return {self.KEYS.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.NAME, "args": self.args()}


@dataclass(frozen=True)
class TokensClaimed(Event):
    NAME: ClassVar[str] = "TokensClaimed"
    wallet: str
    amount: int


@dataclass(frozen=True)
class CoolDownPeriodUpdated(Event):
    NAME: ClassVar[str] = "CoolDownPeriodUpdated"
    old: int
    new: int


@dataclass(frozen=True)
class PayoutAmountUpdated(Event):
    NAME: ClassVar[str] = "PayoutAmountUpdated"
    old: int
    new: int


@dataclass(frozen=True)
class VestingTokensClaimed(Event):
    NAME: ClassVar[str] = "VestingTokensClaimed"
    KEYS: ClassVar[Dict[str, str]] = {"old_balance": "oldBalance", "new_balance": "newBalance"}
    old_balance: int
    new_balance: int


@dataclass(frozen=True)
class VestingClaimContractUpdated(Event):
    NAME: ClassVar[str] = "VestingClaimContractUpdated"
    old: str
    new: str


@dataclass(frozen=True)
class ChainIdUpdated(Event):
    NAME: ClassVar[str] = "ChainIdUpdated"
    old: int
    new: int


@dataclass(frozen=True)
class Withdrawal(Event):
    NAME: ClassVar[str] = "Withdrawal"
    owner: str
    destination: str
    amount: int


@dataclass(frozen=True)
class Paused(Event):
    NAME: ClassVar[str] = "Paused"
    account: str


@dataclass(frozen=True)
class Unpaused(Event):
    NAME: ClassVar[str] = "Unpaused"
    account: str


@dataclass(frozen=True)
class TokensRescued(Event):
    NAME: ClassVar[str] = "TokensRescued"
    token: str
    to: str
    amount: int


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    NAME: ClassVar[str] = "OwnershipTransferred"
    previous: str
    new: str


# =============================================================================
# Records & sinks
# =============================================================================


@dataclass(frozen=True)
class EventRecord:
    """
    A committed event with its position in the faucet's history.

    seq   : 0-based global index, strictly increasing.
    op_id : 0-based index of the committed operation that emitted it.
    op    : operation name (e.g. "claim").
    """

    seq: int
    op_id: int
    op: str
    event: Event

    @property
    def name(self) -> str:
        return self.event.NAME

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": self.seq, "op_id": self.op_id, "op": self.op, **self.event.to_dict()}


@runtime_checkable
class EventSink(Protocol):
    def publish(self, op_id: int, op: str, events: List[Event]) -> List[EventRecord]:
        """Record the events of one committed operation, in order."""
        ...


class InMemoryEventSink:
    """Keeps every committed record; supports simple name filtering."""

    def __init__(self) -> None:
        self._records: List[EventRecord] = []

    def publish(self, op_id: int, op: str, events: List[Event]) -> List[EventRecord]:
        out: List[EventRecord] = []
        for ev in events:
            rec = EventRecord(seq=len(self._records), op_id=op_id, op=op, event=ev)
            self._records.append(rec)
            out.append(rec)
        return out

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(list(self._records))

    def records(self, name: Optional[str] = None) -> List[EventRecord]:
        if name is None:
            return list(self._records)
        return [r for r in self._records if r.name == name]

    def events(self, name: Optional[str] = None) -> List[Event]:
        return [r.event for r in self.records(name)]

    def last(self) -> Optional[EventRecord]:
        return self._records[-1] if self._records else None

    def logs_digest(self) -> str:
        """
        Deterministic digest over all records:
        sha3_256(b"FAUCET-LOGS\\0" || canonical-json(record)...) as 0x-hex.
        """
        h = hashlib.sha3_256(b"FAUCET-LOGS\0")
        for rec in self._records:
            h.update(json.dumps(rec.to_dict(), sort_keys=True, separators=(",", ":")).encode("utf-8"))
            h.update(b"\0")
        return "0x" + h.hexdigest()


__all__ = [
    "Event",
    "TokensClaimed",
    "CoolDownPeriodUpdated",
    "PayoutAmountUpdated",
    "VestingTokensClaimed",
    "VestingClaimContractUpdated",
    "ChainIdUpdated",
    "Withdrawal",
    "Paused",
    "Unpaused",
    "TokensRescued",
    "OwnershipTransferred",
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
]
