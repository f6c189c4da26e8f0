"""
faucet.state - the faucet's owned state, its write journal and its events.

- ledger:  FaucetState (the single owned record) and PayoutLedger (typed view)
- journal: staged writes with nested checkpoints and commit/revert
- events:  typed event records and sinks
"""

from .events import Event, EventRecord, InMemoryEventSink
from .journal import Journal
from .ledger import FaucetState, PayoutLedger

__all__ = [
    "Event",
    "EventRecord",
    "InMemoryEventSink",
    "Journal",
    "FaucetState",
    "PayoutLedger",
]
