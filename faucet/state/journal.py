"""
faucet.state.journal - journaling writes, checkpoints, revert/commit.

This module provides a deterministic, in-memory write journal layered over a
`FaucetState`. It supports nested checkpoints via a stack of overlays. Writes
go to the top overlay; reads consult overlays from top → base. `commit()`
merges the top overlay into the next layer (or the base state if it's the
last layer). `revert()` discards the top overlay.

Key properties
--------------
- Pure Python, no I/O.
- Scalar fields and the per-address claim-time mapping are staged separately.
- Events are staged alongside the writes that produced them and are released
  only when the outermost checkpoint commits.
- Nested checkpoints (begin/commit/revert) with O(changes) merge cost.

Intended usage
--------------
    j = Journal(state)
    marker = j.depth()
    j.begin()
    j.set_field("payout_amount", 500)
    j.set_claim_time(addr, 1_700_000_000)
    j.stage_event(PayoutAmountUpdated(old=200, new=500))
    j.commit_to(marker)            # or j.revert_to(marker) on failure
    released = j.commit()          # root: apply, return the released events

The journal does not validate anything; the runtime checks bounds and
permissions before writing.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Set

from .events import Event
from .ledger import FaucetState

_SCALAR_FIELDS: Set[str] = {f.name for f in fields(FaucetState)} - {"last_claim_time", "base_asset"}


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """
    A single journal layer.

    - `scalars`: staged scalar field values by name.
    - `claims`: staged last-claim timestamps by address.
    - `events`: events staged by the writes in this layer, in order.
    """

    scalars: Dict[str, Any] = field(default_factory=dict)
    claims: Dict[str, int] = field(default_factory=dict)
    events: List[Event] = field(default_factory=list)


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A copy-on-write write journal with nested checkpoints over one FaucetState.

    API highlights
    --------------
    - begin() / commit() / revert()
    - get_field() / set_field()
    - get_claim_time() / set_claim_time()
    - stage_event()
    - depth() / commit_to(marker) / revert_to(marker)

    The root layer (depth 1) is always present. Committing the root applies
    it to the base state and returns the events it carried.
    """

    def __init__(self, state: FaucetState) -> None:
        self._base = state
        self._layers: List[_Overlay] = [_Overlay()]

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of overlays (>= 1)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> List[Event]:
        """
        Commit the top overlay into its parent, or into the base state if it
        is the root. Returns the events that reached the base (empty when the
        commit only merged into a parent layer).
        """
        top = self._layers.pop()
        if self._layers:
            self._merge_layers(self._layers[-1], top)
            return []
        self._apply_to_base(top)
        self._layers.append(_Overlay())
        return list(top.events)

    def revert(self) -> None:
        """Discard the top overlay (or clear it if it's the root)."""
        if len(self._layers) > 1:
            self._layers.pop()
        else:
            self._layers[0] = _Overlay()

    def commit_to(self, marker: int) -> None:
        """
        Commit repeatedly until the current depth equals `marker`.
        The root layer itself is only applied by an explicit `commit()`.
        """
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.commit()

    def revert_to(self, marker: int) -> None:
        """Revert repeatedly until the current depth equals `marker`."""
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.revert()

    # --------------------------------------------------------------------- #
    # Scalar fields
    # --------------------------------------------------------------------- #

    def get_field(self, name: str) -> Any:
        if name == "base_asset":
            return self._base.base_asset
        if name not in _SCALAR_FIELDS:
            raise KeyError(f"unknown faucet field: {name}")
        for layer in reversed(self._layers):
            if name in layer.scalars:
                return layer.scalars[name]
        return getattr(self._base, name)

    def set_field(self, name: str, value: Any) -> None:
        if name not in _SCALAR_FIELDS:
            raise KeyError(f"field is not writable: {name}")
        self._layers[-1].scalars[name] = value

    # --------------------------------------------------------------------- #
    # Claim-time mapping
    # --------------------------------------------------------------------- #

    def get_claim_time(self, address: str) -> int:
        for layer in reversed(self._layers):
            if address in layer.claims:
                return layer.claims[address]
        return self._base.last_claim_time.get(address, 0)

    def set_claim_time(self, address: str, timestamp: int) -> None:
        self._layers[-1].claims[address] = int(timestamp)

    # --------------------------------------------------------------------- #
    # Events
    # --------------------------------------------------------------------- #

    def stage_event(self, event: Event) -> None:
        self._layers[-1].events.append(event)

    # --------------------------------------------------------------------- #
    # Internal merge/apply
    # --------------------------------------------------------------------- #

    @staticmethod
    def _merge_layers(dst: _Overlay, src: _Overlay) -> None:
        dst.scalars.update(src.scalars)
        dst.claims.update(src.claims)
        dst.events.extend(src.events)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for name, value in layer.scalars.items():
            setattr(self._base, name, value)
        self._base.last_claim_time.update(layer.claims)

    # --------------------------------------------------------------------- #
    # Introspection
    # --------------------------------------------------------------------- #

    def snapshot(self) -> Dict[str, Any]:
        """The visible state (base + overlays) as a plain dict."""
        out: Dict[str, Any] = {name: self.get_field(name) for name in sorted(_SCALAR_FIELDS)}
        out["base_asset"] = self._base.base_asset
        claims = dict(self._base.last_claim_time)
        for layer in self._layers:
            claims.update(layer.claims)
        out["last_claim_time"] = dict(sorted(claims.items()))
        return out


__all__ = ["Journal"]
