"""
faucet.adapters.memory - deterministic in-memory implementations of every port.

These back the test-suite and the `faucet simulate` CLI. They are small but
strict: balances never go negative, transfers of more than a holder owns
raise `InsufficientFunds`, and ownership checks raise `NotOwner`.

Typical wiring
--------------
    host = MemoryHost.create(owner=alice, chain_id=1337, now=1_700_000_000)
    token = host.deploy_token("FCT")
    faucet = Faucet.deploy(host, base_asset=token.address)
    token.mint(faucet.address, 10_000)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..address import derive_address, normalize_address
from ..errors import InsufficientFunds, InvalidAddress, NotOwner
from ..constants import ZERO_ADDRESS

# =============================================================================
# Tokens
# =============================================================================


class InMemoryToken:
    """A fungible token ledger: address → balance."""

    def __init__(self, address: str, symbol: str = "TKN") -> None:
        self.address = normalize_address(address)
        self.symbol = symbol
        self._balances: Dict[str, int] = {}
        self.total_supply = 0
        self.transfers: List[Dict[str, Any]] = []

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("mint amount must be non-negative")
        to = normalize_address(to)
        self._balances[to] = self._balances.get(to, 0) + amount
        self.total_supply += amount

    def move(self, sender: str, to: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("transfer amount must be non-negative")
        sender, to = normalize_address(sender), normalize_address(to)
        bal = self._balances.get(sender, 0)
        if bal < amount:
            raise InsufficientFunds(sender, bal, amount, asset=self.symbol)
        self._balances[sender] = bal - amount
        self._balances[to] = self._balances.get(to, 0) + amount
        self.transfers.append({"from": sender, "to": to, "amount": amount})

    def port_for(self, holder: str) -> "HolderTokenPort":
        return HolderTokenPort(self, holder)


class HolderTokenPort:
    """`TokenTransferPort` view of an InMemoryToken for one holder."""

    def __init__(self, token: InMemoryToken, holder: str) -> None:
        self.token = token
        self.holder = normalize_address(holder)

    @property
    def address(self) -> str:
        return self.token.address

    def transfer(self, to: str, amount: int) -> bool:
        self.token.move(self.holder, to, amount)
        return True

    def balance_of(self, address: str) -> int:
        return self.token.balance_of(address)


# =============================================================================
# Access control & pause
# =============================================================================


class OwnableGate:
    """Single-owner access control. Renouncing leaves the zero address as owner."""

    def __init__(self, owner: str) -> None:
        self._owner = normalize_address(owner)

    def owner(self) -> str:
        return self._owner

    def is_owner(self, caller: str) -> bool:
        return self._owner != ZERO_ADDRESS and normalize_address(caller) == self._owner

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        """Returns the previous owner."""
        if not self.is_owner(caller):
            raise NotOwner(caller)
        new_owner = normalize_address(new_owner)
        if new_owner == ZERO_ADDRESS:
            raise InvalidAddress(new_owner, "new owner is the zero address")
        previous, self._owner = self._owner, new_owner
        return previous

    def renounce_ownership(self, caller: str) -> str:
        if not self.is_owner(caller):
            raise NotOwner(caller)
        previous, self._owner = self._owner, ZERO_ADDRESS
        return previous


class PauseSwitch:
    def __init__(self, paused: bool = False) -> None:
        self._paused = paused

    def is_paused(self) -> bool:
        return self._paused

    def set_paused(self, flag: bool) -> bool:
        """Set the flag; returns True when it actually changed."""
        changed = self._paused != bool(flag)
        self._paused = bool(flag)
        return changed


# =============================================================================
# Chain, contracts, native currency
# =============================================================================


class ManualChain:
    """A chain whose id and clock move only when told to."""

    def __init__(self, chain_id: int = 1337, now: int = 1_700_000_000) -> None:
        self._chain_id = int(chain_id)
        self._now = int(now)

    def chain_id(self) -> int:
        return self._chain_id

    def timestamp(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("time only moves forward")
        self._now += seconds
        return self._now

    def set_time(self, now: int) -> None:
        self._now = int(now)

    def switch_chain(self, chain_id: int) -> None:
        self._chain_id = int(chain_id)


class InMemoryRegistry:
    """Address → deployed object. Anything registered counts as having code."""

    def __init__(self) -> None:
        self._contracts: Dict[str, Any] = {}

    def deploy(self, address: str, contract: Any) -> str:
        address = normalize_address(address)
        self._contracts[address] = contract
        return address

    def has_code(self, address: str) -> bool:
        return normalize_address(address) in self._contracts

    def resolve(self, address: str) -> Optional[Any]:
        return self._contracts.get(normalize_address(address))

    def token_port(self, address: str, holder: str) -> Optional[HolderTokenPort]:
        obj = self.resolve(address)
        if isinstance(obj, InMemoryToken):
            return obj.port_for(holder)
        return None


class InMemoryNative:
    """Native-currency balances (the chain's own coin)."""

    def __init__(self, balances: Optional[Mapping[str, int]] = None) -> None:
        self._balances: Dict[str, int] = {normalize_address(a): int(v) for a, v in (balances or {}).items()}

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def credit(self, address: str, amount: int) -> None:
        address = normalize_address(address)
        self._balances[address] = self._balances.get(address, 0) + int(amount)

    def send(self, source: str, to: str, amount: int) -> None:
        source, to = normalize_address(source), normalize_address(to)
        bal = self._balances.get(source, 0)
        if bal < amount:
            raise InsufficientFunds(source, bal, amount, asset="native")
        self._balances[source] = bal - amount
        self._balances[to] = self._balances.get(to, 0) + amount


# =============================================================================
# Vesting
# =============================================================================


class ScriptedVestingDelegate:
    """
    A vesting contract that releases a fixed amount per template, once.

    Releases move tokens from the vesting contract's own holdings to the
    beneficiary. Templates without a release (or already released) move
    nothing, which the faucet reports as NoVestingTokensClaimed.
    """

    def __init__(self, token: InMemoryToken, address: str, beneficiary: str,
                 releases: Optional[Mapping[str, int]] = None) -> None:
        self.token = token
        self.address = normalize_address(address)
        self.beneficiary = normalize_address(beneficiary)
        self.releases: Dict[str, int] = dict(releases or {})
        self.calls: List[str] = []

    def claim_tokens_for_beneficiary(self, template_name: str) -> None:
        self.calls.append(template_name)
        amount = self.releases.pop(template_name, 0)
        if amount:
            self.token.move(self.address, self.beneficiary, amount)


# =============================================================================
# Host bundle
# =============================================================================


@dataclass
class MemoryHost:
    """Every in-memory port a faucet needs, plus helpers to populate them."""

    access: OwnableGate
    pause: PauseSwitch
    chain: ManualChain
    registry: InMemoryRegistry
    native: InMemoryNative
    tokens: Dict[str, InMemoryToken] = field(default_factory=dict)

    @classmethod
    def create(cls, owner: str, *, chain_id: int = 1337, now: int = 1_700_000_000) -> "MemoryHost":
        return cls(
            access=OwnableGate(owner),
            pause=PauseSwitch(),
            chain=ManualChain(chain_id=chain_id, now=now),
            registry=InMemoryRegistry(),
            native=InMemoryNative(),
        )

    def deploy_token(self, symbol: str, address: Optional[str] = None) -> InMemoryToken:
        token = InMemoryToken(address or derive_address(f"token:{symbol}"), symbol=symbol)
        self.registry.deploy(token.address, token)
        self.tokens[token.address] = token
        return token

    def deploy_vesting(self, token: InMemoryToken, beneficiary: str, *, locked: int = 0,
                       releases: Optional[Mapping[str, int]] = None,
                       address: Optional[str] = None) -> ScriptedVestingDelegate:
        delegate = ScriptedVestingDelegate(
            token,
            address or derive_address(f"vesting:{token.symbol}:{beneficiary}"),
            beneficiary,
            releases,
        )
        if locked:
            token.mint(delegate.address, locked)
        self.registry.deploy(delegate.address, delegate)
        return delegate


__all__ = [
    "InMemoryToken",
    "HolderTokenPort",
    "OwnableGate",
    "PauseSwitch",
    "ManualChain",
    "InMemoryRegistry",
    "InMemoryNative",
    "ScriptedVestingDelegate",
    "MemoryHost",
]
