"""
faucet.cli.scenario - load and run simulation scripts against in-memory hosts.

A scenario is a YAML (or JSON) mapping:

    chain_id: 1337                 # simulated chain (default: FAUCET_CHAIN_ID)
    now: 1700000000                # starting clock
    owner: owner                   # account name that deploys the faucet
    accounts: [owner, alice, bob]  # names → deterministic addresses
    token: FCT                     # base asset symbol
    faucet:
      payout_amount: 200 tokens
      cooldown_period: 1h
    funding:
      faucet: 1000 tokens          # base asset minted to the faucet
      native: 5                    # native currency credited to the faucet
    vesting:                       # optional scripted vesting contract
      locked: 5000 tokens
      releases: {q1: 1000 tokens}
    steps:
      - {op: update_chain_id, caller: owner, args: [1337]}
      - {op: update_vesting_claim_contract, caller: owner, args: [vesting]}
      - {op: claim, caller: alice, at: 1700003600}
      - {op: claim, caller: alice, advance: 60}

String arguments naming an account, or one of `faucet`, `token`, `vesting`,
are replaced with the matching address. Amount and duration parameters
(`update_payout_amount`, `update_cooldown_period`, `rescue_tokens`, `receive`)
also accept "200 tokens" or "1h"; every other string is passed through as is,
so vesting template names stay opaque. Each step runs through
`Faucet.execute`, so a rejected step produces a receipt instead of aborting
the run.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from ..address import derive_address
from ..adapters.memory import MemoryHost, ScriptedVestingDelegate
from ..config import FaucetConfig, get_config, parse_amount, parse_duration
from ..constants import DENIED_CHAIN_IDS
from ..errors import ConfigError
from ..logging import get_logger
from ..runtime.faucet import Faucet, Receipt

log = get_logger("faucet.cli.scenario")

_STEP_KEYS = frozenset(("op", "caller", "args", "kwargs", "at", "advance"))

# op -> (position in args, keyword, parser) of the one argument given in units
_UNIT_PARAMS: Dict[str, Tuple[int, str, Callable[[Any], int]]] = {
    "update_payout_amount": (0, "new", parse_amount),
    "update_cooldown_period": (0, "new", parse_duration),
    "rescue_tokens": (2, "amount", parse_amount),
    "receive": (0, "value", parse_amount),
}


@dataclass
class Step:
    op: str
    caller: Optional[str] = None
    args: List[Any] = field(default_factory=list)
    kwargs: Dict[str, Any] = field(default_factory=dict)
    at: Optional[int] = None
    advance: Optional[int] = None


@dataclass
class Scenario:
    chain_id: int
    now: int
    owner: str
    accounts: List[str]
    token: str = "FCT"
    payout_amount: Optional[int] = None
    cooldown_period: Optional[int] = None
    faucet_funding: int = 0
    native_funding: int = 0
    vesting_locked: Optional[int] = None
    vesting_releases: Dict[str, int] = field(default_factory=dict)
    steps: List[Step] = field(default_factory=list)


@dataclass
class ScenarioResult:
    receipts: List[Receipt]
    logs_digest: str
    state: Dict[str, Any]
    addresses: Dict[str, str]

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.receipts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "addresses": self.addresses,
            "receipts": [r.to_dict() for r in self.receipts],
            "logs_digest": self.logs_digest,
            "state": self.state,
        }


def account_address(name: str) -> str:
    return derive_address(f"account:{name}")


# ----------------------------- loading ---------------------------------------


def load_scenario(source: Union[str, Path], cfg: Optional[FaucetConfig] = None) -> Scenario:
    path = Path(source)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"scenario not found: {path}", key="script", value=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"scenario is not valid YAML/JSON: {e}", key="script", value=str(path)) from e
    return parse_scenario(raw or {}, cfg)


def parse_scenario(raw: Mapping[str, Any], cfg: Optional[FaucetConfig] = None) -> Scenario:
    if not isinstance(raw, Mapping):
        raise ConfigError("scenario must be a mapping", key="script")
    cfg = cfg or get_config()

    owner = str(raw.get("owner", "owner"))
    accounts = [str(a) for a in raw.get("accounts", [])]
    if owner not in accounts:
        accounts.insert(0, owner)

    faucet_cfg = raw.get("faucet") or {}
    funding = raw.get("funding") or {}
    vesting = raw.get("vesting")

    try:
        sc = Scenario(
            chain_id=int(raw.get("chain_id", cfg.chain_id)),
            now=int(raw.get("now", 1_700_000_000)),
            owner=owner,
            accounts=accounts,
            token=str(raw.get("token", "FCT")),
            payout_amount=_opt(faucet_cfg.get("payout_amount"), parse_amount),
            cooldown_period=_opt(faucet_cfg.get("cooldown_period"), parse_duration),
            faucet_funding=parse_amount(funding.get("faucet", 0)),
            native_funding=parse_amount(funding.get("native", 0)),
        )
        if vesting is not None:
            sc.vesting_locked = parse_amount(vesting.get("locked", 0))
            sc.vesting_releases = {str(k): parse_amount(v) for k, v in (vesting.get("releases") or {}).items()}
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"bad scenario header: {e}", key="script") from e
    if sc.chain_id <= 0 or sc.chain_id in DENIED_CHAIN_IDS:
        raise ConfigError("chain_id must be > 0 and not a mainnet id", key="chain_id", value=sc.chain_id)

    for i, entry in enumerate(raw.get("steps") or []):
        sc.steps.append(_parse_step(i, entry))
    return sc


def _opt(value: Any, parse: Any) -> Optional[int]:
    return None if value is None else parse(value)


def _parse_step(index: int, entry: Any) -> Step:
    if not isinstance(entry, Mapping) or "op" not in entry:
        raise ConfigError(f"step {index} must be a mapping with an 'op'", key=f"steps[{index}]")
    unknown = set(entry) - _STEP_KEYS
    if unknown:
        raise ConfigError(f"step {index} has unknown keys: {sorted(unknown)}", key=f"steps[{index}]")
    args = entry.get("args") or []
    if not isinstance(args, list):
        args = [args]
    return Step(
        op=str(entry["op"]),
        caller=None if entry.get("caller") is None else str(entry["caller"]),
        args=list(args),
        kwargs=dict(entry.get("kwargs") or {}),
        at=None if entry.get("at") is None else int(entry["at"]),
        advance=None if entry.get("advance") is None else parse_duration(entry["advance"]),
    )


# ----------------------------- running ---------------------------------------


def run_scenario(sc: Scenario) -> ScenarioResult:
    host = MemoryHost.create(account_address(sc.owner), chain_id=sc.chain_id, now=sc.now)
    token = host.deploy_token(sc.token)
    faucet = Faucet.deploy(
        host,
        base_asset=token.address,
        payout_amount=sc.payout_amount,
        cooldown_period=sc.cooldown_period,
    )

    names: Dict[str, str] = {name: account_address(name) for name in sc.accounts}
    names["faucet"] = faucet.address
    names["token"] = token.address

    if sc.faucet_funding:
        token.mint(faucet.address, sc.faucet_funding)
    if sc.native_funding:
        host.native.credit(faucet.address, sc.native_funding)
    if sc.vesting_locked is not None:
        delegate: ScriptedVestingDelegate = host.deploy_vesting(
            token, faucet.address, locked=sc.vesting_locked, releases=sc.vesting_releases
        )
        names["vesting"] = delegate.address

    receipts: List[Receipt] = []
    for i, step in enumerate(sc.steps):
        if step.at is not None:
            host.chain.set_time(step.at)
        if step.advance is not None:
            host.chain.advance(step.advance)
        caller = names.get(step.caller, step.caller) if step.caller is not None else None
        args, kwargs = _resolve_args(i, step, names)
        try:
            receipt = faucet.execute(step.op, caller, *args, **kwargs)
        except TypeError as e:
            raise ConfigError(f"step {i} ({step.op}): {e}", key=f"steps[{i}]") from e
        log.debug("step done", extra={"step": i, "op": step.op, "status": receipt.status})
        receipts.append(receipt)

    state = faucet.snapshot()
    state["token_balance"] = faucet.token_balance()
    return ScenarioResult(
        receipts=receipts,
        logs_digest=faucet.sink.logs_digest(),  # type: ignore[attr-defined]
        state=state,
        addresses=names,
    )


def _resolve_args(
    index: int,
    step: Step,
    names: Mapping[str, str],
) -> Tuple[List[Any], Dict[str, Any]]:
    units = _UNIT_PARAMS.get(step.op)

    def resolve(position: Optional[int], keyword: Optional[str], value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if value in names:
            return names[value]
        if units is not None and (position == units[0] or keyword == units[1]):
            try:
                return units[2](value)
            except ValueError as e:
                raise ConfigError(f"step {index} ({step.op}): {e}", key=f"steps[{index}]") from e
        return value

    args = [resolve(i, None, a) for i, a in enumerate(step.args)]
    kwargs = {k: resolve(None, k, v) for k, v in step.kwargs.items()}
    return args, kwargs


def dumps_result(result: ScenarioResult) -> str:
    return json.dumps(result.to_dict(), indent=2, sort_keys=True)


__all__ = [
    "Step",
    "Scenario",
    "ScenarioResult",
    "account_address",
    "load_scenario",
    "parse_scenario",
    "run_scenario",
    "dumps_result",
]
