"""
faucet.config - runtime configuration for the faucet core and its CLI.

This module centralizes the knobs that seed a freshly constructed faucet and
the tooling around it:
  • Initial payout amount and cooldown period
  • The chain id the in-memory simulator pretends to run on
  • Logging level and format

Configuration may be provided via environment variables. Safe defaults are
chosen so a local run works out of the box.

Environment variables (all optional):
  FAUCET_PAYOUT_AMOUNT     -> base units, or "<n> tokens" (default: 200 tokens)
  FAUCET_COOLDOWN_PERIOD   -> seconds, or "<n>s|m|h|d" (default: 3600)
  FAUCET_CHAIN_ID          -> chain id used by the simulator (default: 1337)
  FAUCET_LOG_LEVEL         -> DEBUG|INFO|WARNING|ERROR (default: INFO)
  FAUCET_LOG_FORMAT        -> json|text (default: auto, see faucet.logging)

Programmatic usage:
    from faucet.config import get_config
    cfg = get_config()
    faucet = Faucet(..., payout_amount=cfg.payout_amount, cooldown_period=cfg.cooldown_period)

Values are checked against the same bounds the admin setters enforce, so a
faucet can never be constructed in a state an owner could not have produced.
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

from .constants import (DEFAULT_COOLDOWN_PERIOD, DEFAULT_PAYOUT_AMOUNT,
                        DENIED_CHAIN_IDS, MAX_CLAIM_THRESHOLD,
                        MIN_COOLDOWN_THRESHOLD, ONE_TOKEN)
from .errors import ConfigError

# ----------------------------- helpers -------------------------------------

_AMOUNT_RE = re.compile(r"^\s*([0-9][0-9_]*)\s*(tok|token|tokens)?\s*$", re.IGNORECASE)
_DURATION_RE = re.compile(r"^\s*([0-9][0-9_]*)\s*([smhd])?\s*$", re.IGNORECASE)
_DURATION_MULT = {"s": 1, "m": 60, "h": 3600, "d": 86400}
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_amount(s: Union[str, int]) -> int:
    """
    Parse a token amount:
      "1000", "1_000", 1000      -> base units
      "200 tokens", "5tok"       -> n * 10**18
    """
    if isinstance(s, int):
        if s < 0:
            raise ValueError("amount must be non-negative")
        return s
    m = _AMOUNT_RE.match(str(s))
    if not m:
        raise ValueError(f"invalid amount: {s!r}")
    n = int(m.group(1).replace("_", ""))
    return n * ONE_TOKEN if m.group(2) else n


def parse_duration(s: Union[str, int]) -> int:
    """
    Parse a duration in seconds:
      "3600", 3600 -> 3600
      "90m" -> 5400, "1h" -> 3600, "2d" -> 172800
    """
    if isinstance(s, int):
        if s < 0:
            raise ValueError("duration must be non-negative")
        return s
    m = _DURATION_RE.match(str(s))
    if not m:
        raise ValueError(f"invalid duration: {s!r}")
    n = int(m.group(1).replace("_", ""))
    return n * _DURATION_MULT[(m.group(2) or "s").lower()]


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class FaucetConfig:
    payout_amount: int = DEFAULT_PAYOUT_AMOUNT
    cooldown_period: int = DEFAULT_COOLDOWN_PERIOD
    chain_id: int = 1337
    log_level: str = "INFO"
    log_format: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _validate(cfg: FaucetConfig) -> FaucetConfig:
    if not (0 < cfg.payout_amount <= MAX_CLAIM_THRESHOLD):
        raise ConfigError(
            f"payout_amount must be in (0, {MAX_CLAIM_THRESHOLD}]",
            key="payout_amount",
            value=cfg.payout_amount,
        )
    if cfg.cooldown_period < MIN_COOLDOWN_THRESHOLD:
        raise ConfigError(
            f"cooldown_period must be >= {MIN_COOLDOWN_THRESHOLD}",
            key="cooldown_period",
            value=cfg.cooldown_period,
        )
    if cfg.chain_id <= 0 or cfg.chain_id in DENIED_CHAIN_IDS:
        raise ConfigError("chain_id must be > 0 and not a mainnet id", key="chain_id", value=cfg.chain_id)
    if cfg.log_level not in _LOG_LEVELS:
        raise ConfigError("unknown log level", key="log_level", value=cfg.log_level)
    if cfg.log_format not in (None, "json", "text"):
        raise ConfigError("log_format must be json or text", key="log_format", value=cfg.log_format)
    return cfg


# ------------------------------ loader --------------------------------------


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int]]] = None,
) -> FaucetConfig:
    """
    Build a FaucetConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides keyed by FaucetConfig field name;
          they win over the environment.
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    def pick(name: str, var: str, default: Union[str, int, None]) -> Union[str, int, None]:
        if name in overrides:
            return overrides[name]
        return env.get(var, default)

    try:
        payout = parse_amount(pick("payout_amount", "FAUCET_PAYOUT_AMOUNT", DEFAULT_PAYOUT_AMOUNT))  # type: ignore[arg-type]
        cooldown = parse_duration(pick("cooldown_period", "FAUCET_COOLDOWN_PERIOD", DEFAULT_COOLDOWN_PERIOD))  # type: ignore[arg-type]
        chain_id = int(pick("chain_id", "FAUCET_CHAIN_ID", 1337))  # type: ignore[arg-type]
    except ValueError as e:
        raise ConfigError(str(e)) from e

    level = str(pick("log_level", "FAUCET_LOG_LEVEL", "INFO")).strip().upper()
    fmt_raw = pick("log_format", "FAUCET_LOG_FORMAT", None)
    fmt = str(fmt_raw).strip().lower() if fmt_raw not in (None, "") else None

    return _validate(
        FaucetConfig(
            payout_amount=payout,
            cooldown_period=cooldown,
            chain_id=chain_id,
            log_level=level,
            log_format=fmt,
        )
    )


@lru_cache(maxsize=1)
def get_config() -> FaucetConfig:
    """Cached process-wide config read from os.environ."""
    return load_config()


def summary(cfg: Optional[FaucetConfig] = None) -> str:
    """One-line summary of the active knobs."""
    cfg = cfg or get_config()
    return (
        "faucet{"
        f"payout={cfg.payout_amount}, cooldown={cfg.cooldown_period}s, "
        f"chain_id={cfg.chain_id}, log={cfg.log_level}/{cfg.log_format or 'auto'}"
        "}"
    )


__all__ = [
    "FaucetConfig",
    "parse_amount",
    "parse_duration",
    "load_config",
    "get_config",
    "summary",
]
