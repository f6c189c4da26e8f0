from __future__ import annotations

"""
faucet.cli.main
---------------

`faucet` command line:

- simulate: run a YAML/JSON scenario against in-memory adapters and print
  one receipt per step.
- limits:   print protocol thresholds, the mainnet deny-list and the active
  configuration.

Examples (scenario format: see faucet.cli.scenario)
---------------------------------------------------
# Human-readable receipts
faucet simulate scenario.yaml

# Machine-readable output (receipts, logs digest, final state)
faucet simulate scenario.yaml --json

# Non-zero exit if any step was rejected
faucet simulate scenario.yaml --strict

# Thresholds as JSON
faucet limits --json
"""

import json
from pathlib import Path
from typing import Optional

import typer

from .. import logging as flog
from ..config import get_config, load_config, summary
from ..constants import (MAINNET_CHAIN_IDS, MAX_CLAIM_THRESHOLD,
                         MIN_COOLDOWN_THRESHOLD, TOKEN_DECIMALS)
from ..errors import ConfigError
from ..version import version_info
from .scenario import ScenarioResult, dumps_result, load_scenario, run_scenario

app = typer.Typer(
    name="faucet",
    add_completion=False,
    no_args_is_help=True,
    help="Cooldown-gated token faucet: scenario simulator and limits.",
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override FAUCET_LOG_LEVEL."),
    log_json: Optional[bool] = typer.Option(None, "--log-json/--log-text", help="Force JSON or text log lines."),
) -> None:
    try:
        cfg = load_config(overrides={"log_level": log_level} if log_level else None)
    except ConfigError as e:
        typer.secho(f"config error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)
    flog.configure_from_config(cfg)
    if log_json is not None:
        flog.configure(json=log_json, level=cfg.log_level)


# -------------------- rendering --------------------


def _print_text(result: ScenarioResult) -> None:
    for i, r in enumerate(result.receipts):
        color = typer.colors.GREEN if r.ok else typer.colors.RED
        line = f"[{i:>3}] {r.op:<30} {r.status:<8}"
        if r.ok and r.result is not None:
            line += f" result={r.result}"
        if r.error:
            line += f" {r.error['code']}: {r.error['message']}"
        typer.secho(line, fg=color)
        for ev in r.events:
            args = ", ".join(f"{k}={v}" for k, v in ev["args"].items())
            typer.echo(f"        {ev['name']}({args})")
    state = result.state
    typer.secho("Final state:", bold=True)
    for key in ("payout_amount", "cooldown_period", "allowed_chain_id", "vesting_contract",
                "total_distributed", "token_balance", "paused", "owner"):
        typer.echo(f"  {key:<18} {state.get(key)}")
    typer.echo(f"  {'logs_digest':<18} {result.logs_digest}")


# -------------------- commands --------------------


@app.command("simulate")
def simulate(
    script: Path = typer.Argument(..., help="Scenario file (YAML or JSON)."),
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any step is not OK."),
) -> None:
    """Run a scenario and print one receipt per step."""
    try:
        with flog.trace_scope():
            flog.bind(component="simulate")
            result = run_scenario(load_scenario(script))
    except ConfigError as e:
        typer.secho(f"scenario error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2)

    if json_out:
        typer.echo(dumps_result(result))
    else:
        _print_text(result)

    if strict and not result.ok:
        raise typer.Exit(1)


@app.command("limits")
def limits(
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Print thresholds, the mainnet deny-list and the active configuration."""
    cfg = get_config()
    data = {
        "version": version_info(),
        "token_decimals": TOKEN_DECIMALS,
        "max_claim_threshold": MAX_CLAIM_THRESHOLD,
        "min_cooldown_threshold": MIN_COOLDOWN_THRESHOLD,
        "denied_chain_ids": dict(sorted(MAINNET_CHAIN_IDS.items(), key=lambda kv: kv[1])),
        "config": cfg.to_dict(),
    }
    if json_out:
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"faucet {data['version']['describe']}")
    typer.secho("Thresholds:", bold=True)
    typer.echo(f"  max payout         {MAX_CLAIM_THRESHOLD} ({MAX_CLAIM_THRESHOLD // 10**TOKEN_DECIMALS} tokens)")
    typer.echo(f"  min cooldown       {MIN_COOLDOWN_THRESHOLD}s")
    typer.secho("Denied chain ids:", bold=True)
    for name, cid in data["denied_chain_ids"].items():
        typer.echo(f"  {cid:<12} {name}")
    typer.secho("Active config:", bold=True)
    typer.echo(f"  {summary(cfg)}")


if __name__ == "__main__":
    app()
