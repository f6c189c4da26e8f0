from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from faucet.cli import main
from faucet.cli.scenario import account_address, parse_scenario, run_scenario
from faucet.constants import MAX_CLAIM_THRESHOLD, ONE_TOKEN
from faucet.errors import ConfigError

runner = CliRunner()

SCENARIO = {
    "chain_id": 1337,
    "now": 1_700_000_000,
    "owner": "owner",
    "accounts": ["alice", "bob"],
    "faucet": {"payout_amount": "200 tokens", "cooldown_period": "1h"},
    "funding": {"faucet": "1000 tokens", "native": 3},
    "vesting": {"locked": "5000 tokens", "releases": {"q1": "1000 tokens"}},
    "steps": [
        {"op": "claim", "caller": "alice"},
        {"op": "update_chain_id", "caller": "owner", "args": [1337]},
        {"op": "update_vesting_claim_contract", "caller": "owner", "args": ["vesting"]},
        {"op": "claim", "caller": "alice"},
        {"op": "claim", "caller": "alice", "advance": "30m"},
        {"op": "claim", "caller": "alice", "at": 1_700_003_600},
        {"op": "claim_vested_tokens", "caller": "owner", "args": ["q1"]},
        {"op": "withdraw", "caller": "owner", "args": ["bob"]},
        {"op": "update_chain_id", "caller": "owner", "args": [1]},
    ],
}


@pytest.fixture(autouse=True)
def _quiet_faucet_logger(monkeypatch):
    # keep stdout clean for JSON parsing
    monkeypatch.setenv("FAUCET_LOG_LEVEL", "ERROR")
    yield
    logging.getLogger("faucet").handlers.clear()


@pytest.fixture
def script(tmp_path: Path) -> Path:
    p = tmp_path / "scenario.yaml"
    p.write_text(yaml.safe_dump(SCENARIO), encoding="utf-8")
    return p


def test_run_scenario_statuses():
    result = run_scenario(parse_scenario(SCENARIO))
    statuses = [(r.op, r.status) for r in result.receipts]
    assert statuses == [
        ("claim", "REJECTED"),
        ("update_chain_id", "OK"),
        ("update_vesting_claim_contract", "OK"),
        ("claim", "OK"),
        ("claim", "REJECTED"),
        ("claim", "OK"),
        ("claim_vested_tokens", "OK"),
        ("withdraw", "OK"),
        ("update_chain_id", "REJECTED"),
    ]
    assert result.receipts[0].error["code"] == "VESTING_CONTRACT_UNSET"
    assert result.receipts[4].error["code"] == "COOLDOWN_NOT_ELAPSED"
    assert result.receipts[6].result == [600 * ONE_TOKEN, 1_600 * ONE_TOKEN]
    assert result.receipts[7].events[0]["args"]["destination"] == account_address("bob")
    assert result.state["total_distributed"] == 400 * ONE_TOKEN
    assert result.state["token_balance"] == 1_600 * ONE_TOKEN
    assert not result.ok


def test_run_scenario_is_deterministic():
    a = run_scenario(parse_scenario(SCENARIO))
    b = run_scenario(parse_scenario(SCENARIO))
    assert a.logs_digest == b.logs_digest
    assert a.to_dict() == b.to_dict()


def test_simulate_json(script: Path):
    res = runner.invoke(main.app, ["simulate", str(script), "--json"])
    assert res.exit_code == 0, res.output
    data = json.loads(res.stdout)
    assert len(data["receipts"]) == len(SCENARIO["steps"])
    assert data["logs_digest"].startswith("0x")
    assert data["addresses"]["alice"] == account_address("alice")


def test_simulate_text(script: Path):
    res = runner.invoke(main.app, ["simulate", str(script)])
    assert res.exit_code == 0, res.output
    assert "TokensClaimed(" in res.stdout
    assert "COOLDOWN_NOT_ELAPSED" in res.stdout
    assert "Final state:" in res.stdout


def test_simulate_strict_fails_on_rejection(script: Path):
    res = runner.invoke(main.app, ["simulate", str(script), "--strict"])
    assert res.exit_code == 1


def test_simulate_json_scenario_file(tmp_path: Path):
    p = tmp_path / "ok.json"
    p.write_text(json.dumps({
        "accounts": ["alice"],
        "funding": {"faucet": "200 tokens"},
        "vesting": {},
        "steps": [
            {"op": "update_chain_id", "caller": "owner", "args": [1337]},
            {"op": "update_vesting_claim_contract", "caller": "owner", "args": ["vesting"]},
            {"op": "claim", "caller": "alice"},
        ],
    }))
    res = runner.invoke(main.app, ["simulate", str(p), "--strict", "--json"])
    assert res.exit_code == 0, res.output
    assert json.loads(res.stdout)["state"]["token_balance"] == 0


def test_simulate_missing_file(tmp_path: Path):
    res = runner.invoke(main.app, ["simulate", str(tmp_path / "nope.yaml")])
    assert res.exit_code == 2


def test_bad_step_is_a_scenario_error():
    with pytest.raises(ConfigError):
        parse_scenario({"steps": [{"op": "claim", "when": 5}]})
    with pytest.raises(ConfigError):
        run_scenario(parse_scenario({"steps": [{"op": "claim", "caller": "owner", "args": [1, 2, 3]}]}))


def test_unknown_operation_gets_a_receipt():
    result = run_scenario(parse_scenario({"steps": [{"op": "mint", "caller": "owner"}]}))
    assert result.receipts[0].status == "REJECTED"
    assert result.receipts[0].error["code"] == "OPERATION_NOT_PERMITTED"


def test_numeric_template_names_are_passed_through():
    result = run_scenario(parse_scenario({
        "vesting": {"locked": "500 tokens", "releases": {"2024": "100 tokens"}},
        "steps": [
            {"op": "update_vesting_claim_contract", "caller": "owner", "args": ["vesting"]},
            {"op": "claim_vested_tokens", "caller": "owner", "args": ["2024"]},
        ],
    }))
    assert [r.status for r in result.receipts] == ["OK", "OK"]
    assert result.receipts[1].result == [0, 100 * ONE_TOKEN]
    assert result.state["token_balance"] == 100 * ONE_TOKEN


def test_amount_and_duration_arguments_accept_units():
    result = run_scenario(parse_scenario({
        "funding": {"faucet": "10 tokens"},
        "steps": [
            {"op": "update_payout_amount", "caller": "owner", "args": ["5 tokens"]},
            {"op": "update_cooldown_period", "caller": "owner", "kwargs": {"new": "2h"}},
            {"op": "rescue_tokens", "caller": "owner", "args": ["token", "owner", "3 tokens"]},
        ],
    }))
    assert result.ok
    assert result.state["payout_amount"] == 5 * ONE_TOKEN
    assert result.state["cooldown_period"] == 7200
    assert result.state["token_balance"] == 7 * ONE_TOKEN


def test_bad_amount_argument_is_a_scenario_error():
    with pytest.raises(ConfigError):
        run_scenario(parse_scenario({"steps": [{"op": "update_payout_amount", "caller": "owner", "args": ["lots"]}]}))


@pytest.mark.parametrize("chain_id", [0, 1, 137])
def test_scenario_rejects_mainnet_chain_ids(chain_id):
    with pytest.raises(ConfigError):
        parse_scenario({"chain_id": chain_id})


def test_limits_json():
    res = runner.invoke(main.app, ["limits", "--json"])
    assert res.exit_code == 0, res.output
    data = json.loads(res.stdout)
    assert data["max_claim_threshold"] == MAX_CLAIM_THRESHOLD
    assert data["min_cooldown_threshold"] == 60
    assert data["denied_chain_ids"]["ethereum"] == 1
    assert data["config"]["chain_id"] == 1337


def test_limits_text():
    res = runner.invoke(main.app, ["limits"])
    assert res.exit_code == 0, res.output
    assert "10000 tokens" in res.stdout
    assert "polygon" in res.stdout


def test_bad_log_level_exits_2():
    res = runner.invoke(main.app, ["--log-level", "LOUD", "limits"])
    assert res.exit_code == 2


def test_limits_reports_build_describe(monkeypatch):
    from faucet.version import git_describe

    monkeypatch.setenv("FAUCET_GIT_DESCRIBE", "v9.9.9-test")
    git_describe.cache_clear()
    try:
        res = runner.invoke(main.app, ["limits", "--json"])
    finally:
        git_describe.cache_clear()
    assert json.loads(res.stdout)["version"]["describe"] == "v9.9.9-test"
