from __future__ import annotations

import io
import json
import logging

import pytest

from faucet import logging as flog
from faucet.config import (FaucetConfig, get_config, load_config,
                           parse_amount, parse_duration, summary)
from faucet.constants import (DEFAULT_COOLDOWN_PERIOD, DEFAULT_PAYOUT_AMOUNT,
                              MAX_CLAIM_THRESHOLD, ONE_TOKEN)
from faucet.errors import ConfigError, CooldownNotElapsed
from faucet.runtime.faucet import Faucet


@pytest.mark.parametrize(
    "raw,expected",
    [
        (5, 5),
        ("1000", 1000),
        ("1_000", 1000),
        ("200 tokens", 200 * ONE_TOKEN),
        ("5tok", 5 * ONE_TOKEN),
        ("3 Token", 3 * ONE_TOKEN),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "1.5", "-3", "ten", "5 coins"])
def test_parse_amount_rejects(raw):
    with pytest.raises(ValueError):
        parse_amount(raw)


@pytest.mark.parametrize(
    "raw,expected",
    [(3600, 3600), ("90", 90), ("90m", 5400), ("1h", 3600), ("2d", 172_800), ("45S", 45)],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


def test_defaults_from_empty_env():
    cfg = load_config(env={})
    assert cfg == FaucetConfig()
    assert cfg.payout_amount == DEFAULT_PAYOUT_AMOUNT
    assert cfg.cooldown_period == DEFAULT_COOLDOWN_PERIOD
    assert cfg.chain_id == 1337
    assert cfg.log_format is None


def test_env_values_are_parsed():
    cfg = load_config(env={
        "FAUCET_PAYOUT_AMOUNT": "50 tokens",
        "FAUCET_COOLDOWN_PERIOD": "2h",
        "FAUCET_CHAIN_ID": "99999",
        "FAUCET_LOG_LEVEL": "debug",
        "FAUCET_LOG_FORMAT": "JSON",
    })
    assert cfg.payout_amount == 50 * ONE_TOKEN
    assert cfg.cooldown_period == 7200
    assert cfg.chain_id == 99999
    assert cfg.log_level == "DEBUG"
    assert cfg.log_format == "json"


def test_overrides_win_over_env():
    cfg = load_config(env={"FAUCET_COOLDOWN_PERIOD": "2h"}, overrides={"cooldown_period": 60})
    assert cfg.cooldown_period == 60


@pytest.mark.parametrize(
    "env,key",
    [
        ({"FAUCET_PAYOUT_AMOUNT": "0"}, "payout_amount"),
        ({"FAUCET_PAYOUT_AMOUNT": str(MAX_CLAIM_THRESHOLD + 1)}, "payout_amount"),
        ({"FAUCET_COOLDOWN_PERIOD": "59"}, "cooldown_period"),
        ({"FAUCET_CHAIN_ID": "0"}, "chain_id"),
        ({"FAUCET_CHAIN_ID": "1"}, "chain_id"),
        ({"FAUCET_CHAIN_ID": "42161"}, "chain_id"),
        ({"FAUCET_LOG_LEVEL": "LOUD"}, "log_level"),
        ({"FAUCET_LOG_FORMAT": "xml"}, "log_format"),
    ],
)
def test_out_of_bounds_env_raises_config_error(env, key):
    with pytest.raises(ConfigError) as ei:
        load_config(env=env)
    assert ei.value.data["key"] == key


def test_unparseable_env_raises_config_error():
    with pytest.raises(ConfigError):
        load_config(env={"FAUCET_COOLDOWN_PERIOD": "soon"})


def test_get_config_is_cached_and_reads_environ(monkeypatch):
    monkeypatch.setenv("FAUCET_COOLDOWN_PERIOD", "120")
    cfg = get_config()
    assert cfg.cooldown_period == 120
    monkeypatch.setenv("FAUCET_COOLDOWN_PERIOD", "240")
    assert get_config() is cfg
    get_config.cache_clear()
    assert get_config().cooldown_period == 240


def test_faucet_seeds_from_process_config(monkeypatch, host, token):
    monkeypatch.setenv("FAUCET_PAYOUT_AMOUNT", "7 tokens")
    monkeypatch.setenv("FAUCET_COOLDOWN_PERIOD", "10m")
    faucet = Faucet.deploy(host, base_asset=token.address)
    assert faucet.payout_amount == 7 * ONE_TOKEN
    assert faucet.cooldown_period == 600


def test_summary_mentions_knobs():
    s = summary(FaucetConfig(cooldown_period=120))
    assert "cooldown=120s" in s and "chain_id=1337" in s and "auto" in s


# ---------------------------- logging -----------------------------------------


def test_json_logs_carry_operation_context(ready_faucet, alice):
    buf = io.StringIO()
    flog.configure(json=True, level="DEBUG", stream=buf)
    try:
        with flog.trace_scope("t-1"):
            ready_faucet.claim(alice)
    finally:
        logging.getLogger("faucet").handlers.clear()

    lines = [json.loads(line) for line in buf.getvalue().splitlines()]
    committed = [ln for ln in lines if ln["msg"] == "operation committed"]
    assert committed, lines
    rec = committed[-1]
    assert rec["op"] == "claim"
    assert rec["caller"] == alice
    assert rec["trace_id"] == "t-1"
    assert rec["events"] == ["TokensClaimed"]


def test_rejections_log_the_error_code(ready_faucet, alice):
    buf = io.StringIO()
    flog.configure(json=True, level="INFO", stream=buf)
    try:
        ready_faucet.claim(alice)
        with pytest.raises(CooldownNotElapsed):
            ready_faucet.claim(alice)
    finally:
        logging.getLogger("faucet").handlers.clear()

    lines = [json.loads(line) for line in buf.getvalue().splitlines()]
    warn = [ln for ln in lines if ln["level"] == "WARNING"]
    assert warn and warn[-1]["code"] == "COOLDOWN_NOT_ELAPSED"


def test_text_logs_are_one_line_per_record(ready_faucet, alice):
    buf = io.StringIO()
    flog.configure(json=False, level="INFO", stream=buf)
    try:
        ready_faucet.claim(alice)
    finally:
        logging.getLogger("faucet").handlers.clear()

    line = [ln for ln in buf.getvalue().splitlines() if ln.endswith("operation committed")][-1]
    assert "| INFO  | faucet.runtime |" in line
    assert f"op=claim caller={alice}" in line
