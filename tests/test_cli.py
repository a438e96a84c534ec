"""Tests for startup, key loading and the one-shot run."""

from __future__ import annotations

import pytest
from click.testing import CliRunner
from eth_account import Account as EthAccount

from conftest import FakeApi, FakeChainClient, make_config

from pharos_auto import cli, config
from pharos_auto.errors import ConfigError


def test_load_accounts_requires_keys():
    with pytest.raises(ConfigError, match="PRIVATE_KEYS"):
        cli.load_accounts([])


def test_load_accounts_accepts_keys_without_prefix():
    acct = EthAccount.create()
    raw = acct.key.hex().removeprefix("0x")
    [loaded] = cli.load_accounts([raw])

    assert loaded.address == acct.address
    assert loaded.private_key == "0x" + raw
    assert loaded.token is None


def test_load_accounts_rejects_garbage():
    with pytest.raises(ConfigError, match="private key #1 is invalid"):
        cli.load_accounts(["not-a-key"])


def test_main_exits_1_without_keys(monkeypatch):
    monkeypatch.setattr(cli, "load_private_keys", lambda: [])
    result = CliRunner().invoke(cli.main, [])
    assert result.exit_code == 1


def test_main_exits_1_on_invalid_input(monkeypatch):
    acct = EthAccount.create()
    monkeypatch.setattr(cli, "load_private_keys", lambda: [acct.key.hex()])
    result = CliRunner().invoke(cli.main, [], input="sometimes\n")
    assert result.exit_code == 1


def test_main_runs_manual_mode_and_exits_0(monkeypatch):
    acct = EthAccount.create()
    monkeypatch.setattr(cli, "load_private_keys", lambda: [acct.key.hex()])
    seen = {}
    monkeypatch.setattr(cli, "run_bot", lambda cfg, accounts: seen.update(cfg=cfg, accounts=accounts))

    result = CliRunner().invoke(cli.main, [], input="manual\n1\n1\n1.1\n0.01\nn\n")

    assert result.exit_code == 0, result.output
    assert seen["cfg"].mode == "manual"
    assert seen["accounts"][0].address == acct.address


def test_run_bot_one_shot_authenticates_checks_in_and_wraps():
    acct = cli.load_accounts([EthAccount.create().key.hex()])[0]
    client = FakeChainClient(native={acct.address: 10 ** 18})
    api = FakeApi(tokens={acct.address: "jwt"})

    cli.run_bot(make_config(), [acct], client=client, api=api)

    assert acct.token == "jwt"
    assert api.checkins == [(acct.address, "jwt")]
    assert client.calls == [("wrap", acct.address, 10 ** 16)]


def test_private_keys_are_read_from_env_when_asked(monkeypatch):
    monkeypatch.setenv("PRIVATE_KEYS", " 0xaa , ,bb ")
    assert config.load_private_keys() == ["0xaa", "bb"]
    assert not hasattr(config, "PRIVATE_KEYS")
