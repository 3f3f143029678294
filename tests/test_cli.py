"""Tests for the command-line interface."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import yaml

from samsung_tv import cli
from samsung_tv.errors import WakeOnLANConnectionError


def run_cli(monkeypatch, *argv) -> int:
    monkeypatch.setattr("sys.argv", ["samsungtv", *argv])
    return cli.main()


@pytest.fixture
def isolated_tokens(tmp_path, monkeypatch):
    """Keep stored tokens inside tmp_path."""
    from samsung_tv.config import TokenStorage, storage

    token_storage = TokenStorage(tmp_path / "tokens.json")
    monkeypatch.setattr(storage, "_default_storage", token_storage)
    return token_storage


def test_keys_lists_names(isolated_config, monkeypatch, capsys) -> None:
    """Test the keys command prints friendly names and wire tokens."""
    assert run_cli(monkeypatch, "keys") == 0

    out = capsys.readouterr().out
    assert "Navigation:" in out
    assert "KEY_VOLUP" in out


def test_unknown_key_suggests(isolated_config, monkeypatch, capsys) -> None:
    """Test an unknown key fails before connecting and suggests matches."""
    with patch.object(cli, "run_session") as run_session:
        assert run_cli(monkeypatch, "--ip", "192.168.0.1", "key", "vol") == 1

    run_session.assert_not_called()
    assert "Did you mean" in capsys.readouterr().err


def test_app_list(isolated_config, monkeypatch, capsys) -> None:
    """Test the built-in app catalog is printed."""
    assert run_cli(monkeypatch, "app", "list") == 0

    assert "111299001912" in capsys.readouterr().out


def test_config_add_and_show(isolated_config, monkeypatch, capsys) -> None:
    """Test adding a TV writes the config file and shows it as default."""
    assert run_cli(monkeypatch, "config", "add", "192.168.0.1", "--alias", "living_room", "--mac", "AA:BB:CC:DD:EE:FF") == 0

    saved = yaml.safe_load(isolated_config.read_text())
    assert saved["tvs"]["192.168.0.1"]["alias"] == "living_room"
    assert saved["default_tv"] == "living_room"

    capsys.readouterr()
    assert run_cli(monkeypatch, "config", "show") == 0
    assert "192.168.0.1 [living_room] (default)" in capsys.readouterr().out


def test_resolve_target_without_tv(isolated_config) -> None:
    """Test resolving a target with nothing configured is an error."""
    args = type("Args", (), {"ip": None, "tv": None})()

    with pytest.raises(ValueError, match="No default TV configured"):
        cli.resolve_target(args)


def test_create_commander_uses_stored_token(isolated_config, isolated_tokens) -> None:
    """Test the commander is created with the config app name and stored token."""
    isolated_config.write_text(
        "app_name: Remote\n"
        "tvs:\n"
        "  uuid:1:\n"
        "    host: 192.168.0.1\n"
        "    alias: living_room\n"
    )
    isolated_tokens.save_token("99999999", tv_id="uuid:1", host="192.168.0.1")
    args = type("Args", (), {"ip": None, "tv": "living_room", "app_name": None})()

    commander = cli.create_commander(args)

    assert commander.config.host == "192.168.0.1"
    assert commander.config.app == "Remote"
    assert commander.config.token == "99999999"
    assert commander.config.tv_id == "uuid:1"


def test_wake_uses_configured_mac(isolated_config, monkeypatch, capsys) -> None:
    """Test wake reads the MAC from the default TV."""
    isolated_config.write_text(
        "tvs:\n"
        "  uuid:1:\n"
        "    host: 192.168.0.1\n"
        "    mac: AA:BB:CC:DD:EE:FF\n"
    )

    with patch.object(cli, "wake_on_lan", return_value=None) as wake:
        assert run_cli(monkeypatch, "wake") == 0

    assert wake.call_args[0][0].mac == "AA:BB:CC:DD:EE:FF"
    assert "Magic packet sent!" in capsys.readouterr().out


def test_wake_failure(isolated_config, monkeypatch, capsys) -> None:
    """Test a failed wake reports the error."""
    error = WakeOnLANConnectionError("no network")
    with patch.object(cli, "wake_on_lan", return_value=error):
        assert run_cli(monkeypatch, "wake", "--mac", "AA:BB:CC:DD:EE:FF") == 1

    assert "Failed to send wake packet" in capsys.readouterr().err
