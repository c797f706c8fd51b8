from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from seed_farm.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("SEED_FARM_SESSION_PATH", str(tmp_path / "session.json"))
    monkeypatch.delenv("SEED_FARM_CONFIG", raising=False)
    monkeypatch.delenv("SEED_FARM_PRIVATE_KEY", raising=False)


def test_show_config_prints_redacted_settings():
    result = runner.invoke(
        app, ["--rpc-url", "https://rpc.example", "--show-config"],
        env={"SEED_FARM_PRIVATE_KEY": "0x" + "1" * 64},
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["rpc_url"] == "https://rpc.example"
    assert data["private_key"] == "***redacted***"


@pytest.mark.parametrize("args", [["approve"], ["stake", "1.5"], ["exit"]])
def test_actions_without_remembered_session_report_not_connected(args):
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "Please connect your wallet!" in result.output


def test_disconnect_removes_session_flag(tmp_path):
    session_path = tmp_path / "session.json"
    session_path.write_text(json.dumps({"walletConnected": "true"}))

    result = runner.invoke(app, ["disconnect"])

    assert result.exit_code == 0
    assert "Disconnected" in result.stdout
    assert not session_path.exists()
