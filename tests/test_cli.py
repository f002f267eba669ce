"""CLI - end-to-end through typer against a temporary SQLite store."""

import pytest
from typer.testing import CliRunner

from cryptoex.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("CRYPTOEX_DATABASE_URL", url)
    monkeypatch.setenv("CRYPTOEX_SITE_URL", "https://demo.example/")
    return url


def test_register_then_whoami():
    result = runner.invoke(app, ["register", "cli@example.com", "--password", "password1"])
    assert result.exit_code == 0
    assert "Registered" in result.stdout

    result = runner.invoke(app, ["whoami"])
    assert result.exit_code == 0
    assert "cli@example.com" in result.stdout


def test_duplicate_register_exits_with_error():
    runner.invoke(app, ["register", "cli@example.com", "--password", "password1"])
    result = runner.invoke(app, ["register", "CLI@example.com", "--password", "password2"])

    assert result.exit_code == 1
    assert "already registered" in result.stdout


def test_login_wrong_password():
    runner.invoke(app, ["register", "cli@example.com", "--password", "password1"])
    runner.invoke(app, ["logout"])

    result = runner.invoke(app, ["login", "cli@example.com", "--password", "wrongpass"])

    assert result.exit_code == 1
    assert "Wrong password" in result.stdout


def test_whoami_signed_out():
    result = runner.invoke(app, ["whoami"])
    assert result.exit_code == 1
    assert "Not signed in" in result.stdout


def test_profile_update_and_show():
    runner.invoke(app, ["register", "cli@example.com", "--password", "password1"])

    result = runner.invoke(app, ["profile-update", "--first-name", "Ann", "--telegram", "@ann"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["profile"])
    assert "Ann" in result.stdout
    assert "@ann" in result.stdout


def test_exchange_history():
    runner.invoke(app, ["register", "cli@example.com", "--password", "password1"])
    runner.invoke(app, ["exchange-add", "--give", "btc", "--get", "usdt", "--amount", "0.5"])

    result = runner.invoke(app, ["history"])

    assert result.exit_code == 0
    assert "BTC" in result.stdout
    assert "USDT" in result.stdout


def test_referral_visit_and_summary():
    runner.invoke(app, ["register", "owner@example.com", "--password", "password1"])
    whoami = runner.invoke(app, ["whoami"])
    code = whoami.stdout.split("Referral code:")[1].strip()
    runner.invoke(app, ["logout"])

    runner.invoke(app, ["visit", f"https://demo.example/index.html?ref={code}"])
    runner.invoke(app, ["register", "friend@example.com", "--password", "password1"])
    runner.invoke(app, ["logout"])
    runner.invoke(app, ["login", "owner@example.com", "--password", "password1"])

    summary = runner.invoke(app, ["ref"])
    assert summary.exit_code == 0
    assert f"https://demo.example/index.html?ref={code}" in summary.stdout
    assert "Clicks: 1" in summary.stdout
    assert "Registrations: 1" in summary.stdout
    assert "friend@example.com" in summary.stdout


def test_visit_records_click():
    result = runner.invoke(app, ["visit", "https://demo.example/index.html?ref=FRIEND22"])
    assert result.exit_code == 0
    assert "Referral click recorded" in result.stdout
