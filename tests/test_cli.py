import json

import pytest

import buxfer_client.cli as cli
from buxfer_client.config import Settings


@pytest.fixture
def cli_settings(tmp_path, monkeypatch):
    s = Settings(_env_file=None, BUXFER_TOKEN="cli-token", CACHE_DIR=tmp_path)
    monkeypatch.setattr(cli, "load_settings", lambda: s)
    return s


def test_version(capsys):
    assert cli.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == "0.1.0"


def test_add_transaction_dry_run(cli_settings, capsys):
    code = cli.main(
        [
            "add-transaction",
            "-42.50",
            "Coffee",
            "--type",
            "expense",
            "--account",
            "Visa",
            "--tag",
            "food",
            "--tag",
            "cafe",
            "--date",
            "2024-01-31",
            "--dry-run",
        ]
    )
    assert code == 0

    out = json.loads(capsys.readouterr().out)
    assert out["endpoint"] == "add_transaction"
    assert out["params"] == {
        "token": "cli-token",
        "format": "sms",
        "text": "Coffee 42.50 ACCT:Visa TAGS:food,cafe DATE:2024-01-31",
    }


def test_list_transactions_dry_run(cli_settings, capsys):
    code = cli.main(["list-transactions", "--end", "2024-01-31", "--tag", "food", "--dry-run"])
    assert code == 0

    out = json.loads(capsys.readouterr().out)
    assert out["params"]["startDate"] == "2024-01-31"
    assert out["params"]["endDate"] == "2024-01-31"
    assert out["params"]["tagName"] == "food"
    assert "accountName" not in out["params"]


def test_validation_error_exit_code(cli_settings, capsys):
    code = cli.main(
        ["add-transaction", "10", "Move", "--account", "Checking", "--account", "Checking", "--dry-run"]
    )
    assert code == 2
    assert "same account" in capsys.readouterr().err


def test_invalid_type_is_usage_error(cli_settings):
    with pytest.raises(SystemExit):
        cli.main(["add-transaction", "10", "Thing", "--type", "gift"])


def test_silent_failure_exit_code(cli_settings, monkeypatch):
    monkeypatch.setattr(cli.Session, "list_accounts", lambda self, token=None: None)
    assert cli.main(["list-accounts"]) == 1


def test_status_env_masks_secrets(tmp_path, monkeypatch, capsys):
    s = Settings(_env_file=None, BUXFER_TOKEN="abcdefgh", BUXFER_PASSWORD="pw-secret", CACHE_DIR=tmp_path)
    monkeypatch.setattr(cli, "load_settings", lambda: s)

    assert cli.main(["status-env"]) == 0
    out = capsys.readouterr().out
    assert "abcdefgh" not in out
    assert "pw-secret" not in out
    assert "abcd****" in out


def test_mask():
    assert cli.mask(None) == "None"
    assert cli.mask("abc") == "***"
    assert cli.mask("abcdef") == "abcd**"


def test_invalid_master_key_exits_cleanly(tmp_path, monkeypatch, master_key):
    from buxfer_client.storage import TokenStore

    TokenStore(tmp_path, master_key).save("saved-token")
    s = Settings(_env_file=None, BUXFER_TOKEN=None, MASTER_KEY="not-a-fernet-key", CACHE_DIR=tmp_path)
    monkeypatch.setattr(cli, "load_settings", lambda: s)

    assert cli.main(["list-transactions", "--dry-run"]) == 0
    assert cli.main(["set-token", "abc"]) == 2


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "sNaN"])
def test_non_finite_amount_is_usage_error(cli_settings, amount):
    with pytest.raises(SystemExit) as ei:
        cli.main(["add-transaction", amount, "Coffee", "--dry-run"])
    assert ei.value.code == 2


def test_partial_result_warning_reported_once(cli_settings, monkeypatch, capsys, caplog):
    from buxfer_client.api import BuxferClient

    batch = [{"id": i, "description": f"tx {i}"} for i in range(100)]

    def fake_post(self, endpoint, form):
        return {"status": "OK", "numTransactions": 250, "transactions": batch}

    monkeypatch.setattr(BuxferClient, "post", fake_post)

    assert cli.main(["list-transactions"]) == 0

    out = capsys.readouterr()
    assert len(json.loads(out.out)) == 100
    assert "warning:" not in out.err
    assert len([r for r in caplog.records if "Returned 100 of 250" in r.getMessage()]) == 1

