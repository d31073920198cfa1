"""Tests for the propmon CLI commands."""

import json

import pytest
from click.testing import CliRunner

from src.business.cli.commands.evaluate import EXIT_CRITICAL, EXIT_ERROR, EXIT_OK, EXIT_WARNINGS
from src.business.cli.main import cli

RULES = {
    "phase1": {"profitTargetAmount": 800, "maxDailyLoss": 5, "maxDailyLossAmount": 500,
               "maxOverallLoss": 10, "maxOverallLossAmount": 1000},
    "phase2": {"profitTargetAmount": 500, "maxDailyLoss": 5, "maxOverallLoss": 10,
               "minTradingDays": 5, "consistencyRules": True},
    "funded": {"maxDailyLoss": 5, "maxOverallLoss": 10, "consistencyRules": True},
}


def _trade(trade_id, pnl, open_time, close_time="2025-01-20T12:00:00Z"):
    return {
        "id": trade_id,
        "symbol": "EURUSD",
        "side": "buy",
        "volume": 0.1,
        "openPrice": 1.085,
        "openTime": open_time,
        "closeTime": close_time,
        "pnlGross": pnl,
    }


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def account_file(write_json):
    return write_json("account.json", {
        "id": "acc-1",
        "login": "5550001",
        "initialBalance": 10000,
        "currentPhase": "PHASE_1",
        "propFirmTemplate": {"name": "CLI 10k", "accountSize": 10000, "rulesJson": RULES},
    })


class TestEvaluateCommand:
    """Tests for `propmon evaluate`."""

    def test_compliant_text(self, runner, account_file, write_json):
        trades = write_json("trades.json", [_trade("t1", 900, "2025-01-20T10:00:00Z")])
        result = runner.invoke(cli, ["evaluate", "-a", account_file, "-t", trades, "--as-of", "2025-01-20T15:00:00Z"])

        assert result.exit_code == EXIT_OK
        assert "✅ COMPLIANT" in result.output
        assert "Can advance to PHASE_2" in result.output

    def test_critical_json(self, runner, account_file, write_json):
        trades = write_json("trades.json", {"trades": [_trade("t1", -600, "2025-01-20T10:00:00Z")]})
        result = runner.invoke(
            cli,
            ["evaluate", "-a", account_file, "-t", trades, "--as-of", "2025-01-20T15:00:00Z", "-o", "json"],
        )

        assert result.exit_code == EXIT_CRITICAL
        data = json.loads(result.stdout)
        assert data["evaluation"]["isCompliant"] is False
        assert data["evaluation"]["violations"][0]["ruleType"] == "DAILY_LOSS"
        assert data["safeCapacity"] == {"daily": 0.0, "overall": 400.0}
        assert data["account"]["template"] == "CLI 10k"

    def test_warnings_exit_code(self, runner, write_json):
        account = write_json("account.json", {
            "id": "acc-2",
            "initialBalance": 10000,
            "currentPhase": "PHASE_2",
            "propFirmTemplate": {"name": "CLI 10k", "accountSize": 10000, "rulesJson": RULES},
        })
        trades = write_json("trades.json", [
            _trade("t1", 200, "2025-01-19T10:00:00Z", "2025-01-19T11:00:00Z"),
            _trade("t2", 200, "2025-01-20T10:00:00Z"),
        ])
        result = runner.invoke(cli, ["evaluate", "-a", account, "-t", trades, "--as-of", "2025-01-20T15:00:00Z"])

        assert result.exit_code == EXIT_WARNINGS
        assert "Minimum trading days not met: 2 < 5 days" in result.output

    def test_template_by_name(self, runner, write_json):
        account = write_json("account.json", {"id": "acc-3", "login": "1", "currentPhase": "PHASE_1"})
        trades = write_json("trades.json", [])
        result = runner.invoke(
            cli,
            ["evaluate", "-a", account, "-t", trades, "-T", "FTMO Challenge 10k", "-o", "json"],
        )

        assert result.exit_code == EXIT_WARNINGS
        data = json.loads(result.stdout)
        assert data["account"]["propFirm"] == "FTMO"
        assert data["evaluation"]["metrics"]["totalTrades"] == 0

    def test_missing_template(self, runner, write_json):
        account = write_json("account.json", {"id": "acc-4", "initialBalance": 10000})
        trades = write_json("trades.json", [])
        result = runner.invoke(cli, ["evaluate", "-a", account, "-t", trades])

        assert result.exit_code == EXIT_ERROR
        assert "no PropFirm template" in result.output

    def test_invalid_trades_file(self, runner, account_file, write_json):
        trades = write_json("trades.json", [{"symbol": "EURUSD"}])
        result = runner.invoke(cli, ["evaluate", "-a", account_file, "-t", trades])
        assert result.exit_code == EXIT_ERROR


class TestTemplatesCommand:
    """Tests for `propmon templates`."""

    def test_lists_shipped_templates(self, runner):
        result = runner.invoke(cli, ["templates"])
        assert result.exit_code == 0
        assert "PropNumberOne Challenge 7k" in result.output
        assert "FUNDED" in result.output

    def test_filter_by_firm(self, runner):
        result = runner.invoke(cli, ["templates", "--firm", "ftmo"])
        assert result.exit_code == 0
        assert "FTMO Challenge 10k" in result.output
        assert "PropNumberOne" not in result.output

    def test_no_match(self, runner):
        result = runner.invoke(cli, ["templates", "--firm", "Nobody"])
        assert result.exit_code == 0
        assert "没有匹配的模板" in result.output

    @pytest.mark.parametrize(
        "content",
        [
            "templates:\n  - name: Seven\n    account_size: 7k\n    rules: {}\n",
            "- name: Seven\n  account_size: 7000\n",
        ],
    )
    def test_malformed_templates_file(self, runner, tmp_path, content):
        path = tmp_path / "templates.yaml"
        path.write_text(content, encoding="utf-8")

        result = runner.invoke(cli, ["templates", "--templates-file", str(path)])

        assert result.exit_code == EXIT_ERROR
        assert "❌ 错误" in result.output
