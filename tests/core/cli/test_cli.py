"""Tests for the CLI entry point."""

import json
import os

import pytest
import yaml
from click.testing import CliRunner

from payoffkit.core.cli import main

TWO_DEBTS = ["--debt", "Credit Card:5000:18:150", "--debt", "Store Card:3000:24:90"]


@pytest.fixture
def runner():
    return CliRunner()


class TestCliGroup:
    @pytest.mark.smoke
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ["loan", "payoff", "compare", "credit-card", "mortgage", "afford"]:
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, runner, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"simulation": {"max_months": 0}}, f)

        result = runner.invoke(main, ["--config", config_path, "loan", "-p", "1000", "-r", "5", "-t", "12"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestLoanCommand:
    @pytest.mark.smoke
    def test_json(self, runner):
        result = runner.invoke(main, ["loan", "-p", "20000", "-r", "5", "-t", "60", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["monthly_payment"] == 377.42
        assert data["summary"]["total_months"] == 60
        assert "schedule" not in data

    def test_schedule_and_start(self, runner):
        result = runner.invoke(
            main, ["loan", "-p", "20000", "-r", "5", "-t", "60", "--start", "2026-01", "--schedule", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["payoff_date"] == "2030-12-01"
        assert len(data["schedule"]) == 60

    def test_table(self, runner):
        result = runner.invoke(main, ["loan", "-p", "20000", "-r", "5", "-t", "60"])
        assert result.exit_code == 0
        assert "Loan Amortization" in result.output
        assert "48 more months" in result.output

    def test_payment_below_interest(self, runner):
        result = runner.invoke(main, ["loan", "-p", "100000", "-r", "12", "-t", "360", "--payment", "900"])
        assert result.exit_code == 1
        assert "does not cover" in result.output


class TestPayoffCommand:
    @pytest.mark.smoke
    def test_snowball_json(self, runner):
        result = runner.invoke(main, ["payoff", *TWO_DEBTS, "--strategy", "snowball", "--extra", "500", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["strategy"] == "snowball"
        assert data["monthly_budget"] == 740
        assert data["payoff_order"][0] == "Store Card"

    def test_table(self, runner):
        result = runner.invoke(main, ["payoff", *TWO_DEBTS, "--extra", "500"])
        assert result.exit_code == 0
        assert "Debt Payoff Plan (Avalanche)" in result.output

    def test_no_debts(self, runner):
        result = runner.invoke(main, ["payoff"])
        assert result.exit_code == 2
        assert "No debts given" in result.output

    @pytest.mark.parametrize("spec", ["Visa:100", "Visa:abc:18:50", "Visa:-100:18:50"])
    def test_bad_debt_spec(self, runner, spec):
        result = runner.invoke(main, ["payoff", "--debt", spec])
        assert result.exit_code == 2
        assert "--debt" in result.output

    def test_name_with_colon(self, runner):
        result = runner.invoke(main, ["payoff", "--debt", "Loan: Car:1000:0:100", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["debts"][0]["name"] == "Loan: Car"

    def test_budget_below_interest(self, runner):
        result = runner.invoke(main, ["payoff", "--debt", "Huge:100000:24:100"])
        assert result.exit_code == 1
        assert "does not cover" in result.output


class TestCompareCommand:
    def test_table(self, runner):
        result = runner.invoke(main, ["compare", *TWO_DEBTS, "--extra", "500"])
        assert result.exit_code == 0
        assert "Avalanche vs Snowball" in result.output

    def test_debts_file(self, runner, tmp_dir):
        path = os.path.join(tmp_dir, "debts.yaml")
        with open(path, "w") as f:
            yaml.dump(
                {
                    "debts": [
                        {"name": "Car Loan", "balance": 8000, "interest_rate": 6.5, "minimum_payment": 200},
                        {"name": "Visa", "balance": 2500, "interest_rate": 22.9, "minimum_payment": 75},
                        {"name": "Medical", "balance": 600, "interest_rate": 0, "minimum_payment": 50},
                    ]
                },
                f,
            )

        result = runner.invoke(main, ["compare", "--file", path, "--extra", "300", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["recommended_strategy"] == "avalanche"
        assert data["interest_savings"] > 0
        assert [d["name"] for d in data["avalanche"]["debts"]] == ["Car Loan", "Visa", "Medical"]

    def test_invalid_debts_file(self, runner, tmp_dir):
        path = os.path.join(tmp_dir, "debts.yaml")
        with open(path, "w") as f:
            yaml.dump([{"name": "Visa", "balance": 2500}], f)

        result = runner.invoke(main, ["compare", "--file", path])
        assert result.exit_code == 2
        assert "--file" in result.output


class TestCreditCardCommand:
    def test_fixed_payment(self, runner):
        result = runner.invoke(main, ["credit-card", "-b", "5000", "-r", "18", "--payment", "200", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["fixed_payment"]["total_months"] == 32
        assert data["minimum_only"]["first_payment"] == 100

    def test_minimum_rule_from_config(self, runner, tmp_config_file):
        result = runner.invoke(
            main,
            ["--config", tmp_config_file, "--log-level", "error", "credit-card", "-b", "5000", "-r", "18", "--json"],
        )
        assert result.exit_code == 0
        # 3% of $5,000
        assert json.loads(result.stdout)["minimum_only"]["first_payment"] == 150

    def test_option_beats_config(self, runner, tmp_config_file):
        result = runner.invoke(
            main,
            ["--config", tmp_config_file, "--log-level", "error", "credit-card", "-b", "5000", "-r", "18",
             "--min-percent", "2", "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["minimum_only"]["first_payment"] == 100

    def test_invalid_percent(self, runner):
        result = runner.invoke(main, ["credit-card", "-b", "5000", "-r", "18", "--min-percent", "0"])
        assert result.exit_code == 1
        assert "minimum_payment_percent" in result.output


class TestMortgageCommands:
    def test_mortgage_json(self, runner):
        result = runner.invoke(main, ["mortgage", "--price", "400000", "--down", "80000", "--rate", "6.5", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["loan_amount"] == 320000
        assert data["monthly"]["principal_and_interest"] == 2022.62

    def test_mortgage_table(self, runner):
        result = runner.invoke(
            main, ["mortgage", "--price", "400000", "--down", "40000", "--rate", "6.5", "--pmi-rate", "0.5"]
        )
        assert result.exit_code == 0
        assert "Mortgage Summary" in result.output
        assert "PMI drops off" in result.output

    def test_down_payment_too_large(self, runner):
        result = runner.invoke(main, ["mortgage", "--price", "100000", "--down", "200000", "--rate", "6"])
        assert result.exit_code == 1
        assert "exceeds home_price" in result.output

    def test_afford(self, runner):
        result = runner.invoke(main, ["afford", "--income", "120000", "--down", "60000", "--rate", "0"])
        assert result.exit_code == 0
        assert "Max home price: $1,068,000" in result.output
        assert "front-end limit" in result.output

    def test_afford_json(self, runner):
        result = runner.invoke(
            main, ["afford", "--income", "120000", "--debts", "1000", "--down", "60000", "--rate", "0", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["limiting_ratio"] == "back_end"
        assert data["max_loan_amount"] == 936000
