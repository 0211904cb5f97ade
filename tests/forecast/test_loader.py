"""Tests for loading recurring rules from YAML."""

from datetime import date
from decimal import Decimal

import pytest

from forecast.calendar_rule import Monthly, Once, Weekly, Yearly
from forecast.errors import InvalidRule
from forecast.loader import load_rule_definitions

RULES_YAML = """
rules:
  - description: Salary
    amount: 5000
    source: employer
    destination: checking
    start_date: 2024-01-01
    schedule:
      period: month
      on: 1
  - description: Groceries
    amount: 150.25
    source: checking
    destination: external
    start_date: 2024-01-01
    end_date: 2024-06-30
    schedule: {period: week, on: [friday]}
  - description: Roof Repair
    amount: 200
    source: checking
    destination: external
    start_date: 2024-01-01
    schedule: {period: once, on: 2024-02-15}
  - description: Insurance
    amount: 900
    source: checking
    destination: external
    start_date: 2024-01-01
    schedule: {period: year, on: 15, months: [mar, sep]}
"""


def write_rules(tmp_path, text):
    path = tmp_path / "rules.yaml"
    path.write_text(text)
    return path


class TestLoadRuleDefinitions:
    def test_reads_definitions_in_file_order(self, tmp_path):
        definitions = load_rule_definitions(write_rules(tmp_path, RULES_YAML))

        assert [d.description for d in definitions] == [
            "Salary",
            "Groceries",
            "Roof Repair",
            "Insurance",
        ]
        assert definitions[0].amount == Decimal("5000")
        assert definitions[1].end_date == date(2024, 6, 30)
        assert definitions[0].schedule.on == 1

    def test_missing_file_means_no_rules(self, tmp_path):
        assert load_rule_definitions(tmp_path / "missing.yaml") == []

    def test_empty_file_means_no_rules(self, tmp_path):
        assert load_rule_definitions(write_rules(tmp_path, "")) == []

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rule_definitions(write_rules(tmp_path, "rules: [unclosed"))

    def test_missing_field(self, tmp_path):
        text = """
rules:
  - description: Salary
    source: employer
    destination: checking
    start_date: 2024-01-01
    schedule: {period: month, on: 1}
"""
        with pytest.raises(ValueError, match="Invalid rules file"):
            load_rule_definitions(write_rules(tmp_path, text))


class TestRuleService:
    """Tests for RuleService.load, which resolves account names."""

    def test_builds_recurring_rules(self, tmp_path, services, accounts):
        rules = services.rules.load(write_rules(tmp_path, RULES_YAML))

        salary, groceries, repair, insurance = rules
        assert isinstance(salary.calendar_rule, Monthly)
        assert salary.source_id == accounts["employer"].id
        assert salary.destination_id == accounts["checking"].id
        assert isinstance(groceries.calendar_rule, Weekly)
        assert groceries.base_amount == Decimal("150.25")
        assert isinstance(repair.calendar_rule, Once)
        assert repair.calendar_rule.on == date(2024, 2, 15)
        assert isinstance(insurance.calendar_rule, Yearly)

        insurance_dates = [t.date for t in insurance.expand(date(2024, 1, 1), date(2024, 12, 31))]
        assert insurance_dates == [date(2024, 3, 15), date(2024, 9, 15)]

    def test_accounts_by_id(self, tmp_path, services, accounts):
        text = f"""
rules:
  - description: Transfer
    amount: 100
    source: {accounts["checking"].id}
    destination: {accounts["savings"].id}
    start_date: 2024-01-01
    schedule: {{period: month, on: 15}}
"""
        (rule,) = services.rules.load(write_rules(tmp_path, text))

        assert rule.source_id == accounts["checking"].id
        assert rule.destination_id == accounts["savings"].id

    def test_defaults_to_configured_path(self, test_config, services, accounts):
        test_config.rules_path.parent.mkdir(parents=True, exist_ok=True)
        test_config.rules_path.write_text(RULES_YAML)

        assert len(services.rules.load()) == 4

    def test_unknown_account(self, tmp_path, services, accounts):
        text = """
rules:
  - description: Lottery
    amount: 1000000
    source: lottery
    destination: checking
    start_date: 2024-01-01
    schedule: {period: once, on: 2024-05-01}
"""
        with pytest.raises(ValueError, match="unknown account 'lottery'"):
            services.rules.load(write_rules(tmp_path, text))

    def test_invalid_period(self, tmp_path, services, accounts):
        text = """
rules:
  - description: Salary
    amount: 5000
    source: employer
    destination: checking
    start_date: 2024-01-01
    schedule: {period: fortnight}
"""
        with pytest.raises(InvalidRule):
            services.rules.load(write_rules(tmp_path, text))

    def test_end_before_start(self, tmp_path, services, accounts):
        text = """
rules:
  - description: Gym
    amount: 50
    source: checking
    destination: external
    start_date: 2024-03-01
    end_date: 2024-01-01
    schedule: {period: month, on: 5}
"""
        with pytest.raises(InvalidRule):
            services.rules.load(write_rules(tmp_path, text))
