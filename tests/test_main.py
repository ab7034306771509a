"""End-to-end tests for the sarif-filter CLI (typer CliRunner)."""

import json
import logging

import pytest
from typer.testing import CliRunner

from sarif_filter.main import LOG_LEVEL_ENV, app, get_log_level

runner = CliRunner()

REPORT = {
    "version": "2.1.0",
    "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
    "runs": [{
        "tool": {"driver": {"name": "Slither", "rules": [
            {"id": "reentrancy-eth"}, {"id": "naming-convention"},
        ]}},
        "results": [
            {
                "ruleId": "reentrancy-eth",
                "message": {"text": "Reentrancy in Vault.withdraw(uint256)"},
                "locations": [{"physicalLocation": {
                    "artifactLocation": {"uri": "file:///src/Vault.sol"},
                    "region": {"startLine": 40, "endLine": 48},
                }}],
            },
            {
                "ruleIndex": 1,
                "message": {"text": "Parameter _x is not in mixedCase: ünïcode"},
                "locations": [{"physicalLocation": {
                    "artifactLocation": {"uri": "lib/oz/ERC20.sol"},
                    "region": {"startLine": 7},
                }}],
            },
            {
                "ruleId": "unused-return",
                "message": {"text": "Token.mint ignores return value"},
                "locations": [{"physicalLocation": {
                    "artifactLocation": {"uri": "src/Token.sol"},
                    "region": {"startLine": 26},
                }}],
            },
        ],
    }],
}

CONFIG = {
    "suppressions": [
        {"check": "naming-convention", "file": "lib/**"},
        {"function": "withdraw", "file": "src/*.sol", "line": 44},
        {"check": "unused-return", "lineRange": "20-25"},
    ],
}


@pytest.fixture
def files(tmp_path):
    report = tmp_path / "in.sarif"
    config = tmp_path / "config.json"
    output = tmp_path / "out.sarif"
    report.write_text(json.dumps(REPORT), encoding="utf-8")
    config.write_text(json.dumps(CONFIG), encoding="utf-8")
    return report, config, output


def test_filters_and_prints_summary(files):
    report, config, output = files
    result = runner.invoke(app, [str(report), str(config), str(output)])
    assert result.exit_code == 0, result.output
    assert "SARIF filter: suppressed 2 result(s), kept 1 result(s)." in result.stdout

    filtered = json.loads(output.read_text(encoding="utf-8"))
    assert [r["ruleId"] for r in filtered["runs"][0]["results"]] == ["unused-return"]
    assert filtered["$schema"] == REPORT["$schema"]
    assert filtered["runs"][0]["tool"] == REPORT["runs"][0]["tool"]


def test_output_is_indented_json(files):
    report, config, output = files
    runner.invoke(app, [str(report), str(config), str(output)])
    text = output.read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert text.endswith("\n")


def test_second_pass_suppresses_nothing(files, tmp_path):
    report, config, output = files
    runner.invoke(app, [str(report), str(config), str(output)])
    second = tmp_path / "out2.sarif"
    result = runner.invoke(app, [str(output), str(config), str(second)])
    assert result.exit_code == 0
    assert "suppressed 0 result(s), kept 1 result(s)" in result.stdout
    assert json.loads(second.read_text(encoding="utf-8")) == json.loads(
        output.read_text(encoding="utf-8")
    )


def test_non_ascii_preserved(files):
    report, config, output = files
    config.write_text(json.dumps({"suppressions": []}), encoding="utf-8")
    runner.invoke(app, [str(report), str(config), str(output)])
    assert "ünïcode" in output.read_text(encoding="utf-8")


@pytest.mark.parametrize("count", [0, 1, 2])
def test_missing_arguments_exit_2(files, count):
    report, config, output = files
    args = [str(report), str(config), str(output)][:count]
    result = runner.invoke(app, args)
    assert result.exit_code == 2
    assert not output.exists()


def test_invalid_report_json_fails(files):
    report, config, output = files
    report.write_text("{", encoding="utf-8")
    result = runner.invoke(app, [str(report), str(config), str(output)])
    assert result.exit_code != 0
    assert isinstance(result.exception, json.JSONDecodeError)
    assert not output.exists()


def test_missing_config_file_fails(files, tmp_path):
    report, _, output = files
    result = runner.invoke(app, [str(report), str(tmp_path / "nope.json"), str(output)])
    assert result.exit_code not in (0, 2)
    assert isinstance(result.exception, OSError)
    assert not output.exists()


def test_malformed_line_range_does_not_block_run(files):
    report, config, output = files
    config.write_text(json.dumps({
        "suppressions": [{"check": "unused-return", "lineRange": "abc"}],
    }), encoding="utf-8")
    result = runner.invoke(app, [str(report), str(config), str(output)])
    assert result.exit_code == 0
    assert "suppressed 1 result(s), kept 2 result(s)" in result.stdout


def test_info_logging_prints_rule_table(files, monkeypatch):
    report, config, output = files
    monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")
    result = runner.invoke(app, [str(report), str(config), str(output)])
    assert result.exit_code == 0
    assert "Suppression rules" in result.output
    assert "SARIF filter: suppressed 2 result(s)" in result.stdout


@pytest.mark.parametrize("value,expected", [
    ("", logging.WARNING),
    ("debug", logging.DEBUG),
    ("INFO", logging.INFO),
    ("chatty", logging.WARNING),
])
def test_get_log_level(monkeypatch, value, expected):
    monkeypatch.setenv(LOG_LEVEL_ENV, value)
    assert get_log_level() == expected
