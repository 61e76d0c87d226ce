"""CLI behaviour coverage for the click command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_log_stash import __init__conf__
from lib_log_stash import cli as cli_mod
from lib_log_stash.__init__conf__ import summary_info


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    for name in (
        "LOGSTASH_METADATA",
        "LOGSTASH_DEVICE",
        "LOGSTASH_INCLUDE_PARAMETERS",
        "LOGSTASH_SERIALIZE_PARAMETERS",
        "LOGSTASH_SILENCE_STANDARD_LOGGING",
        "LIB_LOG_STASH_USE_DOTENV",
    ):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "logstash.toml"
    path.write_text(
        "[logstasher]\n"
        "silence_standard_logging = true\n"
        "[logstasher.metadata]\n"
        'namespace = "kirby"\n'
        "[logstasher.device]\n"
        'type = "stdout"\n'
    )
    return path


def test_cli_without_subcommand_prints_summary(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, [], prog_name=__init__conf__.shell_command)

    assert result.exit_code == 0
    assert result.output == summary_info()


def test_cli_info_command_matches_summary(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["info"])

    assert result.exit_code == 0
    assert result.output.startswith("Info for lib_log_stash:")
    assert result.output == summary_info()


def test_cli_version_option(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["--version"])

    assert result.exit_code == 0
    assert __init__conf__.version in result.output


def test_emit_writes_one_compact_line(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["emit", '{"yolo": "brolo", "n": [1, 2]}'])

    assert result.exit_code == 0, result.output
    assert result.stdout == '{"yolo":"brolo","n":[1,2]}\n'


def test_emit_reads_stdin(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["emit"], input='[{"yolo": "brolo"}]')

    assert result.exit_code == 0, result.output
    assert result.stdout == '[{"yolo":"brolo"}]\n'


def test_emit_event_adds_timestamp_and_version(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["emit", "--event", '{"yolo": "brolo"}'])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["yolo"] == "brolo"
    assert payload["@version"] == "1"
    assert payload["@timestamp"].endswith("Z")


def test_emit_applies_environment_metadata(runner: CliRunner) -> None:
    result = runner.invoke(
        cli_mod.cli,
        ["emit", '{"yolo": "brolo"}'],
        env={"LOGSTASH_METADATA": '{"namespace": "cooldude"}'},
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"yolo": "brolo", "metadata": {"namespace": "cooldude"}}


def test_emit_applies_config_file(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(cli_mod.cli, ["--config", str(config_file), "emit", '{"yolo": "brolo"}'])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"yolo": "brolo", "metadata": {"namespace": "kirby"}}


def test_emit_rejects_invalid_json(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["emit", "{nope"])

    assert result.exit_code == 2
    assert "payload is not valid JSON" in result.output


def test_emit_rejects_scalar_payloads(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["emit", "42"])

    assert result.exit_code == 1
    assert "payload must be a mapping, an Event, or a sequence" in result.output


def test_emit_reports_configuration_errors(runner: CliRunner) -> None:
    result = runner.invoke(cli_mod.cli, ["emit", "{}"], env={"LOGSTASH_DEVICE": "fax"})

    assert result.exit_code == 1
    assert "Unsupported device type: 'fax'" in result.output


def test_check_config_prints_resolved_settings(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(cli_mod.cli, ["check-config", str(config_file)])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("device: StreamDevice(")
    assert lines[1] == 'metadata: {"namespace":"kirby"}'
    assert lines[2:] == [
        "include_parameters: true",
        "serialize_parameters: true",
        "silence_standard_logging: true",
    ]


def test_check_config_without_device_reports_null_writer(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "plain.toml"
    path.write_text("include_parameters = false\n")

    result = runner.invoke(cli_mod.cli, ["check-config", str(path)])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[0] == "device: NullDevice()"
    assert "include_parameters: false" in result.output


def test_check_config_rejects_unknown_facility(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text('[logstasher.device]\ntype = "syslog"\nfacility = "LOG_LOCAL42"\n')

    result = runner.invoke(cli_mod.cli, ["check-config", str(path)])

    assert result.exit_code == 1
    assert "Unknown syslog facility: 'LOG_LOCAL42'" in result.output


def test_main_returns_zero_for_info(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_mod.main(["info"]) == 0
    assert capsys.readouterr().out == summary_info()


def test_main_returns_error_codes(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    assert cli_mod.main(["check-config", str(tmp_path / "missing.toml")]) == 1
    assert "configuration file not found" in capsys.readouterr().err

    assert cli_mod.main(["emit", "{nope"]) == 2
    assert "payload is not valid JSON" in capsys.readouterr().err


def test_build_stasher_defaults_to_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOGSTASH_METADATA", raising=False)
    monkeypatch.delenv("LOGSTASH_DEVICE", raising=False)
    monkeypatch.setenv("LOGSTASH_INCLUDE_PARAMETERS", "false")

    stasher = cli_mod.build_stasher()

    assert stasher.include_parameters is False
    assert stasher.writer is stasher.default_device
