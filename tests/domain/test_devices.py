from __future__ import annotations

from enum import Enum

import pytest

from lib_log_stash.domain.devices import (
    ConsoleDeviceConfig,
    DeviceType,
    StdoutDeviceConfig,
    SyslogDeviceConfig,
    parse_device_config,
)
from lib_log_stash.domain.errors import ConfigurationError


class _Key(Enum):
    TYPE = "type"
    FLAGS = "flags"


def test_parse_stdout_config() -> None:
    assert parse_device_config({"type": "stdout"}) == StdoutDeviceConfig()


def test_parse_syslog_config_with_all_fields() -> None:
    config = parse_device_config(
        {
            "type": "syslog",
            "identity": "logstasher",
            "facility": "LOG_LOCAL1",
            "priority": "LOG_INFO",
            "flags": ["LOG_PID", "LOG_CONS"],
        }
    )

    assert config == SyslogDeviceConfig(
        identity="logstasher",
        facility="LOG_LOCAL1",
        priority="LOG_INFO",
        flags=("LOG_PID", "LOG_CONS"),
    )


def test_parse_syslog_defaults() -> None:
    config = parse_device_config({"type": "syslog"})

    assert isinstance(config, SyslogDeviceConfig)
    assert config.facility == "LOG_USER"
    assert config.priority == "LOG_INFO"
    assert config.flags == ()


def test_parse_accepts_enum_keys_and_comma_separated_flags() -> None:
    config = parse_device_config({_Key.TYPE: "SYSLOG", _Key.FLAGS: "LOG_PID, LOG_NDELAY"})

    assert isinstance(config, SyslogDeviceConfig)
    assert config.flags == ("LOG_PID", "LOG_NDELAY")


def test_parse_console_config() -> None:
    assert parse_device_config({"type": "console", "no_color": True}) == ConsoleDeviceConfig(no_color=True)


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_console_switches_must_be_booleans(value: object) -> None:
    with pytest.raises(ConfigurationError, match="console force_color must be a boolean"):
        parse_device_config({"type": "console", "force_color": value})


def test_parsed_configs_pass_through() -> None:
    config = SyslogDeviceConfig(identity="app")
    assert parse_device_config(config) is config


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"type": "kafka"}, "Unsupported device type"),
        ({"identity": "app"}, "requires a 'type'"),
        ("stdout", "must be a mapping"),
        ({"type": "syslog", "flags": 3}, "list of names"),
    ],
)
def test_parse_rejects_invalid_configs(raw: object, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        parse_device_config(raw)  # type: ignore[arg-type]


def test_device_type_from_name_is_case_insensitive() -> None:
    assert DeviceType.from_name("  STDOUT ") is DeviceType.STDOUT
    assert DeviceType.from_name(DeviceType.CONSOLE) is DeviceType.CONSOLE
