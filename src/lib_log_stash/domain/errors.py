"""Error taxonomy shared by every layer of the emission pipeline.

Purpose
-------
Give host applications a small, stable set of exception types so they can
tell misconfiguration, broken validators, and unserialisable payloads apart.

Contents
--------
* :class:`LogStashError` - common base class.
* :class:`ConfigurationError` - raised while configuring devices or contracts.
* :class:`InvalidContractError` - non-conforming validation contract.
* :class:`ValidationCapabilityError` - malformed validation results.
* :class:`SerializationError` - payload cannot be rendered as JSON.

System Role
-----------
Configuration failures surface synchronously at the point of configuration;
emission failures surface to the caller of ``emit``. Nothing here is ever
caught and swallowed inside the library.
"""

from __future__ import annotations


class LogStashError(Exception):
    """Base class for all library-specific failures."""


class ConfigurationError(LogStashError, ValueError):
    """Unknown device type, unknown syslog name, or invalid setting value."""


class InvalidContractError(ConfigurationError, TypeError):
    """Validation contract assignment with an object lacking ``evaluate``."""


class ValidationCapabilityError(LogStashError, RuntimeError):
    """The validation capability returned something the pipeline cannot use.

    Exceptions raised *inside* a contract's ``evaluate`` are never converted
    into this type; they reach the caller of ``emit`` unchanged.
    """


class SerializationError(LogStashError, TypeError):
    """Payload contains a value that cannot be represented as JSON."""


__all__ = [
    "ConfigurationError",
    "InvalidContractError",
    "LogStashError",
    "SerializationError",
    "ValidationCapabilityError",
]
