"""Click command line for emitting records and checking configuration.

Contents
--------
* :func:`cli` - command group with ``--use-dotenv`` and ``--config``.
* ``info``, ``emit``, ``check-config`` subcommands.
* :func:`main` - test-friendly runner returning an exit code.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Sequence

import click

from . import __init__conf__
from . import config as log_config
from .__init__conf__ import summary_info
from .domain import json_codec
from .domain.errors import LogStashError
from .runtime import LogStasher

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _load_settings(config_path: Path | None) -> dict[str, Any]:
    sources = [log_config.config_from_env()]
    if config_path is not None:
        sources.append(log_config.load_config_file(config_path))
    return log_config.merge_configs(*sources)


def build_stasher(config_path: Path | None = None) -> LogStasher:
    """Return a :class:`LogStasher` configured from the environment and ``config_path``.

    Without a ``device`` setting, lines go to standard output.
    """

    stasher = LogStasher()
    settings = _load_settings(config_path)
    if settings:
        stasher.load_from_config(settings)
        if "device" not in settings:
            stasher.writer = stasher.default_device
    return stasher


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before running commands.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with metadata/device/flag settings.",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool, config_path: Path | None) -> None:
    """Emit structured JSON lines to stdout, syslog, or a Rich console."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if log_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()

    ctx.obj = {"config_path": config_path}
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info")
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("emit")
@click.argument("payload", required=False)
@click.option("--event", "as_event", is_flag=True, help="Wrap the payload with @timestamp and @version.")
@click.pass_context
def cli_emit(ctx: click.Context, payload: str | None, as_event: bool) -> None:
    """Emit PAYLOAD (JSON text, or stdin when omitted) as one line."""

    text = payload if payload is not None else click.get_text_stream("stdin").read()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"payload is not valid JSON: {exc.msg}", param_hint="PAYLOAD") from exc
    try:
        build_stasher(ctx.obj["config_path"]).emit(data, as_event=as_event)
    except (LogStashError, TypeError) as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("check-config")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def cli_check_config(path: Path) -> None:
    """Load PATH through the device factory and print the resolved settings."""

    try:
        settings = log_config.load_config_file(path)
        stasher = LogStasher()
        stasher.load_from_config(settings)
    except LogStashError as exc:
        raise click.ClickException(str(exc)) from exc

    snapshot = stasher.snapshot()
    click.echo(f"device: {snapshot.writer!r}")
    click.echo(f"metadata: {json_codec.dumps(dict(snapshot.metadata))}")
    for key in ("include_parameters", "serialize_parameters", "silence_standard_logging"):
        click.echo(f"{key}: {str(getattr(snapshot, key)).lower()}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the click group without letting it call :func:`sys.exit`.

    Examples
    --------
    >>> main(["--version"])  # doctest: +ELLIPSIS
    lib_log_stash, version ...
    0
    """

    args = list(argv) if argv is not None else None
    try:
        cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    except click.exceptions.Exit as exit_request:
        return exit_request.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return 0


__all__ = ["build_stasher", "cli", "main"]
