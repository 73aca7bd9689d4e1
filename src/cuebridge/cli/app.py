# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer

from ..config import ConfigError
from ..config_loader import load_config
from ..core.logging import configure_logging
from ..core.runtime.di import ServiceContainer, register_default_services
from ..errors import CueBridgeError
from ..messages import MessageCatalog
from .shared import CLIError, CLIState, build_cli_logger

ResultT = TypeVar("ResultT")

app = typer.Typer(
    name="cuebridge",
    help="Format and check CUE files through the cue command-line tool.",
    no_args_is_help=True,
    add_completion=False,
)


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def _guarded(state: CLIState, action: Callable[[], ResultT]) -> ResultT:
    """Run ``action`` translating bridge errors into a logged failure and exit status."""

    try:
        try:
            return action()
        except CueBridgeError as exc:
            raise state.error_from(exc) from exc
    except CLIError as exc:
        state.logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


@app.callback()
def main(
    ctx: typer.Context,
    cue: Annotated[
        Path | None,
        typer.Option("--cue", help="Path to the cue executable (defaults to searching PATH)."),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0.001, help="Seconds to wait for cue before giving up."),
    ] = None,
    root: Annotated[
        Path,
        typer.Option("--root", help="Project directory holding pyproject.toml or .cuebridge.toml."),
    ] = Path("."),
    messages: Annotated[
        Path | None,
        typer.Option("--messages", help="TOML file with localised user-facing messages."),
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Decorate messages with emoji.")] = True,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log command lines and discarded results.")] = False,
) -> None:
    """Load configuration and register services shared by every command."""

    configure_logging(debug=debug)
    logger = build_cli_logger(emoji=emoji, no_color=no_color)
    try:
        config = load_config(root).with_overrides(executable_path=cue, timeout=timeout)
        catalog = MessageCatalog.from_toml(messages) if messages is not None else None
    except (ConfigError, OSError, tomllib.TOMLDecodeError) as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=2) from exc

    container = ServiceContainer()
    register_default_services(container, config=config, catalog=catalog)
    ctx.obj = CLIState(services=container, logger=logger)


@app.command("fmt")
def fmt_command(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="File to format; stdin when omitted."),
    ] = None,
    write: Annotated[bool, typer.Option("--write", "-w", help="Rewrite the file in place.")] = False,
) -> None:
    """Format CUE source with ``cue fmt``."""

    state = _state(ctx)
    if write and path is None:
        state.logger.fail("--write requires a file argument")
        raise typer.Exit(code=2)
    content = path.read_text(encoding="utf-8") if path is not None else typer.get_text_stream("stdin").read()
    formatted = _guarded(state, lambda: state.service.format(content))
    if formatted is None:
        state.logger.fail("cue fmt did not produce formatted output")
        raise typer.Exit(code=1)
    if write and path is not None:
        if formatted != content:
            path.write_text(formatted, encoding="utf-8")
            state.logger.ok(f"Formatted {path}")
        return
    state.logger.echo(formatted, newline=False)


@app.command("vet")
def vet_command(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="File to check.")],
) -> None:
    """Check a CUE file with ``cue vet`` and print one line per diagnostic."""

    state = _state(ctx)
    records = _guarded(state, lambda: state.service.check(path))
    for record in records:
        state.logger.echo(f"{record.format_location()}: {record.message}")
    if records:
        raise typer.Exit(code=1)
    state.logger.ok(f"No problems reported for {path}")


@app.command("doctor")
def doctor_command(ctx: typer.Context) -> None:
    """Report the cue executable and effective settings."""

    state = _state(ctx)
    runner = state.services.resolve("command_runner")
    config = state.services.resolve("config")
    executable = _guarded(state, runner.resolve_executable)
    state.logger.section("cuebridge doctor")
    state.logger.ok(f"cue executable: {executable}")
    state.logger.info(f"timeout: {config.timeout:g}s")
    state.logger.info(f"vet exit policy: {config.vet_exit_policy.value}")


__all__ = ["app"]
