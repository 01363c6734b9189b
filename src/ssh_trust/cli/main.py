"""Typer-based command line interface for ssh-trust."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ..config import AppConfig, load_config
from ..errors import SshTrustError
from ..known_hosts import ensure_known_hosts
from ..logging import configure_logging
from ..paths import locate_store
from ..shell import Shell
from ..tools import resolve_tools_dir

app = typer.Typer(help="Keep ~/.ssh/known_hosts populated for unattended SSH")


@app.callback()
def main(ctx: typer.Context, config: Optional[Path] = typer.Option(None, "--config", metavar="PATH")) -> None:
    try:
        ctx.obj = load_config(config)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    configure_logging(ctx.obj.logging.normalized_level())


def _config(ctx: typer.Context) -> AppConfig:
    config: AppConfig = ctx.obj
    return config


@app.command()
def add(
    ctx: typer.Context,
    hosts: List[str] = typer.Argument(..., help="Hosts to trust"),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero when any host cannot be trusted"),
) -> None:
    result = ensure_known_hosts(hosts, _config(ctx), strict=False)
    for host, outcome in result.outcomes.items():
        typer.echo(f"{host}\t{outcome.value}")
    for host, exc in result.failures.items():
        typer.echo(f"{host}\tFAILED\t{exc}", err=True)
    if strict and not result.ok:
        raise typer.Exit(code=1)


@app.command()
def locate(ctx: typer.Context) -> None:
    try:
        paths = locate_store(_config(ctx).store.home)
    except SshTrustError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(str(paths.known_hosts))


@app.command()
def tools(ctx: typer.Context) -> None:
    try:
        directory = resolve_tools_dir(Shell(), config=_config(ctx).tools)
    except SshTrustError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(str(directory))


@app.command()
def version() -> None:
    from ..version import __version__

    typer.echo(__version__)


if __name__ == "__main__":  # pragma: no cover
    app()
