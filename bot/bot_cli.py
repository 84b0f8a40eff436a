#!/usr/bin/env python3

from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from bot.client import run_session
from bot.config import BotConfig, load_config
from bot.errors import BotConnectionError, ConfigError, SendError
from shared.log import configure_root_logging, get_logger

app = typer.Typer(help="PIZZABOT: answers chat commands on an AIRMASH server")
console = Console()
logger = get_logger(__name__)


def _load(config_path: Optional[Path]) -> BotConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Configuration error[/]: {e}")
        raise typer.Exit(code=2)


@app.command()
def run(
    server: Optional[str] = typer.Option(None, help="Game server websocket URL"),
    name: Optional[str] = typer.Option(None, help="Display name to log in with"),
    flag: Optional[str] = typer.Option(None, help="Two letter country flag code"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML configuration file"),
    log_level: Optional[str] = typer.Option(None, help="DEBUG, INFO, WARNING or ERROR"),
):
    """Log in and answer chat commands until disconnected."""
    cfg = _load(config).with_overrides(server=server, name=name, flag=flag, log_level=log_level)
    configure_root_logging(cfg.log_level)
    console.print(f"[bold green]{cfg.name} starting[/] on {cfg.server}")

    try:
        asyncio.run(run_session(cfg))
    except BotConnectionError as e:
        console.print(f"[red]Could not connect[/]: {e}")
        raise typer.Exit(code=1)
    except SendError as e:
        console.print(f"[red]Session aborted[/]: {e}")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("Interrupted")
        raise typer.Exit(code=130)

    console.print("[dim]Disconnected[/]")


@app.command()
def commands(
    config: Optional[Path] = typer.Option(None, "--config", help="YAML configuration file"),
):
    """Show the command table."""
    cfg = _load(config)
    table = Table(title="Chat commands")
    table.add_column("Command", no_wrap=True)
    table.add_column("Reply")
    table.add_column("Text")
    for command, rule in cfg.commands.items():
        table.add_row(command, getattr(rule, "kind", "custom"), getattr(rule, "text", ""))
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
