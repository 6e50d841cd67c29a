"""Typer CLI: rotate, check, status commands."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from filerotator import __version__

app = typer.Typer(
    name="filerotator",
    help="Size-triggered log file rotation.",
    no_args_is_help=True,
)
console = Console()

_OUTCOME_STYLES = {"done": "green", "skipped": "yellow", "failed": "red"}
_STRATEGIES = {"copy": True, "rename": False}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"filerotator v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """filerotator - size-triggered log file rotation."""


def _build_rotator(
    log_path: Path,
    config_file: Path | None,
    max_files: int | None,
    max_size: int | None,
    file_mode: str | None,
    strategy: str | None,
):
    from filerotator.config import find_config, load_config, parse_mode, rotator_from_config
    from filerotator.rotator import InvalidConfiguration

    if strategy is not None and strategy not in _STRATEGIES:
        console.print(f"  [red]Unknown strategy '{strategy}' (use copy or rename)[/red]")
        raise typer.Exit(1)

    config = load_config(config_file or find_config(log_path.parent))
    if max_files is not None:
        config["max_files"] = max_files
    if max_size is not None:
        config["max_file_size"] = max_size
    if file_mode is not None:
        config["file_mode"] = parse_mode(file_mode)
    if strategy is not None:
        config["rotate_by_copy"] = _STRATEGIES[strategy]

    try:
        return rotator_from_config(config)
    except InvalidConfiguration as exc:
        for message in str(exc).split("; "):
            console.print(f"  [red]Config error: {message}[/red]")
        raise typer.Exit(1)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def rotate(
    log_path: Path = typer.Argument(..., help="Active log file"),
    max_files: int = typer.Option(None, "--max-files", "-n", help="Backups to keep"),
    max_size: int = typer.Option(None, "--max-size", help="Size threshold in KB"),
    file_mode: str = typer.Option(None, "--file-mode", help="Octal mode for copied backups"),
    strategy: str = typer.Option(None, "--strategy", "-s", help="copy or rename"),
    config_file: Path = typer.Option(None, "--config", "-c", help="Config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every step"),
) -> None:
    """Rotate a log file now, regardless of its size."""
    _setup_logging(verbose)
    rotator = _build_rotator(log_path, config_file, max_files, max_size, file_mode, strategy)

    console.print(Panel(f"[bold]Rotating {log_path}[/bold]", style="blue"))
    steps = rotator.rotate_steps(log_path)

    if not steps:
        console.print("  [dim]Nothing to rotate[/dim]")
        return

    table = Table(title="Rotation Steps", show_lines=True)
    table.add_column("Action", style="bold", width=9)
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Outcome", width=8, no_wrap=True)
    for step in steps:
        style = _OUTCOME_STYLES[step.outcome.value]
        table.add_row(
            step.action.value,
            step.source,
            step.target or "",
            f"[{style}]{step.outcome.value}[/{style}]",
        )
    console.print(table)


@app.command()
def check(
    log_path: Path = typer.Argument(..., help="Active log file"),
    max_files: int = typer.Option(None, "--max-files", "-n", help="Backups to keep"),
    max_size: int = typer.Option(None, "--max-size", help="Size threshold in KB"),
    file_mode: str = typer.Option(None, "--file-mode", help="Octal mode for copied backups"),
    strategy: str = typer.Option(None, "--strategy", "-s", help="copy or rename"),
    config_file: Path = typer.Option(None, "--config", "-c", help="Config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every step"),
) -> None:
    """Rotate a log file only if it exceeds the size threshold."""
    from filerotator.log_rotation import rotate_if_needed

    _setup_logging(verbose)
    rotator = _build_rotator(log_path, config_file, max_files, max_size, file_mode, strategy)

    if rotate_if_needed(log_path, rotator):
        console.print(f"  [green]Rotated[/green] {log_path}")
    else:
        console.print(
            f"  [dim]Below {rotator.max_file_size} KB, not rotated:[/dim] {log_path}"
        )


@app.command()
def status(
    log_path: Path = typer.Argument(..., help="Active log file"),
    max_files: int = typer.Option(None, "--max-files", "-n", help="Backups to show"),
    config_file: Path = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show the rotation chain of a log file."""
    rotator = _build_rotator(log_path, config_file, max_files, None, None, None)

    table = Table(title=f"Rotation chain ({rotator.max_files} backups)", show_lines=True)
    table.add_column("Gen", style="bold", width=4)
    table.add_column("Path")
    table.add_column("Size", justify="right", no_wrap=True)

    for generation in range(rotator.max_files + 1):
        path = Path(rotator.generation_path(log_path, generation))
        if path.is_file():
            size = f"{path.stat().st_size} B"
        else:
            size = "[dim]missing[/dim]"
        table.add_row(str(generation), str(path), size)
    console.print(table)
    console.print(
        f"  Threshold: [cyan]{rotator.max_file_size} KB[/cyan]  "
        f"Strategy: [cyan]{'copy' if rotator.rotate_by_copy else 'rename'}[/cyan]"
    )
