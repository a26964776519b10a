"""Main CLI entry point for Parley"""

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from parley.__version__ import __version__
from parley.config.loader import ConfigLoader
from parley.controls import build_control
from parley.core.errors import ParleyError
from parley.core.inputs import ControlInput, ResolvedInput
from parley.interaction_model.generator import build_interaction_model
from parley.observability.logging import setup_logging
from parley.runtime.persistence import StateStore
from parley.runtime.turn import TurnResult, run_turn

app = typer.Typer(
    name="parley",
    help="Parley - mixed-initiative dialogue controls",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"Parley version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Parley - mixed-initiative dialogue controls"""
    pass


def _load_script(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    turns = data.get("turns", []) if isinstance(data, dict) else data
    if not isinstance(turns, list):
        raise typer.BadParameter(f"{path} must contain a list of turns")
    return turns


async def _simulate(config_path: Path, script_path: Path) -> tuple[list[TurnResult], StateStore]:
    config = ConfigLoader.load(config_path)
    store = StateStore()
    results: list[TurnResult] = []
    for turn_number, raw in enumerate(_load_script(script_path), start=1):
        # Controls are rebuilt every turn from persisted state.
        controls = [build_control(props) for props in config.controls]
        store.restore(controls)
        control_input = ControlInput(request=ResolvedInput.parse(raw), turn_number=turn_number)
        results.append(await run_turn(controls, control_input))
        store.save(controls)
    return results, store


@app.command()
def simulate(
    config: Path = typer.Argument(..., help="Control configuration YAML file or directory"),
    script: Path = typer.Argument(..., help="YAML list of resolved inputs, one per turn"),
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Log level"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Run a scripted conversation against the configured controls."""
    setup_logging(log_level.upper())
    try:
        results, store = asyncio.run(_simulate(config, script))
    except (ParleyError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(
            json.dumps(
                {"turns": [r.to_dict() for r in results], "state": store.states}, indent=2
            )
        )
        return

    table = Table(title="Simulation")
    table.add_column("Turn", justify="right")
    table.add_column("Acts")
    table.add_column("Prompt")
    for turn_number, result in enumerate(results, start=1):
        acts = ", ".join(f"{act.control_id}:{act.name.value}" for act in result.acts)
        table.add_row(str(turn_number), acts, result.prompt)
    console.print(table)
    console.print_json(store.to_json())


@app.command("interaction-model")
def interaction_model(
    config: Path = typer.Argument(..., help="Control configuration YAML file or directory"),
) -> None:
    """Print the intents and slot values the configured controls claim."""
    try:
        controls = [build_control(props) for props in ConfigLoader.load(config).controls]
    except (ParleyError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    typer.echo(json.dumps(build_interaction_model(controls).to_dict(), indent=2))


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
