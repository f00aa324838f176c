"""CLI entry point for buffer-cycle."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click

from buffer_cycle import __version__
from buffer_cycle.checker import GraphRenderer, StateExplorer, render_dot
from buffer_cycle.config import MachineSettings, load_config
from buffer_cycle.processor import Action, CycleMachine, ProcessState
from buffer_cycle.utils.logging import configure_logging, get_logger, get_run_id
from buffer_cycle.utils.result import ExitCode

# Default paths
DEFAULT_CONFIG = "./config"

ACTION_CHOICES = [a.name.lower().replace("_", "-") for a in Action]
STATE_CHOICES = [s.value for s in ProcessState]


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, settings: MachineSettings) -> None:
        self.settings = settings
        self.logger = get_logger("cli")


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))


def machine_at(state: ProcessState) -> CycleMachine:
    """A fresh machine driven forward until it reaches state."""
    machine = CycleMachine()
    for _ in range(len(ProcessState)):
        if machine.state == state:
            break
        machine.next()
    return machine


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=False, path_type=Path),
    default=DEFAULT_CONFIG,
    help="Path to config directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level (overrides config)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format (overrides config)",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path,
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    buffer-cycle - a three-state machine cycling idle, bufferring, computing.

    Runs the machine, applies single transitions, and checks its invariants
    across the whole reachable state space.
    """
    result = load_config(config)
    if result.is_err():
        output_json({
            "status": "error",
            "message": str(result.unwrap_err()),
        })
        ctx.exit(ExitCode.CONFIG_INVALID)

    settings = result.unwrap()
    configure_logging(
        level=log_level or settings.logging.level,
        format_type=log_format or settings.logging.format,
    )

    ctx.obj = Context(settings)
    ctx.obj.logger.debug("cli_started", run_id=get_run_id(), config=str(config))


@cli.command()
@click.option(
    "--steps",
    type=click.IntRange(min=0),
    default=None,
    help="Number of next() steps (default from config)",
)
@pass_context
def run(ctx: Context, steps: Optional[int]) -> None:
    """Run the machine with next() and print the visited states."""
    if steps is None:
        steps = ctx.settings.run.steps

    machine = CycleMachine()
    trace = machine.run(steps)

    ctx.logger.info("run_completed", steps=steps, final_state=machine.state.value)

    output_json({
        "status": "success",
        "trace": [s.value for s in trace],
        "final_state": machine.state.value,
        "type_ok": machine.type_ok(),
        "stats": machine.stats.to_dict(),
    })


@cli.command()
@click.argument(
    "action",
    type=click.Choice(ACTION_CHOICES, case_sensitive=False),
)
@click.option(
    "--from",
    "from_state",
    type=click.Choice(STATE_CHOICES, case_sensitive=False),
    default=ProcessState.IDLE.value,
    help="State to apply the action in",
)
@pass_context
def step(ctx: Context, action: str, from_state: str) -> None:
    """Apply a single ACTION and report whether it was applicable."""
    machine = machine_at(ProcessState.parse(from_state))
    before = machine.state
    result = machine.apply(Action.parse(action))

    if result.is_ok():
        output_json({
            "status": "applied",
            "applied": True,
            "from_state": before.value,
            "state": machine.state.value,
        })
        return

    output_json({
        "status": "not_applicable",
        "applied": False,
        "from_state": before.value,
        "state": machine.state.value,
        "reason": str(result.unwrap_err()),
        "enabled": [a.name for a in machine.enabled_actions()],
    })


@cli.command()
@click.option(
    "--max-states",
    type=click.IntRange(min=1),
    default=None,
    help="Abort after this many states (default from config)",
)
@click.pass_context
def check(click_ctx: click.Context, max_states: Optional[int]) -> None:
    """Explore all reachable states and check TypeOK in each."""
    ctx: Context = click_ctx.obj
    explorer = StateExplorer(
        max_states=max_states or ctx.settings.explorer.max_states,
    )

    result = explorer.explore()
    if result.is_err():
        output_json({
            "status": "error",
            "message": str(result.unwrap_err()),
        })
        click_ctx.exit(ExitCode.EXPLORATION_FAILED)

    exploration = result.unwrap()
    output_json({
        "status": "success" if exploration.ok else "violated",
        **exploration.to_dict(),
    })

    if not exploration.ok:
        click_ctx.exit(ExitCode.INVARIANT_VIOLATED)


@cli.command()
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write DOT to this file instead of stdout",
)
@click.pass_context
def graph(click_ctx: click.Context, output: Optional[Path]) -> None:
    """Render the reachable state graph as Graphviz DOT."""
    ctx: Context = click_ctx.obj
    result = StateExplorer(max_states=ctx.settings.explorer.max_states).explore()
    if result.is_err():
        output_json({
            "status": "error",
            "message": str(result.unwrap_err()),
        })
        click_ctx.exit(ExitCode.EXPLORATION_FAILED)

    exploration = result.unwrap()

    if output is None:
        click.echo(render_dot(exploration), nl=False)
        return

    GraphRenderer().write(exploration, output)
    output_json({
        "status": "success",
        "output_path": str(output),
    })


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
