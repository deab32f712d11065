from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .exceptions import MalformedSaveError, NoSuitableGateError
from .simulator import Simulator, SimulatorConfig


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="towersim",
        description="Tick-driven airport control tower simulator",
    )

    # Save files
    saves = parser.add_argument_group("Save files")
    saves.add_argument(
        "--load",
        dest="load_dir",
        default=os.getenv("TOWERSIM_LOAD_DIR"),
        help="Directory containing a saved simulation (env: TOWERSIM_LOAD_DIR)",
    )
    saves.add_argument(
        "--save",
        dest="save_dir",
        default=os.getenv("TOWERSIM_SAVE_DIR"),
        help="Directory to write the simulation to when finished (env: TOWERSIM_SAVE_DIR)",
    )

    # Simulation
    sim = parser.add_argument_group("Simulation")
    sim.add_argument(
        "--ticks",
        type=int,
        default=int(os.getenv("TOWERSIM_TICKS", "100")),
        help="Number of ticks to run (env: TOWERSIM_TICKS)",
    )
    sim.add_argument(
        "--seed",
        type=int,
        default=(int(os.environ["TOWERSIM_SEED"]) if os.getenv("TOWERSIM_SEED") else None),
        help="Random seed for generated traffic (env: TOWERSIM_SEED)",
    )
    sim.add_argument(
        "--random-aircraft",
        type=int,
        default=0,
        help="Generate this many random aircraft; without --load a default airport is built",
    )
    sim.add_argument(
        "--scenario",
        choices=("default", "emergency"),
        default="default",
        help="Scenario to build when not loading a save",
    )

    # Output
    out = parser.add_argument_group("Output")
    out.add_argument("--report", action="store_true", help="Print an operations report at the end")
    out.add_argument("--quiet", action="store_true", help="Suppress console status output")
    out.add_argument("--verbose", action="store_true", help="Log every tower operation")

    ns = parser.parse_args(argv)
    if ns.ticks < 0:
        parser.error("--ticks must be non-negative")
    if ns.random_aircraft < 0:
        parser.error("--random-aircraft must be non-negative")
    return ns


def _configure_logging(console: Console, quiet: bool, verbose: bool) -> None:
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _status_table(sim: Simulator) -> Table:
    tower = sim.tower
    table = Table(title=f"Tick {tower.ticks_elapsed}")
    table.add_column("Callsign", style="bold")
    table.add_column("Model")
    table.add_column("Task")
    table.add_column("Fuel %", justify="right")
    table.add_column("Occupancy %", justify="right")
    table.add_column("Gate", justify="right")

    for aircraft in tower.aircraft:
        state = aircraft.get_state()
        gate = tower.find_gate_of_aircraft(aircraft)
        callsign = escape(state['callsign'])
        if state['emergency']:
            callsign = f"[red]{callsign} (EMERGENCY)[/red]"
        table.add_row(
            callsign,
            state['characteristics'],
            state['task'],
            str(state['fuel_percent']),
            str(state['occupancy_level']),
            str(gate.gate_number) if gate else "-",
        )
    return table


def _build_simulator(ns: argparse.Namespace, cfg: SimulatorConfig) -> Simulator:
    sim = Simulator(config=cfg)
    if cfg.load_dir:
        sim.load(cfg.load_dir)
    elif ns.scenario == "emergency":
        sim.create_emergency_scenario()
    else:
        sim.create_default_airport()

    if cfg.random_aircraft:
        if not sim.tower.terminals:
            sim.create_default_airport()
        sim.generate_random_traffic(cfg.random_aircraft)
    return sim


def main(argv: Optional[list[str]] = None) -> int:
    ns = parse_args(argv)

    console = Console(stderr=True)
    _configure_logging(console, ns.quiet, ns.verbose)

    cfg = SimulatorConfig(
        ticks=ns.ticks,
        seed=ns.seed,
        load_dir=ns.load_dir,
        save_dir=ns.save_dir,
        random_aircraft=ns.random_aircraft,
        progress_interval=0 if ns.quiet else 10,
    )

    try:
        sim = _build_simulator(ns, cfg)
    except MalformedSaveError as e:
        console.print(f"[red]Could not load save from {cfg.load_dir}:[/red] {escape(str(e))}")
        return 1
    except NoSuitableGateError as e:
        console.print(f"[red]Could not place aircraft:[/red] {escape(str(e))}")
        return 1

    sim.run(cfg.ticks)

    if not ns.quiet:
        console.print(_status_table(sim))
        console.print(str(sim.tower))
    if ns.report:
        Console().print(sim.generate_report(), markup=False, highlight=False)

    if cfg.save_dir:
        sim.save(cfg.save_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
