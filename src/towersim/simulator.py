"""
Main airport simulator.

Drives the control tower tick by tick, feeds the operations monitor and
builds scenarios.
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .aircraft import Aircraft, AircraftCharacteristics, create_aircraft
from .control_tower import ControlTower
from .exceptions import NoSuitableGateError
from .ground import AirplaneTerminal, Gate, HelicopterTerminal, Terminal
from .operations_monitor import OperationsMonitor, TowerMetrics
from .persistence import load_control_tower, save_control_tower
from .tasks import Task, TaskList, TaskType

logger = logging.getLogger(__name__)


@dataclass
class SimulatorConfig:
    ticks: int = 100
    seed: Optional[int] = None
    load_dir: Optional[str] = None
    save_dir: Optional[str] = None
    random_aircraft: int = 0
    # Log progress every this many ticks; 0 disables progress logging
    progress_interval: int = 10


AIRLINES = ["QFA", "VOZ", "JST", "UAL", "ANZ", "SIA"]

# Task cycles used for generated traffic; the LOAD percentage is filled in per aircraft
TASK_PATTERNS = [
    [TaskType.AWAY, TaskType.AWAY, TaskType.LAND, TaskType.WAIT, TaskType.LOAD, TaskType.TAKEOFF],
    [TaskType.AWAY, TaskType.LAND, TaskType.LOAD, TaskType.TAKEOFF],
    [TaskType.AWAY, TaskType.AWAY, TaskType.AWAY, TaskType.LAND, TaskType.WAIT, TaskType.WAIT,
     TaskType.LOAD, TaskType.TAKEOFF],
]


class Simulator:
    """
    Main airport simulator.

    Owns a control tower and an operations monitor and advances them together.
    """

    def __init__(
        self,
        tower: Optional[ControlTower] = None,
        config: Optional[SimulatorConfig] = None
    ):
        """
        Initialize simulator.

        Args:
            tower: Tower to drive (creates an empty one if None)
            config: Simulation settings (defaults if None)
        """
        self.config = config or SimulatorConfig()
        self.tower = tower or ControlTower()
        self.monitor = OperationsMonitor()
        self._rng = random.Random(self.config.seed)

    @property
    def current_tick(self) -> int:
        return self.tower.ticks_elapsed

    def add_terminal(self, terminal: Terminal):
        self.tower.add_terminal(terminal)

    def add_aircraft(self, aircraft: Aircraft):
        """Add an aircraft to the simulation."""
        self.tower.add_aircraft(aircraft)

    def get_aircraft(self, callsign: str) -> Optional[Aircraft]:
        """Get aircraft by callsign."""
        return self.tower.get_aircraft(callsign)

    def step(self):
        """Execute one simulation tick."""
        self.tower.tick()
        self.monitor.update(self.tower)

    def run(self, ticks: Optional[int] = None):
        """
        Run simulation for a number of ticks.

        Args:
            ticks: Ticks to run (defaults to the configured number)
        """
        ticks = self.config.ticks if ticks is None else ticks
        interval = self.config.progress_interval

        for i in range(ticks):
            self.step()

            if interval and (i + 1) % interval == 0:
                status = self.get_status()
                logger.info("Tick %d: %d aircraft, landing queue %d, takeoff queue %d, loading %d",
                            status['current_tick'], status['num_aircraft'],
                            status['landing_queue'], status['takeoff_queue'], status['loading'])

        logger.info("Simulation completed: %d ticks (now at tick %d)", ticks, self.current_tick)

    def get_metrics(self) -> TowerMetrics:
        """Get current operations metrics."""
        return self.monitor.calculate_metrics(self.tower)

    def generate_report(self) -> str:
        """Generate operations report."""
        return self.monitor.generate_report(self.tower)

    def reset(self):
        """Reset simulation to an empty airport."""
        self.tower = ControlTower()
        self.monitor = OperationsMonitor()
        self._rng = random.Random(self.config.seed)

    def load(self, directory: Union[str, Path]):
        """Replace the current tower with one loaded from a save directory."""
        self.tower = load_control_tower(directory)
        self.monitor = OperationsMonitor()

    def save(self, directory: Union[str, Path]):
        save_control_tower(self.tower, directory)

    def create_default_airport(self):
        """
        Create a default airport layout.

        Two airplane terminals with 3 and 2 gates and one helicopter terminal
        with 2 gates. Gate numbers are unique across the airport.
        """
        layout = [(AirplaneTerminal, 1, 3), (AirplaneTerminal, 2, 2), (HelicopterTerminal, 3, 2)]
        gate_number = 1
        for terminal_class, terminal_number, num_gates in layout:
            terminal = terminal_class(terminal_number)
            for _ in range(num_gates):
                terminal.add_gate(Gate(gate_number))
                gate_number += 1
            self.add_terminal(terminal)

    def generate_random_traffic(self, num_aircraft: int) -> List[Aircraft]:
        """
        Generate random traffic.

        Each aircraft gets a random model, a task cycle from ``TASK_PATTERNS``
        entered at a random position, and a random fuel level. Aircraft that
        would start at a gate when none is free start AWAY instead.

        Args:
            num_aircraft: Number of aircraft to generate
        """
        created = []
        models = list(AircraftCharacteristics)

        while len(created) < num_aircraft:
            callsign = f"{self._rng.choice(AIRLINES)}{self._rng.randint(100, 999)}"
            if self.get_aircraft(callsign) is not None:
                continue

            characteristics = self._rng.choice(models)
            load_percent = self._rng.choice([25, 50, 75, 100])
            pattern = self._rng.choice(TASK_PATTERNS)
            start = self._rng.randrange(len(pattern))
            pattern = pattern[start:] + pattern[:start]
            tasks = TaskList([
                Task(task_type, load_percent if task_type == TaskType.LOAD else 0)
                for task_type in pattern
            ])

            fuel = self._rng.uniform(0.1, 1.0) * characteristics.fuel_capacity
            aircraft = create_aircraft(callsign, characteristics, tasks, round(fuel, 2))

            if tasks.current().type in (TaskType.WAIT, TaskType.LOAD):
                try:
                    self.tower.find_unoccupied_gate(aircraft)
                except NoSuitableGateError:
                    while tasks.current().type != TaskType.AWAY:
                        tasks.advance()
                    logger.debug("No gate for %s, starting it AWAY", callsign)

            self.add_aircraft(aircraft)
            created.append(aircraft)

        return created

    def create_emergency_scenario(self):
        """
        Create a scenario with more arrivals than free gates.

        A freight aircraft, a passenger aircraft, a low-fuel aircraft and an
        aircraft in emergency all wait to land at a single two-gate terminal.
        """
        terminal = AirplaneTerminal(1)
        terminal.add_gate(Gate(1))
        terminal.add_gate(Gate(2))
        self.add_terminal(terminal)

        def arrival_tasks() -> TaskList:
            return TaskList([
                Task(TaskType.LAND), Task(TaskType.WAIT), Task(TaskType.LOAD, 50),
                Task(TaskType.TAKEOFF), Task(TaskType.AWAY)
            ])

        a320 = AircraftCharacteristics.AIRBUS_A320
        freighter = AircraftCharacteristics.BOEING_747_8F

        self.add_aircraft(create_aircraft("UPS101", freighter, arrival_tasks(),
                                          freighter.fuel_capacity / 2))
        self.add_aircraft(create_aircraft("QFA202", a320, arrival_tasks(), a320.fuel_capacity / 2))
        self.add_aircraft(create_aircraft("VOZ303", a320, arrival_tasks(), a320.fuel_capacity * 0.15))
        emergency = create_aircraft("JST404", a320, arrival_tasks(), a320.fuel_capacity / 2)
        emergency.declare_emergency()
        self.add_aircraft(emergency)

    def get_status(self) -> dict:
        """Get current simulation status."""
        return {
            'current_tick': self.current_tick,
            'num_aircraft': len(self.tower.aircraft),
            'num_terminals': len(self.tower.terminals),
            'landing_queue': len(self.tower.landing_queue),
            'takeoff_queue': len(self.tower.takeoff_queue),
            'loading': len(self.tower.loading_aircraft),
            'total_events': len(self.tower.events)
        }
