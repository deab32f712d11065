"""
Airport operations monitoring.

Observes the control tower after every tick, calculates throughput and
congestion metrics, and generates reports.
"""

from dataclasses import dataclass
from typing import List, Set

from .control_tower import ControlTower, EventType
from .queues import LandingQueue


@dataclass
class TowerMetrics:
    """Operational metrics for a monitored period."""
    simulation_duration: int  # ticks
    total_aircraft: int

    # Runway operations
    landings: int = 0
    takeoffs: int = 0
    loads_completed: int = 0
    deferred_landings: int = 0
    throughput_per_100_ticks: float = 0.0

    # Queues
    peak_landing_queue: int = 0
    peak_takeoff_queue: int = 0
    low_fuel_observations: int = 0

    # Ground
    avg_gate_occupancy: float = 0.0
    emergency_aircraft_ticks: int = 0

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        return {
            'simulation_duration': self.simulation_duration,
            'total_aircraft': self.total_aircraft,
            'runway': {
                'landings': self.landings,
                'takeoffs': self.takeoffs,
                'deferred_landings': self.deferred_landings,
                'throughput_per_100_ticks': self.throughput_per_100_ticks
            },
            'queues': {
                'peak_landing': self.peak_landing_queue,
                'peak_takeoff': self.peak_takeoff_queue,
                'low_fuel_observations': self.low_fuel_observations
            },
            'ground': {
                'loads_completed': self.loads_completed,
                'avg_gate_occupancy': self.avg_gate_occupancy,
                'emergency_aircraft_ticks': self.emergency_aircraft_ticks
            }
        }


class OperationsMonitor:
    """
    Tracks how well the airport is coping with its traffic.

    Call ``update`` once per tick after the tower has ticked.
    """

    # Rating thresholds
    CONGESTED_DEFERRAL_RATIO = 0.5  # deferred landings per landing
    STRAINED_GATE_OCCUPANCY = 85.0  # percent

    def __init__(self):
        self.total_aircraft_seen: Set[str] = set()
        self.gate_occupancy_samples: List[float] = []
        self.peak_landing_queue = 0
        self.peak_takeoff_queue = 0
        self.low_fuel_observations = 0
        self.emergency_aircraft_ticks = 0
        self.start_tick = None
        self.end_tick = 0

    def update(self, tower: ControlTower):
        """
        Record the state of the tower for the tick just completed.

        Args:
            tower: Tower to observe
        """
        if self.start_tick is None:
            self.start_tick = tower.ticks_elapsed - 1 if tower.ticks_elapsed else 0
        self.end_tick = tower.ticks_elapsed

        for aircraft in tower.aircraft:
            self.total_aircraft_seen.add(aircraft.callsign)
            if aircraft.has_emergency():
                self.emergency_aircraft_ticks += 1

        self.peak_landing_queue = max(self.peak_landing_queue, len(tower.landing_queue))
        self.peak_takeoff_queue = max(self.peak_takeoff_queue, len(tower.takeoff_queue))

        for aircraft in tower.landing_queue:
            if aircraft.fuel_percent_remaining() <= LandingQueue.LOW_FUEL_PERCENT:
                self.low_fuel_observations += 1

        gates = [gate for terminal in tower.terminals for gate in terminal.gates]
        if gates:
            occupied = sum(1 for gate in gates if gate.is_occupied())
            self.gate_occupancy_samples.append(100 * occupied / len(gates))

    def calculate_metrics(self, tower: ControlTower) -> TowerMetrics:
        """
        Calculate metrics over the monitored period.

        Args:
            tower: Tower whose event log supplies runway statistics
        """
        start = self.start_tick or 0
        duration = self.end_tick - start
        events = [event for event in tower.events if start <= event.tick < self.end_tick]

        metrics = TowerMetrics(
            simulation_duration=duration,
            total_aircraft=len(self.total_aircraft_seen)
        )

        for event in events:
            if event.event_type == EventType.LANDED:
                metrics.landings += 1
            elif event.event_type == EventType.TOOK_OFF:
                metrics.takeoffs += 1
            elif event.event_type == EventType.LOADING_COMPLETE:
                metrics.loads_completed += 1
            elif event.event_type == EventType.LANDING_DEFERRED:
                metrics.deferred_landings += 1

        if duration > 0:
            metrics.throughput_per_100_ticks = (metrics.landings + metrics.takeoffs) / duration * 100

        metrics.peak_landing_queue = self.peak_landing_queue
        metrics.peak_takeoff_queue = self.peak_takeoff_queue
        metrics.low_fuel_observations = self.low_fuel_observations
        metrics.emergency_aircraft_ticks = self.emergency_aircraft_ticks
        if self.gate_occupancy_samples:
            metrics.avg_gate_occupancy = (sum(self.gate_occupancy_samples)
                                          / len(self.gate_occupancy_samples))

        return metrics

    def operational_rating(self, metrics: TowerMetrics) -> str:
        """Calculate overall operational rating."""
        if metrics.landings == 0 and metrics.deferred_landings > 0:
            return "CONGESTED"
        if metrics.landings and metrics.deferred_landings / metrics.landings > self.CONGESTED_DEFERRAL_RATIO:
            return "CONGESTED"
        if metrics.avg_gate_occupancy > self.STRAINED_GATE_OCCUPANCY or metrics.low_fuel_observations:
            return "STRAINED"
        return "NOMINAL"

    def generate_report(self, tower: ControlTower) -> str:
        """
        Generate an operations report.

        Returns:
            Formatted report as string
        """
        metrics = self.calculate_metrics(tower)

        report = []
        report.append("=" * 60)
        report.append("AIRPORT OPERATIONS REPORT")
        report.append("=" * 60)
        report.append("")

        report.append(f"Simulation Duration: {metrics.simulation_duration} ticks")
        report.append(f"Total Aircraft: {metrics.total_aircraft}")
        report.append(f"Tower: {tower}")
        report.append("")

        report.append("RUNWAY")
        report.append("-" * 60)
        report.append(f"Landings: {metrics.landings}")
        report.append(f"Takeoffs: {metrics.takeoffs}")
        report.append(f"Deferred Landings (no gate): {metrics.deferred_landings}")
        report.append(f"Throughput: {metrics.throughput_per_100_ticks:.1f} movements per 100 ticks")
        report.append("")

        report.append("QUEUES")
        report.append("-" * 60)
        report.append(f"Peak Landing Queue: {metrics.peak_landing_queue}")
        report.append(f"Peak Takeoff Queue: {metrics.peak_takeoff_queue}")
        report.append(f"Low Fuel Observations: {metrics.low_fuel_observations}")
        report.append(f"Currently: {tower.landing_queue}, {tower.takeoff_queue}")
        report.append("")

        report.append("GROUND")
        report.append("-" * 60)
        report.append(f"Loads Completed: {metrics.loads_completed}")
        report.append(f"Average Gate Occupancy: {metrics.avg_gate_occupancy:.1f}%")
        for terminal in tower.terminals:
            report.append(f"  - {terminal}: {terminal.occupancy_level()}% occupied")
        report.append(f"Emergency Aircraft-Ticks: {metrics.emergency_aircraft_ticks}")
        report.append("")

        report.append("ASSESSMENT")
        report.append("-" * 60)
        report.append(f"Operational Rating: {self.operational_rating(metrics)}")
        report.append("")
        report.append("=" * 60)

        return "\n".join(report)
