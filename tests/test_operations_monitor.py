"""Test the towersim.operations_monitor module."""
import unittest

from towersim.aircraft import AircraftCharacteristics, create_aircraft
from towersim.control_tower import ControlTower
from towersim.ground import AirplaneTerminal, Gate
from towersim.operations_monitor import OperationsMonitor
from towersim.simulator import Simulator
from towersim.tasks import Task, TaskList, TaskType


class TestOperationsMonitor(unittest.TestCase):
    def setUp(self):
        self.sim = Simulator()
        self.sim.create_emergency_scenario()
        self.sim.run(5)

    def test_runway_metrics(self):
        # Emergency, low fuel and passenger arrivals land on ticks 0, 2 and 4
        metrics = self.sim.get_metrics()
        self.assertEqual(metrics.simulation_duration, 5)
        self.assertEqual(metrics.total_aircraft, 4)
        self.assertEqual(metrics.landings, 3)
        self.assertEqual(metrics.takeoffs, 0)
        self.assertEqual(metrics.loads_completed, 1)
        self.assertEqual(metrics.deferred_landings, 0)
        self.assertAlmostEqual(metrics.throughput_per_100_ticks, 60.0)

    def test_queue_and_ground_metrics(self):
        metrics = self.sim.get_metrics()
        self.assertEqual(metrics.peak_landing_queue, 3)
        self.assertEqual(metrics.peak_takeoff_queue, 1)
        # VOZ303 waits in the landing queue with 15% fuel for two ticks
        self.assertEqual(metrics.low_fuel_observations, 2)
        self.assertEqual(metrics.emergency_aircraft_ticks, 5)
        self.assertAlmostEqual(metrics.avg_gate_occupancy, 70.0)

        as_dict = metrics.to_dict()
        self.assertEqual(as_dict['runway']['landings'], 3)
        self.assertEqual(as_dict['ground']['loads_completed'], 1)

    def test_rating_and_report(self):
        monitor = self.sim.monitor
        self.assertEqual(monitor.operational_rating(self.sim.get_metrics()), "STRAINED")

        report = self.sim.generate_report()
        for heading in ("AIRPORT OPERATIONS REPORT", "RUNWAY", "QUEUES", "GROUND", "ASSESSMENT"):
            self.assertIn(heading, report)
        self.assertIn("Landings: 3", report)
        self.assertIn("Operational Rating: STRAINED", report)

    def test_congested_when_landings_deferred(self):
        terminal = AirplaneTerminal(1)
        terminal.add_gate(Gate(1))
        tower = ControlTower(terminals=[terminal])

        a320 = AircraftCharacteristics.AIRBUS_A320
        tower.add_aircraft(create_aircraft("PRK001", a320, TaskList([Task(TaskType.WAIT)]), 1000))
        arrival = TaskList([Task(TaskType.LAND), Task(TaskType.WAIT), Task(TaskType.LOAD, 50),
                            Task(TaskType.TAKEOFF), Task(TaskType.AWAY)])
        tower.add_aircraft(create_aircraft("LAN001", a320, arrival, 13600))

        monitor = OperationsMonitor()
        for _ in range(4):
            tower.tick()
            monitor.update(tower)

        metrics = monitor.calculate_metrics(tower)
        self.assertEqual(metrics.landings, 0)
        self.assertEqual(metrics.deferred_landings, 2)
        self.assertAlmostEqual(metrics.avg_gate_occupancy, 100.0)
        self.assertEqual(monitor.operational_rating(metrics), "CONGESTED")

    def test_nominal_when_idle(self):
        monitor = OperationsMonitor()
        tower = ControlTower()
        tower.tick()
        monitor.update(tower)
        self.assertEqual(monitor.operational_rating(monitor.calculate_metrics(tower)), "NOMINAL")


if __name__ == "__main__":
    unittest.main()
