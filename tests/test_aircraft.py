"""Test the towersim.aircraft module."""
import unittest

from towersim.aircraft import (
    AircraftCharacteristics,
    AircraftType,
    FreightAircraft,
    PassengerAircraft,
    create_aircraft,
    round_half_up,
)
from towersim.exceptions import ConfigError
from towersim.tasks import Task, TaskList, TaskType

A320 = AircraftCharacteristics.AIRBUS_A320
B748F = AircraftCharacteristics.BOEING_747_8F
R44 = AircraftCharacteristics.ROBINSON_R44
SKYCRANE = AircraftCharacteristics.SIKORSKY_SKYCRANE


def away_tasks():
    return TaskList([Task(TaskType.AWAY), Task(TaskType.LAND), Task(TaskType.LOAD, 50),
                     Task(TaskType.TAKEOFF)])


def load_tasks(percent):
    return TaskList([Task(TaskType.LOAD, percent), Task(TaskType.TAKEOFF), Task(TaskType.AWAY),
                     Task(TaskType.LAND)])


class TestRounding(unittest.TestCase):
    def test_halves_round_up(self):
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(37.5), 38)
        self.assertEqual(round_half_up(2.49), 2)


class TestCharacteristics(unittest.TestCase):
    def test_model_data(self):
        self.assertEqual(A320.aircraft_type, AircraftType.AIRPLANE)
        self.assertEqual(A320.fuel_capacity, 27200)
        self.assertEqual(B748F.freight_capacity, 137756)
        self.assertEqual(R44.aircraft_type, AircraftType.HELICOPTER)
        self.assertEqual(str(SKYCRANE), "SIKORSKY_SKYCRANE")

    def test_create_aircraft_picks_variant(self):
        self.assertIsInstance(create_aircraft("A", A320, away_tasks(), 0), PassengerAircraft)
        self.assertIsInstance(create_aircraft("B", B748F, away_tasks(), 0), FreightAircraft)
        self.assertIsInstance(create_aircraft("C", R44, away_tasks(), 0), PassengerAircraft)
        self.assertIsInstance(create_aircraft("D", SKYCRANE, away_tasks(), 0), FreightAircraft)


class TestConstruction(unittest.TestCase):
    def test_fuel_bounds(self):
        with self.assertRaises(ConfigError):
            PassengerAircraft("QFA1", A320, away_tasks(), -1)
        with self.assertRaises(ConfigError):
            PassengerAircraft("QFA1", A320, away_tasks(), 27200.01)
        PassengerAircraft("QFA1", A320, away_tasks(), 27200)

    def test_cargo_bounds(self):
        with self.assertRaises(ConfigError):
            PassengerAircraft("QFA1", A320, away_tasks(), 100, 151)
        with self.assertRaises(ConfigError):
            FreightAircraft("UPS1", SKYCRANE, away_tasks(), 100, -1)
        FreightAircraft("UPS1", SKYCRANE, away_tasks(), 100, 9100)


class TestPassengerAircraft(unittest.TestCase):
    def setUp(self):
        self.aircraft = PassengerAircraft("QFA481", A320, load_tasks(60), 0)

    def test_loading_time_is_log_of_passengers(self):
        # 60% of 150 seats is 90 passengers, log10(90) = 1.95
        self.assertEqual(self.aircraft.load_target(), 90)
        self.assertEqual(self.aircraft.loading_time(), 2)

    def test_loading_time_at_least_one_tick(self):
        helicopter = PassengerAircraft("VH-BFK", R44, load_tasks(50), 0)
        self.assertEqual(helicopter.loading_time(), 1)
        empty_load = PassengerAircraft("VH-BFK", R44, load_tasks(0), 0)
        self.assertEqual(empty_load.loading_time(), 1)

    def test_tick_while_loading(self):
        self.aircraft.tick()
        self.assertAlmostEqual(self.aircraft.fuel_amount, 13600)
        self.assertEqual(self.aircraft.cargo_amount, 45)

        self.aircraft.tick()
        self.assertAlmostEqual(self.aircraft.fuel_amount, 27200)
        self.assertEqual(self.aircraft.cargo_amount, 90)

        # Refuelling never exceeds capacity
        self.aircraft.tick()
        self.assertAlmostEqual(self.aircraft.fuel_amount, 27200)

    def test_cargo_capped_at_capacity(self):
        aircraft = PassengerAircraft("QFA1", A320, load_tasks(100), 0, 140)
        aircraft.tick()
        self.assertEqual(aircraft.cargo_amount, 150)

    def test_tick_while_away_burns_fuel(self):
        aircraft = PassengerAircraft("QFA1", A320, away_tasks(), 27200)
        aircraft.tick()
        self.assertAlmostEqual(aircraft.fuel_amount, 24480)

        low = PassengerAircraft("QFA2", A320, away_tasks(), 1000)
        low.tick()
        self.assertEqual(low.fuel_amount, 0)

    def test_other_tasks_keep_fuel(self):
        tasks = away_tasks()
        tasks.advance()
        aircraft = PassengerAircraft("QFA1", A320, tasks, 5000, 20)
        aircraft.tick()
        self.assertAlmostEqual(aircraft.fuel_amount, 5000)
        self.assertEqual(aircraft.cargo_amount, 20)

    def test_weight_and_levels(self):
        aircraft = PassengerAircraft("QFA1", A320, away_tasks(), 1000, 10)
        self.assertAlmostEqual(aircraft.total_weight(), 44300)

        aircraft = PassengerAircraft("QFA1", A320, away_tasks(), 27200 * 0.15, 75)
        self.assertEqual(aircraft.fuel_percent_remaining(), 15)
        self.assertEqual(aircraft.occupancy_level(), 50)
        self.assertEqual(aircraft.num_passengers, 75)

    def test_unload_and_emergency(self):
        aircraft = PassengerAircraft("QFA1", A320, away_tasks(), 1000, 10)
        aircraft.unload()
        self.assertEqual(aircraft.cargo_amount, 0)

        self.assertFalse(aircraft.has_emergency())
        aircraft.declare_emergency()
        self.assertTrue(aircraft.has_emergency())
        aircraft.clear_emergency()
        self.assertFalse(aircraft.has_emergency())

    def test_get_state(self):
        aircraft = PassengerAircraft("QFA1", A320, load_tasks(60), 27200 * 0.15, 75)
        aircraft.declare_emergency()
        state = aircraft.get_state()
        self.assertEqual(state['callsign'], "QFA1")
        self.assertEqual(state['characteristics'], "AIRBUS_A320")
        self.assertEqual(state['aircraft_type'], "AIRPLANE")
        self.assertEqual(state['task'], "LOAD at 60%")
        self.assertEqual(state['fuel_percent'], 15)
        self.assertEqual(state['occupancy_level'], 50)
        self.assertTrue(state['emergency'])

    def test_string_forms(self):
        tasks = TaskList([Task(TaskType.AWAY), Task(TaskType.AWAY), Task(TaskType.LAND),
                          Task(TaskType.WAIT), Task(TaskType.WAIT), Task(TaskType.LOAD, 60),
                          Task(TaskType.TAKEOFF), Task(TaskType.AWAY)])
        aircraft = PassengerAircraft("QFA481", A320, tasks, 10000, 132)
        self.assertEqual(
            aircraft.encode(),
            "QFA481:AIRBUS_A320:AWAY,AWAY,LAND,WAIT,WAIT,LOAD@60,TAKEOFF,AWAY:10000.00:false:132"
        )
        self.assertEqual(str(aircraft), "AIRPLANE QFA481 AIRBUS_A320 AWAY")

        aircraft.declare_emergency()
        self.assertIn(":true:", aircraft.encode())
        self.assertEqual(str(aircraft), "AIRPLANE QFA481 AIRBUS_A320 AWAY (EMERGENCY)")


class TestFreightAircraft(unittest.TestCase):
    def test_loading_time_bands(self):
        # 910 kg, 27551.2 kg and 68878 kg of freight
        self.assertEqual(FreightAircraft("UPS1", SKYCRANE, load_tasks(10), 0).loading_time(), 1)
        self.assertEqual(FreightAircraft("UPS2", B748F, load_tasks(20), 0).loading_time(), 2)
        self.assertEqual(FreightAircraft("UPS3", B748F, load_tasks(50), 0).loading_time(), 3)

    def test_tick_while_loading(self):
        aircraft = FreightAircraft("UPS1", SKYCRANE, load_tasks(50), 0)
        aircraft.tick()
        self.assertEqual(aircraft.cargo_amount, 2275)
        self.assertAlmostEqual(aircraft.fuel_amount, 1664)
        self.assertEqual(aircraft.freight_amount, 2275)

    def test_weight_and_levels(self):
        aircraft = FreightAircraft("UPS1", SKYCRANE, away_tasks(), 1000, 500)
        self.assertAlmostEqual(aircraft.total_weight(), 10024)
        self.assertEqual(aircraft.occupancy_level(), 5)

    def test_bounds_hold_across_ticks(self):
        for characteristics in (A320, B748F, R44, SKYCRANE):
            for fuel in (0, characteristics.fuel_capacity / 2, characteristics.fuel_capacity):
                tasks = TaskList([Task(TaskType.AWAY), Task(TaskType.LAND), Task(TaskType.WAIT),
                                  Task(TaskType.LOAD, 100), Task(TaskType.TAKEOFF)])
                aircraft = create_aircraft("TST1", characteristics, tasks, fuel)
                for _ in range(12):
                    aircraft.tick()
                    self.assertGreaterEqual(aircraft.fuel_amount, 0)
                    self.assertLessEqual(aircraft.fuel_amount, characteristics.fuel_capacity)
                    self.assertGreaterEqual(aircraft.cargo_amount, 0)
                    self.assertLessEqual(aircraft.cargo_amount, aircraft.cargo_capacity)
                    tasks.advance()


if __name__ == "__main__":
    unittest.main()
