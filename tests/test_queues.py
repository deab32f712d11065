"""Test the towersim.queues module."""
import unittest

from towersim.aircraft import AircraftCharacteristics, create_aircraft
from towersim.queues import LandingQueue, TakeoffQueue
from towersim.tasks import Task, TaskList, TaskType

A320 = AircraftCharacteristics.AIRBUS_A320
B748F = AircraftCharacteristics.BOEING_747_8F


def make_aircraft(callsign, characteristics, fuel_fraction=0.5):
    tasks = TaskList([Task(TaskType.LAND), Task(TaskType.WAIT), Task(TaskType.LOAD, 50),
                      Task(TaskType.TAKEOFF), Task(TaskType.AWAY)])
    return create_aircraft(callsign, characteristics, tasks,
                           characteristics.fuel_capacity * fuel_fraction)


class TestTakeoffQueue(unittest.TestCase):
    def setUp(self):
        self.queue = TakeoffQueue()
        self.first = make_aircraft("QFA1", A320)
        self.second = make_aircraft("UPS2", B748F)
        self.third = make_aircraft("VOZ3", A320)
        for aircraft in (self.first, self.second, self.third):
            self.queue.add(aircraft)

    def test_first_in_first_out(self):
        self.assertIs(self.queue.peek(), self.first)
        # Peeking does not change the queue
        self.assertIs(self.queue.peek(), self.first)
        self.assertEqual(len(self.queue), 3)

        self.assertIs(self.queue.remove(), self.first)
        self.assertIs(self.queue.remove(), self.second)
        self.assertIs(self.queue.remove(), self.third)
        self.assertIsNone(self.queue.remove())
        self.assertIsNone(self.queue.peek())

    def test_in_order_and_contains(self):
        self.assertEqual([ac.callsign for ac in self.queue.in_order()], ["QFA1", "UPS2", "VOZ3"])
        self.assertTrue(self.queue.contains(self.second))
        self.assertFalse(self.queue.contains(make_aircraft("ANZ9", A320)))
        self.assertEqual(len(self.queue), 3)

    def test_string_forms(self):
        self.assertEqual(self.queue.encode(), "TakeoffQueue:3\nQFA1,UPS2,VOZ3")
        self.assertEqual(str(self.queue), "TakeoffQueue [QFA1, UPS2, VOZ3]")
        self.assertEqual(TakeoffQueue().encode(), "TakeoffQueue:0")


class TestLandingQueue(unittest.TestCase):
    def setUp(self):
        self.queue = LandingQueue()
        # Added in the order D, C, B, A
        self.d = make_aircraft("D", B748F)
        self.c = make_aircraft("C", A320)
        self.b = make_aircraft("B", B748F, fuel_fraction=0.15)
        self.a = make_aircraft("A", B748F)
        self.a.declare_emergency()
        for aircraft in (self.d, self.c, self.b, self.a):
            self.queue.add(aircraft)

    def test_priority_order(self):
        self.assertIs(self.queue.peek(), self.a)
        self.assertIs(self.queue.remove(), self.a)
        self.assertIs(self.queue.peek(), self.b)
        self.assertIs(self.queue.remove(), self.b)
        self.assertIs(self.queue.remove(), self.c)
        self.assertIs(self.queue.remove(), self.d)
        self.assertIsNone(self.queue.remove())

    def test_in_order_does_not_change_queue(self):
        self.assertEqual([ac.callsign for ac in self.queue.in_order()], ["A", "B", "C", "D"])
        self.assertEqual(len(self.queue), 4)
        self.assertIs(self.queue.peek(), self.a)

    def test_ties_go_to_earliest(self):
        queue = LandingQueue()
        first = make_aircraft("QFA1", A320)
        second = make_aircraft("QFA2", A320)
        queue.add(first)
        queue.add(second)
        self.assertIs(queue.peek(), first)

        second.declare_emergency()
        self.assertIs(queue.peek(), second)

    def test_encode_in_priority_order(self):
        self.assertEqual(self.queue.encode(), "LandingQueue:4\nA,B,C,D")
        self.assertEqual(str(self.queue), "LandingQueue [A, B, C, D]")


if __name__ == "__main__":
    unittest.main()
