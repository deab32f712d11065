"""
Aircraft simulation module.

Implements the two aircraft variants managed by the control tower, their
fuel burn/refuel model and cargo loading behaviour.
"""

import math
from enum import Enum
from typing import Union

from .exceptions import ConfigError
from .tasks import Task, TaskList, TaskType


class AircraftType(Enum):
    """Broad category of aircraft, used for terminal compatibility."""
    AIRPLANE = "AIRPLANE"
    HELICOPTER = "HELICOPTER"


class AircraftCharacteristics(Enum):
    """
    Static data shared by every aircraft of a given model.

    Values are (type, empty weight kg, fuel capacity L, passenger capacity,
    freight capacity kg).
    """
    AIRBUS_A320 = (AircraftType.AIRPLANE, 42600, 27200, 150, 0)
    BOEING_747_8F = (AircraftType.AIRPLANE, 197131, 226117, 0, 137756)
    ROBINSON_R44 = (AircraftType.HELICOPTER, 658, 190, 4, 0)
    BOEING_787 = (AircraftType.AIRPLANE, 119950, 126206, 242, 0)
    FOKKER_100 = (AircraftType.AIRPLANE, 24375, 13365, 97, 0)
    SIKORSKY_SKYCRANE = (AircraftType.HELICOPTER, 8724, 3328, 0, 9100)

    def __init__(
        self,
        aircraft_type: AircraftType,
        empty_weight: int,
        fuel_capacity: float,
        passenger_capacity: int,
        freight_capacity: int
    ):
        self.aircraft_type = aircraft_type
        self.empty_weight = empty_weight
        self.fuel_capacity = fuel_capacity
        self.passenger_capacity = passenger_capacity
        self.freight_capacity = freight_capacity

    @property
    def carries_passengers(self) -> bool:
        return self.passenger_capacity > 0

    def __str__(self):
        return self.name


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))


def next_fuel_amount(fuel: float, fuel_capacity: float, task: Task, loading_time: int) -> float:
    """
    Fuel onboard after one tick spent on the given task.

    Flying away burns 10% of capacity, never dropping below empty. Loading
    refuels evenly across the loading time, never exceeding capacity. Any
    other task leaves the fuel unchanged.
    """
    if task.type == TaskType.AWAY:
        return max(0.0, fuel - fuel_capacity / 10)
    if task.type == TaskType.LOAD:
        return min(fuel_capacity, fuel + fuel_capacity / loading_time)
    return fuel


class Aircraft:
    """
    An aircraft whose movements are managed by the control tower.

    Fuel handling is shared by all variants; cargo capacity, loading time and
    weight are provided by each variant.

    Attributes:
        callsign: Unique aircraft identifier (e.g., "QFA481")
        characteristics: Model data for this aircraft
        tasks: Circular list of tasks this aircraft cycles through
    """

    # Weight of one litre of fuel, in kilograms
    LITRE_OF_FUEL_WEIGHT = 0.8

    def __init__(
        self,
        callsign: str,
        characteristics: AircraftCharacteristics,
        tasks: TaskList,
        fuel_amount: float,
        cargo_amount: int = 0
    ):
        if fuel_amount < 0 or fuel_amount > characteristics.fuel_capacity:
            raise ConfigError(
                f"{callsign}: fuel {fuel_amount} outside 0-{characteristics.fuel_capacity} L"
            )
        self.callsign = callsign
        self.characteristics = characteristics
        self.tasks = tasks
        self._fuel_amount = float(fuel_amount)
        self._emergency = False

        if cargo_amount < 0 or cargo_amount > self.cargo_capacity:
            raise ConfigError(
                f"{callsign}: cargo {cargo_amount} outside 0-{self.cargo_capacity}"
            )
        self._cargo_amount = int(cargo_amount)

    @property
    def cargo_capacity(self) -> int:
        raise NotImplementedError

    @property
    def aircraft_type(self) -> AircraftType:
        return self.characteristics.aircraft_type

    @property
    def fuel_amount(self) -> float:
        """Current fuel onboard, in litres."""
        return self._fuel_amount

    @property
    def cargo_amount(self) -> int:
        """Current passengers or freight kilograms onboard."""
        return self._cargo_amount

    def fuel_percent_remaining(self) -> int:
        """Fuel remaining as a whole percentage of capacity."""
        return round_half_up(100 * self._fuel_amount / self.characteristics.fuel_capacity)

    def loading_time(self) -> int:
        """Number of ticks needed to complete the current LOAD task."""
        raise NotImplementedError

    def load_target(self) -> float:
        """Amount of cargo the current task asks to be loaded in total."""
        return self.cargo_capacity * self.tasks.current().load_percent / 100

    def total_weight(self) -> float:
        raise NotImplementedError

    def occupancy_level(self) -> int:
        """Cargo onboard as a whole percentage of capacity."""
        if self.cargo_capacity == 0:
            return 0
        return round_half_up(100 * self._cargo_amount / self.cargo_capacity)

    def tick(self):
        """
        Update fuel and cargo for one tick.

        Cargo is loaded in equal increments across the loading time while the
        current task is LOAD, capped at the cargo capacity.
        """
        task = self.tasks.current()
        self._fuel_amount = next_fuel_amount(
            self._fuel_amount,
            self.characteristics.fuel_capacity,
            task,
            self.loading_time()
        )

        if task.type == TaskType.LOAD:
            increment = round_half_up(self.load_target() / self.loading_time())
            self._cargo_amount = min(self.cargo_capacity, self._cargo_amount + increment)

    def unload(self):
        """Remove all cargo from the aircraft."""
        self._cargo_amount = 0

    def declare_emergency(self):
        self._emergency = True

    def clear_emergency(self):
        self._emergency = False

    def has_emergency(self) -> bool:
        return self._emergency

    def encode(self) -> str:
        """
        Machine-readable form used by the save format.

        Fuel is written with two decimals when that is exact, otherwise with
        as many digits as needed to read back the same amount.
        """
        fuel = f"{self._fuel_amount:.2f}"
        if float(fuel) != self._fuel_amount:
            fuel = repr(self._fuel_amount)
        return ":".join([
            self.callsign,
            self.characteristics.name,
            self.tasks.encode(),
            fuel,
            "true" if self._emergency else "false",
            str(self._cargo_amount),
        ])

    def get_state(self) -> dict:
        """Get current aircraft state as dictionary."""
        return {
            'callsign': self.callsign,
            'characteristics': self.characteristics.name,
            'aircraft_type': self.aircraft_type.value,
            'task': str(self.tasks.current()),
            'fuel_amount': self._fuel_amount,
            'fuel_percent': self.fuel_percent_remaining(),
            'cargo_amount': self._cargo_amount,
            'occupancy_level': self.occupancy_level(),
            'emergency': self._emergency,
        }

    def __str__(self):
        result = (f"{self.aircraft_type.value} {self.callsign} "
                  f"{self.characteristics.name} {self.tasks.current().type.value}")
        if self._emergency:
            result += " (EMERGENCY)"
        return result

    def __repr__(self):
        return (f"{type(self).__name__}({self.callsign}, {self.characteristics.name}, "
                f"fuel={self._fuel_amount:.0f}L, cargo={self._cargo_amount})")


class PassengerAircraft(Aircraft):
    """An aircraft carrying passengers."""

    # Average weight of one passenger including baggage, in kilograms
    AVG_PASSENGER_WEIGHT = 90.0

    @property
    def cargo_capacity(self) -> int:
        return self.characteristics.passenger_capacity

    @property
    def num_passengers(self) -> int:
        return self._cargo_amount

    def load_target(self) -> float:
        # Passengers board whole
        return round_half_up(super().load_target())

    def loading_time(self) -> int:
        """
        Base-10 logarithm of the passengers to board, rounded, at least 1 tick.

        e.g. 65% of 175 seats is 114 passengers, log10(114) = 2.06, so 2 ticks.
        """
        passengers = self.load_target()
        if passengers < 1:
            return 1
        return max(1, round_half_up(math.log10(passengers)))

    def total_weight(self) -> float:
        return (self.characteristics.empty_weight
                + self._fuel_amount * self.LITRE_OF_FUEL_WEIGHT
                + self._cargo_amount * self.AVG_PASSENGER_WEIGHT)


class FreightAircraft(Aircraft):
    """An aircraft carrying freight, measured in kilograms."""

    # Freight thresholds (kg) for loading time bands
    LIGHT_LOAD_LIMIT = 1000
    HEAVY_LOAD_LIMIT = 50000

    @property
    def cargo_capacity(self) -> int:
        return self.characteristics.freight_capacity

    @property
    def freight_amount(self) -> int:
        return self._cargo_amount

    def loading_time(self) -> int:
        """1 tick for under a tonne, 2 ticks up to 50 tonnes, 3 ticks beyond."""
        freight = self.load_target()
        if freight < self.LIGHT_LOAD_LIMIT:
            return 1
        if freight <= self.HEAVY_LOAD_LIMIT:
            return 2
        return 3

    def total_weight(self) -> float:
        return (self.characteristics.empty_weight
                + self._fuel_amount * self.LITRE_OF_FUEL_WEIGHT
                + self._cargo_amount)


AnyAircraft = Union[PassengerAircraft, FreightAircraft]


def create_aircraft(
    callsign: str,
    characteristics: AircraftCharacteristics,
    tasks: TaskList,
    fuel_amount: float,
    cargo_amount: int = 0
) -> AnyAircraft:
    """Create the aircraft variant matching the model's capacities."""
    if characteristics.carries_passengers:
        return PassengerAircraft(callsign, characteristics, tasks, fuel_amount, cargo_amount)
    return FreightAircraft(callsign, characteristics, tasks, fuel_amount, cargo_amount)
