"""
Airport Control Tower Simulator

A tick-driven simulation of aircraft ground and runway operations.
"""

__version__ = "0.1.0"

from .aircraft import (
    Aircraft,
    AircraftCharacteristics,
    AircraftType,
    FreightAircraft,
    PassengerAircraft,
    create_aircraft,
)
from .control_tower import ControlTower, EventType, TowerEvent
from .exceptions import (
    ConfigError,
    MalformedSaveError,
    NoSpaceError,
    NoSuitableGateError,
    TowerSimError,
)
from .ground import AirplaneTerminal, Gate, HelicopterTerminal, Terminal
from .operations_monitor import OperationsMonitor, TowerMetrics
from .queues import AircraftQueue, LandingQueue, TakeoffQueue
from .simulator import Simulator, SimulatorConfig
from .tasks import Task, TaskList, TaskType

__all__ = [
    "Aircraft",
    "AircraftCharacteristics",
    "AircraftType",
    "FreightAircraft",
    "PassengerAircraft",
    "create_aircraft",
    "ControlTower",
    "EventType",
    "TowerEvent",
    "ConfigError",
    "MalformedSaveError",
    "NoSpaceError",
    "NoSuitableGateError",
    "TowerSimError",
    "AirplaneTerminal",
    "Gate",
    "HelicopterTerminal",
    "Terminal",
    "OperationsMonitor",
    "TowerMetrics",
    "AircraftQueue",
    "LandingQueue",
    "TakeoffQueue",
    "Simulator",
    "SimulatorConfig",
    "Task",
    "TaskList",
    "TaskType",
]
