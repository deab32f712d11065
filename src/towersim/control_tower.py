"""
Airport control tower.

Advances every aircraft, gate and runway queue by one tick and records the
resulting operations.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .aircraft import Aircraft
from .exceptions import ConfigError, NoSuitableGateError
from .ground import Gate, Terminal
from .queues import LandingQueue, TakeoffQueue
from .tasks import TaskType

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of operations performed by the tower."""
    LANDED = "landed"
    TOOK_OFF = "took_off"
    LOADING_COMPLETE = "loading_complete"
    LANDING_DEFERRED = "landing_deferred"


@dataclass
class TowerEvent:
    """An operation performed by the tower on an aircraft."""
    callsign: str
    tick: int
    event_type: EventType
    details: Dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            'callsign': self.callsign,
            'tick': self.tick,
            'event_type': self.event_type.value,
            'details': self.details
        }


class ControlTower:
    """
    Control tower managing arrivals, departures and loading at gates.

    The tower owns every registry in the simulation: the managed aircraft,
    terminals, both runway queues and the map of loading aircraft to the
    ticks they have left to load.
    """

    # Runway policy: on ticks where ticks_elapsed % 2 equals this value a
    # landing is attempted first, falling back to a takeoff. Other ticks only
    # allow a takeoff.
    LANDING_TICK_PARITY = 0

    def __init__(
        self,
        ticks_elapsed: int = 0,
        aircraft: Optional[List[Aircraft]] = None,
        landing_queue: Optional[LandingQueue] = None,
        takeoff_queue: Optional[TakeoffQueue] = None,
        loading_aircraft: Optional[Dict[str, int]] = None,
        terminals: Optional[List[Terminal]] = None
    ):
        """
        Initialize tower from fully decoded state.

        Args:
            ticks_elapsed: Ticks elapsed since the tower was first created
            aircraft: All aircraft managed by the tower
            landing_queue: Aircraft waiting to land
            takeoff_queue: Aircraft waiting to take off
            loading_aircraft: Callsign of each loading aircraft mapped to ticks remaining
            terminals: Terminals of the airport, in allocation order
        """
        if ticks_elapsed < 0:
            raise ConfigError(f"Ticks elapsed must be non-negative, got {ticks_elapsed}")
        self.ticks_elapsed = ticks_elapsed
        self._aircraft: List[Aircraft] = list(aircraft or [])
        callsigns = [ac.callsign for ac in self._aircraft]
        if len(set(callsigns)) != len(callsigns):
            raise ConfigError(f"Duplicate aircraft callsigns in {callsigns}")
        self.landing_queue = landing_queue if landing_queue is not None else LandingQueue()
        self.takeoff_queue = takeoff_queue if takeoff_queue is not None else TakeoffQueue()
        self._terminals: List[Terminal] = list(terminals or [])

        known = {ac.callsign for ac in self._aircraft}
        self._loading: Dict[str, int] = {}
        for callsign, ticks in (loading_aircraft or {}).items():
            if callsign not in known:
                raise ConfigError(f"Loading aircraft {callsign} is not managed by the tower")
            self._loading[callsign] = ticks

        self.events: List[TowerEvent] = []

    def add_terminal(self, terminal: Terminal):
        self._terminals.append(terminal)

    @property
    def terminals(self) -> List[Terminal]:
        return list(self._terminals)

    @property
    def aircraft(self) -> List[Aircraft]:
        return list(self._aircraft)

    def get_aircraft(self, callsign: str) -> Optional[Aircraft]:
        """Get aircraft by callsign."""
        return next((ac for ac in self._aircraft if ac.callsign == callsign), None)

    @property
    def loading_aircraft(self) -> Dict[str, int]:
        """Callsigns of loading aircraft mapped to ticks remaining."""
        return dict(self._loading)

    def add_aircraft(self, aircraft: Aircraft):
        """
        Start managing an aircraft.

        Aircraft that are waiting or loading must be at a gate, so one is
        allocated immediately.

        Raises:
            ConfigError: if an aircraft with the same callsign is already managed
            NoSuitableGateError: if the aircraft needs a gate and none is free
        """
        if self.get_aircraft(aircraft.callsign) is not None:
            raise ConfigError(f"Aircraft {aircraft.callsign} is already managed by the tower")
        if aircraft.tasks.current().type in (TaskType.WAIT, TaskType.LOAD):
            gate = self.find_unoccupied_gate(aircraft)
            gate.park(aircraft)
            logger.debug("%s parked at gate %d on arrival", aircraft.callsign, gate.gate_number)

        self.place_aircraft_in_queues(aircraft)
        self._aircraft.append(aircraft)

    def find_unoccupied_gate(self, aircraft: Aircraft) -> Gate:
        """
        Find the first free gate compatible with the aircraft.

        Terminals are searched in the order they were added, skipping those of
        the wrong type and those in a state of emergency.
        """
        for terminal in self._terminals:
            if not terminal.accepts(aircraft) or terminal.has_emergency():
                continue
            try:
                return terminal.find_unoccupied_gate()
            except NoSuitableGateError:
                continue
        raise NoSuitableGateError(f"No gate available for {aircraft.callsign}")

    def find_gate_of_aircraft(self, aircraft: Aircraft) -> Optional[Gate]:
        """Return the gate the aircraft is parked at, or None."""
        for terminal in self._terminals:
            for gate in terminal.gates:
                if gate.holds(aircraft):
                    return gate
        return None

    def tick(self):
        """
        Advance the whole airport by one tick.

        Order of operations:
        1. Every aircraft ticks; AWAY and WAIT tasks complete immediately
        2. Loading aircraft count down and leave their gates when finished
        3. One runway operation (landing or takeoff) is attempted
        4. Aircraft are filed into the queue or loading map for their task
        """
        for aircraft in self._aircraft:
            aircraft.tick()
            if aircraft.tasks.current().type in (TaskType.AWAY, TaskType.WAIT):
                aircraft.tasks.advance()

        self.load_aircraft()

        if self.ticks_elapsed % 2 == self.LANDING_TICK_PARITY:
            if not self.try_land_aircraft():
                self.try_takeoff_aircraft()
        else:
            self.try_takeoff_aircraft()

        self.place_all_aircraft_in_queues()
        self.ticks_elapsed += 1

    def load_aircraft(self):
        """Count down loading aircraft; finished ones leave their gate and move on."""
        for callsign, remaining in list(self._loading.items()):
            remaining -= 1
            if remaining > 0:
                self._loading[callsign] = remaining
                continue

            aircraft = self.get_aircraft(callsign)
            gate = self.find_gate_of_aircraft(aircraft)
            if gate is not None:
                gate.vacate()
            aircraft.tasks.advance()
            del self._loading[callsign]
            self._record(aircraft, EventType.LOADING_COMPLETE, {
                'gate': gate.gate_number if gate else None,
                'occupancy_level': aircraft.occupancy_level(),
            })

    def try_land_aircraft(self) -> bool:
        """
        Land the highest priority aircraft in the landing queue.

        Returns True if an aircraft landed. If the queue is empty or no gate is
        free, nothing changes and the aircraft stays queued.
        """
        aircraft = self.landing_queue.peek()
        if aircraft is None:
            return False

        try:
            gate = self.find_unoccupied_gate(aircraft)
        except NoSuitableGateError:
            self._record(aircraft, EventType.LANDING_DEFERRED, {
                'fuel_percent': aircraft.fuel_percent_remaining(),
            })
            return False

        gate.park(aircraft)
        self.landing_queue.remove()
        aircraft.unload()
        aircraft.tasks.advance()
        self._record(aircraft, EventType.LANDED, {
            'gate': gate.gate_number,
            'fuel_percent': aircraft.fuel_percent_remaining(),
            'emergency': aircraft.has_emergency(),
        })
        return True

    def try_takeoff_aircraft(self) -> bool:
        """Let the aircraft at the front of the takeoff queue depart, if any."""
        aircraft = self.takeoff_queue.remove()
        if aircraft is None:
            return False
        aircraft.tasks.advance()
        self._record(aircraft, EventType.TOOK_OFF, {
            'occupancy_level': aircraft.occupancy_level(),
        })
        return True

    def place_all_aircraft_in_queues(self):
        for aircraft in self._aircraft:
            self.place_aircraft_in_queues(aircraft)

    def place_aircraft_in_queues(self, aircraft: Aircraft):
        """File the aircraft in the queue or map matching its current task, if not already there."""
        task_type = aircraft.tasks.current().type
        if task_type == TaskType.LAND and not self.landing_queue.contains(aircraft):
            self.landing_queue.add(aircraft)
        elif task_type == TaskType.TAKEOFF and not self.takeoff_queue.contains(aircraft):
            self.takeoff_queue.add(aircraft)
        elif task_type == TaskType.LOAD and aircraft.callsign not in self._loading:
            self._loading[aircraft.callsign] = aircraft.loading_time()

    def _record(self, aircraft: Aircraft, event_type: EventType, details: Dict):
        event = TowerEvent(
            callsign=aircraft.callsign,
            tick=self.ticks_elapsed,
            event_type=event_type,
            details=details
        )
        self.events.append(event)
        logger.debug("tick %d: %s %s %s", self.ticks_elapsed, aircraft.callsign,
                     event_type.value, details)

    def get_events_for_aircraft(self, callsign: str) -> List[TowerEvent]:
        """Get all events recorded for a specific aircraft."""
        return [event for event in self.events if event.callsign == callsign]

    def get_recent_events(self, window: int = 10) -> List[TowerEvent]:
        """
        Get events recorded within the last ``window`` ticks.

        Args:
            window: Number of ticks to look back from the latest event
        """
        if not self.events:
            return []

        latest = self.events[-1].tick
        return [event for event in self.events if latest - event.tick <= window]

    def get_statistics(self) -> dict:
        """Get counts of recorded events by type."""
        by_type = {}
        for event in self.events:
            by_type[event.event_type.value] = by_type.get(event.event_type.value, 0) + 1

        return {
            'total_events': len(self.events),
            'by_type': by_type
        }

    def clear_old_events(self, before_tick: int):
        """Clear events older than the given tick to save memory."""
        self.events = [event for event in self.events if event.tick >= before_tick]

    def __str__(self):
        counts = {TaskType.LAND: 0, TaskType.TAKEOFF: 0, TaskType.LOAD: 0}
        for aircraft in self._aircraft:
            task_type = aircraft.tasks.current().type
            if task_type in counts:
                counts[task_type] += 1
        return (f"ControlTower: {len(self._terminals)} terminals, "
                f"{len(self._aircraft)} total aircraft ("
                f"{counts[TaskType.LAND]} LAND, {counts[TaskType.TAKEOFF]} TAKEOFF, "
                f"{counts[TaskType.LOAD]} LOAD)")
