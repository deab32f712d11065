"""
Runway queue module.

Aircraft waiting to use the runway are held in one of two queues: a FIFO
takeoff queue and a rule-based landing queue that prioritises urgent
aircraft.
"""

from typing import Dict, Iterator, List, Optional

from .aircraft import Aircraft, PassengerAircraft


class AircraftQueue:
    """
    Ordered collection of aircraft waiting for the runway.

    Membership is keyed by callsign. The order in which aircraft leave the
    queue is decided by ``_select``.
    """

    def __init__(self):
        # Insertion-ordered; dicts preserve the order aircraft were added
        self._aircraft: Dict[str, Aircraft] = {}

    def add(self, aircraft: Aircraft):
        """Add an aircraft to the back of the queue."""
        self._aircraft[aircraft.callsign] = aircraft

    def contains(self, aircraft: Aircraft) -> bool:
        return aircraft.callsign in self._aircraft

    def peek(self) -> Optional[Aircraft]:
        """Aircraft at the front of the queue, or None if empty."""
        return self._select()

    def remove(self) -> Optional[Aircraft]:
        """Remove and return the aircraft at the front of the queue, or None if empty."""
        aircraft = self._select()
        if aircraft is not None:
            del self._aircraft[aircraft.callsign]
        return aircraft

    def in_order(self) -> List[Aircraft]:
        """Snapshot of the queue in the order aircraft would be removed."""
        raise NotImplementedError

    def _select(self) -> Optional[Aircraft]:
        raise NotImplementedError

    def encode(self) -> str:
        """Queue name and size, then the comma-separated callsigns if non-empty."""
        ordered = self.in_order()
        header = f"{type(self).__name__}:{len(ordered)}"
        if not ordered:
            return header
        return header + "\n" + ",".join(ac.callsign for ac in ordered)

    def __len__(self):
        return len(self._aircraft)

    def __iter__(self) -> Iterator[Aircraft]:
        return iter(self.in_order())

    def __str__(self):
        return f"{type(self).__name__} [{', '.join(ac.callsign for ac in self.in_order())}]"


class TakeoffQueue(AircraftQueue):
    """First-in-first-out queue of aircraft waiting to take off."""

    def _select(self) -> Optional[Aircraft]:
        return next(iter(self._aircraft.values()), None)

    def in_order(self) -> List[Aircraft]:
        return list(self._aircraft.values())


class LandingQueue(AircraftQueue):
    """
    Queue of aircraft waiting in the air to land, ordered by urgency.

    Selection rules, in order of precedence (ties go to the aircraft added
    first):
    1. Aircraft in a state of emergency
    2. Aircraft with critically low fuel (``LOW_FUEL_PERCENT`` or less)
    3. Passenger aircraft
    4. Any aircraft
    """

    LOW_FUEL_PERCENT = 20

    def _select(self) -> Optional[Aircraft]:
        queued = list(self._aircraft.values())
        rules = (
            lambda ac: ac.has_emergency(),
            lambda ac: ac.fuel_percent_remaining() <= self.LOW_FUEL_PERCENT,
            lambda ac: isinstance(ac, PassengerAircraft),
        )
        for rule in rules:
            match = next((ac for ac in queued if rule(ac)), None)
            if match is not None:
                return match
        return queued[0] if queued else None

    def in_order(self) -> List[Aircraft]:
        copy = LandingQueue()
        for aircraft in self._aircraft.values():
            copy.add(aircraft)
        return [copy.remove() for _ in range(len(copy))]
