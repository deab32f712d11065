"""
Ground infrastructure module.

Defines gates and the terminals that group them, with aircraft type
compatibility and emergency lockout.
"""

from typing import List, Optional

from .aircraft import Aircraft, AircraftType, round_half_up
from .exceptions import NoSpaceError, NoSuitableGateError


class Gate:
    """
    A parking position for a single aircraft.

    The gate holds a reference to the parked aircraft; the aircraft does not
    know which gate it is at.
    """

    def __init__(self, gate_number: int):
        self.gate_number = gate_number
        self.aircraft: Optional[Aircraft] = None

    def park(self, aircraft: Aircraft):
        """Park an aircraft at this gate."""
        if self.is_occupied():
            raise NoSpaceError(
                f"Gate {self.gate_number} is occupied by {self.aircraft.callsign}, "
                f"cannot park {aircraft.callsign}"
            )
        self.aircraft = aircraft

    def vacate(self):
        """Aircraft at the gate leaves it."""
        self.aircraft = None

    def is_occupied(self) -> bool:
        return self.aircraft is not None

    def holds(self, aircraft: Aircraft) -> bool:
        """Check if the given aircraft (by callsign) is parked here."""
        return self.aircraft is not None and self.aircraft.callsign == aircraft.callsign

    def encode(self) -> str:
        occupant = self.aircraft.callsign if self.aircraft else "empty"
        return f"{self.gate_number}:{occupant}"

    def __str__(self):
        occupant = self.aircraft.callsign if self.aircraft else "empty"
        return f"Gate {self.gate_number} [{occupant}]"

    def __repr__(self):
        return f"Gate({self.encode()})"


class Terminal:
    """
    A terminal building containing up to ``MAX_NUM_GATES`` gates.

    Each terminal only accepts one type of aircraft. A terminal in a state of
    emergency is skipped when allocating gates.

    Attributes:
        terminal_number: Identifying number of the terminal
        gates: Gates in the order they were added
    """

    MAX_NUM_GATES = 6
    aircraft_type: AircraftType

    def __init__(self, terminal_number: int):
        self.terminal_number = terminal_number
        self.gates: List[Gate] = []
        self._emergency = False

    def add_gate(self, gate: Gate):
        """Add a gate to the terminal."""
        if len(self.gates) >= self.MAX_NUM_GATES:
            raise NoSpaceError(
                f"Terminal {self.terminal_number} already has the maximum of "
                f"{self.MAX_NUM_GATES} gates"
            )
        self.gates.append(gate)

    def accepts(self, aircraft: Aircraft) -> bool:
        """Check if aircraft of this kind may park at the terminal."""
        return aircraft.aircraft_type == self.aircraft_type

    def find_unoccupied_gate(self) -> Gate:
        """Return the first unoccupied gate in the order gates were added."""
        for gate in self.gates:
            if not gate.is_occupied():
                return gate
        raise NoSuitableGateError(f"No unoccupied gate in terminal {self.terminal_number}")

    def declare_emergency(self):
        self._emergency = True

    def clear_emergency(self):
        self._emergency = False

    def has_emergency(self) -> bool:
        return self._emergency

    def occupancy_level(self) -> int:
        """Percentage of gates that are occupied; 0 for a terminal without gates."""
        if not self.gates:
            return 0
        occupied = sum(1 for gate in self.gates if gate.is_occupied())
        return round_half_up(100 * occupied / len(self.gates))

    def encode(self) -> str:
        lines = [
            f"{type(self).__name__}:{self.terminal_number}:"
            f"{'true' if self._emergency else 'false'}:{len(self.gates)}"
        ]
        lines.extend(gate.encode() for gate in self.gates)
        return "\n".join(lines)

    def __str__(self):
        suffix = " (EMERGENCY)" if self._emergency else ""
        return f"{type(self).__name__} {self.terminal_number}, {len(self.gates)} gates{suffix}"

    def __repr__(self):
        return f"{type(self).__name__}({self.terminal_number}, gates={len(self.gates)})"


class AirplaneTerminal(Terminal):
    """Terminal accepting airplanes only."""
    aircraft_type = AircraftType.AIRPLANE


class HelicopterTerminal(Terminal):
    """Terminal accepting helicopters only."""
    aircraft_type = AircraftType.HELICOPTER


TERMINAL_TYPES = {
    "AirplaneTerminal": AirplaneTerminal,
    "HelicopterTerminal": HelicopterTerminal,
}
