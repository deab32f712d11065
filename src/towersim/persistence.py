"""
Save file reading and writing.

A saved simulation is a directory of four line-oriented text files:

    tick.txt                 elapsed ticks
    aircraft.txt             count, then one encoded aircraft per line
    queues.txt               takeoff queue, landing queue, loading aircraft
    terminalsWithGates.txt   count, then each terminal followed by its gates

Any problem decoding these files raises MalformedSaveError; nothing is
returned from a partially read save.
"""

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, TextIO, Tuple, Union

from .aircraft import Aircraft, AircraftCharacteristics, create_aircraft
from .control_tower import ControlTower
from .exceptions import ConfigError, MalformedSaveError, NoSpaceError
from .ground import TERMINAL_TYPES, Gate, Terminal
from .queues import AircraftQueue, LandingQueue, TakeoffQueue
from .tasks import Task, TaskList, TaskType

logger = logging.getLogger(__name__)

# Canonical form only: ASCII digits, no plus sign, no leading zeros
_INTEGER = re.compile(r"^(0|-?[1-9][0-9]*)$")

LOADING_AIRCRAFT_HEADER = "LoadingAircraft"


@dataclass(frozen=True)
class SaveFiles:
    """File names making up a saved simulation."""
    tick: str = "tick.txt"
    aircraft: str = "aircraft.txt"
    queues: str = "queues.txt"
    terminals: str = "terminalsWithGates.txt"


def _parse_int(text: str, what: str) -> int:
    if not _INTEGER.match(text):
        raise MalformedSaveError(f"{what} is not an integer: {text!r}")
    return int(text)


def _parse_float(text: str, what: str) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise MalformedSaveError(f"{what} is not a number: {text!r}") from e
    if not math.isfinite(value):
        raise MalformedSaveError(f"{what} is not finite: {text!r}")
    return value


def _parse_bool(text: str, what: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise MalformedSaveError(f"{what} must be 'true' or 'false', got {text!r}")


def _split(line: str, separator: str, expected: int, what: str) -> List[str]:
    parts = line.split(separator)
    if len(parts) != expected:
        raise MalformedSaveError(
            f"{what} should have {expected} '{separator}'-separated fields, got {len(parts)}: {line!r}"
        )
    return parts


def _lines(stream: Iterable[str]) -> Iterator[str]:
    for line in stream:
        yield line.rstrip("\r\n")


def _next_line(lines: Iterator[str], what: str) -> str:
    line = next(lines, None)
    if line is None:
        raise MalformedSaveError(f"Unexpected end of file, expected {what}")
    return line


def _expect_end(lines: Iterator[str], what: str):
    for line in lines:
        if line.strip():
            raise MalformedSaveError(f"Unexpected content after {what}: {line!r}")


def _find_aircraft(callsign: str, aircraft: Dict[str, Aircraft]) -> Aircraft:
    try:
        return aircraft[callsign]
    except KeyError:
        raise MalformedSaveError(f"Unknown aircraft callsign {callsign!r}") from None


def _by_callsign(aircraft: Iterable[Aircraft]) -> Dict[str, Aircraft]:
    return {ac.callsign: ac for ac in aircraft}


# Readers for single encoded entities

def read_task_list(text: str) -> TaskList:
    """Decode a comma-separated task list such as ``WAIT,LOAD@60,TAKEOFF,AWAY,LAND``."""
    tasks = []
    for encoded in text.split(","):
        if "@" in encoded:
            name, percent = _split(encoded, "@", 2, "Task")
            if name != TaskType.LOAD.value:
                raise MalformedSaveError(f"Only LOAD tasks take a load percentage: {encoded!r}")
            load_percent = _parse_int(percent, "Load percentage")
            if load_percent < 0 or load_percent > 100:
                raise MalformedSaveError(f"Load percentage out of range: {encoded!r}")
            tasks.append(Task(TaskType.LOAD, load_percent))
            continue

        try:
            task_type = TaskType[encoded]
        except KeyError:
            raise MalformedSaveError(f"Unknown task type {encoded!r}") from None
        if task_type == TaskType.LOAD:
            raise MalformedSaveError("LOAD task is missing its load percentage")
        tasks.append(Task(task_type))

    try:
        return TaskList(tasks)
    except ConfigError as e:
        raise MalformedSaveError(f"Invalid task list {text!r}: {e}") from e


def read_aircraft(line: str) -> Aircraft:
    """Decode ``callsign:model:tasks:fuel:emergency:cargo`` into an aircraft."""
    callsign, model, tasks, fuel, emergency, cargo = _split(line, ":", 6, "Aircraft")
    if not callsign:
        raise MalformedSaveError(f"Aircraft has an empty callsign: {line!r}")

    try:
        characteristics = AircraftCharacteristics[model]
    except KeyError:
        raise MalformedSaveError(f"Unknown aircraft characteristics {model!r}") from None

    task_list = read_task_list(tasks)
    fuel_amount = _parse_float(fuel, "Fuel amount")
    has_emergency = _parse_bool(emergency, "Emergency flag")
    cargo_amount = _parse_int(cargo, "Cargo amount")

    try:
        aircraft = create_aircraft(callsign, characteristics, task_list, fuel_amount, cargo_amount)
    except ConfigError as e:
        raise MalformedSaveError(str(e)) from e

    if has_emergency:
        aircraft.declare_emergency()
    return aircraft


def read_gate(line: str, aircraft: Dict[str, Aircraft]) -> Gate:
    """Decode ``number:callsign`` or ``number:empty`` into a gate."""
    number, occupant = _split(line, ":", 2, "Gate")
    gate_number = _parse_int(number, "Gate number")
    if gate_number < 1:
        raise MalformedSaveError(f"Gate number must be at least 1: {line!r}")

    gate = Gate(gate_number)
    if occupant != "empty":
        gate.park(_find_aircraft(occupant, aircraft))
    return gate


def read_terminal(line: str, lines: Iterator[str], aircraft: Dict[str, Aircraft]) -> Terminal:
    """Decode a terminal header line and read its gates from the following lines."""
    kind, number, emergency, gate_count = _split(line, ":", 4, "Terminal")
    if kind not in TERMINAL_TYPES:
        raise MalformedSaveError(f"Unknown terminal type {kind!r}")

    terminal_number = _parse_int(number, "Terminal number")
    if terminal_number < 1:
        raise MalformedSaveError(f"Terminal number must be at least 1: {line!r}")
    has_emergency = _parse_bool(emergency, "Terminal emergency flag")
    num_gates = _parse_int(gate_count, "Gate count")
    if num_gates < 0 or num_gates > Terminal.MAX_NUM_GATES:
        raise MalformedSaveError(
            f"Gate count must be between 0 and {Terminal.MAX_NUM_GATES}: {line!r}"
        )

    terminal = TERMINAL_TYPES[kind](terminal_number)
    for _ in range(num_gates):
        gate_line = _next_line(lines, f"gate of terminal {terminal_number}")
        try:
            terminal.add_gate(read_gate(gate_line, aircraft))
        except NoSpaceError as e:
            raise MalformedSaveError(str(e)) from e

    if has_emergency:
        terminal.declare_emergency()
    return terminal


def read_queue(lines: Iterator[str], aircraft: Dict[str, Aircraft], queue: AircraftQueue):
    """Read ``QueueName:N`` and its callsign line, adding each aircraft to the queue."""
    header = _next_line(lines, f"{type(queue).__name__} header")
    name, count = _split(header, ":", 2, "Queue header")
    if name != type(queue).__name__:
        raise MalformedSaveError(f"Expected {type(queue).__name__}, got {name!r}")

    num_aircraft = _parse_int(count, "Queue size")
    if num_aircraft < 0:
        raise MalformedSaveError(f"Queue size must be non-negative: {header!r}")
    if num_aircraft == 0:
        return

    callsigns = _next_line(lines, f"{name} callsigns").split(",")
    if len(callsigns) != num_aircraft:
        raise MalformedSaveError(
            f"{name} lists {len(callsigns)} aircraft but header says {num_aircraft}"
        )
    for callsign in callsigns:
        queued = _find_aircraft(callsign, aircraft)
        if queue.contains(queued):
            raise MalformedSaveError(f"{callsign} appears twice in {name}")
        queue.add(queued)


def read_loading_aircraft(lines: Iterator[str], aircraft: Dict[str, Aircraft]) -> Dict[str, int]:
    """Read ``LoadingAircraft:N`` and its ``callsign:ticks`` pairs."""
    header = _next_line(lines, "loading aircraft header")
    name, count = _split(header, ":", 2, "Loading aircraft header")
    if name != LOADING_AIRCRAFT_HEADER:
        raise MalformedSaveError(f"Expected {LOADING_AIRCRAFT_HEADER}, got {name!r}")

    num_aircraft = _parse_int(count, "Loading aircraft count")
    if num_aircraft < 0:
        raise MalformedSaveError(f"Loading aircraft count must be non-negative: {header!r}")
    if num_aircraft == 0:
        return {}

    pairs = _next_line(lines, "loading aircraft").split(",")
    if len(pairs) != num_aircraft:
        raise MalformedSaveError(
            f"{len(pairs)} loading aircraft listed but header says {num_aircraft}"
        )

    loading = {}
    for pair in pairs:
        callsign, ticks = _split(pair, ":", 2, "Loading aircraft entry")
        _find_aircraft(callsign, aircraft)
        remaining = _parse_int(ticks, "Loading ticks remaining")
        if remaining < 1:
            raise MalformedSaveError(f"Loading ticks remaining must be at least 1: {pair!r}")
        if callsign in loading:
            raise MalformedSaveError(f"{callsign} is listed twice as loading")
        loading[callsign] = remaining
    return loading


# Loaders for whole save files

def load_tick(stream: Iterable[str]) -> int:
    """Load the number of elapsed ticks."""
    lines = _lines(stream)
    ticks = _parse_int(_next_line(lines, "elapsed ticks"), "Elapsed ticks")
    if ticks < 0:
        raise MalformedSaveError(f"Elapsed ticks must be non-negative, got {ticks}")
    _expect_end(lines, "elapsed ticks")
    return ticks


def load_aircraft(stream: Iterable[str]) -> List[Aircraft]:
    """Load every aircraft managed by the tower."""
    lines = _lines(stream)
    count = _parse_int(_next_line(lines, "aircraft count"), "Aircraft count")
    if count < 0:
        raise MalformedSaveError(f"Aircraft count must be non-negative, got {count}")

    aircraft = []
    seen = set()
    for _ in range(count):
        loaded = read_aircraft(_next_line(lines, "aircraft"))
        if loaded.callsign in seen:
            raise MalformedSaveError(f"Duplicate aircraft callsign {loaded.callsign}")
        seen.add(loaded.callsign)
        aircraft.append(loaded)

    _expect_end(lines, f"{count} aircraft")
    return aircraft


def load_queues(
    stream: Iterable[str],
    aircraft: List[Aircraft]
) -> Tuple[TakeoffQueue, LandingQueue, Dict[str, int]]:
    """Load the takeoff queue, landing queue and loading aircraft, in that order."""
    lines = _lines(stream)
    known = _by_callsign(aircraft)

    takeoff_queue = TakeoffQueue()
    landing_queue = LandingQueue()
    read_queue(lines, known, takeoff_queue)
    read_queue(lines, known, landing_queue)
    loading = read_loading_aircraft(lines, known)

    _expect_end(lines, "loading aircraft")
    return takeoff_queue, landing_queue, loading


def load_terminals_with_gates(stream: Iterable[str], aircraft: List[Aircraft]) -> List[Terminal]:
    """Load every terminal along with its gates."""
    lines = _lines(stream)
    known = _by_callsign(aircraft)
    count = _parse_int(_next_line(lines, "terminal count"), "Terminal count")
    if count < 0:
        raise MalformedSaveError(f"Terminal count must be non-negative, got {count}")

    terminals = []
    parked = set()
    for _ in range(count):
        terminal = read_terminal(_next_line(lines, "terminal"), lines, known)
        for gate in terminal.gates:
            if gate.aircraft is None:
                continue
            if gate.aircraft.callsign in parked:
                raise MalformedSaveError(f"{gate.aircraft.callsign} is parked at more than one gate")
            parked.add(gate.aircraft.callsign)
        terminals.append(terminal)

    _expect_end(lines, f"{count} terminals")
    return terminals


def create_control_tower(
    tick: Iterable[str],
    aircraft: Iterable[str],
    queues: Iterable[str],
    terminals: Iterable[str]
) -> ControlTower:
    """Build a control tower from the four save streams."""
    ticks_elapsed = load_tick(tick)
    loaded_aircraft = load_aircraft(aircraft)
    takeoff_queue, landing_queue, loading = load_queues(queues, loaded_aircraft)
    loaded_terminals = load_terminals_with_gates(terminals, loaded_aircraft)

    return ControlTower(
        ticks_elapsed=ticks_elapsed,
        aircraft=loaded_aircraft,
        landing_queue=landing_queue,
        takeoff_queue=takeoff_queue,
        loading_aircraft=loading,
        terminals=loaded_terminals
    )


# Encoders

def encode_tick(ticks_elapsed: int) -> str:
    return str(ticks_elapsed)


def encode_aircraft(aircraft: List[Aircraft]) -> str:
    return "\n".join([str(len(aircraft))] + [ac.encode() for ac in aircraft])


def encode_loading_aircraft(loading: Dict[str, int]) -> str:
    header = f"{LOADING_AIRCRAFT_HEADER}:{len(loading)}"
    if not loading:
        return header
    return header + "\n" + ",".join(f"{callsign}:{ticks}" for callsign, ticks in loading.items())


def encode_queues(
    takeoff_queue: TakeoffQueue,
    landing_queue: LandingQueue,
    loading: Dict[str, int]
) -> str:
    return "\n".join([
        takeoff_queue.encode(),
        landing_queue.encode(),
        encode_loading_aircraft(loading),
    ])


def encode_terminals(terminals: List[Terminal]) -> str:
    return "\n".join([str(len(terminals))] + [terminal.encode() for terminal in terminals])


def encode_control_tower(tower: ControlTower, files: SaveFiles = SaveFiles()) -> Dict[str, str]:
    """Encode the tower into the contents of each save file, keyed by file name."""
    return {
        files.tick: encode_tick(tower.ticks_elapsed),
        files.aircraft: encode_aircraft(tower.aircraft),
        files.queues: encode_queues(tower.takeoff_queue, tower.landing_queue,
                                    tower.loading_aircraft),
        files.terminals: encode_terminals(tower.terminals),
    }


def save_control_tower(
    tower: ControlTower,
    directory: Union[str, Path],
    files: SaveFiles = SaveFiles()
):
    """Write the tower to a save directory, creating it if necessary."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    for name, contents in encode_control_tower(tower, files).items():
        (directory / name).write_text(contents + "\n", encoding="utf-8")
    logger.info("Saved tower at tick %d to %s", tower.ticks_elapsed, directory)


def load_control_tower(
    directory: Union[str, Path],
    files: Optional[SaveFiles] = None
) -> ControlTower:
    """Load a tower from a save directory."""
    directory = Path(directory)
    files = files or SaveFiles()

    def _open(name: str) -> TextIO:
        try:
            return open(directory / name, encoding="utf-8")
        except FileNotFoundError as e:
            raise MalformedSaveError(f"Missing save file {directory / name}") from e

    try:
        with _open(files.tick) as tick, _open(files.aircraft) as aircraft, \
                _open(files.queues) as queues, _open(files.terminals) as terminals:
            tower = create_control_tower(tick, aircraft, queues, terminals)
    except (UnicodeDecodeError, OSError) as e:
        raise MalformedSaveError(f"Could not read save in {directory}: {e}") from e

    logger.info("Loaded tower at tick %d from %s (%d aircraft, %d terminals)",
                tower.ticks_elapsed, directory, len(tower.aircraft), len(tower.terminals))
    return tower
