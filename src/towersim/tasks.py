"""
Aircraft task module.

Defines the tasks an aircraft can be assigned and the circular task list
each aircraft cycles through.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Sequence

from .exceptions import ConfigError


class TaskType(Enum):
    """Operational state of an aircraft."""
    AWAY = "AWAY"        # flying outside the airport's airspace
    LAND = "LAND"        # waiting in the landing queue
    WAIT = "WAIT"        # parked at a gate, idle
    LOAD = "LOAD"        # parked at a gate, loading cargo
    TAKEOFF = "TAKEOFF"  # waiting in the takeoff queue


# Legal successors of each task type within a task list
ALLOWED_TRANSITIONS: Dict[TaskType, FrozenSet[TaskType]] = {
    TaskType.AWAY: frozenset({TaskType.AWAY, TaskType.LAND}),
    TaskType.LAND: frozenset({TaskType.WAIT, TaskType.LOAD}),
    TaskType.WAIT: frozenset({TaskType.WAIT, TaskType.LOAD}),
    TaskType.LOAD: frozenset({TaskType.TAKEOFF}),
    TaskType.TAKEOFF: frozenset({TaskType.AWAY}),
}


@dataclass(frozen=True)
class Task:
    """
    A single task assigned to an aircraft.

    Attributes:
        type: Kind of task
        load_percent: Percentage of maximum cargo capacity to load (LOAD tasks only)
    """
    type: TaskType
    load_percent: int = 0

    def __post_init__(self):
        if not 0 <= self.load_percent <= 100:
            raise ConfigError(f"Load percentage must be 0-100, got {self.load_percent}")

    def encode(self) -> str:
        """Machine-readable form, e.g. ``LOAD@60`` or ``AWAY``."""
        if self.type == TaskType.LOAD:
            return f"{self.type.value}@{self.load_percent}"
        return self.type.value

    def __str__(self):
        if self.type == TaskType.LOAD:
            return f"{self.type.value} at {self.load_percent}%"
        return self.type.value


class TaskList:
    """
    Circular list of tasks with a movable cursor.

    The sequence itself never changes after construction; only the current
    position advances. Adjacent tasks (including last to first) must be legal
    transitions according to ``ALLOWED_TRANSITIONS``.
    """

    def __init__(self, tasks: Sequence[Task]):
        tasks = list(tasks)
        if not tasks:
            raise ConfigError("Task list must contain at least one task")

        for i, task in enumerate(tasks):
            following = tasks[(i + 1) % len(tasks)]
            if following.type not in ALLOWED_TRANSITIONS[task.type]:
                raise ConfigError(
                    f"Illegal task transition {task.type.value} -> {following.type.value} "
                    f"at position {i + 1}"
                )

        self._tasks = tuple(tasks)
        self._index = 0

    def current(self) -> Task:
        """Return the task at the cursor."""
        return self._tasks[self._index]

    def peek_next(self) -> Task:
        """Return the task that follows the current one, without moving the cursor."""
        return self._tasks[(self._index + 1) % len(self._tasks)]

    def advance(self):
        """Move the cursor forward by one, wrapping to the first task."""
        self._index = (self._index + 1) % len(self._tasks)

    def tasks(self) -> List[Task]:
        """Return every task, starting from the current one."""
        return [self._tasks[(self._index + offset) % len(self._tasks)]
                for offset in range(len(self._tasks))]

    def encode(self) -> str:
        """Comma-separated encoded tasks, starting with the current task."""
        return ",".join(task.encode() for task in self.tasks())

    def __len__(self):
        return len(self._tasks)

    def __str__(self):
        return (f"TaskList currently on {self.current()} "
                f"[{self._index + 1}/{len(self._tasks)}]")

    def __repr__(self):
        return f"TaskList({self.encode()})"
