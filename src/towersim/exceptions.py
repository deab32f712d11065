"""
Exception types raised by the tower simulation.
"""


class TowerSimError(Exception):
    """Base class for all simulation errors."""


class ConfigError(TowerSimError, ValueError):
    """
    Raised when an entity is constructed with illegal arguments.

    Examples are fuel or cargo outside the aircraft's capacity, or a task
    list whose adjacent tasks are not legal transitions.
    """


class NoSpaceError(TowerSimError):
    """Raised when a gate is already occupied or a terminal has no room for another gate."""


class NoSuitableGateError(TowerSimError):
    """Raised when no compatible unoccupied gate can be found for an aircraft."""


class MalformedSaveError(TowerSimError):
    """Raised when a saved simulation cannot be decoded."""
