#!/usr/bin/env python3
"""
Simulation settings: integration method and time step.

Both values are validated on assignment; a rejected value raises
InvalidConfiguration and leaves the previous setting in place.
"""
import math
import numbers
from enum import Enum
from typing import Union

from .constants import DEFAULT_TIME_STEP


class InvalidConfiguration(ValueError):
    """Raised when a method or time step cannot be used."""


class InvalidBody(ValueError):
    """Raised when a body is created with unusable mass, radius or vectors."""


class Method(Enum):
    EULER = "Euler"
    RK4 = "RK4"

    @classmethod
    def parse(cls, value: Union["Method", str]) -> "Method":
        """Accept a Method or its name ("Euler", "rk4", ...)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for method in cls:
                if value.strip().lower() in (method.value.lower(), method.name.lower()):
                    return method
        raise InvalidConfiguration(f"Unknown integration method: {value!r}")


def is_real_number(value) -> bool:
    """True for ints, floats and other real numbers; bools and strings are not numbers here."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_time_step(time_step: float) -> float:
    if not is_real_number(time_step):
        raise InvalidConfiguration(f"Time step must be a number, got {time_step!r}")
    dt = float(time_step)
    if not math.isfinite(dt) or dt <= 0.0:
        raise InvalidConfiguration(f"Time step must be positive and finite, got {time_step!r}")
    return dt


class SimulationSettings:
    """Container for integrator settings."""

    def __init__(self, method: Union[Method, str] = Method.EULER, time_step: float = DEFAULT_TIME_STEP):
        self._method = Method.parse(method)
        self._time_step = validate_time_step(time_step)

    @property
    def method(self) -> Method:
        return self._method

    @method.setter
    def method(self, value: Union[Method, str]) -> None:
        self._method = Method.parse(value)

    @property
    def time_step(self) -> float:
        return self._time_step

    @time_step.setter
    def time_step(self, value: float) -> None:
        self._time_step = validate_time_step(value)

    def __repr__(self) -> str:
        return f"SimulationSettings(method={self._method.value!r}, time_step={self._time_step!r})"
