#!/usr/bin/env python3
"""
Simulation controller: owns the bodies and the integrator settings.

What this module does
- Holds the ordered body collection and the SimulationSettings.
- Exposes the operations a front end needs: add/remove bodies, choose the
  integration method, set the time step, and advance one tick.
- Runs each tick to completion: kinematic update (Euler or RK4), collision
  detection on the last force pass, then merging of collision groups.

Threading model
- Single-threaded. Structural changes (add/remove/replace) must come from the
  same thread that calls advance_tick, between ticks.
- Front ends read body state after a tick; they never write positions or
  velocities while a tick is running.
"""
import logging
import math
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .collisions import CollisionLog, MergeEvent, resolve_collisions
from .constants import DEFAULT_TIME_STEP
from .data_models import Body
from .physics import NBodyPhysics
from .settings import InvalidBody, InvalidConfiguration, Method, SimulationSettings, is_real_number
from .vector_utils import Vec2

logger = logging.getLogger(__name__)

RemovalListener = Callable[[Body], None]


def _coerce_vector(name: str, value) -> Vec2:
    try:
        x, y = value
    except (TypeError, ValueError):
        raise InvalidBody(f"{name} must be a pair of numbers, got {value!r}") from None
    if not (is_real_number(x) and is_real_number(y)):
        raise InvalidBody(f"{name} must be a pair of numbers, got {value!r}")
    vec = (float(x), float(y))
    if not all(math.isfinite(c) for c in vec):
        raise InvalidBody(f"{name} must be finite, got {value!r}")
    return vec


def _coerce_positive(name: str, value) -> float:
    if not is_real_number(value):
        raise InvalidBody(f"{name} must be a number, got {value!r}")
    v = float(value)
    if not math.isfinite(v) or v <= 0.0:
        raise InvalidBody(f"{name} must be positive and finite, got {value!r}")
    return v


def _validate_body(body: Body) -> None:
    """Check an existing Body in place, normalising its fields to floats."""
    if not isinstance(body, Body):
        raise InvalidBody(f"expected a Body, got {body!r}")
    body.mass = _coerce_positive("mass", body.mass)
    body.radius = _coerce_positive("radius", body.radius)
    body.position = _coerce_vector("position", body.position)
    body.velocity = _coerce_vector("velocity", body.velocity)


class Simulation:
    """
    Shared state between the integrator and whatever drives it.
    """

    def __init__(self, method: Union[Method, str] = Method.EULER,
                 time_step: float = DEFAULT_TIME_STEP,
                 physics: Optional[NBodyPhysics] = None):
        self.settings = SimulationSettings(method, time_step)
        self.physics = physics or NBodyPhysics()
        self._bodies: List[Body] = []
        self._removal_listeners: List[RemovalListener] = []
        self.tick_count = 0
        self.last_collision_msg: Optional[str] = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def bodies(self) -> Tuple[Body, ...]:
        """Snapshot of the body collection in insertion order."""
        return tuple(self._bodies)

    @property
    def method(self) -> Method:
        return self.settings.method

    @property
    def time_step(self) -> float:
        return self.settings.time_step

    def __len__(self) -> int:
        return len(self._bodies)

    def __contains__(self, body: Body) -> bool:
        return any(b is body for b in self._bodies)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_time_step(self, time_step: float) -> None:
        try:
            self.settings.time_step = time_step
        except InvalidConfiguration:
            logger.warning("Rejected time step %r; keeping %r", time_step, self.settings.time_step)
            raise
        logger.info("Time step set to %g", self.settings.time_step)

    def set_method(self, method: Union[Method, str]) -> None:
        try:
            self.settings.method = method
        except InvalidConfiguration:
            logger.warning("Rejected integration method %r; keeping %s", method, self.settings.method.value)
            raise
        logger.info("Integration method set to %s", self.settings.method.value)

    # ------------------------------------------------------------------
    # Body collection
    # ------------------------------------------------------------------

    def add_body(self, mass: float, radius: float, velocity: Vec2, position: Vec2) -> Body:
        """Create a body, append it to the collection and return it as its handle."""
        body = Body(
            mass=_coerce_positive("mass", mass),
            radius=_coerce_positive("radius", radius),
            position=_coerce_vector("position", position),
            velocity=_coerce_vector("velocity", velocity),
        )
        self._bodies.append(body)
        logger.debug("Added body #%d: %r", len(self._bodies) - 1, body)
        return body

    def remove_body(self, handle: Body) -> None:
        """Remove a body by identity. Raises KeyError if it is not in the simulation."""
        for idx, body in enumerate(self._bodies):
            if body is handle:
                del self._bodies[idx]
                logger.debug("Removed body #%d", idx)
                self._notify_removed(body)
                return
        raise KeyError("body is not part of this simulation")

    def clear(self) -> None:
        """Remove every body."""
        removed, self._bodies = self._bodies, []
        for body in removed:
            self._notify_removed(body)

    def replace_bodies(self, new_bodies: Iterable[Body]) -> None:
        """
        Swap the whole collection, e.g. when loading a preset.

        Every body is validated like add_body's arguments and may appear only
        once. On InvalidBody the current collection is left untouched.
        """
        bodies = list(new_bodies)
        if len({id(b) for b in bodies}) != len(bodies):
            raise InvalidBody("the same body appears more than once")
        for body in bodies:
            _validate_body(body)

        self.clear()
        self._bodies = bodies
        self.last_collision_msg = None
        logger.info("Loaded %d bodies", len(self._bodies))

    def add_removal_listener(self, listener: RemovalListener) -> None:
        """Call listener(body) whenever a body leaves the collection."""
        self._removal_listeners.append(listener)

    def _notify_removed(self, body: Body) -> None:
        for listener in self._removal_listeners:
            listener(body)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def advance_tick(self) -> List[MergeEvent]:
        """
        Run exactly one simulation step and return the merges it produced.
        """
        self.tick_count += 1
        if not self._bodies:
            return []

        log = CollisionLog(self._bodies)
        self.physics.step(self._bodies, self.settings.method, self.settings.time_step, log.record)
        events = resolve_collisions(self._bodies, log)

        for event in events:
            for body in event.absorbed:
                self._notify_removed(body)
        if events:
            self.last_collision_msg = events[-1].describe()
        return events

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.advance_tick()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def total_mass(self) -> float:
        return sum(b.mass for b in self._bodies)

    def total_momentum(self) -> Vec2:
        momenta = [b.momentum() for b in self._bodies]
        return (sum(p[0] for p in momenta), sum(p[1] for p in momenta))
