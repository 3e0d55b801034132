#!/usr/bin/env python3
"""
Core Physics Engine for the gravity simulator

Responsibilities
- Accumulate pairwise gravitational velocity increments for every unordered pair of bodies.
- Advance body states with either explicit Euler or classical fourth-order Runge-Kutta (RK4).
- Provide small helpers used when building scenarios (circular orbit speed, radius from density).

Units and conventions
- Everything is in internal simulation units; G is 6673.85 in those units.
- The kernel folds the time step into the acceleration, so it yields velocity
  increments directly: for a pair (A, B) at separation d,

      dv_A = +G * dt * |d|^-3 * d * m_B
      dv_B = -G * dt * |d|^-3 * d * m_A

  There is no division by a body's own mass anywhere.

Numerical notes
- Dead zone: pairs closer than PROXIMITY_DEAD_ZONE contribute no force at all. This keeps a body
  spawned on top of another from being flung away at absurd speed. The pair is still reported to
  the pair callback so collision detection sees it.
- Complexity: every stage is a direct O(N^2) sum over unordered pairs, each pair visited once.
- RK4 stage scratch (k1..k4) lives in an RK4Stages record built per tick, indexed like the body
  list, so Body itself carries no integrator state.

Threading
- Pure compute. Positions are read for the whole pass before any increment is applied.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .constants import G, PROXIMITY_DEAD_ZONE, SPHERE_VOLUME_FACTOR
from .data_models import Body
from .settings import Method
from .vector_utils import Vec2, vec_add, vec_scale

# Called once per unordered pair (i, j) with i < j and their separation.
PairCallback = Callable[[int, int, float], None]


@dataclass
class RK4Stages:
    """Per-tick RK4 increments, one entry per body index."""
    k1dx: List[Vec2] = field(default_factory=list)
    k1dv: List[Vec2] = field(default_factory=list)
    k2dx: List[Vec2] = field(default_factory=list)
    k2dv: List[Vec2] = field(default_factory=list)
    k3dx: List[Vec2] = field(default_factory=list)
    k3dv: List[Vec2] = field(default_factory=list)
    k4dx: List[Vec2] = field(default_factory=list)
    k4dv: List[Vec2] = field(default_factory=list)

    def delta_velocity(self, i: int) -> Vec2:
        return _weighted_sum(self.k1dv[i], self.k2dv[i], self.k3dv[i], self.k4dv[i])

    def delta_position(self, i: int) -> Vec2:
        return _weighted_sum(self.k1dx[i], self.k2dx[i], self.k3dx[i], self.k4dx[i])


def _weighted_sum(k1: Vec2, k2: Vec2, k3: Vec2, k4: Vec2) -> Vec2:
    """(k1 + 2*k2 + 2*k3 + k4) / 6"""
    return (
        (k1[0] + 2.0 * k2[0] + 2.0 * k3[0] + k4[0]) / 6.0,
        (k1[1] + 2.0 * k2[1] + 2.0 * k3[1] + k4[1]) / 6.0,
    )


class NBodyPhysics:
    """
    Direct-summation N-body integrator.

    The same pair kernel drives both integration methods. Euler evaluates it
    once per tick, RK4 four times at displaced trial positions. The optional
    pair callback is only attached to the last evaluation of a tick, which is
    where collision detection happens.
    """

    def __init__(self, gravity: float = G, dead_zone: float = PROXIMITY_DEAD_ZONE):
        """
        Initialize the physics engine.

        Args:
            gravity: Gravitational constant in simulation units
            dead_zone: Separation at or below which a pair exerts no force
        """
        self.gravity = float(gravity)
        self.dead_zone = float(dead_zone)

    def velocity_deltas(self, bodies: Sequence[Body], positions: Sequence[Vec2],
                        time_step: float, on_pair: Optional[PairCallback] = None) -> List[Vec2]:
        """
        Compute the velocity increment every body receives over one time step.

        Args:
            bodies: Bodies in collection order (only .mass is read).
            positions: Position to use for each body; may be a trial position rather
                than the stored one.
            time_step: Time step folded into the increments.
            on_pair: Optional callback invoked with (i, j, distance) for every pair,
                whether or not the pair is inside the dead zone.

        Returns:
            List of (dvx, dvy) tuples, same order as bodies.
        """
        n = len(bodies)
        dvx = [0.0] * n
        dvy = [0.0] * n
        gdt = self.gravity * time_step
        dead_zone = self.dead_zone

        for i in range(n - 1):
            xi, yi = positions[i]
            mi = bodies[i].mass
            for j in range(i + 1, n):
                xj, yj = positions[j]
                dx = xj - xi
                dy = yj - yi
                distance = math.hypot(dx, dy)
                if distance > dead_zone:
                    # |d|^-3 rather than ^-2: the direction is d itself, not d / |d|
                    acceleration = gdt * distance ** -3.0
                    ax = acceleration * dx
                    ay = acceleration * dy
                    mj = bodies[j].mass
                    dvx[i] += ax * mj
                    dvy[i] += ay * mj
                    dvx[j] -= ax * mi
                    dvy[j] -= ay * mi
                if on_pair is not None:
                    on_pair(i, j, distance)

        return list(zip(dvx, dvy))

    def euler_step(self, bodies: List[Body], time_step: float,
                   on_pair: Optional[PairCallback] = None) -> None:
        """
        Advance all bodies by one explicit Euler step (modified in place).

        Velocities are updated from a single force pass over the current positions;
        positions then move with the updated velocities.
        """
        positions = [body.position for body in bodies]
        deltas = self.velocity_deltas(bodies, positions, time_step, on_pair)

        for body, dv in zip(bodies, deltas):
            body.velocity = vec_add(body.velocity, dv)
        for body in bodies:
            body.position = vec_add(body.position, vec_scale(body.velocity, time_step))

    def rk4_step(self, bodies: List[Body], time_step: float,
                 on_pair: Optional[PairCallback] = None) -> RK4Stages:
        """
        Advance all bodies by one classical Runge-Kutta step (modified in place).

        Workflow:
        1) k1 at the current positions
        2) k2 at position + k1dx / 2
        3) k3 at position + k2dx / 2
        4) k4 at position + k3dx
        Combine (k1 + 2*k2 + 2*k3 + k4) / 6 for both velocity and position.

        Trial positions are never written back to the bodies. The dead zone and the
        pair callback see the trial positions of the stage being evaluated.

        Returns:
            The stage increments used for this step.
        """
        dt = time_step
        positions = [body.position for body in bodies]
        velocities = [body.velocity for body in bodies]
        stages = RK4Stages()

        stages.k1dv = self.velocity_deltas(bodies, positions, dt)
        stages.k1dx = [vec_scale(v, dt) for v in velocities]

        trial = [vec_add(p, vec_scale(k, 0.5)) for p, k in zip(positions, stages.k1dx)]
        stages.k2dv = self.velocity_deltas(bodies, trial, dt)
        stages.k2dx = [vec_scale(vec_add(v, vec_scale(k, 0.5)), dt)
                       for v, k in zip(velocities, stages.k1dv)]

        trial = [vec_add(p, vec_scale(k, 0.5)) for p, k in zip(positions, stages.k2dx)]
        stages.k3dv = self.velocity_deltas(bodies, trial, dt)
        stages.k3dx = [vec_scale(vec_add(v, vec_scale(k, 0.5)), dt)
                       for v, k in zip(velocities, stages.k2dv)]

        trial = [vec_add(p, k) for p, k in zip(positions, stages.k3dx)]
        stages.k4dv = self.velocity_deltas(bodies, trial, dt, on_pair)
        stages.k4dx = [vec_scale(vec_add(v, k), dt)
                       for v, k in zip(velocities, stages.k3dv)]

        for i, body in enumerate(bodies):
            body.velocity = vec_add(body.velocity, stages.delta_velocity(i))
            body.position = vec_add(body.position, stages.delta_position(i))

        return stages

    def step(self, bodies: List[Body], method: Method, time_step: float,
             on_pair: Optional[PairCallback] = None) -> None:
        """Advance one tick with the selected method."""
        if method is Method.RK4:
            self.rk4_step(bodies, time_step, on_pair)
        else:
            self.euler_step(bodies, time_step, on_pair)


def circular_orbit_velocity(central_mass: float, orbital_radius: float, gravity: float = G) -> float:
    """
    Calculate the speed of a circular orbit around a much heavier body.

    v = sqrt(G * M / r)

    Args:
        central_mass: Mass of the central body
        orbital_radius: Orbital radius

    Returns:
        Orbital speed, or 0.0 for a non-positive radius
    """
    if orbital_radius <= 0:
        return 0.0
    return math.sqrt(gravity * central_mass / orbital_radius)


def radius_from_density(mass: float, density: float, scale: float) -> float:
    """Radius of a sphere of the given mass and density, times a display scale."""
    return scale * (mass / (density * SPHERE_VOLUME_FACTOR)) ** (1.0 / 3.0)
