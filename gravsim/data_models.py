#!/usr/bin/env python3
"""
Data models for the gravity simulator.

This module defines the Body dataclass shared between the integrator, the
collision engine and whatever front end drives the simulation.

Units and usage
- mass, radius, position and velocity are in internal simulation units.
- radius is stored independently of mass; deriving one from the other (via a
  density) is up to whoever creates the body.
- Bodies compare and hash by identity, so two bodies with identical state are
  still distinct members of a simulation.
"""
from dataclasses import dataclass

from .vector_utils import Vec2, vec_scale


@dataclass(eq=False)
class Body:
    """
    Represents a point mass in the simulation.

    Fields:
    - mass: Mass of the body (always positive)
    - radius: Collision radius
    - position: 2D position (x, y)
    - velocity: 2D velocity (vx, vy)
    """
    mass: float
    radius: float
    position: Vec2
    velocity: Vec2

    def momentum(self) -> Vec2:
        """Return mass * velocity."""
        return vec_scale(self.velocity, self.mass)
