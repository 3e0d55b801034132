#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

Positions and velocities are plain (x, y) tuples throughout the package.
"""
from typing import Tuple

Vec2 = Tuple[float, float]


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)
