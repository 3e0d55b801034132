#!/usr/bin/env python3
"""
Shared constants for the gravity simulator (internal simulation units).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Physical constants
G = 6673.85  # gravitational constant in simulation units

# Physics controls
PROXIMITY_DEAD_ZONE = 0.03  # pairs closer than this exert no force on each other
DEFAULT_TIME_STEP = 0.01

# Radius derivation: radius = scale * cbrt(mass / (density * SPHERE_VOLUME_FACTOR))
SPHERE_VOLUME_FACTOR = 4.189  # 4/3 * pi, rounded
PLANET_RADIUS_SCALE = 10.0
DISK_RADIUS_SCALE = 100.0
