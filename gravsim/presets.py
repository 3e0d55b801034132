#!/usr/bin/env python3
"""
Built-in scenario presets.

Each preset returns a fresh list of bodies; load it with
Simulation.replace_bodies(). Available presets:

- "solar_system": the Sun, the eight planets and their major moons, placed at
  perihelion on orbits built from real semi-major axes and eccentricities
  (masses in units of 1e24 kg, distances in units of 1e6 km / 100).
- "protoplanetary_disk": a heavy protostar surrounded by a ring of light
  particles on circular orbits.
"""
import logging
import math
import random
from typing import Callable, Dict, List, Optional

from .constants import DISK_RADIUS_SCALE, G, PLANET_RADIUS_SCALE
from .data_models import Body
from .physics import circular_orbit_velocity, radius_from_density

logger = logging.getLogger(__name__)

SUN_MASS = 1989100.0
SUN_DENSITY = 1409.0
DISTANCE_SCALE = 100.0

PROTOSTAR_MASS = 1000000.0
PROTOSTAR_DENSITY = 6000.0
DISK_PARTICLE_MASS = 1.0
DISK_PARTICLE_DENSITY = 500.0
DISK_INNER_RADIUS = 500.0
DISK_OUTER_RADIUS = 1500.0

# name: (mass, density, semi-major axis, eccentricity, angle in degrees)
PLANETS = [
    ("Mercury", 0.3301, 5427, 57.909227, 0.20563593, 48.331),
    ("Venus", 4.8673, 5243, 108.20948, 0.00677672, 76.678),
    ("Earth", 5.9722, 5513, 149.59826, 0.01671123, 348.73936),
    ("Mars", 0.64169, 3934, 227.94382, 0.0933941, 49.562),
    ("Jupiter", 1898.1, 1326, 778.34082, 0.04838624, 100.492),
    ("Saturn", 568.32, 687, 1426.6664, 0.05386179, 113.643),
    ("Uranus", 86.81, 1270, 2870.6582, 0.04725744, 73.99),
    ("Neptune", 102.41, 1638, 4498.3964, 0.00859048, 131.794),
]

MOONS = {
    "Earth": [
        ("Moon", 0.073477, 3346, 0.384399, 0.0549, 125.08),
    ],
    "Jupiter": [
        ("Io", 0.0894, 3528, 0.4216, 0.0041, 0),
        ("Europa", 0.048, 3010, 0.6709, 0.009, 0),
        ("Ganymede", 0.14819, 1936, 1.0704, 0.0013, 0),
        ("Callisto", 0.10758, 1830, 1.8827, 0.0074, 0),
    ],
    "Saturn": [
        ("Mimas", 0.0000375, 1150, 0.18552, 0.0202, 0),
        ("Enceladus", 0.000108, 1610, 0.237948, 0.0047, 0),
        ("Tethys", 0.0006174, 980, 0.294619, 0.02, 0),
        ("Dione", 0.001095, 1480, 0.377396, 0.002, 0),
        ("Rhea", 0.002306, 1230, 0.527108, 0.001, 0),
        ("Titan", 0.13452, 1880, 1.22187, 0.0288, 0),
        ("Iapetus", 0.0018053, 1080, 3.56082, 0.0286, 0),
    ],
    "Uranus": [
        ("Miranda", 0.0000659, 1200, 0.12939, 0.0013, 0),
        ("Ariel", 0.00135, 1670, 0.1909, 0.0012, 0),
        ("Umbriel", 0.0012, 1400, 0.2662, 0.005, 0),
        ("Titania", 0.0035, 1720, 0.4363, 0.0011, 0),
        ("Oberon", 0.003014, 1630, 0.583519, 0.0014, 0),
    ],
    "Neptune": [
        ("Triton", 0.0214, 2061, 0.354759, 0.00002, 0),
    ],
}


def orbiting_body(primary: Body, mass: float, density: float, semi_major_axis: float,
                  eccentricity: float, angle_deg: float) -> Body:
    """
    Place a body at the periapsis of an orbit around primary.

    Speed at periapsis is sqrt(G * M * (1 + e) / r_p) with r_p = a * (1 - e).
    The body inherits the primary's velocity and is offset from its position.
    """
    periapsis = semi_major_axis * DISTANCE_SCALE * (1 - eccentricity)
    speed = math.sqrt(G * primary.mass * (1 + eccentricity) / periapsis)
    angle = math.radians(angle_deg)
    return Body(
        mass=mass,
        radius=radius_from_density(mass, density, PLANET_RADIUS_SCALE),
        position=(periapsis * math.cos(angle) + primary.position[0],
                  periapsis * math.sin(angle) + primary.position[1]),
        velocity=(-speed * math.sin(angle) + primary.velocity[0],
                  speed * math.cos(angle) + primary.velocity[1]),
    )


def solar_system() -> List[Body]:
    sun = Body(
        mass=SUN_MASS,
        radius=radius_from_density(SUN_MASS, SUN_DENSITY, PLANET_RADIUS_SCALE),
        position=(0.0, 0.0),
        velocity=(0.0, 0.0),
    )
    bodies = [sun]
    for name, mass, density, a, e, angle in PLANETS:
        planet = orbiting_body(sun, mass, density, a, e, angle)
        bodies.append(planet)
        for _moon, m_mass, m_density, m_a, m_e, m_angle in MOONS.get(name, []):
            bodies.append(orbiting_body(planet, m_mass, m_density, m_a, m_e, m_angle))
    return bodies


def protoplanetary_disk(count: int = 1000, rng: Optional[random.Random] = None) -> List[Body]:
    """
    A protostar at the origin plus `count` unit-mass particles in an annulus.

    Particle radii are drawn so the annulus is evenly covered by area; each
    particle gets the circular speed for the protostar's mass alone.
    """
    rng = rng or random.Random()
    bodies = [Body(
        mass=PROTOSTAR_MASS,
        radius=radius_from_density(PROTOSTAR_MASS, PROTOSTAR_DENSITY, DISK_RADIUS_SCALE),
        position=(0.0, 0.0),
        velocity=(0.0, 0.0),
    )]
    particle_radius = radius_from_density(DISK_PARTICLE_MASS, DISK_PARTICLE_DENSITY, DISK_RADIUS_SCALE)
    inner_sq = DISK_INNER_RADIUS ** 2
    outer_sq = DISK_OUTER_RADIUS ** 2
    for _ in range(count):
        r = math.sqrt(rng.randint(0, 1000) * 0.001 * (outer_sq - inner_sq) + inner_sq)
        angle = math.radians(rng.randint(0, 3600) * 0.1)
        speed = circular_orbit_velocity(PROTOSTAR_MASS, r)
        bodies.append(Body(
            mass=DISK_PARTICLE_MASS,
            radius=particle_radius,
            position=(r * math.cos(angle), r * math.sin(angle)),
            velocity=(-speed * math.sin(angle), speed * math.cos(angle)),
        ))
    return bodies


PRESETS: Dict[str, Callable[[], List[Body]]] = {
    "solar_system": solar_system,
    "protoplanetary_disk": protoplanetary_disk,
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def load_preset(name: str) -> List[Body]:
    """Build the named preset. Raises KeyError for unknown names."""
    try:
        builder = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}; available: {', '.join(list_presets())}") from None
    bodies = builder()
    logger.info("Built preset %s with %d bodies", name, len(bodies))
    return bodies
