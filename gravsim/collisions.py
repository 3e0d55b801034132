#!/usr/bin/env python3
"""
Collision handling for the gravity simulator.

Collisions are perfectly inelastic merges. Every body that touches another
during a tick ends up in a collision group (the transitive closure of
pairwise contacts), and each group collapses into its first-touched body:

- mass adds up
- radius^3 adds up (volume is conserved, the constant factor cancels)
- momentum is conserved, so velocity becomes the mass-weighted mean
- position becomes the centre of mass

Detection piggybacks on the integrator's pair loop through CollisionLog.record;
resolution runs once per tick after the kinematic update.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .data_models import Body

logger = logging.getLogger(__name__)


@dataclass
class MergeEvent:
    """One resolved collision group."""
    survivor: Body
    absorbed: List[Body] = field(default_factory=list)

    def describe(self) -> str:
        return f"Merged {len(self.absorbed) + 1} bodies (mass {self.survivor.mass:g})"


class CollisionLog:
    """
    Contacts found during one tick, by body index.

    touched keeps every colliding index once, in the order it was first seen;
    contacts maps an index to the indices it touches directly.
    """

    def __init__(self, bodies: Sequence[Body]):
        self.bodies = bodies
        self.touched: List[int] = []
        self.contacts: Dict[int, List[int]] = {}

    def record(self, i: int, j: int, distance: float) -> None:
        """Register the pair (i, j) as colliding if their radii overlap."""
        if distance > self.bodies[i].radius + self.bodies[j].radius:
            return
        for idx in (i, j):
            if idx not in self.contacts:
                self.contacts[idx] = []
                self.touched.append(idx)
        self.contacts[i].append(j)
        self.contacts[j].append(i)

    def __bool__(self) -> bool:
        return bool(self.touched)


def find_groups(log: CollisionLog) -> List[List[int]]:
    """
    Split the touched bodies into connected collision groups.

    Each group starts with the index that opened it, followed by the rest in
    discovery order. An index's contact list is consumed when it is visited, so
    no group is produced twice.
    """
    groups: List[List[int]] = []
    visited = set()
    for start in log.touched:
        if start in visited:
            continue
        visited.add(start)
        group = [start]
        stack = [start]
        while stack:
            current = stack.pop()
            for neighbour in log.contacts.pop(current, []):
                if neighbour not in visited:
                    visited.add(neighbour)
                    group.append(neighbour)
                    stack.append(neighbour)
        groups.append(group)
    return groups


def merge_group(bodies: Sequence[Body], group: Sequence[int]) -> Body:
    """Collapse the bodies at the given indices onto bodies[group[0]] and return it."""
    survivor = bodies[group[0]]

    total_mass = 0.0
    total_volume = 0.0
    px = py = 0.0
    cx = cy = 0.0
    for idx in group:
        body = bodies[idx]
        m = body.mass
        total_mass += m
        total_volume += body.radius ** 3
        px += body.velocity[0] * m
        py += body.velocity[1] * m
        cx += body.position[0] * m
        cy += body.position[1] * m

    assert total_mass > 0, f"collision group with non-positive total mass {total_mass}"

    survivor.mass = total_mass
    survivor.radius = total_volume ** (1.0 / 3.0)
    survivor.velocity = (px / total_mass, py / total_mass)
    survivor.position = (cx / total_mass, cy / total_mass)
    return survivor


def resolve_collisions(bodies: List[Body], log: CollisionLog) -> List[MergeEvent]:
    """
    Merge every collision group recorded in the log.

    Absorbed bodies are deleted from the list (in place); survivors stay where
    they were. Returns one MergeEvent per group with more than one member.
    """
    if not log:
        return []

    events: List[MergeEvent] = []
    absorbed_indices: List[int] = []
    for group in find_groups(log):
        if len(group) < 2:
            continue
        absorbed = [bodies[idx] for idx in group[1:]]
        survivor = merge_group(bodies, group)
        absorbed_indices.extend(group[1:])
        event = MergeEvent(survivor, absorbed)
        logger.debug("%s at (%.3f, %.3f)", event.describe(), *survivor.position)
        events.append(event)

    for idx in sorted(absorbed_indices, reverse=True):
        del bodies[idx]

    return events
