"""
Spatial Placement Assigner: initial canvas positions for new nodes.
"""

import math

import numpy as np

from neurosync.models.node import Position

DEFAULT_RADIUS = 300.0


def place(
    center: Position,
    max_radius: float = DEFAULT_RADIUS,
    rng: np.random.Generator | None = None,
) -> Position:
    """
    Sample a point uniformly over the area of a disk.

    The radial fraction is square-rooted so density is uniform per unit
    area rather than per unit radius.

    Args:
        center: Disk center
        max_radius: Disk radius
        rng: Optional numpy Generator (for reproducible placement)

    Returns:
        Position inside the disk

    Raises:
        ValueError: If max_radius is negative
    """
    if max_radius < 0:
        raise ValueError("max_radius must be non-negative")
    rng = rng or np.random.default_rng()

    theta = rng.uniform(0.0, 2 * math.pi)
    r = math.sqrt(rng.uniform(0.0, 1.0)) * max_radius
    return Position(x=center.x + r * math.cos(theta), y=center.y + r * math.sin(theta))


def distance(a: Position, b: Position) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


class PlacementAssigner:
    """Places new nodes around a movable anchor (typically the viewport center)."""

    def __init__(
        self,
        anchor: Position | None = None,
        max_radius: float = DEFAULT_RADIUS,
        rng: np.random.Generator | None = None,
    ):
        self.anchor = anchor or Position()
        self.max_radius = max_radius
        self.rng = rng or np.random.default_rng()

    def next_position(self) -> Position:
        return place(self.anchor, self.max_radius, self.rng)
