"""Primitive geometry types, colors and frame conversions for the meadow.

Placed objects are described in a Y-up world frame (x right, y up, z toward
the default camera). The MuJoCo boundary converts to Z-up at build time.

Size convention (full extents, not MuJoCo half sizes):
    - BOX:        (width, height, depth)
    - CYLINDER:   (radius, height, 0)       -- aligned along Y
    - CONE:       (radius, height, 0)       -- apex toward +Y, centered
    - HEMISPHERE: (radius, 0, 0)            -- upper half sphere, flat side at y=0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class Shape(Enum):
    """Shapes the scene is built from."""

    BOX = "box"
    CYLINDER = "cylinder"
    CONE = "cone"
    HEMISPHERE = "hemisphere"


@dataclass(frozen=True)
class Geometry:
    """A shape plus its unscaled size (see module doc for the size layout)."""

    shape: Shape
    size: tuple[float, float, float]


BOX_GEOMETRY = Geometry(Shape.BOX, (2.0, 2.0, 2.0))
CONE_GEOMETRY = Geometry(Shape.CONE, (2.0, 3.0, 0.0))
CYLINDER_GEOMETRY = Geometry(Shape.CYLINDER, (2.0, 2.0, 0.0))
HEMISPHERE_GEOMETRY = Geometry(Shape.HEMISPHERE, (3.0, 0.0, 0.0))


def hex_to_rgba(color: int, alpha: float = 1.0) -> tuple[float, float, float, float]:
    """0xRRGGBB to an (r, g, b, a) tuple with values in [0, 1]."""
    r = (color >> 16) & 0xFF
    g = (color >> 8) & 0xFF
    b = color & 0xFF
    return (r / 255.0, g / 255.0, b / 255.0, alpha)


# ---------------------------------------------------------------------------
# Scene palette
# ---------------------------------------------------------------------------

WHITE = hex_to_rgba(0xFFFFFF)
CLOUD_WHITE = hex_to_rgba(0xF6F6F6)
TRUNK_BROWN = hex_to_rgba(0x25150B)

ORNAMENT_RED = hex_to_rgba(0xFF0000)
ORNAMENT_BLUE = hex_to_rgba(0x0000FF)
ORNAMENT_CYAN = hex_to_rgba(0x00FFFF)
ORNAMENT_WHITE = hex_to_rgba(0xFFFFFF)

SKY_BLUE = hex_to_rgba(0x87CEEB)
GRASS_GREEN = hex_to_rgba(0x136D15)
SUNLIGHT = hex_to_rgba(0xFEFCE4)

# ---------------------------------------------------------------------------
# Frame conversion (Y-up world -> Z-up MuJoCo)
# ---------------------------------------------------------------------------


def y_up_to_z_up(v) -> np.ndarray:
    """Map Y-up coordinates to Z-up: (x, y, z) -> (x, -z, y).

    Accepts a single vector or an (N, 3) array. The map is a proper rotation,
    so it never flips handedness.
    """
    v = np.asarray(v, dtype=np.float64)
    return np.stack([v[..., 0], -v[..., 2], v[..., 1]], axis=-1)


def y_up_scale_to_z_up(scale) -> np.ndarray:
    """Reorder a Y-up scale triple for Z-up axes: (sx, sy, sz) -> (sx, sz, sy)."""
    sx, sy, sz = scale
    return np.array([sx, sz, sy], dtype=np.float64)


def euler_to_quat(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Euler angles (XYZ extrinsic) to quaternion (w, x, y, z)."""
    cr, sr = np.cos(roll / 2), np.sin(roll / 2)
    cp, sp = np.cos(pitch / 2), np.sin(pitch / 2)
    cy, sy = np.cos(yaw / 2), np.sin(yaw / 2)
    return np.array(
        [
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        ]
    )
