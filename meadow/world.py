"""Scene records: placed objects, clouds, trees and the world that owns them.

The world is a flat, append-only list of placed objects plus typed views
(clouds, trees, the decorated centerpiece) that reference the same records.
Nothing is ever removed during a session.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from meadow.primitives import Geometry


def _vec3(values) -> np.ndarray:
    return np.array(values, dtype=np.float64).reshape(3)


@dataclass
class PlacedObject:
    """One renderable node: geometry + color + transform.

    Attributes:
        name: Unique name inside the world (becomes the MuJoCo geom name)
        geometry: Shape and unscaled size
        rgba: Color and opacity, values in [0, 1]
        pos: Position (x, y, z), Y-up
        scale: Per-axis scale (sx, sy, sz); negative values mirror the shape
        texture: Texture role ("ground", "leaves") or None for flat color
    """

    name: str
    geometry: Geometry
    rgba: tuple[float, float, float, float]
    pos: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    texture: str | None = None

    @property
    def x(self) -> float:
        return float(self.pos[0])

    @property
    def y(self) -> float:
        return float(self.pos[1])

    @property
    def z(self) -> float:
        return float(self.pos[2])


@dataclass
class Cloud:
    """A cloud cluster: bump, base, bump, base, ... and its drift speed."""

    lobes: list[PlacedObject] = field(default_factory=list)
    speed: float = 0.0

    @property
    def bump_count(self) -> int:
        return len(self.lobes) // 2

    @property
    def bumps(self) -> list[PlacedObject]:
        return self.lobes[0::2]

    @property
    def bases(self) -> list[PlacedObject]:
        return self.lobes[1::2]


@dataclass
class Tree:
    trunk: PlacedObject
    leaves: PlacedObject


@dataclass
class DecoratedTree:
    tree: Tree
    ornaments: list[PlacedObject] = field(default_factory=list)


@dataclass
class World:
    """Everything placed in the scene.

    ``objects`` owns every record in insertion order; the other fields are
    non-owning views used for animation and descriptions.
    """

    objects: list[PlacedObject] = field(default_factory=list)
    clouds: list[Cloud] = field(default_factory=list)
    trees: list[Tree] = field(default_factory=list)
    centerpiece: DecoratedTree | None = None
    ground: PlacedObject | None = None

    def make_instance(
        self,
        geometry: Geometry,
        rgba: tuple[float, float, float, float],
        pos,
        texture: str | None = None,
    ) -> PlacedObject:
        """Create a placed object, insert it into the scene and return it."""
        obj = PlacedObject(
            name=f"{geometry.shape.value}_{len(self.objects)}",
            geometry=geometry,
            rgba=rgba,
            texture=texture,
        )
        self.objects.append(obj)
        obj.pos = _vec3(pos)
        return obj

    @property
    def cloud_lobes(self) -> list[PlacedObject]:
        return [lobe for cloud in self.clouds for lobe in cloud.lobes]
