"""Cone and hemisphere meshes for MuJoCo scenes.

MuJoCo has no built-in cone or half-sphere geom type. This module generates
vertex, face and texture-coordinate data for both shapes; the composer
bakes each object's scale into a copy and registers it as a mesh asset.

Convention (Y-up, matching the world frame):
    - Cone: base ring at y = -h/2, apex at y = +h/2, closed base
    - Hemisphere: pole at y = +r, flat closed base at y = 0
    - Faces wind counter-clockwise seen from outside
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from meadow.primitives import Geometry, Shape, y_up_to_z_up

# Polygon count: 24 sides keeps the big leaf cones round from the default
# camera while the data stays small.
N_SIDES = 24
# Latitude rings between the hemisphere pole and its rim
N_RINGS = 8

_ANGLES = np.linspace(0, 2 * np.pi, N_SIDES, endpoint=False)
_COS = np.cos(_ANGLES)
_SIN = np.sin(_ANGLES)
_U = np.arange(N_SIDES) / N_SIDES


def _ring(radius: float, y: float) -> np.ndarray:
    ring = np.empty((N_SIDES, 3), dtype=np.float64)
    ring[:, 0] = _COS * radius
    ring[:, 1] = y
    ring[:, 2] = _SIN * radius
    return ring


def cone(radius: float, height: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Closed cone centered on the origin.

    Returns:
        (verts (N, 3), faces (M, 3), texcoords (N, 2)).
    """
    half_h = height / 2
    apex = N_SIDES
    center = N_SIDES + 1

    verts = np.vstack([_ring(radius, -half_h), [0, half_h, 0], [0, -half_h, 0]])

    faces: list[list[int]] = []
    for i in range(N_SIDES):
        j = (i + 1) % N_SIDES
        faces.append([i, apex, j])  # side
        faces.append([center, i, j])  # base cap

    texcoords = np.vstack([np.column_stack([_U, np.zeros(N_SIDES)]), [0.5, 1], [0.5, 0]])
    return verts, np.array(faces, dtype=np.int32), texcoords


def hemisphere(radius: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Upper half sphere with a flat base disc at y = 0.

    Returns:
        (verts (N, 3), faces (M, 3), texcoords (N, 2)).
    """
    polar = np.linspace(0, np.pi / 2, N_RINGS + 1)[1:]  # ring 0 is just below the pole
    rings = [_ring(radius * np.sin(phi), radius * np.cos(phi)) for phi in polar]
    pole = N_SIDES * N_RINGS
    center = pole + 1

    verts = np.vstack(rings + [[[0, radius, 0]], [[0, 0, 0]]])

    def idx(ring: int, side: int) -> int:
        return ring * N_SIDES + side % N_SIDES

    faces: list[list[int]] = []
    for i in range(N_SIDES):
        faces.append([pole, idx(0, i + 1), idx(0, i)])
    for k in range(N_RINGS - 1):
        for i in range(N_SIDES):
            lo_i, lo_j = idx(k + 1, i), idx(k + 1, i + 1)
            up_i, up_j = idx(k, i), idx(k, i + 1)
            faces.append([lo_i, up_i, up_j])
            faces.append([lo_i, up_j, lo_j])
    for i in range(N_SIDES):
        faces.append([center, idx(N_RINGS - 1, i), idx(N_RINGS - 1, i + 1)])

    v = 1 - polar / (np.pi / 2)
    texcoords = np.vstack(
        [np.column_stack([_U, np.full(N_SIDES, vk)]) for vk in v] + [[[0.5, 1]], [[0.5, 0]]]
    )
    return verts, np.array(faces, dtype=np.int32), texcoords


_GENERATORS = {
    Shape.CONE: lambda size: cone(size[0], size[1]),
    Shape.HEMISPHERE: lambda size: hemisphere(size[0]),
}

MESH_SHAPES = frozenset(_GENERATORS)


@lru_cache(maxsize=1024)
def scaled_mesh(
    geometry: Geometry, scale: tuple[float, float, float]
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Mesh for a geometry with its scale baked in, converted to Z-up.

    A scale with a negative determinant mirrors the shape, so the face
    winding is reversed to keep normals pointing outward.

    Returns:
        (verts (N, 3) Z-up, faces (M, 3), texcoords (N, 2)).
    """
    if geometry.shape not in _GENERATORS:
        raise ValueError(f"No mesh generator for {geometry.shape}")
    verts, faces, texcoords = _GENERATORS[geometry.shape](geometry.size)

    verts = y_up_to_z_up(verts * np.asarray(scale, dtype=np.float64))
    if np.prod(scale) < 0:
        faces = faces[:, ::-1]
    return verts, np.ascontiguousarray(faces), texcoords
