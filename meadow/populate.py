"""Procedural population of the meadow.

Each generator takes the world, a random source and its config section,
inserts placed objects through ``World.make_instance`` and returns typed
handles. ``populate`` runs them in scene order and returns the world.

Usage:
    world = populate(Config(), seed=42)
    world.clouds      # 15 Cloud records, drift speeds assigned
    world.trees       # 200 ordinary trees
    world.centerpiece # the decorated tree and its ornaments
"""

from __future__ import annotations

import math

import numpy as np

from meadow.config import (
    CloudConfig,
    Config,
    GroundConfig,
    OrnamentConfig,
    TreeConfig,
)
from meadow.drift import cloud_speed
from meadow.primitives import (
    BOX_GEOMETRY,
    CONE_GEOMETRY,
    CYLINDER_GEOMETRY,
    HEMISPHERE_GEOMETRY,
)
from meadow.sampling import (
    UniformSource,
    random_int,
    random_sign,
    sample_outside_radius,
    uniform,
)
from meadow.world import Cloud, DecoratedTree, PlacedObject, Tree, World

GROUND_TEXTURE = "ground"
LEAF_TEXTURE = "leaves"


def make_ground(world: World, cfg: GroundConfig) -> PlacedObject:
    """Flat textured box centered at the origin."""
    ground = world.make_instance(
        BOX_GEOMETRY, cfg.color, (0.0, 0.0, 0.0), texture=GROUND_TEXTURE
    )
    ground.scale = np.array(cfg.scale, dtype=np.float64)
    world.ground = ground
    return ground


def make_cloud(world: World, rng: UniformSource, cfg: CloudConfig) -> Cloud:
    """One cloud cluster of 2 * bump_count lobes.

    Bumps line up along +x from a random cluster origin, all at one height.
    Each bump gets its own random scale; the base under it copies the bump's
    x/z scale and is flattened and flipped (scale.y = base_scale_y) so the
    cloud has a flat bottom.
    """
    height = random_int(rng, *cfg.height_range)
    bump_count = random_int(rng, *cfg.bump_range)
    x0 = random_int(rng, -cfg.spread, cfg.spread)
    z0 = random_int(rng, -cfg.spread, cfg.spread)

    cloud = Cloud()
    for i in range(bump_count):
        pos = (x0 + cfg.bump_spacing * i, height, z0)

        bump = world.make_instance(HEMISPHERE_GEOMETRY, cfg.color, pos)
        sx = random_int(rng, *cfg.scale_x_deciles) / 10
        sz = random_int(rng, *cfg.scale_z_deciles) / 10
        sy = random_int(rng, *cfg.scale_y_deciles) / 10
        bump.scale = np.array([sx, sy, sz])

        base = world.make_instance(HEMISPHERE_GEOMETRY, cfg.color, pos)
        base.scale = np.array([bump.scale[0], cfg.base_scale_y, bump.scale[2]])

        cloud.lobes.append(bump)
        cloud.lobes.append(base)
    return cloud


def make_tree(world: World, rng: UniformSource, cfg: TreeConfig) -> Tree:
    """Trunk + leaves, kept outside the exclusion disk around the origin."""
    trunk = world.make_instance(CYLINDER_GEOMETRY, cfg.trunk_color, (0.0, 0.0, 0.0))
    trunk.scale = np.array(cfg.trunk_scale, dtype=np.float64)

    x, z = sample_outside_radius(
        rng, cfg.spawn_range, cfg.resample_range, cfg.exclusion_radius
    )
    trunk.pos = np.array([x, cfg.trunk_height, z], dtype=np.float64)

    leaves = world.make_instance(
        CONE_GEOMETRY,
        cfg.leaf_color,
        (trunk.x, trunk.y + cfg.leaf_offset, trunk.z),
        texture=LEAF_TEXTURE,
    )
    leaves.scale = np.array(cfg.leaf_scale, dtype=np.float64)
    return Tree(trunk=trunk, leaves=leaves)


# ---------------------------------------------------------------------------
# Ornaments
# ---------------------------------------------------------------------------


def cross_section_diameter(y: float) -> float:
    """Horizontal extent of the decorated tree at height y (shrinks upward)."""
    return 0.2 * (3 - y / 2)


def surface_depth(x: float, diameter: float, step: float = 0.01) -> float:
    """Smallest z >= 0, in steps, with hypot(x, z) >= pi * diameter.

    Walks z outward from 0 so ornaments land on or just outside the cone
    surface rather than inside it.
    """
    radius = math.pi * diameter
    z = 0.0
    while math.sqrt(x * x + z * z) < radius:
        z += step
    return z


def ornament_offset(rng: UniformSource, cfg: OrnamentConfig) -> tuple[float, float, float]:
    """Ornament position relative to the decorated tree, before lift."""
    y = uniform(rng, 0.0, cfg.y_scale)
    diameter = cross_section_diameter(y)
    x = cfg.spread * diameter * uniform(rng, -1.0, 1.0)
    z = surface_depth(x, diameter, cfg.depth_step) * random_sign(rng)
    return x, y, z


def decorate_tree(
    world: World,
    rng: UniformSource,
    tree: Tree,
    cfg: OrnamentConfig,
) -> list[PlacedObject]:
    """Scatter ornaments over a tree's cone silhouette."""
    ornaments: list[PlacedObject] = []
    for _ in range(cfg.count):
        x, y, z = ornament_offset(rng, cfg)
        color = cfg.palette[random_int(rng, 0, len(cfg.palette) - 1)]
        ornament = world.make_instance(HEMISPHERE_GEOMETRY, color, (x, y, z))
        ornament.scale = np.full(3, cfg.scale)
        ornament.pos += (tree.leaves.x, cfg.lift, tree.leaves.z)
        ornaments.append(ornament)
    return ornaments


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def populate(
    config: Config | None = None,
    rng: UniformSource | None = None,
    seed: int | None = None,
) -> World:
    """Build the full scene: ground, clouds, trees, decorated tree.

    Args:
        config: Scene configuration (defaults to Config()).
        rng: Random source. Overridden by seed if both are given.
        seed: Integer seed for a reproducible scene.
    """
    if config is None:
        config = Config()
    if seed is not None:
        rng = np.random.default_rng(seed)
    elif rng is None:
        rng = np.random.default_rng()

    world = World()
    make_ground(world, config.ground)

    for ndx in range(config.clouds.count):
        cloud = make_cloud(world, rng, config.clouds)
        cloud.speed = cloud_speed(ndx, config.clouds)
        world.clouds.append(cloud)

    for _ in range(config.trees.count):
        world.trees.append(make_tree(world, rng, config.trees))

    centerpiece = make_tree(world, rng, config.trees)
    ornaments = decorate_tree(world, rng, centerpiece, config.ornaments)
    world.centerpiece = DecoratedTree(tree=centerpiece, ornaments=ornaments)

    return world
