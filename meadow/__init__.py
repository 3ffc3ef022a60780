"""Procedural outdoor scene: ground, clouds, trees and a decorated tree.

The world is populated from parametric generators driven by one random
source, kept as plain records, and rendered through MuJoCo. Clouds are the
only moving part: they drift along +x once per frame.

Usage:
    from meadow import Config, build_scene, populate

    world = populate(Config(), seed=42)    # records only, no MuJoCo
    scene = build_scene(Config(seed=42))   # compiled model, assets loaded
    scene.step()                           # one frame of cloud drift
"""

from meadow.config import Config
from meadow.populate import populate
from meadow.scene import Scene, build_scene
from meadow.world import Cloud, PlacedObject, Tree, World

__all__ = [
    "Config",
    "populate",
    "build_scene",
    "Scene",
    "World",
    "PlacedObject",
    "Cloud",
    "Tree",
]
