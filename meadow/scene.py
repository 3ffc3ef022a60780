"""Scene session: populate, load assets, compile, and step frames.

Usage:
    scene = build_scene(Config(seed=7))
    scene.step()        # one frame of cloud drift, written into MjData
    scene.model         # compiled mujoco.MjModel
    scene.world         # populated World records
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import mujoco

from meadow.assets import AssetLoader, LoadedAssets
from meadow.composer import SceneComposer
from meadow.config import Config
from meadow.drift import drift_clouds
from meadow.populate import populate
from meadow.sampling import UniformSource
from meadow.stage import prepare_stage
from meadow.world import World

log = logging.getLogger(__name__)


@dataclass
class Scene:
    world: World
    model: mujoco.MjModel
    data: mujoco.MjData
    composer: SceneComposer
    config: Config
    assets: LoadedAssets
    frame: int = 0

    def step(self) -> None:
        """Advance the animation by one frame."""
        drift_clouds(self.world.clouds, self.config.clouds.wrap_limit)
        self.composer.apply()
        self.frame += 1


def build_spec(world: World, assets: LoadedAssets, config: Config) -> mujoco.MjSpec:
    """MjSpec holding the stage (lights, sky, camera) and every placed object."""
    spec = mujoco.MjSpec()
    spec.modelname = "meadow"
    prepare_stage(spec, config, assets)
    SceneComposer.prepare_spec(spec, world, assets, config)
    return spec


def build_scene(config: Config | None = None, rng: UniformSource | None = None) -> Scene:
    """Build a ready-to-render scene.

    Asset loads start first and run while the world is populated; the
    MuJoCo build waits for them. config.seed, when set, takes precedence
    over rng.
    """
    if config is None:
        config = Config()

    loader = AssetLoader(config.assets).start()
    world = populate(config, rng=rng, seed=config.seed)
    assets = loader.collect()

    spec = build_spec(world, assets, config)
    model = spec.compile()
    data = mujoco.MjData(model)

    composer = SceneComposer(model, data, world)
    composer.apply()
    log.info(
        "Scene built: %d objects, %d geoms, %d meshes, %d animated",
        len(world.objects),
        model.ngeom,
        model.nmesh,
        composer.num_animated,
    )
    return Scene(
        world=world,
        model=model,
        data=data,
        composer=composer,
        config=config,
        assets=assets,
    )
